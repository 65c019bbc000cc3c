from __future__ import annotations

import argparse
import logging
from typing import List, Optional, Sequence

from .build_config import BuildConfig, load_build_config
from .context import PipelineContext
from .errors import DistpackError
from .lib.command import CommandRunner, ShellRunner
from .lib.locator import require_no_fragment, resource_name, split_locator
from .lib.packaging import select_strategy
from .lib.platform_id import Probe, default_probes, detect_arch, identify_platform
from .logging_utils import DEFAULT_LOGS_DIR, configure_logging, log_path_for
from .pipeline import PipelineResult, Step, run_pipeline
from .steps import BuildStep, CheckoutStep, PackageStep, PublishArtifactsStep, StageStep

logger = logging.getLogger(__name__)


def build_steps() -> List[Step]:
    return [
        CheckoutStep(),
        BuildStep(),
        StageStep(),
        PackageStep(),
        PublishArtifactsStep(),
    ]


def build_context(
    cfg: BuildConfig,
    *,
    locator: str,
    runner: CommandRunner,
    probes: Optional[Sequence[Probe]] = None,
    arch: Optional[str] = None,
    dry_run: bool = False,
    probe_runner: Optional[CommandRunner] = None,
) -> PipelineContext:
    """Validate the locator, identify the host and freeze the run's context."""

    parts = require_no_fragment(split_locator(locator))
    host = probe_runner or runner
    tag = identify_platform(probes if probes is not None else default_probes(host))
    strategy = select_strategy(tag, cfg)

    return PipelineContext(
        cfg=cfg,
        name=cfg.name or resource_name(parts.resource),
        resource=parts.resource,
        ref=parts.ref,
        platform=tag,
        arch=arch or detect_arch(strategy.fmt),
        strategy=strategy,
        runner=runner,
        nominal_version=cfg.version,
        append_git_hash=cfg.append_git_hash,
        dry_run=dry_run,
        probe_runner=host,
    )


def run(
    cfg: BuildConfig,
    *,
    locator: str,
    runner: Optional[CommandRunner] = None,
    probes: Optional[Sequence[Probe]] = None,
    stop_after: Optional[str] = None,
    dry_run: bool = False,
) -> PipelineResult:
    probe_runner = ShellRunner() if runner is None else runner
    runner = runner or ShellRunner(dry_run=dry_run)
    ctx = build_context(
        cfg, locator=locator, runner=runner, probes=probes, dry_run=dry_run, probe_runner=probe_runner
    )
    logger.info(
        "Building %s from %s (ref=%s) for %s/%s as %s",
        ctx.name,
        ctx.resource,
        ctx.ref or "default",
        ctx.platform,
        ctx.arch,
        ctx.strategy.fmt,
    )
    return run_pipeline(ctx=ctx, steps=build_steps(), stop_after=stop_after)


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="distpack")
    p.add_argument("locator", nargs="?", default=None, help="Repository URL, optionally with ?ref=<branch|tag|commit>")
    p.add_argument("--config", default=None, help="Path to build config (yaml)")
    p.add_argument("--name", default=None, help="Package name (default: repository name)")
    p.add_argument("--version", default=None, help="Nominal package version (default: latest git tag)")
    p.add_argument("--append-git-hash", dest="append_git_hash", action="store_true", default=None)
    p.add_argument("--no-append-git-hash", dest="append_git_hash", action="store_false")
    p.add_argument("--upload-base", default=None, help="Base URL to PUT the package under")
    p.add_argument("--work-dir", default=None)
    p.add_argument("--output-dir", default=None)
    p.add_argument("--log", default=None, help="Path to build log (default: <paths.logs_dir>/distpack.log)")
    p.add_argument("-v", "--verbose", action="store_true", help="Show DEBUG output (every command) on the console")
    p.add_argument("--stop-after", default=None, help="Stop after step_id (e.g. 30_stage)")
    p.add_argument("--dry-run", action="store_true")
    p.add_argument("--print-platform", action="store_true", help="Print the host platform tag and exit")

    args = p.parse_args(argv)

    try:
        cfg = load_build_config(args.config).with_overrides(
            {
                "name": args.name,
                "version": args.version,
                "append_git_hash": args.append_git_hash,
                "upload.base_url": args.upload_base,
                "paths.work_dir": args.work_dir,
                "paths.output_dir": args.output_dir,
            }
        )
    except (OSError, ValueError) as e:
        configure_logging(args.log or log_path_for(DEFAULT_LOGS_DIR), verbose=args.verbose)
        logger.error("Cannot load build config: %s", e)
        return 1

    configure_logging(args.log or log_path_for(cfg.logs_dir), verbose=args.verbose)

    try:
        if args.print_platform:
            print(identify_platform(default_probes(ShellRunner())))
            return 0

        locator = args.locator or cfg.locator
        if not locator:
            p.error("a repository locator is required (argument or 'repo' in the config)")

        result = run(cfg, locator=locator, stop_after=args.stop_after, dry_run=bool(args.dry_run))
    except (DistpackError, OSError, ValueError) as e:
        logger.error("%s", e)
        return 1

    pkg = result.state.get("package_path")
    if pkg:
        logger.info("Done: %s", pkg)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
