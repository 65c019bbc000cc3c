from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import PipelineContext
from ..errors import DistpackError, StagingIncomplete
from ..lib.git import describe_version, package_version, short_hash
from ..lib.packaging import fpm_argv, package_filename, top_level_entries

logger = logging.getLogger(__name__)


def resolve_version(ctx: PipelineContext) -> str:
    nominal = ctx.nominal_version or describe_version(ctx.runner, ctx.checkout_dir)
    if not nominal:
        raise DistpackError("No version given and none could be derived from git tags; pass --version")
    commit = short_hash(ctx.runner, ctx.checkout_dir) if ctx.append_git_hash else None
    return package_version(nominal, commit, ctx.append_git_hash)


class PackageStep:
    step_id = "40_package"

    def run(self, ctx: PipelineContext, state: Dict[str, Any]) -> Dict[str, Any]:
        toor = ctx.toor_dir
        if not ctx.dry_run and not top_level_entries(toor):
            raise StagingIncomplete(f"Staging tree {toor} is missing or empty; run the stage step first")

        version = resolve_version(ctx)
        out_path = ctx.output_dir / package_filename(ctx.name, version, ctx.arch, ctx.strategy.extension)
        if not ctx.dry_run:
            ctx.output_dir.mkdir(parents=True, exist_ok=True)

        ctx.runner.run(
            fpm_argv(
                ctx.strategy,
                name=ctx.name,
                version=version,
                iteration=ctx.cfg.iteration,
                arch=ctx.arch,
                toor=toor.resolve(),
                out_path=out_path.resolve(),
                meta=ctx.cfg.package_meta,
            )
        )

        logger.info("Package written: %s", out_path)
        state["version"] = version
        state["package_path"] = str(out_path)
        return state
