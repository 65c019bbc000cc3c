from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

from ..context import PipelineContext
from ..errors import StagingIncomplete
from ..lib.assets import copy_tree
from ..lib.init_scripts import install_init_script
from ..lib.packaging import init_flavor

logger = logging.getLogger(__name__)


def _copy_runtime_archive(ctx: PipelineContext) -> Optional[Path]:
    pattern = ctx.cfg.runtime_archive_glob
    if not pattern:
        return None

    matches = sorted(ctx.build_dir.glob(pattern))
    if not matches:
        if ctx.dry_run:
            logger.info("Would copy runtime archive %s", pattern)
            return None
        raise StagingIncomplete(f"Runtime archive not found: {ctx.build_dir / pattern}")

    src = matches[-1]
    dst = ctx.output_dir / (ctx.cfg.runtime_archive_dest or src.name)
    if ctx.dry_run:
        logger.info("Would copy %s -> %s", src, dst)
        return dst
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dst)
    logger.info("Runtime archive %s -> %s", src, dst)
    return dst


class StageStep:
    step_id = "30_stage"

    def run(self, ctx: PipelineContext, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.cfg
        toor = ctx.toor_dir

        if not ctx.dry_run:
            if toor.exists():
                shutil.rmtree(toor)
            toor.mkdir(parents=True)

        ctx.runner.run(
            [cfg.make, "install", f"DESTDIR={toor.resolve()}"],
            cwd=str(ctx.build_dir),
        )

        archive = _copy_runtime_archive(ctx)
        if archive is not None:
            state["runtime_archive"] = str(archive)

        flavor = init_flavor(ctx.platform)
        if flavor and cfg.service_enabled:
            script = install_init_script(
                flavor=flavor,
                toor=toor,
                name=ctx.name,
                prefix=cfg.prefix,
                exec_path=cfg.service_exec,
                init_dir=Path(cfg.init_dir) if cfg.init_dir else None,
                dry_run=ctx.dry_run,
            )
            if script is not None:
                state["init_script"] = str(script)
        elif not flavor:
            logger.info("No init flavor for %s; skipping init script", ctx.platform)

        if cfg.overlay_dir:
            copy_tree(cfg.overlay_dir, str(toor), dry_run=ctx.dry_run)

        return state
