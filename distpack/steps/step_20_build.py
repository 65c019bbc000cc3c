from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import PipelineContext
from ..lib.cores import build_jobs, detect_cores

logger = logging.getLogger(__name__)


class BuildStep:
    step_id = "20_build"

    def run(self, ctx: PipelineContext, state: Dict[str, Any]) -> Dict[str, Any]:
        src = ctx.checkout_dir
        cfg = ctx.cfg

        # Autotools checkouts ship bootstrap/autogen; release tarballs ship configure.
        if not (src / "configure").exists() and (src / "bootstrap").exists():
            ctx.runner.run(["./bootstrap"], cwd=str(src))

        if not ctx.dry_run:
            ctx.build_dir.mkdir(parents=True, exist_ok=True)

        ctx.runner.run(
            ["../configure", f"--prefix={cfg.prefix}", *cfg.configure_flags],
            cwd=str(ctx.build_dir),
        )

        jobs = build_jobs(detect_cores(ctx.host_runner))
        ctx.runner.run([cfg.make, f"-j{jobs}"], cwd=str(ctx.build_dir))

        state["jobs"] = jobs
        return state
