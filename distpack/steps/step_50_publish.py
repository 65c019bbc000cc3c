from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..context import PipelineContext
from ..lib.upload import upload_package, upload_url

logger = logging.getLogger(__name__)


class PublishArtifactsStep:
    step_id = "50_publish"

    def run(self, ctx: PipelineContext, state: Dict[str, Any]) -> Dict[str, Any]:
        base = ctx.cfg.upload_base
        if not base:
            logger.info("No upload base URL configured; leaving %s in place", state.get("package_path"))
            return state

        package = Path(state["package_path"])
        if ctx.dry_run:
            state["upload_url"] = upload_url(base, ctx.platform, package.name)
            logger.info("Would upload %s -> %s", package, state["upload_url"])
            return state

        url = upload_package(package, base=base, tag=ctx.platform, timeout=ctx.cfg.upload_timeout)
        print(url)
        state["upload_url"] = url
        return state
