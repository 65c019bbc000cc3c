from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import PipelineContext
from ..lib.git import checkout

logger = logging.getLogger(__name__)


class CheckoutStep:
    step_id = "10_checkout"

    def run(self, ctx: PipelineContext, state: Dict[str, Any]) -> Dict[str, Any]:
        checkout(ctx.runner, ctx.resource, ctx.checkout_dir, ctx.ref, dry_run=ctx.dry_run)
        logger.info("Checked out %s (%s) into %s", ctx.resource, ctx.ref or "default branch", ctx.checkout_dir)
        return state
