from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .context import PipelineContext

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single pipeline stage."""

    step_id: str

    def run(self, ctx: PipelineContext, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]


def run_pipeline(
    *,
    ctx: PipelineContext,
    steps: Sequence[Step],
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Run steps strictly in order; the first exception ends the run."""

    if stop_after is not None and stop_after not in {s.step_id for s in steps}:
        raise ValueError(f"Unknown step: {stop_after}")

    state: Dict[str, Any] = {}
    ran: List[str] = []

    for step in steps:
        logger.info("Running step %s", step.step_id)
        state = step.run(ctx, state)
        ran.append(step.step_id)

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    return PipelineResult(state=state, ran_steps=ran)
