from __future__ import annotations

import logging
from typing import Optional, Sequence

from .command import CommandRunner

logger = logging.getLogger(__name__)

_CORE_COMMANDS = (
    ["nproc"],
    ["sysctl", "-n", "hw.ncpu"],
)


def _try_count(runner: CommandRunner, argv: Sequence[str]) -> Optional[int]:
    r = runner.run(argv, check=False)
    if not r.ok:
        return None
    try:
        n = int(r.stdout.strip())
    except ValueError:
        return None
    return n if n > 0 else None


def detect_cores(runner: CommandRunner) -> int:
    """Number of CPU cores, or 1 when no detection method works."""

    for argv in _CORE_COMMANDS:
        n = _try_count(runner, argv)
        if n is not None:
            logger.info("Detected %d cores via %s", n, argv[0])
            return n
    logger.warning("Unable to detect core count (nproc, sysctl); assuming 1")
    return 1


def build_jobs(cores: int) -> int:
    return 2 * cores
