from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional, Protocol, Sequence

from ..errors import ExternalToolFailure

logger = logging.getLogger(__name__)

# Shell convention for "command not found".
NOT_FOUND_RC = 127


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - Captures stdout/stderr.
    - A missing executable is reported as exit status 127.
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    logger.info("CMD %s%s", _fmt_argv(argv_list), f" (in {cwd})" if cwd else "")

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    try:
        p = subprocess.run(
            argv_list,
            input=input_text,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
        )
    except FileNotFoundError:
        if check:
            raise ExternalToolFailure(
                argv_list, NOT_FOUND_RC, message=f"Command not found: {argv_list[0]}"
            ) from None
        return CmdResult(argv=argv_list, returncode=NOT_FOUND_RC, stdout="", stderr="")

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    if check and p.returncode != 0:
        raise ExternalToolFailure(
            argv_list,
            p.returncode,
            p.stderr,
            message=f"Command failed ({p.returncode}): {_fmt_argv(argv_list)}\n{p.stderr}",
        )

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)


class CommandRunner(Protocol):
    """Anything that can run an external tool and report its outcome."""

    def run(self, argv: Sequence[str], *, cwd: Optional[str] = None, check: bool = True) -> CmdResult:
        ...


@dataclass(frozen=True)
class ShellRunner:
    dry_run: bool = False

    def run(self, argv: Sequence[str], *, cwd: Optional[str] = None, check: bool = True) -> CmdResult:
        return run_cmd(argv, cwd=cwd, check=check, dry_run=self.dry_run)


def which(name: str) -> Optional[str]:
    return shutil.which(name)
