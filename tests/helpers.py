"""Test doubles for the command runner and platform probes."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from distpack.errors import ExternalToolFailure
from distpack.lib.command import CmdResult

Response = Union[Tuple[int, str], Callable[[List[str], Optional[str]], Tuple[int, str]]]


class FakeRunner:
    """Records every command; answers from a table keyed by argv prefix."""

    def __init__(self, responses: Optional[Dict[Tuple[str, ...], Response]] = None):
        self.responses = dict(responses or {})
        self.calls: List[Tuple[List[str], Optional[str]]] = []

    def _lookup(self, argv: List[str], cwd: Optional[str]) -> Tuple[int, str]:
        best: Optional[Tuple[str, ...]] = None
        for key in self.responses:
            if tuple(argv[: len(key)]) == key and (best is None or len(key) > len(best)):
                best = key
        if best is None:
            return 0, ""
        resp = self.responses[best]
        return resp(argv, cwd) if callable(resp) else resp

    def run(self, argv: Sequence[str], *, cwd: Optional[str] = None, check: bool = True) -> CmdResult:
        argv_list = list(argv)
        self.calls.append((argv_list, cwd))
        rc, out = self._lookup(argv_list, cwd)
        if check and rc != 0:
            raise ExternalToolFailure(argv_list, rc)
        return CmdResult(argv=argv_list, returncode=rc, stdout=out, stderr="")

    def commands(self) -> List[List[str]]:
        return [argv for argv, _ in self.calls]

    def tools(self) -> List[str]:
        return [argv[0] for argv, _ in self.calls]


class FakeProbe:
    def __init__(self, name: str, result=None, error: Optional[Exception] = None):
        self.name = name
        self.result = result
        self.error = error
        self.called = False

    def detect(self):
        self.called = True
        if self.error is not None:
            raise self.error
        return self.result
