from __future__ import annotations

from typing import Sequence


class DistpackError(RuntimeError):
    """Base class for every failure that should end a run."""


class UnknownPlatform(DistpackError):
    pass


class MalformedReleaseFile(DistpackError):
    pass


class LocatorFragmentRejected(DistpackError):
    pass


class UnsupportedPlatformForPackaging(DistpackError):
    pass


class StagingIncomplete(DistpackError):
    pass


class UploadFailed(DistpackError):
    pass


class ExternalToolFailure(DistpackError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "", message: str | None = None):
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message or f"Command failed ({returncode}): {' '.join(self.argv)}")
