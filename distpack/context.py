from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .build_config import BuildConfig
from .lib.command import CommandRunner
from .lib.packaging import PackagingStrategy
from .lib.platform_id import PlatformTag


@dataclass(frozen=True)
class PipelineContext:
    """Everything a run needs, fixed once the platform is known."""

    cfg: BuildConfig
    name: str
    resource: str
    ref: str
    platform: PlatformTag
    arch: str
    strategy: PackagingStrategy
    runner: CommandRunner
    nominal_version: Optional[str] = None
    append_git_hash: bool = False
    dry_run: bool = False
    # Read-only host queries (core count, sw_vers); never a dry runner.
    probe_runner: Optional[CommandRunner] = None

    @property
    def host_runner(self) -> CommandRunner:
        return self.probe_runner or self.runner

    @property
    def work_dir(self) -> Path:
        return Path(self.cfg.work_dir)

    @property
    def checkout_dir(self) -> Path:
        return self.work_dir / "src" / self.name

    @property
    def build_dir(self) -> Path:
        return self.checkout_dir / "build"

    @property
    def toor_dir(self) -> Path:
        return self.work_dir / "toor"

    @property
    def output_dir(self) -> Path:
        return Path(self.cfg.output_dir)
