from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .logging_utils import DEFAULT_LOGS_DIR


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    return raw.get(name) or {}


@dataclass(frozen=True)
class BuildConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> Optional[str]:
        v = self.raw.get("name")
        return str(v) if v else None

    @property
    def locator(self) -> Optional[str]:
        v = self.raw.get("repo")
        return str(v) if v else None

    @property
    def version(self) -> Optional[str]:
        v = self.raw.get("version")
        return str(v) if v else None

    @property
    def append_git_hash(self) -> bool:
        return bool(self.raw.get("append_git_hash", False))

    @property
    def work_dir(self) -> str:
        return str(_section(self.raw, "paths").get("work_dir") or "build/work")

    @property
    def output_dir(self) -> str:
        return str(_section(self.raw, "paths").get("output_dir") or "output")

    @property
    def logs_dir(self) -> str:
        return str(_section(self.raw, "paths").get("logs_dir") or DEFAULT_LOGS_DIR)

    @property
    def init_dir(self) -> Optional[str]:
        v = _section(self.raw, "paths").get("init_dir")
        return str(v) if v else None

    @property
    def prefix(self) -> str:
        return str(_section(self.raw, "build").get("prefix") or "/usr")

    @property
    def configure_flags(self) -> List[str]:
        return [str(f) for f in (_section(self.raw, "build").get("configure_flags") or [])]

    @property
    def make(self) -> str:
        return str(_section(self.raw, "build").get("make") or "make")

    @property
    def runtime_archive_glob(self) -> Optional[str]:
        v = _section(self.raw, "artifacts").get("runtime_archive")
        return str(v) if v else None

    @property
    def runtime_archive_dest(self) -> Optional[str]:
        v = _section(self.raw, "artifacts").get("runtime_archive_dest")
        return str(v) if v else None

    @property
    def overlay_dir(self) -> Optional[str]:
        v = _section(self.raw, "stage").get("overlay_dir")
        return str(v) if v else None

    @property
    def service_enabled(self) -> bool:
        return bool(_section(self.raw, "service").get("enabled", True))

    @property
    def service_exec(self) -> Optional[str]:
        v = _section(self.raw, "service").get("exec")
        return str(v) if v else None

    @property
    def upload_base(self) -> Optional[str]:
        v = _section(self.raw, "upload").get("base_url")
        return str(v) if v else None

    @property
    def upload_timeout(self) -> float:
        return float(_section(self.raw, "upload").get("timeout") or 300)

    def packaging(self, fmt: str) -> Dict[str, Any]:
        """Per-format overrides (``packaging.deb`` / ``packaging.rpm``)."""
        return dict(_section(_section(self.raw, "packaging"), fmt))

    @property
    def package_meta(self) -> Dict[str, str]:
        meta = _section(self.raw, "packaging").get("meta") or {}
        return {str(k): str(v) for k, v in meta.items() if v is not None}

    @property
    def iteration(self) -> str:
        return str(_section(self.raw, "packaging").get("iteration") or "1")

    def with_overrides(self, overrides: Dict[str, Any]) -> "BuildConfig":
        """Return a copy with dotted keys (``upload.base_url``) replaced.

        None values are ignored so unset CLI flags keep the file's value.
        """
        raw = dict(self.raw)
        for key, value in overrides.items():
            if value is None:
                continue
            *parents, leaf = key.split(".")
            node = raw
            for part in parents:
                child = dict(node.get(part) or {})
                node[part] = child
                node = child
            node[leaf] = value
        return BuildConfig(raw=raw)


def load_build_config(path: Optional[str]) -> BuildConfig:
    if path is None:
        return BuildConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("build config must be YAML")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"{p.name}: invalid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"{p.name} must contain a mapping/object")

    return BuildConfig(raw=raw)
