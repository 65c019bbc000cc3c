from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from ..build_config import BuildConfig
from ..errors import UnsupportedPlatformForPackaging
from .platform_id import PlatformTag

logger = logging.getLogger(__name__)

DEB_FAMILIES = {"ubuntu", "debian"}
RPM_FAMILIES = {"centos", "redhat"}

_DEFAULTS: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "deb": {
        "depends": ("libcurl3", "libsvn1", "libsasl2-modules"),
        "recommends": ("java-runtime-headless",),
        "flags": (),
    },
    "rpm": {
        "depends": ("libcurl", "subversion", "cyrus-sasl-md5"),
        "recommends": (),
        "flags": ("--rpm-os", "linux"),
    },
}

# fpm flag for each package metadata key
_META_FLAGS = {
    "description": "--description",
    "url": "--url",
    "license": "--license",
    "maintainer": "--maintainer",
    "vendor": "--vendor",
    "category": "--category",
}


@dataclass(frozen=True)
class PackagingStrategy:
    fmt: str
    depends: Tuple[str, ...] = ()
    recommends: Tuple[str, ...] = ()
    flags: Tuple[str, ...] = ()

    @property
    def extension(self) -> str:
        return self.fmt


def select_strategy(tag: PlatformTag, cfg: Optional[BuildConfig] = None) -> PackagingStrategy:
    if tag.family in DEB_FAMILIES:
        fmt = "deb"
    elif tag.family in RPM_FAMILIES:
        fmt = "rpm"
    else:
        raise UnsupportedPlatformForPackaging(f"No packaging strategy for platform {tag}")

    defaults = _DEFAULTS[fmt]
    overrides = cfg.packaging(fmt) if cfg is not None else {}

    def pick(key: str) -> Tuple[str, ...]:
        if key in overrides and overrides[key] is not None:
            return tuple(str(x) for x in overrides[key])
        return defaults[key]

    strategy = PackagingStrategy(
        fmt=fmt,
        depends=pick("depends"),
        recommends=pick("recommends") if fmt == "deb" else (),
        flags=pick("flags"),
    )
    logger.info("Packaging strategy for %s: %s", tag, fmt)
    return strategy


def init_flavor(tag: PlatformTag) -> Optional[str]:
    """Init system whose script should ship for this platform, if any."""

    major = tag.major
    if major is None:
        return None
    if tag.family == "ubuntu":
        return "upstart" if major < 15 else "systemd"
    if tag.family == "debian":
        return "sysvinit" if major < 8 else "systemd"
    if tag.family in RPM_FAMILIES:
        return "upstart" if major < 7 else "systemd"
    return None


def package_filename(name: str, version: str, arch: str, extension: str) -> str:
    return f"{name}_{version}_{arch}.{extension}"


def fpm_argv(
    strategy: PackagingStrategy,
    *,
    name: str,
    version: str,
    iteration: str,
    arch: str,
    toor: Path,
    out_path: Path,
    meta: Dict[str, str] | None = None,
) -> List[str]:
    argv: List[str] = [
        "fpm",
        "--force",
        "-s", "dir",
        "-t", strategy.fmt,
        "-n", name,
        "-v", version,
        "--iteration", iteration,
        "--architecture", arch,
        "-p", str(out_path),
        "-C", str(toor),
    ]
    for key, value in sorted((meta or {}).items()):
        flag = _META_FLAGS.get(key)
        if flag:
            argv += [flag, value]
        else:
            logger.warning("Ignoring unknown package metadata key %r", key)
    for dep in strategy.depends:
        argv += ["-d", dep]
    for rec in strategy.recommends:
        argv += ["--deb-recommends", rec]
    argv += list(strategy.flags)
    argv.append(".")
    return argv


def top_level_entries(toor: Path) -> Sequence[str]:
    return sorted(p.name for p in toor.iterdir()) if toor.is_dir() else []
