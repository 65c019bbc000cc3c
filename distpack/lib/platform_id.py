from __future__ import annotations

import logging
import platform
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Tuple

from ..errors import MalformedReleaseFile, UnknownPlatform
from .command import CommandRunner, which

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = "/etc/os-release"
LEGACY_RELEASE_PATH = "/etc/redhat-release"

# e.g. "CentOS release 6.3 (Final)"
_LEGACY_RELEASE_RE = re.compile(r"^(.+?) release (\S+) \((.*)\)$")

# Host-reported product names that map onto a family token.
_FAMILY_ALIASES = {"mac os x": "macosx"}

_MAJOR_ONLY = {"redhat", "centos", "debian", "ubuntu"}
# Drops only the last dotted component (10.15.7 -> 10.15, 10.9 -> 10).
_DROP_LAST = {"macosx"}


@dataclass(frozen=True)
class PlatformTag:
    family: str
    version: str

    def __str__(self) -> str:
        return f"{self.family}/{self.version}"

    @property
    def major(self) -> Optional[int]:
        head = self.version.split(".", 1)[0]
        return int(head) if head.isdigit() else None


def _truncate(family: str, version: str) -> str:
    if family in _MAJOR_ONLY:
        return version.split(".", 1)[0]
    if family in _DROP_LAST:
        return version.rsplit(".", 1)[0]
    return version


def normalize_platform(family: str, version: str) -> PlatformTag:
    fam = family.lower()
    fam = _FAMILY_ALIASES.get(fam, fam)
    return PlatformTag(family=fam, version=_truncate(fam, version.lower()))


def display_version(family: str, version: str) -> str:
    """Canonical ``family/version`` string for raw host-reported values."""

    return str(normalize_platform(family, version))


class Probe(Protocol):
    """One source of platform information.

    ``detect`` returns raw ``(family, version)``, None when the source is not
    available on this host, or raises when the source is present but unusable.
    """

    name: str

    def detect(self) -> Optional[Tuple[str, str]]:
        ...


def parse_os_release(text: str) -> Dict[str, str]:
    facts: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        k, v = line.split("=", 1)
        facts[k.strip()] = v.strip().strip('"').strip("'")
    return facts


def parse_legacy_release(text: str) -> Tuple[str, str]:
    line = text.strip().splitlines()[0] if text.strip() else ""
    m = _LEGACY_RELEASE_RE.match(line.strip())
    if not m:
        raise MalformedReleaseFile(f"Unrecognized release string: {line!r}")
    name, version = m.group(1), m.group(2)
    if name.startswith("Red Hat "):
        name = "RedHat"
    return name, version


class OsReleaseProbe:
    name = "os-release"

    def __init__(self, path: str = OS_RELEASE_PATH):
        self.path = Path(path)

    def detect(self) -> Optional[Tuple[str, str]]:
        if not self.path.is_file():
            return None
        facts = parse_os_release(self.path.read_text(encoding="utf-8", errors="ignore"))
        family = facts.get("ID")
        # Rolling distributions ship BUILD_ID instead of VERSION_ID.
        version = facts.get("VERSION_ID") or facts.get("BUILD_ID")
        if not family or not version:
            logger.info("%s lacks ID/VERSION_ID; trying next source", self.path)
            return None
        return family, version


class LegacyReleaseProbe:
    name = "redhat-release"

    def __init__(self, path: str = LEGACY_RELEASE_PATH):
        self.path = Path(path)

    def detect(self) -> Optional[Tuple[str, str]]:
        if not self.path.is_file():
            return None
        # Present but unparseable is fatal: the file itself marks a Red Hat family host.
        return parse_legacy_release(self.path.read_text(encoding="utf-8", errors="ignore"))


class MacVersionProbe:
    name = "sw_vers"

    def __init__(self, runner: CommandRunner, which: Callable[[str], Optional[str]] = which):
        self.runner = runner
        self.which = which

    def detect(self) -> Optional[Tuple[str, str]]:
        if not self.which("sw_vers"):
            return None
        product = self.runner.run(["sw_vers", "-productName"]).stdout.strip()
        version = self.runner.run(["sw_vers", "-productVersion"]).stdout.strip()
        if product != "Mac OS X":
            raise UnknownPlatform(f"sw_vers reported unsupported product name {product!r}")
        return "MacOSX", version


def default_probes(runner: CommandRunner) -> List[Probe]:
    return [OsReleaseProbe(), LegacyReleaseProbe(), MacVersionProbe(runner)]


def identify_platform(probes: Sequence[Probe]) -> PlatformTag:
    """Try each probe in order; the first one that answers decides."""

    for probe in probes:
        found = probe.detect()
        if found is None:
            logger.debug("Platform source %s not available", probe.name)
            continue
        tag = normalize_platform(*found)
        logger.info("Platform: %s (from %s)", tag, probe.name)
        return tag
    raise UnknownPlatform("Unable to identify host platform (no os-release, redhat-release or sw_vers)")


_DEB_ARCH = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "armhf",
    "armv6l": "armhf",
    "i686": "i386",
    "i386": "i386",
}

_RPM_ARCH = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "armv7l": "armv7hl",
    "i386": "i686",
    "i686": "i686",
}


def normalize_arch(machine: str, fmt: str) -> str:
    m = machine.lower()
    table = _DEB_ARCH if fmt == "deb" else _RPM_ARCH
    return table.get(m, m)


def detect_arch(fmt: str) -> str:
    return normalize_arch(platform.machine(), fmt)
