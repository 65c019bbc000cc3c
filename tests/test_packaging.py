from __future__ import annotations

from pathlib import Path

import pytest

from distpack.build_config import BuildConfig
from distpack.errors import UnsupportedPlatformForPackaging
from distpack.lib.packaging import (
    fpm_argv,
    init_flavor,
    package_filename,
    select_strategy,
)
from distpack.lib.platform_id import PlatformTag


@pytest.mark.parametrize("family", ["ubuntu", "debian"])
def test_debian_families_get_deb(family: str) -> None:
    s = select_strategy(PlatformTag(family, "20"))
    assert s.fmt == "deb"
    assert "libcurl3" in s.depends
    assert "java-runtime-headless" in s.recommends


@pytest.mark.parametrize("family", ["centos", "redhat"])
def test_redhat_families_get_rpm(family: str) -> None:
    s = select_strategy(PlatformTag(family, "7"))
    assert s.fmt == "rpm"
    assert s.recommends == ()


@pytest.mark.parametrize("family", ["macosx", "arch", "fedora"])
def test_other_families_are_unsupported(family: str) -> None:
    with pytest.raises(UnsupportedPlatformForPackaging):
        select_strategy(PlatformTag(family, "1"))


def test_config_overrides_dependencies() -> None:
    cfg = BuildConfig({"packaging": {"deb": {"depends": ["libfoo"], "recommends": []}}})
    s = select_strategy(PlatformTag("debian", "10"), cfg)
    assert s.depends == ("libfoo",)
    assert s.recommends == ()


@pytest.mark.parametrize(
    "tag, flavor",
    [
        (PlatformTag("ubuntu", "14"), "upstart"),
        (PlatformTag("ubuntu", "20"), "systemd"),
        (PlatformTag("debian", "7"), "sysvinit"),
        (PlatformTag("debian", "10"), "systemd"),
        (PlatformTag("centos", "6"), "upstart"),
        (PlatformTag("redhat", "7"), "systemd"),
        (PlatformTag("macosx", "10.15"), None),
        (PlatformTag("debian", "sid"), None),
    ],
)
def test_init_flavor(tag: PlatformTag, flavor: str) -> None:
    assert init_flavor(tag) == flavor


def test_package_filename() -> None:
    assert package_filename("mesos", "1.0-gabc", "amd64", "deb") == "mesos_1.0-gabc_amd64.deb"
    assert package_filename("mesos", "1.0", "x86_64", "rpm") == "mesos_1.0_x86_64.rpm"


def test_package_filename_uses_strategy_extension() -> None:
    s = select_strategy(PlatformTag("centos", "7"))
    assert s.extension == "rpm"
    assert package_filename("mesos", "1.0", "x86_64", s.extension) == "mesos_1.0_x86_64.rpm"


def test_fpm_argv_deb() -> None:
    s = select_strategy(PlatformTag("ubuntu", "20"))
    argv = fpm_argv(
        s,
        name="mesos",
        version="1.0",
        iteration="1",
        arch="amd64",
        toor=Path("/w/toor"),
        out_path=Path("/o/mesos_1.0_amd64.deb"),
        meta={"url": "https://mesos.apache.org/", "license": "Apache-2.0", "bogus": "x"},
    )
    assert argv[:2] == ["fpm", "--force"]
    assert argv[argv.index("-t") + 1] == "deb"
    assert argv[argv.index("-p") + 1] == "/o/mesos_1.0_amd64.deb"
    assert argv[argv.index("-C") + 1] == "/w/toor"
    assert argv[argv.index("--url") + 1] == "https://mesos.apache.org/"
    assert "bogus" not in argv
    assert ["-d", "libcurl3"] == argv[argv.index("libcurl3") - 1 : argv.index("libcurl3") + 1]
    assert argv[argv.index("--deb-recommends") + 1] == "java-runtime-headless"
    assert argv[-1] == "."


def test_fpm_argv_rpm_has_no_deb_flags() -> None:
    s = select_strategy(PlatformTag("centos", "7"))
    argv = fpm_argv(
        s, name="p", version="2", iteration="3", arch="x86_64", toor=Path("/t"), out_path=Path("/o/p.rpm")
    )
    assert "--deb-recommends" not in argv
    assert argv[argv.index("--iteration") + 1] == "3"
    assert "--rpm-os" in argv
