from __future__ import annotations

from pathlib import Path

import pytest
import requests

from distpack.errors import UploadFailed
from distpack.lib import upload
from distpack.lib.platform_id import PlatformTag


class _Response:
    def __init__(self, status: int):
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


def test_upload_url() -> None:
    tag = PlatformTag("ubuntu", "20")
    assert upload.upload_url("https://h/base/", tag, "p_1_amd64.deb") == "https://h/base/ubuntu/20/p_1_amd64.deb"


def test_put_sends_package_bytes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    pkg = tmp_path / "p_1_amd64.deb"
    pkg.write_bytes(b"debian-binary")
    seen = {}

    def fake_put(url, data=None, timeout=None):
        seen["url"] = url
        seen["body"] = data.read()
        seen["timeout"] = timeout
        return _Response(201)

    monkeypatch.setattr(upload.requests, "put", fake_put)
    url = upload.upload_package(pkg, base="https://h/base", tag=PlatformTag("debian", "10"), timeout=7)
    assert url == "https://h/base/debian/10/p_1_amd64.deb"
    assert seen == {"url": url, "body": b"debian-binary", "timeout": 7}


def test_http_error_is_upload_failed(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    pkg = tmp_path / "p.rpm"
    pkg.write_bytes(b"x")
    monkeypatch.setattr(upload.requests, "put", lambda url, data=None, timeout=None: _Response(403))
    with pytest.raises(UploadFailed):
        upload.upload_package(pkg, base="https://h", tag=PlatformTag("centos", "7"))


def test_transport_error_is_upload_failed(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    pkg = tmp_path / "p.rpm"
    pkg.write_bytes(b"x")

    def boom(url, data=None, timeout=None):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(upload.requests, "put", boom)
    with pytest.raises(UploadFailed):
        upload.upload_package(pkg, base="https://h", tag=PlatformTag("centos", "7"))
