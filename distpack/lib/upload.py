from __future__ import annotations

import logging
from pathlib import Path

import requests

from ..errors import UploadFailed
from .platform_id import PlatformTag

logger = logging.getLogger(__name__)


def upload_url(base: str, tag: PlatformTag, filename: str) -> str:
    return f"{base.rstrip('/')}/{tag}/{filename}"


def upload_package(path: Path, *, base: str, tag: PlatformTag, timeout: float = 300) -> str:
    """PUT the package bytes to ``{base}/{tag}/{filename}`` and return that URL."""

    url = upload_url(base, tag, path.name)
    logger.info("Uploading %s -> %s", path, url)
    try:
        with path.open("rb") as fh:
            r = requests.put(url, data=fh, timeout=timeout)
        r.raise_for_status()
    except requests.RequestException as e:
        raise UploadFailed(f"Upload of {path.name} to {url} failed: {e}") from e
    return url
