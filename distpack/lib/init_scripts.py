from __future__ import annotations

import logging
from pathlib import Path
from string import Template
from typing import Dict, Optional

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "service.tmpl"

# flavor -> (destination relative to the staging root, file mode)
_DESTINATIONS: Dict[str, tuple[str, int]] = {
    "systemd": ("lib/systemd/system/{name}.service", 0o644),
    "upstart": ("etc/init/{name}.conf", 0o644),
    "sysvinit": ("etc/init.d/{name}", 0o755),
}


def default_init_dir() -> Path:
    # distpack/lib/init_scripts.py -> distpack -> repo root
    return Path(__file__).resolve().parents[2] / "assets" / "init"


def install_init_script(
    *,
    flavor: str,
    toor: Path,
    name: str,
    prefix: str,
    exec_path: Optional[str] = None,
    init_dir: Optional[Path] = None,
    dry_run: bool = False,
) -> Optional[Path]:
    """Render the flavor's service template into the staging tree.

    Returns the written path, or None when no template exists for the flavor.
    """

    if flavor not in _DESTINATIONS:
        raise ValueError(f"Unknown init flavor: {flavor}")

    template = (init_dir or default_init_dir()) / flavor / TEMPLATE_NAME
    if not template.is_file():
        logger.warning("No %s template at %s; not installing an init script", flavor, template)
        return None

    rel, mode = _DESTINATIONS[flavor]
    dst = toor / rel.format(name=name)
    text = Template(template.read_text(encoding="utf-8")).substitute(
        name=name,
        prefix=prefix,
        exec=exec_path or f"{prefix.rstrip('/')}/bin/{name}",
    )

    if dry_run:
        logger.info("Would write %s init script -> %s", flavor, dst)
        return dst

    dst.parent.mkdir(parents=True, exist_ok=True)
    dst.write_text(text, encoding="utf-8")
    dst.chmod(mode)
    logger.info("Installed %s init script %s", flavor, dst)
    return dst
