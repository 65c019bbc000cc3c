from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

LOG_FILE_NAME = "distpack.log"
DEFAULT_LOGS_DIR = "logs"

_FILE_HANDLER = "distpack-file"
_CONSOLE_HANDLER = "distpack-console"

_FORMAT = logging.Formatter(
    fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)


def log_path_for(logs_dir: Union[str, Path]) -> Path:
    """Build log location inside a configured ``paths.logs_dir``."""

    return Path(logs_dir) / LOG_FILE_NAME


def _open_file_handler(log_path: Path) -> tuple[logging.Handler, Path]:
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path), log_path
    except OSError:
        fallback = Path.cwd() / LOG_FILE_NAME
        return logging.FileHandler(fallback), fallback


def configure_logging(log_path: Union[str, Path], *, verbose: bool = False) -> Path:
    """Send the full run log (every ``CMD`` line included) to ``log_path`` and
    progress to the console.

    The file always records DEBUG; the console shows INFO unless ``verbose``.
    Calling this again swaps distpack's handlers for new ones, so the log can
    move once the build config (and its ``paths.logs_dir``) has been read.

    Returns the file path actually in use, which is ``./distpack.log`` when
    ``log_path`` cannot be opened.
    """

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        if h.get_name() in {_FILE_HANDLER, _CONSOLE_HANDLER}:
            root.removeHandler(h)
            h.close()

    file_handler, chosen = _open_file_handler(Path(log_path))
    file_handler.set_name(_FILE_HANDLER)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(_FORMAT)
    root.addHandler(file_handler)

    console = logging.StreamHandler()
    console.set_name(_CONSOLE_HANDLER)
    console.setLevel(logging.DEBUG if verbose else logging.INFO)
    console.setFormatter(_FORMAT)
    root.addHandler(console)

    # requests' connection pool chatter drowns the upload step at DEBUG.
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    if chosen != Path(log_path):
        logging.getLogger(__name__).warning("Cannot write %s; logging to %s", log_path, chosen)
    else:
        logging.getLogger(__name__).debug("Logging to %s", chosen)
    return chosen
