from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = "/var/log/pi-setup.log"

_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_CONSOLE_FORMAT = "[%(levelname)s] %(message)s"


def _open_log_file(log_path: str, fallback_dir: Optional[str]) -> logging.FileHandler:
    try:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path)
    except OSError:
        # /var/log is root-owned on a stock image; keep the log next to the state file.
        root = Path(fallback_dir) if fallback_dir else Path.cwd()
        root.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(root / "pi-setup.log")


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    fallback_dir: Optional[str] = None,
) -> str:
    """Send records to a log file (full detail) and the terminal (terse).

    Calling it again is a no-op. Returns the log file actually in use.
    """

    root = logging.getLogger()
    root.setLevel(level)

    if getattr(root, "_pi_setup_log_path", None):
        return root._pi_setup_log_path  # type: ignore[attr-defined]

    file_handler = _open_log_file(log_path, fallback_dir)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
    root.addHandler(file_handler)

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    root.addHandler(console)

    actual = file_handler.baseFilename
    setattr(root, "_pi_setup_log_path", actual)
    logging.getLogger(__name__).info("Logging to %s (requested %s)", actual, log_path)
    return actual
