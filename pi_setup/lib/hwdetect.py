from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

CPUINFO_PATH = "/proc/cpuinfo"
DT_MODEL_PATH = "/proc/device-tree/model"
OS_RELEASE_PATH = "/etc/os-release"


def _read_text(path: Path) -> Optional[str]:
    try:
        txt = path.read_text(encoding="utf-8", errors="ignore").strip()
        return txt or None
    except OSError:
        return None


def read_board_model(
    *,
    cpuinfo_path: str = CPUINFO_PATH,
    dt_model_path: str = DT_MODEL_PATH,
) -> Optional[str]:
    """Best-effort board model string.

    The device-tree model is the most reliable signal on SBCs; older kernels
    only expose it as the "Model" line of /proc/cpuinfo.
    """

    model = _read_text(Path(dt_model_path))
    if model:
        # device-tree strings are NUL terminated
        return model.rstrip("\x00").strip() or None

    cpuinfo = _read_text(Path(cpuinfo_path)) or ""
    for line in cpuinfo.splitlines():
        key, _, value = line.partition(":")
        if key.strip().lower() == "model" and value.strip():
            return value.strip()
    return None


def is_raspberry_pi(
    *,
    cpuinfo_path: str = CPUINFO_PATH,
    dt_model_path: str = DT_MODEL_PATH,
) -> bool:
    model = read_board_model(cpuinfo_path=cpuinfo_path, dt_model_path=dt_model_path) or ""
    if "raspberry pi" in model.lower():
        return True
    # Some images only mention the board in free-form cpuinfo text.
    cpuinfo = _read_text(Path(cpuinfo_path)) or ""
    return "Raspberry Pi" in cpuinfo


def read_os_release(path: str = OS_RELEASE_PATH) -> Dict[str, str]:
    """Parse an os-release(5) file into a dict (missing file -> {})."""

    txt = _read_text(Path(path))
    if not txt:
        return {}

    out: Dict[str, str] = {}
    for line in txt.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
            value = value[1:-1]
        out[key.strip()] = value
    return out
