from __future__ import annotations

import logging
from typing import Callable

from .lib.hwdetect import CPUINFO_PATH, DT_MODEL_PATH, is_raspberry_pi, read_board_model

logger = logging.getLogger(__name__)

PROMPT = "This script is designed for Raspberry Pi. Continue anyway? (y/N) "


class PreconditionDeclined(RuntimeError):
    """The operator chose not to provision a non-Pi host."""


def check_host(
    *,
    assume_yes: bool = False,
    ask: Callable[[str], str] = input,
    cpuinfo_path: str = CPUINFO_PATH,
    dt_model_path: str = DT_MODEL_PATH,
) -> str:
    """Confirm the host is a Pi, or that the operator wants to go ahead anyway.

    Returns the detected board model ("unknown" if none). Raises
    PreconditionDeclined when the operator answers anything but y/yes.
    """

    model = read_board_model(cpuinfo_path=cpuinfo_path, dt_model_path=dt_model_path) or "unknown"
    if is_raspberry_pi(cpuinfo_path=cpuinfo_path, dt_model_path=dt_model_path):
        logger.info("Host: %s", model)
        return model

    logger.warning("Host does not look like a Raspberry Pi (model=%s)", model)
    if assume_yes:
        logger.info("Continuing on non-Pi host (--yes)")
        return model

    try:
        answer = ask(PROMPT)
    except EOFError:
        answer = ""
    if answer.strip().lower() not in {"y", "yes"}:
        raise PreconditionDeclined("Installation cancelled")
    return model
