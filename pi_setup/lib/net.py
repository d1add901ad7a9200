from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Sequence

from .command import CmdResult, CommandError, CommandExecutor
from .pkg import privileged

logger = logging.getLogger(__name__)

CURL_FLAGS = ["-fsSL", "--proto", "=https", "--tlsv1.2"]


class NetworkFetchError(CommandError):
    """A download failed (DNS, TLS, HTTP status, ...)."""


def download(
    executor: CommandExecutor,
    url: str,
    dest: str,
    *,
    sudo: bool = False,
) -> CmdResult:
    """Fetch url into dest with curl; sudo for root-owned destinations."""

    argv = privileged(["curl", *CURL_FLAGS, "-o", dest, url], sudo=sudo)
    try:
        return executor.run(argv)
    except CommandError as e:
        raise NetworkFetchError(e.result) from e


def run_remote_installer(
    executor: CommandExecutor,
    url: str,
    args: Sequence[str] = (),
) -> CmdResult:
    """Download an installer script and run it with sh.

    The script is saved to a temporary file first, so a truncated download
    never gets executed and fetch failures are reported separately from
    installer failures.
    """

    with tempfile.TemporaryDirectory(prefix="pi-setup-") as td:
        script = Path(td) / "install.sh"
        download(executor, url, str(script))
        logger.info("Running installer from %s", url)
        return executor.run(["sh", str(script), *args])
