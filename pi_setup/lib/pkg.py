from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from .command import CommandExecutor

DPKG_STATUS_PATH = "/var/lib/dpkg/status"
INSTALLED = "install ok installed"


def privileged(argv: Sequence[str], *, sudo: bool) -> list[str]:
    """Prefix argv with sudo unless we already run as root."""
    return ["sudo", *argv] if sudo else list(argv)


def apt_update(executor: CommandExecutor, *, sudo: bool) -> None:
    executor.run(privileged(["apt-get", "update"], sudo=sudo))


def apt_upgrade(executor: CommandExecutor, *, sudo: bool) -> None:
    executor.run(privileged(["apt-get", "upgrade", "-y"], sudo=sudo))


def apt_install(executor: CommandExecutor, packages: Sequence[str], *, sudo: bool) -> None:
    if not packages:
        return
    executor.run(privileged(["apt-get", "install", "-y", *packages], sudo=sudo))


def read_dpkg_status(status_path: str = DPKG_STATUS_PATH) -> Dict[str, str]:
    """Map package name -> Status field from the dpkg status database.

    Reading the database directly keeps the presence probe free of
    subprocesses; a missing file means nothing is known to be installed.
    Multi-arch packages have one stanza per architecture; any installed
    stanza counts as installed.
    """

    p = Path(status_path)
    if not p.exists():
        return {}

    statuses: Dict[str, str] = {}
    name = None
    status = None
    for line in p.read_text(encoding="utf-8", errors="replace").splitlines() + [""]:
        if not line.strip():
            if name and statuses.get(name) != INSTALLED:
                statuses[name] = status or ""
            name = None
            status = None
            continue
        if line.startswith("Package:"):
            name = line.split(":", 1)[1].strip()
        elif line.startswith("Status:"):
            status = line.split(":", 1)[1].strip()
    return statuses


def dpkg_missing(packages: Iterable[str], *, status_path: str = DPKG_STATUS_PATH) -> List[str]:
    """Return the packages (in input order) that are not fully installed."""

    statuses = read_dpkg_status(status_path)
    missing: List[str] = []
    for pkg in packages:
        if statuses.get(pkg) != INSTALLED and pkg not in missing:
            missing.append(pkg)
    return missing
