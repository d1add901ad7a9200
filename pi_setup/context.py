from __future__ import annotations

import os
import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence

from .lib.command import CommandExecutor
from .lib.dotfiles import ConfigFile
from .lib.manifests import Manifest
from .lib.pkg import DPKG_STATUS_PATH
from .lib.hwdetect import OS_RELEASE_PATH


@dataclass(frozen=True)
class ProvisionCtx:
    """Everything a step may touch, passed explicitly."""

    executor: CommandExecutor
    manifest: Manifest
    home: Path
    state: Dict[str, Any] = field(default_factory=dict)
    search_path: Sequence[str] = ()
    dpkg_status_path: str = DPKG_STATUS_PATH
    os_release_path: str = OS_RELEASE_PATH
    sudo: bool = True
    dry_run: bool = False
    clock: Callable[[], float] = time.time

    def home_path(self, rel: str) -> Path:
        return self.home / rel.lstrip("/")

    def config_file(self, rel: str) -> ConfigFile:
        return ConfigFile(self.home_path(rel), dry_run=self.dry_run)

    @property
    def zshrc(self) -> ConfigFile:
        return self.config_file(self.manifest.zshrc_path)

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name, path=os.pathsep.join(self.search_path))


def default_search_path(home: Path, extra: Sequence[str]) -> list[str]:
    """User tool dirs first, then the inherited PATH."""

    dirs = [str(home / rel) for rel in extra]
    dirs += [d for d in os.environ.get("PATH", "").split(os.pathsep) if d]
    return dirs
