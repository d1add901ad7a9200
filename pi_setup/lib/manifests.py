from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

DEFAULT_MANIFEST = Path(__file__).resolve().parents[1] / "manifests" / "default.yaml"


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    sec = raw.get(key) or {}
    if not isinstance(sec, dict):
        raise ValueError(f"manifest: {key} must be a mapping")
    return sec


def _str_list(value: Any, what: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"manifest: {what} must be a list")
    return [str(v).strip() for v in value if str(v).strip()]


@dataclass(frozen=True)
class Manifest:
    """Static provisioning data (package names, dotfile text, installer URLs)."""

    raw: Dict[str, Any]

    @property
    def apt_refresh_max_age_hours(self) -> float:
        hours = float(_section(self.raw, "apt").get("refresh_max_age_hours", 12))
        if hours <= 0:
            raise ValueError("manifest: apt.refresh_max_age_hours must be positive")
        return hours

    @property
    def tailscale(self) -> Dict[str, Any]:
        return _section(self.raw, "tailscale")

    @property
    def neovim_config_path(self) -> str:
        return str(_section(self.raw, "neovim").get("config_path") or ".config/nvim/init.vim")

    @property
    def neovim_config(self) -> str:
        return str(_section(self.raw, "neovim").get("config") or "")

    @property
    def ohmyzsh_install_dir(self) -> str:
        return str(_section(self.raw, "ohmyzsh").get("install_dir") or ".oh-my-zsh")

    @property
    def zshrc_path(self) -> str:
        return str(_section(self.raw, "zsh").get("rc_path") or ".zshrc")

    @property
    def term_marker(self) -> str:
        return str(_section(self.raw, "zsh").get("term_marker") or "export TERM=xterm-256color")

    @property
    def term_block(self) -> str:
        return str(_section(self.raw, "zsh").get("term_block") or self.term_marker)

    @property
    def aliases_marker(self) -> str:
        return str(_section(self.raw, "zsh").get("aliases_marker") or "# Useful aliases")

    @property
    def aliases_block(self) -> str:
        return str(_section(self.raw, "zsh").get("aliases_block") or "")

    def installer(self, tool: str) -> Dict[str, Any]:
        sec = _section(self.raw, tool)
        url = str(sec.get("installer_url") or "")
        if not url:
            raise ValueError(f"manifest: {tool}.installer_url missing")
        return {"url": url, "args": _str_list(sec.get("installer_args"), f"{tool}.installer_args")}

    @property
    def packages(self) -> List[str]:
        return _str_list(self.raw.get("packages"), "packages")

    @property
    def search_path(self) -> List[str]:
        return _str_list(self.raw.get("search_path"), "search_path")


def load_manifest(path: Optional[str] = None) -> Manifest:
    """Load a YAML manifest; defaults to the one bundled with the package."""

    p = Path(path) if path else DEFAULT_MANIFEST
    if not p.exists():
        raise FileNotFoundError(str(p))
    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("manifest must be YAML")

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Manifest must be a mapping/dict: {p}")
    return Manifest(raw=raw)
