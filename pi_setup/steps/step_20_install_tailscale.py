from __future__ import annotations

import logging
from typing import Any, Dict, Tuple

from ..context import ProvisionCtx
from ..lib.hwdetect import read_os_release
from ..lib.net import download
from ..lib.pkg import apt_install, apt_update

logger = logging.getLogger(__name__)

_KNOWN_DISTROS = {"raspbian", "debian", "ubuntu"}


def resolve_repo(cfg: Dict[str, Any], os_release: Dict[str, str]) -> Tuple[str, str]:
    """Pick the (distro, codename) pair of the Tailscale apt repo."""

    distro = str(cfg.get("distro") or "auto")
    codename = str(cfg.get("codename") or "auto")

    if distro == "auto":
        detected = os_release.get("ID", "").lower()
        distro = detected if detected in _KNOWN_DISTROS else str(cfg.get("fallback_distro") or "raspbian")
    if codename == "auto":
        codename = os_release.get("VERSION_CODENAME") or str(cfg.get("fallback_codename") or "bullseye")
    return distro, codename


class InstallTailscaleStep:
    step_id = "20_install_tailscale"
    description = "Install Tailscale"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        return ctx.which("tailscale") is not None

    def run(self, ctx: ProvisionCtx) -> None:
        cfg = ctx.manifest.tailscale
        repo_base = str(cfg.get("repo_base") or "https://pkgs.tailscale.com/stable").rstrip("/")
        keyring = str(cfg.get("keyring") or "/usr/share/keyrings/tailscale-archive-keyring.gpg")
        sources_list = str(cfg.get("sources_list") or "/etc/apt/sources.list.d/tailscale.list")

        distro, codename = resolve_repo(cfg, read_os_release(ctx.os_release_path))
        ctx.state.setdefault("host", {})["tailscale_repo"] = f"{distro}/{codename}"
        logger.info("Tailscale repo: %s/%s", distro, codename)

        download(ctx.executor, f"{repo_base}/{distro}/{codename}.noarmor.gpg", keyring, sudo=ctx.sudo)
        download(ctx.executor, f"{repo_base}/{distro}/{codename}.tailscale-keyring.list", sources_list, sudo=ctx.sudo)

        apt_update(ctx.executor, sudo=ctx.sudo)
        apt_install(ctx.executor, ["tailscale"], sudo=ctx.sudo)

        logger.info("Tailscale installed successfully")
        logger.warning("Run 'sudo tailscale up' to authenticate and connect to your Tailnet")
