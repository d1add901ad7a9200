from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.net import run_remote_installer
from ..lib.pkg import apt_install

logger = logging.getLogger(__name__)


class InstallOhMyZshStep:
    step_id = "40_install_ohmyzsh"
    description = "Install zsh and oh-my-zsh"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        return ctx.home_path(ctx.manifest.ohmyzsh_install_dir).is_dir()

    def run(self, ctx: ProvisionCtx) -> None:
        if ctx.which("zsh") is None:
            apt_install(ctx.executor, ["zsh"], sudo=ctx.sudo)

        installer = ctx.manifest.installer("ohmyzsh")
        run_remote_installer(ctx.executor, installer["url"], installer["args"])
        logger.info("oh-my-zsh installed")
