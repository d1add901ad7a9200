from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.pkg import apt_install

logger = logging.getLogger(__name__)


class InstallNeovimStep:
    step_id = "30_install_neovim"
    description = "Install and configure neovim"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        return ctx.which("nvim") is not None

    def run(self, ctx: ProvisionCtx) -> None:
        apt_install(ctx.executor, ["neovim"], sudo=ctx.sudo)

        # Fresh install: the bundled config replaces whatever is there.
        ctx.config_file(ctx.manifest.neovim_config_path).write(ctx.manifest.neovim_config)
        logger.info("neovim installed and configured")
