from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.pkg import apt_install, dpkg_missing

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "70_install_packages"
    description = "Install additional development packages"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        return not dpkg_missing(ctx.manifest.packages, status_path=ctx.dpkg_status_path)

    def run(self, ctx: ProvisionCtx) -> None:
        wanted = ctx.manifest.packages
        missing = dpkg_missing(wanted, status_path=ctx.dpkg_status_path)
        for pkg in wanted:
            if pkg not in missing:
                logger.info("%s is already installed", pkg)

        # One apt transaction: a single bad package fails the whole step.
        apt_install(ctx.executor, missing, sudo=ctx.sudo)
        logger.info("Installed packages: %s", ", ".join(missing) or "none")
