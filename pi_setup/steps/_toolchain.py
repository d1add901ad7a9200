from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.net import run_remote_installer

logger = logging.getLogger(__name__)


class RemoteInstallerStep:
    """Install a user-level tool with its upstream installer script.

    Subclasses set ``tool`` (manifest section) and ``binary`` (the command
    whose presence means the tool is installed).
    """

    step_id = ""
    description = ""
    tool = ""
    binary = ""

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        return ctx.which(self.binary) is not None

    def run(self, ctx: ProvisionCtx) -> None:
        installer = ctx.manifest.installer(self.tool)
        run_remote_installer(ctx.executor, installer["url"], installer["args"])

        path = ctx.which(self.binary)
        if path and not ctx.dry_run:
            r = ctx.executor.run([path, "--version"], check=False)
            logger.info("%s version: %s", self.binary, r.stdout.strip() or "unknown")
        logger.info("%s installed successfully", self.tool)
