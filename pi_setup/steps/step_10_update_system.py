from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.pkg import apt_update, apt_upgrade
from ..state_store import last_completed_at

logger = logging.getLogger(__name__)


class UpdateSystemStep:
    step_id = "10_update_system"
    description = "Update system packages"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        # apt state has no "done" marker; a recent successful run stands in for one.
        last = last_completed_at(ctx.state, self.step_id)
        if last is None:
            return False
        max_age_s = ctx.manifest.apt_refresh_max_age_hours * 3600
        return (ctx.clock() - last) < max_age_s

    def run(self, ctx: ProvisionCtx) -> None:
        apt_update(ctx.executor, sudo=ctx.sudo)
        apt_upgrade(ctx.executor, sudo=ctx.sudo)
        logger.info("System packages updated")
