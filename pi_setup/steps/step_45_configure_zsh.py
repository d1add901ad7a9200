from __future__ import annotations

import logging

from ..context import ProvisionCtx

logger = logging.getLogger(__name__)


class ConfigureZshStep:
    step_id = "45_configure_zsh"
    description = "Configure terminal colors in .zshrc"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        return ctx.zshrc.contains(ctx.manifest.term_marker)

    def run(self, ctx: ProvisionCtx) -> None:
        ctx.zshrc.append_if_absent(ctx.manifest.term_block, marker=ctx.manifest.term_marker)
