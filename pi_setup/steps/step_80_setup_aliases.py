from __future__ import annotations

from ..context import ProvisionCtx


class SetupAliasesStep:
    step_id = "80_setup_aliases"
    description = "Add shell aliases to .zshrc"

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        return ctx.zshrc.contains(ctx.manifest.aliases_marker)

    def run(self, ctx: ProvisionCtx) -> None:
        ctx.zshrc.append_if_absent(ctx.manifest.aliases_block, marker=ctx.manifest.aliases_marker)
