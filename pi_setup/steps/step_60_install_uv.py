from __future__ import annotations

from ._toolchain import RemoteInstallerStep


class InstallUvStep(RemoteInstallerStep):
    step_id = "60_install_uv"
    description = "Install uv"
    tool = "uv"
    binary = "uv"
