from __future__ import annotations

from ._toolchain import RemoteInstallerStep


class InstallRustStep(RemoteInstallerStep):
    step_id = "50_install_rust"
    description = "Install Rust via rustup"
    tool = "rust"
    binary = "rustc"
