from .step_10_update_system import UpdateSystemStep
from .step_20_install_tailscale import InstallTailscaleStep
from .step_30_install_neovim import InstallNeovimStep
from .step_40_install_ohmyzsh import InstallOhMyZshStep
from .step_45_configure_zsh import ConfigureZshStep
from .step_50_install_rust import InstallRustStep
from .step_60_install_uv import InstallUvStep
from .step_70_install_packages import InstallPackagesStep
from .step_80_setup_aliases import SetupAliasesStep

__all__ = [
    "UpdateSystemStep",
    "InstallTailscaleStep",
    "InstallNeovimStep",
    "InstallOhMyZshStep",
    "ConfigureZshStep",
    "InstallRustStep",
    "InstallUvStep",
    "InstallPackagesStep",
    "SetupAliasesStep",
]
