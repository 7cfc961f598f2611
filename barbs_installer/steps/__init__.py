from .step_10_welcome import WelcomeStep
from .step_15_credentials import CredentialsStep
from .step_18_confirm import ConfirmStep
from .step_20_refresh_keys import RefreshKeysStep
from .step_25_prerequisites import PrerequisitesStep
from .step_30_add_user import AddUserStep
from .step_35_package_tweaks import PackageTweaksStep
from .step_40_aur_helper import AurHelperStep
from .step_50_install_programs import InstallProgramsStep
from .step_60_dotfiles import DotfilesStep
from .step_65_nvim_plugins import NvimPluginsStep
from .step_70_system_tweaks import SystemTweaksStep
from .step_80_home_layout import HomeLayoutStep
from .step_90_finale import FinaleStep

__all__ = [
    "WelcomeStep",
    "CredentialsStep",
    "ConfirmStep",
    "RefreshKeysStep",
    "PrerequisitesStep",
    "AddUserStep",
    "PackageTweaksStep",
    "AurHelperStep",
    "InstallProgramsStep",
    "DotfilesStep",
    "NvimPluginsStep",
    "SystemTweaksStep",
    "HomeLayoutStep",
    "FinaleStep",
]
