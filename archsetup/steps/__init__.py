from .step_10_repos import RepoSetupStep
from .step_20_packages import InstallPackagesStep
from .step_30_themes import InstallThemesStep
from .step_40_dotfiles import ApplyDotfilesStep
from .step_45_zsh_plugins import InstallZshPluginsStep
from .step_50_services import EnableServicesStep
from .step_90_update_lists import UpdateListsStep

__all__ = [
    "RepoSetupStep",
    "InstallPackagesStep",
    "InstallThemesStep",
    "ApplyDotfilesStep",
    "InstallZshPluginsStep",
    "EnableServicesStep",
    "UpdateListsStep",
]
