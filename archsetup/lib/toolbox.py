from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .aur import AurHelper, AurInstaller
from .chezmoi import Chezmoi, DotfileManager
from .command import which
from .flatpak import AppInstaller, Flatpak
from .git import Git, VersionControl
from .pacman import KeyManager, PackageManager, Pacman, PacmanKey
from .selector import Selector, TerminalSelector
from .systemd import ServiceManager, Systemctl


@dataclass
class Toolbox:
    """Every external collaborator a step may call, swappable in tests."""

    pacman: PackageManager
    keys: KeyManager
    aur: AurInstaller
    flatpak: AppInstaller
    git: VersionControl
    chezmoi: DotfileManager
    systemctl: ServiceManager
    selector: Selector
    which: Callable[[str], bool] = which


def default_toolbox(*, aur_helper: str, dry_run: bool) -> Toolbox:
    return Toolbox(
        pacman=Pacman(dry_run=dry_run),
        keys=PacmanKey(dry_run=dry_run),
        aur=AurHelper(aur_helper, dry_run=dry_run),
        flatpak=Flatpak(dry_run=dry_run),
        git=Git(dry_run=dry_run),
        chezmoi=Chezmoi(dry_run=dry_run),
        systemctl=Systemctl(dry_run=dry_run),
        selector=TerminalSelector(),
    )
