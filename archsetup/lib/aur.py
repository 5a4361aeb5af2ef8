from __future__ import annotations

import logging
import os
import tempfile
from typing import Protocol, Sequence

from .command import run_cmd, which
from .git import VersionControl
from .pacman import PackageManager
from .privilege import require_unprivileged

logger = logging.getLogger(__name__)

AUR_BASE_URL = "https://aur.archlinux.org"
BUILD_PREREQUISITES = ("git", "base-devel")


class AurInstaller(Protocol):
    name: str

    def present(self) -> bool:
        ...

    def install(self, packages: Sequence[str]) -> None:
        ...

    def bootstrap(self, git: VersionControl, pacman: PackageManager) -> None:
        ...


class AurHelper:
    """paru/yay wrapper. The helper itself sudo-prompts when it needs to."""

    def __init__(self, name: str = "paru", *, dry_run: bool = False) -> None:
        self.name = name
        self.dry_run = dry_run

    def present(self) -> bool:
        return which(self.name)

    def install(self, packages: Sequence[str]) -> None:
        if not packages:
            return
        require_unprivileged(f"{self.name} -S")
        run_cmd(
            [self.name, "-S", "--needed", "--noconfirm", *packages],
            dry_run=self.dry_run,
            capture=False,
        )

    def bootstrap(self, git: VersionControl, pacman: PackageManager) -> None:
        """Build and install the ``<helper>-bin`` package straight from the AUR."""

        require_unprivileged("makepkg")
        pacman.install(list(BUILD_PREREQUISITES))

        pkgbase = f"{self.name}-bin"
        with tempfile.TemporaryDirectory(prefix="archsetup-") as tmp:
            build_dir = os.path.join(tmp, pkgbase)
            git.clone(f"{AUR_BASE_URL}/{pkgbase}.git", build_dir)
            # makepkg prompts for sudo itself when it reaches the install step.
            run_cmd(["makepkg", "-si", "--noconfirm"], cwd=build_dir, dry_run=self.dry_run, capture=False)
        logger.info("%s installed", self.name)
