from __future__ import annotations

import logging
from typing import Callable, List, Sequence, Set, Tuple

from ..errors import ArchSetupError
from ..lists import read_package_list
from ..pipeline import StepContext, StepReport
from .step_10_repos import FLATHUB

logger = logging.getLogger(__name__)


def _missing(wanted: Sequence[str], installed: Set[str]) -> List[str]:
    return [p for p in wanted if p not in installed]


class InstallPackagesStep:
    step_id = "packages"

    def _native(self, ctx: StepContext, wanted: List[str]) -> List[str]:
        todo = _missing(wanted, ctx.tools.pacman.installed())
        if todo:
            logger.info("Syncing pacman DB")
            ctx.tools.pacman.sync()
            ctx.tools.pacman.install(todo)
        return todo

    def _aur(self, ctx: StepContext, wanted: List[str]) -> List[str]:
        todo = _missing(wanted, ctx.tools.pacman.installed())
        if todo:
            if not ctx.tools.aur.present():
                ctx.tools.aur.bootstrap(ctx.tools.git, ctx.tools.pacman)
            ctx.tools.aur.install(todo)
        return todo

    def _flatpak(self, ctx: StepContext, wanted: List[str]) -> List[str]:
        if not ctx.tools.which("flatpak"):
            ctx.tools.pacman.install(["flatpak"])
        installed = set(ctx.tools.flatpak.installed_apps()) if ctx.tools.which("flatpak") else set()
        todo = _missing(wanted, installed)
        if todo:
            if not ctx.tools.which("flatpak") or FLATHUB not in ctx.tools.flatpak.remotes():
                logger.info("Flathub remote not found - registering it")
                ctx.tools.flatpak.add_remote(FLATHUB, ctx.settings.flathub_url)
            ctx.tools.flatpak.install(FLATHUB, todo)
        return todo

    def run(self, ctx: StepContext) -> StepReport:
        report = StepReport(step_id=self.step_id)
        policy = ctx.settings.policy(self.step_id)

        categories: List[Tuple[str, str, Callable[[StepContext, List[str]], List[str]]]] = [
            ("pacman", ctx.settings.pacman_list, self._native),
            ("aur", ctx.settings.aur_list, self._aur),
            ("flatpak", ctx.settings.flatpak_list, self._flatpak),
        ]

        for label, path, install in categories:
            wanted = read_package_list(path)
            if not wanted:
                logger.info("No entries in %s - skipping %s step", path, label)
                continue

            logger.info("%d %s target(s): %s", len(wanted), label, " ".join(wanted))
            try:
                todo = install(ctx, wanted)
            except ArchSetupError as e:
                if not policy.continue_on_entry_failure:
                    raise
                logger.warning("Some %s installs failed - continuing: %s", label, e)
                report.failed.append(label)
                continue

            if todo:
                logger.info("%s: installed %d package(s)", label, len(todo))
            else:
                logger.info("%s: all %d package(s) already installed", label, len(wanted))
            report.done.append(label)

        return report
