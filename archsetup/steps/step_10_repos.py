from __future__ import annotations

import logging

from ..lib.pacman import append_repo, has_repo
from ..pipeline import StepContext, StepReport

logger = logging.getLogger(__name__)

FLATHUB = "flathub"


class RepoSetupStep:
    """AUR helper, Chaotic-AUR and Flathub. Each part checks before it acts."""

    step_id = "repos"

    def _aur_helper(self, ctx: StepContext) -> None:
        aur = ctx.tools.aur
        logger.info("Installing AUR helper: %s", aur.name)
        if aur.present():
            logger.info("%s already installed - skipping", aur.name)
            return
        aur.bootstrap(ctx.tools.git, ctx.tools.pacman)

    def _chaotic_aur(self, ctx: StepContext) -> None:
        repo = ctx.settings.chaotic
        conf = ctx.settings.pacman_conf
        logger.info("Adding Chaotic-AUR repo")
        if has_repo(conf, repo.name):
            logger.info("[%s] already present in %s - skipping", repo.name, conf)
            return
        ctx.tools.keys.recv_key(repo.key, repo.keyserver)
        ctx.tools.keys.lsign_key(repo.key)
        ctx.tools.pacman.install_urls([repo.keyring_url, repo.mirrorlist_url])
        append_repo(conf, repo.name, repo.include, dry_run=ctx.dry_run)

    def _flathub(self, ctx: StepContext) -> None:
        logger.info("Installing Flatpak + Flathub")
        if not ctx.tools.which("flatpak"):
            ctx.tools.pacman.install(["flatpak"])
        # In dry-run flatpak may still be missing here; remote-add is --if-not-exists anyway.
        if ctx.tools.which("flatpak") and FLATHUB in ctx.tools.flatpak.remotes():
            logger.info("Flathub remote already registered - skipping")
            return
        ctx.tools.flatpak.add_remote(FLATHUB, ctx.settings.flathub_url)

    def run(self, ctx: StepContext) -> StepReport:
        report = StepReport(step_id=self.step_id)
        self._aur_helper(ctx)
        report.done.append("aur-helper")
        self._chaotic_aur(ctx)
        report.done.append("chaotic-aur")
        self._flathub(ctx)
        report.done.append("flathub")
        return report
