from __future__ import annotations

import logging
import os

from ..errors import ArchSetupError
from ..lib.git import sync_checkout
from ..pipeline import StepContext, StepReport
from .step_30_themes import ensure_git

logger = logging.getLogger(__name__)

GITHUB = "https://github.com"


class InstallZshPluginsStep:
    """Oh-My-Zsh custom plugins, cloned from GitHub ``owner/repo`` slugs."""

    step_id = "zsh_plugins"

    def run(self, ctx: StepContext) -> StepReport:
        report = StepReport(step_id=self.step_id)
        policy = ctx.settings.policy(self.step_id)

        logger.info("Installing Oh-My-Zsh plugins")
        ensure_git(ctx)
        if not ctx.tools.which("fzf"):
            ctx.tools.pacman.install(["fzf"])

        plugins_dir = os.path.join(ctx.settings.expand(ctx.settings.zsh_custom), "plugins")
        for slug in ctx.settings.zsh_plugins:
            name = slug.rstrip("/").rsplit("/", 1)[-1]
            logger.info("-> %s", name)
            try:
                sync_checkout(ctx.tools.git, f"{GITHUB}/{slug}.git", os.path.join(plugins_dir, name))
            except (ArchSetupError, OSError) as e:
                if not policy.continue_on_entry_failure:
                    raise
                logger.warning("Failed to install plugin '%s', skipping: %s", name, e)
                report.failed.append(name)
                continue
            report.done.append(name)

        logger.info("Oh-My-Zsh plugins done")
        return report
