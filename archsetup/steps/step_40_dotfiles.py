from __future__ import annotations

import logging

from ..lists import read_dotfiles_repo
from ..pipeline import StepContext, StepReport

logger = logging.getLogger(__name__)


class ApplyDotfilesStep:
    step_id = "dotfiles"

    def run(self, ctx: StepContext) -> StepReport:
        repo_url = read_dotfiles_repo(ctx.settings.dotfiles_repo_file)

        logger.info("Applying dotfiles via chezmoi from %s", repo_url)
        if not ctx.tools.which("chezmoi"):
            ctx.tools.pacman.install(["chezmoi"])
        ctx.tools.chezmoi.init_apply(repo_url)

        return StepReport(step_id=self.step_id, done=[repo_url])
