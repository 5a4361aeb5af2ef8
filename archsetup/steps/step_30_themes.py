from __future__ import annotations

import logging
import os

from ..errors import ArchSetupError
from ..lib.assets import copy_tree
from ..lib.git import sync_checkout
from ..pipeline import StepContext, StepReport
from ..themes import ThemeEntry, cache_path, load_theme_manifest

logger = logging.getLogger(__name__)


def ensure_git(ctx: StepContext) -> None:
    if not ctx.tools.which("git"):
        logger.info("git not found - installing via pacman")
        ctx.tools.pacman.install(["git"])


class InstallThemesStep:
    step_id = "themes"

    def _install(self, ctx: StepContext, entry: ThemeEntry, cache_dir: str) -> None:
        checkout = cache_path(entry, cache_dir)
        sync_checkout(ctx.tools.git, entry.git, checkout)
        src = os.path.join(checkout, entry.subdir) if entry.subdir else checkout
        copied = copy_tree(src, entry.dest, dry_run=ctx.dry_run)
        logger.info("   %s -> %s (%d files)", entry.subdir or ".", entry.dest, copied)

    def run(self, ctx: StepContext) -> StepReport:
        report = StepReport(step_id=self.step_id)
        policy = ctx.settings.policy(self.step_id)

        # Validate the whole manifest before touching anything.
        entries = load_theme_manifest(
            ctx.settings.themes_manifest,
            themes_dir=ctx.settings.expand(ctx.settings.themes_dir),
        )
        if not entries:
            logger.info("No themes declared - skipping")
            return report

        ensure_git(ctx)
        cache_dir = ctx.settings.expand(ctx.settings.cache_dir)

        for entry in entries:
            logger.info("-> [%s] %s", entry.category, entry.name)
            try:
                self._install(ctx, entry, cache_dir)
            except (ArchSetupError, OSError) as e:
                if not policy.continue_on_entry_failure:
                    raise
                logger.warning("Failed to install theme '%s', skipping: %s", entry.name, e)
                report.failed.append(entry.name)
                continue
            report.done.append(entry.name)

        logger.info("Themes synced: %d ok, %d failed", len(report.done), len(report.failed))
        return report
