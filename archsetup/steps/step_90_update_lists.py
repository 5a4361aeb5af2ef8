from __future__ import annotations

import datetime
import logging
import os

from ..lists import write_package_list
from ..pipeline import StepContext, StepReport

logger = logging.getLogger(__name__)


class UpdateListsStep:
    """Snapshot explicitly installed packages back into the list files."""

    step_id = "update_lists"

    def run(self, ctx: StepContext) -> StepReport:
        s = ctx.settings
        report = StepReport(step_id=self.step_id)

        snapshots = [
            ("pacman packages", s.pacman_list, ctx.tools.pacman.explicit_native()),
            ("AUR packages", s.aur_list, ctx.tools.pacman.explicit_foreign()),
            (
                "Flatpak apps",
                s.flatpak_list,
                ctx.tools.flatpak.installed_apps() if ctx.tools.which("flatpak") else [],
            ),
        ]

        # Lists are only written once every query has succeeded.
        for label, path, names in snapshots:
            if ctx.dry_run:
                logger.info("Would write %d %s to %s", len(set(names)), label, path)
                continue
            count = write_package_list(path, names)
            logger.info("  %-20s %d -> %s", label + ":", count, path)
            report.done.append(os.path.basename(path))

        if s.push:
            message = f"update: explicit package lists {datetime.date.today().isoformat()}"
            paths = [s.pacman_list, s.aur_list, s.flatpak_list]
            if ctx.tools.git.commit_and_push(s.config_dir, [os.path.abspath(p) for p in paths], message):
                logger.info("Lists pushed to repo.")

        return report
