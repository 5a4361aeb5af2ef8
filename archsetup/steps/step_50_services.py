from __future__ import annotations

import logging

from ..errors import ArchSetupError
from ..pipeline import StepContext, StepReport
from ..settings import UserService

logger = logging.getLogger(__name__)


class EnableServicesStep:
    step_id = "services"

    def _user_service(self, ctx: StepContext, svc: UserService) -> None:
        logger.info("Enabling %s (user service)", svc.unit)
        if svc.package and not ctx.tools.which(svc.binary):
            ctx.tools.aur.install([svc.package])
        ctx.tools.systemctl.enable_now_user([svc.unit])

    def run(self, ctx: StepContext) -> StepReport:
        report = StepReport(step_id=self.step_id)
        policy = ctx.settings.policy(self.step_id)

        for svc in ctx.settings.user_services:
            try:
                self._user_service(ctx, svc)
            except ArchSetupError as e:
                if not policy.continue_on_entry_failure:
                    raise
                logger.warning("Could not enable %s: %s", svc.unit, e)
                report.failed.append(svc.unit)
                continue
            report.done.append(svc.unit)

        units = list(ctx.settings.system_units)
        if units:
            logger.info("Enabling system services, path units & timers: %s", " ".join(units))
            # enable --now is a no-op for units that are already enabled and running.
            try:
                ctx.tools.systemctl.enable_now(units)
            except ArchSetupError as e:
                if not policy.continue_on_entry_failure:
                    raise
                logger.warning("Could not enable system units: %s", e)
                report.failed.extend(units)
                return report
            report.done.extend(units)
            logger.info("All listed services/timers have been enabled.")

        return report
