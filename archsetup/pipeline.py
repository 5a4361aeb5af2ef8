from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Protocol, Sequence

from .lib.toolbox import Toolbox
from .settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepContext:
    settings: Settings
    tools: Toolbox

    @property
    def dry_run(self) -> bool:
        return self.settings.dry_run


@dataclass
class StepReport:
    step_id: str
    done: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


class Step(Protocol):
    """A single idempotent step."""

    step_id: str

    def run(self, ctx: StepContext) -> StepReport:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ran_steps: List[str]
    reports: List[StepReport]

    @property
    def failures(self) -> List[str]:
        return [f"{r.step_id}: {f}" for r in self.reports for f in r.failed]


def run_pipeline(*, ctx: StepContext, steps: Sequence[Step]) -> PipelineResult:
    """Run steps in order. An exception from a step aborts the run."""

    ran: List[str] = []
    reports: List[StepReport] = []

    for step in steps:
        logger.info("Running step %s", step.step_id)
        report = step.run(ctx)
        reports.append(report)
        ran.append(step.step_id)
        if report.failed:
            logger.warning("Step %s finished with failures: %s", step.step_id, ", ".join(report.failed))

    return PipelineResult(ran_steps=ran, reports=reports)
