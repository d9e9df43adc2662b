"""Runner - Sequences the stages of one scheduled job run."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from boardkeeper.exceptions import BoardkeeperError
from boardkeeper.labels.engine import utc_now
from boardkeeper.runner.models import RunReport, StageOutcome

if TYPE_CHECKING:
    from boardkeeper.labels import LabelEngine
    from boardkeeper.schedule import StandupSchedule
    from boardkeeper.standup import StandupWriter

logger = logging.getLogger("boardkeeper.runner")

LAST_RUN_STAGE = "last_run_time"
ADAPT_STAGE = "adapt_labels"
CLEAN_STAGE = "clean_labels"
STANDUP_STAGE = "standup_notes"


class RunHistory(Protocol):
    """Source of the previous successful run time."""

    def last_run_time(self) -> datetime:
        """Timestamp of the previous successful run."""
        ...


class Runner:
    """Runs last-run lookup, label passes and standup notes once.

    A failing stage is recorded and the remaining stages still run, so a
    label failure never keeps the standup notes from being written.
    """

    def __init__(
        self,
        history: RunHistory,
        engine: LabelEngine,
        writer: StandupWriter,
        schedule: StandupSchedule,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.history = history
        self.engine = engine
        self.writer = writer
        self.schedule = schedule
        self.clock = clock

    def _stage(self, report: RunReport, name: str, func: Callable[[], Any]) -> StageOutcome:
        logger.info("Running stage %s", name)
        try:
            value = func()
        except BoardkeeperError as e:
            logger.error("Stage %s failed: %s: %s", name, e.category, e)
            outcome = StageOutcome(name=name, ok=False, error=e)
        else:
            outcome = StageOutcome(name=name, ok=True, value=value)
        report.stages.append(outcome)
        return outcome

    def run(
        self,
        last_run: datetime | None = None,
        labels: bool = True,
        standup: bool = True,
    ) -> RunReport:
        """Run the job once.

        Args:
            last_run: Previous run time; looked up from run history when None
            labels: Whether to run the label passes
            standup: Whether to run the standup notes stage

        Returns:
            RunReport with one outcome per executed stage
        """
        report = RunReport()

        if labels:
            lookup_error = None
            if last_run is None:
                lookup = self._stage(report, LAST_RUN_STAGE, self.history.last_run_time)
                last_run, lookup_error = lookup.value, lookup.error
            report.last_run_time = last_run
            if last_run is not None:
                logger.info("Last run: %s", last_run.isoformat())

            self._stage(report, ADAPT_STAGE, self.engine.adapt_labels)

            if last_run is None:
                # No window to clean without a last run time
                report.stages.append(StageOutcome(name=CLEAN_STAGE, ok=False, error=lookup_error))
            else:
                window_start = last_run
                self._stage(report, CLEAN_STAGE, lambda: self.engine.clean_labels(window_start))

        if standup:
            due_date = self.schedule.due_date(self.clock())
            if due_date is None:
                logger.info("No standup due")
            else:
                self._stage(report, STANDUP_STAGE, lambda: self.writer.write_notes(due_date))

        if report.ok:
            logger.info("Run complete")
        else:
            logger.error(
                "Run finished with %d failed stage(s): %s",
                len(report.failures),
                ", ".join(stage.name for stage in report.failures),
            )
        return report
