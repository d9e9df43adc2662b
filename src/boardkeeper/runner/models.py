"""Data models for the run driver."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from boardkeeper.exceptions import BoardkeeperError


@dataclass
class StageOutcome:
    """Outcome of one stage of a run.

    Attributes:
        name: Stage name.
        ok: Whether the stage completed.
        value: Stage result when it completed.
        error: Error that ended the stage otherwise.
    """

    name: str
    ok: bool
    value: Any = None
    error: BoardkeeperError | None = None

    @property
    def category(self) -> str | None:
        return self.error.category if self.error is not None else None


@dataclass
class RunReport:
    """Outcomes of every stage of a run, in execution order."""

    last_run_time: datetime | None = None
    stages: list[StageOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(stage.ok for stage in self.stages)

    @property
    def failures(self) -> list[StageOutcome]:
        return [stage for stage in self.stages if not stage.ok]

    def stage(self, name: str) -> StageOutcome | None:
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None
