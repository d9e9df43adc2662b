"""StandupSchedule - Decides whether standup notes are due."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime

logger = logging.getLogger("boardkeeper.schedule")


class StandupSchedule:
    """Standups happen on fixed weekdays, or today when forced.

    Args:
        weekdays: ISO weekday numbers (Monday is 1) with a standup
        force_today: Treat today as a standup day regardless of weekdays
    """

    def __init__(self, weekdays: Iterable[int] = (), force_today: bool = False) -> None:
        self.weekdays = frozenset(weekdays)
        self.force_today = force_today

    def due_date(self, now: datetime) -> date | None:
        """Standup date for now, or None when no standup is due."""
        today = now.date()
        if self.force_today:
            logger.info("Standup notes forced for %s", today)
            return today
        if today.isoweekday() in self.weekdays:
            return today
        return None
