"""Schedule - Standup due signal."""

from boardkeeper.schedule.schedule import StandupSchedule

__all__ = [
    "StandupSchedule",
]
