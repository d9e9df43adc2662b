"""Data models for the standup writer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass
class StandupResult:
    """Result of a standup notes attempt.

    Attributes:
        title: Wiki page title for the target date.
        created: Whether a page was written during this call.
        skipped_reason: Why nothing was written, if nothing was.
        since: Date of the previous standup notes the window starts from.
        relevant_issue_iids: Issues listed in the notes.
        projects: Sorted project labels the notes are grouped by.
    """

    title: str
    created: bool = False
    skipped_reason: str | None = None
    since: date | None = None
    relevant_issue_iids: list[int] = field(default_factory=list)
    projects: list[str] = field(default_factory=list)
