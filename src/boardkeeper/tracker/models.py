"""Data models for the GitLab tracker adapter."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum


class IssueState(str, Enum):
    """Issue state as reported by GitLab."""

    OPENED = "opened"
    CLOSED = "closed"


@dataclass(frozen=True)
class Issue:
    """Snapshot of a GitLab issue.

    Attributes:
        iid: Project-scoped issue number, used for updates and display.
        id: Instance-wide issue ID.
        title: Issue title.
        url: Web URL of the issue.
        updated_at: Last update timestamp.
        state: Open or closed.
        due_date: Optional due date.
        labels: Labels in the order GitLab returned them.
    """

    iid: int
    id: int
    title: str
    url: str
    updated_at: datetime
    state: IssueState = IssueState.OPENED
    due_date: date | None = None
    labels: tuple[str, ...] = field(default_factory=tuple)

    def has_label(self, label: str) -> bool:
        return label in self.labels

    def has_any_label(self, labels: tuple[str, ...] | frozenset[str]) -> bool:
        return any(label in self.labels for label in labels)

    def with_labels(self, labels: tuple[str, ...]) -> Issue:
        return replace(self, labels=labels)


@dataclass(frozen=True)
class WikiPage:
    """Wiki page metadata."""

    title: str
    slug: str
