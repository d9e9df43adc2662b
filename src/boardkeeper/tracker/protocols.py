"""Interfaces the label engine and standup writer consume."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol

from boardkeeper.tracker.models import Issue, IssueState, WikiPage


class IssueSource(Protocol):
    """Sorted, fully paginated issue listing."""

    def list_issues(
        self, order_by: str, sort: str, state: IssueState | None = None
    ) -> Iterable[Issue]:
        """List issues; state None means all states."""
        ...


class LabelMutator(Protocol):
    """Replaces the complete label set of an issue."""

    def set_labels(self, issue_iid: int, labels: Sequence[str]) -> Issue:
        """Apply the label set and return the updated issue."""
        ...


class WikiStore(Protocol):
    """Write-once wiki page storage."""

    def list_wiki_pages(self) -> list[WikiPage]:
        """List metadata of all wiki pages."""
        ...

    def wiki_page_exists(self, title: str) -> bool:
        """Whether a page with exactly this title exists."""
        ...

    def create_wiki_page(self, title: str, content: str) -> None:
        """Create a markdown page."""
        ...
