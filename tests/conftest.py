"""Shared pytest fixtures and configuration."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from datetime import UTC, date, datetime

import pytest

from boardkeeper.config import LabelTaxonomy
from boardkeeper.tracker import Issue, IssueState, WikiPage

# Monday of ISO week 43, 2026
NOW = datetime(2026, 10, 19, 9, 30, tzinfo=UTC)


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")
    config.addinivalue_line("markers", "real: runs against a real GitLab instance (local only)")


class FakeTracker:
    """In-memory issue source, label mutator and wiki store.

    Issues are yielded lazily in the order given, so tests can check how
    far a scan got through `yielded`.
    """

    def __init__(
        self,
        open_issues: Sequence[Issue] = (),
        closed_issues: Sequence[Issue] = (),
        all_issues: Sequence[Issue] = (),
        pages: Sequence[WikiPage] = (),
    ) -> None:
        self.issues = {
            IssueState.OPENED: list(open_issues),
            IssueState.CLOSED: list(closed_issues),
            None: list(all_issues),
        }
        self.pages = list(pages)
        self.yielded: list[int] = []
        self.list_calls: list[tuple[str, str, IssueState | None]] = []
        self.label_calls: list[tuple[int, tuple[str, ...]]] = []
        self.created: list[tuple[str, str]] = []

    def list_issues(
        self, order_by: str, sort: str, state: IssueState | None = None
    ) -> Iterator[Issue]:
        self.list_calls.append((order_by, sort, state))
        return self._iterate(state)

    def _iterate(self, state: IssueState | None) -> Iterator[Issue]:
        for issue in self.issues[state]:
            self.yielded.append(issue.iid)
            yield issue

    def set_labels(self, issue_iid: int, labels: Sequence[str]) -> Issue:
        labels = tuple(labels)
        self.label_calls.append((issue_iid, labels))
        for bucket in self.issues.values():
            for index, issue in enumerate(bucket):
                if issue.iid == issue_iid:
                    bucket[index] = issue.with_labels(labels)
                    return bucket[index]
        raise AssertionError(f"unknown issue {issue_iid}")

    def list_wiki_pages(self) -> list[WikiPage]:
        return list(self.pages)

    def wiki_page_exists(self, title: str) -> bool:
        return any(page.slug == title for page in self.pages)

    def create_wiki_page(self, title: str, content: str) -> None:
        self.created.append((title, content))
        prefix, _, name = title.rpartition("/")
        self.pages.append(WikiPage(title=name if prefix else title, slug=title))


@pytest.fixture
def taxonomy() -> LabelTaxonomy:
    """Default label taxonomy."""
    return LabelTaxonomy()


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: NOW


@pytest.fixture
def make_issue() -> Callable[..., Issue]:
    """Factory for issues with sensible defaults."""

    def _make(
        iid: int,
        *labels: str,
        due: date | None = None,
        updated: datetime = NOW,
        state: IssueState = IssueState.OPENED,
        title: str | None = None,
    ) -> Issue:
        return Issue(
            iid=iid,
            id=1000 + iid,
            title=title or f"Issue {iid}",
            url=f"https://gitlab.example.com/team/board/-/issues/{iid}",
            updated_at=updated,
            state=state,
            due_date=due,
            labels=tuple(labels),
        )

    return _make


@pytest.fixture
def fake_tracker_cls() -> type[FakeTracker]:
    return FakeTracker
