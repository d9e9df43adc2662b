"""StandupWriter - Writes one standup notes wiki page per standup date."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from typing import TYPE_CHECKING

from boardkeeper.config import LOOKUP_START, STANDUP_TITLE_PREFIX
from boardkeeper.dates import is_dashed_date, parse_title_date, start_of_day
from boardkeeper.exceptions import DateParseError
from boardkeeper.standup.models import StandupResult
from boardkeeper.standup.render import render_report, report_title

if TYPE_CHECKING:
    from boardkeeper.config import LabelTaxonomy
    from boardkeeper.tracker.models import Issue, WikiPage
    from boardkeeper.tracker.protocols import IssueSource, WikiStore

logger = logging.getLogger("boardkeeper.standup")


def page_date(page: WikiPage, prefix: str = STANDUP_TITLE_PREFIX) -> date | None:
    """Date of a standup notes page, or None for any other page."""
    if not (page.slug.startswith(prefix) or page.title.startswith(prefix)):
        return None
    candidate = page.title.removeprefix(prefix)
    if not is_dashed_date(candidate):
        return None
    try:
        return parse_title_date(candidate)
    except DateParseError:
        logger.debug("Ignoring wiki page %s with invalid date", page.slug)
        return None


def last_note_date(
    pages: Iterable[WikiPage],
    fallback: date = LOOKUP_START,
    prefix: str = STANDUP_TITLE_PREFIX,
) -> date:
    """Date of the newest standup notes page, or fallback if there is none."""
    latest = fallback
    for page in pages:
        day = page_date(page, prefix)
        if day is not None and day > latest:
            latest = day
    return latest


def select_relevant(
    issues: Iterable[Issue], since: date, taxonomy: LabelTaxonomy
) -> list[Issue]:
    """Issues updated after since, leaving out test and recurring issues."""
    threshold = start_of_day(since)
    relevant = []
    for issue in issues:
        if issue.has_label(taxonomy.test) or issue.has_label(taxonomy.recurring):
            continue
        if issue.updated_at > threshold:
            relevant.append(issue)
    return relevant


def collect_projects(issues: Iterable[Issue], taxonomy: LabelTaxonomy) -> list[str]:
    """Sorted, de-duplicated project labels across issues."""
    projects: set[str] = set()
    for issue in issues:
        projects.update(taxonomy.project_labels(issue.labels))
    return sorted(projects)


class StandupWriter:
    """Writes standup notes listing every issue changed since the previous notes.

    Notes are write-once: a page that already exists for the target date is
    never touched, so calling write_notes again for the same date is safe.
    """

    def __init__(
        self,
        source: IssueSource,
        wiki: WikiStore,
        taxonomy: LabelTaxonomy,
        title_prefix: str = STANDUP_TITLE_PREFIX,
        fallback_date: date = LOOKUP_START,
    ) -> None:
        self.source = source
        self.wiki = wiki
        self.taxonomy = taxonomy
        self.title_prefix = title_prefix
        self.fallback_date = fallback_date

    def write_notes(self, due_date: date, due: bool = True) -> StandupResult:
        """Create the standup notes page for due_date if it is due and missing.

        Args:
            due_date: Standup date the notes are for
            due: Whether a standup is due now

        Returns:
            StandupResult describing what was written or why nothing was
        """
        title = report_title(due_date, self.title_prefix)
        if not due:
            return StandupResult(title=title, skipped_reason="no standup due")

        if self.wiki.wiki_page_exists(title):
            logger.info("Skipping creation of wiki page %s because it already exists", title)
            return StandupResult(title=title, skipped_reason="page exists")

        since = last_note_date(self.wiki.list_wiki_pages(), self.fallback_date, self.title_prefix)
        logger.debug("Last note date: %s", since)

        issues = self.source.list_issues("updated_at", "desc")
        relevant = select_relevant(issues, since, self.taxonomy)
        projects = collect_projects(relevant, self.taxonomy)
        logger.debug("Relevant issues: %s", [issue.iid for issue in relevant])

        content = render_report(relevant, projects)
        logger.info("Creating new wiki page %s", title)
        self.wiki.create_wiki_page(title, content)

        return StandupResult(
            title=title,
            created=True,
            since=since,
            relevant_issue_iids=[issue.iid for issue in relevant],
            projects=projects,
        )
