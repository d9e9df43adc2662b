"""LabelEngine - Keeps urgency and status labels in line with due dates and issue state."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from boardkeeper.dates import same_iso_week, start_of_day
from boardkeeper.labels.models import (
    LabelAction,
    LabelChange,
    LabelPassResult,
    with_label,
    without_label,
)
from boardkeeper.tracker.models import Issue, IssueState

if TYPE_CHECKING:
    from boardkeeper.config import LabelTaxonomy
    from boardkeeper.tracker.protocols import IssueSource, LabelMutator

logger = logging.getLogger("boardkeeper.labels")


def utc_now() -> datetime:
    return datetime.now(UTC)


class LabelEngine:
    """Promotes open issues through urgency labels and clears status labels on closed ones.

    Every mutation is sent to GitLab as soon as it is decided. Later
    decisions for the same issue use the locally rebuilt label set, not a
    re-fetched issue.
    """

    def __init__(
        self,
        source: IssueSource,
        mutator: LabelMutator,
        taxonomy: LabelTaxonomy,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the engine.

        Args:
            source: Issue listing
            mutator: Applies full label sets to issues
            taxonomy: Label sets to work with
            clock: Returns the current time (aware datetime)
        """
        self.source = source
        self.mutator = mutator
        self.taxonomy = taxonomy
        self.clock = clock

    def _apply(
        self,
        issue: Issue,
        labels: tuple[str, ...],
        label: str,
        action: LabelAction,
        result: LabelPassResult,
    ) -> tuple[str, ...]:
        """Send one label mutation and return the new local label set."""
        if action is LabelAction.ADD:
            updated = with_label(labels, label)
            logger.info("Adding label '%s' to issue '%s'", label, issue.title)
        else:
            updated = without_label(labels, label)
            logger.info("Removing label '%s' from issue '%s'", label, issue.title)
        self.mutator.set_labels(issue.iid, updated)
        result.changes.append(
            LabelChange(issue_iid=issue.iid, title=issue.title, label=label, action=action)
        )
        return updated

    def adapt_labels(self) -> LabelPassResult:
        """Promote open issues to Today / ThisWeek as their due dates approach.

        Issues are scanned by ascending due date. The scan ends at the first
        issue due in a later week, since every issue after it is due later
        still. Issues without a due date are skipped; issues carrying a
        progress label are inspected but left untouched.

        Returns:
            LabelPassResult with the number of inspected issues and applied changes
        """
        taxonomy = self.taxonomy
        now = self.clock()
        today = now.date()
        result = LabelPassResult()

        for issue in self.source.list_issues("due_date", "asc", IssueState.OPENED):
            if issue.due_date is None:
                continue
            result.inspected += 1

            past_due = start_of_day(issue.due_date, now.tzinfo) < now
            due_today = issue.due_date == today
            due_this_week = same_iso_week(issue.due_date, today)
            if not (past_due or due_today or due_this_week):
                logger.debug("Issue '%s' due %s, stopping scan", issue.title, issue.due_date)
                break

            if issue.has_any_label(taxonomy.progress):
                continue

            labels = issue.labels
            has_today = taxonomy.today in labels
            if (past_due or due_today) and not has_today:
                labels = self._apply(issue, labels, taxonomy.today, LabelAction.ADD, result)
            elif not has_today and due_this_week and taxonomy.this_week not in labels:
                labels = self._apply(issue, labels, taxonomy.this_week, LabelAction.ADD, result)

            if taxonomy.today in labels and taxonomy.this_week in labels:
                labels = self._apply(issue, labels, taxonomy.this_week, LabelAction.REMOVE, result)

            urgent = taxonomy.today in labels or taxonomy.this_week in labels
            if urgent and taxonomy.next_actions in labels:
                labels = self._apply(
                    issue, labels, taxonomy.next_actions, LabelAction.REMOVE, result
                )

        logger.info(
            "Adapted labels: %d issue(s) inspected, %d change(s)",
            result.inspected,
            len(result.changes),
        )
        return result

    def clean_labels(self, last_run_time: datetime) -> LabelPassResult:
        """Remove status labels from issues closed or updated since the last run.

        Closed issues are scanned by descending update time; the scan ends at
        the first issue updated before last_run_time. An issue updated exactly
        at last_run_time is still cleaned.

        Args:
            last_run_time: Start of the window of changed issues

        Returns:
            LabelPassResult with the number of inspected issues and applied changes
        """
        result = LabelPassResult()

        for issue in self.source.list_issues("updated_at", "desc", IssueState.CLOSED):
            if issue.updated_at < last_run_time:
                break
            result.inspected += 1

            labels = issue.labels
            for status_label in self.taxonomy.status:
                if status_label in labels:
                    labels = self._apply(issue, labels, status_label, LabelAction.REMOVE, result)

        logger.info(
            "Cleaned labels: %d closed issue(s) inspected, %d change(s)",
            result.inspected,
            len(result.changes),
        )
        return result
