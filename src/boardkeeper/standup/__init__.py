"""Standup - Standup notes wiki pages built from recently changed issues."""

from boardkeeper.standup.models import StandupResult
from boardkeeper.standup.render import (
    NO_NON_PROJECT_ISSUES,
    format_issue_line,
    render_report,
    report_title,
)
from boardkeeper.standup.writer import (
    StandupWriter,
    collect_projects,
    last_note_date,
    page_date,
    select_relevant,
)

__all__ = [
    "NO_NON_PROJECT_ISSUES",
    "StandupResult",
    "StandupWriter",
    "collect_projects",
    "format_issue_line",
    "last_note_date",
    "page_date",
    "render_report",
    "report_title",
    "select_relevant",
]
