"""Markdown rendering of standup notes."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from boardkeeper.config import STANDUP_TITLE_PREFIX
from boardkeeper.dates import en_dash_date
from boardkeeper.tracker.models import Issue

TABLE_HEADER = (
    "| :rainbow: Project | :back: What I did | :soon: What I will do "
    "| :warning:️ Problems | :pencil: Notes |\n"
    "|-------------------|-------------------|-----------------------"
    "|--------------------|----------------|\n"
)
NO_NON_PROJECT_ISSUES = "_No non-project issues present_"


def report_title(day: date, prefix: str = STANDUP_TITLE_PREFIX) -> str:
    return prefix + en_dash_date(day)


def format_issue_line(issue: Issue) -> str:
    """One markdown list item: number, title, link, labels and state."""
    tags = ", ".join((*issue.labels, issue.state.value))
    return f"* [#{issue.iid} {issue.title}]({issue.url}) \\[{tags}\\]\n"


def render_report(issues: Sequence[Issue], projects: Sequence[str]) -> str:
    """Render the notes page.

    A table row per project is left blank for the meeting, followed by the
    issues of each project. An issue with several project labels is listed
    under each of them; issues listed under no project end up in the
    non-project section.
    """
    content = TABLE_HEADER
    for project in projects:
        content += f"| {project} |  |  |  |  |\n"
    content += "\n## Issues\n\n"

    covered: set[int] = set()
    for project in projects:
        content += f"### {project}\n\n"
        for issue in issues:
            if issue.has_label(project):
                covered.add(issue.id)
                content += format_issue_line(issue)

    content += "\n### Non-project issues\n\n"
    uncovered = [issue for issue in issues if issue.id not in covered]
    if not uncovered:
        content += NO_NON_PROJECT_ISSUES
    for issue in uncovered:
        content += format_issue_line(issue)
    return content
