"""Tracker - Interfaces with GitLab for issues, labels and wiki pages."""

from boardkeeper.exceptions import NotFoundError, TransportError
from boardkeeper.tracker.adapter import EPOCH, GitLabTracker, IssuePages, issue_from_json
from boardkeeper.tracker.models import Issue, IssueState, WikiPage
from boardkeeper.tracker.protocols import IssueSource, LabelMutator, WikiStore

__all__ = [
    "EPOCH",
    "GitLabTracker",
    "Issue",
    "IssuePages",
    "IssueSource",
    "IssueState",
    "LabelMutator",
    "NotFoundError",
    "TransportError",
    "WikiPage",
    "WikiStore",
    "issue_from_json",
]
