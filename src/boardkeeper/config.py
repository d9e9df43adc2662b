"""Configuration loading for Boardkeeper runs.

Settings come from the CI job environment; the label taxonomy has built-in
defaults and can be overridden with a YAML file.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from boardkeeper.exceptions import ConfigurationMissingError

STANDUP_TITLE_PREFIX = "Standup-Meetings/"
LOOKUP_START = date(2022, 4, 6)

TODAY_LABEL = "Today"
THIS_WEEK_LABEL = "ThisWeek"
NEXT_ACTIONS_LABEL = "NextActions"
RECURRING_LABEL = "🔁 Recurring"
TEST_LABEL = "Test"
PROGRESS_LABELS = ("Doing", "Waiting")
STATUS_LABELS = ("Doing", "Waiting", TODAY_LABEL, THIS_WEEK_LABEL, NEXT_ACTIONS_LABEL)

_WEEKDAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


@dataclass(frozen=True)
class LabelTaxonomy:
    """Fixed label sets the label engine and the standup writer work with.

    Control labels (urgency, staging, status, progress, recurring, test) are
    always treated as non-project labels, whatever `non_project` lists.
    """

    progress: tuple[str, ...] = PROGRESS_LABELS
    status: tuple[str, ...] = STATUS_LABELS
    non_project: tuple[str, ...] = ()
    today: str = TODAY_LABEL
    this_week: str = THIS_WEEK_LABEL
    next_actions: str = NEXT_ACTIONS_LABEL
    recurring: str = RECURRING_LABEL
    test: str = TEST_LABEL

    @property
    def non_project_labels(self) -> frozenset[str]:
        return frozenset(
            (
                *self.non_project,
                *self.progress,
                *self.status,
                self.today,
                self.this_week,
                self.next_actions,
                self.recurring,
                self.test,
            )
        )

    def project_labels(self, labels: Iterable[str]) -> list[str]:
        """Labels that name a project, in their original order."""
        excluded = self.non_project_labels
        return [label for label in labels if label not in excluded]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LabelTaxonomy:
        """Create a taxonomy from a mapping, falling back to defaults.

        Raises:
            ConfigurationMissingError: If a label set is not a list of strings.
        """
        defaults = cls()

        def _labels(key: str, default: tuple[str, ...]) -> tuple[str, ...]:
            value = data.get(key)
            if value is None:
                return default
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigurationMissingError(f"Label set '{key}' must be a list of strings")
            return tuple(value)

        def _label(key: str, default: str) -> str:
            value = data.get(key, default)
            if not isinstance(value, str) or not value:
                raise ConfigurationMissingError(f"Label '{key}' must be a non-empty string")
            return value

        return cls(
            progress=_labels("progress", defaults.progress),
            status=_labels("status", defaults.status),
            non_project=_labels("non_project", defaults.non_project),
            today=_label("today", defaults.today),
            this_week=_label("this_week", defaults.this_week),
            next_actions=_label("next_actions", defaults.next_actions),
            recurring=_label("recurring", defaults.recurring),
            test=_label("test", defaults.test),
        )


def load_taxonomy(path: Path | str) -> LabelTaxonomy:
    """Load a label taxonomy from a YAML file.

    Raises:
        ConfigurationMissingError: If the file doesn't exist or is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationMissingError(f"Labels file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationMissingError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return LabelTaxonomy()
    if not isinstance(data, dict):
        raise ConfigurationMissingError(
            f"Labels file must be a YAML mapping, got {type(data).__name__}"
        )
    return LabelTaxonomy.from_dict(data)


def parse_weekdays(value: str) -> frozenset[int]:
    """Parse 'mon,thu' into ISO weekday numbers (Monday is 1)."""
    days = set()
    for part in value.split(","):
        name = part.strip().lower()[:3]
        if not name:
            continue
        if name not in _WEEKDAYS:
            raise ConfigurationMissingError(f"Unknown weekday in STANDUP_WEEKDAYS: {part!r}")
        days.add(_WEEKDAYS.index(name) + 1)
    return frozenset(days)


@dataclass
class Settings:
    """Everything a run needs from its environment."""

    token: str
    api_url: str
    project_id: str
    group_wiki_id: str | None = None
    schedule_id: int | None = None
    force_standup_today: bool = False
    standup_weekdays: frozenset[int] = field(default_factory=frozenset)
    verify_tls: bool = True
    taxonomy: LabelTaxonomy = field(default_factory=LabelTaxonomy)

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> Settings:
        """Build settings from CI environment variables.

        Raises:
            ConfigurationMissingError: If a required variable is missing or malformed.
        """

        def _required(name: str, hint: str = "This tool must be run in a GitLab pipeline.") -> str:
            value = environ.get(name, "")
            if not value:
                raise ConfigurationMissingError(f"Environment variable '{name}' not found. {hint}")
            return value

        token = _required(
            "GITLAB_ISSUE_AUTOMATION_API_TOKEN",
            "Ensure this is set under the project CI/CD settings.",
        )
        api_url = _required("CI_API_V4_URL")
        project_id = _required("CI_PROJECT_ID")

        schedule_id = None
        raw_schedule = environ.get("RECURRING_TASKS_SCHEDULED_PIPELINE_ID", "")
        if raw_schedule:
            try:
                schedule_id = int(raw_schedule)
            except ValueError as e:
                raise ConfigurationMissingError(
                    "RECURRING_TASKS_SCHEDULED_PIPELINE_ID must be an integer, "
                    f"got {raw_schedule!r}"
                ) from e

        verify_tls = environ.get("BOARDKEEPER_VERIFY_TLS", "true").lower() not in ("0", "false")

        labels_file = environ.get("BOARDKEEPER_LABELS_FILE", "")
        taxonomy = load_taxonomy(labels_file) if labels_file else LabelTaxonomy()

        return cls(
            token=token,
            api_url=api_url,
            project_id=project_id,
            group_wiki_id=environ.get("GROUP_WIKI_ID") or None,
            schedule_id=schedule_id,
            force_standup_today=environ.get("FORCE_STANDUP_NOTES_FOR_TODAY", "") == "TRUE",
            standup_weekdays=parse_weekdays(environ.get("STANDUP_WEEKDAYS", "")),
            verify_tls=verify_tls,
            taxonomy=taxonomy,
        )
