"""Data models for the label engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class LabelAction(str, Enum):
    """Kind of label mutation."""

    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True)
class LabelChange:
    """A single label mutation applied to an issue."""

    issue_iid: int
    title: str
    label: str
    action: LabelAction


@dataclass
class LabelPassResult:
    """Result of a label pass.

    Attributes:
        inspected: Issues whose labels were evaluated.
        changes: Mutations applied, in order.
    """

    inspected: int = 0
    changes: list[LabelChange] = field(default_factory=list)


def with_label(labels: tuple[str, ...], label: str) -> tuple[str, ...]:
    """Label set with label appended, unless already present."""
    if label in labels:
        return labels
    return (*labels, label)


def without_label(labels: tuple[str, ...], label: str) -> tuple[str, ...]:
    return tuple(existing for existing in labels if existing != label)
