"""Label Engine - Urgency promotion and status label cleanup."""

from boardkeeper.labels.engine import LabelEngine, utc_now
from boardkeeper.labels.models import (
    LabelAction,
    LabelChange,
    LabelPassResult,
    with_label,
    without_label,
)

__all__ = [
    "LabelAction",
    "LabelChange",
    "LabelEngine",
    "LabelPassResult",
    "utc_now",
    "with_label",
    "without_label",
]
