"""Runner - Run driver for the scheduled job."""

from boardkeeper.runner.models import RunReport, StageOutcome
from boardkeeper.runner.runner import (
    ADAPT_STAGE,
    CLEAN_STAGE,
    LAST_RUN_STAGE,
    STANDUP_STAGE,
    RunHistory,
    Runner,
)

__all__ = [
    "ADAPT_STAGE",
    "CLEAN_STAGE",
    "LAST_RUN_STAGE",
    "STANDUP_STAGE",
    "RunHistory",
    "RunReport",
    "Runner",
    "StageOutcome",
]
