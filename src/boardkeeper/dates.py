"""Date helpers for due dates and standup page titles.

GitLab wikis turn '-' in a page title into a space, so standup titles use
en dashes (U+2013) between the date parts.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime

from boardkeeper.exceptions import DateParseError

SHORT_ISO_LAYOUT = "%Y-%m-%d"
EN_DASH = "–"

_DASHED_DATE = re.compile(r"^(\d{4}[-–]\d{2}[-–]\d{2}|\d{2}[-–]\d{2}[-–]\d{4})$")


def parse_short_iso(value: str) -> date:
    """Parse a 'YYYY-MM-DD' date."""
    try:
        return datetime.strptime(value, SHORT_ISO_LAYOUT).date()
    except ValueError as e:
        raise DateParseError(f"Invalid date {value!r}: {e}") from e


def parse_timestamp(value: str) -> datetime:
    """Parse a GitLab ISO 8601 timestamp into an aware datetime."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise DateParseError(f"Invalid timestamp {value!r}: {e}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def same_iso_week(a: date, b: date) -> bool:
    return a.isocalendar()[:2] == b.isocalendar()[:2]


def start_of_day(day: date, tz=UTC) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=tz)


def en_dash_date(day: date) -> str:
    return day.strftime(SHORT_ISO_LAYOUT).replace("-", EN_DASH)


def unescape_dashes(value: str) -> str:
    return value.replace(EN_DASH, "-")


def is_dashed_date(value: str) -> bool:
    return bool(_DASHED_DATE.match(value))


def parse_title_date(value: str) -> date:
    """Parse a standup title date in 'YYYY-MM-DD' or 'DD-MM-YYYY' form.

    Either '-' or an en dash may separate the parts.
    """
    if not is_dashed_date(value):
        raise DateParseError(f"Not a dashed date: {value!r}")
    plain = unescape_dashes(value)
    layout = SHORT_ISO_LAYOUT if len(plain.split("-")[0]) == 4 else "%d-%m-%Y"
    try:
        return datetime.strptime(plain, layout).date()
    except ValueError as e:
        raise DateParseError(f"Invalid date {value!r}: {e}") from e
