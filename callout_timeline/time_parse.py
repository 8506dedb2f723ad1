from __future__ import annotations

import datetime as dt
from typing import Optional

DEFAULT_TICK_FORMAT = "%a %b %d %Y"
CALLOUT_DATE_FORMAT = "%m/%d/%Y, %I:%M:%S %p"


def parse_date(value: str) -> float:
    """
    Parse a calendar date (or date-time) string into milliseconds since the Unix epoch.

    Accepts ISO 8601 forms such as `2005-01-01` or `2005-01-01T12:30:00+02:00`. Values without an
    offset are read as UTC so the same document lays out identically on every host.
    """

    raw = (value or "").strip()
    if not raw:
        raise ValueError("Empty date string")
    try:
        parsed = dt.datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid date '{value}' (expected YYYY-MM-DD)") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed.timestamp() * 1000.0


def instant_to_datetime(instant: float) -> dt.datetime:
    epoch = dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc)
    return epoch + dt.timedelta(milliseconds=instant)


def format_tick_label(instant: float, tick_format: Optional[str] = None) -> str:
    return instant_to_datetime(instant).strftime(tick_format or DEFAULT_TICK_FORMAT)


def format_callout_date_label(instant: float) -> str:
    return instant_to_datetime(instant).strftime(CALLOUT_DATE_FORMAT)
