from __future__ import annotations

from datetime import date, datetime

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)") from None


def to_day(value: date | datetime | str) -> date:
    """Reduce a session timestamp to its calendar day.

    Time-of-day never matters for aggregation, so ``datetime`` values and
    ISO timestamps (``2024-03-04T09:30:00``) collapse to the same day.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_iso_date(value.strip()[:10])
    raise ValidationError(f"Unsupported date value: {value!r}")
