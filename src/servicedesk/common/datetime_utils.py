from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ..core.constants import WEEKDAY_KEYS
from ..core.exceptions import ValidationError


def parse_iso_date(value: object, field_name: str = "Date") -> date:
    """Parse YYYY-MM-DD string into date."""
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a valid date (YYYY-MM-DD)")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"{field_name} must be a valid date (YYYY-MM-DD)")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now()


def weekday_key(day: date) -> str:
    return WEEKDAY_KEYS[day.weekday()]


def format_hhmm(value: Optional[time]) -> str:
    return value.strftime("%H:%M") if value else ""
