from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: object, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: object, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value.strip()) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def optional_text(value: object, field_name: str) -> Optional[str]:
    """Stripped text, or None when blank or missing."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return value.strip() or None


def require_date_order(start: date, end: date) -> None:
    if end < start:
        raise ValidationError("End date must be on or after start date")


def require_int_range(value: object, field_name: str, low: int, high: int) -> int:
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if number < low or number > high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return number


def require_hhmm(value: object, field_name: str) -> time:
    """Accept a time object or an "HH:MM" / "HH:MM:SS" string."""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    v = (value or "").strip() if isinstance(value, str) else ""
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(v, fmt).time().replace(second=0)
        except ValueError:
            continue
    raise ValidationError(f"{field_name} must be a valid time (HH:MM)")


def require_window(start: time, end: time, label: str) -> None:
    if end <= start:
        raise ValidationError(f"{label} must end after it starts")
