from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Any, Dict, Mapping, Optional

from ..core.constants import (
    DEFAULT_ACTIVE_DAYS,
    DEFAULT_BREAK_1,
    DEFAULT_BREAK_2,
    DEFAULT_END_TIME,
    DEFAULT_LUNCH,
    DEFAULT_START_TIME,
    WEEKDAY_KEYS,
)
from ..core.enums import Role, WorkMode
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class DaySchedule:
    active: bool
    mode: WorkMode = WorkMode.OFFICE

    def to_dict(self) -> dict:
        return {"active": self.active, "mode": self.mode.value}


@dataclass(frozen=True)
class WorkDays:
    """Weekly work-day table keyed by weekday abbreviation (mon..sun)."""

    days: Mapping[str, DaySchedule] = field(default_factory=dict)

    @classmethod
    def default(cls) -> "WorkDays":
        return cls(
            {key: DaySchedule(active=key in DEFAULT_ACTIVE_DAYS, mode=WorkMode.OFFICE) for key in WEEKDAY_KEYS}
        )

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]], *, strict: bool = False) -> "WorkDays":
        """Build from the JSON shape {"mon": {"active": true, "mode": "office"}, ...}.

        With strict=False (rows read back from storage) missing days are
        treated as inactive; strict=True (lead edits) requires all seven.
        """
        raw = raw or {}
        days: Dict[str, DaySchedule] = {}
        for key in WEEKDAY_KEYS:
            entry = raw.get(key)
            if entry is None:
                if strict:
                    raise ValidationError(f"Work day '{key}' is missing")
                days[key] = DaySchedule(active=False)
                continue
            if not isinstance(entry, Mapping):
                if strict:
                    raise ValidationError(f"Work day '{key}' must be an object with 'active' and 'mode'")
                days[key] = DaySchedule(active=False)
                continue
            active = entry.get("active", False)
            if strict and not isinstance(active, bool):
                raise ValidationError(f"'active' for '{key}' must be true or false")
            try:
                mode = WorkMode(entry.get("mode") or WorkMode.OFFICE.value)
            except (TypeError, ValueError):
                raise ValidationError(f"Work mode for '{key}' must be 'office' or 'home'")
            days[key] = DaySchedule(active=bool(active), mode=mode)
        return cls(days)

    def get(self, key: str) -> Optional[DaySchedule]:
        return self.days.get(key)

    def to_dict(self) -> dict:
        return {key: self.days[key].to_dict() for key in WEEKDAY_KEYS if key in self.days}


@dataclass(frozen=True)
class Profile:
    """Per-user profile: identity reference, role and weekly schedule."""

    profile_id: int
    user_id: int
    name: str
    role: Role
    work_days: WorkDays = field(default_factory=WorkDays.default)
    start_time: Optional[time] = DEFAULT_START_TIME
    end_time: Optional[time] = DEFAULT_END_TIME
    lunch_start: Optional[time] = DEFAULT_LUNCH[0]
    lunch_end: Optional[time] = DEFAULT_LUNCH[1]
    break1_start: Optional[time] = DEFAULT_BREAK_1[0]
    break1_end: Optional[time] = DEFAULT_BREAK_1[1]
    break2_start: Optional[time] = DEFAULT_BREAK_2[0]
    break2_end: Optional[time] = DEFAULT_BREAK_2[1]
    avatar_url: Optional[str] = None
    area: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def shift_start(self) -> time:
        return self.start_time or DEFAULT_START_TIME

    @property
    def shift_end(self) -> time:
        return self.end_time or DEFAULT_END_TIME


@dataclass(frozen=True)
class ShiftSchedule:
    """Schedule fields a lead edits in one go."""

    start_time: time
    end_time: time
    lunch_start: time
    lunch_end: time
    break1_start: time
    break1_end: time
    break2_start: time
    break2_end: time
    work_days: WorkDays


def _hhmm(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M") if value else None


def profile_to_dict(p: Profile) -> dict:
    return {
        "profile_id": p.profile_id,
        "user_id": p.user_id,
        "name": p.name,
        "role": p.role.value,
        "avatar_url": p.avatar_url,
        "area": p.area,
        "start_time": _hhmm(p.shift_start),
        "end_time": _hhmm(p.shift_end),
        "lunch_start": _hhmm(p.lunch_start),
        "lunch_end": _hhmm(p.lunch_end),
        "break1_start": _hhmm(p.break1_start),
        "break1_end": _hhmm(p.break1_end),
        "break2_start": _hhmm(p.break2_start),
        "break2_end": _hhmm(p.break2_end),
        "work_days": p.work_days.to_dict(),
    }
