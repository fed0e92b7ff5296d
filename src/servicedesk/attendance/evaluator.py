"""Online / working-status computation.

Pure functions over a profile, the approved absences and a reference
instant. Nothing is cached: callers recompute on every request.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Iterable, List, Optional, Sequence

from ..absences.model import AbsenceRequest
from ..common.datetime_utils import format_hhmm, weekday_key
from ..core.enums import AbsenceStatus, WorkMode
from ..profiles.model import Profile


@dataclass(frozen=True)
class ShiftStatus:
    is_work_day: bool
    mode: Optional[WorkMode]
    shift: Optional[str]
    absent: bool
    on_break: Optional[str]
    online: bool


def _minute(value: time) -> time:
    return value.replace(second=0, microsecond=0)


def is_absent(profile: Profile, approved_absences: Iterable[AbsenceRequest], now: datetime) -> bool:
    today = now.date()
    return any(
        a.analyst_id == profile.user_id and a.status == AbsenceStatus.APPROVED and a.covers(today)
        for a in approved_absences
    )


def within_shift(profile: Profile, now: datetime) -> bool:
    """Inclusive "HH:MM" comparison. An overnight window (end < start) never matches."""
    current = _minute(now.time())
    return _minute(profile.shift_start) <= current <= _minute(profile.shift_end)


def is_online(profile: Profile, approved_absences: Iterable[AbsenceRequest], now: datetime) -> bool:
    schedule = profile.work_days.get(weekday_key(now.date()))
    if schedule is None or not schedule.active:
        return False
    if is_absent(profile, approved_absences, now):
        return False
    return within_shift(profile, now)


def current_break(profile: Profile, now: datetime) -> Optional[str]:
    """Name of the break window now falls in, if any. Breaks do not affect online status."""
    current = _minute(now.time())
    windows = (
        ("lunch", profile.lunch_start, profile.lunch_end),
        ("break1", profile.break1_start, profile.break1_end),
        ("break2", profile.break2_start, profile.break2_end),
    )
    for name, start, end in windows:
        if start and end and _minute(start) <= current < _minute(end):
            return name
    return None


def shift_status(profile: Profile, approved_absences: Sequence[AbsenceRequest], now: datetime) -> ShiftStatus:
    schedule = profile.work_days.get(weekday_key(now.date()))
    if schedule is None or not schedule.active:
        return ShiftStatus(is_work_day=False, mode=None, shift=None, absent=False, on_break=None, online=False)

    absent = is_absent(profile, approved_absences, now)
    online = is_online(profile, approved_absences, now)
    return ShiftStatus(
        is_work_day=True,
        mode=schedule.mode,
        shift=f"{format_hhmm(profile.shift_start)} - {format_hhmm(profile.shift_end)}",
        absent=absent,
        on_break=current_break(profile, now) if online else None,
        online=online,
    )


def online_profiles(
    profiles: Iterable[Profile], approved_absences: Sequence[AbsenceRequest], now: datetime
) -> List[Profile]:
    return [p for p in profiles if is_online(p, approved_absences, now)]


def shift_status_to_dict(s: ShiftStatus) -> dict:
    return {
        "is_work_day": s.is_work_day,
        "mode": s.mode.value if s.mode else None,
        "shift": s.shift,
        "absent": s.absent,
        "on_break": s.on_break,
        "online": s.online,
    }
