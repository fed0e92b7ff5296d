from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional

from ..absences.repository import AbsenceRepository
from ..common.datetime_utils import now_local
from ..core.enums import Role
from ..core.exceptions import NotFound
from ..profiles.model import Profile
from ..profiles.repository import ProfileRepository
from .evaluator import ShiftStatus, online_profiles, shift_status


class AttendanceService:
    """Loads roster and absence data and runs the evaluator on it."""

    def __init__(
        self,
        profiles: ProfileRepository,
        absences: AbsenceRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._profiles = profiles
        self._absences = absences
        self._clock = clock

    def online_now(
        self,
        *,
        role: Optional[Role] = Role.ANALYST,
        exclude_user_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[Profile]:
        now = now or self._clock()
        profiles = self._profiles.list_profiles(role=role, exclude_user_id=exclude_user_id)
        absences = self._absences.list_approved_between(start=now.date(), end=now.date())
        return online_profiles(profiles, absences, now)

    def shift_status_for(self, user_id: int, *, now: Optional[datetime] = None) -> ShiftStatus:
        now = now or self._clock()
        profile = self._profiles.get_by_user_id(int(user_id))
        if not profile:
            raise NotFound("Profile not found")
        absences = self._absences.list_approved_between(start=now.date(), end=now.date())
        return shift_status(profile, absences, now)
