from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.validators import optional_text, require_hhmm, require_non_empty, require_window
from ..core.context import ActorContext
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFound, ValidationError
from .model import Profile, ShiftSchedule, WorkDays
from .repository import ProfileRepository

logger = logging.getLogger(__name__)


class ProfileService:
    """Use cases around profiles: self-service edits, lead schedule edits, removal."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def get(self, user_id: int) -> Profile:
        profile = self._profiles.get_by_user_id(int(user_id))
        if not profile:
            raise NotFound("Profile not found")
        return profile

    def list_analysts(self) -> Sequence[Profile]:
        return self._profiles.list_profiles(role=Role.ANALYST)

    def list_team(self, *, exclude_user_id: Optional[int] = None) -> Sequence[Profile]:
        return self._profiles.list_profiles(exclude_user_id=exclude_user_id)

    def update_self(
        self,
        actor: ActorContext,
        *,
        name: str,
        area: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> Profile:
        name = require_non_empty(name, "Name")
        area = optional_text(area, "Area")
        avatar_url = optional_text(avatar_url, "Avatar URL")

        if not self._profiles.update_self_service(user_id=actor.user_id, name=name, area=area, avatar_url=avatar_url):
            raise NotFound("Profile not found")
        return self.get(actor.user_id)

    def update_schedule(self, actor: ActorContext, *, user_id: int, data: Mapping[str, Any]) -> Profile:
        """Replace an analyst's shift, lunch, breaks and work days (lead only)."""
        if not actor.is_lead:
            raise AuthorizationError("Only leads can edit schedules")

        schedule = self.parse_schedule(data)
        if not self._profiles.update_schedule(user_id=int(user_id), schedule=schedule):
            raise NotFound("Profile not found")

        logger.info("Schedule updated for user %s by %s", user_id, actor.user_id)
        return self.get(user_id)

    @staticmethod
    def parse_schedule(data: Mapping[str, Any]) -> ShiftSchedule:
        t = {
            key: require_hhmm(data.get(key), label)
            for key, label in (
                ("start_time", "Start time"),
                ("end_time", "End time"),
                ("lunch_start", "Lunch start"),
                ("lunch_end", "Lunch end"),
                ("break1_start", "Break 1 start"),
                ("break1_end", "Break 1 end"),
                ("break2_start", "Break 2 start"),
                ("break2_end", "Break 2 end"),
            )
        }
        require_window(t["start_time"], t["end_time"], "Shift")
        require_window(t["lunch_start"], t["lunch_end"], "Lunch")
        require_window(t["break1_start"], t["break1_end"], "Break 1")
        require_window(t["break2_start"], t["break2_end"], "Break 2")

        raw_days = data.get("work_days")
        if not isinstance(raw_days, Mapping):
            raise ValidationError("Work days are required")
        work_days = WorkDays.from_dict(raw_days, strict=True)

        return ShiftSchedule(work_days=work_days, **t)

    def remove_analyst(self, actor: ActorContext, *, user_id: int) -> None:
        if not actor.is_lead:
            raise AuthorizationError("Only leads can remove analysts")

        profile = self.get(user_id)
        if profile.role != Role.ANALYST:
            raise ValidationError("Only analyst accounts can be removed")

        if not self._profiles.delete_with_dependents(user_id=profile.user_id):
            raise NotFound("Profile not found")
        logger.info("Analyst %s removed by %s", profile.user_id, actor.user_id)
