from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Profile, ShiftSchedule


class ProfileRepository(Protocol):
    """Profile store interface.

    Services depend on this protocol, never on a concrete database.
    """

    def get_by_user_id(self, user_id: int) -> Optional[Profile]:
        raise NotImplementedError

    def list_profiles(self, *, role: Optional[Role] = None, exclude_user_id: Optional[int] = None) -> Sequence[Profile]:
        raise NotImplementedError

    def update_self_service(self, *, user_id: int, name: str, area: Optional[str], avatar_url: Optional[str]) -> bool:
        raise NotImplementedError

    def update_schedule(self, *, user_id: int, schedule: ShiftSchedule) -> bool:
        raise NotImplementedError

    def delete_with_dependents(self, *, user_id: int) -> bool:
        """Delete tasks, absence requests, profile and identity in one transaction."""

        raise NotImplementedError
