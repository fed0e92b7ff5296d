from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from ..profiles.model import WorkDays
from .model import User


class UserRepository(Protocol):
    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_with_profile(
        self,
        *,
        email: str,
        password_hash: str,
        name: str,
        role: Role,
        work_days: WorkDays,
    ) -> int:
        """Insert the identity and its profile together. Returns user_id."""

        raise NotImplementedError
