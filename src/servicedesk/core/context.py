from __future__ import annotations

from dataclasses import dataclass

from .enums import Role


@dataclass(frozen=True)
class ActorContext:
    """Who is performing an operation.

    Passed explicitly into every service call instead of reading a global
    session.
    """

    user_id: int
    role: Role

    @property
    def is_lead(self) -> bool:
        return self.role.is_lead

    def owns(self, user_id: int) -> bool:
        return int(user_id) == int(self.user_id)
