from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import PASSWORD_MIN_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from ..profiles.model import WorkDays
from ..profiles.repository import ProfileRepository
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    name: str
    role: Role


class AuthService:
    """Use case: sign up and authenticate (login)."""

    def __init__(self, users: UserRepository, profiles: ProfileRepository):
        self._users = users
        self._profiles = profiles

    @staticmethod
    def _normalize_email(email: str) -> str:
        email = require_non_empty(email, "Email").lower()
        if "@" not in email:
            raise ValidationError("Email is not valid")
        return email

    def sign_up(self, *, email: str, password: str, name: str) -> int:
        """Create an identity with its analyst profile. Returns user_id."""
        email = self._normalize_email(email)
        name = require_non_empty(name, "Name")
        require_min_length(password, "Password", PASSWORD_MIN_LENGTH)

        if self._users.get_by_email(email):
            raise ValidationError("Email is already registered")

        user_id = self._users.create_with_profile(
            email=email,
            password_hash=generate_password_hash(password),
            name=name,
            role=Role.ANALYST,
            work_days=WorkDays.default(),
        )
        logger.info("New analyst signed up: user_id=%s", user_id)
        return user_id

    def authenticate(self, email: str, password: str) -> SessionUser:
        if not isinstance(email, str) or not isinstance(password, str):
            raise AuthenticationError("Invalid email or password")

        user = self._users.get_by_email(email.strip().lower())
        if not user:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        profile = self._profiles.get_by_user_id(user.user_id)
        if not profile:
            raise AuthenticationError("Account has no profile")

        return SessionUser(user_id=user.user_id, name=profile.name, role=profile.role)
