from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    LEAD = "lead"
    ANALYST = "analyst"

    @property
    def is_lead(self) -> bool:
        return self in (Role.LEAD, Role.ADMIN)


class WorkMode(str, Enum):
    OFFICE = "office"
    HOME = "home"


class AbsenceStatus(str, Enum):
    """Absence request lifecycle states as stored in the database."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCEL_REQUESTED = "cancel_requested"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (AbsenceStatus.REJECTED, AbsenceStatus.CANCELLED)


class AbsenceAction(str, Enum):
    """Every status-changing action an absence request accepts."""

    CANCEL = "cancel"
    REQUEST_CANCELLATION = "request_cancellation"
    APPROVE = "approve"
    REJECT = "reject"
    APPROVE_CANCELLATION = "approve_cancellation"
    REJECT_CANCELLATION = "reject_cancellation"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
