from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional

from ..core.enums import AbsenceAction, AbsenceStatus


@dataclass(frozen=True)
class AbsenceRequest:
    request_id: int
    analyst_id: int
    start_date: date
    end_date: date
    reason: str
    status: AbsenceStatus
    created_at: datetime
    updated_at: Optional[datetime] = None
    lead_comment: Optional[str] = None
    cancel_reason: Optional[str] = None
    approved_by: Optional[int] = None
    canceled_at: Optional[datetime] = None
    # Read-model only: joined from profiles for display.
    analyst_name: Optional[str] = None

    def covers(self, day: date) -> bool:
        """True if the inclusive [start_date, end_date] range contains day."""
        return self.start_date <= day <= self.end_date

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days + 1


class TransitionActor(str, Enum):
    OWNER = "owner"
    LEAD = "lead"


@dataclass(frozen=True)
class Transition:
    source: AbsenceStatus
    target: AbsenceStatus
    actor: TransitionActor


# The complete edge set of the absence lifecycle. Anything not listed here is
# an invalid transition.
TRANSITIONS: Dict[AbsenceAction, Transition] = {
    AbsenceAction.CANCEL: Transition(AbsenceStatus.PENDING, AbsenceStatus.CANCELLED, TransitionActor.OWNER),
    AbsenceAction.REQUEST_CANCELLATION: Transition(
        AbsenceStatus.APPROVED, AbsenceStatus.CANCEL_REQUESTED, TransitionActor.OWNER
    ),
    AbsenceAction.APPROVE: Transition(AbsenceStatus.PENDING, AbsenceStatus.APPROVED, TransitionActor.LEAD),
    AbsenceAction.REJECT: Transition(AbsenceStatus.PENDING, AbsenceStatus.REJECTED, TransitionActor.LEAD),
    AbsenceAction.APPROVE_CANCELLATION: Transition(
        AbsenceStatus.CANCEL_REQUESTED, AbsenceStatus.CANCELLED, TransitionActor.LEAD
    ),
    AbsenceAction.REJECT_CANCELLATION: Transition(
        AbsenceStatus.CANCEL_REQUESTED, AbsenceStatus.APPROVED, TransitionActor.LEAD
    ),
}

# Processed requests the owner may dismiss from their list.
DELETABLE_STATUSES = frozenset({AbsenceStatus.APPROVED, AbsenceStatus.REJECTED, AbsenceStatus.CANCELLED})

# Columns a transition may write besides status.
TRANSITION_FIELDS = frozenset({"lead_comment", "cancel_reason", "approved_by", "canceled_at"})


def transition_for(action: AbsenceAction) -> Transition:
    return TRANSITIONS[action]


def _fmt_dt(value: Optional[datetime]) -> Optional[str]:
    return value.strftime("%Y-%m-%d %H:%M") if value else None


def absence_to_dict(r: AbsenceRequest) -> dict:
    return {
        "request_id": r.request_id,
        "analyst_id": r.analyst_id,
        "analyst_name": r.analyst_name,
        "start_date": r.start_date.strftime("%Y-%m-%d"),
        "end_date": r.end_date.strftime("%Y-%m-%d"),
        "duration_days": r.duration_days,
        "reason": r.reason,
        "status": r.status.value,
        "lead_comment": r.lead_comment or "",
        "cancel_reason": r.cancel_reason or "",
        "approved_by": r.approved_by,
        "created_at": _fmt_dt(r.created_at),
        "updated_at": _fmt_dt(r.updated_at),
        "canceled_at": _fmt_dt(r.canceled_at),
    }
