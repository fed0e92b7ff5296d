from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Dict, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_date_order, require_min_length, require_non_empty
from ..core.constants import ABSENCE_DETAILS_MIN_LENGTH, ABSENCE_MAX_DAYS, ABSENCE_REASONS, DEFAULT_LIST_LIMIT
from ..core.context import ActorContext
from ..core.enums import AbsenceAction, AbsenceStatus, Role
from ..core.exceptions import AuthorizationError, InvalidTransition, NotFound, ValidationError
from .model import DELETABLE_STATUSES, AbsenceRequest, TransitionActor, transition_for
from .repository import AbsenceRepository

logger = logging.getLogger(__name__)


def compose_reason(category: str, details: str) -> str:
    """Build the stored reason from a predefined category and free-text details."""
    if category not in ABSENCE_REASONS:
        raise ValidationError("Please select a valid reason")
    details = require_min_length(details, "Details", ABSENCE_DETAILS_MIN_LENGTH).strip()
    return f"{category} - {details}"


class AbsenceService:
    """Absence request lifecycle.

    Every operation takes the acting user explicitly. Role and ownership are
    checked here, then the status change is committed with a guarded update
    (``WHERE status = <expected>``) so concurrent actions cannot both win.
    """

    def __init__(self, requests: AbsenceRepository, *, clock: Callable[[], datetime] = now_local):
        self._requests = requests
        self._clock = clock

    # -------- Queries --------
    def get(self, actor: ActorContext, request_id: int) -> AbsenceRequest:
        req = self._get_or_404(request_id)
        if not (actor.is_lead or actor.owns(req.analyst_id)):
            raise AuthorizationError("You do not have permission")
        return req

    def list_mine(self, actor: ActorContext, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[AbsenceRequest]:
        return self._requests.list_requests(analyst_id=actor.user_id, limit=limit)

    def list_pending(self, actor: ActorContext, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[AbsenceRequest]:
        self._require_lead(actor)
        return self._requests.list_requests(status=AbsenceStatus.PENDING, limit=limit)

    def list_cancellation_requests(
        self, actor: ActorContext, *, limit: int = DEFAULT_LIST_LIMIT
    ) -> Sequence[AbsenceRequest]:
        self._require_lead(actor)
        return self._requests.list_requests(status=AbsenceStatus.CANCEL_REQUESTED, limit=limit)

    def approved_covering(self, day: date) -> Sequence[AbsenceRequest]:
        return self._requests.list_approved_between(start=day, end=day)

    def approved_between(self, start: date, end: date) -> Sequence[AbsenceRequest]:
        require_date_order(start, end)
        return self._requests.list_approved_between(start=start, end=end)

    # -------- Analyst actions --------
    def create(
        self,
        actor: ActorContext,
        *,
        start_date: date,
        end_date: date,
        reason: str,
        category: Optional[str] = None,
    ) -> AbsenceRequest:
        if actor.role != Role.ANALYST:
            raise AuthorizationError("Only analysts can request time off")

        require_date_order(start_date, end_date)
        if (end_date - start_date).days + 1 > ABSENCE_MAX_DAYS:
            raise ValidationError(f"An absence cannot be longer than {ABSENCE_MAX_DAYS} days")
        if category:
            reason = compose_reason(category, reason)
        else:
            reason = require_non_empty(reason, "Reason")

        request_id = self._requests.create(
            analyst_id=actor.user_id,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
        )
        logger.info("Absence request %s created by %s (%s..%s)", request_id, actor.user_id, start_date, end_date)
        return self._get_or_404(request_id)

    def cancel(self, actor: ActorContext, request_id: int) -> AbsenceRequest:
        """Withdraw a request that has not been decided yet."""
        return self._transition(actor, request_id, AbsenceAction.CANCEL, {"canceled_at": self._clock()})

    def request_cancellation(self, actor: ActorContext, request_id: int, *, cancel_reason: str) -> AbsenceRequest:
        cancel_reason = require_non_empty(cancel_reason, "Cancellation reason")
        return self._transition(
            actor, request_id, AbsenceAction.REQUEST_CANCELLATION, {"cancel_reason": cancel_reason}
        )

    def delete(self, actor: ActorContext, request_id: int) -> None:
        """Dismiss a processed request from the owner's list."""
        req = self._get_or_404(request_id)
        if not actor.owns(req.analyst_id):
            raise AuthorizationError("You can only remove your own requests")
        if req.status not in DELETABLE_STATUSES:
            raise InvalidTransition(f"A {req.status.value} request cannot be removed")

        deleted = self._requests.delete_processed(
            request_id=req.request_id,
            analyst_id=actor.user_id,
            statuses=DELETABLE_STATUSES,
        )
        if not deleted:
            logger.warning("Absence request %s changed before delete by %s", request_id, actor.user_id)
            raise InvalidTransition("The request was changed in the meantime; reload and try again")
        logger.info("Absence request %s removed by %s", request_id, actor.user_id)

    # -------- Lead actions --------
    def approve(self, actor: ActorContext, request_id: int, *, comment: str = "") -> AbsenceRequest:
        changes: Dict[str, object] = {
            "approved_by": actor.user_id,
            "lead_comment": optional_text(comment, "Comment"),
        }
        return self._transition(actor, request_id, AbsenceAction.APPROVE, changes)

    def reject(self, actor: ActorContext, request_id: int, *, comment: str) -> AbsenceRequest:
        comment = require_non_empty(comment, "A comment explaining the rejection")
        return self._transition(actor, request_id, AbsenceAction.REJECT, {"lead_comment": comment})

    def approve_cancellation(self, actor: ActorContext, request_id: int) -> AbsenceRequest:
        return self._transition(
            actor, request_id, AbsenceAction.APPROVE_CANCELLATION, {"canceled_at": self._clock()}
        )

    def reject_cancellation(self, actor: ActorContext, request_id: int) -> AbsenceRequest:
        """Keep the absence: revert to approved. lead_comment is left as it was."""
        return self._transition(actor, request_id, AbsenceAction.REJECT_CANCELLATION, {"cancel_reason": None})

    # -------- Internals --------
    def _transition(
        self,
        actor: ActorContext,
        request_id: int,
        action: AbsenceAction,
        changes: Dict[str, object],
    ) -> AbsenceRequest:
        rule = transition_for(action)
        req = self._get_or_404(request_id)

        if rule.actor is TransitionActor.LEAD:
            self._require_lead(actor)
        elif not actor.owns(req.analyst_id):
            raise AuthorizationError("You can only change your own requests")

        if req.status != rule.source:
            raise InvalidTransition(
                f"Cannot {action.value.replace('_', ' ')}: request is {req.status.value}"
            )

        applied = self._requests.apply_transition(
            request_id=req.request_id,
            expected=rule.source,
            target=rule.target,
            changes=changes,
        )
        if not applied:
            logger.warning(
                "Lost race on absence request %s: %s by %s no longer applies",
                request_id,
                action.value,
                actor.user_id,
            )
            raise InvalidTransition("The request was changed in the meantime; reload and try again")

        logger.info(
            "Absence request %s: %s -> %s (%s by %s)",
            request_id,
            rule.source.value,
            rule.target.value,
            action.value,
            actor.user_id,
        )
        return self._get_or_404(request_id)

    def _get_or_404(self, request_id: int) -> AbsenceRequest:
        req = self._requests.get(request_id=int(request_id))
        if not req:
            raise NotFound("Absence request not found")
        return req

    @staticmethod
    def _require_lead(actor: ActorContext) -> None:
        if not actor.is_lead:
            raise AuthorizationError("Only leads can review absence requests")
