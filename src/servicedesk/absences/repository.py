from __future__ import annotations

from datetime import date
from typing import Collection, Mapping, Optional, Protocol, Sequence

from ..core.enums import AbsenceStatus
from .model import AbsenceRequest


class AbsenceRepository(Protocol):
    def create(self, *, analyst_id: int, start_date: date, end_date: date, reason: str) -> int:
        """Insert a new pending request. Returns request_id."""

        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[AbsenceRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[AbsenceStatus] = None,
        analyst_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[AbsenceRequest]:
        """Newest first, joined with the analyst name."""

        raise NotImplementedError

    def list_approved_between(self, *, start: date, end: date) -> Sequence[AbsenceRequest]:
        """Approved requests overlapping the inclusive [start, end] range."""

        raise NotImplementedError

    def apply_transition(
        self,
        *,
        request_id: int,
        expected: AbsenceStatus,
        target: AbsenceStatus,
        changes: Mapping[str, object],
    ) -> bool:
        """Set status=target (plus changes) only if status is still expected.

        Returns False when no row matched: unknown id or a concurrent change.
        """

        raise NotImplementedError

    def delete_processed(
        self,
        *,
        request_id: int,
        analyst_id: int,
        statuses: Collection[AbsenceStatus],
    ) -> bool:
        raise NotImplementedError
