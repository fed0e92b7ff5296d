from __future__ import annotations

from datetime import date
from typing import Collection, Mapping, Optional, Sequence

from ..core.enums import AbsenceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import TRANSITION_FIELDS, AbsenceRequest
from .repository import AbsenceRepository

_SELECT = """
    SELECT r.request_id, r.analyst_id, p.name AS analyst_name,
           r.start_date, r.end_date, r.reason, r.status,
           r.lead_comment, r.cancel_reason, r.approved_by,
           r.created_at, r.updated_at, r.canceled_at
    FROM absence_requests r
    LEFT JOIN profiles p ON p.user_id = r.analyst_id
"""


def _row_to_request(r: dict) -> AbsenceRequest:
    return AbsenceRequest(
        request_id=int(r["request_id"]),
        analyst_id=int(r["analyst_id"]),
        analyst_name=r.get("analyst_name"),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        status=AbsenceStatus(r["status"]),
        lead_comment=r.get("lead_comment"),
        cancel_reason=r.get("cancel_reason"),
        approved_by=r.get("approved_by"),
        created_at=r["created_at"],
        updated_at=r.get("updated_at"),
        canceled_at=r.get("canceled_at"),
    )


class MySQLAbsenceRepository(AbsenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, analyst_id: int, start_date: date, end_date: date, reason: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO absence_requests(analyst_id, start_date, end_date, reason, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(analyst_id), start_date, end_date, reason, AbsenceStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get(self, *, request_id: int) -> Optional[AbsenceRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE r.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _row_to_request(r) if r else None

    def list_requests(
        self,
        *,
        status: Optional[AbsenceStatus] = None,
        analyst_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[AbsenceRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)
        if analyst_id is not None:
            clauses.append("r.analyst_id=%s")
            params.append(int(analyst_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {where} ORDER BY r.created_at DESC, r.request_id DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def list_approved_between(self, *, start: date, end: date) -> Sequence[AbsenceRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE r.status=%s AND r.start_date <= %s AND r.end_date >= %s
                ORDER BY r.start_date ASC, r.request_id ASC
                """,
                (AbsenceStatus.APPROVED.value, end, start),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def apply_transition(
        self,
        *,
        request_id: int,
        expected: AbsenceStatus,
        target: AbsenceStatus,
        changes: Mapping[str, object],
    ) -> bool:
        unknown = set(changes) - TRANSITION_FIELDS
        if unknown:
            raise ValueError(f"Unsupported absence fields: {sorted(unknown)}")

        columns = sorted(changes)
        assignments = ", ".join(["status=%s"] + [f"{col}=%s" for col in columns])
        params = [target.value] + [changes[col] for col in columns]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE absence_requests SET {assignments} WHERE request_id=%s AND status=%s",
                tuple(params + [int(request_id), expected.value]),
            )
            return cur.rowcount > 0

    def delete_processed(
        self,
        *,
        request_id: int,
        analyst_id: int,
        statuses: Collection[AbsenceStatus],
    ) -> bool:
        placeholders = ",".join(["%s"] * len(statuses))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                DELETE FROM absence_requests
                WHERE request_id=%s AND analyst_id=%s AND status IN ({placeholders})
                """,
                tuple([int(request_id), int(analyst_id)] + [s.value for s in statuses]),
            )
            return cur.rowcount > 0
