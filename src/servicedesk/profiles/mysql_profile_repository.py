from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Profile, ShiftSchedule, WorkDays
from .repository import ProfileRepository

_COLUMNS = """
    profile_id, user_id, name, role, avatar_url, area,
    start_time, end_time, lunch_start, lunch_end,
    break1_start, break1_end, break2_start, break2_end,
    work_days, created_at, updated_at
"""


def _load_work_days(value: Any) -> WorkDays:
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        value = json.loads(value) if value else {}
    return WorkDays.from_dict(value)


def _row_to_profile(r: dict) -> Profile:
    return Profile(
        profile_id=int(r["profile_id"]),
        user_id=int(r["user_id"]),
        name=r["name"],
        role=Role(r["role"]),
        avatar_url=r.get("avatar_url"),
        area=r.get("area"),
        start_time=normalize_mysql_time(r.get("start_time")),
        end_time=normalize_mysql_time(r.get("end_time")),
        lunch_start=normalize_mysql_time(r.get("lunch_start")),
        lunch_end=normalize_mysql_time(r.get("lunch_end")),
        break1_start=normalize_mysql_time(r.get("break1_start")),
        break1_end=normalize_mysql_time(r.get("break1_end")),
        break2_start=normalize_mysql_time(r.get("break2_start")),
        break2_end=normalize_mysql_time(r.get("break2_end")),
        work_days=_load_work_days(r.get("work_days")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_user_id(self, user_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _row_to_profile(r) if r else None

    def list_profiles(self, *, role: Optional[Role] = None, exclude_user_id: Optional[int] = None) -> Sequence[Profile]:
        clauses = ["1=1"]
        params: list[object] = []
        if role is not None:
            clauses.append("role=%s")
            params.append(role.value)
        if exclude_user_id is not None:
            clauses.append("user_id<>%s")
            params.append(int(exclude_user_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE {where} ORDER BY name ASC", tuple(params))
            return [_row_to_profile(r) for r in fetchall(cur)]

    def update_self_service(self, *, user_id: int, name: str, area: Optional[str], avatar_url: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE profiles SET name=%s, area=%s, avatar_url=%s WHERE user_id=%s",
                (name, area, avatar_url, int(user_id)),
            )
            return cur.rowcount > 0

    def update_schedule(self, *, user_id: int, schedule: ShiftSchedule) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE profiles
                SET start_time=%s, end_time=%s, lunch_start=%s, lunch_end=%s,
                    break1_start=%s, break1_end=%s, break2_start=%s, break2_end=%s,
                    work_days=%s
                WHERE user_id=%s
                """,
                (
                    schedule.start_time,
                    schedule.end_time,
                    schedule.lunch_start,
                    schedule.lunch_end,
                    schedule.break1_start,
                    schedule.break1_end,
                    schedule.break2_start,
                    schedule.break2_end,
                    json.dumps(schedule.work_days.to_dict()),
                    int(user_id),
                ),
            )
            return cur.rowcount > 0

    def delete_with_dependents(self, *, user_id: int) -> bool:
        uid = int(user_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM tasks WHERE assigned_to=%s", (uid,))
            cur.execute("DELETE FROM absence_requests WHERE analyst_id=%s", (uid,))
            cur.execute("DELETE FROM profiles WHERE user_id=%s", (uid,))
            deleted = cur.rowcount > 0
            cur.execute("DELETE FROM users WHERE user_id=%s", (uid,))
            return deleted
