from __future__ import annotations

import json
from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from ..profiles.model import WorkDays
from .model import User
from .repository import UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, email, password_hash, created_at FROM users WHERE email=%s",
                (email,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return User(
                user_id=int(row["user_id"]),
                email=row["email"],
                password_hash=row["password_hash"],
                created_at=row.get("created_at"),
            )

    def create_with_profile(
        self,
        *,
        email: str,
        password_hash: str,
        name: str,
        role: Role,
        work_days: WorkDays,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO users(email, password_hash) VALUES(%s,%s)",
                (email, password_hash),
            )
            user_id = int(cur.lastrowid)
            cur.execute(
                "INSERT INTO profiles(user_id, name, role, work_days) VALUES(%s,%s,%s,%s)",
                (user_id, name, role.value, json.dumps(work_days.to_dict())),
            )
            return user_id
