from __future__ import annotations

from datetime import datetime
from typing import Collection, Optional, Sequence

from ..core.enums import TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Task
from .repository import TaskRepository

_SELECT = """
    SELECT t.task_id, t.title, t.description, t.assigned_to, t.assigned_by,
           t.priority, t.status, t.due_date, t.completed_at, t.created_at, t.updated_at,
           pt.name AS assigned_to_name, pb.name AS assigned_by_name
    FROM tasks t
    LEFT JOIN profiles pt ON pt.user_id = t.assigned_to
    LEFT JOIN profiles pb ON pb.user_id = t.assigned_by
"""


def _row_to_task(r: dict) -> Task:
    return Task(
        task_id=int(r["task_id"]),
        title=r["title"],
        description=r.get("description"),
        assigned_to=int(r["assigned_to"]),
        assigned_by=int(r["assigned_by"]),
        priority=int(r.get("priority") or 1),
        status=TaskStatus(r["status"]),
        due_date=r.get("due_date"),
        completed_at=r.get("completed_at"),
        created_at=r["created_at"],
        updated_at=r.get("updated_at"),
        assigned_to_name=r.get("assigned_to_name"),
        assigned_by_name=r.get("assigned_by_name"),
    )


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        title: str,
        description: Optional[str],
        assigned_to: int,
        assigned_by: int,
        priority: int,
        due_date: Optional[datetime],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tasks(title, description, assigned_to, assigned_by, priority, status, due_date)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    title,
                    description,
                    int(assigned_to),
                    int(assigned_by),
                    int(priority),
                    TaskStatus.PENDING.value,
                    due_date,
                ),
            )
            return int(cur.lastrowid)

    def get(self, *, task_id: int) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE t.task_id=%s", (int(task_id),))
            r = fetchone(cur)
            return _row_to_task(r) if r else None

    def list_tasks(self, *, assigned_to: Optional[int] = None, limit: int = 200) -> Sequence[Task]:
        clauses = ["1=1"]
        params: list[object] = []
        if assigned_to is not None:
            clauses.append("t.assigned_to=%s")
            params.append(int(assigned_to))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {where} ORDER BY t.created_at DESC, t.task_id DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_row_to_task(r) for r in fetchall(cur)]

    def set_status(
        self,
        *,
        task_id: int,
        expected: Collection[TaskStatus],
        status: TaskStatus,
        completed_at: Optional[datetime] = None,
    ) -> bool:
        placeholders = ",".join(["%s"] * len(expected))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE tasks SET status=%s, completed_at=%s
                WHERE task_id=%s AND status IN ({placeholders})
                """,
                tuple([status.value, completed_at, int(task_id)] + [s.value for s in expected]),
            )
            return cur.rowcount > 0

    def delete(self, *, task_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM tasks WHERE task_id=%s", (int(task_id),))
            return cur.rowcount > 0
