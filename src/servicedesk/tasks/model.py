from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import TaskStatus


@dataclass(frozen=True)
class Task:
    task_id: int
    title: str
    assigned_to: int
    assigned_by: int
    priority: int
    status: TaskStatus
    created_at: datetime
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    assigned_to_name: Optional[str] = None
    assigned_by_name: Optional[str] = None

    @property
    def is_self_assigned(self) -> bool:
        return self.assigned_to == self.assigned_by


def _fmt_dt(value: Optional[datetime]) -> Optional[str]:
    return value.strftime("%Y-%m-%d %H:%M") if value else None


def task_to_dict(t: Task) -> dict:
    return {
        "task_id": t.task_id,
        "title": t.title,
        "description": t.description or "",
        "assigned_to": t.assigned_to,
        "assigned_to_name": t.assigned_to_name,
        "assigned_by": t.assigned_by,
        "assigned_by_name": t.assigned_by_name,
        "self_assigned": t.is_self_assigned,
        "priority": t.priority,
        "status": t.status.value,
        "due_date": _fmt_dt(t.due_date),
        "completed_at": _fmt_dt(t.completed_at),
        "created_at": _fmt_dt(t.created_at),
    }
