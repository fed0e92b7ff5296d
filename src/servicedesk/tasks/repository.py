from __future__ import annotations

from datetime import datetime
from typing import Collection, Optional, Protocol, Sequence

from ..core.enums import TaskStatus
from .model import Task


class TaskRepository(Protocol):
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
        raise NotImplementedError

    def get(self, *, task_id: int) -> Optional[Task]:
        raise NotImplementedError

    def list_tasks(self, *, assigned_to: Optional[int] = None, limit: int = 200) -> Sequence[Task]:
        raise NotImplementedError

    def set_status(
        self,
        *,
        task_id: int,
        expected: Collection[TaskStatus],
        status: TaskStatus,
        completed_at: Optional[datetime] = None,
    ) -> bool:
        """Guarded status update; False if the task is gone or no longer in expected."""

        raise NotImplementedError

    def delete(self, *, task_id: int) -> bool:
        raise NotImplementedError
