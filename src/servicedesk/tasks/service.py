from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_int_range, require_min_length
from ..core.constants import DEFAULT_LIST_LIMIT, TASK_PRIORITY_MAX, TASK_PRIORITY_MIN, TASK_TITLE_MIN_LENGTH
from ..core.context import ActorContext
from ..core.enums import Role, TaskStatus
from ..core.exceptions import AuthorizationError, InvalidTransition, NotFound, ValidationError
from ..profiles.repository import ProfileRepository
from .model import Task
from .repository import TaskRepository

logger = logging.getLogger(__name__)

_START_FROM = frozenset({TaskStatus.PENDING})
_COMPLETE_FROM = frozenset({TaskStatus.PENDING, TaskStatus.IN_PROGRESS})


class TaskService:
    def __init__(
        self,
        tasks: TaskRepository,
        profiles: ProfileRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._tasks = tasks
        self._profiles = profiles
        self._clock = clock

    def list_mine(self, actor: ActorContext, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[Task]:
        return self._tasks.list_tasks(assigned_to=actor.user_id, limit=limit)

    def list_all(self, actor: ActorContext, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[Task]:
        if not actor.is_lead:
            raise AuthorizationError("Only leads can view all tasks")
        return self._tasks.list_tasks(limit=limit)

    def create_self_assigned(
        self,
        actor: ActorContext,
        *,
        title: str,
        description: Optional[str] = None,
        priority: object = TASK_PRIORITY_MIN,
        due_date: Optional[datetime] = None,
    ) -> Task:
        return self._create(
            actor,
            assigned_to=actor.user_id,
            title=title,
            description=description,
            priority=priority,
            due_date=due_date,
        )

    def assign(
        self,
        actor: ActorContext,
        *,
        assigned_to: object,
        title: str,
        description: Optional[str] = None,
        priority: object = TASK_PRIORITY_MIN,
        due_date: Optional[datetime] = None,
    ) -> Task:
        if not actor.is_lead:
            raise AuthorizationError("Only leads can assign tasks")

        try:
            assignee_id = int(assigned_to)
        except (TypeError, ValueError):
            raise ValidationError("Please select a valid analyst")

        assignee = self._profiles.get_by_user_id(assignee_id)
        if not assignee or assignee.role != Role.ANALYST:
            raise ValidationError("Please select a valid analyst")

        return self._create(
            actor,
            assigned_to=assignee.user_id,
            title=title,
            description=description,
            priority=priority,
            due_date=due_date,
        )

    def start(self, actor: ActorContext, task_id: int) -> Task:
        task = self._get_for_assignee(actor, task_id)
        return self._set_status(actor, task, _START_FROM, TaskStatus.IN_PROGRESS)

    def complete(self, actor: ActorContext, task_id: int) -> Task:
        task = self._get_for_assignee(actor, task_id)
        return self._set_status(actor, task, _COMPLETE_FROM, TaskStatus.COMPLETED, completed_at=self._clock())

    def delete(self, actor: ActorContext, task_id: int) -> None:
        task = self._get_or_404(task_id)
        if not (actor.owns(task.assigned_to) or actor.owns(task.assigned_by)):
            raise AuthorizationError("You can only remove tasks you assigned or own")
        if not self._tasks.delete(task_id=task.task_id):
            raise NotFound("Task not found")
        logger.info("Task %s removed by %s", task.task_id, actor.user_id)

    def _create(
        self,
        actor: ActorContext,
        *,
        assigned_to: int,
        title: str,
        description: Optional[str],
        priority: object,
        due_date: Optional[datetime],
    ) -> Task:
        title = require_min_length(title, "Title", TASK_TITLE_MIN_LENGTH).strip()
        priority = require_int_range(priority, "Priority", TASK_PRIORITY_MIN, TASK_PRIORITY_MAX)
        description = optional_text(description, "Description")

        task_id = self._tasks.create(
            title=title,
            description=description,
            assigned_to=int(assigned_to),
            assigned_by=actor.user_id,
            priority=priority,
            due_date=due_date,
        )
        logger.info("Task %s created for %s by %s", task_id, assigned_to, actor.user_id)
        return self._get_or_404(task_id)

    def _set_status(
        self,
        actor: ActorContext,
        task: Task,
        expected: frozenset,
        status: TaskStatus,
        *,
        completed_at: Optional[datetime] = None,
    ) -> Task:
        if task.status not in expected:
            raise InvalidTransition(f"Task is already {task.status.value}")

        if not self._tasks.set_status(task_id=task.task_id, expected=expected, status=status, completed_at=completed_at):
            logger.warning("Lost race on task %s (%s by %s)", task.task_id, status.value, actor.user_id)
            raise InvalidTransition("The task was changed in the meantime; reload and try again")
        return self._get_or_404(task.task_id)

    def _get_for_assignee(self, actor: ActorContext, task_id: int) -> Task:
        task = self._get_or_404(task_id)
        if not (actor.owns(task.assigned_to) or actor.is_lead):
            raise AuthorizationError("You can only update your own tasks")
        return task

    def _get_or_404(self, task_id: int) -> Task:
        task = self._tasks.get(task_id=int(task_id))
        if not task:
            raise NotFound("Task not found")
        return task
