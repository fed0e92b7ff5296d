from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from ..absences.model import absence_to_dict
from ..absences.service import AbsenceService
from ..attendance.evaluator import shift_status_to_dict
from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local
from ..core.context import ActorContext
from ..core.enums import AbsenceStatus, TaskStatus
from ..profiles.model import profile_to_dict
from ..profiles.service import ProfileService
from ..tasks.model import task_to_dict
from ..tasks.service import TaskService


class DashboardService:
    """Role-specific dashboard payloads composed from the feature services."""

    def __init__(
        self,
        absences: AbsenceService,
        tasks: TaskService,
        profiles: ProfileService,
        attendance: AttendanceService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._absences = absences
        self._tasks = tasks
        self._profiles = profiles
        self._attendance = attendance
        self._clock = clock

    def for_actor(self, actor: ActorContext, *, now: Optional[datetime] = None) -> dict:
        if actor.is_lead:
            return self.lead_view(actor, now=now)
        return self.analyst_view(actor, now=now)

    def analyst_view(self, actor: ActorContext, *, now: Optional[datetime] = None) -> dict:
        now = now or self._clock()
        requests = self._absences.list_mine(actor)
        tasks = self._tasks.list_mine(actor)
        online = self._attendance.online_now(role=None, exclude_user_id=actor.user_id, now=now)
        status = self._attendance.shift_status_for(actor.user_id, now=now)

        return {
            "role": actor.role.value,
            "shift": shift_status_to_dict(status),
            "requests": [absence_to_dict(r) for r in requests],
            "tasks": [task_to_dict(t) for t in tasks],
            "online": [profile_to_dict(p) for p in online],
            "counts": {
                "pending_requests": sum(1 for r in requests if r.status == AbsenceStatus.PENDING),
                "open_tasks": sum(1 for t in tasks if t.status != TaskStatus.COMPLETED),
                "online": len(online),
            },
        }

    def lead_view(self, actor: ActorContext, *, now: Optional[datetime] = None) -> dict:
        now = now or self._clock()
        pending = self._absences.list_pending(actor)
        cancellations = self._absences.list_cancellation_requests(actor)
        tasks = self._tasks.list_all(actor)
        analysts = self._profiles.list_analysts()
        online = self._attendance.online_now(now=now)

        return {
            "role": actor.role.value,
            "pending_requests": [absence_to_dict(r) for r in pending],
            "cancellation_requests": [absence_to_dict(r) for r in cancellations],
            "tasks": [task_to_dict(t) for t in tasks],
            "analysts": [profile_to_dict(p) for p in analysts],
            "online": [profile_to_dict(p) for p in online],
            "counts": {
                "pending_requests": len(pending),
                "cancellation_requests": len(cancellations),
                "active_tasks": sum(1 for t in tasks if t.status != TaskStatus.COMPLETED),
                "online": len(online),
                "analysts": len(analysts),
            },
        }
