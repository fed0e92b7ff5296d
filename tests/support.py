"""In-memory repositories used across the test suite.

They follow the same contracts as the MySQL repositories, including the
guarded (expected-status) updates.
"""

from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Collection, Dict, Mapping, Optional, Sequence

from servicedesk.absences.model import TRANSITION_FIELDS, AbsenceRequest
from servicedesk.core.enums import AbsenceStatus, Role, TaskStatus
from servicedesk.profiles.model import Profile, ShiftSchedule, WorkDays
from servicedesk.tasks.model import Task
from servicedesk.users.model import User

CREATED_AT = datetime(2024, 2, 20, 9, 0)

LEAD_ID = 1
ANALYST_ID = 2
OTHER_ANALYST_ID = 3


def make_profile(user_id: int, name: str, role: Role = Role.ANALYST, **overrides) -> Profile:
    return Profile(
        profile_id=user_id,
        user_id=user_id,
        name=name,
        role=role,
        work_days=overrides.pop("work_days", WorkDays.default()),
        **overrides,
    )


class InMemoryDB:
    def __init__(self):
        self.users: Dict[int, User] = {}
        self.profiles: Dict[int, Profile] = {}
        self.absences: Dict[int, AbsenceRequest] = {}
        self.tasks: Dict[int, Task] = {}
        self._ids = itertools.count(100)

    def next_id(self) -> int:
        return next(self._ids)

    def name_of(self, user_id: int) -> Optional[str]:
        p = self.profiles.get(user_id)
        return p.name if p else None


class InMemoryUsers:
    def __init__(self, db: InMemoryDB):
        self._db = db

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._db.users.values() if u.email == email), None)

    def create_with_profile(self, *, email, password_hash, name, role, work_days) -> int:
        user_id = self._db.next_id()
        self._db.users[user_id] = User(user_id=user_id, email=email, password_hash=password_hash)
        self._db.profiles[user_id] = Profile(
            profile_id=user_id, user_id=user_id, name=name, role=role, work_days=work_days
        )
        return user_id


class InMemoryProfiles:
    def __init__(self, db: InMemoryDB):
        self._db = db

    def add(self, profile: Profile) -> Profile:
        self._db.profiles[profile.user_id] = profile
        return profile

    def get_by_user_id(self, user_id: int) -> Optional[Profile]:
        return self._db.profiles.get(int(user_id))

    def list_profiles(self, *, role=None, exclude_user_id=None) -> Sequence[Profile]:
        rows = [
            p
            for p in self._db.profiles.values()
            if (role is None or p.role == role) and (exclude_user_id is None or p.user_id != exclude_user_id)
        ]
        return sorted(rows, key=lambda p: p.name)

    def update_self_service(self, *, user_id, name, area, avatar_url) -> bool:
        p = self._db.profiles.get(int(user_id))
        if not p:
            return False
        self._db.profiles[p.user_id] = replace(p, name=name, area=area, avatar_url=avatar_url)
        return True

    def update_schedule(self, *, user_id: int, schedule: ShiftSchedule) -> bool:
        p = self._db.profiles.get(int(user_id))
        if not p:
            return False
        self._db.profiles[p.user_id] = replace(
            p,
            start_time=schedule.start_time,
            end_time=schedule.end_time,
            lunch_start=schedule.lunch_start,
            lunch_end=schedule.lunch_end,
            break1_start=schedule.break1_start,
            break1_end=schedule.break1_end,
            break2_start=schedule.break2_start,
            break2_end=schedule.break2_end,
            work_days=schedule.work_days,
        )
        return True

    def delete_with_dependents(self, *, user_id: int) -> bool:
        uid = int(user_id)
        self._db.tasks = {k: t for k, t in self._db.tasks.items() if t.assigned_to != uid}
        self._db.absences = {k: a for k, a in self._db.absences.items() if a.analyst_id != uid}
        self._db.users.pop(uid, None)
        return self._db.profiles.pop(uid, None) is not None


class InMemoryAbsences:
    def __init__(self, db: InMemoryDB):
        self._db = db
        # Called right before the guard is checked; lets tests simulate a concurrent writer.
        self.before_write: Optional[Callable[[int], None]] = None

    def add(self, request: AbsenceRequest) -> AbsenceRequest:
        self._db.absences[request.request_id] = request
        return request

    def _with_name(self, r: AbsenceRequest) -> AbsenceRequest:
        return replace(r, analyst_name=self._db.name_of(r.analyst_id))

    def create(self, *, analyst_id: int, start_date: date, end_date: date, reason: str) -> int:
        rid = self._db.next_id()
        self._db.absences[rid] = AbsenceRequest(
            request_id=rid,
            analyst_id=int(analyst_id),
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=AbsenceStatus.PENDING,
            created_at=CREATED_AT,
        )
        return rid

    def get(self, *, request_id: int) -> Optional[AbsenceRequest]:
        r = self._db.absences.get(int(request_id))
        return self._with_name(r) if r else None

    def list_requests(self, *, status=None, analyst_id=None, limit=200) -> Sequence[AbsenceRequest]:
        rows = [
            self._with_name(r)
            for r in self._db.absences.values()
            if (status is None or r.status == status) and (analyst_id is None or r.analyst_id == analyst_id)
        ]
        rows.sort(key=lambda r: (r.created_at, r.request_id), reverse=True)
        return rows[:limit]

    def list_approved_between(self, *, start: date, end: date) -> Sequence[AbsenceRequest]:
        rows = [
            self._with_name(r)
            for r in self._db.absences.values()
            if r.status == AbsenceStatus.APPROVED and r.start_date <= end and r.end_date >= start
        ]
        return sorted(rows, key=lambda r: (r.start_date, r.request_id))

    def apply_transition(
        self,
        *,
        request_id: int,
        expected: AbsenceStatus,
        target: AbsenceStatus,
        changes: Mapping[str, object],
    ) -> bool:
        assert set(changes) <= TRANSITION_FIELDS
        if self.before_write:
            self.before_write(int(request_id))
        r = self._db.absences.get(int(request_id))
        if not r or r.status != expected:
            return False
        self._db.absences[r.request_id] = replace(r, status=target, **changes)
        return True

    def delete_processed(self, *, request_id: int, analyst_id: int, statuses: Collection[AbsenceStatus]) -> bool:
        if self.before_write:
            self.before_write(int(request_id))
        r = self._db.absences.get(int(request_id))
        if not r or r.analyst_id != int(analyst_id) or r.status not in statuses:
            return False
        del self._db.absences[r.request_id]
        return True


class InMemoryTasks:
    def __init__(self, db: InMemoryDB):
        self._db = db
        self.before_write: Optional[Callable[[int], None]] = None

    def _with_names(self, t: Task) -> Task:
        return replace(
            t,
            assigned_to_name=self._db.name_of(t.assigned_to),
            assigned_by_name=self._db.name_of(t.assigned_by),
        )

    def create(self, *, title, description, assigned_to, assigned_by, priority, due_date) -> int:
        tid = self._db.next_id()
        self._db.tasks[tid] = Task(
            task_id=tid,
            title=title,
            description=description,
            assigned_to=int(assigned_to),
            assigned_by=int(assigned_by),
            priority=int(priority),
            status=TaskStatus.PENDING,
            due_date=due_date,
            created_at=CREATED_AT,
        )
        return tid

    def get(self, *, task_id: int) -> Optional[Task]:
        t = self._db.tasks.get(int(task_id))
        return self._with_names(t) if t else None

    def list_tasks(self, *, assigned_to=None, limit=200) -> Sequence[Task]:
        rows = [
            self._with_names(t)
            for t in self._db.tasks.values()
            if assigned_to is None or t.assigned_to == assigned_to
        ]
        rows.sort(key=lambda t: (t.created_at, t.task_id), reverse=True)
        return rows[:limit]

    def set_status(self, *, task_id, expected, status, completed_at=None) -> bool:
        if self.before_write:
            self.before_write(int(task_id))
        t = self._db.tasks.get(int(task_id))
        if not t or t.status not in expected:
            return False
        self._db.tasks[t.task_id] = replace(t, status=status, completed_at=completed_at)
        return True

    def delete(self, *, task_id: int) -> bool:
        return self._db.tasks.pop(int(task_id), None) is not None
