from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .absences.mysql_absence_repository import MySQLAbsenceRepository
from .absences.repository import AbsenceRepository
from .absences.service import AbsenceService
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .dashboards.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .profiles.mysql_profile_repository import MySQLProfileRepository
from .profiles.repository import ProfileRepository
from .profiles.service import ProfileService
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.repository import TaskRepository
from .tasks.service import TaskService
from .team_calendar.service import TeamCalendarService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    profiles_repo: ProfileRepository
    absences_repo: AbsenceRepository
    tasks_repo: TaskRepository

    auth_service: AuthService
    profile_service: ProfileService
    absence_service: AbsenceService
    attendance_service: AttendanceService
    task_service: TaskService
    team_calendar_service: TeamCalendarService
    dashboard_service: DashboardService


def assemble(
    *,
    users_repo: UserRepository,
    profiles_repo: ProfileRepository,
    absences_repo: AbsenceRepository,
    tasks_repo: TaskRepository,
    conn: Optional[DatabaseConnection] = None,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    """Wire services on top of any repository implementations."""
    auth_service = AuthService(users_repo, profiles_repo)
    profile_service = ProfileService(profiles_repo)
    absence_service = AbsenceService(absences_repo, clock=clock)
    attendance_service = AttendanceService(profiles_repo, absences_repo, clock=clock)
    task_service = TaskService(tasks_repo, profiles_repo, clock=clock)
    team_calendar_service = TeamCalendarService(absences_repo, clock=clock)
    dashboard_service = DashboardService(
        absence_service,
        task_service,
        profile_service,
        attendance_service,
        clock=clock,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        profiles_repo=profiles_repo,
        absences_repo=absences_repo,
        tasks_repo=tasks_repo,
        auth_service=auth_service,
        profile_service=profile_service,
        absence_service=absence_service,
        attendance_service=attendance_service,
        task_service=task_service,
        team_calendar_service=team_calendar_service,
        dashboard_service=dashboard_service,
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble(
        users_repo=MySQLUserRepository(conn),
        profiles_repo=MySQLProfileRepository(conn),
        absences_repo=MySQLAbsenceRepository(conn),
        tasks_repo=MySQLTaskRepository(conn),
        conn=conn,
    )
