from __future__ import annotations

from datetime import date, time

import pytest

from servicedesk.absences.model import AbsenceRequest
from servicedesk.core.enums import AbsenceStatus, WorkMode
from servicedesk.core.exceptions import AuthorizationError, NotFound, ValidationError
from servicedesk.profiles.model import WorkDays
from servicedesk.profiles.service import ProfileService
from servicedesk.tasks.service import TaskService

from support import ANALYST_ID, CREATED_AT, LEAD_ID, OTHER_ANALYST_ID


def _schedule(**overrides) -> dict:
    data = {
        "start_time": "08:00",
        "end_time": "17:00",
        "lunch_start": "12:30",
        "lunch_end": "13:30",
        "break1_start": "10:00",
        "break1_end": "10:15",
        "break2_start": "15:00",
        "break2_end": "15:15",
        "work_days": {
            "mon": {"active": True, "mode": "home"},
            "tue": {"active": True, "mode": "office"},
            "wed": {"active": True, "mode": "office"},
            "thu": {"active": True, "mode": "office"},
            "fri": {"active": False, "mode": "office"},
            "sat": {"active": False, "mode": "office"},
            "sun": {"active": False, "mode": "office"},
        },
    }
    data.update(overrides)
    return data


@pytest.fixture
def service(profiles_repo):
    return ProfileService(profiles_repo)


def test_lead_updates_schedule(service, lead):
    profile = service.update_schedule(lead, user_id=ANALYST_ID, data=_schedule())

    assert profile.start_time == time(8, 0)
    assert profile.end_time == time(17, 0)
    assert profile.lunch_start == time(12, 30)
    assert profile.work_days.get("mon").mode == WorkMode.HOME
    assert profile.work_days.get("fri").active is False


def test_analyst_cannot_update_schedule(service, analyst):
    with pytest.raises(AuthorizationError):
        service.update_schedule(analyst, user_id=ANALYST_ID, data=_schedule())


@pytest.mark.parametrize(
    "overrides",
    [
        {"start_time": "18:00", "end_time": "09:00"},
        {"start_time": "22:00", "end_time": "06:00"},
        {"lunch_start": "13:00", "lunch_end": "13:00"},
        {"break1_start": "nope"},
        {"end_time": None},
        {"work_days": None},
        {"work_days": {"mon": {"active": True, "mode": "office"}}},
        {"work_days": {**_schedule()["work_days"], "mon": {"active": True, "mode": "beach"}}},
        {"work_days": {day: True for day in ("mon", "tue", "wed", "thu", "fri", "sat", "sun")}},
        {"work_days": {**_schedule()["work_days"], "sat": {"active": "false", "mode": "home"}}},
        {"work_days": {**_schedule()["work_days"], "sun": {"active": 1, "mode": "office"}}},
    ],
)
def test_invalid_schedule_is_rejected_and_not_stored(service, lead, profiles_repo, overrides):
    with pytest.raises(ValidationError):
        service.update_schedule(lead, user_id=ANALYST_ID, data=_schedule(**overrides))

    profile = profiles_repo.get_by_user_id(ANALYST_ID)
    assert profile.start_time == time(9, 0)
    assert profile.work_days == WorkDays.default()


def test_schedule_for_unknown_user(service, lead):
    with pytest.raises(NotFound):
        service.update_schedule(lead, user_id=999, data=_schedule())


def test_update_self_trims_and_blanks_optional_fields(service, analyst):
    profile = service.update_self(analyst, name="  Ana A.  ", area="  ", avatar_url=" https://img/ana.png ")

    assert profile.name == "Ana A."
    assert profile.area is None
    assert profile.avatar_url == "https://img/ana.png"


def test_update_self_requires_name(service, analyst):
    with pytest.raises(ValidationError):
        service.update_self(analyst, name=" ")


def test_listings(service):
    assert [p.name for p in service.list_analysts()] == ["Ana Analyst", "Omar Other"]
    assert [p.user_id for p in service.list_team(exclude_user_id=ANALYST_ID)] == [LEAD_ID, OTHER_ANALYST_ID]


def test_remove_analyst_cascades(service, lead, db, absences_repo, tasks_repo, profiles_repo):
    absences_repo.add(
        AbsenceRequest(
            request_id=1,
            analyst_id=ANALYST_ID,
            start_date=date(2024, 3, 1),
            end_date=date(2024, 3, 1),
            reason="Vacation",
            status=AbsenceStatus.PENDING,
            created_at=CREATED_AT,
        )
    )
    tasks = TaskService(tasks_repo, profiles_repo)
    tasks.create_self_assigned(lead, title="Lead chores")
    tasks.assign(lead, assigned_to=ANALYST_ID, title="Review tickets")

    service.remove_analyst(lead, user_id=ANALYST_ID)

    assert profiles_repo.get_by_user_id(ANALYST_ID) is None
    assert absences_repo.get(request_id=1) is None
    assert [t.title for t in tasks_repo.list_tasks()] == ["Lead chores"]


def test_only_leads_remove_and_only_analysts_are_removed(service, lead, analyst):
    with pytest.raises(AuthorizationError):
        service.remove_analyst(analyst, user_id=OTHER_ANALYST_ID)
    with pytest.raises(ValidationError):
        service.remove_analyst(lead, user_id=LEAD_ID)
    with pytest.raises(NotFound):
        service.remove_analyst(lead, user_id=999)
