from __future__ import annotations

from datetime import datetime

import pytest

from servicedesk.core.enums import TaskStatus
from servicedesk.core.exceptions import AuthorizationError, InvalidTransition, NotFound, ValidationError
from servicedesk.tasks.service import TaskService

from support import ANALYST_ID, LEAD_ID, OTHER_ANALYST_ID

NOW = datetime(2024, 3, 4, 16, 45)


@pytest.fixture
def service(tasks_repo, profiles_repo):
    return TaskService(tasks_repo, profiles_repo, clock=lambda: NOW)


def test_self_assigned_task_defaults(service, analyst):
    task = service.create_self_assigned(analyst, title="  Update runbook  ")

    assert task.title == "Update runbook"
    assert task.assigned_to == task.assigned_by == ANALYST_ID
    assert task.is_self_assigned
    assert task.status == TaskStatus.PENDING
    assert task.priority == 1
    assert task.description is None


@pytest.mark.parametrize("title", ["", "ab", "  ab  "])
def test_title_must_have_three_characters(service, analyst, title):
    with pytest.raises(ValidationError):
        service.create_self_assigned(analyst, title=title)


@pytest.mark.parametrize("priority", [0, 6, "high"])
def test_priority_out_of_range(service, analyst, priority):
    with pytest.raises(ValidationError):
        service.create_self_assigned(analyst, title="Patch printers", priority=priority)


def test_priority_from_form_string(service, analyst):
    assert service.create_self_assigned(analyst, title="Patch printers", priority="4").priority == 4


def test_lead_assigns_to_analyst(service, lead):
    task = service.assign(lead, assigned_to=str(ANALYST_ID), title="Review tickets", priority=3)

    assert task.assigned_to == ANALYST_ID
    assert task.assigned_by == LEAD_ID
    assert task.assigned_to_name == "Ana Analyst"
    assert task.assigned_by_name == "Lena Lead"
    assert not task.is_self_assigned


def test_analyst_cannot_assign(service, analyst):
    with pytest.raises(AuthorizationError):
        service.assign(analyst, assigned_to=OTHER_ANALYST_ID, title="Review tickets")


@pytest.mark.parametrize("assigned_to", [LEAD_ID, 999, "abc", None])
def test_assignee_must_be_an_analyst(service, lead, assigned_to):
    with pytest.raises(ValidationError):
        service.assign(lead, assigned_to=assigned_to, title="Review tickets")


def test_start_then_complete(service, analyst):
    task = service.create_self_assigned(analyst, title="Rotate keys")

    task = service.start(analyst, task.task_id)
    assert task.status == TaskStatus.IN_PROGRESS

    task = service.complete(analyst, task.task_id)
    assert task.status == TaskStatus.COMPLETED
    assert task.completed_at == NOW


def test_complete_directly_from_pending(service, analyst):
    task = service.create_self_assigned(analyst, title="Rotate keys")
    assert service.complete(analyst, task.task_id).status == TaskStatus.COMPLETED


def test_completed_task_cannot_move(service, analyst, tasks_repo):
    task = service.create_self_assigned(analyst, title="Rotate keys")
    service.complete(analyst, task.task_id)

    with pytest.raises(InvalidTransition):
        service.start(analyst, task.task_id)
    with pytest.raises(InvalidTransition):
        service.complete(analyst, task.task_id)
    assert tasks_repo.get(task_id=task.task_id).completed_at == NOW


def test_in_progress_task_cannot_restart(service, analyst):
    task = service.create_self_assigned(analyst, title="Rotate keys")
    service.start(analyst, task.task_id)

    with pytest.raises(InvalidTransition):
        service.start(analyst, task.task_id)


def test_other_analyst_cannot_update(service, analyst, other_analyst):
    task = service.create_self_assigned(analyst, title="Rotate keys")

    with pytest.raises(AuthorizationError):
        service.start(other_analyst, task.task_id)


def test_lost_race_on_status_change(service, analyst, tasks_repo):
    task = service.create_self_assigned(analyst, title="Rotate keys")

    def completes_first(task_id: int) -> None:
        tasks_repo.before_write = None
        service.complete(analyst, task_id)

    tasks_repo.before_write = completes_first

    with pytest.raises(InvalidTransition):
        service.start(analyst, task.task_id)
    assert tasks_repo.get(task_id=task.task_id).status == TaskStatus.COMPLETED


def test_delete_by_assignor_or_assignee(service, lead, analyst, other_analyst, tasks_repo):
    first = service.assign(lead, assigned_to=ANALYST_ID, title="Review tickets")
    second = service.assign(lead, assigned_to=ANALYST_ID, title="Review alerts")

    with pytest.raises(AuthorizationError):
        service.delete(other_analyst, first.task_id)

    service.delete(lead, first.task_id)
    service.delete(analyst, second.task_id)
    assert tasks_repo.list_tasks() == []


def test_missing_task(service, analyst):
    with pytest.raises(NotFound):
        service.start(analyst, 12345)


def test_listing(service, lead, analyst, other_analyst):
    service.create_self_assigned(analyst, title="Mine")
    service.assign(lead, assigned_to=OTHER_ANALYST_ID, title="Theirs")

    assert [t.title for t in service.list_mine(analyst)] == ["Mine"]
    assert {t.title for t in service.list_all(lead)} == {"Mine", "Theirs"}
    with pytest.raises(AuthorizationError):
        service.list_all(other_analyst)
