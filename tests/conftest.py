from __future__ import annotations

from datetime import datetime

import pytest

from servicedesk.container import assemble
from servicedesk.core.context import ActorContext
from servicedesk.core.enums import Role

from support import (
    ANALYST_ID,
    LEAD_ID,
    OTHER_ANALYST_ID,
    InMemoryAbsences,
    InMemoryDB,
    InMemoryProfiles,
    InMemoryTasks,
    InMemoryUsers,
    make_profile,
)

# Monday afternoon.
FIXED_NOW = datetime(2024, 3, 4, 14, 0)


@pytest.fixture
def db():
    store = InMemoryDB()
    profiles = InMemoryProfiles(store)
    profiles.add(make_profile(LEAD_ID, "Lena Lead", Role.LEAD))
    profiles.add(make_profile(ANALYST_ID, "Ana Analyst"))
    profiles.add(make_profile(OTHER_ANALYST_ID, "Omar Other"))
    return store


@pytest.fixture
def profiles_repo(db):
    return InMemoryProfiles(db)


@pytest.fixture
def absences_repo(db):
    return InMemoryAbsences(db)


@pytest.fixture
def tasks_repo(db):
    return InMemoryTasks(db)


@pytest.fixture
def users_repo(db):
    return InMemoryUsers(db)


@pytest.fixture
def container(users_repo, profiles_repo, absences_repo, tasks_repo):
    return assemble(
        users_repo=users_repo,
        profiles_repo=profiles_repo,
        absences_repo=absences_repo,
        tasks_repo=tasks_repo,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def lead():
    return ActorContext(user_id=LEAD_ID, role=Role.LEAD)


@pytest.fixture
def analyst():
    return ActorContext(user_id=ANALYST_ID, role=Role.ANALYST)


@pytest.fixture
def other_analyst():
    return ActorContext(user_id=OTHER_ANALYST_ID, role=Role.ANALYST)
