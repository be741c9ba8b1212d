"""Shared fixtures: in-memory database, deterministic engine and team helpers."""
import random
from datetime import datetime, timedelta, timezone

import pytest

from prreviewer.core.assignment import AssignmentEngine, ReviewerSelectionPolicy
from prreviewer.core.config.settings import init_config
from prreviewer.core.directory import DirectoryService
from prreviewer.core.models import TeamMember
from prreviewer.core.storage import SqlAlchemyUnitOfWork, init_db


class TickingClock:
    """Returns a strictly increasing timestamp on every call."""

    def __init__(self, start: datetime = datetime(2025, 1, 1, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        return self.now


def member(user_id: str, is_active: bool = True) -> TeamMember:
    return TeamMember(user_id=user_id, username=f"user-{user_id}", is_active=is_active)


@pytest.fixture
async def db():
    """Create test database."""
    config = init_config()
    config.db_path = ":memory:"
    db = init_db(config.get_database_url())
    await db.create_tables()
    yield db
    await db.close()


@pytest.fixture
def uow(db):
    return SqlAlchemyUnitOfWork(db)


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def policy():
    """Selection policy with a fixed seed."""
    return ReviewerSelectionPolicy(random.Random(42))


@pytest.fixture
def engine(uow, policy, clock):
    return AssignmentEngine(uow, policy=policy, clock=clock)


@pytest.fixture
def directory(uow, clock):
    return DirectoryService(uow, clock=clock)


@pytest.fixture
def make_team(directory):
    """Create a team from ``(user_id, is_active)`` pairs or bare user ids."""
    async def _make(team_name: str, *members):
        entries = [
            member(*entry) if isinstance(entry, tuple) else member(entry)
            for entry in members
        ]
        return await directory.create_team(team_name, entries)

    return _make


@pytest.fixture
def load_pr(uow):
    """Read a pull request in a fresh unit of work."""
    async def _load(pull_request_id: str):
        return await uow.run(lambda tx: tx.pull_requests.get(pull_request_id))

    return _load


@pytest.fixture
def load_user(uow):
    async def _load(user_id: str):
        return await uow.run(lambda tx: tx.directory.get_user(user_id))

    return _load
