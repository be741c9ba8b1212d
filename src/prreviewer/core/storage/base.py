"""Store contracts consumed by the assignment engine.

The engine never touches a session or a connection directly. Every read
and write goes through a ``Transaction`` handed out by a ``UnitOfWork``,
which exposes the stores bound to one atomic transaction.
"""
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Awaitable, Callable, Optional, TypeVar

from ..models import (
    PullRequest,
    PullRequestShort,
    Statistics,
    Team,
    User,
)

T = TypeVar("T")


class StoreError(Exception):
    """Unclassified failure of the underlying store."""


class RecordNotFoundError(StoreError):
    """The target row does not exist, or a conditional update matched no row."""


class DuplicateRecordError(StoreError):
    """An insert collided with an existing primary key."""


class DirectoryStore(ABC):
    """Teams and their member users."""

    @abstractmethod
    async def team_exists(self, team_name: str) -> bool:
        pass

    @abstractmethod
    async def create_team(self, team: Team) -> None:
        """Insert a team. Raises DuplicateRecordError if the name is taken."""
        pass

    @abstractmethod
    async def get_team(self, team_name: str) -> Team:
        """Return the team. Raises RecordNotFoundError if absent."""
        pass

    @abstractmethod
    async def get_user(self, user_id: str) -> User:
        """Return the user. Raises RecordNotFoundError if absent."""
        pass

    @abstractmethod
    async def list_users_by_team(self, team_name: str) -> list[User]:
        """Return every member of a team ordered by username."""
        pass

    @abstractmethod
    async def list_active_users_by_team(self, team_name: str) -> list[User]:
        """Return the active members of a team ordered by username."""
        pass

    @abstractmethod
    async def upsert_users(self, users: list[User]) -> None:
        """Insert users, overwriting name, team and activity of existing ids."""
        pass

    @abstractmethod
    async def update_user(self, user: User) -> None:
        """Persist a user. Raises RecordNotFoundError if no row matched."""
        pass


class PullRequestStore(ABC):
    """Pull requests and their ordered reviewer slots."""

    @abstractmethod
    async def exists(self, pull_request_id: str) -> bool:
        pass

    @abstractmethod
    async def create(self, pull_request: PullRequest) -> None:
        """Insert a pull request. Raises DuplicateRecordError if the id is taken."""
        pass

    @abstractmethod
    async def update(self, pull_request: PullRequest) -> None:
        """Persist status, merge time and reviewers.

        The write is conditioned on ``pull_request.version``; when no row
        matches (deleted, or changed by a concurrent writer) it raises
        RecordNotFoundError. On success the entity's version is advanced.
        """
        pass

    @abstractmethod
    async def get(self, pull_request_id: str) -> PullRequest:
        """Return the pull request. Raises RecordNotFoundError if absent."""
        pass

    @abstractmethod
    async def list_open_by_reviewer(self, user_id: str) -> list[PullRequest]:
        """Return OPEN pull requests on which ``user_id`` holds a reviewer slot."""
        pass

    @abstractmethod
    async def list_by_reviewer(self, user_id: str) -> list[PullRequestShort]:
        """Return every pull request reviewed by ``user_id``, newest first."""
        pass


class StatisticsStore(ABC):

    @abstractmethod
    async def get_statistics(self) -> Statistics:
        pass


class Transaction(ABC):
    """Capability object for one open unit of work.

    All store operations of an engine call are invoked through the stores
    hanging off a single Transaction, so they observe the same snapshot and
    commit or roll back together.
    """

    directory: DirectoryStore
    pull_requests: PullRequestStore
    statistics: StatisticsStore

    @abstractmethod
    def savepoint(self) -> AbstractAsyncContextManager["Transaction"]:
        """Open a nested savepoint.

        A store failure inside the block rolls back only the block's writes
        and is re-raised as StoreError; the enclosing transaction stays usable.
        """
        pass


class UnitOfWork(ABC):
    """Runs a coroutine function inside one atomic transaction."""

    @abstractmethod
    def begin(self) -> AbstractAsyncContextManager[Transaction]:
        """Open a new transaction; commit on clean exit, roll back on error."""
        pass

    async def run(
        self,
        fn: Callable[[Transaction], Awaitable[T]],
        tx: Optional[Transaction] = None,
    ) -> T:
        """Execute ``fn`` inside a transaction and return its result.

        Args:
            fn: Coroutine function receiving the open Transaction
            tx: An already open transaction to join. When given, ``fn`` runs
                inside it and commit/rollback stays with its owner.

        Returns:
            Whatever ``fn`` returns, after the transaction committed

        Raises:
            Whatever ``fn`` raises, after the transaction rolled back
        """
        if tx is not None:
            return await fn(tx)

        async with self.begin() as new_tx:
            return await fn(new_tx)
