"""SQLAlchemy unit of work: one session, one transaction, one set of stores."""
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .base import StoreError, Transaction, UnitOfWork
from .database import Database
from .repositories import DirectoryRepository, PullRequestRepository, StatisticsRepository


class SqlAlchemyTransaction(Transaction):
    """Stores bound to one open session transaction."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.directory = DirectoryRepository(session)
        self.pull_requests = PullRequestRepository(session)
        self.statistics = StatisticsRepository(session)

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator["SqlAlchemyTransaction"]:
        try:
            async with self.session.begin_nested():
                yield self
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Opens a fresh session per unit and commits it atomically."""

    def __init__(self, db: Database):
        self.db = db

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[SqlAlchemyTransaction]:
        async with self.db.session() as session:
            async with session.begin():
                yield SqlAlchemyTransaction(session)
