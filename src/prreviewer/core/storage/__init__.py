"""Persistence: store contracts and their SQLAlchemy implementations."""
from .base import (
    DirectoryStore,
    DuplicateRecordError,
    PullRequestStore,
    RecordNotFoundError,
    StatisticsStore,
    StoreError,
    Transaction,
    UnitOfWork,
)
from .database import Base, Database, get_db, init_db
from .repositories import DirectoryRepository, PullRequestRepository, StatisticsRepository
from .unit_of_work import SqlAlchemyTransaction, SqlAlchemyUnitOfWork

__all__ = [
    # Contracts
    "DirectoryStore",
    "PullRequestStore",
    "StatisticsStore",
    "Transaction",
    "UnitOfWork",
    # Errors
    "StoreError",
    "RecordNotFoundError",
    "DuplicateRecordError",
    # Database
    "Base",
    "Database",
    "get_db",
    "init_db",
    # SQLAlchemy implementations
    "DirectoryRepository",
    "PullRequestRepository",
    "StatisticsRepository",
    "SqlAlchemyTransaction",
    "SqlAlchemyUnitOfWork",
]
