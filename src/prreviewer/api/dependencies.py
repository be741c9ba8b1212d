"""FastAPI dependencies: services bound to the global database, and admin auth."""
import secrets
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.assignment import AssignmentEngine
from ..core.config.settings import ReviewerServiceConfig, get_config
from ..core.directory import DirectoryService
from ..core.errors import UnauthorizedError
from ..core.stats import StatisticsService
from ..core.storage import SqlAlchemyUnitOfWork, UnitOfWork, get_db

_bearer = HTTPBearer(auto_error=False)


def get_settings() -> ReviewerServiceConfig:
    return get_config()


def get_unit_of_work() -> UnitOfWork:
    """Unit of work over the global database."""
    return SqlAlchemyUnitOfWork(get_db())


def get_assignment_engine(uow: UnitOfWork = Depends(get_unit_of_work)) -> AssignmentEngine:
    return AssignmentEngine(uow)


def get_directory_service(uow: UnitOfWork = Depends(get_unit_of_work)) -> DirectoryService:
    return DirectoryService(uow)


def get_statistics_service(uow: UnitOfWork = Depends(get_unit_of_work)) -> StatisticsService:
    return StatisticsService(uow)


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    config: ReviewerServiceConfig = Depends(get_settings),
) -> None:
    """Reject the request unless it carries ``Authorization: Bearer <admin_token>``."""
    if credentials is None:
        raise UnauthorizedError("missing or invalid authorization header")
    if not secrets.compare_digest(credentials.credentials, config.admin_token):
        raise UnauthorizedError("invalid admin token")
