"""PR Reviewer - automatic reviewer assignment for pull requests.

Teams register their members; every new pull request gets up to two
active reviewers from the author's team, and reviewers can be swapped out
or released in bulk when a team is deactivated.
"""
__version__ = "0.1.0"

from .core.assignment import (
    AssignmentEngine,
    DeactivationResult,
    ReviewerSelectionPolicy,
    seed_shared_random,
)
from .core.config.settings import ReviewerServiceConfig, get_config, init_config
from .core.directory import DirectoryService
from .core.errors import (
    DomainError,
    ErrorCode,
    InvalidInputError,
    NoCandidateError,
    NotAssignedError,
    NotFoundError,
    PullRequestExistsError,
    PullRequestMergedError,
    TeamExistsError,
    UnauthorizedError,
)
from .core.models import (
    MAX_REVIEWERS,
    PullRequest,
    PullRequestShort,
    PullRequestStatus,
    Statistics,
    Team,
    TeamMember,
    TeamWithMembers,
    User,
)
from .core.stats import StatisticsService
from .core.storage import Database, SqlAlchemyUnitOfWork, UnitOfWork, get_db, init_db

from . import core

__all__ = [
    # Version
    "__version__",
    # Config
    "ReviewerServiceConfig",
    "init_config",
    "get_config",
    # Database
    "Database",
    "init_db",
    "get_db",
    "UnitOfWork",
    "SqlAlchemyUnitOfWork",
    # Models
    "MAX_REVIEWERS",
    "Team",
    "TeamMember",
    "TeamWithMembers",
    "User",
    "PullRequest",
    "PullRequestShort",
    "PullRequestStatus",
    "Statistics",
    # Errors
    "ErrorCode",
    "DomainError",
    "TeamExistsError",
    "PullRequestExistsError",
    "NotFoundError",
    "PullRequestMergedError",
    "NotAssignedError",
    "NoCandidateError",
    "UnauthorizedError",
    "InvalidInputError",
    # Services
    "AssignmentEngine",
    "DeactivationResult",
    "ReviewerSelectionPolicy",
    "seed_shared_random",
    "DirectoryService",
    "StatisticsService",
    # Core module
    "core",
]
