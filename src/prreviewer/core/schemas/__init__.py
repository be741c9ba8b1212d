"""Pydantic schemas for API validation and serialization."""
from .common import ErrorDetail, ErrorResponse
from .pull_request import (
    CreatePullRequestRequest,
    MergePullRequestRequest,
    PullRequestResponse,
    PullRequestSchema,
    PullRequestShortSchema,
    ReassignRequest,
    ReassignResponse,
)
from .stats import StatisticsResponse
from .team import (
    DeactivateTeamRequest,
    DeactivateTeamResponse,
    TeamMemberSchema,
    TeamResponse,
    TeamSchema,
)
from .user import SetIsActiveRequest, UserResponse, UserReviewsResponse, UserSchema

__all__ = [
    # Errors
    "ErrorDetail",
    "ErrorResponse",
    # Team schemas
    "TeamMemberSchema",
    "TeamSchema",
    "TeamResponse",
    "DeactivateTeamRequest",
    "DeactivateTeamResponse",
    # User schemas
    "UserSchema",
    "UserResponse",
    "SetIsActiveRequest",
    "UserReviewsResponse",
    # Pull request schemas
    "PullRequestSchema",
    "PullRequestShortSchema",
    "PullRequestResponse",
    "CreatePullRequestRequest",
    "MergePullRequestRequest",
    "ReassignRequest",
    "ReassignResponse",
    # Statistics
    "StatisticsResponse",
]
