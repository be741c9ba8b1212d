"""Domain errors raised by the assignment engine and directory service.

Every business-rule rejection carries a stable ``ErrorCode`` and a human
readable message. Anything that is not a ``DomainError`` (store or
connectivity failures) is treated as an internal error by the API layer.
"""
from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Stable error codes exposed to API clients."""
    TEAM_EXISTS = "TEAM_EXISTS"
    PR_EXISTS = "PR_EXISTS"
    NOT_FOUND = "NOT_FOUND"
    PR_MERGED = "PR_MERGED"
    NOT_ASSIGNED = "NOT_ASSIGNED"
    NO_CANDIDATE = "NO_CANDIDATE"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_INPUT = "INVALID_INPUT"


class DomainError(Exception):
    """Base class for classified business-rule failures."""

    code: ErrorCode
    default_message: str = "domain error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(code='{self.code.value}', message='{self.message}')>"


class TeamExistsError(DomainError):
    code = ErrorCode.TEAM_EXISTS
    default_message = "team_name already exists"


class PullRequestExistsError(DomainError):
    code = ErrorCode.PR_EXISTS
    default_message = "PR id already exists"


class NotFoundError(DomainError):
    code = ErrorCode.NOT_FOUND
    default_message = "resource not found"


class PullRequestMergedError(DomainError):
    code = ErrorCode.PR_MERGED
    default_message = "cannot reassign on merged PR"


class NotAssignedError(DomainError):
    code = ErrorCode.NOT_ASSIGNED
    default_message = "reviewer is not assigned to this PR"


class NoCandidateError(DomainError):
    code = ErrorCode.NO_CANDIDATE
    default_message = "no active replacement candidate in team"


class UnauthorizedError(DomainError):
    code = ErrorCode.UNAUTHORIZED
    default_message = "unauthorized"


class InvalidInputError(DomainError):
    code = ErrorCode.INVALID_INPUT
    default_message = "invalid input"
