"""Core entities for teams, users and pull requests."""
from .team import Team, TeamMember, TeamWithMembers, User
from .pull_request import MAX_REVIEWERS, PullRequest, PullRequestShort, PullRequestStatus
from .statistics import Statistics

__all__ = [
    # Directory entities
    "Team",
    "TeamMember",
    "TeamWithMembers",
    "User",
    # Pull request entities
    "MAX_REVIEWERS",
    "PullRequest",
    "PullRequestShort",
    "PullRequestStatus",
    # Statistics
    "Statistics",
]
