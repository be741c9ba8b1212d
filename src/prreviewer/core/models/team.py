"""Team and user entities."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class Team:
    """A named group of users. Team names are globally unique."""
    team_name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __repr__(self) -> str:
        return f"<Team(team_name='{self.team_name}')>"


@dataclass
class User:
    """A team member that can author and review pull requests.

    Team membership is fixed once the user exists; ``is_active`` and
    ``username`` are the only attributes that change afterwards.
    """
    user_id: str
    username: str
    team_name: str
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __repr__(self) -> str:
        return f"<User(user_id='{self.user_id}', team='{self.team_name}', active={self.is_active})>"


@dataclass(frozen=True)
class TeamMember:
    """Membership entry used when creating or reading a team."""
    user_id: str
    username: str
    is_active: bool = True


@dataclass
class TeamWithMembers:
    team_name: str
    members: list[TeamMember] = field(default_factory=list)
