"""Aggregate assignment statistics."""
from dataclasses import dataclass, field


@dataclass
class Statistics:
    total_prs: int = 0
    open_prs: int = 0
    merged_prs: int = 0
    assignments_by_user: dict[str, int] = field(default_factory=dict)
    assignments_by_pr: dict[str, int] = field(default_factory=dict)
    total_teams: int = 0
    total_users: int = 0
    active_users: int = 0
