"""Statistics schema"""
from pydantic import BaseModel, ConfigDict


class StatisticsResponse(BaseModel):
    """Schema for service-wide assignment statistics."""
    total_prs: int
    open_prs: int
    merged_prs: int
    assignments_by_user: dict[str, int]
    assignments_by_pr: dict[str, int]
    total_teams: int
    total_users: int
    active_users: int

    model_config = ConfigDict(from_attributes=True)
