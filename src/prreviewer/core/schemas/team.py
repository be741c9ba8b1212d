"""Team schemas"""
from pydantic import BaseModel, ConfigDict, Field


class TeamMemberSchema(BaseModel):
    """A team member as sent and returned by the API."""
    user_id: str = Field(..., min_length=1, max_length=255, description="Unique user id")
    username: str = Field(..., min_length=1, max_length=255, description="Display name")
    is_active: bool = Field(default=True, description="Whether the user can be assigned reviews")

    model_config = ConfigDict(from_attributes=True)


class TeamSchema(BaseModel):
    """Schema for creating and reading a team."""
    team_name: str = Field(..., min_length=1, max_length=255, description="Unique team name")
    members: list[TeamMemberSchema] = Field(..., min_length=1, description="Team members")

    model_config = ConfigDict(from_attributes=True)


class TeamResponse(BaseModel):
    team: TeamSchema


class DeactivateTeamRequest(BaseModel):
    team_name: str = Field(..., min_length=1, max_length=255)


class DeactivateTeamResponse(BaseModel):
    """Schema for the bulk deactivation summary."""
    deactivated_count: int
    reassigned_prs: int
    user_ids: list[str]
    skipped_prs: list[str] = Field(
        default_factory=list,
        description="Pull requests left unchanged because their reassignment failed",
    )
