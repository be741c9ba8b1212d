"""User schemas"""
from pydantic import BaseModel, ConfigDict, Field

from .pull_request import PullRequestShortSchema


class UserSchema(BaseModel):
    user_id: str
    username: str
    team_name: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    user: UserSchema


class SetIsActiveRequest(BaseModel):
    """Schema for toggling a user's activity flag."""
    user_id: str = Field(..., min_length=1, max_length=255)
    is_active: bool


class UserReviewsResponse(BaseModel):
    user_id: str
    pull_requests: list[PullRequestShortSchema]
