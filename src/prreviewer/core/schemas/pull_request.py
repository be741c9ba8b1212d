"""Pull request schemas"""
from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer

from ..models import MAX_REVIEWERS, PullRequestStatus
from ..timeutils import format_rfc3339


class PullRequestSchema(BaseModel):
    """Schema for a pull request response.

    ``mergedAt`` is None until the pull request is merged; routes serialize
    with ``exclude_none`` so the key is omitted.
    """
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus
    assigned_reviewers: list[str] = Field(default_factory=list, max_length=MAX_REVIEWERS)
    created_at: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
    )
    merged_at: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("merged_at", "mergedAt"),
        serialization_alias="mergedAt",
    )

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "merged_at")
    def serialize_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        return format_rfc3339(value)


class PullRequestShortSchema(BaseModel):
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus

    model_config = ConfigDict(from_attributes=True)


class PullRequestResponse(BaseModel):
    pr: PullRequestSchema


class CreatePullRequestRequest(BaseModel):
    """Schema for creating a pull request."""
    pull_request_id: str = Field(..., min_length=1, max_length=255, description="Unique pull request id")
    pull_request_name: str = Field(..., min_length=1, max_length=255, description="Pull request title")
    author_id: str = Field(..., min_length=1, max_length=255, description="Author user id")


class MergePullRequestRequest(BaseModel):
    pull_request_id: str = Field(..., min_length=1, max_length=255)


class ReassignRequest(BaseModel):
    """Schema for swapping out one reviewer."""
    pull_request_id: str = Field(..., min_length=1, max_length=255)
    old_user_id: str = Field(..., min_length=1, max_length=255, description="Reviewer to replace")


class ReassignResponse(BaseModel):
    pr: PullRequestSchema
    replaced_by: str
