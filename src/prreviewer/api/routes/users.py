"""User endpoints"""
from fastapi import APIRouter, Depends, Query

from ...core.directory import DirectoryService
from ...core.schemas.pull_request import PullRequestShortSchema
from ...core.schemas.user import (
    SetIsActiveRequest,
    UserResponse,
    UserReviewsResponse,
    UserSchema,
)
from ..dependencies import get_directory_service, require_admin

router = APIRouter()


@router.post(
    "/users/setIsActive",
    response_model=UserResponse,
    dependencies=[Depends(require_admin)],
)
async def set_is_active(
    request_data: SetIsActiveRequest,
    directory: DirectoryService = Depends(get_directory_service),
):
    """Activate or deactivate a single user. Requires the admin bearer token."""
    user = await directory.set_is_active(request_data.user_id, request_data.is_active)
    return UserResponse(user=UserSchema.model_validate(user))


@router.get("/users/getReview", response_model=UserReviewsResponse)
async def get_user_reviews(
    user_id: str = Query(..., min_length=1, description="Reviewer user id"),
    directory: DirectoryService = Depends(get_directory_service),
):
    """List pull requests where the user is assigned as a reviewer."""
    pull_requests = await directory.get_user_reviews(user_id)
    return UserReviewsResponse(
        user_id=user_id,
        pull_requests=[PullRequestShortSchema.model_validate(pr) for pr in pull_requests],
    )
