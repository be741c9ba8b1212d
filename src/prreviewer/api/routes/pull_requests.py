"""Pull request endpoints"""
from fastapi import APIRouter, Depends

from ...core.assignment import AssignmentEngine
from ...core.schemas.pull_request import (
    CreatePullRequestRequest,
    MergePullRequestRequest,
    PullRequestResponse,
    PullRequestSchema,
    ReassignRequest,
    ReassignResponse,
)
from ..dependencies import get_assignment_engine

router = APIRouter()


@router.post(
    "/pullRequest/create",
    response_model=PullRequestResponse,
    response_model_exclude_none=True,
    status_code=201,
)
async def create_pull_request(
    request_data: CreatePullRequestRequest,
    engine: AssignmentEngine = Depends(get_assignment_engine),
):
    """Create a pull request and assign up to two reviewers from the author's team."""
    pull_request = await engine.create_pull_request(
        request_data.pull_request_id,
        request_data.pull_request_name,
        request_data.author_id,
    )
    return PullRequestResponse(pr=PullRequestSchema.model_validate(pull_request))


@router.post(
    "/pullRequest/merge",
    response_model=PullRequestResponse,
    response_model_exclude_none=True,
)
async def merge_pull_request(
    request_data: MergePullRequestRequest,
    engine: AssignmentEngine = Depends(get_assignment_engine),
):
    """Mark a pull request as merged. Repeated calls return the merged state unchanged."""
    pull_request = await engine.merge_pull_request(request_data.pull_request_id)
    return PullRequestResponse(pr=PullRequestSchema.model_validate(pull_request))


@router.post(
    "/pullRequest/reassign",
    response_model=ReassignResponse,
    response_model_exclude_none=True,
)
async def reassign_reviewer(
    request_data: ReassignRequest,
    engine: AssignmentEngine = Depends(get_assignment_engine),
):
    """Replace one reviewer with another active member of the same team."""
    pull_request, new_reviewer_id = await engine.reassign_reviewer(
        request_data.pull_request_id,
        request_data.old_user_id,
    )
    return ReassignResponse(
        pr=PullRequestSchema.model_validate(pull_request),
        replaced_by=new_reviewer_id,
    )
