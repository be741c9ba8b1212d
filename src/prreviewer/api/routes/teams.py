"""Team endpoints"""
from fastapi import APIRouter, Depends, Query

from ...core.assignment import AssignmentEngine
from ...core.directory import DirectoryService
from ...core.models import TeamMember
from ...core.schemas.team import (
    DeactivateTeamRequest,
    DeactivateTeamResponse,
    TeamResponse,
    TeamSchema,
)
from ..dependencies import get_assignment_engine, get_directory_service, require_admin

router = APIRouter()


@router.post("/team/add", response_model=TeamResponse, status_code=201)
async def create_team(
    team_data: TeamSchema,
    directory: DirectoryService = Depends(get_directory_service),
):
    """Create a team and create or update its members.

    Members that already belong to another team are moved into the new one.
    """
    team = await directory.create_team(
        team_data.team_name,
        [TeamMember(**member.model_dump()) for member in team_data.members],
    )
    return TeamResponse(team=TeamSchema.model_validate(team))


@router.get("/team/get", response_model=TeamSchema)
async def get_team(
    team_name: str = Query(..., min_length=1, description="Team name"),
    directory: DirectoryService = Depends(get_directory_service),
):
    """Get a team with its members."""
    team = await directory.get_team(team_name)
    return TeamSchema.model_validate(team)


@router.post(
    "/team/deactivateMembers",
    response_model=DeactivateTeamResponse,
    dependencies=[Depends(require_admin)],
)
async def deactivate_team_members(
    request_data: DeactivateTeamRequest,
    engine: AssignmentEngine = Depends(get_assignment_engine),
):
    """Deactivate every member of a team and release their open reviews.

    Requires the admin bearer token.
    """
    result = await engine.deactivate_team_members(request_data.team_name)
    return DeactivateTeamResponse(
        deactivated_count=result.deactivated_count,
        reassigned_prs=result.reassigned_count,
        user_ids=result.user_ids,
        skipped_prs=result.skipped_pull_requests,
    )
