"""Statistics endpoints"""
from fastapi import APIRouter, Depends

from ...core.schemas.stats import StatisticsResponse
from ...core.stats import StatisticsService
from ..dependencies import get_statistics_service

router = APIRouter()


@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(
    stats: StatisticsService = Depends(get_statistics_service),
):
    """Get assignment statistics across teams, users and pull requests."""
    statistics = await stats.get_statistics()
    return StatisticsResponse.model_validate(statistics)
