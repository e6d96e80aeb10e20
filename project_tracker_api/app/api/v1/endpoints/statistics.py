"""
Statistics endpoints for API v1.

Per-project statistics live under ``/projects/{id}/stats``; this module
serves the system-wide report.
"""

from fastapi import APIRouter, Depends

from project_tracker_api.app.api.v1.deps import get_data_service
from project_tracker_api.app.schemas.statistics import GlobalStats
from project_tracker_api.app.services.data_service import DataService


router = APIRouter()


@router.get("/", response_model=GlobalStats)
async def get_global_stats(service: DataService = Depends(get_data_service)) -> GlobalStats:
    """Return counts by status and priority, average progress and distinct people."""
    return await service.get_global_stats()
