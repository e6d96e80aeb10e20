"""
Project endpoints for API v1.

Enumeration values are exchanged in upper snake case (``ON_HOLD``) and
JSON keys in camelCase.  Errors raised by the data service are turned
into HTTP responses by the handlers registered in ``app.main``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from project_tracker_api.app.api.v1 import casing
from project_tracker_api.app.api.v1.deps import get_data_service
from project_tracker_api.app.schemas.project import ProjectDeleteResult, ProjectSearchField
from project_tracker_api.app.schemas.query import (
    CreateProjectInput,
    ProjectNode,
    ProjectStatusName,
    ProjectWithTasksNode,
    UpdateProjectInput,
)
from project_tracker_api.app.schemas.statistics import ProjectStats
from project_tracker_api.app.services.data_service import DataService


router = APIRouter()


@router.get("/", response_model=List[ProjectNode])
async def list_projects(
    status_filter: Optional[ProjectStatusName] = Query(None, alias="status"),
    owner: Optional[str] = Query(None),
    tags: Optional[List[str]] = Query(None),
    service: DataService = Depends(get_data_service),
) -> List[ProjectNode]:
    """List projects, most recently updated first.

    - **status**: only projects with this status.
    - **owner**: only projects with this owner.
    - **tags**: only projects having at least one of these tags
      (repeat the parameter for several tags).
    """
    projects = await service.list_projects(
        status=casing.PROJECT_STATUS.to_internal(status_filter),
        owner=owner,
        tags=tags,
    )
    return [casing.project_node(project) for project in projects]


@router.get("/search", response_model=List[ProjectNode])
async def search_projects(
    query: str = Query(..., description="Text to look for, case-insensitive"),
    fields: Optional[List[ProjectSearchField]] = Query(
        None, description="Fields to search in; defaults to name, description and tags"
    ),
    service: DataService = Depends(get_data_service),
) -> List[ProjectNode]:
    """Search projects whose selected fields contain ``query``."""
    projects = await service.search_projects(query, fields=fields)
    return [casing.project_node(project) for project in projects]


@router.get("/{project_id}", response_model=ProjectWithTasksNode)
async def get_project(
    project_id: str,
    service: DataService = Depends(get_data_service),
) -> ProjectWithTasksNode:
    """Retrieve a project with its tasks.  Raises 404 if not found."""
    project = await service.get_project_with_tasks(project_id)
    return casing.project_with_tasks_node(project)


@router.post("/", response_model=ProjectNode, status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: CreateProjectInput,
    service: DataService = Depends(get_data_service),
) -> ProjectNode:
    """Create a new project.  ``progress`` always starts at 0."""
    project = await service.create_project(casing.project_create(payload))
    return casing.project_node(project)


@router.patch("/{project_id}", response_model=ProjectNode)
async def update_project(
    project_id: str,
    payload: UpdateProjectInput,
    service: DataService = Depends(get_data_service),
) -> ProjectNode:
    """Update a project.

    Only the keys present in the body change; ``null`` clears an
    optional field.  ``progress`` cannot be set here, use
    ``POST /projects/{id}/progress`` to recalculate it.
    """
    project = await service.update_project(project_id, casing.project_update(payload))
    return casing.project_node(project)


@router.delete("/{project_id}", response_model=ProjectDeleteResult)
async def delete_project(
    project_id: str,
    service: DataService = Depends(get_data_service),
) -> ProjectDeleteResult:
    """Delete a project and all of its tasks.

    The response reports the project name and how many tasks were
    removed.
    """
    return await service.delete_project(project_id)


@router.post("/{project_id}/progress", response_model=ProjectNode)
async def update_project_progress(
    project_id: str,
    service: DataService = Depends(get_data_service),
) -> ProjectNode:
    """Recalculate project progress as the rounded mean of its tasks."""
    project = await service.update_project_progress(project_id)
    return casing.project_node(project)


@router.get("/{project_id}/stats", response_model=ProjectStats)
async def get_project_stats(
    project_id: str,
    service: DataService = Depends(get_data_service),
) -> ProjectStats:
    return await service.get_project_stats(project_id)
