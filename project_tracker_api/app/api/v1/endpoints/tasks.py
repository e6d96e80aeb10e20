"""
Task endpoints for API v1.

Task IDs are unique across projects, so ``projectId`` is optional on
the single-task routes; when it is given, a task of another project
answers 404.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from project_tracker_api.app.api.v1 import casing
from project_tracker_api.app.api.v1.deps import get_data_service
from project_tracker_api.app.schemas.query import (
    CreateTaskInput,
    TaskNode,
    TaskPriorityName,
    TaskStatusName,
    UpdateTaskInput,
)
from project_tracker_api.app.schemas.task import TaskDeleteResult, TaskSearchField
from project_tracker_api.app.services.data_service import DataService


router = APIRouter()


@router.get("/", response_model=List[TaskNode])
async def list_tasks(
    project_id: Optional[str] = Query(None, alias="projectId"),
    status_filter: Optional[TaskStatusName] = Query(None, alias="status"),
    priority: Optional[TaskPriorityName] = Query(None),
    assignee: Optional[str] = Query(None),
    service: DataService = Depends(get_data_service),
) -> List[TaskNode]:
    """List tasks in creation order.

    All given filters must match.  Filtering by an unknown ``projectId``
    returns an empty list.
    """
    tasks = await service.list_tasks(
        project_id=project_id,
        status=casing.TASK_STATUS.to_internal(status_filter),
        priority=casing.TASK_PRIORITY.to_internal(priority),
        assignee=assignee,
    )
    return [casing.task_node(task) for task in tasks]


@router.get("/search", response_model=List[TaskNode])
async def search_tasks(
    query: str = Query(..., description="Text to look for, case-insensitive"),
    project_id: Optional[str] = Query(None, alias="projectId"),
    fields: Optional[List[TaskSearchField]] = Query(
        None, description="Fields to search in; defaults to title and description"
    ),
    service: DataService = Depends(get_data_service),
) -> List[TaskNode]:
    """Search tasks whose selected fields contain ``query``."""
    tasks = await service.search_tasks(query, project_id=project_id, fields=fields)
    return [casing.task_node(task) for task in tasks]


@router.get("/{task_id}", response_model=TaskNode)
async def get_task(
    task_id: str,
    project_id: Optional[str] = Query(None, alias="projectId"),
    service: DataService = Depends(get_data_service),
) -> TaskNode:
    task = await service.get_task(task_id, project_id=project_id)
    return casing.task_node(task)


@router.post("/", response_model=TaskNode, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: CreateTaskInput,
    service: DataService = Depends(get_data_service),
) -> TaskNode:
    """Create a task in an existing project.  Raises 404 if the project is missing."""
    task = await service.create_task(casing.task_create(payload))
    return casing.task_node(task)


@router.patch("/{task_id}", response_model=TaskNode)
async def update_task(
    task_id: str,
    payload: UpdateTaskInput,
    project_id: Optional[str] = Query(None, alias="projectId"),
    service: DataService = Depends(get_data_service),
) -> TaskNode:
    """Update a task.

    Only the keys present in the body change.  ``null`` clears
    ``assignee``, ``dueDate`` and ``dependencies``; ``progress: 0`` is
    stored as 0.
    """
    task = await service.update_task(task_id, casing.task_update(payload), project_id=project_id)
    return casing.task_node(task)


@router.delete("/{task_id}", response_model=TaskDeleteResult)
async def delete_task(
    task_id: str,
    project_id: Optional[str] = Query(None, alias="projectId"),
    service: DataService = Depends(get_data_service),
) -> TaskDeleteResult:
    return await service.delete_task(task_id, project_id=project_id)
