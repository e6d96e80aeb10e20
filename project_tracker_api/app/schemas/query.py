"""
Pydantic models for the query API.

These mirror the entity and input schemas but carry enumeration values
in upper snake case (``ON_HOLD``, ``NOT_STARTED``).  Translation to and
from the data service models lives in ``api.v1.casing``.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, model_validator

from .base import CamelModel, OptionalDateTime, OptionalText, StringList, reject_explicit_nulls


class ProjectStatusName(str, Enum):
    PLANNING = "PLANNING"
    ACTIVE = "ACTIVE"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TaskStatusName(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    BLOCKED = "BLOCKED"


class TaskPriorityName(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class TaskNode(CamelModel):
    id: str
    project_id: str
    title: str
    description: str
    status: TaskStatusName
    priority: TaskPriorityName
    assignee: Optional[str] = None
    due_date: Optional[datetime] = None
    progress: int
    dependencies: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ProjectNode(CamelModel):
    id: str
    name: str
    description: str
    status: ProjectStatusName
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    progress: int
    owner: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ProjectWithTasksNode(ProjectNode):
    tasks: List[TaskNode] = Field(default_factory=list)
    task_count: int = 0
    completed_task_count: int = 0


class CreateProjectInput(CamelModel):
    name: str = Field(..., min_length=1)
    description: str
    status: ProjectStatusName = ProjectStatusName.PLANNING
    start_date: OptionalDateTime = None
    end_date: OptionalDateTime = None
    owner: OptionalText = None
    tags: StringList = Field(default_factory=list)


class UpdateProjectInput(CamelModel):
    """Merge-patch input: only the keys present in the body are applied."""

    model_config = {"extra": "forbid"}

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[ProjectStatusName] = None
    start_date: OptionalDateTime = None
    end_date: OptionalDateTime = None
    owner: OptionalText = None
    tags: Optional[List[str]] = None

    @model_validator(mode="after")
    def check_required_fields(self):
        reject_explicit_nulls(self, ("name", "description", "status"))
        return self


class CreateTaskInput(CamelModel):
    project_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str
    status: TaskStatusName = TaskStatusName.NOT_STARTED
    priority: TaskPriorityName = TaskPriorityName.MEDIUM
    assignee: OptionalText = None
    due_date: OptionalDateTime = None
    progress: int = Field(0, ge=0, le=100)
    dependencies: StringList = Field(default_factory=list)


class UpdateTaskInput(CamelModel):
    """Merge-patch input: only the keys present in the body are applied."""

    model_config = {"extra": "forbid"}

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatusName] = None
    priority: Optional[TaskPriorityName] = None
    assignee: OptionalText = None
    due_date: OptionalDateTime = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    dependencies: Optional[List[str]] = None

    @model_validator(mode="after")
    def check_required_fields(self):
        reject_explicit_nulls(self, ("title", "description", "status", "priority", "progress"))
        return self
