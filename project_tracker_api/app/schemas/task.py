"""
Pydantic models for tasks.

A task belongs to exactly one project and carries its own status,
priority and progress.  ``dependencies`` lists the IDs of other tasks
as descriptive metadata only: they are neither checked for existence
nor for cycles.

``TaskCreate`` and ``TaskUpdate`` describe request payloads, ``TaskRead``
is the stored entity returned by the data service.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from .base import CamelModel, OptionalDateTime, OptionalText, StringList, reject_explicit_nulls


class TaskStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class TaskSearchField(str, Enum):
    """Task fields a free-text search can look into."""

    TITLE = "title"
    DESCRIPTION = "description"
    ASSIGNEE = "assignee"


DEFAULT_TASK_SEARCH_FIELDS = (TaskSearchField.TITLE, TaskSearchField.DESCRIPTION)


class TaskBase(CamelModel):
    title: str = Field(..., min_length=1, description="Task title")
    description: str = Field(..., description="Task description")
    status: TaskStatus = TaskStatus.NOT_STARTED
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee: OptionalText = Field(None, description="Person responsible for the task")
    due_date: OptionalDateTime = None
    progress: int = Field(0, ge=0, le=100, description="Completion percentage")
    dependencies: StringList = Field(
        default_factory=list, description="IDs of tasks this task depends on"
    )


class TaskCreate(TaskBase):
    """Schema for creating a task inside an existing project."""

    project_id: str = Field(..., min_length=1, description="Owning project ID")

    @field_validator("progress", mode="before")
    @classmethod
    def default_progress(cls, v):
        return 0 if v is None else v


class TaskUpdate(CamelModel):
    """Schema for a merge-patch update of a task.

    Only fields present in the payload are applied.  ``null`` (or an
    empty string) clears ``assignee`` and ``dueDate``; ``null`` or ``[]``
    clears ``dependencies``.  Sending ``null`` for any other field is an
    error.  Moving a task to another project is not supported.
    """

    model_config = {"extra": "forbid"}

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assignee: OptionalText = None
    due_date: OptionalDateTime = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    dependencies: Optional[List[str]] = None

    @model_validator(mode="after")
    def check_required_fields(self):
        reject_explicit_nulls(self, ("title", "description", "status", "priority", "progress"))
        return self


class TaskRead(TaskBase):
    """Schema for reading a task."""

    id: str
    project_id: str
    created_at: datetime
    updated_at: datetime


class TaskDeleteResult(CamelModel):
    """Outcome of deleting a task, used for reporting."""

    success: bool = True
    id: str
    project_id: str
    title: str
