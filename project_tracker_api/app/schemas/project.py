"""
Pydantic models for project data.

The ``ProjectBase`` class contains the client-editable fields;
``ProjectCreate`` extends it for requests, and ``ProjectRead`` adds the
server-managed ``id``, ``progress`` and timestamps.  ``progress`` is not
part of any request schema: it starts at 0 and only changes through
progress recalculation.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, model_validator

from .base import CamelModel, OptionalDateTime, OptionalText, StringList, reject_explicit_nulls
from .task import TaskRead


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ProjectSearchField(str, Enum):
    """Project fields a free-text search can look into."""

    NAME = "name"
    DESCRIPTION = "description"
    TAGS = "tags"


DEFAULT_PROJECT_SEARCH_FIELDS = tuple(ProjectSearchField)


class ProjectBase(CamelModel):
    name: str = Field(..., min_length=1, description="Project name")
    description: str = Field(..., description="Project description")
    status: ProjectStatus = ProjectStatus.PLANNING
    start_date: OptionalDateTime = None
    end_date: OptionalDateTime = None
    owner: OptionalText = Field(None, description="Project owner")
    tags: StringList = Field(default_factory=list, description="Project tags")


class ProjectCreate(ProjectBase):
    """Schema for creating a project."""
    pass


class ProjectUpdate(CamelModel):
    """Schema for a merge-patch update of a project.

    Only fields present in the payload are applied.  ``null`` (or an
    empty string) clears ``owner``, ``startDate`` and ``endDate``;
    ``null`` or ``[]`` clears ``tags``.  Sending ``null`` for ``name``,
    ``description`` or ``status`` is an error, as is any unknown field
    (including ``progress``).
    """

    model_config = {"extra": "forbid"}

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    start_date: OptionalDateTime = None
    end_date: OptionalDateTime = None
    owner: OptionalText = None
    tags: Optional[List[str]] = None

    @model_validator(mode="after")
    def check_required_fields(self):
        reject_explicit_nulls(self, ("name", "description", "status"))
        return self


class ProjectRead(ProjectBase):
    """Schema for reading a project."""

    id: str
    progress: int = Field(0, ge=0, le=100)
    created_at: datetime
    updated_at: datetime


class ProjectWithTasks(ProjectRead):
    """A project together with its tasks in creation order."""

    tasks: List[TaskRead] = Field(default_factory=list)
    task_count: int = 0
    completed_task_count: int = 0


class ProjectDeleteResult(CamelModel):
    """Outcome of deleting a project, used for reporting."""

    success: bool = True
    id: str
    name: str
    task_count: int
