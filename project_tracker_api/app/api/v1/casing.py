"""
Enum casing between the query API and the data service.

The query API names enumeration values in upper snake case
(``ON_HOLD``), the data service in lower snake case (``on_hold``).  One
``EnumMapping`` per enum holds the translation table in both
directions; it is built from the two enum classes and refuses to be
built unless every value on each side has exactly one counterpart.

The functions at the bottom translate whole entities and request bodies
with these tables, so the data service never sees the external casing.
"""

from enum import Enum
from typing import Dict, Generic, Optional, Type, TypeVar

from pydantic import BaseModel

from ...schemas.project import (
    ProjectCreate,
    ProjectRead,
    ProjectStatus,
    ProjectUpdate,
    ProjectWithTasks,
)
from ...schemas.query import (
    CreateProjectInput,
    CreateTaskInput,
    ProjectNode,
    ProjectStatusName,
    ProjectWithTasksNode,
    TaskNode,
    TaskPriorityName,
    TaskStatusName,
    UpdateProjectInput,
    UpdateTaskInput,
)
from ...schemas.task import TaskCreate, TaskPriority, TaskRead, TaskStatus, TaskUpdate

External = TypeVar("External", bound=Enum)
Internal = TypeVar("Internal", bound=Enum)


class EnumMapping(Generic[External, Internal]):
    """Total bidirectional mapping between an external and an internal enum."""

    def __init__(self, external: Type[External], internal: Type[Internal]):
        self.external = external
        self.internal = internal
        self._to_internal: Dict[External, Internal] = {}
        for member in external:
            try:
                self._to_internal[member] = internal(member.value.lower())
            except ValueError:
                raise ValueError(
                    f"{external.__name__}.{member.name} has no counterpart in {internal.__name__}"
                ) from None
        self._to_external: Dict[Internal, External] = {
            value: key for key, value in self._to_internal.items()
        }
        missing = [member.name for member in internal if member not in self._to_external]
        if missing:
            raise ValueError(
                f"{internal.__name__} values without external name: {', '.join(missing)}"
            )

    def to_internal(self, value: Optional[External]) -> Optional[Internal]:
        if value is None:
            return None
        return self._to_internal[self.external(value)]

    def to_external(self, value: Optional[Internal]) -> Optional[External]:
        if value is None:
            return None
        return self._to_external[self.internal(value)]


PROJECT_STATUS = EnumMapping(ProjectStatusName, ProjectStatus)
TASK_STATUS = EnumMapping(TaskStatusName, TaskStatus)
TASK_PRIORITY = EnumMapping(TaskPriorityName, TaskPriority)


# ----------------------------------------------------------------------
# Entity and input translation
# ----------------------------------------------------------------------
def task_node(task: TaskRead) -> TaskNode:
    data = task.model_dump()
    data["status"] = TASK_STATUS.to_external(task.status)
    data["priority"] = TASK_PRIORITY.to_external(task.priority)
    return TaskNode(**data)


def project_node(project: ProjectRead) -> ProjectNode:
    data = project.model_dump()
    data["status"] = PROJECT_STATUS.to_external(project.status)
    return ProjectNode(**data)


def project_with_tasks_node(project: ProjectWithTasks) -> ProjectWithTasksNode:
    data = project.model_dump(exclude={"tasks"})
    data["status"] = PROJECT_STATUS.to_external(project.status)
    return ProjectWithTasksNode(**data, tasks=[task_node(task) for task in project.tasks])


def _internal_values(payload: BaseModel, mappings: Dict[str, EnumMapping], exclude_unset: bool) -> dict:
    data = payload.model_dump(exclude_unset=exclude_unset)
    for field, mapping in mappings.items():
        if field in data:
            data[field] = mapping.to_internal(data[field])
    return data


def project_create(payload: CreateProjectInput) -> ProjectCreate:
    return ProjectCreate(**_internal_values(payload, {"status": PROJECT_STATUS}, False))


def project_update(payload: UpdateProjectInput) -> ProjectUpdate:
    """Translate a merge-patch body, keeping track of which keys were sent."""
    return ProjectUpdate(**_internal_values(payload, {"status": PROJECT_STATUS}, True))


def task_create(payload: CreateTaskInput) -> TaskCreate:
    return TaskCreate(
        **_internal_values(payload, {"status": TASK_STATUS, "priority": TASK_PRIORITY}, False)
    )


def task_update(payload: UpdateTaskInput) -> TaskUpdate:
    return TaskUpdate(
        **_internal_values(payload, {"status": TASK_STATUS, "priority": TASK_PRIORITY}, True)
    )
