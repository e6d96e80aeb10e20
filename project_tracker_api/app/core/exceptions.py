"""Exception classes raised by the data service.

Every error carries a human-readable message naming the missing or
invalid entity.  There are no structured error codes at this layer;
the tool and query adapters translate these classes into their own
error envelopes.
"""

from typing import Any, Optional


class DataServiceError(Exception):
    """Base exception for data service errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(DataServiceError):
    """A referenced project or task does not exist."""

    def __init__(self, message: str, entity_id: Optional[str] = None):
        self.entity_id = entity_id
        super().__init__(message)


class ProjectNotFoundError(NotFoundError):
    """Exception when a project cannot be found."""

    def __init__(self, project_id: str):
        super().__init__(f"Project with ID {project_id} not found", project_id)


class TaskNotFoundError(NotFoundError):
    """Exception when a task cannot be found."""

    def __init__(self, task_id: str, project_id: Optional[str] = None):
        if project_id:
            message = f"Task with ID {task_id} not found in project {project_id}"
        else:
            message = f"Task with ID {task_id} not found"
        self.project_id = project_id
        super().__init__(message, task_id)


class ValidationError(DataServiceError, ValueError):
    """Exception for invalid input that passed schema validation."""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None):
        self.field = field
        self.value = value
        super().__init__(message)


class StorageError(DataServiceError):
    """The storage backend rejected a statement."""
    pass


class BackendUnavailableError(StorageError):
    """The storage backend could not be reached or stayed locked."""
    pass
