"""
Tool adapter: named operations with structured arguments.

``ToolAdapter.call_tool`` translates one tool invocation into a data
service call and renders the outcome as a text report inside a content
envelope::

    {"content": [{"type": "text", "text": "..."}]}

Reads, searches and statistics are reported as indented JSON with
camelCase keys; mutations are reported as a sentence.  Every error,
including an unknown tool name or invalid arguments, is reported in the
same envelope as ``Error: <message>`` so that a bad call never breaks
the caller's tool loop.
"""

import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from ..core.exceptions import ValidationError
from ..schemas.base import CamelModel
from ..schemas.project import ProjectCreate, ProjectUpdate
from ..schemas.task import TaskCreate, TaskUpdate
from ..services.data_service import DataService
from .catalog import TOOL_DEFINITIONS

logger = logging.getLogger(__name__)

Arguments = Mapping[str, Any]


class ProjectFilterArguments(CamelModel):
    status: Optional[str] = None
    owner: Optional[str] = None
    tags: Optional[List[str]] = None


class TaskFilterArguments(CamelModel):
    project_id: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    assignee: Optional[str] = None


class SearchArguments(CamelModel):
    """Arguments of the search tools; ``query`` is checked by the service."""

    query: Optional[str] = None
    project_id: Optional[str] = None
    search_fields: Optional[List[str]] = None


def text_content(text: str) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}


def to_json(value: Any) -> str:
    """Serialize models (or lists of models) as indented camelCase JSON."""
    if isinstance(value, BaseModel):
        payload = value.model_dump(mode="json", by_alias=True)
    else:
        payload = [item.model_dump(mode="json", by_alias=True) for item in value]
    return json.dumps(payload, indent=2, ensure_ascii=False)


def describe_error(error: Exception) -> str:
    """Human-readable message for an exception raised during a tool call."""
    if isinstance(error, SchemaValidationError):
        parts = []
        for item in error.errors():
            location = ".".join(str(part) for part in item["loc"])
            parts.append(f"{location}: {item['msg']}" if location else item["msg"])
        return "Invalid arguments: " + "; ".join(parts)
    message = getattr(error, "message", None)
    return message or str(error) or error.__class__.__name__


def _required(arguments: Arguments, key: str) -> str:
    value = arguments.get(key)
    if value is None or value == "":
        raise ValidationError(f"{key} is required", field=key)
    return value


def _without(arguments: Arguments, *keys: str) -> Dict[str, Any]:
    return {key: value for key, value in arguments.items() if key not in keys}


class ToolAdapter:
    """Dispatches tool calls to a ``DataService``."""

    def __init__(self, service: DataService):
        self.service = service
        self._handlers: Dict[str, Callable[[Arguments], Awaitable[str]]] = {
            "list_projects": self._list_projects,
            "get_project": self._get_project,
            "create_project": self._create_project,
            "update_project": self._update_project,
            "delete_project": self._delete_project,
            "list_tasks": self._list_tasks,
            "get_task": self._get_task,
            "create_task": self._create_task,
            "update_task": self._update_task,
            "delete_task": self._delete_task,
            "update_project_progress": self._update_project_progress,
            "search_projects": self._search_projects,
            "search_tasks": self._search_tasks,
            "get_project_stats": self._get_project_stats,
        }

    @staticmethod
    def list_tools() -> List[Dict[str, Any]]:
        """Return the tool catalog."""
        return TOOL_DEFINITIONS

    async def call_tool(self, name: str, arguments: Optional[Arguments] = None) -> Dict[str, Any]:
        """Invoke tool ``name`` and return its report envelope.

        Never raises for a failed call: the error message is returned as
        ``Error: <message>`` text instead.
        """
        logger.debug("Tool call %s with arguments %s", name, arguments)
        try:
            handler = self._handlers.get(name)
            if handler is None:
                raise ValidationError(f"Unknown tool: {name}", field="name", value=name)
            if arguments is not None and not isinstance(arguments, Mapping):
                raise ValidationError("Tool arguments must be an object", field="arguments")
            text = await handler(arguments or {})
        except Exception as e:
            message = describe_error(e)
            logger.warning("Tool %s failed: %s", name, message)
            return text_content(f"Error: {message}")
        return text_content(text)

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------
    async def _list_projects(self, arguments: Arguments) -> str:
        filters = ProjectFilterArguments.model_validate(arguments)
        projects = await self.service.list_projects(
            status=filters.status, owner=filters.owner, tags=filters.tags
        )
        return to_json(projects)

    async def _get_project(self, arguments: Arguments) -> str:
        project = await self.service.get_project_with_tasks(_required(arguments, "projectId"))
        return to_json(project)

    async def _create_project(self, arguments: Arguments) -> str:
        project = await self.service.create_project(ProjectCreate.model_validate(arguments))
        return f'Project "{project.name}" created successfully with ID: {project.id}'

    async def _update_project(self, arguments: Arguments) -> str:
        project_id = _required(arguments, "projectId")
        data = ProjectUpdate.model_validate(_without(arguments, "projectId"))
        project = await self.service.update_project(project_id, data)
        return f'Project "{project.name}" updated successfully'

    async def _delete_project(self, arguments: Arguments) -> str:
        result = await self.service.delete_project(_required(arguments, "projectId"))
        return f'Project "{result.name}" and all {result.task_count} tasks deleted successfully'

    async def _update_project_progress(self, arguments: Arguments) -> str:
        project = await self.service.update_project_progress(_required(arguments, "projectId"))
        return f'Project "{project.name}" progress updated to {project.progress}%'

    async def _search_projects(self, arguments: Arguments) -> str:
        search = SearchArguments.model_validate(arguments)
        _required(arguments, "query")
        projects = await self.service.search_projects(search.query, fields=search.search_fields)
        return to_json(projects)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------
    async def _list_tasks(self, arguments: Arguments) -> str:
        filters = TaskFilterArguments.model_validate(arguments)
        tasks = await self.service.list_tasks(
            project_id=filters.project_id,
            status=filters.status,
            priority=filters.priority,
            assignee=filters.assignee,
        )
        return to_json(tasks)

    async def _get_task(self, arguments: Arguments) -> str:
        task = await self.service.get_task(
            _required(arguments, "taskId"), project_id=arguments.get("projectId")
        )
        return to_json(task)

    async def _create_task(self, arguments: Arguments) -> str:
        task = await self.service.create_task(TaskCreate.model_validate(arguments))
        return f'Task "{task.title}" created successfully with ID: {task.id}'

    async def _update_task(self, arguments: Arguments) -> str:
        task_id = _required(arguments, "taskId")
        data = TaskUpdate.model_validate(_without(arguments, "taskId", "projectId"))
        task = await self.service.update_task(task_id, data, project_id=arguments.get("projectId"))
        return f'Task "{task.title}" updated successfully'

    async def _delete_task(self, arguments: Arguments) -> str:
        result = await self.service.delete_task(
            _required(arguments, "taskId"), project_id=arguments.get("projectId")
        )
        return f'Task "{result.title}" deleted successfully'

    async def _search_tasks(self, arguments: Arguments) -> str:
        search = SearchArguments.model_validate(arguments)
        _required(arguments, "query")
        tasks = await self.service.search_tasks(
            search.query, project_id=search.project_id, fields=search.search_fields
        )
        return to_json(tasks)

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------
    async def _get_project_stats(self, arguments: Arguments) -> str:
        project_id = arguments.get("projectId")
        if project_id:
            return to_json(await self.service.get_project_stats(project_id))
        return to_json(await self.service.get_global_stats())
