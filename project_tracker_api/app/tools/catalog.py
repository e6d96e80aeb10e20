"""
Catalog of named tools exposed by the tool adapter.

Each entry has a ``name``, a ``description`` and an ``inputSchema`` (a
JSON schema object).  Argument names are camelCase and enumerations use
the internal lower-snake values.
"""

from typing import Any, Dict, List, Optional

from ..schemas.project import DEFAULT_PROJECT_SEARCH_FIELDS, ProjectSearchField, ProjectStatus
from ..schemas.task import DEFAULT_TASK_SEARCH_FIELDS, TaskPriority, TaskSearchField, TaskStatus


def _enum(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]


def _string(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


def _string_list(description: str) -> Dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


def _object(properties: Dict[str, Any], required: Optional[List[str]] = None) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


PROJECT_STATUS = {"type": "string", "enum": _enum(ProjectStatus)}
TASK_STATUS = {"type": "string", "enum": _enum(TaskStatus)}
TASK_PRIORITY = {"type": "string", "enum": _enum(TaskPriority)}
PROGRESS = {"type": "integer", "minimum": 0, "maximum": 100, "description": "Task progress percentage"}

PROJECT_FIELDS = {
    "name": _string("Project name"),
    "description": _string("Project description"),
    "status": PROJECT_STATUS,
    "startDate": _string("Start date (ISO format)"),
    "endDate": _string("End date (ISO format)"),
    "owner": _string("Project owner"),
    "tags": _string_list("Project tags"),
}

TASK_FIELDS = {
    "title": _string("Task title"),
    "description": _string("Task description"),
    "status": TASK_STATUS,
    "priority": TASK_PRIORITY,
    "assignee": _string("Task assignee"),
    "dueDate": _string("Due date (ISO format)"),
    "progress": PROGRESS,
    "dependencies": _string_list("Array of task IDs this task depends on"),
}


TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "name": "list_projects",
        "description": "List all projects with their basic information",
        "inputSchema": _object(
            {
                "status": {**PROJECT_STATUS, "description": "Filter projects by status (optional)"},
                "owner": _string("Filter projects by owner (optional)"),
                "tags": _string_list("Only projects having at least one of these tags (optional)"),
            }
        ),
    },
    {
        "name": "get_project",
        "description": "Get detailed information about a specific project including all tasks",
        "inputSchema": _object(
            {"projectId": _string("The ID of the project to retrieve")}, ["projectId"]
        ),
    },
    {
        "name": "create_project",
        "description": "Create a new project",
        "inputSchema": _object(
            {**PROJECT_FIELDS, "status": {**PROJECT_STATUS, "default": ProjectStatus.PLANNING.value}},
            ["name", "description"],
        ),
    },
    {
        "name": "update_project",
        "description": "Update an existing project",
        "inputSchema": _object(
            {"projectId": _string("Project ID to update"), **PROJECT_FIELDS}, ["projectId"]
        ),
    },
    {
        "name": "delete_project",
        "description": "Delete a project and all its tasks",
        "inputSchema": _object({"projectId": _string("Project ID to delete")}, ["projectId"]),
    },
    {
        "name": "list_tasks",
        "description": "List tasks from a specific project or all projects",
        "inputSchema": _object(
            {
                "projectId": _string(
                    "Project ID to filter tasks (optional - if not provided, lists all tasks)"
                ),
                "status": {**TASK_STATUS, "description": "Filter tasks by status (optional)"},
                "priority": {**TASK_PRIORITY, "description": "Filter tasks by priority (optional)"},
                "assignee": _string("Filter tasks by assignee (optional)"),
            }
        ),
    },
    {
        "name": "get_task",
        "description": "Get detailed information about a specific task",
        "inputSchema": _object(
            {
                "projectId": _string("Project ID containing the task"),
                "taskId": _string("Task ID to retrieve"),
            },
            ["projectId", "taskId"],
        ),
    },
    {
        "name": "create_task",
        "description": "Create a new task in a project",
        "inputSchema": _object(
            {
                "projectId": _string("Project ID to add task to"),
                **TASK_FIELDS,
                "status": {**TASK_STATUS, "default": TaskStatus.NOT_STARTED.value},
                "priority": {**TASK_PRIORITY, "default": TaskPriority.MEDIUM.value},
                "progress": {**PROGRESS, "default": 0},
            },
            ["projectId", "title", "description"],
        ),
    },
    {
        "name": "update_task",
        "description": "Update an existing task",
        "inputSchema": _object(
            {
                "projectId": _string("Project ID containing the task"),
                "taskId": _string("Task ID to update"),
                **TASK_FIELDS,
            },
            ["projectId", "taskId"],
        ),
    },
    {
        "name": "delete_task",
        "description": "Delete a task from a project",
        "inputSchema": _object(
            {
                "projectId": _string("Project ID containing the task"),
                "taskId": _string("Task ID to delete"),
            },
            ["projectId", "taskId"],
        ),
    },
    {
        "name": "update_project_progress",
        "description": "Automatically calculate and update project progress based on task completion",
        "inputSchema": _object(
            {"projectId": _string("Project ID to update progress for")}, ["projectId"]
        ),
    },
    {
        "name": "search_projects",
        "description": "Search projects by name, description, or tags",
        "inputSchema": _object(
            {
                "query": _string("Search query"),
                "searchFields": {
                    "type": "array",
                    "items": {"type": "string", "enum": _enum(ProjectSearchField)},
                    "default": [field.value for field in DEFAULT_PROJECT_SEARCH_FIELDS],
                    "description": "Fields to search in",
                },
            },
            ["query"],
        ),
    },
    {
        "name": "search_tasks",
        "description": "Search tasks by title, description, or assignee",
        "inputSchema": _object(
            {
                "query": _string("Search query"),
                "projectId": _string("Limit search to specific project (optional)"),
                "searchFields": {
                    "type": "array",
                    "items": {"type": "string", "enum": _enum(TaskSearchField)},
                    "default": [field.value for field in DEFAULT_TASK_SEARCH_FIELDS],
                    "description": "Fields to search in",
                },
            },
            ["query"],
        ),
    },
    {
        "name": "get_project_stats",
        "description": "Get statistics for a project or all projects",
        "inputSchema": _object(
            {
                "projectId": _string(
                    "Project ID for specific stats (optional - if not provided, gets global stats)"
                )
            }
        ),
    },
]

TOOL_NAMES = frozenset(tool["name"] for tool in TOOL_DEFINITIONS)
