"""
Conversion between stored rows and domain entities.

Rows are read as ``sqlite3.Row`` objects (any mapping with ``keys()``
works).  Timestamps are stored as UTC ISO-8601 text with microsecond
precision, so lexical ordering in SQL matches chronological ordering;
array columns are stored as JSON text.  The ``row_to_*`` functions are
total: a missing or null optional column becomes ``None`` and a missing,
null or unreadable array column becomes an empty list.
"""

from __future__ import annotations

import json
import secrets
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional

from ..schemas.project import ProjectRead
from ..schemas.task import TaskRead


def generate_id() -> str:
    """Return a short, URL-safe, non-sequential identifier (12 characters)."""
    return secrets.token_urlsafe(9)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_db_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime for storage; naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_db_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_db_list(values: Optional[Iterable[str]]) -> str:
    return json.dumps(list(values or []))


def from_db_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    try:
        loaded = json.loads(value)
    except (TypeError, json.JSONDecodeError):
        return []
    if not isinstance(loaded, list):
        return []
    return [str(item) for item in loaded]


def _column(row: Mapping[str, Any], name: str) -> Any:
    if name not in row.keys():
        return None
    return row[name]


def row_to_project(row: Mapping[str, Any]) -> ProjectRead:
    """Convert a ``projects`` row to a ``ProjectRead`` entity."""
    return ProjectRead(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        status=row["status"],
        start_date=from_db_timestamp(_column(row, "start_date")),
        end_date=from_db_timestamp(_column(row, "end_date")),
        progress=_column(row, "progress") or 0,
        owner=_column(row, "owner"),
        tags=from_db_list(_column(row, "tags")),
        created_at=from_db_timestamp(row["created_at"]),
        updated_at=from_db_timestamp(row["updated_at"]),
    )


def row_to_task(row: Mapping[str, Any]) -> TaskRead:
    """Convert a ``tasks`` row to a ``TaskRead`` entity."""
    return TaskRead(
        id=row["id"],
        project_id=row["project_id"],
        title=row["title"],
        description=row["description"],
        status=row["status"],
        priority=row["priority"],
        assignee=_column(row, "assignee"),
        due_date=from_db_timestamp(_column(row, "due_date")),
        progress=_column(row, "progress") or 0,
        dependencies=from_db_list(_column(row, "dependencies")),
        created_at=from_db_timestamp(row["created_at"]),
        updated_at=from_db_timestamp(row["updated_at"]),
    )


def project_to_row(project: ProjectRead) -> dict:
    """Convert a project entity to column values for ``projects``."""
    return {
        "id": project.id,
        "name": project.name,
        "description": project.description,
        "status": project.status.value,
        "start_date": to_db_timestamp(project.start_date),
        "end_date": to_db_timestamp(project.end_date),
        "progress": project.progress,
        "owner": project.owner,
        "tags": to_db_list(project.tags),
        "created_at": to_db_timestamp(project.created_at),
        "updated_at": to_db_timestamp(project.updated_at),
    }


def task_to_row(task: TaskRead) -> dict:
    """Convert a task entity to column values for ``tasks``."""
    return {
        "id": task.id,
        "project_id": task.project_id,
        "title": task.title,
        "description": task.description,
        "status": task.status.value,
        "priority": task.priority.value,
        "assignee": task.assignee,
        "due_date": to_db_timestamp(task.due_date),
        "progress": task.progress,
        "dependencies": to_db_list(task.dependencies),
        "created_at": to_db_timestamp(task.created_at),
        "updated_at": to_db_timestamp(task.updated_at),
    }
