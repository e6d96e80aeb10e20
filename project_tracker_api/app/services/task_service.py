"""
Service layer for tasks.

Tasks always belong to an existing project.  Creation checks that the
project exists and inserts the task inside one ``BEGIN IMMEDIATE``
transaction, so a task can never be written for a project that is
deleted concurrently, and nothing is written when the check fails.

Task IDs are unique across all projects.  ``get_task``, ``update_task``
and ``delete_task`` optionally take the owning ``project_id``; when it
is given, a task of another project is reported as not found in that
project.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Iterable, List, Optional

from ..core.db import run_blocking
from ..core.exceptions import ProjectNotFoundError, TaskNotFoundError
from ..schemas.task import (
    DEFAULT_TASK_SEARCH_FIELDS,
    TaskCreate,
    TaskDeleteResult,
    TaskPriority,
    TaskRead,
    TaskSearchField,
    TaskStatus,
    TaskUpdate,
)
from .base import BaseService, coerce_enum, present, search_fields, search_text
from .mapping import generate_id, row_to_task, task_to_row, utcnow
from .predicates import TASKS, Operator, Predicate, build_where

logger = logging.getLogger(__name__)

TASK_ORDER = " ORDER BY tasks.created_at ASC, tasks.rowid ASC"


class TaskService(BaseService):
    """Service for creating, querying, updating and deleting tasks."""

    @staticmethod
    def _fetch_task(
        conn: sqlite3.Connection, task_id: str, project_id: Optional[str] = None
    ) -> TaskRead:
        query = "SELECT * FROM tasks WHERE id = ?"
        params = [task_id]
        if present(project_id):
            query += " AND project_id = ?"
            params.append(project_id)
        row = conn.execute(query, params).fetchone()
        if not row:
            raise TaskNotFoundError(task_id, project_id or None)
        return row_to_task(row)

    def _select_tasks(self, where: str, params: List) -> List[TaskRead]:
        with self.database.connection() as conn:
            rows = conn.execute("SELECT * FROM tasks" + where + TASK_ORDER, params).fetchall()
        return [row_to_task(row) for row in rows]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @run_blocking
    def list_tasks(
        self,
        project_id: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        assignee: Optional[str] = None,
    ) -> List[TaskRead]:
        """Return tasks in creation order, optionally filtered.

        All given filters must match (AND).  ``None`` or empty values are
        ignored.  Listing the tasks of an unknown project returns an
        empty list.
        """
        predicates: List[Predicate] = []
        if present(project_id):
            predicates.append(Predicate("project_id", Operator.EQUALS, project_id))
        if present(status):
            predicates.append(
                Predicate("status", Operator.EQUALS, coerce_enum(TaskStatus, status, "status").value)
            )
        if present(priority):
            predicates.append(
                Predicate(
                    "priority", Operator.EQUALS, coerce_enum(TaskPriority, priority, "priority").value
                )
            )
        if present(assignee):
            predicates.append(Predicate("assignee", Operator.EQUALS, assignee))
        where, params = build_where(TASKS, all_of=predicates)
        return self._select_tasks(where, params)

    @run_blocking
    def list_project_tasks(self, project_id: str) -> List[TaskRead]:
        """Return the tasks of an existing project in creation order."""
        with self.database.transaction(immediate=False) as conn:
            if not conn.execute("SELECT 1 FROM projects WHERE id = ?", (project_id,)).fetchone():
                raise ProjectNotFoundError(project_id)
            rows = conn.execute(
                "SELECT * FROM tasks WHERE project_id = ?" + TASK_ORDER, (project_id,)
            ).fetchall()
        return [row_to_task(row) for row in rows]

    @run_blocking
    def get_task(self, task_id: str, project_id: Optional[str] = None) -> TaskRead:
        """Retrieve a single task by ID.

        Raises ``TaskNotFoundError`` if the task does not exist (in
        ``project_id``, when given).
        """
        with self.database.connection() as conn:
            return self._fetch_task(conn, task_id, project_id)

    @run_blocking
    def search_tasks(
        self,
        query: str,
        project_id: Optional[str] = None,
        fields: Optional[Iterable[str]] = None,
    ) -> List[TaskRead]:
        """Case-insensitive substring search over the selected fields.

        A task matches if any selected field (``title``, ``description``,
        ``assignee``) contains ``query``.  ``fields=None`` searches title
        and description.  ``project_id`` restricts the search to one
        project.
        """
        text = search_text(query)
        selected = search_fields(TaskSearchField, fields, DEFAULT_TASK_SEARCH_FIELDS)
        scope: List[Predicate] = []
        if present(project_id):
            scope.append(Predicate("project_id", Operator.EQUALS, project_id))
        alternatives = [Predicate(field.value, Operator.CONTAINS, text) for field in selected]
        where, params = build_where(TASKS, all_of=scope, any_of=alternatives)
        return self._select_tasks(where, params)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    @run_blocking
    def create_task(self, data: TaskCreate) -> TaskRead:
        """Insert a new task into an existing project and return it.

        Raises ``ProjectNotFoundError`` before writing anything if the
        project does not exist.
        """
        now = utcnow()
        task = TaskRead(**data.model_dump(), id=generate_id(), created_at=now, updated_at=now)
        with self.database.transaction() as conn:
            if not conn.execute("SELECT 1 FROM projects WHERE id = ?", (data.project_id,)).fetchone():
                raise ProjectNotFoundError(data.project_id)
            conn.execute(
                """
                INSERT INTO tasks (id, project_id, title, description, status, priority,
                                   assignee, due_date, progress, dependencies,
                                   created_at, updated_at)
                VALUES (:id, :project_id, :title, :description, :status, :priority,
                        :assignee, :due_date, :progress, :dependencies,
                        :created_at, :updated_at)
                """,
                task_to_row(task),
            )
        logger.info("Created task %s (%s) in project %s", task.id, task.title, task.project_id)
        return task

    @run_blocking
    def update_task(
        self,
        task_id: str,
        data: TaskUpdate,
        project_id: Optional[str] = None,
    ) -> TaskRead:
        """Apply a merge-patch update and return the updated task.

        Only fields set on ``data`` are changed; an explicit ``progress``
        of 0 is stored like any other value.  An update with no fields
        set returns the stored task untouched.
        """
        changes = data.model_dump(exclude_unset=True)
        if "dependencies" in changes and changes["dependencies"] is None:
            changes["dependencies"] = []
        with self.database.transaction() as conn:
            current = self._fetch_task(conn, task_id, project_id)
            if not changes:
                return current
            updated = current.model_copy(update={**changes, "updated_at": utcnow()})
            conn.execute(
                """
                UPDATE tasks
                SET title = :title, description = :description, status = :status,
                    priority = :priority, assignee = :assignee, due_date = :due_date,
                    progress = :progress, dependencies = :dependencies,
                    updated_at = :updated_at
                WHERE id = :id
                """,
                task_to_row(updated),
            )
        logger.info("Updated task %s (fields: %s)", task_id, ", ".join(sorted(changes)))
        return updated

    @run_blocking
    def delete_task(self, task_id: str, project_id: Optional[str] = None) -> TaskDeleteResult:
        """Delete a task and return its title for reporting."""
        with self.database.transaction() as conn:
            task = self._fetch_task(conn, task_id, project_id)
            conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        logger.info("Deleted task %s from project %s", task_id, task.project_id)
        return TaskDeleteResult(id=task.id, project_id=task.project_id, title=task.title)
