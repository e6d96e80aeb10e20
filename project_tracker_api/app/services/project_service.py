"""
Service layer for projects.

Provides CRUD operations, free-text search and progress roll-up for
projects.  Every public method is a coroutine whose SQLite work runs in
a worker thread (see ``core.db.run_blocking``) on a connection opened
for that call alone.

Multi-step operations run inside ``Database.transaction`` so that no
other writer can interleave between the read and the write:

* ``update_project`` reads the stored row and writes the merged row;
* ``delete_project`` counts the project's tasks, deletes them and then
  deletes the project, as one unit;
* ``update_project_progress`` reads the task progress values and
  writes the recomputed project progress.

All queries use parameterized statements; dynamic ``WHERE`` clauses are
produced by ``services.predicates``.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Iterable, List, Optional, Sequence

from ..core.db import run_blocking
from ..core.exceptions import ProjectNotFoundError
from ..schemas.project import (
    DEFAULT_PROJECT_SEARCH_FIELDS,
    ProjectCreate,
    ProjectDeleteResult,
    ProjectRead,
    ProjectSearchField,
    ProjectStatus,
    ProjectUpdate,
    ProjectWithTasks,
)
from ..schemas.task import TaskStatus
from .base import BaseService, coerce_enum, present, search_fields, search_text
from .mapping import generate_id, project_to_row, row_to_project, row_to_task, utcnow
from .predicates import PROJECTS, Operator, Predicate, build_where

logger = logging.getLogger(__name__)

PROJECT_ORDER = " ORDER BY projects.updated_at DESC, projects.rowid DESC"


def round_half_up_mean(values: Sequence[int]) -> int:
    """Mean of non-negative integers rounded to the nearest integer, ties up.

    Computed in integer arithmetic: ``round(21.0) == 21`` for
    ``[10, 20, 33]`` and ``50.5`` rounds to ``51`` for ``[50, 51]``.
    An empty sequence gives 0.
    """
    if not values:
        return 0
    count = len(values)
    return (2 * sum(values) + count) // (2 * count)


class ProjectService(BaseService):
    """Service for creating, querying, updating and deleting projects."""

    @staticmethod
    def _fetch_project(conn: sqlite3.Connection, project_id: str) -> ProjectRead:
        row = conn.execute("SELECT * FROM projects WHERE id = ?", (project_id,)).fetchone()
        if not row:
            raise ProjectNotFoundError(project_id)
        return row_to_project(row)

    def _select_projects(self, where: str, params: List) -> List[ProjectRead]:
        with self.database.connection() as conn:
            rows = conn.execute("SELECT * FROM projects" + where + PROJECT_ORDER, params).fetchall()
        return [row_to_project(row) for row in rows]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @run_blocking
    def list_projects(
        self,
        status: Optional[str] = None,
        owner: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> List[ProjectRead]:
        """Return projects, most recently updated first.

        Filters are combined with AND:

        - ``status``: exact status (internal lower-snake value);
        - ``owner``: exact owner;
        - ``tags``: the project has at least one of these tags.

        ``None`` or empty values are ignored.
        """
        predicates: List[Predicate] = []
        if present(status):
            predicates.append(
                Predicate("status", Operator.EQUALS, coerce_enum(ProjectStatus, status, "status").value)
            )
        if present(owner):
            predicates.append(Predicate("owner", Operator.EQUALS, owner))
        tag_values = [tag for tag in (tags or []) if tag]
        if tag_values:
            predicates.append(Predicate("tags", Operator.ANY_OF, tag_values))
        where, params = build_where(PROJECTS, all_of=predicates)
        return self._select_projects(where, params)

    @run_blocking
    def get_project(self, project_id: str) -> ProjectRead:
        """Retrieve a single project by ID.

        Raises ``ProjectNotFoundError`` if the project does not exist.
        """
        with self.database.connection() as conn:
            return self._fetch_project(conn, project_id)

    @run_blocking
    def get_project_with_tasks(self, project_id: str) -> ProjectWithTasks:
        """Retrieve a project together with its tasks in creation order."""
        with self.database.transaction(immediate=False) as conn:
            project = self._fetch_project(conn, project_id)
            rows = conn.execute(
                "SELECT * FROM tasks WHERE project_id = ? ORDER BY created_at ASC, rowid ASC",
                (project_id,),
            ).fetchall()
        tasks = [row_to_task(row) for row in rows]
        return ProjectWithTasks(
            **project.model_dump(),
            tasks=tasks,
            task_count=len(tasks),
            completed_task_count=sum(1 for task in tasks if task.status is TaskStatus.COMPLETED),
        )

    @run_blocking
    def search_projects(
        self,
        query: str,
        fields: Optional[Iterable[str]] = None,
    ) -> List[ProjectRead]:
        """Case-insensitive substring search over the selected fields.

        A project matches if any selected field (``name``,
        ``description``, ``tags``) contains ``query``; for ``tags`` any
        single tag may contain it.  ``fields=None`` searches all three.
        """
        text = search_text(query)
        selected = search_fields(ProjectSearchField, fields, DEFAULT_PROJECT_SEARCH_FIELDS)
        alternatives = [
            Predicate(
                field.value,
                Operator.ELEMENT_CONTAINS if field is ProjectSearchField.TAGS else Operator.CONTAINS,
                text,
            )
            for field in selected
        ]
        where, params = build_where(PROJECTS, any_of=alternatives)
        return self._select_projects(where, params)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    @run_blocking
    def create_project(self, data: ProjectCreate) -> ProjectRead:
        """Insert a new project and return it.

        The ID is generated here; ``progress`` starts at 0.
        """
        now = utcnow()
        project = ProjectRead(
            **data.model_dump(),
            id=generate_id(),
            progress=0,
            created_at=now,
            updated_at=now,
        )
        with self.database.connection() as conn:
            conn.execute(
                """
                INSERT INTO projects (id, name, description, status, start_date, end_date,
                                      progress, owner, tags, created_at, updated_at)
                VALUES (:id, :name, :description, :status, :start_date, :end_date,
                        :progress, :owner, :tags, :created_at, :updated_at)
                """,
                project_to_row(project),
            )
        logger.info("Created project %s (%s)", project.id, project.name)
        return project

    @run_blocking
    def update_project(self, project_id: str, data: ProjectUpdate) -> ProjectRead:
        """Apply a merge-patch update and return the updated project.

        Only fields set on ``data`` are changed and ``updated_at`` is
        refreshed; an update with no fields set returns the stored
        project untouched.  Raises ``ProjectNotFoundError`` if the
        project does not exist.
        """
        changes = data.model_dump(exclude_unset=True)
        if "tags" in changes and changes["tags"] is None:
            changes["tags"] = []
        with self.database.transaction() as conn:
            current = self._fetch_project(conn, project_id)
            if not changes:
                return current
            updated = current.model_copy(update={**changes, "updated_at": utcnow()})
            conn.execute(
                """
                UPDATE projects
                SET name = :name, description = :description, status = :status,
                    start_date = :start_date, end_date = :end_date, owner = :owner,
                    tags = :tags, updated_at = :updated_at
                WHERE id = :id
                """,
                project_to_row(updated),
            )
        logger.info("Updated project %s (fields: %s)", project_id, ", ".join(sorted(changes)))
        return updated

    @run_blocking
    def delete_project(self, project_id: str) -> ProjectDeleteResult:
        """Delete a project and all of its tasks.

        Returns the project name and the number of tasks removed.
        Raises ``ProjectNotFoundError`` if the project does not exist.
        """
        with self.database.transaction() as conn:
            project = self._fetch_project(conn, project_id)
            task_count = conn.execute(
                "SELECT COUNT(*) FROM tasks WHERE project_id = ?", (project_id,)
            ).fetchone()[0]
            conn.execute("DELETE FROM tasks WHERE project_id = ?", (project_id,))
            conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))
        logger.info("Deleted project %s with %s tasks", project_id, task_count)
        return ProjectDeleteResult(id=project_id, name=project.name, task_count=task_count)

    @run_blocking
    def update_project_progress(self, project_id: str) -> ProjectRead:
        """Recompute a project's progress from its tasks and store it.

        Progress becomes the mean of the tasks' progress rounded half up,
        or 0 for a project without tasks.  This is the only operation
        that changes a project's progress after creation.
        """
        with self.database.transaction() as conn:
            project = self._fetch_project(conn, project_id)
            rows = conn.execute(
                "SELECT progress FROM tasks WHERE project_id = ?", (project_id,)
            ).fetchall()
            progress = round_half_up_mean([row["progress"] for row in rows])
            updated = project.model_copy(update={"progress": progress, "updated_at": utcnow()})
            row = project_to_row(updated)
            conn.execute(
                "UPDATE projects SET progress = ?, updated_at = ? WHERE id = ?",
                (row["progress"], row["updated_at"], project_id),
            )
        logger.info("Project %s progress recalculated to %s%%", project_id, progress)
        return updated
