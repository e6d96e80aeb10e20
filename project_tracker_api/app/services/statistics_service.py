"""
Aggregated statistics over projects and tasks.

Both reports are read inside a single deferred transaction, so every
count and average comes from the same snapshot even while writers are
active.  Averages are plain arithmetic means (0 when there is nothing
to average); distinct owner and assignee counts ignore unset values.
"""

import logging
import sqlite3
from typing import Dict

from pydantic import BaseModel

from ..core.db import run_blocking
from ..schemas.statistics import (
    GlobalStats,
    ProjectStats,
    ProjectStatusCounts,
    TaskPriorityCounts,
    TaskStatusCounts,
)
from .base import BaseService
from .project_service import ProjectService

logger = logging.getLogger(__name__)


def _bucket_counts(conn: sqlite3.Connection, query: str, params=()) -> Dict[str, int]:
    return {row[0]: row[1] for row in conn.execute(query, params).fetchall()}


def _fill(model_cls, counts: Dict[str, int]) -> BaseModel:
    """Build a bucket model with one field per enum value, defaulting to 0."""
    return model_cls(**{name: counts.get(name, 0) for name in model_cls.model_fields})


class StatisticsService(BaseService):

    @run_blocking
    def get_global_stats(self) -> GlobalStats:
        """Return system-wide counts, status breakdowns and averages."""
        with self.database.transaction(immediate=False) as conn:
            projects = conn.execute(
                """
                SELECT COUNT(*) AS total,
                       COALESCE(AVG(progress), 0) AS average_progress,
                       COUNT(DISTINCT NULLIF(owner, '')) AS owners
                FROM projects
                """
            ).fetchone()
            tasks = conn.execute(
                """
                SELECT COUNT(*) AS total,
                       COALESCE(AVG(progress), 0) AS average_progress,
                       COUNT(DISTINCT NULLIF(assignee, '')) AS assignees
                FROM tasks
                """
            ).fetchone()
            projects_by_status = _bucket_counts(
                conn, "SELECT status, COUNT(*) FROM projects GROUP BY status"
            )
            tasks_by_status = _bucket_counts(
                conn, "SELECT status, COUNT(*) FROM tasks GROUP BY status"
            )
            tasks_by_priority = _bucket_counts(
                conn, "SELECT priority, COUNT(*) FROM tasks GROUP BY priority"
            )

        return GlobalStats(
            total_projects=projects["total"],
            total_tasks=tasks["total"],
            projects_by_status=_fill(ProjectStatusCounts, projects_by_status),
            tasks_by_status=_fill(TaskStatusCounts, tasks_by_status),
            tasks_by_priority=_fill(TaskPriorityCounts, tasks_by_priority),
            average_project_progress=float(projects["average_progress"]),
            average_task_progress=float(tasks["average_progress"]),
            unique_assignees=tasks["assignees"],
            unique_owners=projects["owners"],
        )

    @run_blocking
    def get_project_stats(self, project_id: str) -> ProjectStats:
        """Return task breakdowns and progress for one project.

        ``overall_progress`` is the project's stored progress as last
        recalculated; ``average_task_progress`` is the live mean over
        its tasks.  Raises ``ProjectNotFoundError`` if the project does
        not exist.
        """
        with self.database.transaction(immediate=False) as conn:
            project = ProjectService._fetch_project(conn, project_id)
            tasks = conn.execute(
                """
                SELECT COUNT(*) AS total,
                       COALESCE(AVG(progress), 0) AS average_progress,
                       COALESCE(SUM(CASE WHEN json_array_length(dependencies) > 0
                                         THEN 1 ELSE 0 END), 0) AS with_dependencies
                FROM tasks
                WHERE project_id = ?
                """,
                (project_id,),
            ).fetchone()
            tasks_by_status = _bucket_counts(
                conn,
                "SELECT status, COUNT(*) FROM tasks WHERE project_id = ? GROUP BY status",
                (project_id,),
            )
            tasks_by_priority = _bucket_counts(
                conn,
                "SELECT priority, COUNT(*) FROM tasks WHERE project_id = ? GROUP BY priority",
                (project_id,),
            )

        logger.debug("Computed statistics for project %s", project_id)
        return ProjectStats(
            project_id=project.id,
            project_name=project.name,
            total_tasks=tasks["total"],
            tasks_by_status=_fill(TaskStatusCounts, tasks_by_status),
            tasks_by_priority=_fill(TaskPriorityCounts, tasks_by_priority),
            overall_progress=project.progress,
            average_task_progress=float(tasks["average_progress"]),
            tasks_with_dependencies=tasks["with_dependencies"],
        )
