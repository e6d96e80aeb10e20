"""
Pydantic models for aggregated statistics.

Bucket models have one field per enumeration value so that every
bucket is present (with 0) even when no row falls into it.
"""

from .base import CamelModel


class ProjectStatusCounts(CamelModel):
    planning: int = 0
    active: int = 0
    on_hold: int = 0
    completed: int = 0
    cancelled: int = 0


class TaskStatusCounts(CamelModel):
    not_started: int = 0
    in_progress: int = 0
    completed: int = 0
    blocked: int = 0


class TaskPriorityCounts(CamelModel):
    low: int = 0
    medium: int = 0
    high: int = 0
    critical: int = 0


class GlobalStats(CamelModel):
    """System-wide counts and averages."""

    total_projects: int
    total_tasks: int
    projects_by_status: ProjectStatusCounts
    tasks_by_status: TaskStatusCounts
    tasks_by_priority: TaskPriorityCounts
    average_project_progress: float
    average_task_progress: float
    unique_assignees: int
    unique_owners: int


class ProjectStats(CamelModel):
    """Task breakdowns and progress for a single project."""

    project_id: str
    project_name: str
    total_tasks: int
    tasks_by_status: TaskStatusCounts
    tasks_by_priority: TaskPriorityCounts
    overall_progress: int
    average_task_progress: float
    tasks_with_dependencies: int
