"""
Tests for global and per-project statistics.
"""

import pytest

from project_tracker_api.app.core.exceptions import ProjectNotFoundError

pytestmark = pytest.mark.asyncio


async def test_global_stats_on_empty_database(service):
    stats = await service.get_global_stats()

    assert stats.total_projects == 0
    assert stats.total_tasks == 0
    assert stats.average_project_progress == 0
    assert stats.average_task_progress == 0
    assert stats.projects_by_status.planning == 0
    assert stats.unique_owners == 0


async def test_global_stats_partition_the_dataset(service, make_project, make_task):
    planning = await make_project(status="planning", owner="dana")
    active = await make_project(status="active", owner="dana")
    await make_project(status="active", owner="")
    await make_task(planning.id, status="completed", progress=100, assignee="sam")
    await make_task(planning.id, status="completed", progress=100, priority="high", assignee="sam")
    await make_task(active.id, status="blocked", progress=30, priority="critical", assignee="lee")
    await make_task(active.id, status="not_started", progress=5)

    stats = await service.get_global_stats()

    assert stats.total_projects == 3
    assert stats.total_tasks == 4
    assert stats.projects_by_status.active == 2
    assert stats.projects_by_status.planning == 1
    assert stats.projects_by_status.on_hold == 0
    assert stats.tasks_by_status.completed == 2
    assert stats.tasks_by_status.blocked == 1
    assert stats.tasks_by_status.not_started == 1
    assert stats.tasks_by_status.in_progress == 0
    assert stats.tasks_by_priority.medium == 2
    assert stats.tasks_by_priority.high == 1
    assert stats.tasks_by_priority.critical == 1
    assert stats.average_task_progress == pytest.approx((100 + 100 + 30 + 5) / 4)
    assert stats.average_project_progress == 0
    assert stats.unique_assignees == 2
    assert stats.unique_owners == 1


async def test_global_stats_serialize_with_camel_case_buckets(service, make_project):
    await make_project(status="on_hold")

    payload = (await service.get_global_stats()).model_dump(by_alias=True)

    assert payload["projectsByStatus"]["onHold"] == 1
    assert payload["tasksByStatus"]["notStarted"] == 0
    assert "averageTaskProgress" in payload


async def test_project_stats(service, make_project, make_task):
    project = await make_project(name="Mobile app")
    other = await make_project(name="Other")
    await make_task(project.id, status="in_progress", progress=20, dependencies=["a"])
    await make_task(project.id, status="completed", progress=100, priority="low")
    await make_task(project.id, progress=0, dependencies=[])
    await make_task(other.id, status="blocked", progress=90, dependencies=["b"])
    await service.update_project_progress(project.id)

    stats = await service.get_project_stats(project.id)

    assert stats.project_id == project.id
    assert stats.project_name == "Mobile app"
    assert stats.total_tasks == 3
    assert stats.tasks_by_status.in_progress == 1
    assert stats.tasks_by_status.completed == 1
    assert stats.tasks_by_status.not_started == 1
    assert stats.tasks_by_status.blocked == 0
    assert stats.tasks_by_priority.low == 1
    assert stats.tasks_by_priority.medium == 2
    assert stats.overall_progress == 40
    assert stats.average_task_progress == pytest.approx(40.0)
    assert stats.tasks_with_dependencies == 1


async def test_project_stats_report_stored_progress(service, make_project, make_task):
    project = await make_project()
    await make_task(project.id, progress=80)

    stats = await service.get_project_stats(project.id)

    assert stats.overall_progress == 0
    assert stats.average_task_progress == pytest.approx(80.0)


async def test_project_stats_without_tasks(service, make_project):
    project = await make_project()

    stats = await service.get_project_stats(project.id)

    assert stats.total_tasks == 0
    assert stats.average_task_progress == 0
    assert stats.tasks_with_dependencies == 0


async def test_project_stats_missing_project(service):
    with pytest.raises(ProjectNotFoundError):
        await service.get_project_stats("missing")
