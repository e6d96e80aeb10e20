"""
Tests for project operations of the data service.

Covers creation defaults, merge-patch updates, filters and ordering,
cascade delete and progress recalculation.
"""

import asyncio
from datetime import datetime, timezone

import pytest

from project_tracker_api.app.core.exceptions import ProjectNotFoundError, ValidationError
from project_tracker_api.app.schemas.project import ProjectStatus, ProjectUpdate

pytestmark = pytest.mark.asyncio


async def test_create_applies_defaults(service, make_project):
    created = await make_project()

    fetched = await service.get_project(created.id)

    assert fetched == created
    assert fetched.status is ProjectStatus.PLANNING
    assert fetched.progress == 0
    assert fetched.tags == []
    assert fetched.owner is None
    assert fetched.start_date is None
    assert fetched.created_at == fetched.updated_at


async def test_create_generates_distinct_url_safe_ids(make_project):
    first = await make_project()
    second = await make_project()

    assert first.id != second.id
    for project_id in (first.id, second.id):
        assert len(project_id) == 12
        assert all(c.isalnum() or c in "-_" for c in project_id)


async def test_create_round_trips_all_fields(service, make_project):
    start = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
    created = await make_project(
        status="active",
        start_date=start,
        end_date="2024-06-30T17:00:00Z",
        owner="dana",
        tags=["web", "marketing"],
    )

    fetched = await service.get_project(created.id)

    assert fetched.status is ProjectStatus.ACTIVE
    assert fetched.start_date == start
    assert fetched.end_date == datetime(2024, 6, 30, 17, 0, tzinfo=timezone.utc)
    assert fetched.owner == "dana"
    assert fetched.tags == ["web", "marketing"]


async def test_get_missing_project_raises_not_found(service):
    with pytest.raises(ProjectNotFoundError) as excinfo:
        await service.get_project("missing")
    assert "missing" in str(excinfo.value)


async def test_update_without_fields_leaves_project_unchanged(service, make_project):
    created = await make_project(owner="dana", tags=["web"])

    returned = await service.update_project(created.id, ProjectUpdate())

    assert returned == created
    assert await service.get_project(created.id) == created


async def test_update_merges_only_provided_fields(service, make_project):
    created = await make_project(owner="dana", tags=["web"], start_date="2024-01-01T00:00:00Z")

    updated = await service.update_project(
        created.id, ProjectUpdate(status="on_hold", description="Paused for review")
    )

    assert updated.status is ProjectStatus.ON_HOLD
    assert updated.description == "Paused for review"
    assert updated.name == created.name
    assert updated.owner == "dana"
    assert updated.tags == ["web"]
    assert updated.start_date == created.start_date
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at
    assert await service.get_project(created.id) == updated


async def test_update_explicit_empty_values_clear_optional_fields(service, make_project):
    created = await make_project(owner="dana", tags=["web"], end_date="2024-06-30T00:00:00Z")

    updated = await service.update_project(
        created.id, ProjectUpdate.model_validate({"owner": "", "endDate": None, "tags": None})
    )

    assert updated.owner is None
    assert updated.end_date is None
    assert updated.tags == []


async def test_update_rejects_null_for_required_field():
    with pytest.raises(ValueError):
        ProjectUpdate.model_validate({"name": None})


async def test_update_rejects_progress():
    with pytest.raises(ValueError):
        ProjectUpdate.model_validate({"progress": 50})


async def test_update_missing_project_raises_not_found(service):
    with pytest.raises(ProjectNotFoundError):
        await service.update_project("missing", ProjectUpdate(name="Renamed"))


async def test_list_orders_by_most_recently_updated(service, make_project):
    first = await make_project(name="First")
    second = await make_project(name="Second")
    await service.update_project(first.id, ProjectUpdate(owner="dana"))

    projects = await service.list_projects()

    assert [p.id for p in projects] == [first.id, second.id]


async def test_list_filters_are_conjunctive(service, make_project):
    match = await make_project(status="active", owner="dana", tags=["web", "q3"])
    await make_project(status="active", owner="lee", tags=["web"])
    await make_project(status="planning", owner="dana", tags=["q3"])
    await make_project(status="active", owner="dana", tags=["mobile"])

    projects = await service.list_projects(status="active", owner="dana", tags=["q3", "infra"])

    assert [p.id for p in projects] == [match.id]


async def test_list_ignores_empty_filters(service, make_project):
    await make_project()
    await make_project()

    assert len(await service.list_projects(status="", owner=None, tags=[])) == 2


async def test_list_rejects_unknown_status(service):
    with pytest.raises(ValidationError):
        await service.list_projects(status="archived")


async def test_delete_cascades_to_tasks(service, make_project, make_task):
    project = await make_project()
    for title in ("One", "Two", "Three"):
        await make_task(project.id, title=title)

    result = await service.delete_project(project.id)

    assert result.task_count == 3
    assert result.name == project.name
    assert await service.list_tasks(project_id=project.id) == []
    with pytest.raises(ProjectNotFoundError):
        await service.get_project(project.id)


async def test_delete_leaves_other_projects_alone(service, make_project, make_task):
    doomed = await make_project()
    kept = await make_project()
    await make_task(doomed.id)
    kept_task = await make_task(kept.id)

    await service.delete_project(doomed.id)

    assert await service.list_tasks() == [kept_task]


async def test_delete_missing_project_raises_not_found(service):
    with pytest.raises(ProjectNotFoundError):
        await service.delete_project("missing")


async def test_update_progress_uses_rounded_mean(service, make_project, make_task):
    project = await make_project()
    for progress in (10, 20, 33):
        await make_task(project.id, progress=progress)

    updated = await service.update_project_progress(project.id)

    assert updated.progress == 21
    assert updated.updated_at > project.updated_at
    assert (await service.get_project(project.id)).progress == 21


async def test_update_progress_rounds_half_up(service, make_project, make_task):
    project = await make_project()
    await make_task(project.id, progress=50)
    await make_task(project.id, progress=51)

    assert (await service.update_project_progress(project.id)).progress == 51


async def test_update_progress_without_tasks_is_zero(service, make_project):
    project = await make_project()

    assert (await service.update_project_progress(project.id)).progress == 0


async def test_update_progress_missing_project_raises_not_found(service):
    with pytest.raises(ProjectNotFoundError):
        await service.update_project_progress("missing")


async def test_get_project_with_tasks(service, make_project, make_task):
    project = await make_project()
    first = await make_task(project.id, title="First", status="completed")
    second = await make_task(project.id, title="Second")

    detailed = await service.get_project_with_tasks(project.id)

    assert detailed.id == project.id
    assert [t.id for t in detailed.tasks] == [first.id, second.id]
    assert detailed.task_count == 2
    assert detailed.completed_task_count == 1


async def test_concurrent_creates_do_not_interfere(service, make_project):
    created = await asyncio.gather(*(make_project(name=f"Project {i}") for i in range(8)))

    listed = await service.list_projects()

    assert {p.id for p in listed} == {p.id for p in created}


async def test_naive_and_offset_dates_are_returned_as_stored(service, make_project):
    created = await make_project(
        start_date="2024-03-01T09:30:00", end_date="2024-06-30T17:00:00+02:00"
    )

    fetched = await service.get_project(created.id)

    assert fetched == created
    assert created.start_date == datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
    assert created.end_date == datetime(2024, 6, 30, 15, 0, tzinfo=timezone.utc)
    assert created.end_date.utcoffset().total_seconds() == 0

    updated = await service.update_project(
        created.id, ProjectUpdate.model_validate({"startDate": "2024-04-01T08:00:00"})
    )

    assert updated == await service.get_project(created.id)
    assert updated.start_date == datetime(2024, 4, 1, 8, 0, tzinfo=timezone.utc)


async def test_search_matches_any_selected_field(service, make_project):
    by_name = await make_project(name="Finance portal", description="Billing")
    by_tag = await make_project(name="Ledger", description="Books", tags=["finance"])
    await make_project(name="Website", description="Marketing", tags=["web"])

    everywhere = await service.search_projects("FINANCE")
    names_only = await service.search_projects("finance", fields=["name"])

    assert [p.id for p in everywhere] == [by_tag.id, by_name.id]
    assert [p.id for p in names_only] == [by_name.id]


@pytest.mark.parametrize(
    "query, fields",
    [("", None), ("   ", None), ("finance", []), ("finance", ["assignee"])],
)
async def test_search_rejects_invalid_input(service, query, fields):
    with pytest.raises(ValidationError):
        await service.search_projects(query, fields=fields)
