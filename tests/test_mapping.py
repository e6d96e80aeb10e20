"""
Tests for row/entity conversion and the small numeric helpers.
"""

import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

from project_tracker_api.app.schemas.project import ProjectStatus
from project_tracker_api.app.schemas.task import TaskPriority, TaskStatus
from project_tracker_api.app.services.mapping import (
    from_db_list,
    from_db_timestamp,
    row_to_project,
    row_to_task,
    to_db_timestamp,
)
from project_tracker_api.app.services.project_service import round_half_up_mean


def _row(**columns):
    """Build a real ``sqlite3.Row`` with the given columns."""
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    names = list(columns)
    placeholders = ", ".join(f"? AS {name}" for name in names)
    row = conn.execute(f"SELECT {placeholders}", [columns[name] for name in names]).fetchone()
    conn.close()
    return row


def test_project_row_with_null_optionals():
    row = _row(
        id="p1",
        name="Website",
        description="Relaunch",
        status="on_hold",
        start_date=None,
        end_date=None,
        progress=40,
        owner=None,
        tags=None,
        created_at="2024-01-01T00:00:00.000000+00:00",
        updated_at="2024-01-02T00:00:00.000000+00:00",
    )

    project = row_to_project(row)

    assert project.status is ProjectStatus.ON_HOLD
    assert project.start_date is None
    assert project.owner is None
    assert project.tags == []
    assert project.progress == 40
    assert project.updated_at == datetime(2024, 1, 2, tzinfo=timezone.utc)


def test_task_row_without_optional_columns():
    row = _row(
        id="t1",
        project_id="p1",
        title="Copy",
        description="Landing page",
        status="blocked",
        priority="critical",
        created_at="2024-01-01T00:00:00.000000+00:00",
        updated_at="2024-01-01T00:00:00.000000+00:00",
    )

    task = row_to_task(row)

    assert task.status is TaskStatus.BLOCKED
    assert task.priority is TaskPriority.CRITICAL
    assert task.assignee is None
    assert task.due_date is None
    assert task.progress == 0
    assert task.dependencies == []


@pytest.mark.parametrize("stored", [None, "", "not json", '{"a": 1}', "null"])
def test_unreadable_lists_become_empty(stored):
    assert from_db_list(stored) == []


def test_lists_keep_order():
    assert from_db_list('["b", "a", "c"]') == ["b", "a", "c"]


def test_timestamps_are_stored_in_utc_with_microseconds():
    local = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))

    stored = to_db_timestamp(local)

    assert stored == "2024-05-01T10:00:00.000000+00:00"
    assert from_db_timestamp(stored) == local


def test_naive_timestamps_are_taken_as_utc():
    assert to_db_timestamp(datetime(2024, 5, 1, 12, 0)) == "2024-05-01T12:00:00.000000+00:00"
    assert from_db_timestamp("2024-05-01T12:00:00") == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_stored_timestamps_sort_chronologically():
    earlier = datetime(2024, 5, 1, 12, 0, 0, 5, tzinfo=timezone.utc)
    later = datetime(2024, 5, 1, 12, 0, 0, 40, tzinfo=timezone.utc)

    assert to_db_timestamp(earlier) < to_db_timestamp(later)


@pytest.mark.parametrize(
    "values, expected",
    [([10, 20, 33], 21), ([], 0), ([50, 51], 51), ([0, 1], 1), ([100], 100), ([1, 1, 2], 1)],
)
def test_round_half_up_mean(values, expected):
    assert round_half_up_mean(values) == expected
