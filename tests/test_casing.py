"""
Tests for the enum casing tables of the query API.
"""

from enum import Enum

import pytest

from project_tracker_api.app.api.v1.casing import (
    PROJECT_STATUS,
    TASK_PRIORITY,
    TASK_STATUS,
    EnumMapping,
    project_update,
)
from project_tracker_api.app.schemas.project import ProjectStatus
from project_tracker_api.app.schemas.query import ProjectStatusName, UpdateProjectInput
from project_tracker_api.app.schemas.task import TaskPriority, TaskStatus


@pytest.mark.parametrize("mapping", [PROJECT_STATUS, TASK_STATUS, TASK_PRIORITY])
def test_mappings_are_total_and_invertible(mapping):
    for member in mapping.external:
        assert mapping.to_external(mapping.to_internal(member)) is member
    for member in mapping.internal:
        assert mapping.to_internal(mapping.to_external(member)) is member


def test_known_values():
    assert PROJECT_STATUS.to_internal("ON_HOLD") is ProjectStatus.ON_HOLD
    assert TASK_STATUS.to_external(TaskStatus.NOT_STARTED).value == "NOT_STARTED"
    assert TASK_PRIORITY.to_internal("CRITICAL") is TaskPriority.CRITICAL
    assert PROJECT_STATUS.to_internal(None) is None


def test_unknown_external_value_is_rejected():
    with pytest.raises(ValueError):
        PROJECT_STATUS.to_internal("on_hold")


def test_incomplete_mapping_cannot_be_built():
    class Partial(str, Enum):
        PLANNING = "PLANNING"

    with pytest.raises(ValueError):
        EnumMapping(Partial, ProjectStatus)


def test_update_translation_keeps_only_sent_keys():
    payload = UpdateProjectInput.model_validate({"status": "ON_HOLD", "owner": None})

    update = project_update(payload)

    assert update.model_fields_set == {"status", "owner"}
    assert update.status is ProjectStatus.ON_HOLD
    assert update.owner is None
    assert ProjectStatusName.ON_HOLD.value == "ON_HOLD"
