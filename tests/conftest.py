"""Shared fixtures: a scratch SQLite database per test and a service bound to it."""

import pytest
from fastapi.testclient import TestClient

from project_tracker_api.app.core.config import Settings
from project_tracker_api.app.core.db import Database, DatabaseConfig
from project_tracker_api.app.main import create_app
from project_tracker_api.app.schemas.project import ProjectCreate
from project_tracker_api.app.schemas.task import TaskCreate
from project_tracker_api.app.services.data_service import DataService


@pytest.fixture
def database(tmp_path):
    """A migrated database in a temporary file."""
    db = Database(DatabaseConfig(path=str(tmp_path / "tracker.db"), timeout=1.0))
    db.init_schema()
    return db


@pytest.fixture
def service(database):
    return DataService(database=database)


@pytest.fixture
def make_project(service):
    """Create a project with sensible defaults; keyword arguments override them."""

    async def _make(**overrides):
        data = {"name": "Website relaunch", "description": "New marketing site"}
        data.update(overrides)
        return await service.create_project(ProjectCreate(**data))

    return _make


@pytest.fixture
def make_task(service):
    async def _make(project_id, **overrides):
        data = {"project_id": project_id, "title": "Write copy", "description": "Landing page"}
        data.update(overrides)
        return await service.create_task(TaskCreate(**data))

    return _make


@pytest.fixture
def client(service, tmp_path):
    """A TestClient serving an app bound to the scratch database."""
    settings = Settings(database_url=str(tmp_path / "tracker.db"))
    app = create_app(settings=settings, data_service=service)
    with TestClient(app) as test_client:
        yield test_client
