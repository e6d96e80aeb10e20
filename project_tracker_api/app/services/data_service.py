"""
Facade combining the project, task and statistics services.

``DataService`` is the single object the tool and query adapters talk
to.  It is built from an explicit ``DatabaseConfig`` (or a ready
``Database``); when neither is given the application settings are
used.
"""

from typing import Optional

from ..core.config import settings
from ..core.db import Database, DatabaseConfig, run_blocking
from .project_service import ProjectService
from .statistics_service import StatisticsService
from .task_service import TaskService


class DataService(ProjectService, TaskService, StatisticsService):
    """All data operations over one storage backend."""

    def __init__(
        self,
        config: Optional[DatabaseConfig] = None,
        database: Optional[Database] = None,
    ):
        if database is None:
            database = Database(config or DatabaseConfig.from_settings(settings))
        super().__init__(database)

    @run_blocking
    def init_schema(self) -> None:
        """Create tables and indexes if they do not exist yet."""
        self.database.init_schema()
