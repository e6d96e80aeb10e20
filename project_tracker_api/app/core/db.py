"""
SQLite database integration and simple migration system.

This module provides the ``Database`` handle used by the data service:
scoped connections (``Database.connection``), a transactional scope
(``Database.transaction``) and schema bootstrap on application start
(``Database.init_schema``).  It uses SQLite as a lightweight embedded
database; to switch to another DBMS you would replace connection logic
and adapt SQL syntax accordingly.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.

Nothing here holds module level state: every handle is built from an
explicit ``DatabaseConfig`` so tests can point a service at a scratch
file.
"""

import asyncio
import functools
import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

from .config import Settings
from .exceptions import BackendUnavailableError, StorageError

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS projects (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            description TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'planning'
                CHECK (status IN ('planning', 'active', 'on_hold', 'completed', 'cancelled')),
            start_date TEXT,
            end_date TEXT,
            progress INTEGER NOT NULL DEFAULT 0 CHECK (progress BETWEEN 0 AND 100),
            owner TEXT,
            tags TEXT NOT NULL DEFAULT '[]',  -- JSON array
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS tasks (
            id TEXT PRIMARY KEY,
            project_id TEXT NOT NULL,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'not_started'
                CHECK (status IN ('not_started', 'in_progress', 'completed', 'blocked')),
            priority TEXT NOT NULL DEFAULT 'medium'
                CHECK (priority IN ('low', 'medium', 'high', 'critical')),
            assignee TEXT,
            due_date TEXT,
            progress INTEGER NOT NULL DEFAULT 0 CHECK (progress BETWEEN 0 AND 100),
            dependencies TEXT NOT NULL DEFAULT '[]',  -- JSON array of task IDs
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (project_id) REFERENCES projects (id) ON DELETE CASCADE
        );
        """,
    ),
    # Migration 2: indexes for the list filters and default orderings
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_tasks_project_id ON tasks (project_id);
        CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks (status);
        CREATE INDEX IF NOT EXISTS idx_projects_status ON projects (status);
        CREATE INDEX IF NOT EXISTS idx_projects_updated_at ON projects (updated_at);
        """,
    ),
]


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection parameters for a ``Database``."""

    path: str
    timeout: float = 5.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatabaseConfig":
        """Build a config from application settings.

        If ``settings.database_url`` is an absolute path, use it directly.
        Otherwise resolve it relative to the project root.
        """
        db_url = settings.database_url
        if not os.path.isabs(db_url):
            db_url = str((PROJECT_ROOT / db_url).resolve())
        return cls(path=db_url, timeout=settings.database_timeout)


def _casefold(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).casefold()


def run_blocking(func: Callable) -> Callable:
    """Turn a blocking method into a coroutine run in the default executor.

    SQLite calls block, so each service operation is executed in a
    worker thread; the connection it opens is used and closed inside
    that same thread.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))

    return wrapper


class Database:
    """Factory for scoped SQLite connections and transactions."""

    def __init__(self, config: DatabaseConfig):
        self.config = config

    def connect(self) -> sqlite3.Connection:
        """Create and return a new SQLite connection.

        The connection runs in autocommit mode so that transactions are
        opened explicitly by ``transaction``.  Rows are returned as
        ``sqlite3.Row`` objects and a ``casefold`` SQL function is
        registered for case-insensitive matching beyond ASCII.
        """
        try:
            conn = sqlite3.connect(
                self.config.path,
                timeout=self.config.timeout,
                isolation_level=None,
            )
        except sqlite3.Error as e:
            logger.error("Cannot open database %s: %s", self.config.path, e)
            raise BackendUnavailableError(f"Database unavailable: {e}") from e
        conn.row_factory = sqlite3.Row
        # Foreign key support is off by default in SQLite and must be
        # enabled per connection for ON DELETE CASCADE to apply.
        conn.execute("PRAGMA foreign_keys = ON")
        conn.create_function("casefold", 1, _casefold, deterministic=True)
        return conn

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection and close it on every exit path.

        Driver errors raised inside the block are translated into the
        service error taxonomy; service errors pass through unchanged.
        """
        conn = self.connect()
        try:
            yield conn
        except (sqlite3.OperationalError, sqlite3.InterfaceError) as e:
            logger.error("Database unavailable: %s", e)
            raise BackendUnavailableError(f"Database unavailable: {e}") from e
        except sqlite3.Error as e:
            logger.error("Database error: %s", e)
            raise StorageError(f"Database error: {e}") from e
        finally:
            conn.close()

    @contextmanager
    def transaction(self, immediate: bool = True) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside a transaction.

        ``immediate`` takes the write lock up front (``BEGIN IMMEDIATE``),
        so a read followed by a write cannot interleave with another
        writer.  Read-only callers pass ``immediate=False`` to get a
        consistent snapshot without blocking writers.  The transaction is
        committed when the block exits normally and rolled back otherwise.
        """
        with self.connection() as conn:
            conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            try:
                yield conn
            except BaseException:
                conn.rollback()
                raise
            conn.commit()

    def init_schema(self) -> None:
        """Create the database file if needed and apply pending migrations.

        Creates the ``migrations`` table if it does not exist, checks the
        current schema version, and applies any new migrations defined in
        ``MIGRATIONS``.  If you add a new migration, append it with an
        incremented version number.
        """
        Path(self.config.path).parent.mkdir(parents=True, exist_ok=True)
        with self.connection() as conn:
            conn.execute(
                "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
            )
            row = conn.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0

            for version, sql in MIGRATIONS:
                if version > current_version:
                    conn.executescript(sql)
                    conn.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                    logger.info("Applied schema migration %s to %s", version, self.config.path)
                    current_version = version
