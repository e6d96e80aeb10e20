"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables, in the same way for the API process and for any script that
builds a ``DataService`` without arguments.  Defaults are provided for
all fields.  In a production deployment you should override these via
environment variables.

Components that need configuration receive it explicitly (see
``DatabaseConfig.from_settings`` in ``core.db``); only the process
entry points read the module level ``settings`` instance.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Project Tracker API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Path to the SQLite database file.  Can be overridden via the
    # ``DATABASE_URL`` environment variable.  If a relative path is
    # provided, it is resolved relative to the project root by the
    # ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "project_tracker.db")

    # Seconds a connection waits for a competing writer to release the
    # database lock before the operation fails as backend-unavailable.
    database_timeout: float = float(os.getenv("DATABASE_TIMEOUT", "5.0"))

    # Bind address used by ``run.py`` when serving the API with uvicorn.
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))


# Instantiate settings once so entry points can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes values at class creation time, environment variables should
# be set before importing this module.
settings = Settings()
