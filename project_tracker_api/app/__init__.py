"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules:

* ``core`` - settings, logging, the SQLite handle and the error classes;
* ``schemas`` - pydantic models for entities, inputs and statistics;
* ``services`` - the data service (projects, tasks, statistics);
* ``tools`` - the tool catalog and its dispatcher;
* ``api`` - versioned FastAPI routers.
"""

from .main import app  # noqa: F401
