"""
Main entrypoint for the Project Tracker API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time as
``app``.  Importing the app here makes it easy to run with uvicorn or
another ASGI server, e.g.::

    uvicorn project_tracker_api.app.main:app --reload

The application title, version and database location are provided via
``Settings`` from ``core.config``.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import DatabaseConfig
from .core.exceptions import (
    BackendUnavailableError,
    DataServiceError,
    NotFoundError,
    ValidationError,
)
from .core.logging_config import setup_logging
from .services.data_service import DataService
from .tools.adapter import ToolAdapter

logger = logging.getLogger(__name__)


def _status_for(error: DataServiceError) -> int:
    if isinstance(error, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, BackendUnavailableError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def create_app(
    settings: Optional[Settings] = None,
    data_service: Optional[DataService] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Application settings.  Defaults to the module level settings
        read from the environment.
    data_service : Optional[DataService]
        Service instance to serve.  When omitted one is built from
        ``settings``; tests pass a service bound to a scratch database.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file, debug=settings.debug)

    if data_service is None:
        data_service = DataService(DatabaseConfig.from_settings(settings))

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.state.data_service = data_service
    app.state.tool_adapter = ToolAdapter(data_service)

    @app.exception_handler(DataServiceError)
    async def data_service_error_handler(request: Request, exc: DataServiceError) -> JSONResponse:
        code = _status_for(exc)
        if code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=code, content={"detail": exc.message})

    # Mount versioned routes under /api/v1.
    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        # Create the database file and tables if they do not exist yet.
        await data_service.init_schema()
        logger.info("Database ready at %s", data_service.database.config.path)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
