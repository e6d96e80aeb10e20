"""Entry point serving the Project Tracker API with uvicorn.

Host, port and log level come from the same environment variables as
the application settings (``API_HOST``, ``API_PORT``, ``LOG_LEVEL``);
see ``project_tracker_api/app/core/config.py``.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from project_tracker_api.app.core.config import settings
from project_tracker_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
