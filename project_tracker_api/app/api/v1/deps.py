"""
Shared FastAPI dependencies for API v1.

The data service and tool adapter are created once per application by
``create_app`` and stored on ``app.state``; endpoints receive them
through these dependencies so tests can inject their own instances.
"""

from fastapi import Request

from project_tracker_api.app.services.data_service import DataService
from project_tracker_api.app.tools.adapter import ToolAdapter


def get_data_service(request: Request) -> DataService:
    return request.app.state.data_service


def get_tool_adapter(request: Request) -> ToolAdapter:
    return request.app.state.tool_adapter
