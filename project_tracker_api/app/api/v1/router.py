"""
Top-level router for version 1 of the API.

This router aggregates the domain routers (projects, tasks, statistics)
and the HTTP exposure of the tool adapter under a unified prefix.  When
new endpoints are added, update this file to include their routers.
"""

from fastapi import APIRouter

from .endpoints import projects, statistics, tasks, tools

router = APIRouter()

router.include_router(projects.router, prefix="/projects", tags=["projects"])
router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
router.include_router(statistics.router, prefix="/statistics", tags=["statistics"])
router.include_router(tools.router, prefix="/tools", tags=["tools"])
