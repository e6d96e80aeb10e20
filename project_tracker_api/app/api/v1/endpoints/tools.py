"""
HTTP exposure of the tool adapter.

``GET /tools`` returns the tool catalog and ``POST /tools/{name}``
invokes one tool with a JSON object of arguments.  Tool calls always
answer 200: failures are reported inside the content envelope as
``Error: <message>``, exactly as for any other tool client.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends

from project_tracker_api.app.api.v1.deps import get_tool_adapter
from project_tracker_api.app.tools.adapter import ToolAdapter


router = APIRouter()


@router.get("/")
async def list_tools(adapter: ToolAdapter = Depends(get_tool_adapter)) -> Dict[str, List[Dict[str, Any]]]:
    return {"tools": adapter.list_tools()}


@router.post("/{name}")
async def call_tool(
    name: str,
    arguments: Optional[Dict[str, Any]] = Body(None),
    adapter: ToolAdapter = Depends(get_tool_adapter),
) -> Dict[str, Any]:
    """Invoke tool ``name``; the body holds its arguments (may be omitted)."""
    return await adapter.call_tool(name, arguments)
