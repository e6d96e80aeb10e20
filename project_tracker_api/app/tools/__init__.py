"""Named tools with JSON-schema arguments, reported as text."""

from .adapter import ToolAdapter  # noqa: F401
from .catalog import TOOL_DEFINITIONS  # noqa: F401
