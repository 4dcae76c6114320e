"""Named tool catalogue over the world service."""

from rpg_world.tools.registry import TOOLS, ToolRegistry, ToolSpec
from rpg_world.tools.results import ToolResult

__all__ = ["TOOLS", "ToolRegistry", "ToolResult", "ToolSpec"]
