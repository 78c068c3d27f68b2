"""
Agent tools package
"""

from .base_tool import BaseTool, ToolResult
from .tool_registry import ToolRegistry, get_tool_registry
from .ask_human_tool import AskHumanTool

__all__ = [
    "BaseTool",
    "ToolResult",
    "ToolRegistry",
    "get_tool_registry",
    "AskHumanTool",
]
