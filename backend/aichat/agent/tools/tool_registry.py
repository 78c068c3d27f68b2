"""
Tool registry for managing agent tools, and the registry-backed tool capability
used by the tool dispatcher.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from .base_tool import BaseTool, ToolExecutionError, ToolNotFoundError

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry for managing agent tools"""

    def __init__(self):
        """Initialize empty registry"""
        self._tools: Dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        """Register a tool in the registry"""
        self._tools[tool.name] = tool

    def unregister(self, name: str) -> None:
        self._tools.pop(name, None)

    def get(self, name: str) -> Optional[BaseTool]:
        """Get a tool by name"""
        return self._tools.get(name)

    def all(self) -> List[BaseTool]:
        """Get all registered tools"""
        return list(self._tools.values())


# Global registry instance
_registry: Optional[ToolRegistry] = None


def get_tool_registry() -> ToolRegistry:
    """Get the global tool registry instance"""
    global _registry
    if _registry is None:
        _registry = ToolRegistry()
    return _registry


def reset_tool_registry() -> None:
    """Drop the global registry (used by tests)"""
    global _registry
    _registry = None


def enable_specific_tools(tool_ids: Iterable[str], registry: Optional[ToolRegistry] = None) -> Dict[str, Any]:
    """
    Build request options that offer only the named tools to the model.

    Names that are not registered are skipped with a warning.
    """
    registry = registry or get_tool_registry()
    wanted = list(dict.fromkeys(tool_ids or []))
    tools = []
    for name in wanted:
        tool = registry.get(name)
        if tool is None:
            logger.warning(f"Requested tool {name} is not registered; skipping")
            continue
        tools.append(tool.to_tool_option())
    logger.info(f"Enabled {len(tools)} of {len(wanted)} requested tools")
    return {"tools": tools, "tool_choice": "auto"} if tools else {}


class RegistryToolCapability:
    """Invoke tools by name against a ToolRegistry.

    Returns the tool's raw data. Unknown tools and failed executions raise, so the
    dispatcher can record them as per-call errors.
    """

    def __init__(self, registry: Optional[ToolRegistry] = None) -> None:
        self.registry = registry or get_tool_registry()

    async def invoke(self, tool_name: str, tool_input: Dict[str, Any]) -> Any:
        tool = self.registry.get(tool_name)
        if tool is None:
            raise ToolNotFoundError(f"Tool {tool_name} not found in registry")
        result = await tool.execute(**(tool_input or {}))
        if not result.success:
            raise ToolExecutionError(result.error or f"Tool {tool_name} failed")
        return result.data
