"""
Base tool interface for agent tools
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


class ToolNotFoundError(Exception):
    """Raised when a tool name is not present in the registry."""


class ToolExecutionError(Exception):
    """Raised when a tool reports a failed execution."""


@dataclass
class ToolResult:
    """Result of tool execution"""
    success: bool
    data: Any = None
    error: Optional[str] = None


class BaseTool(ABC):
    """Base class for all agent tools"""

    def __init__(self):
        self.name: str = ""
        self.description: str = ""
        self.parameters: Dict[str, Any] = {}

    @abstractmethod
    async def execute(self, **kwargs) -> ToolResult:
        """Execute the tool with given parameters"""
        pass

    def to_openai_function(self) -> Dict[str, Any]:
        """Convert tool to OpenAI function calling format"""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters
        }

    def to_tool_option(self) -> Dict[str, Any]:
        """Entry for the ``tools`` list of a chat.completions request"""
        return {"type": "function", "function": self.to_openai_function()}

    def missing_argument(self, kwargs: Dict[str, Any]) -> Optional[ToolResult]:
        """
        Check the schema's required arguments.

        Returns:
            A failed ToolResult naming the first missing argument, or None
        """
        for name in self.parameters.get("required", []):
            value = kwargs.get(name)
            if value is None or value == "":
                return ToolResult(success=False, error=f"{name} is required")
        return None
