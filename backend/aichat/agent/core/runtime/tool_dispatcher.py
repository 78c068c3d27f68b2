from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Protocol, Sequence

from ....utils.logging import sanitize_log_message, sanitize_string
from ...tools.tool_registry import RegistryToolCapability
from .models import ToolCall, ToolResult

logger = logging.getLogger(__name__)


class ToolCapability(Protocol):
    async def invoke(self, tool_name: str, tool_input: Dict[str, Any]) -> Any:
        ...


def _field(obj: Any, name: str) -> Any:
    """Read a field from either a mapping or an attribute-style object."""
    if obj is None or isinstance(obj, str):
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _is_node(obj: Any) -> bool:
    return isinstance(_field(obj, "text"), str) or isinstance(_field(obj, "children"), (list, tuple))


def extract_text_from_node(node: Any) -> str:
    """Concatenate leaf text of a text/children tree, depth-first, left to right."""
    if isinstance(node, str):
        return node
    text = _field(node, "text")
    if isinstance(text, str):
        return text
    children = _field(node, "children")
    if isinstance(children, (list, tuple)):
        return "".join(extract_text_from_node(child) for child in children)
    return ""


def _process_content_item(item: Any) -> str:
    if isinstance(item, str):
        return item
    value = _field(item, "value")
    value_node = _field(value, "node")
    if value_node is not None:
        return extract_text_from_node(value_node)
    node = _field(item, "node")
    if node is not None:
        return extract_text_from_node(node)
    if isinstance(value, str):
        return value
    return str(item)


def extract_tool_result_content(raw_result: Any) -> str:
    """
    Reduce an opaque tool payload to plain text.

    - A payload with a ``content`` sequence is processed item by item (node trees
      under ``value.node`` or ``node``, string ``value``, bare strings, else str()).
    - A node-shaped payload (``text`` / ``children``) is flattened.
    - A string is returned as-is; anything else is stringified.
    """
    if raw_result is None:
        return ""
    if isinstance(raw_result, str):
        return raw_result
    content = _field(raw_result, "content")
    if isinstance(content, (list, tuple)):
        return "".join(_process_content_item(item) for item in content)
    if isinstance(content, str):
        return content
    if _is_node(raw_result):
        return extract_text_from_node(raw_result)
    return str(raw_result)


class ToolDispatcher:
    """
    Runs a batch of tool calls concurrently against a tool capability.

    Each call is isolated: a failure becomes a ToolResult with ``error`` set and
    never cancels its siblings. Results come back in call order.
    """

    def __init__(self, capability: Optional[ToolCapability] = None) -> None:
        self.capability = capability or RegistryToolCapability()

    async def dispatch(self, tool_calls: Sequence[ToolCall]) -> List[ToolResult]:
        if not tool_calls:
            return []
        logger.info(f"Executing {len(tool_calls)} tool call(s)")
        results = await asyncio.gather(*(self._invoke_one(tc) for tc in tool_calls))
        return list(results)

    async def _invoke_one(self, tool_call: ToolCall) -> ToolResult:
        logger.info(f"Invoking tool: {tool_call.name}")
        logger.debug(sanitize_log_message(f"Invoking {tool_call.name}", dict(tool_call.input or {})))
        try:
            raw_result = await self.capability.invoke(tool_call.name, tool_call.input)
            text = extract_tool_result_content(raw_result)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error(f"Tool execution error for {tool_call.name}: {sanitize_string(message)}")
            return ToolResult(call_id=tool_call.call_id, tool_name=tool_call.name, error=message)

        logger.debug(f"Tool {tool_call.name} returned {len(text)} characters")
        return ToolResult(call_id=tool_call.call_id, tool_name=tool_call.name, result=text)
