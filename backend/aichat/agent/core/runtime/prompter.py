"""
Single-shot prompting with tool execution.

One request, one collected response, and the response's tool calls dispatched
once. Unlike AgenticAgent there is no loop and no outcome classification; the
caller decides what to do with the tool results.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ...tools.tool_registry import RegistryToolCapability, ToolRegistry, enable_specific_tools, get_tool_registry
from ..llm.base import BaseLLMClient, ProviderError
from .models import Message, Role, ToolCall, ToolResult
from .response_collector import collect_response
from .tool_dispatcher import ToolDispatcher

logger = logging.getLogger(__name__)


class ModelNotFoundError(ProviderError):
    """Raised when the transport does not know the requested model."""


def disable_tools_options() -> Dict[str, Any]:
    """Request options that offer the model no tools"""
    return {"tools": []}


@dataclass
class PromptResult:
    text: str = ""
    tool_calls: List[ToolCall] = field(default_factory=list)
    tools_used: List[str] = field(default_factory=list)
    tool_results: List[ToolResult] = field(default_factory=list)
    # request messages followed by the assistant reply
    messages: List[Dict[str, Any]] = field(default_factory=list)


class Prompter:
    """Sends one prompt and executes whatever tool calls come back."""

    def __init__(
        self,
        llm: BaseLLMClient,
        dispatcher: Optional[ToolDispatcher] = None,
        *,
        registry: Optional[ToolRegistry] = None,
    ) -> None:
        self.llm = llm
        self.registry = registry
        self.dispatcher = dispatcher or ToolDispatcher(RegistryToolCapability(registry))

    def default_options(self) -> Dict[str, Any]:
        """Offer every registered tool."""
        registry = self.registry or get_tool_registry()
        return enable_specific_tools([tool.name for tool in registry.all()], registry)

    async def prompt_with_tool_execution(
        self,
        model_id: str,
        messages: Sequence[Dict[str, Any]],
        system_prompt: str = "",
        options: Optional[Dict[str, Any]] = None,
    ) -> PromptResult:
        """
        Send the messages, collect the response and run its tool calls.

        Raises:
            ModelNotFoundError: the transport does not know model_id
            ProviderError, ProviderNotConfigured: transport failures propagate
        """
        model = await self.llm.resolve_model(model_id)
        if model is None:
            raise ModelNotFoundError(f"Model not found: {model_id}")

        if options is None:
            options = self.default_options()
        request_messages = [dict(m) for m in messages]
        stream = self.llm.send_request(model, system_prompt=system_prompt, messages=request_messages, options=options)
        collected = await collect_response(stream)

        result = PromptResult(
            text=collected.text,
            tool_calls=collected.tool_calls,
            messages=request_messages + [Message(role=Role.assistant, content=collected.text).to_dict()],
        )
        if not collected.tool_calls:
            return result

        logger.info(f"Found {len(collected.tool_calls)} tool call(s) to execute")
        result.tools_used = [tc.name for tc in collected.tool_calls]
        result.tool_results = await self.dispatcher.dispatch(collected.tool_calls)
        failed = sum(1 for r in result.tool_results if not r.success)
        if failed:
            logger.warning(f"{failed} of {len(result.tool_results)} tool call(s) failed")
        return result

    async def ask_with_system(self, model_id: str, system_prompt: str, question: str) -> PromptResult:
        """Ask a single question with explicit system instructions."""
        messages = [Message(role=Role.user, content=question).to_dict()]
        return await self.prompt_with_tool_execution(model_id, messages, system_prompt=system_prompt)

    async def continue_conversation(
        self,
        model_id: str,
        history: Sequence[Dict[str, Any]],
        new_message: str,
    ) -> PromptResult:
        # history is not modified; the new turn is in result.messages
        messages = list(history) + [Message(role=Role.user, content=new_message).to_dict()]
        return await self.prompt_with_tool_execution(model_id, messages)
