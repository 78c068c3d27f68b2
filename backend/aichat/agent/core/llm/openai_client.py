from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

import openai

from .base import BaseLLMClient, ProviderError, ProviderNotConfigured, TextPart, ToolCallPart
from ...clients import get_client

logger = logging.getLogger(__name__)


def get_openai_token_param(model_name: str, max_tokens: int) -> dict:
    """
    Get the correct token parameter for OpenAI API calls based on model family.

    GPT-5 and o1 models use 'max_completion_tokens', while GPT-4 and earlier use 'max_tokens'.
    """
    name = (model_name or "").lower()
    if "gpt-5" in name or name.startswith("o1"):
        return {"max_completion_tokens": max_tokens}
    return {"max_tokens": max_tokens}


class OpenAIClientAdapter(BaseLLMClient):
    """Model transport over an OpenAI-compatible chat.completions endpoint.

    Text deltas are forwarded as TextPart as they arrive. Tool-call arguments
    arrive in fragments; they are accumulated by index and emitted as
    ToolCallPart once the stream ends.
    """

    def __init__(self, client: Any = None, provider: str = "openai", max_tokens: Optional[int] = None) -> None:
        self._client = client
        self.provider = provider
        self.max_tokens = max_tokens

    @property
    def client(self) -> Any:
        if self._client is None:
            try:
                self._client = get_client(self.provider)
            except ValueError as e:
                # Normalize to ProviderNotConfigured for runtime consistency
                raise ProviderNotConfigured(str(e)) from e
        return self._client

    async def resolve_model(self, model_id: str) -> Optional[str]:
        if not model_id:
            return None
        try:
            model = await self.client.models.retrieve(model_id)
        except openai.NotFoundError:
            logger.info(f"Model {model_id} not available from provider {self.provider}")
            return None
        except openai.APIError as e:
            raise ProviderError(f"Failed to resolve model {model_id}: {e}") from e
        return getattr(model, "id", None) or model_id

    async def send_request(
        self,
        model: Any,
        *,
        system_prompt: str,
        messages: List[Dict[str, Any]],
        options: Optional[Dict[str, Any]] = None,
    ) -> AsyncIterator[Any]:
        options = options or {}
        conv: List[Dict[str, Any]] = []
        if system_prompt:
            conv.append({"role": "system", "content": system_prompt})
        conv.extend(messages)

        tools = options.get("tools") or None
        api_params: Dict[str, Any] = {
            "model": model,
            "messages": conv,
            "stream": True,
        }
        if tools:
            api_params["tools"] = tools
            api_params["tool_choice"] = options.get("tool_choice", "auto")
        if self.max_tokens is not None:
            api_params.update(get_openai_token_param(str(model), self.max_tokens))

        logger.debug(f"Sending request with {len(conv)} messages and {len(tools or [])} tools")
        stream = await self.client.chat.completions.create(**api_params)

        collected_tool_calls: Dict[int, Dict[str, str]] = {}
        async for chunk in stream:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta
            if delta is None:
                continue

            if delta.content:
                yield TextPart(delta.content)

            # Tool calls stream in fragments keyed by index
            for tool_call_delta in getattr(delta, "tool_calls", None) or []:
                index = tool_call_delta.index
                acc = collected_tool_calls.setdefault(index, {"id": "", "name": "", "arguments": ""})
                if tool_call_delta.id:
                    acc["id"] = tool_call_delta.id
                if tool_call_delta.function:
                    if tool_call_delta.function.name:
                        acc["name"] = tool_call_delta.function.name
                    if tool_call_delta.function.arguments:
                        acc["arguments"] += tool_call_delta.function.arguments

        for index in sorted(collected_tool_calls):
            tc = collected_tool_calls[index]
            if not tc["name"]:
                logger.warning(f"Dropping tool call at index {index}: empty tool name")
                continue
            try:
                arguments = json.loads(tc["arguments"]) if tc["arguments"] else {}
            except json.JSONDecodeError as e:
                logger.warning(f"Invalid JSON arguments for {tc['name']}: {e}")
                arguments = {}
            if not isinstance(arguments, dict):
                logger.warning(f"Arguments for {tc['name']} are not a JSON object, ignoring them")
                arguments = {}
            yield ToolCallPart(call_id=tc["id"] or f"call_{index}", name=tc["name"], input=arguments)
