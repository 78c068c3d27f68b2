from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, AsyncIterable, List

from ..llm.base import TextPart, ToolCallPart
from .models import ToolCall

logger = logging.getLogger(__name__)


@dataclass
class CollectedResponse:
    text: str = ""
    tool_calls: List[ToolCall] = field(default_factory=list)


async def collect_response(stream: AsyncIterable[Any]) -> CollectedResponse:
    """Drain a forward-only part stream into accumulated text and tool calls.

    Text parts are concatenated and tool-call parts appended, both in arrival
    order. Unknown part kinds are skipped.
    """
    chunks: List[str] = []
    tool_calls: List[ToolCall] = []
    skipped = 0

    async for part in stream:
        if isinstance(part, TextPart):
            chunks.append(part.value)
        elif isinstance(part, ToolCallPart):
            tool_input = dict(part.input) if isinstance(part.input, Mapping) else {}
            tool_calls.append(ToolCall(call_id=part.call_id, name=part.name, input=tool_input))
        else:
            skipped += 1

    if skipped:
        logger.debug(f"ResponseCollector: ignored {skipped} unrecognized part(s)")
    return CollectedResponse(text="".join(chunks), tool_calls=tool_calls)
