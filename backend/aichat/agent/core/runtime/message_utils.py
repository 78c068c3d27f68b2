from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

from ...prompts import GOAL_MESSAGE_TEMPLATE, TOOL_RESULT_MESSAGE_TEMPLATE
from .models import ConversationEntry, Message, Role

logger = logging.getLogger(__name__)


def build_agentic_messages(history: Sequence[ConversationEntry], goal: str, turn: int) -> List[Dict[str, Any]]:
    """Build the request messages for one turn of the agent loop.

    - Message 1 always restates the goal and the current turn.
    - Assistant entries map to one assistant message each.
    - Tool-results entries expand into one user message per result.
    - Entries with any other role are skipped.
    """
    messages: List[Message] = [
        Message(role=Role.user, content=GOAL_MESSAGE_TEMPLATE.format(goal=goal, turn=turn))
    ]

    skipped = 0
    for entry in history:
        if entry.role == Role.assistant:
            messages.append(Message(role=Role.assistant, content=entry.content or ""))
        elif entry.role == Role.tool_results:
            for result in entry.results:
                messages.append(
                    Message(role=Role.user, content=TOOL_RESULT_MESSAGE_TEMPLATE.format(result=result.as_text()))
                )
        else:
            skipped += 1

    if skipped:
        logger.debug(f"MessageBuilder: Skipped {skipped} history entr(ies) with unsupported roles")

    return [m.to_dict() for m in messages]
