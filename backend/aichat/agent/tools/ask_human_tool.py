"""
Ask human tool for agents

Lets the model put a question to the human through the front end's quick pick.
The answer comes back as text; "timeout" and "cancelled" are ordinary answers,
not failures.
"""

import json
import logging
from typing import Any, Optional

from ...config import AgentSettings
from ...services.human_query import HumanQuery
from ...ui.widgets import WidgetFactory
from .base_tool import BaseTool, ToolResult

logger = logging.getLogger(__name__)


def _answer_as_text(answer: Any) -> str:
    if isinstance(answer, str):
        return answer
    try:
        return json.dumps(answer, default=str)
    except (TypeError, ValueError):
        return str(answer)


class AskHumanTool(BaseTool):
    """Tool for asking the human a multiple-choice question"""

    def __init__(self, factory: WidgetFactory, settings: Optional[AgentSettings] = None):
        super().__init__()
        self.factory = factory
        self.settings = settings or AgentSettings()
        self.name = "ask_human"
        self.description = (
            "Ask the human a question and wait for the answer. Offer the likely answers as items; "
            "the human may also type a custom value. Returns the chosen item, the typed text, "
            "'timeout' if nobody answered in time, or 'cancelled' if the human dismissed the question."
        )
        self.parameters = {
            "type": "object",
            "properties": {
                "question": {
                    "type": "string",
                    "description": "The question to show the human"
                },
                "context": {
                    "type": "string",
                    "description": "Short hint shown as the placeholder (optional)"
                },
                "items": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Suggested answers"
                },
                "timeout_seconds": {
                    "type": "number",
                    "description": f"Seconds to wait before giving up (default {self.settings.human_query_timeout_seconds:g})"
                }
            },
            "required": ["question", "items"]
        }

    async def execute(self, **kwargs) -> ToolResult:
        """Show the question and return the answer as text"""
        try:
            missing = self.missing_argument(kwargs)
            if missing is not None:
                return missing

            question = kwargs["question"]
            items = kwargs["items"]
            context = kwargs.get("context") or ""
            timeout_seconds = kwargs.get("timeout_seconds")

            if not isinstance(items, (list, tuple)):
                return ToolResult(success=False, error="items must be a list")
            if timeout_seconds is None:
                timeout_seconds = self.settings.human_query_timeout_seconds
            if float(timeout_seconds) <= 0:
                return ToolResult(success=False, error="timeout_seconds must be positive")

            query = HumanQuery(self.factory, grace_seconds=self.settings.engagement_grace_seconds)
            answer = await query.ask(question, context, list(items), float(timeout_seconds))
            logger.info(f"[AskHumanTool] {query.state.phase.value}")
            return ToolResult(success=True, data=_answer_as_text(answer))

        except Exception as e:
            logger.error(f"Error asking human: {e}")
            return ToolResult(success=False, error=str(e))
