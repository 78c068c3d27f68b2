from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Role(str, Enum):
    system = "system"
    user = "user"
    assistant = "assistant"
    tool_results = "tool-results"


class OutcomeReason(str, Enum):
    MAX_TURNS_REACHED = "max-turns-reached"
    TOOLS_EXECUTING = "tools-executing"
    AGENT_CONTINUING = "agent-continuing"
    TASK_COMPLETE = "task-complete"
    AGENT_FINISHED = "agent-finished"
    MODEL_NOT_FOUND_ERROR = "model-not-found-error"
    TRANSPORT_ERROR = "transport-error"


@dataclass
class Message:
    role: Role
    content: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role.value, "content": self.content}


@dataclass
class ToolCall:
    call_id: str
    name: str
    input: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ToolResult:
    """Outcome of one tool call, correlated to its ToolCall by call_id."""
    call_id: str
    tool_name: str
    result: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def as_text(self) -> str:
        if self.error is not None:
            return f"ERROR: {self.error}"
        return self.result or ""


@dataclass
class ConversationEntry:
    """One append-only history entry.

    Assistant entries carry content + tool_calls, tool-results entries carry results.
    """
    role: Role
    turn: int
    content: str = ""
    tool_calls: List[ToolCall] = field(default_factory=list)
    results: List[ToolResult] = field(default_factory=list)


@dataclass(frozen=True)
class Outcome:
    should_continue: bool
    reason: OutcomeReason


@dataclass
class TurnResult:
    """Raw result of a single model round."""
    turn: int
    text: str = ""
    tool_calls: List[ToolCall] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class AgentRunResult:
    history: List[ConversationEntry]
    reason: OutcomeReason
    final_response: Optional[TurnResult] = None
    error: bool = False
    error_message: Optional[str] = None

    @property
    def turns(self) -> int:
        return sum(1 for entry in self.history if entry.role == Role.assistant)

    @property
    def final_text(self) -> str:
        if self.final_response is None:
            return ""
        return self.final_response.text
