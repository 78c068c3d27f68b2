"""
Turn outcome classification.

classify_outcome() is a pure, order-sensitive decision table. Text heuristics are
delegated to a TextSignalDetector so detection policy can be swapped without
touching the orchestration loop.

Known limitation: negation only recognizes the single token "not" directly before
the completion word. Compound negations such as "absolutely not yet complete"
still classify as complete.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from .models import Outcome, OutcomeReason, ToolCall

# "next ... step" only counts within a single line
CONTINUATION_PATTERN = re.compile(
    r"\bnext\b.*?\b(?:step|action)s?\b"
    r"|\bi['’]ll\b"
    r"|\bi\s+will\b"
    r"|\blet\s+me\b"
    r"|continu"
    r"|proceed",
    re.IGNORECASE,
)

# noun, then the rest of the clause up to the nearest completion word
COMPLETION_PATTERN = re.compile(
    r"\b(?:task|goal|mission)s?\b"
    r"(?P<gap>[^.!?;\n]*?)"
    r"\b(?:complete[ds]?|completion|done|finished|achieved|reached|accomplished|success(?:ful(?:ly)?)?)\b",
    re.IGNORECASE,
)

SUCCESSFULLY_DONE_PATTERN = re.compile(r"\bsuccessfully\s+(?:completed|finished)\b", re.IGNORECASE)

NEGATED_TAIL = re.compile(r"\bnot\s*$", re.IGNORECASE)


class TextSignalDetector(ABC):
    """Decides whether assistant text signals continuation or completion."""

    @abstractmethod
    def indicates_continuation(self, text: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def indicates_completion(self, text: str) -> bool:
        raise NotImplementedError


class RegexSignalDetector(TextSignalDetector):
    """Default keyword heuristics."""

    def indicates_continuation(self, text: str) -> bool:
        if not text:
            return False
        return CONTINUATION_PATTERN.search(text) is not None

    def indicates_completion(self, text: str) -> bool:
        if not text:
            return False
        for match in COMPLETION_PATTERN.finditer(text):
            if not NEGATED_TAIL.search(match.group("gap")):
                return True
        for match in SUCCESSFULLY_DONE_PATTERN.finditer(text):
            if not NEGATED_TAIL.search(text[:match.start()]):
                return True
        return False


DEFAULT_DETECTOR = RegexSignalDetector()


def classify_outcome(
    turn: int,
    max_turns: int,
    tool_calls: Optional[Sequence[ToolCall]],
    text: Optional[str],
    detector: Optional[TextSignalDetector] = None,
) -> Outcome:
    """Decide whether the conversation continues after this turn, and why."""
    detector = detector or DEFAULT_DETECTOR

    if turn >= max_turns:
        return Outcome(False, OutcomeReason.MAX_TURNS_REACHED)
    # Pending tool calls mean the task is not resolved yet, whatever the text says
    if tool_calls:
        return Outcome(True, OutcomeReason.TOOLS_EXECUTING)
    if text and detector.indicates_continuation(text):
        return Outcome(True, OutcomeReason.AGENT_CONTINUING)
    if text and detector.indicates_completion(text):
        return Outcome(False, OutcomeReason.TASK_COMPLETE)
    return Outcome(False, OutcomeReason.AGENT_FINISHED)
