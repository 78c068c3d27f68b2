from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from ....config import AgentSettings
from ...prompts import AGENTIC_SYSTEM_PROMPT
from ...tools.tool_registry import RegistryToolCapability, ToolRegistry, enable_specific_tools
from ..llm.base import BaseLLMClient
from ..llm.openai_client import OpenAIClientAdapter
from .message_utils import build_agentic_messages
from .models import AgentRunResult, ConversationEntry, OutcomeReason, Role, TurnResult
from .outcome import DEFAULT_DETECTOR, TextSignalDetector, classify_outcome
from .response_collector import collect_response
from .tool_dispatcher import ToolDispatcher

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


def _log_progress(step: str) -> None:
    logger.info(f"Progress: {step}")


class AgenticAgent:
    """Drives a goal-directed, multi-turn conversation with a model.

    Each turn builds the message list from the history, streams one model
    response, dispatches any tool calls and classifies the outcome. The loop
    state is (history, turn, last_result); turns are strictly sequential.

    A failed model request ends the run with a transport-error result and is
    never retried.
    """

    def __init__(
        self,
        llm: BaseLLMClient,
        dispatcher: Optional[ToolDispatcher] = None,
        *,
        registry: Optional[ToolRegistry] = None,
        detector: Optional[TextSignalDetector] = None,
        system_prompt: str = AGENTIC_SYSTEM_PROMPT,
        on_turn: Optional[Callable[[TurnResult], None]] = None,
    ) -> None:
        self.llm = llm
        self.dispatcher = dispatcher or ToolDispatcher(RegistryToolCapability(registry))
        self.registry = registry
        self.detector = detector or DEFAULT_DETECTOR
        self.system_prompt = system_prompt
        # Debug hook, called with every raw turn result
        self.on_turn = on_turn

    async def run(
        self,
        goal: str,
        model_id: str,
        tool_ids: Iterable[str] = (),
        max_turns: int = 10,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> AgentRunResult:
        progress = progress_callback or _log_progress
        options = enable_specific_tools(tool_ids, self.registry)

        try:
            model = await self.llm.resolve_model(model_id)
        except Exception as e:
            message = f"Failed to resolve model {model_id}: {e}"
            logger.error(message)
            return AgentRunResult(history=[], reason=OutcomeReason.TRANSPORT_ERROR, error=True, error_message=message)

        if model is None:
            return AgentRunResult(
                history=[],
                reason=OutcomeReason.MODEL_NOT_FOUND_ERROR,
                final_response=None,
                error=True,
                error_message=f"Model not found: {model_id}",
            )

        logger.info(f"Starting agentic conversation with goal: {goal}")
        history: List[ConversationEntry] = []
        turn = 1
        last_result: Optional[TurnResult] = None

        while True:
            progress(f"Turn {turn}/{max_turns}")

            if turn > max_turns:
                return AgentRunResult(history=history, reason=OutcomeReason.MAX_TURNS_REACHED, final_response=last_result)

            try:
                turn_result = await self._execute_turn(model, goal, history, turn, options)
            except Exception as e:
                message = str(e) or type(e).__name__
                logger.error(f"Model request failed on turn {turn}: {message}")
                return AgentRunResult(
                    history=history,
                    reason=OutcomeReason.TRANSPORT_ERROR,
                    final_response=TurnResult(turn=turn, error=message),
                    error=True,
                    error_message=message,
                )

            if self.on_turn is not None:
                self.on_turn(turn_result)
            if turn_result.text:
                logger.info(f"AI Agent says:\n{turn_result.text}")

            history.append(
                ConversationEntry(
                    role=Role.assistant,
                    turn=turn,
                    content=turn_result.text,
                    tool_calls=list(turn_result.tool_calls),
                )
            )

            if turn_result.tool_calls:
                logger.info(f"AI Agent executing {len(turn_result.tool_calls)} tool(s)")
                results = await self.dispatcher.dispatch(turn_result.tool_calls)
                history.append(ConversationEntry(role=Role.tool_results, turn=turn, results=results))

            outcome = classify_outcome(turn, max_turns, turn_result.tool_calls, turn_result.text, self.detector)
            if outcome.should_continue:
                logger.info(f"AI Agent continuing to next step ({outcome.reason.value})")
                last_result = turn_result
                turn += 1
                continue

            reason = self._terminal_reason(outcome.reason, turn_result)
            logger.info(f"Agentic conversation ended: {reason.value}")
            return AgentRunResult(history=history, reason=reason, final_response=turn_result)

    async def _execute_turn(
        self,
        model: Any,
        goal: str,
        history: List[ConversationEntry],
        turn: int,
        options: Dict[str, Any],
    ) -> TurnResult:
        messages = build_agentic_messages(history, goal, turn)
        stream = self.llm.send_request(model, system_prompt=self.system_prompt, messages=messages, options=options)
        collected = await collect_response(stream)
        return TurnResult(turn=turn, text=collected.text, tool_calls=collected.tool_calls)

    def _terminal_reason(self, reason: OutcomeReason, turn_result: TurnResult) -> OutcomeReason:
        """Report completion claimed on the final allowed turn.

        The loop stops at the turn limit either way; when the last turn issued no
        tool calls and its text reads as a completion (and not a continuation),
        the run is reported as task-complete rather than max-turns-reached.
        """
        if reason != OutcomeReason.MAX_TURNS_REACHED or turn_result.tool_calls:
            return reason
        text = turn_result.text
        if text and not self.detector.indicates_continuation(text) and self.detector.indicates_completion(text):
            return OutcomeReason.TASK_COMPLETE
        return reason


async def run_agent(
    goal: str,
    model_id: str,
    tool_ids: Iterable[str] = (),
    max_turns: int = 10,
    progress_callback: Optional[ProgressCallback] = None,
    *,
    llm: Optional[BaseLLMClient] = None,
    dispatcher: Optional[ToolDispatcher] = None,
    settings: Optional[AgentSettings] = None,
) -> AgentRunResult:
    """Run the agent loop once; builds an OpenAI-compatible transport when none is given."""
    if llm is None:
        settings = settings or AgentSettings.from_env()
        llm = OpenAIClientAdapter(provider=settings.provider, max_tokens=settings.max_tokens)
    agent = AgenticAgent(llm, dispatcher)
    return await agent.run(goal, model_id, tool_ids, max_turns, progress_callback)


SUMMARY_BY_REASON = {
    OutcomeReason.TASK_COMPLETE: "COMPLETED successfully!",
    OutcomeReason.MAX_TURNS_REACHED: "reached max turns",
    OutcomeReason.AGENT_FINISHED: "finished",
}


def summarize_result(result: AgentRunResult) -> str:
    outcome = SUMMARY_BY_REASON.get(result.reason, "ended unexpectedly")
    return f"Agentic task {outcome} ({result.turns} turns, {len(result.history)} conversation steps)"


async def autonomous_conversation(
    goal: str,
    *,
    model_id: Optional[str] = None,
    tool_ids: Iterable[str] = (),
    max_turns: Optional[int] = None,
    progress_callback: Optional[ProgressCallback] = None,
    llm: Optional[BaseLLMClient] = None,
    dispatcher: Optional[ToolDispatcher] = None,
    settings: Optional[AgentSettings] = None,
) -> AgentRunResult:
    """
    Start an autonomous conversation toward a goal and report a summary.

    Unset arguments fall back to AgentSettings (environment). The summary, or the
    model error, is reported through the progress callback.
    """
    settings = settings or AgentSettings.from_env()
    progress = progress_callback or _log_progress

    result = await run_agent(
        goal,
        model_id or settings.model,
        tool_ids,
        settings.max_turns if max_turns is None else max_turns,
        progress,
        llm=llm,
        dispatcher=dispatcher,
        settings=settings,
    )

    if result.reason == OutcomeReason.MODEL_NOT_FOUND_ERROR:
        progress(f"Model error: {result.error_message}")
        return result

    progress(summarize_result(result))
    return result
