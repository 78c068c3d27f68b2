# aichat Agent Module
# Autonomous goal-directed conversation loop over an OpenAI-compatible model

from .core.runtime.agentic_agent import AgenticAgent, autonomous_conversation, run_agent
from .core.runtime.models import AgentRunResult, OutcomeReason
from .core.runtime.prompter import ModelNotFoundError, Prompter, PromptResult, disable_tools_options

__all__ = [
    'AgenticAgent',
    'autonomous_conversation',
    'run_agent',
    'AgentRunResult',
    'OutcomeReason',
    'Prompter',
    'PromptResult',
    'ModelNotFoundError',
    'disable_tools_options',
]
