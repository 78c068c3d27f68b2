"""
Runtime settings for the agent loop and human queries.

Values come from the process environment (a .env file is loaded first).
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MAX_TURNS = 6
DEFAULT_PROVIDER = "openai"
DEFAULT_HUMAN_QUERY_TIMEOUT_SECONDS = 60.0
DEFAULT_ENGAGEMENT_GRACE_SECONDS = 0.25


def _env_int(key: str, default: Optional[int]) -> Optional[int]:
    raw = os.environ.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {key}={raw!r}; using default {default}")
        return default


def _env_float(key: str, default: float) -> float:
    raw = os.environ.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid number for {key}={raw!r}; using default {default}")
        return default


@dataclass
class AgentSettings:
    """Configuration for agent runs"""
    model: str = DEFAULT_MODEL
    max_turns: int = DEFAULT_MAX_TURNS
    max_tokens: Optional[int] = None
    provider: str = DEFAULT_PROVIDER
    human_query_timeout_seconds: float = DEFAULT_HUMAN_QUERY_TIMEOUT_SECONDS
    engagement_grace_seconds: float = DEFAULT_ENGAGEMENT_GRACE_SECONDS

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "AgentSettings":
        if load_env_file:
            load_dotenv()
        return cls(
            model=os.environ.get("AGENT_MODEL") or DEFAULT_MODEL,
            max_turns=_env_int("AGENT_MAX_TURNS", DEFAULT_MAX_TURNS),
            max_tokens=_env_int("AGENT_MAX_TOKENS", None),
            provider=(os.environ.get("AGENT_PROVIDER") or DEFAULT_PROVIDER).lower(),
            human_query_timeout_seconds=_env_float("HUMAN_QUERY_TIMEOUT_SECONDS", DEFAULT_HUMAN_QUERY_TIMEOUT_SECONDS),
            engagement_grace_seconds=_env_float("HUMAN_QUERY_GRACE_SECONDS", DEFAULT_ENGAGEMENT_GRACE_SECONDS),
        )
