"""
Global pytest configuration and fixtures for aichat tests
"""

import logging

import pytest

from aichat.agent.tools.tool_registry import reset_tool_registry


@pytest.fixture(autouse=True)
def fresh_tool_registry():
    """Give every test an empty global tool registry"""
    reset_tool_registry()
    yield
    reset_tool_registry()


@pytest.fixture(autouse=True)
def isolate_agent_env(monkeypatch):
    """Keep developer settings from leaking into tests"""
    for key in (
        "AGENT_MODEL",
        "AGENT_MAX_TURNS",
        "AGENT_MAX_TOKENS",
        "AGENT_PROVIDER",
        "HUMAN_QUERY_TIMEOUT_SECONDS",
        "HUMAN_QUERY_GRACE_SECONDS",
    ):
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def debug_logs(caplog):
    caplog.set_level(logging.DEBUG)
    return caplog
