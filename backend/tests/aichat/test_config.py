"""
Tests for environment-driven settings
"""

from aichat.config import (
    DEFAULT_ENGAGEMENT_GRACE_SECONDS,
    DEFAULT_HUMAN_QUERY_TIMEOUT_SECONDS,
    DEFAULT_MAX_TURNS,
    DEFAULT_MODEL,
    AgentSettings,
)


class TestAgentSettings:
    """Test AgentSettings.from_env"""

    def test_defaults(self):
        settings = AgentSettings.from_env(load_env_file=False)
        assert settings.model == DEFAULT_MODEL == "gpt-4o-mini"
        assert settings.max_turns == DEFAULT_MAX_TURNS == 6
        assert settings.max_tokens is None
        assert settings.provider == "openai"
        assert settings.human_query_timeout_seconds == DEFAULT_HUMAN_QUERY_TIMEOUT_SECONDS
        assert settings.engagement_grace_seconds == DEFAULT_ENGAGEMENT_GRACE_SECONDS

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("AGENT_MODEL", "gpt-4o")
        monkeypatch.setenv("AGENT_MAX_TURNS", "12")
        monkeypatch.setenv("AGENT_MAX_TOKENS", "2048")
        monkeypatch.setenv("AGENT_PROVIDER", "OpenRouter")
        monkeypatch.setenv("HUMAN_QUERY_TIMEOUT_SECONDS", "15")
        monkeypatch.setenv("HUMAN_QUERY_GRACE_SECONDS", "0.5")

        settings = AgentSettings.from_env(load_env_file=False)
        assert settings.model == "gpt-4o"
        assert settings.max_turns == 12
        assert settings.max_tokens == 2048
        assert settings.provider == "openrouter"
        assert settings.human_query_timeout_seconds == 15.0
        assert settings.engagement_grace_seconds == 0.5

    def test_invalid_numbers_fall_back(self, monkeypatch, caplog):
        monkeypatch.setenv("AGENT_MAX_TURNS", "many")
        monkeypatch.setenv("HUMAN_QUERY_TIMEOUT_SECONDS", "soon")

        settings = AgentSettings.from_env(load_env_file=False)
        assert settings.max_turns == DEFAULT_MAX_TURNS
        assert settings.human_query_timeout_seconds == DEFAULT_HUMAN_QUERY_TIMEOUT_SECONDS
        assert "AGENT_MAX_TURNS" in caplog.text

    def test_empty_values_use_defaults(self, monkeypatch):
        monkeypatch.setenv("AGENT_MODEL", "")
        monkeypatch.setenv("AGENT_MAX_TOKENS", "")
        settings = AgentSettings.from_env(load_env_file=False)
        assert settings.model == DEFAULT_MODEL
        assert settings.max_tokens is None
