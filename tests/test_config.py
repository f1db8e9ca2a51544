"""
Tests for environment-driven settings and reminder templates.
"""

from pathlib import Path

from line_health_agent.config import CLAUDE_MODEL, DATA_DIR, load_settings
from line_health_agent.reminders import DEFAULT_REMINDER, REMINDER_MESSAGES, reminder_message

ENV_VARS = (
    "LINE_CHANNEL_SECRET",
    "LINE_CHANNEL_ACCESS_TOKEN",
    "ANTHROPIC_API_KEY",
    "LINE_USER_ID",
    "SHEET_ID",
    "DATA_DIR",
    "CLAUDE_MODEL",
)


class TestLoadSettings:
    """Tests for load_settings()."""

    def _clear(self, monkeypatch):
        for key in ENV_VARS:
            monkeypatch.delenv(key, raising=False)

    def test_reads_environment(self, monkeypatch, tmp_path):
        self._clear(monkeypatch)
        monkeypatch.setenv("LINE_CHANNEL_SECRET", "secret")
        monkeypatch.setenv("LINE_CHANNEL_ACCESS_TOKEN", "token")
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
        monkeypatch.setenv("LINE_USER_ID", "U42")
        monkeypatch.setenv("SHEET_ID", "my-log")
        monkeypatch.setenv("DATA_DIR", str(tmp_path))

        settings = load_settings()

        assert settings.line_channel_secret == "secret"
        assert settings.line_channel_access_token == "token"
        assert settings.anthropic_api_key == "sk-test"
        assert settings.line_user_id == "U42"
        assert settings.sheet_id == "my-log"
        assert settings.data_dir == Path(tmp_path)

    def test_defaults_and_missing_values(self, monkeypatch, caplog):
        """Missing secrets are warned about, optional values fall back."""
        self._clear(monkeypatch)
        monkeypatch.setenv("LINE_USER_ID", "")

        settings = load_settings()

        assert settings.line_channel_secret == ""
        assert settings.line_user_id is None
        assert settings.sheet_id == "health-log"
        assert settings.data_dir == DATA_DIR
        assert settings.claude_model == CLAUDE_MODEL
        assert "ANTHROPIC_API_KEY is missing" in caplog.text


class TestReminderMessage:
    def test_known_types(self):
        assert reminder_message("morning") == REMINDER_MESSAGES["morning"]
        assert reminder_message("night") == REMINDER_MESSAGES["night"]

    def test_unknown_type_uses_default(self):
        assert reminder_message("noon") == DEFAULT_REMINDER
        assert reminder_message(None) == DEFAULT_REMINDER
