"""Unit tests for server configuration settings model.

Tests verify that the Settings model correctly binds environment variables
from the .env.example file and that the grouped configuration models work as
expected.
"""

from pathlib import Path

import pytest

from legal_chatbot.server.core.config import (
    CORSConfig,
    N8nConfig,
    Settings,
    SupabaseConfig,
    UploadConfig,
)


@pytest.fixture
def env_example_path() -> Path:
    """Get path to .env.example file."""
    return Path(__file__).resolve().parent.parent.parent.parent / ".env.example"


@pytest.fixture
def env_example_vars(env_example_path: Path) -> dict[str, str]:
    """Parse .env.example file and return environment variables."""
    env_vars = {}
    with open(env_example_path) as f:
        for line in f:
            line = line.strip()
            # Skip comments and empty lines
            if not line or line.startswith("#"):
                continue
            # Parse KEY=VALUE
            if "=" in line:
                key, value = line.split("=", 1)
                env_vars[key.strip()] = value.strip()
    return env_vars


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    def test_server_host_binding(self, env_example_vars: dict[str, str], monkeypatch):
        host = env_example_vars.get("LEGAL_CHATBOT_SERVER_HOST", "0.0.0.0")
        monkeypatch.setenv("LEGAL_CHATBOT_SERVER_HOST", host)

        settings = Settings()
        assert settings.server_host == host

    def test_server_port_binding(self, env_example_vars: dict[str, str], monkeypatch):
        port = env_example_vars.get("LEGAL_CHATBOT_SERVER_PORT", "8000")
        monkeypatch.setenv("LEGAL_CHATBOT_SERVER_PORT", port)

        settings = Settings()
        assert settings.server_port == int(port)

    def test_log_level_binding(self, env_example_vars: dict[str, str], monkeypatch):
        log_level = env_example_vars.get("LEGAL_CHATBOT_LOG_LEVEL", "INFO")
        monkeypatch.setenv("LEGAL_CHATBOT_LOG_LEVEL", log_level)

        settings = Settings()
        assert settings.log_level.upper() == log_level.upper()

    def test_database_url_binding(self):
        """Tests run against in-memory SQLite."""
        settings = Settings()
        assert settings.database_url.startswith("sqlite+aiosqlite://")

    def test_max_upload_size_binding(self, monkeypatch):
        monkeypatch.setenv("MAX_UPLOAD_SIZE_MB", "5")

        settings = Settings()
        assert settings.upload.max_size_mb == 5
        assert settings.upload.max_size_bytes == 5 * 1024 * 1024

    def test_cors_origins_binding(self, env_example_vars: dict[str, str], monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", env_example_vars["CORS_ORIGINS"])

        settings = Settings()
        assert settings.cors.origins == ["http://localhost:3000"]


class TestSupabaseConfigBinding:
    """Test Supabase configuration binding."""

    def test_grouped_from_settings(self, env_example_vars: dict[str, str], monkeypatch):
        monkeypatch.setenv("NEXT_PUBLIC_SUPABASE_URL", env_example_vars["NEXT_PUBLIC_SUPABASE_URL"])
        monkeypatch.setenv("NEXT_PUBLIC_SUPABASE_ANON_KEY", env_example_vars["NEXT_PUBLIC_SUPABASE_ANON_KEY"])

        supabase = Settings().supabase

        assert isinstance(supabase, SupabaseConfig)
        assert supabase.url == "http://mock-supabase"
        assert supabase.api_key == "test-anon-key"
        assert supabase.is_configured is True

    def test_service_role_key_used_without_anon_key(self):
        config = SupabaseConfig.model_validate(
            {"NEXT_PUBLIC_SUPABASE_URL": "http://mock-supabase", "SUPABASE_SERVICE_ROLE_KEY": "service-key"}
        )

        assert config.api_key == "service-key"
        assert config.is_configured is True

    def test_not_configured_without_url(self):
        config = SupabaseConfig.model_validate({"NEXT_PUBLIC_SUPABASE_ANON_KEY": "key"})

        assert config.is_configured is False


class TestN8nConfigBinding:
    """Test n8n webhook configuration binding."""

    def test_defaults(self):
        config = N8nConfig()

        assert config.chat_webhook is None
        assert config.timeout == 60.0
        assert config.topic == "logistics"

    def test_binding(self):
        config = N8nConfig.model_validate(
            {
                "NEXT_PUBLIC_N8N_CHAT_WEBHOOK": "http://mock/webhook/chat",
                "N8N_WEBHOOK_TIMEOUT": "15",
                "N8N_CHAT_TOPIC": "customs",
            }
        )

        assert config.chat_webhook == "http://mock/webhook/chat"
        assert config.timeout == 15.0
        assert config.topic == "customs"

    def test_grouped_from_settings(self, monkeypatch):
        monkeypatch.setenv("N8N_CHAT_TOPIC", "smuggling")

        assert Settings().n8n.topic == "smuggling"


class TestUploadAndCORSConfig:
    def test_upload_defaults(self):
        assert UploadConfig().max_size_mb == 20

    def test_cors_defaults(self):
        config = CORSConfig()

        assert config.origins == ["*"]
        assert config.allow_credentials is True
        assert config.allow_methods == ["*"]
        assert config.allow_headers == ["*"]
