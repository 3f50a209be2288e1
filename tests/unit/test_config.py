"""Unit tests for environment-based settings."""

import logging
from pathlib import Path

import pytest

from google_mcp_server.config import Settings, default_token_path
from google_mcp_server.errors import ConfigurationError

BASE_ENV = {
    "GOOGLE_CLIENT_ID": "id-123",
    "GOOGLE_CLIENT_SECRET": "secret-456",  # pragma: allowlist secret
    "HOME": "/home/tester",
}


@pytest.mark.unit
class TestSettingsFromEnv:
    """Tests for Settings.from_env()."""

    def test_should_read_client_credentials(self) -> None:
        settings = Settings.from_env(BASE_ENV)

        assert settings.client_id == "id-123"
        assert settings.client_secret == "secret-456"  # pragma: allowlist secret

    def test_should_default_token_path_under_home(self) -> None:
        settings = Settings.from_env(BASE_ENV)

        assert settings.token_path == Path("/home/tester/.google-mcp/credentials.json")

    def test_should_honor_token_path_override(self) -> None:
        settings = Settings.from_env({**BASE_ENV, "GOOGLE_TOKEN_PATH": "/srv/tokens/google.json"})

        assert settings.token_path == Path("/srv/tokens/google.json")

    def test_should_fall_back_to_tmp_without_home(self) -> None:
        assert default_token_path({}) == Path("/tmp/.google-mcp/credentials.json")

    @pytest.mark.parametrize("missing", ["GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET"])
    def test_should_raise_when_client_credentials_missing(self, missing: str) -> None:
        env = {key: value for key, value in BASE_ENV.items() if key != missing}

        with pytest.raises(ConfigurationError, match="GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET"):
            Settings.from_env(env)

    def test_should_treat_empty_values_as_missing(self) -> None:
        with pytest.raises(ConfigurationError):
            Settings.from_env({**BASE_ENV, "GOOGLE_CLIENT_ID": ""})


@pytest.mark.unit
class TestLogLevel:
    """Tests for the logging level setting."""

    def test_should_default_to_info(self) -> None:
        assert Settings.from_env(BASE_ENV).logging_level == logging.INFO

    def test_should_parse_level_case_insensitively(self) -> None:
        settings = Settings.from_env({**BASE_ENV, "GOOGLE_MCP_LOG_LEVEL": "debug"})
        assert settings.logging_level == logging.DEBUG

    def test_should_fall_back_to_info_for_unknown_level(self) -> None:
        settings = Settings.from_env({**BASE_ENV, "GOOGLE_MCP_LOG_LEVEL": "chatty"})
        assert settings.logging_level == logging.INFO
