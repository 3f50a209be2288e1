"""Runtime configuration for google-mcp-server.

Environment Variables:
    GOOGLE_CLIENT_ID: Google OAuth client ID (required)
    GOOGLE_CLIENT_SECRET: Google OAuth client secret (required)
    GOOGLE_TOKEN_PATH: Token cache file (default: ~/.google-mcp/credentials.json)
    GOOGLE_MCP_LOG_LEVEL: Logging level for stderr diagnostics (default: INFO)
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field

from google_mcp_server.errors import ConfigurationError

CLIENT_ID_ENV = "GOOGLE_CLIENT_ID"
CLIENT_SECRET_ENV = "GOOGLE_CLIENT_SECRET"  # nosec B105 - environment variable name
TOKEN_PATH_ENV = "GOOGLE_TOKEN_PATH"
LOG_LEVEL_ENV = "GOOGLE_MCP_LOG_LEVEL"


def default_token_path(environ: Mapping[str, str] | None = None) -> Path:
    """Return the default token cache location under the user's home directory."""
    env = os.environ if environ is None else environ
    home = env.get("HOME") or "/tmp"  # nosec B108
    return Path(home) / ".google-mcp" / "credentials.json"


class Settings(BaseModel):
    """Static configuration read once at process start.

    Attributes:
        client_id: OAuth client identifier.
        client_secret: OAuth client secret.
        token_path: Location of the JSON token cache.
        log_level: Name of the logging level used for stderr output.
    """

    client_id: str
    client_secret: str
    token_path: Path = Field(default_factory=default_token_path)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            Populated Settings instance.

        Raises:
            ConfigurationError: If the client ID or secret is missing.
        """
        env = os.environ if environ is None else environ

        client_id = env.get(CLIENT_ID_ENV)
        client_secret = env.get(CLIENT_SECRET_ENV)
        if not client_id or not client_secret:
            raise ConfigurationError(
                f"{CLIENT_ID_ENV} and {CLIENT_SECRET_ENV} environment variables are required."
            )

        token_path = env.get(TOKEN_PATH_ENV)
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            token_path=Path(token_path).expanduser() if token_path else default_token_path(env),
            log_level=env.get(LOG_LEVEL_ENV, "INFO").upper(),
        )

    @property
    def logging_level(self) -> int:
        """Numeric logging level, falling back to INFO for unknown names."""
        level = logging.getLevelName(self.log_level)
        return level if isinstance(level, int) else logging.INFO
