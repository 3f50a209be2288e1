"""Shared OAuth credentials for all Google API calls.

The manager lazily builds one refresh-aware google-auth ``Credentials``
object per process, seeded from the JSON token cache. Every time
google-auth refreshes the access token, the new token fields are merged
into the cache so the next process start can reuse them.
"""

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from google_mcp_server.auth.models import (
    CredentialRecord,
    TokenStatus,
    expiry_to_millis,
    millis_to_expiry,
)
from google_mcp_server.auth.token_storage import TokenStorage
from google_mcp_server.config import Settings

logger = logging.getLogger(__name__)

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"  # nosec B105 - public endpoint
GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"

# Scopes requested by the `setup` command
GOOGLE_WORKSPACE_SCOPES = [
    "https://www.googleapis.com/auth/drive",
    "https://www.googleapis.com/auth/documents",
    "https://www.googleapis.com/auth/presentations",
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/contacts",
    "https://www.googleapis.com/auth/tasks",
]

RefreshListener = Callable[[dict[str, Any]], None]


class RefreshAwareCredentials(Credentials):
    """google-auth user credentials that announce token refreshes.

    Listeners receive the token fields produced by a refresh:
    ``access_token``, ``token_type`` and ``expiry_date``, plus
    ``refresh_token`` only when Google issued a new one.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._refresh_listeners: list[RefreshListener] = []

    def add_refresh_listener(self, listener: RefreshListener) -> None:
        """Register a callback fired after every successful refresh."""
        self._refresh_listeners.append(listener)

    def refresh(self, request: Any) -> None:
        previous_refresh_token = self.refresh_token
        super().refresh(request)

        tokens: dict[str, Any] = {
            "access_token": self.token,
            "token_type": "Bearer",
            "expiry_date": expiry_to_millis(self.expiry),
        }
        if self.refresh_token and self.refresh_token != previous_refresh_token:
            tokens["refresh_token"] = self.refresh_token

        for listener in self._refresh_listeners:
            listener(tokens)


class CredentialManager:
    """Owner of the process-wide authorization handle.

    Attributes:
        settings: Client ID/secret and token path.
        storage: Token cache the credentials are loaded from and saved to.

    Example:
        ```python
        manager = CredentialManager(Settings.from_env())
        credentials = manager.get_credentials()
        assert credentials is manager.get_credentials()
        ```
    """

    def __init__(self, settings: Settings, storage: TokenStorage | None = None) -> None:
        """Initialize the manager without touching the network or creating files.

        Args:
            settings: Runtime settings with the OAuth client credentials.
            storage: Token storage. Defaults to one at ``settings.token_path``.
        """
        self.settings = settings
        self.storage = storage or TokenStorage(settings.token_path)
        self._credentials: RefreshAwareCredentials | None = None

    @property
    def token_path(self) -> Path:
        """Path of the token cache file."""
        return self.storage.token_path

    def get_credentials(self) -> RefreshAwareCredentials:
        """Return the shared credentials, creating them on first use."""
        if self._credentials is None:
            self._credentials = self._build_credentials()
        return self._credentials

    def _build_credentials(self) -> RefreshAwareCredentials:
        record = self.storage.retrieve() or CredentialRecord()
        if record.access_token or record.refresh_token:
            logger.info(f"Loaded cached credentials from {self.storage.token_path}")

        credentials = RefreshAwareCredentials(
            token=record.access_token,
            refresh_token=record.refresh_token,
            token_uri=GOOGLE_TOKEN_URI,
            client_id=self.settings.client_id,
            client_secret=self.settings.client_secret,
            expiry=millis_to_expiry(record.expiry_date),
        )
        credentials.add_refresh_listener(self._save_refreshed_tokens)
        return credentials

    def _save_refreshed_tokens(self, tokens: dict[str, Any]) -> None:
        """Persist refreshed tokens; failures are logged and otherwise ignored."""
        try:
            self.storage.merge(tokens)
            logger.info(f"Saved refreshed token to {self.storage.token_path}")
        except Exception as e:
            logger.error(f"Token save error: {e}")

    def get_status(self) -> TokenStatus:
        """Get the status of the cached credentials."""
        return self.storage.get_status()

    async def authenticate(self, scopes: list[str] | None = None) -> CredentialRecord:
        """Run the installed-app consent flow and store the resulting tokens.

        Opens a browser for Google consent and listens on a local port for
        the redirect.

        Args:
            scopes: OAuth scopes to request. Uses GOOGLE_WORKSPACE_SCOPES if not specified.

        Returns:
            The credential record written to the token cache.
        """
        if scopes is None:
            scopes = GOOGLE_WORKSPACE_SCOPES

        client_config = {
            "installed": {
                "client_id": self.settings.client_id,
                "client_secret": self.settings.client_secret,
                "auth_uri": GOOGLE_AUTH_URI,
                "token_uri": GOOGLE_TOKEN_URI,
                "redirect_uris": ["http://localhost"],
            }
        }

        loop = asyncio.get_event_loop()
        credentials = await loop.run_in_executor(None, self._run_oauth_flow, client_config, scopes)

        record = CredentialRecord(
            access_token=credentials.token,
            refresh_token=credentials.refresh_token,
            expiry_date=expiry_to_millis(credentials.expiry),
            scope=" ".join(scopes),
        )
        self.storage.merge(record.model_dump(exclude_none=True))
        self._credentials = None
        return record

    def _run_oauth_flow(self, client_config: dict[str, Any], scopes: list[str]) -> Credentials:
        """Run the blocking consent flow on a local redirect server."""
        flow = InstalledAppFlow.from_client_config(client_config, scopes=scopes)
        return flow.run_local_server(
            port=0,
            access_type="offline",
            prompt="consent",
            open_browser=True,
        )
