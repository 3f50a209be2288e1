"""Shared pytest fixtures for google-mcp-server tests.

This module provides reusable fixtures for settings, token storage,
credentials, and a mocked HTTP client for Google API calls.
"""

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from google_mcp_server.auth.credential_manager import CredentialManager
from google_mcp_server.auth.token_storage import TokenStorage
from google_mcp_server.config import Settings

# =============================================================================
# Settings and Token Storage Fixtures
# =============================================================================


@pytest.fixture
def temp_token_path(tmp_path: Path) -> Path:
    """Token path inside a directory that does not exist yet."""
    return tmp_path / ".google-mcp" / "credentials.json"


@pytest.fixture
def settings(temp_token_path: Path) -> Settings:
    """Settings with test OAuth client credentials."""
    return Settings(
        client_id="test-client-id",
        client_secret="test-client-secret",  # pragma: allowlist secret
        token_path=temp_token_path,
    )


@pytest.fixture
def token_storage(temp_token_path: Path) -> TokenStorage:
    """Create a TokenStorage instance with temporary storage."""
    return TokenStorage(token_path=temp_token_path)


@pytest.fixture
def future_expiry_ms() -> int:
    """Expiry one hour from now, in epoch milliseconds."""
    return int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp() * 1000)


@pytest.fixture
def past_expiry_ms() -> int:
    """Expiry one hour ago, in epoch milliseconds."""
    return int((datetime.now(timezone.utc) - timedelta(hours=1)).timestamp() * 1000)


@pytest.fixture
def cached_record(future_expiry_ms: int) -> dict[str, Any]:
    """A complete credential record as written by a previous run."""
    return {
        "access_token": "cached_access_token",
        "refresh_token": "cached_refresh_token",
        "token_type": "Bearer",
        "expiry_date": future_expiry_ms,
        "scope": "https://www.googleapis.com/auth/drive",
    }


def write_record(path: Path, record: Any) -> None:
    """Write a credential record (or any JSON value) to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(record))


# =============================================================================
# Credential Manager Fixtures
# =============================================================================


@pytest.fixture
def credential_manager(settings: Settings, token_storage: TokenStorage) -> CredentialManager:
    """Create a CredentialManager with temporary storage."""
    return CredentialManager(settings, storage=token_storage)


@pytest.fixture
def mock_google_credentials() -> MagicMock:
    """Create a mock Google OAuth2 Credentials object with a valid token."""
    mock_creds = MagicMock()
    mock_creds.token = "mock_access_token"
    mock_creds.refresh_token = "mock_refresh_token"
    mock_creds.valid = True
    return mock_creds


@pytest.fixture
def mock_credential_manager(mock_google_credentials: MagicMock) -> MagicMock:
    """Credential manager returning the mock credentials."""
    manager = MagicMock(spec=CredentialManager)
    manager.get_credentials.return_value = mock_google_credentials
    return manager


# =============================================================================
# Mock HTTP Client
# =============================================================================


def create_mock_response(
    json_data: Any = None,
    status_code: int = 200,
    text: str | None = None,
) -> MagicMock:
    """Create a mock httpx Response object.

    Args:
        json_data: Decoded JSON body. ``None`` with no ``text`` means an empty body.
        status_code: HTTP status; 4xx/5xx mark the response as an error.
        text: Raw body text for non-JSON responses.
    """
    if text is None:
        text = json.dumps(json_data) if json_data is not None else ""

    mock_response = MagicMock(spec=httpx.Response)
    mock_response.status_code = status_code
    mock_response.is_error = status_code >= 400
    mock_response.content = text.encode("utf-8")
    mock_response.text = text
    mock_response.json.return_value = json_data
    return mock_response


@pytest.fixture
def mock_http_client() -> AsyncMock:
    """Shared httpx.AsyncClient stand-in. Set ``request.side_effect`` per test."""
    client = AsyncMock(spec=httpx.AsyncClient)
    client.request.return_value = create_mock_response({})
    return client


@pytest.fixture
def server(settings: Settings, mock_credential_manager: MagicMock, mock_http_client: AsyncMock):
    """GoogleMcpServer wired to mocked credentials and HTTP."""
    from google_mcp_server.server import GoogleMcpServer

    return GoogleMcpServer(
        settings,
        credential_manager=mock_credential_manager,
        http_client=mock_http_client,
    )




@pytest.fixture
def make_response():
    """Factory fixture for mock httpx responses."""
    return create_mock_response


@pytest.fixture
def write_token_file(temp_token_path: Path):
    """Factory fixture writing a JSON value to the temporary token path."""

    def _write(record: Any) -> Path:
        write_record(temp_token_path, record)
        return temp_token_path

    return _write
