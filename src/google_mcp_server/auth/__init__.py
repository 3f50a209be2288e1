"""OAuth credentials for google-mcp-server.

Quick Start:
    ```python
    from google_mcp_server.auth import CredentialManager
    from google_mcp_server.config import Settings

    manager = CredentialManager(Settings.from_env())

    # Shared, refresh-aware google-auth credentials
    credentials = manager.get_credentials()
    ```
"""

from google_mcp_server.auth.credential_manager import (
    GOOGLE_WORKSPACE_SCOPES,
    CredentialManager,
    RefreshAwareCredentials,
)
from google_mcp_server.auth.models import CredentialRecord, TokenStatus
from google_mcp_server.auth.token_storage import TokenStorage

__all__ = [
    "CredentialManager",
    "RefreshAwareCredentials",
    "TokenStorage",
    "CredentialRecord",
    "TokenStatus",
    "GOOGLE_WORKSPACE_SCOPES",
]
