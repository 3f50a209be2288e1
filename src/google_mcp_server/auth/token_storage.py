"""JSON token cache for google-mcp-server.

Storage Location: ~/.google-mcp/credentials.json (override with
GOOGLE_TOKEN_PATH).

The file holds a single credential record. A missing, unreadable or
malformed file is treated as "no cached credentials". The directory is
only created when a record is first written.
"""

import json
import logging
from pathlib import Path
from typing import Any

from google_mcp_server.auth.models import CredentialRecord, TokenStatus

logger = logging.getLogger(__name__)


class TokenStorage:
    """Simple JSON-based storage for the OAuth credential record.

    Attributes:
        token_path: Path to the credentials.json file.

    Example:
        ```python
        storage = TokenStorage(Path("~/.google-mcp/credentials.json").expanduser())

        storage.merge({"access_token": "ya29...", "expiry_date": 1767225600000})
        record = storage.retrieve()
        ```
    """

    def __init__(self, token_path: Path) -> None:
        """Initialize token storage.

        Args:
            token_path: Location of the JSON cache. Nothing is created on disk
                until the first write.
        """
        self.token_path = token_path

    @property
    def credentials_dir(self) -> Path:
        """Directory holding the token file."""
        return self.token_path.parent

    def exists(self) -> bool:
        """Check whether a token file is present."""
        return self.token_path.exists()

    def _ensure_credentials_dir(self) -> None:
        """Create credentials directory with secure permissions if needed."""
        if not self.credentials_dir.exists():
            self.credentials_dir.mkdir(parents=True, mode=0o700)

    def load(self) -> dict[str, Any]:
        """Load the raw record from disk.

        Returns:
            The stored JSON object, or an empty dict if the file is missing,
            unreadable, or does not contain a JSON object.
        """
        if not self.token_path.exists():
            return {}

        try:
            with open(self.token_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable token file {self.token_path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring token file {self.token_path}: not a JSON object")
            return {}

        return data

    def retrieve(self) -> CredentialRecord | None:
        """Load the cached record as a model.

        Returns:
            CredentialRecord if a usable record exists, None otherwise.
        """
        data = self.load()
        if not data:
            return None

        try:
            return CredentialRecord.model_validate(data)
        except ValueError:
            return None

    def save(self, record: dict[str, Any]) -> None:
        """Write a record to disk, replacing the current content.

        Args:
            record: JSON-serializable credential data.

        Raises:
            OSError: If the directory or file cannot be written.
        """
        self._ensure_credentials_dir()

        with open(self.token_path, "w", encoding="utf-8") as f:
            json.dump(record, f, indent=2)

        # Owner read/write only (600)
        self.token_path.chmod(0o600)

    def merge(self, update: dict[str, Any]) -> dict[str, Any]:
        """Merge new token fields over the stored record and write it back.

        Fields present in ``update`` win; fields absent from it are kept, so
        a refresh that only yields a new access token preserves the stored
        refresh token.

        Args:
            update: Token fields to store. ``None`` values are ignored.

        Returns:
            The merged record that was written.

        Raises:
            OSError: If the file cannot be written.
        """
        merged = self.load()
        merged.update({key: value for key, value in update.items() if value is not None})
        self.save(merged)
        return merged

    def get_status(self) -> TokenStatus:
        """Get the status of the cached credentials."""
        if not self.token_path.exists():
            return TokenStatus.MISSING

        record = self.retrieve()
        if record is None or not (record.access_token or record.refresh_token):
            return TokenStatus.INVALID

        if record.is_expired():
            return TokenStatus.EXPIRED

        return TokenStatus.VALID

    def clear(self) -> None:
        """Delete the token file if present."""
        if self.token_path.exists():
            self.token_path.unlink()
