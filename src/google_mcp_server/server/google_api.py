"""Authenticated, versioned clients for the Google REST APIs.

Each service client is a thin wrapper binding a versioned base URL to a
shared ``httpx.AsyncClient`` and the shared OAuth credentials. Access
tokens are refreshed through google-auth whenever they are missing or
expired.
"""

import asyncio
import json
import logging
from typing import Any

import httpx
from google.auth.transport.requests import Request

from google_mcp_server.auth import CredentialManager
from google_mcp_server.errors import GoogleApiError

logger = logging.getLogger(__name__)

# Google API base URLs, keyed by (service, version)
API_ENDPOINTS: dict[tuple[str, str], str] = {
    ("drive", "v3"): "https://www.googleapis.com/drive/v3",
    ("drive_upload", "v3"): "https://www.googleapis.com/upload/drive/v3",
    ("docs", "v1"): "https://docs.googleapis.com/v1",
    ("slides", "v1"): "https://slides.googleapis.com/v1",
    ("sheets", "v4"): "https://sheets.googleapis.com/v4",
    ("calendar", "v3"): "https://www.googleapis.com/calendar/v3",
    ("people", "v1"): "https://people.googleapis.com/v1",
    ("tasks", "v1"): "https://tasks.googleapis.com/tasks/v1",
}

MULTIPART_BOUNDARY = "google_mcp_server_boundary"


def _error_message(response: httpx.Response) -> str:
    """Extract Google's error message from a failed response."""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return str(payload.get("error_description") or error)

    return f"Request failed with status code {response.status_code}"


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    """Drop unset query parameters."""
    if params is None:
        return None
    return {key: value for key, value in params.items() if value is not None}


class GoogleClients:
    """Factory for versioned Google API clients sharing one HTTP pool.

    Attributes:
        credential_manager: Source of the shared OAuth credentials.
    """

    def __init__(
        self,
        credential_manager: CredentialManager,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.credential_manager = credential_manager
        self._http_client = http_client

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create shared HTTP client with connection pooling.

        Returns:
            Shared httpx.AsyncClient instance.
        """
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                http2=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                timeout=httpx.Timeout(30.0, connect=10.0),
            )
        return self._http_client

    async def close(self) -> None:
        """Close the shared HTTP client and release resources."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def get_access_token(self) -> str:
        """Get a valid access token, refreshing if necessary.

        Returns:
            Valid access token string.

        Raises:
            google.auth.exceptions.RefreshError: If no refresh token is cached
                or Google rejects the refresh.
        """
        credentials = self.credential_manager.get_credentials()

        if not credentials.valid:
            logger.info("Access token missing or expired, refreshing...")
            loop = asyncio.get_event_loop()
            await loop.run_in_executor(None, credentials.refresh, Request())

        return credentials.token

    async def send(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_data: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Make an authenticated HTTP request to Google APIs.

        Args:
            method: HTTP method (GET, POST, etc.).
            url: Full URL to request.
            params: Optional query parameters. ``None`` values are dropped.
            json_data: Optional JSON body data.
            content: Optional raw body content.
            headers: Optional additional headers.

        Returns:
            The successful httpx.Response.

        Raises:
            GoogleApiError: If Google answers with a non-2xx status.
        """
        access_token = await self.get_access_token()
        client = await self._get_http_client()

        request_headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }
        if headers:
            request_headers.update(headers)

        response = await client.request(
            method=method,
            url=url,
            params=_clean_params(params),
            json=json_data,
            content=content,
            headers=request_headers,
        )
        if response.is_error:
            raise GoogleApiError(response.status_code, _error_message(response))
        return response

    def service(self, name: str, version: str) -> "GoogleServiceClient":
        """Build a client for one versioned API surface.

        Raises:
            ValueError: If the service/version pair is unknown.
        """
        base_url = API_ENDPOINTS.get((name, version))
        if base_url is None:
            raise ValueError(f"Unknown Google API: {name} {version}")
        return GoogleServiceClient(self, base_url)

    def drive(self) -> "GoogleServiceClient":
        return self.service("drive", "v3")

    def drive_upload(self) -> "GoogleServiceClient":
        return self.service("drive_upload", "v3")

    def docs(self) -> "GoogleServiceClient":
        return self.service("docs", "v1")

    def slides(self) -> "GoogleServiceClient":
        return self.service("slides", "v1")

    def sheets(self) -> "GoogleServiceClient":
        return self.service("sheets", "v4")

    def calendar(self) -> "GoogleServiceClient":
        return self.service("calendar", "v3")

    def people(self) -> "GoogleServiceClient":
        return self.service("people", "v1")

    def tasks(self) -> "GoogleServiceClient":
        return self.service("tasks", "v1")


class GoogleServiceClient:
    """Client bound to one versioned Google API base URL."""

    def __init__(self, clients: GoogleClients, base_url: str) -> None:
        self._clients = clients
        self.base_url = base_url

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json_data: Any = None,
    ) -> dict[str, Any]:
        """Send a request and decode the JSON response.

        Returns:
            Decoded JSON body, or an empty dict for empty responses.
        """
        response = await self._clients.send(method, self.url(path), params=params, json_data=json_data)
        if not response.content:
            return {}
        result: dict[str, Any] = response.json()
        return result

    async def request_text(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> str:
        """Send a request and return the raw body as text."""
        response = await self._clients.send(method, self.url(path), params=params)
        return response.text

    async def upload(
        self,
        method: str,
        path: str,
        metadata: dict[str, Any],
        content: str,
        mime_type: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send metadata and file content as a multipart/related upload.

        Args:
            method: POST to create, PATCH to update.
            path: Path under the upload endpoint (e.g. ``files``).
            metadata: File resource fields.
            content: Text content of the file.
            mime_type: MIME type of ``content``.
            params: Extra query parameters; ``uploadType`` is always multipart.
        """
        body_parts = [
            f"--{MULTIPART_BOUNDARY}",
            "Content-Type: application/json; charset=UTF-8",
            "",
            json.dumps(metadata),
            f"--{MULTIPART_BOUNDARY}",
            f"Content-Type: {mime_type}",
            "",
            content,
            f"--{MULTIPART_BOUNDARY}--",
        ]
        body = "\r\n".join(body_parts)

        response = await self._clients.send(
            method,
            self.url(path),
            params={"uploadType": "multipart", **(params or {})},
            content=body.encode("utf-8"),
            headers={"Content-Type": f"multipart/related; boundary={MULTIPART_BOUNDARY}"},
        )
        result: dict[str, Any] = response.json()
        return result
