"""Unit tests for the authenticated Google REST clients."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from google.auth.transport.requests import Request

from google_mcp_server.errors import GoogleApiError
from google_mcp_server.server.google_api import MULTIPART_BOUNDARY, GoogleClients


@pytest.fixture
def google(mock_credential_manager: MagicMock, mock_http_client: AsyncMock) -> GoogleClients:
    return GoogleClients(mock_credential_manager, http_client=mock_http_client)


@pytest.mark.unit
class TestServiceClients:
    """Tests for versioned client construction."""

    @pytest.mark.parametrize(
        ("factory", "base_url"),
        [
            ("drive", "https://www.googleapis.com/drive/v3"),
            ("drive_upload", "https://www.googleapis.com/upload/drive/v3"),
            ("docs", "https://docs.googleapis.com/v1"),
            ("slides", "https://slides.googleapis.com/v1"),
            ("sheets", "https://sheets.googleapis.com/v4"),
            ("calendar", "https://www.googleapis.com/calendar/v3"),
            ("people", "https://people.googleapis.com/v1"),
            ("tasks", "https://tasks.googleapis.com/tasks/v1"),
        ],
    )
    def test_should_bind_versioned_base_url(
        self, google: GoogleClients, factory: str, base_url: str
    ) -> None:
        assert getattr(google, factory)().base_url == base_url

    def test_should_reject_unknown_service(self, google: GoogleClients) -> None:
        with pytest.raises(ValueError, match="Unknown Google API: gmail v1"):
            google.service("gmail", "v1")


@pytest.mark.unit
class TestAccessToken:
    """Tests for token acquisition."""

    @pytest.mark.asyncio
    async def test_should_use_valid_token_without_refresh(
        self, google: GoogleClients, mock_google_credentials: MagicMock
    ) -> None:
        assert await google.get_access_token() == "mock_access_token"
        mock_google_credentials.refresh.assert_not_called()

    @pytest.mark.asyncio
    async def test_should_refresh_invalid_credentials(
        self, google: GoogleClients, mock_google_credentials: MagicMock
    ) -> None:
        mock_google_credentials.valid = False

        await google.get_access_token()

        mock_google_credentials.refresh.assert_called_once()
        assert isinstance(mock_google_credentials.refresh.call_args[0][0], Request)


@pytest.mark.unit
class TestRequest:
    """Tests for GoogleServiceClient.request() and friends."""

    @pytest.mark.asyncio
    async def test_should_send_authorized_request(
        self, google: GoogleClients, mock_http_client: AsyncMock, make_response
    ) -> None:
        mock_http_client.request.return_value = make_response({"files": []})

        result = await google.drive().request(
            "GET", "files", params={"q": "name contains 'x'", "pageToken": None}
        )

        assert result == {"files": []}
        kwargs = mock_http_client.request.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["url"] == "https://www.googleapis.com/drive/v3/files"
        assert kwargs["params"] == {"q": "name contains 'x'"}
        assert kwargs["headers"]["Authorization"] == "Bearer mock_access_token"

    @pytest.mark.asyncio
    async def test_should_return_empty_dict_for_empty_body(
        self, google: GoogleClients, mock_http_client: AsyncMock, make_response
    ) -> None:
        mock_http_client.request.return_value = make_response(status_code=204)

        assert await google.drive().request("DELETE", "files/abc") == {}

    @pytest.mark.asyncio
    async def test_should_raise_google_error_message(
        self, google: GoogleClients, mock_http_client: AsyncMock, make_response
    ) -> None:
        mock_http_client.request.return_value = make_response(
            {"error": {"code": 404, "message": "File not found: abc."}}, status_code=404
        )

        with pytest.raises(GoogleApiError) as exc_info:
            await google.drive().request("GET", "files/abc")

        assert exc_info.value.status_code == 404
        assert str(exc_info.value) == "File not found: abc."

    @pytest.mark.asyncio
    async def test_should_fall_back_to_status_for_non_json_error(
        self, google: GoogleClients, mock_http_client: AsyncMock, make_response
    ) -> None:
        response = make_response(text="<html>Bad Gateway</html>", status_code=502)
        response.json.side_effect = ValueError("not json")
        mock_http_client.request.return_value = response

        with pytest.raises(GoogleApiError, match="Request failed with status code 502"):
            await google.docs().request("GET", "documents/abc")

    @pytest.mark.asyncio
    async def test_should_return_raw_text(
        self, google: GoogleClients, mock_http_client: AsyncMock, make_response
    ) -> None:
        mock_http_client.request.return_value = make_response(text="a,b\n1,2\n")

        text = await google.drive().request_text("GET", "files/abc/export", params={"mimeType": "text/csv"})

        assert text == "a,b\n1,2\n"

    @pytest.mark.asyncio
    async def test_should_send_multipart_upload(
        self, google: GoogleClients, mock_http_client: AsyncMock, make_response
    ) -> None:
        mock_http_client.request.return_value = make_response({"id": "new"})

        result = await google.drive_upload().upload(
            "POST", "files", metadata={"name": "notes.txt"}, content="hello", mime_type="text/plain"
        )

        assert result == {"id": "new"}
        kwargs = mock_http_client.request.call_args.kwargs
        assert kwargs["url"] == "https://www.googleapis.com/upload/drive/v3/files"
        assert kwargs["params"] == {"uploadType": "multipart"}
        assert kwargs["headers"]["Content-Type"] == (
            f"multipart/related; boundary={MULTIPART_BOUNDARY}"
        )
        body = kwargs["content"].decode("utf-8")
        assert '{"name": "notes.txt"}' in body
        assert "Content-Type: text/plain\r\n\r\nhello\r\n" in body
        assert body.endswith(f"--{MULTIPART_BOUNDARY}--")

    @pytest.mark.asyncio
    async def test_close_should_release_http_client(
        self, google: GoogleClients, mock_http_client: AsyncMock
    ) -> None:
        await google.close()

        mock_http_client.aclose.assert_awaited_once()
