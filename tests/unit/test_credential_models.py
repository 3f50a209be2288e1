"""Unit tests for the credential record model and expiry helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from google_mcp_server.auth.models import (
    CredentialRecord,
    TokenStatus,
    expiry_to_millis,
    millis_to_expiry,
)


@pytest.mark.unit
class TestCredentialRecord:
    """Tests for CredentialRecord model."""

    def test_should_default_token_type(self) -> None:
        """Verify token_type defaults to Bearer when absent."""
        record = CredentialRecord(access_token="abc")
        assert record.token_type == "Bearer"
        assert record.refresh_token is None

    def test_should_detect_non_expired_record(self, future_expiry_ms: int) -> None:
        record = CredentialRecord(access_token="abc", expiry_date=future_expiry_ms)
        assert record.is_expired() is False

    def test_should_detect_expired_record(self, past_expiry_ms: int) -> None:
        record = CredentialRecord(access_token="abc", expiry_date=past_expiry_ms)
        assert record.is_expired() is True

    def test_should_treat_missing_expiry_as_expired(self) -> None:
        """Verify a record without expiry forces a refresh."""
        assert CredentialRecord(access_token="abc").is_expired() is True

    def test_should_respect_buffer_seconds(self) -> None:
        """Verify is_expired respects buffer_seconds parameter."""
        # Token expires in 30 seconds
        expiry = datetime.now(timezone.utc) + timedelta(seconds=30)
        record = CredentialRecord(access_token="abc", expiry_date=expiry_to_millis(expiry))

        assert record.is_expired(buffer_seconds=60) is True
        assert record.is_expired(buffer_seconds=10) is False

    def test_should_expose_expiry_as_aware_datetime(self) -> None:
        record = CredentialRecord(expiry_date=1767225600000)
        assert record.expires_at == datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.mark.unit
class TestExpiryConversion:
    """Tests for epoch-millisecond conversion helpers."""

    def test_should_convert_naive_utc_to_millis(self) -> None:
        """Verify google-auth's naive UTC expiry is read as UTC."""
        assert expiry_to_millis(datetime(2026, 1, 1)) == 1767225600000

    def test_should_convert_aware_datetime_to_millis(self) -> None:
        assert expiry_to_millis(datetime(2026, 1, 1, tzinfo=timezone.utc)) == 1767225600000

    def test_should_convert_millis_to_naive_utc(self) -> None:
        expiry = millis_to_expiry(1767225600000)
        assert expiry == datetime(2026, 1, 1)
        assert expiry.tzinfo is None

    def test_should_pass_through_none(self) -> None:
        assert expiry_to_millis(None) is None
        assert millis_to_expiry(None) is None


@pytest.mark.unit
class TestTokenStatus:
    """Tests for TokenStatus enum."""

    def test_should_have_all_status_values(self) -> None:
        assert TokenStatus.VALID.value == "valid"
        assert TokenStatus.EXPIRED.value == "expired"
        assert TokenStatus.MISSING.value == "missing"
        assert TokenStatus.INVALID.value == "invalid"
