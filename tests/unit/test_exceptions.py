"""Unit tests for the exception hierarchy.

Tests cover:
- Base exception fields and serialization
- Retryability rules of RemoteError and its subclasses
- is_retryable
"""

import pytest

from affiliation_survey.exceptions import (
    AuthError,
    ConfigurationError,
    ErrorCode,
    FileSystemError,
    RateLimitError,
    RemoteError,
    SurveyError,
    ValidationError,
    is_retryable,
)


pytestmark = pytest.mark.fast


class TestBaseException:
    """Tests for SurveyError base class."""

    def test_minimal(self):
        exc = SurveyError("Test error")

        assert exc.message == "Test error"
        assert exc.component is not None
        assert exc.operation is None
        assert exc.details == {}
        assert exc.retryable is False
        assert exc.status_code is None
        assert exc.cause is None

    def test_str_includes_context(self):
        exc = SurveyError(
            "Boom",
            component="extractor.search",
            operation="search",
            status_code=ErrorCode.VALIDATION_FAILED,
        )

        text = str(exc)
        assert "Boom" in text
        assert "[component=extractor.search]" in text
        assert "[operation=search]" in text

    def test_to_dict(self):
        cause = ValueError("original")
        exc = SurveyError(
            "Test error",
            component="c",
            operation="o",
            details={"k": 1},
            retryable=True,
            status_code=ErrorCode.REMOTE_REQUEST_FAILED,
            cause=cause,
        )

        data = exc.to_dict()
        assert data["error_type"] == "SurveyError"
        assert data["details"] == {"k": 1}
        assert data["retryable"] is True
        assert data["status_code"] == 3101
        assert data["cause"] == "original"


class TestRemoteErrors:
    """Tests for RemoteError and subclasses."""

    @pytest.mark.parametrize("status", [408, 429, 500, 502, 503, 504])
    def test_transient_statuses_are_retryable(self, status):
        exc = RemoteError("fail", api_name="orcid", endpoint="/search/", http_status=status)
        assert exc.retryable is True
        assert exc.http_status == status
        assert exc.details["http_status"] == status

    @pytest.mark.parametrize("status", [400, 404, 410])
    def test_client_statuses_are_not_retryable(self, status):
        exc = RemoteError("fail", api_name="orcid", http_status=status)
        assert exc.retryable is False

    def test_component_from_api_name(self):
        exc = RemoteError("fail", api_name="orcid", endpoint="/search/")
        assert exc.component == "api.orcid"
        assert exc.details["endpoint"] == "/search/"

    def test_explicit_retryable_wins(self):
        exc = RemoteError("fail", http_status=503, retryable=False)
        assert exc.retryable is False

    def test_rate_limit_always_retryable(self):
        exc = RateLimitError("slow down", retry_after=30, retryable=False)

        assert isinstance(exc, RemoteError)
        assert exc.retryable is True
        assert exc.http_status == 429
        assert exc.status_code == ErrorCode.REMOTE_RATE_LIMIT
        assert exc.details["retry_after_seconds"] == 30

    def test_auth_error_never_retryable(self):
        exc = AuthError("bad token", api_name="orcid", http_status=401, retryable=True)

        assert isinstance(exc, RemoteError)
        assert exc.retryable is False
        assert exc.status_code == ErrorCode.REMOTE_AUTHENTICATION_FAILED


class TestOtherErrors:
    def test_validation_error_never_retryable(self):
        exc = ValidationError("limit out of range", retryable=True, details={"limit": 0})
        assert exc.retryable is False
        assert exc.status_code == ErrorCode.VALIDATION_FAILED

    def test_configuration_error_records_key(self):
        exc = ConfigurationError("bad", config_key="search_api.page_size")
        assert exc.component == "config"
        assert exc.details["config_key"] == "search_api.page_size"
        assert exc.retryable is False

    def test_file_system_error_records_path(self):
        exc = FileSystemError("cannot write", file_path="/tmp/x.parquet")
        assert exc.details["file_path"] == "/tmp/x.parquet"
        assert exc.status_code == ErrorCode.FILE_READ_FAILED


class TestHelpers:
    def test_is_retryable(self):
        assert is_retryable(RemoteError("x", http_status=503)) is True
        assert is_retryable(AuthError("x")) is False
        assert is_retryable(ValueError("x")) is False
