"""Central exception hierarchy for the affiliation survey.

All custom exceptions inherit from SurveyError so callers can route on a
single base class while still distinguishing recovery paths.

Exception Hierarchy:
    SurveyError (base)
    ├── ValidationError
    ├── RemoteError
    │   ├── RateLimitError
    │   └── AuthError
    ├── ConfigurationError
    └── FileSystemError

Usage:
    from affiliation_survey.exceptions import AuthError, RemoteError

    try:
        identifiers = paginator.fetch_all(query)
    except AuthError:
        raise  # credentials are provisioned out of band, never retry
    except RemoteError as e:
        logger.error(f"Search failed: {e.message}", extra=e.to_dict())
        if e.retryable:
            retry_operation()
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Error codes for programmatic handling.

    Categories:
        1xxx - Configuration errors
        2xxx - Caller input errors
        3xxx - Remote service errors
        4xxx - File I/O errors
    """

    # Configuration errors (1xxx)
    CONFIG_LOAD_FAILED = 1001
    CONFIG_VALIDATION_FAILED = 1002

    # Caller input errors (2xxx)
    VALIDATION_FAILED = 2001

    # Remote service errors (3xxx)
    REMOTE_REQUEST_FAILED = 3101
    REMOTE_RATE_LIMIT = 3102
    REMOTE_AUTHENTICATION_FAILED = 3103
    REMOTE_MALFORMED_RESPONSE = 3104

    # File I/O errors (4xxx)
    FILE_READ_FAILED = 4002
    FILE_WRITE_FAILED = 4003


class SurveyError(Exception):
    """Base exception for all affiliation survey errors.

    Attributes:
        message: Human-readable error description
        component: Component that raised the error (e.g., "extractor.search")
        operation: Operation being performed (e.g., "fetch_all")
        details: Additional context as dictionary
        retryable: Whether the caller may retry the operation
        status_code: Numeric error code from ErrorCode enum
        cause: Original exception if wrapping another error
    """

    def __init__(
        self,
        message: str,
        component: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
        status_code: ErrorCode | None = None,
        cause: Exception | None = None,
    ):
        self.message = message
        self.component = component or self.__class__.__module__
        self.operation = operation
        self.details = details or {}
        self.retryable = retryable
        self.status_code = status_code
        self.cause = cause

        parts = [message]
        if component:
            parts.append(f"[component={component}]")
        if operation:
            parts.append(f"[operation={operation}]")
        if status_code:
            parts.append(f"[code={status_code}]")

        super().__init__(" ".join(parts))

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization.

        Example:
            {
                "error_type": "RemoteError",
                "message": "HTTP 503: Service Unavailable",
                "component": "api.orcid",
                "operation": "get_json",
                "details": {"endpoint": "/search/", "http_status": 503},
                "retryable": true,
                "status_code": 3101,
                "cause": "HTTPStatusError: ..."
            }
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "component": self.component,
            "operation": self.operation,
            "details": self.details,
            "retryable": self.retryable,
            "status_code": self.status_code.value if self.status_code else None,
            "cause": str(self.cause) if self.cause else None,
        }


class ValidationError(SurveyError):
    """Caller passed an out-of-contract argument.

    Never retryable: the same arguments fail the same way.

    Example:
        raise ValidationError(
            "limit must be between 1 and 1000",
            component="extractor.search",
            operation="search",
            details={"limit": 0},
        )
    """

    def __init__(self, message: str, **kwargs: Any):
        kwargs.pop("retryable", None)
        super().__init__(
            message,
            status_code=kwargs.pop("status_code", ErrorCode.VALIDATION_FAILED),
            retryable=False,
            **kwargs,
        )


class RemoteError(SurveyError):
    """Remote service call failed.

    Covers transport failures, timeouts, non-2xx responses and malformed
    envelopes. The survey core never retries on its own; ``retryable`` tells
    the caller's retry policy whether another attempt can succeed.

    Automatically marks 408, 429 and 5xx responses as retryable.

    Example:
        raise RemoteError(
            "ORCID search request failed",
            api_name="orcid",
            endpoint="/search/",
            http_status=503,
        )
    """

    def __init__(
        self,
        message: str,
        api_name: str | None = None,
        endpoint: str | None = None,
        http_status: int | None = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if endpoint:
            details["endpoint"] = endpoint
        if http_status:
            details["http_status"] = http_status
        self.http_status = http_status

        # 408 Timeout, 429 Rate Limit, 5xx Server Errors are retryable
        if "retryable" not in kwargs and http_status:
            kwargs["retryable"] = http_status in [408, 429, 500, 502, 503, 504]

        component = kwargs.pop("component", f"api.{api_name}" if api_name else "api")

        super().__init__(
            message,
            component=component,
            details=details,
            status_code=kwargs.pop("status_code", ErrorCode.REMOTE_REQUEST_FAILED),
            **kwargs,
        )


class RateLimitError(RemoteError):
    """Remote rate limit exceeded. Always retryable."""

    def __init__(self, message: str, retry_after: int | None = None, **kwargs: Any):
        details = kwargs.pop("details", {})
        if retry_after:
            details["retry_after_seconds"] = retry_after
        kwargs.pop("retryable", None)
        kwargs.setdefault("http_status", 429)

        super().__init__(
            message,
            details=details,
            status_code=ErrorCode.REMOTE_RATE_LIMIT,
            retryable=True,
            **kwargs,
        )


class AuthError(RemoteError):
    """Credentials were rejected by the remote service.

    The bearer token is provisioned out of band and never refreshed here,
    so this error is fatal and never retryable.

    Example:
        raise AuthError(
            "Access token is invalid or expired",
            api_name="orcid",
            endpoint="/search/",
            http_status=401,
        )
    """

    def __init__(self, message: str, **kwargs: Any):
        kwargs.pop("retryable", None)
        super().__init__(
            message,
            status_code=ErrorCode.REMOTE_AUTHENTICATION_FAILED,
            retryable=False,
            **kwargs,
        )


class ConfigurationError(SurveyError):
    """Configuration loading or validation failed.

    Not retryable as configuration issues must be fixed manually.

    Example:
        raise ConfigurationError(
            "Base configuration file not found",
            config_key="search_api.base_url",
            details={"config_file": "config/base.yaml"},
        )
    """

    def __init__(self, message: str, config_key: str | None = None, **kwargs: Any):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key

        component = kwargs.pop("component", "config")
        kwargs.pop("retryable", None)

        super().__init__(
            message,
            component=component,
            details=details,
            status_code=kwargs.pop("status_code", ErrorCode.CONFIG_VALIDATION_FAILED),
            retryable=False,
            **kwargs,
        )


class FileSystemError(SurveyError):
    """File I/O operation failed (cache entries, vocabulary files).

    Example:
        raise FileSystemError(
            "Failed to write cache entry",
            file_path="data/cache/chemistry-identifiers.parquet",
            operation="store",
            cause=original_exception,
        )
    """

    def __init__(self, message: str, file_path: str | None = None, **kwargs: Any):
        details = kwargs.pop("details", {})
        if file_path:
            details["file_path"] = file_path

        component = kwargs.pop("component", "filesystem")

        super().__init__(
            message,
            component=component,
            details=details,
            status_code=kwargs.pop("status_code", ErrorCode.FILE_READ_FAILED),
            **kwargs,
        )


def is_retryable(exc: Exception) -> bool:
    """Check if an exception is retryable."""
    if isinstance(exc, SurveyError):
        return exc.retryable
    return False
