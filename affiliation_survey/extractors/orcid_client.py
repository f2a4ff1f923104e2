"""ORCID registry transport.

Thin synchronous wrapper around ``httpx.Client`` shared by the search and
enrichment layers. It owns the bearer token, the client-side rate limit and
the mapping from HTTP failures to the survey's exception hierarchy. It never
retries: a failed request surfaces immediately as ``AuthError``,
``RateLimitError`` or ``RemoteError`` and the caller decides what to do.

Key Classes:
    - RateLimiter: Sliding one-minute request window, thread-safe
    - ORCIDClient: ``get_json`` plus the employment endpoints
"""

from __future__ import annotations

import os
import threading
import time
from collections import deque
from collections.abc import Callable, Sequence
from typing import Any

import httpx
from loguru import logger

from ..config.loader import get_config
from ..config.schemas import SearchApiConfig
from ..exceptions import AuthError, ErrorCode, RateLimitError, RemoteError
from ..utils.concurrency import map_all_or_nothing


API_NAME = "orcid"
ORCID_JSON = "application/vnd.orcid+json"

_TOKEN_ERROR_MARKERS = ("invalid_token", "invalid access token", "expired")


class RateLimiter:
    """Sliding one-minute window over request start times.

    Waiters sleep with the lock released and re-check the window on waking,
    so concurrent callers never record more than ``rate_limit_per_minute``
    starts in any 60 second span.
    """

    WINDOW_SECONDS = 60.0

    def __init__(
        self,
        rate_limit_per_minute: int = 1440,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.rate_limit_per_minute = rate_limit_per_minute
        self.request_times: deque[float] = deque()
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()

    def _evict(self, now: float) -> None:
        while self.request_times and now - self.request_times[0] >= self.WINDOW_SECONDS:
            self.request_times.popleft()

    def wait_if_needed(self) -> None:
        """Block until one more request fits in the window, then record it."""
        with self._lock:
            while True:
                now = self._clock()
                self._evict(now)
                if len(self.request_times) < self.rate_limit_per_minute:
                    break

                wait_seconds = self.WINDOW_SECONDS - (now - self.request_times[0])
                logger.debug(
                    f"Rate limit reached ({self.rate_limit_per_minute}/min), "
                    f"waiting {wait_seconds:.1f} seconds"
                )
                self._lock.release()
                try:
                    self._sleep(wait_seconds)
                finally:
                    self._lock.acquire()

            self.request_times.append(self._clock())


class ORCIDClient:
    """Client for the ORCID public registry API."""

    def __init__(
        self,
        config: SearchApiConfig | dict[str, Any] | None = None,
        access_token: str | None = None,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the client.

        Args:
            config: Search API settings. If None, loads ``get_config().search_api``
            access_token: Bearer token. If None, read from ``config.token_env_var``
            http_client: Pre-built client (tests inject one with a MockTransport)
        """
        if config is None:
            config = get_config().search_api
        elif isinstance(config, dict):
            config = SearchApiConfig.model_validate(config)
        self.config: SearchApiConfig = config

        self.base_url = self.config.base_url.rstrip("/")
        self.access_token = access_token or os.getenv(self.config.token_env_var)
        if not self.access_token:
            logger.warning(
                f"No ORCID access token found in {self.config.token_env_var}; "
                "requests will be anonymous"
            )

        self.rate_limiter = RateLimiter(rate_limit_per_minute=self.config.rate_limit_per_minute)

        headers = {"Accept": ORCID_JSON}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        self._owns_client = http_client is None
        self.client = http_client or httpx.Client(timeout=self.config.timeout_seconds)
        self.client.headers.update(headers)

        logger.debug(
            f"ORCID client initialized: base_url={self.base_url}, "
            f"rate_limit={self.config.rate_limit_per_minute}/min"
        )

    def get_json(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """Issue one GET and return the decoded JSON body.

        Raises:
            AuthError: 401/403, or a body reporting an invalid/expired token
            RateLimitError: 429
            RemoteError: Any other transport failure, non-2xx status or non-JSON body
        """
        url = f"{self.base_url}{endpoint}"
        self.rate_limiter.wait_if_needed()

        try:
            response = self.client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise RemoteError(
                f"ORCID request timed out after {self.config.timeout_seconds}s",
                api_name=API_NAME,
                endpoint=endpoint,
                http_status=408,
                operation="get_json",
                cause=e,
            ) from e
        except httpx.RequestError as e:
            raise RemoteError(
                f"ORCID request failed: {e}",
                api_name=API_NAME,
                endpoint=endpoint,
                operation="get_json",
                retryable=True,
                cause=e,
            ) from e

        status = response.status_code
        if status in (401, 403):
            raise AuthError(
                f"ORCID rejected credentials (HTTP {status})",
                api_name=API_NAME,
                endpoint=endpoint,
                http_status=status,
                operation="get_json",
            )
        if status == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                "ORCID rate limit exceeded",
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                api_name=API_NAME,
                endpoint=endpoint,
                operation="get_json",
            )
        if not response.is_success:
            raise RemoteError(
                f"ORCID request failed: HTTP {status}",
                api_name=API_NAME,
                endpoint=endpoint,
                http_status=status,
                operation="get_json",
                details={"body": response.text[:500]},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteError(
                "ORCID returned a non-JSON body",
                api_name=API_NAME,
                endpoint=endpoint,
                http_status=status,
                operation="get_json",
                status_code=ErrorCode.REMOTE_MALFORMED_RESPONSE,
                retryable=False,
                cause=e,
            ) from e

        if _is_token_error(payload):
            raise AuthError(
                f"ORCID rejected the access token: {payload.get('error-desc') or payload.get('error')}",
                api_name=API_NAME,
                endpoint=endpoint,
                http_status=status,
                operation="get_json",
            )
        return payload

    def get_employments(self, identifier: str) -> Any:
        """Raw employment summary tree for one record."""
        endpoint = self.config.employments_endpoint.format(identifier=identifier)
        return self.get_json(endpoint)

    def fetch_employments(
        self, identifiers: Sequence[str], max_workers: int = 1
    ) -> dict[str, Any]:
        """Employment trees for a batch of records, keyed by identifier.

        All-or-nothing: the first failing identifier aborts the batch and its
        error propagates.
        """
        unique = list(dict.fromkeys(identifiers))
        if not unique:
            return {}
        logger.info(
            f"Fetching employments for {len(unique)} records (max_workers={max_workers})"
        )
        trees = map_all_or_nothing(self.get_employments, unique, max_workers=max_workers)
        return dict(zip(unique, trees))

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> ORCIDClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def _is_token_error(payload: Any) -> bool:
    if not isinstance(payload, dict):
        return False
    error = payload.get("error")
    if error is None:
        return False
    text = f"{error} {payload.get('error-desc') or payload.get('error_description') or ''}".lower()
    return any(marker in text for marker in _TOKEN_ERROR_MARKERS)
