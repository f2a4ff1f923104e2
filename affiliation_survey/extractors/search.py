"""Record search against the registry's query endpoint.

``SearchClient.search`` returns one page of matching identifiers together
with the total match count. Responses are normalized here and nowhere else:
callers only ever see ``SearchPage`` / ``SearchResult``.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from ..exceptions import ErrorCode, RemoteError, ValidationError
from ..models.search import Query, SearchPage, SearchResult
from ..utils.tree import WILDCARD, first_path, iter_path
from .orcid_client import API_NAME, ORCIDClient


MAX_PAGE_SIZE = 1000


class SearchClient:
    """Paged access to the search endpoint. Stateless beyond its transport."""

    def __init__(self, client: ORCIDClient):
        self.client = client
        self.config = client.config
        self.max_page_size = min(self.config.max_page_size, MAX_PAGE_SIZE)

    def search(self, query: Query | str, offset: int = 0, limit: int = MAX_PAGE_SIZE) -> SearchPage:
        """Fetch one page.

        Args:
            query: Query in the registry's Solr grammar
            offset: Zero-based index of the first row
            limit: Rows to return, 1..1000

        Returns:
            SearchPage, unpackable as ``rows, found = client.search(...)``

        Raises:
            ValidationError: offset < 0 or limit outside 1..1000
            RemoteError: Transport failure or malformed envelope
        """
        if offset < 0:
            raise ValidationError(
                f"offset must be >= 0, got {offset}",
                component="extractor.search",
                operation="search",
                details={"offset": offset},
            )
        if limit < 1 or limit > self.max_page_size:
            raise ValidationError(
                f"limit must be between 1 and {self.max_page_size}, got {limit}",
                component="extractor.search",
                operation="search",
                details={"limit": limit},
            )

        q = query if isinstance(query, Query) else Query(text=query)
        payload = self.client.get_json(
            self.config.search_endpoint,
            params={"q": q.text, "start": offset, "rows": limit},
        )
        page = self._normalize(payload, offset, limit)
        logger.debug(
            f"Search page offset={offset} limit={limit}: {len(page.rows)} rows of {page.found}"
        )
        return page

    def count(self, query: Query | str) -> int:
        """Total number of records matching ``query``."""
        return self.search(query, offset=0, limit=1).found

    def _malformed(self, message: str, cause: Exception | None = None) -> RemoteError:
        return RemoteError(
            message,
            api_name=API_NAME,
            endpoint=self.config.search_endpoint,
            operation="search",
            status_code=ErrorCode.REMOTE_MALFORMED_RESPONSE,
            retryable=False,
            cause=cause,
        )

    def _normalize(self, payload: Any, offset: int, limit: int) -> SearchPage:
        count_key, results_key = self.config.count_key, self.config.results_key
        if not isinstance(payload, dict) or count_key not in payload:
            raise self._malformed(f"Search response is missing '{count_key}'")
        try:
            found = int(payload[count_key])
        except (TypeError, ValueError) as e:
            raise self._malformed(f"Search response has a non-numeric '{count_key}'", e) from e
        if found < 0:
            raise self._malformed(f"Search response has a negative '{count_key}': {found}")

        hits = payload.get(results_key)
        if hits is not None and not isinstance(hits, (list, dict)):
            raise self._malformed(
                f"Search response '{results_key}' is a {type(hits).__name__}, not a list"
            )

        rows = []
        # A lone hit may arrive as a bare object instead of a one-item list
        for hit in iter_path(payload, [results_key, WILDCARD]):
            identifier = first_path(hit, self.config.identifier_paths)
            if isinstance(identifier, str) and identifier.strip():
                rows.append(SearchResult(identifier=identifier.strip(), total_found=found))
        return SearchPage(rows=rows, found=found, offset=offset, limit=limit)
