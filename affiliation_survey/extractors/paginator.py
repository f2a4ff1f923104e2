"""Full identifier sweep over the paged search endpoint.

The service caps a page at 1000 rows and a query at 10000 rows, so the full
set of matches is collected by probing the total count and then walking page
offsets up to ``min(found, absolute_cap)``. Any failing page aborts the
sweep; a partial identifier set is never returned.
"""

from __future__ import annotations

from loguru import logger

from ..exceptions import ValidationError
from ..models.search import Query
from ..utils.concurrency import map_all_or_nothing
from .search import SearchClient


ABSOLUTE_CAP = 10000


class Paginator:
    """Collects every identifier matching a query, within the service caps."""

    def __init__(
        self,
        search_client: SearchClient,
        page_size: int | None = None,
        absolute_cap: int | None = None,
        max_workers: int | None = None,
    ):
        config = search_client.config
        self.search_client = search_client
        self.page_size = page_size or config.page_size
        self.absolute_cap = min(absolute_cap or config.absolute_cap, ABSOLUTE_CAP)
        self.max_workers = max_workers or config.max_workers

        if self.page_size > search_client.max_page_size:
            raise ValidationError(
                f"page_size ({self.page_size}) exceeds the service page cap "
                f"({search_client.max_page_size})",
                component="extractor.paginator",
                operation="__init__",
                details={"page_size": self.page_size},
            )

    def page_starts(self, found: int) -> list[int]:
        """Offsets of the pages needed to cover ``found`` matches."""
        return list(range(0, min(found, self.absolute_cap), self.page_size))

    def fetch_all(self, query: Query | str) -> list[str]:
        """Every distinct identifier matching ``query``, in discovery order.

        Raises:
            RemoteError: Propagated from the first failing page
        """
        found = self.search_client.count(query)
        logger.info(f"Query matches {found} records")
        if found == 0:
            return []
        if found > self.absolute_cap:
            logger.warning(
                f"{found} matches exceed the service cap; only the first "
                f"{self.absolute_cap} can be retrieved"
            )

        starts = self.page_starts(found)
        logger.info(
            f"Sweeping {len(starts)} pages of {self.page_size} (max_workers={self.max_workers})"
        )
        pages = map_all_or_nothing(
            lambda start: self.search_client.search(query, offset=start, limit=self.page_size),
            starts,
            max_workers=self.max_workers,
        )

        identifiers: dict[str, None] = {}
        for page in pages:
            for identifier in page.identifiers:
                identifiers.setdefault(identifier, None)

        result = list(identifiers)[: self.absolute_cap]
        logger.info(f"Collected {len(result)} distinct identifiers")
        return result
