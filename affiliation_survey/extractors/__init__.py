"""Remote extraction: registry transport, search and identifier sweeps."""

from .orcid_client import ORCIDClient, RateLimiter
from .paginator import ABSOLUTE_CAP, Paginator
from .search import MAX_PAGE_SIZE, SearchClient


__all__ = [
    "ABSOLUTE_CAP",
    "MAX_PAGE_SIZE",
    "ORCIDClient",
    "Paginator",
    "RateLimiter",
    "SearchClient",
]
