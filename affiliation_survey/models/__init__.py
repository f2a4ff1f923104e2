"""Data models for the affiliation survey."""

from .affiliation import AFFILIATION_COLUMNS, AffiliationRecord, EndDate
from .classification import ClassifiedLabel, ReferenceVocabulary, TitleCategory
from .search import Query, SearchPage, SearchResult, build_query


__all__ = [
    "AFFILIATION_COLUMNS",
    "AffiliationRecord",
    "ClassifiedLabel",
    "EndDate",
    "Query",
    "ReferenceVocabulary",
    "SearchPage",
    "SearchResult",
    "TitleCategory",
    "build_query",
]
