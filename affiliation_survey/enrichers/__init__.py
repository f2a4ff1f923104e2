"""Employment enrichment and affiliation filters."""

from .affiliations import (
    BatchEnricher,
    filter_by_organization,
    filter_current,
    filter_current_affiliations,
    flatten_employments,
    frame_to_records,
    records_to_frame,
)


__all__ = [
    "BatchEnricher",
    "filter_by_organization",
    "filter_current",
    "filter_current_affiliations",
    "flatten_employments",
    "frame_to_records",
    "records_to_frame",
]
