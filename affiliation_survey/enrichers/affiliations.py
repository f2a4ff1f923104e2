"""Employment enrichment for swept identifiers.

Given a list of record identifiers, fetch each record's employment summary,
flatten the nested tree into ``AffiliationRecord`` rows and filter them down
to current affiliations at a target organization.

Flattening is total: any missing level in the tree means "no affiliations"
or a null field, never an error. Filtering is a separate step so the raw
records can be cached and re-filtered with different organization variants.

"Current" is a heuristic: an affiliation with no end date at all is taken to
be ongoing. Profiles that were never updated after someone left therefore
still count as current.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

import pandas as pd
from loguru import logger

from ..extractors.orcid_client import ORCIDClient
from ..models.affiliation import AFFILIATION_COLUMNS, AffiliationRecord, EndDate
from ..utils.text_normalization import normalize_org_name
from ..utils.tree import get_path, iter_path


SUMMARY_PATHS: list[list[str]] = [
    ["affiliation-group", "*", "summaries", "*", "employment-summary"],
    # v2.x envelopes list summaries directly
    ["employment-summary", "*"],
]


class BatchEnricher:
    """Fetches and flattens employment histories, one logical batch per call."""

    def __init__(self, client: ORCIDClient, max_workers: int = 1):
        self.client = client
        self.max_workers = max_workers

    def enrich(self, identifiers: Sequence[str]) -> list[AffiliationRecord]:
        """Flattened employment records for every identifier.

        Raises:
            RemoteError: Any identifier failed; no partial result is returned
        """
        if not identifiers:
            return []

        trees = self.client.fetch_employments(identifiers, max_workers=self.max_workers)
        records: list[AffiliationRecord] = []
        for identifier, tree in trees.items():
            records.extend(flatten_employments(identifier, tree))

        logger.info(f"Flattened {len(records)} employment records from {len(trees)} profiles")
        return records


def _text(summary: Any, key: str) -> str | None:
    value = get_path(summary, [key])
    return value if isinstance(value, str) and value.strip() else None


def _date_part(summary: Any, part: str) -> str | None:
    value = get_path(summary, ["end-date", part, "value"])
    return str(value) if value is not None else None


def flatten_employments(identifier: str, tree: Any) -> list[AffiliationRecord]:
    """Flatten one record's employment tree.

    Summaries without an organization name are skipped.
    """
    records = []
    for path in SUMMARY_PATHS:
        for summary in iter_path(tree, path):
            org_name = get_path(summary, ["organization", "name"])
            if not isinstance(org_name, str) or not org_name.strip():
                continue

            end_date = EndDate(
                year=_date_part(summary, "year"),
                month=_date_part(summary, "month"),
                day=_date_part(summary, "day"),
            )
            records.append(
                AffiliationRecord(
                    identifier=identifier,
                    organization_name=org_name,
                    department_name=_text(summary, "department-name"),
                    role_title=_text(summary, "role-title"),
                    end_date=None if end_date.is_empty else end_date,
                )
            )
        if records:
            break
    return records


def filter_by_organization(
    records: Iterable[AffiliationRecord], name_variants: Iterable[str]
) -> list[AffiliationRecord]:
    """Records whose organization name exactly equals one of ``name_variants``."""
    variants = {normalize_org_name(v) for v in name_variants if normalize_org_name(v)}
    return [r for r in records if normalize_org_name(r.organization_name) in variants]


def filter_current(records: Iterable[AffiliationRecord]) -> list[AffiliationRecord]:
    """Records with no end date at all."""
    return [r for r in records if not r.has_end_date]


def filter_current_affiliations(
    records: Iterable[AffiliationRecord], name_variants: Iterable[str]
) -> list[AffiliationRecord]:
    """Current affiliations at the target organization."""
    return filter_current(filter_by_organization(records, name_variants))


def records_to_frame(records: Iterable[AffiliationRecord]) -> pd.DataFrame:
    """DataFrame with one row per record and ``AFFILIATION_COLUMNS`` columns."""
    return pd.DataFrame([r.to_row() for r in records], columns=AFFILIATION_COLUMNS)


def _cell(value: Any) -> str | None:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    return str(value)


def frame_to_records(df: pd.DataFrame) -> list[AffiliationRecord]:
    """Inverse of :func:`records_to_frame`."""
    records = []
    for row in df.to_dict(orient="records"):
        end_date = EndDate(
            year=_cell(row.get("end_year")),
            month=_cell(row.get("end_month")),
            day=_cell(row.get("end_day")),
        )
        records.append(
            AffiliationRecord(
                identifier=str(row["identifier"]),
                organization_name=str(row["organization_name"]),
                department_name=_cell(row.get("department_name")),
                role_title=_cell(row.get("role_title")),
                end_date=None if end_date.is_empty else end_date,
            )
        )
    return records
