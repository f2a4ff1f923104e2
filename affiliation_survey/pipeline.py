"""End-to-end affiliation survey.

Wires the stages together:

    query -> identifier sweep -> employment batch -> current-affiliation filter
          -> department classification + title categories -> summaries

The identifier sweep and the employment batch are the expensive remote
stages; their results are stored in the ResultCache under
``"{name}-identifiers"`` and ``"{name}-employments"`` and reused until the
entry is deleted or ``refresh=True`` is passed. Employments are cached
unfiltered so the organization filter can be changed without refetching, and
a cached employments entry fetched for another identifier set is reused with
a warning.

Remote stages run under the configured retry policy. The components
themselves never retry.
"""

from __future__ import annotations

import hashlib
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd

from .config.loader import get_config
from .config.schemas import SurveyConfig
from .enrichers.affiliations import (
    BatchEnricher,
    filter_current_affiliations,
    frame_to_records,
    records_to_frame,
)
from .exceptions import ConfigurationError, ValidationError
from .extractors.orcid_client import ORCIDClient
from .extractors.paginator import Paginator
from .extractors.search import SearchClient
from .models.affiliation import AffiliationRecord
from .models.classification import ReferenceVocabulary
from .models.search import Query
from .transformers.aggregation import apply_department_mapping, summarize_by
from .transformers.label_classifier import FuzzyClassifier, load_reference_vocabulary
from .transformers.title_categorization import categorize_titles
from .utils.cache import ResultCache
from .utils.logging_config import log_with_context
from .utils.retry import call_with_retry


def identifiers_digest(identifiers: Iterable[str]) -> str:
    """Order-insensitive fingerprint of an identifier set."""
    joined = "\n".join(sorted(set(identifiers)))
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()[:16]


@dataclass
class SurveyResult:
    """Everything a survey run produces."""

    identifiers: list[str]
    affiliations: pd.DataFrame
    current: pd.DataFrame
    classified: pd.DataFrame
    department_mapping: dict[str, str] = field(default_factory=dict)
    department_summary: pd.DataFrame = field(default_factory=pd.DataFrame)
    title_summary: pd.DataFrame = field(default_factory=pd.DataFrame)

    def summary(self) -> dict[str, Any]:
        return {
            "identifiers": len(self.identifiers),
            "affiliations": len(self.affiliations),
            "current": len(self.current),
            "departments": len(self.department_summary),
            "mapped_labels": len(self.department_mapping),
        }


class AffiliationSurvey:
    """Runs one named survey against the registry."""

    def __init__(
        self,
        name: str,
        config: SurveyConfig | None = None,
        client: ORCIDClient | None = None,
        cache: ResultCache | None = None,
    ):
        if not name or not name.strip():
            raise ValidationError("Survey name must not be blank", component="pipeline")

        self.name = name.strip()
        self.config = config or get_config()
        self._owns_client = client is None
        self.client = client or ORCIDClient(self.config.search_api)
        self.cache = cache or ResultCache(
            self.config.cache.cache_dir, enabled=self.config.cache.enabled
        )

        self.search_client = SearchClient(self.client)
        self.paginator = Paginator(self.search_client)
        self.enricher = BatchEnricher(self.client, max_workers=self.config.enrichment.max_workers)
        self.run_id = uuid.uuid4().hex[:8]

    @property
    def identifiers_key(self) -> str:
        return f"{self.name}-identifiers"

    @property
    def employments_key(self) -> str:
        return f"{self.name}-employments"

    def identifiers(self, query: Query | str, refresh: bool = False) -> list[str]:
        """Every identifier matching ``query``; cached."""
        with log_with_context(stage="identifiers", run_id=self.run_id) as log:
            if refresh:
                self.cache.delete(self.identifiers_key)

            def sweep() -> pd.DataFrame:
                ids = call_with_retry(self.paginator.fetch_all, self.config.retry, query)
                return pd.DataFrame({"identifier": pd.Series(ids, dtype=object)})

            df = self.cache.load_or_compute(self.identifiers_key, sweep)
            log.info(f"{len(df)} identifiers for survey '{self.name}'")
            return df["identifier"].astype(str).tolist()

    def affiliations(
        self, identifiers: Sequence[str], refresh: bool = False
    ) -> list[AffiliationRecord]:
        """Unfiltered employment records for ``identifiers``; cached.

        The cache entry remembers which identifier set it was fetched for. A
        cached entry for a different set is still returned, with a warning.
        """
        digest = identifiers_digest(identifiers)
        with log_with_context(stage="employments", run_id=self.run_id) as log:
            if refresh:
                self.cache.delete(self.employments_key)
            else:
                self._warn_if_stale(digest, log)

            def fetch() -> pd.DataFrame:
                records = call_with_retry(self.enricher.enrich, self.config.retry, identifiers)
                return records_to_frame(records)

            df = self.cache.load_or_compute(
                self.employments_key,
                fetch,
                identifier_count=len(set(identifiers)),
                identifiers_digest=digest,
            )
            log.info(f"{len(df)} employment records for survey '{self.name}'")
            return frame_to_records(df)

    def _warn_if_stale(self, digest: str, log: Any) -> None:
        metadata = self.cache.metadata(self.employments_key)
        if metadata is None or metadata.get("identifiers_digest") == digest:
            return
        log.warning(
            f"Cached employments for survey '{self.name}' were fetched for a different "
            f"identifier set ({metadata.get('identifier_count', '?')} identifiers); "
            "refresh to refetch"
        )

    def cached_affiliations(self) -> list[AffiliationRecord]:
        """Employment records from an earlier run.

        Raises:
            ValidationError: Nothing has been cached for this survey yet
        """
        df = self.cache.load(self.employments_key)
        if df is None:
            raise ValidationError(
                f"No cached employments for survey '{self.name}'; run 'enrich' first",
                component="pipeline",
                operation="cached_affiliations",
            )
        return frame_to_records(df)

    def cached_identifiers(self) -> list[str]:
        """Identifiers from an earlier sweep.

        Raises:
            ValidationError: Nothing has been cached for this survey yet
        """
        df = self.cache.load(self.identifiers_key)
        if df is None:
            raise ValidationError(
                f"No cached identifiers for survey '{self.name}'; run 'ids' first",
                component="pipeline",
                operation="cached_identifiers",
            )
        return df["identifier"].astype(str).tolist()

    def organization_variants(self, variants: Iterable[str] | None = None) -> list[str]:
        resolved = [v for v in (variants or self.config.enrichment.organization_variants) if v]
        if not resolved:
            raise ValidationError(
                "At least one organization name variant is required",
                component="pipeline",
                operation="current_affiliations",
            )
        return resolved

    def current_affiliations(
        self, records: Iterable[AffiliationRecord], org_variants: Iterable[str] | None = None
    ) -> list[AffiliationRecord]:
        """Records at the target organization with no end date."""
        current = filter_current_affiliations(records, self.organization_variants(org_variants))
        with log_with_context(stage="filter", run_id=self.run_id) as log:
            log.info(f"{len(current)} current affiliations")
        return current

    def vocabulary(
        self, vocabulary: ReferenceVocabulary | Iterable[str] | str | Path | None = None
    ) -> ReferenceVocabulary:
        """Resolve a vocabulary from labels, a file path or configuration."""
        if isinstance(vocabulary, ReferenceVocabulary):
            return vocabulary
        if isinstance(vocabulary, (str, Path)):
            return load_reference_vocabulary(
                vocabulary, column=self.config.classification.vocabulary_column
            )
        if vocabulary is not None:
            return ReferenceVocabulary.from_labels(vocabulary)

        path = self.config.classification.vocabulary_path
        if not path:
            raise ConfigurationError(
                "No reference vocabulary given and classification.vocabulary_path is unset",
                config_key="classification.vocabulary_path",
            )
        return load_reference_vocabulary(path, column=self.config.classification.vocabulary_column)

    def classify(
        self,
        records: pd.DataFrame | Iterable[AffiliationRecord],
        vocabulary: ReferenceVocabulary | Iterable[str] | str | Path | None = None,
    ) -> tuple[pd.DataFrame, dict[str, str]]:
        """Add ``department_canonical`` and ``title_category`` columns."""
        df = records if isinstance(records, pd.DataFrame) else records_to_frame(records)
        with log_with_context(stage="classify", run_id=self.run_id) as log:
            classifier = FuzzyClassifier(self.vocabulary(vocabulary))
            mapping = classifier.classify(df["department_name"].tolist())
            classified = apply_department_mapping(
                df, mapping, keep_unmatched=self.config.classification.keep_unmatched
            )
            classified["title_category"] = categorize_titles(classified["role_title"])
            log.info(f"Mapped {len(mapping)} distinct department labels")
        return classified, mapping

    def run(
        self,
        query: Query | str,
        org_variants: Iterable[str] | None = None,
        vocabulary: ReferenceVocabulary | Iterable[str] | str | Path | None = None,
        refresh: bool = False,
    ) -> SurveyResult:
        """Run every stage and return the frames and summaries."""
        variants = self.organization_variants(org_variants)
        vocab = self.vocabulary(vocabulary)

        identifiers = self.identifiers(query, refresh=refresh)
        records = self.affiliations(identifiers, refresh=refresh)
        current = self.current_affiliations(records, variants)
        classified, mapping = self.classify(current, vocab)

        result = SurveyResult(
            identifiers=identifiers,
            affiliations=records_to_frame(records),
            current=records_to_frame(current),
            classified=classified,
            department_mapping=mapping,
            department_summary=summarize_by(classified, "department_canonical"),
            title_summary=summarize_by(classified, "title_category"),
        )
        with log_with_context(stage="summary", run_id=self.run_id) as log:
            log.info(f"Survey '{self.name}' complete: {result.summary()}")
        return result

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> AffiliationSurvey:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
