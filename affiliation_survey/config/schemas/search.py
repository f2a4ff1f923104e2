"""Schemas for the remote search service, enrichment and classification."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator


DEFAULT_IDENTIFIER_PATHS: list[list[str]] = [
    ["orcid-identifier", "path"],
    ["orcid-id"],
    ["path"],
]


class SearchApiConfig(BaseModel):
    """Connection and paging settings for the record-search service."""

    base_url: str = Field(
        default="https://pub.orcid.org/v3.0", description="Base URL of the registry API"
    )
    search_endpoint: str = Field(default="/search/", description="Query endpoint path")
    employments_endpoint: str = Field(
        default="/{identifier}/employments",
        description="Per-record employment summary path; {identifier} is substituted",
    )
    token_env_var: str = Field(
        default="ORCID_ACCESS_TOKEN",  # pragma: allowlist secret
        description="Environment variable holding the bearer token",
    )
    timeout_seconds: float = Field(default=60.0, gt=0, description="Per-request timeout")
    rate_limit_per_minute: int = Field(
        default=1440, ge=1, description="Client-side request ceiling per minute"
    )
    page_size: int = Field(default=200, ge=1, description="Rows requested per page")
    max_page_size: int = Field(default=1000, ge=1, description="Service per-page cap")
    absolute_cap: int = Field(default=10000, ge=1, description="Service per-query row cap")
    max_workers: int = Field(default=1, ge=1, le=16, description="Concurrent page requests")
    count_key: str = Field(default="num-found", description="Envelope key for the match count")
    results_key: str = Field(default="result", description="Envelope key for the hit list")
    identifier_paths: list[list[str]] = Field(
        default_factory=lambda: [list(p) for p in DEFAULT_IDENTIFIER_PATHS],
        description="Candidate paths to the identifier inside each hit, tried in order",
    )

    @model_validator(mode="after")
    def _page_size_within_cap(self) -> SearchApiConfig:
        if self.page_size > self.max_page_size:
            raise ValueError(
                f"page_size ({self.page_size}) exceeds max_page_size ({self.max_page_size})"
            )
        return self


class EnrichmentConfig(BaseModel):
    """Configuration for the bulk employment fetch and its filters."""

    max_workers: int = Field(
        default=1, ge=1, le=16, description="Concurrent per-identifier employment requests"
    )
    organization_variants: list[str] = Field(
        default_factory=list,
        description="Exact organization-name spellings that count as the target institution",
    )


class ClassificationConfig(BaseModel):
    """Configuration for department and title classification."""

    vocabulary_path: str | None = Field(
        default=None, description="Delimited file with the reference department vocabulary"
    )
    vocabulary_column: str | None = Field(
        default=None, description="Column holding canonical labels (first column if unset)"
    )
    keep_unmatched: bool = Field(
        default=True, description="Keep raw labels the classifier skipped (acronyms, blanks)"
    )


class CacheConfig(BaseModel):
    """Configuration for the persisted result cache."""

    enabled: bool = Field(default=True, description="Enable the result cache")
    cache_dir: str = Field(default="data/cache", description="Cache directory path")


class RetryConfig(BaseModel):
    """Caller-side retry policy for retryable remote errors."""

    attempts: int = Field(default=0, ge=0, description="Extra attempts after the first failure")
    backoff_seconds: float = Field(default=2.0, ge=0.0, description="Initial backoff delay")
    backoff_multiplier: float = Field(default=2.0, ge=1.0, description="Exponential multiplier")
    max_backoff_seconds: float = Field(default=60.0, ge=0.0, description="Backoff ceiling")

    @field_validator("max_backoff_seconds")
    @classmethod
    def _ceiling_not_below_initial(cls, value: float, info) -> float:
        initial = info.data.get("backoff_seconds", 0.0)
        if value < initial:
            raise ValueError("max_backoff_seconds must be >= backoff_seconds")
        return value


__all__ = [
    "CacheConfig",
    "ClassificationConfig",
    "DEFAULT_IDENTIFIER_PATHS",
    "EnrichmentConfig",
    "RetryConfig",
    "SearchApiConfig",
]
