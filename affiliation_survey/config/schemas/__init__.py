"""Modular configuration schemas for the affiliation survey."""

from .pipeline import PipelineMetadata, SurveyConfig
from .runtime import LoggingConfig
from .search import (
    CacheConfig,
    ClassificationConfig,
    EnrichmentConfig,
    RetryConfig,
    SearchApiConfig,
)


__all__ = [
    "CacheConfig",
    "ClassificationConfig",
    "EnrichmentConfig",
    "LoggingConfig",
    "PipelineMetadata",
    "RetryConfig",
    "SearchApiConfig",
    "SurveyConfig",
]
