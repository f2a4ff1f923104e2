"""Root SurveyConfig composed from modular schema components."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .runtime import LoggingConfig
from .search import (
    CacheConfig,
    ClassificationConfig,
    EnrichmentConfig,
    RetryConfig,
    SearchApiConfig,
)


class PipelineMetadata(BaseModel):
    """Metadata for the configured survey."""

    name: str = Field(default="affiliation-survey", description="Survey identifier")
    version: str = Field(default="0.1.0", description="Semantic version of the survey")
    environment: str = Field(default="development", description="Active environment name")

    model_config = ConfigDict(extra="allow")


class SurveyConfig(BaseModel):
    """Root configuration model for the affiliation survey."""

    pipeline: PipelineMetadata = Field(default_factory=PipelineMetadata)

    search_api: SearchApiConfig = Field(default_factory=SearchApiConfig)
    enrichment: EnrichmentConfig = Field(default_factory=EnrichmentConfig)
    classification: ClassificationConfig = Field(default_factory=ClassificationConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="allow",
    )


__all__ = ["PipelineMetadata", "SurveyConfig"]
