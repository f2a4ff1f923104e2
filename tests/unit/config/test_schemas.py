"""Tests for configuration schema defaults and validators."""

import pytest
from pydantic import ValidationError

from affiliation_survey.config.schemas import (
    LoggingConfig,
    RetryConfig,
    SearchApiConfig,
    SurveyConfig,
)


pytestmark = pytest.mark.fast


class TestSearchApiConfig:
    def test_defaults(self):
        config = SearchApiConfig()

        assert config.page_size == 200
        assert config.max_page_size == 1000
        assert config.absolute_cap == 10000
        assert config.max_workers == 1
        assert config.count_key == "num-found"
        assert config.identifier_paths[0] == ["orcid-identifier", "path"]

    def test_page_size_above_cap_rejected(self):
        with pytest.raises(ValidationError, match="page_size"):
            SearchApiConfig(page_size=1001)

    def test_max_workers_bounded(self):
        with pytest.raises(ValidationError):
            SearchApiConfig(max_workers=0)


class TestRetryConfig:
    def test_defaults_disable_retries(self):
        assert RetryConfig().attempts == 0

    def test_ceiling_below_initial_rejected(self):
        with pytest.raises(ValidationError):
            RetryConfig(backoff_seconds=10, max_backoff_seconds=1)


class TestLoggingConfig:
    @pytest.mark.parametrize("raw,expected", [("pretty", "text"), ("JSON", "json")])
    def test_format_normalized(self, raw, expected):
        assert LoggingConfig(format=raw).format == expected

    def test_level_uppercased(self):
        assert LoggingConfig(level="debug").level == "DEBUG"


class TestSurveyConfig:
    def test_sections_coerced_from_dicts(self):
        config = SurveyConfig(
            search_api={"page_size": 100},
            enrichment={"organization_variants": ["Example University"]},
        )

        assert config.search_api.page_size == 100
        assert config.enrichment.organization_variants == ["Example University"]
        assert config.classification.keep_unmatched is True

    def test_assignment_validated(self):
        config = SurveyConfig()
        with pytest.raises(ValidationError):
            config.retry = {"attempts": -1}
