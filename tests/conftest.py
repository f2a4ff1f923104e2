# affiliation-survey/tests/conftest.py
#
# Core fixtures shared by the unit tests:
# - search_config / survey_config: validated config objects that never touch config/*.yaml
# - make_client: ORCIDClient wired to an httpx.MockTransport handler
# - result_cache: ResultCache rooted in tmp_path
# - log_messages: loguru records captured for assertions
#
from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
from loguru import logger

from affiliation_survey.config.loader import reload_config
from affiliation_survey.config.schemas import SearchApiConfig, SurveyConfig
from affiliation_survey.extractors.orcid_client import ORCIDClient
from affiliation_survey.utils.cache import ResultCache


# Configure test logging using loguru for consistency with application code
logger.remove()
logger.configure(extra={"stage": "-", "run_id": "-"})
logger.add(
    sys.stderr,
    level="INFO",
    format="{time:YYYY-MM-DD HH:mm:ss} {level} {name}: {message}",
)


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "fast: Fast unit tests that should complete in < 1 second")
    config.addinivalue_line("markers", "slow: Slow tests that may take > 1 second to complete")
    config.addinivalue_line(
        "markers", "integration: Tests that exercise several components together"
    )


@pytest.fixture(scope="session")
def repo_root() -> Path:
    """Repository root, for tests that read files relative to the project."""
    return Path(__file__).resolve().parents[1]


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    """Isolate tests from the caller's environment and the config cache."""
    monkeypatch.delenv("ORCID_ACCESS_TOKEN", raising=False)
    reload_config()
    yield
    reload_config()


@pytest.fixture
def search_config() -> SearchApiConfig:
    """Search settings with a rate limit high enough never to sleep in tests."""
    return SearchApiConfig(
        base_url="https://orcid.test/v3.0",
        rate_limit_per_minute=100000,
        timeout_seconds=5,
    )


@pytest.fixture
def survey_config(tmp_path: Path, search_config: SearchApiConfig) -> SurveyConfig:
    """Full survey configuration with cache and logs under tmp_path."""
    return SurveyConfig(
        search_api=search_config,
        enrichment={"max_workers": 1, "organization_variants": ["Example University"]},
        cache={"enabled": True, "cache_dir": str(tmp_path / "cache")},
        logging={"file_path": None, "level": "DEBUG"},
    )


@pytest.fixture
def make_client(search_config: SearchApiConfig) -> Callable[..., ORCIDClient]:
    """Factory building an ORCIDClient whose requests go to ``handler``."""
    clients: list[ORCIDClient] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> ORCIDClient:
        http_client = httpx.Client(transport=httpx.MockTransport(handler))
        client = ORCIDClient(
            config=kwargs.pop("config", search_config),
            access_token=kwargs.pop("access_token", "test-token"),
            http_client=http_client,
            **kwargs,
        )
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.client.close()


@pytest.fixture
def result_cache(tmp_path: Path) -> ResultCache:
    return ResultCache(tmp_path / "cache")


@pytest.fixture
def log_messages():
    """Collect formatted loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    try:
        logger.remove(handler_id)
    except ValueError:
        pass  # already removed by a setup_logging call
