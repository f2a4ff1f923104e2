"""CLI command context and shared utilities.

Provides CommandContext dataclass for dependency injection of shared state
across CLI commands.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

from loguru import logger
from rich.console import Console

from ..config.loader import get_config
from ..config.schemas import SurveyConfig
from ..pipeline import AffiliationSurvey
from ..utils.cache import ResultCache


SurveyFactory = Callable[[str], AffiliationSurvey]


@dataclass
class CommandContext:
    """Shared context for CLI commands.

    Attributes:
        config: Survey configuration
        console: Rich console for formatted output
        cache: Result cache shared by every survey in this session
        survey_factory: Builds an AffiliationSurvey for a survey name
        run_id: Unique identifier for this CLI session
    """

    config: SurveyConfig
    console: Console
    cache: ResultCache
    survey_factory: SurveyFactory | None = None
    run_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])

    def __post_init__(self) -> None:
        self.logger = logger.bind(
            stage="cli",
            run_id=self.run_id,
            environment=self.config.pipeline.environment,
        )

    def survey(self, name: str) -> AffiliationSurvey:
        """AffiliationSurvey for ``name`` sharing this context's cache."""
        if self.survey_factory is not None:
            return self.survey_factory(name)
        return AffiliationSurvey(name, config=self.config, cache=self.cache)

    @classmethod
    def create(cls, config: SurveyConfig | None = None, run_id: str | None = None) -> CommandContext:
        """Create a CommandContext from configuration.

        Args:
            config: Optional SurveyConfig. If None, loads from get_config().
            run_id: Optional run identifier. If None, generates a unique ID.
        """
        if config is None:
            config = get_config()

        cache = ResultCache(config.cache.cache_dir, enabled=config.cache.enabled)
        ctx_kwargs = {"config": config, "console": Console(), "cache": cache}
        if run_id is not None:
            ctx_kwargs["run_id"] = run_id

        context = cls(**ctx_kwargs)
        context.logger.debug("CLI session started")
        return context
