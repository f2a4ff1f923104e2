"""Main CLI application entry point for the affiliation survey.

This module provides the Typer application instance and command registration.
"""

from __future__ import annotations

from pathlib import Path

import typer

from ..config.loader import get_config
from ..exceptions import SurveyError
from ..utils.logging_config import configure_logging_from_config
from .context import CommandContext
from .display.errors import EXIT_CONFIG, handle_error


app = typer.Typer(
    name="affsurvey",
    help="Survey current institutional affiliations in the ORCID registry",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    environment: str | None = typer.Option(
        None, "--env", "-e", help="Configuration environment (config/<env>.yaml)"
    ),
    config_dir: Path | None = typer.Option(None, "--config-dir", help="Configuration directory"),
) -> None:
    """Affiliation survey CLI."""
    try:
        config = None
        if environment is not None or config_dir is not None:
            config = get_config(environment=environment, config_dir=config_dir)
        ctx.obj = CommandContext.create(config=config)
    except SurveyError as e:
        handle_error(e, exit_code=EXIT_CONFIG)

    configure_logging_from_config(ctx.obj.config, level="DEBUG" if verbose else None)


from .commands import cache, survey  # noqa: E402

survey.register_command(app)
cache.register_command(app)


if __name__ == "__main__":
    app()
