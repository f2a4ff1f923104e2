"""Error formatting and display utilities."""

from __future__ import annotations

import functools
from typing import Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ...exceptions import AuthError, ConfigurationError, RemoteError, SurveyError


EXIT_ERROR = 1
EXIT_CONFIG = 2
EXIT_AUTH = 3


def exit_code_for(error: Exception) -> int:
    """Exit code for an exception: 3 for auth, 2 for configuration, 1 otherwise."""
    if isinstance(error, AuthError):
        return EXIT_AUTH
    if isinstance(error, ConfigurationError):
        return EXIT_CONFIG
    return EXIT_ERROR


def _suggestions(error: Exception) -> list[str]:
    if isinstance(error, AuthError):
        return [
            "Check the bearer token in the ORCID_ACCESS_TOKEN environment variable",
            "Tokens are issued out of band; request a new one if it expired",
        ]
    if isinstance(error, ConfigurationError):
        return [
            "Verify config/base.yaml syntax",
            "Check AFFSURVEY__* environment variable overrides",
        ]
    if isinstance(error, RemoteError) and error.retryable:
        return [
            "The registry reported a transient failure; try again later",
            "Set retry.attempts in config to retry automatically",
        ]
    return []


def format_error(error: Exception) -> Panel:
    """Format an error for Rich display."""
    message = error.message if isinstance(error, SurveyError) else str(error)

    error_text = Text()
    error_text.append("✗ ", style="bold red")
    error_text.append(message, style="red")
    error_text.append(f"\n\nType: {type(error).__name__}", style="dim")

    if isinstance(error, SurveyError) and error.details:
        for key, value in error.details.items():
            error_text.append(f"\n{key}: {value}", style="dim")

    suggestions = _suggestions(error)
    if suggestions:
        suggestion_text = Text("\n\nSuggested fixes:", style="bold yellow")
        for i, suggestion in enumerate(suggestions, 1):
            suggestion_text.append(f"\n  {i}. {suggestion}", style="yellow")
        error_text.append(suggestion_text)

    return Panel(error_text, title="Error", border_style="red")


def handle_error(error: Exception, console: Console | None = None, exit_code: int | None = None) -> None:
    """Display an error panel, then exit with the mapped exit code."""
    (console or Console(stderr=True)).print(format_error(error))
    raise typer.Exit(code=exit_code if exit_code is not None else exit_code_for(error))


def handle_cli_error(func: Any) -> Any:
    """Decorator rendering SurveyError failures as panels with mapped exit codes."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except SurveyError as e:
            ctx = kwargs.get("ctx")
            console = getattr(getattr(ctx, "obj", None), "console", None)
            handle_error(e, console=console)

    return wrapper
