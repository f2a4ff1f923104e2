"""Structured logging configuration using loguru."""

import sys
from contextvars import ContextVar
from pathlib import Path

from loguru import logger

from ..config.loader import get_config
from ..config.schemas import SurveyConfig


stage_context: ContextVar[str | None] = ContextVar("stage", default=None)
run_id_context: ContextVar[str | None] = ContextVar("run_id", default=None)


def setup_logging(
    level: str = "INFO",
    format_type: str = "text",
    file_path: str | None = None,
    max_file_size_mb: int = 100,
    backup_count: int = 5,
    include_stage: bool = True,
    include_run_id: bool = True,
    include_timestamps: bool = True,
    sink=None,
) -> None:
    """Set up structured logging configuration.

    Invalid level names fall back to 'INFO'. ``sink`` defaults to stderr so
    that command output on stdout stays machine-readable.
    """
    logger.remove()
    # Keeps {extra[...]} placeholders valid for messages logged without a context.
    logger.configure(extra={"stage": "-", "run_id": "-"})

    format_parts = []
    if include_timestamps:
        format_parts.append("<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green>")
    format_parts.append("<level>{level: <8}</level>")
    if include_stage:
        format_parts.append("<cyan>{extra[stage]: <12}</cyan>")
    if include_run_id:
        format_parts.append("<magenta>{extra[run_id]: <8}</magenta>")
    format_parts.append("<level>{message}</level>")

    if format_type == "json":
        log_format = "{message}"
        serialize = True
    else:
        log_format = " | ".join(format_parts)
        serialize = False

    safe_level = "INFO"
    try:
        logger.level(level)
        safe_level = level
    except ValueError:
        safe_level = "INFO"

    logger.add(
        sink if sink is not None else sys.stderr,
        level=safe_level,
        format=log_format,
        serialize=serialize,
        colorize=format_type != "json" and sink is None,
    )

    if file_path:
        log_file_path = Path(file_path)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file_path,
            level=safe_level,
            format=log_format,
            serialize=serialize,
            rotation=f"{max_file_size_mb} MB",
            retention=backup_count,
            encoding="utf-8",
        )

    if safe_level != level:
        logger.warning(f"Invalid logging level '{level}' provided; falling back to 'INFO'")


def configure_logging_from_config(
    config: SurveyConfig | None = None, level: str | None = None
) -> None:
    """Configure logging from ``config`` (default: the current configuration).

    ``level`` overrides the configured level, e.g. for a --verbose flag.
    """
    config = config or get_config()

    setup_logging(
        level=level or config.logging.level,
        format_type=config.logging.format,
        file_path=config.logging.file_path,
        max_file_size_mb=config.logging.max_file_size_mb,
        backup_count=config.logging.backup_count,
        include_stage=config.logging.include_stage,
        include_run_id=config.logging.include_run_id,
        include_timestamps=config.logging.include_timestamps,
    )


class LogContext:
    """Context manager that binds stage / run_id to log messages."""

    def __init__(self, stage: str | None = None, run_id: str | None = None):
        self.stage = stage
        self.run_id = run_id
        self.stage_token = None
        self.run_id_token = None

    def __enter__(self):
        if self.stage is not None:
            self.stage_token = stage_context.set(self.stage)
        if self.run_id is not None:
            self.run_id_token = run_id_context.set(self.run_id)

        extra = {}
        if self.stage:
            extra["stage"] = self.stage
        if self.run_id:
            extra["run_id"] = self.run_id

        if extra:
            return logger.bind(**extra)
        return logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.stage_token is not None:
            stage_context.reset(self.stage_token)
        if self.run_id_token is not None:
            run_id_context.reset(self.run_id_token)


def log_with_context(stage: str | None = None, run_id: str | None = None) -> LogContext:
    """Return a context manager yielding a logger bound to stage / run_id."""
    return LogContext(stage=stage, run_id=run_id)


def current_logger():
    """Logger bound to whatever stage / run_id context is active."""
    return logger.bind(stage=stage_context.get() or "-", run_id=run_id_context.get() or "-")
