"""Logging utilities for promptweaver.

This module provides standalone structlog logger factories that write
text-formatted or JSON-formatted logs to a stream (stderr by default). Each
logger is self-contained and does not modify global structlog configuration,
so embedding applications keep full control over their own logging setup.
"""

import logging
import sys
from os import getenv
from typing import TYPE_CHECKING, Literal, TextIO, cast

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]

_default_logger: "FilteringBoundLogger | None" = None  # noqa: UP037


def _get_log_level() -> int:
    """Get the log level from environment variables.

    Checks PROMPTWEAVER_DEBUG first (sets DEBUG if present), then
    PROMPTWEAVER_LOG_LEVEL. Defaults to WARNING so the library stays quiet.

    Returns:
        The logging level as an integer.
    """
    if getenv("PROMPTWEAVER_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(
        getenv("PROMPTWEAVER_LOG_LEVEL", "warning").upper(), logging.WARNING
    )


def _log_level_from_string(level: str, *, respect_env: bool = False) -> int:
    """Convert a log level string to a logging level integer.

    Args:
        level: Log level string (debug, info, warning, error).
        respect_env: If True, PROMPTWEAVER_DEBUG overrides to DEBUG level.

    Returns:
        The logging level as an integer.
    """
    if respect_env and getenv("PROMPTWEAVER_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.WARNING)


def create_logger(
    level: str | None = None,
    *,
    log_format: LogFormatType = "text",
    stream: TextIO | None = None,
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone structlog logger writing to a stream.

    The log level is determined by (in order of precedence):
    1. PROMPTWEAVER_DEBUG environment variable (if set, enables DEBUG level)
    2. The `level` parameter (if provided)
    3. PROMPTWEAVER_LOG_LEVEL environment variable
    4. Default: WARNING

    Args:
        level: Optional log level string (debug, info, warning, error).
        log_format: Output format, either "json" or "text".
        stream: Destination stream. Defaults to ``sys.stderr``.

    Returns:
        A configured FilteringBoundLogger instance.
    """
    effective_level = (
        _log_level_from_string(level, respect_env=True)
        if level is not None
        else _get_log_level()
    )

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Text format: "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    wrapper_class = structlog.make_filtering_bound_logger(effective_level)
    raw_logger = structlog.PrintLoggerFactory(
        file=stream if stream is not None else sys.stderr
    )()

    logger = cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            raw_logger,
            processors=processors,
            wrapper_class=wrapper_class,
            context_class=dict,
        ),
    )
    return logger.bind(logger="promptweaver")


def get_logger() -> "FilteringBoundLogger":  # noqa: UP037
    """Return the shared default logger, creating it on first use.

    The level and format come from the loaded settings, so environment
    variables are honoured the first time a logger is needed.
    """
    global _default_logger  # noqa: PLW0603
    if _default_logger is None:
        from promptweaver.config import get_settings  # noqa: PLC0415

        settings = get_settings()
        _default_logger = create_logger(
            settings.logging.level, log_format=settings.logging.format
        )
    return _default_logger


def reset_logger() -> None:
    """Drop the cached default logger so the next call rebuilds it."""
    global _default_logger  # noqa: PLW0603
    _default_logger = None
