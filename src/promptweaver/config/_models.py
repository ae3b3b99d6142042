"""Settings models.

This module provides the frozen Pydantic models that describe runtime
settings. Every section ignores unknown keys so newer environment variables
do not break older installations.
"""

from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class CacheConfig(BaseModel):
    """Compiled-template cache section.

    Attributes:
        enabled: Default for ``PromptWeaver(enable_cache=...)``.
        max_size: Maximum number of cached templates (0 disables eviction).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    enabled: bool = True
    max_size: int = Field(default=256, ge=0)


class EngineConfig(BaseModel):
    """Jinja2 Environment section.

    Attributes:
        autoescape: Enable autoescaping (default: False for markdown/text templates).
        trim_blocks: Remove first newline after a block tag.
        lstrip_blocks: Strip leading whitespace before block tags.
        keep_trailing_newline: Preserve trailing newline in templates.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    autoescape: bool = False
    trim_blocks: bool = False
    lstrip_blocks: bool = False
    keep_trailing_newline: bool = True


class LoggingConfig(BaseModel):
    """Logging section.

    Attributes:
        level: Log level threshold. None defers to PROMPTWEAVER_LOG_LEVEL.
        format: Log output format.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel | None = None
    format: LogFormat = LogFormat.TEXT


class WeaverSettings(BaseModel):
    """Root settings object."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    cache: CacheConfig = CacheConfig()
    engine: EngineConfig = EngineConfig()
    logging: LoggingConfig = LoggingConfig()
