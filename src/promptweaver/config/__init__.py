"""Runtime settings for promptweaver.

Settings are read from ``PROMPTWEAVER_*`` environment variables, where double
underscores separate nested sections:

    >>> import os
    >>> os.environ["PROMPTWEAVER_CACHE__ENABLED"] = "false"
    >>> from promptweaver.config import load_settings
    >>> load_settings().cache.enabled
    False
"""

from ._loader import (
    get_settings,
    load_settings,
    parse_env_vars,
    parse_string_value,
    reset_settings,
    set_nested_key,
)
from ._models import (
    CacheConfig,
    EngineConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    WeaverSettings,
)

__all__ = [
    "CacheConfig",
    "EngineConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "WeaverSettings",
    "get_settings",
    "load_settings",
    "parse_env_vars",
    "parse_string_value",
    "reset_settings",
    "set_nested_key",
]
