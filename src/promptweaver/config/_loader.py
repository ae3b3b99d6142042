# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Environment-based settings loading."""

import json
import os
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from promptweaver.exceptions import ConfigValidationError

from ._models import WeaverSettings

ENV_PREFIX = "PROMPTWEAVER_"

# Variables read directly by the logging module rather than the settings tree
_RESERVED_ENV_KEYS = frozenset({"DEBUG", "LOG_LEVEL"})

_settings: WeaverSettings | None = None


def parse_env_vars(
    environ: Mapping[str, str] | None = None,
    prefix: str = ENV_PREFIX,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Parse environment variables into a nested settings dictionary.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.
        prefix: Environment variable prefix (default: "PROMPTWEAVER_").

    Returns:
        Dictionary of parsed values with nested structure.

    Environment variable naming:
        - Add prefix (PROMPTWEAVER_)
        - Convert to uppercase
        - Replace dots with double underscores
        - Example: cache.max_size -> PROMPTWEAVER_CACHE__MAX_SIZE
    """
    source = os.environ if environ is None else environ
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key, value in source.items():
        if not key.startswith(prefix):
            continue

        config_key = key[len(prefix) :]
        if not config_key or config_key in _RESERVED_ENV_KEYS:
            continue

        # PROMPTWEAVER_CACHE__MAX_SIZE -> cache.max_size
        config_path = config_key.replace("__", ".").lower()
        set_nested_key(result, config_path, parse_string_value(value))

    return result


def parse_string_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Parse a string value with automatic type inference.

    Order of type inference:
        1. Boolean: true/false (case-insensitive)
        2. Integer: parseable as int (no decimal)
        3. Float: parseable as float (with decimal)
        4. JSON array/object: starts with [ or {
        5. String: fallback

    Examples:
        >>> parse_string_value("true")
        True
        >>> parse_string_value("42")
        42
        >>> parse_string_value("[1, 2, 3]")
        [1, 2, 3]
    """
    lower_value = value.lower()
    if lower_value in ("true", "false"):
        return lower_value == "true"

    if "." not in value:
        try:
            return int(value)
        except ValueError:
            pass
    else:
        try:
            return float(value)
        except ValueError:
            pass

    if (value.startswith("[") and value.endswith("]")) or (
        value.startswith("{") and value.endswith("}")
    ):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value


def set_nested_key(
    d: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    key_path: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Set a value at a dotted key path in a nested dictionary.

    Creates intermediate dictionaries as needed.

    Example:
        >>> d = {}
        >>> set_nested_key(d, "cache.enabled", False)
        >>> d
        {'cache': {'enabled': False}}
    """
    parts = key_path.split(".")
    current = d

    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]

    current[parts[-1]] = value


def load_settings(environ: Mapping[str, str] | None = None) -> WeaverSettings:
    """Build validated settings from environment variables.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Returns:
        The validated settings.

    Raises:
        ConfigValidationError: If a variable holds an invalid value.
    """
    raw = parse_env_vars(environ)
    try:
        return WeaverSettings.model_validate(raw)
    except ValidationError as e:
        error = e.errors()[0]
        key = ".".join(str(part) for part in error["loc"])
        msg = f"Invalid setting {key!r}: {error['msg']}"
        raise ConfigValidationError(
            msg,
            key=key,
            value=error.get("input"),
            expected=error["type"],
            source="env",
        ) from e


def get_settings() -> WeaverSettings:
    """Return process-wide settings, loading them from the environment once."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next access re-reads the environment."""
    global _settings  # noqa: PLW0603
    _settings = None
