"""Template syntax validation with enriched error reports."""

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from jinja2 import TemplateSyntaxError

from promptweaver.exceptions import TemplateCompilationError

if TYPE_CHECKING:
    from ._engine import TemplateEngine

_LINE = re.compile(r"line\s+(\d+)", re.IGNORECASE)
_COLUMN = re.compile(r"column\s+(\d+)", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class TemplateValidationResult:
    """Outcome of :func:`validate_template`."""

    valid: bool
    errors: tuple[TemplateCompilationError, ...] = field(default=())


def compilation_error(exc: Exception, source: str) -> TemplateCompilationError:
    """Convert a Jinja2 compile failure into a :class:`TemplateCompilationError`.

    The line number comes from the Jinja2 error when it has one, otherwise
    ``line N`` / ``column N`` are read from the message text.
    """
    message = getattr(exc, "message", None) or str(exc)
    line: int | None = None
    if isinstance(exc, TemplateSyntaxError) and exc.lineno:
        line = exc.lineno
    else:
        match = _LINE.search(str(exc))
        if match:
            line = int(match.group(1))
    column_match = _COLUMN.search(str(exc))
    column = int(column_match.group(1)) if column_match else None
    return TemplateCompilationError(message, line=line, column=column, source=source)


def validate_template(source: str, engine: "TemplateEngine | None" = None) -> TemplateValidationResult:  # noqa: UP037
    """Check that ``source`` compiles, without caching the result.

    Args:
        source: Template source.
        engine: Engine whose settings and extensions apply. Defaults to the
            default engine.

    Example:
        >>> result = validate_template("{% if ready %}go")
        >>> result.valid, result.errors[0].line
        (False, 1)
    """
    if engine is None:
        from ._engine import get_default_engine  # noqa: PLC0415

        engine = get_default_engine()
    try:
        _ = engine.compile(source, use_cache=False)
    except TemplateSyntaxError as exc:
        return TemplateValidationResult(valid=False, errors=(compilation_error(exc, source),))
    return TemplateValidationResult(valid=True)
