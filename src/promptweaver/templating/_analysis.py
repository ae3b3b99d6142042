"""Template introspection: referenced variables, helpers and partials."""

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from jinja2 import Environment

from promptweaver.utils import get_logger

from ._references import collect_references, is_excluded_name

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger


class HasSource(Protocol):
    @property
    def source(self) -> str: ...


# Parsing only; helpers and settings of the rendering engines are irrelevant
_parser = Environment()

_MUSTACHE = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
_STATEMENT = re.compile(r"\{%(.*?)%\}", re.DOTALL)
_SKIP_MARKERS = ("#", "/", "^", ">", "!")
_LITERALS = frozenset({"true", "false", "null", "none", "else", "undefined"})
_NUMBER = re.compile(r"-?\d+(\.\d+)?")
_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")
_INDEXED = re.compile(r"([A-Za-z_$][\w$]*)\[")
_CALL = re.compile(r"([A-Za-z_$][\w$]*)\s*\((.*)\)", re.DOTALL)

_CALLEE = re.compile(r"(?<![\w.$])([A-Za-z_$][\w$]*)\s*\(")
_FILTER = re.compile(r"(?<!\|)\|(?!\|)\s*([A-Za-z_][\w]*)")
_BLOCK_OPENER = re.compile(r"\{\{~?\s*#\*?\s*([A-Za-z_$][\w$-]*)")
_MUSTACHE_OPENER = re.compile(r"^([A-Za-z_$][\w$-]*)\s+\S")
_INCLUDE = re.compile(r"\{%-?\s*include\s+[\"']([^\"']+)[\"']")
_PARTIAL_MARKER = re.compile(r"\{\{~?\s*>\s*([^\s}]+)")
_PARTIAL_CALL = re.compile(r"(?<![\w.])(?:partial|include)\s*\(\s*[\"']([^\"']+)[\"']")

_CONTROL_WORDS = frozenset(
    {
        "if",
        "elif",
        "else",
        "each",
        "with",
        "unless",
        "for",
        "set",
        "include",
        "import",
        "from",
        "block",
        "extends",
        "macro",
        "call",
        "filter",
        "raw",
        "and",
        "or",
        "not",
        "in",
        "is",
    }
)


@dataclass(frozen=True, slots=True)
class TemplateMetadata:
    """Names a template refers to, each listed once in order of first use.

    Attributes:
        variables: Top-level data variables.
        helpers: Helpers invoked as functions, filters or block helpers.
        partials: Partials included by name.
    """

    variables: tuple[str, ...]
    helpers: tuple[str, ...]
    partials: tuple[str, ...]


def _source_of(template: "str | HasSource") -> str:  # noqa: UP037
    return template if isinstance(template, str) else template.source


# =============================================================================
# Lexical fallback
# =============================================================================


def _candidate_name(token: str) -> str | None:
    token = token.strip().strip("(),")
    if "=" in token and not token.startswith(("'", '"')):
        token = token.split("=", 1)[1]
    if not token or token[0] in "\"'":
        return None
    if token.lower() in _LITERALS or _NUMBER.fullmatch(token):
        return None

    indexed = _INDEXED.match(token)
    name = indexed.group(1) if indexed else re.split(r"[.\[]", token, maxsplit=1)[0]
    if is_excluded_name(name) or not _IDENTIFIER.fullmatch(name):
        return None
    return name


def _region_candidates(content: str) -> list[str]:
    content = content.strip().lstrip("{&~-").rstrip("}~-").strip()
    if not content or content.startswith(_SKIP_MARKERS):
        return []

    # Drop a Jinja2 filter pipeline: "name | upper" -> "name"
    content = content.split("|", 1)[0].strip()

    call = _CALL.fullmatch(content)
    if call is not None:
        return [arg.strip() for arg in call.group(2).split(",")]

    tokens = content.split()
    if len(tokens) > 1 and not any(marker in tokens[0] for marker in ".[("):
        # helper name followed by arguments; subexpression helpers are skipped
        return [token for token in tokens[1:] if not token.startswith("(")]
    return tokens[:1]


def _scan_variables(source: str) -> set[str]:
    """Best-effort variable names from ``{{ ... }}`` regions alone."""
    names: set[str] = set()
    for match in _MUSTACHE.finditer(source):
        for token in _region_candidates(match.group(1)):
            name = _candidate_name(token)
            if name is not None:
                names.add(name)
    return names


# =============================================================================
# Variables
# =============================================================================


def extract_variables(
    template: "str | HasSource",  # noqa: UP037
    *,
    logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
) -> set[str]:
    """Return the top-level variable names ``template`` reads from its data.

    Only the first segment of a path is kept (``user.name`` gives ``user``),
    helper names are never variables, and names bound inside the template
    (loop targets, ``set`` and ``with`` variables, macro arguments) are
    skipped. Sources Jinja2 cannot parse, such as Handlebars-style
    ``{{#if x}}`` or ``{{helper arg}}``, are scanned lexically instead; this
    function never raises.

    Args:
        template: Template source, or an object with a ``source`` attribute.
        logger: Logger for the fallback notice. Defaults to the shared logger.

    Returns:
        The set of variable names.

    Example:
        >>> sorted(extract_variables("{{ user.name }} has {{ length(items) }}"))
        ['items', 'user']
    """
    source = _source_of(template)
    try:
        references, _ = collect_references(_parser.parse(source))
    except Exception as exc:  # noqa: BLE001
        (logger or get_logger()).debug(
            "variable_extraction_fallback", error=str(exc), error_type=type(exc).__name__
        )
        return _scan_variables(source)
    return {reference.name for reference in references}


def _first_use(source: str, name: str) -> int:
    match = re.search(rf"(?<![\w$@.]){re.escape(name)}(?![\w$])", source)
    return match.start() if match else len(source)


def _unique(names: list[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(names))


# =============================================================================
# Helpers and partials
# =============================================================================


def _is_helper_name(name: str) -> bool:
    return (
        name not in _CONTROL_WORDS
        and not name.startswith("end")
        and not is_excluded_name(name)
    )


def _mustache_helper(content: str) -> str | None:
    """Helper name of a Handlebars-style ``{{name arg ...}}`` region."""
    content = content.strip().lstrip("{&~-").strip()
    match = _MUSTACHE_OPENER.match(content)
    if match is None:
        return None
    tokens = content.split("|", 1)[0].split()
    if len(tokens) < 2:  # noqa: PLR2004
        return None
    # "a if b else c" and "x in y" are Jinja2 expressions, not helper calls
    if any(token in _CONTROL_WORDS for token in tokens[1:]):
        return None
    if not all(
        token[0] in "\"'(@" or _IDENTIFIER.match(token) or _NUMBER.match(token)
        for token in tokens[1:]
    ):
        return None
    return match.group(1)


def _scan_helpers(source: str) -> list[str]:
    found: list[tuple[int, str]] = []
    for pattern in (_MUSTACHE, _STATEMENT):
        for region in pattern.finditer(source):
            content = region.group(1)
            offset = region.start(1)
            found.extend((offset + m.start(1), m.group(1)) for m in _CALLEE.finditer(content))
            if not content.strip().startswith(_SKIP_MARKERS):
                found.extend(
                    (offset + m.start(1), m.group(1)) for m in _FILTER.finditer(content)
                )
            if pattern is _MUSTACHE:
                helper = _mustache_helper(content)
                if helper is not None:
                    found.append((offset, helper))
    found.extend((m.start(1), m.group(1)) for m in _BLOCK_OPENER.finditer(source))
    found.sort()
    return [name for _, name in found if _is_helper_name(name)]


def _scan_partials(source: str) -> list[str]:
    found: list[tuple[int, str]] = []
    for pattern in (_INCLUDE, _PARTIAL_MARKER, _PARTIAL_CALL):
        found.extend((m.start(1), m.group(1)) for m in pattern.finditer(source))
    found.sort()
    return [name for _, name in found]


def get_template_metadata(
    template: "str | HasSource",  # noqa: UP037
    *,
    logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
) -> TemplateMetadata:
    """Describe the variables, helpers and partials ``template`` uses.

    Helpers and partials are found by pattern matching over the source, so
    they are reported the same way whether or not Jinja2 can parse it.

    Example:
        >>> meta = get_template_metadata('{% include "header" %}{{ total | currency }}')
        >>> meta.variables, meta.helpers, meta.partials
        (('total',), ('currency',), ('header',))
    """
    source = _source_of(template)
    variables = sorted(
        extract_variables(source, logger=logger),
        key=lambda name: (_first_use(source, name), name),
    )
    return TemplateMetadata(
        variables=tuple(variables),
        helpers=_unique(_scan_helpers(source)),
        partials=_unique(_scan_partials(source)),
    )
