"""The built-in helper catalog and its one-time global installation."""

import inspect

from ._arithmetic import ARITHMETIC_HELPERS, COMPARISON_HELPERS
from ._collection import COLLECTION_HELPERS
from ._date import DATE_HELPERS
from ._formatters import FORMATTERS
from ._logic import CONDITIONAL_HELPERS, LOGIC_HELPERS
from ._object import OBJECT_HELPERS
from ._registry import Helper, HelperMetadata, get_global_registry
from ._string import STRING_HELPERS
from ._template import TEMPLATE_HELPERS

_CATALOG_GROUPS: tuple[dict[str, Helper], ...] = (
    FORMATTERS,
    STRING_HELPERS,
    DATE_HELPERS,
    ARITHMETIC_HELPERS,
    COMPARISON_HELPERS,
    LOGIC_HELPERS,
    COLLECTION_HELPERS,
    OBJECT_HELPERS,
    CONDITIONAL_HELPERS,
    TEMPLATE_HELPERS,
)

_builtins_registered = False


def builtin_helpers() -> dict[str, Helper]:
    """Return a fresh ``name -> handler`` mapping of every catalog helper."""
    helpers: dict[str, Helper] = {}
    for group in _CATALOG_GROUPS:
        helpers.update(group)
    return helpers


def _describe(handler: Helper) -> HelperMetadata | None:
    doc = inspect.getdoc(handler)
    if not doc:
        return None
    return HelperMetadata(description=doc.splitlines()[0])


def register_builtin_helpers() -> None:
    """Install the catalog into the global registry and the default engine.

    Safe to call repeatedly: only the first call per process does any work.
    Names already in the global registry keep their handlers, so helpers
    registered with :func:`register_helper` beforehand win over the catalog.
    """
    global _builtins_registered  # noqa: PLW0603
    if _builtins_registered:
        return

    from promptweaver.templating import get_default_engine  # noqa: PLC0415

    registry = get_global_registry()
    for name, handler in builtin_helpers().items():
        if registry.has(name):
            continue
        registry.register(name, handler, _describe(handler))
    registry.bind(get_default_engine())
    _builtins_registered = True
