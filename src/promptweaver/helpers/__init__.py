"""Template helpers: the built-in catalog and the registries that hold them.

Every catalog helper is a plain function callable from a template, e.g.
``{{ currency(total) }}`` or ``{{ name | upper }}``.
"""

from ._arithmetic import ARITHMETIC_HELPERS, COMPARISON_HELPERS
from ._catalog import builtin_helpers, register_builtin_helpers
from ._collection import COLLECTION_HELPERS
from ._date import DATE_HELPERS
from ._formatters import FORMATTERS
from ._logic import CONDITIONAL_HELPERS, LOGIC_HELPERS
from ._object import OBJECT_HELPERS
from ._registry import (
    Helper,
    HelperEntry,
    HelperMetadata,
    HelperRegistry,
    HelperSink,
    get_global_registry,
    register_helper,
)
from ._string import STRING_HELPERS
from ._template import TEMPLATE_HELPERS

__all__ = [
    "ARITHMETIC_HELPERS",
    "COLLECTION_HELPERS",
    "COMPARISON_HELPERS",
    "CONDITIONAL_HELPERS",
    "DATE_HELPERS",
    "FORMATTERS",
    "LOGIC_HELPERS",
    "OBJECT_HELPERS",
    "STRING_HELPERS",
    "TEMPLATE_HELPERS",
    "Helper",
    "HelperEntry",
    "HelperMetadata",
    "HelperRegistry",
    "HelperSink",
    "builtin_helpers",
    "get_global_registry",
    "register_builtin_helpers",
    "register_helper",
]
