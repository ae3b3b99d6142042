"""Jinja2 environment wrapper owning helpers, partials and compiled templates."""

import hashlib
import itertools
import weakref
from collections import OrderedDict
from collections.abc import Mapping
from typing import TYPE_CHECKING, cast

from jinja2 import DictLoader, Environment, Template, TemplateSyntaxError
from jinja2.defaults import DEFAULT_FILTERS

from promptweaver.config import EngineConfig, get_settings
from promptweaver.helpers import Helper, HelperRegistry, builtin_helpers

if TYPE_CHECKING:
    from jinja2 import nodes
    from structlog.typing import FilteringBoundLogger

_engine_serials = itertools.count(1)

CacheKey = tuple[int, str]


def _finalize(value: object) -> object:
    return "" if value is None else value


def source_digest(source: str) -> str:
    """Return the SHA-256 hex digest of ``source``."""
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


class TemplateCache:
    """LRU cache of compiled templates shared by every engine.

    Keys combine the owning engine's serial number with the SHA-256 digest of
    the exact source text, so engines with different helpers never share a
    compiled template. A ``max_size`` of 0 disables eviction.
    """

    def __init__(self, max_size: int = 256) -> None:
        self.max_size: int = max_size
        self._entries: OrderedDict[CacheKey, Template] = OrderedDict()

    def get(self, key: CacheKey) -> Template | None:
        template = self._entries.get(key)
        if template is not None:
            self._entries.move_to_end(key)
        return template

    def put(self, key: CacheKey, template: Template) -> None:
        self._entries[key] = template
        self._entries.move_to_end(key)
        if self.max_size > 0:
            while len(self._entries) > self.max_size:
                _ = self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


_template_cache: TemplateCache | None = None


def get_template_cache() -> TemplateCache:
    """Return the process-wide compiled-template cache."""
    global _template_cache  # noqa: PLW0603
    if _template_cache is None:
        _template_cache = TemplateCache(get_settings().cache.max_size)
    return _template_cache


class TemplateEngine:
    """One Jinja2 environment plus the helpers and partials installed in it.

    Helpers become template globals, so ``{{ add(1, 2) }}`` works, and also
    filters when the name does not shadow a Jinja2 built-in filter, so
    ``{{ price | currency }}`` works too. Partials are held in a
    ``DictLoader`` and used with ``{% include "name" %}``.

    Attributes:
        serial: Process-unique number identifying this engine in the cache.
        environment: The wrapped Jinja2 environment.
    """

    def __init__(
        self,
        *,
        config: EngineConfig | None = None,
        install_catalog: bool = True,
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> None:
        if config is None:
            config = get_settings().engine

        self.serial: int = next(_engine_serials)
        self._partials: dict[str, str] = {}
        self._helpers: dict[str, Helper] = {}
        self._logger: FilteringBoundLogger | None = logger
        self.environment: Environment = Environment(
            loader=DictLoader(self._partials),
            autoescape=config.autoescape,  # noqa: S701
            trim_blocks=config.trim_blocks,
            lstrip_blocks=config.lstrip_blocks,
            keep_trailing_newline=config.keep_trailing_newline,
            finalize=_finalize,
        )

        if install_catalog:
            for name, handler in builtin_helpers().items():
                self.register_helper(name, handler)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def register_helper(self, name: str, handler: Helper) -> None:
        """Install ``handler`` under ``name``, replacing any earlier helper."""
        self._helpers[name] = handler
        self.environment.globals[name] = handler
        if name not in DEFAULT_FILTERS:
            self.environment.filters[name] = handler

    def unregister_helper(self, name: str) -> None:
        """Remove the helper ``name``; unknown names are ignored."""
        if self._helpers.pop(name, None) is None:
            return
        _ = self.environment.globals.pop(name, None)
        if name not in DEFAULT_FILTERS:
            _ = self.environment.filters.pop(name, None)

    def has_helper(self, name: str) -> bool:
        return name in self._helpers

    def helper_names(self) -> list[str]:
        return list(self._helpers)

    # -------------------------------------------------------------------------
    # Partials
    # -------------------------------------------------------------------------

    def register_partial(self, name: str, source: str) -> None:
        """Compile ``source`` and make it includable as ``name``.

        Raises:
            TemplateSyntaxError: If the partial does not compile. The
                previous partial of that name, if any, is kept.
        """
        previous = self._partials.get(name)
        self._partials[name] = source
        try:
            _ = self.environment.get_template(name)
        except TemplateSyntaxError:
            if previous is None:
                del self._partials[name]
            else:
                self._partials[name] = previous
            raise
        if self._logger is not None:
            self._logger.debug("partial_registered", partial=name)

    def unregister_partial(self, name: str) -> None:
        _ = self._partials.pop(name, None)

    def has_partial(self, name: str) -> bool:
        return name in self._partials

    def partial_names(self) -> list[str]:
        return list(self._partials)

    # -------------------------------------------------------------------------
    # Compilation and rendering
    # -------------------------------------------------------------------------

    def parse(self, source: str) -> "nodes.Template":  # noqa: UP037
        """Parse ``source`` into a Jinja2 AST without compiling it."""
        return self.environment.parse(source)

    def compile(self, source: str, *, use_cache: bool = True) -> Template:
        """Compile ``source``, consulting the shared cache when ``use_cache``.

        Raises:
            TemplateSyntaxError: If the source does not compile.
        """
        if not use_cache:
            return self.environment.from_string(source)

        cache = get_template_cache()
        key = (self.serial, source_digest(source))
        template = cache.get(key)
        if template is not None:
            if self._logger is not None:
                self._logger.debug("template_cache_hit", digest=key[1][:12])
            return template

        template = self.environment.from_string(source)
        cache.put(key, template)
        if self._logger is not None:
            self._logger.debug("template_cache_miss", digest=key[1][:12], size=len(cache))
        return template

    def render(self, template: Template | str, data: Mapping[str, object] | None = None) -> str:
        """Render a compiled template (or source text) with ``data``."""
        if isinstance(template, str):
            template = self.compile(template)
        return cast("str", template.render(dict(data) if data is not None else {}))


_default_engine: TemplateEngine | None = None
_scoped_engines: "weakref.WeakKeyDictionary[HelperRegistry, TemplateEngine]" = (
    weakref.WeakKeyDictionary()
)


def get_default_engine() -> TemplateEngine:
    """Return the engine used by templates built without a scoped registry.

    It starts without helpers; the catalog reaches it through the global
    registry (see :func:`promptweaver.helpers.register_builtin_helpers`).
    """
    global _default_engine  # noqa: PLW0603
    if _default_engine is None:
        from promptweaver.utils import get_logger  # noqa: PLC0415

        _default_engine = TemplateEngine(install_catalog=False, logger=get_logger())
    return _default_engine


def engine_for_registry(registry: HelperRegistry | None) -> TemplateEngine:
    """Return the engine that serves templates built with ``registry``.

    The global registry (or None) maps to the default engine. Every scoped
    registry gets an engine of its own, created with the built-in catalog, so
    helpers registered in one registry never reach templates of another.
    """
    if registry is None or registry.is_global:
        return get_default_engine()
    engine = _scoped_engines.get(registry)
    if engine is None:
        from promptweaver.utils import get_logger  # noqa: PLC0415

        engine = TemplateEngine(logger=get_logger())
        _scoped_engines[registry] = engine
    return engine
