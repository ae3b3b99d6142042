"""The PromptWeaver template facade."""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, cast

from jinja2 import TemplateSyntaxError
from pydantic import BaseModel

from promptweaver.config import get_settings
from promptweaver.exceptions import (
    EmptyTemplateError,
    InvalidSchemaError,
    SchemaNotConfiguredError,
    SchemaValidationError,
)
from promptweaver.helpers import HelperRegistry, register_builtin_helpers
from promptweaver.schema import (
    SchemaValidationResult,
    is_standard_schema,
    parse_with_schema,
    parse_with_schema_async,
    validate_with_schema,
    validate_with_schema_async,
)
from promptweaver.schema._validation import INVALID_SCHEMA_MESSAGE
from promptweaver.utils import get_logger

from ._analysis import TemplateMetadata, extract_variables, get_template_metadata
from ._engine import TemplateEngine, engine_for_registry, get_template_cache
from ._inference import InferredField, infer_template_shape
from ._validation import compilation_error, validate_template

if TYPE_CHECKING:
    from jinja2 import Template
    from structlog.typing import FilteringBoundLogger

DEFAULT_SEPARATOR = "\n\n"

EMPTY_SOURCE_MESSAGE = (
    "Template source is empty. Pass a non-empty string or an object whose "
    "'default' holds the template text."
)


def _resolve_source(source: object) -> str:
    if isinstance(source, str):
        return source
    if isinstance(source, Mapping):
        resolved = cast("Mapping[str, object]", source).get("default")
    else:
        resolved = getattr(source, "default", None)
    return resolved if isinstance(resolved, str) else ""


def _merge_data(data: object, extra: Mapping[str, object]) -> object:
    if not extra:
        return data
    if data is None:
        return dict(extra)
    if isinstance(data, BaseModel):
        return {**data.model_dump(), **extra}
    if isinstance(data, Mapping):
        return {**cast("Mapping[str, object]", data), **extra}
    msg = f"Cannot merge keyword data into {type(data).__name__}"
    raise TypeError(msg)


def _render_context(data: object) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    # Models are dumped; mappings are copied
    if data is None:
        return {}
    if isinstance(data, BaseModel):
        return data.model_dump()
    if isinstance(data, Mapping):
        return dict(cast("Mapping[str, Any]", data))  # pyright: ignore[reportExplicitAny]
    # Non-mapping data (e.g. a schema that outputs a list) is exposed as "this"
    return {"this": data}


class PromptWeaver:
    """A compiled template with helpers, partials and optional schema validation.

    Args:
        source: Template text, or an object/mapping whose ``default`` holds it
            (the shape of a module that exports a template as its default).
        registry: Helper registry. Defaults to the global registry; a scoped
            registry gets an engine of its own, isolated from the global one.
        partials: Partials to register, as ``name -> source``.
        schema: Validator implementing the standard schema protocol; when set,
            data is validated (and possibly transformed) before rendering.
        enable_cache: Reuse compiled templates across instances. Defaults to
            the ``cache.enabled`` setting.
        logger: Logger for debug events. Defaults to the shared logger.

    Raises:
        EmptyTemplateError: If the resolved source is empty.
        InvalidSchemaError: If ``schema`` does not implement the protocol.
        TemplateCompilationError: If the source or a partial does not compile.

    Example:
        >>> weaver = PromptWeaver("Total: {{ currency(total) }}")
        >>> weaver.format({"total": 1234.5})
        'Total: $1,234.50'
    """

    def __init__(
        self,
        source: object,
        *,
        registry: HelperRegistry | None = None,
        partials: Mapping[str, str] | None = None,
        schema: object = None,
        enable_cache: bool | None = None,
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> None:
        resolved = _resolve_source(source)
        if not resolved:
            raise EmptyTemplateError(EMPTY_SOURCE_MESSAGE)
        if schema is not None and not is_standard_schema(schema):
            raise InvalidSchemaError(INVALID_SCHEMA_MESSAGE)

        self._source: str = resolved
        self._schema: object = schema
        self._registry: HelperRegistry = (
            registry if registry is not None else HelperRegistry.get_global()
        )
        self._enable_cache: bool = (
            get_settings().cache.enabled if enable_cache is None else enable_cache
        )
        self._logger: FilteringBoundLogger = logger if logger is not None else get_logger()

        register_builtin_helpers()
        self._engine: TemplateEngine = engine_for_registry(registry)
        if registry is not None:
            registry.bind(self._engine)

        for name, partial_source in (partials or {}).items():
            self.set_partial(name, partial_source)

        validation = validate_template(resolved, self._engine)
        if not validation.valid:
            raise validation.errors[0]

        self._template: Template = self._engine.compile(resolved, use_cache=self._enable_cache)
        self._logger.debug(
            "template_created",
            engine=self._engine.serial,
            cached=self._enable_cache,
            schema=schema is not None,
        )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def source(self) -> str:
        """The template source text."""
        return self._source

    @property
    def schema(self) -> object:
        """The configured schema, or None."""
        return self._schema

    @property
    def registry(self) -> HelperRegistry:
        return self._registry

    @property
    def engine(self) -> TemplateEngine:
        return self._engine

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def _render(self, data: object) -> str:
        return self._engine.render(self._template, _render_context(data))

    def format(self, data: object = None, /, **kwargs: object) -> str:
        """Render the template.

        Data may be a mapping, a pydantic model or keyword arguments. With a
        schema configured the data is validated first and the validated
        value is rendered.

        Raises:
            SchemaValidationError: If the data fails schema validation.
            AsyncValidationError: If the schema validates asynchronously; use
                :meth:`format_async` instead.
        """
        payload = _merge_data(data, kwargs)
        if self._schema is not None:
            payload = parse_with_schema(self._schema, payload)
        return self._render(payload)

    async def format_async(self, data: object = None, /, **kwargs: object) -> str:
        """Render the template, awaiting asynchronous schema validation."""
        payload = _merge_data(data, kwargs)
        if self._schema is not None:
            payload = await parse_with_schema_async(self._schema, payload)
        return self._render(payload)

    def _ensure_schema(self) -> object:
        if self._schema is None:
            msg = "No schema configured. Pass a standard schema validator as schema=..."
            raise SchemaNotConfiguredError(msg)
        return self._schema

    def format_with_schema(self, data: object = None, /, **kwargs: object) -> str:
        """Validate ``data`` against the configured schema, then render it.

        Raises:
            SchemaNotConfiguredError: If no schema is configured.
            SchemaValidationError: If the data fails validation.
        """
        schema = self._ensure_schema()
        validated = parse_with_schema(schema, _merge_data(data, kwargs))
        return self._render(validated)

    def try_format_with_schema(self, data: object = None, /, **kwargs: object) -> str | None:
        """Like :meth:`format_with_schema`, but return None when validation fails.

        Only :class:`SchemaValidationError` is converted; rendering errors
        such as a call to an unknown helper propagate.
        """
        try:
            return self.format_with_schema(data, **kwargs)
        except SchemaValidationError as exc:
            self._logger.debug("schema_validation_failed", issues=len(exc.issues))
            return None

    def validate_schema(self, data: object) -> SchemaValidationResult:
        """Validate ``data`` against the configured schema without rendering."""
        return validate_with_schema(self._ensure_schema(), data)

    async def validate_schema_async(self, data: object) -> SchemaValidationResult:
        return await validate_with_schema_async(self._ensure_schema(), data)

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def extract_variables(self) -> set[str]:
        """Top-level variable names the template reads."""
        return extract_variables(self._source, logger=self._logger)

    def get_metadata(self) -> TemplateMetadata:
        return get_template_metadata(self._source, logger=self._logger)

    def infer_shape(self) -> dict[str, InferredField]:
        """Inferred shape of the data the template expects."""
        return infer_template_shape(self._source, logger=self._logger)

    def set_partial(self, name: str, source: str) -> None:
        """Register (or replace) a partial usable as ``{% include "name" %}``.

        Partials belong to the engine, so every template sharing this
        instance's registry can include them.

        Raises:
            TemplateCompilationError: If the partial does not compile.
        """
        try:
            self._engine.register_partial(name, source)
        except TemplateSyntaxError as exc:
            raise compilation_error(exc, source) from exc

    # -------------------------------------------------------------------------
    # Composition and cache
    # -------------------------------------------------------------------------

    @staticmethod
    def compose(sources: Iterable[str], separator: str = DEFAULT_SEPARATOR) -> str:
        """Join template sources with ``separator``.

        Example:
            >>> PromptWeaver.compose(["# Role", "{{ task }}"])
            '# Role\\n\\n{{ task }}'
        """
        return separator.join(sources)

    @classmethod
    def compose_and_create(
        cls,
        sources: Iterable[str],
        *,
        separator: str = DEFAULT_SEPARATOR,
        **options: Any,  # noqa: ANN401  # pyright: ignore[reportExplicitAny, reportAny]
    ) -> "PromptWeaver":  # noqa: UP037
        """Compose ``sources`` and build a template from the result."""
        return cls(cls.compose(sources, separator), **options)  # pyright: ignore[reportAny]

    @staticmethod
    def clear_template_cache() -> None:
        """Drop every cached compiled template."""
        get_template_cache().clear()

    @staticmethod
    def template_cache_size() -> int:
        return len(get_template_cache())

    def __repr__(self) -> str:
        preview = self._source if len(self._source) <= 40 else self._source[:37] + "..."  # noqa: PLR2004
        return f"PromptWeaver({preview!r})"
