from types import SimpleNamespace

import pytest
from jinja2 import UndefinedError
from pydantic import BaseModel

from promptweaver.exceptions import (
    AsyncValidationError,
    EmptyTemplateError,
    InvalidSchemaError,
    SchemaNotConfiguredError,
    SchemaValidationError,
    TemplateCompilationError,
)
from promptweaver.helpers import HelperRegistry, register_builtin_helpers, register_helper
from promptweaver.schema import pydantic_schema
from promptweaver.templating import FieldKind, PromptWeaver, get_default_engine
from tests.conftest import (
    AsyncSchema,
    PassthroughSchema,
    RejectingSchema,
    TransformingSchema,
)


class User(BaseModel):
    name: str
    age: int


class TestConstruction:
    def test_plain_source(self) -> None:
        weaver = PromptWeaver("Hello {{ name }}")
        assert weaver.source == "Hello {{ name }}"
        assert weaver.schema is None

    def test_mapping_with_default(self) -> None:
        assert PromptWeaver({"default": "Hi"}).source == "Hi"

    def test_object_with_default_attribute(self) -> None:
        assert PromptWeaver(SimpleNamespace(default="Hi")).source == "Hi"

    @pytest.mark.parametrize(
        "source",
        ["", {"default": ""}, {"other": "Hi"}, SimpleNamespace(default=None), 42],
    )
    def test_empty_source_raises(self, source: object) -> None:
        with pytest.raises(EmptyTemplateError):
            _ = PromptWeaver(source)

    def test_empty_source_is_configuration_error(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            _ = PromptWeaver("")

    @pytest.mark.parametrize(
        "schema",
        [
            object(),
            {"__standard_schema__": {"version": 1}},
            SimpleNamespace(__standard_schema__={"version": 2, "validate": lambda v: v}),
            SimpleNamespace(__standard_schema__={"version": True, "validate": lambda v: v}),
            SimpleNamespace(__standard_schema__={"version": 1, "validate": "nope"}),
        ],
    )
    def test_invalid_schema_raises(self, schema: object) -> None:
        with pytest.raises(InvalidSchemaError):
            _ = PromptWeaver("Hi", schema=schema)

    def test_syntax_error_raises_compilation_error(self) -> None:
        with pytest.raises(TemplateCompilationError) as exc_info:
            _ = PromptWeaver("line one\n{% if ready %}go")
        assert exc_info.value.line is not None
        assert exc_info.value.source == "line one\n{% if ready %}go"

    def test_invalid_partial_raises_compilation_error(self, scoped_registry: HelperRegistry) -> None:
        with pytest.raises(TemplateCompilationError):
            _ = PromptWeaver(
                "Hi", registry=scoped_registry, partials={"bad": "{% for x in %}"}
            )

    def test_repr_truncates_long_source(self) -> None:
        weaver = PromptWeaver("x" * 100)
        assert repr(weaver) == f"PromptWeaver({'x' * 37 + '...'!r})"


class TestFormat:
    def test_mapping_data(self) -> None:
        assert PromptWeaver("Hello {{ name }}!").format({"name": "Ada"}) == "Hello Ada!"

    def test_keyword_data(self) -> None:
        assert PromptWeaver("Hello {{ name }}!").format(name="Ada") == "Hello Ada!"

    def test_keywords_override_mapping(self) -> None:
        weaver = PromptWeaver("{{ a }}{{ b }}")
        assert weaver.format({"a": 1, "b": 2}, b=3) == "13"

    def test_pydantic_model_data(self) -> None:
        weaver = PromptWeaver("{{ name }} ({{ age }})")
        assert weaver.format(User(name="Ada", age=36)) == "Ada (36)"

    def test_pydantic_model_with_keywords(self) -> None:
        weaver = PromptWeaver("{{ name }} ({{ age }})")
        assert weaver.format(User(name="Ada", age=36), age=37) == "Ada (37)"

    def test_no_data(self) -> None:
        assert PromptWeaver("static [{{ missing }}]").format() == "static []"

    def test_keywords_cannot_merge_into_non_mapping(self) -> None:
        with pytest.raises(TypeError):
            _ = PromptWeaver("{{ this }}").format([1, 2], extra=True)

    def test_nested_paths_and_loops(self) -> None:
        weaver = PromptWeaver(
            "{% for item in order.lines %}{{ item.sku }}:{{ item.qty }} {% endfor %}"
        )
        data = {"order": {"lines": [{"sku": "A", "qty": 1}, {"sku": "B", "qty": 2}]}}
        assert weaver.format(data) == "A:1 B:2 "

    def test_builtin_helpers_available_by_default(self) -> None:
        weaver = PromptWeaver("{{ currency(total) }} / {{ name | upper }}")
        assert weaver.format(total=1234.5, name="ada") == "$1,234.50 / ADA"


class TestSchemaFormatting:
    def test_format_validates_with_schema(self, rejecting_schema: RejectingSchema) -> None:
        weaver = PromptWeaver("Hello {{ name }}", schema=rejecting_schema)
        with pytest.raises(SchemaValidationError) as exc_info:
            _ = weaver.format({})
        assert exc_info.value.vendor == "test"
        assert len(exc_info.value.issues) == 1

    def test_format_renders_transformed_value(self) -> None:
        schema = TransformingSchema(lambda value: {"name": value["name"].upper()})
        weaver = PromptWeaver("Hello {{ name }}", schema=schema)
        assert weaver.format(name="ada") == "Hello ADA"

    def test_non_mapping_output_is_exposed_as_this(self) -> None:
        schema = TransformingSchema(lambda value: [1, 2, 3])
        weaver = PromptWeaver("{% for n in this %}{{ n }}{% endfor %}", schema=schema)
        assert weaver.format({}) == "123"

    def test_pydantic_schema_coerces_data(self) -> None:
        weaver = PromptWeaver("{{ name }} is {{ age + 1 }}", schema=pydantic_schema(User))
        assert weaver.format({"name": "Ada", "age": "36"}) == "Ada is 37"

    def test_async_schema_rejected_by_sync_format(self, async_schema: AsyncSchema) -> None:
        weaver = PromptWeaver("Hello {{ name }}", schema=async_schema)
        with pytest.raises(AsyncValidationError, match="validate_with_schema_async"):
            _ = weaver.format(name="Ada")

    @pytest.mark.asyncio
    async def test_format_async_awaits_schema(self, async_schema: AsyncSchema) -> None:
        weaver = PromptWeaver("Hello {{ name }}", schema=async_schema)
        assert await weaver.format_async(name="Ada") == "Hello Ada"

    @pytest.mark.asyncio
    async def test_format_async_raises_on_issues(self, async_schema: AsyncSchema) -> None:
        weaver = PromptWeaver("Hello {{ name }}", schema=async_schema)
        with pytest.raises(SchemaValidationError):
            _ = await weaver.format_async({})

    @pytest.mark.asyncio
    async def test_format_async_without_schema(self) -> None:
        assert await PromptWeaver("{{ a }}").format_async(a=1) == "1"

    def test_format_with_schema_requires_schema(self) -> None:
        with pytest.raises(SchemaNotConfiguredError):
            _ = PromptWeaver("Hi").format_with_schema({})

    def test_format_with_schema(self, passthrough_schema: PassthroughSchema) -> None:
        weaver = PromptWeaver("Hi {{ name }}", schema=passthrough_schema)
        assert weaver.format_with_schema(name="Ada") == "Hi Ada"

    def test_try_format_returns_none_on_validation_failure(
        self, rejecting_schema: RejectingSchema
    ) -> None:
        weaver = PromptWeaver("Hi {{ name }}", schema=rejecting_schema)
        assert weaver.try_format_with_schema({"name": "Ada"}) is None

    def test_try_format_returns_text_on_success(self, passthrough_schema: PassthroughSchema) -> None:
        weaver = PromptWeaver("Hi {{ name }}", schema=passthrough_schema)
        assert weaver.try_format_with_schema({"name": "Ada"}) == "Hi Ada"

    def test_try_format_reraises_render_errors(self, passthrough_schema: PassthroughSchema) -> None:
        weaver = PromptWeaver("{{ helper_that_does_not_exist(name) }}", schema=passthrough_schema)
        with pytest.raises(UndefinedError):
            _ = weaver.try_format_with_schema({"name": "Ada"})

    def test_try_format_requires_schema(self) -> None:
        with pytest.raises(SchemaNotConfiguredError):
            _ = PromptWeaver("Hi").try_format_with_schema({})

    def test_validate_schema(self, passthrough_schema: PassthroughSchema) -> None:
        weaver = PromptWeaver("Hi", schema=passthrough_schema)
        result = weaver.validate_schema({"x": 1})
        assert result.success
        assert result.data == {"x": 1}
        assert result.issues is None

    def test_validate_schema_failure(self, rejecting_schema: RejectingSchema) -> None:
        result = PromptWeaver("Hi", schema=rejecting_schema).validate_schema({})
        assert not result.success
        assert result.data is None
        assert result.issues

    @pytest.mark.asyncio
    async def test_validate_schema_async(self, async_schema: AsyncSchema) -> None:
        weaver = PromptWeaver("Hi", schema=async_schema)
        result = await weaver.validate_schema_async({"name": "Ada"})
        assert result.success
        assert result.vendor == "async-test"


class TestPartials:
    def test_partials_option(self, scoped_registry: HelperRegistry) -> None:
        weaver = PromptWeaver(
            '{% include "signature" %}',
            registry=scoped_registry,
            partials={"signature": "-- {{ author }}"},
        )
        assert weaver.format(author="Ada") == "-- Ada"

    def test_set_partial_replaces(self, scoped_registry: HelperRegistry) -> None:
        weaver = PromptWeaver(
            '[{% include "box" %}]', registry=scoped_registry, partials={"box": "old"}
        )
        weaver.set_partial("box", "new")
        assert weaver.format() == "[new]"

    def test_partial_helper_with_data(self, scoped_registry: HelperRegistry) -> None:
        weaver = PromptWeaver(
            '{{ partial("card", user) }}',
            registry=scoped_registry,
            partials={"card": "{{ name }} <{{ email }}>"},
        )
        result = weaver.format(user={"name": "Ada", "email": "ada@example.com"})
        assert result == "Ada <ada@example.com>"

    def test_partial_helper_uses_caller_data(self, scoped_registry: HelperRegistry) -> None:
        weaver = PromptWeaver(
            '{{ partial("hello") }}', registry=scoped_registry, partials={"hello": "Hi {{ name }}"}
        )
        assert weaver.format(name="Ada") == "Hi Ada"

    def test_unknown_partial_helper_renders_empty(self, scoped_registry: HelperRegistry) -> None:
        weaver = PromptWeaver('[{{ partial("nope") }}]', registry=scoped_registry)
        assert weaver.format() == "[]"

    def test_partials_are_shared_within_a_registry(self, scoped_registry: HelperRegistry) -> None:
        _ = PromptWeaver("Hi", registry=scoped_registry, partials={"footer": "bye"})
        other = PromptWeaver('{% include "footer" %}', registry=scoped_registry)
        assert other.format() == "bye"


class TestRegistryIsolation:
    def test_scoped_helper_not_visible_globally(self, scoped_registry: HelperRegistry) -> None:
        scoped_registry.register("weaver_scoped_shout", lambda value: f"{value}!")

        scoped = PromptWeaver("{{ weaver_scoped_shout(x) }}", registry=scoped_registry)
        assert scoped.format(x="hey") == "hey!"

        unscoped = PromptWeaver("{{ weaver_scoped_shout(x) }}")
        with pytest.raises(UndefinedError):
            _ = unscoped.format(x="hey")

    def test_global_helper_not_visible_in_scoped_registry(
        self, scoped_registry: HelperRegistry
    ) -> None:
        register_helper("weaver_global_only", lambda: "global")
        assert PromptWeaver("{{ weaver_global_only() }}").format() == "global"

        scoped = PromptWeaver("{{ weaver_global_only() }}", registry=scoped_registry)
        with pytest.raises(UndefinedError):
            _ = scoped.format()

    def test_scoped_registries_are_isolated_from_each_other(self) -> None:
        first = HelperRegistry.create_scoped()
        second = HelperRegistry.create_scoped()
        first.register("weaver_pick", lambda: "first")
        second.register("weaver_pick", lambda: "second")

        assert PromptWeaver("{{ weaver_pick() }}", registry=first).format() == "first"
        assert PromptWeaver("{{ weaver_pick() }}", registry=second).format() == "second"

    def test_scoped_registry_still_has_catalog(self, scoped_registry: HelperRegistry) -> None:
        weaver = PromptWeaver("{{ add(1, 2) }}", registry=scoped_registry)
        assert weaver.format() == "3"

    def test_scoped_helper_overrides_catalog(self, scoped_registry: HelperRegistry) -> None:
        scoped_registry.register("add", lambda a, b: "custom")
        weaver = PromptWeaver("{{ add(1, 2) }}", registry=scoped_registry)
        assert weaver.format() == "custom"
        assert PromptWeaver("{{ add(1, 2) }}").format() == "3"


class TestCatalogRegistration:
    def test_registration_is_idempotent(self) -> None:
        register_builtin_helpers()
        register_builtin_helpers()
        assert PromptWeaver("{{ add(1, 2) }}").format() == "3"

    def test_catalog_reaches_default_engine(self) -> None:
        _ = PromptWeaver("Hi")
        assert get_default_engine().has_helper("currency")


class TestCompose:
    def test_compose_with_separator(self) -> None:
        assert PromptWeaver.compose(["X", "Y"], "-") == "X-Y"

    def test_compose_default_separator(self) -> None:
        assert PromptWeaver.compose(["X", "Y"]) == "X\n\nY"

    def test_compose_empty(self) -> None:
        assert PromptWeaver.compose([]) == ""

    def test_compose_and_create(self) -> None:
        weaver = PromptWeaver.compose_and_create(
            ["Hello {{ name }}", "Bye"], separator=" / "
        )
        assert weaver.format(name="Ada") == "Hello Ada / Bye"

    def test_compose_and_create_passes_options(self, rejecting_schema: RejectingSchema) -> None:
        weaver = PromptWeaver.compose_and_create(["{{ a }}", "{{ b }}"], schema=rejecting_schema)
        assert weaver.schema is rejecting_schema

    def test_compose_and_create_empty_raises(self) -> None:
        with pytest.raises(EmptyTemplateError):
            _ = PromptWeaver.compose_and_create([])


class TestTemplateCache:
    def test_clear_and_size(self) -> None:
        PromptWeaver.clear_template_cache()
        assert PromptWeaver.template_cache_size() == 0

        _ = PromptWeaver("cache size check {{ a }}", enable_cache=True)
        _ = PromptWeaver("cache size check {{ a }}", enable_cache=True)
        assert PromptWeaver.template_cache_size() == 1

    def test_disabled_cache_adds_nothing(self) -> None:
        PromptWeaver.clear_template_cache()
        _ = PromptWeaver("uncached weaver {{ a }}", enable_cache=False)
        assert PromptWeaver.template_cache_size() == 0

    def test_cached_and_uncached_render_identically(self) -> None:
        source = "{% for x in xs %}{{ x | upper }},{% endfor %}{{ currency(total) }}"
        data = {"xs": ["a", "b"], "total": 3}
        cached = PromptWeaver(source, enable_cache=True)
        uncached = PromptWeaver(source, enable_cache=False)
        assert cached.format(data) == uncached.format(data)
        assert cached.format(data) == cached.format(data)


class TestIntrospection:
    def test_extract_variables(self) -> None:
        weaver = PromptWeaver("{{ user.name }} {% for t in tags %}{{ t }}{% endfor %}")
        assert weaver.extract_variables() == {"user", "tags"}

    def test_infer_shape(self) -> None:
        shape = PromptWeaver("{% for t in tags %}{{ t }}{% endfor %}").infer_shape()
        assert shape["tags"].kind is FieldKind.SEQUENCE
