import pytest

from promptweaver.templating import TemplateEngine


@pytest.fixture
def engine() -> TemplateEngine:
    engine = TemplateEngine()
    engine.register_partial("card", "{{ name }}")
    engine.register_partial("item", "<{{ this }}>")
    return engine


class TestPartialHelper:
    def test_renders_with_mapping(self, engine: TemplateEngine) -> None:
        assert engine.render('{{ partial("card", user) }}', {"user": {"name": "Ada"}}) == "Ada"

    def test_defaults_to_caller_data(self, engine: TemplateEngine) -> None:
        assert engine.render('{{ partial("card") }}', {"name": "Grace"}) == "Grace"

    def test_non_mapping_data_is_this(self, engine: TemplateEngine) -> None:
        source = '{% for x in xs %}{{ partial("item", x) }}{% endfor %}'
        assert engine.render(source, {"xs": [1, 2]}) == "<1><2>"

    def test_unknown_partial_is_empty(self, engine: TemplateEngine) -> None:
        assert engine.render('[{{ partial("missing") }}]') == "[]"

    def test_non_string_name_is_empty(self, engine: TemplateEngine) -> None:
        assert engine.render("[{{ partial(42) }}]") == "[]"

    def test_usable_as_filter(self, engine: TemplateEngine) -> None:
        assert engine.render('{{ "card" | partial(user) }}', {"user": {"name": "Ada"}}) == "Ada"


class TestIncludeHelper:
    def test_include_with_data(self, engine: TemplateEngine) -> None:
        assert engine.render('{{ include("card", {"name": "Linus"}) }}') == "Linus"


class TestCatalogInTemplates:
    @pytest.mark.parametrize(
        ("source", "data", "expected"),
        [
            ("{{ total | currency }}", {"total": 1234.5}, "$1,234.50"),
            ("{{ add(a, b) }}", {"a": "2", "b": 3}, "5"),
            ("{{ divide(1, 0) }}", {}, "0"),
            ("{% if gt(count, 1) %}many{% endif %}", {"count": 2}, "many"),
            ("{{ and_(a, b) }}", {"a": 1, "b": 0}, "False"),
            ("{{ switch(s, {'on': 'yes'}, 'no') }}", {"s": "on"}, "yes"),
            ("{{ join(map(users, 'name'), '/') }}", {"users": [{"name": "a"}, {"name": "b"}]}, "a/b"),
            ("{{ deep_get(data, 'a.0.b') }}", {"data": {"a": [{"b": "deep"}]}}, "deep"),
            ("{{ format_date(d, 'MMMM D, YYYY') }}", {"d": "2024-01-15T10:30:00Z"}, "January 15, 2024"),
            ("{{ title | slugify }}", {"title": "Hello World!"}, "hello-world"),
            ("{{ pluralize('box', n) }}", {"n": 2}, "boxes"),
            ("{{ is_defined(missing) }}", {}, "False"),
            ("{{ default(missing, 'fallback') }}", {}, "fallback"),
            ("{{ length(items) }}", {"items": [1, 2, 3]}, "3"),
        ],
    )
    def test_renders(self, engine: TemplateEngine, source: str, data: dict[str, object], expected: str) -> None:
        assert engine.render(source, data) == expected

    def test_jinja_filter_names_keep_jinja_behaviour(self, engine: TemplateEngine) -> None:
        assert engine.render("{{ 'abc' | truncate(5) }}") == "abc"
        assert engine.render("{{ truncate('abcdefghij', 5) }}") == "ab..."
