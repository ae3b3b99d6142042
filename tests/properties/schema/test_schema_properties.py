"""Property-based tests for schema validation round-trips."""

from hypothesis import given, strategies as st

from promptweaver.exceptions import SchemaValidationError
from promptweaver.schema import create_safe_parser, parse_with_schema, validate_with_schema
from tests.conftest import PassthroughSchema, RejectingSchema

json_values = st.recursive(
    st.none() | st.booleans() | st.integers() | st.text(max_size=10),
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(st.text(max_size=5), children, max_size=4),
    max_leaves=10,
)


class TestValidationRoundTrip:
    @given(value=json_values)
    def test_accepting_validator_returns_input(self, value: object) -> None:
        result = validate_with_schema(PassthroughSchema(), value)
        assert result.success
        assert result.data == value
        assert result.issues is None

    @given(value=json_values)
    def test_rejecting_validator_reports_issues(self, value: object) -> None:
        result = validate_with_schema(RejectingSchema(), value)
        assert not result.success
        assert result.data is None
        assert result.issues is not None
        assert len(result.issues) >= 1

    @given(value=json_values)
    def test_parse_and_safe_parse_agree(self, value: object) -> None:
        schema = RejectingSchema()
        assert create_safe_parser(schema)(value) is None
        try:
            _ = parse_with_schema(schema, value)
        except SchemaValidationError as exc:
            assert exc.issues
        else:
            raise AssertionError
