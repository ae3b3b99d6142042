from pydantic import BaseModel

from promptweaver.schema import (
    format_validation_issues,
    is_standard_schema,
    pydantic_schema,
    validate_with_schema,
)
from promptweaver.schema._pydantic import PYDANTIC_VENDOR


class Address(BaseModel):
    city: str


class Customer(BaseModel):
    name: str
    age: int
    address: Address


class TestPydanticSchema:
    def test_implements_protocol(self) -> None:
        schema = pydantic_schema(Customer)
        assert is_standard_schema(schema)
        assert schema.__standard_schema__.vendor == PYDANTIC_VENDOR
        assert schema.__standard_schema__.version == 1

    def test_valid_data_is_converted(self) -> None:
        result = validate_with_schema(
            pydantic_schema(Customer),
            {"name": "Ada", "age": "36", "address": {"city": "London"}},
        )
        assert result.success
        assert result.vendor == "pydantic"
        assert isinstance(result.data, Customer)
        assert result.data.age == 36

    def test_invalid_data_reports_paths(self) -> None:
        result = validate_with_schema(
            pydantic_schema(Customer), {"name": "Ada", "age": "old", "address": {}}
        )
        assert not result.success
        assert result.issues is not None
        assert len(result.issues) == 2
        text = format_validation_issues(result.issues)
        assert 'at "age"' in text
        assert 'at "address.city"' in text

    def test_plain_types(self) -> None:
        result = validate_with_schema(pydantic_schema(list[int]), ["1", 2])
        assert result.data == [1, 2]
        failed = validate_with_schema(pydantic_schema(list[int]), ["x"])
        assert not failed.success

    def test_repr(self) -> None:
        assert "Customer" in repr(pydantic_schema(Customer))
