"""Expose pydantic models and types through the standard schema protocol."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import TypeAdapter, ValidationError

from ._models import STANDARD_SCHEMA_VERSION, SchemaIssue, StandardResult

PYDANTIC_VENDOR = "pydantic"


@dataclass(frozen=True, slots=True)
class StandardSchemaProps:
    """The ``__standard_schema__`` payload."""

    validate: Callable[[object], StandardResult]
    vendor: str
    version: int = STANDARD_SCHEMA_VERSION


class PydanticSchema:
    """Standard schema wrapper around a pydantic ``TypeAdapter``.

    Example:
        class User(BaseModel):
            name: str

        weaver = PromptWeaver("Hi {{ name }}", schema=pydantic_schema(User))
    """

    def __init__(self, target: Any) -> None:  # pyright: ignore[reportExplicitAny]
        self.target: Any = target  # pyright: ignore[reportExplicitAny]
        self._adapter: TypeAdapter[Any] = TypeAdapter(target)  # pyright: ignore[reportExplicitAny]
        self.__standard_schema__: StandardSchemaProps = StandardSchemaProps(
            validate=self._validate, vendor=PYDANTIC_VENDOR
        )

    def _validate(self, value: object) -> StandardResult:
        try:
            validated = self._adapter.validate_python(value)
        except ValidationError as exc:
            issues = [
                SchemaIssue(message=error["msg"], path=tuple(error["loc"]))
                for error in exc.errors()
            ]
            return StandardResult(issues=issues)
        return StandardResult(value=validated)

    def __repr__(self) -> str:
        return f"PydanticSchema({self.target!r})"


def pydantic_schema(target: Any) -> PydanticSchema:  # pyright: ignore[reportExplicitAny]
    """Wrap a pydantic model (or any type pydantic can validate) as a schema."""
    return PydanticSchema(target)
