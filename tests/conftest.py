"""Shared test fixtures for promptweaver tests."""

from collections.abc import Callable, Mapping
from types import SimpleNamespace

import pytest

from promptweaver.helpers import HelperRegistry


class PassthroughSchema:
    """Accepts everything and returns it unchanged."""

    def __init__(self, vendor: str = "test") -> None:
        self.__standard_schema__ = {
            "version": 1,
            "vendor": vendor,
            "validate": lambda value: {"value": value},
        }


class RejectingSchema:
    """Reports one issue for every input."""

    def __init__(self, message: str = "Required", path: tuple[object, ...] = ("name",)) -> None:
        self.__standard_schema__ = SimpleNamespace(
            version=1,
            vendor="test",
            validate=lambda _value: SimpleNamespace(
                value=None, issues=[{"message": message, "path": list(path)}]
            ),
        )


class TransformingSchema:
    """Applies ``transform`` to the input."""

    def __init__(self, transform: Callable[[object], object]) -> None:
        self.__standard_schema__ = {
            "version": 1,
            "vendor": "test",
            "validate": lambda value: {"value": transform(value)},
        }


class AsyncSchema:
    """Validates through a coroutine; rejects mappings without ``name``."""

    def __init__(self) -> None:
        async def validate(value: object) -> Mapping[str, object]:
            if isinstance(value, Mapping) and "name" in value:
                return {"value": value}
            return {"issues": [{"message": "Required", "path": ["name"]}]}

        self.__standard_schema__ = {"version": 1, "vendor": "async-test", "validate": validate}


@pytest.fixture
def passthrough_schema() -> PassthroughSchema:
    return PassthroughSchema()


@pytest.fixture
def rejecting_schema() -> RejectingSchema:
    return RejectingSchema()


@pytest.fixture
def async_schema() -> AsyncSchema:
    return AsyncSchema()


@pytest.fixture
def scoped_registry() -> HelperRegistry:
    """A fresh registry; templates built with it get their own engine."""
    return HelperRegistry.create_scoped()
