"""Infer the shape of the data a template expects.

Inference never raises for constructs it cannot classify. Every field
carries an explicit :class:`Certainty` instead:

- ``PRECISE``: the template's structure fixes the kind (rendered directly,
  iterated, or accessed by attribute).
- ``APPROXIMATE``: uses conflict, or the source could only be scanned
  lexically.
- ``UNKNOWN``: the value is only passed to helpers, filters or tests.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from jinja2 import Environment
from pydantic import BaseModel, ConfigDict, create_model

from ._analysis import HasSource, extract_variables
from ._references import ITEM, ReferenceRole, VariableReference, collect_references

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

_parser = Environment()


class FieldKind(StrEnum):
    SCALAR = "scalar"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    ANY = "any"


class Certainty(StrEnum):
    PRECISE = "precise"
    APPROXIMATE = "approximate"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class InferredField:
    """Inferred shape of one value.

    Attributes:
        name: Key of the value in its parent (``ITEM`` for sequence items).
        kind: What sort of value the template expects.
        certainty: How firmly the template's usage supports ``kind``.
        fields: Nested fields of a mapping.
        item: Shape of the elements of a sequence, when used.
    """

    name: str
    kind: FieldKind
    certainty: Certainty
    fields: Mapping[str, "InferredField"] = field(  # noqa: UP037
        default_factory=lambda: MappingProxyType({})
    )
    item: "InferredField | None" = None  # noqa: UP037


TemplateShape = Mapping[str, InferredField]


class _FieldBuilder:
    __slots__ = ("certainty", "fields", "item", "kind", "name")

    def __init__(self, name: str) -> None:
        self.name: str = name
        self.kind: FieldKind | None = None
        self.certainty: Certainty = Certainty.UNKNOWN
        self.fields: dict[str, _FieldBuilder] = {}
        self.item: _FieldBuilder | None = None

    def observe(self, kind: FieldKind, certainty: Certainty) -> None:
        if self.kind is None or (self.kind is FieldKind.ANY and kind is not FieldKind.ANY):
            self.kind, self.certainty = kind, certainty
        elif kind is FieldKind.ANY or kind is self.kind:
            return
        elif self.kind is FieldKind.SCALAR:
            # rendered directly and also used structurally
            self.kind, self.certainty = kind, Certainty.APPROXIMATE
        elif kind is not FieldKind.SCALAR:
            # both iterated and accessed by key
            self.kind, self.certainty = FieldKind.ANY, Certainty.APPROXIMATE
        else:
            self.certainty = Certainty.APPROXIMATE

    def child(self, segment: str) -> "_FieldBuilder":  # noqa: UP037
        if segment == ITEM:
            self.observe(FieldKind.SEQUENCE, Certainty.PRECISE)
            if self.item is None:
                self.item = _FieldBuilder(ITEM)
            return self.item
        self.observe(FieldKind.MAPPING, Certainty.PRECISE)
        if segment not in self.fields:
            self.fields[segment] = _FieldBuilder(segment)
        return self.fields[segment]

    def freeze(self) -> InferredField:
        return InferredField(
            name=self.name,
            kind=self.kind or FieldKind.ANY,
            certainty=self.certainty,
            fields=MappingProxyType({k: v.freeze() for k, v in self.fields.items()}),
            item=None if self.item is None else self.item.freeze(),
        )


_ROLE_KINDS = {
    ReferenceRole.VALUE: (FieldKind.SCALAR, Certainty.PRECISE),
    ReferenceRole.ITERATED: (FieldKind.SEQUENCE, Certainty.PRECISE),
    ReferenceRole.MAPPING: (FieldKind.MAPPING, Certainty.PRECISE),
    ReferenceRole.ARGUMENT: (FieldKind.ANY, Certainty.UNKNOWN),
}


def _build_shape(references: list[VariableReference]) -> dict[str, InferredField]:
    roots: dict[str, _FieldBuilder] = {}
    for reference in references:
        node = roots.setdefault(reference.name, _FieldBuilder(reference.name))
        for segment in reference.path:
            node = node.child(segment)
        node.observe(*_ROLE_KINDS[reference.role])
    return {name: builder.freeze() for name, builder in roots.items()}


def infer_template_shape(
    template: "str | HasSource",  # noqa: UP037
    *,
    logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
) -> dict[str, InferredField]:
    """Infer the data shape ``template`` expects, keyed by top-level name.

    Example:
        >>> shape = infer_template_shape(
        ...     "{% for item in cart %}{{ item.sku }}{% endfor %}"
        ... )
        >>> shape["cart"].kind, shape["cart"].item.fields["sku"].kind
        (<FieldKind.SEQUENCE: 'sequence'>, <FieldKind.SCALAR: 'scalar'>)
    """
    source = template if isinstance(template, str) else template.source
    try:
        references, _ = collect_references(_parser.parse(source))
    except Exception:  # noqa: BLE001
        return {
            name: InferredField(name=name, kind=FieldKind.ANY, certainty=Certainty.APPROXIMATE)
            for name in sorted(extract_variables(source, logger=logger))
        }
    return _build_shape(references)


# =============================================================================
# pydantic models
# =============================================================================


def _model_name(prefix: str, key: str) -> str:
    return prefix + "".join(part.capitalize() for part in key.split("_") if part)


def _annotation(inferred: InferredField, model_name: str) -> Any:  # noqa: ANN401  # pyright: ignore[reportExplicitAny]
    match inferred.kind:
        case FieldKind.SCALAR:
            return str | int | float | bool | None
        case FieldKind.MAPPING:
            return _model_for(inferred.fields, model_name)
        case FieldKind.SEQUENCE:
            if inferred.item is None:
                return list[Any]  # pyright: ignore[reportExplicitAny]
            return list[_annotation(inferred.item, f"{model_name}Item")]  # pyright: ignore[reportInvalidTypeForm]
        case _:
            return Any


def _model_for(fields: Mapping[str, InferredField], model_name: str) -> type[BaseModel]:
    definitions: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
        key: (_annotation(value, _model_name(model_name, key)), ...)
        for key, value in fields.items()
        if key.isidentifier() and not key.startswith("_")
    }
    return create_model(  # pyright: ignore[reportCallIssue, reportUnknownVariableType]
        model_name,
        __config__=ConfigDict(extra="allow"),
        **definitions,
    )


def build_data_model(
    template: "str | HasSource",  # noqa: UP037
    name: str = "TemplateData",
) -> type[BaseModel]:
    """Create a pydantic model describing the data ``template`` needs.

    Every inferred top-level variable becomes a required field; extra keys
    are allowed. Wrap the model with :func:`promptweaver.schema.pydantic_schema`
    to validate data before rendering.
    """
    return _model_for(infer_template_shape(template), name)
