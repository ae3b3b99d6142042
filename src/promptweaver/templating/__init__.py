"""Jinja2-backed templates: engine, facade, builder and introspection.

Example:
    from promptweaver.templating import PromptWeaver

    weaver = PromptWeaver("Hello {{ name }}! You owe {{ currency(amount) }}.")
    weaver.format(name="Ada", amount=12.5)  # "Hello Ada! You owe $12.50."
"""

from ._analysis import TemplateMetadata, extract_variables, get_template_metadata
from ._builder import PromptBuilder
from ._engine import (
    TemplateCache,
    TemplateEngine,
    engine_for_registry,
    get_default_engine,
    get_template_cache,
    source_digest,
)
from ._inference import (
    Certainty,
    FieldKind,
    InferredField,
    TemplateShape,
    build_data_model,
    infer_template_shape,
)
from ._references import ITEM, ReferenceRole, VariableReference, collect_references
from ._validation import TemplateValidationResult, compilation_error, validate_template
from ._weaver import PromptWeaver

__all__ = [
    "ITEM",
    "Certainty",
    "FieldKind",
    "InferredField",
    "PromptBuilder",
    "PromptWeaver",
    "ReferenceRole",
    "TemplateCache",
    "TemplateEngine",
    "TemplateMetadata",
    "TemplateShape",
    "TemplateValidationResult",
    "VariableReference",
    "build_data_model",
    "collect_references",
    "compilation_error",
    "engine_for_registry",
    "extract_variables",
    "get_default_engine",
    "get_template_cache",
    "get_template_metadata",
    "infer_template_shape",
    "source_digest",
    "validate_template",
]
