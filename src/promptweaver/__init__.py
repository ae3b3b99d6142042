"""promptweaver: Jinja2 prompt templates with helpers, schemas and a builder.

Example:
    from promptweaver import PromptBuilder, PromptWeaver

    prompt = (
        PromptBuilder()
        .section("Customer", "{{ name }} ({{ tier | upper }})")
        .section("Orders", "{% for o in orders %}- {{ o.id }}: {{ currency(o.total) }}\\n{% endfor %}")
        .to_weaver()
    )
    prompt.format(name="Ada", tier="gold", orders=[{"id": 1, "total": 9.5}])
"""

from promptweaver.exceptions import (
    AsyncValidationError,
    ConfigurationError,
    ConfigValidationError,
    EmptyTemplateError,
    InvalidSchemaError,
    PromptWeaverError,
    SchemaNotConfiguredError,
    SchemaValidationError,
    TemplateCompilationError,
)
from promptweaver.helpers import (
    HelperMetadata,
    HelperRegistry,
    get_global_registry,
    register_builtin_helpers,
    register_helper,
)
from promptweaver.schema import (
    SchemaValidationResult,
    create_safe_parser,
    format_validation_issues,
    is_standard_schema,
    is_validation_success,
    parse_with_schema,
    parse_with_schema_async,
    pydantic_schema,
    validate_with_schema,
    validate_with_schema_async,
)
from promptweaver.templating import (
    PromptBuilder,
    PromptWeaver,
    TemplateMetadata,
    build_data_model,
    extract_variables,
    get_template_metadata,
    infer_template_shape,
    validate_template,
)

__all__ = [
    "AsyncValidationError",
    "ConfigValidationError",
    "ConfigurationError",
    "EmptyTemplateError",
    "HelperMetadata",
    "HelperRegistry",
    "InvalidSchemaError",
    "PromptBuilder",
    "PromptWeaver",
    "PromptWeaverError",
    "SchemaNotConfiguredError",
    "SchemaValidationError",
    "SchemaValidationResult",
    "TemplateCompilationError",
    "TemplateMetadata",
    "build_data_model",
    "create_safe_parser",
    "extract_variables",
    "format_validation_issues",
    "get_global_registry",
    "get_template_metadata",
    "infer_template_shape",
    "is_standard_schema",
    "is_validation_success",
    "parse_with_schema",
    "parse_with_schema_async",
    "pydantic_schema",
    "register_builtin_helpers",
    "register_helper",
    "validate_template",
    "validate_with_schema",
    "validate_with_schema_async",
]
