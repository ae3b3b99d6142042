"""promptweaver exceptions."""

from collections.abc import Sequence
from typing import Any


class PromptWeaverError(Exception):
    """Base exception for promptweaver errors."""


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(PromptWeaverError, ValueError):
    """Raised when the library is misused or misconfigured."""


class EmptyTemplateError(ConfigurationError):
    """Raised when a template source resolves to an empty string."""


class InvalidSchemaError(ConfigurationError):
    """Raised when a schema does not implement the standard schema protocol."""


class SchemaNotConfiguredError(ConfigurationError):
    """Raised when a schema-only operation is called without a schema."""


class ConfigValidationError(ConfigurationError):
    """Raised when settings fail validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source


# =============================================================================
# Template Exceptions
# =============================================================================


class TemplateCompilationError(PromptWeaverError):
    """Raised when a template fails to compile.

    Attributes:
        line: 1-based line number of the failure, when derivable.
        column: 1-based column number of the failure, when derivable.
        source: The template source that failed to compile.
    """

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.message: str = message
        self.line: int | None = line
        self.column: int | None = column
        self.source: str | None = source

    def formatted_message(self) -> str:
        """Render the message with location, surrounding source lines and hints.

        Returns:
            A multi-line message. The offending line is marked with ``>>>``.
        """
        msg = self.message
        if self.line is not None:
            msg += f" (line: {self.line}"
            if self.column is not None:
                msg += f", column: {self.column}"
            msg += ")"

        if self.source is not None and self.line is not None:
            lines = self.source.split("\n")
            index = self.line - 1
            if 0 <= index < len(lines):
                start = max(0, index - 2)
                end = min(len(lines), index + 3)
                context = [
                    f"{'>>> ' if i == index else '    '}{i + 1:>3} | {lines[i]}"
                    for i in range(start, end)
                ]
                msg += "\n\nContext:\n" + "\n".join(context)

        suggestions = self.suggestions()
        if suggestions:
            msg += "\n\nSuggestions:\n" + "\n".join(f"  - {s}" for s in suggestions)

        return msg

    def __str__(self) -> str:
        return self.formatted_message()

    def suggestions(self) -> list[str]:
        """Return advisory hints keyed on the wording of the underlying error."""
        suggestions: list[str] = []
        text = self.message.lower()

        if "closing" in text or "unexpected end" in text or "expected 'end" in text:
            suggestions.append(
                "Check for unclosed block tags ({% if %}, {% for %}, {% with %}, etc.)"
            )
            suggestions.append(
                "Ensure every block has a matching end tag ({% endif %}, {% endfor %}, etc.)"
            )

        if "parse error" in text or "syntax" in text or "unexpected" in text:
            suggestions.append("Verify the template syntax is correct")
            suggestions.append("Check for mismatched brackets or quotes")

        if (
            ("helper" in text or "undefined" in text)
            and ("not found" in text or "undefined" in text)
        ) or ("no filter named" in text or "no test named" in text):
            suggestions.append("Ensure the helper is registered before use")
            suggestions.append("Check for typos in helper names")

        if ("partial" in text or "template" in text) and "not found" in text:
            suggestions.append(
                "Register the partial using set_partial() or the partials option"
            )
            suggestions.append("Check for typos in partial names")

        return suggestions


# =============================================================================
# Schema Exceptions
# =============================================================================


class SchemaValidationError(PromptWeaverError):
    """Raised when data fails schema validation.

    Attributes:
        issues: Every issue reported by the validator.
        vendor: Name of the validation library that produced the issues.
    """

    def __init__(
        self,
        message: str,
        issues: Sequence[Any],  # pyright: ignore[reportExplicitAny]
        vendor: str | None = None,
    ) -> None:
        """Initialize with error message, issues and vendor name."""
        super().__init__(message)
        self.issues: tuple[Any, ...] = tuple(issues)  # pyright: ignore[reportExplicitAny]
        self.vendor: str | None = vendor

    def formatted_message(self) -> str:
        """Render one bullet per issue, prefixed with its dotted path when known."""
        from promptweaver.schema._models import format_issue_path, issue_message  # noqa: PLC0415

        lines: list[str] = []
        for issue in self.issues:
            path = format_issue_path(issue)
            message = issue_message(issue)
            lines.append(f"{path}: {message}" if path else message)
        return "Schema validation failed:\n  - " + "\n  - ".join(lines)


class AsyncValidationError(PromptWeaverError, RuntimeError):
    """Raised when a synchronous validation call receives an awaitable result."""
