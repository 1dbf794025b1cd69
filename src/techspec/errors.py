"""
Structured error types for techspec.

Every failure raised by the renderer, the markup converter, the content
loader, or the configuration layer is a TechSpecError subclass. Each error
carries a category, a structured context, and an optional chained cause, so
the CLI can report it and the logger can serialize it without guessing.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                       TechSpecError                           │
        │  (category, context, cause)                                   │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  ValidationError               ConversionError                │
        │  (VALIDATION)                  (CONVERSION)                   │
        │       │                              │                        │
        │  MissingRequiredSectionError   UnknownMarkupConstructError    │
        │  InvalidSectionContentError                                   │
        │  UnknownSectionError                                          │
        │                                                               │
        │  ConfigError          ContentLoadError    TemplateRenderError │
        │  (CONFIG)             (SOURCE)            (TEMPLATE)          │
        │       │                                                       │
        │  InvalidConfigError   StorageError (STORAGE)                  │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> error = MissingRequiredSectionError(["risk", "metrics"])
    >>> error.missing
    ['risk', 'metrics']
    >>> error.to_dict()["category"]
    'VALIDATION'

    >>> error = UnknownMarkupConstructError("<div>", line_number=4)
    >>> error.context.line_number
    4

Guardrails:
    ❌ DON'T: Raise bare ValueError from the renderer
    ✅ DO: Raise the matching TechSpecError subclass

    ❌ DON'T: Swallow the original exception when wrapping
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, error-context, techspec
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable


class ErrorCategory(str, Enum):
    """Standard error categories for classification and reporting."""

    # Input errors
    VALIDATION = "VALIDATION"     # Missing or malformed section content
    SOURCE = "SOURCE"             # Unreadable or unparseable content file

    # Infrastructure errors
    STORAGE = "STORAGE"           # Output file system errors

    # Processing errors
    TEMPLATE = "TEMPLATE"         # Jinja2 template failures
    CONVERSION = "CONVERSION"     # Markup conversion failures

    # Configuration errors
    CONFIG = "CONFIG"             # Invalid settings

    # Internal errors
    INTERNAL = "INTERNAL"         # Bugs, unexpected state
    UNKNOWN = "UNKNOWN"           # Uncategorized errors


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Only fields that are set end up in ``to_dict()``, so the same context
    type serves renderer, converter, and loader errors.

    Attributes:
        section: Section key the error relates to
        line_number: 1-based line number in the converted text
        construct: Markup construct kind being converted
        path: File path being read or written
        metadata: Additional key-value pairs
    """

    section: str | None = None
    line_number: int | None = None
    construct: str | None = None
    path: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["section", "line_number", "construct", "path"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class TechSpecError(Exception):
    """
    Base exception for all techspec errors.

    Subclasses set ``default_category`` so callers rarely pass one
    explicitly.

    Examples:
        >>> error = TechSpecError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> error = TechSpecError("Render failed").with_context(section="risk")
        >>> error.context.section
        'risk'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> TechSpecError:
        """
        Add context to this error (fluent API).

        Usage:
            raise ContentLoadError("Bad YAML").with_context(path="spec.yaml")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(TechSpecError):
    """Section content does not satisfy the document schema."""

    default_category = ErrorCategory.VALIDATION


class MissingRequiredSectionError(ValidationError):
    """
    One or more mandatory sections have no content at render time.

    Raised before any output is produced. ``missing`` lists the keys in
    schema order.
    """

    def __init__(self, missing: Iterable[str], message: str | None = None, **kwargs: Any):
        self.missing = list(missing)
        super().__init__(
            message or f"Missing required section(s): {', '.join(self.missing)}",
            **kwargs,
        )
        if len(self.missing) == 1:
            self.context.section = self.missing[0]

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["missing"] = list(self.missing)
        return result


class InvalidSectionContentError(ValidationError):
    """Supplied content for a section has the wrong shape."""

    def __init__(self, section: str, message: str, **kwargs: Any):
        self.section = section
        super().__init__(f"Invalid content for section '{section}': {message}", **kwargs)
        self.context.section = section


class UnknownSectionError(ValidationError):
    """A section key is not part of the document schema."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Unknown section: {key!r}")
        self.context.section = key


# =============================================================================
# CONVERSION ERRORS
# =============================================================================


class ConversionError(TechSpecError):
    """Markup conversion failure."""

    default_category = ErrorCategory.CONVERSION


class UnknownMarkupConstructError(ConversionError):
    """
    A line matches no rule in the converter's table.

    The converter passes such lines through unchanged unless it runs in
    strict mode, in which case this error propagates.
    """

    def __init__(self, line: str, line_number: int | None = None, construct: str | None = None):
        self.line = line
        self.line_number = line_number
        where = f" at line {line_number}" if line_number is not None else ""
        super().__init__(
            f"Unrecognized markup construct{where}: {line.strip()!r}",
            context=ErrorContext(line_number=line_number, construct=construct),
        )


# =============================================================================
# CONFIGURATION / IO ERRORS
# =============================================================================


class ConfigError(TechSpecError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


class ContentLoadError(TechSpecError):
    """Content file could not be read or parsed."""

    default_category = ErrorCategory.SOURCE


class TemplateRenderError(TechSpecError):
    """A Jinja2 template failed to load or render."""

    default_category = ErrorCategory.TEMPLATE


class StorageError(TechSpecError):
    """Output document could not be written."""

    default_category = ErrorCategory.STORAGE


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, TechSpecError):
        return error.category
    if isinstance(error, OSError):
        return ErrorCategory.SOURCE
    if isinstance(error, ValueError):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TechSpecError",
    "ValidationError",
    "MissingRequiredSectionError",
    "InvalidSectionContentError",
    "UnknownSectionError",
    "ConversionError",
    "UnknownMarkupConstructError",
    "ConfigError",
    "InvalidConfigError",
    "ContentLoadError",
    "TemplateRenderError",
    "StorageError",
    "categorize_error",
]
