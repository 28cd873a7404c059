"""
Structured error types for opac-spine.

Provides a small hierarchy of typed errors with metadata for categorization,
logging and root cause analysis through error chaining.

The split between *structural failures* and *lookup misses* is central to
this package. A catalogue or document type that is simply not configured is
represented by ``None`` and never raised. Everything that indicates a broken
or unreadable configuration is raised as an ``OpacError`` subclass so that
misconfiguration cannot masquerade as "nothing matched".

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                          OpacError                              │
        │                (category, context, cause)                       │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                 │
        │  ConfigError (CONFIG)                                           │
        │       │                                                         │
        │       ├── ConfigurationNotFoundError                            │
        │       ├── ConfigurationParseError (PARSE)                       │
        │       │        └── UnknownModeError                             │
        │       └── ConfigurationInconsistencyError (INTERNAL)            │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    Adding context to an error:

    >>> error = ConfigurationParseError("port is not an integer")
    >>> error.with_context(catalogue="GBV", source_path="/etc/opac.yaml")
    ConfigurationParseError('port is not an integer', category=PARSE)
    >>> error.context.catalogue
    'GBV'

    Chaining errors for root cause:

    >>> try:
    ...     int("eighty")
    ... except ValueError as e:
    ...     raise ConfigurationParseError("bad port", cause=e)
    Traceback (most recent call last):
    ...
    ConfigurationParseError: bad port

Guardrails:
    ❌ DON'T: Raise for a catalogue name that is not configured
    ✅ DO: Return None and let the caller decide how to surface absence

    ❌ DON'T: Swallow the original exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, error-context, opac-spine
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and routing.

    Attributes:
        CONFIG: Missing configuration, invalid settings
        PARSE: Malformed configuration structure or values
        INTERNAL: Bugs, unexpected state
    """

    CONFIG = "CONFIG"
    PARSE = "PARSE"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Attributes:
        catalogue: Title of the catalogue being resolved
        doctype: Title of the document type being resolved
        source_path: Path of the configuration source
        field_path: Dotted path of the offending configuration entry
        metadata: Additional key-value pairs
    """

    catalogue: str | None = None
    doctype: str | None = None
    source_path: str | None = None
    field_path: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["catalogue", "doctype", "source_path", "field_path"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class OpacError(Exception):
    """
    Base exception for all opac-spine errors.

    Every instance carries:
    - **category:** ErrorCategory for classification
    - **context:** ErrorContext with structured metadata
    - **cause:** Optional underlying exception for chaining

    Subclasses set ``default_category`` to provide a sensible default for
    their domain.
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

    def with_context(self, **kwargs: Any) -> OpacError:
        """
        Add context to this error (fluent API).

        Usage:
            raise ConfigurationParseError("bad port").with_context(
                catalogue="GBV",
                field_path="catalogue[0].config.port",
            )
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
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(OpacError):
    """Configuration-related error."""

    default_category = ErrorCategory.CONFIG


class ConfigurationNotFoundError(ConfigError):
    """The configuration source does not exist at first load."""

    def __init__(self, path: str, **kwargs: Any):
        super().__init__(f"Configuration file not found: {path}", **kwargs)
        self.path = path
        self.context.source_path = path


class ConfigurationParseError(ConfigError):
    """The configuration source or one of its entries is malformed."""

    default_category = ErrorCategory.PARSE


class UnknownModeError(ConfigurationParseError):
    """A condition or action names a mode outside the supported vocabulary."""

    def __init__(self, kind: str, mode: str, supported: list[str], **kwargs: Any):
        super().__init__(
            f"Unknown {kind} mode '{mode}'. Supported: {', '.join(supported)}",
            **kwargs,
        )
        self.kind = kind
        self.mode = mode


class ConfigurationInconsistencyError(ConfigError):
    """A title referenced by the configuration cannot be resolved."""

    default_category = ErrorCategory.INTERNAL


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "OpacError",
    "ConfigError",
    "ConfigurationNotFoundError",
    "ConfigurationParseError",
    "UnknownModeError",
    "ConfigurationInconsistencyError",
]
