"""
Core primitives shared by the configuration store and the catalogue layer.

- errors: typed error hierarchy
- result: Ok / Err result envelope
- logging: structlog configuration
- settings: environment-driven settings
"""

from opac_spine.core.errors import (
    ConfigError,
    ConfigurationInconsistencyError,
    ConfigurationNotFoundError,
    ConfigurationParseError,
    ErrorCategory,
    ErrorContext,
    OpacError,
    UnknownModeError,
)
from opac_spine.core.logging import LogContext, configure_logging, get_logger
from opac_spine.core.result import Err, Ok, Result
from opac_spine.core.settings import OpacSettings, get_settings

__all__ = [
    "ConfigError",
    "ConfigurationInconsistencyError",
    "ConfigurationNotFoundError",
    "ConfigurationParseError",
    "ErrorCategory",
    "ErrorContext",
    "OpacError",
    "UnknownModeError",
    "LogContext",
    "configure_logging",
    "get_logger",
    "Err",
    "Ok",
    "Result",
    "OpacSettings",
    "get_settings",
]
