"""
Result envelope for consistent success/failure handling.

Provides a typed Result[T] pattern that makes success/failure explicit in the
type system. Operations that sit on a boundary where the caller should decide
how to degrade (loading the configuration, checking every configured
catalogue) return ``Ok[T]`` for success or ``Err[T]`` for failure instead of
raising.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                     Result[T]                               │
        │                    (Type Alias)                             │
        ├─────────────────┬─────────────────┬─────────────────────────┤
        │     Ok[T]       │     Err[T]      │     Utilities           │
        ├─────────────────┼─────────────────┼─────────────────────────┤
        │ • value: T      │ • error: Exc    │ • try_result()          │
        │ • unwrap()      │ • unwrap_or()   │                         │
        └─────────────────┴─────────────────┴─────────────────────────┘

Examples:
    >>> from opac_spine.core.result import Ok, Err, try_result
    >>> Ok(10).unwrap()
    10
    >>> Err(ValueError("boom")).unwrap_or(0)
    0
    >>> try_result(lambda: int("x")).is_err()
    True

Tags:
    result-pattern, error-handling, opac-spine
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar


T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get value or default (always returns value for Ok)."""
        return self.value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """Failed result containing an exception."""

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the error. Use only when you're sure it's Ok."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        """Get default since this is Err."""
        return default

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]


def try_result(
    f: Callable[[], T],
    catch: type[Exception] | tuple[type[Exception], ...] = Exception,
) -> Result[T]:
    """
    Execute a function and wrap its outcome in a Result.

    Args:
        f: Zero-argument callable that may raise
        catch: Exception type(s) converted to Err; anything else propagates

    Returns:
        Ok with the return value, or Err with the caught exception
    """
    try:
        return Ok(f())
    except catch as e:
        return Err(e)


__all__ = [
    "Result",
    "Ok",
    "Err",
    "try_result",
]
