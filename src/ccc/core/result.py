"""
Result envelope for operations that can fail without it being exceptional.

Memory management operations (``reserve``, ``copy``, ``clear_and_free``),
removals of the canonical element (``pop``, ``pop_front``) and state
queries on a possibly invalid container (``count``, ``capacity``) return
``Ok[T]`` on success and ``Err[T]`` carrying a :class:`ContainerError` on
failure. The container is always left in a valid state, so the caller can
inspect the error and carry on.

Manifesto:
    - **Explicit over implicit:** Allocation failure is a value the caller
      must look at, never an abort
    - **Pattern matching:** ``match`` on ``Ok(value)`` / ``Err(error)``
    - **Cheap:** Frozen dataclasses with ``__slots__``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                     Result[T]                                │
        ├──────────────────────────────┬──────────────────────────────┤
        │     Ok[T]                    │     Err[T]                   │
        │ • value: T                   │ • error: Exception           │
        │ • map() / unwrap()           │ • map_err() / unwrap_or()    │
        └──────────────────────────────┴──────────────────────────────┘

Examples:
    >>> from ccc import traits
    >>> from ccc.containers import Buffer
    >>> buf = Buffer()
    >>> match traits.pop_back(buf):
    ...     case Ok(value):
    ...         print(value)
    ...     case Err(error):
    ...         print(error.category.value)
    ABSENCE

Guardrails:
    ❌ DON'T: Call unwrap() on a pop result without checking is_ok()
    ✅ DO: Use unwrap_or() or pattern matching

Tags:
    result-pattern, error-handling, ccc
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from ccc.core.errors import ContainerError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Successful result containing a value.

    Examples:
        >>> Ok(3).map(lambda x: x + 1).unwrap()
        4
    """

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

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value if Ok."""
        return Ok(f(self.value))

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """Transform error if Err (no-op for Ok)."""
        return self

    def and_then(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Chain to another Result-returning function."""
        return f(self.value)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """
    Failed result containing an error.

    ``unwrap()`` raises the contained error; it is meant for tests and for
    callers that have already decided failure is a bug.

    Examples:
        >>> from ccc.core.errors import CapacityError
        >>> Err(CapacityError("full")).unwrap_or(0)
        0
    """

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

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """Transform the error."""
        return Err(f(self.error))

    def and_then(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        if isinstance(self.error, ContainerError):
            return {"ok": False, "error": self.error.to_dict()}
        return {
            "ok": False,
            "error": {
                "error_type": type(self.error).__name__,
                "message": str(self.error),
            },
        }

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]


def from_optional(value: T | None, error: Exception) -> Result[T]:
    """
    Convert an optional value to Result.

    Containers never store ``None``, so ``None`` always means absence here.

    Examples:
        >>> from ccc.core.errors import ContainerEmptyError
        >>> from_optional(None, ContainerEmptyError("empty")).is_err()
        True
    """
    if value is None:
        return Err(error)
    return Ok(value)


__all__ = [
    "Result",
    "Ok",
    "Err",
    "from_optional",
]
