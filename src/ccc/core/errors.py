"""
Structured error types for the container trait layer.

Provides a small hierarchy of typed errors carrying a category and a
structured context, so that allocation failures, capacity limits, bad
arguments and missing capabilities can be told apart without parsing
messages.

Errors here are almost never raised. Trait operations report them as
values: an ``Err(CapacityError(...))`` from ``reserve``, an INSERT_ERROR
flag on an Entry, an ``Err(ContainerEmptyError(...))`` from ``pop``. The
one exception is :class:`UnsupportedOperationError`, raised when a trait is
called on a type that never implemented it; that is a programming error, not
a runtime condition.

Manifesto:
    - **Errors as values:** Every recoverable condition travels through the
      operation's own result channel
    - **Categorised:** Absence, allocation, capacity, argument and capability
      failures are distinct kinds
    - **Rich context:** Errors name the container type and the operation

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                       ContainerError                          │
        │                 (category, context, cause)                    │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  ContainerEmptyError   AllocationError     CapacityError      │
        │  (ABSENCE)             (ALLOCATION)        (CAPACITY)         │
        │                                                               │
        │  ArgumentError         UnsupportedOperationError              │
        │  (ARGUMENT)            (CAPABILITY, also a TypeError)         │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> error = CapacityError("fixed buffer is full").with_context(
    ...     container="Buffer", operation="push_back"
    ... )
    >>> error.category
    <ErrorCategory.CAPACITY: 'CAPACITY'>
    >>> error.to_dict()["context"]
    {'container': 'Buffer', 'operation': 'push_back'}

Guardrails:
    ❌ DON'T: Raise CapacityError out of a trait operation
    ✅ DO: Return Err(CapacityError(...)) or set the Entry insert-error flag

    ❌ DON'T: Use ContainerEmptyError for a failed lookup
    ✅ DO: Return a Vacant Entry or None for absence

Tags:
    error-handling, exception-hierarchy, error-context, ccc, traits
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Error categories for container operations.

    Attributes:
        ABSENCE: Queried key or position does not exist, or container empty
        ALLOCATION: The allocator refused or is missing
        CAPACITY: A fixed buffer cannot hold the requested elements
        ARGUMENT: A required container, handle or cursor is invalid
        CAPABILITY: The container type does not implement the operation
        INTERNAL: A structural invariant was found broken
    """

    ABSENCE = "ABSENCE"
    ALLOCATION = "ALLOCATION"
    CAPACITY = "CAPACITY"
    ARGUMENT = "ARGUMENT"
    CAPABILITY = "CAPABILITY"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to a container error.

    Attributes:
        container: Name of the backend type (e.g. ``"HashMap"``)
        operation: Trait name that failed (e.g. ``"reserve"``)
        metadata: Additional key-value pairs (requested size, capacity, ...)
    """

    container: str | None = None
    operation: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result: dict[str, Any] = {}
        for key in ("container", "operation"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class ContainerError(Exception):
    """
    Base exception for all container trait errors.

    Subclasses set ``default_category``. Every instance carries a message,
    a category, an :class:`ErrorContext` and an optional chained cause.

    Examples:
        >>> err = ContainerError("boom")
        >>> err.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> err.with_context(container="HashMap").context.container
        'HashMap'
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

    def with_context(self, **kwargs: Any) -> ContainerError:
        """Add context to this error (fluent API)."""
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
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
# ABSENCE
# =============================================================================


class ContainerEmptyError(ContainerError):
    """Pop or peek on a container that holds no elements."""

    default_category = ErrorCategory.ABSENCE


# =============================================================================
# MEMORY
# =============================================================================


class AllocationError(ContainerError):
    """
    The allocator returned no memory, or no allocator was available.

    The container is left in its prior valid state.
    """

    default_category = ErrorCategory.ALLOCATION


class CapacityError(ContainerError):
    """A fixed-capacity container cannot hold the requested elements."""

    default_category = ErrorCategory.CAPACITY

    def __init__(
        self,
        message: str,
        *,
        requested: int | None = None,
        capacity: int | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.requested = requested
        self.capacity = capacity

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.requested is not None:
            result["requested"] = self.requested
        if self.capacity is not None:
            result["capacity"] = self.capacity
        return result


# =============================================================================
# ARGUMENTS / CAPABILITIES
# =============================================================================


class ArgumentError(ContainerError):
    """A required container, handle, cursor or element was invalid."""

    default_category = ErrorCategory.ARGUMENT


class UnsupportedOperationError(ContainerError, TypeError):
    """
    Trait called on a container type that does not implement it.

    Raised rather than returned: no backend advertised the capability, so
    there is no result channel to report through.
    """

    default_category = ErrorCategory.CAPABILITY

    def __init__(self, operation: str, container: object):
        self.operation = operation
        self.container_type = type(container).__name__
        super().__init__(
            f"{self.container_type} does not implement '{operation}'",
            context=ErrorContext(container=self.container_type, operation=operation),
        )


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, ContainerError):
        return error.category
    if isinstance(error, MemoryError):
        return ErrorCategory.ALLOCATION
    if isinstance(error, (KeyError, IndexError)):
        return ErrorCategory.ABSENCE
    if isinstance(error, (TypeError, ValueError)):
        return ErrorCategory.ARGUMENT
    return ErrorCategory.INTERNAL


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "ContainerError",
    "ContainerEmptyError",
    "AllocationError",
    "CapacityError",
    "ArgumentError",
    "UnsupportedOperationError",
    "categorize_error",
]
