"""Core primitives: errors, results, memory contract, protocols, settings, logging."""

from ccc.core.defer import Defer, owning
from ccc.core.errors import (
    AllocationError,
    ArgumentError,
    CapacityError,
    ContainerEmptyError,
    ContainerError,
    ErrorCategory,
    ErrorContext,
    UnsupportedOperationError,
    categorize_error,
)
from ccc.core.memory import (
    Allocator,
    Destructor,
    StorageDiscipline,
    TrackingAllocator,
    std_allocator,
)
from ccc.core.protocols import Capability
from ccc.core.result import Err, Ok, Result, from_optional

__all__ = [
    "Defer",
    "owning",
    "ErrorCategory",
    "ErrorContext",
    "ContainerError",
    "ContainerEmptyError",
    "AllocationError",
    "CapacityError",
    "ArgumentError",
    "UnsupportedOperationError",
    "categorize_error",
    "Allocator",
    "Destructor",
    "StorageDiscipline",
    "TrackingAllocator",
    "std_allocator",
    "Capability",
    "Ok",
    "Err",
    "Result",
    "from_optional",
]
