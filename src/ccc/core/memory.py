"""
Memory management contract: allocators, destructors, storage discipline.

Every container is constructed with a storage discipline that never changes
afterwards:

- **Fixed:** built over a caller-owned list of slots and no allocator.
  Operations that need more room fail with a capacity error.
- **Dynamic:** holds an allocator and grows or shrinks transparently.

The allocator is a single tri-mode callable. A *block* is a plain Python
list of slots; reallocation returns a new list, which is exactly the
relocation that makes raw slot references unsafe across growth and why
array-backed containers hand out Handles instead.

Architecture:
    ::

        allocate(block, size)
        ┌──────────────┬───────────┬───────────────────────────────┐
        │ block        │ size      │ meaning                        │
        ├──────────────┼───────────┼───────────────────────────────┤
        │ None         │ > 0       │ allocate a fresh block         │
        │ list         │ > 0       │ reallocate (contents copied)   │
        │ list         │ 0         │ free; returns None             │
        │ None         │ 0         │ no-op; returns None            │
        └──────────────┴───────────┴───────────────────────────────┘
        Returning None for a nonzero request signals failure.

Examples:
    >>> block = std_allocator(None, 4)
    >>> len(block)
    4
    >>> std_allocator(block, 0) is None
    True

    Simulating allocation failure:

    >>> limited = TrackingAllocator(limit=2)
    >>> limited(None, 3) is None
    True
    >>> limited.failures
    1

Tags:
    memory, allocator, destructor, storage-discipline, ccc
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, TypeAlias

from ccc.core.logging import get_logger

logger = get_logger(__name__)

Block: TypeAlias = list
Allocator: TypeAlias = Callable[[Block | None, int], Block | None]
Destructor: TypeAlias = Callable[[Any], None]


class StorageDiscipline(str, Enum):
    """Whether a container may resize its own storage."""

    FIXED = "FIXED"
    DYNAMIC = "DYNAMIC"


def std_allocator(block: Block | None, size: int) -> Block | None:
    """Default allocator backed by ordinary Python lists."""
    if size < 0:
        return None
    if block is None:
        if size == 0:
            return None
        return [None] * size
    if size == 0:
        block.clear()
        return None
    resized = block[:size]
    if len(resized) < size:
        resized.extend([None] * (size - len(resized)))
    return resized


@dataclass
class TrackingAllocator:
    """
    Allocator wrapper that counts calls and live slots.

    ``limit`` caps the number of live slots; requests that would exceed it
    fail (return ``None``) without touching the wrapped allocator. Tests use
    it to prove that ``reserve`` prevents reallocation and that teardown
    returns every slot.
    """

    inner: Allocator = std_allocator
    limit: int | None = None
    allocations: int = 0
    reallocations: int = 0
    frees: int = 0
    failures: int = 0
    live_slots: int = 0
    _sizes: dict[int, int] = field(default_factory=dict, repr=False)

    def __call__(self, block: Block | None, size: int) -> Block | None:
        old_size = self._sizes.pop(id(block), 0) if block is not None else 0
        if size == 0:
            if block is not None:
                self.frees += 1
                self.live_slots -= old_size
            return self.inner(block, 0)
        if self.limit is not None and self.live_slots - old_size + size > self.limit:
            if block is not None:
                self._sizes[id(block)] = old_size
            self.failures += 1
            logger.debug(
                "allocation_failed",
                requested=size,
                live_slots=self.live_slots,
                limit=self.limit,
            )
            return None
        result = self.inner(block, size)
        if result is None:
            if block is not None:
                self._sizes[id(block)] = old_size
            self.failures += 1
            return None
        if block is None:
            self.allocations += 1
        else:
            self.reallocations += 1
        self.live_slots += size - old_size
        self._sizes[id(result)] = size
        return result


def run_destructor(destructor: Destructor | None, element: Any) -> None:
    """Invoke ``destructor`` on ``element`` if one was supplied."""
    if destructor is not None:
        destructor(element)


__all__ = [
    "Block",
    "Allocator",
    "Destructor",
    "StorageDiscipline",
    "std_allocator",
    "TrackingAllocator",
    "run_destructor",
]
