"""
Contiguous buffer of elements addressed by index.

The simplest array backend: one block of slots, ``count`` of them in use.
Growth reallocates the block, so raw references are never handed out; push
operations return the element's index, which stays valid across growth and
is resolved with ``at``.

Examples:
    >>> from ccc import traits
    >>> buf = Buffer()
    >>> i = traits.push_back(buf, "x")
    >>> traits.at(buf, i)
    'x'
    >>> traits.pop_back(buf).unwrap()
    'x'
    >>> traits.pop_back(buf).is_err()
    True

    Fixed over a caller-owned list:

    >>> fixed = Buffer([None, None])
    >>> [traits.push_back(fixed, c) for c in "abc"]
    [0, 1, None]

Tags:
    buffer, array, sequence, ccc
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from ccc.containers._base import ContainerBase, logger
from ccc.core.errors import (
    AllocationError,
    ArgumentError,
    CapacityError,
    ContainerEmptyError,
)
from ccc.core.memory import Allocator, Block, Destructor, run_destructor
from ccc.core.protocols import Capability
from ccc.core.result import Err, Ok, Result
from ccc.framework.registry import register_backend


@register_backend
class Buffer(ContainerBase):
    """Index-addressed contiguous storage.

    Args:
        buffer: Caller-owned list of slots. Without ``allocator`` the buffer
            is fixed at ``len(buffer)`` slots.
        count: Number of leading slots of ``buffer`` already holding elements.
        allocator: Allocator used to grow; defaults to the standard
            allocator when no ``buffer`` is given.
    """

    capabilities = (
        Capability.SEQUENCE | Capability.ITERABLE | Capability.MEMORY | Capability.STATE
    )

    def __init__(
        self,
        buffer: Block | None = None,
        *,
        count: int = 0,
        allocator: Allocator | None = None,
    ):
        super().__init__(buffer, allocator)
        if not 0 <= count <= len(buffer or ()):
            raise ValueError(f"count {count} does not fit a buffer of {len(buffer or ())} slots")
        self._block = buffer
        self._count = count

    # ── Access ─────────────────────────────────────────────────────

    def at(self, index: int) -> Any | None:
        if 0 <= index < self._count:
            return self._block[index]
        return None

    def front(self) -> Any | None:
        return self.at(0)

    def back(self) -> Any | None:
        return self.at(self._count - 1)

    # ── Sequence ───────────────────────────────────────────────────

    def _ensure(self, needed: int, operation: str) -> bool:
        capacity = len(self._block) if self._block is not None else 0
        if needed <= capacity:
            return True
        if self._allocator is None:
            self._capacity_exceeded(operation, needed, capacity)
            return False
        block = self._resize_block(
            self._allocator, self._block, self._grown(capacity, needed), operation
        )
        if block is None:
            return False
        self._block = block
        return True

    def push_back(self, element: Any) -> int | None:
        """Append ``element``; returns its index, ``None`` if there is no room."""
        if element is None or not self._ensure(self._count + 1, "push_back"):
            return None
        self._block[self._count] = element
        self._count += 1
        self._after_mutation("push_back")
        return self._count - 1

    def pop_back(self) -> Result[Any]:
        if self._count == 0:
            return Err(self._error(ContainerEmptyError("buffer is empty"), "pop_back"))
        self._count -= 1
        element = self._block[self._count]
        self._block[self._count] = None
        self._after_mutation("pop_back")
        return Ok(element)

    def erase(self, index: int, destructor: Destructor | None = None) -> Result[None]:
        """Remove the element at ``index``, shifting later elements down.

        Indices after ``index`` refer to different elements afterwards.
        """
        if not 0 <= index < self._count:
            return Err(self._error(ArgumentError(f"index {index} is not in use"), "erase"))
        element = self._block[index]
        self._block[index : self._count - 1] = self._block[index + 1 : self._count]
        self._count -= 1
        self._block[self._count] = None
        run_destructor(destructor, element)
        self._after_mutation("erase")
        return Ok(None)

    # ── Iteration ──────────────────────────────────────────────────

    def _deref(self, cursor: int) -> Any:
        return self._block[cursor]

    def begin(self) -> int | None:
        return 0 if self._count else None

    def end(self) -> None:
        return None

    def next(self, cursor: int) -> int | None:
        return cursor + 1 if cursor + 1 < self._count else None

    def reverse_begin(self) -> int | None:
        return self._count - 1 if self._count else None

    def reverse_end(self) -> None:
        return None

    def reverse_next(self, cursor: int) -> int | None:
        return cursor - 1 if cursor > 0 else None

    # ── Memory ─────────────────────────────────────────────────────

    def capacity(self) -> Ok[int]:
        return Ok(len(self._block) if self._block is not None else 0)

    def reserve(self, n: int, allocator: Allocator | None = None) -> Result[None]:
        """Make room for ``n`` more elements with a single (re)allocation."""
        needed = self._count + n
        capacity = self.capacity().unwrap()
        if needed <= capacity:
            return Ok(None)
        allocator = allocator if allocator is not None else self._allocator
        if allocator is None:
            self._capacity_exceeded("reserve", needed, capacity)
            return Err(self._error(
                CapacityError("fixed buffer cannot grow", requested=needed, capacity=capacity),
                "reserve",
            ))
        block = self._resize_block(allocator, self._block, needed, "reserve")
        if block is None:
            return Err(self._error(AllocationError("allocator refused reserve"), "reserve"))
        self._block = block
        return Ok(None)

    def copy(self, src: Buffer, allocator: Allocator | None = None) -> Result[None]:
        """Deep-copy ``src`` into this buffer, replacing its contents.

        Prior contents are overwritten without running a destructor.
        """
        if type(src) is not type(self):
            return Err(self._error(
                ArgumentError(f"cannot copy {type(src).__name__} into Buffer"), "copy"
            ))
        if src is self:
            return Ok(None)
        if src._count > self.capacity().unwrap():
            reserved = self.reserve(src._count - self._count, allocator)
            if reserved.is_err():
                return reserved
        for i in range(src._count):
            self._block[i] = deepcopy(src._block[i])
        for i in range(src._count, self._count):
            self._block[i] = None
        self._count = src._count
        self._after_mutation("copy")
        return Ok(None)

    def clear(self, destructor: Destructor | None = None) -> Result[None]:
        for i in range(self._count):
            run_destructor(destructor, self._block[i])
            self._block[i] = None
        self._count = 0
        return Ok(None)

    def clear_and_free(self, destructor: Destructor | None = None) -> Result[None]:
        if self._allocator is None:
            return Err(self._error(
                AllocationError("buffer holds no allocator; use clear_and_free_reserve"),
                "clear_and_free",
            ))
        return self._free_with(self._allocator, destructor)

    def clear_and_free_reserve(
        self, allocator: Allocator, destructor: Destructor | None = None
    ) -> Result[None]:
        if allocator is None:
            return Err(self._error(
                ArgumentError("an allocator is required"), "clear_and_free_reserve"
            ))
        return self._free_with(allocator, destructor)

    def _free_with(self, allocator: Allocator, destructor: Destructor | None) -> Result[None]:
        released = self._count
        self.clear(destructor)
        self._free_block(allocator, self._block)
        self._block = None
        logger.debug("container_freed", container="Buffer", released=released)
        return Ok(None)

    # ── State ──────────────────────────────────────────────────────

    def validate(self) -> bool:
        block = self._block or []
        if not 0 <= self._count <= len(block):
            return False
        in_use = block[: self._count]
        return all(e is not None for e in in_use) and all(e is None for e in block[self._count :])


__all__ = ["Buffer"]
