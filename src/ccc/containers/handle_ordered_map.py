"""
Sorted keyed map over one relocatable block, with the Handle interface.

Elements are stored in the slots of a single block that is reallocated as
the map grows, so the map never hands out elements from a query. It hands
out *handles*: slot numbers that stay valid across growth until the
element is removed. Resolve a handle with ``at`` each time it is used.

Slot 0 is never issued, so a handle is always a truthy ``int``.

Architecture:
    ::

        block    [ ∅ | "m" | "c" | ∅ | "x" ]     slots, reallocated on growth
                   0    1     2    3    4
        free     [3]                              vacated slots, reused first
        index    [2, 1, 4]                        handles in key order
        keys     ["c", "m", "x"]                  bisection target

Examples:
    >>> from ccc import traits
    >>> m = HandleOrderedMap()
    >>> h = traits.insert_or_assign(m, "m").unwrap()
    >>> traits.at(m, h)
    'm'
    >>> _ = traits.insert_or_assign(m, "c")
    >>> [traits.at(m, h) for h in traits.equal_range(m, "a", "n")]
    ['c', 'm']

Tags:
    handle, ordered-map, relocatable, range, ccc
"""

from __future__ import annotations

import operator
from bisect import bisect_left, bisect_right
from copy import deepcopy
from typing import Any, Callable

from ccc.containers._base import ContainerBase, identity, logger
from ccc.core.errors import AllocationError, ArgumentError, CapacityError
from ccc.core.memory import Allocator, Block, Destructor, run_destructor
from ccc.core.protocols import Capability
from ccc.core.result import Err, Ok, Result
from ccc.framework.entry import Entry, Handle
from ccc.framework.range import Range, ReverseRange
from ccc.framework.registry import register_backend

_RESERVED = 1


@register_backend
class HandleOrderedMap(ContainerBase):
    """Keyed map addressed by stable handles, iterated in key order.

    Args:
        buffer: Caller-owned list of slots for a fixed map (slot 0 unused).
        key: Derives the key of an element; keys must be mutually orderable.
        allocator: Allocator used to grow the slot block.
    """

    capabilities = (
        Capability.HANDLE
        | Capability.ITERABLE
        | Capability.RANGE
        | Capability.MEMORY
        | Capability.STATE
    )

    def __init__(
        self,
        buffer: Block | None = None,
        *,
        key: Callable[[Any], Any] = identity,
        allocator: Allocator | None = None,
    ):
        super().__init__(buffer, allocator)
        self._block = buffer
        self._key = key
        self._index: list[int] = []
        self._keys: list[Any] = []
        self._free: list[int] = []
        self._next_slot = _RESERVED

    def _slots(self) -> int:
        return len(self._block) if self._block is not None else 0

    def _find(self, key: Any) -> tuple[bool, int]:
        pos = bisect_left(self._keys, key)
        return pos < len(self._keys) and self._keys[pos] == key, pos

    def _grow_to(self, slots: int, allocator: Allocator, operation: str) -> bool:
        block = self._resize_block(allocator, self._block, slots, operation)
        if block is None:
            return False
        self._block = block
        return True

    def _take_slot(self) -> int | None:
        if self._free:
            return self._free.pop()
        if self._next_slot >= self._slots():
            needed = self._next_slot + 1
            if self._allocator is None:
                self._capacity_exceeded("insert", needed, self._slots())
                return None
            if not self._grow_to(self._grown(self._slots(), needed), self._allocator, "insert"):
                return None
        self._next_slot += 1
        return self._next_slot - 1

    # ── Handle hooks ───────────────────────────────────────────────

    def _slot_insert(self, pos: int, key: Any, element: Any) -> tuple[int, int] | None:
        h = self._take_slot()
        if h is None:
            return None
        self._block[h] = element
        self._index.insert(pos, h)
        self._keys.insert(pos, key)
        self._count += 1
        self._after_mutation("insert")
        return pos, h

    def _slot_replace(self, pos: int, element: Any) -> Any:
        h = self._index[pos]
        old, self._block[h] = self._block[h], element
        return old

    def _slot_remove(self, pos: int) -> Any:
        h = self._index.pop(pos)
        del self._keys[pos]
        removed, self._block[h] = self._block[h], None
        self._free.append(h)
        self._count -= 1
        self._after_mutation("remove")
        return removed

    # ── Handle interface ───────────────────────────────────────────

    def at(self, handle: int) -> Any | None:
        if isinstance(handle, int) and _RESERVED <= handle < self._next_slot:
            return self._block[handle]
        return None

    def handle(self, key: Any) -> Handle:
        found, pos = self._find(key)
        if found:
            return Handle.occupied_at(self, pos, self._index[pos])
        return Handle.vacant_at(self, pos, key)

    def swap_handle(self, element: Any) -> Handle:
        """Insert ``element`` or replace the element with its key."""
        if element is None:
            return Handle.argument_error()
        h = self.handle(self._key(element))
        h.insert_handle(element)
        return h

    insert_or_assign = swap_handle

    def try_insert(self, element: Any) -> Handle:
        if element is None:
            return Handle.argument_error()
        h = self.handle(self._key(element))
        h.or_insert(element)
        return h

    def remove_key_value(self, key: Any) -> Entry:
        return self.handle(key).remove_handle()

    def get_key_value(self, key: Any) -> Any | None:
        found, pos = self._find(key)
        return self._block[self._index[pos]] if found else None

    def contains(self, key: Any) -> bool:
        return self._find(key)[0]

    def __contains__(self, key: Any) -> bool:
        return self.contains(key)

    # ── Iteration (cursors are handles) ────────────────────────────

    def _deref(self, cursor: int) -> Any:
        return self._block[cursor]

    def _handle_at(self, pos: int) -> int | None:
        if 0 <= pos < len(self._index):
            return self._index[pos]
        return None

    def begin(self) -> int | None:
        return self._handle_at(0)

    def end(self) -> None:
        return None

    def next(self, cursor: int) -> int | None:
        return self._handle_at(bisect_right(self._keys, self._key(self._block[cursor])))

    def reverse_begin(self) -> int | None:
        return self._handle_at(len(self._index) - 1)

    def reverse_end(self) -> None:
        return None

    def reverse_next(self, cursor: int) -> int | None:
        return self._handle_at(bisect_left(self._keys, self._key(self._block[cursor])) - 1)

    def equal_range(self, lo: Any, hi: Any) -> Range:
        """Handles of elements with ``lo <= key <= hi``, ascending."""
        first = bisect_left(self._keys, lo)
        last = max(bisect_right(self._keys, hi), first)
        return Range(
            self._handle_at(first), self._handle_at(last), self.next,
            deref=self.at, same=operator.eq,
        )

    def equal_range_reverse(self, lo: Any, hi: Any) -> ReverseRange:
        """Handles of elements with ``lo <= key <= hi``, descending."""
        first = bisect_left(self._keys, lo)
        last = max(bisect_right(self._keys, hi), first)
        return ReverseRange(
            self._handle_at(last - 1), self._handle_at(first - 1), self.reverse_next,
            deref=self.at, same=operator.eq,
        )

    # ── Memory ─────────────────────────────────────────────────────

    def capacity(self) -> Ok[int]:
        return Ok(max(self._slots() - _RESERVED, 0))

    def reserve(self, n: int, allocator: Allocator | None = None) -> Result[None]:
        """Make room for ``n`` more elements with a single (re)allocation."""
        available = len(self._free) + max(self._slots() - self._next_slot, 0)
        if n <= available:
            return Ok(None)
        needed = self._next_slot + n - len(self._free)
        allocator = allocator if allocator is not None else self._allocator
        if allocator is None:
            self._capacity_exceeded("reserve", needed, self._slots())
            return Err(self._error(
                CapacityError("fixed map cannot grow", requested=needed, capacity=self._slots()),
                "reserve",
            ))
        if not self._grow_to(needed, allocator, "reserve"):
            return Err(self._error(AllocationError("allocator refused reserve"), "reserve"))
        return Ok(None)

    def copy(self, src: HandleOrderedMap, allocator: Allocator | None = None) -> Result[None]:
        """Deep-copy ``src`` into this map, replacing its contents.

        Prior contents are dropped without running a destructor; handles
        from this map are invalidated, handles from ``src`` are not reused.
        """
        if type(src) is not type(self):
            return Err(self._error(
                ArgumentError(f"cannot copy {type(src).__name__} into HandleOrderedMap"),
                "copy",
            ))
        if src is self:
            return Ok(None)
        needed = src._count + _RESERVED
        if needed > self._slots():
            allocator = allocator if allocator is not None else self._allocator
            if allocator is None:
                self._capacity_exceeded("copy", needed, self._slots())
                return Err(self._error(
                    CapacityError(
                        "fixed map is too small for the copy",
                        requested=needed,
                        capacity=self._slots(),
                    ),
                    "copy",
                ))
            if not self._grow_to(needed, allocator, "copy"):
                return Err(self._error(AllocationError("allocator refused copy"), "copy"))
        self.clear()
        for pos, h in enumerate(src._index, start=_RESERVED):
            self._block[pos] = deepcopy(src._block[h])
            self._index.append(pos)
        self._keys = list(src._keys)
        self._next_slot = needed
        self._count = src._count
        self._after_mutation("copy")
        return Ok(None)

    def clear(self, destructor: Destructor | None = None) -> Result[None]:
        for h in self._index:
            run_destructor(destructor, self._block[h])
            self._block[h] = None
        self._index = []
        self._keys = []
        self._free = []
        self._next_slot = _RESERVED
        self._count = 0
        return Ok(None)

    def clear_and_free(self, destructor: Destructor | None = None) -> Result[None]:
        if self._allocator is None:
            return Err(self._error(
                AllocationError("map holds no allocator; use clear_and_free_reserve"),
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
        logger.debug("container_freed", container="HandleOrderedMap", released=released)
        return Ok(None)

    # ── State ──────────────────────────────────────────────────────

    def validate(self) -> bool:
        """Index is sorted, consistent with the block, and disjoint from the free list."""
        if not len(self._index) == len(self._keys) == self._count:
            return False
        live = set(self._index)
        if len(live) != self._count or live & set(self._free):
            return False
        if self._count + len(self._free) != self._next_slot - _RESERVED:
            return False
        for i, h in enumerate(self._index):
            element = self.at(h)
            if element is None or self._key(element) != self._keys[i]:
                return False
            if i and not self._keys[i - 1] < self._keys[i]:
                return False
        return all(self._block[h] is None for h in self._free)


__all__ = ["HandleOrderedMap"]
