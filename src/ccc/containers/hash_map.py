"""
Open-addressing hash map with the Entry interface.

Elements live directly in one block of slots; an element's key is derived
with the ``key`` callable given at construction. Collisions probe linearly
and removal shifts the following cluster back, so no tombstones exist and
every Vacant Entry remembers a real insertion slot.

Manifesto:
    - **One probe per logical operation:** ``entry`` finds the slot once;
      ``or_insert`` / ``insert_entry`` reuse it
    - **Load bound:** At most ``max_load_factor`` of the slots are occupied.
      A dynamic map rehashes into a larger block before crossing it; a
      fixed map refuses the insertion (INSERT_ERROR)
    - **Unordered:** Iteration follows slot order, stable between mutations

Examples:
    >>> from ccc import traits
    >>> ages = HashMap(key=lambda person: person[0])
    >>> traits.insert_or_assign(ages, ("ada", 36)).unwrap()
    ('ada', 36)
    >>> e = traits.swap_entry(ages, ("ada", 37))
    >>> e.prior, e.unwrap()
    (('ada', 36), ('ada', 37))
    >>> traits.contains(ages, "ada")
    True
    >>> traits.remove_key_value(ages, "ada").unwrap()
    ('ada', 37)
    >>> traits.contains(ages, "ada")
    False

Tags:
    hash-map, open-addressing, entry, ccc
"""

from __future__ import annotations

import math
from copy import deepcopy
from typing import Any, Callable

from ccc.containers._base import ContainerBase, identity, logger
from ccc.core.errors import AllocationError, ArgumentError, CapacityError
from ccc.core.memory import Allocator, Block, Destructor, run_destructor
from ccc.core.protocols import Capability
from ccc.core.result import Err, Ok, Result
from ccc.core.settings import get_settings
from ccc.framework.entry import Entry
from ccc.framework.registry import register_backend


@register_backend
class HashMap(ContainerBase):
    """Unordered keyed map.

    Args:
        buffer: Caller-owned list of slots for a fixed map.
        key: Derives the (hashable) key of an element.
        allocator: Allocator used to rehash into larger blocks.
        max_load_factor: Overrides the configured load bound.
    """

    capabilities = (
        Capability.ENTRY | Capability.ITERABLE | Capability.MEMORY | Capability.STATE
    )

    def __init__(
        self,
        buffer: Block | None = None,
        *,
        key: Callable[[Any], Any] = identity,
        allocator: Allocator | None = None,
        max_load_factor: float | None = None,
    ):
        super().__init__(buffer, allocator)
        self._block = buffer
        self._key = key
        self._max_load = max_load_factor or get_settings().max_load_factor

    # ── Probing ────────────────────────────────────────────────────

    def _slots(self) -> int:
        return len(self._block) if self._block is not None else 0

    def _fits(self, count: int, slots: int) -> bool:
        return count <= math.floor(slots * self._max_load)

    def _probe(self, key: Any) -> tuple[bool, int | None]:
        """Return ``(found, slot)``; ``slot`` is None only for an empty table."""
        slots = self._slots()
        if slots == 0:
            return False, None
        i = hash(key) % slots
        for _ in range(slots):
            element = self._block[i]
            if element is None:
                return False, i
            if self._key(element) == key:
                return True, i
            i = (i + 1) % slots
        return False, None

    def _place(self, block: Block, element: Any) -> None:
        i = hash(self._key(element)) % len(block)
        while block[i] is not None:
            i = (i + 1) % len(block)
        block[i] = element

    def _rehash(self, slots: int, allocator: Allocator, operation: str) -> bool:
        block = self._resize_block(allocator, None, slots, operation)
        if block is None:
            return False
        for element in self._block or ():
            if element is not None:
                self._place(block, element)
        self._free_block(allocator, self._block)
        self._block = block
        return True

    def _slots_for(self, count: int) -> int:
        slots = max(math.ceil(count / self._max_load), 1)
        while not self._fits(count, slots):
            slots += 1
        return slots

    # ── Entry hooks ────────────────────────────────────────────────

    def _slot_insert(
        self, slot: int | None, key: Any, element: Any
    ) -> tuple[int, Any] | None:
        """Store ``element`` at ``slot``, rehashing first if the load bound requires it."""
        needed = self._count + 1
        if slot is None or not self._fits(needed, self._slots()):
            if self._allocator is None:
                self._capacity_exceeded("insert", needed, self._slots())
                return None
            target = self._grown(self._slots(), self._slots_for(needed))
            if not self._rehash(target, self._allocator, "insert"):
                return None
            _, slot = self._probe(key)
        self._block[slot] = element
        self._count += 1
        self._after_mutation("insert")
        return slot, element

    def _slot_replace(self, slot: int, element: Any) -> Any:
        old = self._block[slot]
        self._block[slot] = element
        return old

    def _slot_remove(self, slot: int) -> Any:
        removed = self._block[slot]
        self._block[slot] = None
        slots = self._slots()
        hole = slot
        i = (slot + 1) % slots
        while self._block[i] is not None:
            home = hash(self._key(self._block[i])) % slots
            # shift back unless the element's home lies cyclically in (hole, i]
            if (i - home) % slots >= (i - hole) % slots:
                self._block[hole] = self._block[i]
                self._block[i] = None
                hole = i
            i = (i + 1) % slots
        self._count -= 1
        self._after_mutation("remove")
        return removed

    # ── Entry interface ────────────────────────────────────────────

    def entry(self, key: Any) -> Entry:
        found, slot = self._probe(key)
        if found:
            return Entry.occupied_at(self, slot, self._block[slot])
        return Entry.vacant_at(self, slot, key)

    def swap_entry(self, element: Any) -> Entry:
        """Insert ``element`` or replace the element with its key."""
        if element is None:
            return Entry.argument_error()
        e = self.entry(self._key(element))
        e.insert_entry(element)
        return e

    insert_or_assign = swap_entry

    def try_insert(self, element: Any) -> Entry:
        if element is None:
            return Entry.argument_error()
        e = self.entry(self._key(element))
        e.or_insert(element)
        return e

    def remove_key_value(self, key: Any) -> Entry:
        return self.entry(key).remove_entry()

    def get_key_value(self, key: Any) -> Any | None:
        found, slot = self._probe(key)
        return self._block[slot] if found else None

    def contains(self, key: Any) -> bool:
        return self._probe(key)[0]

    def __contains__(self, key: Any) -> bool:
        return self.contains(key)

    # ── Iteration (slot order) ─────────────────────────────────────

    def _scan(self, start: int, step: int) -> Any | None:
        i = start
        while 0 <= i < self._slots():
            if self._block[i] is not None:
                return self._block[i]
            i += step
        return None

    def begin(self) -> Any | None:
        return self._scan(0, 1)

    def end(self) -> None:
        return None

    def next(self, cursor: Any) -> Any | None:
        _, slot = self._probe(self._key(cursor))
        return self._scan(slot + 1, 1)

    def reverse_begin(self) -> Any | None:
        return self._scan(self._slots() - 1, -1)

    def reverse_end(self) -> None:
        return None

    def reverse_next(self, cursor: Any) -> Any | None:
        _, slot = self._probe(self._key(cursor))
        return self._scan(slot - 1, -1)

    # ── Memory ─────────────────────────────────────────────────────

    def capacity(self) -> Ok[int]:
        return Ok(self._slots())

    def reserve(self, n: int, allocator: Allocator | None = None) -> Result[None]:
        """Rehash so that ``n`` more insertions stay under the load bound."""
        needed = self._count + n
        if self._fits(needed, self._slots()):
            return Ok(None)
        allocator = allocator if allocator is not None else self._allocator
        if allocator is None:
            self._capacity_exceeded("reserve", needed, self._slots())
            return Err(self._error(
                CapacityError("fixed map cannot grow", requested=needed, capacity=self._slots()),
                "reserve",
            ))
        if not self._rehash(self._slots_for(needed), allocator, "reserve"):
            return Err(self._error(AllocationError("allocator refused reserve"), "reserve"))
        return Ok(None)

    def copy(self, src: HashMap, allocator: Allocator | None = None) -> Result[None]:
        """Deep-copy ``src`` into this map, replacing its contents.

        The copy takes over ``src``'s slot layout and load bound, so both
        maps iterate in the same order. A fixed map must already hold
        exactly as many slots as ``src``. Prior contents are dropped without
        running a destructor.
        """
        if type(src) is not type(self):
            return Err(self._error(
                ArgumentError(f"cannot copy {type(src).__name__} into HashMap"), "copy"
            ))
        if src is self:
            return Ok(None)
        slots = src._slots()
        if slots in (0, self._slots()):
            self.clear()
        else:
            allocator = allocator if allocator is not None else self._allocator
            if allocator is None:
                self._capacity_exceeded("copy", slots, self._slots())
                return Err(self._error(
                    CapacityError(
                        "fixed map cannot take the source's slot layout",
                        requested=slots,
                        capacity=self._slots(),
                    ),
                    "copy",
                ))
            block = self._resize_block(allocator, None, slots, "copy")
            if block is None:
                return Err(self._error(AllocationError("allocator refused copy"), "copy"))
            self._free_block(allocator, self._block)
            self._block = block
        for i in range(slots):
            if src._block[i] is not None:
                self._block[i] = deepcopy(src._block[i])
        self._max_load = src._max_load
        self._count = src._count
        self._after_mutation("copy")
        return Ok(None)

    def clear(self, destructor: Destructor | None = None) -> Result[None]:
        for i in range(self._slots()):
            if self._block[i] is not None:
                run_destructor(destructor, self._block[i])
                self._block[i] = None
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
        logger.debug("container_freed", container="HashMap", released=released)
        return Ok(None)

    # ── State ──────────────────────────────────────────────────────

    def validate(self) -> bool:
        """Every element is reachable from its home slot; keys are unique."""
        slots = self._slots()
        seen = set()
        occupied = 0
        for i in range(slots):
            element = self._block[i]
            if element is None:
                continue
            occupied += 1
            key = self._key(element)
            if key in seen:
                return False
            seen.add(key)
            j = hash(key) % slots
            while j != i:
                if self._block[j] is None:
                    return False
                j = (j + 1) % slots
        return occupied == self._count and self._fits(self._count, slots)


__all__ = ["HashMap"]
