"""
Canonical capability protocols for container backends.

This module is the single source of truth for what each capability means.
A backend advertises a set of :class:`Capability` flags; the trait registry
checks at class-registration time that every required operation of every
advertised capability is present, and static type checkers can check call
sites against the structural protocols below.

Manifesto:
    Protocols define contracts without inheritance. Backends do not subclass
    anything from here; they only need the right shape.

    - **Decoupling:** Trait code depends on shape, not implementation
    - **Static checking:** A call site typed ``EntryContainer`` cannot pass
      a ``DoublyLinkedList``
    - **Registration check:** The runtime counterpart of that guarantee lives
      in :func:`ccc.framework.registry.register_backend`

Architecture:
    ::

        protocols.py (YOU ARE HERE)
        ├── Capability           - flag set a backend advertises
        ├── EntryContainer       - keyed, reference-returning
        ├── HandleContainer      - keyed, handle-returning
        ├── IterableContainer    - begin/end/next and reverse
        ├── RangeContainer       - equal_range / equal_range_reverse
        ├── SequenceContainer    - push_back/pop_back/front/back
        ├── PriorityContainer    - push/pop/front/update/increase/decrease
        ├── MemoryManaged        - copy/clear/clear_and_free
        └── Stateful             - count/capacity/is_empty/validate

Performance:
    - Protocol overhead: zero at runtime (structural subtyping)
    - isinstance() checks: enabled via @runtime_checkable

Tags:
    protocol, capability, contracts, ccc
"""

from __future__ import annotations

from enum import Flag, auto
from typing import Any, ClassVar, Protocol, runtime_checkable


class Capability(Flag):
    """Capabilities a backend may advertise."""

    NONE = 0
    ENTRY = auto()
    HANDLE = auto()
    SEQUENCE = auto()
    PRIORITY = auto()
    ITERABLE = auto()
    RANGE = auto()
    MEMORY = auto()
    STATE = auto()


@runtime_checkable
class Container(Protocol):
    """Anything registered with the trait layer."""

    capabilities: ClassVar[Capability]


@runtime_checkable
class EntryContainer(Protocol):
    """Keyed container whose queries yield references to live elements."""

    def entry(self, key: Any) -> Any: ...

    def swap_entry(self, element: Any) -> Any: ...

    def try_insert(self, element: Any) -> Any: ...

    def insert_or_assign(self, element: Any) -> Any: ...

    def remove_key_value(self, key: Any) -> Any: ...

    def get_key_value(self, key: Any) -> Any | None: ...

    def contains(self, key: Any) -> bool: ...


@runtime_checkable
class HandleContainer(Protocol):
    """Keyed container over relocatable storage; queries yield handles."""

    def handle(self, key: Any) -> Any: ...

    def swap_handle(self, element: Any) -> Any: ...

    def try_insert(self, element: Any) -> Any: ...

    def insert_or_assign(self, element: Any) -> Any: ...

    def remove_key_value(self, key: Any) -> Any: ...

    def get_key_value(self, key: Any) -> Any | None: ...

    def contains(self, key: Any) -> bool: ...

    def at(self, handle: int) -> Any | None: ...


@runtime_checkable
class IterableContainer(Protocol):
    """Forward and reverse traversal over the logical ordering."""

    def begin(self) -> Any: ...

    def end(self) -> Any: ...

    def next(self, cursor: Any) -> Any: ...

    def reverse_begin(self) -> Any: ...

    def reverse_end(self) -> Any: ...

    def reverse_next(self, cursor: Any) -> Any: ...


@runtime_checkable
class RangeContainer(Protocol):
    """Bounded sub-range queries under the ordering relation."""

    def equal_range(self, lo: Any, hi: Any) -> Any: ...

    def equal_range_reverse(self, lo: Any, hi: Any) -> Any: ...


@runtime_checkable
class SequenceContainer(Protocol):
    """Positional sequence with at least one open end."""

    def push_back(self, element: Any) -> Any: ...

    def pop_back(self) -> Any: ...

    def front(self) -> Any: ...

    def back(self) -> Any: ...


@runtime_checkable
class PriorityContainer(Protocol):
    """Heap-ordered container with in-place key adjustment."""

    def push(self, element: Any) -> Any: ...

    def pop(self) -> Any: ...

    def front(self) -> Any: ...

    def update(self, node: Any, fn: Any) -> Any: ...

    def increase(self, node: Any, fn: Any) -> Any: ...

    def decrease(self, node: Any, fn: Any) -> Any: ...

    def erase(self, node: Any, destructor: Any = None) -> Any: ...

    def extract(self, node: Any) -> Any: ...


@runtime_checkable
class MemoryManaged(Protocol):
    """Allocator-aware duplication and teardown."""

    def copy(self, src: Any, allocator: Any = None) -> Any: ...

    def clear(self, destructor: Any = None) -> Any: ...

    def clear_and_free(self, destructor: Any = None) -> Any: ...


@runtime_checkable
class Stateful(Protocol):
    """Size and invariant queries."""

    def count(self) -> Any: ...

    def capacity(self) -> Any: ...

    def is_empty(self) -> bool: ...

    def validate(self) -> bool: ...


CAPABILITY_PROTOCOLS: dict[Capability, type] = {
    Capability.ENTRY: EntryContainer,
    Capability.HANDLE: HandleContainer,
    Capability.ITERABLE: IterableContainer,
    Capability.RANGE: RangeContainer,
    Capability.SEQUENCE: SequenceContainer,
    Capability.PRIORITY: PriorityContainer,
    Capability.MEMORY: MemoryManaged,
    Capability.STATE: Stateful,
}


def protocols_for(capabilities: Capability) -> list[type]:
    """Protocols a backend advertising ``capabilities`` must satisfy."""
    return [proto for flag, proto in CAPABILITY_PROTOCOLS.items() if flag & capabilities]


__all__ = [
    "CAPABILITY_PROTOCOLS",
    "protocols_for",
    "Capability",
    "Container",
    "EntryContainer",
    "HandleContainer",
    "IterableContainer",
    "RangeContainer",
    "SequenceContainer",
    "PriorityContainer",
    "MemoryManaged",
    "Stateful",
]
