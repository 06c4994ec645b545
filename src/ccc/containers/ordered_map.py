"""
Sorted keyed map over stable nodes, with the Entry and Range interfaces.

Each element sits in its own node, so growth never moves an element and
the Entry interface can hand out the element itself. A parallel list of
keys keeps lookups, insert positions and range bounds at one bisection.

Examples:
    >>> from ccc import traits
    >>> m = OrderedMap()
    >>> for k in (9, 1, 5):
    ...     _ = traits.insert_or_assign(m, k)
    >>> list(m)
    [1, 5, 9]
    >>> list(reversed(m))
    [9, 5, 1]
    >>> traits.next(m, traits.begin(m))
    5

Tags:
    ordered-map, sorted, entry, range, ccc
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Iterator
from typing import Any, Callable

from ccc.containers._base import Node, NodeStorage, identity
from ccc.core.memory import Allocator, Block
from ccc.core.protocols import Capability
from ccc.framework.entry import Entry
from ccc.framework.range import Range, ReverseRange
from ccc.framework.registry import register_backend


@register_backend
class OrderedMap(NodeStorage):
    """Keyed map iterated in ascending key order.

    Args:
        buffer: Caller-owned list of node slots for a fixed map.
        key: Derives the key of an element; keys must be mutually orderable.
        allocator: Allocator for per-node blocks.
    """

    capabilities = (
        Capability.ENTRY
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
        self._key = key
        self._sorted: list[Node] = []
        self._keys: list[Any] = []

    def _find(self, key: Any) -> tuple[bool, int]:
        pos = bisect_left(self._keys, key)
        return pos < len(self._keys) and self._keys[pos] == key, pos

    # ── Entry hooks ────────────────────────────────────────────────

    def _slot_insert(self, pos: int, key: Any, element: Any) -> tuple[int, Any] | None:
        node = Node(element)
        if not self._acquire(node, "insert"):
            return None
        self._sorted.insert(pos, node)
        self._keys.insert(pos, key)
        self._count += 1
        self._after_mutation("insert")
        return pos, element

    def _slot_replace(self, pos: int, element: Any) -> Any:
        node = self._sorted[pos]
        old, node.value = node.value, element
        return old

    def _slot_remove(self, pos: int) -> Any:
        node = self._sorted.pop(pos)
        del self._keys[pos]
        self._count -= 1
        self._release(node)
        self._after_mutation("remove")
        return node.value

    # ── Entry interface ────────────────────────────────────────────

    def entry(self, key: Any) -> Entry:
        found, pos = self._find(key)
        if found:
            return Entry.occupied_at(self, pos, self._sorted[pos].value)
        return Entry.vacant_at(self, pos, key)

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
        found, pos = self._find(key)
        return self._sorted[pos].value if found else None

    def contains(self, key: Any) -> bool:
        return self._find(key)[0]

    def __contains__(self, key: Any) -> bool:
        return self.contains(key)

    # ── Iteration ──────────────────────────────────────────────────

    def _value_at(self, pos: int) -> Any | None:
        if 0 <= pos < len(self._sorted):
            return self._sorted[pos].value
        return None

    def begin(self) -> Any | None:
        return self._value_at(0)

    def end(self) -> None:
        return None

    def next(self, cursor: Any) -> Any | None:
        return self._value_at(bisect_right(self._keys, self._key(cursor)))

    def reverse_begin(self) -> Any | None:
        return self._value_at(len(self._sorted) - 1)

    def reverse_end(self) -> None:
        return None

    def reverse_next(self, cursor: Any) -> Any | None:
        return self._value_at(bisect_left(self._keys, self._key(cursor)) - 1)

    def equal_range(self, lo: Any, hi: Any) -> Range:
        """Elements with ``lo <= key <= hi``, ascending."""
        first = bisect_left(self._keys, lo)
        last = max(bisect_right(self._keys, hi), first)
        return Range(self._value_at(first), self._value_at(last), self.next)

    def equal_range_reverse(self, lo: Any, hi: Any) -> ReverseRange:
        """Elements with ``lo <= key <= hi``, descending."""
        first = bisect_left(self._keys, lo)
        last = max(bisect_right(self._keys, hi), first)
        return ReverseRange(self._value_at(last - 1), self._value_at(first - 1), self.reverse_next)

    # ── Node storage ───────────────────────────────────────────────

    def _nodes(self) -> Iterator[Node]:
        return iter(self._sorted)

    def _reset(self) -> None:
        self._sorted = []
        self._keys = []
        self._count = 0

    def _install(self, nodes: list[Node]) -> None:
        self._sorted = nodes
        self._keys = [self._key(node.value) for node in nodes]
        self._count = len(nodes)

    # ── State ──────────────────────────────────────────────────────

    def validate(self) -> bool:
        """Keys are strictly ascending and match their elements."""
        if not len(self._sorted) == len(self._keys) == self._count:
            return False
        for i, node in enumerate(self._sorted):
            if node._block is None or self._key(node.value) != self._keys[i]:
                return False
            if i and not self._keys[i - 1] < self._keys[i]:
                return False
        return True


__all__ = ["OrderedMap"]
