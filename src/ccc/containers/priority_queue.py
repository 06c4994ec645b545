"""
Pairing heap of stable nodes.

``push`` returns the element's :class:`HeapNode`. Keep it to adjust the
element later with ``update``, ``increase`` or ``decrease``, or to remove
it directly with ``erase`` or ``extract``; none of these search the heap.

Manifesto:
    - **Heap order:** No node sorts before its parent under the queue's
      ordering; ``validate`` checks exactly this
    - **Cheap promotion:** Moving an element toward the front cuts its
      subtree and melds it with the root in O(1)
    - **Honest direction:** ``increase`` and ``decrease`` trust the caller
      about the direction of change; ``update`` works it out

Architecture:
    ::

                root ─── front()
               /
            child ── sibling ── sibling        child: first child
              /                                 next/prev: sibling links
          child                                 parent: set on every child

        pop():       root removed, children paired left to right,
                     pairs melded right to left
        promote(n):  cut n's subtree, meld with root
        demote(n):   detach n, merge its children back, meld n as a leaf

Examples:
    >>> from ccc import traits
    >>> pq = PriorityQueue()
    >>> nodes = {v: traits.push(pq, v) for v in (5, 3, 8, 1)}
    >>> traits.front(pq).value
    1
    >>> _ = traits.decrease(pq, nodes[8], lambda v: 0)
    >>> traits.front(pq).value
    0
    >>> traits.validate(pq)
    True

Tags:
    priority-queue, pairing-heap, heap, nodes, ccc
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Callable

from ccc.containers._base import Node, NodeStorage, identity
from ccc.core.errors import ArgumentError, ContainerEmptyError
from ccc.core.memory import Allocator, Block, Destructor, run_destructor
from ccc.core.protocols import Capability
from ccc.core.result import Err, Ok, Result
from ccc.framework.registry import register_backend


@dataclass(eq=False)
class HeapNode(Node):
    parent: HeapNode | None = field(default=None, repr=False)
    child: HeapNode | None = field(default=None, repr=False)
    prev: HeapNode | None = field(default=None, repr=False)
    next: HeapNode | None = field(default=None, repr=False)


@register_backend
class PriorityQueue(NodeStorage):
    """Min-ordered (or, with ``max_heap=True``, max-ordered) priority queue.

    Args:
        buffer: Caller-owned list of node slots for a fixed queue.
        key: Derives the priority of an element.
        max_heap: Put the largest priority at the front.
        allocator: Allocator for per-node blocks.
    """

    capabilities = Capability.PRIORITY | Capability.MEMORY | Capability.STATE
    node_type = HeapNode

    def __init__(
        self,
        buffer: Block | None = None,
        *,
        key: Callable[[Any], Any] = identity,
        max_heap: bool = False,
        allocator: Allocator | None = None,
    ):
        super().__init__(buffer, allocator)
        self._key = key
        self._max_heap = max_heap
        self._root: HeapNode | None = None

    def _before(self, a: Any, b: Any) -> bool:
        """True if element ``a`` belongs strictly nearer the front than ``b``."""
        if self._max_heap:
            return self._key(b) < self._key(a)
        return self._key(a) < self._key(b)

    # ── Pairing heap primitives ────────────────────────────────────

    def _meld(self, a: HeapNode | None, b: HeapNode | None) -> HeapNode | None:
        if a is None:
            return b
        if b is None:
            return a
        if self._before(b.value, a.value):
            a, b = b, a
        b.parent, b.prev, b.next = a, None, a.child
        if a.child is not None:
            a.child.prev = b
        a.child = b
        return a

    def _merge_pairs(self, first: HeapNode | None) -> HeapNode | None:
        siblings = []
        node = first
        while node is not None:
            following = node.next
            node.parent = node.prev = node.next = None
            siblings.append(node)
            node = following
        paired = [
            self._meld(siblings[i], siblings[i + 1] if i + 1 < len(siblings) else None)
            for i in range(0, len(siblings), 2)
        ]
        merged = None
        for subtree in reversed(paired):
            merged = self._meld(subtree, merged)
        return merged

    def _cut(self, node: HeapNode) -> None:
        """Detach ``node`` (with its subtree) from its parent's child list."""
        if node.prev is None:
            node.parent.child = node.next
        else:
            node.prev.next = node.next
        if node.next is not None:
            node.next.prev = node.prev
        node.parent = node.prev = node.next = None

    def _detach(self, node: HeapNode) -> None:
        """Remove ``node`` alone; its children stay in the heap."""
        if node is self._root:
            self._root = self._merge_pairs(node.child)
        else:
            self._cut(node)
            self._root = self._meld(self._root, self._merge_pairs(node.child))
        node.child = None

    def _promote(self, node: HeapNode) -> None:
        if node is not self._root:
            self._cut(node)
            self._root = self._meld(self._root, node)

    def _demote(self, node: HeapNode) -> None:
        self._detach(node)
        self._root = self._meld(self._root, node)

    # ── Priority operations ────────────────────────────────────────

    def push(self, element: Any) -> HeapNode | None:
        """Insert ``element``; returns its node, ``None`` if no node could be had."""
        if element is None:
            return None
        node = HeapNode(element)
        if not self._acquire(node, "push"):
            return None
        self._root = self._meld(self._root, node)
        self._count += 1
        self._after_mutation("push")
        return node

    def front(self) -> HeapNode | None:
        return self._root

    def pop(self) -> Result[Any]:
        if self._root is None:
            return Err(self._error(ContainerEmptyError("priority queue is empty"), "pop"))
        node = self._root
        self._detach(node)
        self._count -= 1
        self._release(node)
        self._after_mutation("pop")
        return Ok(node.value)

    def update(self, node: HeapNode, fn: Callable[[Any], Any]) -> HeapNode | None:
        """Set ``node.value`` to ``fn(node.value)`` and restore heap order."""
        if node is None:
            return None
        old, node.value = node.value, fn(node.value)
        if self._before(node.value, old):
            self._promote(node)
        elif self._before(old, node.value):
            self._demote(node)
        self._after_mutation("update")
        return node

    def increase(self, node: HeapNode, fn: Callable[[Any], Any]) -> HeapNode | None:
        """:meth:`update` for a priority the caller knows does not shrink."""
        if node is None:
            return None
        node.value = fn(node.value)
        if self._max_heap:
            self._promote(node)
        else:
            self._demote(node)
        self._after_mutation("increase")
        return node

    def decrease(self, node: HeapNode, fn: Callable[[Any], Any]) -> HeapNode | None:
        """:meth:`update` for a priority the caller knows does not grow."""
        if node is None:
            return None
        node.value = fn(node.value)
        if self._max_heap:
            self._demote(node)
        else:
            self._promote(node)
        self._after_mutation("decrease")
        return node

    def erase(self, node: HeapNode, destructor: Destructor | None = None) -> Result[None]:
        """Remove ``node``, run ``destructor`` on its element, free the node."""
        if node is None:
            return Err(self._error(ArgumentError("node is required"), "erase"))
        self._detach(node)
        self._count -= 1
        run_destructor(destructor, node.value)
        self._release(node)
        self._after_mutation("erase")
        return Ok(None)

    def extract(self, node: HeapNode) -> HeapNode | None:
        """Remove ``node`` and hand it to the caller; nothing is freed."""
        if node is None:
            return None
        self._detach(node)
        self._count -= 1
        self._after_mutation("extract")
        return node

    # ── Node storage ───────────────────────────────────────────────

    def _nodes(self) -> Iterator[HeapNode]:
        stack = [self._root] if self._root is not None else []
        while stack:
            node = stack.pop()
            yield node
            child = node.child
            while child is not None:
                stack.append(child)
                child = child.next

    def __iter__(self) -> Iterator[Any]:
        """Elements in heap (not sorted) order."""
        return (node.value for node in self._nodes())

    __reversed__ = None

    def _reset(self) -> None:
        self._root = None
        self._count = 0

    def _install(self, nodes: list[HeapNode]) -> None:
        self._reset()
        for node in nodes:
            self._root = self._meld(self._root, node)
        self._count = len(nodes)

    # ── State ──────────────────────────────────────────────────────

    def validate(self) -> bool:
        """Every node is at or behind its parent and every link is mutual."""
        root = self._root
        if root is None:
            return self._count == 0
        if root.parent is not None or root.prev is not None or root.next is not None:
            return False
        seen = 0
        for node in self._nodes():
            seen += 1
            prev = None
            child = node.child
            while child is not None:
                if child.parent is not node or child.prev is not prev:
                    return False
                if self._before(child.value, node.value):
                    return False
                prev, child = child, child.next
        return seen == self._count


__all__ = ["HeapNode", "PriorityQueue"]
