"""
Doubly linked list of stable nodes.

Push operations return the new :class:`ListNode`; the node keeps its
identity until it is erased or extracted, so it can be passed back to
``splice``, ``erase`` and ``extract`` directly. Splicing relinks nodes and
never allocates.

Examples:
    >>> from ccc import traits
    >>> a, b = DoublyLinkedList(), DoublyLinkedList()
    >>> for v in (1, 2, 3):
    ...     _ = traits.push_back(a, v)
    >>> moved = traits.front(a)
    >>> traits.splice(b, None, moved, a).is_ok()
    True
    >>> list(a), list(b)
    ([2, 3], [1])
    >>> traits.front(b) is moved
    True

Guardrails:
    ❌ DON'T: Splice between a fixed list and any other list
    ✅ DO: Splice within one list, or between lists that hold allocators

Tags:
    linked-list, sequence, splice, nodes, ccc
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from ccc.containers._base import Node, NodeStorage
from ccc.core.errors import ArgumentError, ContainerEmptyError
from ccc.core.memory import Allocator, Block, Destructor, run_destructor
from ccc.core.protocols import Capability
from ccc.core.result import Err, Ok, Result
from ccc.framework.registry import register_backend


@dataclass(eq=False)
class ListNode(Node):
    prev: ListNode | None = field(default=None, repr=False)
    next: ListNode | None = field(default=None, repr=False)


@register_backend
class DoublyLinkedList(NodeStorage):
    """Positional sequence open at both ends.

    Args:
        buffer: Caller-owned list of node slots for a fixed list.
        allocator: Allocator for per-node blocks.
    """

    capabilities = (
        Capability.SEQUENCE | Capability.ITERABLE | Capability.MEMORY | Capability.STATE
    )
    node_type = ListNode

    def __init__(self, buffer: Block | None = None, *, allocator: Allocator | None = None):
        super().__init__(buffer, allocator)
        self._head: ListNode | None = None
        self._tail: ListNode | None = None

    # ── Linking ────────────────────────────────────────────────────

    def _link_before(self, pos: ListNode | None, node: ListNode) -> None:
        """Link ``node`` before ``pos``; ``None`` means at the end."""
        if pos is None:
            node.prev, node.next = self._tail, None
            if self._tail is None:
                self._head = node
            else:
                self._tail.next = node
            self._tail = node
        else:
            node.prev, node.next = pos.prev, pos
            if pos.prev is None:
                self._head = node
            else:
                pos.prev.next = node
            pos.prev = node
        self._count += 1

    def _unlink(self, node: ListNode) -> None:
        if node.prev is None:
            self._head = node.next
        else:
            node.prev.next = node.next
        if node.next is None:
            self._tail = node.prev
        else:
            node.next.prev = node.prev
        node.prev = node.next = None
        self._count -= 1

    def _run(self, first: ListNode | None, last: ListNode | None) -> list[ListNode]:
        run = []
        node = first
        while node is not None and node is not last:
            run.append(node)
            node = node.next
        return run

    # ── Sequence ───────────────────────────────────────────────────

    def _push(self, pos: ListNode | None, element: Any, operation: str) -> ListNode | None:
        if element is None:
            return None
        node = ListNode(element)
        if not self._acquire(node, operation):
            return None
        self._link_before(pos, node)
        self._after_mutation(operation)
        return node

    def push_back(self, element: Any) -> ListNode | None:
        return self._push(None, element, "push_back")

    def push_front(self, element: Any) -> ListNode | None:
        return self._push(self._head, element, "push_front")

    def _pop(self, node: ListNode | None, operation: str) -> Result[Any]:
        if node is None:
            return Err(self._error(ContainerEmptyError("list is empty"), operation))
        self._unlink(node)
        self._release(node)
        self._after_mutation(operation)
        return Ok(node.value)

    def pop_back(self) -> Result[Any]:
        return self._pop(self._tail, "pop_back")

    def pop_front(self) -> Result[Any]:
        return self._pop(self._head, "pop_front")

    def front(self) -> ListNode | None:
        return self._head

    def back(self) -> ListNode | None:
        return self._tail

    def splice(
        self, pos: ListNode | None, node: ListNode, src: DoublyLinkedList | None = None
    ) -> Result[None]:
        """Move ``node`` from ``src`` (default: this list) to before ``pos``."""
        src = self if src is None else src
        if node is None or not self._compatible(src):
            return Err(self._error(ArgumentError("node cannot be spliced here"), "splice"))
        if node is pos:
            return Ok(None)
        src._unlink(node)
        self._link_before(pos, node)
        src._after_mutation("splice")
        self._after_mutation("splice")
        return Ok(None)

    def splice_range(
        self,
        pos: ListNode | None,
        first: ListNode,
        last: ListNode | None,
        src: DoublyLinkedList | None = None,
    ) -> Result[None]:
        """Move ``[first, last)`` of ``src`` to before ``pos``, keeping their order."""
        src = self if src is None else src
        if first is None or not self._compatible(src):
            return Err(self._error(ArgumentError("range cannot be spliced here"), "splice_range"))
        run = src._run(first, last)
        if src is self and pos is not None and any(node is pos for node in run):
            return Err(self._error(
                ArgumentError("destination lies inside the spliced range"), "splice_range"
            ))
        for node in run:
            src._unlink(node)
            self._link_before(pos, node)
        src._after_mutation("splice_range")
        self._after_mutation("splice_range")
        return Ok(None)

    # ── Direct removal ─────────────────────────────────────────────

    def erase(self, node: ListNode, destructor: Destructor | None = None) -> Result[None]:
        """Unlink ``node``, run ``destructor`` on its element, free the node."""
        if node is None:
            return Err(self._error(ArgumentError("node is required"), "erase"))
        self._unlink(node)
        run_destructor(destructor, node.value)
        self._release(node)
        self._after_mutation("erase")
        return Ok(None)

    def extract(self, node: ListNode) -> ListNode | None:
        """Unlink ``node`` and hand it to the caller; nothing is freed."""
        if node is None:
            return None
        self._unlink(node)
        self._after_mutation("extract")
        return node

    def extract_range(self, first: ListNode, last: ListNode | None) -> list[ListNode] | None:
        """Unlink ``[first, last)`` and hand the nodes to the caller in order."""
        if first is None:
            return None
        run = self._run(first, last)
        for node in run:
            self._unlink(node)
        self._after_mutation("extract_range")
        return run

    # ── Iteration ──────────────────────────────────────────────────

    def _deref(self, cursor: ListNode) -> Any:
        return cursor.value

    def begin(self) -> ListNode | None:
        return self._head

    def end(self) -> None:
        return None

    def next(self, cursor: ListNode) -> ListNode | None:
        return cursor.next

    def reverse_begin(self) -> ListNode | None:
        return self._tail

    def reverse_end(self) -> None:
        return None

    def reverse_next(self, cursor: ListNode) -> ListNode | None:
        return cursor.prev

    # ── Node storage ───────────────────────────────────────────────

    def _nodes(self) -> Iterator[ListNode]:
        node = self._head
        while node is not None:
            yield node
            node = node.next

    def _reset(self) -> None:
        self._head = self._tail = None
        self._count = 0

    def _install(self, nodes: list[ListNode]) -> None:
        self._reset()
        for node in nodes:
            self._link_before(None, node)

    # ── State ──────────────────────────────────────────────────────

    def validate(self) -> bool:
        """Links agree in both directions and the count matches."""
        seen = 0
        prev = None
        node = self._head
        while node is not None:
            if node.prev is not prev or seen > self._count:
                return False
            seen += 1
            prev, node = node, node.next
        return prev is self._tail and seen == self._count


__all__ = ["ListNode", "DoublyLinkedList"]
