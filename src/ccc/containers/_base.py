"""Storage plumbing shared by the reference backends.

Every backend is constructed once with its storage discipline:

- ``Backend()``: dynamic, grows through :func:`~ccc.core.memory.std_allocator`
- ``Backend(allocator=fn)``: dynamic, grows through ``fn``
- ``Backend(buffer=slots)``: fixed over the caller's list; never grows
- ``Backend(buffer=slots, allocator=fn)``: starts in the caller's list and
  grows through ``fn``

Array backends keep one block of slots. Node backends (linked list,
priority queue, ordered map) obtain one single-slot block per node from the
allocator, or a free slot of the caller's list when fixed.
"""

from __future__ import annotations

from collections.abc import Iterator
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, ClassVar

from ccc.core.errors import (
    AllocationError,
    ArgumentError,
    CapacityError,
    ContainerError,
    ErrorCategory,
)
from ccc.core.logging import get_logger
from ccc.core.memory import (
    Allocator,
    Block,
    Destructor,
    StorageDiscipline,
    run_destructor,
    std_allocator,
)
from ccc.core.protocols import Capability
from ccc.core.result import Err, Ok, Result
from ccc.core.settings import get_settings

logger = get_logger(__name__)


def identity(element: Any) -> Any:
    return element


@dataclass(eq=False)
class Node:
    """Stable wrapper around one element of a node-based backend.

    A node keeps its identity for as long as its element is resident, so it
    can be handed back to ``erase``, ``extract``, ``splice`` or ``update``.
    """

    value: Any
    _block: Any = field(default=None, repr=False)
    _allocator: Any = field(default=None, repr=False)


class ContainerBase:
    """Common state of every backend: count, allocator, discipline."""

    capabilities: ClassVar[Capability] = Capability.NONE

    def __init__(self, buffer: Block | None = None, allocator: Allocator | None = None):
        if buffer is None and allocator is None:
            allocator = std_allocator
        self._allocator = allocator
        self._borrowed = buffer
        self._count = 0
        self._check_invariants = get_settings().validate_on_mutation

    @property
    def allocator(self) -> Allocator | None:
        return self._allocator

    @property
    def discipline(self) -> StorageDiscipline:
        if self._allocator is None:
            return StorageDiscipline.FIXED
        return StorageDiscipline.DYNAMIC

    # ── Errors and debug checks ────────────────────────────────────

    def _error(self, error: ContainerError, operation: str, **metadata: Any) -> ContainerError:
        return error.with_context(container=type(self).__name__, operation=operation, **metadata)

    def _after_mutation(self, operation: str) -> None:
        if self._check_invariants and not self.validate():
            raise ContainerError(
                f"{type(self).__name__} failed validation after {operation}",
                category=ErrorCategory.INTERNAL,
            ).with_context(container=type(self).__name__, operation=operation)

    def validate(self) -> bool:
        raise NotImplementedError

    # ── Block allocation ───────────────────────────────────────────

    def _resize_block(
        self, allocator: Allocator, block: Block | None, size: int, operation: str
    ) -> Block | None:
        old = len(block) if block is not None else 0
        resized = allocator(block, size)
        if resized is None:
            logger.debug(
                "allocation_failed",
                container=type(self).__name__,
                operation=operation,
                requested=size,
            )
            return None
        logger.debug(
            "buffer_resized",
            container=type(self).__name__,
            operation=operation,
            old=old,
            new=size,
        )
        return resized

    def _free_block(self, allocator: Allocator, block: Block | None) -> None:
        """Free ``block`` unless it is the caller-owned list given at construction."""
        if block is not None and block is not self._borrowed:
            allocator(block, 0)

    def _capacity_exceeded(self, operation: str, needed: int, capacity: int) -> None:
        logger.debug(
            "capacity_exceeded",
            container=type(self).__name__,
            operation=operation,
            needed=needed,
            capacity=capacity,
        )

    @staticmethod
    def _grown(capacity: int, needed: int) -> int:
        return get_settings().grow(capacity, needed)

    # ── State ──────────────────────────────────────────────────────

    def count(self) -> Ok[int]:
        return Ok(self._count)

    def is_empty(self) -> bool:
        return self._count == 0

    def __len__(self) -> int:
        return self._count

    # ── Python iteration over the logical ordering ─────────────────

    def _deref(self, cursor: Any) -> Any:
        return cursor

    def __iter__(self) -> Iterator[Any]:
        cursor = self.begin()
        while cursor is not None:
            yield self._deref(cursor)
            cursor = self.next(cursor)

    def __reversed__(self) -> Iterator[Any]:
        cursor = self.reverse_begin()
        while cursor is not None:
            yield self._deref(cursor)
            cursor = self.reverse_next(cursor)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(count={self._count}, discipline={self.discipline.value})"


class NodeStorage(ContainerBase):
    """Per-node storage: allocator blocks when dynamic, caller slots when fixed."""

    def __init__(self, buffer: Block | None = None, allocator: Allocator | None = None):
        super().__init__(buffer, allocator)
        self._pool = buffer
        self._free = list(range(len(buffer) - 1, -1, -1)) if buffer is not None else []

    def _acquire(self, node: Node, operation: str, allocator: Allocator | None = None) -> bool:
        """Give ``node`` storage. False if none can be had."""
        if allocator is None:
            allocator = self._allocator
        if allocator is not None:
            block = allocator(None, 1)
            if block is None:
                logger.debug(
                    "allocation_failed",
                    container=type(self).__name__,
                    operation=operation,
                    requested=1,
                )
                return False
            block[0] = node
            node._block = block
            node._allocator = allocator
            return True
        if not self._free:
            self._capacity_exceeded(operation, self._count + 1, len(self._pool or ()))
            return False
        slot = self._free.pop()
        self._pool[slot] = node
        node._block = slot
        return True

    def _release(self, node: Node) -> None:
        if isinstance(node._block, int):
            self._pool[node._block] = None
            self._free.append(node._block)
        elif node._block is not None:
            node._allocator(node._block, 0)
        node._block = None
        node._allocator = None

    def capacity(self) -> Ok[int]:
        if self._allocator is None:
            return Ok(len(self._pool or ()))
        return Ok(self._count)

    def _compatible(self, other: NodeStorage) -> bool:
        """Nodes may move between containers that free them the same way."""
        if other is self:
            return True
        return self._allocator is not None and other._allocator is not None

    # ── Memory management shared by node backends ──────────────────

    node_type: ClassVar[type[Node]] = Node

    def _nodes(self) -> Iterator[Node]:
        raise NotImplementedError

    def _reset(self) -> None:
        raise NotImplementedError

    def _install(self, nodes: list[Node]) -> None:
        raise NotImplementedError

    def _drop_all(self, destructor: Destructor | None) -> None:
        for node in list(self._nodes()):
            run_destructor(destructor, node.value)
            self._release(node)
        self._reset()

    def copy(self, src: NodeStorage, allocator: Allocator | None = None) -> Result[None]:
        """Deep-copy ``src`` into this container, replacing its contents.

        Prior contents are released without running a destructor.
        """
        if type(src) is not type(self):
            return Err(self._error(
                ArgumentError(f"cannot copy {type(src).__name__} into {type(self).__name__}"),
                "copy",
            ))
        if src is self:
            return Ok(None)
        if allocator is None and self._allocator is None:
            available = len(self._pool or ())
            if available < src._count:
                self._capacity_exceeded("copy", src._count, available)
                return Err(self._error(
                    CapacityError(
                        "fixed container is too small for the copy",
                        requested=src._count,
                        capacity=available,
                    ),
                    "copy",
                ))
            self._drop_all(None)
        nodes: list[Node] = []
        for value in src._values():
            node = self.node_type(deepcopy(value))
            if not self._acquire(node, "copy", allocator):
                for acquired in nodes:
                    self._release(acquired)
                return Err(self._error(AllocationError("allocator refused a node"), "copy"))
            nodes.append(node)
        if allocator is not None or self._allocator is not None:
            self._drop_all(None)
        self._install(nodes)
        self._after_mutation("copy")
        return Ok(None)

    def _values(self) -> Iterator[Any]:
        return iter(self)

    def clear(self, destructor: Destructor | None = None) -> Result[None]:
        """Run ``destructor`` on every element and release every node."""
        self._drop_all(destructor)
        return Ok(None)

    def clear_and_free(self, destructor: Destructor | None = None) -> Result[None]:
        """Like :meth:`clear`; requires the container's own allocator."""
        if self._allocator is None:
            return Err(self._error(
                AllocationError("container holds no allocator; use clear"),
                "clear_and_free",
            ))
        released = self._count
        self._drop_all(destructor)
        logger.debug("container_freed", container=type(self).__name__, released=released)
        return Ok(None)

__all__ = [
    "identity",
    "Node",
    "ContainerBase",
    "NodeStorage",
]
