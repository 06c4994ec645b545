"""
Half-open cursor ranges over a container's logical ordering.

A :class:`Range` is a ``(begin, end)`` pair of cursors plus the function
that advances one cursor to the next. ``end`` is exclusive and never
dereferenced. A bounded query that matches nothing yields an empty range
(``begin == end``), never ``None``.

:class:`ReverseRange` walks the same logical ordering backwards. For
``equal_range_reverse(c, lo, hi)`` it visits exactly the elements of
``equal_range(c, lo, hi)``, in descending order.

Examples:
    >>> from ccc import traits
    >>> from ccc.containers import OrderedMap
    >>> m = OrderedMap()
    >>> for k in (1, 3, 5, 6, 9):
    ...     _ = traits.insert_or_assign(m, k)
    >>> list(traits.equal_range(m, 3, 7))
    [3, 5, 6]
    >>> list(traits.equal_range_reverse(m, 3, 7))
    [6, 5, 3]
    >>> traits.equal_range(m, 10, 20).is_empty()
    True
"""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator


@dataclass(frozen=True, slots=True)
class Range:
    """Forward half-open range ``[begin, end)``."""

    begin: Any
    end: Any
    advance: Callable[[Any], Any] = field(repr=False, compare=False)
    deref: Callable[[Any], Any] | None = field(default=None, repr=False, compare=False)
    same: Callable[[Any, Any], bool] = field(default=operator.is_, repr=False, compare=False)

    @classmethod
    def empty(cls) -> Range:
        return cls(None, None, lambda cursor: None)

    def is_empty(self) -> bool:
        return self.same(self.begin, self.end)

    def __iter__(self) -> Iterator[Any]:
        cursor = self.begin
        while cursor is not None and not self.same(cursor, self.end):
            yield cursor
            cursor = self.advance(cursor)

    def values(self) -> Iterator[Any]:
        """Yield elements, resolving handles or nodes where needed."""
        for cursor in self:
            yield cursor if self.deref is None else self.deref(cursor)


@dataclass(frozen=True, slots=True)
class ReverseRange(Range):
    """Reverse half-open range ``[rbegin, rend)``."""


def range_begin(r: Range) -> Any:
    return r.begin


def range_end(r: Range) -> Any:
    return r.end


__all__ = [
    "Range",
    "ReverseRange",
    "range_begin",
    "range_end",
]
