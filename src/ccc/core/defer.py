"""
Scoped cleanup for containers and anything else that must be released.

:class:`Defer` collects release callbacks and runs them when the ``with``
block exits, on normal exit, early ``return`` or a propagating exception,
in reverse order of registration. :func:`owning` is the common case: tear a
container down with its destructor when the block ends.

Examples:
    >>> from ccc import traits
    >>> from ccc.containers import Buffer
    >>> released = []
    >>> with owning(Buffer(), destructor=released.append) as buf:
    ...     _ = traits.push_back(buf, "a")
    ...     _ = traits.push_back(buf, "b")
    >>> sorted(released)
    ['a', 'b']

    >>> order = []
    >>> with Defer() as defer:
    ...     defer(order.append, "first acquired")
    ...     defer(order.append, "second acquired")
    >>> order
    ['second acquired', 'first acquired']

Tags:
    defer, cleanup, context-manager, ccc
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import ExitStack, contextmanager
from typing import Any, Callable, TypeVar

from ccc.core.memory import Allocator, Destructor

C = TypeVar("C")


class Defer:
    """Collects release callbacks; runs them in reverse on scope exit."""

    def __init__(self) -> None:
        self._stack = ExitStack()

    def __call__(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> None:
        """Schedule ``fn(*args, **kwargs)`` for scope exit."""
        self._stack.callback(fn, *args, **kwargs)

    def __enter__(self) -> Defer:
        self._stack.__enter__()
        return self

    def __exit__(self, *exc_info: Any) -> bool:
        return self._stack.__exit__(*exc_info)


@contextmanager
def owning(
    container: C,
    destructor: Destructor | None = None,
    *,
    allocator: Allocator | None = None,
) -> Iterator[C]:
    """Yield ``container`` and tear it down when the block exits.

    With ``allocator`` the container is released through
    ``clear_and_free_reserve`` (a container whose buffer came from
    ``reserve``). Otherwise ``clear_and_free`` is used, falling back to
    ``clear`` for fixed containers that hold no allocator.
    """
    from ccc import traits

    try:
        yield container
    finally:
        if allocator is not None:
            traits.clear_and_free_reserve(container, allocator, destructor)
        elif traits.clear_and_free(container, destructor).is_err():
            traits.clear(container, destructor)


__all__ = [
    "Defer",
    "owning",
]
