"""
ccc: one operation vocabulary over many container backends.

Manifesto:
    Hash tables, ordered maps, flat arrays, linked lists and priority queues
    disagree about almost everything: whether elements move when storage
    grows, whether membership is sorted, whether the buffer may grow at all.
    ``ccc`` puts them behind a single vocabulary (query, insert, remove,
    iterate, manage memory) with one precise contract per operation.

    - **One explicit import:** ``from ccc import traits`` holds every short
      operation name; nothing is injected into other namespaces
    - **Errors as values:** Absence, allocation failure and bad arguments
      come back through the operation's own result
    - **Checked at registration:** A backend that advertises a capability
      without implementing it fails at import time

Architecture::

    Layer 1 -- Core
        core/errors.py       Structured error hierarchy (ContainerError, ...)
        core/result.py       Result[T] envelope (Ok / Err)
        core/memory.py       Allocator tri-mode contract, destructors
        core/protocols.py    Capability flags and structural protocols
        core/settings.py     CccSettings (pydantic-settings, CCC_ prefix)
        core/logging.py      structlog configuration
        core/defer.py        Scoped cleanup (Defer, owning)

    Layer 2 -- Framework
        framework/registry.py  Trait dispatch resolver, backend registration
        framework/entry.py     Entry / Handle tagged results
        framework/range.py     Range / ReverseRange

    Layer 3 -- Vocabulary and backends
        traits.py            Every operation name
        containers/          Reference backends

    Layer 4 -- CLI
        cli/app.py           ``ccc`` inspection commands (typer + rich)

Examples:
    >>> from ccc import traits
    >>> from ccc.containers import HashMap
    >>> m = HashMap()
    >>> traits.insert_or_assign(m, "heap").occupied()
    True
    >>> traits.count(m).unwrap()
    1

Tags:
    ccc, containers, traits, generic-programming
"""

__version__ = "0.1.0"

from ccc import traits  # noqa: E402
from ccc.containers import (  # noqa: E402
    Buffer,
    DoublyLinkedList,
    HandleOrderedMap,
    HashMap,
    OrderedMap,
    PriorityQueue,
)

__all__ = [
    "__version__",
    "traits",
    "Buffer",
    "HashMap",
    "OrderedMap",
    "HandleOrderedMap",
    "DoublyLinkedList",
    "PriorityQueue",
]
