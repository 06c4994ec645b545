"""
Reference container backends driven through :mod:`ccc.traits`.

Importing this package registers every backend with the trait registry.

Backends:
    ::

        Backend             Capabilities                          Cursor
        ─────────────────   ───────────────────────────────────   ────────
        Buffer              SEQUENCE ITERABLE MEMORY STATE        index
        HashMap             ENTRY ITERABLE MEMORY STATE           element
        OrderedMap          ENTRY ITERABLE RANGE MEMORY STATE     element
        HandleOrderedMap    HANDLE ITERABLE RANGE MEMORY STATE    handle
        DoublyLinkedList    SEQUENCE ITERABLE MEMORY STATE        node
        PriorityQueue       PRIORITY MEMORY STATE                 node
"""

from ccc.containers.buffer import Buffer
from ccc.containers.handle_ordered_map import HandleOrderedMap
from ccc.containers.hash_map import HashMap
from ccc.containers.linked_list import DoublyLinkedList, ListNode
from ccc.containers.ordered_map import OrderedMap
from ccc.containers.priority_queue import HeapNode, PriorityQueue

__all__ = [
    "Buffer",
    "HashMap",
    "OrderedMap",
    "HandleOrderedMap",
    "DoublyLinkedList",
    "ListNode",
    "PriorityQueue",
    "HeapNode",
]
