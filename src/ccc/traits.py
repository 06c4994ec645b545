"""
The container trait vocabulary.

Import this module explicitly and call operations through it; it is the one
place the short operation names live::

    from ccc import traits

    e = traits.entry(word_counts, "heap")
    traits.and_modify(e, bump).or_insert(("heap", 1))

Every name here is a :class:`~ccc.framework.registry.Trait`. Calling one
resolves the implementation from the concrete type of its first argument.
Container-level traits are implemented by backends (see
:mod:`ccc.containers`); Entry/Handle and Range traits are implemented once,
in :mod:`ccc.framework.entry` and :mod:`ccc.framework.range`.

Passing ``None`` as the container never raises: each trait returns its
argument-error shape (an Entry flagged ARGUMENT_ERROR, ``Err(ArgumentError)``,
``None``, ``False`` or an empty range, depending on the operation).

Architecture:
    ::

        Entry Interface     entry swap_entry try_insert insert_or_assign
                            remove_key_value and_modify and_modify_with_context
                            or_insert or_insert_with insert_entry remove_entry
                            unwrap occupied insert_error
        Handle Interface    handle swap_handle insert_handle remove_handle at
        Lookup              get_key_value contains
        Sequence            push_back push_front pop_back pop_front front back
                            splice splice_range
        Priority            push pop update increase decrease
        Direct removal      erase extract extract_range
        Iteration           begin end next reverse_begin reverse_end reverse_next
        Ranges              equal_range equal_range_reverse range_begin
                            range_end range_reverse_begin range_reverse_end
        Memory              copy reserve clear clear_and_free clear_and_free_reserve
        State               count capacity is_empty validate

Tags:
    traits, vocabulary, dispatch, ccc
"""

from __future__ import annotations

from ccc.core.errors import ArgumentError
from ccc.core.protocols import Capability
from ccc.core.result import Err
from ccc.framework.entry import Entry, Handle
from ccc.framework.range import Range, ReverseRange, range_begin as _range_begin, range_end as _range_end
from ccc.framework.registry import Trait

_ENTRY = Capability.ENTRY
_HANDLE = Capability.HANDLE
_KEYED = Capability.ENTRY | Capability.HANDLE
_SEQUENCE = Capability.SEQUENCE
_PRIORITY = Capability.PRIORITY
_ITERABLE = Capability.ITERABLE
_RANGE = Capability.RANGE
_MEMORY = Capability.MEMORY
_STATE = Capability.STATE


def _argument_error() -> Err:
    return Err(ArgumentError("container is None"))


def _none() -> None:
    return None


def _false() -> bool:
    return False


def _true() -> bool:
    return True


# =============================================================================
# ENTRY INTERFACE
# =============================================================================

entry = Trait(
    "entry", _ENTRY, required_for=_ENTRY, null=Entry.argument_error,
    doc="Obtain an Entry for ``key``: Occupied(element) or Vacant(slot).",
)
swap_entry = Trait(
    "swap_entry", _ENTRY, required_for=_ENTRY, null=Entry.argument_error,
    doc="Insert or replace ``element``; ``Entry.prior`` holds any displaced value.",
)
try_insert = Trait(
    "try_insert", _KEYED, required_for=_KEYED, null=Entry.argument_error,
    doc="Insert ``element`` only if its key is absent.",
)
insert_or_assign = Trait(
    "insert_or_assign", _KEYED, required_for=_KEYED, null=Entry.argument_error,
    doc="Insert ``element`` or overwrite the element with the same key.",
)
remove_key_value = Trait(
    "remove_key_value", _KEYED, required_for=_KEYED, null=Entry.argument_error,
    doc="Remove the element stored at ``key``; Occupied Entry holds it.",
)
get_key_value = Trait(
    "get_key_value", _KEYED, required_for=_KEYED, null=_none,
    doc="Element stored at ``key`` or ``None``.",
)
contains = Trait(
    "contains", _KEYED, required_for=_KEYED, null=_false,
    doc="True if ``key`` is present.",
)

and_modify = Trait("and_modify", Capability.NONE, null=Entry.argument_error,
                   doc="Apply ``fn`` to the element if Occupied.")
and_modify_with_context = Trait("and_modify_with_context", Capability.NONE, null=Entry.argument_error,
                                doc="Apply ``fn(element, context)`` if Occupied.")
or_insert = Trait("or_insert", Capability.NONE, null=_none,
                  doc="Existing element if Occupied, else insert the given one.")
or_insert_with = Trait("or_insert_with", Capability.NONE, null=_none,
                       doc="Existing element if Occupied, else insert ``factory()``.")
insert_entry = Trait("insert_entry", Capability.NONE, null=_none,
                     doc="Write the element whether Occupied or Vacant.")
remove_entry = Trait("remove_entry", Capability.NONE, null=Entry.argument_error,
                     doc="Detach the element if Occupied.")
unwrap = Trait("unwrap", Capability.NONE, null=_none,
               doc="Live reference (or handle) if Occupied, else ``None``.")
occupied = Trait("occupied", Capability.NONE, null=_false,
                 doc="True if the Entry/Handle is Occupied.")
insert_error = Trait("insert_error", Capability.NONE, null=_false,
                     doc="True if the last insertion attempt failed.")

for _cls in (Entry, Handle):
    and_modify.register(_cls, _cls.and_modify)
    and_modify_with_context.register(_cls, _cls.and_modify_with_context)
    or_insert.register(_cls, _cls.or_insert)
    or_insert_with.register(_cls, _cls.or_insert_with)
    insert_entry.register(_cls, _cls.insert_entry)
    remove_entry.register(_cls, _cls.remove_entry)
    unwrap.register(_cls, _cls.unwrap)
    occupied.register(_cls, _cls.occupied)
    insert_error.register(_cls, _cls.insert_error)

# =============================================================================
# HANDLE INTERFACE
# =============================================================================

handle = Trait(
    "handle", _HANDLE, required_for=_HANDLE, null=Handle.argument_error,
    doc="Obtain a Handle for ``key``.",
)
swap_handle = Trait(
    "swap_handle", _HANDLE, required_for=_HANDLE, null=Handle.argument_error,
    doc="Insert or replace ``element``; ``Handle.prior`` holds any displaced value.",
)
at = Trait(
    "at", _HANDLE | _SEQUENCE, required_for=_HANDLE, null=_none,
    doc="Resolve a handle to its live element, or ``None``.",
)
insert_handle = Trait("insert_handle", Capability.NONE, null=_none,
                      doc="Write the element and return its handle.")
remove_handle = Trait("remove_handle", Capability.NONE, null=Entry.argument_error,
                      doc="Detach the element behind an Occupied handle.")

insert_handle.register(Handle, Handle.insert_handle)
remove_handle.register(Handle, Handle.remove_handle)

# =============================================================================
# SEQUENCE / PRIORITY
# =============================================================================

push = Trait("push", _PRIORITY, required_for=_PRIORITY, null=_none,
             doc="Insert preserving heap order; returns the new node.")
push_back = Trait("push_back", _SEQUENCE, required_for=_SEQUENCE, null=_none,
                  doc="Append; returns the new node or handle.")
push_front = Trait("push_front", _SEQUENCE, null=_none,
                   doc="Prepend; returns the new node or handle.")
pop = Trait("pop", _PRIORITY, required_for=_PRIORITY, null=_argument_error,
            doc="Remove the heap top: ``Ok(element)`` or ``Err(ContainerEmptyError)``.")
pop_back = Trait("pop_back", _SEQUENCE, required_for=_SEQUENCE, null=_argument_error,
                 doc="Remove the last element.")
pop_front = Trait("pop_front", _SEQUENCE, null=_argument_error,
                  doc="Remove the first element.")
front = Trait("front", _SEQUENCE | _PRIORITY, required_for=_SEQUENCE | _PRIORITY, null=_none,
              doc="Peek at the first element (heap top for priority queues).")
back = Trait("back", _SEQUENCE, required_for=_SEQUENCE, null=_none,
             doc="Peek at the last element.")
splice = Trait("splice", _SEQUENCE, null=_argument_error,
               doc="Move one node before ``pos``, within or across lists.")
splice_range = Trait("splice_range", _SEQUENCE, null=_argument_error,
                     doc="Move nodes ``[first, last)`` before ``pos``.")
update = Trait("update", _PRIORITY, required_for=_PRIORITY, null=_none,
               doc="Set a resident element's value to ``fn(value)`` and restore order.")
increase = Trait("increase", _PRIORITY, required_for=_PRIORITY, null=_none,
                 doc="``update`` where the caller guarantees the value grows.")
decrease = Trait("decrease", _PRIORITY, required_for=_PRIORITY, null=_none,
                 doc="``update`` where the caller guarantees the value shrinks.")
erase = Trait("erase", _SEQUENCE | _PRIORITY, required_for=_PRIORITY, null=_argument_error,
              doc="Remove a known-resident element, run the destructor, free storage.")
extract = Trait("extract", _SEQUENCE | _PRIORITY, required_for=_PRIORITY, null=_none,
                doc="Remove without destructor or free; caller owns the node.")
extract_range = Trait("extract_range", _SEQUENCE, null=_none,
                      doc="Remove ``[first, last)`` without destructor or free.")

# =============================================================================
# ITERATION AND RANGES
# =============================================================================

begin = Trait("begin", _ITERABLE, required_for=_ITERABLE, null=_none,
              doc="First cursor in the logical ordering, or the end cursor.")
end = Trait("end", _ITERABLE, required_for=_ITERABLE, null=_none,
            doc="Exclusive end cursor; never dereference it.")
next = Trait("next", _ITERABLE, required_for=_ITERABLE, null=_none,
             doc="Cursor following ``cursor``.")
reverse_begin = Trait("reverse_begin", _ITERABLE, required_for=_ITERABLE, null=_none,
                      doc="Last cursor in the logical ordering.")
reverse_end = Trait("reverse_end", _ITERABLE, required_for=_ITERABLE, null=_none,
                    doc="Exclusive reverse end cursor.")
reverse_next = Trait("reverse_next", _ITERABLE, required_for=_ITERABLE, null=_none,
                     doc="Cursor preceding ``cursor``.")

equal_range = Trait("equal_range", _RANGE, required_for=_RANGE, null=Range.empty,
                    doc="Ascending range of elements with key in ``[lo, hi]``.")
equal_range_reverse = Trait("equal_range_reverse", _RANGE, required_for=_RANGE, null=ReverseRange.empty,
                            doc="The same elements as ``equal_range``, descending.")
range_begin = Trait("range_begin", Capability.NONE, null=_none, doc="First cursor of a range.")
range_end = Trait("range_end", Capability.NONE, null=_none, doc="Exclusive end cursor of a range.")
range_reverse_begin = Trait("range_reverse_begin", Capability.NONE, null=_none,
                            doc="First cursor of a reverse range.")
range_reverse_end = Trait("range_reverse_end", Capability.NONE, null=_none,
                          doc="Exclusive end cursor of a reverse range.")

range_begin.register(Range, _range_begin)
range_end.register(Range, _range_end)
range_reverse_begin.register(ReverseRange, _range_begin)
range_reverse_end.register(ReverseRange, _range_end)

# =============================================================================
# MEMORY MANAGEMENT
# =============================================================================

copy = Trait("copy", _MEMORY, required_for=_MEMORY, null=_argument_error,
             doc="Deep-duplicate ``src`` into the container, allocating if allowed.")
reserve = Trait("reserve", _MEMORY, null=_argument_error,
                doc="Guarantee ``n`` further insertions without reallocation.")
clear = Trait("clear", _MEMORY, required_for=_MEMORY, null=_argument_error,
              doc="Destroy every element, keep the buffer.")
clear_and_free = Trait("clear_and_free", _MEMORY, required_for=_MEMORY, null=_argument_error,
                       doc="Destroy every element and free the buffer with the own allocator.")
clear_and_free_reserve = Trait("clear_and_free_reserve", _MEMORY, null=_argument_error,
                               doc="Teardown of a reserved buffer with a caller-supplied allocator.")

# =============================================================================
# STATE
# =============================================================================

count = Trait("count", _STATE, required_for=_STATE, null=_argument_error,
              doc="``Ok(number of elements)``.")
capacity = Trait("capacity", _STATE, required_for=_STATE, null=_argument_error,
                 doc="``Ok(slots available without reallocation)``.")
is_empty = Trait("is_empty", _STATE, required_for=_STATE, null=_true,
                 doc="True if the container holds nothing (or is None).")
validate = Trait("validate", _STATE, required_for=_STATE, null=_false,
                 doc="True if every structural invariant holds.")


__all__ = [
    "entry", "swap_entry", "try_insert", "insert_or_assign", "remove_key_value",
    "get_key_value", "contains", "and_modify", "and_modify_with_context",
    "or_insert", "or_insert_with", "insert_entry", "remove_entry", "unwrap",
    "occupied", "insert_error",
    "handle", "swap_handle", "at", "insert_handle", "remove_handle",
    "push", "push_back", "push_front", "pop", "pop_back", "pop_front",
    "front", "back", "splice", "splice_range", "update", "increase",
    "decrease", "erase", "extract", "extract_range",
    "begin", "end", "next", "reverse_begin", "reverse_end", "reverse_next",
    "equal_range", "equal_range_reverse", "range_begin", "range_end",
    "range_reverse_begin", "range_reverse_end",
    "copy", "reserve", "clear", "clear_and_free", "clear_and_free_reserve",
    "count", "capacity", "is_empty", "validate",
]
