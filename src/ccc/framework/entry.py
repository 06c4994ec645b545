"""
Entry and Handle: the tagged Occupied/Vacant result model.

A keyed query does not return "the value or nothing"; it returns an
:class:`Entry` that remembers *where* the key lives or would live. The
caller can then chain a modification and finalize it into a mutation
without searching the container a second time.

Manifesto:
    - **Exactly one tag:** An Entry is Occupied or Vacant, never both
    - **Insert-error is not absence:** A failed insertion sets INSERT_ERROR
      on a Vacant entry, distinct from a key that is simply not there
    - **Ephemeral:** Produced by one query, consumed before the next
      mutation of the same container
    - **Handles for relocatable storage:** :class:`Handle` carries a stable
      ``int`` instead of the element, resolved with ``at`` at point of use

Architecture:
    ::

                         entry(c, key)
                              │
                ┌─────────────┴──────────────┐
                ▼                            ▼
           Occupied(ref)                 Vacant(slot)
            │  and_modify(fn) ─► self     │  and_modify(fn) ─► self (no-op)
            │  or_insert(v)  ─► ref       │  or_insert(v)   ─► new ref | None
            │  insert_entry(v) ─► ref     │  insert_entry(v) ─► new ref | None
            │  remove_entry() ─► Entry    │  remove_entry()  ─► self
            ▼                             ▼
          unwrap() ─► ref               unwrap() ─► None
                                         (INSERT_ERROR set on failure)

Examples:
    >>> from ccc import traits
    >>> from ccc.containers import HashMap
    >>> counts = HashMap(key=lambda kv: kv[0])
    >>> e = traits.entry(counts, "a")
    >>> traits.occupied(e)
    False
    >>> traits.or_insert(e, ("a", 1))
    ('a', 1)
    >>> traits.and_modify(traits.entry(counts, "a"), lambda kv: (kv[0], kv[1] + 1)).unwrap()
    ('a', 2)

Guardrails:
    ❌ DON'T: Keep an Entry across another mutation of its container
    ✅ DO: Query, chain, finalize in one expression

    ❌ DON'T: Change the key inside and_modify
    ✅ DO: Remove and re-insert, or use a reposition operation

Tags:
    entry, handle, tagged-union, occupied, vacant, ccc
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Flag, auto
from typing import Any, Callable, Protocol


class EntryStatus(Flag):
    """Status flags of an Entry or Handle. No flag set means plain Vacant."""

    VACANT = 0
    OCCUPIED = auto()
    INSERT_ERROR = auto()
    ARGUMENT_ERROR = auto()


class SlotOwner(Protocol):
    """Backend hooks an Entry uses to finalize pending mutations.

    ``slot`` is whatever the backend's query produced (a probe index, a
    sorted position, a handle); it is only valid until the next mutation.
    ``_key`` derives an element's key, checked against the queried key
    before an insertion is committed.
    """

    _key: Callable[[Any], Any]

    def _slot_insert(self, slot: Any, key: Any, element: Any) -> tuple[Any, Any] | None:
        """Insert at a Vacant slot.

        Return ``(slot, ref)`` where ``slot`` is where the element finally
        landed (growth may move it), or None on failure.
        """
        ...

    def _slot_replace(self, slot: Any, element: Any) -> Any:
        """Overwrite the element at an Occupied slot; return the old one."""
        ...

    def _slot_remove(self, slot: Any) -> Any:
        """Detach the element at an Occupied slot and return it."""
        ...


@dataclass(slots=True, eq=False)
class Entry:
    """
    Tagged Occupied/Vacant result of a keyed query.

    Attributes:
        status: :class:`EntryStatus` flags
        prior: Value displaced by ``swap_entry``/``insert_or_assign``; the
            caller owns it (no destructor runs on it)
    """

    status: EntryStatus
    _owner: SlotOwner | None = None
    _slot: Any = None
    _key: Any = None
    _ref: Any = None
    prior: Any = None

    # ── Constructors used by backends ─────────────────────────────

    @classmethod
    def occupied_at(
        cls, owner: SlotOwner | None, slot: Any, ref: Any, *, prior: Any = None
    ) -> Entry:
        return cls(EntryStatus.OCCUPIED, owner, slot, None, ref, prior)

    @classmethod
    def vacant_at(cls, owner: SlotOwner, slot: Any, key: Any) -> Entry:
        return cls(EntryStatus.VACANT, owner, slot, key)

    @classmethod
    def failed_at(cls, owner: SlotOwner, slot: Any, key: Any) -> Entry:
        return cls(EntryStatus.INSERT_ERROR, owner, slot, key)

    @classmethod
    def argument_error(cls) -> Entry:
        return cls(EntryStatus.ARGUMENT_ERROR)

    # ── Queries ───────────────────────────────────────────────────

    def occupied(self) -> bool:
        return EntryStatus.OCCUPIED in self.status

    def insert_error(self) -> bool:
        return EntryStatus.INSERT_ERROR in self.status

    def argument_failed(self) -> bool:
        return EntryStatus.ARGUMENT_ERROR in self.status

    def unwrap(self) -> Any | None:
        """Live reference if Occupied, ``None`` otherwise."""
        if self.occupied():
            return self._ref
        return None

    def _element(self) -> Any:
        return self._ref

    # ── Modification ──────────────────────────────────────────────

    def and_modify(self, fn: Callable[[Any], Any]) -> Entry:
        """Apply ``fn`` to the element if Occupied.

        ``fn`` may mutate the element in place and return ``None``, or
        return a replacement element that is written back into the slot.
        """
        if self.occupied():
            replacement = fn(self._element())
            if replacement is not None:
                self._store(replacement)
        return self

    def and_modify_with_context(
        self, fn: Callable[[Any, Any], Any], context: Any
    ) -> Entry:
        """Like :meth:`and_modify` but ``fn`` also receives ``context``."""
        if self.occupied():
            replacement = fn(self._element(), context)
            if replacement is not None:
                self._store(replacement)
        return self

    def _store(self, element: Any) -> None:
        # a removed entry has no owner; only its detached element changes
        if self._owner is not None:
            self._owner._slot_replace(self._slot, element)
        self._ref = element

    # ── Finalizers ────────────────────────────────────────────────

    def or_insert(self, element: Any) -> Any | None:
        """Existing ref if Occupied, else insert ``element``; ``None`` on failure."""
        if self.occupied():
            return self._ref
        return self._commit(element)

    def or_insert_with(self, factory: Callable[[], Any]) -> Any | None:
        """Like :meth:`or_insert`, constructing the element only when Vacant."""
        if self.occupied():
            return self._ref
        if self.argument_failed():
            return None
        return self._commit(factory())

    def insert_entry(self, element: Any) -> Any | None:
        """Write ``element`` whether Occupied (overwrite) or Vacant (insert)."""
        if self.occupied():
            self.prior = self._element()
            self._store(element)
            return self._ref
        return self._commit(element)

    def remove_entry(self) -> Entry:
        """Detach the element if Occupied; returns an Entry holding it."""
        if not self.occupied() or self._owner is None:
            return self
        removed = self._owner._slot_remove(self._slot)
        return Entry.occupied_at(None, None, removed)

    def _commit(self, element: Any) -> Any | None:
        if (
            self.argument_failed()
            or self._owner is None
            or element is None
            or self._owner._key(element) != self._key
        ):
            self.status |= EntryStatus.ARGUMENT_ERROR
            return None
        inserted = self._owner._slot_insert(self._slot, self._key, element)
        if inserted is None:
            self.status = EntryStatus.INSERT_ERROR
            return None
        self.status = EntryStatus.OCCUPIED
        self._slot, self._ref = inserted
        return self._ref

    def __repr__(self) -> str:
        if self.occupied():
            return f"{type(self).__name__}(OCCUPIED, {self._ref!r})"
        return f"{type(self).__name__}({self.status.name or 'VACANT'}, key={self._key!r})"


@dataclass(slots=True, eq=False, repr=False)
class Handle(Entry):
    """
    Entry over relocatable storage; the reference is a stable ``int``.

    The element behind a handle may move when the backing buffer grows, so
    ``unwrap`` yields the handle and the element is obtained with
    ``at(container, handle)`` each time it is needed.
    """

    def _element(self) -> Any:
        return self._owner.at(self._ref)

    def _store(self, element: Any) -> None:
        if self._owner is not None:
            self._owner._slot_replace(self._slot, element)

    def insert_handle(self, element: Any) -> int | None:
        """Handle-returning counterpart of :meth:`Entry.insert_entry`."""
        return self.insert_entry(element)

    def remove_handle(self) -> Entry:
        """Detach the element if Occupied; its handle is no longer valid."""
        return self.remove_entry()


__all__ = [
    "EntryStatus",
    "SlotOwner",
    "Entry",
    "Handle",
]
