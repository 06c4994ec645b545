"""Tests for ccc.core.protocols module."""

import pytest

from ccc.containers import (
    Buffer,
    DoublyLinkedList,
    HandleOrderedMap,
    HashMap,
    OrderedMap,
    PriorityQueue,
)
from ccc.core.protocols import (
    CAPABILITY_PROTOCOLS,
    Capability,
    Container,
    EntryContainer,
    HandleContainer,
    IterableContainer,
    MemoryManaged,
    PriorityContainer,
    RangeContainer,
    SequenceContainer,
    Stateful,
    protocols_for,
)
from ccc.framework.registry import list_backends

BACKENDS = [Buffer, HashMap, OrderedMap, HandleOrderedMap, DoublyLinkedList, PriorityQueue]


class TestProtocolsFor:
    def test_none(self):
        assert protocols_for(Capability.NONE) == []

    def test_in_declaration_order(self):
        assert protocols_for(Capability.STATE | Capability.ENTRY) == [EntryContainer, Stateful]

    def test_every_capability_has_a_protocol(self):
        flags = [flag for flag in Capability if flag is not Capability.NONE]
        assert set(CAPABILITY_PROTOCOLS) == set(flags)


@pytest.mark.parametrize("cls", BACKENDS)
class TestBackendsConform:
    """Every backend satisfies the protocol of each capability it advertises."""

    def test_advertised_protocols(self, cls):
        container = cls()
        for proto in protocols_for(cls.capabilities):
            assert isinstance(container, proto), proto.__name__

    def test_is_a_container(self, cls):
        assert isinstance(cls(), Container)

    def test_registered(self, cls):
        assert cls in list_backends()


class TestStructuralShape:
    """Protocols follow the shape of a class, not its declared capabilities."""

    def test_keyed_backends(self):
        assert isinstance(HashMap(), EntryContainer)
        assert isinstance(HandleOrderedMap(), HandleContainer)
        assert not isinstance(HashMap(), HandleContainer)

    def test_sequence_is_not_keyed(self):
        assert isinstance(DoublyLinkedList(), SequenceContainer)
        assert not isinstance(DoublyLinkedList(), EntryContainer)

    def test_priority_queue_has_no_cursors(self):
        assert isinstance(PriorityQueue(), PriorityContainer)
        assert not isinstance(PriorityQueue(), IterableContainer)

    def test_ranges_only_on_ordered_maps(self):
        assert isinstance(OrderedMap(), RangeContainer)
        assert not isinstance(HashMap(), RangeContainer)

    def test_plain_object(self):
        assert not isinstance(object(), MemoryManaged)
