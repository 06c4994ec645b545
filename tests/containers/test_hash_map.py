"""Tests for ccc.containers.hash_map."""

import pytest

from ccc import traits
from ccc.containers import Buffer, HashMap
from ccc.core.errors import AllocationError, ArgumentError, CapacityError
from ccc.core.memory import TrackingAllocator


@pytest.fixture
def people():
    m = HashMap(key=lambda person: person[0])
    for name, age in (("ada", 36), ("alan", 41), ("grace", 85)):
        traits.insert_or_assign(m, (name, age))
    return m


class TestEntryInterface:
    def test_get_key_value(self, people):
        assert traits.get_key_value(people, "alan") == ("alan", 41)
        assert traits.get_key_value(people, "bob") is None

    def test_contains_operator(self, people):
        assert "ada" in people
        assert "bob" not in people

    def test_swap_entry_vacant_has_no_prior(self, people):
        e = traits.swap_entry(people, ("bob", 20))
        assert e.prior is None
        assert e.unwrap() == ("bob", 20)

    def test_swap_entry_returns_displaced(self, people):
        e = traits.swap_entry(people, ("ada", 37))
        assert e.prior == ("ada", 36)
        assert traits.get_key_value(people, "ada") == ("ada", 37)
        assert traits.count(people).unwrap() == 3

    def test_try_insert_keeps_existing(self, people):
        e = traits.try_insert(people, ("ada", 99))
        assert e.occupied()
        assert e.unwrap() == ("ada", 36)

    def test_remove_missing_is_vacant(self, people):
        e = traits.remove_key_value(people, "bob")
        assert not e.occupied()
        assert traits.count(people).unwrap() == 3

    def test_none_element(self, people):
        assert traits.insert_or_assign(people, None).argument_failed()
        assert traits.try_insert(people, None).argument_failed()
        assert traits.swap_entry(people, None).argument_failed()


class TestProbing:
    """Linear probing and backward-shift deletion."""

    def test_colliding_keys(self):
        m = HashMap([None] * 8)
        for k in (0, 8, 16, 1):
            traits.insert_or_assign(m, k)
        assert traits.validate(m)
        traits.remove_key_value(m, 8)
        assert traits.validate(m)
        assert traits.contains(m, 16)
        assert traits.contains(m, 1)
        assert not traits.contains(m, 8)

    def test_wraparound_cluster(self):
        m = HashMap([None] * 8)
        for k in (7, 15, 23):
            traits.insert_or_assign(m, k)
        traits.remove_key_value(m, 7)
        assert traits.validate(m)
        assert traits.contains(m, 15)
        assert traits.contains(m, 23)

    def test_many_inserts_and_removals(self):
        m = HashMap()
        for k in range(200):
            traits.insert_or_assign(m, k)
        for k in range(0, 200, 3):
            assert traits.remove_key_value(m, k).occupied()
        assert traits.validate(m)
        assert all(traits.contains(m, k) == (k % 3 != 0) for k in range(200))

    def test_string_keys(self):
        m = HashMap()
        words = ["slot", "trait", "entry", "handle", "range"]
        for w in words:
            traits.insert_or_assign(m, w)
        assert sorted(m) == sorted(words)


class TestLoadFactor:
    def test_fixed_map_respects_load_factor(self):
        m = HashMap([None] * 4)
        assert [traits.insert_or_assign(m, k).occupied() for k in range(4)] == [
            True,
            True,
            True,
            False,
        ]

    def test_override(self):
        m = HashMap([None] * 4, max_load_factor=0.5)
        traits.insert_or_assign(m, 1)
        traits.insert_or_assign(m, 2)
        assert traits.insert_or_assign(m, 3).insert_error()

    def test_dynamic_map_grows(self, tracking):
        m = HashMap(allocator=tracking)
        for k in range(20):
            traits.insert_or_assign(m, k)
        assert tracking.allocations > 1
        # every old block was freed on rehash
        assert tracking.frees == tracking.allocations - 1
        assert traits.validate(m)


class TestIteration:
    def test_visits_every_element_once(self, people):
        assert sorted(people) == [("ada", 36), ("alan", 41), ("grace", 85)]

    def test_reverse_is_forward_reversed(self, people):
        assert list(reversed(people)) == list(people)[::-1]

    def test_cursors_are_elements(self, people):
        cursor = traits.begin(people)
        seen = []
        while cursor is not traits.end(people):
            seen.append(cursor)
            cursor = traits.next(people, cursor)
        assert seen == list(people)

    def test_empty(self):
        assert traits.begin(HashMap()) is None
        assert traits.reverse_begin(HashMap()) is None


class TestMemory:
    def test_reserve(self, tracking):
        m = HashMap(allocator=tracking)
        assert traits.reserve(m, 10).is_ok()
        before = tracking.allocations
        for k in range(10):
            traits.insert_or_assign(m, k)
        assert tracking.allocations == before

    def test_reserve_fixed(self):
        result = traits.reserve(HashMap([None] * 4), 10)
        assert isinstance(result.error, CapacityError)

    def test_reserve_refused(self):
        result = traits.reserve(HashMap(), 10, TrackingAllocator(limit=4))
        assert isinstance(result.error, AllocationError)

    def test_copy(self, people):
        dst = HashMap(key=lambda person: person[0])
        traits.insert_or_assign(dst, ("zed", 1))
        assert traits.copy(dst, people).is_ok()
        assert sorted(dst) == sorted(people)
        assert not traits.contains(dst, "zed")
        traits.remove_key_value(people, "ada")
        assert traits.contains(dst, "ada")

    def test_copy_refused_leaves_dst(self, people):
        dst = HashMap(key=lambda person: person[0], allocator=TrackingAllocator(limit=2))
        result = traits.copy(dst, people)
        assert isinstance(result.error, AllocationError)
        assert traits.is_empty(dst)
        assert traits.validate(dst)

    def test_copy_wrong_type(self, people):
        assert isinstance(traits.copy(Buffer(), people).error, ArgumentError)

    def test_copy_keeps_slot_order(self):
        src = HashMap()
        for k in (2, 5):
            traits.insert_or_assign(src, k)
        dst = HashMap()
        assert traits.copy(dst, src).is_ok()
        assert list(dst) == list(src) == [2, 5]
        assert traits.validate(dst)

    def test_copy_keeps_colliding_layout(self):
        src = HashMap([None] * 8)
        for k in (0, 8, 1):
            traits.insert_or_assign(src, k)
        assert list(src) == [0, 8, 1]
        dst = HashMap()
        assert traits.copy(dst, src).is_ok()
        assert list(dst) == [0, 8, 1]
        assert list(reversed(dst)) == [1, 8, 0]
        assert traits.capacity(dst).unwrap() == 8
        assert traits.validate(dst)

    def test_copy_into_fixed_map_of_same_size(self, people):
        dst = HashMap([None] * 8, key=lambda person: person[0])
        assert traits.copy(dst, people).is_ok()
        assert list(dst) == list(people)

    def test_copy_into_fixed_map_of_other_size(self, people):
        dst = HashMap([None] * 16, key=lambda person: person[0])
        traits.insert_or_assign(dst, ("zed", 1))
        result = traits.copy(dst, people)
        assert isinstance(result.error, CapacityError)
        assert traits.contains(dst, "zed")
        assert traits.count(dst).unwrap() == 1

    def test_clear_and_free(self, tracking, released):
        m = HashMap(allocator=tracking)
        for k in range(5):
            traits.insert_or_assign(m, k)
        assert traits.clear_and_free(m, released.append).is_ok()
        assert sorted(released) == [0, 1, 2, 3, 4]
        assert tracking.live_slots == 0
        assert traits.capacity(m).unwrap() == 0

    def test_clear_and_free_fixed(self):
        m = HashMap([None] * 4)
        traits.insert_or_assign(m, 1)
        assert isinstance(traits.clear_and_free(m).error, AllocationError)
        assert traits.contains(m, 1)

    def test_clear(self, released):
        m = HashMap([None] * 4)
        traits.insert_or_assign(m, 1)
        traits.clear(m, released.append)
        assert released == [1]
        assert traits.capacity(m).unwrap() == 4
