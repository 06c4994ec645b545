"""Tests for ccc.containers.ordered_map."""

import pytest

from ccc import traits
from ccc.containers import OrderedMap
from ccc.core.errors import AllocationError, CapacityError
from ccc.core.memory import StorageDiscipline, TrackingAllocator


def _filled(keys, **kwargs):
    m = OrderedMap(**kwargs)
    for k in keys:
        traits.insert_or_assign(m, k)
    return m


@pytest.fixture
def scores():
    m = OrderedMap(key=lambda row: row[0])
    for row in ((30, "carol"), (10, "alice"), (20, "bob")):
        traits.insert_or_assign(m, row)
    return m


class TestEntryInterface:
    def test_entry_ref_is_element(self, scores):
        assert traits.entry(scores, 20).unwrap() == (20, "bob")

    def test_replace_keeps_position(self, scores):
        e = traits.insert_or_assign(scores, (20, "bea"))
        assert e.prior == (20, "bob")
        assert list(scores) == [(10, "alice"), (20, "bea"), (30, "carol")]

    def test_try_insert(self, scores):
        assert traits.try_insert(scores, (20, "x")).unwrap() == (20, "bob")
        assert traits.try_insert(scores, (25, "y")).unwrap() == (25, "y")
        assert traits.count(scores).unwrap() == 4

    def test_remove(self, scores):
        assert traits.remove_key_value(scores, 10).unwrap() == (10, "alice")
        assert traits.begin(scores) == (20, "bob")
        assert traits.validate(scores)

    def test_get_key_value(self, scores):
        assert traits.get_key_value(scores, 30) == (30, "carol")
        assert traits.get_key_value(scores, 31) is None
        assert 30 in scores


class TestOrdering:
    def test_sorted_iteration(self):
        m = _filled([9, 1, 5, 3])
        assert list(m) == [1, 3, 5, 9]
        assert list(reversed(m)) == [9, 5, 3, 1]

    def test_cursors(self):
        m = _filled([9, 1, 5])
        assert traits.begin(m) == 1
        assert traits.next(m, 1) == 5
        assert traits.next(m, 9) is traits.end(m)
        assert traits.reverse_begin(m) == 9
        assert traits.reverse_next(m, 5) == 1
        assert traits.reverse_next(m, 1) is traits.reverse_end(m)

    def test_string_keys(self):
        assert list(_filled(["pear", "apple", "fig"])) == ["apple", "fig", "pear"]


class TestRanges:
    def test_inclusive_bounds(self):
        m = _filled([1, 3, 5, 6, 9])
        assert list(traits.equal_range(m, 3, 6)) == [3, 5, 6]
        assert list(traits.equal_range(m, 1, 9)) == [1, 3, 5, 6, 9]

    def test_bounds_between_keys(self):
        m = _filled([1, 3, 5, 6, 9])
        assert list(traits.equal_range(m, 2, 7)) == [3, 5, 6]
        assert list(traits.equal_range_reverse(m, 2, 7)) == [6, 5, 3]

    def test_no_match(self):
        m = _filled([1, 3, 5])
        assert traits.equal_range(m, 10, 20).is_empty()
        assert traits.equal_range_reverse(m, 10, 20).is_empty()
        assert list(traits.equal_range(m, 4, 4)) == []
        assert list(traits.equal_range(m, 5, 1)) == []

    def test_range_end_cursor(self):
        m = _filled([1, 3, 5, 6, 9])
        r = traits.equal_range(m, 3, 6)
        assert traits.range_begin(r) == 3
        assert traits.range_end(r) == 9
        rr = traits.equal_range_reverse(m, 3, 6)
        assert traits.range_reverse_begin(rr) == 6
        assert traits.range_reverse_end(rr) == 1

    def test_empty_map(self):
        assert traits.equal_range(OrderedMap(), 0, 10).is_empty()


class TestNodeStorage:
    """One allocator block per node, or a caller slot when fixed."""

    def test_one_block_per_element(self, tracking):
        m = _filled(range(5), allocator=tracking)
        assert tracking.live_slots == 5
        traits.remove_key_value(m, 2)
        assert tracking.live_slots == 4
        assert traits.capacity(m).unwrap() == 4

    def test_fixed_pool(self):
        pool = [None] * 2
        m = OrderedMap(pool)
        assert m.discipline is StorageDiscipline.FIXED
        assert traits.insert_or_assign(m, 1).occupied()
        assert traits.insert_or_assign(m, 2).occupied()
        assert traits.insert_or_assign(m, 3).insert_error()
        assert traits.capacity(m).unwrap() == 2
        traits.remove_key_value(m, 1)
        assert traits.insert_or_assign(m, 3).occupied()
        assert list(m) == [2, 3]

    def test_allocator_refuses(self, limited):
        m = _filled(range(4), allocator=limited)
        assert traits.insert_or_assign(m, 99).insert_error()
        assert traits.validate(m)


class TestMemory:
    def test_copy(self, scores):
        dst = _filled([(99, "zed")], key=lambda row: row[0])
        assert traits.copy(dst, scores).is_ok()
        assert list(dst) == list(scores)
        traits.remove_key_value(scores, 10)
        assert traits.contains(dst, 10)

    def test_copy_frees_prior_nodes(self, tracking):
        src = _filled([1, 2])
        dst = _filled([7, 8, 9], allocator=tracking)
        traits.copy(dst, src)
        assert tracking.live_slots == 2

    def test_copy_refused_leaves_dst(self):
        src = _filled([1, 2, 3])
        limited = TrackingAllocator(limit=2)
        dst = _filled([7], allocator=limited)
        result = traits.copy(dst, src)
        assert isinstance(result.error, AllocationError)
        assert list(dst) == [7]
        assert limited.live_slots == 1

    def test_copy_into_small_fixed(self):
        dst = OrderedMap([None] * 2)
        result = traits.copy(dst, _filled([1, 2, 3]))
        assert isinstance(result.error, CapacityError)

    def test_copy_into_fixed(self):
        dst = OrderedMap([None] * 3)
        traits.insert_or_assign(dst, 9)
        assert traits.copy(dst, _filled([1, 2, 3])).is_ok()
        assert list(dst) == [1, 2, 3]
        assert traits.validate(dst)

    def test_clear_and_free(self, tracking, released):
        m = _filled([3, 1, 2], allocator=tracking)
        assert traits.clear_and_free(m, released.append).is_ok()
        assert released == [1, 2, 3]
        assert tracking.live_slots == 0
        assert traits.is_empty(m)

    def test_clear_and_free_fixed(self):
        m = OrderedMap([None])
        traits.insert_or_assign(m, 1)
        assert isinstance(traits.clear_and_free(m).error, AllocationError)
        assert traits.clear(m).is_ok()
        assert traits.is_empty(m)
