"""Tests for ccc.framework.range."""

import operator

from ccc import traits
from ccc.framework.range import Range, ReverseRange


def _int_range(begin, end):
    return Range(begin, end, lambda i: i + 1 if i + 1 < 5 else None, same=operator.eq)


class TestRange:
    """Half-open cursor ranges."""

    def test_iterates_half_open(self):
        assert list(_int_range(1, 3)) == [1, 2]

    def test_runs_to_none(self):
        assert list(_int_range(2, None)) == [2, 3, 4]

    def test_empty(self):
        r = Range.empty()
        assert r.is_empty()
        assert list(r) == []

    def test_begin_equal_end_is_empty(self):
        assert _int_range(3, 3).is_empty()

    def test_values_deref(self):
        names = ["a", "b", "c", "d", "e"]
        r = Range(0, 3, lambda i: i + 1, deref=names.__getitem__, same=operator.eq)
        assert list(r.values()) == ["a", "b", "c"]

    def test_values_without_deref(self):
        assert list(_int_range(0, 2).values()) == [0, 1]


class TestRangeTraits:
    """range_begin / range_end and their reverse counterparts."""

    def test_range_begin_end(self):
        r = _int_range(1, 3)
        assert traits.range_begin(r) == 1
        assert traits.range_end(r) == 3

    def test_reverse_range_begin_end(self):
        r = ReverseRange(3, 0, lambda i: i - 1 or None, same=operator.eq)
        assert traits.range_reverse_begin(r) == 3
        assert traits.range_reverse_end(r) == 0
        assert list(r) == [3, 2, 1]

    def test_none_range(self):
        assert traits.range_begin(None) is None
        assert traits.range_end(None) is None
