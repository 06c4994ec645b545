"""Tests for ccc.core.memory module."""

from ccc.core.memory import (
    StorageDiscipline,
    TrackingAllocator,
    run_destructor,
    std_allocator,
)


class TestStdAllocator:
    """The tri-mode allocation contract."""

    def test_allocate(self):
        block = std_allocator(None, 3)
        assert block == [None, None, None]

    def test_reallocate_grows_and_keeps_contents(self):
        block = std_allocator(None, 2)
        block[0], block[1] = "a", "b"
        grown = std_allocator(block, 4)
        assert grown == ["a", "b", None, None]
        assert grown is not block

    def test_reallocate_shrinks(self):
        assert std_allocator(["a", "b", "c"], 1) == ["a"]

    def test_free(self):
        block = ["a"]
        assert std_allocator(block, 0) is None
        assert block == []

    def test_free_nothing(self):
        assert std_allocator(None, 0) is None

    def test_negative_size_fails(self):
        assert std_allocator(None, -1) is None


class TestTrackingAllocator:
    """Call and slot accounting."""

    def test_counts_allocations_and_frees(self):
        tracking = TrackingAllocator()
        block = tracking(None, 4)
        assert tracking.allocations == 1
        assert tracking.live_slots == 4
        tracking(block, 0)
        assert tracking.frees == 1
        assert tracking.live_slots == 0

    def test_counts_reallocations(self):
        tracking = TrackingAllocator()
        block = tracking(None, 2)
        block = tracking(block, 6)
        assert tracking.reallocations == 1
        assert tracking.live_slots == 6

    def test_limit_refuses_without_side_effects(self):
        limited = TrackingAllocator(limit=4)
        block = limited(None, 3)
        assert limited(block, 5) is None
        assert limited.failures == 1
        assert limited.live_slots == 3
        # the refused block is still tracked and can be freed
        limited(block, 0)
        assert limited.live_slots == 0

    def test_inner_failure_is_counted(self):
        tracking = TrackingAllocator(inner=lambda block, size: None)
        assert tracking(None, 1) is None
        assert tracking.failures == 1
        assert tracking.allocations == 0


class TestRunDestructor:
    """Optional destructor invocation."""

    def test_runs_when_given(self, released):
        run_destructor(released.append, "x")
        assert released == ["x"]

    def test_noop_without_destructor(self):
        run_destructor(None, "x")


class TestStorageDiscipline:
    def test_values(self):
        assert StorageDiscipline.FIXED.value == "FIXED"
        assert StorageDiscipline.DYNAMIC.value == "DYNAMIC"
