"""Tests for ccc.core.errors module."""

import pytest

from ccc.core.errors import (
    AllocationError,
    ArgumentError,
    CapacityError,
    ContainerEmptyError,
    ContainerError,
    ErrorCategory,
    ErrorContext,
    UnsupportedOperationError,
    categorize_error,
)


class TestErrorCategories:
    """Each error type carries its own category."""

    @pytest.mark.parametrize(
        "error_cls, category",
        [
            (ContainerError, ErrorCategory.INTERNAL),
            (ContainerEmptyError, ErrorCategory.ABSENCE),
            (AllocationError, ErrorCategory.ALLOCATION),
            (CapacityError, ErrorCategory.CAPACITY),
            (ArgumentError, ErrorCategory.ARGUMENT),
        ],
    )
    def test_default_category(self, error_cls, category):
        assert error_cls("boom").category is category

    def test_category_override(self):
        """An explicit category wins over the class default."""
        err = ContainerError("boom", category=ErrorCategory.CAPACITY)
        assert err.category is ErrorCategory.CAPACITY

    def test_all_are_container_errors(self):
        for cls in (ContainerEmptyError, AllocationError, CapacityError, ArgumentError):
            assert issubclass(cls, ContainerError)


class TestErrorContext:
    """Structured context attached to errors."""

    def test_with_context_sets_known_fields(self):
        err = ArgumentError("bad").with_context(container="HashMap", operation="entry")
        assert err.context.container == "HashMap"
        assert err.context.operation == "entry"

    def test_with_context_unknown_keys_go_to_metadata(self):
        err = ArgumentError("bad").with_context(index=7)
        assert err.context.metadata == {"index": 7}

    def test_with_context_returns_same_error(self):
        err = ArgumentError("bad")
        assert err.with_context(container="Buffer") is err

    def test_context_to_dict_skips_empty_fields(self):
        assert ErrorContext().to_dict() == {}
        assert ErrorContext(operation="pop").to_dict() == {"operation": "pop"}


class TestSerialization:
    """to_dict output for logging."""

    def test_to_dict(self):
        err = ContainerEmptyError("empty").with_context(container="Buffer", operation="pop_back")
        d = err.to_dict()
        assert d["error_type"] == "ContainerEmptyError"
        assert d["message"] == "empty"
        assert d["category"] == "ABSENCE"
        assert d["context"] == {"container": "Buffer", "operation": "pop_back"}

    def test_capacity_error_reports_sizes(self):
        d = CapacityError("full", requested=9, capacity=8).to_dict()
        assert d["requested"] == 9
        assert d["capacity"] == 8

    def test_cause_is_chained(self):
        cause = MemoryError("oom")
        err = AllocationError("refused", cause=cause)
        assert err.__cause__ is cause
        assert err.to_dict()["cause"] == "oom"

    def test_repr(self):
        assert repr(ArgumentError("bad")) == "ArgumentError('bad', category=ARGUMENT)"


class TestUnsupportedOperationError:
    """Raised for traits a type never implemented."""

    def test_is_type_error(self):
        err = UnsupportedOperationError("push", [])
        assert isinstance(err, TypeError)
        assert isinstance(err, ContainerError)

    def test_names_operation_and_type(self):
        err = UnsupportedOperationError("push", [])
        assert err.category is ErrorCategory.CAPABILITY
        assert err.context.container == "list"
        assert err.context.operation == "push"
        assert "list does not implement 'push'" in str(err)


class TestCategorizeError:
    """categorize_error maps builtin exceptions onto categories."""

    @pytest.mark.parametrize(
        "error, category",
        [
            (CapacityError("x"), ErrorCategory.CAPACITY),
            (MemoryError(), ErrorCategory.ALLOCATION),
            (KeyError("k"), ErrorCategory.ABSENCE),
            (IndexError(), ErrorCategory.ABSENCE),
            (TypeError(), ErrorCategory.ARGUMENT),
            (ValueError(), ErrorCategory.ARGUMENT),
            (RuntimeError(), ErrorCategory.INTERNAL),
        ],
    )
    def test_categorize(self, error, category):
        assert categorize_error(error) is category
