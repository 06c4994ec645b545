"""Dispatch resolver and the result shapes every backend shares."""

from ccc.framework.entry import Entry, EntryStatus, Handle
from ccc.framework.range import Range, ReverseRange
from ccc.framework.registry import (
    Trait,
    capability_matrix,
    get_trait,
    list_backends,
    list_traits,
    register_backend,
    supports,
)

__all__ = [
    "Entry",
    "EntryStatus",
    "Handle",
    "Range",
    "ReverseRange",
    "Trait",
    "register_backend",
    "get_trait",
    "list_traits",
    "list_backends",
    "supports",
    "capability_matrix",
]
