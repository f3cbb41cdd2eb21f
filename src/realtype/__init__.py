"""
Package initialization for the realtype module.

Exposes the value classifier and the array-level queries built on it.
"""

from .kinds import (
    UNDEFINED,
    Symbol,
    KindRule,
    KindRegistry,
    DEFAULT_REGISTRY,
    register_kind,
    basic_kind,
    classify_value,
)
from .aggregate import (
    classify_items,
    basic_kinds,
    all_same_type,
    all_unique_type,
    count_by_type,
)

__all__ = [
    "UNDEFINED",
    "Symbol",
    "KindRule",
    "KindRegistry",
    "DEFAULT_REGISTRY",
    "register_kind",
    "basic_kind",
    "classify_value",
    "classify_items",
    "basic_kinds",
    "all_same_type",
    "all_unique_type",
    "count_by_type",
]
