#!/usr/bin/env python3
"""
Array-level queries built on the value classifier.

Every function makes a single pass over any iterable and accepts an
optional `classify` callable. It defaults to classify_value; pass
basic_kind to work with coarse kinds instead.
"""

from collections import Counter
from typing import Any, Callable, Iterable, List, Set, Tuple

from .kinds import basic_kind, classify_value

Classifier = Callable[[Any], str]


def classify_items(values: Iterable[Any], classify: Classifier = classify_value) -> List[str]:
    """Return the label of every item, in order."""
    return [classify(item) for item in values]


def basic_kinds(values: Iterable[Any]) -> List[str]:
    """Return the basic kind of every item, in order."""
    return classify_items(values, basic_kind)


def all_same_type(values: Iterable[Any], classify: Classifier = classify_value) -> bool:
    """True if every item has the label of the first one. Empty input is True."""
    iterator = iter(values)
    try:
        first = next(iterator)
    except StopIteration:
        return True
    expected = classify(first)
    return all(classify(item) == expected for item in iterator)


def all_unique_type(values: Iterable[Any], classify: Classifier = classify_value) -> bool:
    """True if no two items share a label. Stops at the first repeat."""
    seen: Set[str] = set()
    for item in values:
        label = classify(item)
        if label in seen:
            return False
        seen.add(label)
    return True


def count_by_type(values: Iterable[Any], classify: Classifier = classify_value) -> List[Tuple[str, int]]:
    """
    Count items per label.

    Returns:
        (label, count) pairs sorted by label in code-point order, e.g.
        [('boolean', 3), ('null', 1), ('object', 1)]
    """
    counts = Counter(classify(item) for item in values)
    return sorted(counts.items())
