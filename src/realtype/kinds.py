#!/usr/bin/env python3
"""
Value classification module for realtype.

Maps any Python value onto a "real type" label. The coarse basic kind of a
value (number, string, object, ...) is refined in two places:

    - numbers are split into "NaN", "Infinity" and "number"
    - objects are split into "null", "array", "date", "regexp", "set",
      "event" and the "object" fallback, using a ranked rule list

Classification never raises and never mutates the value it inspects.
"""

import array
import asyncio
import cmath
import collections
import datetime
import inspect
import logging
import math
import numbers
import re
import threading
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple, Iterable

import numpy as np

from .cache import KindCache, get_cache
from .config import get_config

# --- Labels ---
UNDEFINED_LABEL = 'undefined'
BOOLEAN = 'boolean'
NUMBER = 'number'
BIGINT = 'bigint'
STRING = 'string'
SYMBOL = 'symbol'
FUNCTION = 'function'
OBJECT = 'object'

NAN = 'NaN'
INFINITY = 'Infinity'
NULL = 'null'
ARRAY = 'array'
DATE = 'date'
REGEXP = 'regexp'
SET = 'set'
EVENT = 'event'

# Integers past this magnitude cannot round-trip through an IEEE-754 double.
MAX_SAFE_INTEGER = 2 ** 53 - 1


class _UndefinedType:
    """Type of the UNDEFINED singleton."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'UNDEFINED'

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return 'UNDEFINED'


UNDEFINED = _UndefinedType()


class Symbol:
    """A unique token. Symbols are only ever equal to themselves."""

    __slots__ = ('description',)

    def __init__(self, description: Optional[str] = None):
        self.description = description

    def __repr__(self) -> str:
        if self.description is None:
            return 'Symbol()'
        return f'Symbol({self.description!r})'


@dataclass(frozen=True)
class KindRule:
    """Composite label given to instances of any of `types`."""
    label: str
    types: Tuple[type, ...]

    def matches(self, cls: type) -> bool:
        return issubclass(cls, self.types)


DEFAULT_RULES: Tuple[KindRule, ...] = (
    KindRule(ARRAY, (list, tuple, collections.deque, array.array, np.ndarray)),
    KindRule(DATE, (datetime.date, np.datetime64)),
    KindRule(REGEXP, (re.Pattern,)),
    KindRule(SET, (set, frozenset)),
    KindRule(EVENT, (threading.Event, asyncio.Event)),
)


class KindRegistry:
    """Ranked list of composite kind rules. The first matching rule wins;
    classes matching no rule get the "object" label."""

    def __init__(self, rules: Optional[Iterable[KindRule]] = None, cache: Optional[KindCache] = None):
        self._rules = list(DEFAULT_RULES if rules is None else rules)
        self._cache = cache
        self._cache_lock = threading.Lock()

    @property
    def rules(self) -> Tuple[KindRule, ...]:
        return tuple(self._rules)

    @property
    def cache(self) -> KindCache:
        """The registry's own label cache, created on first use when none was given."""
        if self._cache is None:
            with self._cache_lock:
                if self._cache is None:
                    self._cache = KindCache(max_size=get_config().cache_max_size)
        return self._cache

    def copy(self) -> 'KindRegistry':
        """Return an independent registry with the same rules and a fresh cache."""
        return KindRegistry(self._rules, cache=KindCache(max_size=self.cache.max_size))

    def register(self, label: str, *types: type, before: Optional[str] = None) -> KindRule:
        """
        Add a composite kind rule.

        Args:
            label: Label given to matching values
            *types: Classes whose instances (and subclass instances) match
            before: Label of an existing rule to insert in front of; the new
                rule goes last when omitted

        Returns:
            The rule that was added

        Raises:
            ValueError: If label is empty
            TypeError: If no types are given or one of them is not a class
            KeyError: If no rule carries the `before` label
        """
        if not isinstance(label, str) or not label:
            raise ValueError("Kind label must be a non-empty string")
        if not types:
            raise TypeError(f"At least one type is required for kind '{label}'")
        for t in types:
            if not inspect.isclass(t):
                raise TypeError(f"Expected a class for kind '{label}', got {t!r}")

        rule = KindRule(label, tuple(types))
        if before is None:
            self._rules.append(rule)
        else:
            positions = [i for i, r in enumerate(self._rules) if r.label == before]
            if not positions:
                raise KeyError(before)
            self._rules.insert(positions[0], rule)

        self.cache.clear()
        logging.debug(f"Registered kind '{label}' for {', '.join(t.__qualname__ for t in types)}")
        return rule

    def label_for(self, cls: type) -> str:
        """Get the composite label for a class."""
        cache = self.cache
        label = cache.get(cls)
        if label is not None:
            return label

        label = OBJECT
        for rule in self._rules:
            if rule.matches(cls):
                label = rule.label
                break
        cache.put(cls, label)
        return label


class _DefaultRegistry(KindRegistry):
    """Registry behind classify_value. It shares the process-wide cache so
    set_cache() can swap it."""

    @property
    def cache(self) -> KindCache:
        return get_cache()


DEFAULT_REGISTRY = _DefaultRegistry()


def register_kind(label: str, *types: type, before: Optional[str] = None) -> KindRule:
    """Add a rule to the default registry. See KindRegistry.register."""
    return DEFAULT_REGISTRY.register(label, *types, before=before)


def basic_kind(value=UNDEFINED) -> str:
    """Return the coarse kind of a value.

    None is an "object" here, like every other composite; classify_value
    tells it apart.
    """
    if value is UNDEFINED:
        return UNDEFINED_LABEL
    if isinstance(value, (bool, np.bool_)):
        return BOOLEAN
    if isinstance(value, int) and abs(value) > MAX_SAFE_INTEGER:
        return BIGINT
    if isinstance(value, numbers.Number):
        return NUMBER
    if isinstance(value, str):
        return STRING
    if isinstance(value, Symbol):
        return SYMBOL
    if inspect.isroutine(value) or inspect.isclass(value):
        return FUNCTION
    return OBJECT


def _number_label(value) -> str:
    # Rationals (ints, Fractions, numpy integers) are always finite, and
    # large ones overflow float conversion.
    if isinstance(value, numbers.Rational):
        return NUMBER
    if isinstance(value, Decimal):
        is_nan, is_inf = value.is_nan(), value.is_infinite()
    elif isinstance(value, numbers.Real):
        is_nan, is_inf = math.isnan(value), math.isinf(value)
    elif isinstance(value, numbers.Complex):
        is_nan, is_inf = cmath.isnan(value), cmath.isinf(value)
    else:
        return NUMBER

    if is_nan:
        return NAN
    if is_inf:
        return INFINITY
    return NUMBER


def classify_value(value=UNDEFINED, registry: Optional[KindRegistry] = None) -> str:
    """
    Return the "real" type label of a value.

    For example:
        basic_kind(datetime.date.today())      # 'object'
        classify_value(datetime.date.today())  # 'date'
        basic_kind(float('nan'))               # 'number'
        classify_value(float('nan'))           # 'NaN'

    Args:
        value: Any value; omitted means UNDEFINED
        registry: Composite kind rules to use (defaults to DEFAULT_REGISTRY)

    Returns:
        A non-empty label string
    """
    kind = basic_kind(value)
    if kind == NUMBER:
        return _number_label(value)
    if kind == OBJECT:
        if value is None:
            return NULL
        return (registry or DEFAULT_REGISTRY).label_for(type(value))
    return kind
