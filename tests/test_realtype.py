import array
import asyncio
import collections
import datetime
import math
import os
import re
import threading
from collections import UserString
from decimal import Decimal
from fractions import Fraction
from unittest.mock import patch

import numpy as np
import pytest

from realtype import (
    UNDEFINED,
    Symbol,
    KindRegistry,
    DEFAULT_REGISTRY,
    register_kind,
    basic_kind,
    classify_value,
    classify_items,
    basic_kinds,
    all_same_type,
    all_unique_type,
    count_by_type,
)
from realtype.cache import KindCache, get_cache, set_cache
from realtype.config import get_config
from realtype.data import known_values


@pytest.fixture(autouse=True)
def reset_global_state():
    get_config.cache_clear()
    set_cache(None)
    yield
    get_config.cache_clear()
    set_cache(None)


class CallableThing:
    def __call__(self):
        return 42

    def method(self):
        return 1


# -------------------------
# Tests for basic_kind
# -------------------------

@pytest.mark.parametrize("value, expected", [
    (True, 'boolean'),
    (np.bool_(False), 'boolean'),
    (123, 'number'),
    (1.5, 'number'),
    (float('nan'), 'number'),
    (2 ** 53 - 1, 'number'),
    (2 ** 53, 'bigint'),
    (-(10 ** 400), 'bigint'),
    (np.int64(2 ** 60), 'number'),
    ('whoo', 'string'),
    (UserString('boxed'), 'object'),
    ([], 'object'),
    ({}, 'object'),
    (None, 'object'),
    (lambda: None, 'function'),
    (print, 'function'),
    (CallableThing().method, 'function'),
    (datetime.datetime, 'function'),
    (CallableThing(), 'object'),
    (Symbol('token'), 'symbol'),
    (UNDEFINED, 'undefined'),
])
def test_basic_kind(value, expected):
    assert basic_kind(value) == expected


def test_basic_kind_without_argument_is_undefined():
    assert basic_kind() == 'undefined'


# -------------------------
# Tests for classify_value
# -------------------------

@pytest.mark.parametrize("value, expected", [
    # numbers
    (420, 'number'),
    (-0.0, 'number'),
    (Fraction(1, 3), 'number'),
    (Fraction(10 ** 400, 3), 'number'),
    (Decimal('1.5'), 'number'),
    (1 + 2j, 'number'),
    (np.float32(0.5), 'number'),
    (np.int8(-3), 'number'),
    (float('nan'), 'NaN'),
    (np.float64('nan'), 'NaN'),
    (Decimal('NaN'), 'NaN'),
    (Decimal('sNaN'), 'NaN'),
    (complex(float('nan'), 0), 'NaN'),
    (math.inf, 'Infinity'),
    (-math.inf, 'Infinity'),
    (np.float32('-inf'), 'Infinity'),
    (Decimal('-Infinity'), 'Infinity'),
    (complex(0, math.inf), 'Infinity'),
    # composites
    (None, 'null'),
    ([], 'array'),
    ((1, 2), 'array'),
    (collections.deque([1]), 'array'),
    (array.array('i', [1, 2]), 'array'),
    (np.array([1.0, float('nan')]), 'array'),
    (datetime.date(1961, 4, 12), 'date'),
    (datetime.datetime(1961, 4, 12, 9, 7), 'date'),
    (np.datetime64('1961-04-12'), 'date'),
    (re.compile('Gagarin', re.IGNORECASE), 'regexp'),
    (set(), 'set'),
    (frozenset({1}), 'set'),
    (threading.Event(), 'event'),
    (asyncio.Event(), 'event'),
    ({}, 'object'),
    ({'hello': 'world'}, 'object'),
    (UserString('12'), 'object'),
    (b'bytes', 'object'),
    (CallableThing(), 'object'),
    (object(), 'object'),
    # everything else keeps its basic kind
    (True, 'boolean'),
    ('string', 'string'),
    (lambda: ';)', 'function'),
    (int, 'function'),
    (Symbol(), 'symbol'),
    (999999999999999969, 'bigint'),
    (UNDEFINED, 'undefined'),
])
def test_classify_value(value, expected):
    assert classify_value(value) == expected


def test_classify_value_without_argument_is_undefined():
    assert classify_value() == 'undefined'


def test_classify_value_is_deterministic():
    for value, _, label in known_values():
        first = classify_value(value)
        assert first == label
        assert classify_value(value) == first
        assert first


def test_subclasses_follow_their_base():
    class MyList(list):
        pass

    class MyDate(datetime.date):
        pass

    assert classify_value(MyList()) == 'array'
    assert classify_value(MyDate(2000, 1, 1)) == 'date'


def test_undefined_is_a_falsy_singleton():
    assert not UNDEFINED
    assert type(UNDEFINED)() is UNDEFINED
    assert repr(UNDEFINED) == 'UNDEFINED'


def test_symbols_are_unique():
    a, b = Symbol('x'), Symbol('x')
    assert a != b
    assert a == a
    assert repr(a) == "Symbol('x')"
    assert repr(Symbol()) == 'Symbol()'


# -------------------------
# Tests for KindRegistry
# -------------------------

def test_register_appends_after_default_rules():
    registry = DEFAULT_REGISTRY.copy()
    registry.register('mapping', dict)

    assert classify_value({}, registry=registry) == 'mapping'
    assert classify_value({}) == 'object'
    assert registry.rules[-1].label == 'mapping'
    assert len(registry.rules) == len(DEFAULT_REGISTRY.rules) + 1


def test_register_before_takes_priority():
    class Vector(list):
        pass

    registry = DEFAULT_REGISTRY.copy()
    registry.register('vector', Vector)
    assert classify_value(Vector(), registry=registry) == 'array'

    registry = DEFAULT_REGISTRY.copy()
    registry.register('vector', Vector, before='array')
    assert classify_value(Vector(), registry=registry) == 'vector'
    assert classify_value([], registry=registry) == 'array'


def test_null_wins_over_registered_rules():
    registry = DEFAULT_REGISTRY.copy()
    registry.register('nothing', type(None), before='array')
    assert classify_value(None, registry=registry) == 'null'


def test_register_validates_arguments():
    registry = KindRegistry(cache=KindCache())
    with pytest.raises(ValueError):
        registry.register('', dict)
    with pytest.raises(TypeError):
        registry.register('mapping')
    with pytest.raises(TypeError):
        registry.register('mapping', 5)
    with pytest.raises(KeyError):
        registry.register('mapping', dict, before='no-such-label')


def test_register_clears_cached_labels():
    cache = KindCache()
    registry = KindRegistry(cache=cache)

    assert classify_value({}, registry=registry) == 'object'
    assert len(cache) == 1

    registry.register('mapping', dict)
    assert len(cache) == 0
    assert classify_value({}, registry=registry) == 'mapping'


def test_empty_registry_falls_back_to_object():
    registry = KindRegistry(rules=[], cache=KindCache())
    assert classify_value([], registry=registry) == 'object'
    assert classify_value(None, registry=registry) == 'null'
    assert classify_value(float('nan'), registry=registry) == 'NaN'


def test_register_kind_uses_default_registry():
    with patch('realtype.kinds.DEFAULT_REGISTRY', DEFAULT_REGISTRY.copy()):
        register_kind('bytes', bytes, bytearray)
        assert classify_value(b'abc') == 'bytes'
        assert classify_value(bytearray()) == 'bytes'
    assert classify_value(b'abc') == 'object'


def test_label_lookups_are_cached():
    cache = KindCache()
    registry = KindRegistry(cache=cache)

    classify_value([1], registry=registry)
    classify_value([2, 3], registry=registry)
    classify_value({}, registry=registry)

    stats = cache.get_stats()
    assert stats['cache_misses'] == 2
    assert stats['cache_hits'] == 1
    assert stats['cache_size'] == 2
    assert stats['hit_rate_percent'] == pytest.approx(100 / 3)


def test_cache_is_bounded():
    cache = KindCache(max_size=2)
    registry = KindRegistry(cache=cache)
    for value in ([], {}, set(), re.compile('x')):
        classify_value(value, registry=registry)
    assert len(cache) == 2


def test_registries_built_without_cache_do_not_share_labels():
    assert classify_value([]) == 'array'

    empty = KindRegistry(rules=[])
    assert classify_value([], registry=empty) == 'object'
    assert classify_value([]) == 'array'


def test_registering_on_a_new_registry_leaves_the_default_alone():
    custom = KindRegistry()
    custom.register('mapping', dict)

    assert classify_value({}, registry=custom) == 'mapping'
    assert classify_value({}) == 'object'
    assert classify_value({}, registry=KindRegistry()) == 'object'
    assert classify_value({}, registry=custom) == 'mapping'


def test_default_registry_first_does_not_leak_into_new_registries():
    assert classify_value({}) == 'object'
    assert classify_value(set()) == 'set'

    custom = KindRegistry()
    custom.register('mapping', dict, before='array')
    assert classify_value({}, registry=custom) == 'mapping'
    assert classify_value(set(), registry=KindRegistry(rules=[])) == 'object'


def test_new_registry_owns_a_configured_cache():
    with patch.dict(os.environ, {'REALTYPE_CACHE_MAX_SIZE': '12'}, clear=True):
        registry = KindRegistry()
        cache = registry.cache
    assert cache.max_size == 12
    assert registry.cache is cache
    assert cache is not get_cache()
    assert DEFAULT_REGISTRY.cache is get_cache()
    assert KindRegistry().cache is not cache


def test_cache_length_under_concurrent_writes():
    cache = KindCache(max_size=1000)
    classes = [type(f'Kind{i}', (), {}) for i in range(200)]

    def fill(chunk):
        for cls in chunk:
            cache.put(cls, 'object')
            len(cache)

    workers = [threading.Thread(target=fill, args=(classes[i::4],)) for i in range(4)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    assert len(cache) == 200


def test_numpy_timedelta_is_a_number():
    # numpy.timedelta64 subclasses numpy.signedinteger, so it is numeric
    assert basic_kind(np.timedelta64(5, 's')) == 'number'
    assert classify_value(np.timedelta64(5, 's')) == 'number'
    assert classify_value(np.datetime64('2020-01-01')) == 'date'


# -------------------------
# Tests for the array-level queries
# -------------------------

def test_all_same_type():
    assert all_same_type([]) is True
    assert all_same_type([11, 12, 13]) is True
    assert all_same_type(['11', '12', '13']) is True
    assert all_same_type(['11', UserString('12'), '13']) is False
    assert all_same_type([{}]) is True
    assert all_same_type([123, float('nan'), math.inf]) is False
    assert all_same_type([123, float('nan'), math.inf], classify=basic_kind) is True


def test_all_same_type_accepts_iterators():
    assert all_same_type(iter([1, 2, 3])) is True
    assert all_same_type(x for x in [1, 'a']) is False
    assert all_same_type(iter([])) is True


def test_all_same_type_short_circuits():
    seen = []

    def recording(value):
        seen.append(value)
        return classify_value(value)

    assert all_same_type([1, 'a', 2, 3], classify=recording) is False
    assert seen == [1, 'a']


def test_all_unique_type():
    assert all_unique_type([]) is True
    assert all_unique_type([True, 123, '123']) is True
    assert all_unique_type([True, 123, False]) is False
    assert all_unique_type([value for value, _, _ in known_values()]) is True
    assert all_unique_type([1, float('nan'), math.inf, 2 ** 60]) is True


def test_all_unique_type_short_circuits():
    seen = []

    def recording(value):
        seen.append(value)
        return classify_value(value)

    assert all_unique_type([True, 123, False, 'x'], classify=recording) is False
    assert seen == [True, 123, False]


def test_count_by_type():
    expected = [('boolean', 3), ('null', 1), ('object', 1)]
    assert count_by_type([]) == []
    assert count_by_type([True, None, False, False, {}]) == expected
    assert count_by_type([{}, None, True, not None, not not None]) == expected


def test_count_by_type_orders_by_code_point():
    histogram = count_by_type([1, float('nan'), math.inf, 'a', None])
    assert [label for label, _ in histogram] == ['Infinity', 'NaN', 'null', 'number', 'string']


@pytest.mark.parametrize("values", [
    [],
    [1, 2, 3],
    [value for value, _, _ in known_values()],
    [None, None, [], (), {}, 'a', 1.5, float('nan'), set(), UNDEFINED],
])
def test_count_by_type_matches_item_labels(values):
    histogram = count_by_type(values)
    labels = classify_items(values)

    assert sum(count for _, count in histogram) == len(values)
    assert {label for label, _ in histogram} == set(labels)
    assert all(count >= 1 for _, count in histogram)
    assert len({label for label, _ in histogram}) == len(histogram)


def test_count_by_type_with_basic_kinds():
    assert count_by_type([None, [], float('nan')], classify=basic_kind) == [('number', 1), ('object', 2)]


def test_item_labels():
    table = known_values()
    values = [value for value, _, _ in table]
    assert basic_kinds(values) == [kind for _, kind, _ in table]
    assert classify_items(values) == [label for _, _, label in table]
    assert classify_items([]) == []
