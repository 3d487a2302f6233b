"""
Tests for the AVL-backed ordered key index.

Run with: pytest test_key_index.py -v
"""

import random

import pytest
from sortedcontainers import SortedList

from fleet_dispatch import NOT_FOUND, OrderedKeyIndex


def oracle_predecessor(keys: SortedList, value: int) -> int:
    i = keys.bisect_left(value)
    return keys[i - 1] if i > 0 else NOT_FOUND


def oracle_successor(keys: SortedList, value: int) -> int:
    i = keys.bisect_right(value)
    return keys[i] if i < len(keys) else NOT_FOUND


@pytest.fixture
def index():
    return OrderedKeyIndex([50, 20, 80, 10, 30, 70, 90])


class TestEmptyIndex:
    """Queries on an empty index."""

    def test_queries_return_not_found(self):
        empty = OrderedKeyIndex()

        assert len(empty) == 0
        assert empty.height == 0
        assert empty.predecessor(10) == NOT_FOUND
        assert empty.successor(10) == NOT_FOUND
        assert list(empty.range_from(0)) == []
        assert 10 not in empty

    def test_delete_absent_is_noop(self):
        empty = OrderedKeyIndex()
        assert empty.delete(5) is False
        assert len(empty) == 0


class TestInsertDelete:
    """Idempotent insert and delete."""

    def test_insert_reports_change(self):
        idx = OrderedKeyIndex()
        assert idx.insert(5) is True
        assert idx.insert(5) is False
        assert len(idx) == 1
        assert 5 in idx

    def test_negative_key_rejected(self):
        idx = OrderedKeyIndex()
        with pytest.raises(ValueError):
            idx.insert(-1)

    def test_zero_is_a_valid_key(self):
        idx = OrderedKeyIndex([0])
        assert 0 in idx
        assert idx.successor(-1) == 0
        assert idx.predecessor(1) == 0

    def test_delete_leaf(self, index):
        assert index.delete(10) is True
        assert 10 not in index
        assert list(index) == [20, 30, 50, 70, 80, 90]
        assert index.is_balanced()

    def test_delete_node_with_two_children(self, index):
        assert index.delete(20) is True
        assert list(index) == [10, 30, 50, 70, 80, 90]
        assert index.is_balanced()

    def test_delete_root(self, index):
        assert index.delete(50) is True
        assert 50 not in index
        assert list(index) == [10, 20, 30, 70, 80, 90]
        assert index.is_balanced()

    def test_delete_everything(self, index):
        for key in [50, 20, 80, 10, 30, 70, 90]:
            index.delete(key)
        assert len(index) == 0
        assert index.height == 0
        assert index.successor(0) == NOT_FOUND

    def test_clear(self, index):
        index.clear()
        assert len(index) == 0
        assert list(index) == []


class TestNeighbourQueries:
    """Strict predecessor and successor."""

    def test_predecessor_is_strict(self, index):
        assert index.predecessor(50) == 30
        assert index.predecessor(51) == 50
        assert index.predecessor(10) == NOT_FOUND
        assert index.predecessor(1000) == 90

    def test_successor_is_strict(self, index):
        assert index.successor(50) == 70
        assert index.successor(49) == 50
        assert index.successor(90) == NOT_FOUND
        assert index.successor(-5) == 10

    def test_walk_down_with_predecessor(self, index):
        walk = []
        key = index.predecessor(85)
        while key != NOT_FOUND:
            walk.append(key)
            key = index.predecessor(key)
        assert walk == [80, 70, 50, 30, 20, 10]


class TestRangeFrom:
    """Ascending tail iteration."""

    def test_includes_lower_bound(self, index):
        assert list(index.range_from(30)) == [30, 50, 70, 80, 90]

    def test_between_keys(self, index):
        assert list(index.range_from(31)) == [50, 70, 80, 90]

    def test_below_minimum_returns_all(self, index):
        assert list(index.range_from(0)) == list(index)
        assert list(index) == [10, 20, 30, 50, 70, 80, 90]

    def test_above_maximum_is_empty(self, index):
        assert list(index.range_from(91)) == []

    def test_is_lazy(self, index):
        it = index.range_from(20)
        assert next(it) == 20
        assert next(it) == 30


class TestBalance:
    """AVL height bound under adversarial input."""

    def test_sequential_inserts_stay_balanced(self):
        idx = OrderedKeyIndex(range(1000))
        assert len(idx) == 1000
        assert idx.is_balanced()
        assert idx.height <= 14

    def test_descending_inserts_stay_balanced(self):
        idx = OrderedKeyIndex(range(1000, 0, -1))
        assert idx.is_balanced()
        assert idx.height <= 14

    def test_deleting_half_stays_balanced(self):
        idx = OrderedKeyIndex(range(512))
        for key in range(0, 512, 2):
            idx.delete(key)
        assert len(idx) == 256
        assert idx.is_balanced()
        assert list(idx) == list(range(1, 512, 2))


class TestAgainstSortedList:
    """Random operations checked against a SortedList."""

    def test_random_operations(self):
        rng = random.Random(20240611)
        idx = OrderedKeyIndex()
        oracle = SortedList()

        for _ in range(2000):
            key = rng.randint(0, 300)
            if rng.random() < 0.6:
                changed = idx.insert(key)
                assert changed == (key not in oracle)
                if changed:
                    oracle.add(key)
            else:
                changed = idx.delete(key)
                assert changed == (key in oracle)
                if changed:
                    oracle.remove(key)

            probe = rng.randint(-5, 305)
            assert idx.predecessor(probe) == oracle_predecessor(oracle, probe)
            assert idx.successor(probe) == oracle_successor(oracle, probe)
            assert (probe in idx) == (probe in oracle)

        assert len(idx) == len(oracle)
        assert list(idx) == list(oracle)
        assert list(idx.range_from(150)) == list(oracle.irange(150))
        assert idx.is_balanced()
