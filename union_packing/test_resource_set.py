"""Tests for ResourceSet and ResourceUniverse."""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import pytest

from resource_set import ResourceSet, ResourceUniverse


def test_insert_and_cardinality():
    rs = ResourceSet()
    assert rs.cardinality() == 0
    rs.insert(3)
    rs.insert(0)
    rs.insert(3)
    assert rs.cardinality() == 2, f"Expected 2 members, got {rs.cardinality()}"
    assert len(rs) == 2
    assert list(rs) == [0, 3]
    assert 3 in rs and 1 not in rs


def test_union_does_not_mutate_operands():
    a = ResourceSet.from_indices([0, 1])
    b = ResourceSet.from_indices([1, 2])
    u = a.union(b)
    assert list(u) == [0, 1, 2]
    assert list(a) == [0, 1] and list(b) == [1, 2]
    assert (a | b) == u
    assert a.union_cardinality(b) == 3


def test_subset_superset_and_difference():
    small = ResourceSet.from_indices([1, 4])
    big = ResourceSet.from_indices([0, 1, 4, 7])
    other = ResourceSet.from_indices([1, 5])

    assert small.is_subset(big)
    assert big.is_superset(small)
    assert not big.is_subset(small)
    assert not other.is_subset(big)
    assert ResourceSet().is_subset(small), "Empty set is a subset of everything"
    assert small.is_subset(small) and small.is_superset(small)

    assert big.difference_cardinality(small) == 2
    assert small.difference_cardinality(big) == 0
    assert other.difference_cardinality(big) == 1


def test_equality_and_hash():
    a = ResourceSet.from_indices([2, 5])
    b = ResourceSet.from_indices([5, 2])
    assert a == b
    assert hash(a) == hash(b)
    assert a != ResourceSet.from_indices([2])
    assert repr(a) == "ResourceSet([2, 5])"


def test_negative_index_rejected():
    with pytest.raises(ValueError):
        ResourceSet().insert(-1)
    with pytest.raises(ValueError):
        ResourceSet(-4)


def test_universe_sorted_indexing_roundtrip():
    universe = ResourceUniverse(["lime", "gin", "rum", "gin"])
    assert len(universe) == 3
    assert universe.names == ["gin", "lime", "rum"]
    assert universe.index_of("gin") == 0
    assert universe.index_of("rum") == 2

    encoded = universe.encode({"rum", "gin"})
    assert list(encoded) == [0, 2]
    assert universe.decode(encoded) == ["gin", "rum"]
    assert "lime" in universe and "soda" not in universe


def test_universe_unknown_resource():
    universe = ResourceUniverse(["a"])
    with pytest.raises(KeyError):
        universe.encode({"b"})
