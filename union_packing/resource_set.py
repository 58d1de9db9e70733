"""Compact resource sets for the packing search.

This module contains the set representation used throughout the solver:
- ResourceSet: Dense bit vector over resource indices (backed by a Python int)
- ResourceUniverse: Stable mapping between resource identifiers and indices

Every set operation the search needs (union, cardinality, subset tests,
difference counts) is a single integer operation on the bit vector.
"""

from typing import Dict, Iterable, Iterator, List


class ResourceSet:
    """Set of resource indices stored as a dense bit vector.

    Bit i is set iff the resource with index i is in the set. Instances are
    treated as values by the search: only ``insert`` mutates, and it is used
    while building item requirement sets, never on a set that a search node
    already holds.

    Attributes:
        bits: Integer whose set bits are the member indices
    """

    def __init__(self, bits: int = 0):
        if bits < 0:
            raise ValueError("ResourceSet bits must be non-negative")
        self.bits = bits

    @classmethod
    def from_indices(cls, indices: Iterable[int]) -> "ResourceSet":
        """Build a set from resource indices.

        Args:
            indices: Iterable of non-negative indices

        Returns:
            ResourceSet containing exactly those indices
        """
        rs = cls()
        for idx in indices:
            rs.insert(idx)
        return rs

    def insert(self, index: int):
        """Add one resource index to the set (in place)."""
        if index < 0:
            raise ValueError(f"Resource index must be non-negative, got {index}")
        self.bits |= 1 << index

    def union(self, other: "ResourceSet") -> "ResourceSet":
        """Return a new set holding the members of both sets."""
        return ResourceSet(self.bits | other.bits)

    def cardinality(self) -> int:
        """Number of resources in the set."""
        return self.bits.bit_count()

    def union_cardinality(self, other: "ResourceSet") -> int:
        """Size of the union with other, without building the union."""
        return (self.bits | other.bits).bit_count()

    def is_subset(self, other: "ResourceSet") -> bool:
        """True if every member of this set is also in other."""
        return self.bits & ~other.bits == 0

    def is_superset(self, other: "ResourceSet") -> bool:
        """True if every member of other is also in this set."""
        return other.bits & ~self.bits == 0

    def difference_cardinality(self, other: "ResourceSet") -> int:
        """Number of members of this set that are not in other."""
        return (self.bits & ~other.bits).bit_count()

    def __or__(self, other: "ResourceSet") -> "ResourceSet":
        return self.union(other)

    def __len__(self) -> int:
        return self.cardinality()

    def __iter__(self) -> Iterator[int]:
        bits = self.bits
        idx = 0
        while bits:
            if bits & 1:
                yield idx
            bits >>= 1
            idx += 1

    def __contains__(self, index: int) -> bool:
        return index >= 0 and (self.bits >> index) & 1 == 1

    def __eq__(self, other):
        if not isinstance(other, ResourceSet):
            return NotImplemented
        return self.bits == other.bits

    def __hash__(self):
        return hash(self.bits)

    def __repr__(self):
        return f"ResourceSet({sorted(self)})"


class ResourceUniverse:
    """Indexed collection of the distinct resource identifiers of a problem.

    Identifiers are indexed in sorted order, so the same input always gets the
    same indices. The universe is immutable once built.
    """

    def __init__(self, resources: Iterable[str]):
        """Index the given resource identifiers.

        Args:
            resources: Resource identifiers (duplicates are collapsed)
        """
        self._names: List[str] = sorted(set(resources))
        self._index: Dict[str, int] = {name: i for i, name in enumerate(self._names)}

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, resource: str) -> bool:
        return resource in self._index

    def index_of(self, resource: str) -> int:
        """Index of a resource identifier.

        Raises:
            KeyError: If the resource is not part of the universe
        """
        return self._index[resource]

    def encode(self, resources: Iterable[str]) -> ResourceSet:
        """Convert resource identifiers into a ResourceSet."""
        return ResourceSet.from_indices(self._index[r] for r in resources)

    def decode(self, resource_set: ResourceSet) -> List[str]:
        """Convert a ResourceSet back into sorted resource identifiers."""
        return [self._names[i] for i in resource_set]

    @property
    def names(self) -> List[str]:
        return list(self._names)

    def __repr__(self):
        return f"ResourceUniverse(n_resources={len(self._names)})"
