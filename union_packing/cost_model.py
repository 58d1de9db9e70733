"""Candidate ordering for the branch-and-bound search.

Each eligible item gets a scarcity cost: the sum over its resources of
1/cardinality, where the cardinality of a resource is the number of eligible
items using it. Items built from rare resources are expensive to skip, so the
search decides on them first.

Eligible items are those whose own requirement set fits within the budget;
all other items can never be part of a solution and are dropped here.
"""

from collections import Counter
from typing import Dict, Iterable, List, Tuple

from models import Item, eligible_records
from resource_set import ResourceUniverse


def resource_cardinality(records: Iterable[Tuple[str, Iterable[str]]], budget: int) -> Dict[str, int]:
    """Count how many eligible items use each resource.

    Args:
        records: Iterable of (name, resources) pairs
        budget: Resource budget; records with more resources are ignored

    Returns:
        dict mapping resource identifier to the number of eligible items using it
    """
    counts = Counter()
    for _, resources in records:
        resources = set(resources)
        if len(resources) <= budget:
            counts.update(resources)
    return dict(counts)


def item_cost(resources: Iterable[str], cardinality: Dict[str, int]) -> float:
    """Scarcity cost of an item: sum of 1/cardinality over its resources."""
    # Sorted so the float sum does not depend on set iteration order
    return sum(1.0 / cardinality[r] for r in sorted(resources))


def is_singular(resources: Iterable[str], cardinality: Dict[str, int]) -> bool:
    """True if the item uses a resource no other eligible item uses."""
    return any(cardinality[r] == 1 for r in resources)


def build_candidates(records: Iterable[Tuple[str, Iterable[str]]], budget: int) -> Tuple[ResourceUniverse, List[Item]]:
    """Build the resource index and the cost-sorted candidate list.

    Args:
        records: Iterable of (name, resources) pairs
        budget: Resource budget

    Returns:
        tuple: (universe, items) where:
            - universe: ResourceUniverse over the resources of eligible items
            - items: Eligible items sorted ascending by cost (stable on ties)
    """
    eligible = eligible_records(records, budget)
    cardinality = resource_cardinality(eligible, budget)
    universe = ResourceUniverse(cardinality.keys())

    items = [
        Item(
            name=name,
            requirements=universe.encode(resources),
            cost=item_cost(resources, cardinality),
            singular=is_singular(resources, cardinality),
            resources=resources,
        )
        for name, resources in eligible
    ]
    items.sort(key=lambda it: it.cost)
    return universe, items
