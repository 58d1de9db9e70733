"""Pruning tests for the branch-and-bound search.

Two checks decide whether a search node can be abandoned:

singleton_bound:
    Upper bound on how many more items from the candidate list can still be
    added. Non-singular items are optimistically counted as always addable.
    A singular item brings a resource nobody else uses, so it grows the load
    by at least one; at most `budget_left` of them fit.

forbidden_check:
    A node is a duplicate if an item excluded on its path is already fully
    covered by the load. Adding that item is free, so every selection below
    this node is beaten by the same selection plus that item, which the
    include branch of the ancestor explores.
"""

from typing import Iterable, Sequence

from models import Item
from resource_set import ResourceSet


def singleton_bound(remaining: Sequence[Item], budget_left: int) -> int:
    """Upper bound on the number of remaining items that can still be added.

    Args:
        remaining: Candidate items
        budget_left: Resources still available (budget - |load|)

    Returns:
        int: (non-singular count) + min(singular count, budget_left)
    """
    n_singular = sum(1 for it in remaining if it.singular)
    return len(remaining) - n_singular + min(n_singular, max(budget_left, 0))


def forbidden_check(forbidden: Iterable[Item], load: ResourceSet) -> bool:
    """True if some forbidden item's requirements are a subset of the load."""
    return any(it.requirements.is_subset(load) for it in forbidden)
