"""Data structures for the budgeted union packing problem.

This module contains the core data classes used throughout the solver:
- Item: An eligible item with its requirement set and cost-model annotations
- PackingProblem: Container for the raw problem instance data
- SearchNode: A node (search state) in the branch-and-bound search tree
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from resource_set import ResourceSet


@dataclass(frozen=True, eq=False)
class Item:
    """An item that can be selected if its resources fit the budget.

    Items compare by identity: two input records with the same name and
    requirements are still two different items.

    Attributes:
        name: Identifier for the item
        requirements: Encoded set of required resources
        cost: Scarcity cost, sum of 1/cardinality over required resources
        singular: True if some required resource is used by no other item
        resources: Resource identifiers as read from the input (for display)
    """
    name: str
    requirements: ResourceSet
    cost: float = 0.0
    singular: bool = False
    resources: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def size(self):
        return self.requirements.cardinality()


def eligible_records(records: Iterable[Tuple[str, Iterable[str]]], budget: int) -> List[Tuple[str, FrozenSet[str]]]:
    """Records whose own requirement set fits within the budget, as frozensets."""
    normalized = ((name, frozenset(resources)) for name, resources in records)
    return [(name, res) for name, res in normalized if len(res) <= budget]


class PackingProblem:
    """Container for a packing problem instance.

    Select as many items as possible such that the union of their
    requirement sets has at most `budget` distinct resources.

    Attributes:
        records: List of (name, frozenset of resource identifiers) pairs
        budget: Maximum number of distinct resources of a selection
        n_items: Number of input records (before eligibility filtering)
    """

    def __init__(self, records: Iterable[Tuple[str, Iterable[str]]], budget: int):
        """Initialize a problem instance.

        Args:
            records: Iterable of (name, resources) pairs
            budget: Resource budget (maximum union size)

        Raises:
            ValueError: If budget is negative
        """
        if budget < 0:
            raise ValueError(f"Budget must be >= 0, got {budget}")
        self.records = [(name, frozenset(resources)) for name, resources in records]
        self.budget = int(budget)
        self.n_items = len(self.records)

    @property
    def n_resources(self):
        return len({r for _, resources in self.records for r in resources})

    def eligible_records(self):
        """Records whose own requirement set fits within the budget."""
        return eligible_records(self.records, self.budget)

    def __repr__(self):
        return (f"PackingProblem(n_items={self.n_items}, "
                f"n_resources={self.n_resources}, budget={self.budget})")


class SearchNode:
    """Node in the branch-and-bound search tree.

    A node fixes a partial selection and a set of forbidden items; the
    candidates are the items that are still undecided and still fit next to
    the current load. Candidates are sorted ascending by cost, so the next
    item to branch on is the last one.

    Nodes never share mutable state: branching builds new candidate lists and
    new tuples for the children, and the load is replaced, not updated.

    Attributes:
        candidates: Undecided items, ascending by cost
        partial: Selected items, in selection order
        forbidden: Items excluded on the path to this node
        load: Union of the requirements of the selected items
    """

    def __init__(self, candidates: List[Item], partial: Tuple[Item, ...] = (),
                 forbidden: Tuple[Item, ...] = (), load: Optional[ResourceSet] = None):
        self.candidates = candidates
        self.partial = partial
        self.forbidden = forbidden
        self.load = load if load is not None else ResourceSet()

    @classmethod
    def root(cls, items: Sequence[Item]) -> "SearchNode":
        """Create the root node: everything undecided, nothing selected."""
        return cls(list(items))

    @property
    def score(self):
        return len(self.partial)

    @property
    def load_size(self):
        return self.load.cardinality()

    def budget_left(self, budget: int) -> int:
        """Number of resources that can still be added to the load."""
        return budget - self.load.cardinality()

    def branch(self, budget: int) -> Tuple["SearchNode", "SearchNode"]:
        """Branch on the highest-cost candidate.

        The exclude child keeps the load and forbids the item. The include
        child adds the item's requirements to the load and only keeps the
        candidates that still fit next to the new load.

        Args:
            budget: Resource budget of the problem

        Returns:
            Tuple (exclude_child, include_child)

        Raises:
            IndexError: If the node has no candidates left
        """
        best = self.candidates[-1]
        rest = self.candidates[:-1]

        exclude_child = SearchNode(rest, self.partial, self.forbidden + (best,), self.load)

        new_load = self.load.union(best.requirements)
        feasible = [c for c in rest if new_load.union_cardinality(c.requirements) <= budget]
        include_child = SearchNode(feasible, self.partial + (best,), self.forbidden, new_load)

        return exclude_child, include_child

    def describe(self):
        """Small dict summary of the node, used for logging."""
        return {
            "depth": len(self.partial) + len(self.forbidden),
            "selected": len(self.partial),
            "candidates": len(self.candidates),
            "forbidden": len(self.forbidden),
            "load": self.load.cardinality(),
        }

    def __repr__(self):
        return (f"SearchNode(selected={[it.name for it in self.partial]}, "
                f"candidates={len(self.candidates)}, forbidden={len(self.forbidden)}, "
                f"load={self.load.cardinality()})")
