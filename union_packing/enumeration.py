"""
Exact packing by complete enumeration.

Scans item subsets from the largest size downwards and stops at the first
size for which some subset fits in the budget. Exponential in the number of
items, so only practical for small instances; used to validate the
branch-and-bound search and its bounds.
"""

import itertools
import time
from typing import FrozenSet, Iterable, List, Sequence, Tuple

from models import eligible_records


def _fits(requirement_sets: Iterable[FrozenSet], budget: int) -> bool:
    used = set()
    for req in requirement_sets:
        used |= req
        if len(used) > budget:
            return False
    return True


def solve_by_enumeration(
    records: Iterable[Tuple[str, Iterable[str]]],
    budget: int,
    time_limit: float = 60.0,
    verbose: bool = False
) -> Tuple[int, List[str], int]:
    """
    Enumerate item subsets and return a largest one that fits the budget.

    Items whose own requirement set exceeds the budget are dropped first.

    Args:
        records: Iterable of (name, resources) pairs
        budget: Resource budget
        time_limit: Maximum enumeration time in seconds
        verbose: Whether to print progress

    Returns:
        Tuple of (size, selected names, subsets checked)

    Raises:
        TimeoutError: If the time limit is exceeded
    """
    eligible = eligible_records(records, budget)
    n = len(eligible)
    start_time = time.time()
    count = 0

    if verbose:
        print("=" * 70)
        print(f"Enumerating subsets of {n} eligible items, budget={budget}")

    for size in range(n, 0, -1):
        for combo in itertools.combinations(range(n), size):
            count += 1
            if count % 1000 == 0 and time.time() - start_time > time_limit:
                raise TimeoutError(f"Time limit exceeded in enumeration after checking {count} subsets.")
            if _fits((eligible[i][1] for i in combo), budget):
                if verbose:
                    print(f"Found {size} items after checking {count} subsets "
                          f"in {time.time() - start_time:.2f} seconds")
                return size, [eligible[i][0] for i in combo], count

    return 0, [], count


def max_addable(requirement_sets: Sequence[FrozenSet], budget: int) -> int:
    """Largest number of the given requirement sets whose union fits the budget.

    Works on any hashable resource representation (identifiers or indices).
    """
    n = len(requirement_sets)
    for size in range(n, 0, -1):
        for combo in itertools.combinations(requirement_sets, size):
            if _fits(combo, budget):
                return size
    return 0
