"""Branch-and-bound solver for the budgeted union packing problem.

This module implements a depth-first branch-and-bound that selects the
largest set of items whose combined resource requirement fits in the budget.
The search runs on an explicit stack of SearchNodes instead of recursion, and
prunes with the forbidden check and the singleton bound (see bounds.py).
"""

import time
from typing import Callable, Iterable, List, Optional, Tuple

from bounds import forbidden_check, singleton_bound
from cost_model import build_candidates
from logger import BnBLogger, NoOpLogger, create_logger
from models import Item, PackingProblem, SearchNode


# Observer called on every new incumbent: (score, selected names, budget)
NewBestCallback = Callable[[int, List[str], int], None]


def run_bnb(problem: PackingProblem, max_nodes: Optional[int] = None,
            time_limit: Optional[float] = None, verbose: bool = False,
            logger: Optional[BnBLogger] = None, instance_name: str = "default",
            enable_logging: bool = True, on_new_best: Optional[NewBestCallback] = None):
    """Branch-and-bound solver for the packing problem.

    Pops nodes from a LIFO stack. A popped node is dropped if a forbidden
    item fits in its load for free, if it has too few candidates left to beat
    the incumbent, or if the singleton bound says the same. Otherwise it is
    branched on its highest-cost candidate: the exclude child is pushed
    first, the include child second, so inclusion is explored first.

    Args:
        problem: PackingProblem instance
        max_nodes: Optional maximum number of nodes to explore
        time_limit: Optional wall-clock limit in seconds, checked at every pop
        verbose: Whether to print new incumbents to the console
        logger: Optional BnBLogger instance for detailed logging
        instance_name: Name for the instance (used if logger is None)
        enable_logging: Whether to create logs when no logger is given
        on_new_best: Optional callback invoked on each new incumbent

    Returns:
        dict with:
            - best_score: Number of items in the best selection
            - best_selection: Names of the selected items, in selection order
            - best_items: The selected Item objects
            - best_resources: Sorted resource identifiers used by the selection
            - nodes_explored: Number of nodes popped from the stack
            - status: 'optimal', 'node_limit' or 'time_limit'
            - runtime: Wall-clock seconds

    Raises:
        ValueError: If max_nodes or time_limit is not positive
    """
    if max_nodes is not None and max_nodes <= 0:
        raise ValueError(f"max_nodes must be positive, got {max_nodes}")
    if time_limit is not None and time_limit <= 0:
        raise ValueError(f"time_limit must be positive, got {time_limit}")

    owns_logger = logger is None
    if logger is None and enable_logging:
        logger = create_logger(instance_name=instance_name)
    elif logger is None:
        logger = NoOpLogger()

    budget = problem.budget
    universe, items = build_candidates(problem.records, budget)

    problem_data = {
        "n_items": problem.n_items,
        "n_eligible": len(items),
        "n_resources": len(universe),
        "budget": budget,
        "n_singular": sum(1 for it in items if it.singular),
        "max_nodes": max_nodes,
        "time_limit": time_limit,
    }
    logger.start_run(problem_data)
    start_time = time.time()
    deadline = start_time + time_limit if time_limit is not None else None

    best_score = 0
    best_partial: Tuple[Item, ...] = ()

    frontier = [SearchNode.root(items)]
    nodes = 0
    status = "optimal"

    logger.info(f"Starting branch-and-bound with {len(items)} eligible items, budget={budget}")

    while frontier:
        if deadline is not None and time.time() >= deadline:
            status = "time_limit"
            logger.warning(f"Time limit {time_limit}s reached after {nodes} nodes, stopping")
            break
        if max_nodes is not None and nodes >= max_nodes:
            status = "node_limit"
            logger.warning(f"Node limit {max_nodes} reached, stopping")
            break

        node = frontier.pop()  # DFS
        nodes += 1
        logger.log_node_visit(node)

        # Some excluded item is already covered by the load: a sibling
        # branch that included it dominates everything below this node
        if forbidden_check(node.forbidden, node.load):
            logger.log_node_pruned("forbidden_subsumed", node)
            continue

        score = node.score
        if score > best_score:
            best_score = score
            best_partial = node.partial
            selection = [it.name for it in best_partial]
            logger.log_incumbent_update(best_score, selection, node_count=nodes,
                                        load_size=node.load_size)
            if on_new_best is not None:
                on_new_best(best_score, selection, budget)
            if verbose:
                print(f"{best_score} items found for {budget} resources")

        if not node.candidates:
            logger.log_node_evaluated(score, node)
            continue

        threshold = best_score - score

        if len(node.candidates) <= threshold:
            logger.log_node_pruned("candidates_exhausted", node)
            continue

        if singleton_bound(node.candidates, node.budget_left(budget)) <= threshold:
            logger.log_node_pruned("singleton_bound", node)
            continue

        exclude_child, include_child = node.branch(budget)
        frontier.append(exclude_child)
        frontier.append(include_child)

    runtime = time.time() - start_time
    load = None
    for it in best_partial:
        load = it.requirements if load is None else load.union(it.requirements)

    result = {
        'best_score': best_score,
        'best_selection': [it.name for it in best_partial],
        'best_items': list(best_partial),
        'best_resources': universe.decode(load) if load is not None else [],
        'nodes_explored': nodes,
        'status': status,
        'runtime': runtime,
    }

    # Item objects are not JSON serializable
    logger.end_run({k: v for k, v in result.items() if k != 'best_items'})
    if owns_logger:
        logger.close()

    return result


def solve(records: Iterable[Tuple[str, Iterable[str]]], budget: int, **kwargs):
    """Convenience wrapper: build the problem from raw records and search.

    Logging is off unless enable_logging=True is passed.

    Returns:
        tuple: (selected names, size)
    """
    kwargs.setdefault("enable_logging", False)
    result = run_bnb(PackingProblem(records, budget), **kwargs)
    return result['best_selection'], result['best_score']
