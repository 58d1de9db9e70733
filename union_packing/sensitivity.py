"""
Sensitivity Analysis for Branch-and-Bound Performance

This script measures how the search reacts to instance size by varying one
parameter at a time while keeping the others at a baseline:

1. Generate random instances with a fixed seed per (value, repetition)
2. Run the branch-and-bound search on each instance
3. Collect runtime, nodes explored, pruning statistics and the best size
4. Save all rows to CSV and print a per-value summary

Parameters that can be varied:
- items:     number of items
- resources: size of the resource pool the items draw from
- budget:    resource budget
"""

import argparse
import random
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pandas as pd

from bnb import run_bnb
from logger import NoOpLogger, create_logger
from models import PackingProblem


# Baseline configuration (used when parameter is not being varied)
BASELINE = {
    'n_items': 20,          # Number of items
    'n_resources': 30,      # Size of the resource pool
    'max_item_size': 4,     # Items use 1..max_item_size resources
    'budget': 8,            # Resource budget
    'max_nodes': 200000,    # BnB node limit
    'time_limit': 60.0,     # Seconds per instance
}

PARAMETERS = ('items', 'resources', 'budget')

FIELDNAMES = [
    'parameter', 'value', 'repetition', 'seed',
    'n_items', 'n_resources', 'budget',
    'runtime', 'nodes_explored', 'nodes_pruned', 'pruning_rate',
    'pruned_forbidden', 'pruned_bound', 'best_score', 'status',
]


def generate_instance(n_items: int, n_resources: int, budget: int, seed: int,
                      max_item_size: int = BASELINE['max_item_size']) -> PackingProblem:
    """
    Generate a random instance with the given parameters.

    Each item draws between 1 and max_item_size distinct resources uniformly
    from a pool of n_resources identifiers.
    """
    rng = random.Random(seed)
    pool = [f"r{k}" for k in range(n_resources)]
    records = []
    for j in range(n_items):
        size = rng.randint(1, min(max_item_size, n_resources))
        records.append((f"I{j + 1}", frozenset(rng.sample(pool, size))))
    return PackingProblem(records, budget)


def run_single_test(n_items: int, n_resources: int, budget: int, seed: int,
                    max_nodes: Optional[int] = None, time_limit: Optional[float] = None,
                    log_dir: Optional[str] = None) -> Dict:
    """
    Run BnB on a single instance and collect performance metrics.

    Returns:
        Dictionary with metrics: runtime, nodes_explored, nodes_pruned,
        pruning_rate, pruned_forbidden, pruned_bound, best_score, status
    """
    problem = generate_instance(n_items, n_resources, budget, seed)

    instance_name = f"sensitivity_{n_items}i_{n_resources}r_{budget}b_s{seed}"
    logger = create_logger(instance_name=instance_name, log_dir=log_dir) if log_dir else NoOpLogger()

    start_time = time.time()
    result = run_bnb(problem, max_nodes=max_nodes, time_limit=time_limit, logger=logger)
    runtime = time.time() - start_time
    metrics = logger.get_metrics()
    logger.close()

    reasons = metrics.get('pruning_reasons', {})
    explored = result['nodes_explored']
    pruned = metrics.get('nodes_pruned', 0)
    return {
        'seed': seed,
        'n_items': n_items,
        'n_resources': n_resources,
        'budget': budget,
        'runtime': runtime,
        'nodes_explored': explored,
        'nodes_pruned': pruned,
        'pruning_rate': pruned / explored if explored else 0.0,
        'pruned_forbidden': reasons.get('forbidden_subsumed', 0),
        'pruned_bound': reasons.get('singleton_bound', 0) + reasons.get('candidates_exhausted', 0),
        'best_score': result['best_score'],
        'status': result['status'],
    }


def run_sensitivity_analysis(parameter: str, values: Sequence[int], repetitions: int = 5,
                             output_file: Optional[str] = None, log_dir: Optional[str] = None,
                             verbose: bool = True) -> pd.DataFrame:
    """
    Run sensitivity analysis by varying a single parameter.

    Args:
        parameter: Which parameter to vary ('items', 'resources' or 'budget')
        values: Parameter values to test
        repetitions: Number of random instances per value
        output_file: Optional CSV file path to save results
        log_dir: Optional directory for per-run log files
        verbose: Whether to print progress

    Returns:
        DataFrame with one row per run

    Raises:
        ValueError: If parameter is unknown
    """
    if parameter not in PARAMETERS:
        raise ValueError(f"Unknown parameter: {parameter}")

    rows: List[Dict] = []
    for value in values:
        if verbose:
            print(f"\n--- Testing {parameter} = {value} ---")

        n_items = int(value) if parameter == 'items' else BASELINE['n_items']
        n_resources = int(value) if parameter == 'resources' else BASELINE['n_resources']
        budget = int(value) if parameter == 'budget' else BASELINE['budget']

        for rep in range(repetitions):
            seed = 1000 * int(value) + rep  # Deterministic seed based on value and rep
            metrics = run_single_test(
                n_items=n_items,
                n_resources=n_resources,
                budget=budget,
                seed=seed,
                max_nodes=BASELINE['max_nodes'],
                time_limit=BASELINE['time_limit'],
                log_dir=log_dir,
            )
            metrics['parameter'] = parameter
            metrics['value'] = value
            metrics['repetition'] = rep
            rows.append(metrics)

            if verbose:
                print(f"  Repetition {rep + 1}/{repetitions} (seed={seed}): "
                      f"{metrics['status']}, {metrics['runtime']:.2f}s, "
                      f"{metrics['nodes_explored']} nodes, best={metrics['best_score']}")

    df = pd.DataFrame(rows, columns=FIELDNAMES)

    if output_file is not None:
        Path(output_file).parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(output_file, index=False)
        if verbose:
            print(f"\nResults saved to: {output_file}")

    return df


def summarize_results(df: pd.DataFrame) -> pd.DataFrame:
    """Mean runtime, nodes, pruning rate and best size per parameter value."""
    return (df.groupby('value')[['runtime', 'nodes_explored', 'pruning_rate', 'best_score']]
              .mean()
              .reset_index())


def main():
    parser = argparse.ArgumentParser(
        description='Run sensitivity analysis for BnB search performance',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Vary number of items from 10 to 40 in steps of 5
  python sensitivity.py --parameter items --start 10 --stop 40 --step 5

  # Vary the budget from 4 to 16
  python sensitivity.py --parameter budget --start 4 --stop 16 --step 2 --repetitions 10
        """
    )
    parser.add_argument('--parameter', type=str, required=True, choices=PARAMETERS,
                        help='Parameter to vary')
    parser.add_argument('--start', type=int, required=True,
                        help='First value of the parameter')
    parser.add_argument('--stop', type=int, required=True,
                        help='Last value of the parameter (inclusive)')
    parser.add_argument('--step', type=int, default=1,
                        help='Step size (default: 1)')
    parser.add_argument('--repetitions', type=int, default=5,
                        help='Number of random instances per value (default: 5)')
    parser.add_argument('--output-dir', type=str, default='results/sensitivity',
                        help='Directory to save results (default: results/sensitivity)')

    args = parser.parse_args()

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    output_file = f"{args.output_dir}/sensitivity_{args.parameter}_{timestamp}.csv"

    df = run_sensitivity_analysis(
        parameter=args.parameter,
        values=range(args.start, args.stop + 1, args.step),
        repetitions=args.repetitions,
        output_file=output_file,
    )

    print("\n" + "=" * 70)
    print("SUMMARY")
    print("=" * 70)
    print(summarize_results(df).to_string(index=False))


if __name__ == '__main__':
    main()
