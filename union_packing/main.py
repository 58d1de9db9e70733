"""Union packing solver CLI.

Reads items as comma-delimited lines (`name,resource1,resource2,...`) and
finds the largest set of items that together use at most BUDGET distinct
resources.

Usage:
    python main.py < items.csv                 # Read items from stdin, budget 30
    python main.py --input items.csv --budget 12
    python main.py --sample                    # Run on the built-in sample
    python main.py --sample --verify           # Cross-check with the Gurobi model
"""

import argparse
import sys

from bnb import run_bnb
from ingest import MalformedRecord, load_records, read_stdin
from logger import create_logger
from models import PackingProblem


DEFAULT_BUDGET = 30


def create_sample_problem():
    """Return a small sample instance (records, budget).

    Returns:
        tuple: (records, budget) where:
            - records: List of (name, frozenset of resources)
            - budget: int resource budget
    """
    records = [
        ("negroni", frozenset({"gin", "campari", "sweet vermouth"})),
        ("martini", frozenset({"gin", "dry vermouth"})),
        ("gimlet", frozenset({"gin", "lime", "simple syrup"})),
        ("daiquiri", frozenset({"rum", "lime", "simple syrup"})),
        ("mojito", frozenset({"rum", "lime", "mint", "simple syrup", "soda"})),
        ("manhattan", frozenset({"rye", "sweet vermouth", "bitters"})),
        ("old fashioned", frozenset({"rye", "bitters", "simple syrup"})),
        ("boulevardier", frozenset({"rye", "campari", "sweet vermouth"})),
        ("americano", frozenset({"campari", "sweet vermouth", "soda"})),
        ("tom collins", frozenset({"gin", "lemon", "simple syrup", "soda"})),
        ("whiskey sour", frozenset({"rye", "lemon", "simple syrup"})),
        ("aviation", frozenset({"gin", "lemon", "maraschino", "creme de violette"})),
    ]
    budget = 6
    return records, budget


def print_problem(problem):
    """Print problem details to console."""
    print(f"Packing problem: {problem.n_items} items, "
          f"{problem.n_resources} resources, budget={problem.budget}")
    for name, resources in problem.records:
        print(f"  {name}: {', '.join(sorted(resources))}")


def print_new_best(score, selection, budget):
    print(f"{score} items found for {budget} resources")


def build_parser():
    parser = argparse.ArgumentParser(
        description='Find the largest set of items that fits a resource budget',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--input', type=str, default=None,
                        help='Input file with name,resource,... lines (default: stdin)')
    parser.add_argument('--budget', type=int, default=None,
                        help=f'Maximum number of distinct resources (default: {DEFAULT_BUDGET})')
    parser.add_argument('--sample', action='store_true',
                        help='Solve the built-in sample instance')
    parser.add_argument('--strict', action='store_true',
                        help='Fail on malformed input lines instead of skipping them')
    parser.add_argument('--max-nodes', type=int, default=None,
                        help='Stop after exploring this many nodes')
    parser.add_argument('--time-limit', type=float, default=None,
                        help='Stop after this many seconds')
    parser.add_argument('--log-dir', type=str, default='logs',
                        help='Directory for log and metrics files (default: logs)')
    parser.add_argument('--no-log', action='store_true',
                        help='Do not write log files')
    parser.add_argument('--verify', action='store_true',
                        help='Cross-check the result with the Gurobi model')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.sample:
        records, budget = create_sample_problem()
        instance_name = "sample"
    else:
        records = load_records(args.input, strict=args.strict) if args.input else read_stdin(strict=args.strict)
        budget = DEFAULT_BUDGET
        instance_name = "stdin" if args.input is None else args.input.replace("/", "_")
    if args.budget is not None:
        budget = args.budget

    problem = PackingProblem(records, budget)
    if args.sample:
        print_problem(problem)

    logger = None if args.no_log else create_logger(instance_name=instance_name, log_dir=args.log_dir)

    print("Running branch-and-bound on:", problem)
    res = run_bnb(problem, max_nodes=args.max_nodes, time_limit=args.time_limit,
                  logger=logger, enable_logging=not args.no_log,
                  on_new_best=print_new_best)
    if logger is not None:
        logger.close()

    print("\nBranch-and-bound result:")
    print(f"  Items selected: {res['best_score']}")
    print(f"  Selection: {res['best_selection']}")
    print(f"  Resources used ({len(res['best_resources'])}): {res['best_resources']}")
    print(f"  Nodes explored: {res['nodes_explored']}")
    print(f"  Status: {res['status']}")
    if not args.no_log:
        print(f"\nLog files saved to: {args.log_dir}/")

    if args.verify:
        from solvers import solve_packing_ip
        ip = solve_packing_ip(problem.records, budget)
        print(f"\nGurobi model: {ip.get('size')} items ({ip.get('selection')})")
        if ip.get('size') != res['best_score'] and res['status'] == 'optimal':
            print("MISMATCH between branch-and-bound and Gurobi model")
            return 1
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except (MalformedRecord, FileNotFoundError, ValueError, RuntimeError) as exc:
        print("Error:", exc)
        sys.exit(1)
