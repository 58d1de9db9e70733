"""Utility script to analyze metrics files from BnB runs.

Usage:
    python analyze_logs.py <metrics_file.json>
    python analyze_logs.py logs/sample_20251124_104713_metrics.json
    python analyze_logs.py logs/*_metrics.json        # compare several runs
"""

import json
import sys
from pathlib import Path

import numpy as np
import pandas as pd


def summarize_metrics(metrics):
    """Compute summary statistics from a metrics dictionary.

    Args:
        metrics: Dictionary as saved by BnBLogger

    Returns:
        dict with runtime, node counts, prune rate, final score and
        incumbent progression statistics
    """
    explored = metrics.get('nodes_explored', 0)
    pruned = metrics.get('nodes_pruned', 0)
    updates = metrics.get('best_score_updates', [])

    node_counts = np.array([u['node_count'] for u in updates], dtype=float)
    gaps = np.diff(node_counts) if len(node_counts) > 1 else np.array([])

    return {
        'instance_name': metrics.get('instance_name'),
        'runtime': metrics.get('total_runtime'),
        'nodes_explored': explored,
        'nodes_pruned': pruned,
        'nodes_evaluated': metrics.get('nodes_evaluated', 0),
        'prune_rate': pruned / explored if explored else 0.0,
        'pruning_reasons': dict(metrics.get('pruning_reasons', {})),
        'best_score': updates[-1]['score'] if updates else 0,
        'n_updates': len(updates),
        'nodes_to_best': int(node_counts[-1]) if len(node_counts) else 0,
        'mean_nodes_between_updates': float(gaps.mean()) if gaps.size else 0.0,
    }


def analyze_metrics(metrics_file):
    """Print a summary of one BnB run and return it."""

    with open(metrics_file, 'r') as f:
        metrics = json.load(f)
    summary = summarize_metrics(metrics)

    print("=" * 70)
    print(f"ANALYSIS: {metrics['instance_name']}")
    print(f"Run ID: {metrics['timestamp']}")
    print("=" * 70)

    print("\n--- PERFORMANCE SUMMARY ---")
    if summary['runtime'] is not None:
        print(f"Total runtime: {summary['runtime']:.3f} seconds")
    print(f"Nodes explored: {summary['nodes_explored']:,}")
    print(f"Nodes pruned: {summary['nodes_pruned']:,}")
    print(f"Nodes evaluated (leaves): {summary['nodes_evaluated']:,}")
    print(f"Pruning rate: {100 * summary['prune_rate']:.2f}%")

    if 'problem_data' in metrics:
        print("\n--- PROBLEM CHARACTERISTICS ---")
        for key, value in metrics['problem_data'].items():
            print(f"{key}: {value}")

    if metrics.get('best_score_updates'):
        print("\n--- SOLUTION PROGRESSION ---")
        for i, update in enumerate(metrics['best_score_updates']):
            print(f"Update {i+1}: {update['score']} items at node {update['node_count']}")
        print(f"\nNodes until final incumbent: {summary['nodes_to_best']:,}")

    if summary['pruning_reasons']:
        print("\n--- PRUNING REASONS ---")
        for reason, count in summary['pruning_reasons'].items():
            pct = 100 * count / summary['nodes_pruned'] if summary['nodes_pruned'] > 0 else 0
            print(f"{reason}: {count:,} ({pct:.1f}%)")

    if 'final_result' in metrics:
        print("\n--- FINAL RESULT ---")
        result = metrics['final_result']
        print(f"Best size: {result['best_score']}")
        print(f"Best selection: {result['best_selection']}")
        print(f"Status: {result.get('status')}")

    print("\n" + "=" * 70)
    return summary


def compare_runs(metrics_files):
    """Compare multiple BnB runs; returns one DataFrame row per run."""

    rows = []
    for file in metrics_files:
        with open(file, 'r') as f:
            rows.append(summarize_metrics(json.load(f)))

    df = pd.DataFrame(rows, columns=['instance_name', 'runtime', 'nodes_explored',
                                     'prune_rate', 'best_score', 'nodes_to_best'])

    print("=" * 70)
    print(f"COMPARING {len(rows)} RUNS")
    print("=" * 70)
    print(df.to_string(index=False))
    print("=" * 70)
    return df


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python analyze_logs.py <metrics_file.json> [<more_files>...]")
        sys.exit(1)

    files = [Path(f) for f in sys.argv[1:]]

    for f in files:
        if not f.exists():
            print(f"Error: File not found: {f}")
            sys.exit(1)

    if len(files) == 1:
        analyze_metrics(files[0])
    else:
        compare_runs(files)
