"""Logging system for the union packing solver.

This module provides structured logging for tracking search performance,
including runtime metrics, node statistics, pruning reasons and incumbent
progression.
"""

import logging
import json
import time
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, List, Optional


class BnBLogger:
    """Logger for the branch-and-bound search with performance metrics.

    Tracks:
    - Standard log messages (debug, info, warning, error)
    - Performance metrics (nodes explored, pruned, runtime)
    - Pruning reasons
    - Incumbent progression and instance characteristics
    """

    def __init__(self, log_dir: str = "logs", instance_name: str = "default"):
        """Initialize the logger.

        Args:
            log_dir: Directory for log files
            instance_name: Name of the problem instance being solved
        """
        self.instance_name = instance_name
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.run_id = f"{instance_name}_{self.timestamp}"

        self.metrics = {
            "instance_name": instance_name,
            "timestamp": self.timestamp,
            "start_time": None,
            "end_time": None,
            "total_runtime": None,
            "nodes_explored": 0,
            "nodes_pruned": 0,
            "nodes_evaluated": 0,  # leaves: nodes without candidates
            "best_score_updates": [],
            "pruning_reasons": {},
        }

        self._setup_file_logger()
        self.metrics_file = self.log_dir / f"{self.run_id}_metrics.json"

        self.logger.info(f"Initialized logger for instance: {instance_name}")
        self.logger.info(f"Run ID: {self.run_id}")

    def _setup_file_logger(self):
        """Setup standard file logger for text messages."""
        log_file = self.log_dir / f"{self.run_id}.log"

        self.logger = logging.getLogger(f"bnb_{self.run_id}")
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        # Remove existing handlers to avoid duplicates
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)

        file_handler = logging.FileHandler(log_file, mode='w')
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        self.logger.addHandler(file_handler)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_formatter = logging.Formatter('%(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        self.logger.addHandler(console_handler)

    def start_run(self, problem_data: Optional[Dict[str, Any]] = None):
        """Mark the start of a solver run.

        Args:
            problem_data: Dictionary with problem characteristics
                         (n_items, n_eligible, budget, ...)
        """
        self.metrics["start_time"] = time.time()
        if problem_data:
            self.metrics["problem_data"] = problem_data
        self.logger.info("=" * 60)
        self.logger.info("Starting branch-and-bound search")
        if problem_data:
            self.logger.info(f"Problem: {problem_data}")
        self.logger.info("=" * 60)

    def end_run(self, final_result: Optional[Dict[str, Any]] = None):
        """Mark the end of a solver run and save metrics.

        Args:
            final_result: Dictionary with final solution info
        """
        self.metrics["end_time"] = time.time()
        if self.metrics["start_time"] is not None:
            self.metrics["total_runtime"] = self.metrics["end_time"] - self.metrics["start_time"]

        if final_result:
            self.metrics["final_result"] = final_result

        self._save_metrics()

        self.logger.info("=" * 60)
        self.logger.info("Branch-and-bound completed")
        if self.metrics["total_runtime"] is not None:
            self.logger.info(f"Total runtime: {self.metrics['total_runtime']:.3f} seconds")
        self.logger.info(f"Nodes explored: {self.metrics['nodes_explored']}")
        self.logger.info(f"Nodes pruned: {self.metrics['nodes_pruned']}")
        self.logger.info(f"Nodes evaluated: {self.metrics['nodes_evaluated']}")
        if self.metrics['nodes_explored'] > 0:
            prune_rate = 100 * self.metrics['nodes_pruned'] / self.metrics['nodes_explored']
            self.logger.info(f"Pruning rate: {prune_rate:.2f}%")
        self.logger.info("=" * 60)

    def log_node_visit(self, node):
        """Log visiting a node in the search tree.

        The node is only described when DEBUG output is enabled.
        """
        self.metrics["nodes_explored"] += 1
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(f"Node {self.metrics['nodes_explored']}: {node.describe()}")

    def log_node_pruned(self, reason: str, node=None):
        """Log pruning a node.

        Args:
            reason: Why the node was pruned (e.g., "forbidden_subsumed", "singleton_bound")
            node: Optional SearchNode that was pruned
        """
        self.metrics["nodes_pruned"] += 1
        reasons = self.metrics["pruning_reasons"]
        reasons[reason] = reasons.get(reason, 0) + 1

        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        if node is not None:
            self.logger.debug(f"Pruned ({reason}): {node.describe()}")
        else:
            self.logger.debug(f"Node pruned: {reason}")

    def log_node_evaluated(self, score: int, node=None):
        """Log reaching a leaf (no candidates left) with the given score."""
        self.metrics["nodes_evaluated"] += 1
        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        self.logger.debug(f"Evaluated leaf node: score={score}")
        if node is not None:
            self.logger.debug(f"  Node: {node.describe()}")

    def log_incumbent_update(self, new_score: int, selection: List[str],
                             node_count: Optional[int] = None, load_size: Optional[int] = None):
        """Log finding a new best selection.

        Args:
            new_score: Number of selected items
            selection: Names of the selected items
            node_count: Number of nodes explored when found
            load_size: Number of distinct resources the selection uses
        """
        start = self.metrics["start_time"]
        update_info = {
            "score": new_score,
            "selection": list(selection),
            "load": load_size,
            "node_count": node_count or self.metrics["nodes_explored"],
            "timestamp": time.time() - start if start is not None else None,
        }
        self.metrics["best_score_updates"].append(update_info)

        self.logger.info(f"NEW INCUMBENT: {new_score} items using {load_size} resources "
                         f"(node {update_info['node_count']})")
        self.logger.debug(f"Selection: {selection}")

    def _save_metrics(self):
        """Save metrics dictionary to JSON file."""
        with open(self.metrics_file, 'w') as f:
            json.dump(self.metrics, f, indent=2, default=str)

        self.logger.info(f"Metrics saved to: {self.metrics_file}")

    def get_metrics(self) -> Dict[str, Any]:
        """Get a copy of the current metrics dictionary."""
        return self.metrics.copy()

    def close(self):
        """Close the file handlers of this run."""
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)

    def debug(self, msg: str):
        self.logger.debug(msg)

    def info(self, msg: str):
        self.logger.info(msg)

    def warning(self, msg: str):
        self.logger.warning(msg)

    def error(self, msg: str):
        self.logger.error(msg)


class NoOpLogger:
    """Drop-in replacement for BnBLogger when logging is disabled.

    Keeps the counters so callers can still read metrics, but writes nothing.
    """

    def __init__(self):
        self.metrics = {
            "start_time": None,
            "nodes_explored": 0,
            "nodes_pruned": 0,
            "nodes_evaluated": 0,
            "best_score_updates": [],
            "pruning_reasons": {},
        }

    def start_run(self, problem_data=None):
        self.metrics["start_time"] = time.time()

    def end_run(self, final_result=None):
        pass

    def log_node_visit(self, node):
        self.metrics["nodes_explored"] += 1

    def log_node_pruned(self, reason, node=None):
        self.metrics["nodes_pruned"] += 1
        reasons = self.metrics["pruning_reasons"]
        reasons[reason] = reasons.get(reason, 0) + 1

    def log_node_evaluated(self, score, node=None):
        self.metrics["nodes_evaluated"] += 1

    def log_incumbent_update(self, new_score, selection, node_count=None, load_size=None):
        self.metrics["best_score_updates"].append(
            {"score": new_score, "selection": list(selection), "load": load_size,
             "node_count": node_count})

    def get_metrics(self):
        return self.metrics.copy()

    def close(self):
        pass

    def debug(self, msg):
        pass

    def info(self, msg):
        pass

    def warning(self, msg):
        pass

    def error(self, msg):
        pass


def create_logger(instance_name: str = "default", log_dir: str = "logs") -> BnBLogger:
    """Factory function to create a BnBLogger.

    Args:
        instance_name: Name of the problem instance
        log_dir: Directory for log files

    Returns:
        Configured BnBLogger instance
    """
    return BnBLogger(log_dir=log_dir, instance_name=instance_name)
