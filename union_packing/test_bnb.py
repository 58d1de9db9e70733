"""Test the branch-and-bound search against hand-checked scenarios and
complete enumeration on random small instances."""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import json
import logging
import random

import pytest

from bnb import run_bnb, solve
from enumeration import solve_by_enumeration
from logger import NoOpLogger, create_logger
from models import PackingProblem, SearchNode


def random_records(rng, n_items, n_resources, max_size):
    pool = [f"r{k}" for k in range(n_resources)]
    return [(f"I{j}", frozenset(rng.sample(pool, rng.randint(1, max_size))))
            for j in range(n_items)]


def union_size(records, names):
    lookup = dict(records)
    used = set()
    for name in names:
        used |= lookup[name]
    return len(used)


# ============================================================
# SCENARIOS
# ============================================================

def test_two_singles_against_shared_pair():
    records = [("A", {"x"}), ("B", {"y"}), ("C", {"x", "y"})]

    # C does not fit on its own and A + B would need two resources
    selection, size = solve(records, 1)
    assert size == 1, f"Expected 1 item for budget 1, got {size}"
    assert selection in (["A"], ["B"])

    selection, size = solve(records, 2)
    assert size == 3, f"Expected all 3 items for budget 2, got {size}"
    assert sorted(selection) == ["A", "B", "C"]


def test_singles_beat_large_item():
    records = [("A", {"x", "y", "z"}), ("B", {"x"}), ("C", {"y"}), ("D", {"z"})]
    selection, size = solve(records, 2)
    assert size == 2
    assert "A" not in selection
    assert set(selection) <= {"B", "C", "D"}

    _, size = solve(records, 3)
    assert size == 4, "With budget 3 the large item is free once all singles are in"


def test_empty_input():
    selection, size = solve([], 5)
    assert selection == [] and size == 0


def test_oversized_single_item_is_filtered():
    result = run_bnb(PackingProblem([("big", {"a", "b", "c"})], 2), enable_logging=False)
    assert result['best_score'] == 0
    assert result['best_selection'] == []
    assert result['best_resources'] == []
    assert result['status'] == 'optimal'


def test_zero_budget_takes_free_items_only():
    records = [("free", set()), ("x", {"a"}), ("also free", set())]
    selection, size = solve(records, 0)
    assert size == 2
    assert sorted(selection) == ["also free", "free"]


def test_result_reports_resources():
    records = [("gimlet", {"gin", "lime", "syrup"}), ("daiquiri", {"rum", "lime", "syrup"}),
               ("martini", {"gin", "vermouth"})]
    result = run_bnb(PackingProblem(records, 4), enable_logging=False)
    assert result['best_score'] == 2
    assert len(result['best_resources']) <= 4
    assert result['best_resources'] == sorted(result['best_resources'])
    assert [it.name for it in result['best_items']] == result['best_selection']


# ============================================================
# PROPERTIES
# ============================================================

def test_matches_enumeration_on_random_instances():
    rng = random.Random(2024)
    for trial in range(60):
        n_items = rng.randint(0, 12)
        records = random_records(rng, n_items, n_resources=rng.randint(3, 9), max_size=4)
        budget = rng.randint(0, 8)

        selection, size = solve(records, budget)
        expected, _, _ = solve_by_enumeration(records, budget)

        assert size == expected, (
            f"Trial {trial}: BnB found {size}, enumeration {expected} "
            f"(budget={budget}, records={records})")
        assert len(selection) == size
        assert len(set(selection)) == size
        assert union_size(records, selection) <= budget


def test_matches_enumeration_on_twenty_items():
    rng = random.Random(99)
    for trial in range(2):
        records = random_records(rng, 20, n_resources=10, max_size=3)
        budget = 5
        _, size = solve(records, budget)
        expected, _, _ = solve_by_enumeration(records, budget, time_limit=120.0)
        assert size == expected, f"Trial {trial}: BnB {size} != enumeration {expected}"


def test_budget_monotonicity():
    rng = random.Random(5)
    for _ in range(10):
        records = random_records(rng, 10, n_resources=8, max_size=3)
        sizes = [solve(records, budget)[1] for budget in range(0, 10)]
        assert sizes == sorted(sizes), f"Sizes not monotone in budget: {sizes}"


def test_repeated_runs_are_identical():
    rng = random.Random(11)
    records = random_records(rng, 15, n_resources=10, max_size=3)
    first = run_bnb(PackingProblem(records, 6), enable_logging=False)
    second = run_bnb(PackingProblem(records, 6), enable_logging=False)
    assert first['best_score'] == second['best_score']
    assert first['best_selection'] == second['best_selection']
    assert first['nodes_explored'] == second['nodes_explored']


# ============================================================
# LIMITS, CALLBACKS AND LOGGING
# ============================================================

def test_node_limit_stops_search():
    records = [("A", {"x"}), ("B", {"y"}), ("C", {"z"})]
    result = run_bnb(PackingProblem(records, 3), max_nodes=1, enable_logging=False)
    assert result['status'] == 'node_limit'
    assert result['nodes_explored'] == 1


def test_time_limit_stops_search():
    rng = random.Random(11)
    records = random_records(rng, 120, n_resources=60, max_size=4)
    result = run_bnb(PackingProblem(records, 20), time_limit=0.05, enable_logging=False)
    assert result['status'] == 'time_limit'
    assert result['best_score'] == len(result['best_selection'])
    assert union_size(records, result['best_selection']) <= 20, \
        f"Selection {result['best_selection']} exceeds the budget"
    assert len(result['best_resources']) == union_size(records, result['best_selection'])


def test_generous_limits_do_not_change_result():
    rng = random.Random(3)
    records = random_records(rng, 12, n_resources=8, max_size=3)
    unlimited = run_bnb(PackingProblem(records, 5), enable_logging=False)
    limited = run_bnb(PackingProblem(records, 5), max_nodes=10**7, time_limit=600.0,
                      enable_logging=False)
    assert limited['status'] == 'optimal'
    assert limited['best_score'] == unlimited['best_score']


def test_invalid_limits_rejected():
    problem = PackingProblem([("A", {"x"})], 1)
    with pytest.raises(ValueError):
        run_bnb(problem, max_nodes=0, enable_logging=False)
    with pytest.raises(ValueError):
        run_bnb(problem, time_limit=0, enable_logging=False)


def test_new_best_callback():
    events = []
    records = [("A", {"x"}), ("B", {"y"}), ("C", {"x", "y"}), ("D", {"q", "w"})]
    result = run_bnb(PackingProblem(records, 2), enable_logging=False,
                     on_new_best=lambda score, selection, budget: events.append((score, selection, budget)))

    scores = [score for score, _, _ in events]
    assert scores == sorted(set(scores)), f"Scores must strictly increase: {scores}"
    assert scores[-1] == result['best_score'] == 3
    assert events[-1][1] == result['best_selection']
    assert all(budget == 2 for _, _, budget in events)


def test_noop_logger_counts_nodes():
    logger = NoOpLogger()
    rng = random.Random(1)
    records = random_records(rng, 10, n_resources=7, max_size=3)
    result = run_bnb(PackingProblem(records, 4), logger=logger)

    metrics = logger.get_metrics()
    assert metrics['nodes_explored'] == result['nodes_explored']
    assert set(metrics['pruning_reasons']) <= {"forbidden_subsumed", "candidates_exhausted", "singleton_bound"}
    assert metrics['best_score_updates'][-1]['score'] == result['best_score']


def test_file_logger_writes_metrics(tmp_path):
    logger = create_logger(instance_name="unit", log_dir=str(tmp_path))
    records = [("A", {"x"}), ("B", {"y"}), ("C", {"x", "y"})]
    result = run_bnb(PackingProblem(records, 2), logger=logger)
    logger.close()

    assert logger.metrics_file.exists()
    with open(logger.metrics_file) as f:
        metrics = json.load(f)
    assert metrics['final_result']['best_score'] == result['best_score'] == 3
    assert metrics['nodes_explored'] == result['nodes_explored']
    assert metrics['problem_data']['n_eligible'] == 3
    assert (tmp_path / f"{logger.run_id}.log").exists()


def test_nodes_described_only_for_debug_output(tmp_path, monkeypatch):
    records = [("A", {"x"}), ("B", {"y"}), ("C", {"x", "y"}), ("D", {"z", "w"})]

    logger = create_logger(instance_name="debug", log_dir=str(tmp_path))
    run_bnb(PackingProblem(records, 2), logger=logger)
    logger.close()
    log_text = (tmp_path / f"{logger.run_id}.log").read_text()
    assert "Node 1: {'depth': 0" in log_text

    def fail_describe(self):
        raise AssertionError("describe() called without DEBUG output")

    monkeypatch.setattr(SearchNode, "describe", fail_describe)
    result = run_bnb(PackingProblem(records, 2), logger=NoOpLogger())
    assert result['best_score'] == 3

    quiet = create_logger(instance_name="quiet", log_dir=str(tmp_path))
    quiet.logger.setLevel(logging.INFO)
    result = run_bnb(PackingProblem(records, 2), logger=quiet)
    quiet.close()
    assert result['best_score'] == 3


def test_default_logging_creates_log_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    run_bnb(PackingProblem([("A", {"x"})], 1), instance_name="defaults")
    metrics_files = list((tmp_path / "logs").glob("defaults_*_metrics.json"))
    assert len(metrics_files) == 1
