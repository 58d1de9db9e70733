"""Cross-check the branch-and-bound search against the Gurobi model.

Skipped when gurobipy is not installed. The instances are tiny so the
size-limited license that ships with the pip package is enough.
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import random

import pytest

gp = pytest.importorskip("gurobipy")

from bnb import solve
from solvers import solve_packing_ip


def test_ip_scenarios():
    records = [("A", {"x"}), ("B", {"y"}), ("C", {"x", "y"})]
    assert solve_packing_ip(records, 1)["size"] == 1
    assert solve_packing_ip(records, 2)["size"] == 3

    records = [("A", {"x", "y", "z"}), ("B", {"x"}), ("C", {"y"}), ("D", {"z"})]
    result = solve_packing_ip(records, 2)
    assert result["size"] == 2
    assert "A" not in result["selection"]
    assert len(result["resources"]) <= 2


def test_ip_empty_instance():
    result = solve_packing_ip([], 3)
    assert result["size"] == 0
    assert result["selection"] == []


def test_ip_matches_bnb():
    rng = random.Random(17)
    pool = [f"r{k}" for k in range(8)]
    for trial in range(10):
        records = [(f"I{j}", frozenset(rng.sample(pool, rng.randint(1, 3))))
                   for j in range(rng.randint(1, 15))]
        budget = rng.randint(1, 6)
        _, size = solve(records, budget)
        ip = solve_packing_ip(records, budget)
        assert ip["size"] == size, f"Trial {trial}: Gurobi {ip['size']} != BnB {size}"
