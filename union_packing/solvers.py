"""Gurobi model for the budgeted union packing problem.

This module contains an exact integer-programming formulation used as an
independent cross-check of the branch-and-bound search:
- solve_packing_ip: Maximize the number of selected items subject to the
  number of used resources staying within the budget
"""
try:
    import gurobipy as gp
    from gurobipy import GRB
except ImportError:
    gp = None
    GRB = None

from models import eligible_records


def solve_packing_ip(records, budget, time_limit=None, verbose=False):
    """Solve the packing problem as a 0/1 integer program.

    Variables x[i] = 1 if item i is selected, y[r] = 1 if resource r is used.
    Selecting an item forces all its resources to be used (x[i] <= y[r]) and
    at most `budget` resources may be used. Items larger than the budget are
    dropped before the model is built.

    Args:
        records: Iterable of (name, resources) pairs
        budget: Resource budget
        time_limit: Optional time limit in seconds for Gurobi
        verbose: Whether to show Gurobi output

    Returns:
        dict with keys:
            - status: Gurobi solution status
            - size: Objective value (number of selected items)
            - selection: Names of the selected items
            - resources: Sorted resource identifiers used by the selection
            - model: Gurobi model object

    Raises:
        RuntimeError: If gurobipy is not available
    """
    if gp is None:
        raise RuntimeError("gurobipy is not available. Make sure Gurobi is installed and the Python environment is correct.")

    eligible = eligible_records(records, budget)
    resources = sorted({r for _, res in eligible for r in res})

    model = gp.Model("union_packing")
    model.setParam('OutputFlag', 1 if verbose else 0)
    if time_limit is not None:
        model.setParam('TimeLimit', time_limit)

    x = {i: model.addVar(vtype=GRB.BINARY, name=f"x_{i}") for i in range(len(eligible))}
    index = {r: k for k, r in enumerate(resources)}
    y = {r: model.addVar(vtype=GRB.BINARY, name=f"y_{index[r]}") for r in resources}

    model.update()

    # Selected items use all of their resources
    for i, (_, res) in enumerate(eligible):
        for r in res:
            model.addConstr(x[i] <= y[r], name=f"uses_{i}_{index[r]}")

    # Budget on distinct resources
    model.addConstr(gp.quicksum(y.values()) <= budget, name="budget")

    model.setObjective(gp.quicksum(x.values()), GRB.MAXIMIZE)

    model.optimize()

    status = model.Status
    if status == GRB.OPTIMAL or status == GRB.TIME_LIMIT or status == GRB.SUBOPTIMAL:
        chosen = [i for i in range(len(eligible)) if x[i].X > 0.5]
        used = sorted({r for i in chosen for r in eligible[i][1]})
        return {
            "status": status,
            "size": len(chosen),
            "selection": [eligible[i][0] for i in chosen],
            "resources": used,
            "model": model,
        }
    else:
        return {"status": status, "message": "No feasible solution or model failed"}
