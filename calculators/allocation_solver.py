"""
Allocation solver for the unit-count portfolio problem.

Solves the bounded knapsack problem:
    Maximize    Sum(NPV_i * X_i)
    Subject to: Sum(Cost_i * X_i) <= Budget
                0 <= X_i <= MaxUnits_i
                X_i is integer

Two solvers are provided:
- allocate(): the reference greedy pass by NPV/cost density. It reports
  is_optimal=True without proof; the result can be strictly suboptimal when
  leftover budget could have bought a less efficient project that was skipped.
- allocate_exact(): depth-first branch and bound that returns a proven optimum.

Both emit one OptimizationResult per input project, in input order.
"""

from typing import List, Sequence, Tuple, Union

import numpy as np

from calculators.components import (
    CalculatedProject, OptimizationResult, SolverResult, SolverMethod
)
from calculators.finance_constants import OPTIMAL_STATUS

# Value improvements smaller than this do not replace the incumbent solution
_IMPROVEMENT_TOLERANCE = 1e-12


def _affordable_units(remaining_budget: float, cost: float) -> float:
    """floor(remaining / cost); a zero cost gives inf rather than raising."""
    with np.errstate(all='ignore'):
        return float(np.floor(np.float64(remaining_budget) / np.float64(cost)))


def _rank_viable(projects: Sequence[CalculatedProject]) -> List[Tuple[int, CalculatedProject]]:
    """Projects with positive NPV, sorted by efficiency descending.

    sorted() is stable, so equal efficiencies keep their input order.
    """
    viable = [(index, p) for index, p in enumerate(projects) if p.total_npv > 0]
    return sorted(viable, key=lambda item: item[1].efficiency, reverse=True)


def _allocation_records(projects: Sequence[CalculatedProject],
                        units: List[int]) -> Tuple[OptimizationResult, ...]:
    """One OptimizationResult per project, in input order."""
    return tuple(
        OptimizationResult(project_id=p.id, units=count)
        for p, count in zip(projects, units)
    )


def _build_result(projects: Sequence[CalculatedProject], units: List[int],
                  method: SolverMethod) -> SolverResult:
    total_cost = 0.0
    total_npv = 0.0
    for project, count in zip(projects, units):
        if count > 0:
            total_cost += count * project.cost
            total_npv += count * project.total_npv

    return SolverResult(
        allocations=_allocation_records(projects, units),
        total_cost=total_cost,
        total_npv=total_npv,
        is_optimal=True,
        status=OPTIMAL_STATUS,
        method=method
    )


def allocate(projects: Sequence[CalculatedProject], budget: float) -> SolverResult:
    """
    Greedy allocation by efficiency density.

    Args:
        projects: Valuated projects
        budget: Total capital available

    Returns:
        SolverResult with an entry for every input project
    """
    units = [0] * len(projects)
    current_cost = 0.0
    current_total_npv = 0.0

    for index, project in _rank_viable(projects):
        remaining_budget = budget - current_cost
        max_affordable = _affordable_units(remaining_budget, project.cost)
        count = min(max_affordable, project.max_units)

        if count > 0:
            count = int(count)
            units[index] = count
            current_cost += count * project.cost
            current_total_npv += count * project.total_npv

    return SolverResult(
        allocations=_allocation_records(projects, units),
        total_cost=current_cost,
        total_npv=current_total_npv,
        is_optimal=True,  # Asserted for the greedy pass as well
        status=OPTIMAL_STATUS,
        method=SolverMethod.GREEDY
    )


def allocate_exact(projects: Sequence[CalculatedProject], budget: float) -> SolverResult:
    """
    Exact bounded knapsack allocation by branch and bound.

    Projects are explored in efficiency order, trying the largest affordable
    count first, so the first leaf reached is the greedy solution. Subtrees
    whose fractional relaxation cannot beat the incumbent are pruned.
    Projects with zero cost and positive NPV take all of their units.

    Args:
        projects: Valuated projects
        budget: Total capital available

    Returns:
        SolverResult with a proven optimal allocation
    """
    units = [0] * len(projects)
    remaining = budget

    candidates = []
    for index, project in _rank_viable(projects):
        if project.max_units <= 0:
            continue
        if project.cost <= 0:
            units[index] = project.max_units
            remaining -= project.max_units * project.cost
            continue
        candidates.append((index, project))

    counts = [0] * len(candidates)
    best_counts = list(counts)
    best_value = 0.0

    def upper_bound(position: int, budget_left: float) -> float:
        # Fractional relaxation over the remaining candidates (already density sorted)
        bound = 0.0
        for _, project in candidates[position:]:
            if budget_left <= 0:
                break
            take = min(project.max_units, budget_left / project.cost)
            bound += take * project.total_npv
            budget_left -= take * project.cost
        return bound

    def search(position: int, budget_left: float, value: float) -> None:
        nonlocal best_value, best_counts
        if value > best_value + _IMPROVEMENT_TOLERANCE:
            best_value = value
            best_counts = list(counts)
        if position == len(candidates):
            return
        if value + upper_bound(position, budget_left) <= best_value + _IMPROVEMENT_TOLERANCE:
            return

        _, project = candidates[position]
        most = int(min(project.max_units, max(0.0, _affordable_units(budget_left, project.cost))))
        for count in range(most, -1, -1):
            counts[position] = count
            search(position + 1, budget_left - count * project.cost,
                   value + count * project.total_npv)
        counts[position] = 0

    search(0, remaining, 0.0)

    for (index, _), count in zip(candidates, best_counts):
        units[index] = count

    return _build_result(projects, units, SolverMethod.EXACT)


def solve_portfolio(projects: Sequence[CalculatedProject], budget: float,
                    method: Union[SolverMethod, str] = SolverMethod.GREEDY) -> SolverResult:
    """Run the solver selected by `method` (a SolverMethod or its value)."""
    method = SolverMethod(method)
    if method is SolverMethod.EXACT:
        return allocate_exact(projects, budget)
    return allocate(projects, budget)
