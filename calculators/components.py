"""
Component data structures for portfolio valuation and allocation.

These dataclasses are the value records passed between the valuation engine,
the allocation solver and whatever collects inputs or renders results. They
are frozen: every recomputation produces a fresh set of records instead of
editing existing ones.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
from enum import Enum


class SolverMethod(Enum):
    """Algorithm used to choose unit counts."""
    GREEDY = "greedy_density"      # Single pass by NPV/cost, the reference behavior
    EXACT = "branch_and_bound"     # Exhaustive bounded knapsack search


@dataclass(frozen=True)
class ProjectInput:
    """One investable asset type and its static parameters."""
    id: str
    name: str
    cost: float          # Purchase cost per unit
    rent: float          # Net rental cash flow per unit per year
    growth_rate: float   # Annual appreciation applied to cost (0.05 = 5%)
    max_units: int       # Upper bound on units purchasable
    color: str           # Display only


@dataclass(frozen=True)
class GlobalParams:
    """Scenario assumptions shared by all projects."""
    budget: float
    discount_rate: float
    years: int


@dataclass(frozen=True)
class CalculatedProject(ProjectInput):
    """ProjectInput extended with its discounted cash flow valuation."""
    sale_price: float    # Future value of one unit at the end of the horizon
    rental_npv: float    # Present value of the rent stream
    total_npv: float     # -cost + rental_npv + discounted sale price

    @property
    def sale_npv(self) -> float:
        """Present value of the sale, recovered from the NPV identity."""
        return self.total_npv + self.cost - self.rental_npv

    @property
    def efficiency(self) -> float:
        """NPV per unit of cost (the greedy solver's sort key)."""
        if self.cost == 0:
            if self.total_npv == 0:
                return float('nan')
            return float('inf') if self.total_npv > 0 else float('-inf')
        return self.total_npv / self.cost


@dataclass(frozen=True)
class OptimizationResult:
    """Units chosen for a single project."""
    project_id: str
    units: int


@dataclass(frozen=True)
class SolverResult:
    """Portfolio allocation plus aggregate totals."""
    allocations: Tuple[OptimizationResult, ...]
    total_cost: float
    total_npv: float
    is_optimal: bool
    status: str
    method: SolverMethod = SolverMethod.GREEDY

    def units_for(self, project_id: str) -> int:
        """Units allocated to a project, 0 if the project is unknown."""
        allocation = self.allocation_for(project_id)
        return allocation.units if allocation else 0

    def allocation_for(self, project_id: str) -> Optional[OptimizationResult]:
        for allocation in self.allocations:
            if allocation.project_id == project_id:
                return allocation
        return None

    @property
    def has_investments(self) -> bool:
        """False when nothing was bought (the "no viable investment" state)."""
        return any(a.units > 0 for a in self.allocations)

    @property
    def heuristic_used(self) -> bool:
        """True when is_optimal comes from the greedy pass and is not proven."""
        return self.method is SolverMethod.GREEDY
