"""
Portfolio Manager for editing a project set and recomputing its allocation.

The project list is an immutable tuple of ProjectInput records. Edits go
through explicit update functions that return a new tuple, and every analysis
recomputes valuations and the allocation from scratch.
"""

import os
import sys
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from calculators.components import (
    ProjectInput, GlobalParams, CalculatedProject, SolverResult, SolverMethod
)
from calculators.valuation_calculator import valuate_all
from calculators.allocation_solver import solve_portfolio
from calculators.validation import validate_portfolio, coerce_whole_number
from calculators.finance_constants import (
    PROJECT_COLORS, NEW_PROJECT_DEFAULTS, default_params, demo_projects
)

# Editable fields and the type their values are coerced to
PROJECT_FIELD_TYPES = {
    'name': str,
    'cost': float,
    'rent': float,
    'growth_rate': float,
    'max_units': int,
    'color': str,
}

PARAM_FIELD_TYPES = {
    'budget': float,
    'discount_rate': float,
    'years': int,
}


# ===== PROJECT LIST EDITING =====

def _next_project_id(projects: Sequence[ProjectInput]) -> str:
    """First unused integer id, starting from len(projects) + 1."""
    used = {p.id for p in projects}
    candidate = len(projects) + 1
    while str(candidate) in used:
        candidate += 1
    return str(candidate)


def add_project(projects: Sequence[ProjectInput], **overrides) -> Tuple[ProjectInput, ...]:
    """
    Append a new project built from NEW_PROJECT_DEFAULTS.

    Args:
        projects: Current project list
        **overrides: Field values replacing the defaults

    Returns:
        New tuple with the added project last
    """
    project_id = overrides.pop('id', None) or _next_project_id(projects)
    values = {
        'id': project_id,
        'name': f"Project {project_id}",
        'color': PROJECT_COLORS[len(projects) % len(PROJECT_COLORS)],
        **NEW_PROJECT_DEFAULTS,
    }
    for field_name, value in overrides.items():
        values[field_name] = _coerce_project_field(field_name, value)

    return tuple(projects) + (ProjectInput(**values),)


def _coerce_project_field(field_name: str, value: Any) -> Any:
    if field_name not in PROJECT_FIELD_TYPES:
        raise ValueError(
            f"Unknown or read-only project field '{field_name}'. "
            f"Editable fields: {', '.join(PROJECT_FIELD_TYPES)}"
        )
    field_type = PROJECT_FIELD_TYPES[field_name]
    if field_type is int:
        return coerce_whole_number(value, field_name)
    return field_type(value)


def update_project(projects: Sequence[ProjectInput], project_id: str,
                   field_name: str, value: Any) -> Tuple[ProjectInput, ...]:
    """
    Replace one field of one project.

    An unknown project_id leaves the list unchanged.

    Raises:
        ValueError: If field_name is unknown or is the project id, or a
            whole-number field is given a fractional value
    """
    coerced = _coerce_project_field(field_name, value)
    return tuple(
        replace(p, **{field_name: coerced}) if p.id == project_id else p
        for p in projects
    )


def delete_project(projects: Sequence[ProjectInput], project_id: str) -> Tuple[ProjectInput, ...]:
    """Remove the project with the given id."""
    return tuple(p for p in projects if p.id != project_id)


def update_params(params: GlobalParams, field_name: str, value: Any) -> GlobalParams:
    """Return a copy of params with one field replaced."""
    if field_name not in PARAM_FIELD_TYPES:
        raise ValueError(
            f"Unknown global parameter '{field_name}'. "
            f"Valid parameters: {', '.join(PARAM_FIELD_TYPES)}"
        )
    field_type = PARAM_FIELD_TYPES[field_name]
    if field_type is int:
        return replace(params, **{field_name: coerce_whole_number(value, field_name)})
    return replace(params, **{field_name: field_type(value)})


# ===== ANALYSIS =====

@dataclass(frozen=True)
class AllocationRow:
    """One line of the recommendations table."""
    project: CalculatedProject
    units: int

    @property
    def investment(self) -> float:
        return self.units * self.project.cost

    @property
    def profit(self) -> float:
        return self.units * self.project.total_npv


@dataclass(frozen=True)
class PortfolioAnalysis:
    """Valuations and allocation produced by one recomputation."""
    params: GlobalParams
    projects: Tuple[CalculatedProject, ...]
    solver_result: SolverResult

    @property
    def budget_utilization(self) -> float:
        """Share of the budget spent (0 when the budget is 0)."""
        if self.params.budget <= 0:
            return 0.0
        return self.solver_result.total_cost / self.params.budget

    @property
    def has_viable_investment(self) -> bool:
        return self.solver_result.has_investments

    def get_project(self, project_id: str) -> Optional[CalculatedProject]:
        for project in self.projects:
            if project.id == project_id:
                return project
        return None

    def allocation_rows(self) -> List[AllocationRow]:
        """Projects with at least one unit allocated, in project order."""
        rows = []
        for project, allocation in zip(self.projects, self.solver_result.allocations):
            if allocation.units > 0:
                rows.append(AllocationRow(project=project, units=allocation.units))
        return rows


def analyze_portfolio(projects: Iterable[ProjectInput], params: GlobalParams,
                      method: Union[SolverMethod, str] = SolverMethod.GREEDY,
                      validate: bool = True) -> PortfolioAnalysis:
    """
    Valuate every project and allocate the budget across them.

    Args:
        projects: Project definitions
        params: Global scenario parameters
        method: Solver to use
        validate: Reject invalid inputs before calculating

    Returns:
        PortfolioAnalysis for this snapshot of inputs

    Raises:
        InvalidParameterError: If validate is True and an input is invalid
    """
    projects = tuple(projects)
    if validate:
        validate_portfolio(projects, params)

    calculated = tuple(valuate_all(projects, params))
    solver_result = solve_portfolio(calculated, params.budget, method)

    return PortfolioAnalysis(params=params, projects=calculated, solver_result=solver_result)


class PortfolioManager:
    """
    Holds the current project list and scenario parameters.

    Every edit rebinds `projects` or `params` to a new immutable value;
    analyze() always recomputes from scratch.
    """

    def __init__(self, projects: Optional[Iterable[ProjectInput]] = None,
                 params: Optional[GlobalParams] = None):
        self.projects: Tuple[ProjectInput, ...] = (
            tuple(projects) if projects is not None else demo_projects()
        )
        self.params: GlobalParams = params if params is not None else default_params()

    @classmethod
    def from_scenario(cls, scenario) -> 'PortfolioManager':
        """Create a manager from a loaded Scenario."""
        return cls(projects=scenario.projects, params=scenario.params)

    def add_project(self, **overrides) -> ProjectInput:
        """Add a project and return it."""
        self.projects = add_project(self.projects, **overrides)
        return self.projects[-1]

    def update_project(self, project_id: str, field_name: str, value: Any) -> None:
        self.projects = update_project(self.projects, project_id, field_name, value)

    def delete_project(self, project_id: str) -> None:
        self.projects = delete_project(self.projects, project_id)

    def set_param(self, field_name: str, value: Any) -> None:
        self.params = update_params(self.params, field_name, value)

    def analyze(self, method: Union[SolverMethod, str] = SolverMethod.GREEDY) -> PortfolioAnalysis:
        """Valuate and allocate the current snapshot."""
        return analyze_portfolio(self.projects, self.params, method=method)

    def compare_methods(self) -> Dict[SolverMethod, PortfolioAnalysis]:
        """Run every solver on the current snapshot."""
        return {method: self.analyze(method) for method in SolverMethod}
