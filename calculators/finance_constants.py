"""
Default scenario constants for the real estate portfolio optimizer.

This module consolidates the defaults used throughout the optimizer: the
global scenario assumptions, the demo project set and the values given to a
newly added project. Monetary values are in billions, matching the demo data.
"""

from calculators.components import ProjectInput, GlobalParams

# ===== GLOBAL SCENARIO DEFAULTS =====

DEFAULT_BUDGET = 50.0          # Total investable capital
DEFAULT_DISCOUNT_RATE = 0.08   # 8% annual discount rate
DEFAULT_YEARS = 5              # Valuation horizon

DEFAULT_SCENARIO_NAME = "Demo Portfolio"
DEFAULT_SCENARIO_DESCRIPTION = "Six apartment and villa types with a 50B budget"

# ===== PROJECT DEFAULTS =====

# Palette cycled through as projects are added
PROJECT_COLORS = [
    '#3b82f6', '#8b5cf6', '#10b981', '#f59e0b',
    '#ef4444', '#ec4899', '#6366f1', '#14b8a6'
]

# Values for a project created with add_project()
NEW_PROJECT_DEFAULTS = {
    'cost': 5.0,
    'rent': 0.25,
    'growth_rate': 0.05,
    'max_units': 2,
}

# Format: (id, name, cost, rent, growth_rate, max_units, color)
DEMO_PROJECT_ROWS = [
    ('1', 'Apt Type A', 4.000, 0.20, 0.050, 3, '#3b82f6'),
    ('2', 'Apt Type B', 4.200, 0.22, 0.060, 3, '#8b5cf6'),
    ('3', 'Apt Type C', 4.300, 0.21, 0.055, 3, '#10b981'),
    ('4', 'Villa S', 3.600, 0.15, 0.040, 3, '#f59e0b'),
    ('5', 'Villa M', 4.500, 0.23, 0.070, 3, '#ef4444'),
    ('6', 'Villa L', 3.800, 0.18, 0.060, 3, '#ec4899'),
]

# ===== SOLVER LABELS =====

# Reported by both solvers; the greedy pass asserts it without proof
OPTIMAL_STATUS = "Optimal Solution Found"

METHOD_DESCRIPTIONS = {
    'greedy_density': "Greedy Heuristic (Density Descending) with Knapsack Constraints",
    'branch_and_bound': "Exact Bounded Knapsack (Branch and Bound)",
}


def default_params() -> GlobalParams:
    """Global parameters used when a scenario does not override them."""
    return GlobalParams(
        budget=DEFAULT_BUDGET,
        discount_rate=DEFAULT_DISCOUNT_RATE,
        years=DEFAULT_YEARS
    )


def demo_projects() -> tuple:
    """The demo project set as ProjectInput records."""
    return tuple(
        ProjectInput(
            id=project_id,
            name=name,
            cost=cost,
            rent=rent,
            growth_rate=growth_rate,
            max_units=max_units,
            color=color
        )
        for project_id, name, cost, rent, growth_rate, max_units, color in DEMO_PROJECT_ROWS
    )
