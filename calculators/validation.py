"""
Boundary validation for portfolio inputs.

The valuation and allocation calculators are total functions and never raise
on bad numbers; they return inf/nan instead. Inputs are checked here, before
the calculators run, so that a degenerate result never reaches a report.
"""

import math
import numbers
from typing import Iterable

from calculators.components import ProjectInput, GlobalParams


class InvalidParameterError(ValueError):
    """A project or scenario parameter that has no meaningful valuation."""


def _require_finite(value, label: str) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameterError(f"{label} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidParameterError(f"{label} must be finite, got {value!r}")


def _require_non_negative_int(value, label: str) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameterError(f"{label} must be a whole number, got {value!r}")
    if value < 0:
        raise InvalidParameterError(f"{label} cannot be negative, got {value}")


def coerce_whole_number(value, label: str) -> int:
    """
    Convert user input ("3", 3.0, 3) to an int without truncating.

    Raises:
        InvalidParameterError: If the value is not numeric or has a fractional part
    """
    if isinstance(value, bool):
        raise InvalidParameterError(f"{label} must be a whole number, got {value!r}")
    if isinstance(value, numbers.Integral):
        return int(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"{label} must be a whole number, got {value!r}")
    if not math.isfinite(number) or not number.is_integer():
        raise InvalidParameterError(f"{label} must be a whole number, got {value!r}")
    return int(number)


def validate_project(project: ProjectInput) -> None:
    """
    Check a project definition.

    Raises:
        InvalidParameterError: If any field is outside its domain
    """
    if not project.id:
        raise InvalidParameterError(f"Project '{project.name}' has an empty id")

    label = f"Project '{project.name}' ({project.id})"
    _require_finite(project.cost, f"{label}: cost")
    _require_finite(project.rent, f"{label}: rent")
    _require_finite(project.growth_rate, f"{label}: growth_rate")
    _require_non_negative_int(project.max_units, f"{label}: max_units")

    if project.cost <= 0:
        raise InvalidParameterError(
            f"{label}: cost must be positive, got {project.cost}. "
            f"The solver divides by unit cost to find how many units are affordable."
        )
    if project.rent < 0:
        raise InvalidParameterError(f"{label}: rent cannot be negative, got {project.rent}")


def validate_params(params: GlobalParams) -> None:
    """
    Check the global scenario parameters.

    Raises:
        InvalidParameterError: If any field is outside its domain
    """
    _require_finite(params.budget, "budget")
    _require_finite(params.discount_rate, "discount_rate")
    _require_non_negative_int(params.years, "years")

    if params.budget < 0:
        raise InvalidParameterError(f"budget cannot be negative, got {params.budget}")
    if params.discount_rate <= -1:
        raise InvalidParameterError(
            f"discount_rate must be greater than -1, got {params.discount_rate}. "
            f"A rate of -1 or below makes the discount factor (1 + r)^k zero or negative."
        )


def validate_portfolio(projects: Iterable[ProjectInput], params: GlobalParams) -> None:
    """Check every project, the global parameters and project id uniqueness."""
    validate_params(params)

    seen_ids = set()
    for project in projects:
        validate_project(project)
        if project.id in seen_ids:
            raise InvalidParameterError(
                f"Duplicate project id '{project.id}'. "
                f"Allocations are reported per project id, so ids must be unique."
            )
        seen_ids.add(project.id)
