#!/usr/bin/env python3
"""
Test boundary validation of projects and global parameters.

The calculators accept anything; these checks are what keeps a discount rate
of -1 or a zero unit cost away from them.
"""

import unittest
import sys
import os
from dataclasses import replace

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from calculators.components import ProjectInput, GlobalParams
from calculators.validation import (
    InvalidParameterError, validate_project, validate_params, validate_portfolio,
    coerce_whole_number
)
from calculators.finance_constants import demo_projects, default_params


class TestProjectValidation(unittest.TestCase):
    """Test validate_project()."""

    def setUp(self):
        self.project = ProjectInput(
            id="1", name="Apt Type A", cost=4.0, rent=0.2,
            growth_rate=0.05, max_units=3, color="#3b82f6"
        )

    def test_valid_project_passes(self):
        validate_project(self.project)

    def test_negative_growth_is_allowed(self):
        validate_project(replace(self.project, growth_rate=-0.3))

    def test_zero_max_units_is_allowed(self):
        validate_project(replace(self.project, max_units=0))

    def test_non_positive_cost_rejected(self):
        for cost in [0.0, -4.0]:
            with self.assertRaises(InvalidParameterError) as ctx:
                validate_project(replace(self.project, cost=cost))
            self.assertIn("cost must be positive", str(ctx.exception))

    def test_negative_rent_rejected(self):
        with self.assertRaises(InvalidParameterError):
            validate_project(replace(self.project, rent=-0.1))

    def test_negative_max_units_rejected(self):
        with self.assertRaises(InvalidParameterError):
            validate_project(replace(self.project, max_units=-1))

    def test_fractional_max_units_rejected(self):
        with self.assertRaises(InvalidParameterError):
            validate_project(replace(self.project, max_units=2.5))

    def test_nan_and_infinity_rejected(self):
        for field_name in ['cost', 'rent', 'growth_rate']:
            for value in [float('nan'), float('inf')]:
                with self.assertRaises(InvalidParameterError):
                    validate_project(replace(self.project, **{field_name: value}))

    def test_empty_id_rejected(self):
        with self.assertRaises(InvalidParameterError):
            validate_project(replace(self.project, id=""))

    def test_error_is_a_value_error(self):
        with self.assertRaises(ValueError):
            validate_project(replace(self.project, cost=-1.0))


class TestParamsValidation(unittest.TestCase):
    """Test validate_params()."""

    def test_defaults_pass(self):
        validate_params(default_params())

    def test_zero_budget_and_zero_years_allowed(self):
        validate_params(GlobalParams(budget=0.0, discount_rate=0.0, years=0))

    def test_negative_discount_rate_above_minus_one_allowed(self):
        validate_params(GlobalParams(budget=10.0, discount_rate=-0.5, years=5))

    def test_discount_rate_of_minus_one_rejected(self):
        for rate in [-1.0, -1.5]:
            with self.assertRaises(InvalidParameterError) as ctx:
                validate_params(GlobalParams(budget=10.0, discount_rate=rate, years=5))
            self.assertIn("greater than -1", str(ctx.exception))

    def test_negative_years_rejected(self):
        with self.assertRaises(InvalidParameterError):
            validate_params(GlobalParams(budget=10.0, discount_rate=0.08, years=-1))

    def test_negative_budget_rejected(self):
        with self.assertRaises(InvalidParameterError):
            validate_params(GlobalParams(budget=-1.0, discount_rate=0.08, years=5))

    def test_nan_budget_rejected(self):
        with self.assertRaises(InvalidParameterError):
            validate_params(GlobalParams(budget=float('nan'), discount_rate=0.08, years=5))


class TestWholeNumberCoercion(unittest.TestCase):
    """Test coerce_whole_number() on user-supplied values."""

    def test_accepts_integral_values(self):
        for value, expected in [(3, 3), (3.0, 3), ("3", 3), ("3.0", 3), (0, 0)]:
            self.assertEqual(coerce_whole_number(value, "years"), expected)

    def test_rejects_fractional_and_non_numeric_values(self):
        for value in [2.7, "7.5", "abc", None, True, float('inf'), float('nan')]:
            with self.assertRaises(InvalidParameterError) as ctx:
                coerce_whole_number(value, "years")
            self.assertIn("years must be a whole number", str(ctx.exception))


class TestPortfolioValidation(unittest.TestCase):
    """Test validate_portfolio()."""

    def test_demo_portfolio_passes(self):
        validate_portfolio(demo_projects(), default_params())

    def test_duplicate_ids_rejected(self):
        projects = demo_projects()
        duplicated = projects + (replace(projects[0], name="Copy of A"),)

        with self.assertRaises(InvalidParameterError) as ctx:
            validate_portfolio(duplicated, default_params())
        self.assertIn("Duplicate project id '1'", str(ctx.exception))

    def test_invalid_params_reported_before_projects(self):
        bad_params = GlobalParams(budget=10.0, discount_rate=-1.0, years=5)
        with self.assertRaises(InvalidParameterError) as ctx:
            validate_portfolio(demo_projects(), bad_params)
        self.assertIn("discount_rate", str(ctx.exception))


if __name__ == '__main__':
    unittest.main()
