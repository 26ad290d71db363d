#!/usr/bin/env python3
"""
Tests for the greedy allocation solver.

These tests validate allocate(): the density ordering, the per-project unit
caps, the budget cap, the stable tie-break and the reported status.
"""

import sys
import os
import math
import random

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from calculators.components import CalculatedProject, SolverMethod
from calculators.allocation_solver import allocate
from calculators.finance_constants import OPTIMAL_STATUS


def make_calculated(project_id, cost, total_npv, max_units):
    """Build a valuated project directly from its solver-relevant numbers."""
    return CalculatedProject(
        id=project_id,
        name=f"Project {project_id}",
        cost=cost,
        rent=0.0,
        growth_rate=0.0,
        max_units=max_units,
        color="#10b981",
        sale_price=cost,
        rental_npv=0.0,
        total_npv=total_npv
    )


def test_efficiency_ordering_scenario():
    """Test the two-project scenario where the cheaper, denser project wins."""
    print("\nTest: Efficiency Ordering Scenario")
    print("-" * 50)

    projects = [
        make_calculated("proj1", cost=4.0, total_npv=1.0, max_units=3),   # ratio 0.25
        make_calculated("proj2", cost=2.0, total_npv=0.9, max_units=5),   # ratio 0.45
    ]

    result = allocate(projects, budget=10.0)

    assert result.units_for("proj1") == 0
    assert result.units_for("proj2") == 5
    assert result.total_cost == 10.0
    assert math.isclose(result.total_npv, 4.5)
    assert [a.project_id for a in result.allocations] == ["proj1", "proj2"]

    print(f"✓ Allocations: {[(a.project_id, a.units) for a in result.allocations]}")
    print(f"✓ Total cost: {result.total_cost}, Total NPV: {result.total_npv}")


def test_leftover_budget_flows_to_next_project():
    """Test that the budget left after the densest project is spent on the next one."""
    print("\nTest: Leftover Budget")
    print("-" * 50)

    projects = [
        make_calculated("a", cost=4.0, total_npv=1.0, max_units=3),
        make_calculated("b", cost=2.0, total_npv=0.9, max_units=2),
    ]

    result = allocate(projects, budget=10.0)

    # b first: 2 units (cap) for 4.0, then a: floor(6 / 4) = 1 unit
    assert result.units_for("b") == 2
    assert result.units_for("a") == 1
    assert result.total_cost == 8.0
    assert math.isclose(result.total_npv, 2.8)

    print(f"✓ a={result.units_for('a')}, b={result.units_for('b')}")


def test_non_positive_npv_gets_no_units():
    """Test that value-destroying and break-even projects are never bought."""
    print("\nTest: Non-Positive NPV")
    print("-" * 50)

    projects = [
        make_calculated("loss", cost=1.0, total_npv=-0.5, max_units=10),
        make_calculated("flat", cost=1.0, total_npv=0.0, max_units=10),
        make_calculated("gain", cost=1.0, total_npv=0.1, max_units=2),
    ]

    result = allocate(projects, budget=100.0)

    assert result.units_for("loss") == 0
    assert result.units_for("flat") == 0
    assert result.units_for("gain") == 2

    print("✓ Only the positive NPV project is bought")


def test_zero_budget():
    """Test that a zero budget allocates nothing."""
    print("\nTest: Zero Budget")
    print("-" * 50)

    projects = [
        make_calculated("a", cost=4.0, total_npv=1.0, max_units=3),
        make_calculated("b", cost=2.0, total_npv=0.9, max_units=5),
    ]

    result = allocate(projects, budget=0.0)

    assert all(a.units == 0 for a in result.allocations)
    assert result.total_cost == 0
    assert result.total_npv == 0
    assert not result.has_investments

    print("✓ All allocations are zero")


def test_no_viable_investment_is_not_an_error():
    """Test that an all-zero allocation still reports a normal status."""
    print("\nTest: No Viable Investment")
    print("-" * 50)

    projects = [make_calculated("a", cost=4.0, total_npv=-1.0, max_units=3)]

    result = allocate(projects, budget=50.0)

    assert not result.has_investments
    assert result.is_optimal is True
    assert result.status == OPTIMAL_STATUS

    print(f"✓ Status: {result.status}")


def test_empty_project_list():
    """Test that an empty project list yields an empty allocation."""
    print("\nTest: Empty Project List")
    print("-" * 50)

    result = allocate([], budget=50.0)

    assert result.allocations == ()
    assert result.total_cost == 0
    assert result.total_npv == 0

    print("✓ Empty allocation")


def test_tie_break_keeps_input_order():
    """Test that equal efficiencies are served in input order."""
    print("\nTest: Tie-Break")
    print("-" * 50)

    first = make_calculated("first", cost=2.0, total_npv=0.5, max_units=1)
    second = make_calculated("second", cost=4.0, total_npv=1.0, max_units=1)  # Same 0.25 ratio

    result = allocate([first, second], budget=4.0)
    assert result.units_for("first") == 1
    assert result.units_for("second") == 0

    reversed_result = allocate([second, first], budget=4.0)
    assert reversed_result.units_for("second") == 1
    assert reversed_result.units_for("first") == 0

    print("✓ Earlier project wins ties")


def test_greedy_reports_optimal_status():
    """Test that the greedy pass reports optimality even when it is suboptimal."""
    print("\nTest: Greedy Status Flag")
    print("-" * 50)

    projects = [
        make_calculated("dense", cost=6.0, total_npv=3.6, max_units=1),    # ratio 0.6
        make_calculated("filler", cost=5.0, total_npv=2.5, max_units=2),   # ratio 0.5
    ]

    result = allocate(projects, budget=10.0)

    # Buying two "filler" units (NPV 5.0) beats the greedy choice (NPV 3.6)
    assert result.units_for("dense") == 1
    assert result.units_for("filler") == 0
    assert math.isclose(result.total_npv, 3.6)
    assert result.is_optimal is True
    assert result.method is SolverMethod.GREEDY
    assert result.heuristic_used

    print(f"✓ Greedy NPV {result.total_npv} reported as '{result.status}'")


def test_zero_cost_project_capped_by_max_units():
    """Test that a zero unit cost does not raise and is capped by max_units."""
    print("\nTest: Zero Cost Project")
    print("-" * 50)

    projects = [
        make_calculated("free", cost=0.0, total_npv=0.3, max_units=4),
        make_calculated("paid", cost=2.0, total_npv=0.5, max_units=2),
    ]

    result = allocate(projects, budget=3.0)

    assert result.units_for("free") == 4
    assert result.units_for("paid") == 1
    assert result.total_cost == 2.0

    print(f"✓ free={result.units_for('free')}, paid={result.units_for('paid')}")


def test_random_portfolios_respect_constraints():
    """Test unit caps, budget cap and NPV filter over random portfolios."""
    print("\nTest: Random Portfolio Constraints")
    print("-" * 50)

    rng = random.Random(20240501)

    for trial in range(300):
        projects = [
            make_calculated(
                f"p{i}",
                cost=round(rng.uniform(0.5, 10.0), 3),
                total_npv=round(rng.uniform(-2.0, 3.0), 3),
                max_units=rng.randint(0, 6)
            )
            for i in range(rng.randint(1, 8))
        ]
        budget = round(rng.uniform(0.0, 60.0), 2)

        result = allocate(projects, budget)

        assert len(result.allocations) == len(projects)
        spent = 0.0
        for project, allocation in zip(projects, result.allocations):
            assert allocation.project_id == project.id
            assert 0 <= allocation.units <= project.max_units
            if project.total_npv <= 0:
                assert allocation.units == 0
            spent += allocation.units * project.cost

        assert spent <= budget + 1e-9, (trial, spent, budget)
        assert math.isclose(spent, result.total_cost, abs_tol=1e-9)

    print("✓ 300 random portfolios within caps and budget")


def run_all_tests():
    """Run all allocation solver tests."""
    print("=" * 70)
    print("ALLOCATION SOLVER TESTS")
    print("=" * 70)

    tests = [
        test_efficiency_ordering_scenario,
        test_leftover_budget_flows_to_next_project,
        test_non_positive_npv_gets_no_units,
        test_zero_budget,
        test_no_viable_investment_is_not_an_error,
        test_empty_project_list,
        test_tie_break_keeps_input_order,
        test_greedy_reports_optimal_status,
        test_zero_cost_project_capped_by_max_units,
        test_random_portfolios_respect_constraints,
    ]

    passed = 0
    failed = 0

    for test_func in tests:
        try:
            test_func()
            passed += 1
        except AssertionError as e:
            print(f"\n❌ FAILED: {test_func.__name__}")
            print(f"   {str(e)}")
            failed += 1
        except Exception as e:
            print(f"\n❌ ERROR in {test_func.__name__}: {type(e).__name__}: {str(e)}")
            failed += 1

    print("\n" + "=" * 70)
    print(f"RESULTS: {passed} passed, {failed} failed out of {len(tests)} tests")

    if failed == 0:
        print("🎉 All tests passed!")
        return True
    else:
        print(f"❌ {failed} test(s) failed")
        return False


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
