#!/usr/bin/env python3
"""
Portfolio Analysis - Main CLI for real estate portfolio optimization.

Value each candidate project, allocate the budget across them and print the
recommended unit counts.
"""

import sys
import os

# Add current directory to path for imports
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from calculators.components import SolverMethod
from calculators.finance_constants import METHOD_DESCRIPTIONS
from calculators.format_utils import format_currency, format_percent
from calculators.validation import InvalidParameterError
from engine.portfolio_manager import PortfolioManager
from loaders.scenario_loader import ScenarioLoader, load_scenario_with_fallback
from reports.csv_generators import save_all_portfolio_csvs

NO_VIABLE_INVESTMENT_MESSAGE = "No viable investments found within budget constraints."

METHOD_CHOICES = {
    'greedy': SolverMethod.GREEDY,
    'exact': SolverMethod.EXACT,
}


def print_global_params(params):
    """Print the scenario assumptions."""
    print(f"\nGLOBAL CONSTRAINTS:")
    print(f"  💰 Total Budget: {params.budget:,.2f} ({format_currency(params.budget)})")
    print(f"  📉 Discount Rate: {format_percent(params.discount_rate)}")
    print(f"  ⏳ Horizon: {params.years} years")


def print_valuations(analysis):
    """Print the per-unit valuation of every project."""
    print(f"\nPROJECT VALUATIONS (per unit):")
    print(f"  {'Project':<16} {'Cost':>9} {'Rent':>8} {'Growth':>8} {'Rental PV':>10} "
          f"{'Sale Price':>11} {'NPV':>9} {'Ratio':>7} {'Max':>4}")
    print(f"  {'-'*90}")
    for p in analysis.projects:
        print(f"  {p.name[:16]:<16} {p.cost:>9.3f} {p.rent:>8.3f} {format_percent(p.growth_rate):>8} "
              f"{p.rental_npv:>10.3f} {p.sale_price:>11.3f} {p.total_npv:>9.3f} "
              f"{p.efficiency:>7.2f} {p.max_units:>4}")


def print_allocation_results(analysis, verbose=False):
    """Print portfolio totals and the recommendations table."""
    result = analysis.solver_result
    budget = analysis.params.budget

    print(f"\nPORTFOLIO SUMMARY:")
    print(f"  💵 Total Investment: {result.total_cost:.2f} / {budget:g} "
          f"({format_percent(analysis.budget_utilization)} Budget Utilized)")
    print(f"  📈 Maximized Profit (NPV): {result.total_npv:.2f}")
    print(f"  ✅ Status: {result.status}")
    print(f"  🧮 Method: {METHOD_DESCRIPTIONS[result.method.value]}")
    if verbose and result.heuristic_used:
        print(f"     ⚠️  Greedy result; optimality is reported but not proven (use --method exact)")

    print(f"\nPORTFOLIO RECOMMENDATIONS:")
    rows = analysis.allocation_rows()
    if not rows:
        print(f"  {NO_VIABLE_INVESTMENT_MESSAGE}")
        return

    print(f"  {'Project':<16} {'Unit Cost':>10} {'Unit NPV':>10} {'Units':>6} "
          f"{'Investment':>11} {'Profit':>10}")
    print(f"  {'-'*68}")
    for row in rows:
        print(f"  {row.project.name[:16]:<16} {row.project.cost:>10.3f} {row.project.total_npv:>10.3f} "
              f"{row.units:>6} {row.investment:>11.3f} {row.profit:>10.3f}")


def compare_methods(analyses):
    """Print greedy and exact solver results side by side."""
    print(f"\n{'='*80}")
    print("SOLVER COMPARISON")
    print(f"{'='*80}")
    print(f"\n{'Method':<20} {'Investment':>12} {'NPV':>10} {'Units':>7}")
    print(f"{'-'*52}")

    for method, analysis in analyses.items():
        result = analysis.solver_result
        total_units = sum(a.units for a in result.allocations)
        print(f"{method.value:<20} {result.total_cost:>12.3f} {result.total_npv:>10.3f} {total_units:>7}")

    greedy = analyses[SolverMethod.GREEDY].solver_result
    exact = analyses[SolverMethod.EXACT].solver_result
    gap = exact.total_npv - greedy.total_npv
    if gap > 1e-9:
        print(f"\n⚠️  Greedy pass leaves {gap:.3f} NPV on the table")
    else:
        print(f"\n✅ Greedy pass matches the exact optimum")


def load_manager(scenario_path=None, use_demo=False, verbose=False):
    """Build a PortfolioManager from a scenario file or the default data sources."""
    if scenario_path:
        scenario = ScenarioLoader(scenario_path).load_scenario()
        if verbose:
            print(f"📂 Loaded scenario from {scenario_path}")
    else:
        scenario, _ = load_scenario_with_fallback(verbose=verbose, force_demo=use_demo)

    print(f"\nSCENARIO: {scenario.name}")
    print("="*80)
    if scenario.description:
        print(scenario.description)

    return PortfolioManager.from_scenario(scenario)


def run_analysis(args):
    """Execute the analysis described by parsed command line arguments."""
    manager = load_manager(args.scenario, args.demo, args.verbose)

    # Command line overrides
    if args.budget is not None:
        manager.set_param('budget', args.budget)
    if args.discount_rate is not None:
        manager.set_param('discount_rate', args.discount_rate)
    if args.years is not None:
        manager.set_param('years', args.years)

    method = METHOD_CHOICES[args.method]
    analysis = manager.analyze(method)

    print_global_params(analysis.params)
    print_valuations(analysis)
    print_allocation_results(analysis, verbose=args.verbose)

    if args.compare:
        compare_methods(manager.compare_methods())

    if args.output_dir:
        paths = save_all_portfolio_csvs(analysis, args.output_dir)
        print(f"\n📁 CSVs saved to: {args.output_dir}")
        if args.verbose:
            for path in paths.values():
                print(f"   • {path}")

    if args.charts:
        # Imported lazily so CSV-only runs do not load matplotlib
        from reports.charts import save_portfolio_charts
        save_portfolio_charts(analysis, args.charts)
        print(f"📊 Charts saved to: {args.charts}")

    return analysis


def main(argv=None):
    """Main entry point for portfolio analysis."""
    import argparse

    parser = argparse.ArgumentParser(
        description='Optimize a real estate portfolio under a budget constraint',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s
  %(prog)s --scenario data/demo_scenario.json --method exact
  %(prog)s --demo --budget 30 --years 10 --compare
  %(prog)s --output-dir output/ --charts output/portfolio.png
        """
    )

    parser.add_argument('--scenario', help='Path to scenario JSON file')
    parser.add_argument('--demo', action='store_true',
                        help='Force use of demo data even if data/user_scenario.json exists')
    parser.add_argument('--budget', type=float, help='Override the total budget')
    parser.add_argument('--discount-rate', type=float, help='Override the discount rate (decimal)')
    parser.add_argument('--years', type=int, help='Override the valuation horizon')
    parser.add_argument('--method', choices=sorted(METHOD_CHOICES), default='greedy',
                        help='Allocation solver (default: greedy)')
    parser.add_argument('--compare', action='store_true',
                        help='Also run every solver and compare the results')
    parser.add_argument('--output-dir', help='Directory for CSV results')
    parser.add_argument('--charts', help='Path of the chart image to write')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Show data source and output details')

    args = parser.parse_args(argv)

    try:
        run_analysis(args)
    except InvalidParameterError as e:
        print(f"\n❌ Invalid input: {e}")
        return 1
    except (FileNotFoundError, ValueError) as e:
        print(f"\n❌ Could not load scenario: {e}")
        return 1

    print(f"\n✅ Portfolio analysis complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
