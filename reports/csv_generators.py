"""
CSV generators for portfolio analysis outputs.

Columns come from dataclass introspection, so new fields on the component
records appear in the CSVs without changes here.
"""

import csv
import os
from dataclasses import asdict
from typing import Any, Dict, List

from engine.portfolio_manager import PortfolioAnalysis


def _write_rows(rows: List[Dict[str, Any]], output_path: str, fieldnames: List[str]) -> None:
    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(output_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)


def save_valuation_csv(analysis: PortfolioAnalysis, output_path: str) -> None:
    """
    Save one row per project with its valuation components.

    Args:
        analysis: PortfolioAnalysis with calculated projects
        output_path: Path to save the CSV file
    """
    rows = []
    for project in analysis.projects:
        row = asdict(project)
        # Computed display fields
        row['sale_npv'] = project.sale_npv
        row['efficiency'] = project.efficiency
        rows.append(row)

    if rows:
        fieldnames = list(rows[0].keys())
    else:
        fieldnames = ['id', 'name', 'cost', 'rent', 'growth_rate', 'max_units', 'color',
                      'sale_price', 'rental_npv', 'total_npv', 'sale_npv', 'efficiency']

    _write_rows(rows, output_path, fieldnames)


def save_allocation_csv(analysis: PortfolioAnalysis, output_path: str) -> None:
    """
    Save the allocation for every project, including zero-unit entries.

    A final TOTAL row carries the portfolio totals and solver status.

    Args:
        analysis: PortfolioAnalysis with a solver result
        output_path: Path to save the CSV file
    """
    result = analysis.solver_result
    fieldnames = ['project_id', 'project_name', 'units', 'max_units', 'unit_cost',
                  'unit_npv', 'investment', 'profit', 'status', 'method']

    rows = []
    for project, allocation in zip(analysis.projects, result.allocations):
        rows.append({
            **asdict(allocation),
            'project_name': project.name,
            'max_units': project.max_units,
            'unit_cost': project.cost,
            'unit_npv': project.total_npv,
            'investment': allocation.units * project.cost,
            'profit': allocation.units * project.total_npv,
            'status': '',
            'method': ''
        })

    rows.append({
        'project_id': 'TOTAL',
        'project_name': '',
        'units': sum(a.units for a in result.allocations),
        'max_units': '',
        'unit_cost': '',
        'unit_npv': '',
        'investment': result.total_cost,
        'profit': result.total_npv,
        'status': result.status,
        'method': result.method.value
    })

    _write_rows(rows, output_path, fieldnames)


def save_all_portfolio_csvs(analysis: PortfolioAnalysis, output_dir: str,
                            prefix: str = "portfolio") -> Dict[str, str]:
    """
    Save every CSV for an analysis into output_dir.

    Returns:
        Mapping of report name to written file path
    """
    os.makedirs(output_dir, exist_ok=True)

    paths = {
        'valuations': os.path.join(output_dir, f"{prefix}_valuations.csv"),
        'allocations': os.path.join(output_dir, f"{prefix}_allocations.csv"),
    }
    save_valuation_csv(analysis, paths['valuations'])
    save_allocation_csv(analysis, paths['allocations'])
    return paths
