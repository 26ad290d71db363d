"""Report outputs (CSV exports and charts) for portfolio analyses."""

from .csv_generators import (
    save_valuation_csv,
    save_allocation_csv,
    save_all_portfolio_csvs
)

__all__ = [
    'save_valuation_csv',
    'save_allocation_csv',
    'save_all_portfolio_csvs'
]
