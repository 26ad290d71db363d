"""
Portfolio charts: budget allocation donut and per-project NPV comparison.
"""

import os

import numpy as np
import matplotlib.pyplot as plt

from engine.portfolio_manager import PortfolioAnalysis

EMPTY_ALLOCATION_MESSAGE = "No investment allocated"


def _plot_allocation(ax, analysis: PortfolioAnalysis) -> None:
    """Donut of investment per project (units * cost)."""
    rows = analysis.allocation_rows()

    if not rows:
        ax.text(0.5, 0.5, EMPTY_ALLOCATION_MESSAGE, ha='center', va='center',
                fontsize=12, color='#94a3b8', transform=ax.transAxes)
        ax.set_axis_off()
    else:
        values = [row.investment for row in rows]
        ax.pie(
            values,
            labels=[row.project.name for row in rows],
            colors=[row.project.color for row in rows],
            autopct=lambda pct: f'{pct:.0f}%',
            pctdistance=0.8,
            startangle=90,
            wedgeprops={'width': 0.35, 'edgecolor': 'white'}
        )
        ax.axis('equal')

    ax.set_title('Budget Allocation', fontsize=14, fontweight='bold')


def _plot_npv_comparison(ax, analysis: PortfolioAnalysis) -> None:
    """Horizontal bars of unit NPV, annotated with the NPV/cost ratio."""
    projects = analysis.projects
    y_pos = np.arange(len(projects))
    npvs = [p.total_npv for p in projects]

    ax.barh(y_pos, npvs, color='#10b981', height=0.5)
    ax.set_yticks(y_pos)
    ax.set_yticklabels([p.name for p in projects], fontsize=10)
    ax.invert_yaxis()
    ax.axvline(0, color='#64748b', linewidth=1)

    for y, project in zip(y_pos, projects):
        ax.text(project.total_npv, y, f'  ratio {project.efficiency:.2f}',
                va='center', fontsize=9, color='#6366f1')

    ax.set_xlabel('NPV per unit', fontsize=12)
    ax.set_title('Project NPV Potential', fontsize=14, fontweight='bold')
    ax.xaxis.set_major_formatter(plt.FuncFormatter(lambda x, p: f'{x:.2f}'))
    ax.grid(True, axis='x', alpha=0.3, linestyle='--')
    ax.set_axisbelow(True)


def create_portfolio_charts(analysis: PortfolioAnalysis):
    """
    Create the allocation and NPV comparison charts side by side.

    Args:
        analysis: PortfolioAnalysis to plot

    Returns:
        matplotlib Figure
    """
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6), constrained_layout=True)
    _plot_allocation(ax1, analysis)
    _plot_npv_comparison(ax2, analysis)
    return fig


def save_portfolio_charts(analysis: PortfolioAnalysis, output_path: str, dpi: int = 120) -> str:
    """Render the charts to an image file and close the figure."""
    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    fig = create_portfolio_charts(analysis)
    try:
        fig.savefig(output_path, dpi=dpi)
    finally:
        plt.close(fig)
    return output_path
