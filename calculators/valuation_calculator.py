"""
Valuation calculator for discounted cash flow analysis of real estate units.

Formula:
    NPV = -I + R + S

    R (rental PV) = Sum( rent / (1+r)^k ) for k = 1..years
    S (sale PV)   = ( I * (1+g)^years ) / (1+r)^years

The calculator is a pure function of its inputs. It performs no validation:
degenerate inputs (a discount rate of exactly -1, NaN) come back as inf/nan
values instead of exceptions, and rejecting them is left to
calculators.validation.
"""

from typing import Iterable, List

import numpy as np

from calculators.components import ProjectInput, GlobalParams, CalculatedProject


class ValuationCalculator:
    """Pure NPV calculations for one unit of a project.

    This calculator knows nothing about budgets or allocation. It prices a
    single unit held for the scenario horizon and then sold.
    """

    @staticmethod
    def calculate_rental_pv(rent: float, discount_rate: float, years: int) -> float:
        """
        Present value of the rent received at the end of each year.

        Accumulated year by year so that a zero-year horizon yields 0.

        Args:
            rent: Net rental cash flow per unit per year
            discount_rate: Annual discount rate (decimal)
            years: Number of rent payments

        Returns:
            Sum of discounted rent payments
        """
        discount_factor = 1 + np.float64(discount_rate)
        rental_pv = np.float64(0.0)
        with np.errstate(all='ignore'):
            for k in range(1, years + 1):
                rental_pv += rent / discount_factor ** k
        return float(rental_pv)

    @staticmethod
    def calculate_sale_price(cost: float, growth_rate: float, years: int) -> float:
        """Future value of a unit after compounding cost by growth_rate."""
        with np.errstate(all='ignore'):
            return float(np.float64(cost) * (1 + np.float64(growth_rate)) ** years)

    @staticmethod
    def calculate_present_value(future_value: float, discount_rate: float, years: int) -> float:
        """Discount a single cash flow received after `years` years."""
        with np.errstate(all='ignore'):
            return float(np.float64(future_value) / (1 + np.float64(discount_rate)) ** years)

    @staticmethod
    def calculate_project_metrics(project: ProjectInput, params: GlobalParams) -> CalculatedProject:
        """
        Value one unit of a project under the global scenario assumptions.

        Args:
            project: Project definition
            params: Global discount rate and horizon (budget is not used)

        Returns:
            CalculatedProject carrying the project fields plus sale_price,
            rental_npv and total_npv
        """
        rental_pv = ValuationCalculator.calculate_rental_pv(
            project.rent, params.discount_rate, params.years
        )

        # Future value is stored for display; only its discounted value enters NPV
        sale_price = ValuationCalculator.calculate_sale_price(
            project.cost, project.growth_rate, params.years
        )
        sale_pv = ValuationCalculator.calculate_present_value(
            sale_price, params.discount_rate, params.years
        )

        total_npv = -project.cost + rental_pv + sale_pv

        return CalculatedProject(
            id=project.id,
            name=project.name,
            cost=project.cost,
            rent=project.rent,
            growth_rate=project.growth_rate,
            max_units=project.max_units,
            color=project.color,
            sale_price=sale_price,
            rental_npv=rental_pv,
            total_npv=total_npv
        )


def valuate(project: ProjectInput, params: GlobalParams) -> CalculatedProject:
    """Value a single project. See ValuationCalculator.calculate_project_metrics."""
    return ValuationCalculator.calculate_project_metrics(project, params)


def valuate_all(projects: Iterable[ProjectInput], params: GlobalParams) -> List[CalculatedProject]:
    """Value every project independently, preserving input order."""
    return [valuate(project, params) for project in projects]
