"""
Cash-Flow Projection Generator

Projects income, expenses and cumulative cash month by month from the
user's projection settings.

DESIGN DECISION: The worst case is asymmetric.
Income is scaled by the worst multiplier while expenses are scaled by its
inverse, so a multiplier of 0.9 cuts income by 10% and raises costs by
about 11%. Best case only scales income.

For month i (0 = start month):

    growth     = (1 + growth_rate / 100) ** (i / 12)
    income     = expected_income * growth * multiplier
    expenses   = (fixed_costs + variable_costs) * (1 / multiplier if worst else 1)
    cumulative = starting_cash - starting_debt + sum(net[0..i])
"""

from datetime import date
from typing import Optional

from finplan.calculations.periods import month_key, shift_month
from finplan.models.records import ProjectionSettings, Scenario
from finplan.models.results import ProjectionMonth

DEFAULT_PROJECTION_MONTHS = 12


def scenario_multiplier(settings: ProjectionSettings, scenario: Scenario) -> float:
    if scenario == Scenario.BEST:
        return settings.scenario_multipliers.best
    if scenario == Scenario.WORST:
        return settings.scenario_multipliers.worst
    return 1.0


def generate_projection(
    settings: ProjectionSettings,
    scenario: Scenario,
    start: date,
    months: int = DEFAULT_PROJECTION_MONTHS,
) -> list[ProjectionMonth]:
    """
    Project `months` months starting with the month of `start`.

    Amounts are unrounded; call `ProjectionMonth.rounded()` for display.

    Raises:
        ValueError: If the worst-case multiplier is 0 (its inverse is
            undefined).
    """
    multiplier = scenario_multiplier(settings, scenario)
    if scenario == Scenario.WORST:
        if multiplier == 0:
            raise ValueError("Worst-case multiplier must be greater than 0")
        expense_factor = 1 / multiplier
    else:
        expense_factor = 1.0

    base_expenses = settings.fixed_costs + settings.variable_costs
    first_month = month_key(start)
    cumulative = settings.starting_cash - settings.starting_debt

    projection = []
    for i in range(months):
        growth = (1 + settings.growth_rate / 100) ** (i / 12)
        income = settings.expected_income * growth * multiplier
        expenses = base_expenses * expense_factor
        net = income - expenses
        cumulative += net
        projection.append(ProjectionMonth(
            index=i,
            month=shift_month(first_month, i),
            scenario=scenario,
            income=income,
            expenses=expenses,
            net=net,
            cumulative_cash=cumulative,
        ))

    return projection


def generate_all_scenarios(
    settings: ProjectionSettings,
    start: date,
    months: Optional[int] = None,
) -> dict[Scenario, list[ProjectionMonth]]:
    """Base, best and worst projections side by side."""
    months = months or DEFAULT_PROJECTION_MONTHS
    return {
        scenario: generate_projection(settings, scenario, start, months)
        for scenario in (Scenario.BASE, Scenario.BEST, Scenario.WORST)
    }
