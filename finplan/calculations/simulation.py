"""
Investment & Simulation Engine

Compares the current budget with a simulated one and projects what
investing the simulated surplus would grow to.

DESIGN DECISION: Compounding is iterated month by month.
The portfolio path is built step by step (p = p * (1 + r / 12) + c) rather
than with the closed-form annuity formula, and the years-to-FIRE search is
bounded at 600 months. An unreachable target yields None, never a
diverging estimate.
"""

from datetime import date
from typing import Optional

from finplan.calculations.normalization import safe_ratio
from finplan.calculations.periods import month_key, shift_month
from finplan.models.records import SimulationParams
from finplan.models.results import PortfolioMonth, SimulationResult

SAFE_WITHDRAWAL_RATE = 0.04
MAX_FIRE_MONTHS = 600


def project_portfolio(
    current_portfolio: float,
    monthly_contribution: float,
    annual_return: float,
    months: int,
    start: date,
) -> list[PortfolioMonth]:
    """
    Month-by-month portfolio path, rows 0..months inclusive.

    Row i is the state before the i-th growth step. Contributions to date
    start at the current portfolio value, so returns are pure growth.
    """
    monthly_rate = annual_return / 12
    first_month = month_key(start)
    portfolio = current_portfolio
    contributions = current_portfolio

    rows = []
    for i in range(months + 1):
        rows.append(PortfolioMonth(
            month=i,
            year=i // 12,
            label=shift_month(first_month, i),
            contributions=contributions,
            portfolio_value=portfolio,
            returns=portfolio - contributions,
        ))
        if i < months:
            portfolio = portfolio * (1 + monthly_rate) + monthly_contribution
            contributions += monthly_contribution

    return rows


def fire_target(
    monthly_expenses: float,
    withdrawal_rate: float = SAFE_WITHDRAWAL_RATE,
) -> float:
    """Portfolio whose yearly withdrawal covers a year of expenses (4% rule)."""
    return monthly_expenses * 12 / withdrawal_rate


def years_to_fire(
    current_portfolio: float,
    monthly_contribution: float,
    annual_return: float,
    target: float,
    max_months: int = MAX_FIRE_MONTHS,
) -> Optional[float]:
    """
    Years until the compounding portfolio reaches `target`.

    The portfolio grows before each check, so reaching the target after the
    first step counts as month 0. Returns None when the contribution or the
    return is not positive, or when the target is not reached within
    `max_months`.
    """
    if monthly_contribution <= 0 or annual_return <= 0:
        return None

    monthly_rate = annual_return / 12
    portfolio = current_portfolio
    for month in range(max_months):
        portfolio = portfolio * (1 + monthly_rate) + monthly_contribution
        if portfolio >= target:
            return month / 12
    return None


def calculate_compound_interest(
    principal: float,
    monthly_contribution: float,
    annual_rate: float,
    years: float,
) -> float:
    """Value after `years` of monthly compounding with monthly contributions."""
    monthly_rate = annual_rate / 12
    total = principal
    month = 0
    while month < years * 12:
        total = total * (1 + monthly_rate) + monthly_contribution
        month += 1
    return total


def run_simulation(
    params: SimulationParams,
    start: date,
    withdrawal_rate: float = SAFE_WITHDRAWAL_RATE,
    max_fire_months: int = MAX_FIRE_MONTHS,
) -> SimulationResult:
    """
    Compare current and simulated budgets and project the investment path.

    The monthly contribution is the non-negative simulated surplus times the
    savings rate. The FIRE target is based on simulated expenses.
    """
    current_expenses = (
        params.current_fixed_costs
        + params.current_variable_costs
        + params.current_debt_payments
    )
    simulated_expenses = (
        params.simulated_fixed_costs
        + params.simulated_variable_costs
        + params.simulated_debt_payments
    )

    current_available = params.current_income - current_expenses
    current_savings_rate = safe_ratio(current_available, params.current_income)
    current_yearly_savings = max(0.0, current_available) * 12

    simulated_available = params.simulated_income - simulated_expenses
    simulated_savings_rate = safe_ratio(simulated_available, params.simulated_income)
    simulated_yearly_savings = max(0.0, simulated_available) * 12

    monthly_contribution = max(0.0, simulated_available) * params.savings_rate
    projection = project_portfolio(
        params.current_portfolio,
        monthly_contribution,
        params.expected_return,
        params.time_horizon_years * 12,
        start,
    )
    final = projection[-1]

    target = fire_target(simulated_expenses, withdrawal_rate)
    years = years_to_fire(
        params.current_portfolio,
        monthly_contribution,
        params.expected_return,
        target,
        max_fire_months,
    )

    return SimulationResult(
        current_total_expenses=current_expenses,
        current_available=current_available,
        current_savings_rate=current_savings_rate,
        current_yearly_savings=current_yearly_savings,
        simulated_total_expenses=simulated_expenses,
        simulated_available=simulated_available,
        simulated_savings_rate=simulated_savings_rate,
        simulated_yearly_savings=simulated_yearly_savings,
        available_diff=simulated_available - current_available,
        savings_rate_diff=simulated_savings_rate - current_savings_rate,
        yearly_savings_diff=simulated_yearly_savings - current_yearly_savings,
        fixed_costs_diff=params.simulated_fixed_costs - params.current_fixed_costs,
        variable_costs_diff=params.simulated_variable_costs - params.current_variable_costs,
        debt_payments_diff=params.simulated_debt_payments - params.current_debt_payments,
        total_expenses_diff=simulated_expenses - current_expenses,
        monthly_contribution=monthly_contribution,
        investment_projection=projection,
        final_portfolio_value=final.portfolio_value,
        total_contributions=final.contributions,
        total_returns=final.returns,
        fire_target=target,
        years_to_fire=years,
        fire_achievable=years is not None and years <= 50,
    )
