"""
Portfolio metrics and savings plans.

Values are taken from the last recorded prices; there is no market data
lookup.
"""

from typing import Iterable

from finplan.calculations.normalization import monthly_equivalent, safe_ratio
from finplan.models.records import (
    Investment,
    InvestmentTransaction,
    InvestmentTransactionType,
    SavingsPlan,
)
from finplan.models.results import InvestmentPerformance, PortfolioMetrics, TypeBreakdown


def investment_performance(investment: Investment) -> InvestmentPerformance:
    """Value and gain/loss of one position; the percentage is 0 without a cost basis."""
    return InvestmentPerformance(
        investment_id=investment.id,
        name=investment.name,
        type=investment.type,
        value=investment.value,
        cost=investment.cost,
        gain_loss=investment.gain_loss,
        gain_loss_percent=safe_ratio(investment.gain_loss, investment.cost) * 100,
    )


def transactions_for_investment(
    transactions: Iterable[InvestmentTransaction],
    investment_id: str,
) -> list[InvestmentTransaction]:
    """Bookings of one position, in the order given."""
    return [t for t in transactions if t.investment_id == investment_id]


def total_dividends(transactions: Iterable[InvestmentTransaction]) -> float:
    """Sum of dividend payouts; a dividend without an amount counts as 0."""
    return sum(
        t.total_amount or 0.0
        for t in transactions
        if t.type == InvestmentTransactionType.DIVIDEND
    )


def portfolio_metrics(
    investments: Iterable[Investment],
    transactions: Iterable[InvestmentTransaction] = (),
) -> PortfolioMetrics:
    """
    Totals and per-type breakdown over the active investments.

    Dividends are summed over every booking passed in, including those of
    positions that have since been closed.
    """
    active = [investment for investment in investments if investment.active]

    by_type: dict[str, TypeBreakdown] = {}
    for investment in active:
        current = by_type.get(investment.type.value, TypeBreakdown())
        by_type[investment.type.value] = TypeBreakdown(
            value=current.value + investment.value,
            count=current.count + 1,
            gain_loss=current.gain_loss + investment.gain_loss,
        )

    total_value = sum(investment.value for investment in active)
    total_cost = sum(investment.cost for investment in active)
    total_gain_loss = total_value - total_cost

    return PortfolioMetrics(
        total_value=total_value,
        total_cost=total_cost,
        total_gain_loss=total_gain_loss,
        total_gain_loss_percent=safe_ratio(total_gain_loss, total_cost) * 100,
        by_type=by_type,
        investment_count=len(active),
        total_dividends=total_dividends(transactions),
    )


def monthly_savings_plan_amount(plans: Iterable[SavingsPlan]) -> float:
    """Monthly equivalent of all active savings plans."""
    return sum(
        monthly_equivalent(plan.amount, plan.frequency)
        for plan in plans
        if plan.active
    )
