"""
Financial Profile Calculator

Derives the monthly key figures of the dashboard (income, costs, debt,
net worth, savings rate, health score) from the profile records.

DESIGN DECISION: Quarterly bonuses are amortized over the whole year.
A bonus source contributes amount x confirmed quarters / 12 every month,
not only in the months a payout happened. Unconfirmed quarters contribute
nothing: confirmation is a manual step by the user.
"""

from typing import Iterable, Optional

from finplan.calculations.health import HealthScorePolicy, calculate_health_score
from finplan.calculations.normalization import monthly_equivalent, safe_ratio
from finplan.models.records import (
    Assets,
    CreditCard,
    Debt,
    FixedCost,
    IncomeSource,
    VariableCostEstimate,
    YearlyIncomeRecord,
)
from finplan.models.results import (
    CreditCardSummary,
    DebtProgress,
    FinancialProfile,
    QuarterlyBonusOverview,
)

QUARTERS = ("Q1", "Q2", "Q3", "Q4")


# =============================================================================
# INCOME
# =============================================================================

def monthly_income_without_bonus(sources: Iterable[IncomeSource]) -> float:
    """Active regular income, normalized to a monthly amount."""
    return sum(
        monthly_equivalent(source.amount, source.frequency)
        for source in sources
        if source.active and not source.is_bonus
    )


def monthly_bonus_income(sources: Iterable[IncomeSource]) -> float:
    """Confirmed quarterly bonuses, spread evenly over twelve months."""
    return sum(
        source.amount * source.confirmed_count / 12
        for source in sources
        if source.active and source.is_bonus
    )


def monthly_income(sources: Iterable[IncomeSource]) -> float:
    sources = list(sources)
    return monthly_income_without_bonus(sources) + monthly_bonus_income(sources)


def quarterly_bonus_overview(
    sources: Iterable[IncomeSource],
) -> Optional[QuarterlyBonusOverview]:
    """
    Combined quarter status of all active bonus sources.

    Returns None when there is no active bonus source. A quarter is only
    confirmed when every bonus source has confirmed it; a source that never
    recorded a confirmation counts as unconfirmed for all quarters.
    """
    bonuses = [s for s in sources if s.active and s.is_bonus]
    if not bonuses:
        return None

    confirmed = {
        quarter: all(
            s.confirmed_quarters is not None and s.confirmed_quarters.as_dict()[quarter]
            for s in bonuses
        )
        for quarter in QUARTERS
    }
    per_quarter = sum(s.amount for s in bonuses)

    return QuarterlyBonusOverview(
        total_bonus_per_quarter=per_quarter,
        confirmed_quarters=confirmed,
        confirmed_count=sum(1 for value in confirmed.values() if value),
        total_confirmed_bonus=sum(s.amount * s.confirmed_count for s in bonuses),
        total_potential_bonus=per_quarter * 4,
    )


# =============================================================================
# INCOME HISTORY
# =============================================================================

def yearly_income_record(
    records: Iterable[YearlyIncomeRecord],
    year: int,
) -> Optional[YearlyIncomeRecord]:
    """The recorded income of `year`, or None when that year was never recorded."""
    return next((record for record in records if record.year == year), None)


def yearly_income_total(records: Iterable[YearlyIncomeRecord], year: int) -> float:
    """Salary, bonuses, gifts and other income of `year`; 0 for an unknown year."""
    record = yearly_income_record(records, year)
    return record.total if record else 0.0


def yearly_bonus_total(records: Iterable[YearlyIncomeRecord], year: int) -> float:
    """The four quarterly bonuses of `year`; 0 for an unknown year."""
    record = yearly_income_record(records, year)
    return record.bonus_total if record else 0.0


# =============================================================================
# COSTS, DEBT & ASSETS
# =============================================================================

def monthly_fixed_costs(costs: Iterable[FixedCost]) -> float:
    return sum(
        monthly_equivalent(cost.amount, cost.frequency)
        for cost in costs
        if cost.active
    )


def monthly_variable_costs(estimates: Iterable[VariableCostEstimate]) -> float:
    return sum(estimate.estimated_monthly for estimate in estimates)


def total_debt(debts: Iterable[Debt]) -> float:
    return sum(debt.current_balance for debt in debts)


def monthly_debt_payments(debts: Iterable[Debt]) -> float:
    return sum(debt.monthly_payment for debt in debts)


def total_assets(assets: Assets) -> float:
    return assets.savings + assets.investments + assets.other


def debt_progress(debt: Debt) -> DebtProgress:
    """Repayment progress of one debt; 0 when the original amount is 0."""
    paid_off = debt.original_amount - debt.current_balance
    return DebtProgress(
        debt_id=debt.id,
        name=debt.name,
        paid_off=paid_off,
        remaining=debt.current_balance,
        progress=safe_ratio(paid_off, debt.original_amount),
    )


def credit_card_summary(cards: Iterable[CreditCard]) -> CreditCardSummary:
    """Balances, limits and fees over all active credit cards."""
    active = [card for card in cards if card.active]
    total_balance = sum(card.current_balance for card in active)
    total_limit = sum(card.credit_limit for card in active)
    return CreditCardSummary(
        active_count=len(active),
        total_balance=total_balance,
        total_limit=total_limit,
        utilization_percent=safe_ratio(total_balance, total_limit) * 100,
        monthly_fees=sum(card.monthly_fee for card in active),
        annual_fees=sum(card.annual_fee for card in active),
    )


# =============================================================================
# PROFILE
# =============================================================================

def compute_financial_profile(
    income_sources: Iterable[IncomeSource],
    fixed_costs: Iterable[FixedCost],
    variable_costs: Iterable[VariableCostEstimate],
    debts: Iterable[Debt],
    assets: Optional[Assets] = None,
    health_policy: HealthScorePolicy = calculate_health_score,
) -> FinancialProfile:
    """
    Derive every key figure of the financial profile.

    Ratios with a zero denominator are 0. The savings rate may be negative
    when spending exceeds income.
    """
    income_sources = list(income_sources)
    debts = list(debts)
    assets = assets or Assets()

    without_bonus = monthly_income_without_bonus(income_sources)
    bonus = monthly_bonus_income(income_sources)
    income = without_bonus + bonus

    fixed = monthly_fixed_costs(fixed_costs)
    variable = monthly_variable_costs(variable_costs)
    debt_total = total_debt(debts)
    debt_payments = monthly_debt_payments(debts)
    assets_total = total_assets(assets)

    available = income - fixed - variable - debt_payments
    debt_to_income = safe_ratio(debt_payments, income)
    savings_rate = safe_ratio(available, income)
    emergency_months = safe_ratio(assets.savings, fixed + variable)

    return FinancialProfile(
        monthly_income_without_bonus=without_bonus,
        monthly_bonus_income=bonus,
        monthly_income=income,
        quarterly_bonus_overview=quarterly_bonus_overview(income_sources),
        monthly_fixed_costs=fixed,
        monthly_variable_costs=variable,
        total_debt=debt_total,
        monthly_debt_payments=debt_payments,
        total_assets=assets_total,
        net_worth=assets_total - debt_total,
        available_income=available,
        debt_to_income_ratio=debt_to_income,
        savings_rate=savings_rate,
        emergency_fund_months=emergency_months,
        health_score=health_policy(savings_rate, debt_to_income, emergency_months),
    )
