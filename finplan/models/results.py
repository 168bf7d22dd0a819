"""
Computed Result Models for finplan

Everything the calculation modules return is one of these models.
Consumers (charts, tables, snapshots) read plain numbers from them.

DESIGN DECISION: Money stays unrounded.
Running totals such as the projection's cumulative cash must add up
exactly, so rounding is only applied when a consumer asks for display
values.
"""

import datetime as dt
import math
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from finplan.models.records import (
    Assets,
    CreditCard,
    Debt,
    FixedCost,
    IncomeSource,
    InvestmentType,
    Scenario,
    Transaction,
    VariableCostEstimate,
)


def round_half_up(value: float) -> float:
    """Round to a whole currency unit; halves round up (2.5 -> 3, -2.5 -> -2)."""
    return float(math.floor(value + 0.5))


# =============================================================================
# AGGREGATION
# =============================================================================

class CategoryAmount(BaseModel):
    """Total amount booked on one category."""
    category: str
    amount: float


class MonthlySummary(BaseModel):
    """Income, expenses and savings rate of one calendar month."""

    month: str = Field(..., description="ISO month (YYYY-MM)")
    income: float = 0.0
    expenses: float = 0.0
    net: float = 0.0
    savings_rate: float = Field(
        default=0.0,
        description="net / income, 0 when there is no income"
    )


class PeriodSummary(BaseModel):
    """Income and expenses of an arbitrary date range (e.g. one week)."""

    start: dt.date
    end: dt.date
    income: float = 0.0
    expenses: float = 0.0
    net: float = 0.0


class MonthlyTotals(BaseModel):
    """One point of an income/expense series."""

    month: str
    income: float = 0.0
    expenses: float = 0.0
    net: float = 0.0


class NetWorthPoint(BaseModel):
    month: str
    net_worth: float


class WeekOverWeekTrend(BaseModel):
    """Change between two consecutive weekly summaries."""

    income_change: float
    expense_change: float
    net_change: float
    income_change_percent: float = Field(
        ...,
        description="Fractional change, 0 when the previous week had no income"
    )
    expense_change_percent: float


# =============================================================================
# FINANCIAL PROFILE
# =============================================================================

class QuarterlyBonusOverview(BaseModel):
    """
    Combined view over all active quarterly bonus sources.

    A quarter only counts as confirmed when every bonus source
    confirmed it.
    """

    total_bonus_per_quarter: float
    confirmed_quarters: dict[str, bool]
    confirmed_count: int
    total_confirmed_bonus: float
    total_potential_bonus: float


class FinancialProfile(BaseModel):
    """All monthly key figures derived from the profile records."""

    monthly_income_without_bonus: float = 0.0
    monthly_bonus_income: float = 0.0
    monthly_income: float = 0.0
    quarterly_bonus_overview: Optional[QuarterlyBonusOverview] = None

    monthly_fixed_costs: float = 0.0
    monthly_variable_costs: float = 0.0
    total_debt: float = 0.0
    monthly_debt_payments: float = 0.0
    total_assets: float = 0.0
    net_worth: float = 0.0

    available_income: float = 0.0
    debt_to_income_ratio: float = 0.0
    savings_rate: float = 0.0
    emergency_fund_months: float = 0.0
    health_score: int = Field(default=0, ge=0, le=100)

    @property
    def monthly_expenses(self) -> float:
        return self.monthly_fixed_costs + self.monthly_variable_costs


class DebtProgress(BaseModel):
    debt_id: str
    name: str
    paid_off: float
    remaining: float
    progress: float = Field(
        ...,
        description="Share of the original amount already repaid, 0 when original is 0"
    )


class CreditCardSummary(BaseModel):
    active_count: int = 0
    total_balance: float = 0.0
    total_limit: float = 0.0
    utilization_percent: float = 0.0
    monthly_fees: float = 0.0
    annual_fees: float = 0.0


class FinancialSnapshot(BaseModel):
    """
    Point-in-time copy of the profile records and their key figures.

    Snapshots are never recomputed: they freeze what the dashboard showed
    on the snapshot date.
    """

    id: UUID = Field(default_factory=uuid4)
    created_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc)
    )
    snapshot_date: dt.date
    name: Optional[str] = None
    note: Optional[str] = None

    income_sources: list[IncomeSource] = Field(default_factory=list)
    fixed_costs: list[FixedCost] = Field(default_factory=list)
    variable_costs: list[VariableCostEstimate] = Field(default_factory=list)
    debts: list[Debt] = Field(default_factory=list)
    credit_cards: list[CreditCard] = Field(default_factory=list)
    assets: Assets = Field(default_factory=Assets)
    transactions: list[Transaction] = Field(default_factory=list)

    monthly_income: float
    monthly_income_without_bonus: float
    monthly_bonus_income: float
    quarterly_bonus_overview: Optional[QuarterlyBonusOverview] = None
    monthly_fixed_costs: float
    monthly_variable_costs: float
    total_debt: float
    total_assets: float
    net_worth: float
    health_score: int


# =============================================================================
# ANALYTICS
# =============================================================================

class WeekdaySpending(BaseModel):
    """Expense bucket for one weekday; day 0 is Sunday."""

    day: int = Field(..., ge=0, le=6)
    day_name: str
    total: float = 0.0
    count: int = 0
    average: float = 0.0


class CategoryTrend(BaseModel):
    category: str
    monthly_amounts: list[float] = Field(
        ...,
        description="One amount per window month, oldest first"
    )
    average_monthly: float = Field(
        ...,
        description="Mean over the months with spending"
    )
    trend: float = Field(
        ...,
        description="Change of the last three months against the three before, in percent"
    )


class LifestyleInflationAlert(BaseModel):
    category: str
    previous_average: float
    current_average: float
    increase_percent: float
    message: str


class MissedSavingsOpportunity(BaseModel):
    category: str
    actual_spent: float
    budget_amount: float
    potential_savings: float
    message: str


class BudgetSummary(BaseModel):
    total_budget: float = 0.0
    total_spent: float = 0.0
    variance: float = 0.0


class SavingsRatePoint(BaseModel):
    month: str
    savings_rate: float = Field(..., description="Savings rate in percent")


class AnalyticsReport(BaseModel):
    """Everything the analytics page shows for one window."""

    months: list[str]
    spending_patterns: list[WeekdaySpending]
    peak_spending_day: WeekdaySpending
    category_trends: list[CategoryTrend]
    growing_categories: list[CategoryTrend]
    lifestyle_inflation_alerts: list[LifestyleInflationAlert]
    missed_savings_opportunities: list[MissedSavingsOpportunity]
    total_missed_savings: float
    budget_summary: BudgetSummary
    top_spending_categories: list[CategoryAmount]
    monthly_totals: list[MonthlyTotals]
    average_monthly_expenses: float
    savings_rate_trend: list[SavingsRatePoint]


# =============================================================================
# PROJECTION
# =============================================================================

class ProjectionMonth(BaseModel):
    """One month of a cash-flow projection."""

    index: int = Field(..., ge=0, description="Months after the start month")
    month: str = Field(..., description="ISO month (YYYY-MM)")
    scenario: Scenario = Scenario.BASE
    income: float
    expenses: float
    net: float
    cumulative_cash: float

    def rounded(self) -> "ProjectionMonth":
        """Copy with all amounts rounded to whole currency units."""
        return self.model_copy(update={
            "income": round_half_up(self.income),
            "expenses": round_half_up(self.expenses),
            "net": round_half_up(self.net),
            "cumulative_cash": round_half_up(self.cumulative_cash),
        })

    def to_display_dict(self) -> dict[str, Any]:
        return self.rounded().model_dump(mode="json")


# =============================================================================
# SIMULATION
# =============================================================================

class PortfolioMonth(BaseModel):
    """Portfolio state at the start of a projection month."""

    month: int = Field(..., ge=0)
    year: int = Field(..., ge=0)
    label: str = Field(..., description="ISO month (YYYY-MM)")
    contributions: float
    portfolio_value: float
    returns: float


class SimulationResult(BaseModel):
    """Current vs. simulated budget, with the resulting investment path."""

    current_total_expenses: float
    current_available: float
    current_savings_rate: float
    current_yearly_savings: float

    simulated_total_expenses: float
    simulated_available: float
    simulated_savings_rate: float
    simulated_yearly_savings: float

    available_diff: float
    savings_rate_diff: float
    yearly_savings_diff: float
    fixed_costs_diff: float
    variable_costs_diff: float
    debt_payments_diff: float
    total_expenses_diff: float

    monthly_contribution: float
    investment_projection: list[PortfolioMonth]
    final_portfolio_value: float
    total_contributions: float
    total_returns: float

    fire_target: float
    years_to_fire: Optional[float] = Field(
        default=None,
        description="None when the target is not reached within the search bound"
    )
    fire_achievable: bool = False


# =============================================================================
# GOALS
# =============================================================================

class MilestoneStatus(BaseModel):
    id: str
    name: Optional[str] = None
    target_amount: float
    reached: bool
    is_next: bool = False


class GoalProgress(BaseModel):
    """Evaluation of one goal against today."""

    goal_id: str
    name: str
    effective_current_amount: float
    remaining: float
    progress: float = Field(..., ge=0, le=1)
    progress_percent: float
    expected_progress: float
    on_track: Optional[bool] = Field(
        default=None,
        description="Only evaluated for active goals"
    )
    days_remaining: int
    months_remaining: int
    monthly_required: float
    monthly_run_rate: float
    projected_months_to_completion: Optional[int] = None
    milestones: list[MilestoneStatus] = Field(default_factory=list)
    next_milestone: Optional[MilestoneStatus] = None


class GoalsSummary(BaseModel):
    total_goals: int = 0
    active_count: int = 0
    achieved_count: int = 0
    paused_count: int = 0
    on_track_count: int = 0
    total_target: float = 0.0
    total_current: float = 0.0
    overall_progress: float = 0.0


# =============================================================================
# PORTFOLIO
# =============================================================================

class InvestmentPerformance(BaseModel):
    investment_id: str
    name: str
    type: InvestmentType
    value: float
    cost: float
    gain_loss: float
    gain_loss_percent: float


class TypeBreakdown(BaseModel):
    value: float = 0.0
    count: int = 0
    gain_loss: float = 0.0


class PortfolioMetrics(BaseModel):
    total_value: float = 0.0
    total_cost: float = 0.0
    total_gain_loss: float = 0.0
    total_gain_loss_percent: float = 0.0
    by_type: dict[str, TypeBreakdown] = Field(default_factory=dict)
    investment_count: int = 0
    total_dividends: float = 0.0


# =============================================================================
# PLANNING
# =============================================================================

class PurchaseProjection(BaseModel):
    """Savings outlook of a planned purchase or event budget."""

    id: str
    name: str
    remaining: float
    months_to_goal: Optional[int] = None
    months_until_target: Optional[int] = None
    is_on_track: Optional[bool] = None
    progress_percent: float


class PlanningSummary(BaseModel):
    active_purchases: int = 0
    active_events: int = 0
    total_target: float = 0.0
    total_saved: float = 0.0
    total_remaining: float = 0.0
    monthly_contributions: float = 0.0


class LifeScenarioResult(BaseModel):
    scenario_id: str
    name: str
    current_income: float
    current_expenses: float
    current_net: float
    projected_income: float
    total_expense_change: float
    projected_expenses: float
    projected_net: float
    net_change: float
    one_time_costs: float
    months_to_recover: Optional[int] = Field(
        default=None,
        description="Months of projected net needed to cover the one-time costs"
    )


# =============================================================================
# SUBSCRIPTIONS
# =============================================================================

class SubscriptionSummary(BaseModel):
    active_count: int = 0
    monthly_total: float = 0.0
    yearly_total: float = 0.0
    by_category: dict[str, float] = Field(default_factory=dict)


class CancellationReminder(BaseModel):
    subscription_id: str
    name: str
    next_billing_date: dt.date
    cancellation_deadline: dt.date
    days_until_deadline: int
