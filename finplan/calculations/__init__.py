"""
Calculation Package

Pure, synchronous functions over in-memory records. Nothing in here reads
the clock, the environment or a data source; the reference date is always
an argument.
"""

from finplan.calculations.aggregation import (
    group_by_kind,
    monthly_income_expense_series,
    monthly_summary,
    net_worth_over_time,
    period_summary,
    top_categories,
    transactions_for_month,
    transactions_in_range,
    week_over_week_trend,
)
from finplan.calculations.analytics import compute_analytics
from finplan.calculations.goals import (
    evaluate_goal,
    evaluate_goals,
    goals_summary,
    update_goal_progress,
)
from finplan.calculations.health import HealthScorePolicy, calculate_health_score
from finplan.calculations.normalization import monthly_equivalent, safe_ratio
from finplan.calculations.planning import (
    apply_life_scenario,
    planning_summary,
    project_planned_purchase,
)
from finplan.calculations.portfolio import (
    investment_performance,
    monthly_savings_plan_amount,
    portfolio_metrics,
    total_dividends,
    transactions_for_investment,
)
from finplan.calculations.profile import (
    compute_financial_profile,
    credit_card_summary,
    debt_progress,
    quarterly_bonus_overview,
    yearly_bonus_total,
    yearly_income_total,
)
from finplan.calculations.projection import generate_all_scenarios, generate_projection
from finplan.calculations.simulation import (
    calculate_compound_interest,
    fire_target,
    project_portfolio,
    run_simulation,
    years_to_fire,
)
from finplan.calculations.subscriptions import (
    subscription_summary,
    upcoming_cancellations,
)

__all__ = [
    # Aggregation
    "group_by_kind",
    "monthly_income_expense_series",
    "monthly_summary",
    "net_worth_over_time",
    "period_summary",
    "top_categories",
    "transactions_for_month",
    "transactions_in_range",
    "week_over_week_trend",
    # Profile
    "HealthScorePolicy",
    "calculate_health_score",
    "compute_financial_profile",
    "credit_card_summary",
    "debt_progress",
    "monthly_equivalent",
    "quarterly_bonus_overview",
    "yearly_bonus_total",
    "yearly_income_total",
    "safe_ratio",
    # Analytics
    "compute_analytics",
    # Forecasts
    "calculate_compound_interest",
    "fire_target",
    "generate_all_scenarios",
    "generate_projection",
    "project_portfolio",
    "run_simulation",
    "years_to_fire",
    # Goals & planning
    "apply_life_scenario",
    "evaluate_goal",
    "evaluate_goals",
    "goals_summary",
    "planning_summary",
    "project_planned_purchase",
    "update_goal_progress",
    # Portfolio & subscriptions
    "investment_performance",
    "monthly_savings_plan_amount",
    "portfolio_metrics",
    "total_dividends",
    "transactions_for_investment",
    "subscription_summary",
    "upcoming_cancellations",
]
