"""
Analytics Engine

Spending patterns, category trends, lifestyle-inflation alerts and budget
overruns for a trailing window of calendar months.

DESIGN DECISION: Only the monthly series are bound to the window.
Weekday patterns and category totals are taken over every transaction the
caller passes in, so the caller decides the history they cover by the
transactions it loads.

A category trend compares the average of the last three window months
with the three months before. Both averages are divided by 3 even when the
window is shorter; missing months count as 0 and a prior average of 0
gives a trend of 0.
"""

from datetime import date
from typing import Iterable, Optional

from finplan.calculations.aggregation import group_by_kind, top_categories
from finplan.calculations.normalization import percent_change, safe_ratio
from finplan.calculations.periods import (
    WEEKDAY_NAMES,
    month_key,
    trailing_months,
    weekday_index,
)
from finplan.config.settings import AnalyticsSettings, get_settings
from finplan.models.records import Budget, Transaction, TransactionKind
from finplan.models.results import (
    AnalyticsReport,
    BudgetSummary,
    CategoryTrend,
    LifestyleInflationAlert,
    MissedSavingsOpportunity,
    MonthlyTotals,
    SavingsRatePoint,
    WeekdaySpending,
)

TREND_SPAN = 3


def _expenses(transactions: Iterable[Transaction]) -> list[Transaction]:
    return [t for t in transactions if t.kind == TransactionKind.EXPENSE]


# =============================================================================
# SPENDING PATTERNS
# =============================================================================

def spending_patterns_by_weekday(
    transactions: Iterable[Transaction],
) -> list[WeekdaySpending]:
    """Seven expense buckets, Sunday first."""
    totals = [0.0] * 7
    counts = [0] * 7
    for transaction in _expenses(transactions):
        day = weekday_index(transaction.date)
        totals[day] += transaction.amount
        counts[day] += 1

    return [
        WeekdaySpending(
            day=day,
            day_name=WEEKDAY_NAMES[day],
            total=totals[day],
            count=counts[day],
            average=safe_ratio(totals[day], counts[day]),
        )
        for day in range(7)
    ]


def peak_spending_day(patterns: list[WeekdaySpending]) -> WeekdaySpending:
    """Bucket with the highest total; the earliest day wins a tie."""
    peak = patterns[0]
    for pattern in patterns:
        if pattern.total > peak.total:
            peak = pattern
    return peak


# =============================================================================
# TRENDS
# =============================================================================

def _trend_averages(amounts: list[float]) -> tuple[float, float]:
    """(previous, recent) three-month averages of a monthly series."""
    recent = amounts[-TREND_SPAN:]
    previous = amounts[-2 * TREND_SPAN:-TREND_SPAN]
    return sum(previous) / TREND_SPAN, sum(recent) / TREND_SPAN


def category_trends(
    transactions: Iterable[Transaction],
    months: list[str],
) -> list[CategoryTrend]:
    """
    Per-category monthly series over the window, biggest spenders first.

    `average_monthly` only counts months with spending in the category.
    """
    by_category: dict[str, dict[str, float]] = {}
    for transaction in _expenses(transactions):
        series = by_category.setdefault(transaction.category, {})
        series[transaction.month] = series.get(transaction.month, 0.0) + transaction.amount

    trends = []
    for category, by_month in by_category.items():
        amounts = [by_month.get(month, 0.0) for month in months]
        spent = [amount for amount in amounts if amount > 0]
        previous_avg, recent_avg = _trend_averages(amounts)
        trends.append(CategoryTrend(
            category=category,
            monthly_amounts=amounts,
            average_monthly=sum(spent) / len(spent) if spent else 0.0,
            trend=percent_change(recent_avg, previous_avg),
        ))

    trends.sort(key=lambda trend: trend.average_monthly, reverse=True)
    return trends


def growing_categories(
    trends: list[CategoryTrend],
    threshold_pct: float = 10.0,
) -> list[CategoryTrend]:
    growing = [trend for trend in trends if trend.trend > threshold_pct]
    growing.sort(key=lambda trend: trend.trend, reverse=True)
    return growing


def lifestyle_inflation_alerts(
    trends: list[CategoryTrend],
    threshold_pct: float = 20.0,
    min_monthly: float = 50.0,
) -> list[LifestyleInflationAlert]:
    """Strongly growing categories that are large enough to matter."""
    alerts = []
    for trend in trends:
        if trend.trend > threshold_pct and trend.average_monthly > min_monthly:
            previous_avg, recent_avg = _trend_averages(trend.monthly_amounts)
            alerts.append(LifestyleInflationAlert(
                category=trend.category,
                previous_average=previous_avg,
                current_average=recent_avg,
                increase_percent=trend.trend,
                message=f"Spending on {trend.category} is up {trend.trend:.0f}%",
            ))
    return alerts


# =============================================================================
# BUDGETS
# =============================================================================

def _current_month_spending(
    transactions: Iterable[Transaction],
    month: str,
) -> dict[str, float]:
    return group_by_kind(
        (t for t in transactions if t.month == month),
        TransactionKind.EXPENSE,
    )


def missed_savings_opportunities(
    transactions: Iterable[Transaction],
    budgets: Iterable[Budget],
    today: date,
) -> list[MissedSavingsOpportunity]:
    """Budgets of the current month that were overspent, largest overrun first."""
    month = month_key(today)
    spent = _current_month_spending(transactions, month)

    opportunities = []
    for budget in budgets:
        if budget.month != month:
            continue
        actual = spent.get(budget.category, 0.0)
        if actual > budget.budget_amount:
            over = actual - budget.budget_amount
            opportunities.append(MissedSavingsOpportunity(
                category=budget.category,
                actual_spent=actual,
                budget_amount=budget.budget_amount,
                potential_savings=over,
                message=f"{over:.2f} over budget for {budget.category}",
            ))

    opportunities.sort(key=lambda item: item.potential_savings, reverse=True)
    return opportunities


def budget_summary(
    transactions: Iterable[Transaction],
    budgets: Iterable[Budget],
    today: date,
) -> BudgetSummary:
    """Budgeted vs. spent over the budgeted categories of the current month."""
    month = month_key(today)
    spent = _current_month_spending(transactions, month)
    current = [budget for budget in budgets if budget.month == month]

    total_budget = sum(budget.budget_amount for budget in current)
    total_spent = sum(spent.get(budget.category, 0.0) for budget in current)
    return BudgetSummary(
        total_budget=total_budget,
        total_spent=total_spent,
        variance=total_spent - total_budget,
    )


# =============================================================================
# MONTHLY SERIES
# =============================================================================

def monthly_totals(
    transactions: Iterable[Transaction],
    months: list[str],
) -> list[MonthlyTotals]:
    income = {month: 0.0 for month in months}
    expenses = {month: 0.0 for month in months}
    for transaction in transactions:
        if transaction.month not in income:
            continue
        if transaction.kind == TransactionKind.INCOME:
            income[transaction.month] += transaction.amount
        else:
            expenses[transaction.month] += transaction.amount

    return [
        MonthlyTotals(
            month=month,
            income=income[month],
            expenses=expenses[month],
            net=income[month] - expenses[month],
        )
        for month in months
    ]


def average_monthly_expenses(totals: list[MonthlyTotals]) -> float:
    """Mean over the months that had any expenses."""
    with_expenses = [t.expenses for t in totals if t.expenses > 0]
    if not with_expenses:
        return 0.0
    return sum(with_expenses) / len(with_expenses)


def savings_rate_trend(totals: list[MonthlyTotals]) -> list[SavingsRatePoint]:
    return [
        SavingsRatePoint(
            month=t.month,
            savings_rate=safe_ratio(t.income - t.expenses, t.income) * 100,
        )
        for t in totals
    ]


# =============================================================================
# REPORT
# =============================================================================

def compute_analytics(
    transactions: Iterable[Transaction],
    today: date,
    budgets: Optional[Iterable[Budget]] = None,
    months_back: Optional[int] = None,
    settings: Optional[AnalyticsSettings] = None,
) -> AnalyticsReport:
    """
    Build the full analytics report for the window ending in today's month.

    Args:
        transactions: Every transaction to analyse
        today: Reference date; selects the window and the current month
        budgets: Budgets of any month; only the current month is used
        months_back: Window length; defaults to the configured value
        settings: Alert thresholds; defaults to the configured values
    """
    settings = settings or get_settings().analytics
    transactions = list(transactions)
    budgets = list(budgets or [])
    months = trailing_months(today, months_back or settings.months_back)

    patterns = spending_patterns_by_weekday(transactions)
    trends = category_trends(transactions, months)
    missed = missed_savings_opportunities(transactions, budgets, today)
    totals = monthly_totals(transactions, months)

    return AnalyticsReport(
        months=months,
        spending_patterns=patterns,
        peak_spending_day=peak_spending_day(patterns),
        category_trends=trends,
        growing_categories=growing_categories(trends, settings.growth_threshold_pct),
        lifestyle_inflation_alerts=lifestyle_inflation_alerts(
            trends,
            settings.inflation_threshold_pct,
            settings.inflation_min_monthly,
        ),
        missed_savings_opportunities=missed,
        total_missed_savings=sum(item.potential_savings for item in missed),
        budget_summary=budget_summary(transactions, budgets, today),
        top_spending_categories=top_categories(
            transactions,
            TransactionKind.EXPENSE,
            limit=settings.top_categories_limit,
        ),
        monthly_totals=totals,
        average_monthly_expenses=average_monthly_expenses(totals),
        savings_rate_trend=savings_rate_trend(totals),
    )
