"""
Aggregation Primitives

DESIGN DECISION: Every higher module builds on these functions.
They only sum what they are given: no estimation and no carry-over between
calls. Date windows are inclusive on both ends.
"""

from datetime import date
from typing import Iterable, Optional

from finplan.calculations.normalization import safe_ratio
from finplan.calculations.periods import month_bounds, trailing_months
from finplan.models.records import Transaction, TransactionKind
from finplan.models.results import (
    CategoryAmount,
    MonthlySummary,
    MonthlyTotals,
    NetWorthPoint,
    PeriodSummary,
    WeekOverWeekTrend,
)


def group_by_kind(
    transactions: Iterable[Transaction],
    kind: Optional[TransactionKind] = None,
) -> dict[str, float]:
    """
    Sum amounts per category, optionally for one kind only.

    The dict keeps first-occurrence order of the categories; it is not a
    ranking. Use `top_categories` when order matters.
    """
    groups: dict[str, float] = {}
    for transaction in transactions:
        if kind is not None and transaction.kind != kind:
            continue
        groups[transaction.category] = groups.get(transaction.category, 0.0) + transaction.amount
    return groups


def top_categories(
    transactions: Iterable[Transaction],
    kind: TransactionKind,
    limit: int = 3,
) -> list[CategoryAmount]:
    """Categories ranked by total, largest first; ties keep first occurrence."""
    groups = group_by_kind(transactions, kind)
    ranked = sorted(groups.items(), key=lambda item: item[1], reverse=True)
    return [
        CategoryAmount(category=category, amount=amount)
        for category, amount in ranked[:limit]
    ]


def transactions_in_range(
    transactions: Iterable[Transaction],
    start: date,
    end: date,
) -> list[Transaction]:
    return [t for t in transactions if start <= t.date <= end]


def transactions_for_month(
    transactions: Iterable[Transaction],
    month: str,
) -> list[Transaction]:
    start, end = month_bounds(month)
    return transactions_in_range(transactions, start, end)


def _income_and_expenses(transactions: Iterable[Transaction]) -> tuple[float, float]:
    income = 0.0
    expenses = 0.0
    for transaction in transactions:
        if transaction.kind == TransactionKind.INCOME:
            income += transaction.amount
        else:
            expenses += transaction.amount
    return income, expenses


def monthly_summary(transactions: Iterable[Transaction], month: str) -> MonthlySummary:
    """
    Income, expenses, net and savings rate of one calendar month.

    The savings rate is 0 for a month without income.
    """
    income, expenses = _income_and_expenses(transactions_for_month(transactions, month))
    net = income - expenses
    return MonthlySummary(
        month=month,
        income=income,
        expenses=expenses,
        net=net,
        savings_rate=safe_ratio(net, income),
    )


def period_summary(
    transactions: Iterable[Transaction],
    start: date,
    end: date,
) -> PeriodSummary:
    """Summary of an arbitrary inclusive date range, e.g. one week."""
    income, expenses = _income_and_expenses(transactions_in_range(transactions, start, end))
    return PeriodSummary(
        start=start,
        end=end,
        income=income,
        expenses=expenses,
        net=income - expenses,
    )


def monthly_income_expense_series(
    transactions: Iterable[Transaction],
    reference: date,
    months_back: int = 6,
) -> list[MonthlyTotals]:
    """Income and expenses per month for the trailing window, oldest first."""
    transactions = list(transactions)
    series = []
    for month in trailing_months(reference, months_back):
        summary = monthly_summary(transactions, month)
        series.append(MonthlyTotals(
            month=month,
            income=summary.income,
            expenses=summary.expenses,
            net=summary.net,
        ))
    return series


def net_worth_over_time(
    transactions: Iterable[Transaction],
    reference: date,
    months_back: int = 6,
) -> list[NetWorthPoint]:
    """
    Running balance of all transactions up to the end of each window month.

    Income adds, expenses subtract. Transactions before the window still
    count, so the first point is not zero-based.
    """
    transactions = list(transactions)
    points = []
    for month in trailing_months(reference, months_back):
        _, month_end = month_bounds(month)
        income, expenses = _income_and_expenses(
            t for t in transactions if t.date <= month_end
        )
        points.append(NetWorthPoint(month=month, net_worth=income - expenses))
    return points


def week_over_week_trend(
    latest: PeriodSummary,
    previous: PeriodSummary,
) -> WeekOverWeekTrend:
    return WeekOverWeekTrend(
        income_change=latest.income - previous.income,
        expense_change=latest.expenses - previous.expenses,
        net_change=latest.net - previous.net,
        income_change_percent=(
            (latest.income - previous.income) / previous.income
            if previous.income > 0 else 0.0
        ),
        expense_change_percent=(
            (latest.expenses - previous.expenses) / previous.expenses
            if previous.expenses > 0 else 0.0
        ),
    )
