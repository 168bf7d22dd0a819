"""
Planning: planned purchases, event budgets and life scenarios.

DESIGN DECISION: Percentage expense changes scale total expenses.
A life scenario's "+10% Lebensmittel" is applied to the current total
monthly expenses, not to that category's share, because the dashboard
keeps no per-category monthly baseline.
"""

import math
from datetime import date
from typing import Iterable, Optional, Union

from finplan.calculations.normalization import safe_ratio
from finplan.calculations.periods import whole_months_between
from finplan.models.records import (
    ChangeType,
    EventBudget,
    GoalStatus,
    LifeScenario,
    PlannedPurchase,
)
from finplan.models.results import (
    LifeScenarioResult,
    PlanningSummary,
    PurchaseProjection,
)

SavingsTarget = Union[PlannedPurchase, EventBudget]


def _target_date(record: SavingsTarget) -> Optional[date]:
    if isinstance(record, EventBudget):
        return record.event_date
    return record.target_date


def project_planned_purchase(record: SavingsTarget, today: date) -> PurchaseProjection:
    """
    Savings outlook of a planned purchase or event budget.

    `months_to_goal` needs a positive monthly contribution and
    `months_until_target` a target date; `is_on_track` needs both.
    """
    remaining = record.target_amount - record.current_amount

    months_to_goal = None
    if record.monthly_contribution > 0:
        months_to_goal = max(0, math.ceil(remaining / record.monthly_contribution))

    target = _target_date(record)
    months_until_target = whole_months_between(today, target) if target else None

    is_on_track = None
    if months_to_goal is not None and months_until_target is not None:
        is_on_track = months_to_goal <= months_until_target

    return PurchaseProjection(
        id=record.id,
        name=record.name,
        remaining=remaining,
        months_to_goal=months_to_goal,
        months_until_target=months_until_target,
        is_on_track=is_on_track,
        progress_percent=safe_ratio(record.current_amount, record.target_amount) * 100,
    )


def planning_summary(
    purchases: Iterable[PlannedPurchase],
    events: Iterable[EventBudget] = (),
) -> PlanningSummary:
    """Totals over the active purchases and event budgets."""
    active_purchases = [p for p in purchases if p.status == GoalStatus.ACTIVE]
    active_events = [e for e in events if e.status == GoalStatus.ACTIVE]
    records: list[SavingsTarget] = [*active_purchases, *active_events]

    total_target = sum(r.target_amount for r in records)
    total_saved = sum(r.current_amount for r in records)
    return PlanningSummary(
        active_purchases=len(active_purchases),
        active_events=len(active_events),
        total_target=total_target,
        total_saved=total_saved,
        total_remaining=total_target - total_saved,
        monthly_contributions=sum(r.monthly_contribution for r in records),
    )


def apply_life_scenario(
    scenario: LifeScenario,
    current_income: float,
    current_expenses: float,
) -> LifeScenarioResult:
    """Monthly budget after a life change, and how long the one-time costs take to recover."""
    projected_income = current_income + scenario.income_change

    total_change = 0.0
    for change in scenario.expense_changes:
        if change.change_type == ChangeType.ABSOLUTE:
            total_change += change.change_amount
        else:
            total_change += current_expenses * change.change_amount / 100

    projected_expenses = current_expenses + total_change
    current_net = current_income - current_expenses
    projected_net = projected_income - projected_expenses

    months_to_recover = None
    if scenario.one_time_costs == 0:
        months_to_recover = 0
    elif projected_net > 0:
        months_to_recover = math.ceil(scenario.one_time_costs / projected_net)

    return LifeScenarioResult(
        scenario_id=scenario.id,
        name=scenario.name,
        current_income=current_income,
        current_expenses=current_expenses,
        current_net=current_net,
        projected_income=projected_income,
        total_expense_change=total_change,
        projected_expenses=projected_expenses,
        projected_net=projected_net,
        net_change=projected_net - current_net,
        one_time_costs=scenario.one_time_costs,
        months_to_recover=months_to_recover,
    )
