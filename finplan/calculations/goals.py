"""
Goal Progress Projector

Evaluates yearly goals against a reference date: progress, on-track status,
milestones and a linear run-rate estimate of completion.

DESIGN DECISION: Income goals take the live income as an argument.
For an income goal the "current" amount is the monthly income of the
financial profile, passed in as `live_monthly_income`. The stored
`current_amount` is only used when no live value is given.
"""

import math
from datetime import date
from typing import Iterable, Optional

from finplan.calculations.normalization import safe_ratio
from finplan.calculations.periods import whole_months_between
from finplan.models.records import Goal, GoalStatus
from finplan.models.results import GoalProgress, GoalsSummary, MilestoneStatus

DEFAULT_ON_TRACK_TOLERANCE = 0.9


def effective_current_amount(
    goal: Goal,
    live_monthly_income: Optional[float] = None,
) -> float:
    if goal.is_income_goal and live_monthly_income is not None:
        return live_monthly_income
    return goal.current_amount


def _raw_progress(goal: Goal, current: float) -> float:
    span = goal.target_amount - goal.start_amount
    if span <= 0:
        return 0.0
    return (current - goal.start_amount) / span


def expected_progress(goal: Goal, today: date) -> float:
    """Share of the goal's time span that has passed; 0 for an empty span."""
    total_days = (goal.deadline - goal.created_at).days
    if total_days <= 0:
        return 0.0
    return (today - goal.created_at).days / total_days


def _milestone_statuses(goal: Goal, current: float) -> list[MilestoneStatus]:
    statuses = []
    previous_reached = True
    next_found = False
    for milestone in sorted(goal.milestones, key=lambda m: m.target_amount):
        reached = current >= milestone.target_amount
        is_next = not reached and previous_reached and not next_found
        if is_next:
            next_found = True
        statuses.append(MilestoneStatus(
            id=milestone.id,
            name=milestone.name,
            target_amount=milestone.target_amount,
            reached=reached,
            is_next=is_next,
        ))
        previous_reached = reached
    return statuses


def evaluate_goal(
    goal: Goal,
    today: date,
    live_monthly_income: Optional[float] = None,
    tolerance: float = DEFAULT_ON_TRACK_TOLERANCE,
) -> GoalProgress:
    """
    Progress of one goal as of `today`.

    `progress` is clamped to 0..1 and the on-track check compares that
    clamped value with the expected share of time elapsed. Paused and
    achieved goals get `on_track=None`.
    """
    current = effective_current_amount(goal, live_monthly_income)
    remaining = goal.target_amount - current
    raw = _raw_progress(goal, current)
    progress = min(max(raw, 0.0), 1.0)
    expected = expected_progress(goal, today)

    on_track = None
    if goal.status == GoalStatus.ACTIVE:
        on_track = progress >= expected * tolerance

    months_remaining = max(0, whole_months_between(today, goal.deadline))
    elapsed_months = max(0, whole_months_between(goal.created_at, today))
    run_rate = safe_ratio(current - goal.start_amount, elapsed_months)

    if remaining <= 0:
        projected = 0
    elif run_rate > 0:
        projected = math.ceil(remaining / run_rate)
    else:
        projected = None

    milestones = _milestone_statuses(goal, current)
    next_milestone = next((m for m in milestones if m.is_next), None)

    return GoalProgress(
        goal_id=goal.id,
        name=goal.name,
        effective_current_amount=current,
        remaining=remaining,
        progress=progress,
        progress_percent=progress * 100,
        expected_progress=expected,
        on_track=on_track,
        days_remaining=max(0, (goal.deadline - today).days),
        months_remaining=months_remaining,
        monthly_required=safe_ratio(max(0.0, remaining), months_remaining),
        monthly_run_rate=run_rate,
        projected_months_to_completion=projected,
        milestones=milestones,
        next_milestone=next_milestone,
    )


def sort_goals(goals: Iterable[Goal]) -> list[Goal]:
    """Highest priority (1) first, then earliest deadline."""
    return sorted(goals, key=lambda g: (g.priority, g.deadline))


def evaluate_goals(
    goals: Iterable[Goal],
    today: date,
    live_monthly_income: Optional[float] = None,
    tolerance: float = DEFAULT_ON_TRACK_TOLERANCE,
) -> list[GoalProgress]:
    return [
        evaluate_goal(goal, today, live_monthly_income, tolerance)
        for goal in sort_goals(goals)
    ]


def goals_summary(
    goals: Iterable[Goal],
    today: date,
    live_monthly_income: Optional[float] = None,
    tolerance: float = DEFAULT_ON_TRACK_TOLERANCE,
) -> GoalsSummary:
    """Counts per status plus totals and on-track count of the active goals."""
    goals = list(goals)
    active = [g for g in goals if g.status == GoalStatus.ACTIVE]

    total_target = sum(g.target_amount for g in active)
    total_current = sum(effective_current_amount(g, live_monthly_income) for g in active)
    on_track = sum(
        1 for g in active
        if evaluate_goal(g, today, live_monthly_income, tolerance).on_track
    )

    return GoalsSummary(
        total_goals=len(goals),
        active_count=len(active),
        achieved_count=sum(1 for g in goals if g.status == GoalStatus.ACHIEVED),
        paused_count=sum(1 for g in goals if g.status == GoalStatus.PAUSED),
        on_track_count=on_track,
        total_target=total_target,
        total_current=total_current,
        overall_progress=safe_ratio(total_current, total_target),
    )


def update_goal_progress(goal: Goal, amount: float) -> Goal:
    """Copy of the goal with a new current amount; achieved once the target is met."""
    status = GoalStatus.ACHIEVED if amount >= goal.target_amount else goal.status
    return goal.model_copy(update={"current_amount": amount, "status": status})
