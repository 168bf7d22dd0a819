"""
Subscription costs and cancellation reminders.
"""

from datetime import date, timedelta
from typing import Iterable

from finplan.calculations.normalization import monthly_equivalent
from finplan.models.records import Subscription
from finplan.models.results import CancellationReminder, SubscriptionSummary


def subscription_summary(subscriptions: Iterable[Subscription]) -> SubscriptionSummary:
    """Monthly and yearly cost of the active subscriptions, per category too."""
    by_category: dict[str, float] = {}
    monthly_total = 0.0
    active_count = 0

    for subscription in subscriptions:
        if not subscription.active:
            continue
        active_count += 1
        monthly = monthly_equivalent(subscription.amount, subscription.frequency)
        monthly_total += monthly
        by_category[subscription.category] = by_category.get(subscription.category, 0.0) + monthly

    return SubscriptionSummary(
        active_count=active_count,
        monthly_total=monthly_total,
        yearly_total=monthly_total * 12,
        by_category=by_category,
    )


def upcoming_cancellations(
    subscriptions: Iterable[Subscription],
    today: date,
    horizon_days: int = 30,
) -> list[CancellationReminder]:
    """
    Active subscriptions whose cancellation deadline falls within the horizon.

    The deadline is the next billing date minus the cancellation period. A
    deadline of today has already passed; one exactly at the horizon is
    outside it. Soonest deadline first.
    """
    horizon = today + timedelta(days=horizon_days)
    reminders = []
    for subscription in subscriptions:
        if not subscription.active or subscription.next_billing_date is None:
            continue
        deadline = subscription.next_billing_date - timedelta(
            days=subscription.cancellation_period_days
        )
        if today < deadline < horizon:
            reminders.append(CancellationReminder(
                subscription_id=subscription.id,
                name=subscription.name,
                next_billing_date=subscription.next_billing_date,
                cancellation_deadline=deadline,
                days_until_deadline=(deadline - today).days,
            ))

    reminders.sort(key=lambda reminder: reminder.days_until_deadline)
    return reminders
