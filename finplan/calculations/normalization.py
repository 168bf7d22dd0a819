"""
Frequency normalization and ratio guards.

DESIGN DECISION: One place converts amounts to monthly equivalents.
Fixed costs, subscriptions, savings plans and income sources all go
through `monthly_equivalent`, so quarterly is always /3 and yearly
always /12.
"""

from typing import Union

from finplan.models.records import IncomeFrequency, PaymentFrequency

MONTHS_PER_PERIOD: dict[str, int] = {
    PaymentFrequency.MONTHLY.value: 1,
    PaymentFrequency.QUARTERLY.value: 3,
    PaymentFrequency.HALF_YEARLY.value: 6,
    PaymentFrequency.YEARLY.value: 12,
}


def monthly_equivalent(
    amount: float,
    frequency: Union[PaymentFrequency, IncomeFrequency],
) -> float:
    """
    Convert an amount paid once per `frequency` into a monthly amount.

    Raises:
        ValueError: For quarterly bonuses, which are amortized by
            confirmed quarters instead.
    """
    months = MONTHS_PER_PERIOD.get(frequency.value)
    if months is None:
        raise ValueError(f"No fixed period for frequency: {frequency.value}")
    return amount / months


def safe_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0 when the denominator is 0."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def percent_change(current: float, previous: float) -> float:
    """Relative change in percent; 0 unless the previous value is positive."""
    if previous <= 0:
        return 0.0
    return (current - previous) / previous * 100
