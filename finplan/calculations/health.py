"""
Financial health score.

DESIGN DECISION: The score is a pluggable policy.
`compute_financial_profile` accepts any callable with the
`HealthScorePolicy` signature; `calculate_health_score` is the dashboard's
default weighting.

Default weighting (starting from 50, clamped to 0..100):

    savings rate   >= 20%: +25   >= 10%: +15   > 0: +5    else: -10
    debt/income    == 0:   +15   <= 20%: +10   <= 35%: +5 else: -10
    emergency fund >= 6 months: +10   >= 3 months: +5     else: -5
"""

from typing import Callable

HealthScorePolicy = Callable[[float, float, float], int]


def calculate_health_score(
    savings_rate: float,
    debt_to_income_ratio: float,
    emergency_fund_months: float,
) -> int:
    score = 50

    if savings_rate >= 0.2:
        score += 25
    elif savings_rate >= 0.1:
        score += 15
    elif savings_rate > 0:
        score += 5
    else:
        score -= 10

    if debt_to_income_ratio == 0:
        score += 15
    elif debt_to_income_ratio <= 0.2:
        score += 10
    elif debt_to_income_ratio <= 0.35:
        score += 5
    else:
        score -= 10

    if emergency_fund_months >= 6:
        score += 10
    elif emergency_fund_months >= 3:
        score += 5
    else:
        score -= 5

    return min(max(score, 0), 100)
