"""
finplan - Personal Finance Projection Core

Derives summaries, trends and forward projections from a user's
transactions, budgets, debts, investments and subscriptions.

DESIGN PRINCIPLES:
1. Calculations are pure functions over in-memory records
2. "Today" is always passed in, never read from the clock
3. A zero denominator yields 0, never NaN or an exception
4. Data access is injected, never global
5. Every dashboard refresh is auditable
"""

__version__ = "1.0.0"
__author__ = "finplan Team"
