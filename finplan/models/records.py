"""
Input Records for finplan

These models define the schemas of the records supplied by the data-access
layer. They are designed to:
1. Be immutable value records (the core never mutates them)
2. Reject malformed input at construction time
3. Carry only what the calculations need

DESIGN DECISION: Amounts are plain floats.
The dashboard has no decimal-currency guarantee, and every ratio in the core
is guarded against a zero denominator instead.
"""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionKind(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class IncomeFrequency(str, Enum):
    """
    How often an income source pays out.

    QUARTERLY_BONUS sources only count once a quarter has been confirmed
    by the user.
    """
    MONTHLY = "monthly"
    YEARLY = "yearly"
    QUARTERLY_BONUS = "quarterly_bonus"


class PaymentFrequency(str, Enum):
    """Billing cycle of a recurring cost, subscription or savings plan."""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    HALF_YEARLY = "half_yearly"
    YEARLY = "yearly"


class DebtType(str, Enum):
    LOAN = "loan"
    MORTGAGE = "mortgage"
    CREDIT_CARD = "credit_card"
    PRIVATE_LOAN = "private_loan"
    OTHER = "other"


class InvestmentType(str, Enum):
    STOCK = "stock"
    ETF = "etf"
    CRYPTO = "crypto"
    FUND = "fund"
    BOND = "bond"
    OTHER = "other"


class InvestmentTransactionType(str, Enum):
    """Kind of booking against a portfolio position."""
    BUY = "buy"
    SELL = "sell"
    DIVIDEND = "dividend"


class GoalType(str, Enum):
    """
    Kind of financial goal.

    INCOME goals are measured against the live monthly income of the
    financial profile, not against a stored amount.
    """
    SAVINGS = "savings"
    DEBT_PAYOFF = "debt_payoff"
    INVESTMENT = "investment"
    EMERGENCY_FUND = "emergency_fund"
    PURCHASE = "purchase"
    INCOME = "income"


class GoalStatus(str, Enum):
    """Lifecycle status shared by goals and planning records."""
    ACTIVE = "active"
    PAUSED = "paused"
    ACHIEVED = "achieved"


class ChangeType(str, Enum):
    """How a life-scenario expense change is expressed."""
    ABSOLUTE = "absolute"
    PERCENT = "percent"


class Scenario(str, Enum):
    """Cash-flow projection scenario."""
    BASE = "base"
    BEST = "best"
    WORST = "worst"


# Reference lists only. Categories stay open strings.
EXPENSE_CATEGORIES = (
    "Miete",
    "Lebensmittel",
    "Transport",
    "Unterhaltung",
    "Versicherung",
    "Gesundheit",
    "Kleidung",
    "Bildung",
    "Haushalt",
    "Sonstiges",
)

INCOME_CATEGORIES = (
    "Gehalt",
    "Freelance",
    "Investments",
    "Geschenke",
    "Sonstiges",
)

ACCOUNTS = (
    "Girokonto",
    "Sparkonto",
    "Kreditkarte",
    "Bargeld",
)


class Record(BaseModel):
    """Base for all immutable input records."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


# =============================================================================
# TRANSACTIONS & BUDGETS
# =============================================================================

class Transaction(Record):
    """A single booked income or expense."""

    id: str
    date: dt.date = Field(
        ...,
        description="Booking date"
    )
    amount: float = Field(
        ...,
        ge=0,
        description="Absolute amount; direction is given by kind"
    )
    kind: TransactionKind
    category: str = Field(
        ...,
        min_length=1,
        max_length=100
    )
    account: str = Field(default="")
    recurring: bool = False
    note: str = Field(default="", max_length=1000)

    @property
    def month(self) -> str:
        """ISO month (YYYY-MM) the transaction falls into."""
        return self.date.strftime("%Y-%m")


class TransactionFilter(Record):
    """Filter accepted by the data-access layer when listing transactions."""

    kind: Optional[TransactionKind] = None
    category: Optional[str] = None
    account: Optional[str] = None
    search: Optional[str] = Field(
        default=None,
        description="Case-insensitive text matched against note and category"
    )
    start: Optional[dt.date] = None
    end: Optional[dt.date] = None

    @model_validator(mode='after')
    def validate_range(self) -> 'TransactionFilter':
        if self.start and self.end and self.end < self.start:
            raise ValueError("Filter end cannot be before start")
        return self

    def matches(self, transaction: Transaction) -> bool:
        if self.kind is not None and transaction.kind != self.kind:
            return False
        if self.category is not None and transaction.category != self.category:
            return False
        if self.account is not None and transaction.account != self.account:
            return False
        if self.start is not None and transaction.date < self.start:
            return False
        if self.end is not None and transaction.date > self.end:
            return False
        if self.search:
            needle = self.search.lower()
            haystack = f"{transaction.note} {transaction.category}".lower()
            if needle not in haystack:
                return False
        return True


class Budget(Record):
    """Spending limit for one category in one month."""

    id: str
    month: str = Field(
        ...,
        pattern=MONTH_PATTERN,
        description="ISO month (YYYY-MM)"
    )
    category: str = Field(..., min_length=1)
    budget_amount: float = Field(..., ge=0)


# =============================================================================
# FINANCIAL PROFILE
# =============================================================================

class QuarterlyBonusStatus(Record):
    """Which quarters of a bonus the user has confirmed as received."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    Q1: bool = False
    Q2: bool = False
    Q3: bool = False
    Q4: bool = False

    def as_dict(self) -> dict[str, bool]:
        return {"Q1": self.Q1, "Q2": self.Q2, "Q3": self.Q3, "Q4": self.Q4}

    @property
    def confirmed_count(self) -> int:
        return sum(1 for confirmed in self.as_dict().values() if confirmed)


class IncomeSource(Record):
    """A salary, side income or quarterly bonus."""

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    amount: float = Field(..., ge=0)
    frequency: IncomeFrequency
    active: bool = True
    confirmed_quarters: Optional[QuarterlyBonusStatus] = Field(
        default=None,
        description="Confirmed quarters; only meaningful for quarterly bonuses"
    )
    note: Optional[str] = None

    @property
    def is_bonus(self) -> bool:
        return self.frequency == IncomeFrequency.QUARTERLY_BONUS

    @property
    def confirmed_count(self) -> int:
        """Confirmed quarters, 0 when nothing was ever confirmed."""
        if self.confirmed_quarters is None:
            return 0
        return self.confirmed_quarters.confirmed_count


class FixedCost(Record):
    """A recurring obligation such as rent or insurance."""

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(default="Sonstiges")
    amount: float = Field(..., ge=0)
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    active: bool = True
    note: Optional[str] = None


class VariableCostEstimate(Record):
    """Estimated monthly spend for a category."""

    id: str
    category: str = Field(..., min_length=1)
    estimated_monthly: float = Field(..., ge=0)
    note: Optional[str] = None


class Debt(Record):
    """An outstanding loan or other liability."""

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    type: DebtType = DebtType.LOAN
    original_amount: float = Field(..., ge=0)
    current_balance: float = Field(..., ge=0)
    interest_rate: float = Field(
        default=0.0,
        ge=0,
        description="Annual interest rate in percent"
    )
    monthly_payment: float = Field(..., ge=0)
    is_variable_payment: bool = False
    min_payment: Optional[float] = Field(default=None, ge=0)
    max_payment: Optional[float] = Field(default=None, ge=0)
    start_date: Optional[dt.date] = None
    note: Optional[str] = None

    @model_validator(mode='after')
    def validate_payment_range(self) -> 'Debt':
        if self.min_payment is not None and self.max_payment is not None:
            if self.max_payment < self.min_payment:
                raise ValueError("Maximum payment cannot be below minimum payment")
        return self


class YearlyIncomeRecord(Record):
    """
    What was actually earned in one calendar year.

    Kept as history next to the income sources; one record per year.
    """

    id: str
    year: int = Field(..., ge=1900, le=2200)
    base_salary: float = Field(default=0.0, ge=0)
    bonus_q1: float = Field(default=0.0, ge=0)
    bonus_q2: float = Field(default=0.0, ge=0)
    bonus_q3: float = Field(default=0.0, ge=0)
    bonus_q4: float = Field(default=0.0, ge=0)
    gifts: float = Field(default=0.0, ge=0)
    other_income: float = Field(default=0.0, ge=0)
    note: Optional[str] = None

    @property
    def bonus_total(self) -> float:
        return self.bonus_q1 + self.bonus_q2 + self.bonus_q3 + self.bonus_q4

    @property
    def total(self) -> float:
        return self.base_salary + self.bonus_total + self.gifts + self.other_income


class CreditCard(Record):
    """A credit card with its latest recorded balance."""

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    bank: Optional[str] = None
    credit_limit: float = Field(..., ge=0)
    current_balance: float = Field(default=0.0, ge=0)
    interest_rate: float = Field(default=0.0, ge=0)
    monthly_fee: float = Field(default=0.0, ge=0)
    annual_fee: float = Field(default=0.0, ge=0)
    active: bool = True


class Assets(Record):
    """Singleton snapshot of what the user owns."""

    savings: float = Field(default=0.0, ge=0)
    investments: float = Field(default=0.0, ge=0)
    other: float = Field(default=0.0, ge=0)


# =============================================================================
# INVESTMENTS
# =============================================================================

class Investment(Record):
    """A position held in the portfolio."""

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    type: InvestmentType = InvestmentType.ETF
    symbol: Optional[str] = None
    quantity: float = Field(..., ge=0)
    purchase_price: float = Field(..., ge=0)
    current_price: float = Field(..., ge=0)
    active: bool = True

    @property
    def value(self) -> float:
        return self.quantity * self.current_price

    @property
    def cost(self) -> float:
        return self.quantity * self.purchase_price

    @property
    def gain_loss(self) -> float:
        return self.value - self.cost


class InvestmentTransaction(Record):
    """A buy, sell or dividend booked against an investment."""

    id: str
    investment_id: str
    type: InvestmentTransactionType
    quantity: Optional[float] = Field(default=None, ge=0)
    price: Optional[float] = Field(default=None, ge=0)
    total_amount: Optional[float] = Field(
        default=None,
        ge=0,
        description="Booked amount; for dividends the payout"
    )
    fees: float = Field(default=0.0, ge=0)
    date: dt.date
    note: Optional[str] = None


class SavingsPlan(Record):
    """Recurring contribution into an investment."""

    id: str
    investment_id: Optional[str] = None
    name: str = Field(default="")
    amount: float = Field(..., ge=0)
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    active: bool = True


# =============================================================================
# GOALS & PLANNING
# =============================================================================

class Milestone(Record):
    """Intermediate target on the way to a goal."""

    id: str
    target_amount: float = Field(..., ge=0)
    name: Optional[str] = None
    reached_at: Optional[dt.date] = None


class Goal(Record):
    """A yearly financial goal with a deadline."""

    id: str
    year: int = Field(..., ge=1900, le=2200)
    name: str = Field(..., min_length=1, max_length=200)
    type: GoalType
    start_amount: float = Field(default=0.0, ge=0)
    current_amount: float = Field(default=0.0, ge=0)
    target_amount: float = Field(..., ge=0)
    deadline: dt.date
    created_at: dt.date
    status: GoalStatus = GoalStatus.ACTIVE
    priority: int = Field(default=2, ge=1, le=3)
    linked_debt_id: Optional[str] = None
    milestones: list[Milestone] = Field(default_factory=list)
    note: Optional[str] = None

    @property
    def is_income_goal(self) -> bool:
        return self.type == GoalType.INCOME


class PlannedPurchase(Record):
    """Something the user is saving up for."""

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    target_amount: float = Field(..., ge=0)
    current_amount: float = Field(default=0.0, ge=0)
    monthly_contribution: float = Field(default=0.0, ge=0)
    target_date: Optional[dt.date] = None
    priority: int = Field(default=2, ge=1, le=3)
    status: GoalStatus = GoalStatus.ACTIVE


class EventBudget(Record):
    """Savings pot for a dated event such as a wedding or holiday."""

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    target_amount: float = Field(..., ge=0)
    current_amount: float = Field(default=0.0, ge=0)
    monthly_contribution: float = Field(default=0.0, ge=0)
    event_date: Optional[dt.date] = None
    category: Optional[str] = None
    status: GoalStatus = GoalStatus.ACTIVE


class ExpenseChange(Record):
    """Change of monthly spending in one category."""

    category: str = Field(..., min_length=1)
    change_amount: float = Field(
        ...,
        description="Currency amount or percentage, depending on change_type"
    )
    change_type: ChangeType = ChangeType.ABSOLUTE


class LifeScenario(Record):
    """A what-if life change: new income level, shifted expenses, one-time costs."""

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    income_change: float = Field(
        default=0.0,
        description="Monthly income delta (negative for a reduction)"
    )
    expense_changes: list[ExpenseChange] = Field(default_factory=list)
    one_time_costs: float = Field(default=0.0, ge=0)
    start_date: Optional[dt.date] = None
    duration_months: Optional[int] = Field(default=None, ge=1)
    note: Optional[str] = None


# =============================================================================
# SUBSCRIPTIONS
# =============================================================================

class Subscription(Record):
    """A recurring subscription with a cancellation period."""

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    provider: Optional[str] = None
    amount: float = Field(..., ge=0)
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    category: str = Field(default="Sonstiges")
    cancellation_period_days: int = Field(default=30, ge=0)
    next_billing_date: Optional[dt.date] = None
    auto_renew: bool = True
    active: bool = True


# =============================================================================
# PROJECTION SETTINGS
# =============================================================================

class ScenarioMultipliers(Record):
    """Income multipliers for the best and worst projection scenarios."""

    best: float = Field(default=1.1, ge=0)
    worst: float = Field(default=0.9, ge=0)


class ProjectionSettings(Record):
    """User-maintained inputs of the 12-month cash-flow projection."""

    expected_income: float = Field(..., ge=0)
    fixed_costs: float = Field(default=0.0, ge=0)
    variable_costs: float = Field(default=0.0, ge=0)
    growth_rate: float = Field(
        default=0.0,
        description="Annual income growth in percent"
    )
    starting_cash: float = 0.0
    starting_debt: float = Field(default=0.0, ge=0)
    scenario_multipliers: ScenarioMultipliers = Field(
        default_factory=ScenarioMultipliers
    )

    @field_validator('growth_rate')
    @classmethod
    def validate_growth_rate(cls, v: float) -> float:
        """A shrink of 100% or more would make the growth factor meaningless."""
        if v <= -100:
            raise ValueError("Growth rate must be greater than -100%")
        return v


# =============================================================================
# SIMULATION INPUTS
# =============================================================================

class SimulationParams(Record):
    """
    What-if comparison between the current and a simulated budget.

    All amounts are monthly. The expected return is an annual decimal
    (0.07 for 7%); the savings rate is the fraction of the simulated
    available income that is invested each month.
    """

    simulated_income: float = Field(..., ge=0)
    simulated_fixed_costs: float = Field(default=0.0, ge=0)
    simulated_variable_costs: float = Field(default=0.0, ge=0)
    simulated_debt_payments: float = Field(default=0.0, ge=0)

    current_income: float = Field(..., ge=0)
    current_fixed_costs: float = Field(default=0.0, ge=0)
    current_variable_costs: float = Field(default=0.0, ge=0)
    current_debt_payments: float = Field(default=0.0, ge=0)

    expected_return: float = Field(
        default=0.07,
        description="Expected annual return as a decimal"
    )
    savings_rate: float = Field(
        default=0.5,
        ge=0,
        le=1,
        description="Share of available income invested monthly"
    )
    time_horizon_years: int = Field(default=10, ge=0, le=100)
    current_portfolio: float = Field(default=0.0, ge=0)
