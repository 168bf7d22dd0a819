"""
Data Models Package

This package contains all Pydantic models used by finplan.
Records come in from the data source; results go out to the consumers.
"""

from finplan.models.records import (
    ACCOUNTS,
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    Assets,
    Budget,
    ChangeType,
    CreditCard,
    Debt,
    DebtType,
    EventBudget,
    ExpenseChange,
    FixedCost,
    Goal,
    GoalStatus,
    GoalType,
    IncomeFrequency,
    IncomeSource,
    Investment,
    InvestmentTransaction,
    InvestmentTransactionType,
    InvestmentType,
    LifeScenario,
    Milestone,
    PaymentFrequency,
    PlannedPurchase,
    ProjectionSettings,
    QuarterlyBonusStatus,
    SavingsPlan,
    Scenario,
    ScenarioMultipliers,
    SimulationParams,
    Subscription,
    Transaction,
    TransactionFilter,
    TransactionKind,
    VariableCostEstimate,
    YearlyIncomeRecord,
)
from finplan.models.results import (
    AnalyticsReport,
    BudgetSummary,
    CancellationReminder,
    CategoryAmount,
    CategoryTrend,
    CreditCardSummary,
    DebtProgress,
    FinancialProfile,
    FinancialSnapshot,
    GoalProgress,
    GoalsSummary,
    InvestmentPerformance,
    LifeScenarioResult,
    LifestyleInflationAlert,
    MilestoneStatus,
    MissedSavingsOpportunity,
    MonthlySummary,
    MonthlyTotals,
    NetWorthPoint,
    PeriodSummary,
    PlanningSummary,
    PortfolioMetrics,
    PortfolioMonth,
    ProjectionMonth,
    PurchaseProjection,
    QuarterlyBonusOverview,
    SavingsRatePoint,
    SimulationResult,
    SubscriptionSummary,
    TypeBreakdown,
    WeekdaySpending,
    WeekOverWeekTrend,
)
from finplan.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Reference lists
    "ACCOUNTS",
    "EXPENSE_CATEGORIES",
    "INCOME_CATEGORIES",
    # Records
    "Assets",
    "Budget",
    "ChangeType",
    "CreditCard",
    "Debt",
    "DebtType",
    "EventBudget",
    "ExpenseChange",
    "FixedCost",
    "Goal",
    "GoalStatus",
    "GoalType",
    "IncomeFrequency",
    "IncomeSource",
    "Investment",
    "InvestmentTransaction",
    "InvestmentTransactionType",
    "InvestmentType",
    "LifeScenario",
    "Milestone",
    "PaymentFrequency",
    "PlannedPurchase",
    "ProjectionSettings",
    "QuarterlyBonusStatus",
    "SavingsPlan",
    "Scenario",
    "ScenarioMultipliers",
    "SimulationParams",
    "Subscription",
    "Transaction",
    "TransactionFilter",
    "TransactionKind",
    "VariableCostEstimate",
    "YearlyIncomeRecord",
    # Results
    "AnalyticsReport",
    "BudgetSummary",
    "CancellationReminder",
    "CategoryAmount",
    "CategoryTrend",
    "CreditCardSummary",
    "DebtProgress",
    "FinancialProfile",
    "FinancialSnapshot",
    "GoalProgress",
    "GoalsSummary",
    "InvestmentPerformance",
    "LifeScenarioResult",
    "LifestyleInflationAlert",
    "MilestoneStatus",
    "MissedSavingsOpportunity",
    "MonthlySummary",
    "MonthlyTotals",
    "NetWorthPoint",
    "PeriodSummary",
    "PlanningSummary",
    "PortfolioMetrics",
    "PortfolioMonth",
    "ProjectionMonth",
    "PurchaseProjection",
    "QuarterlyBonusOverview",
    "SavingsRatePoint",
    "SimulationResult",
    "SubscriptionSummary",
    "TypeBreakdown",
    "WeekdaySpending",
    "WeekOverWeekTrend",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
