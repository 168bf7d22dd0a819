"""
Abstract Data-Access Interface

DESIGN DECISION: The calculation core never talks to a database.
Whoever hosts finplan implements `FinanceDataSource` against their store
(a hosted relational database, a spreadsheet, a JSON export) and injects
it into the orchestrator. This allows us to:
1. Swap backends without touching a single calculation
2. Use in-memory records for tests and batch jobs
3. Keep the core free of global clients

The interface is read-only. Creating and editing records belongs to the
host application.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from finplan.models.audit import AuditEvent
from finplan.models.records import (
    Assets,
    Budget,
    CreditCard,
    Debt,
    EventBudget,
    FixedCost,
    Goal,
    IncomeSource,
    Investment,
    InvestmentTransaction,
    LifeScenario,
    PlannedPurchase,
    ProjectionSettings,
    SavingsPlan,
    Subscription,
    Transaction,
    TransactionFilter,
    VariableCostEstimate,
    YearlyIncomeRecord,
)


class FinanceDataSource(ABC):
    """
    Read-only access to a user's finance records.

    Implementations raise `StorageConnectionError` for transient backend
    failures; callers may retry those.
    """

    @abstractmethod
    async def list_transactions(
        self,
        filter: Optional[TransactionFilter] = None,
    ) -> list[Transaction]:
        """
        List transactions, newest first.

        Args:
            filter: Optional filter; all transactions when omitted

        Returns:
            List of matching transactions
        """
        pass

    @abstractmethod
    async def list_budgets(self, month: Optional[str] = None) -> list[Budget]:
        """
        List budgets, optionally for one ISO month (YYYY-MM).
        """
        pass

    @abstractmethod
    async def list_income_sources(self) -> list[IncomeSource]:
        pass

    @abstractmethod
    async def list_fixed_costs(self) -> list[FixedCost]:
        pass

    @abstractmethod
    async def list_variable_costs(self) -> list[VariableCostEstimate]:
        pass

    @abstractmethod
    async def list_debts(self) -> list[Debt]:
        pass

    @abstractmethod
    async def list_yearly_income(self) -> list[YearlyIncomeRecord]:
        """
        List the recorded income history, most recent year first.
        """
        pass

    @abstractmethod
    async def get_assets(self) -> Assets:
        """
        Get the user's asset snapshot.

        Returns:
            The stored assets, or an all-zero record if none exist
        """
        pass

    @abstractmethod
    async def list_credit_cards(self) -> list[CreditCard]:
        pass

    @abstractmethod
    async def list_investments(self) -> list[Investment]:
        pass

    @abstractmethod
    async def list_investment_transactions(
        self,
        investment_id: Optional[str] = None,
    ) -> list[InvestmentTransaction]:
        """
        List buys, sells and dividends, newest first.

        Args:
            investment_id: Only bookings of this position when given
        """
        pass

    @abstractmethod
    async def list_savings_plans(self) -> list[SavingsPlan]:
        pass

    @abstractmethod
    async def list_goals(self, year: Optional[int] = None) -> list[Goal]:
        """
        List goals, optionally for one year.
        """
        pass

    @abstractmethod
    async def list_planned_purchases(self) -> list[PlannedPurchase]:
        pass

    @abstractmethod
    async def list_event_budgets(self) -> list[EventBudget]:
        pass

    @abstractmethod
    async def list_life_scenarios(self) -> list[LifeScenario]:
        pass

    @abstractmethod
    async def list_subscriptions(self) -> list[Subscription]:
        pass

    @abstractmethod
    async def get_projection_settings(self) -> ProjectionSettings:
        """
        Get the stored cash-flow projection inputs.

        Raises:
            NotFoundError: If the user never saved projection settings
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events of one dashboard refresh, in chronological order.
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class StorageConnectionError(StorageError):
    """Could not reach the storage backend."""
    pass
