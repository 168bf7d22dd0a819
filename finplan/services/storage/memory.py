"""
In-Memory Storage

Holds records in plain tuples. Used by batch hosts that already loaded
their data (e.g. from a JSON export) and by the test suite.
"""

from typing import Iterable, Optional
from uuid import UUID

import structlog

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
from finplan.services.storage.interface import (
    AuditStorageInterface,
    FinanceDataSource,
    NotFoundError,
)


logger = structlog.get_logger()


class InMemoryDataSource(FinanceDataSource):
    """
    Finance data source over records held in memory.

    The records are immutable, so the source hands out its own tuples'
    contents without copying them.
    """

    def __init__(
        self,
        transactions: Iterable[Transaction] = (),
        budgets: Iterable[Budget] = (),
        income_sources: Iterable[IncomeSource] = (),
        fixed_costs: Iterable[FixedCost] = (),
        variable_costs: Iterable[VariableCostEstimate] = (),
        debts: Iterable[Debt] = (),
        yearly_income: Iterable[YearlyIncomeRecord] = (),
        assets: Optional[Assets] = None,
        credit_cards: Iterable[CreditCard] = (),
        investments: Iterable[Investment] = (),
        investment_transactions: Iterable[InvestmentTransaction] = (),
        savings_plans: Iterable[SavingsPlan] = (),
        goals: Iterable[Goal] = (),
        planned_purchases: Iterable[PlannedPurchase] = (),
        event_budgets: Iterable[EventBudget] = (),
        life_scenarios: Iterable[LifeScenario] = (),
        subscriptions: Iterable[Subscription] = (),
        projection_settings: Optional[ProjectionSettings] = None,
    ):
        self._transactions = tuple(transactions)
        self._budgets = tuple(budgets)
        self._income_sources = tuple(income_sources)
        self._fixed_costs = tuple(fixed_costs)
        self._variable_costs = tuple(variable_costs)
        self._debts = tuple(debts)
        self._yearly_income = tuple(yearly_income)
        self._assets = assets or Assets()
        self._credit_cards = tuple(credit_cards)
        self._investments = tuple(investments)
        self._investment_transactions = tuple(investment_transactions)
        self._savings_plans = tuple(savings_plans)
        self._goals = tuple(goals)
        self._planned_purchases = tuple(planned_purchases)
        self._event_budgets = tuple(event_budgets)
        self._life_scenarios = tuple(life_scenarios)
        self._subscriptions = tuple(subscriptions)
        self._projection_settings = projection_settings

    async def list_transactions(
        self,
        filter: Optional[TransactionFilter] = None,
    ) -> list[Transaction]:
        transactions = [
            t for t in self._transactions
            if filter is None or filter.matches(t)
        ]
        transactions.sort(key=lambda t: t.date, reverse=True)
        return transactions

    async def list_budgets(self, month: Optional[str] = None) -> list[Budget]:
        return [b for b in self._budgets if month is None or b.month == month]

    async def list_income_sources(self) -> list[IncomeSource]:
        return list(self._income_sources)

    async def list_fixed_costs(self) -> list[FixedCost]:
        return list(self._fixed_costs)

    async def list_variable_costs(self) -> list[VariableCostEstimate]:
        return list(self._variable_costs)

    async def list_debts(self) -> list[Debt]:
        return list(self._debts)

    async def list_yearly_income(self) -> list[YearlyIncomeRecord]:
        return sorted(self._yearly_income, key=lambda r: r.year, reverse=True)

    async def get_assets(self) -> Assets:
        return self._assets

    async def list_credit_cards(self) -> list[CreditCard]:
        return list(self._credit_cards)

    async def list_investments(self) -> list[Investment]:
        return list(self._investments)

    async def list_investment_transactions(
        self,
        investment_id: Optional[str] = None,
    ) -> list[InvestmentTransaction]:
        transactions = [
            t for t in self._investment_transactions
            if investment_id is None or t.investment_id == investment_id
        ]
        transactions.sort(key=lambda t: t.date, reverse=True)
        return transactions

    async def list_savings_plans(self) -> list[SavingsPlan]:
        return list(self._savings_plans)

    async def list_goals(self, year: Optional[int] = None) -> list[Goal]:
        return [g for g in self._goals if year is None or g.year == year]

    async def list_planned_purchases(self) -> list[PlannedPurchase]:
        return list(self._planned_purchases)

    async def list_event_budgets(self) -> list[EventBudget]:
        return list(self._event_budgets)

    async def list_life_scenarios(self) -> list[LifeScenario]:
        return list(self._life_scenarios)

    async def list_subscriptions(self) -> list[Subscription]:
        return list(self._subscriptions)

    async def get_projection_settings(self) -> ProjectionSettings:
        if self._projection_settings is None:
            raise NotFoundError("No projection settings stored")
        return self._projection_settings


class InMemoryAuditStorage(AuditStorageInterface):
    """
    Append-only audit log kept in a list.

    The list is never trimmed; meant for tests and short batch runs.
    """

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        logger.debug("audit_event_stored", event_id=str(event.event_id))
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        return sorted(events, key=lambda e: e.timestamp)

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return sorted(self._events, key=lambda e: e.timestamp, reverse=True)[:limit]
