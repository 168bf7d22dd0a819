"""
Main Orchestrator for finplan

This module ties the data source, the calculation core and the audit log
together and defines the end-to-end dashboard flow:
load records -> compute profile -> analytics, projections, goals.

DESIGN DECISION: The orchestrator owns every side effect.
- Only the orchestrator awaits the data source
- The calculations run synchronously on the loaded records
- Every step is audited under one correlation ID

Transient data-source failures are retried; anything else is logged and
re-raised to the host.
"""

import asyncio
from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from finplan.audit import AuditLogger, create_correlation_id
from finplan.calculations.analytics import compute_analytics
from finplan.calculations.goals import evaluate_goals
from finplan.calculations.planning import planning_summary
from finplan.calculations.portfolio import monthly_savings_plan_amount, portfolio_metrics
from finplan.calculations.profile import compute_financial_profile, credit_card_summary
from finplan.calculations.projection import generate_all_scenarios
from finplan.calculations.simulation import run_simulation
from finplan.calculations.subscriptions import subscription_summary, upcoming_cancellations
from finplan.config import Settings, get_settings
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
    Scenario,
    SimulationParams,
    Subscription,
    Transaction,
    TransactionFilter,
    VariableCostEstimate,
    YearlyIncomeRecord,
)
from finplan.models.results import (
    AnalyticsReport,
    CancellationReminder,
    CreditCardSummary,
    FinancialProfile,
    FinancialSnapshot,
    GoalProgress,
    PlanningSummary,
    PortfolioMetrics,
    ProjectionMonth,
    SimulationResult,
    SubscriptionSummary,
)
from finplan.services.storage import (
    AuditStorageInterface,
    FinanceDataSource,
    NotFoundError,
    StorageConnectionError,
    StorageError,
)


class DashboardData(BaseModel):
    """All records of one user, loaded in a single pass."""

    transactions: list[Transaction] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)
    income_sources: list[IncomeSource] = Field(default_factory=list)
    fixed_costs: list[FixedCost] = Field(default_factory=list)
    variable_costs: list[VariableCostEstimate] = Field(default_factory=list)
    debts: list[Debt] = Field(default_factory=list)
    yearly_income: list[YearlyIncomeRecord] = Field(default_factory=list)
    assets: Assets = Field(default_factory=Assets)
    credit_cards: list[CreditCard] = Field(default_factory=list)
    investments: list[Investment] = Field(default_factory=list)
    investment_transactions: list[InvestmentTransaction] = Field(default_factory=list)
    savings_plans: list[SavingsPlan] = Field(default_factory=list)
    goals: list[Goal] = Field(default_factory=list)
    planned_purchases: list[PlannedPurchase] = Field(default_factory=list)
    event_budgets: list[EventBudget] = Field(default_factory=list)
    life_scenarios: list[LifeScenario] = Field(default_factory=list)
    subscriptions: list[Subscription] = Field(default_factory=list)
    projection_settings: Optional[ProjectionSettings] = None

    def record_counts(self) -> dict[str, int]:
        counts = {
            name: len(value)
            for name, value in self
            if isinstance(value, list)
        }
        counts["projection_settings"] = int(self.projection_settings is not None)
        return counts


class DashboardOverview(BaseModel):
    """Everything the dashboard's start page shows."""

    correlation_id: UUID
    today: date
    profile: FinancialProfile
    analytics: AnalyticsReport
    projections: dict[Scenario, list[ProjectionMonth]] = Field(default_factory=dict)
    goals: list[GoalProgress] = Field(default_factory=list)
    credit_cards: CreditCardSummary
    portfolio: PortfolioMetrics
    monthly_savings_plans: float
    planning: PlanningSummary
    subscriptions: SubscriptionSummary
    upcoming_cancellations: list[CancellationReminder] = Field(default_factory=list)


class DashboardFlow:
    """
    Orchestrates a dashboard refresh.

    Flow:
    1. Load → Fetch every record collection in parallel (retried)
    2. Profile → Monthly key figures
    3. Analytics → Trends and alerts for the trailing window
    4. Projection → Base/best/worst cash flow
    5. Goals → Progress against today, income goals fed by the profile

    The data source is injected; the flow never creates one itself.
    """

    def __init__(
        self,
        data_source: FinanceDataSource,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[Settings] = None,
        retry_wait: Optional[wait_base] = None,
        max_attempts: int = 3,
    ):
        self._data_source = data_source
        self._audit_logger = audit_logger
        self._settings = settings or get_settings()
        self._retry_wait = retry_wait or wait_exponential(multiplier=1, min=2, max=10)
        self._max_attempts = max_attempts

    # =========================================================================
    # LOADING
    # =========================================================================

    async def _projection_settings(self) -> Optional[ProjectionSettings]:
        try:
            return await self._data_source.get_projection_settings()
        except NotFoundError:
            return None

    async def _fetch(
        self,
        transaction_filter: Optional[TransactionFilter],
        goal_year: Optional[int],
    ) -> DashboardData:
        source = self._data_source
        (
            transactions,
            budgets,
            income_sources,
            fixed_costs,
            variable_costs,
            debts,
            yearly_income,
            assets,
            credit_cards,
            investments,
            investment_transactions,
            savings_plans,
            goals,
            planned_purchases,
            event_budgets,
            life_scenarios,
            subscriptions,
            projection_settings,
        ) = await asyncio.gather(
            source.list_transactions(transaction_filter),
            source.list_budgets(),
            source.list_income_sources(),
            source.list_fixed_costs(),
            source.list_variable_costs(),
            source.list_debts(),
            source.list_yearly_income(),
            source.get_assets(),
            source.list_credit_cards(),
            source.list_investments(),
            source.list_investment_transactions(),
            source.list_savings_plans(),
            source.list_goals(goal_year),
            source.list_planned_purchases(),
            source.list_event_budgets(),
            source.list_life_scenarios(),
            source.list_subscriptions(),
            self._projection_settings(),
        )
        return DashboardData(
            transactions=transactions,
            budgets=budgets,
            income_sources=income_sources,
            fixed_costs=fixed_costs,
            variable_costs=variable_costs,
            debts=debts,
            yearly_income=yearly_income,
            assets=assets,
            credit_cards=credit_cards,
            investments=investments,
            investment_transactions=investment_transactions,
            savings_plans=savings_plans,
            goals=goals,
            planned_purchases=planned_purchases,
            event_budgets=event_budgets,
            life_scenarios=life_scenarios,
            subscriptions=subscriptions,
            projection_settings=projection_settings,
        )

    async def load_snapshot(
        self,
        transaction_filter: Optional[TransactionFilter] = None,
        goal_year: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> DashboardData:
        """
        Load every record collection from the data source.

        Connection errors are retried with exponential backoff; after the
        last attempt, or on any other storage error, the error is audited
        and re-raised.
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._audit_logger:
            await self._audit_logger.log_snapshot_load_started(correlation_id)

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_attempts),
                wait=self._retry_wait,
                retry=retry_if_exception_type(StorageConnectionError),
                reraise=True,
            ):
                with attempt:
                    data = await self._fetch(transaction_filter, goal_year)
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_data_source_error(
                    operation="load_snapshot",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_snapshot_loaded(
                record_counts=data.record_counts(),
                correlation_id=correlation_id,
            )
        return data

    # =========================================================================
    # COMPUTATIONS
    # =========================================================================

    async def financial_overview(
        self,
        data: DashboardData,
        correlation_id: Optional[UUID] = None,
    ) -> FinancialProfile:
        """Compute the financial profile from the loaded records."""
        correlation_id = correlation_id or create_correlation_id()
        profile = compute_financial_profile(
            data.income_sources,
            data.fixed_costs,
            data.variable_costs,
            data.debts,
            data.assets,
        )
        if self._audit_logger:
            await self._audit_logger.log_profile_computed(
                monthly_income=profile.monthly_income,
                available_income=profile.available_income,
                health_score=profile.health_score,
                correlation_id=correlation_id,
            )
        return profile

    async def analytics(
        self,
        data: DashboardData,
        today: date,
        months_back: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AnalyticsReport:
        correlation_id = correlation_id or create_correlation_id()
        report = compute_analytics(
            data.transactions,
            today,
            budgets=data.budgets,
            months_back=months_back,
            settings=self._settings.analytics,
        )
        if self._audit_logger:
            await self._audit_logger.log_analytics_computed(
                months=report.months,
                alert_count=len(report.lifestyle_inflation_alerts),
                missed_savings=report.total_missed_savings,
                correlation_id=correlation_id,
            )
        return report

    async def projection(
        self,
        data: DashboardData,
        start: date,
        correlation_id: Optional[UUID] = None,
    ) -> dict[Scenario, list[ProjectionMonth]]:
        """
        Base, best and worst cash-flow projections.

        Raises:
            NotFoundError: If no projection settings were loaded
            ValueError: If the worst-case multiplier is 0
        """
        correlation_id = correlation_id or create_correlation_id()
        if data.projection_settings is None:
            raise NotFoundError("No projection settings stored")

        try:
            projections = generate_all_scenarios(
                data.projection_settings,
                start,
                self._settings.forecast.projection_months,
            )
        except ValueError as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type="invalid_projection_settings",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            for scenario, months in projections.items():
                await self._audit_logger.log_projection_generated(
                    scenario=scenario.value,
                    months=len(months),
                    final_cash=months[-1].cumulative_cash if months else 0.0,
                    correlation_id=correlation_id,
                )
        return projections

    async def simulate(
        self,
        params: SimulationParams,
        start: date,
        correlation_id: Optional[UUID] = None,
    ) -> SimulationResult:
        correlation_id = correlation_id or create_correlation_id()
        forecast = self._settings.forecast
        result = run_simulation(
            params,
            start,
            withdrawal_rate=forecast.fire_withdrawal_rate,
            max_fire_months=forecast.fire_max_months,
        )
        if self._audit_logger:
            await self._audit_logger.log_simulation_run(
                monthly_contribution=result.monthly_contribution,
                fire_target=result.fire_target,
                years_to_fire=result.years_to_fire,
                correlation_id=correlation_id,
            )
        return result

    async def goal_progress(
        self,
        data: DashboardData,
        today: date,
        profile: Optional[FinancialProfile] = None,
        year: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> list[GoalProgress]:
        """
        Evaluate the loaded goals, optionally only those of one year.

        Income goals are measured against the profile's monthly income.
        """
        correlation_id = correlation_id or create_correlation_id()
        if profile is None:
            profile = await self.financial_overview(data, correlation_id)

        goals = [g for g in data.goals if year is None or g.year == year]
        progress = evaluate_goals(
            goals,
            today,
            live_monthly_income=profile.monthly_income,
            tolerance=self._settings.goals.on_track_tolerance,
        )
        if self._audit_logger:
            await self._audit_logger.log_goals_evaluated(
                year=year,
                goal_count=len(progress),
                on_track_count=sum(1 for p in progress if p.on_track),
                correlation_id=correlation_id,
            )
        return progress

    async def create_snapshot(
        self,
        data: DashboardData,
        snapshot_date: date,
        name: Optional[str] = None,
        note: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> FinancialSnapshot:
        """Freeze the profile records and their key figures."""
        correlation_id = correlation_id or create_correlation_id()
        profile = await self.financial_overview(data, correlation_id)

        snapshot = FinancialSnapshot(
            snapshot_date=snapshot_date,
            name=name,
            note=note,
            income_sources=data.income_sources,
            fixed_costs=data.fixed_costs,
            variable_costs=data.variable_costs,
            debts=data.debts,
            credit_cards=data.credit_cards,
            assets=data.assets,
            transactions=data.transactions,
            monthly_income=profile.monthly_income,
            monthly_income_without_bonus=profile.monthly_income_without_bonus,
            monthly_bonus_income=profile.monthly_bonus_income,
            quarterly_bonus_overview=profile.quarterly_bonus_overview,
            monthly_fixed_costs=profile.monthly_fixed_costs,
            monthly_variable_costs=profile.monthly_variable_costs,
            total_debt=profile.total_debt,
            total_assets=profile.total_assets,
            net_worth=profile.net_worth,
            health_score=profile.health_score,
        )

        if self._audit_logger:
            await self._audit_logger.log_snapshot_created(
                snapshot_id=snapshot.id,
                snapshot_date=snapshot_date.isoformat(),
                net_worth=snapshot.net_worth,
                correlation_id=correlation_id,
            )
        return snapshot

    async def refresh(self, today: date) -> DashboardOverview:
        """
        Run the whole dashboard flow for `today`.

        Projections are skipped when no projection settings are stored.
        """
        correlation_id = create_correlation_id()
        data = await self.load_snapshot(correlation_id=correlation_id)

        profile = await self.financial_overview(data, correlation_id)
        report = await self.analytics(data, today, correlation_id=correlation_id)
        projections = {}
        if data.projection_settings is not None:
            projections = await self.projection(data, today, correlation_id)
        goals = await self.goal_progress(
            data, today, profile=profile, year=today.year, correlation_id=correlation_id
        )

        return DashboardOverview(
            correlation_id=correlation_id,
            today=today,
            profile=profile,
            analytics=report,
            projections=projections,
            goals=goals,
            credit_cards=credit_card_summary(data.credit_cards),
            portfolio=portfolio_metrics(data.investments, data.investment_transactions),
            monthly_savings_plans=monthly_savings_plan_amount(data.savings_plans),
            planning=planning_summary(data.planned_purchases, data.event_budgets),
            subscriptions=subscription_summary(data.subscriptions),
            upcoming_cancellations=upcoming_cancellations(
                data.subscriptions,
                today,
                self._settings.goals.cancellation_horizon_days,
            ),
        )


def create_app_components(
    data_source: FinanceDataSource,
    audit_storage: Optional[AuditStorageInterface] = None,
) -> tuple[DashboardFlow, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        data_source: The host's data-access implementation.
        audit_storage: Where audit events are persisted. Defaults to
                    local-only logging; a long-running host passes its own
                    bounded or durable store.

    Returns:
        (dashboard_flow, audit_logger)
    """
    audit_logger = AuditLogger(audit_storage)
    flow = DashboardFlow(
        data_source=data_source,
        audit_logger=audit_logger,
        settings=get_settings(),
    )
    return flow, audit_logger
