"""
Flow tests for the dashboard orchestrator.

The flow runs against the in-memory data source; no backend is contacted.
"""

import asyncio
import pytest
from datetime import date
from unittest.mock import AsyncMock

from tenacity import wait_none

from finplan.audit import AuditLogger, create_correlation_id
from finplan.config import get_settings
from finplan.models.audit import AuditEventBuilder, AuditEventType, AuditSeverity
from finplan.models.records import (
    Assets,
    Budget,
    FixedCost,
    Goal,
    GoalType,
    IncomeFrequency,
    IncomeSource,
    Investment,
    InvestmentTransaction,
    InvestmentTransactionType,
    ProjectionSettings,
    Scenario,
    ScenarioMultipliers,
    SimulationParams,
    Subscription,
    Transaction,
    TransactionFilter,
    TransactionKind,
    YearlyIncomeRecord,
)
from finplan.orchestrator import DashboardFlow, create_app_components
from finplan.services.storage import (
    InMemoryAuditStorage,
    InMemoryDataSource,
    NotFoundError,
    StorageConnectionError,
)

TODAY = date(2024, 6, 15)


def run(coro):
    return asyncio.run(coro)


def _records(**overrides):
    records = dict(
        transactions=[
            Transaction(id="t1", date=date(2024, 6, 1), amount=4000,
                        kind=TransactionKind.INCOME, category="Gehalt"),
            Transaction(id="t2", date=date(2024, 6, 3), amount=1200,
                        kind=TransactionKind.EXPENSE, category="Miete"),
            Transaction(id="t3", date=date(2024, 5, 20), amount=80,
                        kind=TransactionKind.EXPENSE, category="Lebensmittel"),
        ],
        budgets=[Budget(id="b1", month="2024-06", category="Miete", budget_amount=1000)],
        income_sources=[
            IncomeSource(id="i1", name="Gehalt", amount=4000, frequency=IncomeFrequency.MONTHLY),
        ],
        fixed_costs=[FixedCost(id="f1", name="Miete", amount=1200)],
        assets=Assets(savings=9000),
        yearly_income=[
            YearlyIncomeRecord(id="y1", year=2023, base_salary=46000, bonus_q4=2000),
            YearlyIncomeRecord(id="y2", year=2024, base_salary=48000),
        ],
        investments=[
            Investment(id="inv1", name="MSCI World", quantity=10,
                       purchase_price=100, current_price=120),
        ],
        investment_transactions=[
            InvestmentTransaction(id="it1", investment_id="inv1", type=InvestmentTransactionType.BUY,
                                  quantity=10, price=100, total_amount=1000, date=date(2023, 1, 10)),
            InvestmentTransaction(id="it2", investment_id="inv1",
                                  type=InvestmentTransactionType.DIVIDEND,
                                  total_amount=25.5, date=date(2024, 3, 15)),
        ],
        goals=[
            Goal(id="g1", year=2024, name="Mehr Gehalt", type=GoalType.INCOME,
                 start_amount=3000, target_amount=5000,
                 created_at=date(2024, 1, 1), deadline=date(2024, 12, 31)),
            Goal(id="g2", year=2023, name="Alt", type=GoalType.SAVINGS,
                 target_amount=1000, created_at=date(2023, 1, 1), deadline=date(2023, 12, 31)),
        ],
        subscriptions=[
            Subscription(id="s1", name="Streaming", amount=12.99,
                         next_billing_date=date(2024, 7, 20), cancellation_period_days=14),
        ],
        projection_settings=ProjectionSettings(
            expected_income=4000,
            fixed_costs=1500,
            variable_costs=1000,
            starting_cash=5000,
        ),
    )
    records.update(overrides)
    return records


class FlakySource(InMemoryDataSource):
    """Fails the first `failures` income-source reads with a connection error."""

    def __init__(self, failures, **records):
        super().__init__(**records)
        self.failures = failures
        self.calls = 0

    async def list_income_sources(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise StorageConnectionError("backend unreachable")
        return await super().list_income_sources()


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def flow(audit_storage):
    return DashboardFlow(
        data_source=InMemoryDataSource(**_records()),
        audit_logger=AuditLogger(audit_storage),
        settings=get_settings(),
        retry_wait=wait_none(),
    )


def _event_types(audit_storage, correlation_id):
    events = run(audit_storage.get_events_by_correlation_id(correlation_id))
    return [e.event_type for e in events]


class TestLoadSnapshot:
    """Tests for loading records from the data source."""

    def test_loads_every_collection(self, flow, audit_storage):
        correlation_id = create_correlation_id()
        data = run(flow.load_snapshot(correlation_id=correlation_id))

        assert len(data.transactions) == 3
        assert data.transactions[0].id == "t2"  # newest first
        assert data.assets.savings == 9000
        assert data.projection_settings is not None

        counts = data.record_counts()
        assert counts["transactions"] == 3
        assert counts["goals"] == 2
        assert counts["yearly_income"] == 2
        assert counts["investment_transactions"] == 2
        assert [r.year for r in data.yearly_income] == [2024, 2023]
        assert data.investment_transactions[0].id == "it2"
        assert counts["projection_settings"] == 1

        assert _event_types(audit_storage, correlation_id) == [
            AuditEventType.SNAPSHOT_LOAD_STARTED,
            AuditEventType.SNAPSHOT_LOADED,
        ]

    def test_filters_are_passed_to_the_source(self, flow):
        data = run(flow.load_snapshot(
            transaction_filter=TransactionFilter(kind=TransactionKind.EXPENSE),
            goal_year=2024,
        ))
        assert {t.id for t in data.transactions} == {"t2", "t3"}
        assert [g.id for g in data.goals] == ["g1"]

    def test_investment_transactions_by_position(self):
        source = InMemoryDataSource(**_records())
        bookings = run(source.list_investment_transactions("inv1"))
        assert [t.id for t in bookings] == ["it2", "it1"]
        assert run(source.list_investment_transactions("other")) == []

    def test_missing_projection_settings(self):
        flow = DashboardFlow(
            InMemoryDataSource(**_records(projection_settings=None)),
            retry_wait=wait_none(),
        )
        data = run(flow.load_snapshot())
        assert data.projection_settings is None
        assert data.record_counts()["projection_settings"] == 0
        with pytest.raises(NotFoundError):
            run(flow.projection(data, TODAY))

    def test_transient_failures_are_retried(self, audit_storage):
        source = FlakySource(failures=2, **_records())
        flow = DashboardFlow(
            source,
            audit_logger=AuditLogger(audit_storage),
            retry_wait=wait_none(),
            max_attempts=3,
        )
        data = run(flow.load_snapshot())
        assert source.calls == 3
        assert len(data.income_sources) == 1

    def test_persistent_failure_is_audited_and_raised(self, audit_storage):
        source = FlakySource(failures=10, **_records())
        flow = DashboardFlow(
            source,
            audit_logger=AuditLogger(audit_storage),
            retry_wait=wait_none(),
            max_attempts=3,
        )
        correlation_id = create_correlation_id()
        with pytest.raises(StorageConnectionError):
            run(flow.load_snapshot(correlation_id=correlation_id))

        assert source.calls == 3
        events = run(audit_storage.get_events_by_correlation_id(correlation_id))
        assert events[-1].event_type == AuditEventType.DATA_SOURCE_ERROR
        assert events[-1].severity == AuditSeverity.ERROR
        assert "backend unreachable" in events[-1].error_message


class TestComputations:
    """Tests for the individual flow steps."""

    def test_financial_overview(self, flow):
        data = run(flow.load_snapshot())
        profile = run(flow.financial_overview(data))
        assert profile.monthly_income == 4000
        assert profile.available_income == 2800
        assert profile.emergency_fund_months == pytest.approx(7.5)

    def test_projection_for_all_scenarios(self, flow, audit_storage):
        data = run(flow.load_snapshot())
        correlation_id = create_correlation_id()
        projections = run(flow.projection(data, TODAY, correlation_id))

        assert set(projections) == {Scenario.BASE, Scenario.BEST, Scenario.WORST}
        base = projections[Scenario.BASE]
        assert base[0].month == "2024-06"
        assert base[0].cumulative_cash == 6500
        assert _event_types(audit_storage, correlation_id).count(
            AuditEventType.PROJECTION_GENERATED
        ) == 3

    def test_invalid_projection_settings_are_audited(self, audit_storage):
        broken = ProjectionSettings(
            expected_income=4000,
            scenario_multipliers=ScenarioMultipliers(worst=0),
        )
        flow = DashboardFlow(
            InMemoryDataSource(**_records(projection_settings=broken)),
            audit_logger=AuditLogger(audit_storage),
            retry_wait=wait_none(),
        )
        data = run(flow.load_snapshot())
        correlation_id = create_correlation_id()
        with pytest.raises(ValueError):
            run(flow.projection(data, TODAY, correlation_id))
        assert _event_types(audit_storage, correlation_id) == [AuditEventType.SYSTEM_ERROR]

    def test_simulate(self, flow, audit_storage):
        params = SimulationParams(
            current_income=4000,
            current_fixed_costs=2500,
            simulated_income=4000,
            simulated_fixed_costs=2000,
            time_horizon_years=1,
        )
        correlation_id = create_correlation_id()
        result = run(flow.simulate(params, TODAY, correlation_id))
        assert result.monthly_contribution == 1000
        assert _event_types(audit_storage, correlation_id) == [AuditEventType.SIMULATION_RUN]

    def test_goal_progress_uses_live_income(self, flow):
        data = run(flow.load_snapshot())
        progress = run(flow.goal_progress(data, TODAY, year=2024))
        assert [p.goal_id for p in progress] == ["g1"]
        assert progress[0].effective_current_amount == 4000
        assert progress[0].progress == pytest.approx(0.5)

    def test_create_snapshot(self, flow, audit_storage):
        data = run(flow.load_snapshot())
        correlation_id = create_correlation_id()
        snapshot = run(flow.create_snapshot(
            data,
            TODAY,
            name="Halbjahr",
            correlation_id=correlation_id,
        ))
        assert snapshot.snapshot_date == TODAY
        assert snapshot.name == "Halbjahr"
        assert snapshot.monthly_income == 4000
        assert snapshot.net_worth == 9000
        assert len(snapshot.transactions) == 3
        assert AuditEventType.FINANCIAL_SNAPSHOT_CREATED in _event_types(
            audit_storage, correlation_id
        )


class TestRefresh:
    """Tests for the full dashboard flow."""

    def test_refresh(self, flow, audit_storage):
        overview = run(flow.refresh(TODAY))

        assert overview.today == TODAY
        assert overview.profile.monthly_income == 4000
        assert overview.analytics.total_missed_savings == 200
        assert len(overview.projections) == 3
        assert [g.goal_id for g in overview.goals] == ["g1"]
        assert overview.subscriptions.monthly_total == pytest.approx(12.99)
        assert [r.subscription_id for r in overview.upcoming_cancellations] == ["s1"]
        assert overview.portfolio.total_value == 1200
        assert overview.portfolio.total_dividends == pytest.approx(25.5)

        types = _event_types(audit_storage, overview.correlation_id)
        assert types[0] == AuditEventType.SNAPSHOT_LOAD_STARTED
        assert AuditEventType.ANALYTICS_COMPUTED in types
        assert types[-1] == AuditEventType.GOALS_EVALUATED

    def test_refresh_without_projection_settings(self):
        flow = DashboardFlow(
            InMemoryDataSource(**_records(projection_settings=None)),
            retry_wait=wait_none(),
        )
        overview = run(flow.refresh(TODAY))
        assert overview.projections == {}

    def test_broken_audit_store_does_not_break_refresh(self):
        storage = InMemoryAuditStorage()
        storage.append_event = AsyncMock(side_effect=RuntimeError("disk full"))
        flow = DashboardFlow(
            InMemoryDataSource(**_records()),
            audit_logger=AuditLogger(storage),
            retry_wait=wait_none(),
        )
        overview = run(flow.refresh(TODAY))
        assert overview.profile.monthly_income == 4000
        assert storage.append_event.await_count > 0


class TestAppComponents:

    def test_create_app_components(self):
        flow, audit_logger = create_app_components(InMemoryDataSource(**_records()))
        assert isinstance(flow, DashboardFlow)
        assert isinstance(audit_logger, AuditLogger)

    def test_audit_is_local_only_by_default(self):
        _, audit_logger = create_app_components(InMemoryDataSource())
        event = AuditEventBuilder.system_error(
            error_type="test",
            error_message="nothing persisted",
        )
        assert audit_logger._storage is None
        assert run(audit_logger.log(event)) is True

    def test_host_supplied_audit_store(self, audit_storage):
        flow, _ = create_app_components(InMemoryDataSource(**_records()), audit_storage)
        flow._retry_wait = wait_none()
        overview = run(flow.refresh(TODAY))
        events = run(audit_storage.get_events_by_correlation_id(overview.correlation_id))
        assert events[0].event_type == AuditEventType.SNAPSHOT_LOAD_STARTED
