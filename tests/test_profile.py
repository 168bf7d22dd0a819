"""
Tests for the financial profile calculator and the health score.
"""

import pytest

from pydantic import ValidationError

from finplan.calculations.health import calculate_health_score
from finplan.calculations.profile import (
    compute_financial_profile,
    credit_card_summary,
    debt_progress,
    monthly_bonus_income,
    monthly_fixed_costs,
    monthly_income,
    monthly_income_without_bonus,
    quarterly_bonus_overview,
    yearly_bonus_total,
    yearly_income_record,
    yearly_income_total,
)
from finplan.models.records import (
    Assets,
    CreditCard,
    Debt,
    FixedCost,
    IncomeFrequency,
    IncomeSource,
    PaymentFrequency,
    QuarterlyBonusStatus,
    VariableCostEstimate,
    YearlyIncomeRecord,
)


def _bonus(sid, amount, active=True, **quarters):
    confirmed = QuarterlyBonusStatus(**quarters) if quarters else None
    return IncomeSource(
        id=sid,
        name=f"Bonus {sid}",
        amount=amount,
        frequency=IncomeFrequency.QUARTERLY_BONUS,
        active=active,
        confirmed_quarters=confirmed,
    )


def _salary(sid, amount, frequency=IncomeFrequency.MONTHLY, active=True):
    return IncomeSource(id=sid, name="Gehalt", amount=amount, frequency=frequency, active=active)


class TestIncome:
    """Tests for monthly income with bonus amortization."""

    def test_bonus_amortized_over_year(self):
        """Two confirmed quarters of a 1000 bonus add 166.67 per month."""
        source = _bonus("b1", 1000, Q1=True, Q2=True, Q3=False, Q4=False)
        assert monthly_bonus_income([source]) == pytest.approx(166.67, abs=0.005)

    def test_unconfirmed_bonus_contributes_nothing(self):
        assert monthly_bonus_income([_bonus("b1", 1000)]) == 0

    def test_income_without_bonus_normalizes_yearly(self):
        sources = [
            _salary("s1", 3000),
            _salary("s2", 6000, IncomeFrequency.YEARLY),
            _salary("s3", 9999, active=False),
            _bonus("b1", 1000, Q1=True),
        ]
        assert monthly_income_without_bonus(sources) == 3500
        assert monthly_income(sources) == pytest.approx(3500 + 1000 / 12)

    def test_inactive_bonus_ignored(self):
        assert monthly_bonus_income([_bonus("b1", 1000, active=False, Q1=True)]) == 0


class TestQuarterlyBonusOverview:
    """Tests for the all-sources quarter confirmation."""

    def test_none_without_bonus_sources(self):
        assert quarterly_bonus_overview([_salary("s1", 3000)]) is None
        assert quarterly_bonus_overview([_bonus("b1", 1000, active=False, Q1=True)]) is None

    def test_quarter_requires_every_source(self):
        sources = [
            _bonus("a", 1000, Q1=True, Q2=True),
            _bonus("b", 500, Q1=True),
        ]
        overview = quarterly_bonus_overview(sources)
        assert overview.confirmed_quarters == {"Q1": True, "Q2": False, "Q3": False, "Q4": False}
        assert overview.confirmed_count == 1
        assert overview.total_bonus_per_quarter == 1500
        assert overview.total_confirmed_bonus == 2500
        assert overview.total_potential_bonus == 6000

    def test_source_without_confirmations_blocks_all_quarters(self):
        sources = [
            _bonus("a", 1000, Q1=True, Q2=True, Q3=True, Q4=True),
            _bonus("b", 500),
        ]
        overview = quarterly_bonus_overview(sources)
        assert not any(overview.confirmed_quarters.values())
        assert overview.confirmed_count == 0


class TestIncomeHistory:
    """Tests for recorded yearly income."""

    @pytest.fixture
    def history(self):
        return [
            YearlyIncomeRecord(id="y1", year=2023, base_salary=48000,
                               bonus_q1=1000, bonus_q3=1500, gifts=300, other_income=200),
            YearlyIncomeRecord(id="y2", year=2024, base_salary=50000, bonus_q4=2000),
        ]

    def test_yearly_total(self, history):
        assert yearly_income_total(history, 2023) == 51000
        assert yearly_income_total(history, 2024) == 52000

    def test_yearly_bonus_total(self, history):
        assert yearly_bonus_total(history, 2023) == 2500
        assert yearly_bonus_total(history, 2024) == 2000

    def test_unknown_year_is_zero(self, history):
        assert yearly_income_record(history, 2019) is None
        assert yearly_income_total(history, 2019) == 0
        assert yearly_bonus_total(history, 2019) == 0
        assert yearly_income_total([], 2024) == 0

    def test_rejects_negative_amounts(self):
        with pytest.raises(ValidationError):
            YearlyIncomeRecord(id="y1", year=2024, base_salary=-1)


class TestCostsAndDebt:
    """Tests for cost normalization, debts and credit cards."""

    def test_fixed_costs_normalized_and_active_only(self):
        costs = [
            FixedCost(id="1", name="Miete", amount=900),
            FixedCost(id="2", name="Versicherung", amount=120, frequency=PaymentFrequency.QUARTERLY),
            FixedCost(id="3", name="GEZ", amount=220.32, frequency=PaymentFrequency.YEARLY),
            FixedCost(id="4", name="Alt", amount=500, active=False),
        ]
        assert monthly_fixed_costs(costs) == pytest.approx(900 + 40 + 18.36)

    def test_debt_progress(self):
        debt = Debt(
            id="d1",
            name="Autokredit",
            original_amount=10000,
            current_balance=7500,
            monthly_payment=250,
        )
        progress = debt_progress(debt)
        assert progress.paid_off == 2500
        assert progress.progress == pytest.approx(0.25)

    def test_debt_progress_zero_original(self):
        debt = Debt(id="d1", name="Leer", original_amount=0, current_balance=0, monthly_payment=0)
        assert debt_progress(debt).progress == 0

    def test_credit_card_summary(self):
        cards = [
            CreditCard(id="c1", name="Visa", credit_limit=2000, current_balance=500,
                       monthly_fee=2, annual_fee=30),
            CreditCard(id="c2", name="Amex", credit_limit=3000, current_balance=0, annual_fee=50),
            CreditCard(id="c3", name="Alt", credit_limit=1000, current_balance=900, active=False),
        ]
        summary = credit_card_summary(cards)
        assert summary.active_count == 2
        assert summary.total_balance == 500
        assert summary.total_limit == 5000
        assert summary.utilization_percent == pytest.approx(10.0)
        assert summary.monthly_fees == 2
        assert summary.annual_fees == 80

    def test_credit_card_summary_zero_limit(self):
        assert credit_card_summary([]).utilization_percent == 0


class TestFinancialProfile:
    """Tests for the full profile."""

    def test_profile_key_figures(self):
        profile = compute_financial_profile(
            income_sources=[_salary("s1", 5000)],
            fixed_costs=[FixedCost(id="f1", name="Miete", amount=1500)],
            variable_costs=[VariableCostEstimate(id="v1", category="Lebensmittel", estimated_monthly=500)],
            debts=[Debt(id="d1", name="Kredit", original_amount=20000,
                        current_balance=8000, monthly_payment=500)],
            assets=Assets(savings=12000, investments=8000, other=1000),
        )
        assert profile.monthly_income == 5000
        assert profile.available_income == 2500
        assert profile.total_debt == 8000
        assert profile.total_assets == 21000
        assert profile.net_worth == 13000
        assert profile.debt_to_income_ratio == pytest.approx(0.1)
        assert profile.savings_rate == pytest.approx(0.5)
        assert profile.emergency_fund_months == pytest.approx(6.0)
        # 50 + 25 (savings) + 10 (dti <= 20%) + 10 (6 months)
        assert profile.health_score == 95

    def test_empty_profile_zero_guards(self):
        profile = compute_financial_profile([], [], [], [], None)
        assert profile.monthly_income == 0
        assert profile.debt_to_income_ratio == 0
        assert profile.savings_rate == 0
        assert profile.emergency_fund_months == 0
        assert profile.quarterly_bonus_overview is None
        assert profile.health_score == 50

    def test_savings_rate_can_be_negative(self):
        profile = compute_financial_profile(
            [_salary("s1", 1000)],
            [FixedCost(id="f1", name="Miete", amount=1200)],
            [],
            [],
        )
        assert profile.savings_rate == pytest.approx(-0.2)

    def test_pluggable_health_policy(self):
        calls = []

        def policy(savings_rate, dti, months):
            calls.append((savings_rate, dti, months))
            return 42

        profile = compute_financial_profile([_salary("s1", 1000)], [], [], [], health_policy=policy)
        assert profile.health_score == 42
        assert calls == [(1.0, 0.0, 0.0)]


class TestHealthScore:
    """Tests for the default health score weighting."""

    def test_best_case(self):
        assert calculate_health_score(0.3, 0.0, 6) == 100

    def test_worst_case(self):
        assert calculate_health_score(-0.5, 0.5, 0) == 25

    @pytest.mark.parametrize("savings_rate,expected", [
        (0.2, 25), (0.1, 15), (0.01, 5), (0.0, -10),
    ])
    def test_savings_rate_bands(self, savings_rate, expected):
        # dti 0 (+15) and 3 months (+5) held constant
        assert calculate_health_score(savings_rate, 0.0, 3) == 70 + expected

    @pytest.mark.parametrize("dti,expected", [
        (0.0, 15), (0.2, 10), (0.35, 5), (0.36, -10),
    ])
    def test_debt_to_income_bands(self, dti, expected):
        # savings 10% (+15) and 3 months (+5) held constant
        assert calculate_health_score(0.1, dti, 3) == 70 + expected

    def test_score_is_clamped(self):
        for args in [(1, 0, 100), (-1, 10, 0)]:
            assert 0 <= calculate_health_score(*args) <= 100
