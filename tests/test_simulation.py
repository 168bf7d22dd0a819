"""
Tests for the investment and FIRE simulation engine.
"""

import pytest
from datetime import date

from finplan.calculations.simulation import (
    calculate_compound_interest,
    fire_target,
    project_portfolio,
    run_simulation,
    years_to_fire,
)
from finplan.models.records import SimulationParams

START = date(2024, 1, 1)


class TestPortfolioProjection:
    """Tests for the month-by-month compounding path."""

    def test_compounding_steps(self):
        rows = project_portfolio(1000, 100, 0.12, 2, START)
        assert len(rows) == 3
        assert [r.portfolio_value for r in rows] == pytest.approx([1000, 1110, 1221.1])
        assert [r.contributions for r in rows] == [1000, 1100, 1200]
        assert rows[2].returns == pytest.approx(21.1)

    def test_no_return_no_contribution_is_constant(self):
        rows = project_portfolio(2500, 0, 0, 24, START)
        assert len(rows) == 25
        assert all(r.portfolio_value == 2500 for r in rows)
        assert all(r.returns == 0 for r in rows)

    def test_row_labels(self):
        rows = project_portfolio(0, 0, 0, 13, date(2024, 12, 5))
        assert rows[0].label == "2024-12"
        assert rows[1].label == "2025-01"
        assert rows[12].year == 1
        assert rows[13].month == 13


class TestFire:
    """Tests for the FIRE target and years-to-FIRE search."""

    def test_fire_target_four_percent_rule(self):
        assert fire_target(2000) == pytest.approx(600000)
        assert fire_target(2000, 0.05) == pytest.approx(480000)

    @pytest.mark.parametrize("annual_return", [0.0, 0.05, 0.5])
    def test_no_contribution_never_reaches_fire(self, annual_return):
        assert years_to_fire(100000, 0, annual_return, 1.0) is None

    def test_no_return_never_reaches_fire(self):
        assert years_to_fire(0, 1000, 0, 10) is None

    def test_target_reached_after_first_step_is_zero_years(self):
        assert years_to_fire(1000, 100, 0.12, 1100) == 0

    def test_years_are_fractional_months(self):
        # 1000 * 1.01 + 100 = 1110, then 1221.1, then 1333.31
        assert years_to_fire(1000, 100, 0.12, 1300) == pytest.approx(2 / 12)

    def test_unreachable_within_bound(self):
        assert years_to_fire(0, 1, 0.01, 1e12) is None
        assert years_to_fire(0, 1000, 0.07, 600000, max_months=12) is None

    def test_result_is_bounded(self):
        years = years_to_fire(0, 500, 0.05, 300000)
        assert years is not None
        assert 0 <= years < 50


class TestCompoundInterest:
    """Tests for the standalone compound interest helper."""

    def test_principal_only(self):
        assert calculate_compound_interest(1000, 0, 0.12, 1) == pytest.approx(1000 * 1.01 ** 12)

    def test_contributions_without_interest(self):
        assert calculate_compound_interest(0, 100, 0, 2) == pytest.approx(2400)

    def test_zero_years(self):
        assert calculate_compound_interest(1000, 100, 0.07, 0) == 1000


class TestRunSimulation:
    """Tests for the current vs. simulated budget comparison."""

    def _params(self, **overrides):
        values = dict(
            current_income=4000,
            current_fixed_costs=1500,
            current_variable_costs=1000,
            simulated_income=4000,
            simulated_fixed_costs=1500,
            simulated_variable_costs=500,
            expected_return=0.07,
            savings_rate=0.5,
            time_horizon_years=1,
        )
        values.update(overrides)
        return SimulationParams(**values)

    def test_budget_comparison(self):
        result = run_simulation(self._params(), START)
        assert result.current_available == 1500
        assert result.current_savings_rate == pytest.approx(0.375)
        assert result.current_yearly_savings == 18000
        assert result.simulated_available == 2000
        assert result.simulated_savings_rate == pytest.approx(0.5)
        assert result.available_diff == 500
        assert result.yearly_savings_diff == 6000
        assert result.variable_costs_diff == -500
        assert result.total_expenses_diff == -500

    def test_contribution_and_projection(self):
        result = run_simulation(self._params(expected_return=0, current_portfolio=5000), START)
        assert result.monthly_contribution == 1000
        assert len(result.investment_projection) == 13
        assert result.final_portfolio_value == 17000
        assert result.total_contributions == 17000
        assert result.total_returns == 0

    def test_fire_figures(self):
        result = run_simulation(self._params(), START)
        assert result.fire_target == pytest.approx(600000)
        assert result.years_to_fire is not None
        assert result.fire_achievable is True

    def test_deficit_means_no_contribution(self):
        """A negative simulated surplus invests nothing, so FIRE is never reached."""
        result = run_simulation(self._params(simulated_income=1000), START)
        assert result.simulated_available == -1000
        assert result.simulated_yearly_savings == 0
        assert result.monthly_contribution == 0
        assert result.years_to_fire is None
        assert result.fire_achievable is False

    def test_zero_income_guard(self):
        result = run_simulation(
            self._params(current_income=0, simulated_income=0),
            START,
        )
        assert result.current_savings_rate == 0
        assert result.simulated_savings_rate == 0
