"""
Tests for the cash-flow projection generator.
"""

import pytest
from datetime import date

from finplan.calculations.projection import (
    generate_all_scenarios,
    generate_projection,
    scenario_multiplier,
)
from finplan.models.records import ProjectionSettings, Scenario, ScenarioMultipliers

START = date(2024, 1, 15)


@pytest.fixture
def settings():
    return ProjectionSettings(
        expected_income=4000,
        fixed_costs=1500,
        variable_costs=1000,
        growth_rate=0,
        starting_cash=5000,
        starting_debt=0,
    )


class TestBaseProjection:
    """Tests for the base scenario."""

    def test_first_month(self, settings):
        """Steady budget: 1500 net on top of 5000 starting cash."""
        projection = generate_projection(settings, Scenario.BASE, START)
        assert projection[0].net == 1500
        assert projection[0].cumulative_cash == 6500

    def test_twelve_months_by_default(self, settings):
        projection = generate_projection(settings, Scenario.BASE, START)
        assert len(projection) == 12
        assert [p.index for p in projection] == list(range(12))
        assert projection[-1].cumulative_cash == 5000 + 12 * 1500

    def test_labels_cross_year(self, settings):
        projection = generate_projection(settings, Scenario.BASE, date(2024, 11, 30), months=3)
        assert [p.month for p in projection] == ["2024-11", "2024-12", "2025-01"]

    def test_cumulative_cash_conservation(self):
        settings = ProjectionSettings(
            expected_income=3200,
            fixed_costs=1400,
            variable_costs=900,
            growth_rate=3.5,
            starting_cash=1200,
            starting_debt=2500,
        )
        projection = generate_projection(settings, Scenario.BASE, START, months=24)
        total_net = sum(p.net for p in projection)
        assert projection[-1].cumulative_cash == pytest.approx(1200 - 2500 + total_net)

    def test_growth_compounds_monthly(self):
        settings = ProjectionSettings(expected_income=1000, growth_rate=12)
        projection = generate_projection(settings, Scenario.BASE, START, months=13)
        assert projection[0].income == 1000
        assert projection[6].income == pytest.approx(1000 * 1.12 ** 0.5)
        assert projection[12].income == pytest.approx(1120)

    def test_starting_debt_reduces_cash(self, settings):
        indebted = settings.model_copy(update={"starting_debt": 2000})
        projection = generate_projection(indebted, Scenario.BASE, START)
        assert projection[0].cumulative_cash == 4500

    def test_values_are_unrounded(self):
        settings = ProjectionSettings(expected_income=1000.4, fixed_costs=0.2)
        month = generate_projection(settings, Scenario.BASE, START, months=1)[0]
        assert month.net == pytest.approx(1000.2)
        assert month.rounded().net == 1000


class TestScenarios:
    """Tests for best and worst cases."""

    def test_best_scales_income_only(self, settings):
        month = generate_projection(settings, Scenario.BEST, START)[0]
        assert month.income == pytest.approx(4400)
        assert month.expenses == 2500
        assert month.scenario == Scenario.BEST

    def test_worst_is_asymmetric(self, settings):
        month = generate_projection(settings, Scenario.WORST, START)[0]
        assert month.income == pytest.approx(3600)
        assert month.expenses == pytest.approx(2500 / 0.9)
        assert month.net == pytest.approx(3600 - 2500 / 0.9)

    def test_zero_worst_multiplier_rejected(self, settings):
        broken = settings.model_copy(update={
            "scenario_multipliers": ScenarioMultipliers(best=1.1, worst=0),
        })
        with pytest.raises(ValueError):
            generate_projection(broken, Scenario.WORST, START)

    def test_zero_best_multiplier_is_allowed(self, settings):
        flat = settings.model_copy(update={
            "scenario_multipliers": ScenarioMultipliers(best=0, worst=0.9),
        })
        month = generate_projection(flat, Scenario.BEST, START)[0]
        assert month.income == 0
        assert month.net == -2500

    def test_base_multiplier_is_one(self, settings):
        assert scenario_multiplier(settings, Scenario.BASE) == 1.0

    def test_all_scenarios(self, settings):
        projections = generate_all_scenarios(settings, START, months=6)
        assert set(projections) == {Scenario.BASE, Scenario.BEST, Scenario.WORST}
        assert all(len(p) == 6 for p in projections.values())
        best = projections[Scenario.BEST][-1].cumulative_cash
        base = projections[Scenario.BASE][-1].cumulative_cash
        worst = projections[Scenario.WORST][-1].cumulative_cash
        assert worst < base < best

    def test_all_scenarios_default_length(self, settings):
        projections = generate_all_scenarios(settings, START)
        assert len(projections[Scenario.BASE]) == 12
