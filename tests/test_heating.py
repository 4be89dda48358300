"""Tests for the heating method hierarchy."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from heatmix.energy_engine.constants import DEFAULT_DEVICE_TEMPLATES
from heatmix.energy_engine.heating import (
    HEATING_METHOD_TYPES,
    AirsourceHeatPumpHeating,
    DistrictHeating,
    GeothermalHeating,
    HeatRecoveryHeating,
    annual_district_base_cost,
    build_heating_methods,
    create_heating_method,
    find_method,
)
from heatmix.exceptions import PreconditionError
from heatmix.models import HeatingTechnology


def _updated(cls, inputs, prices):
    method = cls(DEFAULT_DEVICE_TEMPLATES[cls.technology])
    method.update_values(inputs, prices)
    return method


class TestDistrictBaseCost:
    """Five-bracket district heating base tariff."""

    @pytest.mark.parametrize(
        "quantity, expected",
        [
            (0.5, 6.23 * 742 * 0.5),
            (1.5, 6.23 * (48 + 682 * 1.5)),
            (5.0, 6.23 * (706 + 353 * 5.0)),
            (10.0, 6.23 * (2122 + 176 * 10.0)),
            (20.0, 6.23 * (2400 + 156 * 20.0)),
        ],
    )
    def test_brackets(self, quantity: float, expected: float):
        # demand giving the contracted water quantity in m³/h
        demand = quantity * 4.2 * 2500 * 45 / 3.6
        assert annual_district_base_cost(demand) == pytest.approx(expected)

    def test_zero_demand(self):
        assert annual_district_base_cost(0) == 0.0


class TestRegistry:
    """Closed set of heating technologies."""

    def test_every_technology_has_a_method(self):
        assert set(HEATING_METHOD_TYPES) == set(HeatingTechnology)

    def test_create(self):
        for technology, template in DEFAULT_DEVICE_TEMPLATES.items():
            method = create_heating_method(template)
            assert method.technology == technology
            assert isinstance(method, HEATING_METHOD_TYPES[technology])

    def test_build_order(self):
        methods = build_heating_methods(DEFAULT_DEVICE_TEMPLATES)
        assert [m.technology for m in methods] == list(HeatingTechnology)
        assert find_method(methods, HeatingTechnology.AIRSOURCE) is methods[2]

    def test_template_mismatch(self):
        with pytest.raises(ValueError):
            GeothermalHeating(DEFAULT_DEVICE_TEMPLATES[HeatingTechnology.DISTRICT])

    def test_costs_need_update(self):
        method = DistrictHeating(DEFAULT_DEVICE_TEMPLATES[HeatingTechnology.DISTRICT])
        with pytest.raises(PreconditionError):
            method.calculate_investment_cost()


class TestDistrictHeating:
    """Plain district heating at 50 kW."""

    @pytest.fixture(autouse=True)
    def _method(self, heating_inputs, prices):
        self.method = _updated(DistrictHeating, heating_inputs, prices)

    def test_power_and_shares(self):
        assert self.method.total_power == 50
        assert self.method.renewable_energy_produced == 0
        assert self.method.renewable_ratio == 0.0
        assert self.method.district_heating_consumption == 125_000

    def test_investment(self):
        # 400 €/kW * 50 kW meets the 20 000 € minimum, plus 5 000 € installation
        assert self.method.initial_investment_cost == 25_000
        assert self.method.investment_cost == 25_000

    def test_annual_figures(self):
        base = annual_district_base_cost(125_000)
        assert self.method.annual_dh_operating_cost == pytest.approx(base + 11_250, abs=2)
        assert self.method.annual_re_operating_cost == 0
        assert self.method.annual_dh_co2_amount == 20_000
        assert self.method.annual_re_co2_amount == 0

    @pytest.mark.parametrize("years", [0, 1, 15, 20, 30])
    def test_longterm(self, years: int):
        assert self.method.calculate_longterm_district_energy_cost(years) == (
            years * self.method.annual_dh_operating_cost
        )
        assert self.method.calculate_longterm_renewable_energy_cost(years) == 0
        assert self.method.calculate_longterm_maintenance_costs(years) == 250 * years

    def test_summary(self):
        summary = self.method.summary(20)
        assert summary.technology == HeatingTechnology.DISTRICT
        assert summary.investment_cost == 25_000
        assert summary.longterm_maintenance_cost == 5_000


class TestGeothermalHeating:
    """Ground-source heat pump covering half of a 50 kW load."""

    @pytest.fixture(autouse=True)
    def _method(self, heating_inputs, prices):
        self.method = _updated(GeothermalHeating, heating_inputs, prices)

    def test_shares(self):
        assert self.method.renewable_energy_produced == 62_500
        assert self.method.renewable_ratio == pytest.approx(0.5)
        assert self.method.district_heating_consumption == 62_500

    def test_co2(self):
        assert self.method.annual_dh_co2_amount == 10_000
        # 62 500 kWh / COP 3 at 150 g/kWh
        assert self.method.annual_re_co2_amount == 3_125

    def test_renewable_cost(self):
        assert self.method.annual_re_operating_cost == pytest.approx(3_125, abs=1)

    def test_investment_includes_wells_and_installation(self):
        device = self.method.calculate_device_cost()
        package = int(self.method.cost_per_m3(2800) * 2800)
        wells = int(50 / 3 * 1000 / 45 * 30)
        assert wells == 11_111
        assert self.method.initial_investment_cost == device + package + wells + 19_000

    def test_maintenance(self):
        # One overhaul of the 25 kW unit at half price: 1181.25 €/kW * 25 / 2
        # plus 0.05 €/m² renewable maintenance on 1000 m² for 20 years
        extra = self.method.calculate_longterm_maintenance_costs(20) - self.method.initial_investment_cost
        assert extra == 14_765 + 1_000

    def test_longterm_renewable(self):
        assert self.method.calculate_longterm_renewable_energy_cost(20) == (
            20 * self.method.annual_re_operating_cost
        )


class TestAirsourceHeating:
    """Air-source heat pump covering a third of the load."""

    @pytest.fixture(autouse=True)
    def _method(self, heating_inputs, prices):
        self.method = _updated(AirsourceHeatPumpHeating, heating_inputs, prices)

    def test_shares(self):
        assert self.method.renewable_energy_produced == 41_666
        assert self.method.renewable_ratio == pytest.approx(1 / 3, rel=1e-4)
        assert self.method.district_heating_consumption == 83_334

    def test_minimum_device_cost(self):
        # 987.5 €/kW * 25 kW is below the 28 000 € minimum
        assert self.method.calculate_device_cost() == 28_000
        package = int(self.method.cost_per_m3(2800) * 2800)
        assert self.method.initial_investment_cost == 28_000 + package + 19_000

    def test_maintenance_exceeds_investment(self):
        assert self.method.calculate_longterm_maintenance_costs(20) > self.method.initial_investment_cost
        assert self.method.calculate_longterm_maintenance_costs(10) == (
            self.method.initial_investment_cost + 10 * 50
        )


class TestHeatRecoveryHeating:
    """Exhaust air heat pump, one unit per staircase."""

    @pytest.fixture(autouse=True)
    def _method(self, heating_inputs, prices):
        self.inputs = heating_inputs
        self.prices = prices
        self.method = _updated(HeatRecoveryHeating, heating_inputs, prices)

    def test_recovery_power(self):
        assert self.method.heat_recovery_power() == pytest.approx(2800 / 7.2 * 1.2 * 20 / 1000)

    def test_renewable_share(self):
        expected = int(125_000 * self.method.heat_recovery_power() / 50)
        assert self.method.renewable_energy_produced == expected

    def test_investment_per_staircase(self):
        one = self.method.calculate_investment_cost(1)
        two = self.method.calculate_investment_cost(2)
        assert self.method.initial_investment_cost == two
        assert two - one == self.method.calculate_device_cost() + 2_500

    def test_maintenance_uses_recovery_unit_price(self):
        power = self.method.heat_recovery_power()
        assert self.method.maintained_unit_power() == pytest.approx(power)
        assert self.method.renewable_maintenance_rate == pytest.approx(0.25)
        overhaul = int(1 * (self.method.cost_per_kw(power) * power / 2))
        assert self.method.calculate_longterm_maintenance_costs(20) == (
            self.method.initial_investment_cost + overhaul + int(1000 * 0.25) * 20
        )

    def test_longterm_renewable(self):
        assert self.method.calculate_longterm_renewable_energy_cost(20) == (
            20 * self.method.annual_re_operating_cost
        )

    def test_zero_power_has_no_renewable_share(self, prices):
        inputs = SimpleNamespace(total_heat_consumption=0, gross_area=0, gross_volume=0, staircase_count=1)
        method = _updated(HeatRecoveryHeating, inputs, prices)
        assert method.renewable_energy_produced == 0
        assert method.renewable_ratio == 0.0
        assert method.district_heating_consumption == 0


class TestPriceSensitivity:
    """Methods pick up the prices they were updated with."""

    def test_dearer_electricity_raises_renewable_cost(self, heating_inputs, prices):
        cheap = _updated(GeothermalHeating, heating_inputs, prices)
        prices.electricity_cost = 0.30
        dear = _updated(GeothermalHeating, heating_inputs, prices)
        assert dear.annual_re_operating_cost > cheap.annual_re_operating_cost
        assert dear.annual_dh_operating_cost == cheap.annual_dh_operating_cost

    def test_zero_consumption_is_defined(self, prices):
        inputs = SimpleNamespace(total_heat_consumption=0, gross_area=100, gross_volume=280, staircase_count=1)
        for cls in HEATING_METHOD_TYPES.values():
            method = _updated(cls, inputs, prices)
            assert method.renewable_ratio == 0.0
            assert method.total_power == 0
