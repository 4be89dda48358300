"""
Heating methods: district heating and the hybrid devices attached to it.

Every method splits a building's annual heat consumption into a district
heating share and a renewable share, and prices both:

    TotalPower        = consumption / 2500 h                          (kW)
    DH consumption    = consumption * (1 - renewable ratio)           (kWh)
    DH annual cost    = base tariff(DH consumption) + DH consumption * DH price
    RE annual cost    = renewable energy / COP * electricity price
    DH CO2            = DH consumption * DH factor / 1000             (kg)
    RE CO2            = renewable energy * electricity factor / COP / 1000
    Investment        = max(cost/kW(P_dev) * P_dev, minimum) * units
                        + cost/m³(V) * V   (hybrid connection package)

Variants differ only in device power, minimum cost, installation surcharge
and renewable share. Money is whole euros, CO2 whole kilograms.
"""

from __future__ import annotations

import logging
from typing import ClassVar, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

from heatmix.energy_engine.constants import (
    AIR_DENSITY,
    AIRSOURCE_MAINTENANCE_RATE,
    AIRSOURCE_MINIMUM_COST,
    AIRSOURCE_POWER_DIVIDER,
    DISTRICT_BASE_TARIFF,
    DISTRICT_HEATING_K1_MULTIPLIER,
    DISTRICT_INSTALL_COST,
    DISTRICT_MINIMUM_DEVICE_COST,
    DISTRICT_WATER_TEMPERATURE_DROP,
    GEOTHERMAL_MAINTENANCE_RATE,
    GEOTHERMAL_MINIMUM_COST,
    GEOTHERMAL_POWER_DIVIDER,
    GEOTHERMAL_WELL_COST_PER_METER,
    GEOTHERMAL_WELL_METERS_PER_KW,
    HEAT_RECOVERY_AIR_CHANGE_DIVIDER,
    HEAT_RECOVERY_INSTALL_COST,
    HEAT_RECOVERY_INSTALL_PER_STAIRCASE,
    HEAT_RECOVERY_MAINTENANCE_RATE,
    HEAT_RECOVERY_MINIMUM_COST,
    HEAT_RECOVERY_TEMPERATURE_DROP,
    HYBRID_INSTALL_COST,
    HYBRID_MINIMUM_DEVICE_COST,
    MAINTENANCE_INTERVAL_YEARS,
    MAINTENANCE_PER_SQ_METER_DH,
    UTILISATION_PERIOD_OF_MAXIMUM_LOAD,
    WATER_SPECIFIC_HEAT_CAPACITY,
)
from heatmix.energy_engine.prices import EnergyPrices
from heatmix.exceptions import PreconditionError
from heatmix.models import DeviceTemplate, HeatingMethodSummary, HeatingTechnology

logger = logging.getLogger(__name__)


class HeatingInputs(BaseModel):
    """Building figures a heating method needs, captured at update time."""
    model_config = ConfigDict(frozen=True)

    total_heat_consumption: int
    gross_area: int = Field(ge=0)
    gross_volume: int = Field(ge=0)
    staircase_count: int = Field(default=1, ge=1)

    @classmethod
    def from_building(cls, building) -> "HeatingInputs":
        return cls(
            total_heat_consumption=building.total_heat_consumption,
            gross_area=building.gross_area,
            gross_volume=building.gross_volume,
            staircase_count=building.staircase_count,
        )


def annual_district_base_cost(demand: float, k1_multiplier: float = DISTRICT_HEATING_K1_MULTIPLIER) -> float:
    """Annual fixed district heating fee for *demand*.

    The demand is converted to a contracted water flow (m³/h) and priced
    by the bracket it falls into.
    """
    quantity = (
        demand
        / WATER_SPECIFIC_HEAT_CAPACITY
        / UTILISATION_PERIOD_OF_MAXIMUM_LOAD
        / DISTRICT_WATER_TEMPERATURE_DROP
        * 3.6
    )
    for upper, constant, slope in DISTRICT_BASE_TARIFF:
        if quantity <= upper:
            break
    return k1_multiplier * (constant + slope * quantity)


class HeatingMethod:
    """Plain district heating; base of the hybrid variants."""

    technology: ClassVar[HeatingTechnology] = HeatingTechnology.DISTRICT

    device_power_divider: float = 1.0
    device_minimum_cost: int = HYBRID_MINIMUM_DEVICE_COST
    # Total €/m²/a maintenance rate including the district heating share
    maintenance_rate: float = MAINTENANCE_PER_SQ_METER_DH

    def __init__(self, template: DeviceTemplate):
        if template.technology != self.technology:
            raise ValueError(
                f"{type(self).__name__} needs a {self.technology.value} template, "
                f"got {template.technology.value}"
            )
        self.template = template
        self.cop_multiplier = template.cop_multiplier
        self.k1_multiplier = DISTRICT_HEATING_K1_MULTIPLIER

        self.inputs: Optional[HeatingInputs] = None
        self.prices: Optional[EnergyPrices] = None

        self.total_heat_consumption = 0
        self.renewable_energy_produced = 0
        self.initial_investment_cost = 0
        self.annual_dh_operating_cost = 0
        self.annual_re_operating_cost = 0
        self.annual_dh_co2_amount = 0
        self.annual_re_co2_amount = 0

    # --- update ---

    def update_values(self, building, prices: EnergyPrices) -> None:
        """Capture *building* and *prices* and recompute every cached figure.

        Order matters: costs read the renewable energy, investment reads
        nothing cached, CO2 reads the renewable energy again.
        """
        self.inputs = HeatingInputs.from_building(building)
        self.prices = prices
        self.total_heat_consumption = self.inputs.total_heat_consumption

        self.renewable_energy_produced = self.calculate_renewable_energy_produced()
        self.annual_dh_operating_cost = self.calculate_annual_district_energy_cost()
        self.annual_re_operating_cost = self.calculate_annual_renewable_energy_cost()
        self.initial_investment_cost = self.calculate_investment_cost()
        self.annual_dh_co2_amount = self.calculate_annual_district_co2_amount()
        self.annual_re_co2_amount = self.calculate_annual_renewable_co2_amount()

        logger.debug(
            "%s updated: consumption=%s renewable=%s investment=%s dh_cost=%s re_cost=%s",
            self.technology.value,
            self.total_heat_consumption,
            self.renewable_energy_produced,
            self.initial_investment_cost,
            self.annual_dh_operating_cost,
            self.annual_re_operating_cost,
        )

    def _require_inputs(self) -> HeatingInputs:
        if self.inputs is None or self.prices is None:
            raise PreconditionError(
                f"{type(self).__name__}.update_values() must run before costs can be calculated"
            )
        return self.inputs

    # --- derived figures ---

    @property
    def total_power(self) -> int:
        """Peak heating power in kW."""
        return int(self.total_heat_consumption / UTILISATION_PERIOD_OF_MAXIMUM_LOAD)

    @property
    def renewable_ratio(self) -> float:
        if self.total_heat_consumption == 0:
            return 0.0
        return self.renewable_energy_produced / self.total_heat_consumption

    @property
    def district_heating_consumption(self) -> int:
        return round(self.total_heat_consumption * (1.0 - self.renewable_ratio))

    @property
    def investment_cost(self) -> int:
        return self.calculate_investment_cost()

    @property
    def annual_operating_cost(self) -> int:
        return self.annual_dh_operating_cost + self.annual_re_operating_cost

    # --- cost curves ---

    def cost_per_kw(self, power: float) -> float:
        return self.template.cost_per_kw_curve.evaluate(power)

    def cost_per_m3(self, volume: float) -> float:
        return self.template.cost_per_m3_curve.evaluate(volume)

    # --- calculations ---

    def calculate_annual_district_base_cost(self, demand: float) -> float:
        return annual_district_base_cost(demand, self.k1_multiplier)

    def device_power(self) -> float:
        """Power of the device this method installs, in kW."""
        return self.total_power / self.device_power_divider

    def calculate_device_cost(self, unit_count: int = 1) -> int:
        """Price of *unit_count* devices, each at least the minimum cost."""
        power = self.device_power()
        cost = int(self.cost_per_kw(power) * power)
        if cost < self.device_minimum_cost:
            cost = self.device_minimum_cost
        return cost * unit_count

    def calculate_investment_cost(self, staircase_count: int = 1) -> int:
        """Devices plus one hybrid connection package per building."""
        inputs = self._require_inputs()
        cost = self.calculate_device_cost(staircase_count)
        cost += int(self.cost_per_m3(inputs.gross_volume) * inputs.gross_volume)
        return cost

    def calculate_renewable_energy_produced(self) -> int:
        return 0

    def calculate_annual_district_energy_cost(self) -> int:
        self._require_inputs()
        consumption = self.district_heating_consumption
        base_cost = self.calculate_annual_district_base_cost(consumption)
        energy_cost = int(consumption * self.prices.district_heating_cost)
        return int(base_cost + energy_cost)

    def calculate_annual_renewable_energy_cost(self) -> int:
        self._require_inputs()
        return int(self.renewable_energy_produced / self.cop_multiplier * self.prices.electricity_cost)

    def calculate_annual_district_co2_amount(self) -> int:
        self._require_inputs()
        return int(self.district_heating_consumption * self.prices.district_heating_co2 / 1000)

    def calculate_annual_renewable_co2_amount(self) -> int:
        self._require_inputs()
        return int(
            self.renewable_energy_produced * self.prices.electricity_co2 / self.cop_multiplier / 1000
        )

    # --- long-term projections ---

    def calculate_longterm_district_energy_cost(self, years: int) -> int:
        return self.annual_dh_operating_cost * years

    def calculate_longterm_renewable_energy_cost(self, years: int) -> int:
        return 0

    def calculate_longterm_maintenance_costs(self, years: int) -> int:
        inputs = self._require_inputs()
        return int(inputs.gross_area * MAINTENANCE_PER_SQ_METER_DH) * years

    def summary(self, years: int = 20) -> HeatingMethodSummary:
        return HeatingMethodSummary(
            technology=self.technology,
            total_power=self.total_power,
            renewable_ratio=self.renewable_ratio,
            renewable_energy=self.renewable_energy_produced,
            district_heating_consumption=self.district_heating_consumption,
            investment_cost=self.initial_investment_cost,
            annual_dh_operating_cost=self.annual_dh_operating_cost,
            annual_re_operating_cost=self.annual_re_operating_cost,
            annual_dh_co2=self.annual_dh_co2_amount,
            annual_re_co2=self.annual_re_co2_amount,
            longterm_district_energy_cost=self.calculate_longterm_district_energy_cost(years),
            longterm_renewable_energy_cost=self.calculate_longterm_renewable_energy_cost(years),
            longterm_maintenance_cost=self.calculate_longterm_maintenance_costs(years),
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(consumption={self.total_heat_consumption}, "
            f"renewable={self.renewable_energy_produced}, investment={self.initial_investment_cost})"
        )


class DistrictHeating(HeatingMethod):
    """District heating only; the baseline every hybrid is compared with."""

    technology = HeatingTechnology.DISTRICT

    def calculate_investment_cost(self, staircase_count: int = 1) -> int:
        self._require_inputs()
        power = self.total_power
        device_cost = int(self.cost_per_kw(power) * power)
        if device_cost < DISTRICT_MINIMUM_DEVICE_COST:
            device_cost = DISTRICT_MINIMUM_DEVICE_COST
        return DISTRICT_INSTALL_COST + device_cost


class HybridHeating(HeatingMethod):
    """Shared long-term cost rules of the renewable hybrids."""

    def maintained_unit_power(self) -> float:
        """Power of the unit whose overhaul is charged every 15 years."""
        return self.device_power()

    @property
    def renewable_maintenance_rate(self) -> float:
        return round(self.maintenance_rate - MAINTENANCE_PER_SQ_METER_DH, 6)

    def calculate_longterm_renewable_energy_cost(self, years: int) -> int:
        return self.annual_re_operating_cost * years

    def calculate_longterm_maintenance_costs(self, years: int) -> int:
        """Investment, an overhaul at half the unit price every 15 years and
        the per-m² renewable maintenance."""
        inputs = self._require_inputs()
        power = self.maintained_unit_power()
        total = self.initial_investment_cost
        total += int((years // MAINTENANCE_INTERVAL_YEARS) * (self.cost_per_kw(power) * power / 2))
        total += int(inputs.gross_area * self.renewable_maintenance_rate) * years
        return total


class GeothermalHeating(HybridHeating):
    """Ground-source heat pump covering part of the load."""

    technology = HeatingTechnology.GEOTHERMAL

    device_power_divider = GEOTHERMAL_POWER_DIVIDER
    device_minimum_cost = GEOTHERMAL_MINIMUM_COST
    maintenance_rate = GEOTHERMAL_MAINTENANCE_RATE

    def __init__(self, template: DeviceTemplate):
        super().__init__(template)
        # 2 means half of the energy is geothermal
        self.geothermal_divider = template.renewable_divider or 2.0

    def calculate_investment_cost(self, staircase_count: int = 1) -> int:
        device_cost = super().calculate_investment_cost()
        well_cost = int(
            self.total_power / self.device_power_divider
            * GEOTHERMAL_WELL_METERS_PER_KW
            * GEOTHERMAL_WELL_COST_PER_METER
        )
        return device_cost + well_cost + HYBRID_INSTALL_COST

    def calculate_renewable_energy_produced(self) -> int:
        return int(self.total_heat_consumption / self.geothermal_divider)

    def maintained_unit_power(self) -> float:
        return self.total_power / self.geothermal_divider


class AirsourceHeatPumpHeating(HybridHeating):
    """Air-to-water heat pump covering part of the load."""

    technology = HeatingTechnology.AIRSOURCE

    device_power_divider = AIRSOURCE_POWER_DIVIDER
    device_minimum_cost = AIRSOURCE_MINIMUM_COST
    maintenance_rate = AIRSOURCE_MAINTENANCE_RATE

    def __init__(self, template: DeviceTemplate):
        super().__init__(template)
        # 3 means a third of the energy comes from outdoor air
        self.airsource_divider = template.renewable_divider or 3.0

    def calculate_investment_cost(self, staircase_count: int = 1) -> int:
        return super().calculate_investment_cost() + HYBRID_INSTALL_COST

    def calculate_renewable_energy_produced(self) -> int:
        return int(self.total_heat_consumption / self.airsource_divider)

    def maintained_unit_power(self) -> float:
        return self.total_power / self.airsource_divider


class HeatRecoveryHeating(HybridHeating):
    """Exhaust air heat pump, one unit per staircase."""

    technology = HeatingTechnology.HEAT_RECOVERY

    device_minimum_cost = HEAT_RECOVERY_MINIMUM_COST
    maintenance_rate = HEAT_RECOVERY_MAINTENANCE_RATE

    def heat_recovery_power(self) -> float:
        """Recoverable power in kW from the exhaust airflow of the building."""
        inputs = self._require_inputs()
        return (
            inputs.gross_volume
            / HEAT_RECOVERY_AIR_CHANGE_DIVIDER
            * AIR_DENSITY
            * HEAT_RECOVERY_TEMPERATURE_DROP
            / 1000
        )

    def device_power(self) -> float:
        return self.heat_recovery_power()

    def calculate_investment_cost(self, staircase_count: Optional[int] = None) -> int:
        inputs = self._require_inputs()
        staircases = inputs.staircase_count if staircase_count is None else staircase_count
        device_cost = super().calculate_investment_cost(staircases)
        install_cost = HEAT_RECOVERY_INSTALL_COST + HEAT_RECOVERY_INSTALL_PER_STAIRCASE * staircases
        return device_cost + install_cost

    def calculate_renewable_energy_produced(self) -> int:
        if self.total_power == 0:
            return 0
        return int(self.total_heat_consumption * (self.heat_recovery_power() / self.total_power))


HEATING_METHOD_TYPES: dict[HeatingTechnology, type[HeatingMethod]] = {
    HeatingTechnology.DISTRICT: DistrictHeating,
    HeatingTechnology.GEOTHERMAL: GeothermalHeating,
    HeatingTechnology.AIRSOURCE: AirsourceHeatPumpHeating,
    HeatingTechnology.HEAT_RECOVERY: HeatRecoveryHeating,
}


def create_heating_method(template: DeviceTemplate) -> HeatingMethod:
    return HEATING_METHOD_TYPES[template.technology](template)


def build_heating_methods(templates: dict[HeatingTechnology, DeviceTemplate]) -> list[HeatingMethod]:
    """One fresh heating method per technology, in declaration order."""
    return [create_heating_method(templates[technology]) for technology in HeatingTechnology]


def find_method(methods: Iterable[HeatingMethod], technology: HeatingTechnology) -> HeatingMethod:
    for method in methods:
        if method.technology == technology:
            return method
    raise KeyError(technology)
