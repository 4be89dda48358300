"""Electricity and district heating prices and emission factors.

Each factor can be set directly or through a 0..1 ratio against its
configured range. Every change notifies the subscribed callbacks with the
name of the changed factor, so owners of heating methods can recompute.
"""

from __future__ import annotations

import logging
from typing import Callable

from heatmix.config import Settings, get_settings
from heatmix.models import PriceRange

logger = logging.getLogger(__name__)

PriceListener = Callable[[str], None]

ELECTRICITY_COST = "electricity_cost"
DISTRICT_HEATING_COST = "district_heating_cost"
ELECTRICITY_CO2 = "electricity_co2"
DISTRICT_HEATING_CO2 = "district_heating_co2"


def lerp(minimum: float, maximum: float, ratio: float) -> float:
    """Linear interpolation with *ratio* clamped to 0..1."""
    return PriceRange(min=minimum, max=maximum).lerp(ratio)


class EnergyPrices:
    """Prices in €/kWh and emission factors in g CO2/kWh."""

    def __init__(
        self,
        electricity_cost: float,
        district_heating_cost: float,
        electricity_co2: float,
        district_heating_co2: float,
        electricity_cost_range: PriceRange,
        district_heating_cost_range: PriceRange,
        electricity_co2_range: PriceRange,
        district_heating_co2_range: PriceRange,
    ):
        self._values = {
            ELECTRICITY_COST: electricity_cost,
            DISTRICT_HEATING_COST: district_heating_cost,
            ELECTRICITY_CO2: electricity_co2,
            DISTRICT_HEATING_CO2: district_heating_co2,
        }
        self.ranges = {
            ELECTRICITY_COST: electricity_cost_range,
            DISTRICT_HEATING_COST: district_heating_cost_range,
            ELECTRICITY_CO2: electricity_co2_range,
            DISTRICT_HEATING_CO2: district_heating_co2_range,
        }
        self._listeners: list[PriceListener] = []

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "EnergyPrices":
        s = settings or get_settings()
        return cls(
            electricity_cost=s.electricity_cost,
            district_heating_cost=s.district_heating_cost,
            electricity_co2=s.electricity_co2,
            district_heating_co2=s.district_heating_co2,
            electricity_cost_range=PriceRange(min=s.electricity_cost_range[0], max=s.electricity_cost_range[1]),
            district_heating_cost_range=PriceRange(
                min=s.district_heating_cost_range[0], max=s.district_heating_cost_range[1]
            ),
            electricity_co2_range=PriceRange(min=s.electricity_co2_range[0], max=s.electricity_co2_range[1]),
            district_heating_co2_range=PriceRange(
                min=s.district_heating_co2_range[0], max=s.district_heating_co2_range[1]
            ),
        )

    # --- notifications ---

    def subscribe(self, listener: PriceListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: PriceListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _set(self, name: str, value: float) -> float:
        self._values[name] = value
        logger.debug("%s set to %s", name, value)
        for listener in list(self._listeners):
            listener(name)
        return value

    def _set_ratio(self, name: str, ratio: float) -> float:
        return self._set(name, self.ranges[name].lerp(ratio))

    # --- values ---

    @property
    def electricity_cost(self) -> float:
        return self._values[ELECTRICITY_COST]

    @electricity_cost.setter
    def electricity_cost(self, value: float) -> None:
        self._set(ELECTRICITY_COST, value)

    @property
    def district_heating_cost(self) -> float:
        return self._values[DISTRICT_HEATING_COST]

    @district_heating_cost.setter
    def district_heating_cost(self, value: float) -> None:
        self._set(DISTRICT_HEATING_COST, value)

    @property
    def electricity_co2(self) -> float:
        return self._values[ELECTRICITY_CO2]

    @electricity_co2.setter
    def electricity_co2(self, value: float) -> None:
        self._set(ELECTRICITY_CO2, value)

    @property
    def district_heating_co2(self) -> float:
        return self._values[DISTRICT_HEATING_CO2]

    @district_heating_co2.setter
    def district_heating_co2(self, value: float) -> None:
        self._set(DISTRICT_HEATING_CO2, value)

    # --- ratio setters ---

    def set_electricity_cost_ratio(self, ratio: float) -> float:
        return self._set_ratio(ELECTRICITY_COST, ratio)

    def set_district_heating_cost_ratio(self, ratio: float) -> float:
        return self._set_ratio(DISTRICT_HEATING_COST, ratio)

    def set_electricity_co2_ratio(self, ratio: float) -> float:
        return self._set_ratio(ELECTRICITY_CO2, ratio)

    def set_district_heating_co2_ratio(self, ratio: float) -> float:
        return self._set_ratio(DISTRICT_HEATING_CO2, ratio)

    def __repr__(self) -> str:
        return f"EnergyPrices({self._values})"
