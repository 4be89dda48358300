"""
Building heat-balance model.

A building is measured from its footprint grid, then its annual heat
balance is calculated, then its heating methods are rebuilt:

    calculate_dimensions()       Uninitialized          -> DimensionsCalculated
    calculate_heating_values()   DimensionsCalculated   -> HeatBalanceCalculated
                                 (rebuilds the heating methods as its last step)

Total consumption = conduction + ventilation + infiltration + hot water
- utilised internal gains, unless a manual consumption override is set.
"""

from __future__ import annotations

import logging
from typing import Optional

from heatmix.energy_engine import heat_balance as hb
from heatmix.energy_engine.climate import (
    u_values_by_era,
    year_to_era,
    zone_temperature_difference,
)
from heatmix.energy_engine.constants import INDOOR_TEMPERATURE, STORY_HEIGHT, ZONE_AVERAGE_TEMPERATURE
from heatmix.energy_engine.grid import Grid
from heatmix.energy_engine.heating import HeatingMethod, build_heating_methods, find_method
from heatmix.energy_engine.prices import EnergyPrices
from heatmix.energy_engine.templates import default_device_templates
from heatmix.exceptions import PreconditionError
from heatmix.models import (
    BuildingState,
    BuildingType,
    BuildingZone,
    DeviceTemplate,
    Dimensions,
    HeatBalance,
    HeatingTechnology,
    StructureComposition,
)

logger = logging.getLogger(__name__)


def _whole(value: float) -> int:
    """Truncate to whole units, ignoring float noise such as 111.99999999999999."""
    return int(round(value, 6))


class Building:
    """A building drawn on a footprint grid.

    The grid is shared with whoever edits it; the building only reads it
    when ``calculate_dimensions()`` runs.
    """

    def __init__(
        self,
        grid: Grid,
        construction_year: int = 1959,
        zone: BuildingZone = BuildingZone.IV,
        staircase_count: int = 1,
        name: str = "New Building",
        heat_consumption_override: Optional[int] = None,
        structure_composition: StructureComposition = StructureComposition.MEDIUM,
        building_type: BuildingType = BuildingType.APARTMENT_BUILDING,
        story_height: float = STORY_HEIGHT,
        indoor_temperature: float = INDOOR_TEMPERATURE,
        templates: Optional[dict[HeatingTechnology, DeviceTemplate]] = None,
        prices: Optional[EnergyPrices] = None,
    ):
        self.state = BuildingState.UNINITIALIZED
        self._dimensions: Optional[Dimensions] = None
        self._heat_balance: Optional[HeatBalance] = None
        self._heating_methods: tuple[HeatingMethod, ...] = ()

        self.name = name
        self._grid = grid
        self._construction_year = construction_year
        self._zone = BuildingZone(zone)
        self.staircase_count = staircase_count
        self.heat_consumption_override = heat_consumption_override
        self.structure_composition = StructureComposition(structure_composition)
        self.building_type = BuildingType(building_type)
        self.story_height = story_height
        self.indoor_temperature = indoor_temperature
        self.templates = templates or default_device_templates()
        self.prices = prices

    # --- inputs ---

    @property
    def grid(self) -> Grid:
        return self._grid

    @grid.setter
    def grid(self, grid: Grid) -> None:
        self._grid = grid
        self._invalidate(BuildingState.UNINITIALIZED)

    @property
    def construction_year(self) -> int:
        return self._construction_year

    @construction_year.setter
    def construction_year(self, year: int) -> None:
        self._construction_year = year
        self._invalidate(BuildingState.DIMENSIONS_CALCULATED)

    @property
    def construction_era(self) -> int:
        return year_to_era(self._construction_year)

    @property
    def zone(self) -> BuildingZone:
        return self._zone

    @zone.setter
    def zone(self, zone: BuildingZone) -> None:
        self._zone = BuildingZone(zone)
        self._invalidate(BuildingState.DIMENSIONS_CALCULATED)

    @property
    def staircase_count(self) -> int:
        return self._staircase_count

    @staircase_count.setter
    def staircase_count(self, count: int) -> None:
        if count < 1:
            raise ValueError(f"A building needs at least one staircase, got {count}")
        self._staircase_count = count

    @property
    def heat_consumption_override(self) -> Optional[int]:
        """Manually entered annual consumption in kWh, None when calculated."""
        return self._heat_consumption_override

    @heat_consumption_override.setter
    def heat_consumption_override(self, value: Optional[int]) -> None:
        if value is not None and value <= 0:
            raise ValueError(f"Heat consumption override must be positive, got {value}")
        self._heat_consumption_override = value

    @property
    def indoor_temperature(self) -> float:
        return self._indoor_temperature

    @indoor_temperature.setter
    def indoor_temperature(self, value: float) -> None:
        warmest = max(ZONE_AVERAGE_TEMPERATURE.values())
        if value <= warmest:
            raise ValueError(
                f"Indoor temperature must be above {warmest} °C, the warmest zone average, got {value}"
            )
        self._indoor_temperature = value
        self._invalidate(BuildingState.DIMENSIONS_CALCULATED)

    @property
    def calculate_heat_loss(self) -> bool:
        return self._heat_consumption_override is None

    def _invalidate(self, state: BuildingState) -> None:
        """Fall back to *state* if the building had progressed past it."""
        order = list(BuildingState)
        if order.index(self.state) > order.index(state):
            self.state = state
            if state == BuildingState.UNINITIALIZED:
                self._dimensions = None
            self._heat_balance = None
            self._heating_methods = ()

    # --- envelope ---

    @property
    def floor_u(self) -> float:
        return u_values_by_era(self.construction_era)[0]

    @property
    def roof_u(self) -> float:
        return u_values_by_era(self.construction_era)[1]

    @property
    def wall_and_window_u(self) -> float:
        return u_values_by_era(self.construction_era)[2]

    @property
    def temperature_difference(self) -> float:
        return zone_temperature_difference(self._zone, self.indoor_temperature)

    # --- dimensions ---

    def calculate_dimensions(self) -> Dimensions:
        """Measure the grid.

        Raises:
            IncompleteGridError: If the grid has missing cells.
        """
        self._grid.validate()
        sh = self.story_height
        self._dimensions = Dimensions(
            gross_area=_whole(self._grid.calculate_gross_area()),
            gross_volume=_whole(self._grid.calculate_volume(sh)),
            envelope_area=_whole(self._grid.calculate_envelope_area(sh)),
            floor_area=_whole(self._grid.calculate_horizontal_area()),
            wall_area=_whole(self._grid.calculate_wall_area(sh)),
            highest_level=self._grid.highest_level(),
        )
        self._heat_balance = None
        self._heating_methods = ()
        self.state = BuildingState.DIMENSIONS_CALCULATED
        logger.debug("%s dimensions: %s", self.name, self._dimensions)
        return self._dimensions

    def dimensions(self) -> Dimensions:
        if self._dimensions is None:
            raise PreconditionError(f"Dimensions of {self.name!r} have not been calculated")
        return self._dimensions

    @property
    def gross_area(self) -> int:
        return self._dimensions.gross_area if self._dimensions else 0

    @property
    def gross_volume(self) -> int:
        return self._dimensions.gross_volume if self._dimensions else 0

    @property
    def envelope_area(self) -> int:
        return self._dimensions.envelope_area if self._dimensions else 0

    @property
    def floor_area(self) -> int:
        return self._dimensions.floor_area if self._dimensions else 0

    @property
    def wall_area(self) -> int:
        return self._dimensions.wall_area if self._dimensions else 0

    @property
    def highest_level(self) -> int:
        return self._dimensions.highest_level if self._dimensions else 0

    # --- heat balance ---

    def calculate_heating_values(self) -> HeatBalance:
        """Calculate the annual heat balance and rebuild the heating methods.

        Raises:
            PreconditionError: If the dimensions have not been calculated.
        """
        if self._dimensions is None:
            raise PreconditionError(
                f"calculate_dimensions() must run before the heat balance of {self.name!r}"
            )
        d = self._dimensions
        temp_diff = self.temperature_difference

        if self.calculate_heat_loss:
            conduction = hb.heat_loss_through_conduction(
                self.floor_u, self.roof_u, self.wall_and_window_u, d.wall_area, d.floor_area, temp_diff
            )
        else:
            conduction = 0
        ventilation = hb.heat_loss_through_ventilation(d.gross_volume, temp_diff)
        infiltration = hb.heat_loss_through_replacement_air(d.gross_volume, temp_diff)
        water = hb.heat_loss_through_water_heating(hb.heated_water_by_gross_area(d.gross_area))
        gain = hb.heat_gain_from_total_heat_load(
            d.gross_area,
            conduction,
            ventilation,
            infiltration,
            temp_diff,
            self.structure_composition,
            self.building_type,
        )

        if self.calculate_heat_loss:
            total = conduction + ventilation + infiltration + water - gain
        else:
            total = self._heat_consumption_override
            logger.info("%s uses a manual consumption of %s kWh", self.name, total)

        self._heat_balance = HeatBalance(
            conduction=conduction,
            ventilation=ventilation,
            air_infiltration=infiltration,
            water_heating=water,
            internal_gain=gain,
            total_heat_consumption=total,
            daily_heated_water=hb.heated_water_by_gross_area(d.gross_area) / 365.0,
            manual_override=not self.calculate_heat_loss,
        )
        self.state = BuildingState.HEAT_BALANCE_CALCULATED
        logger.debug(
            "%s heat balance: conduction=%s ventilation=%s infiltration=%s water=%s gain=%s total=%s",
            self.name, conduction, ventilation, infiltration, water, gain, total,
        )

        self.update_heating_devices()
        return self._heat_balance

    def recalculate(self) -> HeatBalance:
        """Run the whole chain: dimensions, heat balance, heating methods."""
        self.calculate_dimensions()
        return self.calculate_heating_values()

    def heat_balance(self) -> HeatBalance:
        if self._heat_balance is None:
            raise PreconditionError(f"Heat balance of {self.name!r} has not been calculated")
        return self._heat_balance

    @property
    def total_heat_consumption(self) -> int:
        return self._heat_balance.total_heat_consumption if self._heat_balance else 0

    @property
    def heat_consumption_due_to_conduction(self) -> int:
        return self._heat_balance.conduction if self._heat_balance else 0

    @property
    def heat_consumption_due_to_ventilation(self) -> int:
        return self._heat_balance.ventilation if self._heat_balance else 0

    @property
    def heat_consumption_due_to_air_infiltration(self) -> int:
        return self._heat_balance.air_infiltration if self._heat_balance else 0

    @property
    def heat_consumption_due_to_water_heating(self) -> int:
        return self._heat_balance.water_heating if self._heat_balance else 0

    @property
    def heat_gain_due_to_internal_sources(self) -> int:
        return self._heat_balance.internal_gain if self._heat_balance else 0

    @property
    def daily_heated_water_consumption(self) -> float:
        return self._heat_balance.daily_heated_water if self._heat_balance else 0.0

    # --- heating methods ---

    def update_heating_devices(self) -> list[HeatingMethod]:
        """Replace the heating methods with fresh ones fed by the current balance.

        The new methods are fully calculated before they are published.

        Raises:
            PreconditionError: If the heat balance has not been calculated.
        """
        if self._heat_balance is None:
            raise PreconditionError(
                f"calculate_heating_values() must run before the heating methods of {self.name!r}"
            )
        if self.prices is None:
            self.prices = EnergyPrices.from_settings()

        methods = build_heating_methods(self.templates)
        for method in methods:
            method.update_values(self, self.prices)
        self._heating_methods = tuple(methods)

        logger.debug("%s heating methods rebuilt: %s", self.name, methods)
        return list(self._heating_methods)

    @property
    def heating_methods(self) -> list[HeatingMethod]:
        return list(self._heating_methods)

    def heating_method(self, technology: HeatingTechnology) -> HeatingMethod:
        if not self._heating_methods:
            raise PreconditionError(f"Heating methods of {self.name!r} have not been calculated")
        return find_method(self._heating_methods, HeatingTechnology(technology))

    def watch_prices(self, prices: EnergyPrices) -> None:
        """Recalculate the heating methods whenever *prices* change."""
        if self.prices is not None:
            self.prices.unsubscribe(self._on_price_change)
        self.prices = prices
        prices.subscribe(self._on_price_change)

    def _on_price_change(self, name: str) -> None:
        if self.state == BuildingState.HEAT_BALANCE_CALCULATED:
            logger.debug("%s changed, updating heating methods of %s", name, self.name)
            self.update_heating_devices()

    def __repr__(self) -> str:
        return (
            f"Building(name={self.name!r}, year={self._construction_year}, "
            f"zone={self._zone.value}, state={self.state.value})"
        )
