"""Construction era, U-value and climate zone lookups."""

from __future__ import annotations

import bisect
import math

from heatmix.energy_engine.constants import (
    DEFAULT_WINDOW_RATIO,
    ERA_BREAKPOINTS,
    ERA_REPRESENTATIVE_YEARS,
    INDOOR_TEMPERATURE,
    U_VALUES,
    ZONE_AVERAGE_TEMPERATURE,
)
from heatmix.models import BuildingZone

ERA_COUNT = len(ERA_REPRESENTATIVE_YEARS)


def year_to_era(year: int) -> int:
    """Map a construction year to one of the 7 eras (0 = before 1976)."""
    return bisect.bisect_right(ERA_BREAKPOINTS, year)


def era_to_year(era: int) -> int:
    """Return the first year of *era*; unknown eras map to the newest one."""
    if 0 <= era < ERA_COUNT:
        return ERA_REPRESENTATIVE_YEARS[era]
    return ERA_REPRESENTATIVE_YEARS[-1]


def u_values_by_era(era: int, window_ratio: float = DEFAULT_WINDOW_RATIO) -> tuple[float, float, float]:
    """Return ``(floor_u, roof_u, wall_and_window_u)`` for *era*.

    The wall value blends opaque wall and windows:
    ``(1 - window_ratio) * wall_u + window_ratio * window_u``.
    Eras outside 0..6 use the newest values.
    """
    u = U_VALUES.get(era, U_VALUES[ERA_COUNT - 1])
    wall_and_window_u = (1.0 - window_ratio) * u["wall"] + window_ratio * u["window"]
    return u["floor"], u["roof"], wall_and_window_u


def u_value_average_of_era(era: int, floor_area: float, roof_area: float, wall_area: float) -> float:
    """Area-weighted mean U-value of the whole envelope."""
    floor_u, roof_u, wall_u = u_values_by_era(era)
    total_area = floor_area + roof_area + wall_area
    if total_area <= 0:
        return 0.0
    return (
        wall_area / total_area * wall_u
        + roof_area / total_area * roof_u
        + floor_area / total_area * floor_u
    )


def average_temperature_of_zone(zone: BuildingZone) -> float:
    """Annual average outdoor temperature of *zone* in °C."""
    return ZONE_AVERAGE_TEMPERATURE[BuildingZone(zone)]


def temperature_difference(indoor: float, outdoor: float) -> float:
    return indoor - outdoor


def zone_temperature_difference(zone: BuildingZone, indoor: float = INDOOR_TEMPERATURE) -> float:
    """Indoor minus average outdoor temperature for *zone*."""
    return temperature_difference(indoor, average_temperature_of_zone(zone))


def get_percent(value: float, decimals: int) -> float:
    """Express a ratio as a percentage floored to *decimals* places."""
    power = 10 ** decimals
    return math.floor(value * 100.0 * power) / power
