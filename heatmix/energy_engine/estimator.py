"""Rectangular building estimate from a known annual heat consumption.

Starting from a footprint of ``0 × start_depth`` the length grows until
the target is passed. If the maximum length is not enough the depth grows
instead, and once the target is passed the length shrinks back until the
consumption drops below it. At each stop the closer of the two neighbouring
sizes wins.
"""

from __future__ import annotations

import logging

from heatmix.energy_engine import heat_balance as hb
from heatmix.energy_engine.climate import u_values_by_era, year_to_era, zone_temperature_difference
from heatmix.energy_engine.grid import Grid
from heatmix.models import BuildingEstimation, BuildingZone, StructureComposition

logger = logging.getLogger(__name__)

DEFAULT_START_DEPTH = 12
DEFAULT_MAX_DEPTH = 25
DEFAULT_MAX_LENGTH = 100
DEFAULT_STORY_HEIGHT = 3.0
DEFAULT_AIR_REPLACEMENT_RATE = 0.1


def rectangle_consumption(
    length: int,
    depth: int,
    storey_count: int,
    story_height: float,
    construction_year: int,
    zone: BuildingZone,
    air_replacement_rate: float = DEFAULT_AIR_REPLACEMENT_RATE,
) -> int:
    """Annual heat consumption of a ``length × depth`` box of *storey_count* floors."""
    floor_area = length * depth
    wall_area = round(2 * length * story_height * storey_count + 2 * depth * story_height * storey_count)
    volume = round(length * depth * story_height * storey_count)
    gross_area = floor_area * storey_count

    floor_u, roof_u, wall_u = u_values_by_era(year_to_era(construction_year))
    temp_diff = zone_temperature_difference(zone)

    conduction = hb.heat_loss_through_conduction(floor_u, roof_u, wall_u, wall_area, floor_area, temp_diff)
    ventilation = hb.heat_loss_through_ventilation(volume, temp_diff)
    replacement = hb.heat_loss_through_replacement_air(volume, temp_diff, air_replacement_rate)
    water = hb.heat_loss_through_water_heating(hb.heated_water_by_gross_area(gross_area))
    gain = hb.heat_gain_from_total_heat_load(
        gross_area, conduction, ventilation, replacement, temp_diff, StructureComposition.MEDIUM
    )
    return conduction + ventilation + replacement + water - gain


def estimate_building_dimensions(
    target_kwh: int,
    storey_count: int,
    construction_year: int,
    zone: BuildingZone,
    start_depth: int = DEFAULT_START_DEPTH,
    max_depth: int = DEFAULT_MAX_DEPTH,
    start_length: int = 0,
    max_length: int = DEFAULT_MAX_LENGTH,
    story_height: float = DEFAULT_STORY_HEIGHT,
    air_replacement_rate: float = DEFAULT_AIR_REPLACEMENT_RATE,
) -> BuildingEstimation:
    """Search a rectangular footprint whose consumption is closest to *target_kwh*.

    The result is invalid when even the largest allowed footprint stays
    below the target.
    """
    if storey_count < 1:
        raise ValueError(f"storey_count must be at least 1, got {storey_count}")

    zone = BuildingZone(zone)

    def consumption(length: int, depth: int) -> int:
        return rectangle_consumption(
            length, depth, storey_count, story_height, construction_year, zone, air_replacement_rate
        )

    def result(valid: bool, length: int, depth: int, total: int) -> BuildingEstimation:
        return BuildingEstimation(
            valid=valid,
            total_consumption=total,
            depth=depth,
            length=length,
            floor_count=storey_count,
            story_height=story_height,
            zone=zone,
            era=year_to_era(construction_year),
        )

    length = start_length
    depth = start_depth
    previous = consumption(length, depth) if length > 0 else 0

    # Grow the length
    while length < max_length:
        length += 1
        current = consumption(length, depth)
        if current > target_kwh:
            if current - target_kwh > target_kwh - previous and length > 1:
                length -= 1
            return result(True, length, depth, consumption(length, depth))
        previous = current

    # Grow the depth at full length
    while depth < max_depth:
        depth += 1
        current = consumption(length, depth)
        if current > target_kwh:
            previous = current
            break
        previous = current
    else:
        if previous < target_kwh:
            logger.warning(
                "No footprint up to %sx%s reaches %s kWh (got %s)", length, depth, target_kwh, previous
            )
            return result(False, length, depth, previous)

    # Shrink the length back below the target
    while length > 1:
        length -= 1
        current = consumption(length, depth)
        if current < target_kwh:
            if previous - target_kwh < target_kwh - current:
                length += 1
            break
        previous = current

    return result(True, length, depth, consumption(length, depth))


def estimation_grid(estimation: BuildingEstimation, grid_width: int = 100, grid_depth: int = 67) -> Grid:
    """A new grid with the estimated rectangle drawn in its centre."""
    if estimation.length > grid_width or estimation.depth > grid_depth:
        raise ValueError(
            f"Estimated footprint {estimation.length}x{estimation.depth} "
            f"does not fit a {grid_width}x{grid_depth} grid"
        )

    grid = Grid(grid_width, grid_depth)
    start_x = grid_width // 2 - estimation.length // 2
    start_y = grid_depth // 2 - estimation.depth // 2
    grid.fill_rectangle(start_x, start_y, estimation.length, estimation.depth, estimation.floor_count)
    return grid


def apply_estimation(
    building,
    estimation: BuildingEstimation,
    grid_width: int = 100,
    grid_depth: int = 67,
) -> bool:
    """Replace the building's grid with the estimated rectangle, centred.

    Returns False and leaves the building untouched for an invalid estimate.
    """
    if not estimation.valid:
        logger.warning("Estimated building is not valid, grid left unchanged: %s", estimation)
        return False

    building.grid = estimation_grid(estimation, grid_width, grid_depth)
    logger.debug("%s grid replaced by a %sx%s estimate", building.name, estimation.length, estimation.depth)
    return True
