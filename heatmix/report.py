"""Report assembly: ties grid, building and heating methods together.

Flow: height map → Grid → Building.recalculate() → heating methods → BuildingReport
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from heatmix.config import Settings, get_settings
from heatmix.energy_engine.building import Building
from heatmix.energy_engine.grid import Grid
from heatmix.energy_engine.prices import EnergyPrices
from heatmix.energy_engine.templates import load_device_templates
from heatmix.exceptions import ConfigurationError
from heatmix.models import BuildingReport, BuildingZone

logger = logging.getLogger(__name__)


def build_report(building: Building, years: int = 20) -> BuildingReport:
    """Summarise a fully calculated building.

    Args:
        building: Building whose heat balance has been calculated.
        years: Projection period of the long-term costs.

    Raises:
        PreconditionError: If the building has not been calculated.
    """
    if years < 0:
        raise ValueError(f"years must be non-negative, got {years}")

    return BuildingReport(
        name=building.name,
        construction_year=building.construction_year,
        construction_era=building.construction_era,
        zone=building.zone,
        staircase_count=building.staircase_count,
        years=years,
        dimensions=building.dimensions(),
        heat_balance=building.heat_balance(),
        heating_methods=[m.summary(years) for m in building.heating_methods],
    )


def rectangle_grid(length: int, depth: int, storeys: int, margin: int = 0) -> Grid:
    """A ``length × depth`` block of *storeys* floors with *margin* empty cells around it."""
    if length < 1 or depth < 1:
        raise ValueError(f"Footprint must be at least 1x1, got {length}x{depth}")
    grid = Grid(length + 2 * margin, depth + 2 * margin)
    grid.fill_rectangle(margin, margin, length, depth, storeys)
    return grid


def load_height_map(path: str | Path) -> Grid:
    """Read a grid from a JSON list of rows of storey counts.

    Row ``i`` holds the heights at ``y = i``, so the file reads like the
    footprint seen from above with the first row at the bottom.
    """
    path = Path(path)
    try:
        rows = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read height map from {path}: {e}") from e

    if not isinstance(rows, list) or not rows or not all(isinstance(r, list) for r in rows):
        raise ConfigurationError(f"Height map {path} must be a non-empty list of rows")
    widths = {len(r) for r in rows}
    if len(widths) != 1:
        raise ConfigurationError(f"Rows of height map {path} differ in length: {sorted(widths)}")

    # Rows are y, columns are x
    columns = [list(col) for col in zip(*rows)]
    try:
        return Grid.from_heights(columns)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Height map {path} contains invalid heights: {e}") from e


def make_building(
    grid: Grid,
    construction_year: int = 1959,
    zone: BuildingZone = BuildingZone.IV,
    staircase_count: int = 1,
    heat_consumption_override: int | None = None,
    name: str = "New Building",
    settings: Settings | None = None,
) -> Building:
    """Create a building configured from *settings* and run the whole calculation."""
    s = settings or get_settings()
    building = Building(
        grid,
        construction_year=construction_year,
        zone=zone,
        staircase_count=staircase_count,
        name=name,
        heat_consumption_override=heat_consumption_override,
        story_height=s.story_height,
        indoor_temperature=s.indoor_temperature,
        templates=load_device_templates(s.device_templates_path),
        prices=EnergyPrices.from_settings(s),
    )
    building.recalculate()
    logger.info("%s: %s kWh/year", building.name, building.total_heat_consumption)
    return building
