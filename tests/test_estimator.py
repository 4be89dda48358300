"""Tests for the rectangular building estimator."""

from __future__ import annotations

import pytest

from heatmix.energy_engine.building import Building
from heatmix.energy_engine.estimator import (
    apply_estimation,
    estimate_building_dimensions,
    estimation_grid,
    rectangle_consumption,
)
from heatmix.energy_engine.grid import Grid
from heatmix.models import BuildingEstimation, BuildingZone


class TestRectangleConsumption:
    """Consumption of a plain box."""

    def test_grows_with_length(self):
        small = rectangle_consumption(10, 12, 3, 3.0, 1980, BuildingZone.II)
        large = rectangle_consumption(20, 12, 3, 3.0, 1980, BuildingZone.II)
        assert 0 < small < large

    def test_grows_with_storeys(self):
        low = rectangle_consumption(20, 12, 2, 3.0, 1980, BuildingZone.II)
        high = rectangle_consumption(20, 12, 5, 3.0, 1980, BuildingZone.II)
        assert low < high


class TestEstimate:
    """Footprint search."""

    def setup_method(self):
        self.year = 1975
        self.zone = BuildingZone.III
        self.storeys = 3

    def _consumption(self, length: int, depth: int) -> int:
        return rectangle_consumption(length, depth, self.storeys, 3.0, self.year, self.zone)

    def test_reaches_target_by_length(self):
        target = self._consumption(40, 12) + 10
        est = estimate_building_dimensions(target, self.storeys, self.year, self.zone)
        assert est.valid
        assert est.depth == 12
        assert est.length in (40, 41)
        assert est.total_consumption == self._consumption(est.length, est.depth)

    def test_picks_the_closer_length(self):
        below = self._consumption(30, 12)
        above = self._consumption(31, 12)
        est = estimate_building_dimensions(below + 1, self.storeys, self.year, self.zone)
        assert est.length == 30
        est = estimate_building_dimensions(above - 1, self.storeys, self.year, self.zone)
        assert est.length == 31

    def test_grows_depth_when_length_is_exhausted(self):
        target = self._consumption(100, 12) + 1
        est = estimate_building_dimensions(target, self.storeys, self.year, self.zone)
        assert est.valid
        assert est.depth == 13
        assert est.length < 100
        miss = abs(est.total_consumption - target)
        assert miss <= abs(self._consumption(est.length - 1, 13) - target)
        assert miss <= abs(self._consumption(est.length + 1, 13) - target)

    def test_unreachable_target_is_invalid(self):
        target = self._consumption(100, 25) * 2
        est = estimate_building_dimensions(target, self.storeys, self.year, self.zone)
        assert not est.valid
        assert est.depth == 25
        assert est.length == 100

    def test_metadata(self):
        est = estimate_building_dimensions(200_000, 4, 2012, BuildingZone.I)
        assert est.floor_count == 4
        assert est.era == 6
        assert est.zone == BuildingZone.I
        assert est.story_height == 3.0

    def test_storeys_must_be_positive(self):
        with pytest.raises(ValueError):
            estimate_building_dimensions(100_000, 0, 1990, BuildingZone.I)


class TestApplyEstimation:
    """Drawing the estimate on a fresh grid."""

    def setup_method(self):
        self.estimation = BuildingEstimation(
            valid=True,
            total_consumption=100_000,
            depth=12,
            length=30,
            floor_count=3,
            story_height=3.0,
            zone=BuildingZone.II,
            era=2,
        )

    def test_grid_is_centred(self):
        grid = estimation_grid(self.estimation)
        assert (grid.width, grid.depth) == (100, 67)
        heights = grid.heights()
        occupied = heights.nonzero()
        assert occupied[0].min() == 35 and occupied[0].max() == 64
        assert occupied[1].min() == 27 and occupied[1].max() == 38
        assert grid.calculate_gross_area() == 30 * 12 * 3

    def test_apply_replaces_grid(self):
        building = Building(Grid(1, 1))
        assert apply_estimation(building, self.estimation)
        dims = building.calculate_dimensions()
        assert dims.floor_area == 360
        assert dims.highest_level == 3

    def test_invalid_estimation_keeps_grid(self):
        original = Grid(1, 1)
        building = Building(original)
        invalid = self.estimation.model_copy(update={"valid": False})
        assert not apply_estimation(building, invalid)
        assert building.grid is original

    def test_too_large_for_grid(self):
        with pytest.raises(ValueError):
            estimation_grid(self.estimation, grid_width=20, grid_depth=20)
