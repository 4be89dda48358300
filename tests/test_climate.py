"""Tests for era, U-value and climate zone lookups."""

from __future__ import annotations

import pytest

from heatmix.energy_engine.climate import (
    average_temperature_of_zone,
    era_to_year,
    get_percent,
    temperature_difference,
    u_value_average_of_era,
    u_values_by_era,
    year_to_era,
    zone_temperature_difference,
)
from heatmix.models import BuildingZone


class TestEras:
    """Construction year to era mapping."""

    @pytest.mark.parametrize(
        "year, era",
        [
            (1900, 0),
            (1975, 0),
            (1976, 1),
            (1977, 1),
            (1978, 2),
            (1984, 2),
            (1985, 3),
            (2002, 3),
            (2003, 4),
            (2007, 4),
            (2008, 5),
            (2009, 5),
            (2010, 6),
            (2015, 6),
            (2100, 6),
        ],
    )
    def test_breakpoints(self, year: int, era: int):
        assert year_to_era(year) == era

    def test_monotonic(self):
        eras = [year_to_era(y) for y in range(1900, 2031)]
        assert eras == sorted(eras)

    @pytest.mark.parametrize("era", range(7))
    def test_era_to_year_round_trip(self, era: int):
        assert year_to_era(era_to_year(era)) == era

    def test_unknown_era_maps_to_newest(self):
        assert era_to_year(42) == 2010


class TestUValues:
    """Envelope U-value lookups."""

    def test_newest_era(self):
        floor_u, roof_u, wall_u = u_values_by_era(year_to_era(2015))
        assert floor_u == pytest.approx(0.16)
        assert roof_u == pytest.approx(0.09)
        assert wall_u == pytest.approx(0.8 * 0.17 + 0.2 * 1.0)

    def test_window_ratio(self):
        _, _, opaque = u_values_by_era(0, window_ratio=0.0)
        _, _, glass = u_values_by_era(0, window_ratio=1.0)
        assert opaque == pytest.approx(0.81)
        assert glass == pytest.approx(2.8)

    def test_older_eras_insulate_worse(self):
        old = u_values_by_era(0)
        new = u_values_by_era(6)
        assert all(o > n for o, n in zip(old, new))

    def test_area_weighted_average(self):
        assert u_value_average_of_era(6, 100, 100, 0) == pytest.approx(0.125)
        assert u_value_average_of_era(6, 0, 0, 0) == 0.0


class TestClimate:
    """Zone temperatures."""

    @pytest.mark.parametrize(
        "zone, temperature",
        [
            (BuildingZone.I, 5.0),
            (BuildingZone.II, 4.0),
            (BuildingZone.III, 2.0),
            (BuildingZone.IV, 0.0),
        ],
    )
    def test_zone_temperatures(self, zone: BuildingZone, temperature: float):
        assert average_temperature_of_zone(zone) == temperature

    def test_temperature_difference(self):
        assert temperature_difference(21.0, 5.0) == 16.0
        assert zone_temperature_difference(BuildingZone.IV) == 21.0
        assert zone_temperature_difference("I", indoor=20.0) == 15.0

    def test_get_percent_floors(self):
        assert get_percent(0.5, 0) == 50.0
        assert get_percent(0.3333, 1) == pytest.approx(33.3)
        assert get_percent(0.129, 0) == 12.0
