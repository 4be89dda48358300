"""Shared fixtures for tests."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from heatmix.energy_engine.building import Building
from heatmix.energy_engine.grid import Grid
from heatmix.energy_engine.prices import EnergyPrices
from heatmix.models import BuildingZone, PriceRange


@pytest.fixture
def prices() -> EnergyPrices:
    """Fixed prices independent of the environment."""
    return EnergyPrices(
        electricity_cost=0.15,
        district_heating_cost=0.09,
        electricity_co2=150.0,
        district_heating_co2=160.0,
        electricity_cost_range=PriceRange(min=0.05, max=0.40),
        district_heating_cost_range=PriceRange(min=0.04, max=0.15),
        electricity_co2_range=PriceRange(min=50.0, max=400.0),
        district_heating_co2_range=PriceRange(min=50.0, max=250.0),
    )


@pytest.fixture
def square_grid() -> Grid:
    """A fully occupied 10x10 grid, one storey everywhere."""
    grid = Grid(10, 10)
    grid.fill_rectangle(0, 0, 10, 10, 1)
    return grid


@pytest.fixture
def apartment_block(prices) -> Building:
    """A 1970s four-storey 20x12 block with two staircases in northern Finland."""
    grid = Grid(30, 20)
    grid.fill_rectangle(5, 4, 20, 12, 4)
    return Building(
        grid,
        construction_year=1972,
        zone=BuildingZone.IV,
        staircase_count=2,
        name="Block A",
        prices=prices,
    )


@pytest.fixture
def modern_house(square_grid, prices) -> Building:
    """A post-2010 single-storey building in the mildest zone."""
    return Building(
        square_grid,
        construction_year=2015,
        zone=BuildingZone.I,
        name="Modern",
        prices=prices,
    )


@pytest.fixture
def heating_inputs() -> SimpleNamespace:
    """Building figures chosen so that the total power is exactly 50 kW."""
    return SimpleNamespace(
        total_heat_consumption=125_000,
        gross_area=1000,
        gross_volume=2800,
        staircase_count=2,
    )
