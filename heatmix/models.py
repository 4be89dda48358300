"""Shared Pydantic data models for the heatmix engine."""

from __future__ import annotations

from enum import Enum
from typing import Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Enums ---

class BuildingZone(str, Enum):
    """Climate zones I (south, mildest) to IV (north, coldest)."""
    I = "I"
    II = "II"
    III = "III"
    IV = "IV"


class StructureComposition(str, Enum):
    """Thermal mass class of the load-bearing structure."""
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


class BuildingType(str, Enum):
    """Usage type, only relevant for the effective heat capacity table."""
    DETACHED_HOME = "detached_home"
    APARTMENT_BUILDING = "apartment_building"
    OFFICE_BUILDING = "office_building"


class HeatingTechnology(str, Enum):
    """District heating and the hybrid devices that can be attached to it.

    Declaration order is the order of a building's heating method array.
    """
    DISTRICT = "district"
    GEOTHERMAL = "geothermal"
    AIRSOURCE = "airsource"
    HEAT_RECOVERY = "heat_recovery"


class BuildingState(str, Enum):
    """How far the calculation chain of a building has progressed."""
    UNINITIALIZED = "uninitialized"
    DIMENSIONS_CALCULATED = "dimensions_calculated"
    HEAT_BALANCE_CALCULATED = "heat_balance_calculated"


class DatasetKind(str, Enum):
    """Figures the presentation layer can request as a dataset."""
    TOTAL_KWH = "total_kwh"
    ANNUAL_COST = "annual_cost"
    ANNUAL_CO2 = "annual_co2"
    LONGTERM_COST = "longterm_cost"


# --- Configuration models ---

class CostCurve(BaseModel):
    """Piecewise-linear response curve, clamped outside its key range."""
    model_config = ConfigDict(frozen=True)

    keys: list[tuple[float, float]] = Field(min_length=1)

    @field_validator("keys")
    @classmethod
    def _increasing(cls, keys: list[tuple[float, float]]) -> list[tuple[float, float]]:
        xs = [x for x, _ in keys]
        if any(b <= a for a, b in zip(xs, xs[1:])):
            raise ValueError("curve keys must have strictly increasing x values")
        return keys

    def evaluate(self, x: float) -> float:
        xs = [k[0] for k in self.keys]
        ys = [k[1] for k in self.keys]
        return float(np.interp(x, xs, ys))


class DeviceTemplate(BaseModel):
    """Tunables of one heating technology, loaded as a named asset."""
    technology: HeatingTechnology
    cop_multiplier: float = Field(default=3.0, gt=0)
    renewable_divider: Optional[float] = Field(default=None, gt=0)
    cost_per_kw_curve: CostCurve
    cost_per_m3_curve: CostCurve


class PriceRange(BaseModel):
    """Adjustable range of a price or emission factor."""
    model_config = ConfigDict(frozen=True)

    min: float
    max: float

    def lerp(self, ratio: float) -> float:
        ratio = min(max(ratio, 0.0), 1.0)
        return self.min + (self.max - self.min) * ratio


# --- Result models ---

class Dimensions(BaseModel):
    """Measurements of a building derived from its footprint grid."""
    model_config = ConfigDict(frozen=True)

    gross_area: int       # m², all storeys
    gross_volume: int     # m³
    envelope_area: int    # m²
    floor_area: int       # m², footprint seen from above
    wall_area: int        # m²
    highest_level: int    # storeys


class HeatBalance(BaseModel):
    """Annual heat balance of a building (kWh/year)."""
    model_config = ConfigDict(frozen=True)

    conduction: int
    ventilation: int
    air_infiltration: int
    water_heating: int
    internal_gain: int
    total_heat_consumption: int
    daily_heated_water: float  # m³/day
    manual_override: bool = False


class HeatingMethodSummary(BaseModel):
    """Cached figures of one heating method after an update."""
    technology: HeatingTechnology
    total_power: int                     # kW
    renewable_ratio: float
    renewable_energy: int                # kWh/year
    district_heating_consumption: int    # kWh/year
    investment_cost: int                 # €
    annual_dh_operating_cost: int        # €/year
    annual_re_operating_cost: int        # €/year
    annual_dh_co2: int                   # kg/year
    annual_re_co2: int                   # kg/year
    longterm_district_energy_cost: int   # € over the projection period
    longterm_renewable_energy_cost: int  # €
    longterm_maintenance_cost: int       # €


class BuildingReport(BaseModel):
    """Everything the presentation layer shows for one building."""
    name: str
    construction_year: int
    construction_era: int
    zone: BuildingZone
    staircase_count: int
    years: int
    dimensions: Dimensions
    heat_balance: HeatBalance
    heating_methods: list[HeatingMethodSummary]


class BuildingEstimation(BaseModel):
    """Rectangular footprint estimated from a target consumption."""
    model_config = ConfigDict(frozen=True)

    valid: bool
    total_consumption: int
    depth: int
    length: int
    floor_count: int
    story_height: float
    zone: BuildingZone
    era: int


# --- Presentation interchange ---

class DataPoint(BaseModel):
    """A single named value handed to the presentation layer."""
    model_config = ConfigDict(frozen=True)

    name: str
    value: float
    index: int
    extra_info: str = ""


class Dataset(BaseModel):
    """Ordered data points sharing one unit."""
    unit: str = ""
    data: list[DataPoint] = Field(default_factory=list)

    @property
    def data_point_count(self) -> int:
        return len(self.data)
