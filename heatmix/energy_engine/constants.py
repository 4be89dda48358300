"""
Constants for the heat-balance and heating-cost engine.

Lookup tables follow the Finnish building code (Ympäristöministeriö U-value
requirements by construction era) and the "Energialaskenta" and Granlund
cost spreadsheets the cost model was calibrated against.
Cost curves are defaults only; deployments override them through a device
template file (see heatmix.energy_engine.templates).
"""

from __future__ import annotations

from heatmix.models import (
    BuildingType,
    BuildingZone,
    CostCurve,
    DeviceTemplate,
    HeatingTechnology,
    StructureComposition,
)

# ---------------------------------------------------------------------------
# PHYSICAL CONSTANTS
# ---------------------------------------------------------------------------
AIR_DENSITY: float = 1.2                     # kg/m³
AIR_SPECIFIC_HEAT_CAPACITY: float = 1006.0   # J/(kg·K)
WATER_DENSITY: float = 1000.0                # kg/m³
WATER_SPECIFIC_HEAT_CAPACITY: float = 4.2    # kJ/(kg·K)
HEATED_WATER_TEMPERATURE: float = 55.0       # °C
COLD_WATER_TEMPERATURE: float = 5.0          # °C
INDOOR_TEMPERATURE: float = 21.0             # °C
UTILISATION_PERIOD_OF_MAXIMUM_LOAD: float = 2500.0  # h/a
STORY_HEIGHT: float = 2.8                    # m
HOURS_PER_YEAR: int = 8760

# Ground under the floor slab is warmer than the outdoor average
FLOOR_TEMPERATURE_OFFSET: float = 2.0        # K

# ---------------------------------------------------------------------------
# CONSTRUCTION ERAS
# Upper year bounds (exclusive) of eras 0..5, era 6 is everything after.
# ---------------------------------------------------------------------------
ERA_BREAKPOINTS: list[int] = [1976, 1978, 1985, 2003, 2008, 2010]

# First year of each era, used when only the era is known
ERA_REPRESENTATIVE_YEARS: list[int] = [1975, 1976, 1978, 1985, 2003, 2008, 2010]

# ---------------------------------------------------------------------------
# U-VALUES by construction era (W/m²K)
# Keys: wall, floor, roof, window
# ---------------------------------------------------------------------------
U_VALUES: dict[int, dict[str, float]] = {
    0: {"wall": 0.81, "floor": 0.47, "roof": 0.47, "window": 2.8},   # -1975
    1: {"wall": 0.40, "floor": 0.40, "roof": 0.35, "window": 2.1},   # 1976-1977
    2: {"wall": 0.35, "floor": 0.40, "roof": 0.29, "window": 2.1},   # 1978-1984
    3: {"wall": 0.28, "floor": 0.36, "roof": 0.22, "window": 1.4},   # 1985-2002
    4: {"wall": 0.24, "floor": 0.24, "roof": 0.15, "window": 1.4},   # 2003-2007
    5: {"wall": 0.24, "floor": 0.24, "roof": 0.15, "window": 1.4},   # 2008-2009
    6: {"wall": 0.17, "floor": 0.16, "roof": 0.09, "window": 1.0},   # 2010-
}

DEFAULT_WINDOW_RATIO: float = 0.2

# ---------------------------------------------------------------------------
# AVERAGE OUTDOOR TEMPERATURE by climate zone (°C)
# ---------------------------------------------------------------------------
ZONE_AVERAGE_TEMPERATURE: dict[BuildingZone, float] = {
    BuildingZone.I: 5.0,
    BuildingZone.II: 4.0,
    BuildingZone.III: 2.0,
    BuildingZone.IV: 0.0,
}

# ---------------------------------------------------------------------------
# VENTILATION AND INFILTRATION
# ---------------------------------------------------------------------------
AIR_REPLACEMENT_RATE: float = 0.1       # 1/h
AIRFLOW_VOLUME_DIVIDER: float = 2.0     # half of the volume per hour

# ---------------------------------------------------------------------------
# HOT WATER
# 600 L per gross m² per year, or 50 L per resident per day
# ---------------------------------------------------------------------------
WATER_USAGE_PER_GROSS_AREA: float = 600.0   # L/m²/a
WATER_USAGE_PER_RESIDENT: float = 50.0      # L/day

# ---------------------------------------------------------------------------
# INTERNAL HEAT LOAD per gross m² (kWh/m²/a)
# Used by the gain utilisation method.
# ---------------------------------------------------------------------------
HEAT_LOAD_ELECTRICAL_EQUIPMENT: float = 80.0
HEAT_LOAD_RESIDENTS: float = 17.0
HEAT_LOAD_HEATED_WATER: float = 15.0

# Time constant reference of the utilisation factor (h)
GAIN_UTILISATION_TAU_REFERENCE: float = 15.0

# Daily internal gain factors (kWh/m²/day) and usage ratios
GAIN_DEVICES_PER_AREA: float = 0.009
GAIN_DEVICES_USAGE: float = 0.1
GAIN_LIGHTING_PER_AREA: float = 0.004
GAIN_LIGHTING_USAGE: float = 0.6
GAIN_RESIDENTS_PER_AREA: float = 0.003
GAIN_RESIDENTS_PRESENCE: float = 0.6
GAIN_PER_RESIDENT: float = 0.085            # kWh/day

# ---------------------------------------------------------------------------
# EFFECTIVE HEAT CAPACITY of the building (Wh/(m²·K))
# ---------------------------------------------------------------------------
EFFECTIVE_HEAT_CAPACITY: dict[BuildingType, dict[StructureComposition, float]] = {
    BuildingType.DETACHED_HOME: {
        StructureComposition.LIGHT: 40.0,
        StructureComposition.MEDIUM: 90.0,
        StructureComposition.HEAVY: 200.0,
    },
    BuildingType.APARTMENT_BUILDING: {
        StructureComposition.LIGHT: 40.0,
        StructureComposition.MEDIUM: 160.0,
        StructureComposition.HEAVY: 220.0,
    },
    BuildingType.OFFICE_BUILDING: {
        StructureComposition.LIGHT: 70.0,
        StructureComposition.MEDIUM: 110.0,
        StructureComposition.HEAVY: 160.0,
    },
}

# ---------------------------------------------------------------------------
# DISTRICT HEATING BASE TARIFF (Energialaskenta)
# Brackets of contracted water quantity (m³/h): (upper bound, constant, slope)
# cost = K1 * (constant + slope * quantity)
# ---------------------------------------------------------------------------
DISTRICT_HEATING_K1_MULTIPLIER: float = 6.23
DISTRICT_WATER_TEMPERATURE_DROP: float = 45.0   # K
DISTRICT_BASE_TARIFF: list[tuple[float, float, float]] = [
    (0.8, 0.0, 742.0),
    (2.0, 48.0, 682.0),
    (8.0, 706.0, 353.0),
    (15.0, 2122.0, 176.0),
    (float("inf"), 2400.0, 156.0),
]

# ---------------------------------------------------------------------------
# DEVICE COSTS (Granlund)
# ---------------------------------------------------------------------------
MAINTENANCE_PER_SQ_METER_DH: float = 0.25       # €/m²/a
MAINTENANCE_INTERVAL_YEARS: int = 15            # pump overhaul, half the unit price

DISTRICT_INSTALL_COST: int = 5000
DISTRICT_MINIMUM_DEVICE_COST: int = 20000

HYBRID_INSTALL_COST: int = 2000 + 5000 + 10000 + 2000
HYBRID_MINIMUM_DEVICE_COST: int = 5000

GEOTHERMAL_POWER_DIVIDER: float = 3.0
GEOTHERMAL_MINIMUM_COST: int = 9500
GEOTHERMAL_WELL_METERS_PER_KW: float = 1000.0 / 45.0   # 45 W per well meter
GEOTHERMAL_WELL_COST_PER_METER: float = 30.0
GEOTHERMAL_MAINTENANCE_RATE: float = 0.3                # €/m²/a incl. district share

AIRSOURCE_POWER_DIVIDER: float = 2.0
AIRSOURCE_MINIMUM_COST: int = 28000
AIRSOURCE_MAINTENANCE_RATE: float = 0.3

HEAT_RECOVERY_MINIMUM_COST: int = 5800
HEAT_RECOVERY_INSTALL_COST: int = 2000 + 10000 + 2000
HEAT_RECOVERY_INSTALL_PER_STAIRCASE: int = 2500
HEAT_RECOVERY_MAINTENANCE_RATE: float = 0.5
# kW = volume / 7.2 * 1.2 * 20 / 1000
HEAT_RECOVERY_AIR_CHANGE_DIVIDER: float = 7.2
HEAT_RECOVERY_TEMPERATURE_DROP: float = 20.0

# ---------------------------------------------------------------------------
# DEFAULT DEVICE TEMPLATES
# Cost per kW falls with unit size; cost per m³ covers the shared
# district-heating connection package of a hybrid installation.
# ---------------------------------------------------------------------------
_HYBRID_PACKAGE_CURVE = CostCurve(
    keys=[(0.0, 3.0), (5000.0, 2.0), (20000.0, 1.2), (100000.0, 0.8)]
)

DEFAULT_DEVICE_TEMPLATES: dict[HeatingTechnology, DeviceTemplate] = {
    HeatingTechnology.DISTRICT: DeviceTemplate(
        technology=HeatingTechnology.DISTRICT,
        cost_per_kw_curve=CostCurve(
            keys=[(0.0, 600.0), (50.0, 400.0), (200.0, 250.0), (1000.0, 150.0)]
        ),
        cost_per_m3_curve=CostCurve(keys=[(0.0, 0.0)]),
    ),
    HeatingTechnology.GEOTHERMAL: DeviceTemplate(
        technology=HeatingTechnology.GEOTHERMAL,
        renewable_divider=2.0,
        cost_per_kw_curve=CostCurve(
            keys=[(0.0, 1500.0), (20.0, 1200.0), (100.0, 900.0), (500.0, 700.0)]
        ),
        cost_per_m3_curve=_HYBRID_PACKAGE_CURVE,
    ),
    HeatingTechnology.AIRSOURCE: DeviceTemplate(
        technology=HeatingTechnology.AIRSOURCE,
        renewable_divider=3.0,
        cost_per_kw_curve=CostCurve(
            keys=[(0.0, 1200.0), (20.0, 1000.0), (100.0, 800.0), (500.0, 650.0)]
        ),
        cost_per_m3_curve=_HYBRID_PACKAGE_CURVE,
    ),
    HeatingTechnology.HEAT_RECOVERY: DeviceTemplate(
        technology=HeatingTechnology.HEAT_RECOVERY,
        cost_per_kw_curve=CostCurve(
            keys=[(0.0, 2500.0), (5.0, 1800.0), (20.0, 1200.0), (100.0, 900.0)]
        ),
        cost_per_m3_curve=_HYBRID_PACKAGE_CURVE,
    ),
}

# ---------------------------------------------------------------------------
# PRESENTATION NAMES (translation keys used by the UI)
# ---------------------------------------------------------------------------
DEVICE_NAMES: dict[HeatingTechnology, str] = {
    HeatingTechnology.DISTRICT: "device_District",
    HeatingTechnology.GEOTHERMAL: "device_Geothermal",
    HeatingTechnology.AIRSOURCE: "device_Airsource",
    HeatingTechnology.HEAT_RECOVERY: "device_HeatRecovery",
}
