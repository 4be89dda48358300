"""
Annual heat-loss and heat-gain formulas.

All results are kWh per year rounded to whole kWh unless noted.

    Conduction:   Q_c = Σ U·A·ΔT·t / 1000
                  floor uses ΔT - 2 K (ground is warmer than outdoor air)
    Ventilation:  Q_v = ρ·c·q·r_day·r_week·(1 - η_hr)·ΔT·t / 1000,  q = V / 2 / 3600
    Infiltration: Q_i = ρ·c·n·V·ΔT·t / 3.6e6
    Hot water:    Q_w = ρ_w·c_w·V_w·(55 - 5) / 3600
    Gains:        η·Q_load, η from the gain utilisation method (EN ISO 13790):
                  H = Q_loss / (ΔT·t) / 1000,  τ = C_eff / H,  a = 1 + τ/15,
                  γ = Q_load / Q_loss,
                  η = a/(a+1) if γ >= 1 else (1 - γ^a) / (1 - γ^(a+1))
"""

from __future__ import annotations

from heatmix.energy_engine.constants import (
    AIR_DENSITY,
    AIR_REPLACEMENT_RATE,
    AIR_SPECIFIC_HEAT_CAPACITY,
    AIRFLOW_VOLUME_DIVIDER,
    COLD_WATER_TEMPERATURE,
    EFFECTIVE_HEAT_CAPACITY,
    FLOOR_TEMPERATURE_OFFSET,
    GAIN_DEVICES_PER_AREA,
    GAIN_DEVICES_USAGE,
    GAIN_LIGHTING_PER_AREA,
    GAIN_LIGHTING_USAGE,
    GAIN_PER_RESIDENT,
    GAIN_RESIDENTS_PER_AREA,
    GAIN_RESIDENTS_PRESENCE,
    GAIN_UTILISATION_TAU_REFERENCE,
    HEAT_LOAD_ELECTRICAL_EQUIPMENT,
    HEAT_LOAD_HEATED_WATER,
    HEAT_LOAD_RESIDENTS,
    HEATED_WATER_TEMPERATURE,
    HOURS_PER_YEAR,
    WATER_DENSITY,
    WATER_SPECIFIC_HEAT_CAPACITY,
    WATER_USAGE_PER_GROSS_AREA,
    WATER_USAGE_PER_RESIDENT,
)
from heatmix.models import BuildingType, StructureComposition


# --- losses ---

def heat_loss_through_conduction(
    floor_u: float,
    roof_u: float,
    wall_u: float,
    wall_area: float,
    floor_area: float,
    temp_diff: float,
    hours: int = HOURS_PER_YEAR,
) -> int:
    """Conduction through floor, roof and walls.

    The roof is assumed to have the same area as the floor.
    """
    floor_loss = floor_u * floor_area * (temp_diff - FLOOR_TEMPERATURE_OFFSET) * hours / 1000.0
    roof_loss = roof_u * floor_area * temp_diff * hours / 1000.0
    wall_loss = wall_u * wall_area * temp_diff * hours / 1000.0
    return round(floor_loss + roof_loss + wall_loss)


def estimated_airflow(volume: float) -> float:
    """Mechanical supply airflow in m³/s for a building of *volume* m³."""
    return volume / AIRFLOW_VOLUME_DIVIDER / 3600.0


def heat_loss_through_ventilation(
    volume: float,
    temp_diff: float,
    activity_ratio_per_day: float = 1.0,
    activity_ratio_per_week: float = 1.0,
    heat_recovery_efficiency: float = 0.0,
    hours: int = HOURS_PER_YEAR,
) -> int:
    return round(
        AIR_DENSITY
        * AIR_SPECIFIC_HEAT_CAPACITY
        * estimated_airflow(volume)
        * activity_ratio_per_day
        * activity_ratio_per_week
        * (1.0 - heat_recovery_efficiency)
        * temp_diff
        * hours
        / 1000.0
    )


def heat_loss_through_replacement_air(
    volume: float,
    temp_diff: float,
    replacement_rate: float = AIR_REPLACEMENT_RATE,
    hours: int = HOURS_PER_YEAR,
) -> int:
    """Infiltration through leaks in the envelope."""
    return round(
        AIR_DENSITY * AIR_SPECIFIC_HEAT_CAPACITY * replacement_rate * volume * temp_diff * hours / 3.6e6
    )


def heat_loss_through_water_heating(heated_water_volume: float) -> int:
    """Energy needed to heat *heated_water_volume* m³ from 5 °C to 55 °C."""
    return round(
        WATER_DENSITY
        * WATER_SPECIFIC_HEAT_CAPACITY
        * heated_water_volume
        * (HEATED_WATER_TEMPERATURE - COLD_WATER_TEMPERATURE)
        / 3600.0
    )


def heated_water_by_gross_area(gross_area: float, usage: float = WATER_USAGE_PER_GROSS_AREA) -> float:
    """Annual heated water volume in m³ (*usage* litres per gross m²)."""
    return gross_area * usage / 1000.0


def heated_water_by_residents(
    residents: int, usage: float = WATER_USAGE_PER_RESIDENT, days: int = 365
) -> float:
    """Heated water volume in m³ over *days* for *residents* people."""
    return residents * usage * days / 1000.0


# --- gains ---

def heat_gain_from_devices_and_lighting(gross_area: float) -> int:
    devices = GAIN_DEVICES_PER_AREA * gross_area * 365 * GAIN_DEVICES_USAGE
    lighting = GAIN_LIGHTING_PER_AREA * gross_area * 365 * GAIN_LIGHTING_USAGE
    return round(devices + lighting)


def heat_gain_from_residents_by_area(gross_area: float) -> int:
    return round(GAIN_RESIDENTS_PER_AREA * gross_area * 365 * GAIN_RESIDENTS_PRESENCE)


def heat_gain_from_residents_by_count(residents: int) -> int:
    return round(GAIN_PER_RESIDENT * residents * 365)


def heat_gain_from_internal_sources_and_sun(gross_area: float, heat_from_sun: int) -> int:
    """Simple additive gain estimate: devices, lighting, residents and sun."""
    return (
        heat_gain_from_devices_and_lighting(gross_area)
        + heat_gain_from_residents_by_area(gross_area)
        + heat_from_sun
    )


def total_heat_load(gross_area: float, hours: int = HOURS_PER_YEAR) -> int:
    """Internal heat load available for the utilisation method."""
    per_area = HEAT_LOAD_ELECTRICAL_EQUIPMENT + HEAT_LOAD_RESIDENTS + HEAT_LOAD_HEATED_WATER
    return round(per_area * gross_area * (hours / HOURS_PER_YEAR))


def effective_heat_capacity(
    composition: StructureComposition = StructureComposition.MEDIUM,
    building_type: BuildingType = BuildingType.APARTMENT_BUILDING,
) -> float:
    return EFFECTIVE_HEAT_CAPACITY[BuildingType(building_type)][StructureComposition(composition)]


def gain_utilisation_factor(gamma: float, a: float) -> float:
    """Share of the available gains that offsets heating demand."""
    if gamma >= 1.0:
        return a / (a + 1.0)
    return (1.0 - gamma ** a) / (1.0 - gamma ** (a + 1.0))


def heat_gain_from_total_heat_load(
    gross_area: float,
    conduction: int,
    ventilation: int,
    replacement_air: int,
    temp_diff: float,
    composition: StructureComposition = StructureComposition.MEDIUM,
    building_type: BuildingType = BuildingType.APARTMENT_BUILDING,
    hours: int = HOURS_PER_YEAR,
) -> int:
    """Utilised internal gains.

    Returns 0 when conduction is 0, which is the case for buildings whose
    consumption was entered manually, and when there is no heat loss to
    offset (indoors no warmer than outdoors).
    """
    if conduction == 0:
        return 0

    heat_load = total_heat_load(gross_area, hours)
    heat_loss = conduction + ventilation + replacement_air
    if temp_diff <= 0 or heat_loss <= 0:
        return 0

    h_space = heat_loss / (temp_diff * hours) / 1000.0
    tau = effective_heat_capacity(composition, building_type) / h_space
    a = 1.0 + tau / GAIN_UTILISATION_TAU_REFERENCE
    gamma = heat_load / heat_loss

    eta = gain_utilisation_factor(gamma, a)
    return round(max(eta * heat_load, 0.0))
