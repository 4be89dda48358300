"""Datasets of heating method figures for charts.

Each chart stacks a district heating dataset and a renewable dataset with one
data point per heating method, in heating method order.
"""

from __future__ import annotations

from typing import Sequence

from heatmix.energy_engine.constants import DEVICE_NAMES
from heatmix.energy_engine.heating import HeatingMethod
from heatmix.models import DataPoint, Dataset, DatasetKind, HeatingTechnology

DISTRICT_NAME = DEVICE_NAMES[HeatingTechnology.DISTRICT]

EXTRA_INFO = {
    DatasetKind.TOTAL_KWH: "totalKWH",
    DatasetKind.ANNUAL_COST: "annualCost",
    DatasetKind.ANNUAL_CO2: "annualCO2",
}

UNITS = {
    DatasetKind.TOTAL_KWH: "kWh",
    DatasetKind.ANNUAL_COST: "€",
    DatasetKind.ANNUAL_CO2: "kg",
    DatasetKind.LONGTERM_COST: "€",
}


def _value(
    methods: Sequence[HeatingMethod],
    index: int,
    kind: DatasetKind,
    district: bool,
    years: int,
    include_district_device_cost: bool,
    investment: bool,
) -> float:
    method = methods[index]

    if kind == DatasetKind.TOTAL_KWH:
        return method.district_heating_consumption if district else method.renewable_energy_produced
    if kind == DatasetKind.ANNUAL_COST:
        return method.annual_dh_operating_cost if district else method.annual_re_operating_cost
    if kind == DatasetKind.ANNUAL_CO2:
        return method.annual_dh_co2_amount if district else method.annual_re_co2_amount

    # Long-term cost
    if district:
        if investment:
            # Every column carries the district equipment of the baseline
            baseline = methods[0]
            device_cost = baseline.investment_cost if include_district_device_cost else 0
            return device_cost + baseline.calculate_longterm_maintenance_costs(years)
        return method.calculate_longterm_district_energy_cost(years)
    if index == 0:
        return 0
    if investment:
        return method.investment_cost + method.calculate_longterm_maintenance_costs(years)
    return method.calculate_longterm_renewable_energy_cost(years)


def build_dataset(
    methods: Sequence[HeatingMethod],
    kind: DatasetKind,
    district: bool,
    years: int = 20,
    include_district_device_cost: bool = False,
    investment: bool = False,
) -> Dataset:
    """Build the district (*district* True) or renewable dataset of *kind*.

    For ``LONGTERM_COST`` *investment* selects the investment and
    maintenance series instead of the energy series.
    """
    kind = DatasetKind(kind)
    if years < 0:
        raise ValueError(f"years must be non-negative, got {years}")

    if kind == DatasetKind.LONGTERM_COST:
        extra_info = "device_Investment" if investment else "device_Energy"
    else:
        extra_info = EXTRA_INFO[kind]

    data = []
    for i, method in enumerate(methods):
        name = DISTRICT_NAME if district else DEVICE_NAMES[method.technology]
        value = _value(methods, i, kind, district, years, include_district_device_cost, investment)
        data.append(DataPoint(name=name, value=float(value), index=i, extra_info=extra_info))

    return Dataset(unit=UNITS[kind], data=data)


def find_max_value(datasets: Sequence[Dataset]) -> float:
    """Largest stacked total across data points at the same index."""
    if not datasets:
        return 0.0
    top = 0.0
    for i in range(datasets[0].data_point_count):
        total = sum(ds.data[i].value for ds in datasets)
        top = max(top, total)
    return top
