"""CLI entry point for the heatmix heating comparison engine."""

from __future__ import annotations

import argparse
import sys

from heatmix.config import configure_logging, get_settings
from heatmix.energy_engine.constants import DEVICE_NAMES
from heatmix.energy_engine.estimator import estimate_building_dimensions, estimation_grid
from heatmix.exceptions import HeatmixError
from heatmix.models import BuildingEstimation, BuildingReport, BuildingZone
from heatmix.report import build_report, load_height_map, make_building, rectangle_grid


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="heatmix: compare district heating with hybrid heat pump options"
    )
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--years", type=int, default=20, help="Long-term projection period")
    sub = parser.add_subparsers(dest="command")

    # --- rect command ---
    rect_p = sub.add_parser("rect", help="Calculate a rectangular building")
    rect_p.add_argument("--length", type=int, required=True, help="Footprint length (cells / m)")
    rect_p.add_argument("--depth", type=int, required=True, help="Footprint depth (cells / m)")
    rect_p.add_argument("--storeys", type=int, default=3, help="Number of storeys")
    _add_building_args(rect_p)

    # --- grid command ---
    grid_p = sub.add_parser("grid", help="Calculate a building from a JSON height map")
    grid_p.add_argument("file", help="JSON list of rows of storey counts")
    _add_building_args(grid_p)

    # --- estimate command ---
    est_p = sub.add_parser("estimate", help="Estimate a footprint from a known consumption")
    est_p.add_argument("--kwh", type=int, required=True, help="Annual heat consumption (kWh)")
    est_p.add_argument("--storeys", type=int, default=3, help="Number of storeys")
    est_p.add_argument("--year", type=int, default=1959, help="Construction year")
    est_p.add_argument("--zone", choices=[z.value for z in BuildingZone], default="IV")
    est_p.add_argument("--staircases", type=int, default=1, help="Staircase count")

    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ValueError as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        return 1
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    try:
        if args.command == "rect":
            grid = rectangle_grid(args.length, args.depth, args.storeys)
            report = _run_building(grid, args, settings)
        elif args.command == "grid":
            report = _run_building(load_height_map(args.file), args, settings)
        elif args.command == "estimate":
            report = _run_estimate(args, settings)
            if report is None:
                return 1
        else:
            parser.print_help()
            return 1
    except (HeatmixError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        _print_report(report)
    return 0


def _add_building_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--name", default="New Building")
    p.add_argument("--year", type=int, default=1959, help="Construction year")
    p.add_argument("--zone", choices=[z.value for z in BuildingZone], default="IV")
    p.add_argument("--staircases", type=int, default=1, help="Staircase count")
    p.add_argument("--kwh", type=int, default=None, help="Known annual consumption (kWh)")


def _run_building(grid, args, settings) -> BuildingReport:
    building = make_building(
        grid,
        construction_year=args.year,
        zone=BuildingZone(args.zone),
        staircase_count=args.staircases,
        heat_consumption_override=args.kwh,
        name=args.name,
        settings=settings,
    )
    return build_report(building, args.years)


def _run_estimate(args, settings) -> BuildingReport | None:
    estimation = estimate_building_dimensions(
        args.kwh, args.storeys, args.year, BuildingZone(args.zone)
    )
    _print_estimation(estimation)
    if not estimation.valid:
        print("No rectangular building reaches that consumption.", file=sys.stderr)
        return None

    building = make_building(
        estimation_grid(estimation, settings.max_grid_width, settings.max_grid_depth),
        construction_year=args.year,
        zone=BuildingZone(args.zone),
        staircase_count=args.staircases,
        name="Estimated Building",
        settings=settings,
    )
    return build_report(building, args.years)


def _print_estimation(est: BuildingEstimation):
    print(f"Estimated footprint: {est.length} x {est.depth} m, {est.floor_count} storeys "
          f"({est.total_consumption} kWh/yr, era {est.era}, zone {est.zone.value})",
          file=sys.stderr)


def _print_report(report: BuildingReport):
    d = report.dimensions
    hb = report.heat_balance
    print(f"\n{'='*60}")
    print(f"  {report.name}  ({report.construction_year}, era {report.construction_era}, zone {report.zone.value})")
    print(f"  Heat consumption: {hb.total_heat_consumption} kWh/yr"
          + ("  (manual)" if hb.manual_override else ""))
    print(f"{'='*60}")
    print(f"  Gross area:        {d.gross_area} m2")
    print(f"  Gross volume:      {d.gross_volume} m3")
    print(f"  Envelope area:     {d.envelope_area} m2")
    print(f"  Wall area:         {d.wall_area} m2")
    print(f"  Highest level:     {d.highest_level}")
    print(f"  Conduction:        {hb.conduction} kWh/yr")
    print(f"  Ventilation:       {hb.ventilation} kWh/yr")
    print(f"  Air infiltration:  {hb.air_infiltration} kWh/yr")
    print(f"  Water heating:     {hb.water_heating} kWh/yr")
    print(f"  Internal gain:     {hb.internal_gain} kWh/yr")
    print(f"{'-'*60}")
    print(f"  {'Method':<22}{'Invest €':>10}{'€/yr':>9}{'kg CO2/yr':>11}{f'{report.years} yr €':>10}")
    for m in report.heating_methods:
        longterm = (
            m.longterm_district_energy_cost
            + m.longterm_renewable_energy_cost
            + m.longterm_maintenance_cost
        )
        print(
            f"  {DEVICE_NAMES[m.technology]:<22}{m.investment_cost:>10}"
            f"{m.annual_dh_operating_cost + m.annual_re_operating_cost:>9}"
            f"{m.annual_dh_co2 + m.annual_re_co2:>11}{longterm:>10}"
        )
    print(f"{'='*60}\n")


if __name__ == "__main__":
    sys.exit(main())
