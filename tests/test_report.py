"""Tests for chart datasets, reports and the CLI."""

from __future__ import annotations

import json

import pytest

from heatmix.energy_engine.datasets import build_dataset, find_max_value
from heatmix.exceptions import ConfigurationError, PreconditionError
from heatmix.models import BuildingReport, DatasetKind, HeatingTechnology
from heatmix.report import build_report, load_height_map, make_building, rectangle_grid
from main import main


class TestDatasets:
    """District and renewable chart series."""

    @pytest.fixture(autouse=True)
    def _building(self, apartment_block):
        apartment_block.recalculate()
        self.methods = apartment_block.heating_methods

    def test_district_names(self):
        ds = build_dataset(self.methods, DatasetKind.ANNUAL_COST, district=True)
        assert ds.data_point_count == 4
        assert {p.name for p in ds.data} == {"device_District"}
        assert [p.index for p in ds.data] == [0, 1, 2, 3]
        assert all(p.extra_info == "annualCost" for p in ds.data)

    def test_renewable_names(self):
        ds = build_dataset(self.methods, DatasetKind.ANNUAL_CO2, district=False)
        assert [p.name for p in ds.data] == [
            "device_District",
            "device_Geothermal",
            "device_Airsource",
            "device_HeatRecovery",
        ]
        assert ds.data[0].value == 0
        assert ds.data[1].value == self.methods[1].annual_re_co2_amount
        assert ds.unit == "kg"

    def test_total_kwh_adds_up(self):
        district = build_dataset(self.methods, DatasetKind.TOTAL_KWH, district=True)
        renewable = build_dataset(self.methods, DatasetKind.TOTAL_KWH, district=False)
        total = self.methods[0].total_heat_consumption
        for d, r in zip(district.data, renewable.data):
            assert d.value + r.value == pytest.approx(total, abs=1)
        assert find_max_value([district, renewable]) == pytest.approx(total, abs=1)

    def test_longterm_energy(self):
        district = build_dataset(self.methods, DatasetKind.LONGTERM_COST, district=True, years=20)
        renewable = build_dataset(self.methods, DatasetKind.LONGTERM_COST, district=False, years=20)
        assert district.data[2].value == 20 * self.methods[2].annual_dh_operating_cost
        assert renewable.data[0].value == 0
        assert renewable.data[1].value == 20 * self.methods[1].annual_re_operating_cost
        assert all(p.extra_info == "device_Energy" for p in district.data)

    def test_longterm_investment(self):
        baseline = self.methods[0]
        without = build_dataset(self.methods, DatasetKind.LONGTERM_COST, district=True, investment=True)
        with_device = build_dataset(
            self.methods,
            DatasetKind.LONGTERM_COST,
            district=True,
            include_district_device_cost=True,
            investment=True,
        )
        maintenance = baseline.calculate_longterm_maintenance_costs(20)
        assert {p.value for p in without.data} == {maintenance}
        assert {p.value for p in with_device.data} == {maintenance + baseline.investment_cost}

        renewable = build_dataset(self.methods, DatasetKind.LONGTERM_COST, district=False, investment=True)
        geo = self.methods[1]
        assert renewable.data[1].value == geo.investment_cost + geo.calculate_longterm_maintenance_costs(20)
        assert renewable.data[1].extra_info == "device_Investment"

    def test_negative_years(self):
        with pytest.raises(ValueError):
            build_dataset(self.methods, DatasetKind.LONGTERM_COST, district=True, years=-1)

    def test_empty_max(self):
        assert find_max_value([]) == 0.0


class TestReport:
    """Report assembly."""

    def test_report(self, apartment_block):
        apartment_block.recalculate()
        report = build_report(apartment_block, years=25)
        assert report.name == "Block A"
        assert report.construction_era == 0
        assert report.years == 25
        assert [m.technology for m in report.heating_methods] == list(HeatingTechnology)
        district = report.heating_methods[0]
        assert district.longterm_district_energy_cost == 25 * district.annual_dh_operating_cost
        assert BuildingReport.model_validate_json(report.model_dump_json()) == report

    def test_report_needs_calculation(self, apartment_block):
        with pytest.raises(PreconditionError):
            build_report(apartment_block)

    def test_make_building(self):
        building = make_building(rectangle_grid(10, 10, 1))
        assert building.total_heat_consumption > 0
        assert len(building.heating_methods) == 4

    def test_rectangle_grid_margin(self):
        grid = rectangle_grid(4, 3, 2, margin=2)
        assert (grid.width, grid.depth) == (8, 7)
        assert grid.calculate_gross_area() == 24
        with pytest.raises(ValueError):
            rectangle_grid(0, 3, 1)

    def test_load_height_map(self, tmp_path):
        path = tmp_path / "grid.json"
        path.write_text(json.dumps([[1, 1, 0], [2, 2, 0]]))
        grid = load_height_map(path)
        assert (grid.width, grid.depth) == (3, 2)
        assert grid.get_cell(0, 1).height == 2
        assert grid.get_cell(2, 0).height == 0

    @pytest.mark.parametrize("content", ["{}", "[]", "[[1, 2], [3]]", '[["a"]]', "[[-1]]", "[[1.7, 2]]", "oops"])
    def test_bad_height_map(self, tmp_path, content: str):
        path = tmp_path / "grid.json"
        path.write_text(content)
        with pytest.raises(ConfigurationError):
            load_height_map(path)


class TestCLI:
    """Command line entry point."""

    def test_rect_json(self, capsys):
        assert main(["--json", "rect", "--length", "20", "--depth", "12", "--storeys", "3"]) == 0
        report = BuildingReport.model_validate_json(capsys.readouterr().out)
        assert report.dimensions.gross_area == 720
        assert len(report.heating_methods) == 4

    def test_rect_manual_consumption(self, capsys):
        assert main(["--json", "rect", "--length", "10", "--depth", "10", "--kwh", "90000"]) == 0
        report = BuildingReport.model_validate_json(capsys.readouterr().out)
        assert report.heat_balance.total_heat_consumption == 90_000
        assert report.heat_balance.manual_override

    def test_grid_text(self, tmp_path, capsys):
        path = tmp_path / "grid.json"
        path.write_text(json.dumps([[2, 2], [2, 2]]))
        assert main(["grid", str(path), "--name", "Tiny"]) == 0
        out = capsys.readouterr().out
        assert "Tiny" in out
        assert "device_Geothermal" in out

    def test_estimate(self, capsys):
        assert main(["--json", "estimate", "--kwh", "300000", "--storeys", "4"]) == 0
        captured = capsys.readouterr()
        report = BuildingReport.model_validate_json(captured.out)
        assert report.dimensions.highest_level == 4
        assert "Estimated footprint" in captured.err

    def test_error_exit_code(self, tmp_path, capsys):
        assert main(["grid", str(tmp_path / "missing.json")]) == 1
        assert "Error" in capsys.readouterr().err

    def test_invalid_settings_exit_code(self, monkeypatch, capsys):
        monkeypatch.setenv("HEATMIX_INDOOR_TEMPERATURE", "4.0")
        assert main(["rect", "--length", "10", "--depth", "10"]) == 1
        assert "invalid settings" in capsys.readouterr().err

    def test_no_command(self, capsys):
        assert main([]) == 1
