"""
Tests — CLI and Tool Class
===========================
Tests for :class:`~src.gdb_schema_inspector.inspector.SchemaInspector` and
the ``gdb-inspect`` command.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from shared.python.exceptions import CRSError, InputValidationError
from src.gdb_schema_inspector.cli import main
from src.gdb_schema_inspector.extractor import ExtractionStatus
from src.gdb_schema_inspector.inspector import SchemaInspector
from tests.catalog_fixtures import feature_class_xml, field_xml, table_xml


@pytest.fixture()
def gdb(catalog) -> Path:
    return (
        catalog.add_item("{FC}", "Hydrants", feature_class_xml("Hydrants", [field_xml("NAME", length=50)]))
        .add_item("{T}", "Inspections", table_xml("Inspections"))
        .add_spatial_ref(4326, "GCS_WGS_1984", "GEOGCS[]")
        .build()
    )


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


# ---------------------------------------------------------------------------
# SchemaInspector
# ---------------------------------------------------------------------------


class TestSchemaInspector:
    def test_run_without_output(self, gdb: Path) -> None:
        tool = SchemaInspector(gdb)
        tool.run()
        assert tool.result.status is ExtractionStatus.SUCCESS
        assert "Name: Hydrants" in tool.report_text

    def test_run_writes_report(self, gdb: Path, tmp_path: Path) -> None:
        out = tmp_path / "reports" / "schema.txt"
        tool = SchemaInspector(gdb, out, target_srs="EPSG:3857")
        tool.run()
        assert out.read_text(encoding="utf-8") == tool.report_text
        assert "Target SRS: EPSG:3857" in tool.report_text

    def test_rejects_unsupported_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "roads.shp"
        path.write_bytes(b"")
        with pytest.raises(InputValidationError):
            SchemaInspector(path).run()

    def test_rejects_bad_crs(self, gdb: Path) -> None:
        with pytest.raises(CRSError):
            SchemaInspector(gdb, target_srs="NOT_A_CRS").run()

    def test_result_before_run(self, gdb: Path) -> None:
        tool = SchemaInspector(gdb)
        assert tool.result is None
        assert tool.report_text is None


# ---------------------------------------------------------------------------
# gdb-inspect
# ---------------------------------------------------------------------------


class TestCli:
    def test_prints_report_and_summary(self, runner: CliRunner, gdb: Path) -> None:
        result = runner.invoke(main, ["--input", str(gdb)])
        assert result.exit_code == 0, result.output
        assert "Target SRS: EPSG:4326" in result.output
        assert "Results: 1 feature classes | 1 tables | 0 domains | 1 spatial references" in result.output

    def test_bbox_and_output(self, runner: CliRunner, gdb: Path, tmp_path: Path) -> None:
        out = tmp_path / "schema.txt"
        result = runner.invoke(main, ["-i", str(gdb), "-o", str(out), "--bbox", "-100,40,-90,50"])
        assert result.exit_code == 0, result.output
        assert "Bounding Box (bbox): [-100, 40, -90, 50]" in out.read_text(encoding="utf-8")
        assert f"Report written to: {out}" in result.output

    def test_config_file_values(self, runner: CliRunner, gdb: Path, tmp_path: Path) -> None:
        config = tmp_path / "inspect.json"
        config.write_text(json.dumps({"target_srs": "EPSG:3857", "bbox": [0, 0, 1, 1]}), encoding="utf-8")
        result = runner.invoke(main, ["-i", str(gdb), "-c", str(config)])
        assert result.exit_code == 0, result.output
        assert "Target SRS: EPSG:3857" in result.output
        assert "Bounding Box (bbox): [0, 0, 1, 1]" in result.output

    def test_options_override_config(self, runner: CliRunner, gdb: Path, tmp_path: Path) -> None:
        config = tmp_path / "inspect.json"
        config.write_text(json.dumps({"target_srs": "EPSG:3857"}), encoding="utf-8")
        result = runner.invoke(main, ["-i", str(gdb), "-c", str(config), "--target-srs", "EPSG:2263"])
        assert "Target SRS: EPSG:2263" in result.output

    def test_bad_bbox_exits_1(self, runner: CliRunner, gdb: Path) -> None:
        result = runner.invoke(main, ["-i", str(gdb), "--bbox", "1,2,3"])
        assert result.exit_code == 1
        assert "Invalid bounding box" in result.output

    def test_fatal_extraction_exits_1(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "dummy.geodatabase"
        path.write_text("This is a dummy geodatabase file for testing.", encoding="utf-8")
        result = runner.invoke(main, ["-i", str(path)])
        assert result.exit_code == 1
        assert "Error: Cannot open geodatabase" in result.output

    def test_missing_input_is_usage_error(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(main, ["-i", str(tmp_path / "absent.geodatabase")])
        assert result.exit_code == 2
