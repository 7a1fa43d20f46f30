"""
Tests — Extraction Pipeline
============================
End-to-end tests for :func:`~src.gdb_schema_inspector.extractor.extract_schema`
over complete SQLite catalogs.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from src.gdb_schema_inspector.config import BoundingBox
from src.gdb_schema_inspector.extractor import ExtractionStatus, extract_schema
from src.gdb_schema_inspector.models import DomainType, ItemKind, SpatialReference
from src.gdb_schema_inspector.state import (
    STAGE_DOMAINS,
    STAGE_RELATIONSHIPS,
    STAGE_SPATIAL_REFERENCES,
)
from tests.catalog_fixtures import (
    FEATURE_CLASS_GUID,
    RELATIONSHIP_GUID,
    TABLE_GUID,
    coded_domain_xml,
    feature_class_xml,
    field_xml,
    relationship_xml,
    table_xml,
)

WGS84_WKT = 'GEOGCS["GCS_WGS_1984",DATUM["D_WGS_1984",SPHEROID["WGS_1984",6378137.0,298.257223563]]]'

REL_EXTRA = (
    "<Cardinality>esriRelCardinalityOneToMany</Cardinality>"
    "<OriginPrimaryKey>GlobalID</OriginPrimaryKey>"
    "<OriginForeignKey>ValveGUID</OriginForeignKey>"
)


@pytest.fixture()
def utilities_gdb(catalog) -> Path:
    """A small utility network: valves, inspections and their relationship."""
    valve_fields = [
        field_xml("OBJECTID", "esriFieldTypeOID", nullable=False, length=4),
        field_xml("STATUS", length=25, domain="StatusDomain"),
        field_xml("PRESSURE", "esriFieldTypeDouble", domain="MissingDomain"),
    ]
    return (
        catalog.add_item(
            "{VALVES}",
            "Valves",
            feature_class_xml("Valves", valve_fields),
            type_guid=FEATURE_CLASS_GUID,
            path="\\Utilities\\Valves",
            dataset_name="Utilities",
        )
        .add_item("{INSP}", "Inspections", table_xml("Inspections", [field_xml("ValveGUID")]), type_guid=TABLE_GUID)
        .add_item(
            "{REL}",
            "ValveInspections",
            relationship_xml("ValveInspections", extra=REL_EXTRA),
            type_guid=RELATIONSHIP_GUID,
        )
        .add_item("{DS}", "Utilities", "<DEFeatureDataset><Name>Utilities</Name></DEFeatureDataset>")
        .add_domain(
            "StatusDomain",
            coded_domain_xml(("1", "Open"), ("2", "Closed")),
            domain_type="CodedValue",
            owner="gis",
        )
        .add_spatial_ref(4326, "GCS_WGS_1984", WGS84_WKT)
        .add_relationship("{REL}", "{VALVES}", "{INSP}", "ValveInspections")
        .build()
    )


# ---------------------------------------------------------------------------
# Successful runs
# ---------------------------------------------------------------------------


class TestExtractSchema:
    def test_full_catalog(self, utilities_gdb: Path) -> None:
        result = extract_schema(utilities_gdb)
        assert result.status is ExtractionStatus.SUCCESS
        assert result.ok
        model = result.model

        assert list(model.items) == ["{VALVES}", "{INSP}", "{REL}"]
        valves = model.items["{VALVES}"]
        assert valves.kind is ItemKind.FEATURE_CLASS
        assert valves.dataset_name == "Utilities"
        assert valves.geometry.srid == 4326
        assert [t.name for t in model.tables] == ["Inspections", "ValveInspections"]

        assert list(model.domains) == ["StatusDomain"]
        assert model.domains["StatusDomain"].domain_type is DomainType.CODED_VALUE
        assert model.spatial_references[4326].srs_name == "GCS_WGS_1984"

        (rel,) = model.relationship_classes
        assert (rel.origin_table_name, rel.destination_table_name) == ("Valves", "Inspections")
        assert rel.rules[0].origin_key == "GlobalID"

        assert [w.message for w in result.warnings] == [
            "Domain 'MissingDomain' not found in GDB_Domains."
        ]

    def test_echoes_target_srs_and_bbox(self, utilities_gdb: Path) -> None:
        bbox = BoundingBox(-100, 40, -90, 50)
        result = extract_schema(utilities_gdb, "EPSG:3857", bbox)
        assert result.target_srs == "EPSG:3857"
        assert result.bbox == bbox

    def test_is_repeatable(self, utilities_gdb: Path) -> None:
        assert extract_schema(utilities_gdb) == extract_schema(utilities_gdb)

    def test_only_items_table(self, catalog) -> None:
        path = catalog.add_item("{FC}", "Points", feature_class_xml("Points", wkid=2263)).build()
        result = extract_schema(path)
        assert result.status is ExtractionStatus.SUCCESS
        assert result.model.spatial_references == {2263: SpatialReference(srid=2263)}
        stages = [w.stage for w in result.warnings]
        assert stages == [STAGE_SPATIAL_REFERENCES, STAGE_RELATIONSHIPS]

    def test_empty_items_table(self, catalog) -> None:
        result = extract_schema(catalog.items_table().build())
        assert result.status is ExtractionStatus.SUCCESS
        assert result.model.items == {}
        # No stubs, so neither resolver touches its table.
        assert [w.stage for w in result.warnings] == [STAGE_RELATIONSHIPS]

    def test_domain_table_absent(self, catalog) -> None:
        path = catalog.add_item("{T}", "T", table_xml("T", [field_xml("A", domain="D1")])).build()
        result = extract_schema(path)
        assert result.model.domains == {}
        assert [w.stage for w in result.warnings][0] == STAGE_DOMAINS


# ---------------------------------------------------------------------------
# Fatal and unexpected failures
# ---------------------------------------------------------------------------


class TestExtractSchemaFailures:
    def test_missing_items_table(self, catalog) -> None:
        path = catalog.spatial_refs_table().relationships_table().build()
        result = extract_schema(path)
        assert result.status is ExtractionStatus.FAILED
        assert not result.ok
        assert result.model.is_empty
        assert result.error == (
            "Table 'GDB_Items' not found in the database. Cannot proceed with metadata extraction."
        )

    def test_not_a_database(self, tmp_path: Path) -> None:
        path = tmp_path / "test.geodatabase"
        path.write_text("This is a dummy geodatabase file for testing.", encoding="utf-8")
        result = extract_schema(path)
        assert result.status is ExtractionStatus.FAILED
        assert result.model.is_empty
        assert result.error

    def test_missing_file(self, tmp_path: Path) -> None:
        result = extract_schema(tmp_path / "nowhere" / "missing.geodatabase")
        assert result.status is ExtractionStatus.FAILED

    def test_unexpected_error_keeps_partial_model(
        self, utilities_gdb: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def boom(reader, state):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr("src.gdb_schema_inspector.extractor.resolve_relationships", boom)
        result = extract_schema(utilities_gdb)
        assert result.status is ExtractionStatus.ERROR
        assert "disk on fire" in result.error
        assert len(result.model.items) == 3
        assert "StatusDomain" in result.model.domains
        assert result.model.relationship_classes == ()

    def test_broken_spatial_refs_table_does_not_stop_run(self, catalog) -> None:
        path = (
            catalog.add_item("{FC}", "Valves", feature_class_xml("Valves"))
            .add_item("{T}", "Inspections", table_xml("Inspections"))
            .add_item(
                "{R}",
                "ValveInspections",
                relationship_xml("ValveInspections", extra=REL_EXTRA),
                type_guid=RELATIONSHIP_GUID,
            )
            .spatial_refs_table("Code INTEGER, SRTEXT TEXT")
            .add_relationship("{R}", "{FC}", "{T}", "ValveInspections")
            .build()
        )
        result = extract_schema(path)
        assert result.status is ExtractionStatus.SUCCESS
        assert result.model.spatial_references == {4326: SpatialReference(srid=4326)}
        assert len(result.model.relationship_classes) == 1
        assert result.warnings[0].stage == STAGE_SPATIAL_REFERENCES
