"""
Tests — Spatial Reference Resolver
===================================
"""

from __future__ import annotations

from pathlib import Path

from src.gdb_schema_inspector.catalog_reader import CatalogReader
from src.gdb_schema_inspector.models import SpatialReference
from src.gdb_schema_inspector.spatial_reference_resolver import resolve_spatial_references
from src.gdb_schema_inspector.state import STAGE_SPATIAL_REFERENCES, ExtractionState

WGS84_WKT = 'GEOGCS["GCS_WGS_1984",DATUM["D_WGS_1984",SPHEROID["WGS_1984",6378137.0,298.257223563]]]'


def _stubs(*srids: int) -> ExtractionState:
    return ExtractionState(spatial_references={s: SpatialReference(srid=s) for s in srids})


def _resolve(path: Path, state: ExtractionState) -> ExtractionState:
    with CatalogReader(path) as reader:
        return resolve_spatial_references(reader, state)


class TestResolveSpatialReferences:
    def test_populates_name_and_wkt(self, catalog) -> None:
        path = catalog.add_spatial_ref(4326, "GCS_WGS_1984", WGS84_WKT).build()
        state = _resolve(path, _stubs(4326))
        assert state.spatial_references[4326] == SpatialReference(4326, "GCS_WGS_1984", WGS84_WKT)
        assert state.warnings == ()

    def test_table_absent_keeps_stubs_with_one_warning(self, catalog) -> None:
        path = catalog.items_table().build()
        state = _resolve(path, _stubs(4326, 3857))
        assert state.spatial_references == {
            4326: SpatialReference(srid=4326),
            3857: SpatialReference(srid=3857),
        }
        (warning,) = state.warnings
        assert warning.stage == STAGE_SPATIAL_REFERENCES
        assert warning.message == "Table 'GDB_SpatialRefs' not found. Cannot retrieve SRS definitions."

    def test_unknown_srid_keeps_stub(self, catalog) -> None:
        path = catalog.add_spatial_ref(4326, "GCS_WGS_1984", WGS84_WKT).build()
        state = _resolve(path, _stubs(4326, 2263))
        assert state.spatial_references[2263] == SpatialReference(srid=2263)
        assert state.spatial_references[4326].srs_name == "GCS_WGS_1984"
        assert [w.message for w in state.warnings] == ["SRID 2263 not found in GDB_SpatialRefs."]

    def test_no_stubs_is_no_op(self, catalog) -> None:
        path = catalog.items_table().build()
        state = ExtractionState()
        assert _resolve(path, state) is state

    def test_missing_name_column_reads_as_empty(self, catalog) -> None:
        path = (
            catalog.spatial_refs_table("SRID INTEGER, SRTEXT TEXT")
            .insert("GDB_SpatialRefs", SRID=4326, SRTEXT=WGS84_WKT)
            .build()
        )
        state = _resolve(path, _stubs(4326))
        assert state.spatial_references[4326] == SpatialReference(4326, "", WGS84_WKT)
        assert state.warnings == ()

    def test_failed_lookup_keeps_stub_and_continues(self, catalog) -> None:
        path = (
            catalog.spatial_refs_table("Code INTEGER, SRTEXT TEXT")
            .insert("GDB_SpatialRefs", Code=4326, SRTEXT=WGS84_WKT)
            .build()
        )
        state = _resolve(path, _stubs(4326, 3857))
        assert state.spatial_references == {
            4326: SpatialReference(srid=4326),
            3857: SpatialReference(srid=3857),
        }
        messages = [w.message for w in state.warnings]
        assert len(messages) == 2
        assert messages[0].startswith("Error reading SRID 4326 from GDB_SpatialRefs:")
        assert all(w.stage == STAGE_SPATIAL_REFERENCES for w in state.warnings)
