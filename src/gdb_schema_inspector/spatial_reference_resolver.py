"""
GDB Schema Inspector — Spatial Reference Resolver
==================================================
Fills SRID stubs with their name and WKT from ``GDB_SpatialRefs``.

Unlike domains, spatial-reference stubs are never dropped: a missing
table leaves every stub empty with a single warning, and an SRID with no
matching row, or whose lookup fails, keeps its empty stub with a
warning of its own.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import replace

from src.gdb_schema_inspector.catalog_reader import SPATIAL_REFS_TABLE, CatalogReader
from src.gdb_schema_inspector.models import SpatialReference
from src.gdb_schema_inspector.state import (
    STAGE_SPATIAL_REFERENCES,
    ExtractionState,
    record_warning,
)

logger = logging.getLogger("gdb_schema_inspector.spatial_reference_resolver")


def resolve_spatial_references(reader: CatalogReader, state: ExtractionState) -> ExtractionState:
    """Resolve every pending SRID stub against ``GDB_SpatialRefs``.

    Args:
        reader: Open catalog reader.
        state: State carrying the SRID stubs.

    Returns:
        A new state with populated spatial references plus warnings.
    """
    if not state.spatial_references:
        return state

    logger.info("Querying %s for %d SRID(s)...", SPATIAL_REFS_TABLE, len(state.spatial_references))
    if not reader.table_exists(SPATIAL_REFS_TABLE):
        warning = record_warning(
            logger,
            STAGE_SPATIAL_REFERENCES,
            f"Table '{SPATIAL_REFS_TABLE}' not found. Cannot retrieve SRS definitions.",
        )
        return state.with_warnings(warning)

    spatial_references = dict(state.spatial_references)
    warnings = []
    for srid in list(spatial_references):
        try:
            record = reader.find_spatial_reference(srid)
        except sqlite3.Error as exc:
            warnings.append(
                record_warning(
                    logger,
                    STAGE_SPATIAL_REFERENCES,
                    f"Error reading SRID {srid} from {SPATIAL_REFS_TABLE}: {exc}",
                )
            )
            continue
        if record is None:
            warnings.append(
                record_warning(
                    logger,
                    STAGE_SPATIAL_REFERENCES,
                    f"SRID {srid} not found in {SPATIAL_REFS_TABLE}.",
                )
            )
            continue
        spatial_references[srid] = SpatialReference(
            srid=srid,
            srs_name=record.name,
            srs_definition=record.wkt,
        )

    return replace(state, spatial_references=spatial_references).with_warnings(*warnings)
