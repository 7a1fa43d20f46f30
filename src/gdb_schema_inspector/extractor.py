"""
GDB Schema Inspector — Extraction Pipeline
===========================================
Runs the catalog phases in order over one read-only connection:

    GDB_Items scan → domain resolution → spatial-reference resolution
    → relationship resolution → :class:`SchemaModel`

:func:`extract_schema` is the boundary of the core: it never raises.
Fatal problems (the store cannot be opened, ``GDB_Items`` is missing)
yield an empty model with :attr:`ExtractionStatus.FAILED`; anything
unexpected yields :attr:`ExtractionStatus.ERROR` with whatever the
completed phases had already produced.

Usage::

    result = extract_schema(Path("utilities.geodatabase"))
    if result.ok:
        for item in result.model.feature_classes:
            print(item.name, item.geometry.geometry_type)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from shared.python.exceptions import CatalogError
from src.gdb_schema_inspector.catalog_reader import ITEMS_TABLE, CatalogReader
from src.gdb_schema_inspector.config import DEFAULT_TARGET_SRS, BoundingBox
from src.gdb_schema_inspector.definition_parser import parse_items
from src.gdb_schema_inspector.domain_resolver import resolve_domains
from src.gdb_schema_inspector.models import SchemaModel
from src.gdb_schema_inspector.relationship_resolver import resolve_relationships
from src.gdb_schema_inspector.spatial_reference_resolver import resolve_spatial_references
from src.gdb_schema_inspector.state import ExtractionState, ExtractionWarning

logger = logging.getLogger("gdb_schema_inspector.extractor")


class ExtractionStatus(Enum):
    """Outcome of one extraction run."""

    SUCCESS = "success"
    FAILED = "failed"
    ERROR = "error"


@dataclass(frozen=True)
class ExtractionResult:
    """Everything one run produced.

    Attributes:
        gdb_path: The geodatabase that was read.
        status: Run outcome.
        model: The schema model (empty on ``FAILED``).
        warnings: Non-fatal problems in the order they were recorded.
        target_srs: Target SRS as requested (not applied).
        bbox: Bounding box as requested (not applied).
        error: Error message for ``FAILED`` / ``ERROR`` runs.
    """

    gdb_path: Path
    status: ExtractionStatus
    model: SchemaModel = field(default_factory=SchemaModel)
    warnings: tuple[ExtractionWarning, ...] = ()
    target_srs: str = DEFAULT_TARGET_SRS
    bbox: BoundingBox | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """``True`` when the run completed without a fatal or unexpected error."""
        return self.status is ExtractionStatus.SUCCESS


def extract_schema(
    gdb_path: Path,
    target_srs: str = DEFAULT_TARGET_SRS,
    bbox: BoundingBox | None = None,
) -> ExtractionResult:
    """Read a geodatabase catalog and build its :class:`SchemaModel`.

    Args:
        gdb_path: Path to the SQLite-backed geodatabase.
        target_srs: Target spatial reference, echoed back unchanged.
        bbox: Optional bounding box, echoed back unchanged.

    Returns:
        The run's :class:`ExtractionResult`.  Never raises.
    """
    gdb_path = Path(gdb_path)
    logger.info("Input GDB: %s", gdb_path)
    logger.info("Target SRS: %s", target_srs)
    if bbox is not None:
        logger.info("Bounding Box (bbox): [%s]", bbox)

    # Last completed phase's state; reported as the partial model on ERROR.
    state = ExtractionState()
    try:
        with CatalogReader(gdb_path) as reader:
            reader.require_table(ITEMS_TABLE)
            logger.info("Querying %s for all items...", ITEMS_TABLE)
            state = parse_items(reader.iter_items(), state)
            state = resolve_domains(reader, state)
            state = resolve_spatial_references(reader, state)
            state = resolve_relationships(reader, state)
    except CatalogError as exc:
        logger.error("Error: %s", exc.message)
        return ExtractionResult(
            gdb_path=gdb_path,
            status=ExtractionStatus.FAILED,
            warnings=state.warnings,
            target_srs=target_srs,
            bbox=bbox,
            error=exc.message,
        )
    except Exception as exc:  # noqa: BLE001
        logger.exception("An unexpected error occurred while reading '%s'.", gdb_path)
        return ExtractionResult(
            gdb_path=gdb_path,
            status=ExtractionStatus.ERROR,
            model=state.to_model(),
            warnings=state.warnings,
            target_srs=target_srs,
            bbox=bbox,
            error=f"An unexpected error occurred: {exc}",
        )

    model = state.to_model()
    logger.info(
        "Finished metadata extraction: %d item(s), %d domain(s), %d SRS, %d relationship(s), %d warning(s).",
        len(model.items),
        len(model.domains),
        len(model.spatial_references),
        len(model.relationship_classes),
        len(state.warnings),
    )
    return ExtractionResult(
        gdb_path=gdb_path,
        status=ExtractionStatus.SUCCESS,
        model=model,
        warnings=state.warnings,
        target_srs=target_srs,
        bbox=bbox,
    )
