"""
GDB Schema Inspector — Extraction State
========================================
The value passed from phase to phase during one extraction run.

Each phase (parse → domains → spatial references → relationships) is a
function ``phase(reader, state) -> state``.  Phases build fresh maps and
return a new :class:`ExtractionState` via :func:`dataclasses.replace`;
the state they were given is never modified.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Mapping

from src.gdb_schema_inspector.models import (
    Domain,
    Item,
    RelationshipClass,
    SchemaModel,
    SpatialReference,
)

# Stage labels attached to warnings.
STAGE_ITEMS = "items"
STAGE_DOMAINS = "domains"
STAGE_SPATIAL_REFERENCES = "spatial_references"
STAGE_RELATIONSHIPS = "relationships"


@dataclass(frozen=True)
class ExtractionWarning:
    """A non-fatal problem recorded during extraction.

    Attributes:
        stage: Phase that recorded the warning (``STAGE_*``).
        message: Human-readable description.
    """

    stage: str
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ExtractionState:
    """Maps and warnings accumulated so far in a run."""

    items: Mapping[str, Item] = field(default_factory=dict)
    domains: Mapping[str, Domain] = field(default_factory=dict)
    spatial_references: Mapping[int, SpatialReference] = field(default_factory=dict)
    relationship_classes: tuple[RelationshipClass, ...] = ()
    warnings: tuple[ExtractionWarning, ...] = ()

    def with_warnings(self, *warnings: ExtractionWarning) -> ExtractionState:
        """Return a copy with *warnings* appended."""
        return replace(self, warnings=self.warnings + tuple(warnings))

    def to_model(self) -> SchemaModel:
        """Freeze the current maps into a :class:`SchemaModel`."""
        return SchemaModel(
            items=dict(self.items),
            domains=dict(self.domains),
            spatial_references=dict(self.spatial_references),
            relationship_classes=tuple(self.relationship_classes),
        )


def record_warning(log: logging.Logger, stage: str, message: str) -> ExtractionWarning:
    """Log *message* at WARNING level and return it as an :class:`ExtractionWarning`."""
    log.warning(message)
    return ExtractionWarning(stage=stage, message=message)
