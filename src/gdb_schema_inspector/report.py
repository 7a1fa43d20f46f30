"""
GDB Schema Inspector — Text Report
===================================
Renders an :class:`~src.gdb_schema_inspector.extractor.ExtractionResult`
as the plain-text metadata log returned by the CLI and the HTTP endpoint.

Sections, in order:
    header → items → spatial references → domains → relationship classes
    → warnings → status → closing note
"""

from __future__ import annotations

import logging
from pathlib import Path

from src.gdb_schema_inspector.definition_parser import truncate
from src.gdb_schema_inspector.extractor import ExtractionResult, ExtractionStatus
from src.gdb_schema_inspector.models import (
    Domain,
    DomainType,
    Item,
    RelationshipClass,
    SchemaModel,
    SpatialReference,
)

logger = logging.getLogger("gdb_schema_inspector.report")

ITEM_WKT_LIMIT = 60
SRS_WKT_LIMIT = 100
DOMAIN_XML_LIMIT = 60

CLOSING_NOTE = (
    "NOTE: Topology and Attribute Rules are ESRI-specific and generally not directly "
    "translatable to other formats. This information is for awareness."
)


# ---------------------------------------------------------------------------
# Section renderers
# ---------------------------------------------------------------------------


def _header(result: ExtractionResult) -> list[str]:
    lines = [
        f"Input GDB: {result.gdb_path}",
        f"Target SRS: {result.target_srs}",
    ]
    if result.bbox is not None:
        lines.append(f"Bounding Box (bbox): [{result.bbox}]")
    return lines


def _item_lines(item: Item, spatial_references: dict[int, SpatialReference]) -> list[str]:
    lines = [
        f"  Name: {item.name} (UUID: {item.item_uuid}, Physical Table: {item.physical_name}, "
        f"TypeGUID: {item.item_type_guid})",
        f"    Path: {item.path}, Dataset: {item.dataset_name or 'N/A'}",
    ]

    geometry = item.geometry
    if geometry is not None and geometry.column_name:
        lines.append(
            f"    Geometry Column: {geometry.column_name}, Type: {geometry.geometry_type}, "
            f"SRID: {geometry.srid}"
        )
        srs = spatial_references.get(geometry.srid)
        if srs is not None:
            lines.append(f"      SRS Name: {srs.srs_name}")
            lines.append(f"      SRS Definition (WKT): {truncate(srs.srs_definition, ITEM_WKT_LIMIT)}")
        elif geometry.srid > 0:
            lines.append(
                f"      SRS Definition: SRID {geometry.srid} - Definition not found "
                "or GDB_SpatialRefs missing."
            )
        else:
            lines.append("      SRS Definition: Not defined or SRID is 0.")

    lines.append("    Fields:")
    if not item.fields:
        lines.append("      No fields extracted.")
    for f in item.fields:
        line = (
            f"      - {f.name} (Type: {f.type}, Nullable: {f.is_nullable}, "
            f"Length: {f.length}, Alias: {f.alias_name})"
        )
        if f.domain_name:
            line += f" -> Domain: {f.domain_name} (default)"
        lines.append(line)

    if item.subtype_field_name and item.subtypes:
        lines.append(f"    Subtype Field: {item.subtype_field_name}")
        lines.append("    Subtypes:")
        for subtype in item.subtypes:
            lines.append(
                f"      - Code: {subtype.code}, Name: '{subtype.name}', "
                f"Description: '{subtype.description}'"
            )
            if subtype.field_defaults:
                lines.append("        Field-specific Defaults/Domains for this Subtype:")
                for field_name, override in subtype.field_defaults.items():
                    parts = []
                    if override.default_value:
                        parts.append(f"Default: '{override.default_value}'")
                    if override.domain_name:
                        parts.append(f"Domain: '{override.domain_name}'")
                    lines.append(f"          - Field: {field_name} -> {', '.join(parts)}")

    if item.topology_participation:
        lines.append("    Topology Participation:")
        lines.extend(f"      - {note}" for note in item.topology_participation)
    if item.attribute_rules:
        lines.append("    Attribute Rules (ESRI Specific - Informational Only):")
        lines.extend(f"      - {rule}" for rule in item.attribute_rules)
    return lines


def _items(model: SchemaModel) -> list[str]:
    lines = ["", "--- Extracted Item Information (Feature Classes & Tables) ---"]
    if not model.items:
        lines.append("No feature classes or tables found/extracted.")
    spatial_references = dict(model.spatial_references)
    for item in model.items.values():
        lines.extend(_item_lines(item, spatial_references))
    return lines


def _spatial_references(model: SchemaModel) -> list[str]:
    lines = ["", "--- Extracted Spatial Reference Information ---"]
    if not model.spatial_references:
        lines.append("  No spatial reference systems found or extracted.")
    for srs in model.spatial_references.values():
        lines.append(f"  SRID: {srs.srid}, Name: {srs.srs_name}")
        lines.append(f"    Definition (WKT): {truncate(srs.srs_definition, SRS_WKT_LIMIT)}")
    return lines


def _domain_lines(domain: Domain) -> list[str]:
    lines = [
        f"  Domain Name: {domain.name} (Owner: {domain.owner})",
        f"    Description: {domain.description}",
        f"    Applies to Field Type: {domain.field_type}, Domain Type: {domain.domain_type.value}",
    ]
    if domain.domain_type is DomainType.CODED_VALUE and domain.coded_values:
        lines.append("    Coded Values:")
        lines.extend(f"      - Code: '{cv.code}', Name: '{cv.name}'" for cv in domain.coded_values)
    elif domain.domain_type is DomainType.RANGE and domain.range_value is not None:
        lines.append(
            f"    Range: Min = '{domain.range_value.min_value}', "
            f"Max = '{domain.range_value.max_value}'"
        )
    elif domain.definition:
        lines.append(
            "    Values: Could not parse values from Definition XML or type mismatch. "
            f"XML: {truncate(domain.definition, DOMAIN_XML_LIMIT)}"
        )
    else:
        lines.append("    Values: No coded values or range found, or definition XML was empty/missing.")
    return lines


def _domains(model: SchemaModel) -> list[str]:
    lines = ["", "--- Extracted Domain Information ---"]
    if not model.domains:
        lines.append("  No domains found or extracted.")
    for domain in model.domains.values():
        lines.extend(_domain_lines(domain))
    return lines


def _relationship_lines(rel: RelationshipClass) -> list[str]:
    lines = [
        f"  Relationship Name: {rel.name} (UUID: {rel.item_uuid})",
        f"    Origin: {rel.origin_table_name} (UUID: {rel.origin_item_uuid})",
        f"    Destination: {rel.destination_table_name} (UUID: {rel.destination_item_uuid})",
        f"    Cardinality: {rel.cardinality}, Type: {rel.relationship_type}",
        f"    Labels: Forward='{rel.forward_path_label}', Backward='{rel.backward_path_label}'",
    ]
    if rel.rules:
        lines.append("    Rules (Keys):")
        lines.extend(
            f"      - OriginKey: '{rule.origin_key}', DestinationKey: '{rule.destination_key}'"
            for rule in rel.rules
        )
    else:
        lines.append("    Rules (Keys): Not explicitly parsed or found in XML.")
    return lines


def _relationships(model: SchemaModel) -> list[str]:
    lines = ["", "--- Extracted Relationship Class Information ---"]
    if not model.relationship_classes:
        lines.append("  No relationship classes found or extracted.")
    for rel in model.relationship_classes:
        lines.extend(_relationship_lines(rel))
    return lines


def _warnings(result: ExtractionResult) -> list[str]:
    if not result.warnings:
        return []
    lines = ["", f"--- Warnings ({len(result.warnings)}) ---"]
    lines.extend(f"  [{w.stage}] {w.message}" for w in result.warnings)
    return lines


def _status(result: ExtractionResult) -> list[str]:
    if result.status is ExtractionStatus.FAILED:
        return ["", f"Error: {result.error}"]
    if result.status is ExtractionStatus.ERROR:
        return ["", str(result.error), "Partial metadata shown above."]
    return []


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render_report(result: ExtractionResult) -> str:
    """Render *result* as a plain-text metadata log.

    A ``FAILED`` run renders the header, the error and the closing note
    only; every other run renders all model sections.
    """
    lines = _header(result)
    if result.status is not ExtractionStatus.FAILED:
        model = result.model
        lines.extend(_items(model))
        lines.extend(_spatial_references(model))
        lines.extend(_domains(model))
        lines.extend(_relationships(model))
    lines.extend(_warnings(result))
    lines.extend(_status(result))
    lines.extend(["", "Finished GDB metadata extraction attempt.", CLOSING_NOTE])
    return "\n".join(lines) + "\n"


class TextReporter:
    """Writes the text report for one extraction result.

    Args:
        result: The extraction result to render.
        output_path: Destination file; parent directories are created.
    """

    def __init__(self, result: ExtractionResult, output_path: Path) -> None:
        self.result = result
        self.output_path = Path(output_path)

    def render(self) -> str:
        """Return the report text without touching the disk."""
        return render_report(self.result)

    def write(self) -> Path:
        """Render and write the report.

        Raises:
            OSError: If the file cannot be written.
        """
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path.write_text(self.render(), encoding="utf-8")
        logger.info("Report written to %s", self.output_path)
        return self.output_path
