"""
GDB Schema Inspector — Definition Parser
=========================================
Turns raw ``GDB_Items`` rows into typed :class:`~src.gdb_schema_inspector.models.Item`
entries by reading each row's definition XML.

Classification (first match wins):

1. The XML names both a geometry type and a shape field → feature class.
2. The XML carries a ``DETableInfo`` element, or the row's type GUID is
   the Table or Relationship Class GUID → table.  Relationship classes
   are kept as table-shaped items because their XML carries field-like
   structure.
3. Anything else (feature datasets, workspaces, domains …) is dropped.

While parsing, every field domain and every positive SRID is registered
as a *stub* in the state's domain / spatial-reference maps for the
resolvers that run next.

Usage::

    state = parse_items(reader.iter_items(), ExtractionState())
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, replace
from typing import Iterable

from src.gdb_schema_inspector.catalog_reader import RawItemRow
from src.gdb_schema_inspector.models import (
    Domain,
    Field,
    GeometryInfo,
    Item,
    ItemKind,
    SpatialReference,
    Subtype,
    SubtypeFieldDefault,
)
from src.gdb_schema_inspector.state import (
    STAGE_ITEMS,
    ExtractionState,
    record_warning,
)
from src.gdb_schema_inspector.xml_lookup import (
    child_text,
    children,
    descendant_text,
    first_child,
    first_descendant,
    has_descendant,
    iter_descendants,
    local_name,
    parse_bool,
    parse_definition,
    parse_int,
)

logger = logging.getLogger("gdb_schema_inspector.definition_parser")

# ---------------------------------------------------------------------------
# Catalog type GUIDs
# ---------------------------------------------------------------------------

RELATIONSHIP_CLASS_TYPE_GUID = "{B606A7E1-FA5B-439C-849C-6E9C2481537B}"
TABLE_TYPE_GUIDS = frozenset(
    {
        "{CD06BC1B-789D-4C51-AAFA-A467912B8965}",
        "{CD06BC1B-789D-4C51-AAFA-4875E4034352}",
    }
)

# ---------------------------------------------------------------------------
# Candidate tag names, in priority order
# ---------------------------------------------------------------------------

GEOMETRY_TYPE_TAGS = ("GeometryType", "ShapeType")
SHAPE_FIELD_TAGS = ("ShapeField", "GeometryFieldName", "ShapeFieldName")
SRID_TAGS = ("WKID", "SRID")
TABLE_INFO_TAGS = ("DETableInfo",)

FIELD_CONTAINER_TAGS = ("Fields", "FieldArray")
FIELD_TAG = "Field"

SUBTYPE_FIELD_TAGS = ("SubtypeFieldName", "SubtypeField")
SUBTYPE_CONTAINER_TAGS = ("Subtypes", "SubtypeInfos")
SUBTYPE_TAGS = ("Subtype", "SubtypeInfo")

TOPOLOGY_MEMBERSHIP_TAG = "TopologyMembership"
IN_TOPOLOGY_TAG = "IsInTopology"
UNNAMED_TOPOLOGY = "Unnamed Topology"

RULE_CONTAINER_TAGS = ("Rules", "AttributeRules")
RULE_TAGS = ("Rule", "AttributeRule")
RULE_NAME_TAGS = ("Name", "RuleName", "ID")
RULE_EXPRESSION_TAGS = ("Expression", "ArcadeExpression")
RULE_EXPRESSION_LIMIT = 50


def truncate(value: str, limit: int) -> str:
    """Cut *value* to *limit* characters, marking the cut with ``...``."""
    return value if len(value) <= limit else value[:limit] + "..."


def _is_table_guid(type_guid: str) -> bool:
    guid = type_guid.strip().upper()
    return guid in TABLE_TYPE_GUIDS or guid == RELATIONSHIP_CLASS_TYPE_GUID


# ---------------------------------------------------------------------------
# Per-item parsing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParsedItem:
    """An item plus the references it asks the resolvers to fill in."""

    item: Item
    domain_names: tuple[str, ...]
    srid: int


def classify(root: ET.Element, type_guid: str) -> tuple[ItemKind, GeometryInfo | None] | None:
    """Decide which item variant a definition describes.

    Returns:
        ``(kind, geometry)`` — geometry is set only for feature classes —
        or ``None`` when the definition is neither a feature class nor a
        table.
    """
    geometry_type = descendant_text(root, *GEOMETRY_TYPE_TAGS)
    shape_field = descendant_text(root, *SHAPE_FIELD_TAGS)
    if geometry_type and shape_field:
        srid = parse_int(descendant_text(root, *SRID_TAGS)) or 0
        return ItemKind.FEATURE_CLASS, GeometryInfo(shape_field, geometry_type, srid)

    if (
        local_name(root) in TABLE_INFO_TAGS
        or has_descendant(root, *TABLE_INFO_TAGS)
        or _is_table_guid(type_guid)
    ):
        return ItemKind.TABLE, None

    return None


def parse_fields(root: ET.Element) -> tuple[Field, ...]:
    """Read the ordered field list of a definition."""
    container = first_descendant(root, *FIELD_CONTAINER_TAGS)
    if container is None:
        return ()

    field_elements = children(container, FIELD_TAG)
    if not field_elements:
        # <Fields><FieldArray><Field/>…</FieldArray></Fields>
        nested = first_child(container, "FieldArray")
        if nested is not None:
            field_elements = children(nested, FIELD_TAG)

    fields = []
    for element in field_elements:
        domain_name = descendant_text(element, "DomainName")
        if domain_name is None:
            domain = first_child(element, "Domain")
            domain_name = child_text(domain, "Name") if domain is not None else None

        fields.append(
            Field(
                name=child_text(element, "Name", default=""),
                type=child_text(element, "Type", default=""),
                alias_name=child_text(element, "AliasName", default=""),
                is_nullable=parse_bool(child_text(element, "IsNullable")) or False,
                length=parse_int(child_text(element, "Length")) or 0,
                domain_name=domain_name or "",
            )
        )
    return tuple(fields)


def parse_subtypes(root: ET.Element) -> tuple[str | None, tuple[Subtype, ...] | None]:
    """Read the subtype field and subtypes of a definition.

    Returns:
        ``(subtype_field_name, subtypes)``.  Subtypes are only looked for
        when a subtype field is named; ``None`` means no subtype container.
    """
    subtype_field = descendant_text(root, *SUBTYPE_FIELD_TAGS)
    if not subtype_field:
        return None, None

    container = first_descendant(root, *SUBTYPE_CONTAINER_TAGS)
    if container is None:
        return subtype_field, None

    subtypes = []
    for element in children(container, *SUBTYPE_TAGS):
        code = parse_int(child_text(element, "SubtypeCode"))
        if code is None:
            continue

        defaults: dict[str, SubtypeFieldDefault] = {}
        field_infos = first_child(element, "FieldInfos")
        if field_infos is not None:
            for info in children(field_infos, "SubtypeFieldInfo"):
                field_name = child_text(info, "FieldName")
                if not field_name:
                    continue
                entry = SubtypeFieldDefault(
                    default_value=child_text(info, "DefaultValue", default=""),
                    domain_name=child_text(info, "DomainName", default=""),
                )
                if entry.default_value or entry.domain_name:
                    defaults[field_name] = entry

        subtypes.append(
            Subtype(
                code=code,
                name=child_text(element, "SubtypeName", default=""),
                description=child_text(element, "Description", default=""),
                field_defaults=defaults,
            )
        )
    return subtype_field, tuple(subtypes)


def parse_topology_participation(root: ET.Element) -> tuple[str, ...] | None:
    """Collect topology notes.

    A ``TopologyMembership`` element and a true ``IsInTopology`` flag each
    add a note; an item carrying both gets two.
    """
    notes = []
    membership = first_descendant(root, TOPOLOGY_MEMBERSHIP_TAG)
    if membership is not None:
        topology_name = child_text(membership, "TopologyName") or UNNAMED_TOPOLOGY
        notes.append(f"Participates in Topology: {topology_name}")

    for flag in iter_descendants(root, IN_TOPOLOGY_TAG):
        if parse_bool(flag.text or ""):
            notes.append("Participates in an unnamed Topology (IsInTopology=true)")
            break

    return tuple(notes) if notes else None


def parse_attribute_rules(root: ET.Element) -> tuple[str, ...] | None:
    """Describe each attribute rule in one line.  ``None`` without a rules container."""
    container = first_descendant(root, *RULE_CONTAINER_TAGS)
    if container is None:
        return None

    notes: list[str] = []
    for element in children(container, *RULE_TAGS):
        name = child_text(element, *RULE_NAME_TAGS) or f"Unnamed Rule {len(notes) + 1}"
        description = child_text(element, "Description", default="")
        expression = child_text(element, *RULE_EXPRESSION_TAGS, default="")
        rule_type = child_text(element, "Type", default="")

        line = f"Rule: '{name}'"
        if rule_type.strip():
            line += f" (Type: {rule_type})"
        if description.strip():
            line += f", Desc: '{description}'"
        if expression.strip():
            line += f", Expr: '{truncate(expression, RULE_EXPRESSION_LIMIT)}'"
        notes.append(line)
    return tuple(notes)


def parse_item(row: RawItemRow) -> ParsedItem | None:
    """Parse one catalog row.

    Returns:
        The parsed item, or ``None`` when the definition is not a feature
        class or table.

    Raises:
        xml.etree.ElementTree.ParseError: If the definition is malformed.
    """
    root = parse_definition(row.definition)
    classified = classify(root, row.type_guid)
    if classified is None:
        logger.debug("Skipping item '%s' — definition not recognised as feature class or table.", row.name)
        return None
    kind, geometry = classified

    fields = parse_fields(root)
    subtype_field, subtypes = parse_subtypes(root)
    item = Item(
        kind=kind,
        item_uuid=row.uuid,
        name=row.name,
        path=row.path,
        physical_name=row.physical_name,
        definition=row.definition,
        item_type_guid=row.type_guid,
        dataset_name=row.dataset_name,
        fields=fields,
        geometry=geometry,
        subtype_field_name=subtype_field,
        subtypes=subtypes,
        topology_participation=parse_topology_participation(root),
        attribute_rules=parse_attribute_rules(root),
    )

    if kind is ItemKind.FEATURE_CLASS:
        logger.debug("Identified feature class '%s' (UUID: %s).", row.name, row.uuid)
    elif row.type_guid.strip().upper() == RELATIONSHIP_CLASS_TYPE_GUID:
        logger.debug("Identified relationship class item '%s' (UUID: %s).", row.name, row.uuid)
    else:
        logger.debug("Identified table '%s' (UUID: %s).", row.name, row.uuid)
    if subtypes:
        logger.debug("  -> '%s' uses subtype field '%s' with %d subtype(s).", row.name, subtype_field, len(subtypes))
    if item.attribute_rules:
        logger.debug("  -> '%s' has %d attribute rule(s).", row.name, len(item.attribute_rules))

    return ParsedItem(
        item=item,
        domain_names=tuple(f.domain_name for f in fields if f.domain_name),
        srid=geometry.srid if geometry is not None else 0,
    )


# ---------------------------------------------------------------------------
# Phase
# ---------------------------------------------------------------------------


def parse_items(rows: Iterable[RawItemRow], state: ExtractionState) -> ExtractionState:
    """Classify every catalog row and register pending domain / SRID stubs.

    A malformed definition is reported as a warning and that row skipped;
    the scan continues.

    Args:
        rows: Usable ``GDB_Items`` rows in catalog order.
        state: State to extend.

    Returns:
        A new state with items, stubs and any parse warnings added.
    """
    items = dict(state.items)
    domains = dict(state.domains)
    spatial_references = dict(state.spatial_references)
    warnings = []

    for row in rows:
        try:
            parsed = parse_item(row)
        except (ET.ParseError, ValueError) as exc:
            reason = str(exc).split("\n")[0]
            warnings.append(
                record_warning(
                    logger,
                    STAGE_ITEMS,
                    f"Failed to parse Definition XML for item '{row.name}' (UUID: {row.uuid}): {reason}",
                )
            )
            continue
        if parsed is None:
            continue

        items[row.uuid] = parsed.item
        for domain_name in parsed.domain_names:
            if domain_name not in domains:
                domains[domain_name] = Domain(name=domain_name)
        if parsed.srid > 0 and parsed.srid not in spatial_references:
            spatial_references[parsed.srid] = SpatialReference(srid=parsed.srid)

    logger.info(
        "Parsed %d item(s); %d pending domain(s), %d pending SRID(s).",
        len(items),
        len(domains),
        len(spatial_references),
    )
    return replace(
        state,
        items=items,
        domains=domains,
        spatial_references=spatial_references,
    ).with_warnings(*warnings)
