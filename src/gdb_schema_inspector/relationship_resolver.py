"""
GDB Schema Inspector — Relationship Resolver
=============================================
Joins ``GDB_ItemRelationships`` rows against the fully parsed item map.

A row becomes a :class:`~src.gdb_schema_inspector.models.RelationshipClass`
only when its own UUID, its origin UUID and its destination UUID are all
known items; otherwise it is dropped with a warning naming what failed to
resolve.  Cardinality, type and path labels are read from the
relationship *item's* definition, which is richer than the row's own.

Key pairs are best effort.  Two XML shapes are tried in turn:

1. one-to-many — ``OriginPrimaryKey`` / ``OriginForeignKey``, or generic
   ``Key`` elements tagged with a sibling ``KeyRole`` of ``Origin`` /
   ``Destination``;
2. many-to-many — the origin ``ClassKeyName`` under ``OriginClassKeys``
   paired with the ``ClassKeyName`` of the ``RelationshipClassKeys``
   entry whose ``KeyRole`` is ``DestinationForeignKey``.

When neither matches, the rule list stays empty.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import replace
from typing import Iterable, Mapping

from src.gdb_schema_inspector.catalog_reader import (
    ITEMS_TABLE,
    RELATIONSHIPS_TABLE,
    CatalogReader,
    RawRelationshipRow,
)
from src.gdb_schema_inspector.models import Item, RelationshipClass, RelationshipRule
from src.gdb_schema_inspector.state import (
    STAGE_RELATIONSHIPS,
    ExtractionState,
    ExtractionWarning,
    record_warning,
)
from src.gdb_schema_inspector.xml_lookup import (
    child_text,
    descendant_text,
    first_descendant,
    iter_descendants,
    local_name,
    parse_definition,
)

logger = logging.getLogger("gdb_schema_inspector.relationship_resolver")

UNKNOWN = "Unknown"
RELATIONSHIP_TYPE_TAGS = ("Type", "RelationshipType")


# ---------------------------------------------------------------------------
# Key extraction
# ---------------------------------------------------------------------------


def _role_tagged_key(root: ET.Element, role: str) -> str | None:
    """Text of the first ``Key`` whose parent carries ``KeyRole == role``."""
    for parent in root.iter():
        if child_text(parent, "KeyRole") != role:
            continue
        for child in parent:
            if local_name(child) == "Key":
                return "".join(child.itertext())
    return None


def _relationship_key(root: ET.Element, role: str) -> str | None:
    """``ClassKeyName`` of the relationship-key entry tagged with *role*."""
    for container in iter_descendants(root, "RelationshipClassKeys"):
        for entry in container.iter():
            if child_text(entry, "KeyRole") == role:
                return child_text(entry, "ClassKeyName")
    return None


def extract_rules(root: ET.Element) -> tuple[RelationshipRule, ...]:
    """Best-effort origin / destination key pairs of a relationship definition."""
    origin_key = descendant_text(root, "OriginPrimaryKey")
    if origin_key is None:
        origin_key = _role_tagged_key(root, "Origin")
    destination_key = descendant_text(root, "OriginForeignKey")
    if destination_key is None:
        destination_key = _role_tagged_key(root, "Destination")
    if origin_key is not None and destination_key is not None:
        return (RelationshipRule(origin_key, destination_key),)

    origin_class_keys = first_descendant(root, "OriginClassKeys")
    origin_primary = (
        descendant_text(origin_class_keys, "ClassKeyName") if origin_class_keys is not None else None
    )
    destination_foreign = _relationship_key(root, "DestinationForeignKey")
    if origin_primary and destination_foreign:
        return (RelationshipRule(origin_primary, destination_foreign),)

    return ()


def build_relationship(
    row: RawRelationshipRow,
    relationship_item: Item,
    origin: Item,
    destination: Item,
) -> RelationshipClass:
    """Describe one fully resolved relationship row."""
    root = parse_definition(relationship_item.definition)
    rules = extract_rules(root)
    if not rules:
        logger.info("Relationship '%s': key rules not explicitly found in XML.", relationship_item.name)

    return RelationshipClass(
        item_uuid=row.uuid,
        name=relationship_item.name,
        origin_item_uuid=row.origin_uuid,
        destination_item_uuid=row.destination_uuid,
        origin_table_name=origin.name,
        destination_table_name=destination.name,
        cardinality=descendant_text(root, "Cardinality", default=UNKNOWN),
        relationship_type=descendant_text(root, *RELATIONSHIP_TYPE_TAGS, default=UNKNOWN),
        forward_path_label=descendant_text(root, "ForwardPathLabel", default=""),
        backward_path_label=descendant_text(root, "BackwardPathLabel", default=""),
        rules=rules,
        definition=relationship_item.definition,
        item_relationship_definition=row.definition,
    )


def _unresolved(row: RawRelationshipRow, items: Mapping[str, Item]) -> list[str]:
    missing = []
    if row.uuid not in items:
        missing.append(f"relationship item {row.uuid or '(empty)'}")
    if row.origin_uuid not in items:
        missing.append(f"origin item {row.origin_uuid or '(empty)'}")
    if row.destination_uuid not in items:
        missing.append(f"destination item {row.destination_uuid or '(empty)'}")
    return missing


# ---------------------------------------------------------------------------
# Phase
# ---------------------------------------------------------------------------


def join_relationships(rows: Iterable[RawRelationshipRow], state: ExtractionState) -> ExtractionState:
    """Build relationship classes from *rows* against ``state.items``.

    Args:
        rows: Relationship rows in catalog order.
        state: State whose item map is complete.

    Returns:
        A new state with relationship classes and unresolved-row warnings.
    """
    relationships = list(state.relationship_classes)
    warnings: list[ExtractionWarning] = []

    for row in rows:
        missing = _unresolved(row, state.items)
        if missing:
            warnings.append(
                record_warning(
                    logger,
                    STAGE_RELATIONSHIPS,
                    f"Could not fully resolve relationship '{row.name}' (UUID: {row.uuid}): "
                    f"{', '.join(missing)} missing from {ITEMS_TABLE}.",
                )
            )
            continue

        relationship = build_relationship(
            row,
            state.items[row.uuid],
            state.items[row.origin_uuid],
            state.items[row.destination_uuid],
        )
        relationships.append(relationship)
        logger.debug(
            "Found relationship '%s' from '%s' to '%s'.",
            relationship.name,
            relationship.origin_table_name,
            relationship.destination_table_name,
        )

    return replace(state, relationship_classes=tuple(relationships)).with_warnings(*warnings)


def resolve_relationships(reader: CatalogReader, state: ExtractionState) -> ExtractionState:
    """Read ``GDB_ItemRelationships`` and join it against the item map.

    A missing relationship table contributes nothing but a warning.
    """
    if not reader.table_exists(RELATIONSHIPS_TABLE):
        warning = record_warning(
            logger,
            STAGE_RELATIONSHIPS,
            f"Table '{RELATIONSHIPS_TABLE}' not found. Skipping relationship extraction.",
        )
        return state.with_warnings(warning)

    logger.info("Querying %s for relationship classes...", RELATIONSHIPS_TABLE)
    return join_relationships(reader.iter_relationships(), state)
