"""
GDB Schema Inspector — Schema Model
====================================
Immutable data classes describing a geodatabase schema as reconstructed
from its system catalog.

Classes:
    ItemKind            Discriminant for catalog items (feature class / table).
    Field               One attribute column of an item.
    SubtypeFieldDefault Per-subtype default value / domain override.
    Subtype             Integer-coded partition of an item's rows.
    GeometryInfo        Spatial properties carried only by feature classes.
    Item                A feature class or plain table (tagged union).
    DomainType          Coded-value / range / unknown.
    CodedValue          One ``(code, name)`` pair of a coded-value domain.
    RangeValue          Min / max bounds of a range domain (kept as text).
    Domain              A named attribute domain.
    SpatialReference    An SRID with its name and WKT.
    RelationshipRule    One origin-key / destination-key pair.
    RelationshipClass   A resolved association between two items.
    SchemaModel         The aggregate handed to reporting and HTTP layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


class ItemKind(Enum):
    """Closed set of item variants the parser produces."""

    FEATURE_CLASS = "FeatureClass"
    TABLE = "Table"


@dataclass(frozen=True)
class Field:
    """One attribute column of a feature class or table.

    Attributes:
        name: Field name.
        type: Esri field type, e.g. ``esriFieldTypeString``.
        alias_name: Human-readable alias.
        is_nullable: Whether the field accepts NULL.
        length: Declared length (string fields), ``0`` when absent.
        domain_name: Default domain for the field, ``""`` when none.
    """

    name: str
    type: str = ""
    alias_name: str = ""
    is_nullable: bool = False
    length: int = 0
    domain_name: str = ""


@dataclass(frozen=True)
class SubtypeFieldDefault:
    """Default value and/or domain assigned to a field for one subtype."""

    default_value: str = ""
    domain_name: str = ""


@dataclass(frozen=True)
class Subtype:
    """A named, integer-coded partition of an item's rows.

    Attributes:
        code: Subtype code.
        name: Subtype name.
        description: Free-text description (often empty).
        field_defaults: ``{field_name: SubtypeFieldDefault}``.
    """

    code: int
    name: str = ""
    description: str = ""
    field_defaults: Mapping[str, SubtypeFieldDefault] = field(default_factory=dict)


@dataclass(frozen=True)
class GeometryInfo:
    """Spatial properties of a feature class.

    Attributes:
        column_name: Name of the shape column.
        geometry_type: Esri geometry type, e.g. ``esriGeometryPoint``.
        srid: Spatial reference identifier, ``0`` when unknown.
    """

    column_name: str
    geometry_type: str
    srid: int = 0


@dataclass(frozen=True)
class Item:
    """A feature class or plain table registered in the item catalog.

    The variant is carried by :attr:`kind`; only feature classes have a
    :attr:`geometry`.  Relationship-class items are represented as
    :attr:`ItemKind.TABLE` entries.

    Attributes:
        kind: Item variant discriminant.
        item_uuid: Catalog UUID, the unique key of the item map.
        name: Item name.
        path: Catalog path, e.g. ``\\Utilities\\Valves``.
        physical_name: Backing table name (falls back to :attr:`name`).
        definition: Raw definition XML.
        item_type_guid: Catalog type GUID.
        dataset_name: Feature dataset name, ``""`` when top-level.
        fields: Ordered fields.
        geometry: Spatial properties for feature classes, else ``None``.
        subtype_field_name: Subtype field, ``None`` when not subtyped.
        subtypes: Parsed subtypes, ``None`` when no subtype container.
        topology_participation: Topology notes, ``None`` when none found.
        attribute_rules: Attribute-rule notes, ``None`` when no container.
    """

    kind: ItemKind
    item_uuid: str
    name: str
    path: str = ""
    physical_name: str = ""
    definition: str = ""
    item_type_guid: str = ""
    dataset_name: str = ""
    fields: tuple[Field, ...] = ()
    geometry: GeometryInfo | None = None
    subtype_field_name: str | None = None
    subtypes: tuple[Subtype, ...] | None = None
    topology_participation: tuple[str, ...] | None = None
    attribute_rules: tuple[str, ...] | None = None

    @property
    def is_feature_class(self) -> bool:
        """``True`` if this item is a feature class."""
        return self.kind is ItemKind.FEATURE_CLASS


# ---------------------------------------------------------------------------
# Domains
# ---------------------------------------------------------------------------


class DomainType(Enum):
    """Kind of attribute domain."""

    CODED_VALUE = "CodedValue"
    RANGE = "Range"
    UNKNOWN = "Unknown"

    @classmethod
    def from_label(cls, label: str) -> DomainType:
        """Map a catalog label to a member, ``UNKNOWN`` when unrecognised."""
        for member in cls:
            if member.value == label:
                return member
        return cls.UNKNOWN


@dataclass(frozen=True)
class CodedValue:
    """One entry of a coded-value domain.  The code is kept as text."""

    code: str
    name: str = ""


@dataclass(frozen=True)
class RangeValue:
    """Bounds of a range domain, kept as text."""

    min_value: str = ""
    max_value: str = ""


@dataclass(frozen=True)
class Domain:
    """A named attribute domain.

    A freshly discovered domain is a *stub* carrying only :attr:`name`;
    the domain resolver fills in the rest from the domain catalog.
    """

    name: str
    description: str = ""
    field_type: str = ""
    domain_type: DomainType = DomainType.UNKNOWN
    coded_values: tuple[CodedValue, ...] | None = None
    range_value: RangeValue | None = None
    owner: str = ""
    definition: str = ""


# ---------------------------------------------------------------------------
# Spatial references
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SpatialReference:
    """A spatial reference system.  Name and WKT are empty for stubs."""

    srid: int
    srs_name: str = ""
    srs_definition: str = ""


# ---------------------------------------------------------------------------
# Relationship classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RelationshipRule:
    """Key pair joining origin and destination."""

    origin_key: str
    destination_key: str


@dataclass(frozen=True)
class RelationshipClass:
    """A relationship class whose item, origin and destination all resolved.

    Attributes:
        definition: Definition XML of the relationship *item*.
        item_relationship_definition: Definition XML of the relationship
            catalog row, kept separately.
    """

    item_uuid: str
    name: str
    origin_item_uuid: str
    destination_item_uuid: str
    origin_table_name: str
    destination_table_name: str
    cardinality: str = "Unknown"
    relationship_type: str = "Unknown"
    forward_path_label: str = ""
    backward_path_label: str = ""
    rules: tuple[RelationshipRule, ...] = ()
    definition: str = ""
    item_relationship_definition: str = ""


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SchemaModel:
    """Read-only schema of one geodatabase.

    Attributes:
        items: ``{item_uuid: Item}`` in catalog scan order.
        domains: ``{domain_name: Domain}`` after resolution.
        spatial_references: ``{srid: SpatialReference}`` after resolution.
        relationship_classes: Resolved relationships in scan order.
    """

    items: Mapping[str, Item] = field(default_factory=dict)
    domains: Mapping[str, Domain] = field(default_factory=dict)
    spatial_references: Mapping[int, SpatialReference] = field(default_factory=dict)
    relationship_classes: tuple[RelationshipClass, ...] = ()

    @property
    def feature_classes(self) -> list[Item]:
        """Feature-class items in scan order."""
        return [i for i in self.items.values() if i.kind is ItemKind.FEATURE_CLASS]

    @property
    def tables(self) -> list[Item]:
        """Table items (including relationship-class items) in scan order."""
        return [i for i in self.items.values() if i.kind is ItemKind.TABLE]

    @property
    def is_empty(self) -> bool:
        """``True`` when nothing at all was extracted."""
        return not (
            self.items or self.domains or self.spatial_references or self.relationship_classes
        )
