"""
Test helpers — SQLite geodatabase catalogs
===========================================
Builds small but real geodatabase catalogs on disk, plus the definition XML
the catalog rows carry.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

TABLE_GUID = "{CD06BC1B-789D-4C51-AAFA-4875E4034352}"
FEATURE_CLASS_GUID = "{70737809-852C-4A03-9E22-2CECEA5B9BFA}"
RELATIONSHIP_GUID = "{B606A7E1-FA5B-439C-849C-6E9C2481537B}"

ESRI_NS = (
    'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
    'xmlns:typens="http://www.esri.com/schemas/ArcGIS/10.8"'
)


# ---------------------------------------------------------------------------
# Definition XML
# ---------------------------------------------------------------------------


def field_xml(
    name: str,
    field_type: str = "esriFieldTypeString",
    *,
    nullable: bool = True,
    length: int = 0,
    alias: str | None = None,
    domain: str | None = None,
) -> str:
    domain_part = f"<DomainName>{domain}</DomainName>" if domain else ""
    return (
        f"<Field><Name>{name}</Name><Type>{field_type}</Type>"
        f"<IsNullable>{'true' if nullable else 'false'}</IsNullable>"
        f"<Length>{length}</Length><AliasName>{alias or name}</AliasName>"
        f"{domain_part}</Field>"
    )


def feature_class_xml(
    name: str,
    fields: list[str] | None = None,
    *,
    geometry_type: str = "esriGeometryPoint",
    shape_field: str = "Shape",
    wkid: int | None = 4326,
    extra: str = "",
) -> str:
    srs = f"<SpatialReference><WKID>{wkid}</WKID></SpatialReference>" if wkid is not None else ""
    return (
        f'<typens:DEFeatureClassInfo {ESRI_NS} xsi:type="typens:DEFeatureClassInfo">'
        f"<Name>{name}</Name>"
        f"<Fields><FieldArray>{''.join(fields or [])}</FieldArray></Fields>"
        f"<FeatureType>esriFTSimple</FeatureType>"
        f"<ShapeType>{geometry_type}</ShapeType>"
        f"<ShapeFieldName>{shape_field}</ShapeFieldName>"
        f"<Extent>{srs}</Extent>"
        f"{extra}"
        f"</typens:DEFeatureClassInfo>"
    )


def table_xml(name: str, fields: list[str] | None = None, *, extra: str = "") -> str:
    return (
        f'<typens:DETableInfo {ESRI_NS} xsi:type="typens:DETableInfo">'
        f"<Name>{name}</Name>"
        f"<Fields><FieldArray>{''.join(fields or [])}</FieldArray></Fields>"
        f"{extra}"
        f"</typens:DETableInfo>"
    )


def relationship_xml(name: str, *, extra: str = "") -> str:
    return (
        f'<typens:DERelationshipClassInfo {ESRI_NS} xsi:type="typens:DERelationshipClassInfo">'
        f"<Name>{name}</Name>"
        f"{extra}"
        f"</typens:DERelationshipClassInfo>"
    )


def coded_domain_xml(*pairs: tuple[str, str]) -> str:
    values = "".join(f"<CodedValue><Name>{n}</Name><Code>{c}</Code></CodedValue>" for c, n in pairs)
    return f"<GPCodedValueDomain2><CodedValues>{values}</CodedValues></GPCodedValueDomain2>"


def range_domain_xml(min_value: str, max_value: str) -> str:
    return (
        f"<GPRangeDomain2><Range><MinValue>{min_value}</MinValue>"
        f"<MaxValue>{max_value}</MaxValue></Range></GPRangeDomain2>"
    )


# ---------------------------------------------------------------------------
# Catalog builder
# ---------------------------------------------------------------------------


class CatalogBuilder:
    """Writes catalog tables into a fresh SQLite file.

    Tables are created on first use; call :meth:`build` to commit and get
    the path back.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._conn = sqlite3.connect(path)
        self._domain_type_column = "Type"

    def items_table(self) -> CatalogBuilder:
        self._conn.execute(
            "CREATE TABLE IF NOT EXISTS GDB_Items ("
            "ObjectID INTEGER PRIMARY KEY, UUID TEXT, Type TEXT, Name TEXT, "
            "PhysicalName TEXT, Path TEXT, DatasetName TEXT, Definition TEXT)"
        )
        return self

    def add_item(
        self,
        uuid: str,
        name: str,
        definition: str | None,
        *,
        type_guid: str = "",
        path: str | None = None,
        physical_name: str | None = None,
        dataset_name: str = "",
    ) -> CatalogBuilder:
        self.items_table()
        self._conn.execute(
            "INSERT INTO GDB_Items (UUID, Type, Name, PhysicalName, Path, DatasetName, Definition) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (uuid, type_guid, name, physical_name, path or f"\\{name}", dataset_name, definition),
        )
        return self

    def domains_table(self, type_column: str = "Type") -> CatalogBuilder:
        self._domain_type_column = type_column
        self._conn.execute(
            "CREATE TABLE IF NOT EXISTS GDB_Domains ("
            f"DomainName TEXT, Description TEXT, FieldType TEXT, {type_column} TEXT, "
            "Definition TEXT, Owner TEXT)"
        )
        return self

    def add_domain(
        self,
        name: str,
        definition: str = "",
        *,
        domain_type: str = "",
        description: str = "",
        field_type: str = "esriFieldTypeString",
        owner: str = "",
    ) -> CatalogBuilder:
        self.domains_table(self._domain_type_column)
        self._conn.execute(
            "INSERT INTO GDB_Domains (DomainName, Description, FieldType, "
            f"{self._domain_type_column}, Definition, Owner) VALUES (?, ?, ?, ?, ?, ?)",
            (name, description, field_type, domain_type, definition, owner),
        )
        return self

    def spatial_refs_table(self, columns: str = "SRID INTEGER, SRName TEXT, SRTEXT TEXT") -> CatalogBuilder:
        self._conn.execute(f"CREATE TABLE IF NOT EXISTS GDB_SpatialRefs ({columns})")
        return self

    def insert(self, table: str, **values: object) -> CatalogBuilder:
        """Insert one row into an already created table."""
        names = ", ".join(values)
        marks = ", ".join("?" for _ in values)
        self._conn.execute(f"INSERT INTO {table} ({names}) VALUES ({marks})", tuple(values.values()))
        return self

    def add_spatial_ref(self, srid: int, name: str, wkt: str) -> CatalogBuilder:
        self.spatial_refs_table()
        self._conn.execute(
            "INSERT INTO GDB_SpatialRefs (SRID, SRName, SRTEXT) VALUES (?, ?, ?)",
            (srid, name, wkt),
        )
        return self

    def relationships_table(self) -> CatalogBuilder:
        self._conn.execute(
            "CREATE TABLE IF NOT EXISTS GDB_ItemRelationships ("
            "UUID TEXT, OriginItemUUID TEXT, DestinationItemUUID TEXT, Name TEXT, Definition TEXT)"
        )
        return self

    def add_relationship(
        self,
        uuid: str,
        origin_uuid: str,
        destination_uuid: str,
        name: str = "",
        definition: str = "",
    ) -> CatalogBuilder:
        self.relationships_table()
        self._conn.execute(
            "INSERT INTO GDB_ItemRelationships "
            "(UUID, OriginItemUUID, DestinationItemUUID, Name, Definition) VALUES (?, ?, ?, ?, ?)",
            (uuid, origin_uuid, destination_uuid, name, definition),
        )
        return self

    def build(self) -> Path:
        self._conn.commit()
        self._conn.close()
        return self.path

    def close(self) -> None:
        self._conn.close()
