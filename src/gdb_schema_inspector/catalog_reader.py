"""
GDB Schema Inspector — Catalog Reader
======================================
Read-only access to the system tables of a SQLite-backed (mobile)
geodatabase:

- ``GDB_Items``             — every dataset with its definition XML (mandatory)
- ``GDB_Domains``           — attribute domains (optional)
- ``GDB_SpatialRefs``       — spatial reference systems (optional)
- ``GDB_ItemRelationships`` — relationship rows (optional)

The reader only moves rows out of the store; it never interprets the
definition XML.  Columns a catalog table does not carry are selected as
``NULL`` so older and newer catalog layouts read the same way.

Usage::

    with CatalogReader(Path("utilities.geodatabase")) as reader:
        reader.require_table(ITEMS_TABLE)
        for row in reader.iter_items():
            ...
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Sequence

from shared.python.exceptions import (
    CatalogError,
    CatalogOpenError,
    MissingCatalogTableError,
)

logger = logging.getLogger("gdb_schema_inspector.catalog_reader")

ITEMS_TABLE = "GDB_Items"
DOMAINS_TABLE = "GDB_Domains"
SPATIAL_REFS_TABLE = "GDB_SpatialRefs"
RELATIONSHIPS_TABLE = "GDB_ItemRelationships"

# Column holding the coded-value / range label in GDB_Domains.  Catalogs
# written by some releases name it ``DomainType`` instead.
DOMAIN_TYPE_COLUMN = "Type"
DOMAIN_TYPE_FALLBACK_COLUMN = "DomainType"

_ITEM_COLUMNS = ("UUID", "Name", "Path", "Definition", "Type", "PhysicalName", "DatasetName")
_RELATIONSHIP_COLUMNS = ("UUID", "OriginItemUUID", "DestinationItemUUID", "Name", "Definition")
_SPATIAL_REF_COLUMNS = ("SRName", "SRTEXT")


# ---------------------------------------------------------------------------
# Row records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RawItemRow:
    """One usable row of ``GDB_Items``."""

    uuid: str
    name: str
    path: str
    definition: str
    type_guid: str
    physical_name: str
    dataset_name: str


@dataclass(frozen=True)
class RawRelationshipRow:
    """One row of ``GDB_ItemRelationships``."""

    uuid: str
    origin_uuid: str
    destination_uuid: str
    name: str
    definition: str


@dataclass(frozen=True)
class DomainRecord:
    """The ``GDB_Domains`` row matching one domain name."""

    name: str
    description: str
    field_type: str
    domain_type: str
    definition: str
    owner: str


@dataclass(frozen=True)
class SpatialRefRecord:
    """The ``GDB_SpatialRefs`` row matching one SRID."""

    srid: int
    name: str
    wkt: str


class MissingColumnError(CatalogError):
    """Raised when a lookup names a column its catalog table does not have.

    Args:
        table: Catalog table that was queried.
        column: The absent column.
    """

    def __init__(self, table: str, column: str) -> None:
        super().__init__(f"Column '{column}' not found in '{table}'.")
        self.table: str = table
        self.column: str = column


def _text(value: Any) -> str:
    """Render a SQLite cell as text; NULL becomes ``""``."""
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


# ---------------------------------------------------------------------------
# Reader
# ---------------------------------------------------------------------------


class CatalogReader:
    """Read-only handle on a geodatabase's system catalog.

    Parameters
    ----------
    gdb_path : Path
        Path to the ``.geodatabase`` (SQLite) file.

    Raises
    ------
    CatalogOpenError
        If the file cannot be opened or is not a SQLite database.
    """

    def __init__(self, gdb_path: Path) -> None:
        self._gdb_path = Path(gdb_path)
        uri = f"{self._gdb_path.resolve().as_uri()}?mode=ro"
        try:
            self._conn = sqlite3.connect(uri, uri=True)
        except sqlite3.Error as exc:
            raise CatalogOpenError(str(self._gdb_path), str(exc)) from exc

        self._conn.row_factory = sqlite3.Row
        try:
            # SQLite opens lazily; touching the schema surfaces a non-database file.
            self._conn.execute("SELECT name FROM sqlite_master LIMIT 1").fetchall()
        except sqlite3.Error as exc:
            self._conn.close()
            raise CatalogOpenError(str(self._gdb_path), str(exc)) from exc

        logger.info("Successfully connected to the geodatabase '%s'.", self._gdb_path.name)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> CatalogReader:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    # ------------------------------------------------------------------
    # Table presence
    # ------------------------------------------------------------------

    def table_exists(self, table: str) -> bool:
        """``True`` if *table* is present in the store."""
        row = self._conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table,),
        ).fetchone()
        return row is not None

    def require_table(self, table: str) -> None:
        """Raise :class:`MissingCatalogTableError` if *table* is absent."""
        if not self.table_exists(table):
            raise MissingCatalogTableError(table)

    def table_columns(self, table: str) -> list[str]:
        """Column names of *table* in declaration order."""
        rows = self._conn.execute(f'PRAGMA table_info("{table}")').fetchall()
        return [row["name"] for row in rows]

    def _select_list(self, table: str, wanted: Sequence[str]) -> str:
        present = {c.lower() for c in self.table_columns(table)}
        parts = []
        for column in wanted:
            if column.lower() in present:
                parts.append(f'"{column}"')
            else:
                logger.debug("Column '%s' absent from %s, reading as NULL.", column, table)
                parts.append(f'NULL AS "{column}"')
        return ", ".join(parts)

    # ------------------------------------------------------------------
    # Scans
    # ------------------------------------------------------------------

    def iter_items(self) -> Iterator[RawItemRow]:
        """Yield usable ``GDB_Items`` rows in catalog order.

        Rows with an empty UUID or an empty definition cannot be
        classified and are skipped without comment.
        """
        sql = f'SELECT {self._select_list(ITEMS_TABLE, _ITEM_COLUMNS)} FROM "{ITEMS_TABLE}"'
        for row in self._conn.execute(sql):
            uuid = _text(row["UUID"])
            definition = _text(row["Definition"])
            if not uuid.strip() or not definition.strip():
                continue
            name = _text(row["Name"])
            physical_name = _text(row["PhysicalName"]) or name
            yield RawItemRow(
                uuid=uuid,
                name=name,
                path=_text(row["Path"]),
                definition=definition,
                type_guid=_text(row["Type"]),
                physical_name=physical_name,
                dataset_name=_text(row["DatasetName"]),
            )

    def iter_relationships(self) -> Iterator[RawRelationshipRow]:
        """Yield every ``GDB_ItemRelationships`` row in catalog order."""
        sql = (
            f"SELECT {self._select_list(RELATIONSHIPS_TABLE, _RELATIONSHIP_COLUMNS)} "
            f'FROM "{RELATIONSHIPS_TABLE}"'
        )
        for row in self._conn.execute(sql):
            yield RawRelationshipRow(
                uuid=_text(row["UUID"]),
                origin_uuid=_text(row["OriginItemUUID"]),
                destination_uuid=_text(row["DestinationItemUUID"]),
                name=_text(row["Name"]),
                definition=_text(row["Definition"]),
            )

    # ------------------------------------------------------------------
    # Point lookups
    # ------------------------------------------------------------------

    def find_domain(self, name: str, type_column: str = DOMAIN_TYPE_COLUMN) -> DomainRecord | None:
        """Look up one domain by exact name.

        Args:
            name: Domain name.
            type_column: Column read as the domain kind label.

        Returns:
            The matching record, or ``None`` when no row matches.

        Raises:
            MissingColumnError: If *type_column* does not exist.
            sqlite3.Error: For any other driver failure.
        """
        # Left unquoted: SQLite reads an unknown double-quoted identifier as a string literal.
        sql = (
            f"SELECT DomainName, Description, FieldType, {type_column} AS DomainType, "
            f'Definition, Owner FROM "{DOMAINS_TABLE}" WHERE DomainName = ?'
        )
        try:
            row = self._conn.execute(sql, (name,)).fetchone()
        except sqlite3.OperationalError as exc:
            if f"no such column: {type_column.lower()}" in str(exc).lower():
                raise MissingColumnError(DOMAINS_TABLE, type_column) from exc
            raise
        if row is None:
            return None
        return DomainRecord(
            name=_text(row["DomainName"]),
            description=_text(row["Description"]),
            field_type=_text(row["FieldType"]),
            domain_type=_text(row["DomainType"]),
            definition=_text(row["Definition"]),
            owner=_text(row["Owner"]),
        )

    def find_spatial_reference(self, srid: int) -> SpatialRefRecord | None:
        """Look up one spatial reference by exact SRID, ``None`` if absent.

        A missing name or WKT column reads as empty text.

        Raises:
            sqlite3.Error: If the table has no usable ``SRID`` column.
        """
        columns = self._select_list(SPATIAL_REFS_TABLE, _SPATIAL_REF_COLUMNS)
        row = self._conn.execute(
            f'SELECT {columns} FROM "{SPATIAL_REFS_TABLE}" WHERE SRID = ?',
            (srid,),
        ).fetchone()
        if row is None:
            return None
        return SpatialRefRecord(srid=srid, name=_text(row["SRName"]), wkt=_text(row["SRTEXT"]))
