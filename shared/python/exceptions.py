"""
GDB Schema Inspector — Custom Exception Hierarchy
==================================================
Every inspector module raises exceptions from this module so callers can
catch them at the right level of granularity.

Hierarchy::

    InspectorError                       ← catch-all base
    ├── InputValidationError             ← bad files, bad extensions, bad config
    │   ├── CRSError                     ← invalid / unknown target CRS string
    │   └── BoundingBoxError             ← bbox not four finite numbers
    ├── CatalogError                     ← geodatabase catalog problems
    │   ├── CatalogOpenError             ← store cannot be opened / not SQLite
    │   └── MissingCatalogTableError     ← mandatory system table absent
    └── OutputWriteError                 ← cannot write the report file

Usage::

    from shared.python.exceptions import MissingCatalogTableError

    raise MissingCatalogTableError("GDB_Items")
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


class InspectorError(Exception):
    """Base exception for the inspector.

    Catch this to handle any inspector-specific error without caring about
    the exact subtype.

    Args:
        message: Human-readable description of the error.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message: str = message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class InputValidationError(InspectorError):
    """Raised when the inspector's inputs fail pre-processing validation.

    This is the parent class for more specific input problems.
    """


class CRSError(InputValidationError):
    """Raised when the target CRS string cannot be parsed.

    Args:
        crs_string: The raw CRS string that caused the error
                    (e.g. ``"EPSG:99999"``).
    """

    def __init__(self, crs_string: str) -> None:
        super().__init__(
            f"Invalid or unrecognised CRS: '{crs_string}'. "
            "Use an EPSG code (e.g. 'EPSG:4326') or a valid WKT/PROJ string."
        )
        self.crs_string: str = crs_string


class BoundingBoxError(InputValidationError):
    """Raised when a bounding box is not exactly four finite numbers.

    Args:
        raw: The raw bounding-box input as supplied by the caller.
        reason: Short explanation of what was wrong.
    """

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(
            f"Invalid bounding box '{raw}': {reason}. "
            "Expected 4 comma-separated numbers (minX,minY,maxX,maxY)."
        )
        self.raw: str = raw
        self.reason: str = reason


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class CatalogError(InspectorError):
    """Raised for problems reading the geodatabase system catalog."""


class CatalogOpenError(CatalogError):
    """Raised when the geodatabase file cannot be opened as a SQLite store.

    Args:
        path: Path of the store that failed to open.
        reason: Underlying driver error message.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot open geodatabase '{path}': {reason}")
        self.path: str = path
        self.reason: str = reason


class MissingCatalogTableError(CatalogError):
    """Raised when a mandatory catalog table is absent from the store.

    Args:
        table: Name of the missing system table (e.g. ``"GDB_Items"``).
    """

    def __init__(self, table: str) -> None:
        super().__init__(
            f"Table '{table}' not found in the database. "
            "Cannot proceed with metadata extraction."
        )
        self.table: str = table


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class OutputWriteError(InspectorError):
    """Raised when the report cannot be written to the requested path.

    Args:
        path: The output path that could not be written.
        reason: Underlying OS error message.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot write output to '{path}': {reason}")
        self.path: str = path
        self.reason: str = reason
