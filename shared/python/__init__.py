"""
GDB Schema Inspector — Shared Python Package
=============================================
Re-exports the shared base class, exception hierarchy, and validator
utilities so tool modules can import from a single location::

    from shared.python import GeoTool, Validators
    from shared.python.exceptions import CatalogOpenError
"""

from shared.python.base_tool import GeoTool
from shared.python.exceptions import (
    BoundingBoxError,
    CatalogError,
    CatalogOpenError,
    CRSError,
    InputValidationError,
    InspectorError,
    MissingCatalogTableError,
    OutputWriteError,
)
from shared.python.validators import Validators

__all__ = [
    "GeoTool",
    "Validators",
    "InspectorError",
    "InputValidationError",
    "CRSError",
    "BoundingBoxError",
    "CatalogError",
    "CatalogOpenError",
    "MissingCatalogTableError",
    "OutputWriteError",
]
