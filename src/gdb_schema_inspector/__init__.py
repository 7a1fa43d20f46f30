"""
GDB Schema Inspector
=====================
Reads the system catalog of a SQLite-backed Esri geodatabase and rebuilds
its schema: feature classes, tables, fields, subtypes, domains, spatial
references and relationship classes.

Public API::

    from src.gdb_schema_inspector import SchemaInspector, extract_schema
"""

from src.gdb_schema_inspector.config import BoundingBox, InspectorConfig, load_config
from src.gdb_schema_inspector.extractor import (
    ExtractionResult,
    ExtractionStatus,
    extract_schema,
)
from src.gdb_schema_inspector.inspector import SchemaInspector
from src.gdb_schema_inspector.models import SchemaModel
from src.gdb_schema_inspector.report import render_report

__all__ = [
    "SchemaInspector",
    "extract_schema",
    "ExtractionResult",
    "ExtractionStatus",
    "SchemaModel",
    "BoundingBox",
    "InspectorConfig",
    "load_config",
    "render_report",
]
__version__ = "1.0.0"
