"""
Shared fixtures — GDB Schema Inspector tests
=============================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from tests.catalog_fixtures import CatalogBuilder


@pytest.fixture()
def catalog(tmp_path: Path) -> Iterator[CatalogBuilder]:
    """An empty catalog file ready for tables and rows."""
    builder = CatalogBuilder(tmp_path / "test.geodatabase")
    yield builder
    builder.close()
