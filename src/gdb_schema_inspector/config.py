"""
GDB Schema Inspector — Configuration
=====================================
Run parameters and their JSON loader.

The target SRS and bounding box are accepted and echoed in the report but
not applied: they are reserved for a later geometry stage.

Example config file::

    {
        "target_srs": "EPSG:3857",
        "bbox": [-100, 40, -90, 50],
        "report_path": "reports/utilities.txt",
        "verbose": false
    }
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from shared.python.exceptions import BoundingBoxError, InputValidationError

DEFAULT_TARGET_SRS = "EPSG:4326"


def _format_coordinate(value: float) -> str:
    """Shortest text that reads back as *value*, without a trailing ``.0``."""
    value = float(value)
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned filter box in target-SRS units.

    Attributes:
        min_x: Western bound.
        min_y: Southern bound.
        max_x: Eastern bound.
        max_y: Northern bound.
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_values(cls, values: Sequence[Any], raw: str | None = None) -> BoundingBox:
        """Build a box from exactly four numbers.

        Raises:
            BoundingBoxError: If there are not four values or one is not a
                finite number.
        """
        label = raw if raw is not None else str(list(values))
        if len(values) != 4:
            raise BoundingBoxError(label, f"expected 4 values, got {len(values)}")
        try:
            numbers = [float(v) for v in values]
        except (TypeError, ValueError) as exc:
            raise BoundingBoxError(label, "contains invalid numbers") from exc
        if not all(math.isfinite(n) for n in numbers):
            raise BoundingBoxError(label, "contains non-finite numbers")
        return cls(*numbers)

    @classmethod
    def from_string(cls, raw: str) -> BoundingBox:
        """Parse ``"minX,minY,maxX,maxY"``."""
        return cls.from_values([part.strip() for part in raw.split(",")], raw=raw)

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.min_x, self.min_y, self.max_x, self.max_y)

    def __str__(self) -> str:
        return ", ".join(_format_coordinate(v) for v in self.as_tuple())


@dataclass(frozen=True)
class InspectorConfig:
    """Parameters of one inspection run.

    Attributes:
        target_srs: Target spatial reference identifier.
        bbox: Optional bounding box.
        report_path: Where to write the text report, ``None`` for stdout only.
        verbose: Enable debug-level logging.
    """

    target_srs: str = DEFAULT_TARGET_SRS
    bbox: BoundingBox | None = None
    report_path: Path | None = None
    verbose: bool = False


def load_config(config_path: Path) -> InspectorConfig:
    """Parse a JSON configuration file into an :class:`InspectorConfig`.

    ``bbox`` may be a list of four numbers or a comma-separated string.

    Raises:
        InputValidationError: If the file cannot be read or parsed, or a
            value has the wrong shape.
    """
    try:
        raw: dict[str, Any] = json.loads(Path(config_path).read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise InputValidationError(
            f"Failed to read config file '{config_path}': {exc}"
        ) from exc
    if not isinstance(raw, dict):
        raise InputValidationError(
            f"Failed to read config file '{config_path}': top level must be an object."
        )

    bbox_raw = raw.get("bbox")
    if bbox_raw is None:
        bbox = None
    elif isinstance(bbox_raw, str):
        bbox = BoundingBox.from_string(bbox_raw)
    elif isinstance(bbox_raw, list):
        bbox = BoundingBox.from_values(bbox_raw)
    else:
        raise BoundingBoxError(str(bbox_raw), "must be a list or a comma-separated string")

    report_path = raw.get("report_path")
    return InspectorConfig(
        target_srs=raw.get("target_srs", DEFAULT_TARGET_SRS),
        bbox=bbox,
        report_path=Path(report_path) if report_path else None,
        verbose=bool(raw.get("verbose", False)),
    )
