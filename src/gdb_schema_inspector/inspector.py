"""
GDB Schema Inspector — Tool Class
==================================
:class:`SchemaInspector` wraps :func:`extract_schema` in the shared
:class:`~shared.python.GeoTool` pipeline so the CLI gets input validation,
logging setup and an optional report file.

Usage::

    tool = SchemaInspector(
        input_path=Path("data/utilities.geodatabase"),
        output_path=Path("output/utilities.txt"),
        target_srs="EPSG:3857",
    )
    tool.run()
    print(tool.report_text)
"""

from __future__ import annotations

import logging
from pathlib import Path

from shared.python.base_tool import GeoTool
from shared.python.exceptions import OutputWriteError
from shared.python.validators import Validators
from src.gdb_schema_inspector.config import DEFAULT_TARGET_SRS, BoundingBox
from src.gdb_schema_inspector.extractor import ExtractionResult, extract_schema
from src.gdb_schema_inspector.report import TextReporter, render_report

logger = logging.getLogger("gdb_schema_inspector.inspector")


class SchemaInspector(GeoTool):
    """Extract the schema of one geodatabase and render its text report.

    Inherits the Template Method pipeline from :class:`~shared.python.GeoTool`:
    ``validate_inputs`` → ``process`` → ``_report_success``.

    Args:
        input_path: Path to the geodatabase file.
        output_path: Optional path for the text report.
        target_srs: Target spatial reference (validated, then echoed).
        bbox: Optional bounding box (echoed).
        verbose: Enable DEBUG-level logging.
    """

    SUPPORTED_EXTENSIONS = [".geodatabase", ".gdb", ".sqlite"]

    def __init__(
        self,
        input_path: Path,
        output_path: Path | None = None,
        target_srs: str = DEFAULT_TARGET_SRS,
        bbox: BoundingBox | None = None,
        *,
        verbose: bool = False,
    ) -> None:
        super().__init__(input_path, output_path, verbose=verbose)
        self.target_srs = target_srs
        self.bbox = bbox

        self._result: ExtractionResult | None = None
        self._report_text: str | None = None

    # ------------------------------------------------------------------
    # GeoTool abstract method implementations
    # ------------------------------------------------------------------

    def validate_inputs(self) -> None:
        """Check the geodatabase path, the target SRS and the report location.

        Raises:
            InputValidationError: If the file is missing or has an
                unsupported extension, or the report dir is not writable.
            CRSError: If the target SRS cannot be parsed.
        """
        Validators.assert_file_exists(self.input_path)
        Validators.assert_supported_extension(self.input_path, self.SUPPORTED_EXTENSIONS)
        Validators.assert_crs_valid(self.target_srs)
        if self.output_path is not None:
            Validators.assert_output_dir_writable(self.output_path)
        logger.debug("Input validated: %s", self.input_path)

    def process(self) -> None:
        """Run the extraction and write the report when a path was given.

        Raises:
            OutputWriteError: If writing the report to disk fails.
        """
        self._result = extract_schema(self.input_path, self.target_srs, self.bbox)

        if self.output_path is None:
            self._report_text = render_report(self._result)
            return

        reporter = TextReporter(self._result, self.output_path)
        self._report_text = reporter.render()
        try:
            reporter.write()
        except OSError as exc:
            raise OutputWriteError(str(self.output_path), str(exc)) from exc

    # ------------------------------------------------------------------
    # Public accessors
    # ------------------------------------------------------------------

    @property
    def result(self) -> ExtractionResult | None:
        """The :class:`ExtractionResult` of the last :meth:`run`, or ``None``."""
        return self._result

    @property
    def report_text(self) -> str | None:
        """Rendered report of the last :meth:`run`, or ``None``."""
        return self._report_text
