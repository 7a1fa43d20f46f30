"""
GDB Schema Inspector — Shared Base Tool
========================================
Abstract base for runnable inspector tools.

``run()`` fixes the order of a run: inputs are checked by
``validate_inputs``, the work happens in ``process``, and the elapsed
time is logged afterwards.  Subclasses fill in the first two steps.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path

# Package root logger.  Modules log through children named
# "gdb_schema_inspector.<module>".
logger = logging.getLogger("gdb_schema_inspector")

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"


class GeoTool(ABC):
    """Base class for inspector tools.

    Attributes:
        input_path: The geodatabase (or other primary input) to read.
        output_path: Destination for the tool's output, or ``None`` when
            the result is only kept in memory.
        verbose: Log at DEBUG instead of INFO.
        elapsed: Seconds taken by the last :meth:`run`, ``None`` before it.
    """

    def __init__(
        self,
        input_path: Path,
        output_path: Path | None = None,
        *,
        verbose: bool = False,
    ) -> None:
        self.input_path: Path = Path(input_path)
        self.output_path: Path | None = Path(output_path) if output_path is not None else None
        self.verbose: bool = verbose
        self.elapsed: float | None = None

        self._configure_logging()

    # ------------------------------------------------------------------
    # Steps supplied by subclasses
    # ------------------------------------------------------------------

    @abstractmethod
    def validate_inputs(self) -> None:
        """Check inputs before any work starts.

        Raises:
            InputValidationError: On a missing file, an unsupported
                extension or an unknown CRS.
        """

    @abstractmethod
    def process(self) -> None:
        """Do the tool's work.  Only called once validation passed."""

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Validate, process and log the elapsed time.

        Exceptions raised by either step propagate to the caller.
        """
        logger.info("Starting %s on %s", self.__class__.__name__, self.input_path)
        start = time.perf_counter()

        self.validate_inputs()
        self.process()

        self.elapsed = time.perf_counter() - start
        self._report_success(self.elapsed)

    def _report_success(self, elapsed: float) -> None:
        destination = self.output_path if self.output_path is not None else "(in memory)"
        logger.info("%s finished in %.2fs -> %s", self.__class__.__name__, elapsed, destination)

    def _configure_logging(self) -> None:
        """Install one console handler on the root logger and set its level."""
        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
            logger.addHandler(handler)

        logger.setLevel(logging.DEBUG if self.verbose else logging.INFO)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"input_path={self.input_path!r}, "
            f"output_path={self.output_path!r})"
        )
