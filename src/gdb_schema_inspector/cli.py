"""
GDB Schema Inspector — CLI Entry Point
=======================================
Installed as the ``gdb-inspect`` command via ``pyproject.toml``.

Usage:
    gdb-inspect --input data/utilities.geodatabase
    gdb-inspect -i data/utilities.geodatabase -o output/schema.txt --target-srs EPSG:3857
    gdb-inspect -i data/utilities.geodatabase --bbox "-100,40,-90,50"
    gdb-inspect -i data/utilities.geodatabase --config inspect.json
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from shared.python.exceptions import InspectorError
from src.gdb_schema_inspector.config import BoundingBox, InspectorConfig, load_config
from src.gdb_schema_inspector.extractor import ExtractionStatus
from src.gdb_schema_inspector.inspector import SchemaInspector


@click.command(
    name="gdb-inspect",
    help=(
        "Read the system catalog of a SQLite-backed (mobile) Esri geodatabase "
        "and print its feature classes, tables, domains, spatial references "
        "and relationship classes."
    ),
)
@click.option(
    "--input", "-i",
    "input_path",
    required=True,
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
    help="Path to the geodatabase file.\nExample: --input data/utilities.geodatabase",
)
@click.option(
    "--output", "-o",
    "output_path",
    default=None,
    type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
    help="Also write the report to this file.\nExample: --output output/schema.txt",
)
@click.option(
    "--config", "-c",
    "config_path",
    default=None,
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
    help="JSON config file; command-line options take precedence over its values.",
)
@click.option(
    "--target-srs",
    default=None,
    help="Target spatial reference, echoed in the report. [default: EPSG:4326]",
)
@click.option(
    "--bbox",
    default=None,
    help='Bounding box as "minX,minY,maxX,maxY", echoed in the report.',
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug-level logging.",
)
def main(
    input_path: Path,
    output_path: Path | None,
    config_path: Path | None,
    target_srs: str | None,
    bbox: str | None,
    verbose: bool,
) -> None:
    """CLI entry point — wires Click options into SchemaInspector."""
    try:
        config = load_config(config_path) if config_path is not None else InspectorConfig()

        tool = SchemaInspector(
            input_path=input_path,
            output_path=output_path if output_path is not None else config.report_path,
            target_srs=target_srs or config.target_srs,
            bbox=BoundingBox.from_string(bbox) if bbox else config.bbox,
            verbose=verbose or config.verbose,
        )
        tool.run()
    except InspectorError as exc:
        click.echo(f"Error: {exc.message}", err=True)
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        click.secho(f"Unexpected error: {exc}", fg="red", err=True)
        sys.exit(2)

    result = tool.result
    if tool.report_text:
        click.echo(tool.report_text, nl=False)
    if result is None:
        return

    model = result.model
    click.echo(
        f"\nResults: {len(model.feature_classes)} feature classes | "
        f"{len(model.tables)} tables | "
        f"{len(model.domains)} domains | "
        f"{len(model.spatial_references)} spatial references | "
        f"{len(model.relationship_classes)} relationships | "
        f"{len(result.warnings)} warnings"
    )
    if tool.output_path is not None:
        click.echo(f"Report written to: {tool.output_path}")
    if result.status is ExtractionStatus.FAILED:
        sys.exit(1)
    if result.status is ExtractionStatus.ERROR:
        sys.exit(2)


if __name__ == "__main__":
    main()
