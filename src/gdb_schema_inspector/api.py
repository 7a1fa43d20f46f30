"""
GDB Schema Inspector — HTTP API
================================
FastAPI surface over :func:`extract_schema`.

Endpoint:
    POST /api/convert/UploadAndProcess   multipart ``file``, ``targetSrs``, ``bbox``

Responses:
    200  ``{"metadataLog": <text report>}``
    400  ``{"message": ...}`` for a missing/empty upload or a bad bbox
    500  ``{"message": ..., "details": <traceback>}``

Run locally::

    gdb-inspect-api --port 8000
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import traceback
import uuid
from pathlib import Path

import click
from fastapi import APIRouter, FastAPI, File, Form, UploadFile
from fastapi.responses import JSONResponse

from shared.python.exceptions import BoundingBoxError
from src.gdb_schema_inspector.config import DEFAULT_TARGET_SRS, BoundingBox
from src.gdb_schema_inspector.extractor import extract_schema
from src.gdb_schema_inspector.report import render_report

logger = logging.getLogger("gdb_schema_inspector.api")

UPLOAD_EXTENSIONS = (".gdb", ".geodatabase")
LOG_SNIPPET_LIMIT = 2000

router = APIRouter(prefix="/api/convert", tags=["Convert"])


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": message})


def _save_upload(file: UploadFile) -> Path:
    """Copy the upload to a unique path in the system temp directory."""
    name = Path(file.filename or "upload").name
    temp_path = Path(tempfile.gettempdir()) / f"{uuid.uuid4()}_{name}"
    logger.info("Saving uploaded file to temporary path: %s", temp_path)
    with temp_path.open("wb") as out:
        shutil.copyfileobj(file.file, out)
    return temp_path


@router.post("/UploadAndProcess")
def upload_and_process(
    file: UploadFile | None = File(None),
    targetSrs: str = Form(DEFAULT_TARGET_SRS),  # noqa: N803
    bbox: str | None = Form(None),
) -> JSONResponse:
    """Inspect an uploaded geodatabase and return its metadata log."""
    if file is None or not file.filename:
        return _bad_request("No file uploaded.")

    if Path(file.filename).suffix.lower() not in UPLOAD_EXTENSIONS:
        logger.warning("File with potentially unsupported extension uploaded: %s", file.filename)

    temp_path: Path | None = None
    try:
        temp_path = _save_upload(file)
        if temp_path.stat().st_size == 0:
            return _bad_request("No file uploaded.")

        parsed_bbox = None
        if bbox is not None and bbox.strip():
            try:
                parsed_bbox = BoundingBox.from_string(bbox)
            except BoundingBoxError as exc:
                logger.warning("Invalid bounding box: %s", bbox)
                return _bad_request(exc.message)

        logger.info(
            "Starting extraction with input: %s, SRS: %s, BBox: %s",
            temp_path,
            targetSrs,
            parsed_bbox if parsed_bbox is not None else "null",
        )
        report = render_report(extract_schema(temp_path, targetSrs, parsed_bbox))
        logger.debug("Metadata log (snippet): %s", report[:LOG_SNIPPET_LIMIT])
        return JSONResponse(status_code=200, content={"metadataLog": report})
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error during file processing.")
        return JSONResponse(
            status_code=500,
            content={"message": f"An error occurred: {exc}", "details": traceback.format_exc()},
        )
    finally:
        if temp_path is not None and temp_path.exists():
            logger.info("Deleting temporary input file: %s", temp_path)
            temp_path.unlink()


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    application = FastAPI(title="GDB Schema Inspector")
    application.include_router(router)
    return application


app = create_app()


@click.command(name="gdb-inspect-api", help="Serve the upload endpoint with uvicorn.")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
def serve(host: str, port: int) -> None:
    """Run the API with uvicorn."""
    import uvicorn  # noqa: PLC0415

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    serve()
