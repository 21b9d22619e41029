"""FastAPI application exposing the pdftoolbox operations over HTTP."""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any, List
from urllib.parse import quote

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response

from . import __version__
from .config import load_settings
from .exceptions import (
    DocumentEngineError,
    EmptyResultError,
    PDFToolboxError,
    RendererError,
    ToolOptionError,
)
from .ranges import PageRangeSplitter
from .splitter import split_document, zip_results
from .tools import compress_pdf, get_document_info, merge_documents
from .utils import configure_logging

app = FastAPI(title="pdftoolbox API", version=__version__)
app.state.settings = load_settings()
LOGGER = configure_logging(app.state.settings.log_level)

SKIPPED_HEADER = "X-Pdftoolbox-Skipped"


def _http_error(exc: PDFToolboxError) -> HTTPException:
    """Translate a library error into the matching HTTP error."""

    if isinstance(exc, (EmptyResultError, ToolOptionError)):
        return HTTPException(status_code=400, detail=exc.message)
    if isinstance(exc, (DocumentEngineError, RendererError)):
        return HTTPException(status_code=422, detail=exc.message)
    return HTTPException(status_code=500, detail=exc.message)


async def _read_upload(request: Request, upload: UploadFile) -> bytes:
    """Return the upload contents, rejecting empty and oversized files."""

    contents = await upload.read()
    if not contents:
        raise HTTPException(status_code=400, detail=f"File '{upload.filename}' is empty.")

    limit = request.app.state.settings.max_upload_bytes
    if len(contents) > limit:
        raise HTTPException(
            status_code=413,
            detail=f"File '{upload.filename}' exceeds the {limit // (1024 * 1024)} MB upload limit.",
        )
    return contents


def _stem(filename: str | None, default: str) -> str:
    if not filename:
        return default
    return Path(filename).stem or default


def _attachment(filename: str) -> dict[str, str]:
    """Build a Content-Disposition header; non-ASCII names use RFC 5987 encoding."""

    quoted = quote(filename)
    if quoted != filename:
        return {"Content-Disposition": f"attachment; filename*=utf-8''{quoted}"}
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@app.get("/health", response_class=JSONResponse)
async def health() -> dict[str, str]:
    """Lightweight health endpoint for uptime checks."""
    return {"status": "ok"}


@app.post("/info", response_class=JSONResponse)
async def document_info(
    request: Request,
    file: UploadFile = File(..., description="PDF to inspect."),
    password: str | None = Form(None, description="Password for encrypted PDFs."),
) -> dict[str, Any]:
    contents = await _read_upload(request, file)
    try:
        info = await run_in_threadpool(get_document_info, contents, password=password)
    except PDFToolboxError as exc:
        raise _http_error(exc) from exc
    return dataclasses.asdict(info)


@app.post(
    "/split",
    summary="Split a PDF by page ranges",
    response_description="Zip archive with one PDF per page range.",
)
async def split(
    request: Request,
    file: UploadFile = File(..., description="Source PDF to split."),
    ranges: str | None = Form(
        None,
        description="Comma separated page ranges, e.g. '1-3, 5, 7-9'. Defaults to every page.",
    ),
    password: str | None = Form(None, description="Password for encrypted PDFs."),
) -> Response:
    """Split the upload into one PDF per range and return them zipped.

    Segments that are malformed, out of range or reversed are ignored and
    listed as JSON in the ``X-Pdftoolbox-Skipped`` response header.
    """

    contents = await _read_upload(request, file)
    settings = request.app.state.settings

    try:
        if ranges is None or not ranges.strip():
            info = await run_in_threadpool(get_document_info, contents, password=password)
            ranges = PageRangeSplitter.default_range(info.num_pages)
        results, report = await run_in_threadpool(
            split_document,
            contents,
            ranges,
            password=password,
            max_workers=settings.split_workers,
        )
        archive = await run_in_threadpool(zip_results, results)
    except PDFToolboxError as exc:
        raise _http_error(exc) from exc

    LOGGER.info("Split %s into %d documents", file.filename, len(results))
    skipped = [{"text": segment.text, "reason": segment.reason} for segment in report.skipped]
    headers = _attachment(f"{_stem(file.filename, 'document')}_split.zip")
    headers[SKIPPED_HEADER] = json.dumps(skipped)
    headers["X-Pdftoolbox-Document-Count"] = str(len(results))
    return Response(content=archive, media_type="application/zip", headers=headers)


@app.post("/merge")
async def merge(
    request: Request,
    files: List[UploadFile] = File(..., description="PDF files to merge, in order."),
) -> Response:
    if not files:
        raise HTTPException(status_code=400, detail="At least one PDF must be provided.")

    sources = [await _read_upload(request, upload) for upload in files]
    try:
        merged = await run_in_threadpool(merge_documents, sources)
    except PDFToolboxError as exc:
        raise _http_error(exc) from exc

    return Response(content=merged, media_type="application/pdf", headers=_attachment("merged.pdf"))


@app.post("/compress")
async def compress(
    request: Request,
    file: UploadFile = File(..., description="PDF to compress."),
    level: str | None = Form(None, description="Compression preset: low, medium or high."),
) -> Response:
    """Re-render the upload as JPEG pages; sizes are reported in headers."""

    contents = await _read_upload(request, file)
    level = level or request.app.state.settings.compression_level
    try:
        result = await run_in_threadpool(compress_pdf, contents, level)
    except PDFToolboxError as exc:
        raise _http_error(exc) from exc

    headers = _attachment(f"{_stem(file.filename, 'document')}_compressed.pdf")
    headers["X-Pdftoolbox-Original-Size"] = str(result.original_size)
    headers["X-Pdftoolbox-Compressed-Size"] = str(result.compressed_size)
    return Response(content=result.data, media_type="application/pdf", headers=headers)


__all__ = ["app"]
