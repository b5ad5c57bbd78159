"""FastAPI application exposing PdfDesk tools over HTTP."""

from __future__ import annotations

import base64
import binascii
import unicodedata
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Any, Iterable, List
from urllib.parse import quote
from zipfile import ZipFile

import httpx
from fastapi import (
    BackgroundTasks,
    FastAPI,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
)
from fastapi.concurrency import run_in_threadpool
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from pdfdesk import (
    ConversionSettings,
    ExcelConversionAdapter,
    InvalidOptionError,
    InvalidPageSelectionError,
    MissingInputError,
    PdfDeskError,
    ServiceMisconfiguredError,
    ToolContext,
    ToolInput,
    UnsupportedFormatError,
    build_provider,
    excel_output_filename,
    registry,
)
from pdfdesk.convert.excel import DEFAULT_TIMEOUT
from pdfdesk.core.utils import format_file_size, get_logger
from pdfdesk.delivery import DirectorySink

LOGGER = get_logger("pdfdesk.api")

app = FastAPI(title="PdfDesk API", version="0.1.0")
DOCS_PREFIX = "/api"

CLIENT_ERRORS = (
    MissingInputError,
    UnsupportedFormatError,
    InvalidPageSelectionError,
    InvalidOptionError,
)


class ExcelConversionRequest(BaseModel):
    """JSON body posted by the browser: the workbook as base64 and its name."""

    model_config = ConfigDict(populate_by_name=True)

    base64_data: str | None = Field(None, alias="base64Data")
    file_name: str = Field("spreadsheet.xlsx", alias="fileName")


def _cleanup_temp_dir(background_tasks: BackgroundTasks, temp_dir: TemporaryDirectory) -> None:
    """Schedule ``temp_dir`` to be cleaned up after the response is sent."""

    background_tasks.add_task(temp_dir.cleanup)


def _zip_outputs(files: Iterable[Path], destination: Path) -> Path:
    """Create a zip archive containing ``files`` at ``destination``."""

    with ZipFile(destination, "w") as archive:
        for file_path in files:
            archive.write(file_path, arcname=file_path.name)
    return destination


def _safe_filename(filename: str | None, default: str) -> str:
    """Return a filesystem-safe filename derived from user input."""

    if not filename:
        return default

    candidate = Path(filename).name
    return candidate or default


def _attachment_header(filename: str) -> str:
    """Return a ``Content-Disposition`` value that survives non-ASCII names.

    Header values travel as latin-1, so the plain ``filename`` parameter gets
    an ASCII rendition and the exact name goes into the RFC 5987
    ``filename*`` parameter.
    """

    ascii_name = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    ascii_name = ascii_name.replace("\\", "_").replace("\"", "_").strip() or "download"
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


async def _read_upload(upload: UploadFile, default: str) -> ToolInput:
    contents = await upload.read()
    if not contents:
        raise HTTPException(status_code=400, detail=f"File '{upload.filename}' is empty.")
    return ToolInput(
        filename=_safe_filename(upload.filename, default),
        data=contents,
        content_type=upload.content_type,
    )


def _parse_page_order(raw_value: str) -> list[int]:
    """Parse comma separated 1-based page numbers into 0-based indices."""

    items = [item.strip() for item in raw_value.split(",") if item.strip()]
    if not items:
        raise HTTPException(status_code=400, detail="'order' must contain at least one page.")
    try:
        parsed = [int(item) for item in items]
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="'order' must be integers.") from exc
    if any(number < 1 for number in parsed):
        raise HTTPException(status_code=400, detail="'order' must be positive integers.")
    return [number - 1 for number in parsed]


async def _run_tool(
    background_tasks: BackgroundTasks,
    tool_name: str,
    inputs: List[ToolInput],
    config: dict[str, Any] | None = None,
    *,
    archive_name: str | None = None,
) -> tuple[FileResponse, ToolContext]:
    """Run ``tool_name`` in a worker thread and answer with its output file.

    Outputs are written to a temporary directory that is removed once the
    response has been sent. Tools producing several files are answered with
    a zip archive named ``archive_name``.
    """

    temp_dir = TemporaryDirectory()
    temp_path = Path(temp_dir.name)
    sink = DirectorySink(temp_path / "outputs")
    context = ToolContext(inputs=inputs, sink=sink, config={"delivery_pause": 0.0, **(config or {})})

    try:
        await run_in_threadpool(registry.run, tool_name, context)
    except CLIENT_ERRORS as exc:
        temp_dir.cleanup()
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PdfDeskError as exc:
        temp_dir.cleanup()
        LOGGER.error("%s failed: %s", tool_name, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    _cleanup_temp_dir(background_tasks, temp_dir)

    if archive_name is not None:
        archive_path = _zip_outputs(sink.delivered, temp_path / archive_name)
        return FileResponse(archive_path, media_type="application/zip", filename=archive_name), context

    output_path = sink.delivered[0]
    media_type = context.resources["deliveries"][0].mime_type
    return FileResponse(output_path, media_type=media_type, filename=output_path.name), context


@app.get("/health", response_class=JSONResponse)
async def health() -> dict[str, str]:
    """Lightweight health endpoint for uptime checks."""
    return {"status": "ok"}


@app.get(
    f"{DOCS_PREFIX}/openapi.json",
    include_in_schema=False,
    name="prefixed_openapi",
)
async def prefixed_openapi() -> JSONResponse:
    """Expose the OpenAPI schema under the gateway's ``/api`` prefix."""

    return JSONResponse(app.openapi())


@app.get(f"{DOCS_PREFIX}/docs", include_in_schema=False)
async def prefixed_swagger_ui(request: Request) -> HTMLResponse:
    """Serve Swagger UI from the same ``/api`` prefix used by the gateway."""

    return get_swagger_ui_html(
        openapi_url=str(request.url_for("prefixed_openapi")),
        title=f"{app.title} - Swagger UI",
    )


@app.post("/merge", response_class=FileResponse)
async def merge_documents(
    background_tasks: BackgroundTasks,
    files: List[UploadFile] = File(..., description="PDF files to merge, in output order"),
) -> FileResponse:
    """Merge the uploaded PDFs into ``merged.pdf`` in upload order."""

    if len(files) < 2:
        raise HTTPException(status_code=400, detail="Please provide at least 2 PDF files to merge")

    inputs = [await _read_upload(upload, f"document_{index}.pdf") for index, upload in enumerate(files, start=1)]
    response, _ = await _run_tool(background_tasks, "merge", inputs)
    return response


@app.post(
    "/split",
    response_class=FileResponse,
    summary="Split a PDF into one document per page",
    response_description="Zip archive containing page-<n>.pdf files.",
)
async def split_document(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(..., description="Source PDF to split."),
) -> FileResponse:
    inputs = [await _read_upload(file, "document.pdf")]
    response, _ = await _run_tool(background_tasks, "split", inputs, archive_name="pages.zip")
    return response


@app.post(
    "/organize",
    response_class=FileResponse,
    summary="Reorder or drop pages",
    response_description="organized.pdf with the pages in the requested order.",
)
async def organize_document(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(..., description="Source PDF."),
    order: str = Form(..., description="Comma separated 1-based page numbers to keep, e.g. '3,1,2'."),
) -> FileResponse:
    """Rebuild the document with only the listed pages, in the listed order."""

    page_order = _parse_page_order(order)
    inputs = [await _read_upload(file, "document.pdf")]
    response, _ = await _run_tool(background_tasks, "organize", inputs, {"order": page_order})
    return response


@app.post("/rotate", response_class=FileResponse)
async def rotate_document(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(..., description="Source PDF."),
    degrees: int = Form(90, description="Absolute rotation: 0, 90, 180 or 270."),
) -> FileResponse:
    inputs = [await _read_upload(file, "document.pdf")]
    response, _ = await _run_tool(background_tasks, "rotate", inputs, {"degrees": degrees})
    return response


@app.post("/watermark", response_class=FileResponse)
async def watermark_document(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(..., description="Source PDF."),
    text: str = Form(..., description="Watermark text."),
    opacity: float = Form(0.3),
    font_size: int = Form(48),
    rotation: int = Form(45),
    position: str = Form("center", description="top, center or bottom"),
) -> FileResponse:
    inputs = [await _read_upload(file, "document.pdf")]
    config = {
        "text": text,
        "opacity": opacity,
        "font_size": font_size,
        "rotation": rotation,
        "position": position,
    }
    response, _ = await _run_tool(background_tasks, "watermark", inputs, config)
    return response


@app.post("/sign", response_class=FileResponse)
async def sign_document(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(..., description="Source PDF."),
    signature: UploadFile | None = File(None, description="PNG or JPEG signature image."),
    signature_data_url: str | None = Form(None, description="Signature as a base64 data URL."),
    page_number: int = Form(1, description="1-based page to sign."),
    width: float = Form(150, description="Signature width in points."),
) -> FileResponse:
    """Place the signature in the bottom right corner of one page."""

    if signature is not None:
        signature_value: bytes | str = await signature.read()
    elif signature_data_url:
        signature_value = signature_data_url
    else:
        raise HTTPException(status_code=400, detail="Please draw or upload a signature")

    inputs = [await _read_upload(file, "document.pdf")]
    config = {"signature": signature_value, "page_number": page_number, "width": width}
    response, _ = await _run_tool(background_tasks, "sign", inputs, config)
    return response


@app.post("/compress", response_class=FileResponse)
async def compress_document(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(..., description="Source PDF."),
    level: str = Form("medium", description="low, medium or high"),
) -> FileResponse:
    """Compress the PDF; size statistics are returned in response headers."""

    inputs = [await _read_upload(file, "document.pdf")]
    response, context = await _run_tool(background_tasks, "compress", inputs, {"level": level})
    result = context.resources["compression"]
    response.headers["X-PdfDesk-Original-Size"] = str(result.original_size)
    response.headers["X-PdfDesk-Compressed-Size"] = str(result.compressed_size)
    response.headers["X-PdfDesk-Savings-Percentage"] = str(result.savings_percentage)
    LOGGER.info(
        "Compressed upload from %s to %s",
        format_file_size(result.original_size),
        format_file_size(result.compressed_size),
    )
    return response


@app.post("/convert/images-to-pdf", response_class=FileResponse)
async def convert_images_to_pdf(
    background_tasks: BackgroundTasks,
    files: List[UploadFile] = File(..., description="PNG or JPEG images, one page each."),
) -> FileResponse:
    inputs = [await _read_upload(upload, f"image_{index}") for index, upload in enumerate(files, start=1)]
    response, context = await _run_tool(background_tasks, "images-to-pdf", inputs)
    skipped = context.resources.get("skipped") or []
    if skipped:
        response.headers["X-PdfDesk-Skipped-Files"] = ",".join(skipped)
    return response


@app.post(
    "/convert/pdf-to-images",
    response_class=FileResponse,
    response_description="Zip archive containing page-<n>.png or page-<n>.jpeg files.",
)
async def convert_pdf_to_images(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(..., description="Source PDF."),
    image_format: str = Form("png", description="png or jpeg"),
    quality: float = Form(0.95, description="JPEG quality between 0.5 and 1."),
) -> FileResponse:
    inputs = [await _read_upload(file, "document.pdf")]
    config = {"format": image_format, "quality": quality}
    response, _ = await _run_tool(background_tasks, "pdf-to-images", inputs, config, archive_name="images.zip")
    return response


def build_excel_adapter(client: httpx.AsyncClient) -> ExcelConversionAdapter:
    """Return an adapter for the provider configured in the environment."""

    settings = ConversionSettings.from_env()
    return ExcelConversionAdapter(build_provider(settings, client))


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@app.post(f"{DOCS_PREFIX}/excel-to-pdf")
async def excel_to_pdf(payload: ExcelConversionRequest) -> Response:
    """Convert a base64 encoded workbook through the remote conversion service.

    Errors are answered as ``{"error": message}``: 400 when the file data is
    missing, 500 for configuration problems and failed conversions.
    """

    if not payload.base64_data:
        return _error_response("Missing file data", 400)
    try:
        data = base64.b64decode(payload.base64_data, validate=True)
    except (binascii.Error, ValueError):
        return _error_response("File data is not valid base64", 400)

    try:
        async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as client:
            adapter = build_excel_adapter(client)
            pdf = await adapter.convert(data, payload.file_name)
    except ServiceMisconfiguredError as exc:
        LOGGER.error("Excel conversion is not configured: %s", exc)
        return _error_response("Server configuration error", 500)
    except PdfDeskError as exc:
        LOGGER.error("Excel to PDF conversion failed: %s", exc)
        return _error_response(str(exc), 500)
    except Exception as exc:  # pragma: no cover - defensive conversion to HTTP error
        LOGGER.exception("Unexpected Excel to PDF failure")
        return _error_response(f"Conversion failed: {exc}", 500)

    filename = _safe_filename(excel_output_filename(payload.file_name), "spreadsheet.pdf")
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": _attachment_header(filename)},
    )


__all__ = ["ExcelConversionRequest", "app", "build_excel_adapter"]
