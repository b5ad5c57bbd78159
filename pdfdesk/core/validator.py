"""Validation helpers shared by PdfDesk tools.

Format checks only look at the file extension and the declared MIME type.
They run before any file is read so that an unsupported input blocks the
action entirely.
"""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Literal

from .exceptions import UnsupportedFormatError

ImageKind = Literal["png", "jpeg"]

PDF_MIME_TYPE = "application/pdf"
PDF_EXTENSIONS = (".pdf",)

IMAGE_MIME_TYPES: dict[str, ImageKind] = {
    "image/png": "png",
    "image/jpeg": "jpeg",
    "image/jpg": "jpeg",
}

EXCEL_MIME_TYPES = (
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-excel.sheet.macroEnabled.12",
)
EXCEL_EXTENSIONS = (".xlsx", ".xls", ".xlsm")


def _suffix(filename: str | None) -> str:
    if not filename:
        return ""
    return Path(filename).suffix.lower()


def is_pdf(filename: str | None, content_type: str | None = None) -> bool:
    if content_type and content_type.lower() == PDF_MIME_TYPE:
        return True
    return _suffix(filename) in PDF_EXTENSIONS


def is_excel(filename: str | None, content_type: str | None = None) -> bool:
    if content_type and content_type in EXCEL_MIME_TYPES:
        return True
    return _suffix(filename) in EXCEL_EXTENSIONS


def detect_image_kind(filename: str | None, content_type: str | None = None) -> ImageKind | None:
    """Return ``"png"`` or ``"jpeg"`` for accepted images, otherwise ``None``.

    The declared ``content_type`` wins; without one the MIME type is guessed
    from the filename.
    """

    mime = content_type.lower() if content_type else None
    if not mime and filename:
        mime, _ = mimetypes.guess_type(filename)
    if not mime:
        return None
    return IMAGE_MIME_TYPES.get(mime)


def ensure_pdf(filename: str | None, content_type: str | None = None) -> None:
    if not is_pdf(filename, content_type):
        raise UnsupportedFormatError(f"Please choose a PDF file (got {filename or 'unnamed file'})")


def ensure_excel(filename: str | None, content_type: str | None = None) -> None:
    if not is_excel(filename, content_type):
        raise UnsupportedFormatError("Please upload an Excel file (.xlsx, .xls, .xlsm)")

