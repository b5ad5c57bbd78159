"""Draw vector overlays with :mod:`reportlab` and stamp them onto pages."""

from __future__ import annotations

from io import BytesIO
from typing import Callable

from pypdf import PageObject, PdfReader
from reportlab.pdfgen.canvas import Canvas

from ..core.document import DocumentHandle
from ..core.exceptions import LocalProcessingError
from ..core.utils import get_logger

LOGGER = get_logger("pdfdesk.edit")

DrawCallback = Callable[[Canvas], None]


def build_overlay(width: float, height: float, draw: DrawCallback) -> PageObject:
    """Return a single page of ``width`` x ``height`` points painted by ``draw``."""

    buffer = BytesIO()
    canvas = Canvas(buffer, pagesize=(width, height))
    draw(canvas)
    canvas.showPage()
    canvas.save()
    buffer.seek(0)
    return PdfReader(buffer).pages[0]


def stamp_page(document: DocumentHandle, index: int, draw: DrawCallback) -> None:
    """Paint ``draw`` on top of ``document``'s page at ``index`` in place."""

    page = document.page(index)
    box = page.mediabox
    overlay = build_overlay(float(box.width), float(box.height), draw)
    try:
        page.merge_translated_page(overlay, float(box.left), float(box.bottom), over=True)
    except Exception as exc:  # pragma: no cover - pypdf exceptions vary
        LOGGER.error("Failed to stamp page %s of %s: %s", index + 1, document.name, exc)
        raise LocalProcessingError(f"Unable to draw on page {index + 1}") from exc
