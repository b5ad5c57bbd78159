"""Place a signature image on one page of a document."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from io import BytesIO

from PIL import Image, UnidentifiedImageError
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen.canvas import Canvas

from ..core.document import DocumentHandle
from ..core.exceptions import (
    InvalidOptionError,
    InvalidPageSelectionError,
    MissingInputError,
    UnsupportedFormatError,
)
from ..core.utils import get_logger
from .overlay import stamp_page

LOGGER = get_logger("pdfdesk.edit")

SIGNED_FILENAME = "signed.pdf"
DEFAULT_SIGNATURE_WIDTH = 150
EDGE_MARGIN = 50
SIGNATURE_FORMATS = ("PNG", "JPEG")


@dataclass(frozen=True)
class SignaturePlacement:
    """Where a signature was drawn; coordinates are PDF points."""

    page_number: int
    x: float
    y: float
    width: float
    height: float


def decode_signature(signature: bytes | str) -> bytes:
    """Return raw image bytes from bytes or a ``data:image/...;base64,`` URL."""

    if isinstance(signature, (bytes, bytearray)):
        return bytes(signature)
    if not signature.startswith("data:") or "," not in signature:
        raise UnsupportedFormatError("Signature must be image bytes or a base64 data URL")
    header, payload = signature.split(",", 1)
    if ";base64" not in header:
        raise UnsupportedFormatError("Signature data URL must be base64 encoded")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise UnsupportedFormatError("Signature data URL is not valid base64") from exc


def signature_placement(
    page_width: float,
    image_width: int,
    image_height: int,
    width: float,
) -> tuple[float, float, float, float]:
    """Return ``(x, y, width, height)`` for a signature in the bottom right corner."""

    height = (image_height / image_width) * width
    x = page_width - width - EDGE_MARGIN
    return x, float(EDGE_MARGIN), float(width), height


def add_signature(
    document: DocumentHandle,
    signature: bytes | str,
    *,
    page_number: int = 1,
    width: float = DEFAULT_SIGNATURE_WIDTH,
) -> SignaturePlacement:
    """Draw ``signature`` on the 1-based ``page_number`` of ``document`` in place."""

    data = decode_signature(signature)
    if not data:
        raise MissingInputError("Please draw or upload a signature")
    if not 1 <= page_number <= document.page_count:
        raise InvalidPageSelectionError(
            f"Page {page_number} does not exist; the document has {document.page_count} page(s)"
        )
    if width <= 0:
        raise InvalidOptionError("Signature width must be positive")

    try:
        with Image.open(BytesIO(data)) as image:
            image_format = image.format
            image_width, image_height = image.size
    except (UnidentifiedImageError, OSError) as exc:
        raise UnsupportedFormatError("Signature must be a PNG or JPEG image") from exc
    if image_format not in SIGNATURE_FORMATS:
        raise UnsupportedFormatError("Signature must be a PNG or JPEG image")

    page_width, _ = document.page_size(page_number - 1)
    x, y, draw_width, draw_height = signature_placement(page_width, image_width, image_height, width)
    reader = ImageReader(BytesIO(data))

    def draw(canvas: Canvas) -> None:
        canvas.drawImage(reader, x, y, width=draw_width, height=draw_height, mask="auto")

    stamp_page(document, page_number - 1, draw)
    LOGGER.info("Signed page %s of %s", page_number, document.name)
    return SignaturePlacement(page_number, x, y, draw_width, draw_height)


__all__ = [
    "DEFAULT_SIGNATURE_WIDTH",
    "SIGNED_FILENAME",
    "SignaturePlacement",
    "add_signature",
    "decode_signature",
    "signature_placement",
]
