"""Text watermarks drawn on every page of a document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen.canvas import Canvas

from ..core.document import DocumentHandle
from ..core.exceptions import InvalidOptionError, MissingInputError
from ..core.utils import get_logger
from .overlay import stamp_page

LOGGER = get_logger("pdfdesk.edit")

WatermarkPosition = Literal["top", "center", "bottom"]

WATERMARK_FILENAME = "watermarked.pdf"
FONT_NAME = "Helvetica"
TEXT_GREY = (0.5, 0.5, 0.5)
EDGE_MARGIN = 50
MIN_FONT_SIZE = 12
MAX_FONT_SIZE = 120
POSITIONS: tuple[WatermarkPosition, ...] = ("top", "center", "bottom")


@dataclass(frozen=True)
class WatermarkOptions:
    text: str
    opacity: float = 0.3
    font_size: int = 48
    rotation: int = 45
    position: WatermarkPosition = "center"

    def __post_init__(self) -> None:
        if not self.text or not self.text.strip():
            raise MissingInputError("Please enter the watermark text")
        if not 0.0 <= self.opacity <= 1.0:
            raise InvalidOptionError("Opacity must be between 0 and 1")
        if not MIN_FONT_SIZE <= self.font_size <= MAX_FONT_SIZE:
            raise InvalidOptionError(f"Font size must be between {MIN_FONT_SIZE} and {MAX_FONT_SIZE}")
        if not 0 <= self.rotation <= 360:
            raise InvalidOptionError("Rotation must be between 0 and 360 degrees")
        if self.position not in POSITIONS:
            raise InvalidOptionError(f"Position must be one of {', '.join(POSITIONS)}")


def watermark_origin(
    page_width: float,
    page_height: float,
    text_width: float,
    font_size: float,
    position: WatermarkPosition,
) -> tuple[float, float]:
    """Return the baseline start of the watermark text on a page."""

    x = (page_width - text_width) / 2
    if position == "top":
        y = page_height - font_size - EDGE_MARGIN
    elif position == "bottom":
        y = font_size + EDGE_MARGIN
    else:
        y = page_height / 2
    return x, y


def add_watermark(document: DocumentHandle, options: WatermarkOptions) -> DocumentHandle:
    """Draw the watermark on every page of ``document`` in place."""

    text_width = stringWidth(options.text, FONT_NAME, options.font_size)

    for index in range(document.page_count):
        width, height = document.page_size(index)
        x, y = watermark_origin(width, height, text_width, options.font_size, options.position)

        def draw(canvas: Canvas, x: float = x, y: float = y) -> None:
            canvas.saveState()
            canvas.setFillColorRGB(*TEXT_GREY)
            canvas.setFillAlpha(options.opacity)
            canvas.setFont(FONT_NAME, options.font_size)
            canvas.translate(x, y)
            canvas.rotate(options.rotation)
            canvas.drawString(0, 0, options.text)
            canvas.restoreState()

        LOGGER.debug("Watermarking page %s at (%.1f, %.1f)", index + 1, x, y)
        stamp_page(document, index, draw)

    LOGGER.info("Added watermark to %d page(s) of %s", document.page_count, document.name)
    return document


__all__ = [
    "POSITIONS",
    "WATERMARK_FILENAME",
    "WatermarkOptions",
    "WatermarkPosition",
    "add_watermark",
    "watermark_origin",
]
