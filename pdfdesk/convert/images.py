"""Conversions between raster images and PDF documents."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from typing import Iterable, Sequence

from PIL import Image, UnidentifiedImageError
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen.canvas import Canvas

from ..core.document import DocumentHandle
from ..core.exceptions import InvalidOptionError, LocalProcessingError, MissingInputError
from ..core.render import EXPORT_SCALE, ImageFormat, PageRenderer, encode_image
from ..core.utils import get_logger
from ..core.validator import detect_image_kind
from ..delivery.sinks import Delivery

LOGGER = get_logger("pdfdesk.convert")

IMAGES_FILENAME = "converted-images.pdf"
IMAGE_FORMATS: tuple[ImageFormat, ...] = ("png", "jpeg")
MIN_JPEG_QUALITY = 0.5
DEFAULT_JPEG_QUALITY = 0.95


@dataclass(frozen=True)
class ImageUpload:
    filename: str
    data: bytes
    content_type: str | None = None


def partition_images(uploads: Iterable[ImageUpload]) -> tuple[list[ImageUpload], list[ImageUpload]]:
    """Split ``uploads`` into accepted PNG/JPEG images and skipped files."""

    accepted: list[ImageUpload] = []
    skipped: list[ImageUpload] = []
    for upload in uploads:
        if detect_image_kind(upload.filename, upload.content_type) is None:
            skipped.append(upload)
        else:
            accepted.append(upload)
    return accepted, skipped


def images_to_pdf(uploads: Sequence[ImageUpload], *, name: str = IMAGES_FILENAME) -> DocumentHandle:
    """Build a PDF with one page per image, each page sized to its image.

    Files that are not PNG or JPEG images are skipped with a warning.
    """

    accepted, skipped = partition_images(uploads)
    if skipped:
        LOGGER.warning(
            "Skipped %d file(s) that are not JPG or PNG images: %s",
            len(skipped),
            ", ".join(upload.filename for upload in skipped),
        )
    if not accepted:
        raise MissingInputError("Please choose at least one JPG or PNG image")

    buffer = BytesIO()
    canvas = Canvas(buffer)
    for upload in accepted:
        try:
            with Image.open(BytesIO(upload.data)) as image:
                width, height = image.size
        except (UnidentifiedImageError, OSError) as exc:
            LOGGER.error("Failed to read image %s: %s", upload.filename, exc)
            raise LocalProcessingError(f"Unable to read image {upload.filename}") from exc

        canvas.setPageSize((width, height))
        canvas.drawImage(
            ImageReader(BytesIO(upload.data)),
            0,
            0,
            width=width,
            height=height,
            mask="auto",
        )
        canvas.showPage()
        LOGGER.debug("Added %s as a %dx%d page", upload.filename, width, height)
    canvas.save()

    document = DocumentHandle.open(buffer.getvalue(), name=name)
    LOGGER.info("Converted %d image(s) into %s", document.page_count, name)
    return document


def pdf_to_images(
    data: bytes,
    *,
    image_format: ImageFormat = "png",
    quality: float = DEFAULT_JPEG_QUALITY,
    renderer: PageRenderer | None = None,
    scale: float = EXPORT_SCALE,
) -> list[Delivery]:
    """Render every page of the PDF in ``data`` to ``page-<n>.<format>`` files."""

    if image_format not in IMAGE_FORMATS:
        raise InvalidOptionError(f"Image format must be one of {', '.join(IMAGE_FORMATS)}")
    if image_format == "jpeg" and not MIN_JPEG_QUALITY <= quality <= 1.0:
        raise InvalidOptionError(f"JPEG quality must be between {MIN_JPEG_QUALITY} and 1")

    renderer = renderer or PageRenderer()
    mime_type = f"image/{image_format}"
    outputs = [
        Delivery(
            filename=f"page-{rendered.page_number}.{image_format}",
            mime_type=mime_type,
            data=encode_image(rendered.image, image_format, quality),
        )
        for rendered in renderer.render(data, scale=scale)
    ]
    LOGGER.info("Rendered %d page(s) to %s", len(outputs), image_format.upper())
    return outputs


__all__ = [
    "DEFAULT_JPEG_QUALITY",
    "IMAGES_FILENAME",
    "IMAGE_FORMATS",
    "ImageUpload",
    "images_to_pdf",
    "partition_images",
    "pdf_to_images",
]
