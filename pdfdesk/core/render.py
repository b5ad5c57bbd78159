"""Page rasterisation backed by :mod:`pypdfium2`.

The rendering library is heavy, so :class:`PageRenderer` loads it on first use
and keeps the module handle for the lifetime of the renderer. Tests pass a
custom ``loader`` to substitute a fake library.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from types import ModuleType
from typing import Callable, Iterable, Iterator, Literal

from PIL import Image

from .exceptions import InvalidOptionError, InvalidPageSelectionError, LocalProcessingError
from .utils import get_logger

LOGGER = get_logger("pdfdesk.render")

ImageFormat = Literal["png", "jpeg"]
PdfiumLoader = Callable[[], ModuleType]

PREVIEW_SCALE = 0.5
EXPORT_SCALE = 2.0


def _import_pdfium() -> ModuleType:
    try:
        import pypdfium2 as pdfium
    except ImportError as exc:  # pragma: no cover - declared dependency
        raise LocalProcessingError("pypdfium2 is required to render PDF pages") from exc
    return pdfium


@dataclass(frozen=True)
class RenderedPage:
    """A rasterised page; ``page_number`` is 1-based."""

    page_number: int
    image: Image.Image


def encode_image(image: Image.Image, image_format: ImageFormat = "png", quality: float = 0.95) -> bytes:
    """Encode ``image`` as PNG or JPEG bytes.

    ``quality`` follows the 0-1 scale used by the tools and only applies to
    JPEG output.
    """

    buffer = BytesIO()
    if image_format == "png":
        image.save(buffer, format="PNG")
    elif image_format == "jpeg":
        if not 0.0 < quality <= 1.0:
            raise InvalidOptionError("JPEG quality must be between 0 and 1")
        image.convert("RGB").save(buffer, format="JPEG", quality=int(round(quality * 100)))
    else:
        raise InvalidOptionError(f"Unsupported image format: {image_format}")
    return buffer.getvalue()


class PageRenderer:
    """Render PDF pages to Pillow images using a lazily loaded pdfium module."""

    def __init__(self, loader: PdfiumLoader | None = None) -> None:
        self._loader = loader or _import_pdfium
        self._library: ModuleType | None = None

    @property
    def is_loaded(self) -> bool:
        return self._library is not None

    def library(self) -> ModuleType:
        """Return the rendering module, loading it on the first call only."""

        if self._library is None:
            LOGGER.debug("Loading page rendering library")
            self._library = self._loader()
        return self._library

    def render(
        self,
        data: bytes,
        *,
        scale: float = 1.0,
        pages: Iterable[int] | None = None,
    ) -> Iterator[RenderedPage]:
        """Yield rendered pages of the PDF in ``data`` in page order.

        ``pages`` optionally restricts rendering to the given 0-based indices.
        """

        pdfium = self.library()
        try:
            document = pdfium.PdfDocument(data)
        except Exception as exc:  # pragma: no cover - pdfium errors vary
            LOGGER.error("Failed to open PDF for rendering: %s", exc)
            raise LocalProcessingError("Unable to open PDF for rendering") from exc

        try:
            page_count = len(document)
            indices = list(range(page_count)) if pages is None else list(pages)
            for index in indices:
                if not 0 <= index < page_count:
                    raise InvalidPageSelectionError(
                        f"Page index {index} is out of range for a document with {page_count} page(s)"
                    )
                try:
                    bitmap = document[index].render(scale=scale)
                    image = bitmap.to_pil()
                except Exception as exc:  # pragma: no cover - pdfium errors vary
                    LOGGER.error("Failed to render page %s: %s", index + 1, exc)
                    raise LocalProcessingError(f"Unable to render page {index + 1}") from exc
                LOGGER.debug("Rendered page %s at scale %s", index + 1, scale)
                yield RenderedPage(page_number=index + 1, image=image)
        finally:
            document.close()

    def render_previews(self, data: bytes, *, scale: float = PREVIEW_SCALE) -> list[bytes]:
        """Return PNG thumbnails for every page."""

        return [encode_image(rendered.image, "png") for rendered in self.render(data, scale=scale)]


__all__ = [
    "EXPORT_SCALE",
    "PREVIEW_SCALE",
    "ImageFormat",
    "PageRenderer",
    "PdfiumLoader",
    "RenderedPage",
    "encode_image",
]
