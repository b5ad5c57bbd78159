"""Lossless and lossy size reduction for a loaded document."""

from __future__ import annotations

import dataclasses
from typing import Literal

from PIL import Image
from pypdf import PageObject

from ..core.document import DocumentHandle
from ..core.exceptions import InvalidOptionError
from ..core.utils import format_file_size, get_logger

LOGGER = get_logger("pdfdesk.compress")

COMPRESSED_FILENAME = "compressed.pdf"

CompressionLevelName = Literal["low", "medium", "high"]


@dataclasses.dataclass(slots=True)
class CompressionLevel:
    """Defines behavioural toggles for compression levels."""

    name: CompressionLevelName
    image_quality: int
    downsample_ratio: float
    recompress_streams: bool


@dataclasses.dataclass(slots=True)
class CompressionResult:
    """Represents the outcome of a compression run."""

    level: CompressionLevelName
    original_size: int
    compressed_size: int

    @property
    def bytes_saved(self) -> int:
        return max(self.original_size - self.compressed_size, 0)

    @property
    def compression_ratio(self) -> float:
        if self.original_size == 0:
            return 1.0
        return self.compressed_size / self.original_size

    @property
    def savings_percentage(self) -> int:
        if self.original_size == 0 or self.compressed_size == 0:
            return 0
        return round((self.original_size - self.compressed_size) / self.original_size * 100)

    def summary(self) -> str:
        return (
            f"Original size: {format_file_size(self.original_size)}, "
            f"compressed size: {format_file_size(self.compressed_size)}, "
            f"savings: {self.savings_percentage}%"
        )


LEVELS: dict[CompressionLevelName, CompressionLevel] = {
    "low": CompressionLevel("low", image_quality=95, downsample_ratio=1.0, recompress_streams=True),
    "medium": CompressionLevel("medium", image_quality=80, downsample_ratio=0.75, recompress_streams=True),
    "high": CompressionLevel("high", image_quality=65, downsample_ratio=0.5, recompress_streams=True),
}


def _downsample_page_images(page: PageObject, level: CompressionLevel) -> None:
    try:
        images = list(page.images)
    except Exception:  # pragma: no cover - best effort
        images = []

    for image_file in images:
        try:
            image = image_file.image
            if image is None:
                continue
            new_size = (
                max(1, int(image.width * level.downsample_ratio)),
                max(1, int(image.height * level.downsample_ratio)),
            )
            if new_size == image.size:
                continue
            resized = image.resize(new_size, Image.LANCZOS)
            if resized.mode not in {"RGB", "L"}:
                resized = resized.convert("RGB")
            image_file.replace(resized, quality=level.image_quality)
        except Exception as exc:  # pragma: no cover - optional path
            LOGGER.debug("Skipping image downsampling due to error: %s", exc)


def compress_document(
    document: DocumentHandle,
    *,
    original_size: int,
    level: CompressionLevelName = "medium",
) -> tuple[bytes, CompressionResult]:
    """Compress ``document`` in place and return its bytes with size statistics."""

    if level not in LEVELS:
        raise InvalidOptionError(f"Unknown compression level: {level}")
    level_config = LEVELS[level]

    for page in document.pages():
        if level_config.downsample_ratio < 0.999:
            _downsample_page_images(page, level_config)
        if level_config.recompress_streams:
            try:
                page.compress_content_streams()
            except Exception as exc:  # pragma: no cover - defensive
                LOGGER.warning("Failed to compress content streams: %s", exc)

    try:
        document.writer.compress_identical_objects(remove_identicals=True, remove_orphans=True)
    except Exception as exc:  # pragma: no cover - defensive
        LOGGER.warning("Failed to deduplicate objects: %s", exc)

    data = document.to_bytes()
    result = CompressionResult(level=level, original_size=original_size, compressed_size=len(data))
    LOGGER.info("Compressed %s (%s): %s", document.name, level, result.summary())
    return data, result


__all__ = [
    "COMPRESSED_FILENAME",
    "LEVELS",
    "CompressionLevel",
    "CompressionLevelName",
    "CompressionResult",
    "compress_document",
]
