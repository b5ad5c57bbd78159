"""In-place edits on a loaded document: rotation, watermark, signature, compression."""

from __future__ import annotations

from .compress import (
    COMPRESSED_FILENAME,
    LEVELS,
    CompressionLevel,
    CompressionResult,
    compress_document,
)
from .rotate import ALLOWED_ROTATIONS, rotate_document, rotated_filename
from .sign import DEFAULT_SIGNATURE_WIDTH, SIGNED_FILENAME, SignaturePlacement, add_signature
from .watermark import WATERMARK_FILENAME, WatermarkOptions, add_watermark

__all__ = [
    "ALLOWED_ROTATIONS",
    "COMPRESSED_FILENAME",
    "DEFAULT_SIGNATURE_WIDTH",
    "LEVELS",
    "SIGNED_FILENAME",
    "WATERMARK_FILENAME",
    "CompressionLevel",
    "CompressionResult",
    "SignaturePlacement",
    "WatermarkOptions",
    "add_signature",
    "add_watermark",
    "compress_document",
    "rotate_document",
    "rotated_filename",
]
