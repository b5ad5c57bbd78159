"""Format conversions: images to PDF, PDF to images and Excel to PDF."""

from __future__ import annotations

from .excel import (
    AdapterState,
    CloudConvertProvider,
    ConversionJob,
    ConversionOptions,
    EndpointConversionClient,
    ExcelConversionAdapter,
    JobStatus,
    PdfCoProvider,
    build_provider,
    excel_output_filename,
)
from .images import IMAGES_FILENAME, ImageUpload, images_to_pdf, partition_images, pdf_to_images

__all__ = [
    "AdapterState",
    "CloudConvertProvider",
    "ConversionJob",
    "ConversionOptions",
    "EndpointConversionClient",
    "ExcelConversionAdapter",
    "IMAGES_FILENAME",
    "ImageUpload",
    "JobStatus",
    "PdfCoProvider",
    "build_provider",
    "excel_output_filename",
    "images_to_pdf",
    "partition_images",
    "pdf_to_images",
]
