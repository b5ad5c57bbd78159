"""PDF utility suite: merge, split, organize, edit and convert documents."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Sequence

from .config import ConversionSettings
from .convert import (
    AdapterState,
    CloudConvertProvider,
    ConversionJob,
    ConversionOptions,
    EndpointConversionClient,
    ExcelConversionAdapter,
    ImageUpload,
    JobStatus,
    PdfCoProvider,
    build_provider,
    excel_output_filename,
    images_to_pdf,
    pdf_to_images,
)
from .core import (
    ConversionFailedError,
    ConversionTimedOutError,
    DocumentHandle,
    InvalidOptionError,
    InvalidPageSelectionError,
    LocalProcessingError,
    MissingInputError,
    PdfDeskError,
    ServiceMisconfiguredError,
    UnsupportedFormatError,
    UpstreamRequestError,
)
from .core.render import PageRenderer
from .core.utils import format_file_size, update_dict
from .delivery import Delivery, DirectorySink, MemorySink, TransferSink, deliver_all
from .edit import CompressionResult, WatermarkOptions
from .organize import DragSession, PageManifest, PageManifestEntry
from .reconstruct import merge_documents, rebuild_from_manifest, reconstruct, split_document
from .tools import load_builtin_plugins
from .tools.common.interfaces import ToolContext, ToolInput
from .tools.common.pipeline import ToolRegistry, register_tool, registry

load_builtin_plugins()

PathLike = str | Path

__all__ = [
    "AdapterState",
    "CloudConvertProvider",
    "CompressionResult",
    "ConversionFailedError",
    "ConversionJob",
    "ConversionOptions",
    "ConversionSettings",
    "ConversionTimedOutError",
    "Delivery",
    "DirectorySink",
    "DocumentHandle",
    "DragSession",
    "EndpointConversionClient",
    "ExcelConversionAdapter",
    "ImageUpload",
    "InvalidOptionError",
    "InvalidPageSelectionError",
    "JobStatus",
    "LocalProcessingError",
    "MemorySink",
    "MissingInputError",
    "PageManifest",
    "PageManifestEntry",
    "PageRenderer",
    "PdfCoProvider",
    "PdfDeskError",
    "ServiceMisconfiguredError",
    "ToolContext",
    "ToolInput",
    "ToolRegistry",
    "TransferSink",
    "UnsupportedFormatError",
    "UpstreamRequestError",
    "WatermarkOptions",
    "build_provider",
    "compress_file",
    "convert_excel_file",
    "convert_images",
    "convert_pdf_to_images",
    "deliver_all",
    "excel_output_filename",
    "format_file_size",
    "images_to_pdf",
    "merge_documents",
    "merge_files",
    "organize_file",
    "pdf_to_images",
    "rebuild_from_manifest",
    "reconstruct",
    "register_tool",
    "registry",
    "rotate_file",
    "run_tool",
    "sign_file",
    "split_document",
    "split_file",
    "watermark_file",
]


def run_tool(
    name: str,
    inputs: Iterable[PathLike],
    output_dir: PathLike,
    **config: Any,
) -> list[Path]:
    """Run the registered tool ``name`` on ``inputs`` and return the written files."""

    sink = DirectorySink(output_dir)
    context = ToolContext.from_paths(inputs, config=update_dict({}, **config))
    context.sink = sink
    registry.run(name, context)
    return list(sink.delivered)


def merge_files(inputs: Iterable[PathLike], output_dir: PathLike) -> Path:
    """Convenience wrapper around the merge plugin."""

    return run_tool("merge", inputs, output_dir)[0]


def split_file(input: PathLike, output_dir: PathLike) -> list[Path]:
    """Convenience wrapper around the split plugin; writes ``page-<n>.pdf`` files."""

    return run_tool("split", [input], output_dir)


def organize_file(
    input: PathLike,
    output_dir: PathLike,
    *,
    order: Sequence[int] | None = None,
    operations: Sequence[Sequence[Any]] | None = None,
) -> Path:
    """Convenience wrapper around the organize plugin."""

    return run_tool("organize", [input], output_dir, order=order, operations=operations)[0]


def rotate_file(input: PathLike, output_dir: PathLike, *, degrees: int = 90) -> Path:
    return run_tool("rotate", [input], output_dir, degrees=degrees)[0]


def watermark_file(input: PathLike, output_dir: PathLike, text: str, **options: Any) -> Path:
    return run_tool("watermark", [input], output_dir, text=text, **options)[0]


def sign_file(
    input: PathLike,
    output_dir: PathLike,
    signature: bytes | str,
    *,
    page_number: int = 1,
    width: float | None = None,
) -> Path:
    return run_tool("sign", [input], output_dir, signature=signature, page_number=page_number, width=width)[0]


def compress_file(input: PathLike, output_dir: PathLike, *, level: str = "medium") -> CompressionResult:
    """Compress ``input`` into ``output_dir`` and return the size statistics."""

    context = ToolContext.from_paths([input], output_dir=output_dir, config={"level": level})
    registry.run("compress", context)
    return context.resources["compression"]


def convert_images(inputs: Iterable[PathLike], output_dir: PathLike) -> Path:
    return run_tool("images-to-pdf", inputs, output_dir)[0]


def convert_pdf_to_images(
    input: PathLike,
    output_dir: PathLike,
    *,
    image_format: str = "png",
    quality: float | None = None,
) -> list[Path]:
    return run_tool("pdf-to-images", [input], output_dir, format=image_format, quality=quality)


def convert_excel_file(
    input: PathLike,
    output_dir: PathLike,
    *,
    settings: ConversionSettings | None = None,
    endpoint: str | None = None,
) -> Path:
    """Convert a workbook to PDF through the configured conversion service."""

    return run_tool("excel-to-pdf", [input], output_dir, settings=settings, endpoint=endpoint)[0]
