"""Plugins converting between formats: images, PDF pages and Excel workbooks."""

from __future__ import annotations

import asyncio

import httpx

from ..config import ConversionSettings
from ..convert.excel import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_TIMEOUT,
    EndpointConversionClient,
    ExcelConversionAdapter,
    build_provider,
    excel_output_filename,
)
from ..convert.images import (
    DEFAULT_JPEG_QUALITY,
    IMAGES_FILENAME,
    ImageUpload,
    images_to_pdf,
    partition_images,
    pdf_to_images,
)
from ..core.exceptions import MissingInputError
from ..core.utils import get_logger
from ..core.validator import ensure_excel
from ..delivery.sinks import PDF_MIME_TYPE, Delivery
from .common.interfaces import BaseTool
from .common.pipeline import register_tool

LOGGER = get_logger("pdfdesk.tools.convert")

IMAGE_DELIVERY_PAUSE = 0.3


@register_tool("images-to-pdf")
class ImagesToPdfTool(BaseTool):
    name = "images-to-pdf"

    def run(self) -> list[Delivery]:
        uploads = [
            ImageUpload(item.filename, item.data, item.content_type)
            for item in self.context.require_inputs(message="Please choose at least one JPG or PNG image")
        ]
        _, skipped = partition_images(uploads)
        self.context.resources["skipped"] = [upload.filename for upload in skipped]
        document = images_to_pdf(uploads, name=IMAGES_FILENAME)
        return self.deliver([Delivery(IMAGES_FILENAME, PDF_MIME_TYPE, document.to_bytes())])


@register_tool("pdf-to-images")
class PdfToImagesTool(BaseTool):
    name = "pdf-to-images"
    delivery_pause = IMAGE_DELIVERY_PAUSE

    def run(self) -> list[Delivery]:
        config = self.context.config
        item, _ = self.single_pdf()
        outputs = pdf_to_images(
            item.data,
            image_format=config.get("format", "png"),
            quality=float(config.get("quality", DEFAULT_JPEG_QUALITY)),
            renderer=self.context.ensure_renderer(),
        )
        return self.deliver(outputs)


@register_tool("excel-to-pdf")
class ExcelToPdfTool(BaseTool):
    """Convert a workbook through the remote conversion service.

    Config keys: ``endpoint`` posts to a running PdfDesk service instead of
    calling the provider directly; ``provider`` injects a ready provider;
    ``settings``, ``poll_interval`` and ``max_attempts`` tune the adapter.
    """

    name = "excel-to-pdf"

    def run(self) -> list[Delivery]:
        item = self.context.require_inputs(message="Please choose an Excel file")[0]
        ensure_excel(item.filename, item.content_type)
        if not item.data:
            raise MissingInputError("The selected Excel file is empty")

        pdf = asyncio.run(self._convert(item.data, item.filename))
        filename = excel_output_filename(item.filename)
        LOGGER.info("Converted %s to %s", item.filename, filename)
        return self.deliver([Delivery(filename, PDF_MIME_TYPE, pdf)])

    async def _convert(self, data: bytes, file_name: str) -> bytes:
        config = self.context.config
        async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as client:
            endpoint = config.get("endpoint")
            if endpoint:
                return await EndpointConversionClient(endpoint, client).convert(data, file_name)

            provider = config.get("provider")
            if provider is None:
                settings = config.get("settings") or ConversionSettings.from_env()
                provider = build_provider(settings, client)
            adapter = ExcelConversionAdapter(
                provider,
                poll_interval=config.get("poll_interval", DEFAULT_POLL_INTERVAL),
                max_attempts=config.get("max_attempts", DEFAULT_MAX_ATTEMPTS),
            )
            self.context.resources["adapter"] = adapter
            return await adapter.convert(data, file_name)


__all__ = ["ExcelToPdfTool", "ImagesToPdfTool", "PdfToImagesTool"]
