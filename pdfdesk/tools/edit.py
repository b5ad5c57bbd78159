"""Plugins editing a single document in place: rotate, watermark, sign and compress."""

from __future__ import annotations

from ..core.utils import get_logger
from ..delivery.sinks import PDF_MIME_TYPE, Delivery
from ..edit.compress import COMPRESSED_FILENAME, compress_document
from ..edit.rotate import rotate_document, rotated_filename
from ..edit.sign import DEFAULT_SIGNATURE_WIDTH, SIGNED_FILENAME, add_signature
from ..edit.watermark import WATERMARK_FILENAME, WatermarkOptions, add_watermark
from .common.interfaces import BaseTool
from .common.pipeline import register_tool

LOGGER = get_logger("pdfdesk.tools.edit")

WATERMARK_OPTION_KEYS = ("text", "opacity", "font_size", "rotation", "position")


@register_tool("rotate")
class RotateTool(BaseTool):
    name = "rotate"

    def run(self) -> list[Delivery]:
        degrees = int(self.context.config.get("degrees", 90))
        _, document = self.single_pdf()
        rotate_document(document, degrees)
        return self.deliver([Delivery(rotated_filename(degrees), PDF_MIME_TYPE, document.to_bytes())])


@register_tool("watermark")
class WatermarkTool(BaseTool):
    name = "watermark"

    def run(self) -> list[Delivery]:
        config = self.context.config
        options = WatermarkOptions(
            **{key: config[key] for key in WATERMARK_OPTION_KEYS if config.get(key) is not None}
        )
        _, document = self.single_pdf()
        add_watermark(document, options)
        return self.deliver([Delivery(WATERMARK_FILENAME, PDF_MIME_TYPE, document.to_bytes())])


@register_tool("sign")
class SignTool(BaseTool):
    name = "sign"

    def run(self) -> list[Delivery]:
        config = self.context.config
        _, document = self.single_pdf()
        placement = add_signature(
            document,
            config.get("signature") or b"",
            page_number=int(config.get("page_number", 1)),
            width=float(config.get("width", DEFAULT_SIGNATURE_WIDTH)),
        )
        self.context.resources["placement"] = placement
        return self.deliver([Delivery(SIGNED_FILENAME, PDF_MIME_TYPE, document.to_bytes())])


@register_tool("compress")
class CompressTool(BaseTool):
    name = "compress"

    def run(self) -> list[Delivery]:
        item, document = self.single_pdf()
        data, result = compress_document(
            document,
            original_size=len(item.data),
            level=self.context.config.get("level", "medium"),
        )
        self.context.resources["compression"] = result
        return self.deliver([Delivery(COMPRESSED_FILENAME, PDF_MIME_TYPE, data)])


__all__ = ["CompressTool", "RotateTool", "SignTool", "WatermarkTool"]
