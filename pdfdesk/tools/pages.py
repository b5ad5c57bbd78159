"""Plugins that rebuild documents from pages: merge, split and organize."""

from __future__ import annotations

from typing import Iterable, Sequence

from ..core.utils import get_logger
from ..core.validator import ensure_pdf
from ..delivery.sinks import PDF_MIME_TYPE, Delivery
from ..organize.manifest import PageManifest
from ..reconstruct.builder import merge_documents, rebuild_from_manifest, split_document
from .common.interfaces import BaseTool
from .common.pipeline import register_tool

LOGGER = get_logger("pdfdesk.tools.pages")

MERGED_FILENAME = "merged.pdf"
ORGANIZED_FILENAME = "organized.pdf"
SPLIT_DELIVERY_PAUSE = 0.1


@register_tool("merge")
class MergeTool(BaseTool):
    name = "merge"

    def run(self) -> list[Delivery]:
        inputs = self.context.require_inputs(2, "Please provide at least 2 PDF files to merge")
        for item in inputs:
            ensure_pdf(item.filename, item.content_type)

        documents = [self.open_pdf(item) for item in inputs]
        LOGGER.debug("Merging %d input(s)", len(documents))
        merged = merge_documents(documents, name=MERGED_FILENAME)
        return self.deliver([Delivery(MERGED_FILENAME, PDF_MIME_TYPE, merged.to_bytes())])


@register_tool("split")
class SplitTool(BaseTool):
    name = "split"
    delivery_pause = SPLIT_DELIVERY_PAUSE

    def run(self) -> list[Delivery]:
        _, document = self.single_pdf()
        parts = split_document(document)
        return self.deliver([Delivery(part.name, PDF_MIME_TYPE, part.to_bytes()) for part in parts])


def apply_operations(manifest: PageManifest, operations: Iterable[Sequence]) -> PageManifest:
    """Apply ``("move", from, to)`` and ``("delete", position)`` steps in order."""

    for operation in operations:
        kind, *arguments = operation
        if kind == "move":
            manifest.move(*arguments)
        elif kind == "delete":
            manifest.delete(*arguments)
        else:
            raise ValueError(f"Unsupported organize operation: {kind}")
    return manifest


@register_tool("organize")
class OrganizeTool(BaseTool):
    """Reorder and delete pages, then save the document in the new order.

    Config keys: ``order`` (0-based source indices listing the pages to keep),
    ``operations`` (move and delete steps applied afterwards) and
    ``previews`` (render PNG thumbnails into the manifest).
    """

    name = "organize"

    def run(self) -> list[Delivery]:
        item, document = self.single_pdf()
        config = self.context.config

        previews = None
        if config.get("previews"):
            previews = self.context.ensure_renderer().render_previews(item.data)

        order = config.get("order")
        if order is None:
            manifest = PageManifest.for_document(document, previews=previews)
        else:
            manifest = PageManifest.from_order(document.page_count, order, document=document, previews=previews)
        apply_operations(manifest, config.get("operations") or ())
        self.context.resources["manifest"] = manifest

        organized = rebuild_from_manifest(manifest, name=ORGANIZED_FILENAME)
        LOGGER.info("Organized %s into %d page(s)", item.filename, organized.page_count)
        return self.deliver([Delivery(ORGANIZED_FILENAME, PDF_MIME_TYPE, organized.to_bytes())])


__all__ = [
    "MERGED_FILENAME",
    "ORGANIZED_FILENAME",
    "MergeTool",
    "OrganizeTool",
    "SplitTool",
    "apply_operations",
]
