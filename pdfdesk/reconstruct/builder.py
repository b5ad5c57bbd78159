"""Build new documents by copying selected pages from existing ones."""

from __future__ import annotations

from typing import Iterable, Sequence

from ..core.document import DocumentHandle
from ..core.exceptions import MissingInputError
from ..core.utils import get_logger
from ..organize.manifest import PageManifest

LOGGER = get_logger("pdfdesk.reconstruct")

PageSelection = tuple[DocumentHandle, Sequence[int]]


def reconstruct(selections: Iterable[PageSelection], *, name: str | None = None) -> DocumentHandle:
    """Return a new document holding the selected pages in the listed order.

    Args:
        selections: Pairs of a source document and the 0-based page indices
            to take from it. Pairs are processed in order; within a pair the
            indices are copied in the order given.
        name: Optional name for the resulting document.

    Raises:
        MissingInputError: If no page is selected at all.
        InvalidPageSelectionError: If an index does not exist in its source.
    """

    selection_list = [(document, list(indices)) for document, indices in selections]
    total = sum(len(indices) for _, indices in selection_list)
    if total == 0:
        raise MissingInputError("No pages selected; add at least one page before saving")

    output = DocumentHandle.create(name=name)
    for document, indices in selection_list:
        for index in indices:
            LOGGER.debug("Copying page %s from %s", index + 1, document.name)
            output.copy_page_from(document, index)

    LOGGER.info("Reconstructed document with %d page(s) from %d source(s)", total, len(selection_list))
    return output


def rebuild_from_manifest(manifest: PageManifest, *, name: str | None = None) -> DocumentHandle:
    """Reconstruct the manifest's document in the manifest's page order."""

    if manifest.document is None:
        raise MissingInputError("No PDF loaded; choose a file first")
    return reconstruct([(manifest.document, manifest.source_indices())], name=name)


def merge_documents(documents: Sequence[DocumentHandle], *, name: str | None = None) -> DocumentHandle:
    """Concatenate every page of ``documents`` in the given order."""

    if len(documents) < 2:
        raise MissingInputError("Please provide at least 2 PDF files to merge")
    return reconstruct(
        [(document, range(document.page_count)) for document in documents],
        name=name,
    )


def split_document(document: DocumentHandle) -> list[DocumentHandle]:
    """Return one single-page document per page of ``document``."""

    if document.page_count == 0:
        raise MissingInputError(f"{document.name} has no pages to split")
    parts = [
        reconstruct([(document, [index])], name=f"page-{index + 1}.pdf")
        for index in range(document.page_count)
    ]
    LOGGER.info("Split %s into %d single-page document(s)", document.name, len(parts))
    return parts


__all__ = [
    "PageSelection",
    "reconstruct",
    "rebuild_from_manifest",
    "merge_documents",
    "split_document",
]
