"""Document reconstruction by selective page copy."""

from __future__ import annotations

from .builder import PageSelection, merge_documents, rebuild_from_manifest, reconstruct, split_document

__all__ = [
    "PageSelection",
    "reconstruct",
    "rebuild_from_manifest",
    "merge_documents",
    "split_document",
]
