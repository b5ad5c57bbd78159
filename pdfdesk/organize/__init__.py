"""Page organisation: manifests, reordering and deletion."""

from __future__ import annotations

from .manifest import PageManifest, PageManifestEntry
from .session import DragSession

__all__ = ["PageManifest", "PageManifestEntry", "DragSession"]
