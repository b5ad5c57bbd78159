"""Drag-style reordering sessions over a :class:`PageManifest`.

The gesture layer (mouse or touch events, a UI toolkit, an HTTP client)
only reports which position the dragged page currently crosses; the session
turns each crossing into one :meth:`PageManifest.move` call and tracks where
the dragged page now sits so successive crossings compose.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..core.exceptions import InvalidPageSelectionError
from .manifest import PageManifest


@dataclass
class DragSession:
    manifest: PageManifest
    dragged_index: int | None = None

    @property
    def active(self) -> bool:
        return self.dragged_index is not None

    def start(self, index: int) -> None:
        if not 0 <= index < len(self.manifest):
            raise InvalidPageSelectionError(
                f"Position {index} is out of range for a manifest with {len(self.manifest)} page(s)"
            )
        self.dragged_index = index

    def over(self, index: int) -> bool:
        """Report that the dragged page crosses ``index``.

        Returns ``True`` when the manifest changed.
        """

        if self.dragged_index is None or self.dragged_index == index:
            return False
        self.manifest.move(self.dragged_index, index)
        self.dragged_index = index
        return True

    def end(self) -> None:
        self.dragged_index = None


__all__ = ["DragSession"]
