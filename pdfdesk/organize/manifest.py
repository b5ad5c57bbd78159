"""Page manifest describing the user's arrangement of a document's pages.

A manifest is an ordered list of :class:`PageManifestEntry` values. The
position of an entry in the list is the page's position in the output
document; ``source_index`` always points at the page in the original
document. Every mutation renumbers the entries so that ``display_index``
matches the list position.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Iterator, Sequence

from ..core.document import DocumentHandle
from ..core.exceptions import InvalidPageSelectionError
from ..core.utils import get_logger

LOGGER = get_logger("pdfdesk.organize")


@dataclass(frozen=True)
class PageManifestEntry:
    """Reference to one page of the source document."""

    display_index: int
    source_index: int
    preview: bytes | None = None


class PageManifest:
    """Ordered, renumbered sequence of page references."""

    def __init__(
        self,
        entries: Iterable[PageManifestEntry] = (),
        *,
        page_count: int | None = None,
        document: DocumentHandle | None = None,
    ) -> None:
        self._entries = list(entries)
        self.document = document
        if page_count is None:
            page_count = document.page_count if document is not None else len(self._entries)
        self.page_count = page_count
        self._validate_sources()
        self._renumber()

    @classmethod
    def for_document(
        cls,
        document: DocumentHandle,
        *,
        previews: Sequence[bytes] | None = None,
    ) -> "PageManifest":
        """Create one entry per page of ``document`` in original order."""

        if previews is not None and len(previews) != document.page_count:
            raise ValueError("Expected one preview per page")
        entries = [
            PageManifestEntry(
                display_index=index,
                source_index=index,
                preview=previews[index] if previews is not None else None,
            )
            for index in range(document.page_count)
        ]
        LOGGER.debug("Created manifest with %d page(s) for %s", len(entries), document.name)
        return cls(entries, document=document)

    @classmethod
    def from_order(
        cls,
        page_count: int,
        source_indices: Iterable[int],
        *,
        document: DocumentHandle | None = None,
        previews: Sequence[bytes] | None = None,
    ) -> "PageManifest":
        """Create a manifest listing ``source_indices`` in the given order.

        ``previews`` holds one thumbnail per source page and is looked up by
        source index, so every entry keeps its own page's preview.
        """

        if previews is not None and len(previews) != page_count:
            raise ValueError("Expected one preview per page")
        entries = [
            PageManifestEntry(
                display_index=position,
                source_index=source_index,
                preview=previews[source_index] if previews is not None and 0 <= source_index < page_count else None,
            )
            for position, source_index in enumerate(source_indices)
        ]
        return cls(entries, page_count=page_count, document=document)

    def _validate_sources(self) -> None:
        if len(self._entries) > self.page_count:
            raise InvalidPageSelectionError(
                f"Manifest lists {len(self._entries)} pages but the document has {self.page_count}"
            )
        seen: set[int] = set()
        for entry in self._entries:
            if not 0 <= entry.source_index < self.page_count:
                raise InvalidPageSelectionError(
                    f"Page {entry.source_index + 1} does not exist in a document with {self.page_count} page(s)"
                )
            if entry.source_index in seen:
                raise InvalidPageSelectionError(f"Page {entry.source_index + 1} is listed more than once")
            seen.add(entry.source_index)

    def _renumber(self) -> None:
        self._entries = [
            entry if entry.display_index == position else replace(entry, display_index=position)
            for position, entry in enumerate(self._entries)
        ]

    def _check_index(self, index: int, label: str) -> None:
        if not 0 <= index < len(self._entries):
            raise InvalidPageSelectionError(
                f"{label} {index} is out of range for a manifest with {len(self._entries)} page(s)"
            )

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PageManifestEntry]:
        return iter(tuple(self._entries))

    def __getitem__(self, index: int) -> PageManifestEntry:
        return self._entries[index]

    @property
    def entries(self) -> tuple[PageManifestEntry, ...]:
        return tuple(self._entries)

    @property
    def is_empty(self) -> bool:
        return not self._entries

    def source_indices(self) -> list[int]:
        """Return source page indices in output order."""

        return [entry.source_index for entry in self._entries]

    def display_indices(self) -> list[int]:
        return [entry.display_index for entry in self._entries]

    def move(self, from_index: int, to_index: int) -> None:
        """Move the entry at ``from_index`` so that it ends up at ``to_index``.

        The entry is removed first and then inserted, so ``to_index`` refers
        to the list after removal; an index equal to the shrunk length
        appends the entry.
        """

        self._check_index(from_index, "Source position")
        self._check_index(to_index, "Target position")
        if from_index == to_index:
            return
        entry = self._entries.pop(from_index)
        self._entries.insert(to_index, entry)
        self._renumber()
        LOGGER.debug("Moved page %s from position %s to %s", entry.source_index + 1, from_index, to_index)

    def delete(self, index: int) -> PageManifestEntry:
        """Remove and return the entry at ``index``."""

        self._check_index(index, "Position")
        entry = self._entries.pop(index)
        self._renumber()
        LOGGER.debug("Deleted page %s at position %s", entry.source_index + 1, index)
        return entry

    def reset(self) -> None:
        """Drop all entries, their previews and the document reference."""

        self._entries = []
        self.document = None
        self.page_count = 0

    def __repr__(self) -> str:
        return f"PageManifest(source_indices={self.source_indices()!r})"


__all__ = ["PageManifest", "PageManifestEntry"]
