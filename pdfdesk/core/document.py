"""Document handle wrapping :mod:`pypdf` for every PdfDesk tool.

The handle is the only place where tools touch the PDF library directly for
loading and serialisation. Pages copied from another handle are cloned into
this handle's writer, so the source handle is never mutated.
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Iterator, Union

from pypdf import PageObject, PdfReader, PdfWriter

from .exceptions import InvalidPageSelectionError, LocalProcessingError
from .utils import get_logger

LOGGER = get_logger("pdfdesk.core")

DocumentSource = Union[bytes, bytearray, str, Path, BinaryIO]


def _load_reader(source: DocumentSource, name: str) -> PdfReader:
    if isinstance(source, (bytes, bytearray)):
        stream: str | BinaryIO = BytesIO(bytes(source))
    elif isinstance(source, (str, Path)):
        stream = str(source)
    else:
        stream = source

    try:
        reader = PdfReader(stream)
    except FileNotFoundError as exc:
        raise LocalProcessingError(f"PDF not found: {name}") from exc
    except Exception as exc:  # pragma: no cover - pypdf exceptions vary
        LOGGER.error("Failed to read PDF %s: %s", name, exc)
        raise LocalProcessingError(f"Unable to read PDF: {name}") from exc

    if reader.is_encrypted:
        LOGGER.debug("Attempting to decrypt encrypted PDF %s", name)
        try:
            reader.decrypt("")
        except Exception as exc:  # pragma: no cover - decrypt errors vary
            LOGGER.error("Failed to decrypt PDF %s: %s", name, exc)
            raise LocalProcessingError(f"Unable to decrypt encrypted PDF: {name}") from exc
    return reader


class DocumentHandle:
    """In-memory decoded PDF exposing page count, page access and serialisation."""

    def __init__(self, writer: PdfWriter, *, name: str | None = None) -> None:
        self._writer = writer
        self.name = name or "document.pdf"

    @classmethod
    def open(cls, source: DocumentSource, *, name: str | None = None) -> "DocumentHandle":
        """Decode ``source`` (bytes, path or binary stream) into a new handle."""

        if name is None and isinstance(source, (str, Path)):
            name = Path(source).name
        label = name or "document.pdf"
        reader = _load_reader(source, label)
        try:
            writer = PdfWriter(clone_from=reader)
        except Exception as exc:  # pragma: no cover - corrupt page trees vary
            LOGGER.error("Failed to load pages from %s: %s", label, exc)
            raise LocalProcessingError(f"Unable to load pages from PDF: {label}") from exc
        LOGGER.debug("Opened %s with %d page(s)", label, len(writer.pages))
        return cls(writer, name=label)

    @classmethod
    def create(cls, *, name: str | None = None) -> "DocumentHandle":
        """Return a new handle without any pages."""

        return cls(PdfWriter(), name=name)

    @property
    def writer(self) -> PdfWriter:
        return self._writer

    @property
    def page_count(self) -> int:
        return len(self._writer.pages)

    def __len__(self) -> int:
        return self.page_count

    def pages(self) -> Iterator[PageObject]:
        return iter(self._writer.pages)

    def page(self, index: int) -> PageObject:
        """Return the page at 0-based ``index``."""

        if not 0 <= index < self.page_count:
            raise InvalidPageSelectionError(
                f"Page index {index} is out of range for a document with {self.page_count} page(s)"
            )
        return self._writer.pages[index]

    def page_size(self, index: int) -> tuple[float, float]:
        box = self.page(index).mediabox
        return float(box.width), float(box.height)

    def copy_page_from(self, source: "DocumentHandle", index: int) -> PageObject:
        """Append a copy of ``source``'s page at ``index`` to this document."""

        page = source.page(index)
        try:
            return self._writer.add_page(page)
        except Exception as exc:  # pragma: no cover - pypdf exceptions vary
            LOGGER.error("Failed to copy page %s from %s: %s", index, source.name, exc)
            raise LocalProcessingError(f"Unable to copy page {index + 1} from {source.name}") from exc

    def to_bytes(self) -> bytes:
        """Serialise the document into PDF bytes."""

        buffer = BytesIO()
        try:
            self._writer.write(buffer)
        except Exception as exc:  # pragma: no cover - IO errors vary
            LOGGER.error("Failed to serialise %s: %s", self.name, exc)
            raise LocalProcessingError(f"Unable to save PDF: {self.name}") from exc
        return buffer.getvalue()

    def __repr__(self) -> str:
        return f"DocumentHandle(name={self.name!r}, page_count={self.page_count})"


__all__ = ["DocumentHandle", "DocumentSource"]
