"""Page rotation applied in place on a loaded document."""

from __future__ import annotations

from ..core.document import DocumentHandle
from ..core.exceptions import InvalidOptionError
from ..core.utils import get_logger

LOGGER = get_logger("pdfdesk.edit")

ALLOWED_ROTATIONS = (0, 90, 180, 270)


def rotated_filename(degrees: int) -> str:
    return f"rotated-{degrees}-degrees.pdf"


def rotate_document(document: DocumentHandle, degrees: int) -> DocumentHandle:
    """Set every page's rotation to exactly ``degrees`` and return ``document``.

    The value is absolute: a page already rotated by 90 and rotated again by
    90 ends up at 90, not 180.
    """

    if degrees not in ALLOWED_ROTATIONS:
        raise InvalidOptionError(
            f"Rotation must be one of {', '.join(str(value) for value in ALLOWED_ROTATIONS)} degrees"
        )
    for page in document.pages():
        page.rotation = degrees
    LOGGER.info("Rotated %d page(s) of %s to %s degrees", document.page_count, document.name, degrees)
    return document


__all__ = ["ALLOWED_ROTATIONS", "rotate_document", "rotated_filename"]
