"""Exception hierarchy shared by every PdfDesk tool.

Messages are free text meant to be shown to the user as-is; no structured
error codes are exposed.
"""

from __future__ import annotations


class PdfDeskError(Exception):
    """Base exception for all errors raised by :mod:`pdfdesk`."""


class MissingInputError(PdfDeskError):
    """Raised when no file was selected or the page manifest is empty."""


class UnsupportedFormatError(PdfDeskError):
    """Raised when an input does not have an accepted extension or MIME type."""


class ServiceMisconfiguredError(PdfDeskError):
    """Raised when a remote conversion service has no usable credential."""


class UpstreamRequestError(PdfDeskError):
    """Raised when a remote step answers with a non-success HTTP response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConversionFailedError(PdfDeskError):
    """Raised when the remote conversion job reports an error status."""


class ConversionTimedOutError(PdfDeskError):
    """Raised when the remote job does not finish within the polling ceiling."""


class LocalProcessingError(PdfDeskError):
    """Raised when the document library fails to load, copy or save a file."""


class InvalidPageSelectionError(PdfDeskError, IndexError):
    """Raised when a page index or page order does not fit the document."""


class InvalidOptionError(PdfDeskError, ValueError):
    """Raised when a tool option lies outside its accepted range."""


__all__ = [
    "PdfDeskError",
    "MissingInputError",
    "UnsupportedFormatError",
    "ServiceMisconfiguredError",
    "UpstreamRequestError",
    "ConversionFailedError",
    "ConversionTimedOutError",
    "LocalProcessingError",
    "InvalidPageSelectionError",
    "InvalidOptionError",
]
