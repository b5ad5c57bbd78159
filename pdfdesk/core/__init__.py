"""Shared building blocks for PdfDesk tools."""

from __future__ import annotations

from .document import DocumentHandle
from .exceptions import (
    ConversionFailedError,
    ConversionTimedOutError,
    InvalidOptionError,
    InvalidPageSelectionError,
    LocalProcessingError,
    MissingInputError,
    PdfDeskError,
    ServiceMisconfiguredError,
    UnsupportedFormatError,
    UpstreamRequestError,
)

__all__ = [
    "DocumentHandle",
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
