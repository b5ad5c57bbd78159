"""Delivery of finished files to the user."""

from __future__ import annotations

from .sinks import PDF_MIME_TYPE, Delivery, DirectorySink, MemorySink, TransferSink, deliver_all

__all__ = [
    "PDF_MIME_TYPE",
    "Delivery",
    "DirectorySink",
    "MemorySink",
    "TransferSink",
    "deliver_all",
]
