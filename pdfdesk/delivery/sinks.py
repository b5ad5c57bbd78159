"""Transfer sinks turning final output bytes into delivered files."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Protocol

from ..core.utils import get_logger, resolve_path

LOGGER = get_logger("pdfdesk.delivery")

PDF_MIME_TYPE = "application/pdf"


class TransferSink(Protocol):
    """Anything able to hand a finished file to the user."""

    def deliver(self, data: bytes, filename: str, mime_type: str) -> None:
        ...


@dataclass(frozen=True)
class Delivery:
    filename: str
    mime_type: str
    data: bytes


class DirectorySink:
    """Write each delivered file into ``directory``."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = resolve_path(directory)
        self.delivered: list[Path] = []

    def deliver(self, data: bytes, filename: str, mime_type: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        destination = self.directory / Path(filename).name
        destination.write_bytes(data)
        self.delivered.append(destination)
        LOGGER.info("Wrote %s (%s, %d bytes)", destination, mime_type, len(data))


class MemorySink:
    """Keep delivered files in memory."""

    def __init__(self) -> None:
        self.deliveries: list[Delivery] = []

    def deliver(self, data: bytes, filename: str, mime_type: str) -> None:
        self.deliveries.append(Delivery(filename=filename, mime_type=mime_type, data=data))
        LOGGER.debug("Captured %s (%s, %d bytes)", filename, mime_type, len(data))

    @property
    def filenames(self) -> list[str]:
        return [delivery.filename for delivery in self.deliveries]


def deliver_all(sink: TransferSink, items: Iterable[Delivery], *, pause: float = 0.0) -> int:
    """Deliver ``items`` one after another and return how many were delivered.

    ``pause`` seconds are slept between two successive deliveries, never
    after the last one.
    """

    count = 0
    for item in items:
        if count and pause > 0:
            time.sleep(pause)
        sink.deliver(item.data, item.filename, item.mime_type)
        count += 1
    return count


__all__ = [
    "PDF_MIME_TYPE",
    "Delivery",
    "DirectorySink",
    "MemorySink",
    "TransferSink",
    "deliver_all",
]
