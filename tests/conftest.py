from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Callable, Sequence
import sys

import pytest
from PIL import Image
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def _pdf_bytes(widths: Sequence[float], height: float = 400) -> bytes:
    writer = PdfWriter()
    for width in widths:
        writer.add_blank_page(width=width, height=height)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def pdf_bytes_factory() -> Callable[..., bytes]:
    """Build PDF bytes whose pages are told apart by their widths."""

    return _pdf_bytes


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(filename: str, widths: Sequence[float] = (100, 200, 300)) -> Path:
        path = tmp_path / filename
        path.write_bytes(_pdf_bytes(widths))
        return path

    return _create


@pytest.fixture()
def sample_pdf(pdf_factory: Callable[..., Path]) -> Path:
    return pdf_factory("sample.pdf", (100, 200, 300))


@pytest.fixture()
def empty_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "empty.pdf"
    writer = PdfWriter()
    with pdf_path.open("wb") as stream:
        writer.write(stream)
    return pdf_path


@pytest.fixture()
def image_factory() -> Callable[..., bytes]:
    def _create(size: tuple[int, int] = (40, 20), image_format: str = "PNG", mode: str = "RGB") -> bytes:
        buffer = BytesIO()
        Image.new(mode, size, color="black").save(buffer, format=image_format)
        return buffer.getvalue()

    return _create


@pytest.fixture()
def png_bytes(image_factory: Callable[..., bytes]) -> bytes:
    return image_factory((40, 20), "PNG", "RGBA")


@pytest.fixture()
def page_widths() -> Callable[..., list[int]]:
    """Return the rounded page widths of a document handle, in page order."""

    def _widths(document) -> list[int]:
        return [round(document.page_size(index)[0]) for index in range(document.page_count)]

    return _widths


class FakeBitmap:
    def __init__(self, size: tuple[int, int]) -> None:
        self.size = size

    def to_pil(self) -> Image.Image:
        return Image.new("RGB", self.size, color="white")


class FakePage:
    def __init__(self, index: int, renders: list[tuple[int, float]]) -> None:
        self.index = index
        self._renders = renders

    def render(self, scale: float = 1.0) -> FakeBitmap:
        self._renders.append((self.index, scale))
        return FakeBitmap((max(1, int(10 * scale)), max(1, int(20 * scale))))


class FakeDocument:
    def __init__(self, page_count: int, renders: list[tuple[int, float]]) -> None:
        self._page_count = page_count
        self._renders = renders
        self.closed = False

    def __len__(self) -> int:
        return self._page_count

    def __getitem__(self, index: int) -> FakePage:
        return FakePage(index, self._renders)

    def close(self) -> None:
        self.closed = True


class FakePdfium:
    """Stands in for the pypdfium2 module; records opened documents and renders."""

    def __init__(self, page_count: int = 3) -> None:
        self.page_count = page_count
        self.documents: list[FakeDocument] = []
        self.renders: list[tuple[int, float]] = []
        self.loads = 0

    def PdfDocument(self, data: bytes) -> FakeDocument:  # noqa: N802 - mirrors pypdfium2
        document = FakeDocument(self.page_count, self.renders)
        self.documents.append(document)
        return document

    def loader(self) -> "FakePdfium":
        self.loads += 1
        return self


@pytest.fixture()
def fake_pdfium() -> FakePdfium:
    return FakePdfium()
