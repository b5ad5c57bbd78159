from __future__ import annotations

import base64
from io import BytesIO
from pathlib import Path

import pytest
from pypdf import PdfReader

from pdfdesk import (
    CompressionResult,
    DocumentHandle,
    InvalidOptionError,
    InvalidPageSelectionError,
    MissingInputError,
    UnsupportedFormatError,
    WatermarkOptions,
    format_file_size,
)
from pdfdesk.edit import add_signature, add_watermark, compress_document, rotate_document, rotated_filename
from pdfdesk.edit.sign import decode_signature, signature_placement
from pdfdesk.edit.watermark import watermark_origin


def test_rotation_is_absolute(sample_pdf: Path) -> None:
    document = DocumentHandle.open(sample_pdf)
    rotate_document(document, 90)
    rotate_document(document, 90)

    assert [page.rotation for page in document.pages()] == [90, 90, 90]
    reopened = PdfReader(BytesIO(document.to_bytes()))
    assert all(page.rotation == 90 for page in reopened.pages)


def test_rotation_can_be_reset_to_zero(sample_pdf: Path) -> None:
    document = DocumentHandle.open(sample_pdf)
    rotate_document(document, 270)
    rotate_document(document, 0)

    assert [page.rotation for page in document.pages()] == [0, 0, 0]


def test_rotation_rejects_other_angles(sample_pdf: Path) -> None:
    with pytest.raises(InvalidOptionError):
        rotate_document(DocumentHandle.open(sample_pdf), 45)


def test_rotated_filename() -> None:
    assert rotated_filename(180) == "rotated-180-degrees.pdf"


@pytest.mark.parametrize(
    "overrides, error",
    [
        ({"text": "   "}, MissingInputError),
        ({"opacity": 1.5}, InvalidOptionError),
        ({"font_size": 10}, InvalidOptionError),
        ({"font_size": 121}, InvalidOptionError),
        ({"rotation": 361}, InvalidOptionError),
        ({"position": "left"}, InvalidOptionError),
    ],
)
def test_watermark_options_are_validated(overrides: dict, error: type[Exception]) -> None:
    options = {"text": "DRAFT", **overrides}
    with pytest.raises(error):
        WatermarkOptions(**options)


def test_watermark_origin_positions() -> None:
    assert watermark_origin(600, 800, 200, 48, "center") == (200, 400)
    assert watermark_origin(600, 800, 200, 48, "top") == (200, 800 - 48 - 50)
    assert watermark_origin(600, 800, 200, 48, "bottom") == (200, 48 + 50)


def test_watermark_is_drawn_on_every_page(sample_pdf: Path) -> None:
    document = DocumentHandle.open(sample_pdf)
    add_watermark(document, WatermarkOptions(text="DRAFT", rotation=0, font_size=12))

    reopened = PdfReader(BytesIO(document.to_bytes()))
    assert len(reopened.pages) == 3
    assert all("DRAFT" in page.extract_text() for page in reopened.pages)


def test_signature_placement_keeps_aspect_ratio() -> None:
    assert signature_placement(600, 40, 20, 150) == (400, 50, 150, 75)


def test_add_signature_on_selected_page(sample_pdf: Path, png_bytes: bytes) -> None:
    document = DocumentHandle.open(sample_pdf)
    placement = add_signature(document, png_bytes, page_number=3, width=100)

    assert placement.page_number == 3
    assert placement.x == 300 - 100 - 50
    assert placement.y == 50
    assert placement.height == 50
    assert document.page_count == 3


def test_add_signature_accepts_data_url(sample_pdf: Path, image_factory) -> None:
    jpeg = image_factory((30, 30), "JPEG", "RGB")
    data_url = "data:image/jpeg;base64," + base64.b64encode(jpeg).decode("ascii")

    placement = add_signature(DocumentHandle.open(sample_pdf), data_url)
    assert placement.page_number == 1
    assert placement.width == placement.height == 150


def test_add_signature_rejects_missing_page(sample_pdf: Path, png_bytes: bytes) -> None:
    with pytest.raises(InvalidPageSelectionError):
        add_signature(DocumentHandle.open(sample_pdf), png_bytes, page_number=4)


def test_add_signature_rejects_other_image_formats(sample_pdf: Path, image_factory) -> None:
    gif = image_factory((10, 10), "GIF", "L")
    with pytest.raises(UnsupportedFormatError):
        add_signature(DocumentHandle.open(sample_pdf), gif)


def test_add_signature_requires_a_signature(sample_pdf: Path) -> None:
    with pytest.raises(MissingInputError):
        add_signature(DocumentHandle.open(sample_pdf), b"")


def test_decode_signature_rejects_plain_text() -> None:
    with pytest.raises(UnsupportedFormatError):
        decode_signature("signature.png")


def test_compress_document_reports_sizes(sample_pdf: Path) -> None:
    original = sample_pdf.read_bytes()
    data, result = compress_document(DocumentHandle.open(original), original_size=len(original), level="high")

    assert data.startswith(b"%PDF")
    assert result.level == "high"
    assert result.original_size == len(original)
    assert result.compressed_size == len(data)
    assert len(PdfReader(BytesIO(data)).pages) == 3


def test_compress_document_rejects_unknown_level(sample_pdf: Path) -> None:
    with pytest.raises(InvalidOptionError):
        compress_document(DocumentHandle.open(sample_pdf), original_size=1, level="extreme")


def test_compression_result_statistics() -> None:
    result = CompressionResult(level="medium", original_size=1000, compressed_size=250)

    assert result.bytes_saved == 750
    assert result.compression_ratio == 0.25
    assert result.savings_percentage == 75
    assert "savings: 75%" in result.summary()


def test_compression_result_never_reports_negative_savings() -> None:
    result = CompressionResult(level="low", original_size=100, compressed_size=120)

    assert result.bytes_saved == 0
    assert CompressionResult(level="low", original_size=0, compressed_size=0).savings_percentage == 0


@pytest.mark.parametrize(
    "size, expected",
    [(0, "0 Bytes"), (512, "512 Bytes"), (1536, "1.5 KB"), (1048576, "1 MB")],
)
def test_format_file_size(size: int, expected: str) -> None:
    assert format_file_size(size) == expected
