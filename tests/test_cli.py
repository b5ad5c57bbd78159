from __future__ import annotations

from pathlib import Path

import pytest
from pypdf import PdfReader

from pdfdesk.cli.main import main


@pytest.fixture(autouse=True)
def no_pause(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("pdfdesk.delivery.sinks.time.sleep", lambda seconds: None)


def _widths(path: Path) -> list[int]:
    return [round(float(page.mediabox.width)) for page in PdfReader(str(path)).pages]


def test_cli_merge(pdf_factory, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    first = pdf_factory("a.pdf", [100])
    second = pdf_factory("b.pdf", [200, 300])
    output_dir = tmp_path / "out"

    result = main(["merge", str(first), str(second), str(output_dir)])

    assert [item.filename for item in result] == ["merged.pdf"]
    assert _widths(output_dir / "merged.pdf") == [100, 200, 300]
    assert str(output_dir / "merged.pdf") in capsys.readouterr().out


def test_cli_split(sample_pdf: Path, tmp_path: Path) -> None:
    output_dir = tmp_path / "pages"
    main(["split", str(sample_pdf), str(output_dir), "--pause", "0"])

    assert sorted(path.name for path in output_dir.iterdir()) == ["page-1.pdf", "page-2.pdf", "page-3.pdf"]


def test_cli_organize_uses_one_based_positions(sample_pdf: Path, tmp_path: Path) -> None:
    main(["organize", str(sample_pdf), str(tmp_path), "--move", "1", "3", "--delete", "1"])

    assert _widths(tmp_path / "organized.pdf") == [300, 100]


def test_cli_organize_with_order(sample_pdf: Path, tmp_path: Path) -> None:
    main(["organize", str(sample_pdf), str(tmp_path), "--order", "2", "3"])

    assert _widths(tmp_path / "organized.pdf") == [200, 300]


def test_cli_rotate(sample_pdf: Path, tmp_path: Path) -> None:
    main(["rotate", str(sample_pdf), str(tmp_path), "--degrees", "180"])

    reader = PdfReader(str(tmp_path / "rotated-180-degrees.pdf"))
    assert all(page.rotation == 180 for page in reader.pages)


def test_cli_watermark(sample_pdf: Path, tmp_path: Path) -> None:
    main(["watermark", str(sample_pdf), str(tmp_path), "--text", "DRAFT", "--font-size", "24"])
    assert (tmp_path / "watermarked.pdf").exists()


def test_cli_sign(sample_pdf: Path, tmp_path: Path, png_bytes: bytes) -> None:
    signature = tmp_path / "signature.png"
    signature.write_bytes(png_bytes)

    main(["sign", str(sample_pdf), str(signature), str(tmp_path / "out"), "--page", "3", "--width", "80"])
    assert (tmp_path / "out" / "signed.pdf").exists()


def test_cli_compress(sample_pdf: Path, tmp_path: Path) -> None:
    main(["compress", str(sample_pdf), str(tmp_path), "--level", "low"])
    assert (tmp_path / "compressed.pdf").exists()


def test_cli_convert_images(tmp_path: Path, image_factory) -> None:
    image = tmp_path / "photo.jpg"
    image.write_bytes(image_factory((50, 70), "JPEG"))

    main(["convert", str(image), str(tmp_path / "out"), "--mode", "images-to-pdf"])
    assert _widths(tmp_path / "out" / "converted-images.pdf") == [50]


def test_cli_reports_tool_errors(sample_pdf: Path, tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["merge", str(sample_pdf), str(tmp_path / "missing.pdf"), str(tmp_path / "out")])
    assert "File not found" in str(excinfo.value)


def test_cli_rejects_unsupported_rotation(sample_pdf: Path, tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["rotate", str(sample_pdf), str(tmp_path), "--degrees", "45"])
