from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from pdfdesk import (
    DocumentHandle,
    MemorySink,
    MissingInputError,
    PageRenderer,
    UnsupportedFormatError,
)
from pdfdesk.convert.excel import JobStatus, ConversionJob
from pdfdesk.tools import load_builtin_plugins
from pdfdesk.tools.common.interfaces import ToolContext, ToolInput
from pdfdesk.tools.common.pipeline import ToolRegistry, registry


def setup_module(module):
    load_builtin_plugins()


@pytest.fixture()
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    calls: list[float] = []
    monkeypatch.setattr("pdfdesk.delivery.sinks.time.sleep", calls.append)
    return calls


def _pdf_input(pdf_bytes_factory, name: str, widths) -> ToolInput:
    return ToolInput(name, pdf_bytes_factory(widths), "application/pdf")


def _run(name: str, inputs: list[ToolInput], **config) -> tuple[MemorySink, ToolContext]:
    sink = MemorySink()
    context = ToolContext(inputs=inputs, sink=sink, config=config)
    registry.run(name, context)
    return sink, context


def test_builtin_tools_are_registered() -> None:
    assert list(registry.names()) == [
        "compress",
        "excel-to-pdf",
        "images-to-pdf",
        "merge",
        "organize",
        "pdf-to-images",
        "rotate",
        "sign",
        "split",
        "watermark",
    ]


def test_registry_rejects_duplicates_and_unknown_names() -> None:
    local = ToolRegistry()
    tool_class = registry.get("merge")
    local.register("merge", tool_class)
    with pytest.raises(ValueError):
        local.register("merge", tool_class)
    with pytest.raises(KeyError):
        local.create("missing", ToolContext())


def test_merge_tool(pdf_bytes_factory, page_widths) -> None:
    sink, _ = _run(
        "merge",
        [_pdf_input(pdf_bytes_factory, "a.pdf", [100, 110]), _pdf_input(pdf_bytes_factory, "b.pdf", [200])],
    )

    assert sink.filenames == ["merged.pdf"]
    assert page_widths(DocumentHandle.open(sink.deliveries[0].data)) == [100, 110, 200]


def test_merge_tool_needs_two_files(pdf_bytes_factory) -> None:
    with pytest.raises(MissingInputError):
        _run("merge", [_pdf_input(pdf_bytes_factory, "a.pdf", [100])])


def test_merge_tool_rejects_non_pdf_before_reading(pdf_bytes_factory) -> None:
    inputs = [_pdf_input(pdf_bytes_factory, "a.pdf", [100]), ToolInput("b.docx", b"not read", "application/msword")]
    with pytest.raises(UnsupportedFormatError):
        _run("merge", inputs)


def test_split_tool_pauses_between_pages(pdf_bytes_factory, sleeps: list[float]) -> None:
    sink, _ = _run("split", [_pdf_input(pdf_bytes_factory, "doc.pdf", [100, 200, 300])])

    assert sink.filenames == ["page-1.pdf", "page-2.pdf", "page-3.pdf"]
    assert sleeps == [0.1, 0.1]


def test_split_tool_pause_can_be_disabled(pdf_bytes_factory, sleeps: list[float]) -> None:
    _run("split", [_pdf_input(pdf_bytes_factory, "doc.pdf", [100, 200])], delivery_pause=0.0)
    assert sleeps == []


def test_organize_tool_applies_order_and_operations(pdf_bytes_factory, page_widths) -> None:
    sink, context = _run(
        "organize",
        [_pdf_input(pdf_bytes_factory, "doc.pdf", [100, 200, 300, 400])],
        order=[3, 2, 1, 0],
        operations=[("move", 0, 3), ("delete", 0)],
    )

    assert sink.filenames == ["organized.pdf"]
    assert context.resources["manifest"].source_indices() == [1, 0, 3]
    assert page_widths(DocumentHandle.open(sink.deliveries[0].data)) == [200, 100, 400]


def test_organize_tool_renders_previews(pdf_bytes_factory, fake_pdfium) -> None:
    fake_pdfium.page_count = 2
    context = ToolContext(
        inputs=[_pdf_input(pdf_bytes_factory, "doc.pdf", [100, 200])],
        sink=MemorySink(),
        renderer=PageRenderer(loader=fake_pdfium.loader),
        config={"previews": True},
    )
    registry.run("organize", context)

    manifest = context.resources["manifest"]
    assert all(entry.preview.startswith(b"\x89PNG") for entry in manifest)


def test_organize_tool_keeps_previews_when_reordering(pdf_bytes_factory, fake_pdfium) -> None:
    fake_pdfium.page_count = 3
    context = ToolContext(
        inputs=[_pdf_input(pdf_bytes_factory, "doc.pdf", [100, 200, 300])],
        sink=MemorySink(),
        renderer=PageRenderer(loader=fake_pdfium.loader),
        config={"previews": True, "order": [2, 0]},
    )
    registry.run("organize", context)

    manifest = context.resources["manifest"]
    assert manifest.source_indices() == [2, 0]
    assert all(entry.preview is not None and entry.preview.startswith(b"\x89PNG") for entry in manifest)


def test_rotate_tool_names_output_after_angle(pdf_bytes_factory) -> None:
    sink, _ = _run("rotate", [_pdf_input(pdf_bytes_factory, "doc.pdf", [100])], degrees=270)

    assert sink.filenames == ["rotated-270-degrees.pdf"]
    assert DocumentHandle.open(sink.deliveries[0].data).page(0).rotation == 270


def test_watermark_tool(pdf_bytes_factory) -> None:
    sink, _ = _run("watermark", [_pdf_input(pdf_bytes_factory, "doc.pdf", [300])], text="DRAFT", opacity=0.5)
    assert sink.filenames == ["watermarked.pdf"]


def test_sign_tool_records_placement(pdf_bytes_factory, png_bytes: bytes) -> None:
    sink, context = _run(
        "sign",
        [_pdf_input(pdf_bytes_factory, "doc.pdf", [300, 400])],
        signature=png_bytes,
        page_number=2,
    )

    assert sink.filenames == ["signed.pdf"]
    placement = context.resources["placement"]
    assert (placement.page_number, placement.x, placement.y) == (2, 400 - 150 - 50, 50)


def test_compress_tool_records_statistics(pdf_bytes_factory) -> None:
    item = _pdf_input(pdf_bytes_factory, "doc.pdf", [100, 200])
    sink, context = _run("compress", [item], level="low")

    result = context.resources["compression"]
    assert sink.filenames == ["compressed.pdf"]
    assert result.original_size == len(item.data)
    assert result.compressed_size == len(sink.deliveries[0].data)


def test_images_to_pdf_tool_reports_skipped_files(image_factory) -> None:
    inputs = [
        ToolInput("a.png", image_factory((10, 10), "PNG"), "image/png"),
        ToolInput("b.gif", b"GIF89a", "image/gif"),
    ]
    sink, context = _run("images-to-pdf", inputs)

    assert sink.filenames == ["converted-images.pdf"]
    assert context.resources["skipped"] == ["b.gif"]


def test_pdf_to_images_tool_pauses_between_images(pdf_bytes_factory, fake_pdfium, sleeps: list[float]) -> None:
    sink = MemorySink()
    context = ToolContext(
        inputs=[_pdf_input(pdf_bytes_factory, "doc.pdf", [100, 200, 300])],
        sink=sink,
        renderer=PageRenderer(loader=fake_pdfium.loader),
        config={"format": "jpeg", "quality": 0.9},
    )
    registry.run("pdf-to-images", context)

    assert sink.filenames == ["page-1.jpeg", "page-2.jpeg", "page-3.jpeg"]
    assert sleeps == [0.3, 0.3]


def test_pdf_tools_reject_other_formats() -> None:
    with pytest.raises(UnsupportedFormatError):
        _run("split", [ToolInput("notes.txt", b"hello", "text/plain")])


def test_tools_require_a_file() -> None:
    with pytest.raises(MissingInputError):
        _run("rotate", [])


class FinishedProvider:
    def __init__(self) -> None:
        self.submitted: list[str] = []

    async def submit(self, data, file_name, options):
        self.submitted.append(file_name)
        return ConversionJob(id="job", status=JobStatus.FINISHED, result_url="https://files/out.pdf")

    async def poll(self, job):  # pragma: no cover - never polled
        raise AssertionError("finished jobs are not polled")

    async def fetch(self, job):
        return b"%PDF-converted"


def test_excel_tool_uses_provider_and_renames_output() -> None:
    provider = FinishedProvider()
    sink, context = _run(
        "excel-to-pdf",
        [ToolInput("Budget.XLSX", b"workbook")],
        provider=provider,
    )

    assert provider.submitted == ["Budget.XLSX"]
    assert sink.filenames == ["Budget.pdf"]
    assert sink.deliveries[0].data == b"%PDF-converted"
    assert context.resources["adapter"].attempts == 0


def test_excel_tool_rejects_other_files_before_any_request() -> None:
    provider = FinishedProvider()
    with pytest.raises(UnsupportedFormatError):
        _run("excel-to-pdf", [ToolInput("table.csv", b"a,b", "text/csv")], provider=provider)
    assert provider.submitted == []


def test_excel_tool_posts_to_endpoint(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"%PDF-endpoint")

    real_client = httpx.AsyncClient

    def client_factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return real_client(*args, **kwargs)

    monkeypatch.setattr("pdfdesk.tools.convert.httpx.AsyncClient", client_factory)
    sink, _ = _run("excel-to-pdf", [ToolInput("sheet.xls", b"workbook")], endpoint="http://service/api/excel-to-pdf")

    assert sink.filenames == ["sheet.pdf"]
    assert sink.deliveries[0].data == b"%PDF-endpoint"


def test_tool_context_from_paths(sample_pdf: Path, tmp_path: Path) -> None:
    context = ToolContext.from_paths([sample_pdf], output_dir=tmp_path / "out")

    assert context.inputs[0].filename == "sample.pdf"
    registry.run("split", context.with_updates(config={"delivery_pause": 0}))
    assert sorted(path.name for path in (tmp_path / "out").iterdir()) == ["page-1.pdf", "page-2.pdf", "page-3.pdf"]


def test_tool_context_from_missing_path(tmp_path: Path) -> None:
    with pytest.raises(MissingInputError):
        ToolContext.from_paths([tmp_path / "missing.pdf"])