from __future__ import annotations

from PIL import Image
import pytest

from pdfdesk import InvalidOptionError, InvalidPageSelectionError, PageRenderer
from pdfdesk.core.render import EXPORT_SCALE, PREVIEW_SCALE, encode_image


def test_renderer_loads_library_lazily_once(fake_pdfium) -> None:
    renderer = PageRenderer(loader=fake_pdfium.loader)
    assert not renderer.is_loaded
    assert fake_pdfium.loads == 0

    renderer.render_previews(b"%PDF")
    renderer.render_previews(b"%PDF")

    assert renderer.is_loaded
    assert fake_pdfium.loads == 1


def test_render_previews_returns_png_per_page(fake_pdfium) -> None:
    previews = PageRenderer(loader=fake_pdfium.loader).render_previews(b"%PDF")

    assert len(previews) == 3
    assert all(preview.startswith(b"\x89PNG") for preview in previews)
    assert fake_pdfium.renders == [(0, PREVIEW_SCALE), (1, PREVIEW_SCALE), (2, PREVIEW_SCALE)]
    assert fake_pdfium.documents[0].closed


def test_render_selected_pages(fake_pdfium) -> None:
    renderer = PageRenderer(loader=fake_pdfium.loader)
    rendered = list(renderer.render(b"%PDF", scale=EXPORT_SCALE, pages=[2, 0]))

    assert [page.page_number for page in rendered] == [3, 1]
    assert rendered[0].image.size == (20, 40)


def test_render_rejects_missing_page_and_closes_document(fake_pdfium) -> None:
    renderer = PageRenderer(loader=fake_pdfium.loader)
    with pytest.raises(InvalidPageSelectionError):
        list(renderer.render(b"%PDF", pages=[3]))
    assert fake_pdfium.documents[0].closed


def test_encode_image_formats() -> None:
    image = Image.new("RGBA", (4, 4), color="red")

    assert encode_image(image, "png").startswith(b"\x89PNG")
    assert encode_image(image, "jpeg", 0.8).startswith(b"\xff\xd8")


@pytest.mark.parametrize("image_format, quality", [("jpeg", 0.0), ("jpeg", 1.5), ("gif", 0.9)])
def test_encode_image_rejects_bad_options(image_format: str, quality: float) -> None:
    with pytest.raises(InvalidOptionError):
        encode_image(Image.new("RGB", (2, 2)), image_format, quality)
