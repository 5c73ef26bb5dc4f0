import pymupdf
import pytest
from PIL import Image

from invoice_editor.export.assemble import (
    A4_HEIGHT_MM,
    PAGE_WIDTH_MM,
    assemble_pdf,
    flatten,
    page_height_mm,
)

_PT_PER_MM = 72 / 25.4


def _page_size_mm(content: bytes) -> tuple[float, float]:
    with pymupdf.open(stream=content, filetype="pdf") as doc:
        assert doc.page_count == 1
        rect = doc[0].rect
        return rect.width / _PT_PER_MM, rect.height / _PT_PER_MM


def test_page_height_follows_aspect_ratio():
    assert page_height_mm(1588, 2246) == pytest.approx(2246 * 210 / 1588)
    assert page_height_mm(1000, 2000) == pytest.approx(420)


def test_page_height_rejects_empty_raster():
    with pytest.raises(ValueError):
        page_height_mm(0, 10)


def test_a4_raster_gives_a4_page():
    width, height = _page_size_mm(assemble_pdf(Image.new("RGB", (1588, 2246), "white")))
    assert width == pytest.approx(PAGE_WIDTH_MM, abs=0.1)
    assert height == pytest.approx(A4_HEIGHT_MM, abs=0.2)


def test_width_fixed_and_height_grows_with_content():
    short = _page_size_mm(assemble_pdf(Image.new("RGB", (1588, 1000), "white")))
    tall = _page_size_mm(assemble_pdf(Image.new("RGB", (1588, 6000), "white")))
    assert short[0] == pytest.approx(PAGE_WIDTH_MM, abs=0.1)
    assert tall[0] == pytest.approx(PAGE_WIDTH_MM, abs=0.1)
    assert tall[1] > A4_HEIGHT_MM > short[1]


def test_output_is_pdf():
    content = assemble_pdf(Image.new("RGB", (100, 100), "white"), title="Invoice 1")
    assert content.startswith(b"%PDF")


def test_flatten_composites_onto_white():
    transparent = Image.new("RGBA", (4, 4), (0, 0, 0, 0))
    flat = flatten(transparent)
    assert flat.mode == "RGB"
    assert flat.getpixel((0, 0)) == (255, 255, 255)
