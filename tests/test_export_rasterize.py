import asyncio
import base64
import io

import pytest
import requests
from dash import html
from PIL import Image

from invoice_editor.components.invoice_paper import INVOICE_ELEMENT_ID, build_invoice_paper
from invoice_editor.export.errors import CaptureFailure
from invoice_editor.export.isolation import CaptureDocument, isolate
from invoice_editor.export.nodes import to_node
from invoice_editor.export.rasterize import StoryRasterizer, decode_data_uri


def _png_data_uri(color=(255, 0, 0, 128)) -> str:
    buffer = io.BytesIO()
    Image.new("RGBA", (8, 8), color).save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode()


def test_decode_data_uri():
    assert decode_data_uri("data:image/svg+xml;base64,PHN2Zy8+") == (b"<svg/>", "image/svg+xml")
    assert decode_data_uri("data:text/plain,a%20b") == (b"a b", "text/plain")
    with pytest.raises(CaptureFailure):
        decode_data_uri("data:image/png;base64")


def test_resolve_images_rewrites_sources():
    node = to_node(html.Div([html.Img(src=_png_data_uri()), html.Img(src="")]))
    entries = StoryRasterizer().resolve_images(node)

    assert list(entries) == ["image-0.png"]
    assert entries["image-0.png"].startswith(b"\x89PNG")
    assert node["props"]["children"][0]["props"]["src"] == "image-0.png"


def test_remote_images_refused_when_not_allowed():
    node = to_node(html.Img(src="https://example.com/logo.png"))
    with pytest.raises(CaptureFailure):
        StoryRasterizer(allow_remote_images=False).resolve_images(node)


def test_remote_image_fetch_failure(monkeypatch):
    def _fail(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(requests, "get", _fail)
    node = to_node(html.Img(src="https://example.com/logo.png"))
    with pytest.raises(CaptureFailure, match="offline"):
        StoryRasterizer(allow_remote_images=True).resolve_images(node)


def test_unsupported_image_source():
    node = to_node(html.Img(src="/assets/logo.png"))
    with pytest.raises(CaptureFailure):
        StoryRasterizer().resolve_images(node)


def test_renders_invoice_page_at_capture_width(invoice):
    from dataclasses import replace

    invoice = replace(invoice, logo_url=_png_data_uri())
    document = CaptureDocument(build_invoice_paper(invoice))
    rasterizer = StoryRasterizer(scale=2)

    with isolate(document, INVOICE_ELEMENT_ID) as clone:
        image = asyncio.run(rasterizer.rasterize(clone))

    assert image.mode == "RGB"
    assert image.width == 1588
    assert image.height > 0
    assert image.getpixel((0, 0)) == (255, 255, 255)


def test_short_invoice_keeps_a4_height(invoice):
    from dataclasses import replace

    invoice = replace(invoice, items=())
    document = CaptureDocument(build_invoice_paper(invoice))

    with isolate(document, INVOICE_ELEMENT_ID) as clone:
        image = asyncio.run(StoryRasterizer(scale=2).rasterize(clone))

    assert image.width == 1588
    assert image.height >= round(1588 * 297 / 210) - 1
