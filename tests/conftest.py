"""Shared fixtures for the Invoice Editor tests."""

import pytest
from PIL import Image

from invoice_editor.components.invoice_paper import build_invoice_paper
from invoice_editor.export.isolation import CaptureDocument
from invoice_editor.export.rasterize import Rasterizer
from invoice_editor.lib.caches import DiskCache
from invoice_editor.models.invoice import InvoiceData, default_invoice
from invoice_editor.services.extraction_service_gemini import GeminiExtractionService


class FakeRasterizer(Rasterizer):
    """Records what it was asked to rasterize and returns a plain image."""

    def __init__(self, size=(1588, 2246), mode="RGB", error=None):
        self.size = size
        self.mode = mode
        self.error = error
        self.calls = []
        self.overlays_seen = []
        self.document = None

    async def rasterize(self, node):
        self.calls.append(node)
        if self.document is not None:
            self.overlays_seen.append(self.document.overlays)
        if self.error is not None:
            raise self.error
        return Image.new(self.mode, self.size, "white")


@pytest.fixture
def invoice() -> InvoiceData:
    return default_invoice()


@pytest.fixture
def document(invoice) -> CaptureDocument:
    """A document whose live tree is the preview as the browser holds it."""
    return CaptureDocument(
        {
            "type": "Div",
            "namespace": "dash_html_components",
            "props": {
                "className": "preview-scale",
                "style": {"transform": "scale(0.45)"},
                "children": build_invoice_paper(invoice).to_plotly_json(),
            },
        }
    )


@pytest.fixture
def fake_rasterizer() -> FakeRasterizer:
    return FakeRasterizer()


@pytest.fixture(autouse=True)
def _no_gemini_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)


@pytest.fixture
def gemini_cache(tmp_path, monkeypatch):
    """Point the Gemini service's disk cache at a temporary directory."""
    cache = DiskCache(tmp_path / "extraction", ttl=300)
    monkeypatch.setattr(GeminiExtractionService, "_DISK_CACHE", cache)
    yield cache
    cache.close()
