import asyncio
import copy
from dataclasses import replace

from PIL import Image

from invoice_editor.export.errors import (
    CaptureFailure,
    DeliveryFailure,
    ElementNotFound,
    EncodingFailure,
)
from invoice_editor.export.isolation import CONTAINER_ID, CaptureDocument
from invoice_editor.export.pipeline import (
    ExportArtifact,
    ExportGuard,
    ExportPipeline,
    ExportResult,
)
from invoice_editor.export.nodes import class_names

from conftest import FakeRasterizer


def _pipeline(rasterizer, **kwargs):
    delivered = []
    pipeline = ExportPipeline(
        rasterizer=rasterizer, settle_seconds=0, deliver=delivered.append, **kwargs
    )
    return pipeline, delivered


def test_delivers_pdf_named_after_recipient(document, invoice, fake_rasterizer):
    pipeline, delivered = _pipeline(fake_rasterizer)

    result = asyncio.run(pipeline.export_current_invoice(document, invoice))

    assert result.ok
    assert result.artifact.filename == "accounts_invoice_Q7MKP2R-8391.pdf"
    assert result.artifact.mime_type == "application/pdf"
    assert result.artifact.content.startswith(b"%PDF")
    assert delivered == [result.artifact]
    assert result.message == "Saved accounts_invoice_Q7MKP2R-8391.pdf"
    assert not pipeline.busy


def test_rasterizes_clean_copy_while_attached(document, invoice, fake_rasterizer):
    fake_rasterizer.document = document
    live_before = copy.deepcopy(document.tree)
    pipeline, _ = _pipeline(fake_rasterizer)

    asyncio.run(pipeline.export_current_invoice(document, invoice))

    (node,) = fake_rasterizer.calls
    assert class_names(node) == ["invoice-paper"]
    (overlays,) = fake_rasterizer.overlays_seen
    assert [c["props"]["id"] for c in overlays] == [CONTAINER_ID]
    assert document.overlays == ()
    assert document.tree == live_before


def test_missing_element_fails_without_side_effects(invoice, fake_rasterizer):
    document = CaptureDocument({"type": "Div", "namespace": "dash_html_components", "props": {}})
    pipeline, delivered = _pipeline(fake_rasterizer)

    result = asyncio.run(pipeline.export_current_invoice(document, invoice))

    assert result.status == "failed"
    assert isinstance(result.error, ElementNotFound)
    assert fake_rasterizer.calls == []
    assert delivered == []
    assert document.overlays == ()
    assert not pipeline.busy


def test_rasterizer_error_becomes_capture_failure(document, invoice):
    rasterizer = FakeRasterizer(error=RuntimeError("layout exploded"))
    pipeline, delivered = _pipeline(rasterizer)

    result = asyncio.run(pipeline.export_current_invoice(document, invoice))

    assert result.status == "failed"
    assert isinstance(result.error, CaptureFailure)
    assert "layout exploded" in result.message
    assert result.message.startswith("Failed to generate PDF:")
    assert delivered == []
    assert document.overlays == ()


def test_capture_failure_passes_through(document, invoice):
    error = CaptureFailure("Remote images are not allowed")
    pipeline, _ = _pipeline(FakeRasterizer(error=error))

    result = asyncio.run(pipeline.export_current_invoice(document, invoice))

    assert result.error is error


def test_assembly_error_becomes_encoding_failure(document, invoice):
    pipeline, delivered = _pipeline(FakeRasterizer(size=(0, 0)))

    result = asyncio.run(pipeline.export_current_invoice(document, invoice))

    assert isinstance(result.error, EncodingFailure)
    assert delivered == []
    assert document.overlays == ()
    assert not pipeline.busy


def test_second_trigger_while_busy_is_ignored(document, invoice):
    class SlowRasterizer(FakeRasterizer):
        async def rasterize(self, node):
            self.calls.append(node)
            await self.gate.wait()
            return Image.new("RGB", (1588, 2246), "white")

    rasterizer = SlowRasterizer()
    pipeline, delivered = _pipeline(rasterizer)

    async def scenario():
        rasterizer.gate = asyncio.Event()
        first = asyncio.create_task(pipeline.export_current_invoice(document, invoice))
        while not rasterizer.calls:
            await asyncio.sleep(0)
        assert pipeline.busy
        second = await pipeline.export_current_invoice(document, invoice)
        rasterizer.gate.set()
        return await first, second

    first, second = asyncio.run(scenario())

    assert first.ok
    assert second.status == "busy"
    assert second.artifact is None
    assert second.message == "An export is already in progress."
    assert len(rasterizer.calls) == 1
    assert len(delivered) == 1


def test_sequential_exports_both_deliver(document, invoice, fake_rasterizer):
    pipeline, delivered = _pipeline(fake_rasterizer)

    asyncio.run(pipeline.export_current_invoice(document, invoice))
    asyncio.run(pipeline.export_current_invoice(document, invoice))

    assert len(delivered) == 2


def test_filename_falls_back_without_email(document, invoice, fake_rasterizer):
    invoice = replace(invoice, recipient=replace(invoice.recipient, email=""))
    pipeline, _ = _pipeline(fake_rasterizer)

    result = asyncio.run(pipeline.export_current_invoice(document, invoice))

    assert result.artifact.filename == "invoice_invoice_Q7MKP2R-8391.pdf"


def test_export_guard():
    guard = ExportGuard()
    assert guard.try_acquire()
    assert guard.busy
    assert not guard.try_acquire()
    guard.release()
    assert not guard.busy


def test_result_messages():
    artifact = ExportArtifact(filename="a.pdf", content=b"%PDF")
    assert ExportResult(status="delivered", artifact=artifact).message == "Saved a.pdf"
    failed = ExportResult(status="failed", error=CaptureFailure("boom"))
    assert failed.message == "Failed to generate PDF: boom. Please try again."
    assert not failed.ok


def test_delivery_error_is_returned_as_failure(document, invoice, fake_rasterizer):
    def _deliver(artifact):
        raise OSError("download channel closed")

    pipeline = ExportPipeline(rasterizer=fake_rasterizer, settle_seconds=0, deliver=_deliver)

    result = asyncio.run(pipeline.export_current_invoice(document, invoice))

    assert result.status == "failed"
    assert isinstance(result.error, DeliveryFailure)
    assert "download channel closed" in result.message
    assert document.overlays == ()
    assert not pipeline.busy
