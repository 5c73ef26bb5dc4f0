"""
Capture-and-export pipeline.

Turns the invoice page the user currently sees into a downloadable,
single-page PDF:

    isolate -> settle -> rasterize -> detach + assemble -> deliver

Stages run strictly in order inside one coroutine. The pipeline suspends
during the settle delay and while the rasterizer works. It is not
reentrant: an ExportGuard admits one run at a time and rejects any trigger
that arrives while a run is in flight. Failures of any stage end the run
with a failed ExportResult; nothing is delivered and the off-screen
container is always detached.
"""

import asyncio
import threading
from dataclasses import dataclass
from typing import Any, Callable, Literal

from invoice_editor import config
from invoice_editor.components.invoice_paper import INVOICE_ELEMENT_ID
from invoice_editor.export.assemble import PDF_MIME_TYPE, assemble_pdf
from invoice_editor.export.errors import (
    CaptureFailure,
    DeliveryFailure,
    EncodingFailure,
    ExportError,
)
from invoice_editor.export.filenames import export_filename
from invoice_editor.export.isolation import PAGE_WIDTH_PX, CaptureDocument, isolate
from invoice_editor.export.rasterize import Rasterizer, StoryRasterizer
from invoice_editor.lib import logs
from invoice_editor.models.invoice import InvoiceData

LOG = logs.logger(__file__)

ExportStatus = Literal["delivered", "failed", "busy"]


@dataclass(frozen=True)
class ExportArtifact:
    """A generated file ready to hand to the browser."""

    filename: str
    content: bytes
    mime_type: str = PDF_MIME_TYPE


@dataclass(frozen=True)
class ExportResult:
    """
    Outcome of one export trigger.

    Attributes:
        status: ``delivered`` on success, ``failed`` when a stage raised,
            ``busy`` when another export was already running.
        artifact: The delivered file (only when delivered).
        error: The stage error (only when failed).
    """

    status: ExportStatus
    artifact: ExportArtifact | None = None
    error: ExportError | None = None

    @property
    def ok(self) -> bool:
        return self.status == "delivered"

    @property
    def message(self) -> str:
        """User-facing notification text."""
        if self.status == "delivered" and self.artifact:
            return f"Saved {self.artifact.filename}"
        if self.status == "busy":
            return "An export is already in progress."
        return f"Failed to generate PDF: {self.error}. Please try again."


class ExportGuard:
    """
    Busy-state guard admitting a single export at a time.

    Dash serves callbacks from several threads, so the state sits behind a
    non-blocking lock: acquiring never waits, it either wins or reports
    busy.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def try_acquire(self) -> bool:
        return self._lock.acquire(blocking=False)

    def release(self) -> None:
        self._lock.release()


class ExportPipeline:
    """
    Exports the current invoice page as a PDF.

    One instance is shared by every export trigger in the app so they all
    see the same busy state.
    """

    def __init__(
        self,
        rasterizer: Rasterizer | None = None,
        element_id: str = INVOICE_ELEMENT_ID,
        settle_seconds: float = config.SETTLE_SECONDS,
        width_px: int = PAGE_WIDTH_PX,
        deliver: Callable[[ExportArtifact], Any] | None = None,
    ) -> None:
        """
        Args:
            rasterizer: Stage 3 implementation; StoryRasterizer by default.
            element_id: Stable id of the invoice page root.
            settle_seconds: Delay between isolation and rasterization.
            width_px: Logical width of the off-screen container.
            deliver: Called with the artifact once assembly succeeded.
        """
        self.rasterizer = rasterizer or StoryRasterizer(width_px=width_px)
        self.element_id = element_id
        self.settle_seconds = settle_seconds
        self.width_px = width_px
        self.deliver = deliver
        self._guard = ExportGuard()

    @property
    def busy(self) -> bool:
        """True while an export run is in flight."""
        return self._guard.busy

    async def export_current_invoice(
        self, document: CaptureDocument, invoice: InvoiceData
    ) -> ExportResult:
        """
        Capture the invoice page in document and deliver it as a PDF.

        Args:
            document: Document holding the live invoice page.
            invoice: The record the page was rendered from; supplies the
                filename fields.

        Returns:
            ExportResult describing the outcome. Stage errors are returned,
            not raised.
        """
        if not self._guard.try_acquire():
            LOG.info("Export ignored: another export is in progress")
            return ExportResult(status="busy")
        try:
            artifact = await self._run(document, invoice)
        except ExportError as exc:
            LOG.error("Export failed (%s): %s", exc.kind, exc, exc_info=True)
            return ExportResult(status="failed", error=exc)
        finally:
            self._guard.release()

        LOG.info("Export delivered %s (%s bytes)", artifact.filename, len(artifact.content))
        return ExportResult(status="delivered", artifact=artifact)

    async def _run(self, document: CaptureDocument, invoice: InvoiceData) -> ExportArtifact:
        filename = export_filename(invoice.recipient.email, invoice.invoice_number)
        LOG.info("Export started: %s", filename)

        with isolate(document, self.element_id, self.width_px) as clone:
            await asyncio.sleep(self.settle_seconds)
            try:
                image = await self.rasterizer.rasterize(clone)
            except ExportError:
                raise
            except Exception as exc:
                raise CaptureFailure(str(exc) or type(exc).__name__) from exc

        try:
            content = assemble_pdf(image, title=f"Invoice {invoice.invoice_number}")
        except Exception as exc:
            raise EncodingFailure(str(exc) or type(exc).__name__) from exc

        artifact = ExportArtifact(filename=filename, content=content)
        if self.deliver is not None:
            try:
                self.deliver(artifact)
            except Exception as exc:
                raise DeliveryFailure(str(exc) or type(exc).__name__) from exc
        return artifact
