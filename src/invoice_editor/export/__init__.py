"""
Capture-and-export pipeline for the invoice page.

Modules:
- nodes: plain-dict view of Dash component trees
- isolation: off-screen copy of the live page (CaptureDocument, isolate)
- markup: node tree to HTML
- rasterize: Rasterizer interface and the PyMuPDF Story implementation
- assemble: single-page PDF assembly with reportlab
- filenames: output filename derivation
- pipeline: the staged ExportPipeline and its busy guard
"""

from invoice_editor.export.errors import (
    CaptureFailure,
    DeliveryFailure,
    ElementNotFound,
    EncodingFailure,
    ExportError,
    InvalidInvoice,
)
from invoice_editor.export.filenames import export_filename
from invoice_editor.export.isolation import CaptureDocument
from invoice_editor.export.pipeline import (
    ExportArtifact,
    ExportGuard,
    ExportPipeline,
    ExportResult,
)
from invoice_editor.export.rasterize import Rasterizer, StoryRasterizer

__all__ = [
    "CaptureDocument",
    "CaptureFailure",
    "DeliveryFailure",
    "ElementNotFound",
    "EncodingFailure",
    "ExportArtifact",
    "ExportError",
    "ExportGuard",
    "ExportPipeline",
    "ExportResult",
    "InvalidInvoice",
    "Rasterizer",
    "StoryRasterizer",
    "export_filename",
]
