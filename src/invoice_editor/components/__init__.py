"""
Reusable Dash UI components for the Invoice Editor.

This package provides modular, composable components:
- invoice_paper: the live invoice page (render surface for preview and export)
- editor_panel: form controls for every invoice field
- extract_modal: paste-and-extract dialog for the Bill To party

All components are pure functions that return Dash html/dcc elements,
making them easy to test and compose.
"""

from invoice_editor.components.editor_panel import build_editor_panel, build_item_rows
from invoice_editor.components.extract_modal import build_extract_modal, modal_class
from invoice_editor.components.invoice_paper import (
    INVOICE_ELEMENT_ID,
    build_invoice_paper,
)

__all__ = [
    "INVOICE_ELEMENT_ID",
    "build_editor_panel",
    "build_extract_modal",
    "build_invoice_paper",
    "build_item_rows",
    "modal_class",
]
