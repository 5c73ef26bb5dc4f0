"""
Layout helpers for the Invoice Editor Dash application.

This module defines the root layout structure including:
- dcc.Store holding the serialized InvoiceData
- dcc.Download and the error dialog used by the PDF export
- Mobile tab bar (Edit / Preview) with the compact download button
- Editor panel on the left and the scrollable preview on the right
- The hidden auto-fill modal
"""

from dash import dcc, html
from dash_iconify import DashIconify

from invoice_editor.components.editor_panel import build_editor_panel
from invoice_editor.components.extract_modal import build_extract_modal
from invoice_editor.components.invoice_paper import build_invoice_paper
from invoice_editor.models.invoice import InvoiceData, serialize_invoice

EDIT_TAB = "edit"
PREVIEW_TAB = "preview"


def build_layout(invoice: InvoiceData, autofill_available: bool = True) -> html.Div:
    """
    Build the root layout for the Invoice Editor.

    Args:
        invoice: Record shown when the page first loads.
        autofill_available: Enables the Bill To auto-fill button.

    Returns:
        Root html.Div containing the complete application layout.
    """
    return html.Div(
        className="app-shell",
        children=[
            # Current invoice record (serialized InvoiceData)
            dcc.Store(id="invoice-store", data=serialize_invoice(invoice)),
            # Download component for PDF exports
            dcc.Download(id="download-file"),
            # Export failures are reported in a browser dialog
            dcc.ConfirmDialog(id="export-error-dialog"),
            _build_mobile_bar(),
            html.Div(
                className="workspace",
                children=[
                    html.Div(
                        id="editor-pane",
                        className=pane_class(EDIT_TAB, EDIT_TAB),
                        children=build_editor_panel(invoice, autofill_available),
                    ),
                    html.Div(
                        id="preview-pane",
                        className=pane_class(PREVIEW_TAB, EDIT_TAB),
                        children=html.Div(
                            className="preview-scale",
                            children=html.Div(
                                id="preview-container",
                                children=build_invoice_paper(invoice),
                            ),
                        ),
                    ),
                ],
            ),
            build_extract_modal(),
        ],
    )


def pane_class(pane: str, active_tab: str) -> str:
    """Return the className for a pane; inactive panes hide on narrow screens."""
    base = f"pane {pane}-pane"
    return base if pane == active_tab else f"{base} mobile-hidden"


def tab_class(tab: str, active_tab: str) -> str:
    return "tab active" if tab == active_tab else "tab"


def _build_mobile_bar() -> html.Div:
    """Return the tab switcher shown on narrow viewports."""
    return html.Div(
        className="mobile-bar",
        children=[
            html.Div(
                className="tabs",
                children=[
                    html.Button(
                        id="tab-edit",
                        className=tab_class(EDIT_TAB, EDIT_TAB),
                        children=[DashIconify(icon="lucide:pen"), "Edit"],
                    ),
                    html.Button(
                        id="tab-preview",
                        className=tab_class(PREVIEW_TAB, EDIT_TAB),
                        children=[DashIconify(icon="lucide:eye"), "Preview"],
                    ),
                ],
            ),
            html.Button(
                id="mobile-download-btn",
                className="button link gap hidden",
                children=[
                    DashIconify(icon="lucide:download", className="button-icon"),
                    html.Span("Save PDF", id="mobile-download-label"),
                ],
            ),
        ],
    )
