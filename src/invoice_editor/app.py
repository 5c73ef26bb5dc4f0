"""
Dash application entry point for the Invoice Editor.

Wires the layout to its callbacks:
- form edits and record actions replace the stored InvoiceData
- the preview re-renders from the store
- both download buttons run the shared export pipeline
- the auto-fill modal fills the Bill To fields from pasted text
- the mobile tab bar switches between editor and preview
"""

from pathlib import Path

from dash import ALL, Dash, Input, Output, State, ctx, dcc, no_update

from invoice_editor import callbacks, config
from invoice_editor.components.editor_panel import (
    INVOICE_FIELD,
    ITEM_FIELD,
    ITEM_REMOVE,
    PARTY_FIELD,
    build_item_rows,
)
from invoice_editor.components.extract_modal import modal_class
from invoice_editor.components.invoice_paper import build_invoice_paper
from invoice_editor.export.pipeline import ExportPipeline
from invoice_editor.layout import (
    EDIT_TAB,
    PREVIEW_TAB,
    build_layout,
    pane_class,
    tab_class,
)
from invoice_editor.lib import logs
from invoice_editor.models.invoice import default_invoice, deserialize_invoice
from invoice_editor.services import get_extraction_service

LOG = logs.logger(__file__)

_ASSETS_PATH = Path(__file__).resolve().parent / "assets"

# Shared by both download buttons so they see one busy state.
PIPELINE = ExportPipeline()

app = Dash(__name__, title=config.APP_TITLE, assets_folder=str(_ASSETS_PATH))
app.layout = lambda: build_layout(
    default_invoice(), autofill_available=get_extraction_service().available
)


@app.callback(
    Output("invoice-store", "data", allow_duplicate=True),
    Input({"type": INVOICE_FIELD, "field": ALL}, "value"),
    Input({"type": PARTY_FIELD, "role": ALL, "field": ALL}, "value"),
    Input({"type": ITEM_FIELD, "item": ALL, "field": ALL}, "value"),
    Input("logo-alignment", "value"),
    State({"type": INVOICE_FIELD, "field": ALL}, "id"),
    State({"type": PARTY_FIELD, "role": ALL, "field": ALL}, "id"),
    State({"type": ITEM_FIELD, "item": ALL, "field": ALL}, "id"),
    State("invoice-store", "data"),
    prevent_initial_call=True,
)
def sync_form(
    invoice_values,
    party_values,
    item_values,
    logo_alignment,
    invoice_ids,
    party_ids,
    item_ids,
    store_data,
):
    """Replace the stored invoice with one built from the form."""
    return callbacks.apply_form_values(
        store_data,
        list(zip(invoice_ids, invoice_values)),
        list(zip(party_ids, party_values)),
        list(zip(item_ids, item_values)),
        logo_alignment,
    )


@app.callback(
    Output("invoice-store", "data", allow_duplicate=True),
    Output("items-editor", "children"),
    Output({"type": INVOICE_FIELD, "field": "invoice_number"}, "value"),
    Output("logo-error", "children"),
    Input("add-item", "n_clicks"),
    Input({"type": ITEM_REMOVE, "item": ALL}, "n_clicks"),
    Input("logo-upload", "contents"),
    Input("logo-remove", "n_clicks"),
    Input("regenerate-number", "n_clicks"),
    State("invoice-store", "data"),
    prevent_initial_call=True,
)
def record_action(_add, _remove, upload_contents, _logo_remove, _regenerate, store_data):
    """Handle add/remove item, logo upload/removal and number regeneration."""
    # New item rows fire their remove inputs with n_clicks=None.
    if not ctx.triggered or not ctx.triggered[0]["value"]:
        return no_update, no_update, no_update, no_update
    data, new_number, logo_error = callbacks.apply_record_action(
        store_data, ctx.triggered_id, upload_contents
    )
    rows = build_item_rows(deserialize_invoice(data).items)
    return data, rows, new_number if new_number else no_update, logo_error


@app.callback(
    Output("preview-container", "children"),
    Input("invoice-store", "data"),
)
def render_preview(store_data):
    """Re-render the invoice page whenever the record changes."""
    return build_invoice_paper(deserialize_invoice(store_data))


@app.callback(
    Output("download-file", "data"),
    Output("export-error-dialog", "message"),
    Output("export-error-dialog", "displayed"),
    Input("download-btn", "n_clicks"),
    Input("mobile-download-btn", "n_clicks"),
    State("preview-container", "children"),
    State("invoice-store", "data"),
    running=[
        (Output("download-btn", "disabled"), True, False),
        (Output("mobile-download-btn", "disabled"), True, False),
        (Output("download-btn-label", "children"), "Generating...", "Download PDF"),
        (Output("mobile-download-label", "children"), "Saving...", "Save PDF"),
    ],
    prevent_initial_call=True,
)
def download_pdf(_primary, _compact, preview_children, store_data):
    """Export the current preview as a PDF download."""
    result = callbacks.run_export(PIPELINE, preview_children, store_data)
    if result.ok:
        artifact = result.artifact
        return (
            dcc.send_bytes(artifact.content, artifact.filename, type=artifact.mime_type),
            no_update,
            False,
        )
    if result.status == "busy":
        return no_update, no_update, no_update
    return no_update, result.message, True


@app.callback(
    Output("extract-modal", "className"),
    Output({"type": PARTY_FIELD, "role": "recipient", "field": ALL}, "value"),
    Output("extract-error", "children"),
    Output("invoice-store", "data", allow_duplicate=True),
    Input("extract-open", "n_clicks"),
    Input("extract-cancel", "n_clicks"),
    Input("extract-submit", "n_clicks"),
    State("extract-text", "value"),
    State("invoice-store", "data"),
    running=[
        (Output("extract-submit", "disabled"), True, False),
        (Output("extract-submit-label", "children"), "Analyzing...", "Extract"),
    ],
    prevent_initial_call=True,
)
def extract_recipient(_open, _cancel, _submit, text, store_data):
    """Open/close the auto-fill modal and apply extraction results."""
    field_ids = [output["id"] for output in ctx.outputs_list[1]]
    unchanged = [no_update] * len(field_ids)
    if ctx.triggered_id == "extract-open":
        return modal_class(True), unchanged, "", no_update
    if ctx.triggered_id == "extract-cancel":
        return modal_class(False), unchanged, "", no_update

    party, error = callbacks.run_extraction(get_extraction_service(), text)
    if party is None:
        return modal_class(True), unchanged, error, no_update
    return (
        modal_class(False),
        callbacks.party_field_values(party, field_ids),
        "",
        callbacks.apply_extracted_recipient(store_data, party),
    )


@app.callback(
    Output("editor-pane", "className"),
    Output("preview-pane", "className"),
    Output("tab-edit", "className"),
    Output("tab-preview", "className"),
    Output("mobile-download-btn", "className"),
    Input("tab-edit", "n_clicks"),
    Input("tab-preview", "n_clicks"),
    prevent_initial_call=True,
)
def switch_tab(_edit, _preview):
    """Show the editor or the preview on narrow screens."""
    active = PREVIEW_TAB if ctx.triggered_id == "tab-preview" else EDIT_TAB
    download_class = "button link gap" + ("" if active == PREVIEW_TAB else " hidden")
    return (
        pane_class(EDIT_TAB, active),
        pane_class(PREVIEW_TAB, active),
        tab_class(EDIT_TAB, active),
        tab_class(PREVIEW_TAB, active),
        download_class,
    )


def main() -> None:
    """Entrypoint used by `uv run invoice_editor`."""
    LOG.info("Starting %s on port %s", config.APP_TITLE, config.APP_PORT)
    app.run(debug=config.APP_DEBUG, host="0.0.0.0", port=config.APP_PORT)


if __name__ == "__main__":
    main()
