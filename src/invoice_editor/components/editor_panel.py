"""
Editor panel component.

Form controls for every InvoiceData field, grouped into cards:
- Branding: logo upload/removal and logo alignment
- Details: invoice number (with regenerate), currency, dates
- From / Bill To: party fields, with the AI auto-fill entry point on Bill To
- Items: one row per line item, plus add/remove controls
- Notes

Inputs use pattern-matching ids so one callback can read every field:
``{"type": "invoice-field", "field": ...}``,
``{"type": "party-field", "role": ..., "field": ...}`` and
``{"type": "item-field", "item": <id>, "field": ...}``.
"""

from typing import Sequence

from dash import dcc, html
from dash_iconify import DashIconify

from invoice_editor.models.invoice import InvoiceData, LineItem, PartyInfo

INVOICE_FIELD = "invoice-field"
PARTY_FIELD = "party-field"
ITEM_FIELD = "item-field"
ITEM_REMOVE = "item-remove"

_PARTY_INPUTS = (
    ("company_name", "Company Name", "text"),
    ("email", "Email", "email"),
    ("address_line1", "Address Line 1", "text"),
    ("address_line2", "City, State, Zip", "text"),
)


def build_editor_panel(invoice: InvoiceData, autofill_available: bool = True) -> html.Div:
    """
    Build the scrollable editor panel for the given invoice.

    Args:
        invoice: Record used for the initial input values.
        autofill_available: Whether the extraction service can take
            requests; the Auto-fill button is disabled otherwise.

    Returns:
        Div containing the whole form and the primary download button.
    """
    return html.Div(
        className="editor-panel",
        children=[
            html.Div(
                className="editor-header",
                children=[
                    html.H1("Invoice Editor"),
                    html.P("Edit the details and download a PDF.", className="muted"),
                ],
            ),
            _build_branding_card(invoice),
            _build_details_card(invoice),
            _build_party_card("From", "sender", invoice.sender),
            _build_party_card(
                "Bill To",
                "recipient",
                invoice.recipient,
                with_vat=True,
                autofill_available=autofill_available,
            ),
            _build_items_card(invoice),
            _build_notes_card(invoice),
            html.Div(
                className="editor-footer",
                children=[
                    html.Button(
                        id="download-btn",
                        className="button primary wide",
                        children=[
                            DashIconify(icon="lucide:download", className="button-icon"),
                            html.Span("Download PDF", id="download-btn-label"),
                        ],
                    ),
                ],
            ),
        ],
    )


def _card(title: str, icon: str, children: list, actions: list | None = None) -> html.Div:
    """Return a titled form card."""
    return html.Div(
        className="card editor-card",
        children=[
            html.Div(
                className="card-title-row",
                children=[
                    html.Div(
                        className="title-row",
                        children=[
                            DashIconify(icon=icon, className="title-icon"),
                            html.H3(title),
                        ],
                    ),
                    html.Div(actions or [], className="card-actions"),
                ],
            ),
            *children,
        ],
    )


def _field(label: str, control) -> html.Label:
    return html.Label(
        className="field",
        children=[html.Span(label, className="label"), control],
    )


def _build_branding_card(invoice: InvoiceData) -> html.Div:
    return _card(
        "Branding",
        "lucide:image",
        [
            html.Div(
                className="logo-row",
                children=[
                    dcc.Upload(
                        id="logo-upload",
                        accept="image/*",
                        multiple=False,
                        className="logo-upload",
                        children=html.Span(
                            className="button ghost gap",
                            children=[
                                DashIconify(icon="lucide:upload", className="button-icon"),
                                "Upload logo",
                            ],
                        ),
                    ),
                    html.Button("Remove", id="logo-remove", className="button ghost"),
                ],
            ),
            html.Div(id="logo-error", className="field-error"),
            _field(
                "Logo position",
                dcc.RadioItems(
                    id="logo-alignment",
                    options=[
                        {"label": "Left", "value": "left"},
                        {"label": "Right", "value": "right"},
                    ],
                    value=invoice.logo_alignment,
                    inline=True,
                    className="segmented",
                ),
            ),
        ],
    )


def _build_details_card(invoice: InvoiceData) -> html.Div:
    return _card(
        "Details",
        "lucide:file-text",
        [
            _field(
                "Invoice Number",
                html.Div(
                    className="input-with-action",
                    children=[
                        _invoice_input("invoice_number", invoice.invoice_number),
                        html.Button(
                            DashIconify(icon="lucide:refresh-cw"),
                            id="regenerate-number",
                            className="button ghost icon",
                            title="Generate a new invoice number",
                        ),
                    ],
                ),
            ),
            _field("Currency", _invoice_input("currency", invoice.currency)),
            html.Div(
                className="field-grid",
                children=[
                    _field(
                        "Date Issued",
                        _invoice_input("date_issue", invoice.date_issue, "date"),
                    ),
                    _field(
                        "Date Due", _invoice_input("date_due", invoice.date_due, "date")
                    ),
                ],
            ),
        ],
    )


def _invoice_input(field: str, value: str, input_type: str = "text") -> dcc.Input:
    return dcc.Input(
        id={"type": INVOICE_FIELD, "field": field},
        type=input_type,
        value=value,
        debounce=0.3,
        className="input",
    )


def _build_party_card(
    title: str,
    role: str,
    party: PartyInfo,
    with_vat: bool = False,
    autofill_available: bool = True,
) -> html.Div:
    """Return the From or Bill To card."""
    inputs = [
        _field(label, _party_input(role, field, getattr(party, field), input_type))
        for field, label, input_type in _PARTY_INPUTS
    ]
    actions = []
    if with_vat:
        inputs.append(
            _field("VAT Number", _party_input(role, "vat_number", party.vat_number or ""))
        )
        actions.append(
            html.Button(
                id="extract-open",
                className="button ghost gap ai",
                disabled=not autofill_available,
                title=(
                    "Fill the Bill To fields from pasted text"
                    if autofill_available
                    else "Auto-fill is not configured"
                ),
                children=[
                    DashIconify(icon="lucide:sparkles", className="button-icon"),
                    "Auto-fill",
                ],
            )
        )
    return _card(
        title,
        "lucide:building-2" if role == "sender" else "lucide:user",
        inputs,
        actions,
    )


def _party_input(role: str, field: str, value: str, input_type: str = "text") -> dcc.Input:
    return dcc.Input(
        id={"type": PARTY_FIELD, "role": role, "field": field},
        type=input_type,
        value=value,
        debounce=0.3,
        className="input",
    )


def _build_items_card(invoice: InvoiceData) -> html.Div:
    return _card(
        "Items",
        "lucide:list",
        [
            html.Div(id="items-editor", children=build_item_rows(invoice.items)),
            html.Button(
                id="add-item",
                className="button ghost gap wide",
                children=[
                    DashIconify(icon="lucide:plus", className="button-icon"),
                    "Add item",
                ],
            ),
        ],
    )


def build_item_rows(items: Sequence[LineItem]) -> list[html.Div]:
    """Return one editable row per line item, keyed by item id."""
    if not items:
        return [html.P("No items yet.", className="muted empty-items")]
    return [_item_row(item) for item in items]


def _item_row(item: LineItem) -> html.Div:
    return html.Div(
        className="item-row",
        children=[
            dcc.Input(
                id={"type": ITEM_FIELD, "item": item.id, "field": "description"},
                type="text",
                value=item.description,
                placeholder="Description",
                debounce=0.3,
                className="input item-description",
            ),
            dcc.Input(
                id={"type": ITEM_FIELD, "item": item.id, "field": "quantity"},
                type="number",
                min=0,
                value=item.quantity,
                debounce=0.3,
                className="input item-quantity",
            ),
            dcc.Input(
                id={"type": ITEM_FIELD, "item": item.id, "field": "amount"},
                type="number",
                step="0.01",
                value=item.amount,
                debounce=0.3,
                className="input item-amount",
            ),
            html.Button(
                DashIconify(icon="lucide:trash-2"),
                id={"type": ITEM_REMOVE, "item": item.id},
                className="button ghost icon danger",
                title="Remove item",
            ),
        ],
    )


def _build_notes_card(invoice: InvoiceData) -> html.Div:
    return _card(
        "Notes",
        "lucide:sticky-note",
        [
            dcc.Textarea(
                id={"type": INVOICE_FIELD, "field": "notes"},
                value=invoice.notes,
                className="input textarea",
            ),
        ],
    )
