"""
Invoice paper component: the live, data-bound page shown in the preview.

The page is a pure function of InvoiceData. Its root carries a stable id
so the export pipeline can find it wherever it is mounted. Layout relies on
tables and block elements only; assets/paper.css styles both the browser
preview and the rasterized export.
"""

from dash import html

from invoice_editor.models.invoice import InvoiceData, LineItem, PartyInfo
from invoice_editor.utils import format_money, format_quantity

INVOICE_ELEMENT_ID = "invoice-preview-area"

# Classes that only make sense on screen; the exported copy drops them.
PRESENTATION_CLASSES = ("paper-shadow", "paper-centered")


def build_invoice_paper(
    invoice: InvoiceData, paper_id: str = INVOICE_ELEMENT_ID
) -> html.Div:
    """
    Build the full invoice page for the given record.

    Args:
        invoice: The invoice to render.
        paper_id: Stable id of the page root.

    Returns:
        Root html.Div of the page.
    """
    return html.Div(
        id=paper_id,
        className=" ".join(("invoice-paper", *PRESENTATION_CLASSES)),
        children=[
            _build_header(invoice),
            _build_parties_and_dates(invoice),
            _build_items_table(invoice),
            _build_totals(invoice),
            _build_notes(invoice),
        ],
    )


def _build_header(invoice: InvoiceData) -> html.Table:
    """Return the title block and logo, ordered by logo alignment."""
    logo_left = invoice.logo_alignment == "left"
    text_side = "align-right" if logo_left else "align-left"
    logo_side = "align-left" if logo_left else "align-right"

    title_cell = html.Td(
        className=f"paper-title-block {text_side}",
        children=[
            html.H1("Invoice", className="paper-title"),
            html.P(f"#{invoice.invoice_number}", className="paper-number"),
        ],
    )
    logo_cell = html.Td(
        className=f"paper-logo-cell {logo_side}",
        children=_build_logo(invoice),
    )
    cells = [logo_cell, title_cell] if logo_left else [title_cell, logo_cell]
    return html.Table(
        className="paper-header",
        children=html.Tbody(html.Tr(cells)),
    )


def _build_logo(invoice: InvoiceData) -> html.Img | html.Div:
    """Return the uploaded logo or the placeholder mark."""
    if invoice.logo_url:
        return html.Img(
            src=invoice.logo_url, alt="Company Logo", className="paper-logo"
        )
    return html.Div(
        _initials(invoice.sender.company_name),
        className="paper-logo-mark",
    )


def _initials(name: str) -> str:
    letters = [word[0] for word in name.split() if word[:1].isalnum()]
    return "".join(letters[:2]).upper() or "#"


def _build_parties_and_dates(invoice: InvoiceData) -> html.Table:
    """Return addresses on the left and date metadata on the right."""
    return html.Table(
        className="paper-meta",
        children=html.Tbody(
            html.Tr(
                [
                    html.Td(
                        className="paper-parties",
                        children=[
                            _party_block("From", invoice.sender),
                            _party_block("Bill To", invoice.recipient, show_vat=True),
                        ],
                    ),
                    html.Td(
                        className="paper-dates align-right",
                        children=[
                            _meta_block("Date Issued", invoice.date_issue),
                            _meta_block("Date Due", invoice.date_due),
                        ],
                    ),
                ]
            )
        ),
    )


def _party_block(label: str, party: PartyInfo, show_vat: bool = False) -> html.Div:
    """Return a labelled address block."""
    children = [
        html.H3(label, className="paper-label"),
        html.P(party.company_name, className="party-name"),
        html.P(party.address_line1, className="party-line"),
        html.P(party.address_line2, className="party-line"),
    ]
    if show_vat and party.has_vat_number:
        children.append(html.P(f"VAT: {party.vat_number}", className="party-line"))
    children.append(html.P(party.email, className="party-email"))
    return html.Div(className="party-block", children=children)


def _meta_block(label: str, value: str) -> html.Div:
    return html.Div(
        className="meta-block",
        children=[
            html.Span(label, className="paper-label"),
            html.Span(value, className="meta-value"),
        ],
    )


def _build_items_table(invoice: InvoiceData) -> html.Table:
    """Return the line item table in display order."""
    return html.Table(
        className="paper-items",
        children=[
            html.Thead(
                html.Tr(
                    [
                        html.Th("Description", className="col-description"),
                        html.Th("Qty", className="col-quantity"),
                        html.Th("Amount", className="col-amount"),
                    ]
                )
            ),
            html.Tbody(
                [_item_row(item, invoice.currency) for item in invoice.items]
            ),
        ],
    )


def _item_row(item: LineItem, currency: str) -> html.Tr:
    return html.Tr(
        id=f"item-row-{item.id}",
        children=[
            html.Td(item.description, className="col-description"),
            html.Td(format_quantity(item.quantity), className="col-quantity"),
            html.Td(format_money(item.amount, currency), className="col-amount"),
        ],
    )


def _build_totals(invoice: InvoiceData) -> html.Table:
    """Return subtotal, total and the emphasized amount due."""
    currency = invoice.currency
    return html.Table(
        className="paper-totals",
        children=html.Tbody(
            [
                _totals_row("Subtotal", format_money(invoice.subtotal, currency)),
                _totals_row("Total", format_money(invoice.total, currency)),
                _totals_row(
                    "Amount Due",
                    format_money(invoice.total, currency),
                    emphasize=True,
                ),
            ]
        ),
    )


def _totals_row(label: str, value: str, emphasize: bool = False) -> html.Tr:
    class_name = "totals-row emphasize" if emphasize else "totals-row"
    return html.Tr(
        className=class_name,
        children=[
            html.Td(label, className="totals-label"),
            html.Td(value, className="totals-value"),
        ],
    )


def _build_notes(invoice: InvoiceData) -> html.Div:
    return html.Div(
        className="paper-notes",
        children=[
            html.H4("Notes", className="paper-label"),
            html.P(invoice.notes, className="notes-text"),
        ],
    )
