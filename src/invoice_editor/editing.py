"""
Edit operations over InvoiceData.

Every function returns a new record built with dataclasses.replace; the
input record is never modified. Line items are addressed by id so edits
stay attached to the right row when the list changes underneath them.
"""

import random
import re
import string
from dataclasses import fields, replace
from typing import Any, Literal

from invoice_editor.models.invoice import (
    LOGO_ALIGNMENTS,
    InvoiceData,
    LineItem,
    LogoAlignment,
    PartyInfo,
)
from invoice_editor.utils import new_item_id

PartyRole = Literal["sender", "recipient"]

_SCALAR_FIELDS = frozenset(
    {"invoice_number", "date_issue", "date_due", "notes", "currency"}
)
_PARTY_FIELDS = frozenset(f.name for f in fields(PartyInfo))
_ITEM_FIELDS = frozenset({"description", "quantity", "amount"})
_LOGO_DATA_URI = re.compile(r"^data:image/[A-Za-z0-9.+-]+;base64,[A-Za-z0-9+/=\s]+$")


def update_field(invoice: InvoiceData, name: str, value: Any) -> InvoiceData:
    """Return a copy with one top-level text field replaced."""
    if name not in _SCALAR_FIELDS:
        raise ValueError(f"Not an editable invoice field: {name}")
    return replace(invoice, **{name: value or ""})


def update_party(
    invoice: InvoiceData, role: PartyRole, name: str, value: Any
) -> InvoiceData:
    """Return a copy with one field of the sender or recipient replaced."""
    if role not in ("sender", "recipient"):
        raise ValueError(f"Unknown party role: {role}")
    if name not in _PARTY_FIELDS:
        raise ValueError(f"Not a party field: {name}")
    # An empty VAT number is stored as None so the line is hidden.
    value = (value or None) if name == "vat_number" else (value or "")
    party = replace(getattr(invoice, role), **{name: value})
    return replace(invoice, **{role: party})


def add_item(invoice: InvoiceData) -> InvoiceData:
    """Append an empty line item with quantity 1."""
    item = LineItem(id=new_item_id(), description="", quantity=1, amount=0)
    return replace(invoice, items=invoice.items + (item,))


def update_item(invoice: InvoiceData, item_id: str, **changes: Any) -> InvoiceData:
    """
    Return a copy with the item identified by item_id edited.

    Numeric fields accept None (a cleared number input) as 0 and reject
    negative quantities. An unknown id returns the record unchanged.
    """
    unknown = set(changes) - _ITEM_FIELDS
    if unknown:
        raise ValueError(f"Not line item fields: {sorted(unknown)}")
    for key in ("quantity", "amount"):
        if key in changes:
            changes[key] = float(changes[key] or 0)
    if changes.get("quantity", 0) < 0:
        raise ValueError("Quantity must not be negative")
    if "description" in changes:
        changes["description"] = changes["description"] or ""
    items = tuple(
        replace(item, **changes) if item.id == item_id else item
        for item in invoice.items
    )
    return replace(invoice, items=items)


def remove_item(invoice: InvoiceData, item_id: str) -> InvoiceData:
    """Return a copy without the item identified by item_id."""
    items = tuple(item for item in invoice.items if item.id != item_id)
    return replace(invoice, items=items)


def set_logo(invoice: InvoiceData, logo_url: str | None) -> InvoiceData:
    """Set or clear the logo; None shows the placeholder mark."""
    return replace(invoice, logo_url=logo_url or None)


def set_logo_alignment(invoice: InvoiceData, alignment: LogoAlignment) -> InvoiceData:
    """Move the logo to the left or right side of the header."""
    if alignment not in LOGO_ALIGNMENTS:
        raise ValueError(f"Unknown logo alignment: {alignment!r}")
    return replace(invoice, logo_alignment=alignment)


def apply_recipient(invoice: InvoiceData, party: PartyInfo) -> InvoiceData:
    """Replace the Bill To party, e.g. with an extraction result."""
    return replace(invoice, recipient=party)


def generate_invoice_number(rng: random.Random | None = None) -> str:
    """Return a random number shaped like ``Q7MKP2R-8391``."""
    rng = rng or random.Random()
    alphabet = string.ascii_uppercase + string.digits
    prefix = "".join(rng.choice(alphabet) for _ in range(7))
    return f"{prefix}-{rng.randint(1000, 9999)}"


def logo_data_uri(contents: str | None) -> str:
    """
    Validate uploaded logo contents and return them as a data URI.

    Args:
        contents: The ``contents`` value of a dcc.Upload component.

    Raises:
        ValueError: If the upload is empty or not a base64 image data URI.
    """
    if not contents or not _LOGO_DATA_URI.match(contents):
        raise ValueError("Logo must be an image file")
    return contents
