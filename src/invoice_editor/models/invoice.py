"""
Invoice domain models and serialization helpers.

The hierarchy is:

    InvoiceData
    ├── PartyInfo (sender, recipient)
    └── LineItem[] (description, quantity, unit amount)

Records are frozen: every edit builds a new InvoiceData with
dataclasses.replace (see invoice_editor.editing). Serialization functions
convert between dataclasses and JSON-compatible dictionaries for storage
in dcc.Store.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Literal, Mapping, Sequence

from invoice_editor.utils import iso_date

LogoAlignment = Literal["left", "right"]
LOGO_ALIGNMENTS: tuple[str, ...] = ("left", "right")


@dataclass(slots=True, frozen=True)
class PartyInfo:
    """A billing party's display identity."""

    company_name: str = ""
    address_line1: str = ""
    address_line2: str = ""
    email: str = ""
    vat_number: str | None = None

    @property
    def has_vat_number(self) -> bool:
        """Return True when the VAT line should be shown."""
        return bool(self.vat_number and self.vat_number.strip())


@dataclass(slots=True, frozen=True)
class LineItem:
    """One billable row; ``amount`` is the unit price."""

    id: str
    description: str = ""
    quantity: float = 0
    amount: float = 0

    @property
    def line_total(self) -> float:
        """Return quantity multiplied by unit amount."""
        return self.quantity * self.amount


@dataclass(slots=True, frozen=True)
class InvoiceData:
    """Primary record describing an invoice being edited."""

    invoice_number: str = ""
    date_issue: str = ""
    date_due: str = ""
    sender: PartyInfo = field(default_factory=PartyInfo)
    recipient: PartyInfo = field(default_factory=PartyInfo)
    items: tuple[LineItem, ...] = ()
    notes: str = ""
    currency: str = "$"
    logo_url: str | None = None
    logo_alignment: LogoAlignment = "right"

    def __post_init__(self) -> None:
        if self.logo_alignment not in LOGO_ALIGNMENTS:
            raise ValueError(f"Unknown logo alignment: {self.logo_alignment!r}")
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    @property
    def subtotal(self) -> float:
        """Sum of all line totals; 0 for an invoice without items."""
        return sum((item.line_total for item in self.items), 0.0)

    @property
    def total(self) -> float:
        """Amount due. There is no tax or discount model."""
        return self.subtotal


def default_invoice() -> InvoiceData:
    """Return the starter invoice shown when a session begins."""
    return InvoiceData(
        invoice_number="Q7MKP2R-8391",
        date_issue=iso_date(),
        date_due=iso_date(14),
        currency="$",
        logo_alignment="right",
        sender=PartyInfo(
            company_name="MIRA MUSE LLC",
            address_line1="81807 E. County Road 22 Deer Trail",
            address_line2="Colorado 80105 United States",
            email="support@miramuse.ai",
        ),
        recipient=PartyInfo(
            company_name="Tech Corp GmbH",
            address_line1="Musterstraße 12",
            address_line2="10115 Berlin, Germany",
            email="accounts@techcorp.de",
            vat_number="DE123456789",
        ),
        items=(
            LineItem(
                id="1",
                description="Pro Plan Subscription (Monthly)",
                quantity=1,
                amount=49.90,
            ),
            LineItem(
                id="2",
                description="Consulting Services - API Integration",
                quantity=5,
                amount=150.00,
            ),
        ),
        notes="Payment received in full. Thank you for your business!",
    )


def serialize_invoice(invoice: InvoiceData) -> dict:
    """Convert an InvoiceData into a JSON serializable dictionary."""
    data = asdict(invoice)
    data["items"] = [asdict(item) for item in invoice.items]
    return data


def deserialize_party(payload: Mapping[str, Any] | None) -> PartyInfo:
    """Build a PartyInfo from a dictionary, defaulting missing fields."""
    payload = payload or {}
    return PartyInfo(
        company_name=payload.get("company_name") or "",
        address_line1=payload.get("address_line1") or "",
        address_line2=payload.get("address_line2") or "",
        email=payload.get("email") or "",
        vat_number=payload.get("vat_number") or None,
    )


def deserialize_items(payload: Sequence[Mapping[str, Any]] | None) -> tuple:
    """Build the line item tuple from a list of dictionaries."""
    return tuple(
        LineItem(
            id=str(item["id"]),
            description=item.get("description") or "",
            quantity=float(item.get("quantity") or 0),
            amount=float(item.get("amount") or 0),
        )
        for item in payload or []
    )


def deserialize_invoice(payload: Mapping[str, Any] | None) -> InvoiceData:
    """Convert a dictionary structure back into an InvoiceData."""
    if not payload:
        return default_invoice()
    return InvoiceData(
        invoice_number=payload.get("invoice_number") or "",
        date_issue=payload.get("date_issue") or "",
        date_due=payload.get("date_due") or "",
        sender=deserialize_party(payload.get("sender")),
        recipient=deserialize_party(payload.get("recipient")),
        items=deserialize_items(payload.get("items")),
        notes=payload.get("notes") or "",
        currency=payload.get("currency") or "",
        logo_url=payload.get("logo_url") or None,
        logo_alignment=payload.get("logo_alignment") or "right",
    )
