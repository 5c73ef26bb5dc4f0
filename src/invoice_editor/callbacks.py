"""
Callback bodies for the Invoice Editor.

Dash callbacks in app.py stay thin: they unpack the callback context and
delegate here. Everything in this module takes and returns plain values
(serialized invoices, component ids, strings), so it can be tested without
a running Dash server.
"""

import asyncio
from typing import Any, Mapping, Sequence

from invoice_editor import editing
from invoice_editor.export.errors import InvalidInvoice
from invoice_editor.export.isolation import CaptureDocument
from invoice_editor.export.pipeline import ExportPipeline, ExportResult
from invoice_editor.lib import logs
from invoice_editor.models.invoice import (
    PartyInfo,
    deserialize_invoice,
    serialize_invoice,
)
from invoice_editor.services.extraction_service import (
    ExtractionError,
    ExtractionService,
    ServiceNotConfigured,
)

LOG = logs.logger(__file__)

ComponentId = Mapping[str, Any]

EXTRACTION_FAILED_MESSAGE = "Failed to extract data. Please try again or check your text."


def apply_form_values(
    store_data: dict | None,
    invoice_fields: Sequence[tuple[ComponentId, Any]],
    party_fields: Sequence[tuple[ComponentId, Any]],
    item_fields: Sequence[tuple[ComponentId, Any]],
    logo_alignment: str | None,
) -> dict:
    """
    Rebuild the invoice from the current form values.

    Args:
        store_data: Serialized invoice currently in the store.
        invoice_fields: (id, value) pairs for top-level fields.
        party_fields: (id, value) pairs for sender/recipient fields.
        item_fields: (id, value) pairs for line item fields.
        logo_alignment: Selected logo side, if any.

    Returns:
        The serialized replacement record.
    """
    invoice = deserialize_invoice(store_data)
    for component_id, value in invoice_fields:
        invoice = editing.update_field(invoice, component_id["field"], value)
    for component_id, value in party_fields:
        invoice = editing.update_party(
            invoice, component_id["role"], component_id["field"], value
        )
    for component_id, value in item_fields:
        try:
            invoice = editing.update_item(
                invoice, component_id["item"], **{component_id["field"]: value}
            )
        except ValueError as exc:
            LOG.warning("Ignoring item edit %s: %s", component_id, exc)
    if logo_alignment:
        invoice = editing.set_logo_alignment(invoice, logo_alignment)
    return serialize_invoice(invoice)


def apply_record_action(
    store_data: dict | None,
    trigger: str | ComponentId,
    upload_contents: str | None = None,
) -> tuple[dict, str | None, str]:
    """
    Apply a button or upload action to the invoice.

    Args:
        store_data: Serialized invoice currently in the store.
        trigger: Id of the component that fired.
        upload_contents: Logo upload contents, for ``logo-upload``.

    Returns:
        Tuple of (serialized invoice, new invoice number or None, logo error
        message).
    """
    invoice = deserialize_invoice(store_data)
    new_number = None
    logo_error = ""

    if trigger == "add-item":
        invoice = editing.add_item(invoice)
    elif isinstance(trigger, Mapping) and trigger.get("type") == "item-remove":
        invoice = editing.remove_item(invoice, trigger["item"])
    elif trigger == "logo-upload":
        try:
            invoice = editing.set_logo(invoice, editing.logo_data_uri(upload_contents))
        except ValueError as exc:
            logo_error = str(exc)
    elif trigger == "logo-remove":
        invoice = editing.set_logo(invoice, None)
    elif trigger == "regenerate-number":
        new_number = editing.generate_invoice_number()
        invoice = editing.update_field(invoice, "invoice_number", new_number)
    else:
        LOG.warning("Unhandled record action: %s", trigger)

    return serialize_invoice(invoice), new_number, logo_error


def run_export(
    pipeline: ExportPipeline, preview_children: Any, store_data: dict | None
) -> ExportResult:
    """
    Run the export pipeline against the preview as the browser holds it.

    Args:
        pipeline: Shared pipeline instance (owns the busy guard).
        preview_children: Children of the preview container, as callback
            state; this is the live invoice page.
        store_data: Serialized invoice the page was rendered from.
    """
    try:
        invoice = deserialize_invoice(store_data)
    except (KeyError, TypeError, ValueError) as exc:
        LOG.error("Export failed: unreadable invoice record: %s", exc, exc_info=True)
        return ExportResult(status="failed", error=InvalidInvoice(str(exc)))
    document = CaptureDocument(preview_children)
    return asyncio.run(pipeline.export_current_invoice(document, invoice))


def run_extraction(
    service: ExtractionService, text: str | None
) -> tuple[PartyInfo | None, str]:
    """
    Extract the Bill To party from pasted text.

    Returns:
        Tuple of (party or None, error message). The message is empty on
        success.
    """
    try:
        return service.extract_party(text or ""), ""
    except ServiceNotConfigured as exc:
        return None, f"Auto-fill is not available: {exc}"
    except ExtractionError as exc:
        LOG.warning("Extraction failed: %s", exc)
        return None, f"{EXTRACTION_FAILED_MESSAGE} ({exc})"
    except Exception as exc:
        LOG.error("Extraction error: %s", exc, exc_info=True)
        return None, EXTRACTION_FAILED_MESSAGE


def party_field_values(party: PartyInfo, field_ids: Sequence[ComponentId]) -> list[str]:
    """Return the party's values in the order of the given input ids."""
    return [getattr(party, component_id["field"]) or "" for component_id in field_ids]


def apply_extracted_recipient(store_data: dict | None, party: PartyInfo) -> dict:
    """Return the serialized invoice with its Bill To replaced by party."""
    invoice = editing.apply_recipient(deserialize_invoice(store_data), party)
    return serialize_invoice(invoice)
