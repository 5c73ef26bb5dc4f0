import random

import pytest

from invoice_editor import editing
from invoice_editor.models.invoice import InvoiceData, LineItem, PartyInfo


def test_update_field_returns_new_record(invoice):
    updated = editing.update_field(invoice, "invoice_number", "INV-2")
    assert updated.invoice_number == "INV-2"
    assert invoice.invoice_number == "Q7MKP2R-8391"


def test_update_field_rejects_unknown_field(invoice):
    with pytest.raises(ValueError):
        editing.update_field(invoice, "items", [])


def test_update_party_only_touches_one_party(invoice):
    updated = editing.update_party(invoice, "recipient", "email", "bob@acme.io")
    assert updated.recipient.email == "bob@acme.io"
    assert updated.sender == invoice.sender


def test_empty_vat_number_is_stored_as_none(invoice):
    updated = editing.update_party(invoice, "recipient", "vat_number", "")
    assert updated.recipient.vat_number is None


def test_update_party_rejects_unknown_role(invoice):
    with pytest.raises(ValueError):
        editing.update_party(invoice, "payer", "email", "x@y.z")


def test_add_item_appends_empty_row(invoice):
    updated = editing.add_item(invoice)
    assert len(updated.items) == 3
    new = updated.items[-1]
    assert (new.description, new.quantity, new.amount) == ("", 1, 0)
    assert new.id not in {"1", "2"}


def test_update_item_addresses_by_id(invoice):
    updated = editing.update_item(invoice, "2", quantity=3, description="Support")
    assert updated.items[0] == invoice.items[0]
    assert updated.items[1].quantity == 3
    assert updated.items[1].description == "Support"


def test_update_item_treats_cleared_number_as_zero(invoice):
    updated = editing.update_item(invoice, "1", amount=None)
    assert updated.items[0].amount == 0


def test_update_item_rejects_negative_quantity(invoice):
    with pytest.raises(ValueError):
        editing.update_item(invoice, "1", quantity=-1)


def test_update_item_unknown_id_is_noop(invoice):
    assert editing.update_item(invoice, "missing", amount=5) == invoice


def test_remove_item_addresses_by_id(invoice):
    updated = editing.remove_item(invoice, "1")
    assert [item.id for item in updated.items] == ["2"]


def test_remove_then_edit_keeps_edits_on_the_right_row():
    invoice = editing.add_item(editing.remove_item(_invoice_with(["a", "b", "c"]), "a"))
    updated = editing.update_item(invoice, "c", amount=9)
    assert {item.id: item.amount for item in updated.items}["c"] == 9
    assert {item.id: item.amount for item in updated.items}["b"] == 0


def test_logo_alignment_change_is_isolated(invoice):
    updated = editing.set_logo_alignment(invoice, "left")
    assert updated.logo_alignment == "left"
    assert editing.set_logo_alignment(updated, "right") == invoice


def test_set_logo_alignment_rejects_unknown(invoice):
    with pytest.raises(ValueError):
        editing.set_logo_alignment(invoice, "top")


def test_set_and_clear_logo(invoice):
    with_logo = editing.set_logo(invoice, "data:image/png;base64,AAAA")
    assert with_logo.logo_url == "data:image/png;base64,AAAA"
    assert editing.set_logo(with_logo, None).logo_url is None


def test_apply_recipient(invoice):
    party = PartyInfo(company_name="Acme", email="ap@acme.io")
    assert editing.apply_recipient(invoice, party).recipient == party


def test_generate_invoice_number_shape():
    number = editing.generate_invoice_number(random.Random(7))
    prefix, suffix = number.split("-")
    assert len(prefix) == 7 and prefix.isalnum() and prefix.upper() == prefix
    assert 1000 <= int(suffix) <= 9999


def test_logo_data_uri_validates_upload():
    uri = "data:image/png;base64,iVBORw0KGgo="
    assert editing.logo_data_uri(uri) == uri
    with pytest.raises(ValueError):
        editing.logo_data_uri("data:text/plain;base64,aGVsbG8=")
    with pytest.raises(ValueError):
        editing.logo_data_uri(None)


def _invoice_with(ids):
    return InvoiceData(items=[LineItem(id=item_id) for item_id in ids])
