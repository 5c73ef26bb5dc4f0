"""
Data models and serialization helpers for the Invoice Editor.

This package provides:
- Invoice domain models (InvoiceData, PartyInfo, LineItem)
- The starter invoice used at session start
- Serialization/deserialization for dcc.Store compatibility
"""

from invoice_editor.models.invoice import (
    LOGO_ALIGNMENTS,
    InvoiceData,
    LineItem,
    LogoAlignment,
    PartyInfo,
    default_invoice,
    deserialize_invoice,
    deserialize_party,
    serialize_invoice,
)

__all__ = [
    "LOGO_ALIGNMENTS",
    "InvoiceData",
    "LineItem",
    "LogoAlignment",
    "PartyInfo",
    "default_invoice",
    "deserialize_invoice",
    "deserialize_party",
    "serialize_invoice",
]
