"""
Utility functions for invoice formatting and identifiers.

Provides helpers for:
- Money formatting with a currency symbol prefix
- ISO calendar dates relative to today
- Opaque line item identifiers
"""

import uuid
from datetime import date, timedelta


def format_money(value: float, currency: str) -> str:
    """
    Format a money value with the currency symbol prefixed.

    Two decimals, no grouping separator and no space, so ``$`` and
    ``1234.5`` render as ``$1234.50``.

    Args:
        value: Numeric amount to format.
        currency: Currency symbol or short code, used verbatim.

    Returns:
        Formatted string.
    """
    return f"{currency}{value:.2f}"


def iso_date(offset_days: int = 0, today: date | None = None) -> str:
    """Return ``YYYY-MM-DD`` for today plus offset_days."""
    base = today or date.today()
    return (base + timedelta(days=offset_days)).isoformat()


def new_item_id() -> str:
    """Return a fresh opaque line item identifier."""
    return uuid.uuid4().hex


def format_quantity(value: float) -> str:
    """Render a quantity without a trailing ``.0`` for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"
