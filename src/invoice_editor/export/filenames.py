"""Output filename derivation for exported invoices."""

import re

FALLBACK_TOKEN = "invoice"

_UNSAFE_TOKEN_CHARS = re.compile(r"[^A-Za-z0-9_-]")
# Path separators, characters reserved on common filesystems, and controls.
_RESERVED_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


def recipient_token(email: str | None) -> str:
    """
    Return the filename token for a recipient email.

    The part before ``@`` is kept with every character outside
    ``[A-Za-z0-9_-]`` removed. An empty email, or a local part with
    nothing left after stripping, yields ``invoice``.
    """
    if not email or not email.strip():
        return FALLBACK_TOKEN
    local_part = email.strip().split("@", 1)[0]
    return _UNSAFE_TOKEN_CHARS.sub("", local_part) or FALLBACK_TOKEN


def export_filename(email: str | None, invoice_number: str) -> str:
    """
    Return ``{token}_invoice_{invoice_number}.pdf``.

    >>> export_filename("jane.doe@example.com", "A1-22")
    'janedoe_invoice_A1-22.pdf'
    """
    number = _RESERVED_FILENAME_CHARS.sub("_", invoice_number or "")
    return f"{recipient_token(email)}_invoice_{number}.pdf"
