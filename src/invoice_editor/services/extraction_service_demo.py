"""
Demo implementation of ExtractionService using simple text heuristics.

Useful for local development without a Gemini key. It picks out the
email address and a VAT/Tax ID, treats the first remaining line as the
company name and the next two as address lines.
"""

import re

from invoice_editor.models.invoice import PartyInfo
from invoice_editor.services.extraction_service import (
    ExtractionService,
    require_text,
)

_EMAIL = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
_VAT = re.compile(
    r"\b(?:VAT|USt-?IdNr|Tax\s*ID|TIN)\b\s*(?:No\.?|Number|#)?\s*[.:#]?\s*([A-Z0-9][A-Z0-9 -]{5,16}[A-Z0-9])",
    re.IGNORECASE,
)
_NOISE = re.compile(
    r"^(?:(?:tel|phone|mobile|fax|web|email|e-mail)\b|www\.|https?://"
    r"|(?:best|kind|warm)\s+regards|regards\b|thanks\b|cheers\b)",
    re.IGNORECASE,
)


class DemoExtractionService(ExtractionService):
    """Offline heuristic extractor."""

    def extract_party(self, text: str) -> PartyInfo:
        text = require_text(text)
        email_match = _EMAIL.search(text)
        vat_match = _VAT.search(text)

        lines = []
        for raw in text.splitlines():
            line = raw.strip().strip(",")
            if email_match:
                line = line.replace(email_match.group(0), "").strip(" ,;:-")
            if vat_match and vat_match.group(0) in line:
                line = line.replace(vat_match.group(0), "").strip(" ,;:-")
            if line and not _NOISE.match(line):
                lines.append(line)

        lines += [""] * 3
        return PartyInfo(
            company_name=lines[0],
            address_line1=lines[1],
            address_line2=lines[2],
            email=email_match.group(0) if email_match else "",
            vat_number=vat_match.group(1).replace(" ", "") if vat_match else None,
        )
