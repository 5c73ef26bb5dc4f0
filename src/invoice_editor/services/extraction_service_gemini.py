"""
Gemini implementation of ExtractionService.

Sends the pasted text to a Gemini model with a JSON response schema and a
low temperature, and maps the reply onto PartyInfo. Replies are cached on
disk for five minutes keyed by model and text, so re-submitting the same
signature does not cost another request.

Configuration:
    GEMINI_API_KEY (or API_KEY): required
    INVOICE_EDITOR_GEMINI_MODEL: model name, default gemini-2.5-flash
"""

import json
from typing import Any

from google.genai import errors as genai_errors
from google.genai import types

from invoice_editor import config
from invoice_editor.lib import caches, clients, logs
from invoice_editor.models.invoice import PartyInfo
from invoice_editor.services.extraction_service import (
    ExtractionFailed,
    ExtractionService,
    ServiceNotConfigured,
    require_text,
)

LOG = logs.logger(__file__)

_CACHE_TTL_SECONDS = 300

PARTY_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "companyName": types.Schema(
            type=types.Type.STRING,
            description="Full name of the person or Company Name found in the text.",
        ),
        "email": types.Schema(
            type=types.Type.STRING,
            description="Email address for billing/invoicing.",
        ),
        "addressLine1": types.Schema(
            type=types.Type.STRING,
            description="Street address or first part of the address.",
        ),
        "addressLine2": types.Schema(
            type=types.Type.STRING,
            description="City, State, Zip, Country combined into a single string.",
        ),
        "vatNumber": types.Schema(
            type=types.Type.STRING,
            description="VAT Number or Tax ID if present. Return empty string if not found.",
        ),
    },
    required=["companyName", "addressLine1", "addressLine2", "email"],
)

_PROMPT = """\
You are an expert data extraction assistant.
Analyze the following unstructured text (which might be an email signature, \
a request for invoice, or a raw address block).
Extract the billing information for the "Bill To" section of an invoice.

Input Text:
"{text}"

Ensure address extraction is logical. If parts of the address are missing, \
do your best to format what is available.
If a field is completely missing, use an empty string.
"""


class GeminiExtractionService(ExtractionService):
    """
    Extraction backed by the Gemini API.

    Attributes:
        model: Gemini model name.
    """

    _DISK_CACHE: caches.DiskCache | None = None

    def __init__(self, model: str | None = None, use_cache: bool = True) -> None:
        self.model = model or config.GEMINI_MODEL
        self.use_cache = use_cache

    @property
    def available(self) -> bool:
        return config.gemini_api_key() is not None

    def extract_party(self, text: str) -> PartyInfo:
        text = require_text(text)
        api_key = config.gemini_api_key()
        if not api_key:
            LOG.error("Gemini API key is not configured")
            raise ServiceNotConfigured("Server configuration error: API Key is missing.")

        def _load() -> dict[str, Any]:
            return self._request(api_key, text)

        if not self.use_cache:
            return party_from_payload(_load())
        entry = self._cache().get_or_load([self.model, text], _load)
        LOG.info("extract_party - model:%s cache_hit:%s", self.model, entry.hit)
        return party_from_payload(entry.value)

    def _request(self, api_key: str, text: str) -> dict[str, Any]:
        client = clients.genai_client(api_key)
        try:
            response = client.models.generate_content(
                model=self.model,
                contents=_PROMPT.format(text=text),
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=PARTY_SCHEMA,
                    temperature=0.1,
                ),
            )
        except genai_errors.APIError as exc:
            LOG.error("Gemini API error: %s", exc, exc_info=True)
            raise ExtractionFailed(str(exc)) from exc

        try:
            payload = json.loads(response.text or "")
        except json.JSONDecodeError as exc:
            raise ExtractionFailed("Model returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise ExtractionFailed("Model returned an unexpected response")
        return payload

    @classmethod
    def _cache(cls) -> caches.DiskCache:
        if cls._DISK_CACHE is None:
            cls._DISK_CACHE = caches.DiskCache.named(
                "invoice_editor_extraction", ttl=_CACHE_TTL_SECONDS
            )
        return cls._DISK_CACHE


def party_from_payload(payload: dict[str, Any]) -> PartyInfo:
    """Map the model's camelCase JSON onto PartyInfo."""

    def _text(key: str) -> str:
        value = payload.get(key)
        return str(value).strip() if value is not None else ""

    return PartyInfo(
        company_name=_text("companyName"),
        address_line1=_text("addressLine1"),
        address_line2=_text("addressLine2"),
        email=_text("email"),
        vat_number=_text("vatNumber") or None,
    )
