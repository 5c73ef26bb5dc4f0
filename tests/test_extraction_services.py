import json
from types import SimpleNamespace

import pytest
from google.genai import errors as genai_errors

from invoice_editor.lib import clients
from invoice_editor.models.invoice import PartyInfo
from invoice_editor.services import get_extraction_service
from invoice_editor.services.extraction_service import (
    ExtractionFailed,
    ServiceNotConfigured,
)
from invoice_editor.services.extraction_service_demo import DemoExtractionService
from invoice_editor.services.extraction_service_gemini import (
    GeminiExtractionService,
    party_from_payload,
)

SIGNATURE = """\
Acme Widgets Ltd
12 Harbour Road
Bristol BS1 4XX, United Kingdom
VAT: GB 123 4567 89
Tel: +44 117 496 0000
billing@acme-widgets.co.uk
"""

REPLY = {
    "companyName": "Acme Widgets Ltd",
    "email": "billing@acme-widgets.co.uk",
    "addressLine1": "12 Harbour Road",
    "addressLine2": "Bristol BS1 4XX, United Kingdom",
    "vatNumber": "GB123456789",
}


class FakeModels:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.requests = []

    def generate_content(self, model, contents, config):
        self.requests.append(SimpleNamespace(model=model, contents=contents, config=config))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.reply)


@pytest.fixture
def fake_models(monkeypatch):
    models = FakeModels(reply=json.dumps(REPLY))
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setattr(clients, "genai_client", lambda api_key: SimpleNamespace(models=models))
    return models


def test_demo_extracts_signature_block():
    party = DemoExtractionService().extract_party(SIGNATURE)
    assert party == PartyInfo(
        company_name="Acme Widgets Ltd",
        address_line1="12 Harbour Road",
        address_line2="Bristol BS1 4XX, United Kingdom",
        email="billing@acme-widgets.co.uk",
        vat_number="GB123456789",
    )


def test_demo_skips_contact_labels():
    party = DemoExtractionService().extract_party("Martin Telekom GmbH\nEmail: m@telekom.de")
    assert party.company_name == "Martin Telekom GmbH"
    assert party.email == "m@telekom.de"
    assert party.vat_number is None
    assert party.address_line1 == ""


def test_demo_requires_text():
    with pytest.raises(ExtractionFailed, match="Input text is required"):
        DemoExtractionService().extract_party("   ")


def test_gemini_without_key_is_not_configured():
    service = GeminiExtractionService(use_cache=False)
    assert not service.available
    with pytest.raises(ServiceNotConfigured, match="API Key is missing"):
        service.extract_party(SIGNATURE)


def test_gemini_maps_reply(fake_models):
    service = GeminiExtractionService(model="gemini-test", use_cache=False)

    party = service.extract_party(SIGNATURE)

    assert service.available
    assert party.company_name == "Acme Widgets Ltd"
    assert party.vat_number == "GB123456789"
    (request,) = fake_models.requests
    assert request.model == "gemini-test"
    assert SIGNATURE.strip() in request.contents
    assert request.config.temperature == 0.1
    assert request.config.response_mime_type == "application/json"


def test_gemini_caches_replies(fake_models, gemini_cache):
    service = GeminiExtractionService(model="gemini-test")

    first = service.extract_party(SIGNATURE)
    second = service.extract_party(SIGNATURE)

    assert first == second
    assert len(fake_models.requests) == 1


def test_gemini_invalid_json(fake_models):
    fake_models.reply = "not json"
    with pytest.raises(ExtractionFailed, match="invalid JSON"):
        GeminiExtractionService(use_cache=False).extract_party(SIGNATURE)


def test_gemini_unexpected_shape(fake_models):
    fake_models.reply = "[]"
    with pytest.raises(ExtractionFailed):
        GeminiExtractionService(use_cache=False).extract_party(SIGNATURE)


def test_gemini_api_error(fake_models):
    fake_models.error = genai_errors.ClientError(
        429, {"error": {"code": 429, "message": "quota", "status": "RESOURCE_EXHAUSTED"}}
    )
    with pytest.raises(ExtractionFailed):
        GeminiExtractionService(use_cache=False).extract_party(SIGNATURE)


def test_gemini_api_key_fallback(monkeypatch, fake_models):
    monkeypatch.delenv("GEMINI_API_KEY")
    monkeypatch.setenv("API_KEY", "other")
    assert GeminiExtractionService().available


def test_party_from_payload_empty_vat_is_none():
    party = party_from_payload({"companyName": " Acme ", "vatNumber": "", "email": None})
    assert party.company_name == "Acme"
    assert party.email == ""
    assert party.vat_number is None


def test_service_registry():
    assert isinstance(get_extraction_service("demo"), DemoExtractionService)
    assert isinstance(get_extraction_service("GEMINI"), GeminiExtractionService)
    assert get_extraction_service("demo") is get_extraction_service("demo")
    with pytest.raises(ValueError):
        get_extraction_service("openai")
