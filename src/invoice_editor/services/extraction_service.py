"""
Abstract base class defining the billing-details extraction contract.

An extraction service takes free-form text (an email signature, an
address block, a request for an invoice) and returns the Bill To party it
describes. Unknown fields come back as empty strings.

Implementations:
- GeminiExtractionService: hosted language model with a JSON schema
- DemoExtractionService: offline heuristics for development
"""

from abc import ABC, abstractmethod

from invoice_editor.models.invoice import PartyInfo


class ExtractionError(Exception):
    """Base class for extraction failures shown to the user."""


class ServiceNotConfigured(ExtractionError):
    """The service lacks the credentials it needs."""


class ExtractionFailed(ExtractionError):
    """The request was rejected or the response could not be used."""


class ExtractionService(ABC):
    """Turns unstructured text into a PartyInfo record."""

    @abstractmethod
    def extract_party(self, text: str) -> PartyInfo:
        """
        Extract billing details from free-form text.

        Args:
            text: Raw pasted text.

        Returns:
            PartyInfo with empty strings for anything not found.

        Raises:
            ServiceNotConfigured: If the service is missing configuration.
            ExtractionFailed: If the input is empty or the call fails.
        """

    @property
    def available(self) -> bool:
        """Return True when the service is configured to take requests."""
        return True


def require_text(text: str | None) -> str:
    """Return stripped text or raise ExtractionFailed for empty input."""
    stripped = (text or "").strip()
    if not stripped:
        raise ExtractionFailed("Input text is required")
    return stripped
