"""
Service factory for the Invoice Editor.

This module provides the get_extraction_service() factory function that
returns the configured ExtractionService implementation.

Available Implementations:
- gemini: Gemini API with a JSON response schema (needs GEMINI_API_KEY)
- demo: Offline heuristic parser (no credentials required)

The service is cached at the module level, so the same instance is reused
across all requests. Configure via INVOICE_EDITOR_EXTRACTION.
"""

from functools import cache
from typing import Callable, Dict

from invoice_editor import config
from invoice_editor.lib import logs
from invoice_editor.services.extraction_service import (
    ExtractionError,
    ExtractionFailed,
    ExtractionService,
    ServiceNotConfigured,
)
from invoice_editor.services.extraction_service_demo import DemoExtractionService
from invoice_editor.services.extraction_service_gemini import GeminiExtractionService

LOG = logs.logger(__file__)

_SERVICE_REGISTRY: Dict[str, Callable[[], ExtractionService]] = {
    "demo": lambda: DemoExtractionService(),
    "gemini": lambda: GeminiExtractionService(),
}


@cache
def get_extraction_service(kind: str | None = None) -> ExtractionService:
    """Return the configured extraction service implementation."""
    resolved_kind = (kind or config.EXTRACTION_SERVICE).lower()
    LOG.info("get_extraction_service - kind:%s resolved_kind:%s", kind, resolved_kind)
    try:
        factory = _SERVICE_REGISTRY[resolved_kind]
    except KeyError as exc:
        msg = f"Unknown extraction service kind: {resolved_kind}"
        raise ValueError(msg) from exc
    return factory()


__all__ = [
    "DemoExtractionService",
    "ExtractionError",
    "ExtractionFailed",
    "ExtractionService",
    "GeminiExtractionService",
    "ServiceNotConfigured",
    "get_extraction_service",
]
