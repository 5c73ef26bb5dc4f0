"""
Environment-driven configuration for the Invoice Editor.

Values are read once at import time. The Gemini API key is the exception:
it is looked up on every call through gemini_api_key() so a key exported
after startup (or patched in tests) is honoured.
"""

import os


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


# Server
APP_PORT = int(os.getenv("INVOICE_EDITOR_PORT", "8050"))
APP_DEBUG = _flag("INVOICE_EDITOR_DEBUG", "false")
APP_TITLE = "Invoice Editor"

# Extraction service
EXTRACTION_SERVICE = os.getenv("INVOICE_EDITOR_EXTRACTION", "gemini")
GEMINI_MODEL = os.getenv("INVOICE_EDITOR_GEMINI_MODEL", "gemini-2.5-flash")

# Capture and export
SETTLE_SECONDS = int(os.getenv("INVOICE_EDITOR_SETTLE_MS", "100")) / 1000
CAPTURE_SCALE = float(os.getenv("INVOICE_EDITOR_CAPTURE_SCALE", "2"))
ALLOW_REMOTE_IMAGES = _flag("INVOICE_EDITOR_ALLOW_REMOTE_IMAGES", "true")
IMAGE_TIMEOUT_SECONDS = float(os.getenv("INVOICE_EDITOR_IMAGE_TIMEOUT", "10"))


def gemini_api_key() -> str | None:
    """Return the configured Gemini key; GEMINI_API_KEY wins over API_KEY."""
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or None
