"""
Client factories for hosted services.

Provides cached access to the Google Gen AI client used by the Gemini
extraction service. Clients are created lazily so the editor starts
without credentials; the extraction service checks for a key first.
"""

import functools

from google import genai


@functools.cache
def genai_client(api_key: str) -> genai.Client:
    """
    Return a Gemini API client for the given key.

    One client is kept per key for the life of the process.

    Args:
        api_key: Gemini API key.

    Returns:
        Configured genai.Client instance.
    """
    return genai.Client(api_key=api_key)
