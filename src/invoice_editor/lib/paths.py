"""Path helpers for on-disk application state."""

import tempfile
from pathlib import Path


def temp_dir() -> Path:
    """Return the system temporary directory as a Path."""
    return Path(tempfile.gettempdir())


def cache_dir(name: str) -> Path:
    """
    Return a named cache directory under the system temp directory.

    Args:
        name: Directory name, e.g. ``"invoice_editor_extraction"``.

    Returns:
        Path to the directory (not created here; diskcache creates it).
    """
    return temp_dir() / name
