"""
Local library modules shared across the Invoice Editor.

Modules:
    logs: Logging utilities
    objects: Stable object hashing
    paths: Path utilities
    clients: Hosted service client factories (Gemini)
    caches: Disk-based caching with TTL support
"""

from invoice_editor.lib import caches, clients, logs, objects, paths

__all__ = ["caches", "clients", "logs", "objects", "paths"]
