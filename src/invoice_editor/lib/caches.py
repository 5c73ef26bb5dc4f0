"""
Disk-backed memoization with a fixed time-to-live.

A DiskCache is bound to one directory and one TTL. Keys are built from a
list of parts (e.g. model name and input text) hashed with objects.hash, so
callers never assemble key strings by hand. The diskcache library makes the
store safe to share between Dash worker threads and processes.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Sequence

import diskcache

from invoice_editor.lib import objects, paths


@dataclass
class CacheEntry:
    """
    Result of a cache lookup.

    Attributes:
        value: The cached or freshly loaded value.
        hit: True when the value came from disk rather than the loader.
    """

    value: Any
    hit: bool = False


class DiskCache:
    """
    Memoizes loader results on disk for ``ttl`` seconds.

    Attributes:
        cache_dir: Directory holding the cache files.
        ttl: Lifetime of an entry in seconds; None keeps entries forever.
    """

    def __init__(self, cache_dir: str | Path, ttl: int | None = None) -> None:
        self.cache_dir = Path(cache_dir)
        self.ttl = ttl
        self._cache = diskcache.Cache(str(self.cache_dir))

    @classmethod
    def named(cls, name: str, ttl: int | None = None) -> "DiskCache":
        """Return a cache in the named directory under the temp directory."""
        return cls(paths.cache_dir(name), ttl=ttl)

    @staticmethod
    def key(parts: Sequence[Any]) -> str:
        return objects.hash(list(parts))

    def get_or_load(self, parts: Sequence[Any], loader: Callable[[], Any]) -> CacheEntry:
        """
        Return the value cached for parts, calling loader on a miss.

        Loader exceptions propagate and nothing is stored, so a failed
        request is retried on the next call. None results are not cached.
        """
        key = self.key(parts)
        cached = self._cache.get(key, default=None)
        if cached is not None:
            return CacheEntry(value=cached, hit=True)

        value = loader()
        if value is not None:
            self._cache.set(key, value, expire=self.ttl)
        return CacheEntry(value=value)

    def close(self) -> None:
        """Close the cache and release resources."""
        self._cache.close()
