"""
In-process cache with per-entry expiry.

Entries live in a dict guarded by a lock; an expired entry is dropped the
next time it is read. Not shared between worker processes, so use the
sqlite or redis provider when the app runs under several workers.
"""

import logging
import threading
import time
from typing import Any, Dict, Tuple

from cache_providers.base import CacheMissError, CacheProvider
from cache_providers.registry import registry

logger = logging.getLogger(__name__)


class MemoryCacheProvider(CacheProvider):
    """Thread-safe dict-backed cache."""

    name = "memory"

    def __init__(self, config: Dict[str, Any] = None):
        super().__init__(config)
        self.max_entries = int(self.get_config("max_entries", 10000))
        # key -> (expires_at monotonic, data)
        self._entries: Dict[str, Tuple[float, bytes]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> bytes:
        full_key = self._key(key)
        now = time.monotonic()
        with self._lock:
            entry = self._entries.get(full_key)
            if entry is None:
                raise CacheMissError(self.name, key)
            expires_at, data = entry
            if expires_at <= now:
                del self._entries[full_key]
                raise CacheMissError(self.name, key)
            return data

    def put(self, key: str, expiration: float, data: bytes) -> None:
        full_key = self._key(key)
        expires_at = time.monotonic() + expiration
        with self._lock:
            if full_key not in self._entries and len(self._entries) >= self.max_entries:
                self._evict_locked()
            self._entries[full_key] = (expires_at, bytes(data))

    def _evict_locked(self) -> None:
        """Drop expired entries; if still full, drop the one expiring soonest."""
        now = time.monotonic()
        expired = [k for k, (exp, _) in self._entries.items() if exp <= now]
        for k in expired:
            del self._entries[k]
        if len(self._entries) >= self.max_entries:
            oldest = min(self._entries, key=lambda k: self._entries[k][0])
            del self._entries[oldest]
            logger.debug("Memory cache full (%d entries), evicted %s", self.max_entries, oldest)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_info(self) -> Dict[str, Any]:
        info = super().get_info()
        info["entries"] = len(self)
        info["max_entries"] = self.max_entries
        return info


registry.register("memory", MemoryCacheProvider)
