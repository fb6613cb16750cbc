"""No-op cache: every lookup misses and every store succeeds."""

from typing import Any, Dict

from cache_providers.base import CacheMissError, CacheProvider
from cache_providers.registry import registry


class NoCacheProvider(CacheProvider):
    """Used when caching is disabled; every request goes to the render backend."""

    name = "none"

    def get(self, key: str) -> bytes:
        raise CacheMissError(self.name, key)

    def put(self, key: str, expiration: float, data: bytes) -> None:
        return None

    def get_info(self) -> Dict[str, Any]:
        info = super().get_info()
        info["enabled"] = False
        return info


registry.register("none", NoCacheProvider)
