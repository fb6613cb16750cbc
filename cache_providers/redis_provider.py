"""
Redis-backed cache store.

Shared by every process and host pointing at the same Redis, with expiry
handled by Redis itself (SET ... PX).

Config keys:
    url      redis URL (default: redis://localhost:6379/0)
    timeout  socket connect/read timeout in seconds (default: 1.0)
    client   pre-built redis.Redis instance (overrides url)
"""

import logging
from typing import Any, Dict

import redis

from cache_providers.base import CacheError, CacheMissError, CacheProvider
from cache_providers.registry import registry

logger = logging.getLogger(__name__)


class RedisCacheProvider(CacheProvider):
    """Cache entries in Redis."""

    name = "redis"

    def __init__(self, config: Dict[str, Any] = None):
        super().__init__(config)
        self.url = self.get_config("url", "redis://localhost:6379/0")
        timeout = float(self.get_config("timeout", 1.0))
        self._client = self.get_config("client") or redis.Redis.from_url(
            self.url,
            socket_timeout=timeout,
            socket_connect_timeout=timeout,
        )

    def get(self, key: str) -> bytes:
        try:
            value = self._client.get(self._key(key))
        except redis.RedisError as exc:
            raise CacheError(self.name, f"GET failed: {exc}") from exc
        if value is None:
            raise CacheMissError(self.name, key)
        return value

    def put(self, key: str, expiration: float, data: bytes) -> None:
        # Redis rejects a zero PX; a non-positive expiration means "do not keep"
        ttl_ms = int(expiration * 1000)
        if ttl_ms <= 0:
            return
        try:
            self._client.set(self._key(key), data, px=ttl_ms)
        except redis.RedisError as exc:
            raise CacheError(self.name, f"SET failed: {exc}") from exc

    def is_available(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError as exc:
            logger.warning("Redis cache unavailable at %s: %s", self.url, exc)
            return False

    def get_info(self) -> Dict[str, Any]:
        info = super().get_info()
        info["url"] = self.url
        return info


registry.register("redis", RedisCacheProvider)
