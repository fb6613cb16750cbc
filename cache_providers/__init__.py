"""Cache provider package.

To add a new cache store:
  1. Create cache_providers/mystore_provider.py with a CacheProvider subclass
  2. Call registry.register('mystore', MyStoreProvider) at the bottom of it
  3. Import it below so the registration fires
"""

from cache_providers.base import CacheError, CacheMissError, CacheProvider, CacheTimeoutError
from cache_providers.registry import registry

# Import concrete providers so their registry.register() calls fire.
# "none" first: it is the registry default when no id is given.
from cache_providers import none_provider  # noqa: F401
from cache_providers import memory_provider  # noqa: F401
from cache_providers import sqlite_provider  # noqa: F401
from cache_providers import redis_provider  # noqa: F401

from cache_providers.memory_provider import MemoryCacheProvider
from cache_providers.none_provider import NoCacheProvider
from cache_providers.redis_provider import RedisCacheProvider
from cache_providers.sqlite_provider import SQLiteCacheProvider

__all__ = [
    "CacheProvider",
    "CacheError",
    "CacheMissError",
    "CacheTimeoutError",
    "MemoryCacheProvider",
    "NoCacheProvider",
    "RedisCacheProvider",
    "SQLiteCacheProvider",
    "registry",
]
