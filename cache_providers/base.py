"""
Cache provider abstract base class.

Every cache store plugged into the SSR gate implements this contract:

    get(key)                    -> bytes, raises CacheMissError when absent
    put(key, expiration, data)  -> None, raises CacheError on failure

Expiration is in seconds. Keys are namespaced with the configured prefix
("ssr:" by default) before they reach the backing store.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class CacheProvider(ABC):
    """Common base for all cache stores (none, memory, sqlite, redis)."""

    name = "cache"

    def __init__(self, config: Dict[str, Any] = None):
        self._config = config or {}
        self.prefix = self.get_config("prefix", "ssr:")

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Return the stored bytes for key or raise CacheMissError."""
        pass

    @abstractmethod
    def put(self, key: str, expiration: float, data: bytes) -> None:
        """Store data under key for expiration seconds."""
        pass

    def is_available(self) -> bool:
        """Return True if the store can serve requests right now."""
        return True

    def get_info(self) -> Dict[str, Any]:
        return {
            "name": self.get_config("name", self.name),
            "prefix": self.prefix,
            "available": self.is_available(),
        }

    def get_config(self, key: str, default: Any = None) -> Any:
        """Safely read a value from the provider config dict."""
        return self._config.get(key, default)

    def _key(self, key: str) -> str:
        return self.prefix + key

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', prefix='{self.prefix}')"


class CacheError(Exception):
    """Base exception for all cache store errors."""

    def __init__(self, provider_name: str, message: str):
        self.provider_name = provider_name
        super().__init__(f"[{provider_name}] {message}")


class CacheMissError(CacheError):
    """Raised when a key is not present (or has expired)."""

    def __init__(self, provider_name: str, key: str):
        self.key = key
        super().__init__(provider_name, f"not found: {key}")


class CacheTimeoutError(CacheError):
    """Raised when a cache call does not finish within its deadline."""
    pass


__all__ = [
    "CacheProvider",
    "CacheError",
    "CacheMissError",
    "CacheTimeoutError",
]
