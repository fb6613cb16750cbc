"""
Cache provider registry with singleton pattern.

Cache stores register themselves under a short id when their module is
imported (see cache_providers/__init__.py), and the SSR settings builder
asks the registry for an instance by the id named in config.

Usage:
    from cache_providers.registry import registry

    registry.register('memory', MemoryCacheProvider)

    cache = registry.create('memory', {'prefix': 'ssr:'})
    cache = registry.create()                  # first registered
    ids = registry.registered_ids()
"""

from __future__ import annotations

import logging
import os
import re
from typing import Any, Dict, List, Optional, Type

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")


class CacheRegistry:
    """Singleton registry of cache provider classes keyed by id.

    create() returns a new instance with config merged from the static
    config given at register() time and the config passed by the caller.
    """

    _instance: Optional["CacheRegistry"] = None

    def __init__(self) -> None:
        self._providers: Dict[str, Type] = {}
        self._static_configs: Dict[str, Dict] = {}

    @classmethod
    def get_instance(cls) -> "CacheRegistry":
        if cls._instance is None:
            cls._instance = CacheRegistry()
        return cls._instance

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        provider_id: str,
        provider_class: Type,
        config: Optional[Dict] = None,
    ) -> None:
        """Register a cache provider implementation.

        Args:
            provider_id:    Unique string key (e.g. 'memory', 'redis').
            provider_class: Class (not instance) implementing CacheProvider.
            config:         Optional static config dict, overridden by create().
        """
        self._providers[provider_id] = provider_class
        if config:
            self._static_configs[provider_id] = config
        logger.debug("Registered cache provider: %s", provider_id)

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    def create(self, provider_id: Optional[str] = None, config: Optional[Dict] = None) -> Any:
        """Return an instantiated cache provider.

        If provider_id is None the first registered provider is used.

        Raises:
            ValueError: if the provider_id is not registered.
        """
        if provider_id is None:
            provider_id = self._get_default_id()

        if provider_id not in self._providers:
            raise ValueError(
                f"Unknown cache provider: '{provider_id}'. "
                f"Available: {self.registered_ids()}"
            )

        merged = dict(self._static_configs.get(provider_id, {}))
        merged.update(config or {})
        merged = _resolve_env_vars(merged)

        return self._providers[provider_id](merged)

    def list_providers(self) -> List[Dict]:
        """Return metadata dicts (id, class) for every registered provider."""
        return [
            {"id": pid, "class": cls.__name__}
            for pid, cls in self._providers.items()
        ]

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------

    def registered_ids(self) -> List[str]:
        return list(self._providers.keys())

    def is_registered(self, provider_id: str) -> bool:
        return provider_id in self._providers

    def _get_default_id(self) -> str:
        registered = self.registered_ids()
        if registered:
            return registered[0]
        raise ValueError(
            "No cache providers registered. "
            "Import cache_providers or call registry.register() first."
        )


def _resolve_env_vars(config: Dict) -> Dict:
    """Recursively resolve ${ENV_VAR} placeholders in string config values."""

    def _resolve(value: Any) -> Any:
        if isinstance(value, str):
            return _PLACEHOLDER.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)
        if isinstance(value, dict):
            return {k: _resolve(v) for k, v in value.items()}
        if isinstance(value, list):
            return [_resolve(v) for v in value]
        return value

    return _resolve(config)


registry = CacheRegistry.get_instance()


__all__ = [
    "CacheRegistry",
    "registry",
]
