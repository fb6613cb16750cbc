"""
SSR gate settings.

Settings are built once at startup from a render backend URL plus any
number of option functions, then frozen and shared by every request:

    from ssr.settings import new_settings, expiration, no_cache

    settings = new_settings(
        "https://render.example.com",
        expiration(24 * 3600),
        no_cache(),
    )

settings_from_config() builds the same thing from config/default.yaml
plus environment overrides (see config/loader.py).
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from cache_providers import MemoryCacheProvider, NoCacheProvider
from cache_providers.base import CacheProvider
from ssr.classifier import UAParserClassifier, UserAgentClassifier, create_classifier

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENTS: Tuple[str, ...] = (
    "W3C_Validator",
    "baiduspider",
    "bingbot",
    "facebookexternalhit",
    "LinkedInBot",
    "Pinterest",
    "Slackbot-LinkExpanding",
    "TwitterBot",
    "Googlebot",
    "Mediapartners-Google",
)

DEFAULT_HEADLESS_PARAM = "headless"
DEFAULT_OVERRIDE_PARAM = "ssr"
DEFAULT_TIMEOUT = 30.0
DEFAULT_EXPIRATION = 3600.0
DEFAULT_CACHE_TIMEOUT = 1.0
DEFAULT_CACHE_PREFIX = "ssr:"

Option = Callable[[Dict[str, Any]], None]


@dataclass(frozen=True)
class SSRSettings:
    """Immutable configuration for the detector, render proxy and gate."""

    render_url: str
    user_agents: Tuple[str, ...] = DEFAULT_USER_AGENTS
    headless_param: str = DEFAULT_HEADLESS_PARAM
    override_param: str = DEFAULT_OVERRIDE_PARAM
    timeout: float = DEFAULT_TIMEOUT
    expiration: float = DEFAULT_EXPIRATION
    cache_timeout: Optional[float] = DEFAULT_CACHE_TIMEOUT
    verbose: bool = False
    cache: CacheProvider = field(
        default_factory=lambda: MemoryCacheProvider({"prefix": DEFAULT_CACHE_PREFIX})
    )
    classifier: UserAgentClassifier = field(default_factory=UAParserClassifier)

    def __post_init__(self):
        if not self.render_url:
            raise ValueError("render_url must be set")
        if not self.headless_param:
            raise ValueError("headless_param must not be empty")
        if self.headless_param == self.override_param:
            raise ValueError("headless_param and override_param must differ")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.expiration < 0:
            raise ValueError(f"expiration must not be negative, got {self.expiration}")
        if self.cache_timeout is not None and self.cache_timeout < 0:
            raise ValueError(f"cache_timeout must not be negative, got {self.cache_timeout}")
        # tuple() keeps the bot list immutable even if a list was passed in
        object.__setattr__(self, "user_agents", tuple(self.user_agents))

    @property
    def override_enabled(self) -> bool:
        return bool(self.override_param)


def new_settings(render_url: str, *options: Option) -> SSRSettings:
    """Apply options over the defaults and freeze the result."""
    values: Dict[str, Any] = {"render_url": render_url}
    for opt in options:
        opt(values)
    return SSRSettings(**values)


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

def user_agents(names: Iterable[str]) -> Option:
    """User-agent families that are served pre-rendered pages."""
    def _apply(values):
        values["user_agents"] = tuple(names)
    return _apply


def user_agent_classifier(classifier: UserAgentClassifier) -> Option:
    """Use a non-default user-agent classifier."""
    def _apply(values):
        values["classifier"] = classifier
    return _apply


def headless_param(name: str) -> Option:
    """Name of the query parameter that marks a request from the render backend."""
    def _apply(values):
        values["headless_param"] = name
    return _apply


def override_param(name: str) -> Option:
    """Name of the query parameter that forces rendering (empty disables it)."""
    def _apply(values):
        values["override_param"] = name
    return _apply


def timeout(seconds: float) -> Option:
    """Deadline for one render backend call."""
    def _apply(values):
        values["timeout"] = float(seconds)
    return _apply


def expiration(seconds: float) -> Option:
    """How long rendered pages stay in the cache."""
    def _apply(values):
        values["expiration"] = float(seconds)
    return _apply


def cache_timeout(seconds: Optional[float]) -> Option:
    """Deadline for each cache get/put; None or 0 calls the store inline."""
    def _apply(values):
        values["cache_timeout"] = None if seconds is None else float(seconds)
    return _apply


def verbose(enabled: bool = True) -> Option:
    """Log render path activity."""
    def _apply(values):
        values["verbose"] = bool(enabled)
    return _apply


def cache(provider: CacheProvider) -> Option:
    """Use the given cache store."""
    def _apply(values):
        values["cache"] = provider
    return _apply


def no_cache() -> Option:
    """Disable caching; every bot request goes to the render backend."""
    return cache(NoCacheProvider())


# ---------------------------------------------------------------------------
# Config bridge
# ---------------------------------------------------------------------------

def settings_from_config(config) -> SSRSettings:
    """Build SSRSettings from a config.loader.Config (or anything with .get)."""
    from cache_providers import registry as cache_registry

    bots = config.get("ssr.user_agents") or DEFAULT_USER_AGENTS

    provider_id = config.get("cache.provider", "memory")
    provider_config = dict(config.get(f"cache.{provider_id}") or {})
    provider_config.setdefault("prefix", config.get("cache.prefix", DEFAULT_CACHE_PREFIX))
    cache_provider = cache_registry.create(provider_id, provider_config)

    classifier = create_classifier(
        config.get("ssr.classifier", "uaparser"),
        config.get("ssr.classifier_tokens") or bots,
    )

    override = config.get("ssr.override_param", DEFAULT_OVERRIDE_PARAM)

    settings = new_settings(
        config.get("ssr.render_url", ""),
        user_agents(bots),
        headless_param(config.get("ssr.headless_param", DEFAULT_HEADLESS_PARAM)),
        override_param("" if override is None else str(override)),
        timeout(config.get("ssr.timeout", DEFAULT_TIMEOUT)),
        expiration(config.get("ssr.expiration", DEFAULT_EXPIRATION)),
        cache_timeout(config.get("ssr.cache_timeout", DEFAULT_CACHE_TIMEOUT)),
        verbose(config.get("ssr.verbose", False)),
        cache(cache_provider),
        user_agent_classifier(classifier),
    )
    logger.info(
        "SSR settings: render_url=%s cache=%s bots=%d timeout=%.1fs",
        settings.render_url, provider_id, len(settings.user_agents), settings.timeout,
    )
    return settings


__all__ = [
    "SSRSettings",
    "DEFAULT_USER_AGENTS",
    "new_settings",
    "settings_from_config",
    "user_agents",
    "user_agent_classifier",
    "headless_param",
    "override_param",
    "timeout",
    "expiration",
    "cache_timeout",
    "verbose",
    "cache",
    "no_cache",
]
