"""
Config loader: reads config/default.yaml with environment variable overrides.

Usage:
    from config.loader import config

    config.get('ssr.render_url')       # -> 'http://localhost:3000'
    config.get('cache.provider')       # -> 'memory'
    config['ssr.timeout']              # dict-style access also works

Environment variable override rules:
  - Direct named overrides (highest priority):
      PORT               -> server.port
      HOST               -> server.host
      LOG_LEVEL          -> logging.level
      SSR_RENDER_URL     -> ssr.render_url
      SSR_USER_AGENTS    -> ssr.user_agents      (comma-separated)
      SSR_HEADLESS_PARAM -> ssr.headless_param
      SSR_OVERRIDE_PARAM -> ssr.override_param   (empty disables override)
      SSR_TIMEOUT        -> ssr.timeout          (seconds)
      SSR_CACHE_TIMEOUT  -> ssr.cache_timeout    (seconds)
      SSR_EXPIRATION     -> ssr.expiration       (seconds)
      SSR_VERBOSE        -> ssr.verbose          (true/false string)
      SSR_CLASSIFIER     -> ssr.classifier       (uaparser | token)
      SSR_CACHE_PROVIDER -> cache.provider       (none | memory | sqlite | redis)
      SSR_CACHE_PREFIX   -> cache.prefix
      SSR_CACHE_DB       -> cache.sqlite.path
      REDIS_URL          -> cache.redis.url
  - Generic double-underscore override:
      SERVER__PORT=8081  -> server.port = 8081
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# Path to the default config file (same directory as this module)
_DEFAULT_YAML = Path(__file__).parent / "default.yaml"

# Named env var -> dotted config key mappings
_ENV_MAP = {
    "PORT":               ("server.port",         int),
    "HOST":               ("server.host",         str),
    "LOG_LEVEL":          ("logging.level",       str),
    "SSR_RENDER_URL":     ("ssr.render_url",      str),
    "SSR_USER_AGENTS":    ("ssr.user_agents",     "list"),
    "SSR_HEADLESS_PARAM": ("ssr.headless_param",  str),
    "SSR_OVERRIDE_PARAM": ("ssr.override_param",  str),
    "SSR_TIMEOUT":        ("ssr.timeout",         float),
    "SSR_CACHE_TIMEOUT":  ("ssr.cache_timeout",   float),
    "SSR_EXPIRATION":     ("ssr.expiration",      int),
    "SSR_VERBOSE":        ("ssr.verbose",         "bool"),
    "SSR_CLASSIFIER":     ("ssr.classifier",      str),
    "SSR_CACHE_PROVIDER": ("cache.provider",      str),
    "SSR_CACHE_PREFIX":   ("cache.prefix",        str),
    "SSR_CACHE_DB":       ("cache.sqlite.path",   str),
    "REDIS_URL":          ("cache.redis.url",     str),
}


def _cast(value: str, cast_type) -> Any:
    """Cast a string env var value to the target type."""
    if cast_type == "bool":
        return value.lower() in ("true", "1", "yes")
    if cast_type == "list":
        return [item.strip() for item in value.split(",") if item.strip()]
    if cast_type == int:
        return int(value)
    if cast_type == float:
        return float(value)
    return value  # str passthrough


def _deep_set(data: dict, dotted_key: str, value: Any) -> None:
    """Set a value in a nested dict using a dotted key path."""
    parts = dotted_key.split(".")
    node = data
    for part in parts[:-1]:
        node = node.setdefault(part, {})
    node[parts[-1]] = value


def _deep_get(data: dict, dotted_key: str, default: Any = None) -> Any:
    """Get a value from a nested dict using a dotted key path."""
    node = data
    for part in dotted_key.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, returning empty dict if missing or empty."""
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _apply_env_overrides(data: dict) -> None:
    """Apply named env var overrides to the config dict (in-place)."""
    for env_key, (config_key, cast_type) in _ENV_MAP.items():
        value = os.environ.get(env_key)
        if value is not None:
            _deep_set(data, config_key, _cast(value, cast_type))

    # Generic double-underscore overrides: SERVER__PORT=8081 -> server.port
    for env_key, value in os.environ.items():
        if "__" in env_key:
            section, _, key = env_key.lower().partition("__")
            dotted = f"{section}.{key.replace('__', '.')}"
            # Only override keys that already exist, cast to the existing type
            current = _deep_get(data, dotted)
            if current is not None and not isinstance(current, (dict, list)):
                _deep_set(data, dotted, _cast(value, _type_of(current)))


def _type_of(current: Any):
    if isinstance(current, bool):
        return "bool"
    if isinstance(current, (int, float)):
        return type(current)
    return str


class Config:
    """Read-only config accessor loaded from YAML + env overrides."""

    def __init__(self, yaml_path: Path = _DEFAULT_YAML):
        self._data = _load_yaml(Path(yaml_path))
        _apply_env_overrides(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dotted key. Returns default if not found."""
        return _deep_get(self._data, key, default)

    def __getitem__(self, key: str) -> Any:
        value = _deep_get(self._data, key)
        if value is None:
            raise KeyError(f"Config key not found: {key}")
        return value

    def __contains__(self, key: str) -> bool:
        return _deep_get(self._data, key) is not None

    def as_dict(self) -> dict:
        """Return a copy of the full config dict."""
        return copy.deepcopy(self._data)


# Module-level singleton; import this everywhere:
#   from config.loader import config
config = Config()
