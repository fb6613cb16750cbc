"""
Tests for cache_providers/registry.py — cache provider registry.
"""

import pytest

from cache_providers import registry as global_registry
from cache_providers.registry import CacheRegistry


class _FakeCache:
    def __init__(self, config=None):
        self._config = config or {}


class _OtherCache(_FakeCache):
    pass


@pytest.fixture
def reg():
    """A fresh CacheRegistry isolated from the global singleton."""
    return CacheRegistry()


def test_register_and_create(reg):
    reg.register("fake", _FakeCache)
    assert isinstance(reg.create("fake"), _FakeCache)


def test_create_returns_new_instances(reg):
    reg.register("fake", _FakeCache)
    assert reg.create("fake") is not reg.create("fake")


def test_static_config_merged_with_call_config(reg):
    reg.register("fake", _FakeCache, config={"prefix": "a:", "size": 1})
    instance = reg.create("fake", {"size": 2})
    assert instance._config == {"prefix": "a:", "size": 2}


def test_env_placeholders_resolved(reg, monkeypatch):
    monkeypatch.setenv("CACHE_URL_FOR_TEST", "redis://example:6379/1")
    reg.register("fake", _FakeCache)
    instance = reg.create("fake", {"url": "${CACHE_URL_FOR_TEST}", "nested": {"x": ["${CACHE_URL_FOR_TEST}"]}})
    assert instance._config["url"] == "redis://example:6379/1"
    assert instance._config["nested"]["x"] == ["redis://example:6379/1"]


def test_unresolved_placeholder_left_as_is(reg, monkeypatch):
    monkeypatch.delenv("NOT_SET_ANYWHERE", raising=False)
    reg.register("fake", _FakeCache)
    assert reg.create("fake", {"url": "${NOT_SET_ANYWHERE}"})._config["url"] == "${NOT_SET_ANYWHERE}"


def test_unknown_provider_raises(reg):
    with pytest.raises(ValueError, match="Unknown cache provider"):
        reg.create("does_not_exist")


def test_default_is_first_registered(reg):
    reg.register("first", _FakeCache)
    reg.register("second", _OtherCache)
    assert type(reg.create()) is _FakeCache


def test_default_with_nothing_registered_raises(reg):
    with pytest.raises(ValueError, match="No cache providers registered"):
        reg.create()


def test_registered_ids_and_is_registered(reg):
    reg.register("a", _FakeCache)
    reg.register("b", _OtherCache)
    assert reg.registered_ids() == ["a", "b"]
    assert reg.is_registered("a") is True
    assert reg.is_registered("c") is False


def test_list_providers(reg):
    reg.register("a", _FakeCache)
    assert reg.list_providers() == [{"id": "a", "class": "_FakeCache"}]


def test_singleton():
    assert CacheRegistry.get_instance() is global_registry


def test_builtin_providers_registered():
    for pid in ("none", "memory", "sqlite", "redis"):
        assert global_registry.is_registered(pid)
    assert global_registry.registered_ids()[0] == "none"
