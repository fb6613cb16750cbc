"""
Tests for ssr/settings.py — option functions, validation, config bridge.
"""

import dataclasses

import pytest

from cache_providers import MemoryCacheProvider, NoCacheProvider, SQLiteCacheProvider
from config.loader import Config
from conftest import RENDER_URL
from ssr.classifier import TokenClassifier, UAParserClassifier
from ssr.settings import (
    DEFAULT_USER_AGENTS,
    SSRSettings,
    cache,
    cache_timeout,
    expiration,
    headless_param,
    new_settings,
    no_cache,
    override_param,
    settings_from_config,
    timeout,
    user_agent_classifier,
    user_agents,
    verbose,
)


class TestDefaults:
    def test_defaults(self):
        s = new_settings(RENDER_URL)
        assert s.render_url == RENDER_URL
        assert s.user_agents == DEFAULT_USER_AGENTS
        assert len(s.user_agents) == 10
        assert s.headless_param == "headless"
        assert s.override_param == "ssr"
        assert s.override_enabled is True
        assert s.timeout == 30.0
        assert s.expiration == 3600.0
        assert s.cache_timeout == 1.0
        assert s.verbose is False
        assert isinstance(s.cache, MemoryCacheProvider)
        assert s.cache.prefix == "ssr:"
        assert isinstance(s.classifier, UAParserClassifier)

    def test_frozen(self):
        s = new_settings(RENDER_URL)
        with pytest.raises(dataclasses.FrozenInstanceError):
            s.timeout = 1


class TestOptions:
    def test_each_option_applies(self):
        store = NoCacheProvider()
        clf = TokenClassifier(["Googlebot"])
        s = new_settings(
            RENDER_URL,
            user_agents(["Googlebot"]),
            user_agent_classifier(clf),
            headless_param("prerender"),
            override_param("force"),
            timeout(5),
            expiration(60),
            cache_timeout(0.5),
            verbose(),
            cache(store),
        )
        assert s.user_agents == ("Googlebot",)
        assert s.classifier is clf
        assert s.headless_param == "prerender"
        assert s.override_param == "force"
        assert s.timeout == 5.0
        assert s.expiration == 60.0
        assert s.cache_timeout == 0.5
        assert s.verbose is True
        assert s.cache is store

    def test_later_options_win(self):
        s = new_settings(RENDER_URL, timeout(5), timeout(9))
        assert s.timeout == 9.0

    def test_no_cache(self):
        assert isinstance(new_settings(RENDER_URL, no_cache()).cache, NoCacheProvider)

    def test_empty_override_disables(self):
        assert new_settings(RENDER_URL, override_param("")).override_enabled is False

    def test_user_agents_list_becomes_tuple(self):
        names = ["Googlebot"]
        s = SSRSettings(render_url=RENDER_URL, user_agents=names)
        names.append("bingbot")
        assert s.user_agents == ("Googlebot",)


class TestValidation:
    def test_empty_render_url(self):
        with pytest.raises(ValueError, match="render_url"):
            new_settings("")

    def test_empty_headless_param(self):
        with pytest.raises(ValueError, match="headless_param"):
            new_settings(RENDER_URL, headless_param(""))

    def test_same_params(self):
        with pytest.raises(ValueError, match="must differ"):
            new_settings(RENDER_URL, override_param("headless"))

    def test_non_positive_timeout(self):
        with pytest.raises(ValueError, match="timeout"):
            new_settings(RENDER_URL, timeout(0))

    def test_negative_expiration(self):
        with pytest.raises(ValueError, match="expiration"):
            new_settings(RENDER_URL, expiration(-1))

    def test_negative_cache_timeout(self):
        with pytest.raises(ValueError, match="cache_timeout"):
            new_settings(RENDER_URL, cache_timeout(-1))


# ---------------------------------------------------------------------------
# settings_from_config
# ---------------------------------------------------------------------------

def _write_config(tmp_path, text):
    path = tmp_path / "cfg.yaml"
    path.write_text(text)
    return Config(path)


class TestFromConfig:
    def test_default_yaml(self):
        s = settings_from_config(Config())
        assert s.render_url
        assert "Googlebot" in s.user_agents
        assert isinstance(s.cache, MemoryCacheProvider)

    def test_values_from_yaml(self, tmp_path):
        cfg = _write_config(tmp_path, (
            "ssr:\n"
            "  render_url: http://render:3000\n"
            "  user_agents: [Googlebot]\n"
            "  override_param: ''\n"
            "  timeout: 12\n"
            "  expiration: 600\n"
            "  verbose: true\n"
            "  classifier: token\n"
            "cache:\n"
            "  provider: none\n"
        ))
        s = settings_from_config(cfg)
        assert s.render_url == "http://render:3000"
        assert s.user_agents == ("Googlebot",)
        assert s.override_enabled is False
        assert s.timeout == 12.0
        assert s.expiration == 600.0
        assert s.verbose is True
        assert isinstance(s.classifier, TokenClassifier)
        assert s.classifier.classify("Googlebot/2.1") == "Googlebot"
        assert isinstance(s.cache, NoCacheProvider)

    def test_sqlite_provider_config(self, tmp_path):
        db = tmp_path / "c.db"
        cfg = _write_config(tmp_path, (
            "ssr:\n"
            "  render_url: http://render:3000\n"
            "cache:\n"
            "  provider: sqlite\n"
            "  prefix: 'site:'\n"
            f"  sqlite:\n    path: {db}\n"
        ))
        s = settings_from_config(cfg)
        try:
            assert isinstance(s.cache, SQLiteCacheProvider)
            assert s.cache.prefix == "site:"
            assert db.exists()
        finally:
            s.cache.close()

    def test_unknown_cache_provider(self, tmp_path):
        cfg = _write_config(tmp_path, "ssr:\n  render_url: http://r\ncache:\n  provider: nope\n")
        with pytest.raises(ValueError, match="Unknown cache provider"):
            settings_from_config(cfg)

    def test_missing_render_url(self, tmp_path):
        cfg = _write_config(tmp_path, "cache:\n  provider: none\n")
        with pytest.raises(ValueError, match="render_url"):
            settings_from_config(cfg)

    def test_env_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SSR_RENDER_URL", "http://from-env:9000")
        monkeypatch.setenv("SSR_CACHE_PROVIDER", "none")
        cfg = _write_config(tmp_path, "ssr:\n  render_url: http://yaml\n")
        s = settings_from_config(cfg)
        assert s.render_url == "http://from-env:9000"
        assert isinstance(s.cache, NoCacheProvider)

    def test_classifier_tokens_pairs(self, tmp_path):
        cfg = _write_config(tmp_path, (
            "ssr:\n"
            "  render_url: http://render:3000\n"
            "  user_agents: [Googlebot]\n"
            "  classifier: token\n"
            "  classifier_tokens:\n"
            "    - [Googlebot, googlebot]\n"
            "    - [bingbot, bingbot]\n"
            "cache:\n"
            "  provider: none\n"
        ))
        s = settings_from_config(cfg)
        assert s.classifier.classify("Mozilla/5.0 (compatible; Googlebot/2.1)") == "Googlebot"
        assert s.classifier.classify("Mozilla/5.0 (compatible; bingbot/2.0)") == "bingbot"
