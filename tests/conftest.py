"""
pytest fixtures for the SSR gate test suite.

Most tests run the gate against in-process fakes: a recording cache, a
token classifier and a fake requests session standing in for the render
backend. The Flask test client drives end-to-end requests through the
WSGI middleware.
"""

import os
import sys

import pytest

# Ensure project root is on sys.path so imports work
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from cache_providers import MemoryCacheProvider  # noqa: E402
from ssr.backend import RenderBackend  # noqa: E402
from ssr.classifier import TokenClassifier  # noqa: E402
from ssr.proxy import RenderProxy  # noqa: E402
from ssr.settings import (  # noqa: E402
    cache,
    new_settings,
    override_param,
    user_agent_classifier,
    user_agents,
)

RENDER_URL = "http://render.test"
GOOGLEBOT_UA = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"
BINGBOT_UA = "Mozilla/5.0 (compatible; bingbot/2.0; +http://www.bing.com/bingbot.htm)"
CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class RecordingCache(MemoryCacheProvider):
    """Memory cache that records every get/put call."""

    def __init__(self, config=None):
        super().__init__(config)
        self.gets = []
        self.puts = []

    def get(self, key):
        self.gets.append(key)
        return super().get(key)

    def put(self, key, expiration, data):
        self.puts.append((key, expiration, data))
        super().put(key, expiration, data)


class FakeResponse:
    """Just enough of requests.Response for RenderBackend.fetch()."""

    def __init__(self, status_code=200, body=b"", headers=None, error=None):
        self.status_code = status_code
        self.headers = headers if headers is not None else {"Content-Type": "text/html; charset=utf-8"}
        self._body = body
        self._error = error
        self.closed = False

    def iter_content(self, chunk_size=1):
        if self._body:
            yield self._body
        if self._error is not None:
            raise self._error

    def close(self):
        self.closed = True


class FakeSession:
    """Stands in for requests.Session; returns a canned response or raises."""

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else FakeResponse(200, b"<html>ok</html>")
        self.error = error
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def recording_cache():
    return RecordingCache({"prefix": "ssr:"})


@pytest.fixture
def classifier():
    return TokenClassifier(["Googlebot", "bingbot"])


@pytest.fixture
def settings(recording_cache, classifier):
    """Googlebot-only settings with the override parameter disabled."""
    return new_settings(
        RENDER_URL,
        user_agents(["Googlebot"]),
        override_param(""),
        cache(recording_cache),
        user_agent_classifier(classifier),
    )


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def backend(settings, fake_session):
    return RenderBackend(settings.render_url, settings.timeout, session=fake_session)


@pytest.fixture
def proxy(settings, backend):
    p = RenderProxy(settings, backend=backend)
    yield p
    p.close()


@pytest.fixture
def flask_app(settings, proxy):
    """Demo host app with the SSR gate wired to the fakes."""
    from app import create_app
    return create_app(config_override={"TESTING": True}, settings=settings, proxy=proxy)


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()
