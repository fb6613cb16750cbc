"""
Render proxy: cache-aside serving of pre-rendered pages for bot requests.

    key = full request URL (before any query rewriting)
    hit  -> replay the cached status, content type and body
    miss -> ask the render backend for the page with the headless marker
            set and the override parameter removed, store the result,
            relay the backend status and body

Backend failures (transport, body read, deadline) become a 500 with the
error text and nothing is cached. Cache failures never reach the caller:
a failed or slow lookup is a miss, a failed or slow store is dropped.
Every cache call is bounded by settings.cache_timeout.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from typing import Callable, Optional
from urllib.parse import urlencode

from werkzeug.wrappers import Response

from cache_providers.base import CacheMissError, CacheTimeoutError
from ssr import envelope
from ssr.backend import DEFAULT_CONTENT_TYPE, RenderBackend, RenderError
from ssr.settings import SSRSettings

logger = logging.getLogger(__name__)

_CACHE_WORKERS = 8


class RenderProxy:
    """Serves bot requests from cache or the render backend."""

    def __init__(self, settings: SSRSettings, backend: Optional[RenderBackend] = None):
        self.settings = settings
        self.backend = backend or RenderBackend(settings.render_url, settings.timeout)
        self._executor = None
        if settings.cache_timeout:
            self._executor = ThreadPoolExecutor(
                max_workers=_CACHE_WORKERS, thread_name_prefix="ssr-cache"
            )

    # ------------------------------------------------------------------
    # URLs
    # ------------------------------------------------------------------

    def cache_key(self, request) -> str:
        return request.url

    def render_target(self, request) -> str:
        """URL the render backend should load: headless marker on, override off."""
        args = request.args.copy()
        args.setlist(self.settings.headless_param, [""])
        if self.settings.override_enabled:
            args.poplist(self.settings.override_param)
        query = urlencode(sorted(args.items(multi=True), key=lambda item: item[0]))
        return f"{request.base_url}?{query}"

    # ------------------------------------------------------------------
    # Serving
    # ------------------------------------------------------------------

    def serve(self, request) -> Response:
        key = self.cache_key(request)

        page = self._cache_get(key)
        if page is not None:
            self._log(logging.DEBUG, "ssr cache hit %s", key)
            return _respond(page.status, page.body, page.content_type)

        target = self.render_target(request)
        self._log(logging.DEBUG, "ssr req %s", self.backend.build_url(target))

        try:
            result = self.backend.fetch(target)
        except RenderError as exc:
            self._log(logging.ERROR, "ssr error %s", exc)
            return Response(str(exc), status=500, mimetype="text/plain")

        self._log(logging.DEBUG, "ssr rendered %s: %d (%d bytes, %.0fms)",
                  key, result.status, len(result.body), result.elapsed_ms)

        self._cache_put(key, envelope.encode(envelope.CachedPage(
            status=result.status,
            body=result.body,
            content_type=result.content_type,
        )))

        return _respond(result.status, result.body, result.content_type)

    def close(self) -> None:
        """Stop the cache and render worker pools."""
        if self._executor is not None:
            self._executor.shutdown(wait=False)
        self.backend.close()

    # ------------------------------------------------------------------
    # Bounded cache calls
    # ------------------------------------------------------------------

    def _cache_get(self, key: str) -> Optional[envelope.CachedPage]:
        try:
            data = self._bounded(self.settings.cache.get, key)
        except CacheMissError:
            self._log(logging.DEBUG, "ssr cache miss %s", key)
            return None
        except Exception as exc:
            # any lookup failure is a miss
            self._log(logging.WARNING, "ssr cache get failed for %s: %s", key, exc)
            return None
        return envelope.decode(data)

    def _cache_put(self, key: str, data: bytes) -> None:
        try:
            self._bounded(self.settings.cache.put, key, self.settings.expiration, data)
        except Exception as exc:
            self._log(logging.WARNING, "ssr cache put failed for %s: %s", key, exc)

    def _bounded(self, fn: Callable, *args):
        if self._executor is None:
            return fn(*args)
        future = self._executor.submit(fn, *args)
        try:
            return future.result(timeout=self.settings.cache_timeout)
        except FuturesTimeout:
            future.cancel()
            raise CacheTimeoutError(
                self.settings.cache.name,
                f"{fn.__name__} exceeded {self.settings.cache_timeout}s",
            )

    def _log(self, level: int, msg: str, *args) -> None:
        if self.settings.verbose:
            logger.log(level, msg, *args)


def _respond(status: int, body: bytes, content_type: Optional[str]) -> Response:
    return Response(body, status=status, content_type=content_type or DEFAULT_CONTENT_TYPE)
