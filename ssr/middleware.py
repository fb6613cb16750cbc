"""
SSR gate WSGI middleware.

Wraps any WSGI application the same way werkzeug's ProxyFix does:

    from ssr.middleware import SSRMiddleware
    app.wsgi_app = SSRMiddleware(app.wsgi_app, settings)

Bot requests (see ssr.detector) are answered by the render proxy; every
other request reaches the wrapped application untouched.
"""

import logging
from typing import Optional

from werkzeug.wrappers import Request

from ssr.detector import Detector
from ssr.proxy import RenderProxy
from ssr.settings import SSRSettings

logger = logging.getLogger(__name__)


class SSRMiddleware:
    """Route bot traffic to the render proxy, everything else to wsgi_app."""

    def __init__(self, wsgi_app, settings: SSRSettings,
                 proxy: Optional[RenderProxy] = None):
        self.wsgi_app = wsgi_app
        self.settings = settings
        self.detector = Detector(settings)
        self.proxy = proxy or RenderProxy(settings)

    def __call__(self, environ, start_response):
        request = Request(environ)
        if self.detector.should_render(request):
            response = self.proxy.serve(request)
            return response(environ, start_response)
        return self.wsgi_app(environ, start_response)


def install(app, settings: SSRSettings, proxy: Optional[RenderProxy] = None) -> SSRMiddleware:
    """Wrap a Flask app's WSGI callable with the SSR gate and return the gate.

    When proxy is omitted the gate builds its own RenderProxy, which holds
    worker pools; call gate.proxy.close() on shutdown. A proxy passed in
    stays owned by the caller.
    """
    gate = SSRMiddleware(app.wsgi_app, settings, proxy=proxy)
    app.wsgi_app = gate
    logger.info("SSR gate installed (render_url=%s, verbose=%s)", settings.render_url, settings.verbose)
    return gate
