"""
Flask application factory for the SSR gate demo host.

Usage:
    from app import create_app
    app = create_app()

The host app itself is a plain single-page app (static/index.html renders
its content in the browser). The SSR gate sits in front of it so crawlers
get the page as rendered by the render backend instead.

Tests inject their own settings (fake cache, fake backend) via `settings`,
or turn the gate off with config_override={'SSR_ENABLED': False}.
"""
import atexit
import logging
from pathlib import Path

from flask import Flask, send_from_directory
from werkzeug.middleware.proxy_fix import ProxyFix

from routes.health import health_bp
from services.health import HealthChecker
from ssr.middleware import install
from ssr.settings import SSRSettings, settings_from_config

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


def create_app(config_override: dict = None, settings: SSRSettings = None, proxy=None):
    """
    Create and configure the Flask application.

    Args:
        config_override: Optional dict of Flask config values to apply.
                         Primarily used in tests to inject TESTING=True etc.
        settings:        SSR settings; built from config/default.yaml + env
                         when omitted and SSR_ENABLED is true.
        proxy:           Optional RenderProxy to use instead of the default.

    Returns:
        Flask: configured app. The gate (if any) is app.extensions['ssr_gate'].
    """
    app = Flask(
        __name__,
        # index.html is served by an explicit route
        static_folder=None,
    )
    app.config['SSR_ENABLED'] = True

    # Apply test / caller overrides last so they take precedence
    if config_override:
        app.config.update(config_override)

    if settings is None and app.config['SSR_ENABLED']:
        from config.loader import config
        settings = settings_from_config(config)

    app.extensions['health_checker'] = HealthChecker(settings)
    app.register_blueprint(health_bp)

    @app.route('/')
    def index():
        return send_from_directory(STATIC_DIR, 'index.html')

    if settings is not None:
        gate = install(app, settings, proxy=proxy)
        app.extensions['ssr_gate'] = gate
        if proxy is None:
            # the gate built its own proxy; stop its worker pools on exit
            atexit.register(gate.proxy.close)
    else:
        logger.info('SSR gate disabled: all requests go to the app')

    # ProxyFix wraps the gate, so cache keys and render URLs use the public
    # scheme/host from one level of X-Forwarded-* headers (nginx / LB).
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    return app
