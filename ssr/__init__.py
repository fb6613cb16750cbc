"""Server-side rendering gate for bot traffic.

    from ssr import install, new_settings
    install(app, new_settings("https://render.example.com"))
"""

from ssr.backend import RenderBackend, RenderError, RenderResult, RenderTimeoutError
from ssr.classifier import TokenClassifier, UAParserClassifier, UserAgentClassifier
from ssr.detector import Detector
from ssr.middleware import SSRMiddleware, install
from ssr.proxy import RenderProxy
from ssr.settings import SSRSettings, new_settings, settings_from_config

__all__ = [
    "Detector",
    "RenderBackend",
    "RenderError",
    "RenderProxy",
    "RenderResult",
    "RenderTimeoutError",
    "SSRMiddleware",
    "SSRSettings",
    "TokenClassifier",
    "UAParserClassifier",
    "UserAgentClassifier",
    "install",
    "new_settings",
    "settings_from_config",
]
