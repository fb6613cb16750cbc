"""
Bot / headless detection.

A request is served pre-rendered when it is NOT already a render backend
request (no headless marker) AND it comes from a bot: the override query
parameter is present, or the User-Agent classifies to one of the
configured bot families. Only parameter presence matters; values are
ignored.
"""

from ssr.settings import SSRSettings


class Detector:
    """Stateless per-request verdicts computed from SSRSettings."""

    def __init__(self, settings: SSRSettings):
        self.settings = settings
        self._bots = frozenset(settings.user_agents)

    def is_headless(self, request) -> bool:
        """True when the request carries the headless marker parameter."""
        return self.settings.headless_param in request.args

    def is_bot(self, request) -> bool:
        """True for the override parameter or a configured bot UA family."""
        if self.settings.override_enabled and self.settings.override_param in request.args:
            return True
        return self.family(request) in self._bots

    def family(self, request) -> str:
        return self.settings.classifier.classify(request.headers.get("User-Agent", ""))

    def should_render(self, request) -> bool:
        # Headless first: requests issued by the render backend must never loop back
        return not self.is_headless(request) and self.is_bot(request)
