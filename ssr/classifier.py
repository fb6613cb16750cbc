"""
User-agent classifiers.

A classifier maps a raw User-Agent header to a browser/crawler family
name such as "Googlebot" or "Chrome". The detector compares that family
against the configured bot list, so classifiers must never raise: empty
or garbled input maps to DEFAULT_FAMILY.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional, Tuple

from ua_parser import user_agent_parser

DEFAULT_FAMILY = "Other"


class UserAgentClassifier(ABC):
    """Maps a User-Agent string to a family label."""

    @abstractmethod
    def classify(self, user_agent: str) -> str:
        pass


class UAParserClassifier(UserAgentClassifier):
    """Classifier backed by the ua-parser (uap-core) regex database."""

    def classify(self, user_agent: str) -> str:
        if not user_agent:
            return DEFAULT_FAMILY
        result = user_agent_parser.ParseUserAgent(user_agent)
        return result.get("family") or DEFAULT_FAMILY


class TokenClassifier(UserAgentClassifier):
    """Lightweight classifier: first family whose token occurs in the UA.

    Matching is case-insensitive; the returned family keeps the case it
    was configured with. Order matters, so list specific tokens first.
    """

    def __init__(self, families: Iterable = None):
        pairs = []
        for item in families or ():
            if isinstance(item, str):
                pairs.append((item, item))
            else:
                family, token = item
                pairs.append((family, token))
        self._tokens: Tuple[Tuple[str, str], ...] = tuple(
            (family, token.lower()) for family, token in pairs
        )

    def classify(self, user_agent: Optional[str]) -> str:
        if not user_agent:
            return DEFAULT_FAMILY
        ua_lower = user_agent.lower()
        for family, token in self._tokens:
            if token in ua_lower:
                return family
        return DEFAULT_FAMILY


def create_classifier(name: str, families: Iterable = None) -> UserAgentClassifier:
    """Build a classifier by config name ('uaparser' or 'token')."""
    if name == "uaparser":
        return UAParserClassifier()
    if name == "token":
        return TokenClassifier(families)
    raise ValueError(f"Unknown user-agent classifier: '{name}'. Available: ['uaparser', 'token']")


__all__ = [
    "DEFAULT_FAMILY",
    "UserAgentClassifier",
    "UAParserClassifier",
    "TokenClassifier",
    "create_classifier",
]
