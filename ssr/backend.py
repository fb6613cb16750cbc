"""
Render backend client.

The render backend is an HTTP service that loads a URL in a headless
browser and returns the resulting HTML:

    GET <render_url>/ssr?url=<percent-encoded page URL>

The status code and body are relayed as-is. One call must finish (connect,
headers and the whole body) within the configured timeout, measured on the
wall clock: a backend that trickles its body does not extend it.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote_plus

import requests

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 8 * 1024
_FETCH_WORKERS = 16
DEFAULT_CONTENT_TYPE = "text/html; charset=utf-8"


@dataclass
class RenderResult:
    status: int
    body: bytes
    content_type: str = DEFAULT_CONTENT_TYPE
    elapsed_ms: float = 0.0


class RenderError(Exception):
    """The render backend could not be reached or its body could not be read."""
    pass


class RenderTimeoutError(RenderError):
    """The render backend did not answer within the deadline."""
    pass


class RenderBackend:
    """Thin requests-based client for the render service."""

    def __init__(self, render_url: str, timeout: float = 30.0,
                 session: Optional[requests.Session] = None):
        self.render_url = render_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        # each fetch runs on a worker so the caller can wait on a wall clock
        self._executor = ThreadPoolExecutor(
            max_workers=_FETCH_WORKERS, thread_name_prefix="ssr-render"
        )

    def build_url(self, target_url: str) -> str:
        return f"{self.render_url}/ssr?url={quote_plus(target_url)}"

    def fetch(self, target_url: str) -> RenderResult:
        """Render target_url. Raises RenderError / RenderTimeoutError.

        Connect, headers and body together must finish within self.timeout.
        On expiry the in-flight response is closed and the worker stops at
        its next chunk.
        """
        url = self.build_url(target_url)
        start = time.monotonic()
        deadline = start + self.timeout
        pending: Dict[str, Any] = {}

        future = self._executor.submit(self._get, url, deadline, pending)
        try:
            result = future.result(timeout=max(deadline - time.monotonic(), 0))
        except FuturesTimeout:
            pending["expired"] = True
            future.cancel()
            resp = pending.get("response")
            if resp is not None:
                resp.close()
            raise RenderTimeoutError(f"render backend timed out after {self.timeout}s")

        result.elapsed_ms = (time.monotonic() - start) * 1000
        return result

    def close(self) -> None:
        self._executor.shutdown(wait=False)

    def _get(self, url: str, deadline: float, pending: Dict[str, Any]) -> RenderResult:
        try:
            resp = self.session.get(url, timeout=self.timeout, stream=True)
        except requests.Timeout as exc:
            raise RenderTimeoutError(f"render backend timed out after {self.timeout}s: {exc}") from exc
        except requests.RequestException as exc:
            raise RenderError(f"render backend request failed: {exc}") from exc
        pending["response"] = resp

        try:
            chunks = []
            for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                chunks.append(chunk)
                if pending.get("expired") or time.monotonic() > deadline:
                    raise RenderTimeoutError(
                        f"render backend timed out after {self.timeout}s reading body"
                    )
        except requests.RequestException as exc:
            raise RenderError(f"render backend body read failed: {exc}") from exc
        finally:
            resp.close()

        return RenderResult(
            status=resp.status_code,
            body=b"".join(chunks),
            content_type=resp.headers.get("Content-Type") or DEFAULT_CONTENT_TYPE,
        )
