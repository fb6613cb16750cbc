"""
Cached page envelope.

Layout of a cache value:

    SSR1\\n{"status": 200, "content_type": "text/html"}\\n<body bytes>

Values without the magic prefix are treated as a bare body served with
status 200 and no content type.
"""

import json
from dataclasses import dataclass
from typing import Optional

MAGIC = b"SSR1\n"


@dataclass(frozen=True)
class CachedPage:
    status: int
    body: bytes
    content_type: Optional[str] = None


def encode(page: CachedPage) -> bytes:
    header = json.dumps(
        {"status": page.status, "content_type": page.content_type},
        separators=(",", ":"),
    ).encode("utf-8")
    return MAGIC + header + b"\n" + page.body


def decode(data: bytes) -> CachedPage:
    if not data.startswith(MAGIC):
        return CachedPage(status=200, body=data)
    header, sep, body = data[len(MAGIC):].partition(b"\n")
    if not sep:
        return CachedPage(status=200, body=data)
    try:
        meta = json.loads(header)
        status = int(meta["status"])
    except (ValueError, KeyError, TypeError):
        return CachedPage(status=200, body=data)
    return CachedPage(status=status, body=body, content_type=meta.get("content_type"))
