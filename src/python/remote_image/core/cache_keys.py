"""remote_image.core.cache_keys

Small helpers for building stable, explicit response cache keys.

We keep keys as plain tuples so they remain cheap to hash and work with the
LRU response cache.

Key goals:
- Requests that differ only in URL spelling (host case, default port,
  fragment) share one entry
- Keep the method in the key so non-GET entries can never collide with GETs
"""

from __future__ import annotations

from typing import Union

import httpx

_DEFAULT_PORTS = {"http": 80, "https": 443}

URLLike = Union[str, httpx.URL]


def normalize_url(url: URLLike) -> str:
    """Canonical string form of ``url`` used for cache lookups."""
    parsed = httpx.URL(url) if not isinstance(url, httpx.URL) else url
    scheme = parsed.scheme.lower()
    host = parsed.host.lower()
    port = parsed.port
    if port is not None and _DEFAULT_PORTS.get(scheme) == port:
        port = None
    netloc = host if port is None else f"{host}:{port}"
    path = parsed.raw_path.decode("ascii") or "/"
    return f"{scheme}://{netloc}{path}"


def make_response_cache_key(url: URLLike, method: str = "GET") -> tuple:
    """Key for a stored HTTP response.

    Structure:
        ("response", <METHOD>, <normalized_url>)
    """

    return ("response", method.upper(), normalize_url(url))


def is_response_cache_key(key: tuple) -> bool:
    return bool(key) and len(key) == 3 and key[0] == "response"


def parse_response_cache_key(key: tuple) -> tuple:
    if not is_response_cache_key(key):
        raise ValueError(f"Not a response cache key: {key!r}")

    _, method, url = key
    return method, url
