"""
Caching HTTP session for remote_image.
Wraps an httpx.AsyncClient on a Hishel-backed caching transport so every
fetch also reports whether the response was served from the local cache.
"""

import threading
from typing import Optional

import httpx

from ..config import CONFIG
from ..core.caching_transport import (
    CACHE_LISTENER_EXTENSION,
    CACHE_POLICY_EXTENSION,
    CacheListener,
    CachePolicy,
    CachingTransport,
)
from ..core.cache_keys import URLLike
from ..core.models import FetchResult
from ..core.response_cache import ResponseCache, shared_cache
from ..logger import get_logger

_logger = get_logger("session")


class CachingSession:
    """HTTP session backed by a ``ResponseCache``."""

    def __init__(self, cache: ResponseCache, transport: Optional[httpx.AsyncBaseTransport] = None,
                 timeout: float = CONFIG["REQUEST_TIMEOUT"]):
        """
        Initialize the session.

        Args:
            cache: Response cache shared with the caching transport
            transport: Network transport under the cache; defaults to httpx.AsyncHTTPTransport
            timeout: Request timeout in seconds
        """
        self.cache = cache
        self.transport = CachingTransport(cache, transport)
        self.client = httpx.AsyncClient(
            transport=self.transport,
            timeout=timeout,
            follow_redirects=CONFIG["FOLLOW_REDIRECTS"],
            headers={"User-Agent": CONFIG["USER_AGENT"]},
        )

    @classmethod
    def with_cache(cls, cache: ResponseCache, **kwargs) -> 'CachingSession':
        """Build a session with default transport settings on the given cache."""
        return cls(cache, **kwargs)

    async def fetch_with_cache_info(self, url: URLLike, skip_cache: bool = False) -> FetchResult:
        """GET ``url`` and report whether the response was served from the local cache.

        Args:
            url: URL to load data from
            skip_cache: Whether or not to skip loading data from the local cache

        Returns:
            FetchResult of (data, response, did_load_from_cache)

        Transport errors propagate unchanged; HTTP error statuses are returned, not raised.
        """
        if not url:
            raise ValueError("URL must not be empty")

        listener = CacheListener()
        policy = CachePolicy.for_skip_cache(skip_cache)
        request = self.client.build_request(
            "GET",
            url,
            extensions={
                CACHE_POLICY_EXTENSION: policy,
                CACHE_LISTENER_EXTENSION: listener,
            },
        )
        response = await self.client.send(request)
        data = response.content
        _logger.debug("fetched: url=%s status=%s bytes=%s from_cache=%s",
                      url, response.status_code, len(data), listener.did_load_from_cache)
        return FetchResult(data, response, listener.did_load_from_cache)

    def cache_lookup(self, url: URLLike) -> Optional[bytes]:
        """Synchronous, read-only lookup in the session's cache."""
        return self.cache.cached_data_for(url)

    async def aclose(self):
        await self.client.aclose()

    async def __aenter__(self) -> 'CachingSession':
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()


_shared_session: Optional[CachingSession] = None
_shared_lock = threading.Lock()


def shared_session() -> CachingSession:
    """Process-wide default session on ``shared_cache()``, created on first use."""
    global _shared_session
    with _shared_lock:
        if _shared_session is None:
            _shared_session = CachingSession(shared_cache())
            _logger.debug("shared session created")
        return _shared_session


def reset_shared_session():
    """Forget the shared session. The caller is responsible for closing it."""
    global _shared_session
    with _shared_lock:
        _shared_session = None
