"""
HTTP caching transport for remote_image.

RFC 9111 caching is done by Hishel's ``AsyncCacheTransport``. This module
plugs our ``ResponseCache`` in as its storage and wraps it so each request can
learn, through a ``CacheListener`` attached as a request extension, whether
the final response came from the local store.
"""

import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

import hishel
import httpcore
import httpx

from ..config import CONFIG
from ..logger import get_logger
from .cache_keys import make_response_cache_key
from .models import CachedResponse
from .response_cache import ResponseCache

_logger = get_logger("transport")

CACHE_POLICY_EXTENSION = "remote_image.cache_policy"
CACHE_LISTENER_EXTENSION = "remote_image.cache_listener"

# Request/response extensions understood by Hishel
HISHEL_CACHE_DISABLED = "cache_disabled"
HISHEL_FROM_CACHE = "from_cache"


class CachePolicy(Enum):
    """Per-request cache policy."""
    USE_PROTOCOL_CACHE_POLICY = "use_protocol_cache_policy"
    RELOAD_IGNORING_LOCAL_CACHE = "reload_ignoring_local_cache"

    @classmethod
    def for_skip_cache(cls, skip_cache: bool) -> 'CachePolicy':
        return cls.RELOAD_IGNORING_LOCAL_CACHE if skip_cache else cls.USE_PROTOCOL_CACHE_POLICY


class CacheListener:
    """Captures, at request completion, whether the response was served from the local cache.

    The transport may report from any thread; the flag is set at most once.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._did_load_from_cache: Optional[bool] = None

    def record(self, did_load_from_cache: bool) -> bool:
        """Set the flag. Returns False if it was already set."""
        with self._lock:
            if self._did_load_from_cache is not None:
                return False
            self._did_load_from_cache = bool(did_load_from_cache)
            return True

    @property
    def is_set(self) -> bool:
        with self._lock:
            return self._did_load_from_cache is not None

    @property
    def did_load_from_cache(self) -> bool:
        with self._lock:
            return bool(self._did_load_from_cache)


class ResponseCacheStorage(hishel.AsyncBaseStorage):
    """Hishel storage backend keeping entries in a ``ResponseCache``.

    Hishel addresses entries by its own opaque key; the ``ResponseCache`` is
    keyed by normalised URL so that controllers can read it synchronously.
    """

    def __init__(self, cache: ResponseCache):
        super().__init__()
        self.cache = cache
        self._keys: Dict[str, tuple] = {}
        self._keys_lock = threading.Lock()

    async def store(self, key: str, response: httpcore.Response, request: httpcore.Request,
                    metadata: Optional[Dict[str, Any]] = None) -> None:
        if metadata is None:
            metadata = {
                "cache_key": key,
                "created_at": datetime.now(timezone.utc),
                "number_of_uses": 0,
            }
        content = await response.aread()
        entry = CachedResponse.from_httpcore(key, response, request, content, metadata)
        cache_key = make_response_cache_key(entry.url, entry.request_method)
        with self._keys_lock:
            self._keys[key] = cache_key
        self.cache.put(cache_key, entry)
        _logger.debug("cache store: url=%s size=%s", entry.url, entry.size)

    async def retrieve(self, key: str) -> Optional[Tuple[httpcore.Response, httpcore.Request, Dict[str, Any]]]:
        entry = self._entry(key)
        if entry is None:
            return None
        return entry.to_httpcore()

    async def update_metadata(self, key: str, response: httpcore.Response, request: httpcore.Request,
                              metadata: Dict[str, Any]) -> None:
        entry = self._entry(key)
        if entry is not None:
            entry.metadata = metadata

    async def remove(self, key: Union[str, httpcore.Response]) -> None:
        if isinstance(key, httpcore.Response):
            key = key.extensions["cache_metadata"]["cache_key"]
        with self._keys_lock:
            cache_key = self._keys.pop(key, None)
        if cache_key is not None:
            self.cache.remove(cache_key)

    async def aclose(self) -> None:
        pass

    def _entry(self, key: str) -> Optional[CachedResponse]:
        with self._keys_lock:
            cache_key = self._keys.get(key)
        if cache_key is None:
            return None
        entry = self.cache.get(cache_key)
        # Evicted, or replaced by a spelling of the URL that hashes differently
        if entry is None or entry.cache_key != key:
            with self._keys_lock:
                self._keys.pop(key, None)
            return None
        return entry


def build_cache_controller() -> hishel.Controller:
    """Hishel controller for a private cache of GET image responses."""
    return hishel.Controller(
        cacheable_methods=["GET"],
        cacheable_status_codes=list(CONFIG["CACHEABLE_STATUS_CODES"]),
        allow_heuristics=CONFIG["CACHE_ALLOW_HEURISTICS"],
    )


class CachingTransport(httpx.AsyncBaseTransport):
    """Hishel cache transport over a ``ResponseCache``, reporting cache use per request."""

    def __init__(self, cache: ResponseCache, transport: Optional[httpx.AsyncBaseTransport] = None,
                 controller: Optional[hishel.Controller] = None):
        self.cache = cache
        self.storage = ResponseCacheStorage(cache)
        self.transport = hishel.AsyncCacheTransport(
            transport=transport if transport is not None else httpx.AsyncHTTPTransport(),
            storage=self.storage,
            controller=controller if controller is not None else build_cache_controller(),
        )

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        policy = request.extensions.get(CACHE_POLICY_EXTENSION, CachePolicy.USE_PROTOCOL_CACHE_POLICY)
        listener: Optional[CacheListener] = request.extensions.get(CACHE_LISTENER_EXTENSION)

        if policy is CachePolicy.RELOAD_IGNORING_LOCAL_CACHE:
            request.extensions[HISHEL_CACHE_DISABLED] = True

        response = await self.transport.handle_async_request(request)
        from_cache = bool(response.extensions.get(HISHEL_FROM_CACHE, False))
        _logger.debug("response: url=%s status=%s policy=%s from_cache=%s",
                      request.url, response.status_code, policy.value, from_cache)

        # Redirect hops are not the final response; the listener reports the last hop.
        if listener is not None and not response.is_redirect:
            listener.record(from_cache)
        return response

    async def aclose(self) -> None:
        await self.transport.aclose()
