"""
Core package for remote_image.
"""

from .errors import RemoteImageError, InvalidImageDataError
from .models import RemoteImageHandle, CachedResponse, FetchResult
from .cache_keys import make_response_cache_key, normalize_url
from .response_cache import ResponseCache, shared_cache
from .caching_transport import CachePolicy, CacheListener, CachingTransport, ResponseCacheStorage
from .decoder import decode_image

__all__ = [
    'RemoteImageError',
    'InvalidImageDataError',
    'RemoteImageHandle',
    'CachedResponse',
    'FetchResult',
    'make_response_cache_key',
    'normalize_url',
    'ResponseCache',
    'shared_cache',
    'CachePolicy',
    'CacheListener',
    'CachingTransport',
    'ResponseCacheStorage',
    'decode_image',
]
