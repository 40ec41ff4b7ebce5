"""
Data models for the remote_image core layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

import httpcore
import httpx
from PIL import Image


@dataclass
class RemoteImageHandle:
    """A decoded, renderable image."""
    image: Image.Image
    scale: float = 1.0

    @property
    def pixel_size(self) -> Tuple[int, int]:
        return self.image.size

    @property
    def size(self) -> Tuple[float, float]:
        """Size in points (pixels divided by scale)."""
        width, height = self.image.size
        return width / self.scale, height / self.scale

    @property
    def mode(self) -> str:
        return self.image.mode


@dataclass
class CachedResponse:
    """A response stored by the HTTP cache, with the request it answered."""
    url: str
    status_code: int
    headers: List[Tuple[bytes, bytes]]
    content: bytes
    request_method: str = "GET"
    request_headers: List[Tuple[bytes, bytes]] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    cache_key: str = ""

    @property
    def size(self) -> int:
        return len(self.content)

    def header(self, name: str) -> Optional[str]:
        lowered = name.lower().encode("ascii")
        for key, value in self.headers:
            if key.lower() == lowered:
                return value.decode("latin-1")
        return None

    @classmethod
    def from_httpcore(cls, cache_key: str, response: httpcore.Response, request: httpcore.Request,
                      content: bytes, metadata: Dict[str, Any]) -> 'CachedResponse':
        """Snapshot a request/response pair handed over by the cache transport."""
        return cls(
            url=bytes(request.url).decode("ascii"),
            status_code=response.status,
            headers=list(response.headers),
            content=content,
            request_method=request.method.decode("ascii"),
            request_headers=list(request.headers),
            metadata=metadata,
            cache_key=cache_key,
        )

    def to_httpcore(self) -> Tuple[httpcore.Response, httpcore.Request, Dict[str, Any]]:
        """Rebuild the stored pair in the shape the cache transport expects."""
        response = httpcore.Response(self.status_code, headers=list(self.headers), content=self.content)
        request = httpcore.Request(self.request_method, self.url, headers=list(self.request_headers))
        return response, request, self.metadata


class FetchResult(NamedTuple):
    """Result of ``CachingSession.fetch_with_cache_info``."""
    data: bytes
    response: httpx.Response
    did_load_from_cache: bool
