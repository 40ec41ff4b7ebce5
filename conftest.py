"""Pytest configuration and shared fixtures.

The controller is a QObject, so a single QCoreApplication is created for the
whole session before any test runs. Network access is replaced by an
in-process origin server mounted through ``httpx.MockTransport``.
"""

from __future__ import annotations

import asyncio
import io
from email.utils import formatdate
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from PIL import Image

# Make the src/python layout importable without an editable install.
sys.path.insert(0, str(Path(__file__).parent / "src" / "python"))

from remote_image.core.response_cache import ResponseCache  # noqa: E402
from remote_image.services.session import CachingSession  # noqa: E402

IMAGE_URL = "https://images.example.com/doggo.png"
TEXT_URL = "https://example.com/"
ERROR_URL = "https://offline.example.com/image.png"
CANCELLED_URL = "https://cancelled.example.com/image.png"

_APP: Any | None = None


def pytest_configure(config) -> None:  # noqa: ARG001
    """Ensure a QCoreApplication exists before collecting/running tests."""
    try:
        from PySide6.QtCore import QCoreApplication
    except ImportError:
        return

    global _APP
    app = QCoreApplication.instance()
    # Keep a strong ref so it isn't GC'd mid-session.
    _APP = app if app is not None else QCoreApplication([])


def make_png_bytes(size=(8, 6), color="red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=color).save(buffer, format="PNG")
    return buffer.getvalue()


class OriginServer:
    """Fake origin server: canned, dated routes, request log, optional hold."""

    def __init__(self):
        self.routes: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []
        self.holding = False

    def route(self, url: str, status_code: int = 200, content: bytes = b"",
              headers: Optional[Dict[str, str]] = None):
        def responder(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, headers=headers or {}, content=content)
        self.routes[url] = responder

    def route_handler(self, url: str, handler: Callable[[httpx.Request], httpx.Response]):
        self.routes[url] = handler

    def hits(self, url: str) -> int:
        return sum(1 for r in self.requests if str(r.url) == url)

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        while self.holding:
            await asyncio.sleep(0.005)
        responder = self.routes.get(str(request.url))
        if responder is None:
            response = httpx.Response(404, content=b"not found")
        else:
            response = responder(request)
        # Real origins date their responses; cache age is computed from it.
        if "date" not in response.headers:
            response.headers["Date"] = formatdate(usegmt=True)
        return response


@pytest.fixture
def png_bytes() -> bytes:
    return make_png_bytes()


@pytest.fixture
def origin(png_bytes) -> OriginServer:
    server = OriginServer()
    server.route(IMAGE_URL, content=png_bytes, headers={"Content-Type": "image/png"})
    server.route(TEXT_URL, content=b"<html><body>Not an image</body></html>",
                 headers={"Content-Type": "text/html"})

    def offline(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    def cancelled(request: httpx.Request) -> httpx.Response:
        raise asyncio.CancelledError()

    server.route_handler(ERROR_URL, offline)
    server.route_handler(CANCELLED_URL, cancelled)
    return server


@pytest.fixture
def cache() -> ResponseCache:
    return ResponseCache(capacity=10, max_bytes=1024 * 1024)


@pytest.fixture
def session(cache, origin) -> CachingSession:
    return CachingSession(cache, transport=httpx.MockTransport(origin.handle))
