"""
Exceptions raised by remote_image.

Transport failures are not wrapped: httpx exceptions reach the caller as-is.
"""


class RemoteImageError(Exception):
    """Base class for remote_image errors."""


class InvalidImageDataError(RemoteImageError):
    """Image data was fetched but is invalid or corrupted."""

    def __init__(self, url=None, size: int = 0):
        self.url = url
        self.size = size
        target = f" from {url}" if url else ""
        super().__init__(f"Invalid image data ({size} bytes){target}")
