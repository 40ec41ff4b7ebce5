"""
Image decoding via Pillow.
"""

import io
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from ..logger import get_logger
from .models import RemoteImageHandle

_logger = get_logger("decoder")


def decode_image(data: bytes, scale: float = 1.0) -> Optional[RemoteImageHandle]:
    """Decode raw bytes into a ``RemoteImageHandle``.

    Returns None when the data is not a readable image.
    """
    if scale <= 0:
        raise ValueError("Image scale must be positive")
    if not data:
        return None

    try:
        with io.BytesIO(data) as image_stream:
            img = ImageOps.exif_transpose(Image.open(image_stream))
            img.load()
    except UnidentifiedImageError:
        _logger.debug("decode failed: unidentified image (%s bytes)", len(data))
        return None
    except Image.DecompressionBombError:
        _logger.warning("decode refused: decompression bomb (%s bytes)", len(data))
        return None
    except MemoryError:
        _logger.warning("decode failed: out of memory (%s bytes)", len(data))
        return None
    except Exception as e:
        # Truncated or corrupt payloads
        _logger.debug("decode failed: %s - %s", type(e).__name__, e)
        return None

    return RemoteImageHandle(image=img, scale=scale)
