"""
Tests for Pillow-based image decoding.
"""

import io

import pytest
from PIL import Image

from remote_image.core.decoder import decode_image


def test_decode_valid_png(png_bytes):
    handle = decode_image(png_bytes)
    assert handle is not None
    assert handle.pixel_size == (8, 6)
    assert handle.size == (8.0, 6.0)
    assert handle.mode == "RGB"


def test_decode_applies_scale(png_bytes):
    handle = decode_image(png_bytes, scale=2.0)
    assert handle.scale == 2.0
    assert handle.pixel_size == (8, 6)
    assert handle.size == (4.0, 3.0)


def test_decode_jpeg():
    buffer = io.BytesIO()
    Image.new("RGB", (5, 5), color="blue").save(buffer, format="JPEG")
    handle = decode_image(buffer.getvalue())
    assert handle is not None
    assert handle.pixel_size == (5, 5)


def test_decode_rejects_text_payload():
    assert decode_image(b"<html><body>Not an image</body></html>") is None


def test_decode_rejects_empty_data():
    assert decode_image(b"") is None


def test_decode_rejects_truncated_image(png_bytes):
    assert decode_image(png_bytes[: len(png_bytes) // 2]) is None


def test_decode_rejects_non_positive_scale(png_bytes):
    with pytest.raises(ValueError):
        decode_image(png_bytes, scale=0)
