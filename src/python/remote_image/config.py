"""
Configuration constants for remote_image.
"""

import os
from pathlib import Path

DEFAULT_CACHE_CAPACITY = 100
DEFAULT_CACHE_MAX_BYTES = 50 * 1024 * 1024  # 50MB

CONFIG = {
    # Response cache
    "CACHE_CAPACITY": DEFAULT_CACHE_CAPACITY,
    "CACHE_MAX_BYTES": DEFAULT_CACHE_MAX_BYTES,
    # Responses without explicit freshness information get heuristic freshness.
    "CACHE_ALLOW_HEURISTICS": True,
    "CACHEABLE_STATUS_CODES": (200,),

    # Network
    "REQUEST_TIMEOUT": 30.0,
    "USER_AGENT": "remote-image/1.0",
    "FOLLOW_REDIRECTS": True,

    # Decoding
    "DEFAULT_SCALE": 1.0,

    # Phase transition animation
    "ANIMATION_DURATION_MS": 350,
    "ANIMATION_EASING": "ease_in_out",

    # Persistent settings
    "SETTINGS_PATH": str(Path.home() / ".config" / "remote_image" / "settings.json"),
    "LOG_LEVEL_ENV": "REMOTE_IMAGE_LOG_LEVEL",
    "LOG_CATS_ENV": "REMOTE_IMAGE_LOG_CATS",
}

CONFIG["SETTINGS_PATH"] = os.getenv("REMOTE_IMAGE_SETTINGS", CONFIG["SETTINGS_PATH"])


def format_size(size_bytes: int) -> str:
    """Format a byte count into a human-readable string."""
    KB = 1024.0
    MB = KB * 1024.0
    GB = MB * 1024.0

    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / KB:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / MB:.1f} MB"
    else:
        return f"{size_bytes / GB:.1f} GB"
