"""
Configuration service implementation for remote_image.
Handles persistent settings and builds configuration objects from them.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from ..config import CONFIG
from ..core.response_cache import ResponseCache
from ..logger import get_logger
from ..models import RemoteImageConfiguration

_logger = get_logger("config")

DEFAULT_SETTINGS: Dict[str, Any] = {
    "skip_cache": False,
    "scale": CONFIG["DEFAULT_SCALE"],
    "disable_animation_with_cached_response": True,
    "animation": {
        "duration_ms": CONFIG["ANIMATION_DURATION_MS"],
        "easing": CONFIG["ANIMATION_EASING"],
        "delay_ms": 0,
    },
    "cache_capacity": CONFIG["CACHE_CAPACITY"],
    "cache_max_bytes": CONFIG["CACHE_MAX_BYTES"],
}


class ConfigService:
    """Service for managing remote_image settings."""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or CONFIG["SETTINGS_PATH"]
        self.settings: Dict[str, Any] = {}
        self._load_settings()

    def _load_settings(self):
        """Load settings from the configuration file."""
        try:
            if os.path.exists(self.config_file):
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
                if not isinstance(loaded, dict):
                    raise ValueError("settings root must be an object")
                self.settings = loaded
        except (OSError, ValueError) as e:
            _logger.warning("Could not load settings from %s: %s", self.config_file, e)
            self.settings = {}

    def _save_settings(self):
        """Save settings to the configuration file."""
        try:
            config_path = Path(self.config_file)
            config_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=2)
        except OSError as e:
            _logger.warning("Could not save settings to %s: %s", self.config_file, e)

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a setting, falling back to the built-in defaults."""
        if default is None:
            default = DEFAULT_SETTINGS.get(key)
        return self.settings.get(key, default)

    def set_setting(self, key: str, value: Any):
        self.settings[key] = value

    def save_settings(self):
        """Save all settings to persistent storage."""
        self._save_settings()

    def get_all_settings(self) -> Dict[str, Any]:
        """All settings merged over the defaults."""
        merged = dict(DEFAULT_SETTINGS)
        merged.update(self.settings)
        return merged

    def update_settings(self, settings: Dict[str, Any]):
        self.settings.update(settings)

    def build_configuration(self) -> RemoteImageConfiguration:
        """Create a RemoteImageConfiguration from the current settings."""
        return RemoteImageConfiguration.from_dict(self.get_all_settings())

    def build_cache(self) -> ResponseCache:
        """Create a ResponseCache sized from the current settings."""
        return ResponseCache(
            capacity=int(self.get_setting("cache_capacity")),
            max_bytes=int(self.get_setting("cache_max_bytes")),
        )
