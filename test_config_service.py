"""
Tests for persistent settings and the objects built from them.
"""

import json

import pytest

from remote_image.config import format_size
from remote_image.models import AnimationSpec, RemoteImageConfiguration
from remote_image.services import ConfigService, ConfigServiceInterface


def test_defaults_without_settings_file(tmp_path):
    service = ConfigService(str(tmp_path / "missing.json"))
    assert service.settings == {}
    assert service.get_setting("skip_cache") is False
    assert service.get_setting("cache_capacity") == 100
    assert service.get_setting("unknown", "fallback") == "fallback"

    configuration = service.build_configuration()
    assert configuration == RemoteImageConfiguration()


def test_save_and_reload(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    service = ConfigService(str(path))
    service.set_setting("skip_cache", True)
    service.update_settings({"scale": 2.0, "animation": {"duration_ms": 100}})
    service.save_settings()

    assert json.loads(path.read_text(encoding="utf-8"))["skip_cache"] is True

    reloaded = ConfigService(str(path))
    configuration = reloaded.build_configuration()
    assert configuration.skip_cache is True
    assert configuration.scale == 2.0
    assert configuration.animation == AnimationSpec(duration_ms=100)
    assert configuration.disable_animation_with_cached_response is True


def test_corrupt_settings_fall_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    assert ConfigService(str(path)).settings == {}

    path.write_text("[1, 2, 3]", encoding="utf-8")
    assert ConfigService(str(path)).settings == {}


def test_build_cache_uses_settings(tmp_path):
    service = ConfigService(str(tmp_path / "settings.json"))
    service.update_settings({"cache_capacity": 3, "cache_max_bytes": 2048})
    cache = service.build_cache()
    assert cache.capacity == 3
    assert cache.max_bytes == 2048


def test_get_all_settings_merges_defaults(tmp_path):
    service = ConfigService(str(tmp_path / "settings.json"))
    service.set_setting("scale", 3.0)
    merged = service.get_all_settings()
    assert merged["scale"] == 3.0
    assert merged["skip_cache"] is False


def test_config_service_implements_interface(tmp_path):
    assert isinstance(ConfigService(str(tmp_path / "s.json")), ConfigServiceInterface)


def test_configuration_dict_roundtrip():
    configuration = RemoteImageConfiguration(skip_cache=True, scale=3.0,
                                             animation=AnimationSpec(duration_ms=10, easing="linear"))
    assert RemoteImageConfiguration.from_dict(configuration.to_dict()) == configuration


def test_configuration_rejects_bad_scale():
    with pytest.raises(ValueError):
        RemoteImageConfiguration(scale=0)


def test_format_size():
    assert format_size(512) == "512 B"
    assert format_size(2048) == "2.0 KB"
    assert format_size(5 * 1024 * 1024) == "5.0 MB"
