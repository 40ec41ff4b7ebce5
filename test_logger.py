"""
Tests for the project logger setup.
"""

import logging
import sys

from remote_image.logger import get_logger, setup_logger
from remote_image.models import RemoteImageConfiguration


def _stderr_handlers(logger):
    return [h for h in logger.handlers
            if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr]


def test_setup_keeps_single_handler(monkeypatch):
    monkeypatch.delenv("REMOTE_IMAGE_LOG_LEVEL", raising=False)
    monkeypatch.delenv("REMOTE_IMAGE_LOG_CATS", raising=False)
    name = "remote_image_logger_test_single"
    setup_logger(name=name)
    logger = setup_logger(name=name)
    assert len(_stderr_handlers(logger)) == 1
    assert logger.propagate is False
    assert logger.level == logging.INFO


def test_env_level_override(monkeypatch):
    monkeypatch.setenv("REMOTE_IMAGE_LOG_LEVEL", "debug")
    logger = setup_logger(name="remote_image_logger_test_level")
    assert logger.level == logging.DEBUG

    monkeypatch.setenv("REMOTE_IMAGE_LOG_LEVEL", "nonsense")
    logger = setup_logger(level=logging.WARNING, name="remote_image_logger_test_level")
    assert logger.level == logging.WARNING


def test_category_filter(monkeypatch):
    monkeypatch.setenv("REMOTE_IMAGE_LOG_CATS", "controller, transport")
    logger = setup_logger(name="remote_image_logger_test_cats")
    handler = _stderr_handlers(logger)[0]

    def record(name):
        return logging.LogRecord(name, logging.INFO, __file__, 1, "msg", None, None)

    assert handler.filter(record("remote_image.controller"))
    assert handler.filter(record("remote_image.transport"))
    assert not handler.filter(record("remote_image.cache"))

    monkeypatch.delenv("REMOTE_IMAGE_LOG_CATS")
    setup_logger(name="remote_image_logger_test_cats")
    assert handler.filter(record("remote_image.cache"))


def test_get_logger_returns_child():
    assert get_logger("controller").name == "remote_image.controller"
    assert get_logger().name == "remote_image"


def test_building_configuration_keeps_project_log_level(monkeypatch):
    monkeypatch.delenv("REMOTE_IMAGE_LOG_LEVEL", raising=False)
    base = setup_logger(logging.DEBUG)
    try:
        configuration = RemoteImageConfiguration()
        get_logger("transport")
        assert base.level == logging.DEBUG
        assert configuration.logger.getEffectiveLevel() == logging.DEBUG
    finally:
        setup_logger(logging.INFO)
