"""Tests for package logging setup."""

import logging
from types import SimpleNamespace

import pytest

from contentplatform.core.logger import PACKAGE_LOGGER, configure_from_settings, setup_logger


@pytest.fixture
def package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    original_level = logger.level
    yield logger
    setup_logger(to_file=False)
    logger.setLevel(original_level)


def _owned(logger):
    return [h for h in logger.handlers if getattr(h, "_contentplatform_handler", False)]


def test_reconfiguring_replaces_handlers(package_logger):
    setup_logger(level="debug")
    setup_logger(level="WARNING")
    assert package_logger.level == logging.WARNING
    assert len(_owned(package_logger)) == 1


def test_file_logging(package_logger, tmp_path):
    settings = SimpleNamespace(log_level="INFO", log_format=None, log_to_file=True, log_dir=str(tmp_path))
    configure_from_settings(settings)
    logging.getLogger("contentplatform.db.seed").info("catalog ready")
    for handler in _owned(package_logger):
        handler.flush()

    content = (tmp_path / "contentplatform.log").read_text()
    assert "[INFO] [contentplatform.db.seed] catalog ready" in content


def test_invalid_level(package_logger):
    with pytest.raises(ValueError, match="Invalid log level"):
        setup_logger(level="LOUD")
