"""Tests for log.py - Logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from deskcalc.log import setup_logging


@pytest.fixture
def clean_logger():
    logger = logging.getLogger("deskcalc")
    saved_handlers, saved_level = list(logger.handlers), logger.level
    logger.handlers = [h for h in logger.handlers if not isinstance(h, RichHandler)]
    yield logger
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_installs_rich_handler(self, clean_logger):
        logger = setup_logging("INFO")
        assert logger is clean_logger
        assert logger.level == logging.INFO
        assert sum(isinstance(h, RichHandler) for h in logger.handlers) == 1

    def test_idempotent(self, clean_logger):
        setup_logging("INFO")
        setup_logging("debug")
        assert clean_logger.level == logging.DEBUG
        assert sum(isinstance(h, RichHandler) for h in clean_logger.handlers) == 1
