"""Tests for setup_logging level and format selection."""

from __future__ import annotations

import logging
import os
from unittest.mock import patch

import pytest
import structlog

from autotypings.core.logging import setup_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestSetupLogging:
    def test_quiet_by_default(self):
        with patch.dict(os.environ, {}, clear=True):
            setup_logging()
        assert logging.getLogger("autotypings").level == logging.WARNING

    def test_verbose_enables_debug(self):
        with patch.dict(os.environ, {}, clear=True):
            setup_logging(verbose=True)
        assert logging.getLogger("autotypings").level == logging.DEBUG

    def test_env_level_wins(self):
        with patch.dict(os.environ, {"AUTOTYPINGS_LOG_LEVEL": "info"}, clear=True):
            setup_logging(verbose=True)
        assert logging.getLogger("autotypings").level == logging.INFO
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_json_format(self):
        with patch.dict(os.environ, {"AUTOTYPINGS_LOG_FORMAT": "json"}, clear=True):
            setup_logging()
        formatters = [
            h.formatter
            for h in logging.getLogger().handlers
            if isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)
        ]
        assert len(formatters) == 1
        assert isinstance(formatters[0].processors[-1], structlog.processors.JSONRenderer)
