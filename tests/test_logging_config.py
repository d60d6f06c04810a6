"""
test_logging_config.py — Tests for alfred/logging_config.py

Verifies Loguru setup and stdlib logging interception.

Called by: pytest
Depends on: alfred/logging_config.py
"""

import logging
import os
from unittest.mock import patch

import pytest
from loguru import logger

from alfred.logging_config import setup_logging


@pytest.fixture(autouse=True)
def _clean_loguru():
    """Remove all handlers before/after each test for isolation."""
    logger.remove()
    yield
    logger.remove()


def test_setup_logging_adds_handler():
    assert len(logger._core.handlers) == 0
    with patch.dict(os.environ, {"ENV": "DEV"}):
        setup_logging()
    assert len(logger._core.handlers) > 0


def test_stdlib_logging_intercepted():
    with patch.dict(os.environ, {"ENV": "DEV"}):
        setup_logging()

    messages = []
    logger.add(lambda m: messages.append(str(m)), format="{message}")

    logging.getLogger("alfred.test").warning("intercepted message")

    assert any("intercepted message" in m for m in messages)


def test_production_serializes_json(capsys):
    with patch.dict(os.environ, {"ENV": "PROD", "LOG_LEVEL": "INFO"}):
        setup_logging()
    logger.info("json line")
    out = capsys.readouterr().out
    assert '"text"' in out and "json line" in out


def test_explicit_level_overrides_environment(capsys):
    """Values passed from settings win over the process environment."""
    with patch.dict(os.environ, {"ENV": "DEV", "LOG_LEVEL": "DEBUG"}):
        setup_logging(log_level="WARNING", env="DEV")

    logging.getLogger("alfred.test").info("filtered info")
    logging.getLogger("alfred.test").warning("kept warning")

    out = capsys.readouterr().out
    assert "kept warning" in out
    assert "filtered info" not in out
