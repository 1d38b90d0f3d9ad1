"""Tests for logging setup."""

import logging
from unittest.mock import patch

from sparquil.core.config import Settings
from sparquil.shared.telemetry.logging import get_logger, setup_logging


def test_setup_logging_uses_debug_level_when_debug() -> None:
    with patch("sparquil.shared.telemetry.logging.logging.basicConfig") as basic_config:
        setup_logging(Settings(_env_file=None, debug=True))
    assert basic_config.call_args.kwargs["level"] == logging.DEBUG


def test_setup_logging_defaults_to_info() -> None:
    with patch("sparquil.shared.telemetry.logging.logging.basicConfig") as basic_config:
        setup_logging(Settings(_env_file=None))
    kwargs = basic_config.call_args.kwargs
    assert kwargs["level"] == logging.INFO
    assert kwargs["format"] == "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def test_get_logger_returns_named_logger() -> None:
    assert get_logger("sparquil.test").name == "sparquil.test"
