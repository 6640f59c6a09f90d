"""Tests for logging configuration."""

import logging

from health_tracker.app_logging import configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("health_tracker")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging("debug")
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1
    assert logger.level == logging.DEBUG
    assert logger.propagate is False


def test_configure_logging_quiets_http_client() -> None:
    configure_logging(logging.INFO)

    assert logging.getLogger("httpx").level == logging.WARNING
