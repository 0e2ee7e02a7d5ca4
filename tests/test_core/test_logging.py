"""Tests for logging configuration."""

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import BindableLogger

from georesolve.core.logging import (
    LOG_LEVELS,
    configure_logging,
    get_logger,
    get_request_logger,
)


def test_configure_logging() -> None:
    """Test production logging renders JSON."""
    configure_logging()
    processors = structlog.get_config()["processors"]
    assert any(
        p.__class__.__name__ == "JSONRenderer" for p in processors
    ), "JSONRenderer not configured"
    configure_logging(testing=True)


def test_configure_logging_testing_mode() -> None:
    """Test testing mode renders key/value pairs instead of JSON."""
    configure_logging(testing=True)
    processors = structlog.get_config()["processors"]
    assert any(p.__class__.__name__ == "KeyValueRenderer" for p in processors)
    assert not any(p.__class__.__name__ == "JSONRenderer" for p in processors)


def test_configure_logging_merges_context() -> None:
    """Test bound context variables are merged into every event."""
    configure_logging(testing=True)
    processors = structlog.get_config()["processors"]
    assert structlog.contextvars.merge_contextvars in processors


def test_log_levels() -> None:
    """Test level names map to stdlib levels."""
    assert LOG_LEVELS["info"] == 20
    assert LOG_LEVELS["warning"] == 30


def test_get_logger() -> None:
    """Test get_logger returns a configured logger."""
    logger = get_logger(__name__)
    assert isinstance(logger, BoundLogger | BindableLogger)


def test_get_request_logger() -> None:
    """Test get_request_logger binds the request id."""
    logger = get_request_logger("test-123")
    assert isinstance(logger, BoundLogger | BindableLogger)
