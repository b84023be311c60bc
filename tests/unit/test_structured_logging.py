"""Tests for structured logging context."""

import httpx
import pytest
import structlog
from structlog.testing import CapturingLogger

from src.projecthub.core.logging import bind_request_context, clear_request_context
from src.projecthub.core.notifications import TelegramNotifier

pytestmark = pytest.mark.unit


@pytest.fixture
def capturing_logger():
    """Create a capturing logger for tests."""
    cap_logger = CapturingLogger()

    # Save original configuration to restore later
    old_config = structlog.get_config()

    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args, **kwargs: cap_logger,
        cache_logger_on_first_use=False,
    )

    clear_request_context()
    yield cap_logger
    clear_request_context()
    structlog.configure(**old_config)


def test_bind_request_context(capturing_logger):
    """Test binding request_id to log context."""
    request_id = "test-request-123"

    bind_request_context(request_id)
    logger = structlog.get_logger()
    logger.info("test message")

    entries = capturing_logger.calls
    assert len(entries) == 1
    assert entries[0].kwargs["request_id"] == request_id


def test_bind_request_context_with_none(capturing_logger):
    """Test that None request_id is not bound."""
    bind_request_context(None)
    logger = structlog.get_logger()
    logger.info("test message")

    entries = capturing_logger.calls
    assert len(entries) == 1
    assert "request_id" not in entries[0].kwargs


def test_clear_request_context(capturing_logger):
    """Test clearing request context."""
    bind_request_context("test-request-123")
    clear_request_context()

    logger = structlog.get_logger()
    logger.info("test message")
    entries = capturing_logger.calls
    assert len(entries) == 1
    assert "request_id" not in entries[0].kwargs


async def test_adapter_logs_carry_request_context(capturing_logger):
    """Module loggers created at import time still pick up the bound request_id."""
    bind_request_context("req-telegram")
    async with httpx.AsyncClient() as http:
        await TelegramNotifier(http, bot_token=None, chat_id=None).send("hola")

    warnings = [c for c in capturing_logger.calls if c.method_name == "warning"]
    assert len(warnings) == 1
    assert warnings[0].args == ("Telegram not configured - alert not sent",)
    assert warnings[0].kwargs["request_id"] == "req-telegram"
    assert warnings[0].kwargs["length"] == 4
