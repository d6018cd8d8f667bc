"""Tests for async logging setup."""

from __future__ import annotations

import logging

import pytest
import structlog

from tibyan_agent.config import AgentSettings
from tibyan_agent.logger import (
    redact_sensitive,
    setup_logging,
    setup_logging_from_settings,
    skill_context,
    stop_logging,
)


def test_async_logging_writes() -> None:
    """Messages should flow through the queue listener without error."""
    setup_logging(service="test-agent", level="info")
    logging.getLogger("test_async").info("hello from async test")
    structlog.get_logger("test_async").info("skill matched", skill_id="study_plan")
    stop_logging()


def test_stop_logging_idempotent() -> None:
    setup_logging(service="test-agent", level="info")
    stop_logging()
    stop_logging()


def test_setup_twice_replaces_listener() -> None:
    setup_logging(service="test-agent", level="debug")
    setup_logging(service="test-agent", level="info")
    assert logging.getLogger().level == logging.INFO
    stop_logging()


def test_setup_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TIBYAN_AGENT_LOG_LEVEL", "warning")
    setup_logging_from_settings(AgentSettings())
    assert logging.getLogger().level == logging.WARNING
    stop_logging()


# ---------------------------------------------------------------------------
# Request context and redaction
# ---------------------------------------------------------------------------


def test_skill_context_binds_and_clears() -> None:
    structlog.contextvars.clear_contextvars()
    with skill_context(skill_id="study_plan", is_admin=False):
        assert structlog.contextvars.get_contextvars() == {"skill_id": "study_plan", "is_admin": False}
    assert structlog.contextvars.get_contextvars() == {}


def test_redact_sensitive_replaces_content() -> None:
    event = {"event": "skill output blocked", "text": "سر", "output": {"title": "t"}, "skill_id": "study_plan"}
    result = redact_sensitive(None, "warning", event)
    assert result["text"] == "<redacted 2 chars>"
    assert result["output"] == "<redacted>"
    assert result["skill_id"] == "study_plan"
    assert result["event"] == "skill output blocked"
