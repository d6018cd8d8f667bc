"""Structured JSON logging for the agent core.

Every entry carries {timestamp, level, logger, service, event} plus the
request context bound through ``skill_context`` (skill_id, is_admin).
User text and skill output never reach the log: values under
``REDACTED_KEYS`` are replaced by their length.
"""

from __future__ import annotations

import logging
import queue
import sys
from contextlib import contextmanager
from logging.handlers import QueueHandler, QueueListener
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tibyan_agent.config import AgentSettings

REDACTED_KEYS = frozenset({"text", "prompt", "output"})

_listener: QueueListener | None = None


def setup_logging(service: str = "tibyan-agent", level: str = "info") -> None:
    """Route structlog through a queue listener that writes JSON lines to stdout.

    Calling again replaces the previous listener.
    """
    stop_logging()
    log_level = getattr(logging, level.upper(), logging.INFO)

    global _listener
    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(maxsize=10_000)
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setLevel(log_level)
    _listener = QueueListener(log_queue, stream_handler, respect_handler_level=True)
    _listener.start()

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(QueueHandler(log_queue))
    root.setLevel(log_level)

    structlog.configure(
        processors=_processors(service),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_logging_from_settings(settings: AgentSettings) -> None:
    setup_logging(service=settings.log_service, level=settings.log_level)


def stop_logging() -> None:
    """Flush and stop the queue listener. Safe to call more than once."""
    global _listener
    if _listener is not None:
        _listener.stop()
        _listener = None


@contextmanager
def skill_context(**fields: Any) -> Iterator[None]:
    """Bind request fields to every log entry emitted inside the block."""
    with structlog.contextvars.bound_contextvars(**fields):
        yield


def redact_sensitive(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    for key in REDACTED_KEYS & event_dict.keys():
        value = event_dict[key]
        event_dict[key] = f"<redacted {len(value)} chars>" if isinstance(value, str) else "<redacted>"
    return event_dict


def _processors(service: str) -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_sensitive,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        _add_service(service),
        # Arabic stays readable in the rendered line.
        structlog.processors.JSONRenderer(ensure_ascii=False),
    ]


def _add_service(service: str) -> structlog.types.Processor:
    def processor(
        _logger: structlog.types.WrappedLogger,
        _method_name: str,
        event_dict: structlog.types.EventDict,
    ) -> structlog.types.EventDict:
        event_dict["service"] = service
        return event_dict

    return processor
