"""
Module: logger.py
Description: Structured logging configuration for the work-queue client.

Configures structlog for JSON output optimized for CloudWatch Logs.
Provides consistent logging across all modules with proper context
and structured data.

Key Components:
- JSON output for CloudWatch compatibility
- Timestamp, log level and logger name processors
- Level filtering driven by Settings.log_level
- get_logger() helper function

Dependencies: structlog, logging, datetime
"""

import logging
from datetime import datetime, timezone

import structlog
from structlog.typing import FilteringBoundLogger

from workqueue.config.settings import settings


def _add_timestamp(logger, method_name, event_dict):
    """
    Add ISO 8601 timestamp to log entries.

    Args:
        logger: Logger instance
        method_name: Log method name (info, error, etc.)
        event_dict: Current log event dictionary

    Returns:
        Updated event dictionary with timestamp
    """
    event_dict["timestamp"] = (
        datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    )
    return event_dict


def _add_log_level(logger, method_name, event_dict):
    """Add log level to event dictionary."""
    event_dict["level"] = method_name.upper()
    return event_dict


# Configure structlog for JSON output optimized for CloudWatch
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        _add_timestamp,
        _add_log_level,
        # Add exception information
        structlog.processors.format_exc_info,
        # Render as JSON for CloudWatch compatibility
        structlog.processors.JSONRenderer(),
    ],
    logger_factory=structlog.WriteLoggerFactory(),
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.log_level)
    ),
    # Loggers are rebuilt on each use so tests can capture output
    cache_logger_on_first_use=False,
)


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    The logger name is attached to every entry as ``logger_name``. The
    logger stays lazy, so configuration changes (including
    structlog.testing.capture_logs) apply to module-level loggers.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Lazily bound structlog logger

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Message sent to queue", queue_name="jobs", message_id="abc")
        {"queue_name": "jobs", "message_id": "abc", "logger_name": "workqueue.sqs_queue.queue", "event": "Message sent to queue", "timestamp": "2026-01-15T10:30:00.000Z", "level": "INFO"}
    """
    return structlog.get_logger(name, logger_name=name)
