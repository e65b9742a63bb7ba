"""
Structured Logging
==================
structlog integration used to tag the events of one resolution pass.

Usage:
    from roster.utils.structured_logging import get_structured_logger

    log = get_structured_logger("roster.engine")
    log.info("resolution_started", shift_id="day", days=7)
"""
import logging
from typing import Any

import structlog
import structlog.contextvars
import structlog.stdlib


def configure_structlog(json_output: bool = False, level: int = logging.INFO) -> None:
    """
    Configure structlog for the application.

    Args:
        json_output: If True, render events as JSON lines.
                    If False, render key=value console lines.
                    Events go through the stdlib "roster" handlers either
                    way, so stdout stays free for command output.
        level: Minimum level passed through the filtering logger.
    """
    if json_output:
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(level),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
    else:
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="%H:%M:%S"),
                structlog.dev.ConsoleRenderer(colors=False),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(level),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )


def get_structured_logger(name: str) -> Any:
    """
    Get a structured logger.

    Args:
        name: Logger name (e.g., "roster.engine")

    Returns:
        structlog bound logger
    """
    return structlog.get_logger(name)


def bind_context(**kwargs) -> None:
    """
    Bind context variables for all subsequent log calls.

    Args:
        **kwargs: Context values (e.g., shift_id="day", start="2024-01-01")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all context variables."""
    structlog.contextvars.clear_contextvars()
