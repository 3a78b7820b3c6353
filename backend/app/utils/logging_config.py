"""Structured logging configuration."""

import logging
import sys

import structlog


def configure_logging(debug: bool = False) -> None:
    """Configure structlog: console output on a terminal, JSON lines otherwise."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if sys.stderr.isatty() else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if debug else logging.INFO),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "quizwhiz") -> structlog.BoundLogger:
    """Get a logger bound to a service name."""
    return structlog.get_logger(name).bind(service=name)
