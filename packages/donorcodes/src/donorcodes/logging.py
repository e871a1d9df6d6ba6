"""Logging configuration for donorcodes."""

import logging
import os
import sys

import structlog


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Configure structlog for the CLI and the HTTP app.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). If None, reads
               DONORCODES_LOG_LEVEL, then LOG_LEVEL, defaulting to INFO.
        json_logs: Render one JSON object per line instead of the console
                   format. If None, enabled when LOG_FORMAT=json.
    """
    log_level = (
        level
        or os.environ.get("DONORCODES_LOG_LEVEL")
        or os.environ.get("LOG_LEVEL", "INFO")
    ).upper()
    numeric_level = getattr(logging, log_level, logging.INFO)

    if json_logs is None:
        json_logs = os.environ.get("LOG_FORMAT", "").lower() == "json"

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )

    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
