"""structlog configuration for recurring-billing.

Two output modes:
- Human (default): console-rendered lines to stderr
- JSON: structured JSON lines to stderr
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from recurring_billing.config.settings import get_settings

LOGGER_NAME = "recurring_billing"


def get_logger(name: str) -> Any:
    """Return a structlog logger that emits through the stdlib logger ``name``.

    Level filtering is left to stdlib logging, so with nothing configured
    debug events are dropped by the default WARNING threshold instead of
    being printed by structlog's own default output.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure_logging(
    *,
    level: str | int = logging.WARNING,
    log_json: bool = False,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        level: Level for the ``recurring_billing`` logger, by name or number.
        log_json: Use JSON renderer instead of console renderer.
    """
    billing_level = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(billing_level, int):
        raise ValueError(f"Unknown log level: {level!r}")

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(LOGGER_NAME).setLevel(billing_level)


def configure_from_settings() -> None:
    """Configure logging from ``BillingSettings``."""
    settings = get_settings()
    configure_logging(level=settings.log_level, log_json=settings.log_json)
