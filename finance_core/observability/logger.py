"""
Structured Logging

DESIGN DECISION: Every posting, closing and inventory movement emits one
structured event. This provides:
1. Traceability of what each operation did to a tenant's books
2. Debugging capability when a posting is rejected
3. Machine-readable output for log aggregation

Services obtain loggers with ``structlog.get_logger(__name__)``; this
module only decides how those events are rendered.
"""

import logging
import sys
from typing import Optional

import structlog

from finance_core.config import LoggingSettings, get_settings


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Safe to call more than once; the last call wins.
    """
    settings = settings or get_settings().logging

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.level),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_tenant(tenant_id: str, **context) -> structlog.stdlib.BoundLogger:
    """Get a logger with the tenant (and any extra context) already bound."""
    return structlog.get_logger("finance_core").bind(tenant_id=tenant_id, **context)
