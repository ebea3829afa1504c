"""structlog on top of stdlib logging, configured once per process.

Library modules only call ``structlog.get_logger(__name__)``; the embedding
process calls ``init_observability()`` at start-up to pick the renderer.
"""
from __future__ import annotations

import logging
from typing import Optional

import structlog

from settings import get_settings

__all__ = [
    "init_observability",
]

# Chatty third-party loggers kept at WARNING
_QUIET_LOGGERS = ("sqlalchemy.engine", "alembic")

_initialized = False


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def init_observability(log_format: Optional[str] = None, log_level: Optional[str] = None) -> None:
    """Configure logging; arguments override ``LOG_FORMAT``/``LOG_LEVEL``. Later calls are no-ops."""
    global _initialized
    if _initialized:
        return

    settings = get_settings()
    log_format = (log_format or settings.log_format).lower()
    log_level = (log_level or settings.log_level).upper()

    structlog.configure(
        processors=[
            # application_id etc. bound with bound_contextvars() in logic
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            _renderer(log_format),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.addHandler(logging.StreamHandler())
    root_logger.setLevel(log_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _initialized = True
    structlog.get_logger(__name__).info("Logging configured", log_format=log_format, log_level=log_level)
