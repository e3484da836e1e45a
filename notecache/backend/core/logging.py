"""
Logging.

structlog on top of the standard logging module. ``setup_logging()``
runs once at startup and sends every record, structlog or stdlib, to
stdout through one handler. logging.yaml picks the level and the
renderer: ``console`` for people, ``json`` for one object per line.

Context bound with ``structlog.contextvars`` (the request id, method and
path from RequestContextMiddleware) is merged into each record.

Usage:
    from notecache.backend.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Note saved", extra={"note_id": note.id})
"""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import Processor

from notecache.backend.core.config import get_app_config

# Chatty third-party loggers held at WARNING whatever the root level.
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine")


def _renderers(format_type: str) -> list[Processor]:
    if format_type == "json":
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]


def setup_logging(level: str | None = None, format_type: str | None = None) -> None:
    """
    Configure structlog and the root logger.

    Args:
        level: Overrides the level from logging.yaml
        format_type: Overrides the format from logging.yaml
    """
    config = get_app_config().logging
    level = (level or config.level).upper()
    format_type = format_type or config.format

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_renderers(format_type),
            ],
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """structlog logger for ``name``, usually ``__name__``."""
    return structlog.get_logger(name)
