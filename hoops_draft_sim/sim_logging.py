"""structlog setup shared by the CLI, the Streamlit app and the library.

Until ``configure_logging()`` runs, events go through stdlib logging with no
handlers attached, so library callers see nothing below WARNING and nothing
on stdout.
"""
from __future__ import annotations

import logging
import sys
from typing import Any, List

import structlog

from .config import get_settings

_configured = False


def _shared_processors() -> List[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _configure_defaults() -> None:
    structlog.configure(
        processors=_shared_processors() + [structlog.processors.KeyValueRenderer(key_order=["event"])],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def configure_logging(force: bool = False) -> None:
    """Configure stdlib logging and structlog from settings. Idempotent."""
    global _configured
    if _configured and not force:
        return

    settings = get_settings()
    level = getattr(logging, settings.LOG_LEVEL)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)

    processors = _shared_processors()
    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


if not structlog.is_configured():
    _configure_defaults()
