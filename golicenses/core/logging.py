"""Logging setup for the golicenses CLI (structlog over stdlib logging).

Reports are written to stdout or to files, so log records always go to
stderr. Level and format come from the arguments, then from
``GOLICENSES_LOG_LEVEL`` / ``GOLICENSES_LOG_FORMAT``, then from the defaults
below.
"""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

DEFAULT_LEVEL = "WARNING"
DEFAULT_FORMAT = "console"

_RENDERERS = {
    "console": structlog.dev.ConsoleRenderer,
    "json": structlog.processors.JSONRenderer,
}


def _pre_chain() -> list[structlog.types.Processor]:
    # Shared by structlog loggers and foreign stdlib records.
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Route golicenses.* structlog events to stderr.

    An unknown *fmt* falls back to console output.
    """
    log_level = (level or os.environ.get("GOLICENSES_LOG_LEVEL") or DEFAULT_LEVEL).upper()
    log_format = (fmt or os.environ.get("GOLICENSES_LOG_FORMAT") or DEFAULT_FORMAT).lower()
    renderer = _RENDERERS.get(log_format, _RENDERERS[DEFAULT_FORMAT])()
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "golicenses": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "golicenses",
                },
            },
            "root": {"handlers": ["stderr"], "level": log_level},
            "loggers": {"golicenses": {"level": log_level}},
        }
    )
