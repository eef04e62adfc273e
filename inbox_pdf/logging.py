"""Process-wide log setup.

Everything goes through one stderr handler so that ``inbox_pdf list`` and
``inbox_pdf ids`` can keep stdout for their JSON lines and ids.
"""

from __future__ import annotations

import logging
import sys

import structlog

from .config import LoggingConfig

_PRE_CHAIN: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]


def _renderer(json: bool) -> structlog.types.Processor:
    if json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_logging(*, json: bool = True, level: str = "INFO") -> None:
    """Route structlog and stdlib records to stderr.

    *json* selects JSON lines (``LOG_FORMAT=json``) over the console
    renderer; *level* is the root level name, in any case.  Calling it
    again replaces the previous handler.
    """
    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_PRE_CHAIN,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    # httpx request lines carry the search query; keep them out of INFO output
    logging.getLogger("httpx").setLevel(max(root.level, logging.WARNING))


def setup_logging_from_config(config: LoggingConfig) -> None:
    setup_logging(json=config.format == "json", level=config.level)
