"""Structured logging setup.

The TUI owns the terminal, so logs go to a file when one is given and to
stderr otherwise.
"""

import logging
import sys
from pathlib import Path
from typing import TextIO

import structlog

_LOG_LEVEL_MAP = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

# File opened by the last configure_logging call, closed on reconfiguration
_log_stream: TextIO | None = None


def configure_logging(
    level: str = "warning",
    log_file: str | Path | None = None,
    json: bool = False,
) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum level name (debug, info, warning, error)
        log_file: Append logs to this file instead of stderr
        json: Render JSON lines instead of the console format
    """
    global _log_stream

    previous = _log_stream
    _log_stream = None
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        _log_stream = path.open("a", encoding="utf-8")
        logger_factory = structlog.WriteLoggerFactory(file=_log_stream)
    else:
        logger_factory = structlog.WriteLoggerFactory(file=sys.stderr)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=log_file is None))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            _LOG_LEVEL_MAP.get(level.lower(), logging.WARNING)
        ),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=False,
    )
    if previous is not None:
        previous.close()
