"""Logging setup: stdlib loggers rendered through structlog formatters"""

import logging
import sys
from pathlib import Path
from typing import Optional

import structlog
from structlog.typing import Processor

from postdraft.config import Settings


ROOT_LOGGER = "postdraft"


def configure_logging(settings: Settings) -> Optional[Path]:
    """Attach a console handler (and a JSON file handler if log_file is set) to the postdraft logger.

    Returns the log file path, or None when only console logging is active.
    Safe to call more than once; previously installed handlers are replaced.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    _reset_handlers(logger)

    console = logging.StreamHandler(stream=sys.stderr)
    console.setLevel(_resolve_level(settings.log_level))
    console.setFormatter(_console_formatter(colors=_supports_color(sys.stderr)))
    logger.addHandler(console)

    log_file = None
    if settings.log_file:
        log_file = Path(settings.log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(_file_formatter())
        logger.addHandler(file_handler)

    logger.debug("logging configured level=%s file=%s", settings.log_level.upper(), log_file)
    return log_file


def _resolve_level(raw: str) -> int:
    level = getattr(logging, raw.strip().upper(), None)
    return level if isinstance(level, int) else logging.INFO


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _shared_pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
    ]


def _console_formatter(colors: bool) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_pre_chain(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=colors),
        ],
    )


def _file_formatter() -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_pre_chain(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
    )


def _supports_color(stream: object) -> bool:
    isatty = getattr(stream, "isatty", None)
    if not callable(isatty):
        return False
    try:
        return bool(isatty())
    except ValueError:
        return False
