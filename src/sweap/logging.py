"""Loguru setup for the Sweap client and CLI.

Three kinds of records pass through here:

- module loggers from ``get_logger`` (client, auth, generator)
- context loggers carrying an ``event_id`` (listener) or a ``worker``
  number (generator), rendered as tags in front of the message
- wire dumps from clients created with ``debug=True``, logged under
  ``WIRE_LOGGER`` and shown at DEBUG even when the console runs at INFO

httpx and httpcore use the standard library; their records are routed into
loguru by ``InterceptHandler``.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from loguru import Logger, Record

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

WIRE_LOGGER = "sweap.wire"

_CONTEXT_TAGS = (("event_id", "event"), ("worker", "worker"))


class InterceptHandler(logging.Handler):
    """Forward standard library records (httpx, httpcore) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip the logging module's own frames so loguru reports the caller
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _source(record: Record) -> str:
    return "{extra[name]}" if "name" in record["extra"] else "{name}"


def _tags(record: Record) -> str:
    extra = record["extra"]
    return "".join(
        f" <magenta>[{label} {{extra[{key}]}}]</magenta>"
        for key, label in _CONTEXT_TAGS
        if key in extra
    )


def _console_format(record: Record) -> str:
    return (
        "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | "
        f"<cyan>{_source(record)}</cyan>{_tags(record)} - "
        "<level>{message}</level>\n{exception}"
    )


def _file_format(record: Record) -> str:
    return (
        "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
        f"{_source(record)}:{{function}}:{{line}} | {{extra}} | {{message}}\n{{exception}}"
    )


def _level_filter(level: LogLevel, *, wire: bool) -> Callable[[Record], bool]:
    """Accept records at ``level`` or above, and wire dumps when enabled."""
    minimum = logger.level(level).no
    debug = logger.level("DEBUG").no

    def accept(record: Record) -> bool:
        if wire and record["extra"].get("name") == WIRE_LOGGER:
            return record["level"].no >= debug
        return record["level"].no >= minimum

    return accept


def setup_logging(
    level: LogLevel = "INFO",
    *,
    verbose: bool = False,
    quiet: bool = False,
    wire: bool = False,
    log_file: Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    serialize: bool = False,
) -> Logger:
    """Replace all loguru sinks with the console (and optional file) sink.

    Args:
        level: Base console level from settings
        verbose: Use DEBUG, wins over ``quiet``
        quiet: Use WARNING
        wire: Show request and response dumps even above DEBUG
        log_file: Rotating log file receiving everything from DEBUG up
        rotation: Rotation condition for ``log_file``
        retention: How long rotated files are kept
        serialize: Write the file sink as JSON lines
    """
    effective: LogLevel = "DEBUG" if verbose else "WARNING" if quiet else level

    logger.remove()
    logger.add(
        sys.stderr,
        level=0,
        format=_console_format,
        filter=_level_filter(effective, wire=wire),
        colorize=True,
        backtrace=True,
        diagnose=True,
    )
    if log_file:
        logger.add(
            log_file,
            level="DEBUG",
            format=_file_format,
            rotation=rotation,
            retention=retention,
            compression="gz",
            serialize=serialize,
        )

    # httpx logs every request line at INFO
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    stdlib_level = logging.DEBUG if effective in ("TRACE", "DEBUG") else logging.WARNING
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(stdlib_level)

    return logger


def get_logger(name: str) -> Logger:
    """Module logger; ``name`` shows up in the console source column."""
    return logger.bind(name=name)


def get_wire_logger() -> Logger:
    """Logger for request and response dumps of debugging clients."""
    return logger.bind(name=WIRE_LOGGER)


def bind_event(event_id: str) -> Logger:
    """Listener logger tagged with the watched event."""
    return logger.bind(name="sweap.listen", event_id=event_id)


def bind_worker(worker: int, event_id: str | None = None) -> Logger:
    """Generator logger tagged with the worker number and target event."""
    context: dict[str, Any] = {"name": "sweap.generator", "worker": worker}
    if event_id:
        context["event_id"] = event_id
    return logger.bind(**context)


def reset_logging() -> None:
    """Drop every sink. Used between tests."""
    logger.remove()
