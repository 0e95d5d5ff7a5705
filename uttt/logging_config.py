"""Unified logging configuration.

Library modules only ever call ``logging.getLogger(__name__)``. Hosts that
want output call :func:`setup_logging` once at start-up.

Usage:
    from uttt.logging_config import setup_logging

    logger = setup_logging("uttt", level="DEBUG")
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

__all__ = [
    "COMPACT_FORMAT",
    "DEFAULT_FORMAT",
    "DETAILED_FORMAT",
    "LogContext",
    "get_logger",
    "setup_logging",
]

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
COMPACT_FORMAT = "%(levelname)s %(name)s: %(message)s"
DETAILED_FORMAT = (
    "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_FORMATS = {
    "default": DEFAULT_FORMAT,
    "compact": COMPACT_FORMAT,
    "detailed": DETAILED_FORMAT,
}

DEFAULT_LEVEL = os.getenv("UTTT_LOG_LEVEL", "INFO").upper()


def setup_logging(
    name: str = "uttt",
    level: int | str | None = None,
    log_file: str | Path | None = None,
    log_dir: str | Path | None = None,
    console: bool = True,
    format_style: str = "default",
    propagate: bool = False,
) -> logging.Logger:
    """Configure and return the logger called ``name``.

    Repeated calls for the same name reuse the existing handlers instead of
    stacking duplicates.

    Args:
        name: Logger name.
        level: Level as an int or name; defaults to ``UTTT_LOG_LEVEL``.
        log_file: Explicit log file path.
        log_dir: Directory for ``<name>.log`` when ``log_file`` is not given.
        console: Attach a stderr handler.
        format_style: One of ``default``, ``compact``, ``detailed``.
        propagate: Whether records also reach ancestor loggers.
    """
    logger = logging.getLogger(name)
    if level is None:
        level = DEFAULT_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)
    logger.propagate = propagate

    formatter = logging.Formatter(
        _FORMATS.get(format_style, DEFAULT_FORMAT), datefmt=DATE_FORMAT
    )

    if console and not any(
        getattr(h, "_uttt_console", False) for h in logger.handlers
    ):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        handler._uttt_console = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    if log_file is None and log_dir is not None:
        log_file = Path(log_dir) / f"{name}.log"
    if log_file is not None:
        path = Path(log_file).resolve()
        existing = {
            getattr(h, "baseFilename", None)
            for h in logger.handlers
            if isinstance(h, logging.FileHandler)
        }
        if str(path) not in existing:
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(path, encoding="utf-8")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext:
    """Temporarily change a logger's level.

    Usage:
        with LogContext(logger, logging.DEBUG):
            choose_move(state, 10)
    """

    def __init__(self, logger: logging.Logger, level: int):
        self.logger = logger
        self.level = level
        self._previous = logger.level

    def __enter__(self) -> logging.Logger:
        self._previous = self.logger.level
        self.logger.setLevel(self.level)
        return self.logger

    def __exit__(self, exc_type, exc, tb) -> None:
        self.logger.setLevel(self._previous)
