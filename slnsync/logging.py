"""Logging for generation passes.

Every slnsync module logs through a child of the ``slnsync`` logger
(``slnsync.generator``, ``slnsync.writer``, ``slnsync.host`` ...). Libraries
embedding slnsync get plain propagating loggers; only the CLI calls
:func:`configure_logging` to attach handlers.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_LOGGER_NAME = "slnsync"
_CONSOLE_FORMAT = "[slnsync] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``slnsync.<name>``, or the package logger itself."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Send generation logs to stderr and, with ``log_file``, to a file.

    Stdout stays reserved for the CLI's one-line results. ``quiet`` limits
    the console to warnings, so response-file parse errors still show. The
    file always gets the full pass (debug with ``verbose``, info otherwise),
    which is what a per-project sync log needs.
    """
    level = logging.DEBUG if verbose else logging.INFO
    console_level = logging.WARNING if quiet else level

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # One set of handlers per process, however many passes the CLI runs.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
