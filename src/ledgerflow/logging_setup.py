"""Centralized logging configuration for the ``ledgerflow`` package.

- ``configure_logging(...)``: attach a single ``StreamHandler`` to the package
  root logger (``"ledgerflow"``). Called once by the CLI at startup.
- ``get_logger(name)``: acquire a logger by name, making sure the package root
  logger has at least a ``NullHandler`` when nothing has been configured.

Library modules never attach their own handlers; they call
``logging.getLogger(__name__)`` and rely on the configuration done here.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

LOG_LEVEL_ENV_VAR = "LEDGERFLOW_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.WARNING
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_PKG_LOGGER_NAME = "ledgerflow"
_HANDLER: logging.StreamHandler | None = None


def _level_from_name(level: str) -> int | None:
    level = level.strip().upper()
    if level.isdigit():
        return int(level)
    numeric = getattr(logging, level, None)
    return numeric if isinstance(numeric, int) else None


def parse_level(level: int | str | None) -> int:
    """Turn a level name, numeric string or int into a logging level.

    ``None`` and unrecognised names fall back to ``LEDGERFLOW_LOG_LEVEL`` and
    then to WARNING.
    """
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        numeric = _level_from_name(level)
        if numeric is not None:
            return numeric
    env_val = os.getenv(LOG_LEVEL_ENV_VAR)
    if env_val:
        numeric = _level_from_name(env_val)
        if numeric is not None:
            return numeric
    return DEFAULT_LOG_LEVEL


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Configure the package root logger.

    The handler is attached once; later calls adjust its level and point it
    at the current stream.

    Args:
        level: Level as int or name (``"INFO"``). ``None`` reads
            ``LEDGERFLOW_LOG_LEVEL``, defaulting to WARNING.
        fmt: Optional format string
        stream: Output stream for the handler, ``sys.stderr`` by default
    """
    global _HANDLER
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    numeric_level = parse_level(level)
    logger.setLevel(numeric_level)
    if _HANDLER is not None:
        _HANDLER.setStream(stream or sys.stderr)
        return

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    _HANDLER = logging.StreamHandler(stream or sys.stderr)
    _HANDLER.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    logger.addHandler(_HANDLER)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name with a ``NullHandler`` on the package root."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if _HANDLER is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
