"""
Logging configuration for the ``statement_parsers`` package.

Library modules only call ``logging.getLogger(__name__)``. Entry points
(``main.py`` or a host application) call ``configure_logging`` once.
"""

import logging
import os
import sys
from typing import IO, Optional, Union

_PKG_LOGGER_NAME = 'statement_parsers'
_DEFAULT_FORMAT = '[%(levelname)s] %(message)s'
_CONFIGURED = False


def _parse_level(level: Optional[Union[int, str]]) -> int:
    if isinstance(level, int):
        return level
    if level is None:
        level = os.environ.get('STATEMENT_PARSERS_LOG_LEVEL', 'INFO')
    level = str(level).strip().upper()
    if level.isdigit():
        return int(level)
    numeric = getattr(logging, level, None)
    if isinstance(numeric, int):
        return numeric
    return logging.INFO


def configure_logging(level: Optional[Union[int, str]] = None,
                      fmt: Optional[str] = None,
                      stream: IO[str] = sys.stderr) -> None:
    """
    Attach a single StreamHandler to the package logger.

    Args:
        level: Level as int or name; defaults to STATEMENT_PARSERS_LOG_LEVEL or INFO
        fmt: Format string, defaults to "[LEVEL] message"
        stream: Output stream
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(_parse_level(level))
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger, keeping the package silent until configured"""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
