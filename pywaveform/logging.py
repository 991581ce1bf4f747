"""
Logging for pywaveform.

Every module logs through ``get_logger(__name__)``; nothing is emitted
until the entry point calls ``setup_logging`` once.
"""

import logging
import sys
from typing import List, Optional, Union

ROOT_LOGGER = 'pywaveform'
DEFAULT_LOG_FILE = '/tmp/pywaveform_debug.log'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_configured = False


def _level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.WARNING)


def _handlers(level: int, log_file: Optional[str], console: bool) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    # Per-frame debug output only goes to a file at DEBUG/INFO
    if log_file and level <= logging.INFO:
        handlers.append(logging.FileHandler(log_file, mode='w'))
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    level: Union[str, int] = 'WARNING',
    log_file: Optional[str] = None,
    console: bool = False,
) -> logging.Logger:
    """(Re)configure the ``pywaveform`` logger tree and return its root.

    Args:
        level: Level name or number; unknown names fall back to WARNING
        log_file: File written at DEBUG/INFO only, truncated on setup
        console: Also log to stderr
    """
    global _configured

    numeric_level = _level(level)
    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(numeric_level)

    handlers = _handlers(numeric_level, log_file, console) or [logging.NullHandler()]
    for handler in handlers:
        root.addHandler(handler)

    _configured = True
    root.debug(f"Logging configured: level={logging.getLevelName(numeric_level)}, "
               f"log_file={log_file}, console={console}")
    return root


def is_configured() -> bool:
    return _configured


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name``, always inside the ``pywaveform`` tree."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f'{ROOT_LOGGER}.{name}')
