"""Logging setup for piggybank.

Modules log through ``get_logger(__name__)``; nothing is emitted until the
application (normally the CLI) calls ``configure_logging``.
"""

import logging
import sys
import threading
from typing import Any

_LOGGER_PREFIX = "piggybank"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False
_lock = threading.Lock()

logging.getLogger(_LOGGER_PREFIX).addHandler(logging.NullHandler())


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever sys.stderr is at emit time."""

    def __init__(self, level: int = logging.NOTSET):
        logging.Handler.__init__(self, level)

    @property
    def stream(self):
        return sys.stderr


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the piggybank namespace."""
    if name == _LOGGER_PREFIX or name.startswith(f"{_LOGGER_PREFIX}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def configure_logging(
    level: int | str = logging.WARNING,
    stream: Any = None,
) -> None:
    """Attach a stderr handler to the piggybank logger hierarchy (idempotent).

    Args:
        level: Level number or name (e.g. "INFO")
        stream: Output stream, defaults to stderr
    """
    global _configured
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: '{level}'")
        level = resolved

    root = logging.getLogger(_LOGGER_PREFIX)
    with _lock:
        root.setLevel(level)
        if _configured:
            return
        handler = logging.StreamHandler(stream) if stream is not None else _StderrHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
        _configured = True


def reset_logging() -> None:
    """Remove handlers added by configure_logging (used by tests)."""
    global _configured
    root = logging.getLogger(_LOGGER_PREFIX)
    with _lock:
        for handler in list(root.handlers):
            if not isinstance(handler, logging.NullHandler):
                root.removeHandler(handler)
        root.setLevel(logging.NOTSET)
        _configured = False
