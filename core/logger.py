"""Logging helpers for the metrics service.

Provides a convenience `get_logger` factory that attaches a stream handler and
a rotating file handler. The log directory and default level come from the
`LOG_DIR` and `LOG_LEVEL` environment variables.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

LOG_DIR = os.getenv("LOG_DIR", os.path.join(os.path.dirname(__file__), "..", "logs"))
os.makedirs(LOG_DIR, exist_ok=True)

LOG_FILE = os.path.join(LOG_DIR, "metrics.log")
LOG_LEVEL = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
if not isinstance(LOG_LEVEL, int):
    LOG_LEVEL = logging.INFO

_formatter = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")

_stream_handler = logging.StreamHandler()
_stream_handler.setFormatter(_formatter)

_file_handler = RotatingFileHandler(LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3)
_file_handler.setFormatter(_formatter)


def get_logger(name: str = __name__, level: int = None) -> logging.Logger:
    """Return a logger with the shared stream and rotating file handlers.

    Handlers are only attached once per logger name, so repeated calls from
    the same module do not duplicate output.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(level if level is not None else LOG_LEVEL)
        logger.addHandler(_stream_handler)
        logger.addHandler(_file_handler)
    return logger
