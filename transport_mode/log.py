"""
Logging utilities for the transport_mode package.

Provides unified logging:
- pretty console output via Rich
- optional structured (JSON lines) file output
"""

import logging
import json
from pathlib import Path
from typing import Optional, Union

from rich.logging import RichHandler


class JSONFormatter(logging.Formatter):
    """
    Formatter that serializes log records to JSON.
    """
    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level":     record.levelname,
            "logger":    record.name,
            "message":   record.getMessage(),
        }
        return json.dumps(log_record)


def get_logger(
    name: str,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Return a configured logger for the given name.

    Attaches a RichHandler for console output and, when ``log_file`` is
    given, a FileHandler writing JSON lines to it. Handlers are only attached
    the first time a name is requested.

    Parameters
    ----------
    name
        Logger name (typically __name__).
    level
        Log level (int or string), defaults to INFO.
    log_file
        Optional path for JSON log output (appended).

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        console_handler = RichHandler(rich_tracebacks=True)
        console_handler.setLevel(level)
        logger.addHandler(console_handler)

        if log_file is not None:
            file_handler = logging.FileHandler(Path(log_file), mode="a", encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(JSONFormatter())
            logger.addHandler(file_handler)

    return logger
