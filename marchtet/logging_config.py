"""Console and file handlers for the ``marchtet`` logger hierarchy.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached here, once per command-line run.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

__all__ = ["LOG_FORMAT", "setup_logging"]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%H:%M:%S"


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """Route ``marchtet.*`` records to stdout and, optionally, a file.

    Handlers left by an earlier call are closed and replaced, so running the
    CLI twice in one interpreter does not duplicate output.

    Parameters
    ----------
    level:
        Threshold for the logger and every handler, e.g. ``logging.DEBUG``.
    log_file:
        Path that receives a copy of the log.  It is truncated first.

    Returns
    -------
    logging.Logger
        The configured ``marchtet`` logger.
    """
    logger = logging.getLogger("marchtet")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=_DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging to %d handler(s) at level %s", len(handlers),
                 logging.getLevelName(level))
    return logger
