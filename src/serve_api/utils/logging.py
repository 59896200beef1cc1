"""Logging helpers shared by every module (``logger = get_logger(__name__)``)."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger."""
    return logging.getLogger(name)


def configure_logging(verbose: bool = False) -> None:
    """
    Configure root logging for the serve-api process.

    Args:
        verbose: Log at DEBUG instead of INFO
    """
    level = logging.DEBUG if verbose else logging.INFO
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)
    # Werkzeug logs every request at INFO; keep it for verbose runs only.
    logging.getLogger("werkzeug").setLevel(logging.INFO if verbose else logging.WARNING)
