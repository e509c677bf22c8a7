"""Logging helpers."""

import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger under the package namespace."""
    return logging.getLogger(name)


def configure_logging(level: Union[int, str] = logging.INFO, fmt: Optional[str] = None) -> None:
    """
    Configure root logging for command-line use.

    Library callers should configure logging themselves; this is only
    invoked by the CLI entrypoint.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=fmt or LOG_FORMAT)
