"""Minimal logging utilities for jackal.

Provides a `get_logger` function that wraps the standard library logging and
keeps every logger under the "jackal" namespace, plus `configure_logging` for
the command-line driver.

Example:
    >>> from jackal.jack_logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.name
    'jackal.jack_logging'
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name, prefixed with "jackal." if needed."""
    if not (name == "jackal" or name.startswith("jackal.")):
        name = f"jackal.{name}"
    return logging.getLogger(name)


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging once for command-line use.

    Args:
        verbose: Log DEBUG and above.
        quiet: Log WARNING and above. Ignored when `verbose` is set.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("jackal").setLevel(level)
