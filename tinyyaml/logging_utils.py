"""Logging helpers shared by the library and the command line front end.

Library modules only ask for loggers and never configure handlers, so embedding
applications keep full control. ``configure_logging`` is called by the CLI so
that ``--verbose/--quiet`` behave the same for every command; calling it again
only adjusts the level.
"""

from __future__ import annotations

import logging

LIBRARY_LOGGER = "tinyyaml"
DEFAULT_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

logging.getLogger(LIBRARY_LOGGER).addHandler(logging.NullHandler())


def resolve_level(*, verbose: bool = False, quiet: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.INFO


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> int:
    """Configure the root logger from the verbosity flags and return the level."""

    level = resolve_level(verbose=verbose, quiet=quiet)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=DEFAULT_LOG_FORMAT)
    else:
        root.setLevel(level)
    return level


def get_logger(name: str) -> logging.Logger:
    """Return a logger for ``name``; modules pass ``__name__``."""

    return logging.getLogger(name)
