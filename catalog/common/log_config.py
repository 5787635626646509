"""
Logging setup for the catalog scripts.

Diagnostics go to stderr under the ``catalog`` logger; stdout is left for
the import and browse summaries.
"""

import logging
import os
import sys

LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"
LOG_LEVEL_ENV = "CATALOG_LOG_LEVEL"


def resolve_level(verbose: bool = False, quiet: bool = False) -> int:
    """
    Pick the log level: --verbose, then --quiet, then $CATALOG_LOG_LEVEL, then INFO.

    An unrecognised environment value falls back to INFO.
    """
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING

    name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(name) if name else logging.INFO
    return level if isinstance(level, int) else logging.INFO


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Attach a single stderr handler to the ``catalog`` logger.

    Safe to call repeatedly; earlier handlers are replaced.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger("catalog")
    logger.setLevel(resolve_level(verbose, quiet))
    logger.handlers.clear()
    logger.addHandler(handler)
