# foldkeep/logging/logger.py
"""
Unified logging setup for foldkeep.

All modules use:
    from foldkeep.logging.logger import get_logger
    logger = get_logger(__name__)

Log namespaces follow module paths, so everything lives under "foldkeep".
"""

import logging
import sys

DEFAULT_FORMAT = "[%(levelname)s] %(name)s — %(message)s"


def configure_logging(
    level: int = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    stream=sys.stderr,
):
    """
    Configure root logging handler.

    Called once early in the application lifecycle (e.g., CLI entrypoint).
    Safe to call multiple times; handler duplication is prevented.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)

    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Modules call this to get a logger.

    Example:
        logger = get_logger(__name__)

    Do NOT configure logging here. Configuration happens in configure_logging().
    """
    return logging.getLogger(name)
