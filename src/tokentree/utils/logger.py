"""Logging helpers for tokentree.

All loggers live under the ``tokentree`` namespace so applications can tune
the library's verbosity with a single ``logging.getLogger("tokentree")``.
The library itself never installs handlers.

Example:
    >>> from tokentree.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Flattening token stream")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger namespaced under "tokentree."

    Example:
        >>> get_logger("grammar").name
        'tokentree.grammar'
    """
    if not (name == "tokentree" or name.startswith("tokentree.")):
        name = f"tokentree.{name}"
    return logging.getLogger(name)
