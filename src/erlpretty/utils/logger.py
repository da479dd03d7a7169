"""Logger access for erlpretty.

All records go to the "erlpretty" logger hierarchy at debug level: the
renderer notes each tree it formats and any error formatter that fails
(the raw term is printed instead), and the layout engine reports resolve
runs. The library never configures handlers; applications decide where
records go.

Example:
    >>> from erlpretty.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Rendering form list")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "erlpretty." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'erlpretty.mymodule'
    """
    if not (name == "erlpretty" or name.startswith("erlpretty.")):
        name = f"erlpretty.{name}"
    return logging.getLogger(name)
