"""Logging setup shared by the schemagen modules.

Modules call :func:`get_logger` with ``__name__``; the CLI calls
:func:`configure_logging` once to attach a handler.
"""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "schemagen"


def get_logger(name: str) -> logging.Logger:
    """Return a logger placed under the ``schemagen`` hierarchy.

    Args:
        name: Usually the calling module's ``__name__``.

    Returns:
        Logger instance.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: int | str = logging.WARNING, rich_output: bool = True
) -> logging.Logger:
    """Attach a single handler to the package logger.

    Args:
        level: Logging level (name or number).
        rich_output: Use rich's handler instead of a plain stderr stream.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if rich_output:
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True), show_path=False, markup=False
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )

    logger.addHandler(handler)
    logger.propagate = False
    return logger
