"""Logging setup.

Modules log through ``get_logger(__name__)``. Nothing is printed until
``configure_logging`` attaches a rich handler to the package logger, so
library users keep control of their own logging configuration.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

CONSOLE = Console(stderr=True)

_PACKAGE_LOGGER = "uavexec"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Attach a ``RichHandler`` to the ``uavexec`` logger (once) and set its level."""
    logger = logging.getLogger(_PACKAGE_LOGGER)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=CONSOLE, show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
