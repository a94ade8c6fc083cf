"""Log utilities."""

import logging
from rich.logging import RichHandler


def get_logger(name: str, level: int = logging.DEBUG) -> logging.Logger:
    """Retrieve logger with the provided name.

    Every logger gets its own rich handler and does not propagate records to
    the root logger, so messages are not printed twice when the CLI sets up
    basic logging too.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers = [RichHandler(show_path=False)]
    logger.propagate = False
    return logger
