"""Logging setup and timing helper."""

import logging
import time
from contextlib import contextmanager

from rich.console import Console
from rich.logging import RichHandler


PACKAGE_LOGGER = "fakeforge"

logger = logging.getLogger(PACKAGE_LOGGER)


def setup_logging(verbose: bool = False, console: Console = None) -> logging.Logger:
    """Route the package logger through rich on stderr."""
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="%H:%M:%S"))

    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return logger


@contextmanager
def timed(operation: str, log: logging.Logger = logger):
    """Log start and elapsed time of a block at debug level."""
    start = time.perf_counter()
    log.debug("Starting: %s", operation)
    try:
        yield
    finally:
        log.debug("Completed: %s (took %.3fs)", operation, time.perf_counter() - start)
