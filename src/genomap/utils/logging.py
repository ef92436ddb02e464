"""Logging configuration for genomap.

Modules log through ``logging.getLogger(__name__)`` and never configure
handlers themselves. Applications (the CLI, notebooks) call
:func:`setup_logging` once to attach handlers to the ``genomap`` logger:

- a console handler on stderr, rendered by rich unless disabled
- an optional file handler that always records DEBUG messages

Console output goes to stderr so that command output on stdout stays
machine-readable.

Example:
    >>> from genomap.utils.logging import setup_logging, get_logger
    >>> setup_logging(verbosity=2)
    >>> log = get_logger(__name__)
    >>> log.debug("Mapped 'chr1' -> 'ctg1'")
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "genomap"

# =============================================================================
# Formats
# =============================================================================

PLAIN_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# RichHandler adds level and location columns itself
MESSAGE_ONLY = "%(message)s"

LEVEL_BY_VERBOSITY = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
}


# =============================================================================
# Handlers
# =============================================================================


def _console_handler(use_rich: bool) -> logging.Handler:
    if not use_rich:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
        return handler

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter(MESSAGE_ONLY))
    return handler


def _file_handler(log_file: Path | str) -> logging.Handler:
    handler = logging.FileHandler(log_file)
    handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    handler.setLevel(logging.DEBUG)
    return handler


def setup_logging(
    verbosity: int = 1,
    log_file: Path | str | None = None,
    use_rich: bool = True,
) -> logging.Logger:
    """Attach console and file handlers to the ``genomap`` logger.

    Calling it again replaces the previous handlers.

    Args:
        verbosity: 0 for warnings only, 1 for info, 2 or more for debug.
        log_file: File receiving every message down to DEBUG.
        use_rich: Render console messages with rich.

    Returns:
        The package logger.
    """
    console_level = LEVEL_BY_VERBOSITY.get(verbosity, logging.DEBUG)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers.clear()

    console = _console_handler(use_rich)
    console.setLevel(console_level)
    package_logger.addHandler(console)

    if log_file is None:
        package_logger.setLevel(console_level)
    else:
        package_logger.addHandler(_file_handler(log_file))
        package_logger.setLevel(logging.DEBUG)

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module name (usually ``__name__``)."""
    return logging.getLogger(name)


# =============================================================================
# Timing
# =============================================================================


class Timer:
    """Context manager that logs how long a block took, at DEBUG level.

    Example:
        >>> with Timer("Remapping chr1:100-200"):
        ...     mapper.remap("chr1", closed(100, 200))
        # Logs: "Remapping chr1:100-200 completed in 0.01s"
    """

    def __init__(self, description: str, logger: logging.Logger | None = None) -> None:
        self.description = description
        self.logger = logger or logging.getLogger(PACKAGE_LOGGER)
        self.elapsed = 0.0
        self._started = 0.0

    def __enter__(self) -> Timer:
        self._started = time.perf_counter()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.elapsed = time.perf_counter() - self._started
        self.logger.debug(f"{self.description} completed in {self.elapsed:.2f}s")
