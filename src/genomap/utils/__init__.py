"""Utility functions for genomap.

This module provides common utilities used across genomap:

- Sequence manipulation (reverse complement, translation)
- Logging configuration

Example:
    >>> from genomap.utils import reverse_complement, setup_logging
    >>> setup_logging(verbosity=2)
    >>> reverse_complement("ATGC")
    'GCAT'
"""

from genomap.utils.logging import Timer, get_logger, setup_logging
from genomap.utils.sequences import complement, reverse_complement, translate

__all__ = [
    "Timer",
    "complement",
    "get_logger",
    "reverse_complement",
    "setup_logging",
    "translate",
]
