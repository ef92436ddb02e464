"""Exception hierarchy for genomap.

All errors raised by genomap derive from :class:`GenomapError`, so callers
can catch a single type at an application boundary. Errors that signal a
programming mistake also derive from the matching builtin (``ValueError``,
``IndexError``) so they behave as ordinary Python errors.

The interval algebra itself never raises for malformed bounds; it
normalises them to the empty interval instead.
"""


# =============================================================================
# Base
# =============================================================================


class GenomapError(Exception):
    """Base class for all genomap errors."""

    pass


# =============================================================================
# Interval Errors
# =============================================================================


class EmptyIntervalError(GenomapError, ValueError):
    """Raised when an operation needs a non-empty interval but got EMPTY."""

    pass


class IntervalRangeError(GenomapError, IndexError):
    """Raised when a position or index falls outside an interval's coverage."""

    pass


# =============================================================================
# Assembly Errors
# =============================================================================


class AssemblyIntegrityError(GenomapError):
    """Raised when assembly mapping data is internally inconsistent."""

    pass


class MappingNotFoundError(AssemblyIntegrityError):
    """Raised when a region cannot be resolved to a terminal region.

    This only happens when the assembly graph contains a cycle or is deeper
    than the configured maximum depth. A region without any further mapping
    is not an error: it is already in the most specific coordinate system.
    """

    pass


class CollaboratorUnavailableError(GenomapError):
    """Raised by assembly sources for transient failures worth retrying."""

    pass


class AssemblyTableError(GenomapError, ValueError):
    """Raised when an assembly table file cannot be parsed."""

    pass
