"""Remapping of genomic intervals down the assembly hierarchy.

Starting from a region in any coordinate system (chromosome, scaffold,
clone, ...), the mapper repeatedly asks the assembly source which rows
overlap the current interval, follows the best one and re-expresses the
interval in the target region's coordinates. It stops when:

- the current region is sequence-level, or
- no row maps the current region any further.

The walk is an explicit loop bounded by ``max_depth`` with a visited-region
guard, so a cyclic assembly graph fails with :class:`MappingNotFoundError`
instead of looping forever.

Reads from the source may block on I/O. Transient failures are retried
with exponential backoff; the arithmetic never blocks.

Example:
    >>> from genomap.assembly import AssemblyMapper, InMemoryAssemblySource
    >>> from genomap.intervals import closed
    >>> source = InMemoryAssemblySource.from_rows(
    ...     [("chr1", "ctg1", 1001, 2000, 1, 1000, 1)], sequence_levels=["ctg1"]
    ... )
    >>> mapper = AssemblyMapper(source)
    >>> region, interval = mapper.remap_interval("chr1", closed(1100, 1200))
    >>> region, str(interval)
    ('ctg1', '[100, 200]')
"""

from __future__ import annotations

import functools
import logging
import random
import time
from collections.abc import Callable, Sequence
from operator import attrgetter
from typing import TYPE_CHECKING, NamedTuple, TypeVar

from genomap.assembly.records import AssemblyMapping, AssemblySource, RegionId
from genomap.errors import CollaboratorUnavailableError, MappingNotFoundError
from genomap.intervals.algebra import Interval, subset
from genomap.intervals.genomic import GenomicInterval, Strand
from genomap.utils.sequences import reverse_complement

if TYPE_CHECKING:
    from genomap.config import MapperConfig

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

# Deeper than any real coordinate-system hierarchy
DEFAULT_MAX_DEPTH = 16

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_INITIAL_BACKOFF = 0.25  # seconds
DEFAULT_BACKOFF_MULTIPLIER = 2.0
DEFAULT_JITTER = 0.2

RETRYABLE_ERRORS = (CollaboratorUnavailableError, ConnectionError, TimeoutError)

F = TypeVar("F", bound=Callable)


# =============================================================================
# Retry
# =============================================================================


def retry_collaborator(
    function: F,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
    backoff_multiplier: float = DEFAULT_BACKOFF_MULTIPLIER,
    jitter: float = DEFAULT_JITTER,
) -> F:
    """Wrap a collaborator call so transient failures are retried.

    Args:
        function: Callable to retry.
        max_attempts: Maximum number of attempts, including the first.
        initial_backoff: Delay before the second attempt, in seconds.
        backoff_multiplier: Factor applied to the delay after each retry.
        jitter: Relative jitter applied to each delay. A jitter of 0.2 on
            a 1.0s backoff sleeps between 0.8s and 1.2s.

    Returns:
        Wrapped callable. Errors outside ``RETRYABLE_ERRORS``, and the last
        retryable error once attempts are exhausted, propagate unchanged.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    if backoff_multiplier < 1.0:
        raise ValueError("Backoff multiplier must be >= 1.0.")

    @functools.wraps(function)
    def wrapper(*args, **kwargs):
        attempt = 0
        backoff = initial_backoff
        while True:
            attempt += 1
            try:
                return function(*args, **kwargs)
            except RETRYABLE_ERRORS as e:
                if attempt >= max_attempts:
                    raise
                delay = backoff * (1 + random.uniform(-jitter, jitter))
                logger.warning(
                    f"{getattr(function, '__name__', 'call')} failed ({e}); "
                    f"retrying in {delay:.2f}s (attempt {attempt}/{max_attempts})"
                )
                time.sleep(delay)
                backoff *= backoff_multiplier

    return wrapper  # type: ignore[return-value]


# =============================================================================
# Data Structures
# =============================================================================


class MappedRegion(NamedTuple):
    """Result of remapping an interval.

    Attributes:
        region_id: Region the interval is now expressed in.
        interval: Interval in that region's coordinates.
        strand: Strand relative to that region.
    """

    region_id: RegionId
    interval: Interval
    strand: Strand


# =============================================================================
# Mapper
# =============================================================================


class AssemblyMapper:
    """Walks assembly rows from a region down to its sequence-level region.

    Attributes:
        source: Assembly data source.
        max_depth: Maximum number of hops before giving up.

    Example:
        >>> mapper = AssemblyMapper(source, max_depth=8)
        >>> mapped = mapper.remap("chr1", closed(1100, 1200), Strand.REVERSE)
        >>> mapped.region_id, mapped.strand
    """

    def __init__(
        self,
        source: AssemblySource,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
        backoff_multiplier: float = DEFAULT_BACKOFF_MULTIPLIER,
    ) -> None:
        """Initialize the mapper.

        Args:
            source: Assembly data source.
            max_depth: Maximum number of hops before giving up.
            max_attempts: Attempts per source read.
            initial_backoff: First retry delay in seconds.
            backoff_multiplier: Retry delay growth factor.
        """
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")

        self.source = source
        self.max_depth = max_depth

        retry = functools.partial(
            retry_collaborator,
            max_attempts=max_attempts,
            initial_backoff=initial_backoff,
            backoff_multiplier=backoff_multiplier,
        )
        self._fetch_mappings = retry(source.fetch_overlapping_assembly_mappings)
        self._is_sequence_level = retry(source.is_sequence_level)
        self._fetch_raw_sequence = retry(source.fetch_raw_sequence)

    @classmethod
    def from_config(
        cls, source: AssemblySource, config: MapperConfig | None = None
    ) -> AssemblyMapper:
        """Create a mapper from a :class:`~genomap.config.MapperConfig`."""
        from genomap.config import MapperConfig

        config = config or MapperConfig()
        return cls(
            source,
            max_depth=config.max_depth,
            max_attempts=config.max_attempts,
            initial_backoff=config.initial_backoff,
            backoff_multiplier=config.backoff_multiplier,
        )

    @staticmethod
    def best_mapping(candidates: Sequence[AssemblyMapping]) -> AssemblyMapping:
        """Pick the candidate with the lowest rank; ties keep source order."""
        return min(candidates, key=attrgetter("source_region_rank"))

    def remap(
        self,
        region_id: RegionId,
        interval: Interval,
        strand: Strand | int | str = Strand.FORWARD,
    ) -> MappedRegion:
        """Remap an interval until it reaches a terminal region.

        Args:
            region_id: Region the interval is expressed in.
            interval: Interval in ``region_id`` coordinates.
            strand: Strand of the interval on ``region_id``.

        Returns:
            MappedRegion in the terminal region's coordinates.

        Raises:
            MappingNotFoundError: If the walk revisits a region or needs
                more than ``max_depth`` hops.
        """
        strand = Strand.from_value(strand)
        visited: set[RegionId] = set()
        hops = 0

        while not self._is_sequence_level(region_id):
            if region_id in visited:
                raise MappingNotFoundError(
                    f"Cycle in assembly graph: region {region_id!r} visited twice"
                )
            visited.add(region_id)

            candidates = self._fetch_mappings(region_id, interval)
            if not candidates:
                logger.debug(f"No assembly mapping from {region_id!r}; treating as terminal")
                break

            # Only a hop that is actually needed counts against the cap
            if hops >= self.max_depth:
                raise MappingNotFoundError(
                    f"Region {region_id!r} not resolved within {self.max_depth} steps"
                )

            best = self.best_mapping(candidates)
            if not subset(interval, best.source_interval):
                logger.debug(
                    f"{interval} extends past {best.source_region_id!r}:"
                    f"{best.source_start}-{best.source_end}; mapping by offset"
                )

            interval = best.map_interval(interval)
            if best.orientation == -1:
                strand = strand.opposite
            logger.debug(
                f"Mapped {region_id!r} -> {best.target_region_id!r} "
                f"(rank {best.source_region_rank}): {interval}"
            )
            region_id = best.target_region_id
            hops += 1

        return MappedRegion(region_id, interval, strand)

    def remap_interval(
        self, region_id: RegionId, interval: Interval
    ) -> tuple[RegionId, Interval]:
        """Remap an interval, returning ``(region_id, interval)``."""
        mapped = self.remap(region_id, interval)
        return mapped.region_id, mapped.interval

    def remap_genomic(
        self, region_id: RegionId, genomic: GenomicInterval
    ) -> tuple[RegionId, GenomicInterval]:
        """Remap a GenomicInterval, carrying its strand through reversals."""
        mapped = self.remap(region_id, genomic.to_interval(), genomic.strand)
        return mapped.region_id, GenomicInterval.from_interval(mapped.interval, mapped.strand)

    def fetch_sequence(self, region_id: RegionId, genomic: GenomicInterval) -> str:
        """Remap a region and read its raw sequence from the source.

        The sequence is returned 5' to 3' on the strand of ``genomic``.
        """
        target_id, target = self.remap_genomic(region_id, genomic)
        raw = self._fetch_raw_sequence(target_id, target.start, target.end)
        sequence = raw.decode("ascii") if isinstance(raw, bytes) else str(raw)
        if target.strand is Strand.REVERSE:
            sequence = reverse_complement(sequence)
        return sequence


def remap_interval(
    source: AssemblySource,
    region_id: RegionId,
    interval: Interval,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[RegionId, Interval]:
    """Remap an interval through ``source`` with a default mapper."""
    return AssemblyMapper(source, max_depth=max_depth).remap_interval(region_id, interval)
