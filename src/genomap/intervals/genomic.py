"""Strand-aware genomic presentation of intervals.

Coordinate conventions:
    - GenomicInterval: 1-based, inclusive start and end (Ensembl style)
    - Simple/Multi: integer positions with explicit bound flags

Strand determines which end of an interval is upstream. Every directional
consumer in genomap (intron ordering, UTR splitting, exon ordering) goes
through :func:`five_prime_end`, :func:`three_prime_end` or
:func:`strand_ordered` so that the rule lives in one place.

Example:
    >>> from genomap.intervals.genomic import GenomicInterval, Strand
    >>> exon = GenomicInterval(100, 200, Strand.REVERSE)
    >>> exon.five_prime
    200
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum
from typing import Any, TypeVar

import attrs

from genomap.errors import EmptyIntervalError
from genomap.intervals.algebra import (
    Interval,
    Simple,
    first_position,
    last_position,
    make_interval,
    measure,
    parts,
)

T = TypeVar("T")


# =============================================================================
# Strand
# =============================================================================


class Strand(IntEnum):
    """Genomic strand, valued as in Ensembl's ``seq_region_strand``."""

    FORWARD = 1
    REVERSE = -1

    def __str__(self) -> str:
        return "+" if self is Strand.FORWARD else "-"

    @property
    def opposite(self) -> Strand:
        return Strand.REVERSE if self is Strand.FORWARD else Strand.FORWARD

    @classmethod
    def from_value(cls, value: Any) -> Strand:
        """Parse a strand from ``1``/``-1``/``"+"``/``"-"`` style values.

        Raises:
            ValueError: If the value is not a recognised strand.
        """
        if isinstance(value, Strand):
            return value
        if isinstance(value, str):
            symbol = value.strip()
            if symbol in ("+", "1", "+1"):
                return cls.FORWARD
            if symbol in ("-", "-1"):
                return cls.REVERSE
        elif isinstance(value, int) and value in (1, -1):
            return cls(value)
        raise ValueError(f"Invalid strand: {value!r}. Expected one of +, -, 1, -1")


# =============================================================================
# Strand-aware Selection
# =============================================================================


def five_prime_end(interval: Interval, strand: Strand) -> int:
    """Return the 5' covered position: lowest on forward, highest on reverse.

    Raises:
        EmptyIntervalError: If the interval covers no position.
    """
    strand = Strand.from_value(strand)
    position = first_position(interval) if strand is Strand.FORWARD else last_position(interval)
    if position is None:
        raise EmptyIntervalError(f"{interval} has no 5' end")
    return position


def three_prime_end(interval: Interval, strand: Strand) -> int:
    """Return the 3' covered position: highest on forward, lowest on reverse.

    Raises:
        EmptyIntervalError: If the interval covers no position.
    """
    return five_prime_end(interval, Strand.from_value(strand).opposite)


def strand_ordered(items: Sequence[T], strand: Strand) -> list[T]:
    """Order an ascending sequence 5' to 3' for the given strand."""
    if Strand.from_value(strand) is Strand.REVERSE:
        return list(reversed(items))
    return list(items)


# =============================================================================
# GenomicInterval
# =============================================================================


def _check_end(instance: GenomicInterval, attribute: attrs.Attribute, end: int) -> None:
    if end < instance.start:
        raise ValueError(f"end < start: {instance.start}-{end}")


@attrs.frozen(slots=True)
class GenomicInterval:
    """A contiguous genomic range with inclusive integer ends.

    Attributes:
        start: First covered position (inclusive).
        end: Last covered position (inclusive).
        strand: Strand of the feature.
    """

    start: int = attrs.field(converter=int)
    end: int = attrs.field(converter=int, validator=_check_end)
    strand: Strand = attrs.field(default=Strand.FORWARD, converter=Strand.from_value)

    @property
    def length(self) -> int:
        """Number of covered positions."""
        return self.end - self.start + 1

    @property
    def five_prime(self) -> int:
        return self.start if self.strand is Strand.FORWARD else self.end

    @property
    def three_prime(self) -> int:
        return self.end if self.strand is Strand.FORWARD else self.start

    def to_interval(self) -> Interval:
        """Convert to a closed ``Simple`` interval."""
        return make_interval(self.start, self.end, True, True)

    @classmethod
    def from_interval(cls, interval: Simple, strand: Strand = Strand.FORWARD) -> GenomicInterval:
        """Build from a ``Simple``, shifting exclusive bounds inwards by one.

        Raises:
            EmptyIntervalError: If the interval covers no integer position.
        """
        if not isinstance(interval, Simple) or measure(interval) == 0:
            raise EmptyIntervalError(f"{interval} does not cover a contiguous range")
        return cls(interval.first, interval.last, strand)

    def __str__(self) -> str:
        return f"{self.start}-{self.end}:{self.strand}"


def to_genomic_intervals(interval: Interval, strand: Strand = Strand.FORWARD) -> list[GenomicInterval]:
    """Present each covering part of an interval as a GenomicInterval.

    Parts are returned 5' to 3'; parts covering no position are skipped.
    """
    ranges = [
        GenomicInterval.from_interval(part, strand)
        for part in parts(interval)
        if measure(part)
    ]
    return strand_ordered(ranges, strand)
