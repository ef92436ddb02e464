"""Transcript models built on the interval algebra.

A transcript is the strand-ordered union of its exons. Everything else is
derived with set algebra and navigation:

- introns: the gaps of the spliced interval within its hull
- coding region: the spliced interval clipped to the coding hull
- UTRs: the non-coding remainder, split at the coding hull by strand
- cDNA / CDS / protein coordinates: positions along the spliced interval,
  counted from the 5' end

Coordinate conventions:
    - Genomic positions: 1-based inclusive, on the transcript's region
    - cDNA and CDS positions: 1-based from the 5' end of the transcript
    - Amino-acid positions: 1-based from the first codon

Example:
    >>> from genomap.transcripts import Transcript
    >>> tx = Transcript.from_tuples(
    ...     "ENST01", "chr1", "-", [(100, 199), (300, 399)], coding=(150, 350)
    ... )
    >>> [str(intron) for intron in tx.introns]
    ['200-299:-']
    >>> tx.cdna_to_genomic(1)
    399
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

import attrs

from genomap.assembly.records import RegionId
from genomap.coords.converters import aa_interval_to_nt
from genomap.errors import EmptyIntervalError, IntervalRangeError
from genomap.intervals.algebra import (
    EMPTY,
    Interval,
    closed,
    first_position,
    hull,
    intersection,
    last_position,
    make_interval,
    measure,
    merge,
    overlaps,
    relative_complement,
)
from genomap.intervals.genomic import (
    GenomicInterval,
    Strand,
    five_prime_end,
    strand_ordered,
    to_genomic_intervals,
)
from genomap.intervals.navigation import advance, nth_element, position_index, subinterval
from genomap.utils.sequences import translate

if TYPE_CHECKING:
    from genomap.assembly.mapper import AssemblyMapper

logger = logging.getLogger(__name__)


# =============================================================================
# Data Structures
# =============================================================================


def _check_exon_end(instance: Exon, attribute: attrs.Attribute, end: int) -> None:
    if end < instance.start:
        raise ValueError(f"Exon {instance.exon_id}: end < start ({instance.start}-{end})")


@attrs.frozen(slots=True)
class Exon:
    """An exon with inclusive genomic coordinates.

    Attributes:
        exon_id: Exon identifier.
        start: First genomic position.
        end: Last genomic position.
    """

    exon_id: str
    start: int = attrs.field(converter=int)
    end: int = attrs.field(converter=int, validator=_check_exon_end)

    @property
    def interval(self) -> Interval:
        return closed(self.start, self.end)

    @property
    def length(self) -> int:
        return self.end - self.start + 1


def _sorted_exons(exons: Iterable[Exon]) -> tuple[Exon, ...]:
    return tuple(sorted(exons, key=lambda exon: (exon.start, exon.end)))


def _check_exons(instance: Transcript, attribute: attrs.Attribute, exons: tuple[Exon, ...]) -> None:
    if not exons:
        raise ValueError(f"Transcript {instance.transcript_id} has no exons")


def _check_coding(instance: Transcript, attribute: attrs.Attribute, coding_end: int | None) -> None:
    coding_start = instance.coding_start
    if (coding_start is None) != (coding_end is None):
        raise ValueError(
            f"Transcript {instance.transcript_id}: coding_start and coding_end "
            "must be given together"
        )
    if coding_start is not None and coding_end < coding_start:
        raise ValueError(
            f"Transcript {instance.transcript_id}: coding_end < coding_start "
            f"({coding_start}-{coding_end})"
        )


@attrs.frozen
class Transcript:
    """A spliced transcript on one sequence region.

    Exons are stored in ascending genomic order whatever order they were
    supplied in; :attr:`ordered_exons` gives them 5' to 3'.

    Attributes:
        transcript_id: Transcript identifier.
        region_id: Sequence region the coordinates refer to.
        strand: Transcript strand.
        exons: Exons in ascending genomic order.
        coding_start: Lowest genomic position of the coding region, if any.
        coding_end: Highest genomic position of the coding region, if any.
    """

    transcript_id: str
    region_id: RegionId
    strand: Strand = attrs.field(converter=Strand.from_value)
    exons: tuple[Exon, ...] = attrs.field(converter=_sorted_exons, validator=_check_exons)
    coding_start: int | None = None
    coding_end: int | None = attrs.field(default=None, validator=_check_coding)

    @classmethod
    def from_tuples(
        cls,
        transcript_id: str,
        region_id: RegionId,
        strand: Strand | int | str,
        exons: Iterable[Sequence],
        coding: tuple[int, int] | None = None,
    ) -> Transcript:
        """Build a transcript from raw exon tuples.

        Args:
            transcript_id: Transcript identifier.
            region_id: Sequence region identifier.
            strand: Strand as ``1``/``-1`` or ``"+"``/``"-"``.
            exons: ``(start, end)`` or ``(exon_id, start, end)`` tuples.
            coding: Optional ``(coding_start, coding_end)`` genomic range.

        Returns:
            New Transcript.
        """
        models = []
        for i, row in enumerate(exons, start=1):
            if len(row) == 2:
                models.append(Exon(f"{transcript_id}.{i}", *row))
            else:
                models.append(Exon(*row))

        coding_start, coding_end = coding if coding is not None else (None, None)
        return cls(transcript_id, region_id, strand, models, coding_start, coding_end)

    # -------------------------------------------------------------------------
    # Structure
    # -------------------------------------------------------------------------

    @property
    def ordered_exons(self) -> list[Exon]:
        """Exons in transcription order (5' to 3')."""
        return strand_ordered(self.exons, self.strand)

    @property
    def spliced(self) -> Interval:
        """Union of all exon intervals."""
        return merge(exon.interval for exon in self.exons)

    @property
    def length(self) -> int:
        """Spliced length in nucleotides."""
        return measure(self.spliced)

    @property
    def genomic_span(self) -> GenomicInterval:
        """Genomic range from the first to the last exon."""
        return GenomicInterval.from_interval(hull(self.spliced), self.strand)

    @property
    def intron_interval(self) -> Interval:
        spliced = self.spliced
        return relative_complement(spliced, hull(spliced))

    @property
    def introns(self) -> list[GenomicInterval]:
        """Introns in transcription order."""
        return to_genomic_intervals(self.intron_interval, self.strand)

    # -------------------------------------------------------------------------
    # Coding and non-coding regions
    # -------------------------------------------------------------------------

    @property
    def is_coding(self) -> bool:
        return self.coding_start is not None

    @property
    def coding_region(self) -> Interval:
        """Spliced positions inside the coding hull; EMPTY if non-coding."""
        if not self.is_coding:
            return EMPTY
        return intersection(self.spliced, closed(self.coding_start, self.coding_end))

    @property
    def noncoding_region(self) -> Interval:
        """Spliced positions outside the coding hull."""
        if not self.is_coding:
            return self.spliced
        return relative_complement(closed(self.coding_start, self.coding_end), self.spliced)

    def _utr_sides(self) -> tuple[Interval, Interval]:
        if not self.is_coding:
            return EMPTY, EMPTY
        spliced = self.spliced
        below = intersection(
            spliced, make_interval(first_position(spliced), self.coding_start, True, False)
        )
        above = intersection(
            spliced, make_interval(self.coding_end, last_position(spliced), False, True)
        )
        return below, above

    @property
    def five_prime_utr(self) -> Interval:
        below, above = self._utr_sides()
        return below if self.strand is Strand.FORWARD else above

    @property
    def three_prime_utr(self) -> Interval:
        below, above = self._utr_sides()
        return above if self.strand is Strand.FORWARD else below

    # -------------------------------------------------------------------------
    # Coordinate conversion
    # -------------------------------------------------------------------------

    def _along(self, region: Interval, position: int) -> int:
        index = position - 1 if self.strand is Strand.FORWARD else measure(region) - position
        return nth_element(region, index)

    def _from(self, region: Interval, genomic_position: int) -> int:
        index = position_index(region, genomic_position)
        return index + 1 if self.strand is Strand.FORWARD else measure(region) - index

    def cdna_to_genomic(self, position: int) -> int:
        """Map a 1-based cDNA position to its genomic position.

        Raises:
            IntervalRangeError: If the position is outside the transcript.
        """
        return self._along(self.spliced, position)

    def genomic_to_cdna(self, genomic_position: int) -> int:
        """Map a genomic position to its 1-based cDNA position.

        Raises:
            IntervalRangeError: If the position is not exonic.
        """
        return self._from(self.spliced, genomic_position)

    def cds_to_genomic(self, position: int) -> int:
        """Map a 1-based CDS position to its genomic position.

        Raises:
            IntervalRangeError: If the position is outside the coding region.
        """
        return self._along(self.coding_region, position)

    def genomic_to_cds(self, genomic_position: int) -> int:
        """Map a genomic position to its 1-based CDS position."""
        return self._from(self.coding_region, genomic_position)

    def protein_to_genomic(self, aa_start: int, aa_end: int) -> Interval:
        """Map an amino-acid range to the genomic positions of its codons.

        A feature spanning a splice junction yields a ``Multi``. A final
        partial codon is clipped to the end of the coding region.

        Raises:
            IntervalRangeError: If the range starts outside the protein.
        """
        nt = aa_interval_to_nt(make_interval(aa_start, aa_end))
        if nt.is_empty:
            return EMPTY

        coding = self.coding_region
        lower = first_position(nt)
        upper = min(last_position(nt), measure(coding))
        if lower > upper:
            raise IntervalRangeError(
                f"Amino acid {aa_start} is outside the protein of {self.transcript_id}"
            )

        ends = (self.cds_to_genomic(lower), self.cds_to_genomic(upper))
        return intersection(coding, make_interval(min(ends), max(ends)))

    def supporting_exons(self, interval: Interval) -> list[Exon]:
        """Exons overlapping ``interval``, in transcription order."""
        return [exon for exon in self.ordered_exons if overlaps(exon.interval, interval)]

    def leading_region(self, length: int) -> Interval | None:
        """The first ``length`` spliced nucleotides from the 5' end.

        Returns:
            The genomic positions covered, or None if the transcript is
            shorter than ``length``.
        """
        spliced = self.spliced
        anchor = five_prime_end(spliced, self.strand)
        if self.strand is Strand.REVERSE and length > 0:
            anchor = advance(spliced, anchor, -(length - 1))
            if anchor is None:
                return None
        return subinterval(spliced, anchor, length)

    # -------------------------------------------------------------------------
    # Sequence
    # -------------------------------------------------------------------------

    def _read(self, mapper: AssemblyMapper, region: Interval) -> str:
        pieces = [
            mapper.fetch_sequence(self.region_id, piece)
            for piece in to_genomic_intervals(region, self.strand)
        ]
        return "".join(pieces)

    def sequence(self, mapper: AssemblyMapper) -> str:
        """Spliced transcript sequence, 5' to 3'."""
        return self._read(mapper, self.spliced)

    def coding_sequence(self, mapper: AssemblyMapper) -> str:
        """Coding sequence, 5' to 3'.

        Raises:
            EmptyIntervalError: If the transcript is non-coding.
        """
        if not self.is_coding:
            raise EmptyIntervalError(f"Transcript {self.transcript_id} is non-coding")
        return self._read(mapper, self.coding_region)

    def protein(self, mapper: AssemblyMapper) -> str:
        """Translation of the coding sequence up to the first stop codon."""
        cds = self.coding_sequence(mapper)
        if len(cds) % 3:
            logger.warning(
                f"{self.transcript_id}: coding length {len(cds)} is not a multiple of 3"
            )
        return translate(cds, to_stop=True)
