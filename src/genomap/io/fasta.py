"""Raw sequence access for sequence-level regions.

This module provides indexed access to sequence-level regions stored in
FASTA format, using pyfaidx for random access. It is the file-backed
counterpart of the ``fetch_raw_sequence`` call of an assembly source.

Coordinates are 1-based and inclusive on both ends, matching assembly
tables and :class:`~genomap.intervals.genomic.GenomicInterval`.

Example:
    >>> from genomap.io.fasta import GenomeAccessor
    >>> with GenomeAccessor("contigs.fa") as genome:
    ...     raw = genome.fetch_raw_sequence("ctg1", 1001, 2000)
    ...     rc = genome.get_sequence("ctg1", 1001, 2000, strand="-")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pyfaidx

from genomap.intervals.genomic import Strand
from genomap.utils.sequences import reverse_complement

logger = logging.getLogger(__name__)


class GenomeAccessor:
    """Indexed FASTA access using pyfaidx.

    Attributes:
        path: Path to the FASTA file.

    Example:
        >>> genome = GenomeAccessor("contigs.fa")
        >>> "ctg1" in genome
        True
        >>> genome.get_length("ctg1")
        40000
    """

    def __init__(self, fasta_path: Path | str) -> None:
        """Initialize the genome accessor.

        Args:
            fasta_path: Path to FASTA file. Will create .fai index if needed.

        Raises:
            FileNotFoundError: If FASTA file doesn't exist.
        """
        self.path = Path(fasta_path)
        if not self.path.exists():
            raise FileNotFoundError(f"FASTA file not found: {self.path}")

        # Preserve case for soft-masking
        self._fasta: pyfaidx.Fasta | None = pyfaidx.Fasta(
            str(self.path), sequence_always_upper=False, rebuild=False
        )
        self._lengths = {seqid: len(self._fasta[seqid]) for seqid in self._fasta.keys()}

        logger.info(f"Opened FASTA: {self.path.name}, {len(self._lengths)} regions")

    @property
    def scaffold_lengths(self) -> dict[str, int]:
        """Return {region_id: length} mapping."""
        return dict(self._lengths)

    def __enter__(self) -> GenomeAccessor:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the FASTA file."""
        if self._fasta is not None:
            self._fasta.close()
            self._fasta = None

    def __contains__(self, region_id: object) -> bool:
        return str(region_id) in self._lengths

    def get_length(self, region_id: str) -> int:
        """Get the length of a region.

        Raises:
            KeyError: If the region is not in the FASTA.
        """
        try:
            return self._lengths[str(region_id)]
        except KeyError:
            raise KeyError(f"Unknown region: {region_id}") from None

    def fetch_raw_sequence(self, region_id: str, start: int, end: int) -> bytes:
        """Read bases ``start..end`` (1-based, inclusive) as ASCII bytes.

        Raises:
            KeyError: If the region is not in the FASTA.
            ValueError: If the coordinates fall outside the region.
        """
        if self._fasta is None:
            raise RuntimeError("FASTA file not opened")

        length = self.get_length(region_id)
        if start < 1:
            raise ValueError(f"Start position must be >= 1, got {start}")
        if end > length:
            raise ValueError(f"End position {end} exceeds length {length} of {region_id}")
        if end < start:
            raise ValueError(f"End must be >= start: {start}-{end}")

        # pyfaidx slices are 0-based half-open
        return str(self._fasta[str(region_id)][start - 1 : end]).encode("ascii")

    def get_sequence(
        self,
        region_id: str,
        start: int,
        end: int,
        strand: Strand | int | str = Strand.FORWARD,
    ) -> str:
        """Read a region as text, reverse-complemented on the reverse strand."""
        sequence = self.fetch_raw_sequence(region_id, start, end).decode("ascii")
        if Strand.from_value(strand) is Strand.REVERSE:
            sequence = reverse_complement(sequence)
        return sequence
