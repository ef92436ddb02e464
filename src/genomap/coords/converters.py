"""Amino-acid and nucleotide coordinate conversion.

Both coordinate systems are 1-based. Amino acid ``p`` occupies the codon
starting at nucleotide ``3 * (p - 1) + 1``.

Example:
    >>> from genomap.coords.converters import aa_to_nt, nt_to_aa
    >>> aa_to_nt(3)
    7
    >>> nt_to_aa(8)
    (3, 1)
"""

from __future__ import annotations

from genomap.intervals.algebra import (
    EMPTY,
    Interval,
    first_position,
    last_position,
    make_interval,
    merge,
    parts,
)
from genomap.intervals.genomic import five_prime_end, three_prime_end

CODON_LENGTH = 3


# =============================================================================
# Position Conversion
# =============================================================================


def aa_to_nt(aa_position: int, offset: int = 0) -> int:
    """Convert an amino-acid position to the first nucleotide of its codon.

    Args:
        aa_position: 1-based amino-acid position.
        offset: Added to the resulting nucleotide position.

    Returns:
        1-based nucleotide position.
    """
    return CODON_LENGTH * (aa_position - 1) + 1 + offset


def nt_to_aa(nt_position: int, offset: int = 0) -> tuple[int, int]:
    """Convert a nucleotide position to its amino acid and codon phase.

    Args:
        nt_position: 1-based nucleotide position.
        offset: Added to the resulting amino-acid position.

    Returns:
        Tuple of (1-based amino-acid position, remainder within codon 0-2).
    """
    quotient, remainder = divmod(nt_position - 1, CODON_LENGTH)
    return offset + quotient + 1, remainder


# =============================================================================
# Interval Conversion
# =============================================================================


def aa_interval_to_nt(interval: Interval, offset: int = 0) -> Interval:
    """Convert an amino-acid interval to the nucleotides of its codons.

    The last amino acid contributes its whole codon, so ``[2, 3]`` maps to
    ``[4, 9]``. Parts of a ``Multi`` are converted independently.
    """
    converted = []
    for part in parts(interval):
        lower, upper = first_position(part), last_position(part)
        if lower is None:
            continue
        converted.append(
            make_interval(aa_to_nt(lower, offset), aa_to_nt(upper, offset) + CODON_LENGTH - 1)
        )
    return merge(converted)


def nt_interval_to_aa(interval: Interval, offset: int = 0) -> tuple[Interval, tuple[int, int]]:
    """Convert a nucleotide interval to amino acids.

    Args:
        interval: Nucleotide interval.
        offset: Added to the resulting amino-acid positions.

    Returns:
        Tuple of (closed amino-acid interval spanning the covered codons,
        (remainder of the first nucleotide, remainder of the last)).
        ``EMPTY`` maps to ``(EMPTY, (0, 0))``.
    """
    lower, upper = first_position(interval), last_position(interval)
    if lower is None:
        return EMPTY, (0, 0)

    aa_lower, lower_remainder = nt_to_aa(lower, offset)
    aa_upper, upper_remainder = nt_to_aa(upper, offset)
    return make_interval(aa_lower, aa_upper), (lower_remainder, upper_remainder)


__all__ = [
    "CODON_LENGTH",
    "aa_interval_to_nt",
    "aa_to_nt",
    "five_prime_end",
    "nt_interval_to_aa",
    "nt_to_aa",
    "three_prime_end",
]
