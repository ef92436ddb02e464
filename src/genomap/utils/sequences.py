"""Sequence manipulation utilities.

This module provides the sequence helpers genomap needs once coordinates
have been resolved:

- Complement and reverse complement (IUPAC aware, case preserving)
- Translation with the standard genetic code

Example:
    >>> from genomap.utils.sequences import reverse_complement, translate
    >>> reverse_complement("ATGCATGC")
    'GCATGCAT'
    >>> translate("ATGAAATAG")
    'MK*'
"""

# =============================================================================
# Constants
# =============================================================================

COMPLEMENT_TABLE = str.maketrans(
    "ACGTacgtNnRYSWKMBDHVryswkmbdhv",
    "TGCAtgcaNnYRSWMKVHDByrswmkvhdb",
)

_BASES = "TCAG"
_AMINO_ACIDS = "FFLLSSSSYY**CC*WLLLLPPPPHHQQRRRRIIIMTTTTNNKKSSRRVVVVAAAADDEEGGGG"

# Standard genetic code (NCBI Table 1)
CODON_TABLE_STANDARD = {
    first + second + third: _AMINO_ACIDS[16 * i + 4 * j + k]
    for i, first in enumerate(_BASES)
    for j, second in enumerate(_BASES)
    for k, third in enumerate(_BASES)
}

STOP_CODONS = frozenset(codon for codon, aa in CODON_TABLE_STANDARD.items() if aa == "*")


# =============================================================================
# Complement and Reverse Complement
# =============================================================================


def complement(sequence: str) -> str:
    """Get the complement of a DNA sequence.

    Args:
        sequence: DNA sequence string.

    Returns:
        Complement sequence; unknown characters pass through unchanged.
    """
    return sequence.translate(COMPLEMENT_TABLE)


def reverse_complement(sequence: str) -> str:
    """Get the reverse complement of a DNA sequence.

    Args:
        sequence: DNA sequence string.

    Returns:
        Reverse complement sequence.
    """
    return complement(sequence)[::-1]


# =============================================================================
# Translation
# =============================================================================


def translate(sequence: str, to_stop: bool = False) -> str:
    """Translate a coding sequence with the standard genetic code.

    A trailing partial codon is ignored. Codons containing ambiguous bases
    translate to ``X``.

    Args:
        sequence: DNA coding sequence, read from its first base.
        to_stop: If True, stop before the first stop codon.

    Returns:
        Amino acid sequence.
    """
    sequence = sequence.upper().replace("U", "T")
    protein = []

    for i in range(0, len(sequence) - len(sequence) % 3, 3):
        aa = CODON_TABLE_STANDARD.get(sequence[i : i + 3], "X")
        if aa == "*" and to_stop:
            break
        protein.append(aa)

    return "".join(protein)
