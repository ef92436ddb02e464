"""Coordinate conversion between amino-acid and nucleotide spaces."""

from genomap.coords.converters import (
    CODON_LENGTH,
    aa_interval_to_nt,
    aa_to_nt,
    five_prime_end,
    nt_interval_to_aa,
    nt_to_aa,
    three_prime_end,
)

__all__ = [
    "CODON_LENGTH",
    "aa_interval_to_nt",
    "aa_to_nt",
    "five_prime_end",
    "nt_interval_to_aa",
    "nt_to_aa",
    "three_prime_end",
]
