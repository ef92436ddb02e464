"""Interval algebra for genomic coordinate ranges.

This package provides:

- Bounds with inclusion flags and their comparators
- Empty/Simple/Multi intervals with set algebra
- Navigation through covered positions (splicing)
- Strand-aware genomic presentation

Example:
    >>> from genomap.intervals import closed, merge, relative_complement, hull
    >>> spliced = merge([closed(100, 200), closed(300, 400)])
    >>> introns = relative_complement(spliced, hull(spliced))
"""

from genomap.intervals.algebra import (
    EMPTY,
    Empty,
    Interval,
    Multi,
    Simple,
    closed,
    contains,
    first_position,
    hull,
    intersection,
    last_position,
    make_interval,
    make_multi,
    measure,
    merge,
    overlaps,
    parts,
    relative_complement,
    subset,
    union,
)
from genomap.intervals.bounds import (
    Bound,
    lower_equal,
    lower_less,
    upper_equal,
    upper_less,
)
from genomap.intervals.genomic import (
    GenomicInterval,
    Strand,
    five_prime_end,
    strand_ordered,
    three_prime_end,
    to_genomic_intervals,
)
from genomap.intervals.navigation import (
    advance,
    nth_element,
    position_index,
    subinterval,
)

__all__ = [
    "Bound",
    "EMPTY",
    "Empty",
    "GenomicInterval",
    "Interval",
    "Multi",
    "Simple",
    "Strand",
    "advance",
    "closed",
    "contains",
    "first_position",
    "five_prime_end",
    "hull",
    "intersection",
    "last_position",
    "lower_equal",
    "lower_less",
    "make_interval",
    "make_multi",
    "measure",
    "merge",
    "nth_element",
    "overlaps",
    "parts",
    "position_index",
    "relative_complement",
    "strand_ordered",
    "subinterval",
    "subset",
    "three_prime_end",
    "to_genomic_intervals",
    "union",
    "upper_equal",
    "upper_less",
]
