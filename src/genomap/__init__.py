"""genomap: interval algebra and coordinate mapping for genomic features.

genomap models genomic coordinate ranges (exons, transcripts, protein
features) as intervals with inclusive or exclusive bounds, combines them
with set algebra, and translates positions between genomic, spliced
transcript and amino-acid coordinates. Intervals are remapped through an
assembly hierarchy down to the sequence-level region holding raw sequence.

Example:
    >>> import genomap
    >>> genomap.__version__
    '0.1.0'

Modules:
    intervals: Bounds, interval algebra, navigation and strand handling
    coords: Amino-acid and nucleotide conversion
    assembly: Assembly mapping records and the assembly mapper
    transcripts: Spliced transcript models
    io: FASTA and assembly table access
    utils: Sequence and logging utilities
"""

__version__ = "0.1.0"

from genomap.assembly import AssemblyMapper, AssemblyMapping, InMemoryAssemblySource
from genomap.coords import aa_to_nt, nt_to_aa
from genomap.errors import (
    AssemblyIntegrityError,
    EmptyIntervalError,
    GenomapError,
    IntervalRangeError,
    MappingNotFoundError,
)
from genomap.intervals import (
    EMPTY,
    GenomicInterval,
    Interval,
    Multi,
    Simple,
    Strand,
    advance,
    closed,
    intersection,
    make_interval,
    measure,
    merge,
    nth_element,
    relative_complement,
    subset,
    union,
)
from genomap.transcripts import Exon, Transcript

__all__ = [
    "__version__",
    "AssemblyIntegrityError",
    "AssemblyMapper",
    "AssemblyMapping",
    "EMPTY",
    "EmptyIntervalError",
    "Exon",
    "GenomapError",
    "GenomicInterval",
    "InMemoryAssemblySource",
    "Interval",
    "IntervalRangeError",
    "MappingNotFoundError",
    "Multi",
    "Simple",
    "Strand",
    "Transcript",
    "aa_to_nt",
    "advance",
    "closed",
    "intersection",
    "make_interval",
    "measure",
    "merge",
    "nt_to_aa",
    "nth_element",
    "relative_complement",
    "subset",
    "union",
]
