"""Input/output for genomap.

This package provides file-backed implementations of the assembly
source:

- FASTA access to sequence-level regions (pyfaidx)
- Assembly table (TSV) reading

Example:
    >>> from genomap.io import FileAssemblySource
    >>> source = FileAssemblySource.from_paths("assembly.tsv", fasta="contigs.fa")
"""

from genomap.io.assembly import FileAssemblySource, read_assembly_table
from genomap.io.fasta import GenomeAccessor

__all__ = [
    "FileAssemblySource",
    "GenomeAccessor",
    "read_assembly_table",
]
