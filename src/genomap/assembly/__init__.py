"""Assembly coordinate mapping.

This package remaps genomic intervals from any coordinate system of an
assembly down to a sequence-level region:

- AssemblyMapping records and the AssemblySource protocol
- An in-memory source for tests and small datasets
- AssemblyMapper, the bounded, cycle-safe remapping loop

Example:
    >>> from genomap.assembly import AssemblyMapper, InMemoryAssemblySource
    >>> mapper = AssemblyMapper(InMemoryAssemblySource.from_rows(rows, ["ctg1"]))
    >>> mapped = mapper.remap("chr1", interval)
"""

from genomap.assembly.mapper import (
    AssemblyMapper,
    MappedRegion,
    remap_interval,
    retry_collaborator,
)
from genomap.assembly.records import (
    AssemblyMapping,
    AssemblySource,
    InMemoryAssemblySource,
    RegionId,
)

__all__ = [
    "AssemblyMapper",
    "AssemblyMapping",
    "AssemblySource",
    "InMemoryAssemblySource",
    "MappedRegion",
    "RegionId",
    "remap_interval",
    "retry_collaborator",
]
