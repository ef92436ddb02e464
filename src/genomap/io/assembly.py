"""Assembly table files and a file-backed assembly source.

An assembly table is a tab-separated file with one row per
:class:`~genomap.assembly.records.AssemblyMapping`. The header names the
columns; ``orientation`` is optional and defaults to 1. Lines starting
with ``#`` are comments.

Example table::

    source_region_id  target_region_id  source_start  source_end  target_start  target_end  source_region_rank  orientation
    chr1              ctg1              1             40000       1             40000       1                   1
    chr1              ctg2              40101         80100       1             40000       1                   -1

Example:
    >>> from genomap.io.assembly import FileAssemblySource
    >>> source = FileAssemblySource.from_paths("assembly.tsv", fasta="contigs.fa")
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable
from pathlib import Path

import attrs

from genomap.assembly.records import AssemblyMapping, InMemoryAssemblySource, RegionId
from genomap.errors import AssemblyTableError
from genomap.io.fasta import GenomeAccessor

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = (
    "source_region_id",
    "target_region_id",
    "source_start",
    "source_end",
    "target_start",
    "target_end",
    "source_region_rank",
)
OPTIONAL_COLUMNS = ("orientation",)


def read_assembly_table(path: Path | str) -> list[AssemblyMapping]:
    """Load assembly mappings from a TSV file.

    Args:
        path: Path to the assembly table.

    Returns:
        Mappings in file order.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        AssemblyTableError: If the header or a row is malformed.
    """
    path = Path(path)
    mappings = []

    with open(path, newline="") as f:
        lines = (line for line in f if line.strip() and not line.startswith("#"))
        reader = csv.DictReader(lines, delimiter="\t")

        missing = [col for col in REQUIRED_COLUMNS if col not in (reader.fieldnames or ())]
        if missing:
            raise AssemblyTableError(f"{path}: missing columns {', '.join(missing)}")

        for row_number, row in enumerate(reader, start=2):
            values = {col: row[col] for col in REQUIRED_COLUMNS}
            for col in OPTIONAL_COLUMNS:
                if row.get(col):
                    values[col] = row[col]
            try:
                mappings.append(AssemblyMapping(**values))
            except (TypeError, ValueError) as e:
                raise AssemblyTableError(f"{path}: invalid row {row_number}: {e}") from e

    logger.info(f"Loaded {len(mappings)} assembly mappings from {path}")
    return mappings


@attrs.define
class FileAssemblySource(InMemoryAssemblySource):
    """Assembly source reading rows from a table and sequence from FASTA.

    A region is sequence-level if it is listed in ``sequence_levels`` or
    present in the FASTA.

    Attributes:
        genome: Optional FASTA accessor holding sequence-level regions.
    """

    genome: GenomeAccessor | None = None

    @classmethod
    def from_paths(
        cls,
        assembly: Path | str,
        fasta: Path | str | None = None,
        sequence_levels: Iterable[RegionId] = (),
    ) -> FileAssemblySource:
        """Open an assembly table and, optionally, a FASTA file."""
        genome = GenomeAccessor(fasta) if fasta is not None else None
        return cls(
            mappings=read_assembly_table(assembly),
            sequence_levels=sequence_levels,
            genome=genome,
        )

    def is_sequence_level(self, region_id: RegionId) -> bool:
        if region_id in self.sequence_levels:
            return True
        return self.genome is not None and region_id in self.genome

    def fetch_raw_sequence(self, region_id: RegionId, start: int, end: int) -> bytes:
        if self.genome is None:
            return super().fetch_raw_sequence(region_id, start, end)
        return self.genome.fetch_raw_sequence(str(region_id), start, end)

    def close(self) -> None:
        if self.genome is not None:
            self.genome.close()
