"""Pytest configuration and shared fixtures for genomap tests.

Fixtures are organized by category:

- Sequence fixtures: synthetic FASTA files and raw sequences
- Assembly fixtures: assembly rows, tables and in-memory sources
- Transcript fixtures: forward and reverse strand transcripts
"""

from pathlib import Path

import numpy as np
import pytest

from genomap.assembly.mapper import AssemblyMapper
from genomap.assembly.records import AssemblyMapping, InMemoryAssemblySource
from genomap.transcripts import Transcript

# =============================================================================
# Sequence Fixtures
# =============================================================================


@pytest.fixture
def synthetic_sequences() -> dict[str, str]:
    """Reproducible random sequences for two contigs.

    - ctg1: 1000 bp
    - ctg2: 500 bp
    """
    np.random.seed(42)
    return {
        "ctg1": "".join(np.random.choice(list("ACGT"), 1000)),
        "ctg2": "".join(np.random.choice(list("ACGT"), 500)),
    }


@pytest.fixture
def synthetic_fasta(tmp_path: Path, synthetic_sequences: dict[str, str]) -> Path:
    """Write the synthetic contigs to a FASTA file with 80-column lines."""
    fasta_path = tmp_path / "contigs.fa"

    with open(fasta_path, "w") as f:
        for seqid, seq in synthetic_sequences.items():
            f.write(f">{seqid}\n")
            for i in range(0, len(seq), 80):
                f.write(seq[i : i + 80] + "\n")

    return fasta_path


# =============================================================================
# Assembly Fixtures
# =============================================================================

# chr1 is built from ctg1 (forward) and ctg2 (reversed), and also has a
# coarser scaffold mapping. chrX reaches ctg1 through scfX. loopA/loopB
# form a cycle.
ASSEMBLY_ROWS = [
    ("chr1", "scf1", 1, 1600, 1, 1600, 2),
    ("chr1", "ctg1", 1, 1000, 1, 1000, 1),
    ("chr1", "ctg2", 1101, 1600, 1, 500, 1, -1),
    ("chrX", "scfX", 1, 2000, 1, 2000, 2),
    ("scfX", "ctg1", 501, 1500, 1, 1000, 1),
    ("loopA", "loopB", 1, 100, 1, 100, 1),
    ("loopB", "loopA", 1, 100, 1, 100, 1),
]


@pytest.fixture
def assembly_rows() -> list[AssemblyMapping]:
    """Assembly rows as AssemblyMapping records."""
    return [AssemblyMapping(*row) for row in ASSEMBLY_ROWS]


@pytest.fixture
def assembly_source(synthetic_sequences: dict[str, str]) -> InMemoryAssemblySource:
    """In-memory assembly source with ctg1 and ctg2 as sequence level."""
    return InMemoryAssemblySource.from_rows(
        ASSEMBLY_ROWS,
        sequence_levels=["ctg1", "ctg2"],
        sequences=synthetic_sequences,
    )


@pytest.fixture
def mapper(assembly_source: InMemoryAssemblySource) -> AssemblyMapper:
    """Mapper over the in-memory source, retrying without delay."""
    return AssemblyMapper(assembly_source, initial_backoff=0.0)


@pytest.fixture
def assembly_table(tmp_path: Path) -> Path:
    """ASSEMBLY_ROWS written as a TSV assembly table."""
    table_path = tmp_path / "assembly.tsv"
    header = [
        "source_region_id",
        "target_region_id",
        "source_start",
        "source_end",
        "target_start",
        "target_end",
        "source_region_rank",
        "orientation",
    ]

    with open(table_path, "w") as f:
        f.write("# test assembly\n")
        f.write("\t".join(header) + "\n")
        for row in ASSEMBLY_ROWS:
            values = list(row) + [1] * (len(header) - len(row))
            f.write("\t".join(str(v) for v in values) + "\n")

    return table_path


# =============================================================================
# Transcript Fixtures
# =============================================================================


@pytest.fixture
def forward_transcript() -> Transcript:
    """Three-exon forward transcript with UTRs on both sides.

    Exons: 100-199, 300-399, 500-599. Coding: 150-550 (201 nt).
    """
    return Transcript.from_tuples(
        "TX_FWD",
        "chr1",
        "+",
        [(100, 199), (300, 399), (500, 599)],
        coding=(150, 550),
    )


@pytest.fixture
def reverse_transcript() -> Transcript:
    """Two-exon reverse transcript.

    Exons: 100-199, 300-399. Coding: 150-350 (101 nt).
    """
    return Transcript.from_tuples(
        "TX_REV",
        "chr1",
        "-",
        [(100, 199), (300, 399)],
        coding=(150, 350),
    )
