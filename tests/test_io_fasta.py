"""Unit tests for genomap.io.fasta module.

Tests cover:
- GenomeAccessor initialization and indexing
- Raw sequence extraction with 1-based inclusive coordinates
- Strand-aware sequence extraction
- Coordinate validation
"""

from pathlib import Path

import pytest

from genomap.io.fasta import GenomeAccessor
from genomap.utils.sequences import reverse_complement

# =============================================================================
# Initialization
# =============================================================================


class TestGenomeAccessorInit:
    """Tests for GenomeAccessor initialization."""

    def test_init_success(self, synthetic_fasta: Path) -> None:
        """Test opening a FASTA file."""
        genome = GenomeAccessor(synthetic_fasta)
        assert genome.path == synthetic_fasta
        assert "ctg1" in genome
        assert "ctg3" not in genome
        genome.close()

    def test_init_creates_index(self, synthetic_fasta: Path) -> None:
        """Test that a .fai index is created next to the FASTA."""
        with GenomeAccessor(synthetic_fasta):
            pass
        assert Path(str(synthetic_fasta) + ".fai").exists()

    def test_init_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="FASTA file not found"):
            GenomeAccessor(tmp_path / "missing.fa")

    def test_context_manager_closes(self, synthetic_fasta: Path) -> None:
        """Test that leaving the context closes the file."""
        with GenomeAccessor(synthetic_fasta) as genome:
            genome.fetch_raw_sequence("ctg1", 1, 10)
        with pytest.raises(RuntimeError):
            genome.fetch_raw_sequence("ctg1", 1, 10)


# =============================================================================
# Properties
# =============================================================================


class TestGenomeAccessorLengths:
    """Tests for region lengths."""

    def test_scaffold_lengths(self, synthetic_fasta: Path) -> None:
        """Test the region length mapping."""
        with GenomeAccessor(synthetic_fasta) as genome:
            assert genome.scaffold_lengths == {"ctg1": 1000, "ctg2": 500}

    def test_get_length(self, synthetic_fasta: Path) -> None:
        """Test single region lengths."""
        with GenomeAccessor(synthetic_fasta) as genome:
            assert genome.get_length("ctg2") == 500

    def test_unknown_region(self, synthetic_fasta: Path) -> None:
        """Test that unknown regions raise KeyError."""
        with GenomeAccessor(synthetic_fasta) as genome:
            with pytest.raises(KeyError, match="Unknown region"):
                genome.get_length("chrZ")


# =============================================================================
# Sequence Extraction
# =============================================================================


class TestFetchRawSequence:
    """Tests for fetch_raw_sequence."""

    def test_simple_extraction(
        self, synthetic_fasta: Path, synthetic_sequences: dict[str, str]
    ) -> None:
        """Test that coordinates are 1-based and inclusive."""
        with GenomeAccessor(synthetic_fasta) as genome:
            raw = genome.fetch_raw_sequence("ctg1", 1, 10)
        assert isinstance(raw, bytes)
        assert raw.decode() == synthetic_sequences["ctg1"][:10]

    def test_across_line_breaks(
        self, synthetic_fasta: Path, synthetic_sequences: dict[str, str]
    ) -> None:
        """Test extraction spanning FASTA line breaks."""
        with GenomeAccessor(synthetic_fasta) as genome:
            raw = genome.fetch_raw_sequence("ctg1", 75, 170)
        assert raw.decode() == synthetic_sequences["ctg1"][74:170]

    def test_full_region(
        self, synthetic_fasta: Path, synthetic_sequences: dict[str, str]
    ) -> None:
        """Test extracting a whole region."""
        with GenomeAccessor(synthetic_fasta) as genome:
            raw = genome.fetch_raw_sequence("ctg2", 1, 500)
        assert raw.decode() == synthetic_sequences["ctg2"]

    def test_single_base(
        self, synthetic_fasta: Path, synthetic_sequences: dict[str, str]
    ) -> None:
        """Test that start == end returns one base."""
        with GenomeAccessor(synthetic_fasta) as genome:
            raw = genome.fetch_raw_sequence("ctg2", 500, 500)
        assert raw.decode() == synthetic_sequences["ctg2"][-1]

    def test_invalid_coordinates(self, synthetic_fasta: Path) -> None:
        """Test coordinate validation."""
        with GenomeAccessor(synthetic_fasta) as genome:
            with pytest.raises(ValueError, match=">= 1"):
                genome.fetch_raw_sequence("ctg1", 0, 10)
            with pytest.raises(ValueError, match="exceeds length"):
                genome.fetch_raw_sequence("ctg1", 990, 1001)
            with pytest.raises(ValueError, match="End must be >= start"):
                genome.fetch_raw_sequence("ctg1", 20, 10)

    def test_unknown_region(self, synthetic_fasta: Path) -> None:
        """Test that unknown regions raise KeyError."""
        with GenomeAccessor(synthetic_fasta) as genome:
            with pytest.raises(KeyError):
                genome.fetch_raw_sequence("chrZ", 1, 10)


class TestGetSequence:
    """Tests for strand-aware get_sequence."""

    def test_forward(self, synthetic_fasta: Path, synthetic_sequences: dict[str, str]) -> None:
        """Test forward strand extraction."""
        with GenomeAccessor(synthetic_fasta) as genome:
            assert genome.get_sequence("ctg1", 101, 200) == synthetic_sequences["ctg1"][100:200]

    def test_reverse_strand(
        self, synthetic_fasta: Path, synthetic_sequences: dict[str, str]
    ) -> None:
        """Test reverse strand extraction returns the reverse complement."""
        with GenomeAccessor(synthetic_fasta) as genome:
            seq = genome.get_sequence("ctg1", 101, 200, strand="-")
        assert seq == reverse_complement(synthetic_sequences["ctg1"][100:200])
