"""Tests for assembly records and the assembly mapper.

Tests cover:
- AssemblyMapping offset arithmetic, including reversed rows
- Candidate selection by rank
- Multi-hop remapping and terminal regions
- Cycle and depth guards
- Retry of transient source failures
- Sequence retrieval through the mapper
"""

import logging

import pytest

from genomap.assembly.mapper import (
    AssemblyMapper,
    MappedRegion,
    remap_interval,
    retry_collaborator,
)
from genomap.assembly.records import AssemblyMapping, InMemoryAssemblySource
from genomap.config import MapperConfig
from genomap.errors import (
    AssemblyIntegrityError,
    CollaboratorUnavailableError,
    MappingNotFoundError,
)
from genomap.intervals.algebra import EMPTY, closed, make_interval
from genomap.intervals.genomic import GenomicInterval, Strand
from genomap.utils.sequences import reverse_complement


class FlakySource:
    """Wraps a source and fails the first ``failures`` mapping reads."""

    def __init__(self, source, failures, error=CollaboratorUnavailableError):
        self.source = source
        self.failures = failures
        self.error = error
        self.calls = 0

    def fetch_overlapping_assembly_mappings(self, region_id, interval):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error("assembly service unavailable")
        return self.source.fetch_overlapping_assembly_mappings(region_id, interval)

    def is_sequence_level(self, region_id):
        return self.source.is_sequence_level(region_id)

    def fetch_raw_sequence(self, region_id, start, end):
        return self.source.fetch_raw_sequence(region_id, start, end)


# =============================================================================
# AssemblyMapping
# =============================================================================


class TestAssemblyMapping:
    """Tests for AssemblyMapping arithmetic."""

    def test_forward_offset(self) -> None:
        """Positions shift by the start difference."""
        row = AssemblyMapping("chr1", "ctg7", 1001, 2000, 1, 1000, 1)
        assert row.map_position(1500) == 500
        assert row.map_position(1001) == 1

    def test_reverse_offset(self) -> None:
        """Reversed rows count down from the target end."""
        row = AssemblyMapping("chr1", "ctg2", 1101, 1600, 1, 500, 1, -1)
        assert row.map_position(1101) == 500
        assert row.map_position(1600) == 1

    def test_map_interval_reversed_swaps_flags(self) -> None:
        """Bounds swap sides together with their flags."""
        row = AssemblyMapping("chr1", "ctg2", 1101, 1600, 1, 500, 1, -1)
        mapped = row.map_interval(make_interval(1200, 1300, True, False))
        assert mapped == make_interval(301, 401, False, True)

    def test_overlaps(self) -> None:
        """Overlap is tested against the covered positions."""
        row = AssemblyMapping("chr1", "ctg1", 1, 1000, 1, 1000, 1)
        assert row.overlaps(closed(1000, 1200))
        assert not row.overlaps(closed(1001, 1200))
        assert not row.overlaps(EMPTY)

    def test_string_fields_converted(self) -> None:
        """Numeric fields accept strings, as read from files."""
        row = AssemblyMapping("chr1", "ctg1", "1", "10", "5", "14", "2", "-1")
        assert row.source_start == 1
        assert row.source_region_rank == 2
        assert row.orientation == -1

    def test_invalid_orientation(self) -> None:
        """Orientation must be 1 or -1."""
        with pytest.raises(ValueError):
            AssemblyMapping("chr1", "ctg1", 1, 10, 1, 10, 1, 0)


# =============================================================================
# Remapping
# =============================================================================


class TestRemap:
    """Tests for AssemblyMapper.remap."""

    def test_lowest_rank_wins(self, mapper) -> None:
        """The contig (rank 1) is preferred over the scaffold (rank 2)."""
        mapped = mapper.remap("chr1", closed(100, 200))
        assert mapped == MappedRegion("ctg1", closed(100, 200), Strand.FORWARD)

    def test_reversed_contig_flips_strand(self, mapper) -> None:
        """A reversed row maps the range backwards and flips the strand."""
        mapped = mapper.remap("chr1", closed(1200, 1300))
        assert mapped.region_id == "ctg2"
        assert mapped.interval == closed(301, 401)
        assert mapped.strand is Strand.REVERSE

    def test_reverse_strand_input(self, mapper) -> None:
        """A reverse-strand feature on a reversed contig is forward."""
        mapped = mapper.remap("chr1", closed(1200, 1300), "-")
        assert mapped.strand is Strand.FORWARD

    def test_two_hops(self, mapper) -> None:
        """chrX reaches ctg1 through scfX."""
        mapped = mapper.remap("chrX", closed(600, 700))
        assert mapped.region_id == "ctg1"
        assert mapped.interval == closed(100, 200)

    def test_sequence_level_region_unchanged(self, mapper) -> None:
        """Sequence-level regions are already terminal."""
        mapped = mapper.remap("ctg1", closed(5, 10))
        assert mapped.region_id == "ctg1"
        assert mapped.interval == closed(5, 10)

    def test_no_mapping_is_terminal(self, mapper) -> None:
        """A region without overlapping rows is returned as is."""
        mapped = mapper.remap("chrUn", closed(5, 10))
        assert mapped == MappedRegion("chrUn", closed(5, 10), Strand.FORWARD)

    def test_interval_outside_all_rows(self, mapper) -> None:
        """No overlapping row means no hop, even on a mapped region."""
        assert mapper.remap("chr1", closed(5000, 5100)).region_id == "chr1"

    def test_empty_interval(self, mapper) -> None:
        """EMPTY overlaps nothing and stays where it is."""
        assert mapper.remap("chr1", EMPTY) == MappedRegion("chr1", EMPTY, Strand.FORWARD)

    def test_ties_keep_source_order(self) -> None:
        """Among equal ranks the first candidate wins."""
        source = InMemoryAssemblySource.from_rows(
            [("r", "a", 1, 100, 1, 100, 1), ("r", "b", 1, 100, 1, 100, 1)],
            sequence_levels=["a", "b"],
        )
        assert AssemblyMapper(source).remap("r", closed(10, 20)).region_id == "a"

    def test_best_mapping(self, assembly_rows) -> None:
        """best_mapping picks the lowest rank."""
        chr1_rows = [row for row in assembly_rows if row.source_region_id == "chr1"]
        assert AssemblyMapper.best_mapping(chr1_rows).target_region_id == "ctg1"

    def test_logs_each_hop(self, mapper, caplog) -> None:
        """Each hop is logged at debug level."""
        caplog.set_level(logging.DEBUG, logger="genomap.assembly.mapper")
        mapper.remap("chrX", closed(600, 700))
        hops = [r for r in caplog.records if r.getMessage().startswith("Mapped")]
        assert len(hops) == 2


class TestRemapGuards:
    """Tests for cycle and depth protection."""

    def test_cycle_raises(self, mapper) -> None:
        """loopA -> loopB -> loopA is detected."""
        with pytest.raises(MappingNotFoundError, match="Cycle"):
            mapper.remap("loopA", closed(10, 20))

    def test_cycle_is_integrity_error(self, mapper) -> None:
        """MappingNotFoundError is an AssemblyIntegrityError."""
        with pytest.raises(AssemblyIntegrityError):
            mapper.remap("loopB", closed(10, 20))

    def test_depth_cap(self, assembly_source) -> None:
        """A chain longer than max_depth fails."""
        shallow = AssemblyMapper(assembly_source, max_depth=1)
        with pytest.raises(MappingNotFoundError):
            shallow.remap("chrX", closed(600, 700))

    def test_depth_cap_reached_exactly(self, assembly_source) -> None:
        """A chain of exactly max_depth hops succeeds."""
        mapper = AssemblyMapper(assembly_source, max_depth=2)
        assert mapper.remap("chrX", closed(600, 700)).region_id == "ctg1"

    def test_unmapped_region_after_last_hop(self) -> None:
        """A chain of max_depth hops may end on an unmapped region."""
        source = InMemoryAssemblySource.from_rows([("chr1", "scf1", 1, 100, 1, 100, 2)])
        mapper = AssemblyMapper(source, max_depth=1)
        assert mapper.remap_interval("chr1", closed(10, 20)) == ("scf1", closed(10, 20))

    def test_zero_depth_unmapped_region(self) -> None:
        """With max_depth=0 an unmapped region is returned unchanged."""
        source = InMemoryAssemblySource.from_rows([("chr1", "scf1", 1, 100, 1, 100, 2)])
        mapper = AssemblyMapper(source, max_depth=0)
        assert mapper.remap_interval("chrUn", closed(10, 20)) == ("chrUn", closed(10, 20))
        with pytest.raises(MappingNotFoundError, match="within 0 steps"):
            mapper.remap("chr1", closed(10, 20))

    def test_negative_depth_rejected(self, assembly_source) -> None:
        """max_depth must not be negative."""
        with pytest.raises(ValueError):
            AssemblyMapper(assembly_source, max_depth=-1)


class TestRemapHelpers:
    """Tests for remap_interval, remap_genomic and from_config."""

    def test_remap_interval_method(self, mapper) -> None:
        """remap_interval returns (region_id, interval)."""
        assert mapper.remap_interval("chr1", closed(100, 200)) == ("ctg1", closed(100, 200))

    def test_remap_interval_function(self, assembly_source) -> None:
        """The module function uses a default mapper."""
        assert remap_interval(assembly_source, "chrX", closed(600, 700)) == (
            "ctg1",
            closed(100, 200),
        )

    def test_remap_genomic(self, mapper) -> None:
        """GenomicIntervals carry their strand through reversed rows."""
        region, genomic = mapper.remap_genomic("chr1", GenomicInterval(1200, 1300, "+"))
        assert region == "ctg2"
        assert genomic == GenomicInterval(301, 401, Strand.REVERSE)

    def test_from_config(self, assembly_source) -> None:
        """Mapper settings come from MapperConfig."""
        mapper = AssemblyMapper.from_config(assembly_source, MapperConfig(max_depth=1))
        assert mapper.max_depth == 1
        assert AssemblyMapper.from_config(assembly_source).max_depth == 16


# =============================================================================
# Retry
# =============================================================================


class TestRetry:
    """Tests for retry of transient source failures."""

    def test_recovers_after_transient_failures(self, assembly_source) -> None:
        """Failures below max_attempts are retried."""
        flaky = FlakySource(assembly_source, failures=2)
        mapper = AssemblyMapper(flaky, max_attempts=3, initial_backoff=0.0)
        assert mapper.remap("chr1", closed(100, 200)).region_id == "ctg1"
        assert flaky.calls == 3

    def test_gives_up_after_max_attempts(self, assembly_source) -> None:
        """The last error propagates once attempts are exhausted."""
        flaky = FlakySource(assembly_source, failures=5)
        mapper = AssemblyMapper(flaky, max_attempts=2, initial_backoff=0.0)
        with pytest.raises(CollaboratorUnavailableError):
            mapper.remap("chr1", closed(100, 200))
        assert flaky.calls == 2

    def test_builtin_transient_errors_retried(self, assembly_source) -> None:
        """ConnectionError and TimeoutError are transient."""
        flaky = FlakySource(assembly_source, failures=1, error=TimeoutError)
        mapper = AssemblyMapper(flaky, initial_backoff=0.0)
        assert mapper.remap("chr1", closed(100, 200)).region_id == "ctg1"

    def test_other_errors_not_retried(self, assembly_source) -> None:
        """Non-transient errors propagate on the first attempt."""
        flaky = FlakySource(assembly_source, failures=5, error=RuntimeError)
        mapper = AssemblyMapper(flaky, initial_backoff=0.0)
        with pytest.raises(RuntimeError):
            mapper.remap("chr1", closed(100, 200))
        assert flaky.calls == 1

    def test_retry_logs_warning(self, assembly_source, caplog) -> None:
        """Each retry logs a warning."""
        caplog.set_level(logging.WARNING, logger="genomap.assembly.mapper")
        flaky = FlakySource(assembly_source, failures=1)
        AssemblyMapper(flaky, initial_backoff=0.0).remap("chr1", closed(100, 200))
        assert any("retrying" in r.getMessage() for r in caplog.records)

    def test_invalid_parameters(self) -> None:
        """Attempts and multiplier are validated."""
        with pytest.raises(ValueError):
            retry_collaborator(len, max_attempts=0)
        with pytest.raises(ValueError):
            retry_collaborator(len, backoff_multiplier=0.5)

    def test_wraps_function(self) -> None:
        """The wrapper keeps the wrapped function's name."""

        def fetch():
            return 42

        wrapped = retry_collaborator(fetch, initial_backoff=0.0)
        assert wrapped() == 42
        assert wrapped.__name__ == "fetch"


# =============================================================================
# Sequence
# =============================================================================


class TestFetchSequence:
    """Tests for AssemblyMapper.fetch_sequence."""

    def test_forward(self, mapper, synthetic_sequences) -> None:
        """Forward ranges read the contig directly."""
        seq = mapper.fetch_sequence("chr1", GenomicInterval(1, 20, "+"))
        assert seq == synthetic_sequences["ctg1"][:20]

    def test_reversed_contig(self, mapper, synthetic_sequences) -> None:
        """Ranges on a reversed contig are reverse-complemented."""
        seq = mapper.fetch_sequence("chr1", GenomicInterval(1200, 1203, "+"))
        assert seq == reverse_complement(synthetic_sequences["ctg2"][397:401])

    def test_reverse_strand_on_reversed_contig(self, mapper, synthetic_sequences) -> None:
        """Two reversals cancel out."""
        seq = mapper.fetch_sequence("chr1", GenomicInterval(1200, 1203, "-"))
        assert seq == synthetic_sequences["ctg2"][397:401]

    def test_unknown_sequence(self, mapper) -> None:
        """Terminal regions without sequence raise KeyError."""
        with pytest.raises(KeyError):
            mapper.fetch_sequence("chrUn", GenomicInterval(1, 10))
