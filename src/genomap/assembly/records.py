"""Assembly mapping records and the assembly data source protocol.

An assembly mapping row states that a range of one sequence region
(``source``) is made of a range of another (``target``). Following the
rows downwards through the coordinate-system hierarchy ends at a
sequence-level region, the only kind that carries raw sequence.

The rows themselves come from an external data-access layer (a database,
a REST API, a file). genomap only consumes them through the
:class:`AssemblySource` protocol.

Example:
    >>> from genomap.assembly.records import AssemblyMapping
    >>> row = AssemblyMapping("chr1", "contig_7", 1001, 2000, 1, 1000, 1)
    >>> row.map_position(1500)
    500
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping, Sequence
from typing import Protocol, Union

import attrs

from genomap.intervals.algebra import (
    Interval,
    closed,
    first_position,
    last_position,
    make_interval,
    merge,
    parts,
)

RegionId = Union[int, str]


# =============================================================================
# Records
# =============================================================================


def _check_orientation(instance: AssemblyMapping, attribute: attrs.Attribute, value: int) -> None:
    if value not in (1, -1):
        raise ValueError(f"orientation must be 1 or -1, got {value}")


@attrs.frozen(slots=True)
class AssemblyMapping:
    """One row of the assembly table.

    Attributes:
        source_region_id: Region whose coordinates are being mapped.
        target_region_id: Region the source range is built from.
        source_start: First position of the range on the source (1-based).
        source_end: Last position of the range on the source (inclusive).
        target_start: First position of the range on the target.
        target_end: Last position of the range on the target.
        source_region_rank: Rank of the coordinate system reached by this
            row; lower is more specific.
        orientation: 1 if both ranges run the same way, -1 if reversed.
    """

    source_region_id: RegionId
    target_region_id: RegionId
    source_start: int = attrs.field(converter=int)
    source_end: int = attrs.field(converter=int)
    target_start: int = attrs.field(converter=int)
    target_end: int = attrs.field(converter=int)
    source_region_rank: int = attrs.field(converter=int)
    orientation: int = attrs.field(default=1, converter=int, validator=_check_orientation)

    @property
    def source_interval(self) -> Interval:
        return closed(self.source_start, self.source_end)

    @property
    def target_interval(self) -> Interval:
        return closed(self.target_start, self.target_end)

    def overlaps(self, interval: Interval) -> bool:
        """Check if the source range overlaps the hull of ``interval``."""
        lower, upper = first_position(interval), last_position(interval)
        if lower is None:
            return False
        return self.source_start <= upper and lower <= self.source_end

    def map_position(self, position: int) -> int:
        """Map a source position into target coordinates by linear offset."""
        if self.orientation == 1:
            return self.target_start + (position - self.source_start)
        return self.target_end - (position - self.source_start)

    def map_interval(self, interval: Interval) -> Interval:
        """Map every bound of an interval into target coordinates.

        On reversed rows the bounds swap sides, keeping their inclusion
        flags.
        """
        mapped = []
        for part in parts(interval):
            lower = self.map_position(part.lower.value)
            upper = self.map_position(part.upper.value)
            if self.orientation == 1:
                mapped.append(make_interval(lower, upper, part.lower.included, part.upper.included))
            else:
                mapped.append(make_interval(upper, lower, part.upper.included, part.lower.included))
        return merge(mapped)


# =============================================================================
# Data Source Protocol
# =============================================================================


class AssemblySource(Protocol):
    """Data-access collaborator supplying assembly rows and raw sequence."""

    def fetch_overlapping_assembly_mappings(
        self, region_id: RegionId, interval: Interval
    ) -> Sequence[AssemblyMapping]:
        """Return rows whose source is ``region_id`` and overlaps ``interval``."""
        ...

    def is_sequence_level(self, region_id: RegionId) -> bool:
        """Check if ``region_id`` belongs to a sequence-level coordinate system."""
        ...

    def fetch_raw_sequence(self, region_id: RegionId, start: int, end: int) -> bytes:
        """Return bases ``start..end`` (1-based, inclusive) of a region."""
        ...


@attrs.define
class InMemoryAssemblySource:
    """An :class:`AssemblySource` backed by in-memory rows.

    Attributes:
        mappings: Assembly rows, in the order candidates are reported.
        sequence_levels: Region IDs that are sequence-level.
        sequences: Raw sequence per sequence-level region.
    """

    mappings: list[AssemblyMapping] = attrs.Factory(list)
    sequence_levels: frozenset[Hashable] = attrs.field(factory=frozenset, converter=frozenset)
    sequences: Mapping[RegionId, bytes | str] = attrs.Factory(dict)

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Sequence],
        sequence_levels: Iterable[RegionId] = (),
        sequences: Mapping[RegionId, bytes | str] | None = None,
    ) -> InMemoryAssemblySource:
        """Build a source from raw tuples in ``AssemblyMapping`` field order."""
        return cls(
            mappings=[AssemblyMapping(*row) for row in rows],
            sequence_levels=sequence_levels,
            sequences=dict(sequences or {}),
        )

    def fetch_overlapping_assembly_mappings(
        self, region_id: RegionId, interval: Interval
    ) -> list[AssemblyMapping]:
        return [
            row
            for row in self.mappings
            if row.source_region_id == region_id and row.overlaps(interval)
        ]

    def is_sequence_level(self, region_id: RegionId) -> bool:
        return region_id in self.sequence_levels

    def fetch_raw_sequence(self, region_id: RegionId, start: int, end: int) -> bytes:
        try:
            sequence = self.sequences[region_id]
        except KeyError:
            raise KeyError(f"No sequence stored for region {region_id!r}") from None
        if isinstance(sequence, str):
            sequence = sequence.encode("ascii")
        return bytes(sequence[max(start, 1) - 1 : end])
