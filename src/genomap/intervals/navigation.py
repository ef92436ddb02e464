"""Positional navigation through the covered points of an interval.

These helpers treat an interval as the ordered set of integer positions
it covers, skipping the gaps between the parts of a ``Multi``. They are
what turns a spliced transcript into a linear cDNA coordinate space.

Example:
    >>> from genomap.intervals.algebra import closed, merge
    >>> from genomap.intervals.navigation import nth_element, advance
    >>> spliced = merge([closed(10, 19), closed(30, 39)])
    >>> nth_element(spliced, 10)
    30
    >>> advance(spliced, 18, 3)
    31
"""

from __future__ import annotations

from genomap.errors import IntervalRangeError
from genomap.intervals.algebra import (
    EMPTY,
    Interval,
    intersection,
    make_interval,
    measure,
    parts,
)


def nth_element(interval: Interval, n: int) -> int:
    """Return the n-th covered position (0-based) in ascending order.

    Args:
        interval: Interval to index into.
        n: 0-based index, ``0 <= n < measure(interval)``.

    Returns:
        The covered integer position.

    Raises:
        IntervalRangeError: If ``n`` is outside the covered range.
    """
    size = measure(interval)
    if n < 0 or n >= size:
        raise IntervalRangeError(f"Index {n} out of range for {interval} (measure {size})")

    remaining = n
    for part in parts(interval):
        part_size = measure(part)
        if remaining < part_size:
            return part.first + remaining
        remaining -= part_size

    raise IntervalRangeError(f"Index {n} out of range for {interval}")


def position_index(interval: Interval, position: int) -> int:
    """Return the 0-based index of a covered position.

    This is the inverse of :func:`nth_element`.

    Raises:
        IntervalRangeError: If ``position`` is not covered by ``interval``.
    """
    offset = 0
    for part in parts(interval):
        part_size = measure(part)
        if part_size and part.first <= position <= part.last:
            return offset + position - part.first
        offset += part_size

    raise IntervalRangeError(f"Position {position} is not covered by {interval}")


def advance(interval: Interval, start_position: int, steps: int) -> int | None:
    """Walk ``steps`` covered positions from ``start_position``.

    Gaps between the parts of a ``Multi`` are skipped. Negative ``steps``
    walk towards lower positions.

    Args:
        interval: Interval providing the covered positions.
        start_position: Covered position to start from.
        steps: Number of covered positions to move.

    Returns:
        The position reached, or None if the walk leaves the interval.

    Raises:
        IntervalRangeError: If ``start_position`` is not covered.
    """
    target = position_index(interval, start_position) + steps
    if target < 0 or target >= measure(interval):
        return None
    return nth_element(interval, target)


def subinterval(interval: Interval, start_position: int, length: int) -> Interval | None:
    """Carve ``length`` consecutive covered positions out of ``interval``.

    Args:
        interval: Interval to carve from.
        start_position: First covered position of the result.
        length: Number of covered positions to keep.

    Returns:
        The closed sub-region (a ``Multi`` when it spans a gap), ``EMPTY``
        for zero length, or None if fewer than ``length`` positions remain.

    Raises:
        IntervalRangeError: If ``start_position`` is not covered.
    """
    if length <= 0:
        position_index(interval, start_position)
        return EMPTY

    end_position = advance(interval, start_position, length - 1)
    if end_position is None:
        return None
    return intersection(interval, make_interval(start_position, end_position))
