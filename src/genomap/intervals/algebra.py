"""Interval algebra over integer positions.

An interval is one of three variants:

- ``EMPTY``: the canonical empty interval. Absorbing for intersection,
  identity for union.
- :class:`Simple`: one contiguous range with independently included or
  excluded ends.
- :class:`Multi`: a sorted, pairwise-disjoint union of two or more
  ``Simple`` parts, as used for spliced transcripts.

All values are immutable and every operation returns a new value. The
constructors are total: malformed bounds normalise to ``EMPTY`` and a
merge that leaves a single part collapses to that ``Simple``.

Example:
    >>> from genomap.intervals.algebra import make_interval, intersection
    >>> a = make_interval(0, 100, True, False)
    >>> b = make_interval(23, 42)
    >>> intersection(a, b) == b
    True
"""

from __future__ import annotations

import functools
from collections.abc import Iterable
from typing import Union

import attrs

from genomap.intervals.bounds import (
    Bound,
    looser_lower,
    looser_upper,
    lower_key,
    tighter_lower,
    tighter_upper,
)

# =============================================================================
# Variants
# =============================================================================


class _IntervalOps:
    """Operator sugar shared by all interval variants."""

    __slots__ = ()

    def __and__(self, other: Interval) -> Interval:
        return intersection(self, other)

    def __or__(self, other: Interval) -> Interval:
        return union(self, other)

    def __sub__(self, other: Interval) -> Interval:
        return relative_complement(other, self)

    def __contains__(self, position: int) -> bool:
        return contains(self, position)


@attrs.frozen(slots=True)
class Empty(_IntervalOps):
    """The empty interval. Use the ``EMPTY`` singleton."""

    @property
    def is_empty(self) -> bool:
        return True

    def __str__(self) -> str:
        return "EMPTY"


EMPTY = Empty()


def _check_simple(instance: Simple, attribute: attrs.Attribute, upper: Bound) -> None:
    lower = instance.lower
    if upper.value < lower.value or (
        upper.value == lower.value and not (lower.included and upper.included)
    ):
        raise ValueError(
            f"Degenerate bounds {lower}..{upper}; use make_interval() to normalise"
        )


@attrs.frozen(slots=True)
class Simple(_IntervalOps):
    """A single contiguous interval.

    Attributes:
        lower: Lower bound.
        upper: Upper bound. Either ``upper.value > lower.value`` or both
            bounds sit on the same value and are included.
    """

    lower: Bound
    upper: Bound = attrs.field(validator=_check_simple)

    @property
    def is_empty(self) -> bool:
        return False

    @property
    def first(self) -> int:
        """First covered integer position."""
        return self.lower.value if self.lower.included else self.lower.value + 1

    @property
    def last(self) -> int:
        """Last covered integer position."""
        return self.upper.value if self.upper.included else self.upper.value - 1

    def __str__(self) -> str:
        left = "[" if self.lower.included else "("
        right = "]" if self.upper.included else ")"
        return f"{left}{self.lower.value}, {self.upper.value}{right}"


def _check_parts(instance: Multi, attribute: attrs.Attribute, members: tuple) -> None:
    if len(members) < 2:
        raise ValueError(
            f"Multi needs at least two parts, got {len(members)}; use merge() instead"
        )
    for member in members:
        if not isinstance(member, Simple):
            raise TypeError(f"Multi parts must be Simple intervals, got {member!r}")
    for running, following in zip(members, members[1:]):
        if _touches(running, following):
            raise ValueError(
                f"Parts {running} and {following} are unsorted or not disjoint; "
                "use merge() instead"
            )


@attrs.frozen(slots=True)
class Multi(_IntervalOps):
    """A normalised union of disjoint simple intervals.

    Build with :func:`merge` or :func:`union`; both guarantee that ``parts``
    holds at least two sorted, pairwise-disjoint members.

    Attributes:
        parts: Simple intervals in ascending order.
    """

    parts: tuple[Simple, ...] = attrs.field(converter=tuple, validator=_check_parts)

    @property
    def is_empty(self) -> bool:
        return False

    def __str__(self) -> str:
        return " | ".join(str(part) for part in self.parts)


Interval = Union[Empty, Simple, Multi]


# =============================================================================
# Construction
# =============================================================================


def make_interval(
    lower: int,
    upper: int,
    lower_included: bool = True,
    upper_included: bool = True,
) -> Interval:
    """Build an interval, normalising degenerate bounds to ``EMPTY``.

    Args:
        lower: Lower position.
        upper: Upper position.
        lower_included: Whether ``lower`` itself is covered.
        upper_included: Whether ``upper`` itself is covered.

    Returns:
        ``EMPTY`` if ``upper < lower``, or if the positions are equal and
        either bound is excluded; otherwise a ``Simple``.
    """
    if upper < lower:
        return EMPTY
    if upper == lower and not (lower_included and upper_included):
        return EMPTY
    return Simple(Bound(lower, lower_included), Bound(upper, upper_included))


def closed(start: int, end: int) -> Interval:
    """Build the closed interval ``[start, end]``."""
    return make_interval(start, end, True, True)


def _touches(running: Simple, following: Simple) -> bool:
    # following.lower >= running.lower holds after sorting
    if following.lower.value < running.upper.value:
        return True
    if following.lower.value == running.upper.value:
        return following.lower.included or running.upper.included
    return False


def _collapse(simples: list[Simple]) -> Interval:
    if not simples:
        return EMPTY
    if len(simples) == 1:
        return simples[0]
    return Multi(simples)


def merge(intervals: Iterable[Interval]) -> Interval:
    """Merge any intervals into their normalised union.

    Members are flattened, sorted by lower bound and scanned once, fusing
    the running part with the next whenever they overlap or touch at a
    position that at least one of them includes.

    Args:
        intervals: Intervals of any variant; ``EMPTY`` members are dropped.

    Returns:
        ``EMPTY``, a single ``Simple`` or a ``Multi``.
    """
    simples = sorted(
        (part for interval in intervals for part in parts(interval)),
        key=lambda part: lower_key(part.lower),
    )

    merged: list[Simple] = []
    for current in simples:
        if merged and _touches(merged[-1], current):
            last = merged[-1]
            merged[-1] = Simple(last.lower, looser_upper(last.upper, current.upper))
        else:
            merged.append(current)

    return _collapse(merged)


make_multi = merge


# =============================================================================
# Inspection
# =============================================================================


def parts(interval: Interval) -> tuple[Simple, ...]:
    """Return the simple parts of an interval in ascending order."""
    match interval:
        case Empty():
            return ()
        case Simple():
            return (interval,)
        case Multi(members):
            return members
    raise TypeError(f"Not an interval: {interval!r}")


def hull(interval: Interval) -> Interval:
    """Return the smallest simple interval spanning ``interval``."""
    match interval:
        case Empty() | Simple():
            return interval
        case Multi(members):
            return Simple(members[0].lower, members[-1].upper)
    raise TypeError(f"Not an interval: {interval!r}")


def measure(interval: Interval) -> int:
    """Count the integer positions covered by an interval.

    A closed single-point interval has measure 1; ``EMPTY`` has measure 0.
    """
    match interval:
        case Empty():
            return 0
        case Simple():
            return max(0, interval.last - interval.first + 1)
        case Multi(members):
            return sum(measure(part) for part in members)
    raise TypeError(f"Not an interval: {interval!r}")


def contains(interval: Interval, position: int) -> bool:
    """Check if an integer position is covered by ``interval``."""
    return any(part.first <= position <= part.last for part in parts(interval))


def first_position(interval: Interval) -> int | None:
    """Return the lowest covered integer position, or None if none."""
    for part in parts(interval):
        if measure(part):
            return part.first
    return None


def last_position(interval: Interval) -> int | None:
    """Return the highest covered integer position, or None if none."""
    for part in reversed(parts(interval)):
        if measure(part):
            return part.last
    return None


# =============================================================================
# Set Algebra
# =============================================================================


def intersection(a: Interval, b: Interval) -> Interval:
    """Return the points covered by both ``a`` and ``b``."""
    match a, b:
        case (Empty(), _) | (_, Empty()):
            return EMPTY
        case (Simple(), Simple()):
            lower = tighter_lower(a.lower, b.lower)
            upper = tighter_upper(a.upper, b.upper)
            return make_interval(lower.value, upper.value, lower.included, upper.included)
        case (Multi(members), _):
            return functools.reduce(
                union, (intersection(part, b) for part in members), EMPTY
            )
        case (_, Multi(members)):
            return functools.reduce(
                union, (intersection(a, part) for part in members), EMPTY
            )
    raise TypeError(f"Not intervals: {a!r}, {b!r}")


def union(a: Interval, b: Interval) -> Interval:
    """Return the points covered by ``a`` or ``b``."""
    match a, b:
        case (Empty(), _):
            return b
        case (_, Empty()):
            return a
        case (Simple(), Simple()):
            if _touches(*sorted((a, b), key=lambda part: lower_key(part.lower))):
                return Simple(
                    looser_lower(a.lower, b.lower), looser_upper(a.upper, b.upper)
                )
            return merge((a, b))
    return merge((a, b))


def relative_complement(inner: Interval, outer: Interval) -> Interval:
    """Return the portion of ``outer`` not covered by ``inner``.

    The flank boundaries carry the inverse of ``inner``'s inclusion flags:
    removing ``[30, 50]`` from ``[0, 100]`` leaves ``[0, 30) | (50, 100]``.
    """
    match inner, outer:
        case (_, Empty()):
            return EMPTY
        case (Empty(), _):
            return outer
        case (_, Multi(members)):
            return functools.reduce(
                union, (relative_complement(inner, part) for part in members), EMPTY
            )
        case (Multi(members), _):
            return functools.reduce(
                intersection,
                (relative_complement(part, outer) for part in members),
                outer,
            )
        case (Simple(), Simple()):
            left = make_interval(
                outer.lower.value,
                inner.lower.value,
                outer.lower.included,
                not inner.lower.included,
            )
            right = make_interval(
                inner.upper.value,
                outer.upper.value,
                not inner.upper.included,
                outer.upper.included,
            )
            return union(intersection(left, outer), intersection(right, outer))
    raise TypeError(f"Not intervals: {inner!r}, {outer!r}")


def subset(sub: Interval, sup: Interval) -> bool:
    """Check if every position covered by ``sub`` is covered by ``sup``."""
    return measure(relative_complement(sup, sub)) == 0


def overlaps(a: Interval, b: Interval) -> bool:
    """Check if ``a`` and ``b`` share at least one integer position."""
    return measure(intersection(a, b)) > 0
