"""Interval bounds and bound comparators.

A bound is an integer position plus an inclusion flag. Two bounds at the
same position are not interchangeable: an included lower bound admits
one more point on the left than an excluded one, and an included upper
bound admits one more point on the right.

Ordering is therefore lexicographic on ``(value, flag)`` where the flag is
adjusted for the direction of the bound:

- lower bounds: included sorts before excluded (``lower_key``)
- upper bounds: excluded sorts before included (``upper_key``)

Example:
    >>> from genomap.intervals.bounds import Bound, lower_key
    >>> lower_key(Bound(10, True)) < lower_key(Bound(10, False))
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import attrs

from genomap.errors import EmptyIntervalError

if TYPE_CHECKING:
    from genomap.intervals.algebra import Interval


# =============================================================================
# Data Structures
# =============================================================================


@attrs.frozen(slots=True)
class Bound:
    """A scalar position with an inclusion flag.

    Attributes:
        value: Integer position.
        included: True if the position itself belongs to the interval.
    """

    value: int = attrs.field(converter=int)
    included: bool = True

    def flipped(self) -> Bound:
        """Return the same position with the inclusion flag inverted."""
        return Bound(self.value, not self.included)

    def __str__(self) -> str:
        return f"{self.value}{'' if self.included else '!'}"


# =============================================================================
# Ordering Keys
# =============================================================================


def lower_key(bound: Bound) -> tuple[int, int]:
    """Sort key for lower bounds; smaller admits more points on the left."""
    return (bound.value, 0 if bound.included else 1)


def upper_key(bound: Bound) -> tuple[int, int]:
    """Sort key for upper bounds; larger admits more points on the right."""
    return (bound.value, 1 if bound.included else 0)


def tighter_lower(a: Bound, b: Bound) -> Bound:
    """Return the lower bound that admits fewer points."""
    return a if lower_key(a) >= lower_key(b) else b


def looser_lower(a: Bound, b: Bound) -> Bound:
    """Return the lower bound that admits more points."""
    return a if lower_key(a) <= lower_key(b) else b


def tighter_upper(a: Bound, b: Bound) -> Bound:
    """Return the upper bound that admits fewer points."""
    return a if upper_key(a) <= upper_key(b) else b


def looser_upper(a: Bound, b: Bound) -> Bound:
    """Return the upper bound that admits more points."""
    return a if upper_key(a) >= upper_key(b) else b


# =============================================================================
# Interval Comparators
# =============================================================================


def _bounds(interval: Interval) -> tuple[Bound, Bound]:
    # Local import: algebra depends on this module.
    from genomap.intervals.algebra import hull

    spanning = hull(interval)
    if spanning.is_empty:
        raise EmptyIntervalError("Cannot compare bounds of an empty interval")
    return spanning.lower, spanning.upper


def lower_equal(a: Interval, b: Interval) -> bool:
    """Check if two intervals share the same lower bound (value and flag).

    Raises:
        EmptyIntervalError: If either interval is empty.
    """
    return lower_key(_bounds(a)[0]) == lower_key(_bounds(b)[0])


def lower_less(a: Interval, b: Interval) -> bool:
    """Check if ``a`` starts strictly before ``b``.

    At equal values an included lower bound is less than an excluded one.

    Raises:
        EmptyIntervalError: If either interval is empty.
    """
    return lower_key(_bounds(a)[0]) < lower_key(_bounds(b)[0])


def upper_less(a: Interval, b: Interval) -> bool:
    """Check if ``a`` ends strictly before ``b``.

    At equal values an excluded upper bound is less than an included one.

    Raises:
        EmptyIntervalError: If either interval is empty.
    """
    return upper_key(_bounds(a)[1]) < upper_key(_bounds(b)[1])


def upper_equal(a: Interval, b: Interval) -> bool:
    """Check if two intervals share the same upper bound (value and flag).

    Raises:
        EmptyIntervalError: If either interval is empty.
    """
    return upper_key(_bounds(a)[1]) == upper_key(_bounds(b)[1])
