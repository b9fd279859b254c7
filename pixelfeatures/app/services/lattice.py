"""
Integer lattice helpers used by the diameter masks.

This module defines the ``Coordinate`` value type shared by the mask
generator, the scoring routine and the feature set, together with the
two point enumerators the rest of the pipeline is seeded from:

- ``points_in_disk`` returns every lattice point inside a circle of a
  given radius (used to pre-populate the diameter cache).
- ``points_on_ring`` returns the lattice points whose distance from the
  origin rounds to the radius (used to pick direction endpoints).

Both enumerators return lists ordered by polar angle, measured
counter-clockwise from the positive x axis, and then by distance.  A
stable ordering matters because feature positions are derived from it.
"""

from __future__ import annotations

import math
from typing import List, NamedTuple

import numpy as np


class Coordinate(NamedTuple):
    """An integer lattice point ``(x, y)``.

    Being a ``NamedTuple`` the coordinate compares and hashes equal to a
    plain ``(x, y)`` tuple, so callers may look diameters up with either.
    """

    x: int
    y: int

    def __neg__(self) -> "Coordinate":
        return Coordinate(-self.x, -self.y)


def _angle_order(xs: np.ndarray, ys: np.ndarray) -> List[Coordinate]:
    angles = np.mod(np.arctan2(ys, xs), 2 * math.pi)
    dist2 = xs * xs + ys * ys
    # lexsort uses the last key as the primary one
    order = np.lexsort((dist2, angles))
    return [Coordinate(int(xs[i]), int(ys[i])) for i in order]


def _lattice_grid(radius: int) -> tuple[np.ndarray, np.ndarray]:
    if radius < 0:
        raise ValueError(f"radius must be non-negative, got {radius}")
    span = np.arange(-radius, radius + 1, dtype=np.int64)
    xs, ys = np.meshgrid(span, span)
    return xs.ravel(), ys.ravel()


def points_in_disk(radius: int) -> List[Coordinate]:
    """Return all lattice points with ``x**2 + y**2 <= radius**2``.

    Args:
        radius: Non-negative disk radius.

    Returns:
        The points ordered by angle then distance.  The origin sorts
        first since its angle is zero.

    Raises:
        ValueError: If ``radius`` is negative.
    """
    xs, ys = _lattice_grid(radius)
    mask = xs * xs + ys * ys <= radius * radius
    return _angle_order(xs[mask], ys[mask])


def points_on_ring(radius: int) -> List[Coordinate]:
    """Return the lattice points whose distance from the origin rounds to ``radius``.

    A point ``p`` is on the ring when ``radius - 0.5 <= |p| < radius + 0.5``.
    The test is carried out on squared, doubled integers so there is no
    floating point ambiguity at the band edges.  The ring of radius zero
    is the origin alone.

    Raises:
        ValueError: If ``radius`` is negative.
    """
    if radius < 0:
        raise ValueError(f"radius must be non-negative, got {radius}")
    if radius == 0:
        return [Coordinate(0, 0)]
    xs, ys = _lattice_grid(radius + 1)
    four_d2 = 4 * (xs * xs + ys * ys)
    mask = ((2 * radius - 1) ** 2 <= four_d2) & (four_d2 < (2 * radius + 1) ** 2)
    return _angle_order(xs[mask], ys[mask])


def in_upper_half_plane(point: Coordinate) -> bool:
    """True for points in the first two quadrants.

    The positive x axis is included and the negative x axis excluded, so
    exactly one of ``p`` and ``-p`` qualifies for any nonzero ``p``.
    """
    x, y = point
    return (y >= 0 and x > 0) or (y > 0 and x <= 0)


def diameter_endpoints(radius: int) -> List[Coordinate]:
    """Direction endpoints on the ring of ``radius``, one per diameter."""
    return [p for p in points_on_ring(radius) if in_upper_half_plane(p)]
