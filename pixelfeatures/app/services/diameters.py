"""
Diameter masks and the in-memory cache that serves them.

A *diameter* is the locus of lattice points on the line through the
origin and a given endpoint, running from the endpoint through the
origin to the endpoint's reflection.  For instance the diameter through
``(2, 1)`` is::

    (0, 0), (1, 0), (2, 1), (-1, 0), (-2, -1)

Diameters are rasterised with an incremental midpoint (Bresenham style)
walk.  Only the first octant (``0 <= y <= x``) is drawn explicitly:
every endpoint is first reflected into the upper half-plane and then
swapped and/or sign-flipped into the first octant, and the resulting
half diameter is mapped back and mirrored through the origin.

The same handful of directions is requested for every pixel of every
image, so generated diameters are memoised in a ``DiameterCache``.  An
endpoint and its reflection key the identical ``Diameter`` instance.
The cache grows lazily and never evicts.

Concurrent readers only perform dictionary lookups.  Two threads that
miss on the same endpoint may both rasterise it; insertion goes through
``dict.setdefault`` so a single instance survives and the redundant one
is dropped.  Generation is a pure function of the endpoint, so either
result is correct.

Usage::

    from .diameters import DiameterCache
    cache = DiameterCache(init_max_radius=5)
    cache.build()
    points = cache.get_diameter((2, 1))
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import IntEnum
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from .lattice import Coordinate, points_in_disk

logger = logging.getLogger(__name__)

# Radius of the disk of endpoints generated eagerly by ``build``.
INIT_MAX_RADIUS: int = 5

ORIGIN = Coordinate(0, 0)


class Diameter(Sequence):
    """An immutable, origin-symmetric sequence of lattice points.

    The points are also exposed as an ``(N, 2)`` integer array so the
    scoring routine can gather matrix values in one vectorised step.
    Equality is by point sequence, so a diameter compares equal to a
    list or tuple of the same ``(x, y)`` pairs in the same order.
    """

    __slots__ = ("_points", "_array")

    def __init__(self, points: Sequence[Coordinate]) -> None:
        self._points: Tuple[Coordinate, ...] = tuple(Coordinate(*p) for p in points)
        array = np.array(self._points, dtype=np.int64).reshape(-1, 2)
        array.setflags(write=False)
        self._array = array

    @property
    def points(self) -> Tuple[Coordinate, ...]:
        return self._points

    @property
    def array(self) -> np.ndarray:
        """Read-only ``(N, 2)`` array of ``(x, y)`` rows."""
        return self._array

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index):  # type: ignore[override]
        return self._points[index]

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(self._points)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Diameter):
            return self._points == other._points
        if isinstance(other, (list, tuple)):
            return self._points == tuple(tuple(p) for p in other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._points)

    def __repr__(self) -> str:
        return f"Diameter({list(self._points)!r})"


class Octant(IntEnum):
    """Upper half-plane octants, numbered counter-clockwise.

    Octant 1 includes ``y = 0`` but not ``y = x``; octant 2 includes
    ``y = x`` but not ``x = 0``; octant 3 includes ``x = 0`` but not
    ``y = -x``; octant 4 includes ``y = -x`` and excludes the negative
    x axis, which belongs to the lower half-plane.
    """

    FIRST = 1
    SECOND = 2
    THIRD = 3
    FOURTH = 4


def reflect_to_upper_half(point: Coordinate) -> Coordinate:
    """Reflect ``point`` through the origin if it lies in the lower half-plane."""
    x, y = point
    if (y < 0 and x >= 0) or (y <= 0 and x < 0):
        return Coordinate(-x, -y)
    return Coordinate(x, y)


def classify_octant(point: Coordinate) -> Octant:
    """Classify an upper half-plane point into one of four octants."""
    x, y = point
    if x > 0 and y > 0 and x <= y:
        return Octant.SECOND
    if x <= 0 and y > 0 and abs(x) < y:
        return Octant.THIRD
    if x < 0 and y > 0 and abs(x) >= y:
        return Octant.FOURTH
    return Octant.FIRST


def to_first_octant(point: Coordinate, octant: Octant) -> Coordinate:
    """Transform a point of ``octant`` into the first octant."""
    x, y = point
    if octant is Octant.SECOND:
        return Coordinate(y, x)
    if octant is Octant.THIRD:
        return Coordinate(y, abs(x))
    if octant is Octant.FOURTH:
        return Coordinate(abs(x), y)
    return Coordinate(x, y)


def from_first_octant(point: Coordinate, octant: Octant) -> Coordinate:
    """Inverse of :func:`to_first_octant` for points of the upper half-plane."""
    x, y = point
    if octant is Octant.SECOND:
        return Coordinate(y, x)
    if octant is Octant.THIRD:
        return Coordinate(-y, x)
    if octant is Octant.FOURTH:
        return Coordinate(-x, y)
    return Coordinate(x, y)


def rasterize_first_octant(x1: int, y1: int) -> List[Coordinate]:
    """Walk from the origin to ``(x1, y1)`` with ``0 <= y1 <= x1``.

    One point is emitted per x step, ``x1 + 1`` in total.  The error
    term tracks ``x * y1 / x1 - y`` scaled by ``x1`` so the walk stays in
    integer arithmetic; y advances once the error passes one half.  A
    tie at exactly one half keeps y on the x axis side.
    """
    points = [Coordinate(0, 0)]
    error = 0
    y = 0
    for x in range(1, x1 + 1):
        error += y1
        # A tie stays on the x axis so (2, 1) draws as (0, 0), (1, 0), (2, 1).
        if 2 * error > x1:
            y += 1
            error -= x1
        points.append(Coordinate(x, y))
    return points


def rasterize_diameter(endpoint: Coordinate) -> Tuple[Coordinate, Diameter]:
    """Rasterise the diameter through ``endpoint``.

    Returns:
        A tuple of the canonical (upper half-plane) endpoint and the
        diameter.  The half diameter towards the canonical endpoint comes
        first, followed by the reflection of each of its non-origin
        points.
    """
    canonical = reflect_to_upper_half(Coordinate(*endpoint))
    if canonical == ORIGIN:
        return ORIGIN, Diameter([ORIGIN])
    octant = classify_octant(canonical)
    x1, y1 = to_first_octant(canonical, octant)
    half = [from_first_octant(p, octant) for p in rasterize_first_octant(x1, y1)]
    mirrored = [-p for p in half if p != ORIGIN]
    return canonical, Diameter(half + mirrored)


class DiameterCache:
    """Memoised diameters keyed by endpoint.

    ``build`` seeds the cache with every endpoint inside
    ``init_max_radius``; anything further out is generated on first use.
    """

    def __init__(self, init_max_radius: int = INIT_MAX_RADIUS) -> None:
        if init_max_radius < 0:
            raise ValueError(f"init_max_radius must be non-negative, got {init_max_radius}")
        self.init_max_radius = init_max_radius
        self._diameters: Dict[Coordinate, Diameter] = {}
        self._built = False

    def __len__(self) -> int:
        return len(self._diameters)

    def __contains__(self, endpoint: object) -> bool:
        return endpoint in self._diameters

    @property
    def built(self) -> bool:
        return self._built

    def build(self) -> "DiameterCache":
        """Register the origin diameter and every diameter within the initial radius."""
        if self._built:
            return self
        self._diameters.setdefault(ORIGIN, Diameter([ORIGIN]))
        for point in points_in_disk(self.init_max_radius):
            if point not in self._diameters:
                self.generate_diameter(point)
        self._built = True
        logger.debug(
            "DiameterCache built: radius=%d entries=%d",
            self.init_max_radius,
            len(self._diameters),
        )
        return self

    def generate_diameter(self, endpoint: Coordinate) -> Diameter:
        """Rasterise the diameter through ``endpoint`` and install it.

        The diameter is stored under the canonical endpoint and its
        reflection.  If another caller installed the same diameter first,
        that instance is returned and the new one discarded.
        """
        canonical, diameter = rasterize_diameter(endpoint)
        stored = self._diameters.setdefault(canonical, diameter)
        self._diameters.setdefault(-canonical, stored)
        return stored

    def get_diameter(self, endpoint: Coordinate) -> Diameter:
        """Return the diameter one of whose endpoints is ``endpoint``."""
        endpoint = Coordinate(*endpoint)
        diameter = self._diameters.get(endpoint)
        if diameter is None:
            logger.debug("DiameterCache miss for %s; generating", tuple(endpoint))
            diameter = self.generate_diameter(endpoint)
        return diameter


_default_cache: Optional[DiameterCache] = None


def get_default_cache() -> DiameterCache:
    """Return the process-wide cache, building it on first use."""
    global _default_cache
    if _default_cache is None:
        _default_cache = DiameterCache().build()
    return _default_cache


def set_default_cache(cache: Optional[DiameterCache]) -> None:
    """Replace the process-wide cache.  ``None`` resets it to a lazily built default."""
    global _default_cache
    _default_cache = cache


def get_diameter(endpoint: Coordinate) -> Diameter:
    """Look ``endpoint`` up in the process-wide cache."""
    return get_default_cache().get_diameter(endpoint)
