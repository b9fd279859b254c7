"""
Tests for diameter rasterisation and the diameter cache.

Each test builds its own ``DiameterCache`` so cold-start generation and
lazy growth can be observed without touching the process-wide cache.
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from pixelfeatures.app.services import diameters
from pixelfeatures.app.services.diameters import (
    Diameter,
    DiameterCache,
    Octant,
    classify_octant,
    from_first_octant,
    rasterize_first_octant,
    reflect_to_upper_half,
    to_first_octant,
)
from pixelfeatures.app.services.lattice import Coordinate, points_in_disk


@pytest.fixture
def cache() -> DiameterCache:
    return DiameterCache(init_max_radius=5).build()


def test_origin_diameter_on_cold_cache() -> None:
    cold = DiameterCache()
    assert len(cold) == 0
    assert cold.get_diameter((0, 0)) == [(0, 0)]


def test_diameter_through_two_one(cache: DiameterCache) -> None:
    """The midpoint tie at x=1 stays on the x axis."""
    d = cache.get_diameter((2, 1))
    assert d == [(0, 0), (1, 0), (2, 1), (-1, 0), (-2, -1)]
    assert set(d) == {(-2, -1), (-1, 0), (0, 0), (1, 0), (2, 1)}


@pytest.mark.parametrize(
    "endpoint, expected",
    [
        ((1, 2), [(0, 0), (0, 1), (1, 2), (0, -1), (-1, -2)]),
        ((-1, 2), [(0, 0), (0, 1), (-1, 2), (0, -1), (1, -2)]),
        ((-2, 1), [(0, 0), (-1, 0), (-2, 1), (1, 0), (2, -1)]),
        ((0, 3), [(0, 0), (0, 1), (0, 2), (0, 3), (0, -1), (0, -2), (0, -3)]),
        ((-3, 0), [(0, 0), (1, 0), (2, 0), (3, 0), (-1, 0), (-2, 0), (-3, 0)]),
        ((2, 2), [(0, 0), (1, 1), (2, 2), (-1, -1), (-2, -2)]),
        ((3, 1), [(0, 0), (1, 0), (2, 1), (3, 1), (-1, 0), (-2, -1), (-3, -1)]),
    ],
)
def test_known_diameters(cache: DiameterCache, endpoint, expected) -> None:
    assert cache.get_diameter(endpoint) == expected


def test_antipodal_endpoints_share_one_instance(cache: DiameterCache) -> None:
    for t in points_in_disk(8):
        assert cache.get_diameter(t) is cache.get_diameter(-t)


def test_diameters_are_point_symmetric(cache: DiameterCache) -> None:
    for t in points_in_disk(8):
        d = cache.get_diameter(t)
        pts = set(d)
        assert len(pts) == len(d)
        assert list(d).count((0, 0)) == 1
        for p in d:
            assert -p in pts
        assert t in pts and -t in pts
        assert len(d) == 2 * max(abs(t[0]), abs(t[1])) + 1


def test_lookup_is_idempotent(cache: DiameterCache) -> None:
    first = cache.get_diameter((7, -3))
    second = cache.get_diameter((7, -3))
    assert first is second
    assert DiameterCache().get_diameter((7, -3)) == first


def test_build_seeds_the_initial_disk() -> None:
    cache = DiameterCache(init_max_radius=3)
    assert not cache.built
    cache.build()
    assert cache.built
    for p in points_in_disk(3):
        assert p in cache
    assert (9, 4) not in cache


def test_out_of_range_lookup_grows_the_cache(cache: DiameterCache) -> None:
    size = len(cache)
    assert (20, 7) not in cache
    d = cache.get_diameter((20, 7))
    assert len(cache) == size + 2
    assert (20, 7) in cache and (-20, -7) in cache
    assert cache.get_diameter((-20, -7)) is d


def test_redundant_generation_keeps_the_first_instance() -> None:
    cache = DiameterCache()
    first = cache.generate_diameter((7, 3))
    second = cache.generate_diameter((-7, -3))
    assert second is first


def test_concurrent_first_lookups_agree() -> None:
    cache = DiameterCache()
    endpoints = [(x, y) for x in range(-12, 13) for y in (-11, 5, 11)] * 4
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(cache.get_diameter, endpoints))
    for t, d in zip(endpoints, results):
        assert d == cache.get_diameter(t)
        assert cache.get_diameter(t) is cache.get_diameter((-t[0], -t[1]))


def test_diameter_array_matches_points(cache: DiameterCache) -> None:
    d = cache.get_diameter((3, 1))
    assert isinstance(d, Diameter)
    assert d.array.shape == (len(d), 2)
    assert np.array_equal(d.array, np.array(d.points))
    with pytest.raises(ValueError):
        d.array[0, 0] = 99


def test_reflection_into_upper_half_plane() -> None:
    assert reflect_to_upper_half(Coordinate(2, -1)) == (-2, 1)
    assert reflect_to_upper_half(Coordinate(-3, 0)) == (3, 0)
    assert reflect_to_upper_half(Coordinate(0, -4)) == (0, 4)
    assert reflect_to_upper_half(Coordinate(-1, 2)) == (-1, 2)


@pytest.mark.parametrize(
    "point, octant",
    [
        ((3, 0), Octant.FIRST),
        ((3, 2), Octant.FIRST),
        ((2, 2), Octant.SECOND),
        ((1, 3), Octant.SECOND),
        ((0, 3), Octant.THIRD),
        ((-1, 3), Octant.THIRD),
        ((-2, 2), Octant.FOURTH),
        ((-3, 1), Octant.FOURTH),
    ],
)
def test_octant_boundaries(point, octant) -> None:
    assert classify_octant(Coordinate(*point)) is octant


def test_octant_transform_round_trip() -> None:
    """Classify then invert reproduces every upper half-plane point."""
    for p in points_in_disk(9):
        if p == (0, 0):
            continue
        q = reflect_to_upper_half(p)
        octant = classify_octant(q)
        first = to_first_octant(q, octant)
        assert 0 <= first.y <= first.x
        assert from_first_octant(first, octant) == q


def test_first_octant_walk() -> None:
    pts = rasterize_first_octant(5, 2)
    assert len(pts) == 6
    assert pts[0] == (0, 0) and pts[-1] == (5, 2)
    assert [p.x for p in pts] == list(range(6))
    steps = [b.y - a.y for a, b in zip(pts, pts[1:])]
    assert set(steps) <= {0, 1}


def test_default_cache_can_be_replaced() -> None:
    isolated = DiameterCache(init_max_radius=1)
    previous = diameters.get_default_cache()
    try:
        diameters.set_default_cache(isolated)
        assert diameters.get_default_cache() is isolated
        assert diameters.get_diameter((2, 1)) == [(0, 0), (1, 0), (2, 1), (-1, 0), (-2, -1)]
        assert (2, 1) in isolated
    finally:
        diameters.set_default_cache(previous)
