"""Tests for score matrices and the diameter score."""

import numpy as np
import pytest

from pixelfeatures.app.services.diameters import DiameterCache
from pixelfeatures.app.services.lattice import Coordinate
from pixelfeatures.app.services.scores import IntScoreMatrix, compute_diameter_score


class ConstantMatrix:
    """Score matrix returning the same value for every coordinate."""

    def __init__(self, value: int) -> None:
        self.value = value
        self.calls = 0

    def get(self, x: int, y: int) -> int:
        self.calls += 1
        return self.value


class DelegatingMatrix:
    """Plain ``get`` wrapper so the generic, non-vectorised path is used."""

    def __init__(self, inner: IntScoreMatrix) -> None:
        self.inner = inner

    def get(self, x: int, y: int) -> int:
        return self.inner.get(x, y)


@pytest.fixture
def cache() -> DiameterCache:
    return DiameterCache(init_max_radius=3).build()


def test_all_ones_sums_diameter_length(cache: DiameterCache) -> None:
    ones = ConstantMatrix(1)
    assert compute_diameter_score(ones, Coordinate(0, 0), Coordinate(2, 1), cache) == 5
    assert ones.calls == 5


def test_all_zeros_scores_zero(cache: DiameterCache) -> None:
    zeros = ConstantMatrix(0)
    for center in [(0, 0), (10, -4), (-3, 7)]:
        for endpoint in [(0, 0), (2, 1), (-5, 3), (12, 0)]:
            assert compute_diameter_score(zeros, center, endpoint, cache) == 0


def test_origin_endpoint_reads_the_center_only(cache: DiameterCache) -> None:
    values = np.arange(25).reshape(5, 5)
    matrix = IntScoreMatrix(values)
    assert compute_diameter_score(matrix, (3, 1), (0, 0), cache) == values[1, 3]


def test_center_offsets_diameter(cache: DiameterCache) -> None:
    """Matrix rows are y and columns x; (1, 0) at (2, 2) reads row 2, columns 1-3."""
    values = np.arange(25).reshape(5, 5)
    matrix = IntScoreMatrix(values)
    assert compute_diameter_score(matrix, (2, 2), (1, 0), cache) == 11 + 12 + 13
    assert compute_diameter_score(matrix, (2, 2), (0, 1), cache) == 7 + 12 + 17


def test_vectorised_and_generic_paths_agree(cache: DiameterCache) -> None:
    rng = np.random.default_rng(7)
    matrix = IntScoreMatrix(rng.integers(0, 255, size=(30, 40)))
    generic = DelegatingMatrix(matrix)
    for center in [(0, 0), (20, 15), (39, 29), (5, 27)]:
        for endpoint in [(2, 1), (-4, 3), (6, 0), (0, -6), (9, 8)]:
            assert compute_diameter_score(matrix, center, endpoint, cache) == compute_diameter_score(
                generic, center, endpoint, cache
            )


def test_out_of_bounds_policies(cache: DiameterCache) -> None:
    ones = np.ones((3, 3), dtype=np.int32)
    assert compute_diameter_score(IntScoreMatrix(ones, "zero"), (0, 0), (1, 0), cache) == 2
    assert compute_diameter_score(IntScoreMatrix(ones, "clamp"), (0, 0), (1, 0), cache) == 3
    with pytest.raises(IndexError):
        compute_diameter_score(IntScoreMatrix(ones, "raise"), (0, 0), (1, 0), cache)
    with pytest.raises(IndexError):
        compute_diameter_score(DelegatingMatrix(IntScoreMatrix(ones, "raise")), (0, 0), (1, 0), cache)


def test_clamp_reads_border_pixel() -> None:
    values = np.array([[1, 2], [3, 4]])
    matrix = IntScoreMatrix(values, out_of_bounds="clamp")
    assert matrix.get(-5, 0) == 1
    assert matrix.get(9, 9) == 4
    assert matrix.get(1, -1) == 2


def test_invalid_matrices_are_rejected() -> None:
    with pytest.raises(ValueError):
        IntScoreMatrix(np.zeros((2, 2), dtype=int), out_of_bounds="wrap")
    with pytest.raises(ValueError):
        IntScoreMatrix(np.zeros((2, 2), dtype=float))
    with pytest.raises(ValueError):
        IntScoreMatrix(np.zeros(4, dtype=int))


def test_matrix_errors_propagate(cache: DiameterCache) -> None:
    class Broken:
        def get(self, x: int, y: int) -> int:
            raise RuntimeError("no scores")

    with pytest.raises(RuntimeError, match="no scores"):
        compute_diameter_score(Broken(), (0, 0), (1, 1), cache)
