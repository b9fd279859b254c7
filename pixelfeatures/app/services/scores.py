"""
Score matrices and the diameter score.

A score matrix maps image-absolute pixel coordinates to integer
intensities for one channel of one image.  The scoring routine only
needs ``get(x, y)``, so any object providing it can be passed in.
``IntScoreMatrix`` is the numpy-backed implementation used by the
score bank.

Diameters near the image border reach outside the matrix.  What an
out-of-range read returns is an explicit policy of the matrix rather
than an assumption of the scoring code:

- ``"zero"``: the pixel contributes 0 (default).
- ``"clamp"``: the nearest border pixel is read.
- ``"raise"``: an ``IndexError`` is raised and propagates to the caller.
"""

from __future__ import annotations

from typing import Optional, Protocol

import numpy as np

from .diameters import DiameterCache, get_default_cache
from .lattice import Coordinate

OUT_OF_BOUNDS_POLICIES = ("zero", "clamp", "raise")


class ScoreMatrix(Protocol):
    def get(self, x: int, y: int) -> int:
        ...


class IntScoreMatrix:
    """Read-only integer score matrix indexed by ``(x, y)``.

    Args:
        values: 2-D array of shape ``(height, width)``; row ``y``,
            column ``x``.
        out_of_bounds: One of ``"zero"``, ``"clamp"`` or ``"raise"``.
    """

    def __init__(self, values: np.ndarray, out_of_bounds: str = "zero") -> None:
        if out_of_bounds not in OUT_OF_BOUNDS_POLICIES:
            raise ValueError(
                f"Unknown out_of_bounds policy '{out_of_bounds}'. "
                f"Must be one of {', '.join(OUT_OF_BOUNDS_POLICIES)}."
            )
        arr = np.asarray(values)
        if arr.ndim != 2:
            raise ValueError(f"Score matrix must be 2-D, got shape {arr.shape}")
        if not np.issubdtype(arr.dtype, np.integer):
            raise ValueError(f"Score matrix must hold integers, got dtype {arr.dtype}")
        self._values = arr.astype(np.int64, copy=True)
        self._values.setflags(write=False)
        self.out_of_bounds = out_of_bounds

    @property
    def width(self) -> int:
        return int(self._values.shape[1])

    @property
    def height(self) -> int:
        return int(self._values.shape[0])

    def get(self, x: int, y: int) -> int:
        if 0 <= x < self.width and 0 <= y < self.height:
            return int(self._values[y, x])
        if self.out_of_bounds == "zero":
            return 0
        if self.out_of_bounds == "clamp":
            cx = min(max(x, 0), self.width - 1)
            cy = min(max(y, 0), self.height - 1)
            return int(self._values[cy, cx])
        raise IndexError(f"({x}, {y}) outside {self.width}x{self.height} score matrix")

    def sum_at(self, xs: np.ndarray, ys: np.ndarray) -> int:
        """Sum the matrix over many coordinates honouring the out-of-bounds policy."""
        inside = (xs >= 0) & (xs < self.width) & (ys >= 0) & (ys < self.height)
        if inside.all():
            return int(self._values[ys, xs].sum())
        if self.out_of_bounds == "zero":
            return int(self._values[ys[inside], xs[inside]].sum())
        if self.out_of_bounds == "clamp":
            cx = np.clip(xs, 0, self.width - 1)
            cy = np.clip(ys, 0, self.height - 1)
            return int(self._values[cy, cx].sum())
        bad = int(np.argmin(inside))
        raise IndexError(
            f"({int(xs[bad])}, {int(ys[bad])}) outside {self.width}x{self.height} score matrix"
        )


def compute_diameter_score(
    score_matrix: ScoreMatrix,
    center: Coordinate,
    endpoint: Coordinate,
    cache: Optional[DiameterCache] = None,
) -> int:
    """Sum the scores along a diameter placed at ``center``.

    Args:
        score_matrix: Scores for one channel of one image.
        center: Image-absolute coordinates of the diameter's midpoint.
        endpoint: Circle-centred coordinates of one of the diameter's
            endpoints.
        cache: Diameter cache to read from; the process-wide cache when
            omitted.

    Returns:
        The summed score, without normalisation.
    """
    if cache is None:
        cache = get_default_cache()
    diameter = cache.get_diameter(endpoint)
    cx, cy = center
    if isinstance(score_matrix, IntScoreMatrix):
        offsets = diameter.array
        return score_matrix.sum_at(offsets[:, 0] + cx, offsets[:, 1] + cy)
    score = 0
    for dx, dy in diameter:
        score += score_matrix.get(cx + dx, cy + dy)
    return score
