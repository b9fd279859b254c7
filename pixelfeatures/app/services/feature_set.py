"""
Diameter score features.

For every sampled pixel the feature set emits one diameter score per
(channel, direction endpoint) pair: channel-major, endpoint-minor.  The
endpoints are the ring points of the run radius that lie in the upper
half-plane, so each diameter is scored once.  Names, types and colours
are enumerated in the same order so they line up positionally with the
emitted values.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, MutableSequence, Optional, Sequence

import numpy as np

from .diameters import DiameterCache, get_default_cache
from .image_set import ImageSet
from .lattice import Coordinate, diameter_endpoints
from .score_bank import ScoreBank
from .scores import ScoreMatrix, compute_diameter_score

logger = logging.getLogger(__name__)


class FeatureType(str, Enum):
    NUMBER = "number"


class DiameterFeatureSet:
    """Builds diameter score features into per-pixel records.

    Lifecycle: ``initialize_for_run`` once per run, then
    ``initialize_data_for_image`` once per image, then
    ``build_features_into_record`` for as many pixels as needed.
    """

    def __init__(self, score_bank: ScoreBank, cache: Optional[DiameterCache] = None) -> None:
        self.score_bank = score_bank
        self.cache = cache if cache is not None else get_default_cache()
        self.radius: Optional[int] = None
        # Radius the current endpoints were derived from; None when explicit.
        self._ring_radius: Optional[int] = None
        self.diameter_endpoints: List[Coordinate] = []
        self.channel_names: List[str] = []
        self.num_features = 0
        self._image_set: Optional[ImageSet] = None
        self._channel_scores: Optional[List[ScoreMatrix]] = None

    def initialize_for_run(
        self,
        image_set: ImageSet,
        radius: int,
        endpoints: Optional[Sequence[Coordinate]] = None,
    ) -> None:
        """Fix the channels and direction endpoints for the run.

        The endpoints default to the upper half of the ring of ``radius``
        and are only re-derived when the radius changes.  An explicit
        ``endpoints`` sequence overrides the ring.
        """
        self._image_set = image_set
        self.channel_names = image_set.channel_names
        if endpoints is not None:
            self.diameter_endpoints = [Coordinate(*p) for p in endpoints]
            self._ring_radius = None
        elif radius != self._ring_radius:
            self.diameter_endpoints = diameter_endpoints(radius)
            self._ring_radius = radius
        self.radius = radius
        self.num_features = len(self.diameter_endpoints) * len(self.channel_names)
        self._channel_scores = None
        logger.debug(
            "DiameterFeatureSet: radius=%d endpoints=%d channels=%d features=%d",
            radius,
            len(self.diameter_endpoints),
            len(self.channel_names),
            self.num_features,
        )

    def initialize_data_for_image(self, image_id: str) -> None:
        """Fetch the score matrices of ``image_id`` for every run channel.

        Raises:
            RuntimeError: If called before ``initialize_for_run``.
            KeyError: If the image lacks one of the run's channels.
        """
        if self._image_set is None:
            raise RuntimeError("initialize_for_run must be called before initialize_data_for_image")
        scores = self.score_bank.get_or_add_scores(image_id)
        missing = [name for name in self.channel_names if name not in scores]
        if missing:
            raise KeyError(f"Image {image_id} has no scores for channel(s): {', '.join(missing)}")
        self._channel_scores = [scores[name] for name in self.channel_names]

    def build_features_into_record(
        self,
        center: Coordinate,
        record: MutableSequence[Any],
        offset: int = 0,
    ) -> None:
        """Write ``num_features`` diameter scores for ``center`` into ``record``.

        Values occupy ``record[offset:offset + num_features]``.
        """
        if self._channel_scores is None:
            raise RuntimeError("initialize_data_for_image must be called before building features")
        pos = offset
        for matrix in self._channel_scores:
            for endpoint in self.diameter_endpoints:
                record[pos] = compute_diameter_score(matrix, center, endpoint, self.cache)
                pos += 1

    def compute_records(self, centers: Sequence[Coordinate]) -> np.ndarray:
        """Feature rows for many centers of the current image."""
        records = np.zeros((len(centers), self.num_features), dtype=np.float64)
        for row, center in enumerate(centers):
            self.build_features_into_record(Coordinate(*center), records[row], 0)
        return records

    def feature_types(self) -> List[FeatureType]:
        return [FeatureType.NUMBER] * self.num_features

    def feature_names(self) -> List[str]:
        return [
            f"{channel}_diameter_{i}"
            for channel in self.channel_names
            for i in range(len(self.diameter_endpoints))
        ]

    def feature_colors(self) -> List[str]:
        if self._image_set is None:
            return []
        colors: List[str] = []
        for channel in self.channel_names:
            colors.extend([self._image_set.get_wave_color(channel)] * len(self.diameter_endpoints))
        return colors

    # The update_* variants insert into a caller-owned list that collects
    # metadata from several feature sets.

    def update_feature_types(self, feature_types: List[FeatureType], offset: int) -> None:
        feature_types[offset:offset] = self.feature_types()

    def update_feature_names(self, feature_names: List[str], offset: int) -> None:
        feature_names[offset:offset] = self.feature_names()

    def update_feature_colors(self, feature_colors: List[str], offset: int) -> None:
        feature_colors[offset:offset] = self.feature_colors()

    def describe(self) -> Dict[str, Any]:
        return {
            "radius": self.radius,
            "endpoints": [list(p) for p in self.diameter_endpoints],
            "channels": list(self.channel_names),
            "numFeatures": self.num_features,
            "names": self.feature_names(),
            "types": [t.value for t in self.feature_types()],
            "colors": self.feature_colors(),
        }
