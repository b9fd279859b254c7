"""
In-memory bank of per-image score matrices.

Reading and decompressing a score archive for every feature request
would dominate the cost of scoring a few pixels, so the bank memoises
the loaded channel matrices per image.  The cache is an ``OrderedDict``
with least-recently-used (LRU) eviction, guarded by a reentrant lock so
request handlers running in parallel threads can share it.

Usage::

    bank = ScoreBank(loader=load_scores_for_image, max_entries=16)
    scores = bank.get_or_add_scores(image_id)
    red = scores["red"]
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from threading import RLock
from typing import Callable, Dict, Optional

from .scores import IntScoreMatrix

logger = logging.getLogger(__name__)

ChannelScores = Dict[str, IntScoreMatrix]

# Maximum number of images retained by default.
MAX_CACHE_ENTRIES: int = 16


class ScoreBank:
    """LRU memoisation of ``loader(image_id)`` results.

    Args:
        loader: Callable returning the channel -> score matrix mapping
            for an image.  Errors it raises propagate to the caller and
            nothing is cached.
        max_entries: Number of images kept before the least recently
            used one is dropped.
    """

    def __init__(self, loader: Callable[[str], ChannelScores], max_entries: int = MAX_CACHE_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self._loader = loader
        self.max_entries = max_entries
        self._cache: "OrderedDict[str, ChannelScores]" = OrderedDict()
        self._lock = RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, image_id: object) -> bool:
        with self._lock:
            return image_id in self._cache

    def get_or_add_scores(self, image_id: str) -> ChannelScores:
        """Return the channel score matrices for ``image_id``, loading them on a miss."""
        with self._lock:
            scores = self._cache.get(image_id)
            if scores is not None:
                self._cache.move_to_end(image_id)
                return scores
        # Load outside the lock; a concurrent load of the same image is
        # resolved below by keeping whichever entry landed first.
        logger.debug("ScoreBank miss for image %s; loading", image_id)
        scores = self._loader(image_id)
        with self._lock:
            existing = self._cache.get(image_id)
            if existing is not None:
                self._cache.move_to_end(image_id)
                return existing
            self._cache[image_id] = scores
            if len(self._cache) > self.max_entries:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug("ScoreBank evicted image %s", evicted)
            return scores

    def evict(self, image_id: str) -> Optional[ChannelScores]:
        with self._lock:
            return self._cache.pop(image_id, None)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
