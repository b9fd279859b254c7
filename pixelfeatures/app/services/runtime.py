"""
Process-wide service objects shared by the API routes.

The diameter cache and the score bank are built once per process.
Feature sets carry per-image state, so each request gets its own
instance wired to the shared cache and bank.
"""

from __future__ import annotations

from functools import lru_cache

from ..config import get_settings
from .diameters import DiameterCache, get_default_cache, set_default_cache
from .feature_set import DiameterFeatureSet
from .image_set import ImageSet
from .score_bank import ScoreBank
from .storage import load_scores_for_image


@lru_cache
def get_diameter_cache() -> DiameterCache:
    settings = get_settings()
    cache = get_default_cache()
    if cache.init_max_radius != settings.init_max_radius:
        cache = DiameterCache(settings.init_max_radius).build()
        set_default_cache(cache)
    return cache


@lru_cache
def get_score_bank() -> ScoreBank:
    return ScoreBank(load_scores_for_image, max_entries=get_settings().score_bank_max_entries)


@lru_cache
def get_image_set() -> ImageSet:
    return ImageSet.from_settings(get_settings())


def new_feature_set() -> DiameterFeatureSet:
    """Return a feature set initialised for the configured run."""
    feature_set = DiameterFeatureSet(get_score_bank(), cache=get_diameter_cache())
    feature_set.initialize_for_run(get_image_set(), get_settings().feature_radius)
    return feature_set
