"""
Run configuration for the feature service.

Settings are read from environment variables prefixed with
``PIXELFEATURES_`` (and from a ``.env`` file when one exists), e.g.
``PIXELFEATURES_FEATURE_RADIUS=8``.  List and mapping values are given
as JSON: ``PIXELFEATURES_CHANNELS='["dapi", "cd8"]'``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root: pixelfeatures/app/config.py -> repository root.
BASE_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PIXELFEATURES_",
        env_file=".env",
        extra="ignore",
    )

    # Radius of the ring the diameter endpoints are taken from.
    feature_radius: int = Field(default=6, ge=0)
    # Endpoints inside this radius are rasterised when the cache is built.
    init_max_radius: int = Field(default=5, ge=0)
    # Channel names in feature order.
    channels: List[str] = Field(default_factory=lambda: ["red", "green", "blue"])
    # Optional "#rrggbb" display colour per channel.
    channel_colors: Dict[str, str] = Field(default_factory=dict)
    out_of_bounds: Literal["zero", "clamp", "raise"] = "zero"
    score_bank_max_entries: int = Field(default=16, ge=1)
    storage_dir: Path = BASE_DIR / "storage"

    @field_validator("channels")
    @classmethod
    def _unique_channels(cls, value: List[str]) -> List[str]:
        if len(set(value)) != len(value):
            raise ValueError("channel names must be unique")
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
