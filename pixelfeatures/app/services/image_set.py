"""Channel names and display colours for the images of a run."""

from __future__ import annotations

from collections import OrderedDict
from typing import Dict, Iterable, List, Mapping, Optional

from ..config import Settings

# Fallback colours assigned in order to channels without an explicit one.
DEFAULT_PALETTE = (
    "#ff0000",
    "#00ff00",
    "#0000ff",
    "#ffff00",
    "#ff00ff",
    "#00ffff",
    "#ff8000",
    "#8000ff",
)

_NAMED_COLORS = {
    "red": "#ff0000",
    "green": "#00ff00",
    "blue": "#0000ff",
}


class ImageSet:
    """Ordered channel names with a display colour per channel."""

    def __init__(self, channels: Iterable[str], colors: Optional[Mapping[str, str]] = None) -> None:
        colors = dict(colors or {})
        self._colors: "OrderedDict[str, str]" = OrderedDict()
        for idx, name in enumerate(channels):
            if name in self._colors:
                raise ValueError(f"Duplicate channel name '{name}'")
            color = colors.get(name) or _NAMED_COLORS.get(name.lower())
            self._colors[name] = (color or DEFAULT_PALETTE[idx % len(DEFAULT_PALETTE)]).lower()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ImageSet":
        return cls(settings.channels, settings.channel_colors)

    @property
    def channel_names(self) -> List[str]:
        return list(self._colors)

    def get_wave_color(self, name: str) -> str:
        return self._colors[name]

    def colors(self) -> Dict[str, str]:
        return dict(self._colors)
