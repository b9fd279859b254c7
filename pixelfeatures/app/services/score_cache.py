"""
Score archive serialization utilities.

Per-channel score matrices of one image are stored on disk as a
compressed NumPy archive (``.npz``) holding one 2-D integer array per
channel, keyed by channel name.  All channels of an archive share the
same shape.  Loading returns an ordered mapping in archive order.
"""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Dict, Mapping

import numpy as np


def _validate_channels(channels: Mapping[str, np.ndarray]) -> Dict[str, np.ndarray]:
    if not channels:
        raise ValueError("Score archive must contain at least one channel")
    arrays: Dict[str, np.ndarray] = {}
    shape = None
    for name, values in channels.items():
        arr = np.asarray(values)
        if arr.ndim != 2:
            raise ValueError(f"Channel '{name}' must be 2-D, got shape {arr.shape}")
        if not np.issubdtype(arr.dtype, np.integer):
            raise ValueError(f"Channel '{name}' must hold integers, got dtype {arr.dtype}")
        if shape is None:
            shape = arr.shape
        elif arr.shape != shape:
            raise ValueError(
                f"Channel '{name}' has shape {arr.shape}, expected {shape}"
            )
        arrays[name] = arr.astype(np.int64)
    return arrays


def save_score_archive(path: Path, channels: Mapping[str, np.ndarray]) -> None:
    """Write per-channel score matrices to a compressed ``.npz`` file.

    Args:
        path: Destination file path.  Parent directories will not be
            created; callers should ensure the directory exists.
        channels: Mapping of channel name to a 2-D integer array of
            shape ``(height, width)``.

    Raises:
        ValueError: If the mapping is empty or the arrays are not 2-D
            integer arrays of a common shape.
    """
    arrays = _validate_channels(channels)
    # np.savez_compressed appends ".npz" to bare paths; write through a
    # file handle so the name is kept as given.
    with Path(path).open("wb") as fh:
        np.savez_compressed(fh, **arrays)


def load_score_archive(path: Path) -> Dict[str, np.ndarray]:
    """Load per-channel score matrices from a ``.npz`` file.

    Returns:
        Mapping of channel name to a 2-D ``int64`` array, in archive order.

    Raises:
        FileNotFoundError: If the specified path does not exist.
        ValueError: If the archive is unreadable or its arrays are not
            2-D integer arrays of a common shape.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Score archive not found: {path}")
    try:
        with np.load(path, allow_pickle=False) as data:
            channels = {name: data[name] for name in data.files}
    except (OSError, ValueError, zipfile.BadZipFile) as exc:
        raise ValueError(f"Unreadable score archive {path}: {exc}") from exc
    return _validate_channels(channels)
