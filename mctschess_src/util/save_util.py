"""Utilities for saving and loading game records."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Sequence


def export_game_record(
    positions: Sequence[np.ndarray], filepath: str | Path, compressed: bool = False
) -> Path:
    """
    Save the positions of a game to disk as a single (plies + 1, 8, 8) int8 array.

    If compressed is False, saves as .npy using numpy.save.
    If compressed is True, saves as .npz using numpy.savez_compressed
    under the key 'positions'.

    Args:
        positions:  Board arrays in the order they occurred, starting position first.
        filepath:   Path or filename (can include or omit extension).
        compressed: Whether to use .npz compression.

    Returns:
        The path that was written, with its final extension.
    """
    if not positions:
        raise ValueError("A game record needs at least the starting position")
    record = np.stack([np.asarray(p, dtype=np.int8) for p in positions])

    path = Path(filepath)
    if compressed:
        path = path.with_suffix(".npz")
        np.savez_compressed(path, positions=record)
    else:
        path = path.with_suffix(".npy")
        np.save(path, record)
    return path


def import_game_record(filepath: str | Path) -> np.ndarray:
    """
    Load a game record from disk, handling both .npy and .npz formats.

    Args:
        filepath: Path or filename to load.

    Returns:
        The stacked position array of shape (plies + 1, 8, 8).
    """
    path = Path(filepath)
    if path.suffix == ".npz":
        with np.load(path) as data:
            return data["positions"]
    return np.load(path)
