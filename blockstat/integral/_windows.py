# -*- coding: utf-8 -*-
"""
Block Windows - Per-pixel clamped block bounds for summed-area queries.

Author
------
blockstat contributors

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-19

Modified
--------
2026-10-19
"""

# Standard library
from typing import Tuple

# Third-party
import numpy as np


def block_bounds(length: int, radius: int) -> Tuple[np.ndarray, np.ndarray]:
    """Clamped query bounds of the block ``[i - radius, i + radius]``.

    Parameters
    ----------
    length : int
        Axis length.
    radius : int
        Block radius along the axis.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        ``(lo, hi)`` int64 arrays of shape ``(length,)`` with
        ``lo = max(-1, i - radius - 1)`` (exclusive) and
        ``hi = min(length - 1, i + radius)`` (inclusive).
    """
    idx = np.arange(length, dtype=np.int64)
    lo = np.maximum(-1, idx - radius - 1)
    hi = np.minimum(length - 1, idx + radius)
    return lo, hi


def block_areas(
    lo_x: np.ndarray, hi_x: np.ndarray, lo_y: np.ndarray, hi_y: np.ndarray
) -> np.ndarray:
    """Pixel counts of every clamped block, shape ``(rows, cols)``."""
    return np.outer(hi_y - lo_y, hi_x - lo_x).astype(np.float64)
