# -*- coding: utf-8 -*-
"""
Block-Interpolated CLAHE - Fast approximate contrast limited equalization.

Computes one clipped transfer function per cell of a coarse grid of block
centers and equalizes every pixel by bilinear interpolation between the
transfer functions of the four surrounding centers, each evaluated at the
pixel's own bin. Beyond the outermost centers the nearest edge cell is
used without interpolation along that axis.

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
import logging
from typing import Optional, Tuple

# Third-party
import numpy as np

# blockstat internal
from blockstat.clahe.histogram import (
    build_histogram,
    clip_limit,
    create_transfer,
    quantize,
)
from blockstat.processing._validation import (
    resolve_roi,
    validate_byte_image,
    validate_radius,
)

logger = logging.getLogger(__name__)


def grid_centers(length: int, block_radius: int) -> np.ndarray:
    """Block centers along one axis.

    ``length // (2 r + 1)`` whole blocks are laid out with the remainder
    split around them: one extra center at the far edge for a remainder of
    one pixel, an extra center at each edge for larger remainders. Centers
    are clamped into the axis and deduplicated; an axis shorter than one
    block gets a single center in the middle.
    """
    size = 2 * block_radius + 1
    count, rest = divmod(length, size)
    if count == 0:
        return np.array([length // 2], dtype=np.int64)
    base = np.arange(count, dtype=np.int64) * size + block_radius
    if rest == 0:
        centers = base
    elif rest == 1:
        centers = np.append(base, length - block_radius - 1)
    else:
        centers = np.concatenate((
            [block_radius], base + rest // 2, [length - block_radius - 1]
        ))
    return np.unique(np.clip(centers, 0, length - 1))


def _interpolation(
    centers: np.ndarray, coords: np.ndarray
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Neighbouring center indices and the weight of the lower one."""
    upper = np.searchsorted(centers, coords, side='right')
    c0 = np.maximum(0, upper - 1)
    c1 = np.minimum(centers.size - 1, upper)
    span = (centers[c1] - centers[c0]).astype(np.float64)
    w0 = np.ones(coords.size, dtype=np.float64)
    inner = span > 0
    w0[inner] = (centers[c1][inner] - coords[inner]) / span[inner]
    return c0, c1, w0


def equalize_blocks(
    src: np.ndarray,
    block_radius: int,
    n_bins: int,
    slope: float,
    roi: Optional[Tuple[int, int, int, int]] = None,
) -> np.ndarray:
    """Block-interpolated CLAHE of an 8-bit image.

    Parameters
    ----------
    src : np.ndarray
        2D ``uint8`` working image.
    block_radius : int
        Block radius ``r``; blocks are ``2 r + 1`` pixels wide.
    n_bins : int
        Histogram bins.
    slope : float
        Maximum slope of the transfer function.
    roi : tuple of int, optional
        ``(x, y, width, height)`` region to equalize. The grid always
        covers the whole image; pixels outside the region are copied.

    Returns
    -------
    np.ndarray
        Equalized ``uint8`` image with the shape of *src*.
    """
    validate_byte_image(src)
    validate_radius(block_radius, 'block_radius')
    height, width = src.shape
    x_min, y_min, x_max, y_max = resolve_roi(roi, src.shape)
    quantized = quantize(src, n_bins)
    size = 2 * block_radius + 1
    limit = clip_limit(slope, size * size, n_bins)

    cols = grid_centers(width, block_radius)
    rows = grid_centers(height, block_radius)
    logger.debug(
        "Block CLAHE grid %dx%d, block size %d, clip limit %d",
        cols.size, rows.size, size, limit,
    )

    transfers = np.empty((rows.size, cols.size, n_bins), dtype=np.float64)
    for i, cy in enumerate(rows):
        y0, y1 = max(0, cy - block_radius), min(height, cy + block_radius + 1)
        for j, cx in enumerate(cols):
            x0, x1 = max(0, cx - block_radius), min(width, cx + block_radius + 1)
            hist = build_histogram(quantized[y0:y1, x0:x1], n_bins)
            transfers[i, j] = create_transfer(hist, limit)

    c0, c1, wx = _interpolation(cols, np.arange(x_min, x_max))
    r0, r1, wy = _interpolation(rows, np.arange(y_min, y_max))
    q = quantized[y_min:y_max, x_min:x_max]
    r0, r1, wy = r0[:, np.newaxis], r1[:, np.newaxis], wy[:, np.newaxis]
    top = wx * transfers[r0, c0, q] + (1.0 - wx) * transfers[r0, c1, q]
    bottom = wx * transfers[r1, c0, q] + (1.0 - wx) * transfers[r1, c1, q]
    value = wy * top + (1.0 - wy) * bottom

    dst = src.copy()
    dst[y_min:y_max, x_min:x_max] = np.clip(
        np.floor(value * 255.0 + 0.5), 0, 255
    ).astype(np.uint8)
    return dst
