# -*- coding: utf-8 -*-
"""
Block Statistics - Windowed mean, variance and standard deviation.

Keeps two summed-area tables over a gray source, one of the values and one
of their squares, and derives the block mean, the population variance, the
unbiased sample variance and the sample standard deviation of the window
``[x - rx, x + rx] x [y - ry, y + ry]`` around every pixel in time
independent of the radius. Windows are clamped to the image, so border
pixels use the smaller in-image block.

Integer sources of up to 16 bits accumulate in int64 tables; everything
else accumulates in float64.

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
from blockstat.integral._windows import block_areas, block_bounds
from blockstat.integral.tables import (
    DoubleIntegralImage,
    IntegralImage,
    LongIntegralImage,
)
from blockstat.processing._validation import as_image_2d, resolve_radii

logger = logging.getLogger(__name__)


def _value_tables(image: np.ndarray) -> Tuple[IntegralImage, IntegralImage]:
    if np.issubdtype(image.dtype, np.integer) and image.dtype.itemsize <= 2:
        wide = image.astype(np.int64)
        return LongIntegralImage(wide), LongIntegralImage(wide * wide)
    wide = image.astype(np.float64)
    return DoubleIntegralImage(wide), DoubleIntegralImage(wide * wide)


class BlockStatistics:
    """Windowed first and second order statistics over a gray image.

    Parameters
    ----------
    source : np.ndarray
        2D real-valued image, or a flat buffer with ``width`` and ``height``.
    width, height : int, optional
        Declared dimensions of a flat buffer.

    Raises
    ------
    ValidationError
        On size mismatch or a non-real source.

    Examples
    --------
    >>> stats = BlockStatistics(image)
    >>> local_std = stats.std(5)
    """

    def __init__(
        self,
        source: np.ndarray,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> None:
        image = as_image_2d(source, width, height)
        self._sums, self._squares = _value_tables(image)
        self.height, self.width = image.shape

    def _moments(
        self, radius_x: int, radius_y: Optional[int]
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        rx, ry = resolve_radii(radius_x, radius_y)
        lo_x, hi_x = block_bounds(self.width, rx)
        lo_y, hi_y = block_bounds(self.height, ry)
        n = block_areas(lo_x, hi_x, lo_y, hi_y)
        s = self._sums.grid_sums(lo_x, hi_x, lo_y, hi_y).astype(np.float64)
        sq = self._squares.grid_sums(lo_x, hi_x, lo_y, hi_y).astype(np.float64)
        logger.debug(
            "Block moments %dx%d, radius (%d, %d)",
            self.width, self.height, rx, ry,
        )
        return n, s, sq

    def mean(self, radius_x: int, radius_y: Optional[int] = None) -> np.ndarray:
        """Block mean, float64 array of the source shape."""
        n, s, _ = self._moments(radius_x, radius_y)
        return s / n

    def variance(
        self, radius_x: int, radius_y: Optional[int] = None
    ) -> np.ndarray:
        """Population variance ``E[x^2] - E[x]^2``, clamped to ``>= 0``."""
        n, s, sq = self._moments(radius_x, radius_y)
        mean = s / n
        variance = sq / n - mean * mean
        np.maximum(variance, 0.0, out=variance)
        return variance

    def sample_variance(
        self, radius_x: int, radius_y: Optional[int] = None
    ) -> np.ndarray:
        """Unbiased sample variance, 0 for single-pixel windows."""
        n, s, sq = self._moments(radius_x, radius_y)
        return self._sample_variance(n, s, sq)

    def std(self, radius_x: int, radius_y: Optional[int] = None) -> np.ndarray:
        """Sample standard deviation ``sqrt(sample_variance)``."""
        n, s, sq = self._moments(radius_x, radius_y)
        return np.sqrt(self._sample_variance(n, s, sq))

    def mean_std(
        self, radius_x: int, radius_y: Optional[int] = None
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Block mean and sample standard deviation from a single query."""
        n, s, sq = self._moments(radius_x, radius_y)
        return s / n, np.sqrt(self._sample_variance(n, s, sq))

    @staticmethod
    def _sample_variance(
        n: np.ndarray, s: np.ndarray, sq: np.ndarray
    ) -> np.ndarray:
        variance = np.zeros_like(s)
        multi = n > 1
        nm = n[multi]
        variance[multi] = sq[multi] / (nm - 1) - s[multi] * s[multi] / (nm * nm - nm)
        np.maximum(variance, 0.0, out=variance)
        return variance
