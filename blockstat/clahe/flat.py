# -*- coding: utf-8 -*-
"""
Exact CLAHE - Per-pixel contrast limited histogram equalization.

Every pixel is equalized through the clipped transfer function of its own
``(2 r + 1) x (2 r + 1)`` window, clamped to the image. The window
histogram of a row is built once at the left edge of the region and then
slid to the right one column at a time.

Rows are independent, so ``workers > 1`` splits the region into
contiguous row chunks handled on a ``ThreadPoolExecutor``; each chunk owns
its own window and writes disjoint output rows.

A mask of blend weights lowers the clip limit where the weight is low:
a pixel of weight ``m`` uses the slope ``1 + m * (slope - 1)``, so weight 0
falls back to the plain equalization limit ``window_area / n_bins``.

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
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Optional, Tuple

# Third-party
import numpy as np

# blockstat internal
from blockstat.clahe.apply import resolve_mask
from blockstat.clahe.histogram import clip_limit, quantize
from blockstat.clahe.sliding_window import SlidingWindowHistogram
from blockstat.exceptions import ProcessorError, ValidationError
from blockstat.processing._validation import (
    resolve_roi,
    validate_byte_image,
    validate_radius,
)

logger = logging.getLogger(__name__)


def _equalize_rows(
    quantized: np.ndarray,
    dst: np.ndarray,
    rows: range,
    columns: Tuple[int, int],
    block_radius: int,
    n_bins: int,
    slopes: np.ndarray,
    on_row: Optional[Callable[[], None]] = None,
) -> None:
    height, width = quantized.shape
    r = block_radius
    x_start, x_stop = columns
    window = SlidingWindowHistogram(quantized, n_bins)
    for y in rows:
        window.initialize(
            max(0, x_start - r), min(width, x_start + r + 1),
            max(0, y - r), min(height, y + r + 1),
        )
        for x in range(x_start, x_stop):
            if x > x_start:
                if x - r - 1 >= 0:
                    window.remove_column(x - r - 1)
                if x + r < width:
                    window.add_column(x + r)
            limit = clip_limit(slopes[y, x], window.n, n_bins)
            dst[y, x] = window.get_normalized_value(quantized[y, x], limit)
        if on_row is not None:
            on_row()


def _slopes(
    shape: Tuple[int, int],
    slope: float,
    mask: Optional[np.ndarray],
    region: Tuple[slice, slice],
) -> np.ndarray:
    """Per-pixel slope, ``1 + m * (slope - 1)`` under a mask weight ``m``."""
    slopes = np.full(shape, float(slope))
    if mask is not None:
        rows, cols = region
        weights = resolve_mask(
            mask, (rows.stop - rows.start, cols.stop - cols.start)
        )
        slopes[region] = 1.0 + weights * (slope - 1.0)
    return slopes


def equalize_exact(
    src: np.ndarray,
    block_radius: int,
    n_bins: int,
    slope: float,
    roi: Optional[Tuple[int, int, int, int]] = None,
    workers: int = 1,
    progress: Optional[Callable[[float], None]] = None,
    mask: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Exact CLAHE of an 8-bit image.

    Parameters
    ----------
    src : np.ndarray
        2D ``uint8`` working image.
    block_radius : int
        Window radius ``r``; windows are ``2 r + 1`` pixels wide.
    n_bins : int
        Histogram bins.
    slope : float
        Maximum slope of the transfer function; the clip limit is
        ``slope * window_area / n_bins``.
    roi : tuple of int, optional
        ``(x, y, width, height)`` region to equalize. Pixels outside it
        are copied from *src*.
    workers : int
        Number of threads. Default 1 (sequential).
    progress : callable, optional
        Called with the completed fraction in ``[0, 1]``.
    mask : np.ndarray, optional
        Weights shaped like the region, float in ``[0, 1]`` or ``uint8``.
        A pixel of weight ``m`` is clipped with slope
        ``1 + m * (slope - 1)``, so weight 0 gives the plain histogram
        equalization limit ``window_area / n_bins``.

    Returns
    -------
    np.ndarray
        Equalized ``uint8`` image with the shape of *src*.
    """
    validate_byte_image(src)
    validate_radius(block_radius, 'block_radius')
    if workers < 1:
        raise ValidationError(f"workers must be >= 1, got {workers}")
    x_min, y_min, x_max, y_max = resolve_roi(roi, src.shape)
    slopes = _slopes(
        src.shape, slope, mask, (slice(y_min, y_max), slice(x_min, x_max))
    )
    quantized = quantize(src, n_bins)
    dst = src.copy()
    n_rows = y_max - y_min

    if workers == 1:
        done = [0]

        def on_row() -> None:
            done[0] += 1
            if progress is not None:
                progress(done[0] / n_rows)

        _equalize_rows(
            quantized, dst, range(y_min, y_max), (x_min, x_max),
            block_radius, n_bins, slopes, on_row,
        )
        return dst

    chunks = [c for c in np.array_split(np.arange(y_min, y_max), workers) if c.size]
    logger.debug(
        "Exact CLAHE on %d rows split into %d chunks", n_rows, len(chunks)
    )
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {
            pool.submit(
                _equalize_rows, quantized, dst,
                range(int(chunk[0]), int(chunk[-1]) + 1), (x_min, x_max),
                block_radius, n_bins, slopes,
            ): chunk.size
            for chunk in chunks
        }
        done = 0
        for future in as_completed(futures):
            try:
                future.result()
            except Exception as exc:
                raise ProcessorError(f"CLAHE row worker failed: {exc}") from exc
            done += futures[future]
            if progress is not None:
                progress(done / n_rows)
    return dst
