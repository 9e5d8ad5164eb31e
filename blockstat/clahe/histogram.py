# -*- coding: utf-8 -*-
"""
CLAHE Histograms - Quantization, clip-and-redistribute and transfer functions.

A histogram holds ``n_bins`` int64 counts of 8-bit values quantized with
``round(v / 255 * (n_bins - 1))``. Contrast limiting caps every bin at a
clip limit and hands the excess back to the bins that still have room, in
passes, until nothing is left over; the equalizing transfer function is
the normalized cumulative distribution of the clipped histogram.

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

# Third-party
import numpy as np

# blockstat internal
from blockstat.exceptions import ValidationError


def validate_n_bins(n_bins: int) -> None:
    """Raise ``ValidationError`` unless *n_bins* is an integer ``>= 2``."""
    if isinstance(n_bins, bool) or not isinstance(n_bins, (int, np.integer)):
        raise ValidationError(
            f"n_bins must be an integer, got {type(n_bins).__name__}"
        )
    if n_bins < 2:
        raise ValidationError(f"n_bins must be >= 2, got {n_bins}")


def quantize(values: np.ndarray, n_bins: int) -> np.ndarray:
    """Map 8-bit values onto bin indices ``0 .. n_bins - 1``.

    Parameters
    ----------
    values : np.ndarray
        ``uint8`` array.
    n_bins : int
        Number of histogram bins.

    Returns
    -------
    np.ndarray
        int64 bin indices, same shape as *values*.
    """
    validate_n_bins(n_bins)
    values = np.asarray(values)
    if values.dtype != np.uint8:
        raise ValidationError(f"Expected uint8 values, got {values.dtype}")
    scaled = values.astype(np.float64) / 255.0 * (n_bins - 1)
    return np.floor(scaled + 0.5).astype(np.int64)


def build_histogram(quantized: np.ndarray, n_bins: int) -> np.ndarray:
    """Count quantized values into an ``n_bins`` int64 histogram."""
    return np.bincount(
        np.asarray(quantized).ravel(), minlength=n_bins
    ).astype(np.int64)


def clip_limit(slope: float, n: int, n_bins: int) -> int:
    """Clip limit ``slope * n / n_bins`` rounded half up, at least 1."""
    return max(1, int(slope * n / n_bins + 0.5))


def clip_histogram(hist: np.ndarray, limit: int) -> np.ndarray:
    """Cap *hist* at *limit* and redistribute the excess.

    The excess is spread over the bins below the limit in passes: each
    free bin receives ``excess // free``, the first ``excess % free`` free
    bins one more, and whatever lands above the limit again feeds the next
    pass. The total count is conserved. If all bins are full while excess
    remains (only possible when ``limit * n_bins`` is below the total),
    the rest is spread evenly over all bins.

    Parameters
    ----------
    hist : np.ndarray
        Count histogram, not modified.
    limit : int
        Clip limit, ``>= 1``.

    Returns
    -------
    np.ndarray
        New int64 histogram.
    """
    if limit < 1:
        raise ValidationError(f"limit must be >= 1, got {limit}")
    clipped = np.array(hist, dtype=np.int64)
    excess = int(np.maximum(clipped - limit, 0).sum())
    np.minimum(clipped, limit, out=clipped)

    while excess > 0:
        free = np.flatnonzero(clipped < limit)
        if free.size == 0:
            share, rest = divmod(excess, clipped.size)
            clipped += share
            clipped[:rest] += 1
            break
        share, rest = divmod(excess, free.size)
        clipped[free] += share
        clipped[free[:rest]] += 1
        overflow = np.maximum(clipped - limit, 0)
        excess = int(overflow.sum())
        clipped -= overflow
    return clipped


def create_transfer(hist: np.ndarray, limit: int) -> np.ndarray:
    """Contrast limited transfer function of *hist*.

    Returns
    -------
    np.ndarray
        float64 array of ``len(hist)`` non-decreasing values in ``[0, 1]``.
        The lowest populated bin of the clipped histogram (and everything
        below it) maps to 0, the last bin to 1. The clipped histogram, not
        *hist*, decides this: when *limit* is below a bin's count the excess
        populates the lowest free bins, so a single spike in *hist* maps
        to 1. All zeros only if the clipped histogram is empty or has a
        single populated bin, i.e. a spike that fits under *limit*.
    """
    clipped = clip_histogram(hist, limit)
    transfer = np.zeros(clipped.size, dtype=np.float64)
    populated = np.flatnonzero(clipped)
    if populated.size == 0:
        return transfer
    h_min = populated[0]
    cdf = np.cumsum(clipped)
    cdf_min = cdf[h_min]
    span = cdf[-1] - cdf_min
    if span == 0:
        return transfer
    transfer[h_min:] = (cdf[h_min:] - cdf_min) / span
    return np.clip(transfer, 0.0, 1.0)


def transfer_value(v: int, hist: np.ndarray, limit: int) -> float:
    """Transfer function of *hist* evaluated at bin *v*."""
    return float(create_transfer(hist, limit)[v])
