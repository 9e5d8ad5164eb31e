# -*- coding: utf-8 -*-
"""
Sliding Window Histogram - Incrementally maintained window histogram.

Holds the histogram of a rectangular window of a quantized image. The
window is built once per image row, then slid one column at a time by
adding the entering column and removing the leaving one, so each step
costs the window height instead of the window area.

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
from typing import FrozenSet, Tuple

# Third-party
import numpy as np

# blockstat internal
from blockstat.clahe.histogram import (
    build_histogram,
    create_transfer,
    validate_n_bins,
)
from blockstat.exceptions import ValidationError
from blockstat.processing._validation import validate_image_2d


class SlidingWindowHistogram:
    """Histogram of a window ``[x_min, x_max) x [y_min, y_max)``.

    Parameters
    ----------
    quantized : np.ndarray
        2D int array of bin indices in ``0 .. n_bins - 1``.
    n_bins : int
        Number of histogram bins.

    Notes
    -----
    Not thread-safe; each worker owns its own window.
    """

    def __init__(self, quantized: np.ndarray, n_bins: int) -> None:
        validate_image_2d(quantized, 'quantized')
        validate_n_bins(n_bins)
        if not np.issubdtype(quantized.dtype, np.integer):
            raise ValidationError(
                f"quantized must hold integer bin indices, got {quantized.dtype}"
            )
        lo, hi = int(quantized.min()), int(quantized.max())
        if lo < 0 or hi >= n_bins:
            raise ValidationError(
                f"quantized values must lie in [0, {n_bins}), "
                f"got [{lo}, {hi}]"
            )
        self._quantized = quantized
        self._n_bins = n_bins
        self._hist = np.zeros(n_bins, dtype=np.int64)
        self._rows: Tuple[int, int] = (0, 0)
        self._columns: set = set()

    @property
    def histogram(self) -> np.ndarray:
        """Read-only view of the current counts."""
        view = self._hist.view()
        view.flags.writeable = False
        return view

    @property
    def columns(self) -> FrozenSet[int]:
        return frozenset(self._columns)

    @property
    def rows(self) -> Tuple[int, int]:
        return self._rows

    @property
    def n(self) -> int:
        """Number of pixels in the window."""
        return len(self._columns) * (self._rows[1] - self._rows[0])

    def initialize(self, x_min: int, x_max: int, y_min: int, y_max: int) -> None:
        """Rebuild the histogram from scratch for a new window."""
        rows, cols = self._quantized.shape
        if not (0 <= x_min <= x_max <= cols and 0 <= y_min <= y_max <= rows):
            raise ValidationError(
                f"Window [{x_min}, {x_max}) x [{y_min}, {y_max}) "
                f"outside image of shape {self._quantized.shape}"
            )
        self._rows = (y_min, y_max)
        self._columns = set(range(x_min, x_max))
        self._hist = build_histogram(
            self._quantized[y_min:y_max, x_min:x_max], self._n_bins
        )

    def _column(self, x: int) -> np.ndarray:
        if not 0 <= x < self._quantized.shape[1]:
            raise ValidationError(
                f"Column {x} outside image of width {self._quantized.shape[1]}"
            )
        return self._quantized[self._rows[0]:self._rows[1], x]

    def add_column(self, x: int) -> None:
        if x in self._columns:
            raise ValidationError(f"Column {x} is already in the window")
        np.add.at(self._hist, self._column(x), 1)
        self._columns.add(x)

    def remove_column(self, x: int) -> None:
        if x not in self._columns:
            raise ValidationError(f"Column {x} is not in the window")
        np.subtract.at(self._hist, self._column(x), 1)
        self._columns.discard(x)

    def get_normalized_value(self, binned_value: int, limit: int) -> int:
        """Equalized 8-bit value of *binned_value* in the current window."""
        value = create_transfer(self._hist, limit)[binned_value]
        return int(np.floor(value * 255.0 + 0.5))
