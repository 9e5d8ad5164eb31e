# -*- coding: utf-8 -*-
"""
Block PMCC - Windowed Pearson correlation between two images.

Computes the Pearson product-moment correlation coefficient between a
moving image X and a target image Y for the block around every pixel of
their overlap under an integer offset. Five summed-area tables are kept:
ΣX and ΣX² over X and ΣY and ΣY² over Y are built once, while ΣXY is
rebuilt over the overlap whenever the offset changes.

X pixel ``p`` pairs with Y pixel ``p + offset``. Results are laid out in
Y's frame: pixels inside the overlap carry the coefficient of their block
(clamped to the overlap), pixels outside it are NaN. The overlap sits at
its own position in Y, so with a positive offset the first valid column
or row is the offset itself rather than Y's origin.

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
from dataclasses import dataclass
from typing import Optional, Tuple

# Third-party
import numpy as np

# blockstat internal
from blockstat.exceptions import ValidationError
from blockstat.integral._windows import block_areas, block_bounds
from blockstat.integral.tables import DoubleIntegralImage
from blockstat.processing._validation import resolve_radii, validate_image_2d

logger = logging.getLogger(__name__)

# Relative threshold below which a window's variance term counts as zero.
_DEGENERATE = 1e-12


def _axis_overlap(offset: int, len_x: int, len_y: int) -> Tuple[int, int, int]:
    """Return ``(origin_in_x, origin_in_y, extent)`` along one axis."""
    if offset < 0:
        return -offset, 0, min(len_x + offset, len_y)
    return 0, offset, min(len_x, len_y - offset)


@dataclass(frozen=True)
class Overlap:
    """Overlapping rectangle of X and Y under an offset.

    Attributes
    ----------
    source_x, source_y : int
        Top-left corner of the overlap in X.
    target_x, target_y : int
        Top-left corner of the overlap in Y.
    width, height : int
        Overlap extent, ``<= 0`` when the images do not overlap.
    """

    source_x: int
    source_y: int
    target_x: int
    target_y: int
    width: int
    height: int

    @classmethod
    def from_offset(
        cls,
        offset_x: int,
        offset_y: int,
        x_shape: Tuple[int, int],
        y_shape: Tuple[int, int],
    ) -> 'Overlap':
        sx, tx, w = _axis_overlap(offset_x, x_shape[1], y_shape[1])
        sy, ty, h = _axis_overlap(offset_y, x_shape[0], y_shape[0])
        return cls(sx, sy, tx, ty, w, h)

    @property
    def empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def source_slices(self) -> Tuple[slice, slice]:
        return (slice(self.source_y, self.source_y + self.height),
                slice(self.source_x, self.source_x + self.width))

    def target_slices(self) -> Tuple[slice, slice]:
        return (slice(self.target_y, self.target_y + self.height),
                slice(self.target_x, self.target_x + self.width))


class BlockPMCC:
    """Windowed Pearson correlation between a moving and a target image.

    Parameters
    ----------
    x : np.ndarray
        2D moving image.
    y : np.ndarray
        2D target image, may differ in shape from ``x``.
    offset_x, offset_y : int
        Initial offset of X relative to Y.

    Raises
    ------
    ValidationError
        If either image is not a non-empty 2D real-valued array.
    """

    def __init__(
        self,
        x: np.ndarray,
        y: np.ndarray,
        offset_x: int = 0,
        offset_y: int = 0,
    ) -> None:
        validate_image_2d(x, 'x')
        validate_image_2d(y, 'y')
        for name, image in (('x', x), ('y', y)):
            if not (np.issubdtype(image.dtype, np.integer)
                    or np.issubdtype(image.dtype, np.floating)):
                raise ValidationError(
                    f"{name} must be real-valued, got {image.dtype}"
                )
        self._x = x.astype(np.float64)
        self._y = y.astype(np.float64)
        self._sum_x = DoubleIntegralImage(self._x)
        self._sum_xx = DoubleIntegralImage(self._x * self._x)
        self._sum_y = DoubleIntegralImage(self._y)
        self._sum_yy = DoubleIntegralImage(self._y * self._y)
        self._sum_xy: Optional[DoubleIntegralImage] = None
        self.set_offset(offset_x, offset_y)

    @property
    def offset(self) -> Tuple[int, int]:
        return self._offset

    @property
    def overlap(self) -> Overlap:
        return self._overlap

    def set_offset(self, offset_x: int, offset_y: int) -> None:
        """Move X relative to Y and rebuild ΣXY over the new overlap."""
        for name, value in (('offset_x', offset_x), ('offset_y', offset_y)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValidationError(
                    f"{name} must be an integer, got {type(value).__name__}"
                )
        self._offset = (int(offset_x), int(offset_y))
        self._overlap = Overlap.from_offset(
            self._offset[0], self._offset[1], self._x.shape, self._y.shape
        )
        if self._overlap.empty:
            self._sum_xy = None
        else:
            products = (self._x[self._overlap.source_slices()]
                        * self._y[self._overlap.target_slices()])
            self._sum_xy = DoubleIntegralImage(products)
        logger.debug("PMCC offset %s, overlap %s", self._offset, self._overlap)

    def _terms(
        self, radius_x: int, radius_y: Optional[int]
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Numerator and the two variance terms over the overlap."""
        rx, ry = resolve_radii(radius_x, radius_y)
        ov = self._overlap
        lo_x, hi_x = block_bounds(ov.width, rx)
        lo_y, hi_y = block_bounds(ov.height, ry)
        n = block_areas(lo_x, hi_x, lo_y, hi_y)

        sx = self._sum_x.grid_sums(
            lo_x + ov.source_x, hi_x + ov.source_x,
            lo_y + ov.source_y, hi_y + ov.source_y,
        )
        sxx = self._sum_xx.grid_sums(
            lo_x + ov.source_x, hi_x + ov.source_x,
            lo_y + ov.source_y, hi_y + ov.source_y,
        )
        sy = self._sum_y.grid_sums(
            lo_x + ov.target_x, hi_x + ov.target_x,
            lo_y + ov.target_y, hi_y + ov.target_y,
        )
        syy = self._sum_yy.grid_sums(
            lo_x + ov.target_x, hi_x + ov.target_x,
            lo_y + ov.target_y, hi_y + ov.target_y,
        )
        sxy = self._sum_xy.grid_sums(lo_x, hi_x, lo_y, hi_y)

        a = n * sxy - sx * sy
        var_x = n * sxx - sx * sx
        var_y = n * syy - sy * sy
        # Constant windows cancel to rounding noise rather than exact zero.
        flat = ((var_x <= _DEGENERATE * np.abs(n * sxx))
                | (var_y <= _DEGENERATE * np.abs(n * syy)))
        var_x[flat] = 0.0
        var_y[flat] = 0.0
        a[flat] = 0.0
        return a, var_x, var_y

    def _layout(self, values: np.ndarray) -> np.ndarray:
        """Place overlap-shaped *values* at the overlap's position in Y."""
        out = np.full(self._y.shape, np.nan)
        out[self._overlap.target_slices()] = values
        return out

    def r(self, radius_x: int, radius_y: Optional[int] = None) -> np.ndarray:
        """Pearson coefficient per block, in ``[-1, 1]``.

        Returns
        -------
        np.ndarray
            float64 array of Y's shape. NaN outside the overlap, 0 where a
            window has no variance in X or Y.
        """
        if self._overlap.empty:
            resolve_radii(radius_x, radius_y)
            return np.full(self._y.shape, np.nan)
        a, var_x, var_y = self._terms(radius_x, radius_y)
        b = np.sqrt(var_x) * np.sqrt(var_y)
        r = np.zeros_like(a)
        np.divide(a, b, out=r, where=b > 0)
        np.clip(r, -1.0, 1.0, out=r)
        return self._layout(r)

    def r_signed_square(
        self, radius_x: int, radius_y: Optional[int] = None
    ) -> np.ndarray:
        """Signed squared coefficient ``sign(r) * r^2``.

        Cheaper than :meth:`r` since no square roots are taken. Same layout
        and edge cases.
        """
        if self._overlap.empty:
            resolve_radii(radius_x, radius_y)
            return np.full(self._y.shape, np.nan)
        a, var_x, var_y = self._terms(radius_x, radius_y)
        b = var_x * var_y
        r2 = np.zeros_like(a)
        np.divide(a * np.abs(a), b, out=r2, where=b > 0)
        np.clip(r2, -1.0, 1.0, out=r2)
        return self._layout(r2)
