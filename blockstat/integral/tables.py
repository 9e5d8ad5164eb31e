# -*- coding: utf-8 -*-
"""
Summed-Area Tables - Integral images with explicit accumulator precision.

An integral image ``T`` of a ``(height, width)`` source has shape
``(height + 1, width + 1)``; ``T[y, x]`` holds the sum of all source values
in ``[0, x) x [0, y)`` and row 0 / column 0 are a zero sentinel border.
Construction is two linear passes (row prefix sums, then column prefix sums
over the row sums), after which any rectangular block sum is answered in
O(1) from four table entries.

Blocks are addressed in pixel coordinates as ``(x_min, y_min, x_max,
y_max)`` with *exclusive* lower and *inclusive* upper bounds, each in
``[-1, dim - 1]``, so the block covering the full image is
``(-1, -1, width - 1, height - 1)``.

The accumulator width is part of each variant's type rather than a runtime
choice:

- ``IntIntegralImage``: int32, for 8/16-bit sources small enough that the
  total cannot overflow (checked at construction).
- ``LongIntegralImage``: int64, for any integer source.
- ``DoubleIntegralImage``: float64, for floating point sources.
- ``LongRGBIntegralImage``: three int64 accumulators, one per channel of
  an RGB source.

Tables are read-only after construction and may be queried concurrently.

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
from abc import ABC, abstractmethod
from typing import Optional, Union

# Third-party
import numpy as np

# blockstat internal
from blockstat.exceptions import ValidationError
from blockstat.pixels import pixel_type_of, unpack_rgb
from blockstat.processing._validation import as_image_2d
from blockstat.vocabulary import PixelType

logger = logging.getLogger(__name__)

Coordinate = Union[int, np.ndarray]


def prefix_sums(image: np.ndarray, accumulator: type) -> np.ndarray:
    """Build a zero-bordered summed-area table in *accumulator* precision.

    Parameters
    ----------
    image : np.ndarray
        ``(rows, cols)`` or ``(rows, cols, channels)`` source.
    accumulator : type
        numpy dtype of the table.

    Returns
    -------
    np.ndarray
        Table of shape ``(rows + 1, cols + 1, ...)``.
    """
    rows, cols = image.shape[:2]
    table = np.zeros((rows + 1, cols + 1) + image.shape[2:], dtype=accumulator)
    row_sums = np.cumsum(image, axis=1, dtype=accumulator)
    np.cumsum(row_sums, axis=0, dtype=accumulator, out=table[1:, 1:])
    return table


def _scalar(value):
    """Unwrap 0-d results to Python scalars."""
    return value.item() if np.ndim(value) == 0 else value


class IntegralImage(ABC):
    """Abstract summed-area table.

    Parameters
    ----------
    source : np.ndarray
        2D source image, or a flat 1D buffer together with ``width`` and
        ``height``.
    width, height : int, optional
        Declared dimensions. Required for flat buffers, checked against
        2D arrays when given.

    Raises
    ------
    ValidationError
        If the buffer does not match the declared dimensions or the source
        type is not supported by the variant's accumulator.
    """

    #: numpy dtype of the accumulator.
    accumulator: type = np.float64

    def __init__(
        self,
        source: np.ndarray,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> None:
        image = self._prepare(source, width, height)
        self._height, self._width = image.shape[:2]
        self._table = prefix_sums(image, self.accumulator)
        self._table.flags.writeable = False
        logger.debug(
            "Built %s (%dx%d, %s accumulator)",
            type(self).__name__, self._width, self._height,
            np.dtype(self.accumulator).name,
        )

    def _prepare(
        self,
        source: np.ndarray,
        width: Optional[int],
        height: Optional[int],
    ) -> np.ndarray:
        image = as_image_2d(source, width, height)
        self._check_source(image)
        return image

    @abstractmethod
    def _check_source(self, image: np.ndarray) -> None:
        """Raise ``ValidationError`` if *image* does not fit the accumulator."""
        ...

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def table(self) -> np.ndarray:
        """Read-only ``(height + 1, width + 1)`` accumulator array."""
        return self._table

    def _check_bounds(self, x_min, y_min, x_max, y_max) -> None:
        for name, value, dim in (
            ('x_min', x_min, self._width), ('x_max', x_max, self._width),
            ('y_min', y_min, self._height), ('y_max', y_max, self._height),
        ):
            arr = np.asarray(value)
            if arr.size and (arr.min() < -1 or arr.max() > dim - 1):
                raise ValidationError(
                    f"{name} must lie in [-1, {dim - 1}], got {value!r}"
                )

    def _block(self, x_min, y_min, x_max, y_max) -> np.ndarray:
        self._check_bounds(x_min, y_min, x_max, y_max)
        t = self._table
        x0 = np.asarray(x_min) + 1
        y0 = np.asarray(y_min) + 1
        x1 = np.asarray(x_max) + 1
        y1 = np.asarray(y_max) + 1
        # Each bracket is a non-negative partial sum, so integer
        # accumulators cannot overflow in intermediate results.
        return (t[y1, x1] - t[y0, x1]) - (t[y1, x0] - t[y0, x0])

    def get_sum(
        self,
        x_min: Coordinate,
        y_min: Coordinate,
        x_max: Coordinate,
        y_max: Coordinate,
    ):
        """Sum of the source over ``(x_min, x_max] x (y_min, y_max]``.

        Accepts scalars or broadcastable integer arrays. Scalar queries
        return a Python scalar.
        """
        return _scalar(self._block(x_min, y_min, x_max, y_max))

    def get_scaled_sum(
        self,
        x_min: Coordinate,
        y_min: Coordinate,
        x_max: Coordinate,
        y_max: Coordinate,
        scale,
    ):
        """Block sum multiplied by *scale*, rounded half up to an integer.

        With ``scale = 1 / area`` this is the block mean in the source's
        integer representation.
        """
        value = self._block(x_min, y_min, x_max, y_max) * np.asarray(scale)
        return _scalar(np.floor(value + 0.5).astype(np.int64))

    def grid_sums(
        self,
        x_min: np.ndarray,
        x_max: np.ndarray,
        y_min: np.ndarray,
        y_max: np.ndarray,
    ) -> np.ndarray:
        """Block sums for every combination of column and row bounds.

        Parameters
        ----------
        x_min, x_max : np.ndarray
            Per-output-column bounds, shape ``(cols,)``.
        y_min, y_max : np.ndarray
            Per-output-row bounds, shape ``(rows,)``.

        Returns
        -------
        np.ndarray
            ``(rows, cols)`` block sums (``(rows, cols, 3)`` for RGB).
        """
        return self._block(
            np.asarray(x_min)[np.newaxis, :],
            np.asarray(y_min)[:, np.newaxis],
            np.asarray(x_max)[np.newaxis, :],
            np.asarray(y_max)[:, np.newaxis],
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(width={self._width}, height={self._height})"


class IntIntegralImage(IntegralImage):
    """Summed-area table with a 32-bit integer accumulator.

    Accepts ``uint8`` and ``uint16`` sources whose total sum fits in int32.
    """

    accumulator = np.int32

    def _check_source(self, image: np.ndarray) -> None:
        if image.dtype not in (np.uint8, np.uint16):
            raise ValidationError(
                f"IntIntegralImage requires a uint8 or uint16 source, "
                f"got {image.dtype}"
            )
        worst = int(image.max()) * image.size
        if worst > np.iinfo(np.int32).max:
            raise ValidationError(
                f"Source of {image.size} pixels with maximum {int(image.max())} "
                f"may overflow a 32-bit accumulator; use LongIntegralImage"
            )


class LongIntegralImage(IntegralImage):
    """Summed-area table with a 64-bit integer accumulator.

    Accepts any integer source (8/16/32-bit, signed or unsigned).
    """

    accumulator = np.int64

    def _check_source(self, image: np.ndarray) -> None:
        if not np.issubdtype(image.dtype, np.integer):
            raise ValidationError(
                f"LongIntegralImage requires an integer source, got {image.dtype}"
            )
        if image.dtype == np.uint64 and image.max() > np.iinfo(np.int64).max:
            raise ValidationError("uint64 source exceeds the int64 accumulator")
        peak = max(abs(int(image.min())), abs(int(image.max())))
        if peak * image.size > np.iinfo(np.int64).max:
            raise ValidationError(
                "Source may overflow a 64-bit accumulator; use DoubleIntegralImage"
            )


class DoubleIntegralImage(IntegralImage):
    """Summed-area table with a float64 accumulator.

    Accepts any real-valued source. ``get_scaled_sum`` returns floats
    (no rounding) since the source is not integral.
    """

    accumulator = np.float64

    def _check_source(self, image: np.ndarray) -> None:
        if not (
            np.issubdtype(image.dtype, np.floating)
            or np.issubdtype(image.dtype, np.integer)
        ):
            raise ValidationError(
                f"DoubleIntegralImage requires a real-valued source, "
                f"got {image.dtype}"
            )

    def get_scaled_sum(self, x_min, y_min, x_max, y_max, scale):
        """Block sum multiplied by *scale* as float64."""
        return _scalar(self._block(x_min, y_min, x_max, y_max) * np.asarray(scale))


class LongRGBIntegralImage(IntegralImage):
    """Summed-area table over the three channels of an RGB source.

    The table has shape ``(height + 1, width + 1, 3)``: one int64
    accumulator per red, green and blue channel.

    Parameters
    ----------
    source : np.ndarray
        ``(rows, cols, 3)`` ``uint8`` array, a 2D array of packed
        ``0xRRGGBB`` integers, or a flat packed buffer together with
        ``width`` and ``height``.
    """

    accumulator = np.int64

    def _prepare(self, source, width, height) -> np.ndarray:
        source = np.asarray(source)
        if source.ndim == 3:
            if pixel_type_of(source) is not PixelType.RGB:
                raise ValidationError(
                    f"Expected (rows, cols, 3) uint8 RGB source, "
                    f"got shape {source.shape}, dtype {source.dtype}"
                )
            if (width is not None and width != source.shape[1]) or (
                height is not None and height != source.shape[0]
            ):
                raise ValidationError(
                    f"source shape {source.shape[:2]} does not match "
                    f"width={width}, height={height}"
                )
            return source
        packed = as_image_2d(source, width, height)
        self._check_source(packed)
        return unpack_rgb(packed)

    def _check_source(self, image: np.ndarray) -> None:
        if not np.issubdtype(image.dtype, np.integer):
            raise ValidationError(
                f"Packed RGB source must be integer, got {image.dtype}"
            )

    def get_sum(self, x_min, y_min, x_max, y_max) -> np.ndarray:
        """Per-channel block sums, shape ``(..., 3)``."""
        return self._block(x_min, y_min, x_max, y_max)

    def get_channel_means(self, x_min, y_min, x_max, y_max, scale) -> np.ndarray:
        """Per-channel scaled sums rounded and clamped to ``0..255``."""
        value = self._block(x_min, y_min, x_max, y_max) * np.asarray(scale)[..., np.newaxis]
        return np.clip(np.floor(value + 0.5), 0, 255).astype(np.uint8)

    def get_scaled_sum(self, x_min, y_min, x_max, y_max, scale):
        """Per-channel scaled sums packed into ``0xRRGGBB``."""
        c = self.get_channel_means(
            x_min, y_min, x_max, y_max, scale
        ).astype(np.int64)
        return _scalar((c[..., 0] << 16) | (c[..., 1] << 8) | c[..., 2])


def create_integral_image(source: np.ndarray) -> IntegralImage:
    """Create the summed-area table variant matching *source*'s pixel type.

    RGB sources get a ``LongRGBIntegralImage``, integer sources a
    ``LongIntegralImage`` and floating point sources a
    ``DoubleIntegralImage``.

    Raises
    ------
    ValidationError
        For unsupported representations.
    """
    source = np.asarray(source)
    if source.ndim == 3:
        return LongRGBIntegralImage(source)
    if source.ndim == 2 and np.issubdtype(source.dtype, np.integer):
        return LongIntegralImage(source)
    if source.ndim == 2 and np.issubdtype(source.dtype, np.floating):
        return DoubleIntegralImage(source)
    raise ValidationError(
        f"No integral image variant for shape {source.shape}, "
        f"dtype {source.dtype}"
    )
