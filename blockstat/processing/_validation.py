# -*- coding: utf-8 -*-
"""
Validation Helpers - Shared buffer and parameter checks.

Reusable validation functions called by the summed-area tables, the
statistics engines, the CLAHE engines and the processors so that contract
violations are reported consistently, and immediately, as
``ValidationError``.

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
from typing import Optional, Tuple

# Third-party
import numpy as np

# blockstat internal
from blockstat.exceptions import ValidationError


def validate_radius(radius: int, name: str = 'radius') -> None:
    """Validate that a block radius is a non-negative integer.

    Raises
    ------
    ValidationError
        If ``radius`` is not an integer or is negative.
    """
    if isinstance(radius, bool) or not isinstance(radius, (int, np.integer)):
        raise ValidationError(
            f"{name} must be an integer, got {type(radius).__name__}"
        )
    if radius < 0:
        raise ValidationError(f"{name} must be >= 0, got {radius}")


def resolve_radii(
    radius_x: int, radius_y: Optional[int] = None
) -> Tuple[int, int]:
    """Validate block radii, defaulting ``radius_y`` to ``radius_x``."""
    if radius_y is None:
        radius_y = radius_x
    validate_radius(radius_x, 'radius_x')
    validate_radius(radius_y, 'radius_y')
    return int(radius_x), int(radius_y)


def validate_image_2d(image: np.ndarray, name: str = 'image') -> None:
    """Validate that *image* is a non-empty 2D numpy array.

    Raises
    ------
    ValidationError
        If *image* is not an ndarray, is not 2D, or has a zero-length axis.
    """
    if not isinstance(image, np.ndarray):
        raise ValidationError(
            f"{name} must be a numpy array, got {type(image).__name__}"
        )
    if image.ndim != 2:
        raise ValidationError(
            f"Expected 2D {name}, got shape {image.shape}"
        )
    if image.size == 0:
        raise ValidationError(f"{name} must not be empty, got shape {image.shape}")


def as_image_2d(
    source: np.ndarray,
    width: Optional[int] = None,
    height: Optional[int] = None,
    name: str = 'source',
) -> np.ndarray:
    """Return *source* as a 2D ``(height, width)`` array.

    A flat 1D buffer is reshaped to the declared ``width`` and ``height``;
    a 2D array must match them when they are given.

    Raises
    ------
    ValidationError
        If the buffer size does not match the declared dimensions, or a
        flat buffer is passed without both of them.
    """
    source = np.asarray(source)
    if source.ndim == 1:
        if width is None or height is None:
            raise ValidationError(
                f"A flat {name} buffer requires explicit width and height"
            )
        if width <= 0 or height <= 0 or source.size != width * height:
            raise ValidationError(
                f"{name} has {source.size} elements, which does not match "
                f"width={width} x height={height}"
            )
        return source.reshape(height, width)

    validate_image_2d(source, name)
    rows, cols = source.shape
    if (width is not None and width != cols) or (
        height is not None and height != rows
    ):
        raise ValidationError(
            f"{name} shape {source.shape} does not match "
            f"width={width}, height={height}"
        )
    return source


def validate_same_shape(a: np.ndarray, b: np.ndarray, names: str) -> None:
    """Raise ``ValidationError`` unless *a* and *b* have the same 2D shape."""
    if a.shape[:2] != b.shape[:2]:
        raise ValidationError(
            f"Image sizes do not match ({names}): {a.shape[:2]} vs {b.shape[:2]}"
        )


def resolve_roi(
    roi: Optional[Tuple[int, int, int, int]], shape: Tuple[int, ...]
) -> Tuple[int, int, int, int]:
    """Clip a region of interest ``(x, y, width, height)`` to the image.

    Returns
    -------
    Tuple[int, int, int, int]
        ``(x_min, y_min, x_max, y_max)`` with exclusive upper bounds.

    Raises
    ------
    ValidationError
        If the ROI is malformed or does not intersect the image.
    """
    rows, cols = shape[:2]
    if roi is None:
        return 0, 0, cols, rows
    if len(roi) != 4:
        raise ValidationError(f"roi must be (x, y, width, height), got {roi!r}")
    x, y, w, h = (int(v) for v in roi)
    if w <= 0 or h <= 0:
        raise ValidationError(f"roi must have positive size, got {roi!r}")
    x_min, y_min = max(0, x), max(0, y)
    x_max, y_max = min(cols, x + w), min(rows, y + h)
    if x_min >= x_max or y_min >= y_max:
        raise ValidationError(
            f"roi {roi!r} does not intersect image of shape {shape[:2]}"
        )
    return x_min, y_min, x_max, y_max


def validate_byte_image(image: np.ndarray, name: str = 'src') -> None:
    """Raise ``ValidationError`` unless *image* is a non-empty 2D uint8 array."""
    validate_image_2d(image, name)
    if image.dtype != np.uint8:
        raise ValidationError(
            f"Expected a uint8 {name} image, got {image.dtype}"
        )
